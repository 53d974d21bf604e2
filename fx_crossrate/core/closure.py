"""Derive rates for every reachable currency pair from a set of direct rates."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

from fx_crossrate.core.models import ConversionPath, CurrencyPair, DirectRate, RateTuple
from fx_crossrate.core.path_search import find_paths, merge_paths
from fx_crossrate.core.rate_store import RateTable
from fx_crossrate.utils.logger import get_logger

LOGGER = get_logger(__name__)

CandidatePaths = dict[CurrencyPair, dict[ConversionPath, None]]


def deduplicate_rates(rates: Iterable[DirectRate | RateTuple]) -> dict[CurrencyPair, Decimal]:
    """Validate ``rates`` and keep the first rate seen for each pair."""

    resolved: dict[CurrencyPair, Decimal] = {}
    for item in rates:
        direct = DirectRate.coerce(item)
        existing = resolved.get(direct.pair)
        if existing is None:
            resolved[direct.pair] = direct.rate
        elif existing != direct.rate:
            LOGGER.warning(
                "Ignoring duplicate rate %s for %s; keeping first rate %s",
                direct.rate,
                direct.pair,
                existing,
            )
    return resolved


class ClosureBuilder:
    """Builds a :class:`RateTable` holding direct and derived rates.

    Derived pairs use the conversion path with the fewest hops. Among paths of
    equal length the first one discovered wins; discovery order follows the
    order in which currencies first appear in the input, so the choice is
    stable for a given input but says nothing about which rate is better.
    """

    def __init__(self, rates: Iterable[DirectRate | RateTuple]) -> None:
        self.direct: dict[CurrencyPair, Decimal] = deduplicate_rates(rates)

    def unresolved_pairs(self) -> list[CurrencyPair]:
        # Only currencies with an outgoing rate can start a chain and only
        # currencies with an incoming rate can end one.
        bases = dict.fromkeys(pair.base for pair in self.direct)
        quotes = dict.fromkeys(pair.quote for pair in self.direct)
        pending: list[CurrencyPair] = []
        for base in bases:
            for quote in quotes:
                if base == quote:
                    continue
                pair = CurrencyPair(base, quote)
                if pair not in self.direct:
                    pending.append(pair)
        return pending

    def discover_paths(self, pending: Iterable[CurrencyPair] | None = None) -> CandidatePaths:
        """Sweep ``pending`` pairs until no sweep finds a new path.

        Returns the candidate paths of every pair that has at least one.
        """

        targets = list(self.unresolved_pairs() if pending is None else pending)
        candidates: CandidatePaths = {
            pair: {ConversionPath.single(pair): None} for pair in self.direct
        }
        sweeps = 0
        while True:
            sweeps += 1
            added = 0
            for pair in targets:
                found = find_paths(pair, self.direct, list(candidates))
                added += merge_paths(candidates, pair, found)
            if not added:
                break
        LOGGER.debug("Path discovery converged after %s sweeps", sweeps)
        return {pair: candidates[pair] for pair in targets if pair in candidates}

    def resolve(
        self, candidates: Mapping[CurrencyPair, Iterable[ConversionPath]]
    ) -> tuple[dict[CurrencyPair, Decimal], dict[CurrencyPair, ConversionPath]]:
        """Fold candidate paths into rates.

        A pair whose shortest path uses a hop that is not resolved yet waits
        for a later pass. When a whole pass makes no progress the first
        waiting pair falls back to its shortest path whose hops are all known.
        """

        rates: dict[CurrencyPair, Decimal] = dict(self.direct)
        routes: dict[CurrencyPair, ConversionPath] = {}
        pending = {
            pair: sorted(paths, key=len)
            for pair, paths in candidates.items()
            if pair not in rates
        }
        while pending:
            progressed = False
            for pair in list(pending):
                shortest = pending[pair][0]
                rate = compose_rate(shortest, rates)
                if rate is None:
                    continue
                rates[pair] = rate
                routes[pair] = shortest
                del pending[pair]
                progressed = True
            if not progressed and not self._resolve_first_available(pending, rates, routes):
                break
        if pending:
            LOGGER.debug("Leaving %s pairs without a rate", len(pending))
        return rates, routes

    @staticmethod
    def _resolve_first_available(
        pending: dict[CurrencyPair, list[ConversionPath]],
        rates: dict[CurrencyPair, Decimal],
        routes: dict[CurrencyPair, ConversionPath],
    ) -> bool:
        for pair, paths in pending.items():
            for path in paths:
                rate = compose_rate(path, rates)
                if rate is not None:
                    rates[pair] = rate
                    routes[pair] = path
                    del pending[pair]
                    return True
        return False

    def build(self) -> RateTable:
        rates, routes = self.resolve(self.discover_paths())
        LOGGER.debug(
            "Built rate table with %s direct and %s derived rates",
            len(self.direct),
            len(routes),
        )
        return RateTable(rates, routes)


def compose_rate(path: ConversionPath, rates: Mapping[CurrencyPair, Decimal]) -> Decimal | None:
    """Multiply the hop rates of ``path`` in order; ``None`` if a hop is unknown."""

    rate = Decimal(1)
    for hop in path:
        hop_rate = rates.get(hop)
        if hop_rate is None:
            return None
        rate *= hop_rate
    return rate


def build_rate_table(rates: Iterable[DirectRate | RateTuple]) -> RateTable:
    """Return the full rate table derived from ``rates``."""

    return ClosureBuilder(rates).build()


__all__ = [
    "CandidatePaths",
    "ClosureBuilder",
    "build_rate_table",
    "compose_rate",
    "deduplicate_rates",
]
