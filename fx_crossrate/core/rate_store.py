"""Immutable rate tables and the store that publishes them to readers."""

from __future__ import annotations

import threading
from decimal import Decimal
from types import MappingProxyType
from typing import Iterator, Mapping

from fx_crossrate.core.models import ConversionPath, CurrencyPair, DirectRate
from fx_crossrate.exceptions import RateNotFoundError
from fx_crossrate.utils.logger import get_logger

LOGGER = get_logger(__name__)


class RateTable(Mapping[CurrencyPair, Decimal]):
    """Read-only mapping of currency pairs to rates.

    ``routes`` records the conversion path chosen for each derived pair. The
    table copies its inputs and exposes them through read-only proxies, so a
    published table never changes.
    """

    __slots__ = ("_rates", "_routes", "_currencies")

    def __init__(
        self,
        rates: Mapping[CurrencyPair, Decimal] | None = None,
        routes: Mapping[CurrencyPair, ConversionPath] | None = None,
    ) -> None:
        self._rates: Mapping[CurrencyPair, Decimal] = MappingProxyType(dict(rates or {}))
        self._routes: Mapping[CurrencyPair, ConversionPath] = MappingProxyType(
            {pair: path for pair, path in (routes or {}).items() if pair in self._rates}
        )
        currencies: set[str] = set()
        for pair in self._rates:
            currencies.update(pair.as_tuple())
        self._currencies = frozenset(currencies)

    def __getitem__(self, pair: CurrencyPair) -> Decimal:
        return self._rates[pair]

    def __iter__(self) -> Iterator[CurrencyPair]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"RateTable(direct={len(self) - len(self._routes)}, derived={len(self._routes)})"

    @property
    def currencies(self) -> frozenset[str]:
        return self._currencies

    def is_derived(self, pair: CurrencyPair) -> bool:
        return pair in self._routes

    def route(self, pair: CurrencyPair) -> ConversionPath | None:
        """Return the path behind ``pair``'s rate, or ``None`` when absent."""

        if pair in self._routes:
            return self._routes[pair]
        if pair in self._rates:
            return ConversionPath.single(pair)
        return None

    def direct_rates(self) -> list[DirectRate]:
        """Return the configured (non-derived) rates in their original order."""

        return [
            DirectRate(pair, rate) for pair, rate in self._rates.items() if pair not in self._routes
        ]

    def as_dict(self) -> dict[tuple[str, str], Decimal]:
        return {pair.as_tuple(): rate for pair, rate in self._rates.items()}


class RateStore:
    """Holds the active :class:`RateTable` behind a single reference.

    Readers grab the reference once per lookup, so a concurrent
    :meth:`replace` is observed either entirely or not at all. Writers are
    serialised by a lock; readers never take it.
    """

    def __init__(self, table: RateTable | None = None) -> None:
        self._table: RateTable | None = table
        self._write_lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return self._table is not None

    def snapshot(self) -> RateTable | None:
        """Return the table visible right now (``None`` once cleared)."""

        return self._table

    def replace(self, table: RateTable) -> RateTable | None:
        """Publish ``table`` and return the table it replaced."""

        if not isinstance(table, RateTable):
            raise TypeError(f"Expected a RateTable, got {type(table).__name__}")
        with self._write_lock:
            previous, self._table = self._table, table
        LOGGER.debug("Published %r", table)
        return previous

    def clear(self) -> None:
        with self._write_lock:
            self._table = None

    def lookup(self, pair: CurrencyPair, *, allow_identity: bool = False) -> Decimal:
        """Return the rate for ``pair`` from the active table.

        With ``allow_identity`` a same-currency pair resolves to ``1`` when the
        currency appears in the table and no explicit rate was configured.
        """

        table = self._table
        if table is None:
            raise RateNotFoundError(pair.base, pair.quote, "no configuration loaded")
        rate = table.get(pair)
        if rate is not None:
            return rate
        if allow_identity and pair.is_identity and pair.base in table.currencies:
            return Decimal(1)
        raise RateNotFoundError(pair.base, pair.quote)


__all__ = ["RateStore", "RateTable"]
