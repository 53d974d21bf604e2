"""Public interface for the fx_crossrate package."""

from __future__ import annotations

from decimal import Decimal
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Dict, Iterable, Tuple

from fx_crossrate.core.closure import build_rate_table
from fx_crossrate.core.models import (
    ConversionPath,
    CurrencyPair,
    DirectRate,
    Numeric,
    RateTuple,
    to_decimal,
)
from fx_crossrate.core.rate_store import RateStore, RateTable
from fx_crossrate.db.configuration_store import PersistenceResult, RateConfigurationStore
from fx_crossrate.exceptions import CurrencyValidationError, FxCrossrateError, RateNotFoundError
from fx_crossrate.ingestion.rates_csv import DirectRateCSVParser
from fx_crossrate.utils.logger import get_logger

__all__ = [
    "__version__",
    "ConversionPath",
    "CurrencyConverter",
    "CurrencyPair",
    "CurrencyValidationError",
    "DirectRate",
    "FxCrossrateError",
    "RateConfigurationStore",
    "RateNotFoundError",
    "RateTable",
]

try:
    __version__ = importlib_metadata.version("fx-crossrate")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"

LOGGER = get_logger(__name__)


class CurrencyConverter:
    """Converts amounts using direct rates and every rate derivable from them.

    ``update_configuration`` builds the full rate table before publishing it,
    so conversions running on other threads keep using the previous table
    until the new one is complete.
    """

    __slots__ = ("identity_conversion", "_store")

    # Provide direct access to the package version as a class attribute.
    __version__ = __version__

    def __init__(
        self,
        rates: Iterable[DirectRate | RateTuple] | None = None,
        *,
        identity_conversion: bool = True,
    ) -> None:
        """Create a converter, optionally configured with ``rates``.

        ``identity_conversion`` lets ``convert("USD", "USD", x)`` return ``x``
        for any currency present in the active table. Turn it off to require an
        explicit same-currency rate.
        """

        self.identity_conversion = identity_conversion
        self._store = RateStore()
        if rates is not None:
            self.update_configuration(rates)

    @classmethod
    def from_csv(cls, csv_path: str | Path, **kwargs) -> "CurrencyConverter":
        """Build a converter from a ``From,To,Rate`` CSV file."""

        return cls(DirectRateCSVParser().parse(csv_path), **kwargs)

    @classmethod
    def from_store(cls, store: RateConfigurationStore, **kwargs) -> "CurrencyConverter":
        """Build a converter from a previously saved configuration."""

        return cls(store.load(), **kwargs)

    @property
    def is_configured(self) -> bool:
        return self._store.is_configured

    def clear_configuration(self) -> None:
        """Drop the active rate table; conversions fail until reconfigured."""

        self._store.clear()
        LOGGER.info("Cleared currency conversion configuration")

    def update_configuration(self, rates: Iterable[DirectRate | RateTuple]) -> RateTable:
        """Validate ``rates``, derive the closure and publish it atomically."""

        if rates is None or isinstance(rates, (str, bytes)):
            raise CurrencyValidationError("conversion rates must be an iterable of (from, to, rate)")
        table = build_rate_table(rates)
        self._store.replace(table)
        derived = sum(1 for pair in table if table.is_derived(pair))
        LOGGER.info(
            "Loaded %s conversion rates (%s derived) across %s currencies",
            len(table),
            derived,
            len(table.currencies),
        )
        return table

    def save_configuration(self, store: RateConfigurationStore) -> PersistenceResult:
        """Persist the direct rates of the active table into ``store``."""

        table = self._store.snapshot()
        if table is None:
            raise FxCrossrateError("No configuration loaded; nothing to save")
        return store.save(table.direct_rates())

    def rate(self, from_currency: str, to_currency: str) -> Decimal:
        """Return the direct or derived rate for ``from_currency`` => ``to_currency``."""

        pair = CurrencyPair(from_currency, to_currency)
        return self._store.lookup(pair, allow_identity=self.identity_conversion)

    def convert(self, from_currency: str, to_currency: str, amount: Numeric) -> Decimal:
        """Return ``amount`` expressed in ``to_currency``."""

        pair = CurrencyPair(from_currency, to_currency)
        value = to_decimal(amount, label="amount")
        return value * self._store.lookup(pair, allow_identity=self.identity_conversion)

    def route(self, from_currency: str, to_currency: str) -> ConversionPath:
        """Return the hops behind the rate used for a conversion."""

        pair = CurrencyPair(from_currency, to_currency)
        table = self._store.snapshot()
        if table is None:
            raise RateNotFoundError(pair.base, pair.quote, "no configuration loaded")
        path = table.route(pair)
        if path is None:
            raise RateNotFoundError(pair.base, pair.quote)
        return path

    def conversion_rate_map(self) -> Dict[Tuple[str, str], Decimal]:
        """Return a copy of the active table keyed by ``(from, to)`` codes."""

        table = self._store.snapshot()
        if table is None:
            return {}
        return table.as_dict()
