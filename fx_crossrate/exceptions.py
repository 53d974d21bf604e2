"""Exception hierarchy raised by fx_crossrate."""

from __future__ import annotations


class FxCrossrateError(Exception):
    """Base class for every error raised by the package."""


class CurrencyValidationError(FxCrossrateError, ValueError):
    """A currency code, rate or amount failed validation."""


class RateNotFoundError(FxCrossrateError, LookupError):
    """No direct or derived rate exists for the requested pair."""

    def __init__(self, from_currency: str, to_currency: str, reason: str | None = None) -> None:
        self.from_currency = from_currency
        self.to_currency = to_currency
        message = f"No conversion rate found for {from_currency} to {to_currency}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


__all__ = ["FxCrossrateError", "CurrencyValidationError", "RateNotFoundError"]
