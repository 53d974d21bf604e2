"""Value types shared by the closure builder, path search and rate store."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterator, Tuple, Union, overload

from fx_crossrate.exceptions import CurrencyValidationError

CURRENCY_CODE_LENGTH = 3

Numeric = Union[Decimal, int, float, str]
RateTuple = Tuple[str, str, Numeric]


def normalise_currency_code(code: str | None) -> str:
    """Return ``code`` in upper case after checking it is a three letter code."""

    if code is None or code == "":
        raise CurrencyValidationError("Currency code must not be empty")
    if not isinstance(code, str):
        raise CurrencyValidationError(
            f"Currency code must be a string, got {type(code).__name__}"
        )
    if len(code) != CURRENCY_CODE_LENGTH:
        raise CurrencyValidationError(
            f"Currency codes must be {CURRENCY_CODE_LENGTH} characters long. {code!r} is not valid."
        )
    return code.upper()


def to_decimal(value: Numeric, *, label: str = "value") -> Decimal:
    """Coerce ``value`` into a finite :class:`Decimal`.

    Floats go through ``str`` first so ``0.58`` becomes ``Decimal("0.58")``
    rather than its binary expansion.
    """

    if isinstance(value, bool) or value is None:
        raise CurrencyValidationError(f"{label} must be numeric, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise CurrencyValidationError(f"{label} must be numeric, got {value!r}") from exc
    else:
        raise CurrencyValidationError(f"{label} must be numeric, got {type(value).__name__}")
    if not result.is_finite():
        raise CurrencyValidationError(f"{label} must be finite, got {value!r}")
    return result


def to_positive_rate(value: Numeric) -> Decimal:
    rate = to_decimal(value, label="rate")
    if rate <= 0:
        raise CurrencyValidationError(f"rate must be positive, got {value!r}")
    return rate


@dataclass(frozen=True, slots=True)
class CurrencyPair:
    """Ordered ``base => quote`` pair used as the key of every rate lookup."""

    base: str
    quote: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", normalise_currency_code(self.base))
        object.__setattr__(self, "quote", normalise_currency_code(self.quote))

    @property
    def is_identity(self) -> bool:
        return self.base == self.quote

    def as_tuple(self) -> tuple[str, str]:
        return (self.base, self.quote)

    def __str__(self) -> str:
        return f"{self.base}=>{self.quote}"


@dataclass(frozen=True, slots=True)
class ConversionPath:
    """Chain of hops where each hop's quote is the next hop's base."""

    hops: tuple[CurrencyPair, ...] = ()

    def __post_init__(self) -> None:
        hops = tuple(self.hops)
        for left, right in zip(hops, hops[1:]):
            if left.quote != right.base:
                raise ValueError(f"Hops {left} and {right} do not chain")
        if len(set(hops)) != len(hops):
            raise ValueError("A conversion path must not repeat a hop")
        object.__setattr__(self, "hops", hops)

    @classmethod
    def single(cls, pair: CurrencyPair) -> "ConversionPath":
        return cls((pair,))

    @property
    def base(self) -> str:
        if not self.hops:
            raise ValueError("An empty conversion path has no base currency")
        return self.hops[0].base

    @property
    def quote(self) -> str:
        if not self.hops:
            raise ValueError("An empty conversion path has no quote currency")
        return self.hops[-1].quote

    @property
    def pair(self) -> CurrencyPair:
        """The overall pair this path resolves."""

        return CurrencyPair(self.base, self.quote)

    def resolves(self, pair: CurrencyPair) -> bool:
        return bool(self.hops) and self.base == pair.base and self.quote == pair.quote

    def prepend(self, hop: CurrencyPair) -> "ConversionPath":
        return ConversionPath((hop, *self.hops))

    def __len__(self) -> int:
        return len(self.hops)

    def __iter__(self) -> Iterator[CurrencyPair]:
        return iter(self.hops)

    def __contains__(self, hop: object) -> bool:
        return hop in self.hops

    @overload
    def __getitem__(self, index: int) -> CurrencyPair: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[CurrencyPair, ...]: ...

    def __getitem__(self, index):
        return self.hops[index]

    def __str__(self) -> str:
        if not self.hops:
            return ""
        return "=>".join(hop.base for hop in self.hops) + "=>" + self.hops[-1].quote


@dataclass(frozen=True, slots=True)
class DirectRate:
    """A rate supplied explicitly by configuration."""

    pair: CurrencyPair
    rate: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "rate", to_positive_rate(self.rate))

    @classmethod
    def of(cls, base: str, quote: str, rate: Numeric) -> "DirectRate":
        return cls(CurrencyPair(base, quote), rate)  # type: ignore[arg-type]

    @classmethod
    def coerce(cls, item: "DirectRate | RateTuple") -> "DirectRate":
        """Accept either a ``DirectRate`` or a ``(base, quote, rate)`` tuple."""

        if isinstance(item, DirectRate):
            return item
        try:
            base, quote, rate = item
        except (TypeError, ValueError) as exc:
            raise CurrencyValidationError(
                f"Expected a (from, to, rate) tuple, got {item!r}"
            ) from exc
        return cls.of(base, quote, rate)

    def as_tuple(self) -> tuple[str, str, Decimal]:
        return (self.pair.base, self.pair.quote, self.rate)


__all__ = [
    "CURRENCY_CODE_LENGTH",
    "CurrencyPair",
    "ConversionPath",
    "DirectRate",
    "Numeric",
    "RateTuple",
    "normalise_currency_code",
    "to_decimal",
    "to_positive_rate",
]
