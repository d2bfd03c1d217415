"""Currency, FX rates, monetary amounts and the Decimal context.

All financial arithmetic uses MEASURA_DECIMAL_CONTEXT with prec=28,
ROUND_HALF_EVEN, and traps for InvalidOperation/DivisionByZero/Overflow.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import Protocol, final

from measura.core.errors import CurrencyConversionError
from measura.core.result import Err, Ok
from measura.core.types import FrozenMap

MEASURA_DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

_ZERO = Decimal("0")
_ONE = Decimal("1")

# ISO 4217 minor unit lookup (subset)
_ISO4217_MINOR_UNITS: dict[str, int] = {
    "USD": 2, "EUR": 2, "GBP": 2, "CHF": 2, "CAD": 2, "AUD": 2, "SEK": 2,
    "INR": 2, "BRL": 2, "CNY": 2, "TWD": 2, "HKD": 2, "SGD": 2,
    "JPY": 0, "KRW": 0,
    "BHD": 3, "KWD": 3, "OMR": 3,
}


@final
@dataclass(frozen=True, slots=True, order=True)
class Currency:
    """Three-letter uppercase ISO 4217 currency code."""

    code: str

    def __post_init__(self) -> None:
        if len(self.code) != 3 or not self.code.isalpha() or not self.code.isupper():
            raise TypeError(f"Currency requires 3 uppercase letters, got {self.code!r}")

    @staticmethod
    def parse(raw: str) -> Ok[Currency] | Err[str]:
        code = raw.strip().upper()
        if len(code) != 3 or not code.isalpha():
            return Err(f"Currency requires 3 letters, got '{raw}'")
        return Ok(Currency(code=code))

    @property
    def minor_units(self) -> int:
        """Decimal places of the minor unit. Defaults to 2."""
        return _ISO4217_MINOR_UNITS.get(self.code, 2)

    def __str__(self) -> str:
        return self.code


@final
@dataclass(frozen=True, slots=True, order=True)
class CurrencyPair:
    """Ordered FX currency pair, e.g. USD/KRW (base/counter)."""

    base: Currency
    counter: Currency

    def __post_init__(self) -> None:
        if self.base == self.counter:
            raise TypeError(
                f"CurrencyPair base and counter must differ, both are '{self.base}'"
            )

    @staticmethod
    def of(base: Currency | str, counter: Currency | str) -> CurrencyPair:
        b = base if isinstance(base, Currency) else Currency(base)
        c = counter if isinstance(counter, Currency) else Currency(counter)
        return CurrencyPair(base=b, counter=c)

    @staticmethod
    def parse(raw: str) -> Ok[CurrencyPair] | Err[str]:
        """Parse 'BASE/COUNTER' string into CurrencyPair."""
        parts = raw.split("/")
        if len(parts) != 2:
            return Err(f"CurrencyPair must be BASE/COUNTER, got '{raw}'")
        match Currency.parse(parts[0]):
            case Err(e):
                return Err(f"CurrencyPair.base: {e}")
            case Ok(b):
                pass
        match Currency.parse(parts[1]):
            case Err(e):
                return Err(f"CurrencyPair.counter: {e}")
            case Ok(c):
                pass
        if b == c:
            return Err(f"Base and counter must differ: {b}")
        return Ok(CurrencyPair(base=b, counter=c))

    def inverse(self) -> CurrencyPair:
        return CurrencyPair(base=self.counter, counter=self.base)

    def contains(self, currency: Currency) -> bool:
        return currency in (self.base, self.counter)

    def is_inverse(self, other: CurrencyPair) -> bool:
        return self.base == other.counter and self.counter == other.base

    def other(self, currency: Currency) -> Currency:
        """The currency of the pair that is not `currency`."""
        if currency == self.base:
            return self.counter
        if currency == self.counter:
            return self.base
        raise TypeError(f"Currency {currency} is not part of {self}")

    def __str__(self) -> str:
        return f"{self.base}/{self.counter}"


class FxRateProvider(Protocol):
    """Anything that can quote an FX rate between two currencies."""

    def fx_rate(self, base: Currency, counter: Currency) -> Decimal: ...


@final
@dataclass(frozen=True, slots=True)
class FxRate:
    """A single FX rate: 1 unit of pair.base = rate units of pair.counter."""

    pair: CurrencyPair
    rate: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.rate, Decimal) or not self.rate.is_finite() or self.rate <= 0:
            raise TypeError(f"FxRate.rate must be finite Decimal > 0, got {self.rate!r}")

    @staticmethod
    def of(base: Currency | str, counter: Currency | str, rate: Decimal) -> FxRate:
        return FxRate(pair=CurrencyPair.of(base, counter), rate=rate)

    def fx_rate(self, base: Currency, counter: Currency) -> Decimal:
        """Rate to convert base into counter, using this rate or its inverse."""
        if base == counter:
            return _ONE
        if base == self.pair.base and counter == self.pair.counter:
            return self.rate
        if base == self.pair.counter and counter == self.pair.base:
            with localcontext(MEASURA_DECIMAL_CONTEXT):
                return _ONE / self.rate
        raise CurrencyConversionError(
            f"No FX rate found for {base}/{counter} in rate {self.pair}"
        )

    def inverse(self) -> FxRate:
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            return FxRate(pair=self.pair.inverse(), rate=_ONE / self.rate)


@final
@dataclass(frozen=True, slots=True)
class CurrencyAmount:
    """Immutable amount with currency. All arithmetic uses MEASURA_DECIMAL_CONTEXT."""

    currency: Currency
    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise TypeError(f"CurrencyAmount.amount must be finite Decimal, got {self.amount!r}")

    @staticmethod
    def of(currency: Currency | str, amount: Decimal) -> CurrencyAmount:
        ccy = currency if isinstance(currency, Currency) else Currency(currency)
        return CurrencyAmount(currency=ccy, amount=amount)

    @staticmethod
    def zero(currency: Currency) -> CurrencyAmount:
        return CurrencyAmount(currency=currency, amount=_ZERO)

    def plus(self, other: CurrencyAmount) -> CurrencyAmount:
        if self.currency != other.currency:
            raise TypeError(f"Currency mismatch: {self.currency} vs {other.currency}")
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            return CurrencyAmount(currency=self.currency, amount=self.amount + other.amount)

    def minus(self, other: CurrencyAmount) -> CurrencyAmount:
        return self.plus(other.negated())

    def multiplied_by(self, factor: Decimal) -> CurrencyAmount:
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            return CurrencyAmount(currency=self.currency, amount=self.amount * factor)

    def negated(self) -> CurrencyAmount:
        return CurrencyAmount(currency=self.currency, amount=-self.amount)

    def is_zero(self) -> bool:
        return self.amount == _ZERO

    def convert_to(self, currency: Currency, rates: FxRateProvider) -> CurrencyAmount:
        """Convert into `currency` using rates.fx_rate(self.currency, currency)."""
        if currency == self.currency:
            return self
        rate = rates.fx_rate(self.currency, currency)
        return CurrencyAmount(currency=currency, amount=_mul(self.amount, rate))

    def rounded(self) -> CurrencyAmount:
        """Quantize to the currency's ISO 4217 minor unit."""
        quantizer = Decimal(10) ** -self.currency.minor_units
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            return CurrencyAmount(currency=self.currency, amount=self.amount.quantize(quantizer))

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"


def _mul(a: Decimal, b: Decimal) -> Decimal:
    with localcontext(MEASURA_DECIMAL_CONTEXT):
        return a * b


@final
@dataclass(frozen=True, slots=True)
class MultiCurrencyAmount:
    """Amounts in several currencies, at most one amount per currency."""

    amounts: FrozenMap[Currency, Decimal] = FrozenMap.EMPTY

    @staticmethod
    def of(*amounts: CurrencyAmount) -> MultiCurrencyAmount:
        """Sum the amounts per currency."""
        return MultiCurrencyAmount.total(amounts)

    @staticmethod
    def total(amounts: Iterable[CurrencyAmount]) -> MultiCurrencyAmount:
        totals: dict[Currency, Decimal] = {}
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            for ca in amounts:
                totals[ca.currency] = totals.get(ca.currency, _ZERO) + ca.amount
        return MultiCurrencyAmount(amounts=FrozenMap.of(totals))

    @property
    def currencies(self) -> tuple[Currency, ...]:
        return self.amounts.keys()

    def amount(self, currency: Currency) -> CurrencyAmount:
        """Amount in currency; zero when the currency is absent."""
        value = self.amounts.get(currency)
        return CurrencyAmount(currency=currency, amount=value if value is not None else _ZERO)

    def plus(self, other: CurrencyAmount | MultiCurrencyAmount) -> MultiCurrencyAmount:
        extra = (other,) if isinstance(other, CurrencyAmount) else tuple(other)
        return MultiCurrencyAmount.total((*self, *extra))

    def multiplied_by(self, factor: Decimal) -> MultiCurrencyAmount:
        return MultiCurrencyAmount.total(ca.multiplied_by(factor) for ca in self)

    def convert_to(self, currency: Currency, rates: FxRateProvider) -> CurrencyAmount:
        """Total of every amount converted into `currency`."""
        total = CurrencyAmount.zero(currency)
        for ca in self:
            total = total.plus(ca.convert_to(currency, rates))
        return total

    def __iter__(self) -> Iterator[CurrencyAmount]:
        return (CurrencyAmount(currency=c, amount=a) for c, a in self.amounts.items())

    def __len__(self) -> int:
        return len(self.amounts)
