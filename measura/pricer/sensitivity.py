"""Bump-and-reprice curve sensitivities.

Each node of each curve is shifted by one basis point in turn and the
present value recomputed; the difference is that node's sensitivity,
expressed in the currency of the present value. PV01 is the sum over
all nodes of all curves.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Protocol, Self, final

from measura.calc.market_data import CurveId
from measura.core.money import MEASURA_DECIMAL_CONTEXT, Currency, CurrencyAmount, FxRateProvider
from measura.market.curve import ONE_BASIS_POINT, DiscountCurve


class CurveProvider(Protocol):
    """A provider whose curves can be read by id and replaced."""

    def curve(self, curve_id: CurveId) -> DiscountCurve: ...

    def with_curve(self, curve: DiscountCurve) -> Self: ...


@final
@dataclass(frozen=True, slots=True)
class CurveSensitivity:
    """Change in present value per node of one curve."""

    curve_id: CurveId
    currency: Currency
    times: tuple[Decimal, ...]
    sensitivities: tuple[Decimal, ...]

    def __post_init__(self) -> None:
        if len(self.times) != len(self.sensitivities):
            raise TypeError("CurveSensitivity: times and sensitivities must have same length")

    def total(self) -> CurrencyAmount:
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            return CurrencyAmount(self.currency, sum(self.sensitivities, Decimal(0)))

    def convert_to(self, currency: Currency, rates: FxRateProvider) -> CurveSensitivity:
        if currency == self.currency:
            return self
        rate = rates.fx_rate(self.currency, currency)
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            converted = tuple(s * rate for s in self.sensitivities)
        return CurveSensitivity(self.curve_id, currency, self.times, converted)


@final
@dataclass(frozen=True, slots=True)
class CurveSensitivities:
    """Per-node sensitivities for a set of curves, in one currency."""

    entries: tuple[CurveSensitivity, ...]

    def get(self, curve_id: CurveId) -> CurveSensitivity | None:
        for entry in self.entries:
            if entry.curve_id == curve_id:
                return entry
        return None

    def total(self, currency: Currency) -> CurrencyAmount:
        result = CurrencyAmount.zero(currency)
        for entry in self.entries:
            result = result.plus(entry.total())
        return result

    def convert_to(self, currency: Currency, rates: FxRateProvider) -> CurveSensitivities:
        return CurveSensitivities(tuple(e.convert_to(currency, rates) for e in self.entries))

    def __iter__(self) -> Iterator[CurveSensitivity]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def curve_sensitivities[P: CurveProvider](
    present_value: Callable[[P], CurrencyAmount],
    provider: P,
    curve_ids: Iterable[CurveId],
    shift: Decimal = ONE_BASIS_POINT,
) -> CurveSensitivities:
    """Bucketed sensitivity of present_value to each node of each curve."""
    base = present_value(provider)
    entries: list[CurveSensitivity] = []
    for curve_id in dict.fromkeys(curve_ids):
        curve = provider.curve(curve_id)
        deltas: list[Decimal] = []
        for i in range(curve.node_count):
            bumped = present_value(provider.with_curve(curve.bumped(i, shift)))
            deltas.append(bumped.minus(base).amount)
        entries.append(CurveSensitivity(curve_id, base.currency, curve.times, tuple(deltas)))
    return CurveSensitivities(tuple(entries))


def pv01[P: CurveProvider](
    present_value: Callable[[P], CurrencyAmount],
    provider: P,
    curve_ids: Iterable[CurveId],
) -> CurrencyAmount:
    """Sum of the bucketed sensitivities: the PV change for a 1bp shift of every node."""
    base_currency = present_value(provider).currency
    return curve_sensitivities(present_value, provider, curve_ids).total(base_currency)
