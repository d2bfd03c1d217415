"""Zero-rate discount curves.

A DiscountCurve holds zero rates at node times (year fractions from the
valuation date). Zero rates are interpolated linearly between nodes and
held flat outside them; discount factors use continuous compounding,
D(t) = exp(-r(t) * t).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal, localcontext
from typing import final

from measura.calc.market_data import CurveId
from measura.core.calendar import DayCount, Tenor
from measura.core.decimal_math import exp_d, ln_d
from measura.core.money import MEASURA_DECIMAL_CONTEXT, Currency
from measura.core.result import Err, Ok

ONE_BASIS_POINT = Decimal("0.0001")


@final
@dataclass(frozen=True, slots=True)
class DiscountCurve:
    """Discount curve for one currency, defined by zero rates at node times."""

    curve_id: CurveId
    currency: Currency
    valuation_date: date
    times: tuple[Decimal, ...]
    zero_rates: tuple[Decimal, ...]
    day_count: DayCount = DayCount.ACT_365F

    def __post_init__(self) -> None:
        if not self.times:
            raise TypeError("DiscountCurve requires at least one node")
        if len(self.times) != len(self.zero_rates):
            raise TypeError(
                f"DiscountCurve: times ({len(self.times)}) and zero_rates "
                f"({len(self.zero_rates)}) must have same length"
            )
        for i in range(1, len(self.times)):
            if self.times[i] <= self.times[i - 1]:
                raise TypeError(f"DiscountCurve: times must be ascending at index {i}")

    @staticmethod
    def create(
        curve_id: CurveId,
        currency: Currency,
        valuation_date: date,
        times: tuple[Decimal, ...],
        zero_rates: tuple[Decimal, ...],
        day_count: DayCount = DayCount.ACT_365F,
    ) -> Ok[DiscountCurve] | Err[str]:
        """Validate curve construction.

        Enforced:
        - len(times) == len(zero_rates), non-empty
        - times ascending, all > 0
        """
        if len(times) != len(zero_rates):
            return Err(
                f"times ({len(times)}) and zero_rates ({len(zero_rates)}) must have same length"
            )
        if not times:
            return Err("times must be non-empty")
        for i, t in enumerate(times):
            if t <= 0:
                return Err(f"times[{i}] must be > 0, got {t}")
            if i > 0 and t <= times[i - 1]:
                return Err(f"times must be ascending: times[{i}]={t} <= times[{i-1}]={times[i-1]}")
        return Ok(DiscountCurve(
            curve_id=curve_id, currency=currency, valuation_date=valuation_date,
            times=times, zero_rates=zero_rates, day_count=day_count,
        ))

    @staticmethod
    def of_tenors(
        curve_id: CurveId,
        currency: Currency,
        valuation_date: date,
        rates: Mapping[Tenor, Decimal],
        day_count: DayCount = DayCount.ACT_365F,
    ) -> DiscountCurve:
        """Build from tenor -> zero rate, placing each node at its tenor date."""
        nodes = sorted(
            (day_count.year_fraction(valuation_date, tenor.add_to(valuation_date)), rate)
            for tenor, rate in rates.items()
        )
        return DiscountCurve(
            curve_id=curve_id,
            currency=currency,
            valuation_date=valuation_date,
            times=tuple(t for t, _ in nodes),
            zero_rates=tuple(r for _, r in nodes),
            day_count=day_count,
        )

    @staticmethod
    def of_discount_factors(
        curve_id: CurveId,
        currency: Currency,
        valuation_date: date,
        times: tuple[Decimal, ...],
        discount_factors: tuple[Decimal, ...],
        day_count: DayCount = DayCount.ACT_365F,
    ) -> Ok[DiscountCurve] | Err[str]:
        """Build from discount factors, r(t) = -ln(D(t)) / t."""
        if len(times) != len(discount_factors):
            return Err(
                f"times ({len(times)}) and discount_factors ({len(discount_factors)}) must have same length"
            )
        for i, df in enumerate(discount_factors):
            if df <= 0:
                return Err(f"discount_factors[{i}] must be > 0, got {df}")
        if any(t <= 0 for t in times):
            return Err("times must all be > 0")
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            zero_rates = tuple(-ln_d(df) / t for t, df in zip(times, discount_factors, strict=True))
        return DiscountCurve.create(curve_id, currency, valuation_date, times, zero_rates, day_count)

    @property
    def node_count(self) -> int:
        return len(self.times)

    def year_fraction(self, d: date) -> Decimal:
        return self.day_count.relative_year_fraction(self.valuation_date, d)

    def zero_rate(self, t: Decimal) -> Decimal:
        """Continuously compounded zero rate at time t."""
        times, rates = self.times, self.zero_rates
        if t <= times[0]:
            return rates[0]
        if t >= times[-1]:
            return rates[-1]
        for i in range(len(times) - 1):
            if times[i] <= t <= times[i + 1]:
                with localcontext(MEASURA_DECIMAL_CONTEXT):
                    w = (t - times[i]) / (times[i + 1] - times[i])
                    return rates[i] + w * (rates[i + 1] - rates[i])
        raise ValueError(f"Cannot interpolate zero rate at t={t}")

    def discount_factor_at(self, t: Decimal) -> Decimal:
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            return exp_d(-self.zero_rate(t) * t)

    def discount_factor(self, d: date) -> Decimal:
        """Discount factor from the valuation date to d."""
        return self.discount_factor_at(self.year_fraction(d))

    def bumped(self, node_index: int, shift: Decimal) -> DiscountCurve:
        """Copy with the zero rate of one node shifted."""
        if not 0 <= node_index < self.node_count:
            raise IndexError(f"Node index {node_index} out of range for {self.node_count} nodes")
        rates = list(self.zero_rates)
        rates[node_index] = rates[node_index] + shift
        return replace(self, zero_rates=tuple(rates))

    def parallel_bumped(self, shift: Decimal) -> DiscountCurve:
        return replace(self, zero_rates=tuple(r + shift for r in self.zero_rates))
