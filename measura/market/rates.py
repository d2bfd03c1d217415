"""Rates market data lookup: discount curves by currency plus FX rates.

The lookup is a calculation parameter. It declares what market data a
trade in a set of currencies needs, and wraps scenario market data in a
view whose per-scenario RatesProvider reads curves and FX rates.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from itertools import combinations
from typing import Protocol, final, runtime_checkable

from measura.calc.conversion import MarketDataFxRateProvider
from measura.calc.market_data import CurveId, FxRateId, MarketData, ScenarioMarketData
from measura.calc.requirements import FunctionRequirements
from measura.core.errors import Failure, FailureError, FailureReason, MarketDataNotFoundError
from measura.core.money import Currency
from measura.core.types import FrozenMap
from measura.market.curve import DiscountCurve


def read_curve(
    market_data: MarketData,
    overrides: FrozenMap[CurveId, DiscountCurve],
    curve_id: CurveId,
) -> DiscountCurve:
    """Curve for curve_id, preferring an override (used when bumping)."""
    override = overrides.get(curve_id)
    if override is not None:
        return override
    curve = market_data.value(curve_id)
    if not isinstance(curve, DiscountCurve):
        raise MarketDataNotFoundError(
            f"Market data '{curve_id}' is {type(curve).__name__}, expected DiscountCurve"
        )
    return curve


@runtime_checkable
class RatesMarketDataLookup(Protocol):
    """Calculation parameter describing where rates market data is found."""

    @property
    def query_type(self) -> type[RatesMarketDataLookup]: ...

    def requirements(self, currencies: Iterable[Currency]) -> FunctionRequirements: ...

    def market_data_view(self, market_data: ScenarioMarketData) -> RatesScenarioMarketData: ...


@final
@dataclass(frozen=True, slots=True)
class DefaultRatesMarketDataLookup:
    """Discount curve per currency; FX rates between any pair of them."""

    discount_curves: FrozenMap[Currency, CurveId]

    @staticmethod
    def of(discount_curves: Mapping[Currency, CurveId]) -> DefaultRatesMarketDataLookup:
        return DefaultRatesMarketDataLookup(discount_curves=FrozenMap.of(dict(discount_curves)))

    @property
    def query_type(self) -> type[RatesMarketDataLookup]:
        return RatesMarketDataLookup

    def discount_curve_id(self, currency: Currency) -> CurveId:
        curve_id = self.discount_curves.get(currency)
        if curve_id is None:
            raise FailureError(Failure.of(
                FailureReason.INVALID_INPUT,
                "Rates lookup has no discount curve configured for currency '{}'",
                currency,
            ))
        return curve_id

    def requirements(self, currencies: Iterable[Currency]) -> FunctionRequirements:
        ccys = sorted(set(currencies))
        return FunctionRequirements.of(
            value_requirements=[
                *(self.discount_curve_id(c) for c in ccys),
                *(FxRateId.of(a, b) for a, b in combinations(ccys, 2)),
            ],
            output_currencies=ccys,
        )

    def market_data_view(self, market_data: ScenarioMarketData) -> RatesScenarioMarketData:
        return RatesScenarioMarketData(lookup=self, market_data=market_data)


@final
@dataclass(frozen=True, slots=True)
class RatesScenarioMarketData:
    """Scenario market data seen through a rates lookup."""

    lookup: DefaultRatesMarketDataLookup
    market_data: ScenarioMarketData

    @property
    def scenario_count(self) -> int:
        return self.market_data.scenario_count

    def scenario(self, scenario_index: int) -> RatesProvider:
        return RatesProvider(lookup=self.lookup, market_data=self.market_data.scenario(scenario_index))


@final
@dataclass(frozen=True, slots=True)
class RatesProvider:
    """Discount curves and FX rates for a single scenario."""

    lookup: DefaultRatesMarketDataLookup
    market_data: MarketData
    overrides: FrozenMap[CurveId, DiscountCurve] = field(default=FrozenMap.EMPTY)

    @property
    def valuation_date(self) -> date:
        return self.market_data.valuation_date

    def curve(self, curve_id: CurveId) -> DiscountCurve:
        return read_curve(self.market_data, self.overrides, curve_id)

    def discount_curve(self, currency: Currency) -> DiscountCurve:
        return self.curve(self.lookup.discount_curve_id(currency))

    def discount_factor(self, currency: Currency, d: date) -> Decimal:
        return self.discount_curve(currency).discount_factor(d)

    def fx_rate(self, base: Currency, counter: Currency) -> Decimal:
        return MarketDataFxRateProvider(self.market_data).fx_rate(base, counter)

    def with_curve(self, curve: DiscountCurve) -> RatesProvider:
        """Copy in which curve replaces the market data curve with the same id."""
        merged = {**self.overrides.to_dict(), curve.curve_id: curve}
        return replace(self, overrides=FrozenMap.of(merged))
