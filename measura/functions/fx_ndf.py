"""Calculation function for FX non-deliverable forward trades.

Each measure is a function of (resolved trade, rates scenario view) that
loops over the scenarios and returns a ScenarioArray. PresentValueMultiCcy
is declared as an alias of PresentValue: the value is calculated once and
exposed under both names, one of which is skipped by the reporting
currency conversion.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import final

from measura.calc.market_data import CurveId, ScenarioMarketData
from measura.calc.measure import Measures
from measura.calc.parameters import CalculationParameters
from measura.calc.registry import MeasureRegistry
from measura.calc.requirements import FunctionRequirements
from measura.calc.runner import MeasureCalculationFunction
from measura.calc.scenario import ScenarioArray
from measura.core.money import Currency, CurrencyAmount, FxRate, MultiCurrencyAmount
from measura.core.reference_data import ReferenceData
from measura.market.rates import RatesMarketDataLookup, RatesProvider, RatesScenarioMarketData
from measura.pricer.fx_ndf import DiscountingFxNdfProductPricer
from measura.pricer.sensitivity import CurveSensitivities, curve_sensitivities, pv01
from measura.product.fx import FxNdfTrade, ResolvedFxNdf, ResolvedFxNdfTrade

_PRICER = DiscountingFxNdfProductPricer.DEFAULT


def _curve_ids(ndf: ResolvedFxNdf, provider: RatesProvider) -> tuple[CurveId, ...]:
    return (
        provider.lookup.discount_curve_id(ndf.settlement_currency),
        provider.lookup.discount_curve_id(ndf.non_deliverable_currency),
    )


def _pv_of(ndf: ResolvedFxNdf) -> Callable[[RatesProvider], CurrencyAmount]:
    return partial(_PRICER.present_value, ndf)


# ---------------------------------------------------------------------------
# Per-scenario measures
# ---------------------------------------------------------------------------


def present_value(
    trade: ResolvedFxNdfTrade, md: RatesScenarioMarketData,
) -> ScenarioArray[CurrencyAmount]:
    return ScenarioArray.of_function(
        md.scenario_count, lambda i: _PRICER.present_value(trade.product, md.scenario(i)),
    )


def pv01_sum(
    trade: ResolvedFxNdfTrade, md: RatesScenarioMarketData,
) -> ScenarioArray[CurrencyAmount]:
    def calc(i: int) -> CurrencyAmount:
        provider = md.scenario(i)
        return pv01(_pv_of(trade.product), provider, _curve_ids(trade.product, provider))

    return ScenarioArray.of_function(md.scenario_count, calc)


def pv01_bucketed(
    trade: ResolvedFxNdfTrade, md: RatesScenarioMarketData,
) -> ScenarioArray[CurveSensitivities]:
    def calc(i: int) -> CurveSensitivities:
        provider = md.scenario(i)
        return curve_sensitivities(_pv_of(trade.product), provider, _curve_ids(trade.product, provider))

    return ScenarioArray.of_function(md.scenario_count, calc)


def currency_exposure(
    trade: ResolvedFxNdfTrade, md: RatesScenarioMarketData,
) -> ScenarioArray[MultiCurrencyAmount]:
    return ScenarioArray.of_function(
        md.scenario_count, lambda i: _PRICER.currency_exposure(trade.product, md.scenario(i)),
    )


def current_cash(
    trade: ResolvedFxNdfTrade, md: RatesScenarioMarketData,
) -> ScenarioArray[CurrencyAmount]:
    return ScenarioArray.of_function(
        md.scenario_count, lambda i: _PRICER.current_cash(trade.product, md.scenario(i)),
    )


def forward_fx_rate(
    trade: ResolvedFxNdfTrade, md: RatesScenarioMarketData,
) -> ScenarioArray[FxRate]:
    return ScenarioArray.of_function(
        md.scenario_count, lambda i: _PRICER.forward_fx_rate(trade.product, md.scenario(i)),
    )


def resolved_target(
    trade: ResolvedFxNdfTrade, md: RatesScenarioMarketData,
) -> ScenarioArray[ResolvedFxNdfTrade]:
    return ScenarioArray.of_single_value(md.scenario_count, trade)


# ---------------------------------------------------------------------------
# Calculation function
# ---------------------------------------------------------------------------


@final
class FxNdfCalculationFunction(
    MeasureCalculationFunction[FxNdfTrade, ResolvedFxNdfTrade, RatesScenarioMarketData],
):
    """Calculates measures for FxNdfTrade using a RatesMarketDataLookup parameter."""

    registry = MeasureRegistry.of(
        {
            Measures.PRESENT_VALUE: present_value,
            Measures.PV01: pv01_sum,
            Measures.BUCKETED_PV01: pv01_bucketed,
            Measures.CURRENCY_EXPOSURE: currency_exposure,
            Measures.CURRENT_CASH: current_cash,
            Measures.FORWARD_FX_RATE: forward_fx_rate,
            Measures.RESOLVED_TARGET: resolved_target,
        },
        aliases=[(Measures.PRESENT_VALUE, Measures.PRESENT_VALUE_MULTI_CCY)],
    )

    @property
    def target_type(self) -> type[FxNdfTrade]:
        return FxNdfTrade

    def natural_currency(self, trade: FxNdfTrade, ref_data: ReferenceData) -> Currency:  # noqa: ARG002
        return trade.product.settlement_currency

    def resolve_trade(self, trade: FxNdfTrade, ref_data: ReferenceData) -> ResolvedFxNdfTrade:
        return trade.resolve(ref_data)

    def market_data_requirements(
        self, trade: FxNdfTrade, parameters: CalculationParameters, ref_data: ReferenceData,  # noqa: ARG002
    ) -> FunctionRequirements:
        product = trade.product
        lookup = parameters.parameter(RatesMarketDataLookup)
        return lookup.requirements({product.settlement_currency, product.non_deliverable_currency})

    def market_data_view(
        self, trade: FxNdfTrade, parameters: CalculationParameters, market_data: ScenarioMarketData,  # noqa: ARG002
    ) -> RatesScenarioMarketData:
        return parameters.parameter(RatesMarketDataLookup).market_data_view(market_data)
