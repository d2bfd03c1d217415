"""Calculation function for bill trades, discounted per legal entity."""

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
from measura.core.money import Currency, CurrencyAmount, MultiCurrencyAmount
from measura.core.reference_data import ReferenceData
from measura.market.legal_entity import (
    LegalEntityDiscountingMarketDataLookup,
    LegalEntityDiscountingProvider,
    LegalEntityScenarioMarketData,
)
from measura.pricer.bill import DiscountingBillTradePricer
from measura.pricer.sensitivity import CurveSensitivities, curve_sensitivities, pv01
from measura.product.bill import BillTrade, ResolvedBillTrade

_PRICER = DiscountingBillTradePricer.DEFAULT


def _curve_ids(trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider) -> tuple[CurveId, ...]:
    bill = trade.product
    return (
        provider.lookup.issuer_curve_id(bill.legal_entity_id, bill.currency),
        provider.lookup.repo_curve_id(bill.legal_entity_id, bill.currency),
    )


def _pv_of(trade: ResolvedBillTrade) -> Callable[[LegalEntityDiscountingProvider], CurrencyAmount]:
    return partial(_PRICER.present_value, trade)


def present_value(
    trade: ResolvedBillTrade, md: LegalEntityScenarioMarketData,
) -> ScenarioArray[CurrencyAmount]:
    return ScenarioArray.of_function(
        md.scenario_count, lambda i: _PRICER.present_value(trade, md.scenario(i)),
    )


def pv01_sum(
    trade: ResolvedBillTrade, md: LegalEntityScenarioMarketData,
) -> ScenarioArray[CurrencyAmount]:
    def calc(i: int) -> CurrencyAmount:
        provider = md.scenario(i)
        return pv01(_pv_of(trade), provider, _curve_ids(trade, provider))

    return ScenarioArray.of_function(md.scenario_count, calc)


def pv01_bucketed(
    trade: ResolvedBillTrade, md: LegalEntityScenarioMarketData,
) -> ScenarioArray[CurveSensitivities]:
    def calc(i: int) -> CurveSensitivities:
        provider = md.scenario(i)
        return curve_sensitivities(_pv_of(trade), provider, _curve_ids(trade, provider))

    return ScenarioArray.of_function(md.scenario_count, calc)


def currency_exposure(
    trade: ResolvedBillTrade, md: LegalEntityScenarioMarketData,
) -> ScenarioArray[MultiCurrencyAmount]:
    return ScenarioArray.of_function(
        md.scenario_count, lambda i: _PRICER.currency_exposure(trade, md.scenario(i)),
    )


def current_cash(
    trade: ResolvedBillTrade, md: LegalEntityScenarioMarketData,
) -> ScenarioArray[CurrencyAmount]:
    return ScenarioArray.of_function(
        md.scenario_count, lambda i: _PRICER.current_cash(trade, md.scenario(i)),
    )


def resolved_target(
    trade: ResolvedBillTrade, md: LegalEntityScenarioMarketData,
) -> ScenarioArray[ResolvedBillTrade]:
    return ScenarioArray.of_single_value(md.scenario_count, trade)


@final
class BillTradeCalculationFunction(
    MeasureCalculationFunction[BillTrade, ResolvedBillTrade, LegalEntityScenarioMarketData],
):
    """Calculates measures for BillTrade using a LegalEntityDiscountingMarketDataLookup."""

    registry = MeasureRegistry.of(
        {
            Measures.PRESENT_VALUE: present_value,
            Measures.PV01: pv01_sum,
            Measures.BUCKETED_PV01: pv01_bucketed,
            Measures.CURRENCY_EXPOSURE: currency_exposure,
            Measures.CURRENT_CASH: current_cash,
            Measures.RESOLVED_TARGET: resolved_target,
        },
        aliases=[(Measures.PRESENT_VALUE, Measures.PRESENT_VALUE_MULTI_CCY)],
    )

    @property
    def target_type(self) -> type[BillTrade]:
        return BillTrade

    def natural_currency(self, trade: BillTrade, ref_data: ReferenceData) -> Currency:  # noqa: ARG002
        return trade.product.currency

    def resolve_trade(self, trade: BillTrade, ref_data: ReferenceData) -> ResolvedBillTrade:
        return trade.resolve(ref_data)

    def market_data_requirements(
        self, trade: BillTrade, parameters: CalculationParameters, ref_data: ReferenceData,  # noqa: ARG002
    ) -> FunctionRequirements:
        lookup = parameters.parameter(LegalEntityDiscountingMarketDataLookup)
        return lookup.requirements(trade.product.legal_entity_id, trade.product.currency)

    def market_data_view(
        self, trade: BillTrade, parameters: CalculationParameters, market_data: ScenarioMarketData,  # noqa: ARG002
    ) -> LegalEntityScenarioMarketData:
        return parameters.parameter(LegalEntityDiscountingMarketDataLookup).market_data_view(market_data)
