"""Tests for reporting-currency conversion of calculation results."""

from __future__ import annotations

from decimal import Decimal, localcontext

import pytest
from conftest import EUR, KRW, USD, USD_DISC, USD_KRW, VAL_DATE

from measura.calc.conversion import MarketDataFxRateProvider, convert_results
from measura.calc.market_data import ImmutableScenarioMarketData, ScenarioValues
from measura.calc.measure import Measures
from measura.calc.scenario import ScenarioArray
from measura.core.errors import CurrencyConversionError, Failure, FailureReason
from measura.core.money import MEASURA_DECIMAL_CONTEXT, CurrencyAmount, FxRate, MultiCurrencyAmount
from measura.core.result import Err, Ok
from measura.pricer.sensitivity import CurveSensitivities, CurveSensitivity


def usd(amount: str) -> CurrencyAmount:
    return CurrencyAmount.of("USD", Decimal(amount))


@pytest.fixture
def fx_market_data(usd_krw_spot: FxRate) -> ImmutableScenarioMarketData:
    return ImmutableScenarioMarketData.of(VAL_DATE, {USD_KRW: usd_krw_spot})


class TestMarketDataFxRateProvider:
    def test_same_currency(self) -> None:
        provider = MarketDataFxRateProvider(ImmutableScenarioMarketData.of(VAL_DATE).scenario(0))
        assert provider.fx_rate(USD, USD) == Decimal(1)

    def test_either_direction(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        provider = MarketDataFxRateProvider(fx_market_data.scenario(0))
        assert provider.fx_rate(USD, KRW) == Decimal("1350")
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            assert provider.fx_rate(KRW, USD) == Decimal(1) / Decimal("1350")

    def test_missing_rate(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        with pytest.raises(CurrencyConversionError, match="EUR/USD"):
            MarketDataFxRateProvider(fx_market_data.scenario(0)).fx_rate(EUR, USD)


class TestConvertResults:
    def test_convertible_measure_converted(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        results = {Measures.PRESENT_VALUE: Ok(ScenarioArray.of([usd("100")]))}
        converted = convert_results(results, KRW, fx_market_data)
        assert converted[Measures.PRESENT_VALUE] == Ok(ScenarioArray.of([CurrencyAmount.of("KRW", Decimal("135000"))]))

    def test_multi_currency_measure_untouched(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        pv = Ok(ScenarioArray.of([usd("100")]))
        converted = convert_results({Measures.PRESENT_VALUE_MULTI_CCY: pv}, KRW, fx_market_data)
        assert converted[Measures.PRESENT_VALUE_MULTI_CCY] is pv

    def test_non_convertible_values_pass_through(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        values = Ok(ScenarioArray.of(["not an amount"]))
        converted = convert_results({Measures.PV01: values}, KRW, fx_market_data)
        assert converted[Measures.PV01] == values

    def test_sensitivities_converted(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        sens = CurveSensitivities((CurveSensitivity(USD_DISC, USD, (Decimal("1"),), (Decimal("-2"),)),))
        converted = convert_results({Measures.BUCKETED_PV01: Ok(ScenarioArray.of([sens]))}, KRW, fx_market_data)
        entry = converted[Measures.BUCKETED_PV01].value.get(0).get(USD_DISC)
        assert entry.currency == KRW
        assert entry.sensitivities == (Decimal("-2700"),)

    def test_same_currency_is_identity(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        amount = usd("100")
        converted = convert_results({Measures.CURRENT_CASH: Ok(ScenarioArray.of([amount]))}, USD, fx_market_data)
        assert converted[Measures.CURRENT_CASH].value.get(0) is amount

    def test_missing_rate_fails_that_measure_only(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        results = {
            Measures.PRESENT_VALUE: Ok(ScenarioArray.of([usd("100")])),
            Measures.CURRENCY_EXPOSURE: Ok(ScenarioArray.of([MultiCurrencyAmount.of(usd("100"))])),
        }
        converted = convert_results(results, EUR, fx_market_data)
        pv = converted[Measures.PRESENT_VALUE]
        assert isinstance(pv, Err)
        assert pv.error.reason is FailureReason.CURRENCY_CONVERSION
        assert "EUR" in pv.error.message
        assert isinstance(converted[Measures.CURRENCY_EXPOSURE], Ok)

    def test_err_passes_through(self, fx_market_data: ImmutableScenarioMarketData) -> None:
        failed = Err(Failure.of(FailureReason.MISSING_DATA, "no curve"))
        assert convert_results({Measures.PRESENT_VALUE: failed}, KRW, fx_market_data)[Measures.PRESENT_VALUE] is failed

    def test_per_scenario_rates(self, usd_krw_spot: FxRate) -> None:
        md = ImmutableScenarioMarketData.of(
            VAL_DATE, {USD_KRW: ScenarioValues.of([usd_krw_spot, FxRate.of("USD", "KRW", Decimal("1400"))])},
        )
        results = {Measures.PRESENT_VALUE: Ok(ScenarioArray.of([usd("1"), usd("1")]))}
        converted = convert_results(results, KRW, md)[Measures.PRESENT_VALUE].value
        assert [a.amount for a in converted] == [Decimal("1350"), Decimal("1400")]
