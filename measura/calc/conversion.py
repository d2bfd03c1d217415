"""Reporting-currency stage applied after calculation.

Results of currency-convertible measures are converted into the reporting
currency scenario by scenario. Measures flagged as not convertible (such
as PresentValueMultiCcy) pass through untouched, which is why the PV
family is exposed under two names.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol, final, runtime_checkable

from measura.calc.market_data import FxRateId, MarketData, ScenarioMarketData
from measura.calc.measure import Measure
from measura.calc.scenario import ScenarioArray
from measura.core.errors import CurrencyConversionError, Failure, FailureReason, MarketDataNotFoundError
from measura.core.money import Currency, FxRate, FxRateProvider
from measura.core.result import CalcResult, Err, Ok


@runtime_checkable
class CurrencyConvertible(Protocol):
    """A value that can be expressed in another currency."""

    def convert_to(self, currency: Currency, rates: FxRateProvider) -> Any: ...


@final
@dataclass(frozen=True, slots=True)
class MarketDataFxRateProvider:
    """FX rates read from one scenario's market data, either direction."""

    market_data: MarketData

    def fx_rate(self, base: Currency, counter: Currency) -> Decimal:
        if base == counter:
            return Decimal(1)
        rate = self.market_data.find_value(FxRateId.of(base, counter))
        if not isinstance(rate, FxRate):
            raise CurrencyConversionError(f"No FX rate available for {base}/{counter}")
        return rate.fx_rate(base, counter)


def _convert_value(value: Any, currency: Currency, rates: FxRateProvider) -> Any:
    if isinstance(value, CurrencyConvertible):
        return value.convert_to(currency, rates)
    return value


def _convert_one(
    result: CalcResult[Any],
    currency: Currency,
    market_data: ScenarioMarketData,
) -> CalcResult[Any]:
    match result:
        case Err():
            return result
        case Ok(ScenarioArray() as array):
            try:
                converted = ScenarioArray.of(
                    _convert_value(value, currency, MarketDataFxRateProvider(market_data.scenario(i)))
                    for i, value in enumerate(array)
                )
            except (CurrencyConversionError, MarketDataNotFoundError) as exc:
                return Err(Failure.of(
                    FailureReason.CURRENCY_CONVERSION,
                    "Unable to convert to {}: {}",
                    currency,
                    exc.failure.message,
                ))
            return Ok(converted)
        case _:
            return result


def convert_results(
    results: Mapping[Measure, CalcResult[Any]],
    reporting_currency: Currency,
    market_data: ScenarioMarketData,
) -> dict[Measure, CalcResult[Any]]:
    """Convert convertible measures into reporting_currency.

    A conversion failure replaces that measure's result only.
    """
    return {
        measure: (
            _convert_one(result, reporting_currency, market_data)
            if measure.currency_convertible
            else result
        )
        for measure, result in results.items()
    }
