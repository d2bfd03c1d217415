"""Protocols for calculation functions and single-measure routines.

A CalculationFunction handles one trade type: it advertises the measures it
supports, declares the market data it needs, and calculates a Result per
measure covering every scenario. Routines behind it are pure functions of
(resolved trade, scenario market data) that raise on error; the function's
isolating boundary turns the exception into a Failure.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, MutableMapping
from typing import Any, Protocol, runtime_checkable

from measura.calc.market_data import ScenarioMarketData
from measura.calc.measure import Measure
from measura.calc.parameters import CalculationParameters
from measura.calc.requirements import FunctionRequirements
from measura.calc.scenario import ScenarioArray
from measura.core.money import Currency
from measura.core.reference_data import ReferenceData
from measura.core.result import CalcResult


class SingleMeasureCalculation[R, M](Protocol):
    """Calculates one measure for every scenario.

    R: resolved trade type. M: the function's market data view type.
    Must not catch exceptions; the orchestrator isolates faults.
    """

    def __call__(self, trade: R, market_data: M) -> ScenarioArray[Any]: ...


@runtime_checkable
class CalculationFunction[T](Protocol):
    """Calculates measures for trades of type T.

    calculate() checks cancel between measures and raises
    CalculationCancelledError once it is set.
    """

    @property
    def target_type(self) -> type[T]: ...

    def supported_measures(self) -> frozenset[Measure]: ...

    def natural_currency(self, trade: T, ref_data: ReferenceData) -> Currency: ...

    def requirements(
        self,
        trade: T,
        measures: Iterable[Measure],
        parameters: CalculationParameters,
        ref_data: ReferenceData,
    ) -> FunctionRequirements: ...

    def calculate(
        self,
        trade: T,
        measures: Iterable[Measure],
        parameters: CalculationParameters,
        scenario_market_data: ScenarioMarketData,
        ref_data: ReferenceData,
        *,
        cancel: threading.Event | None = None,
    ) -> dict[Measure, CalcResult[Any]]: ...


def duplicate_result(
    source: Measure,
    alias: Measure,
    results: MutableMapping[Measure, CalcResult[Any]],
) -> None:
    """Copy the result of source into the alias slot, if source was calculated.

    The Result object itself is shared; nothing is recomputed.
    """
    result = results.get(source)
    if result is not None:
        results[alias] = result
