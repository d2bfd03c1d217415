"""Per-trade measure orchestration.

calculate_measures() takes a trade that is already resolved and a market
data view that is already built, and produces exactly one Result per
requested measure (plus one per alias target whose source was requested):

1. Each requested measure is looked up in the registry. A measure with no
   routine (and that is not an alias) gets Failure(INVALID_INPUT).
2. Each routine runs inside an isolating boundary; any exception becomes
   Err(Failure) for that measure only. Routines may run in parallel on an
   Executor since they share only read-only inputs.
3. Alias pairs are applied after the loop by copying the source's Result.

Cancellation (via a threading.Event) abandons measures that have not
started and raises CalculationCancelledError; no partial mapping is
returned.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, final

from measura.calc.function import CalculationFunction, SingleMeasureCalculation, duplicate_result
from measura.calc.market_data import ScenarioMarketData
from measura.calc.measure import Measure
from measura.calc.parameters import CalculationParameters
from measura.calc.registry import MeasureRegistry
from measura.calc.requirements import FunctionRequirements
from measura.core.errors import CalculationCancelledError, Failure, FailureError, FailureReason
from measura.core.money import Currency
from measura.core.reference_data import ReferenceData
from measura.core.result import CalcResult, Err, result_of

_log = logging.getLogger(__name__)


def unsupported_measure(measure: Measure | str) -> Err[Failure]:
    return Err(Failure.of(FailureReason.INVALID_INPUT, "Unsupported measure: {}", measure))


def _calculate_one(
    measure: Measure,
    routine: SingleMeasureCalculation[Any, Any],
    trade: Any,
    market_data: Any,
    cancel: threading.Event | None,
) -> CalcResult[Any]:
    if cancel is not None and cancel.is_set():
        raise CalculationCancelledError(f"Calculation cancelled before measure {measure}")
    _log.debug("Calculating measure %s", measure)
    result = result_of(routine, trade, market_data)
    if isinstance(result, Err):
        _log.warning("Measure %s failed: %s", measure, result.error.message)
    return result


def _run_parallel(
    jobs: dict[Measure, SingleMeasureCalculation[Any, Any]],
    trade: Any,
    market_data: Any,
    executor: Executor,
    cancel: threading.Event | None,
) -> dict[Measure, CalcResult[Any]]:
    futures: dict[Measure, Future[CalcResult[Any]]] = {
        measure: executor.submit(_calculate_one, measure, routine, trade, market_data, cancel)
        for measure, routine in jobs.items()
    }
    try:
        return {measure: future.result() for measure, future in futures.items()}
    except BaseException:
        for future in futures.values():
            future.cancel()
        raise


def calculate_measures(
    registry: MeasureRegistry,
    trade: Any,
    market_data: Any,
    measures: Iterable[Measure],
    *,
    executor: Executor | None = None,
    cancel: threading.Event | None = None,
) -> dict[Measure, CalcResult[Any]]:
    """Calculate every requested measure for a resolved trade.

    The returned keys are the requested measures plus the alias targets of
    requested measures. An alias requested on its own is filled from its
    source, which is calculated once but not returned unless requested.
    """
    requested = list(dict.fromkeys(measures))

    jobs: dict[Measure, SingleMeasureCalculation[Any, Any]] = {}
    results: dict[Measure, CalcResult[Any]] = {}
    for measure in requested:
        source = registry.alias_source(measure)
        target = measure if source is None else source
        routine = registry.lookup(target)
        if routine is None:
            results[measure] = unsupported_measure(measure)
        else:
            jobs[target] = routine

    if executor is None or len(jobs) < 2:
        computed = {
            measure: _calculate_one(measure, routine, trade, market_data, cancel)
            for measure, routine in jobs.items()
        }
    else:
        computed = _run_parallel(jobs, trade, market_data, executor, cancel)

    # alias targets are filled from the computed source, never recalculated
    for source, alias in registry.aliases:
        duplicate_result(source, alias, computed)

    output_keys = [*requested, *sorted(registry.alias_targets(requested) - set(requested))]
    for measure in output_keys:
        if measure not in results:
            results[measure] = computed[measure]
    return {measure: results[measure] for measure in output_keys}


# ---------------------------------------------------------------------------
# Calculation function base
# ---------------------------------------------------------------------------


class MeasureCalculationFunction[T, R, M](ABC):
    """Shared calculate/requirements logic for one trade type.

    T: trade type. R: resolved trade type. M: market data view type.

    Subclasses set `registry` and implement the abstract hooks `resolve_trade`,
    `market_data_requirements`, `market_data_view` and `natural_currency`.
    Resolution and view construction run once per call and their errors
    propagate; only the per-measure routines are isolated.
    """

    registry: MeasureRegistry

    def __init__(self, executor: Executor | None = None) -> None:
        self._executor = executor

    @property
    @abstractmethod
    def target_type(self) -> type[T]: ...

    def supported_measures(self) -> frozenset[Measure]:
        return self.registry.supported_measures()

    @abstractmethod
    def natural_currency(self, trade: T, ref_data: ReferenceData) -> Currency: ...

    @abstractmethod
    def resolve_trade(self, trade: T, ref_data: ReferenceData) -> R: ...

    @abstractmethod
    def market_data_requirements(
        self, trade: T, parameters: CalculationParameters, ref_data: ReferenceData,
    ) -> FunctionRequirements: ...

    @abstractmethod
    def market_data_view(
        self, trade: T, parameters: CalculationParameters, market_data: ScenarioMarketData,
    ) -> M: ...

    def requirements(
        self,
        trade: T,
        measures: Iterable[Measure],  # noqa: ARG002
        parameters: CalculationParameters,
        ref_data: ReferenceData,
    ) -> FunctionRequirements:
        """Market data needed by any measure of this trade.

        Depends on the trade's currencies and entities, not on the measures.
        """
        return self.market_data_requirements(trade, parameters, ref_data)

    def calculate(
        self,
        trade: T,
        measures: Iterable[Measure],
        parameters: CalculationParameters,
        scenario_market_data: ScenarioMarketData,
        ref_data: ReferenceData,
        *,
        cancel: threading.Event | None = None,
    ) -> dict[Measure, CalcResult[Any]]:
        resolved = self.resolve_trade(trade, ref_data)
        scoped = scenario_market_data.scoped_to(
            self.market_data_requirements(trade, parameters, ref_data)
        )
        view = self.market_data_view(trade, parameters, scoped)
        return calculate_measures(
            self.registry, resolved, view, measures, executor=self._executor, cancel=cancel,
        )


# ---------------------------------------------------------------------------
# Multi-trade runner
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class CalculationFunctions:
    """Calculation functions keyed by the trade type they handle."""

    functions: Mapping[type[Any], CalculationFunction[Any]]

    @staticmethod
    def of(*functions: CalculationFunction[Any]) -> CalculationFunctions:
        by_type: dict[type[Any], CalculationFunction[Any]] = {}
        for fn in functions:
            if fn.target_type in by_type:
                raise TypeError(
                    f"CalculationFunctions: duplicate function for {fn.target_type.__name__}"
                )
            by_type[fn.target_type] = fn
        return CalculationFunctions(functions=MappingProxyType(by_type))

    def find(self, trade: object) -> CalculationFunction[Any] | None:
        return self.functions.get(type(trade))


@final
@dataclass(frozen=True, slots=True)
class CalculationRow:
    """Results for one trade, keyed by measure."""

    target: Any
    results: Mapping[Measure, CalcResult[Any]]

    def get(self, measure: Measure) -> CalcResult[Any]:
        return self.results[measure]


def _failed_row(target: Any, measures: list[Measure], failure: Failure) -> CalculationRow:
    return CalculationRow(
        target=target,
        results=MappingProxyType({m: Err(failure) for m in measures}),
    )


def requirements_for(
    functions: CalculationFunctions,
    targets: Iterable[Any],
    measures: Iterable[Measure],
    parameters: CalculationParameters,
    ref_data: ReferenceData,
) -> FunctionRequirements:
    """Union of the market data requirements of every target.

    Targets with no function contribute nothing. Configuration errors
    propagate.
    """
    measure_list = list(measures)
    combined = FunctionRequirements.EMPTY
    for target in targets:
        fn = functions.find(target)
        if fn is not None:
            combined = combined.combined_with(
                fn.requirements(target, measure_list, parameters, ref_data)
            )
    return combined


def run_calculations(
    functions: CalculationFunctions,
    targets: Iterable[Any],
    measures: Iterable[Measure],
    parameters: CalculationParameters,
    scenario_market_data: ScenarioMarketData,
    ref_data: ReferenceData,
    *,
    cancel: threading.Event | None = None,
) -> tuple[CalculationRow, ...]:
    """Calculate measures for many trades, one row per trade.

    A trade whose call aborts (no function for its type, missing
    configuration, failed resolution) gets the same Failure for every
    measure; the other trades are unaffected. Cancellation propagates.
    """
    measure_list = list(dict.fromkeys(measures))
    rows: list[CalculationRow] = []
    for target in targets:
        fn = functions.find(target)
        if fn is None:
            failure = Failure.of(
                FailureReason.UNSUPPORTED,
                "No calculation function available for target type: {}",
                type(target).__name__,
            )
            _log.warning(failure.message)
            rows.append(_failed_row(target, measure_list, failure))
            continue
        try:
            results = fn.calculate(
                target, measure_list, parameters, scenario_market_data, ref_data, cancel=cancel,
            )
        except FailureError as exc:
            _log.warning("Calculation for %r aborted: %s", target, exc.failure.message)
            rows.append(_failed_row(target, measure_list, exc.failure))
            continue
        rows.append(CalculationRow(target=target, results=MappingProxyType(dict(results))))
    return tuple(rows)
