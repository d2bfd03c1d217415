"""Activity implementations for the measure calculation workflow.

Activities are thin IO wrappers around the calculation library. They hold
the trade store, calculation configuration and market data snapshots of
the worker process; only flat ids and outcomes cross the workflow
boundary.

Each activity:
- Is an instance method decorated with @activity.defn
- Takes a single frozen-dataclass input
- Returns a frozen-dataclass output (with optional error field)
- Is idempotent (same input -> same output)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, Protocol, final

from temporalio import activity

from measura.calc.conversion import convert_results
from measura.calc.market_data import (
    CurveId,
    FxRateId,
    ImmutableScenarioMarketData,
    MarketDataId,
    ScenarioMarketData,
)
from measura.calc.measure import Measure, Measures
from measura.calc.parameters import CalculationParameters, ReportingCurrency
from measura.calc.runner import (
    CalculationFunctions,
    CalculationRow,
    requirements_for,
    run_calculations,
    unsupported_measure,
)
from measura.calc.scenario import ScenarioArray
from measura.core.errors import FailureError
from measura.core.money import Currency, CurrencyAmount, CurrencyPair, FxRate, MultiCurrencyAmount
from measura.core.reference_data import ReferenceData
from measura.core.result import Err, Ok
from measura.pricer.sensitivity import CurveSensitivities
from measura.workflow.types import (
    CalculationInput,
    CalculationOutcome,
    CalculationRequest,
    MarketDataInput,
    MarketDataOutput,
    MeasureOutcome,
    RequirementsOutput,
)

# ---------------------------------------------------------------------------
# Market data provision
# ---------------------------------------------------------------------------


class MarketDataProvider(Protocol):
    """Source of market data for a valuation date."""

    def provide(
        self, valuation_date: date, ids: Iterable[MarketDataId],
    ) -> tuple[ScenarioMarketData, tuple[MarketDataId, ...]]:
        """Market data holding the available ids, and the ids that were missing."""
        ...


@final
class InMemoryMarketDataProvider:
    """Market data provider backed by a dict of values.

    Values may be plain (shared by every scenario) or ScenarioValues.
    Test double; not production code.
    """

    def __init__(self, values: Mapping[Any, Any]) -> None:
        self._values = dict(values)

    def provide(
        self, valuation_date: date, ids: Iterable[MarketDataId],
    ) -> tuple[ImmutableScenarioMarketData, tuple[MarketDataId, ...]]:
        wanted = list(dict.fromkeys(ids))
        found = {i: self._values[i] for i in wanted if i in self._values}
        missing = tuple(i for i in wanted if i not in self._values)
        return ImmutableScenarioMarketData.of(valuation_date, found), missing


# ---------------------------------------------------------------------------
# Wire helpers
# ---------------------------------------------------------------------------


def parse_curve_id(raw: str) -> CurveId:
    group, sep, name = raw.partition("/")
    if not sep or not group or not name:
        raise TypeError(f"Curve id must be 'group/name', got '{raw}'")
    return CurveId(group=group, name=name)


def parse_fx_rate_id(raw: str) -> FxRateId:
    match CurrencyPair.parse(raw):
        case Err(e):
            raise TypeError(e)
        case Ok(pair):
            return FxRateId(pair)


def measure_named(name: str) -> Measure | None:
    """Catalogue measure for name.

    An unknown but well-formed name gives a measure no function supports;
    a name that is not a valid measure name at all gives None.
    """
    known = Measures.BY_NAME.get(name)
    if known is not None:
        return known
    try:
        return Measure(name)
    except TypeError:
        return None


def _parse_measures(names: Iterable[str]) -> tuple[list[Measure], list[str]]:
    """Split wire names into measures and names that cannot be measures."""
    measures: list[Measure] = []
    invalid: list[str] = []
    for name in dict.fromkeys(names):
        measure = measure_named(name)
        if measure is None:
            invalid.append(name)
        else:
            measures.append(measure)
    return measures, invalid


def format_value(value: Any) -> str:
    match value:
        case ScenarioArray():
            return "; ".join(format_value(v) for v in value)
        case CurrencyAmount():
            return str(value)
        case MultiCurrencyAmount():
            return ", ".join(str(ca) for ca in value)
        case FxRate(pair=pair, rate=rate):
            return f"{pair} {rate}"
        case CurveSensitivities():
            return ", ".join(f"{e.curve_id} {e.total()}" for e in value)
        case _:
            return str(value)


def _outcomes(trade_id: str, row: CalculationRow) -> list[MeasureOutcome]:
    outcomes: list[MeasureOutcome] = []
    for measure, result in row.results.items():
        match result:
            case Ok(value):
                outcomes.append(MeasureOutcome(
                    trade_id=trade_id, measure=measure.name, success=True,
                    value=format_value(value),
                ))
            case Err(failure):
                outcomes.append(MeasureOutcome(
                    trade_id=trade_id, measure=measure.name, success=False,
                    reason=failure.reason.value, message=failure.message,
                ))
    return outcomes


def _invalid_outcomes(trade_id: str, names: Iterable[str]) -> list[MeasureOutcome]:
    outcomes: list[MeasureOutcome] = []
    for name in names:
        failure = unsupported_measure(name).error
        outcomes.append(MeasureOutcome(
            trade_id=trade_id, measure=name, success=False,
            reason=failure.reason.value, message=failure.message,
        ))
    return outcomes


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------


@final
class CalculationActivities:
    """Activities sharing one worker's trades, configuration and snapshots."""

    def __init__(
        self,
        trades: Mapping[str, Any],
        functions: CalculationFunctions,
        parameters: CalculationParameters,
        ref_data: ReferenceData,
        market_data_provider: MarketDataProvider,
    ) -> None:
        self._trades = dict(trades)
        self._functions = functions
        self._parameters = parameters
        self._ref_data = ref_data
        self._provider = market_data_provider
        self._snapshots: dict[str, ScenarioMarketData] = {}

    def _targets(self, request: CalculationRequest) -> list[tuple[str, Any]]:
        unknown = [t for t in request.trade_ids if t not in self._trades]
        if unknown:
            raise KeyError(f"Unknown trade ids: {', '.join(unknown)}")
        return [(t, self._trades[t]) for t in request.trade_ids]

    def _reporting_currency(self, request: CalculationRequest, target: Any) -> Currency | None:
        """Currency the target's results are reported in, or None for no conversion.

        Raises FailureError when the trade's natural currency cannot be determined.
        """
        if request.reporting_currency is not None:
            reporting = ReportingCurrency.of(Currency(request.reporting_currency))
        else:
            reporting = self._parameters.find_parameter(ReportingCurrency)
        fn = self._functions.find(target)
        if reporting is None or fn is None:
            return None
        return reporting.resolve(fn.natural_currency(target, self._ref_data))

    @activity.defn(name="discover_requirements")
    async def discover_requirements(self, request: CalculationRequest) -> RequirementsOutput:
        """Union of the market data requirements of every trade.

        Includes the FX rates converting each trade's output currencies into
        its reporting currency. A trade whose requirements cannot be
        determined contributes nothing; its failure is reported by the
        calculation step.
        Idempotent: yes (pure function of trades and configuration)
        """
        activity.logger.info("Discovering requirements for request %s", request.request_id)
        try:
            targets = self._targets(request)
        except KeyError as exc:
            return RequirementsOutput(error=str(exc.args[0]))
        measures, _ = _parse_measures(request.measures)
        curve_ids: set[CurveId] = set()
        fx_ids: set[FxRateId] = set()
        for trade_id, target in targets:
            try:
                reqs = requirements_for(
                    self._functions, [target], measures, self._parameters, self._ref_data,
                )
            except FailureError as exc:
                activity.logger.warning(
                    "No requirements for trade %s: %s", trade_id, exc.failure.message,
                )
                continue
            for req in reqs.value_requirements:
                match req:
                    case CurveId():
                        curve_ids.add(req)
                    case FxRateId():
                        fx_ids.add(req)
            try:
                reporting = self._reporting_currency(request, target)
            except FailureError as exc:
                activity.logger.warning("No natural currency: %s", exc.failure.message)
                continue
            if reporting is not None:
                fx_ids.update(
                    FxRateId.of(ccy, reporting) for ccy in reqs.output_currencies if ccy != reporting
                )
        return RequirementsOutput(
            curve_ids=tuple(str(c) for c in sorted(curve_ids)),
            fx_pairs=tuple(str(f.pair) for f in sorted(fx_ids)),
        )

    @activity.defn(name="provide_market_data")
    async def provide_market_data(self, inp: MarketDataInput) -> MarketDataOutput:
        """Build and hold the market data snapshot for a request.

        Missing ids are reported, not fatal: measures needing them fail
        individually.
        Idempotent: yes (snapshot id derived from request and date)
        """
        activity.logger.info("Providing market data for request %s", inp.request_id)
        try:
            ids: list[MarketDataId] = [
                *(parse_curve_id(c) for c in inp.curve_ids),
                *(parse_fx_rate_id(f) for f in inp.fx_pairs),
            ]
        except TypeError as exc:
            return MarketDataOutput(error=str(exc))
        market_data, missing = self._provider.provide(inp.valuation_date, ids)
        snapshot_id = f"{inp.request_id}@{inp.valuation_date.isoformat()}"
        self._snapshots[snapshot_id] = market_data
        if missing:
            activity.logger.warning(
                "Request %s is missing market data: %s",
                inp.request_id, ", ".join(str(m) for m in missing),
            )
        return MarketDataOutput(snapshot_id=snapshot_id, missing=tuple(str(m) for m in missing))

    @activity.defn(name="calculate_measures")
    async def calculate_measures(self, inp: CalculationInput) -> CalculationOutcome:
        """Calculate every measure of every trade against the snapshot.

        A requested name that cannot be a measure fails as an unsupported
        measure for each trade.
        Idempotent: yes (same snapshot and trades -> same outcomes)
        """
        request = inp.request
        activity.logger.info(
            "Calculating %d measures for %d trades (request %s)",
            len(request.measures), len(request.trade_ids), request.request_id,
        )
        market_data = self._snapshots.get(inp.snapshot_id)
        if market_data is None:
            return CalculationOutcome(
                request_id=request.request_id,
                error=f"Market data snapshot not found: {inp.snapshot_id}",
            )
        try:
            targets = self._targets(request)
        except KeyError as exc:
            return CalculationOutcome(request_id=request.request_id, error=str(exc.args[0]))

        measures, invalid = _parse_measures(request.measures)
        if invalid:
            activity.logger.warning("Request %s has invalid measure names: %s", request.request_id, invalid)
        rows = run_calculations(
            self._functions,
            [t for _, t in targets],
            measures,
            self._parameters,
            market_data,
            self._ref_data,
        )
        activity.heartbeat()

        outcomes: list[MeasureOutcome] = []
        for (trade_id, target), row in zip(targets, rows, strict=True):
            outcomes.extend(_outcomes(trade_id, self._report(request, target, row, market_data)))
            outcomes.extend(_invalid_outcomes(trade_id, invalid))
        return CalculationOutcome(request_id=request.request_id, outcomes=tuple(outcomes))

    def _report(
        self,
        request: CalculationRequest,
        target: Any,
        row: CalculationRow,
        market_data: ScenarioMarketData,
    ) -> CalculationRow:
        """Convert a row into the reporting currency, if one applies."""
        try:
            currency = self._reporting_currency(request, target)
        except FailureError as exc:
            activity.logger.warning("No natural currency: %s", exc.failure.message)
            return row
        if currency is None:
            return row
        return CalculationRow(target=target, results=convert_results(row.results, currency, market_data))
