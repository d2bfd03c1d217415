"""Durable workflow sequencing one calculation request.

Steps: discover requirements -> provide market data -> calculate.

Determinism contract: this module contains NO I/O, NO randomness,
NO system clock access. All external interaction is delegated to
Activities.
"""

from __future__ import annotations

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from measura.infra.config import TemporalConfig
    from measura.workflow.activities import CalculationActivities
    from measura.workflow.types import (
        CalculationInput,
        CalculationOutcome,
        CalculationRequest,
        MarketDataInput,
    )

_CONFIG = TemporalConfig()

# Requirements discovery is a pure function of configuration: no retry.
REQUIREMENTS_RETRY = RetryPolicy(maximum_attempts=1)
MARKET_DATA_RETRY = _CONFIG.retry_policy()
CALCULATION_RETRY = _CONFIG.retry_policy("KeyError", "TypeError")


@workflow.defn(name="MeasureCalculation")
class MeasureCalculationWorkflow:
    """Calculates the requested measures for a set of trades.

    Invariants maintained:
    - Market data is provided only after requirements are known
    - Calculation starts only after market data is provided
    - Every request reaches exactly one CalculationOutcome
    """

    def __init__(self) -> None:
        self._status: str = "RECEIVED"

    @workflow.query
    def get_status(self) -> str:
        """Current workflow phase."""
        return self._status

    @workflow.run
    async def run(self, request: CalculationRequest) -> CalculationOutcome:
        self._status = "REQUIREMENTS"
        requirements = await workflow.execute_activity_method(
            CalculationActivities.discover_requirements,
            request,
            start_to_close_timeout=_CONFIG.requirements_timeout,
            retry_policy=REQUIREMENTS_RETRY,
        )
        if requirements.error is not None:
            self._status = "FAILED"
            return CalculationOutcome(request_id=request.request_id, error=requirements.error)

        self._status = "MARKET_DATA"
        market_data = await workflow.execute_activity_method(
            CalculationActivities.provide_market_data,
            MarketDataInput(
                request_id=request.request_id,
                valuation_date=request.valuation_date,
                curve_ids=requirements.curve_ids,
                fx_pairs=requirements.fx_pairs,
            ),
            start_to_close_timeout=_CONFIG.market_data_timeout,
            retry_policy=MARKET_DATA_RETRY,
        )
        if market_data.error is not None:
            self._status = "FAILED"
            return CalculationOutcome(request_id=request.request_id, error=market_data.error)

        self._status = "CALCULATING"
        outcome = await workflow.execute_activity_method(
            CalculationActivities.calculate_measures,
            CalculationInput(request=request, snapshot_id=market_data.snapshot_id),
            start_to_close_timeout=_CONFIG.calculation_timeout,
            heartbeat_timeout=_CONFIG.heartbeat_timeout,
            retry_policy=CALCULATION_RETRY,
        )
        self._status = "COMPLETED" if outcome.error is None else "FAILED"
        return outcome
