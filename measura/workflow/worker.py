"""Worker for the measure calculation workflow.

Usage::

    import asyncio
    from measura.workflow.worker import run_worker

    asyncio.run(run_worker(trades, parameters, ref_data, provider))
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from temporalio.client import Client
from temporalio.worker import Worker

from measura.calc.parameters import CalculationParameters
from measura.core.reference_data import ReferenceData
from measura.functions.standard import standard_functions
from measura.infra.config import RunnerConfig, TemporalConfig
from measura.workflow.activities import CalculationActivities, MarketDataProvider
from measura.workflow.calculation_workflow import MeasureCalculationWorkflow
from measura.workflow.converter import MEASURA_DATA_CONVERTER


def build_worker(client: Client, activities: CalculationActivities, task_queue: str) -> Worker:
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[MeasureCalculationWorkflow],
        activities=[
            activities.discover_requirements,
            activities.provide_market_data,
            activities.calculate_measures,
        ],
    )


async def run_worker(
    trades: Mapping[str, Any],
    parameters: CalculationParameters,
    ref_data: ReferenceData,
    market_data_provider: MarketDataProvider,
    config: TemporalConfig | None = None,
    runner: RunnerConfig | None = None,
) -> None:
    """Connect to Temporal and run the standard functions until interrupted.

    The runner's thread pool, if any, lives as long as the worker and is
    shut down when it stops.
    """
    cfg = config or TemporalConfig.from_env()
    executor = (runner or RunnerConfig()).executor()
    try:
        activities = CalculationActivities(
            trades=trades,
            functions=standard_functions(executor),
            parameters=parameters,
            ref_data=ref_data,
            market_data_provider=market_data_provider,
        )
        client = await Client.connect(
            cfg.target_host, namespace=cfg.namespace,
            data_converter=MEASURA_DATA_CONVERTER,
        )
        await build_worker(client, activities, cfg.task_queue).run()
    finally:
        if executor is not None:
            executor.shutdown(cancel_futures=True)
