"""Tests for measura.infra.config and the standard function set."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Any

import pytest
from temporalio.client import Client

from measura.calc.parameters import CalculationParameters
from measura.core.reference_data import ReferenceData
from measura.functions.bill import BillTradeCalculationFunction
from measura.functions.fx_ndf import FxNdfCalculationFunction
from measura.functions.standard import standard_functions
from measura.infra.config import TASK_QUEUE, RunnerConfig, TemporalConfig
from measura.product.bill import BillTrade
from measura.product.fx import FxNdfTrade
from measura.workflow.activities import InMemoryMarketDataProvider
from measura.workflow.worker import run_worker


class TestRunnerConfig:
    def test_sequential_by_default(self) -> None:
        assert RunnerConfig().executor() is None

    def test_parallel_executor(self) -> None:
        executor = RunnerConfig(parallel=True, max_workers=2).executor()
        try:
            assert isinstance(executor, ThreadPoolExecutor)
        finally:
            assert executor is not None
            executor.shutdown()

    def test_max_workers_positive(self) -> None:
        with pytest.raises(TypeError):
            RunnerConfig(max_workers=0)


class TestStandardFunctions:
    def test_one_function_per_trade_type(self) -> None:
        functions = standard_functions()
        assert isinstance(functions.functions[FxNdfTrade], FxNdfCalculationFunction)
        assert isinstance(functions.functions[BillTrade], BillTradeCalculationFunction)

    def test_executor_left_open_for_caller(self) -> None:
        with ThreadPoolExecutor(max_workers=2) as pool:
            standard_functions(pool)
            assert pool.submit(lambda: 1).result() == 1


class TestRunWorker:
    @pytest.mark.asyncio
    async def test_executor_shut_down_when_worker_stops(
        self, monkeypatch: pytest.MonkeyPatch, ref_data: ReferenceData,
    ) -> None:
        pool = ThreadPoolExecutor(max_workers=1)
        monkeypatch.setattr(RunnerConfig, "executor", lambda self: pool)

        async def refuse(*args: Any, **kwargs: Any) -> Client:
            raise ConnectionError("no server")

        monkeypatch.setattr(Client, "connect", refuse)
        with pytest.raises(ConnectionError):
            await run_worker(
                {}, CalculationParameters.EMPTY, ref_data, InMemoryMarketDataProvider({}),
                config=TemporalConfig(), runner=RunnerConfig(parallel=True),
            )
        with pytest.raises(RuntimeError):
            pool.submit(lambda: 1)


class TestTemporalConfig:
    def test_defaults(self) -> None:
        cfg = TemporalConfig()
        assert cfg.target_host == "localhost:7233"
        assert cfg.task_queue == TASK_QUEUE
        assert cfg.calculation_timeout == timedelta(minutes=10)

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MEASURA_TEMPORAL_HOST", "temporal:7233")
        monkeypatch.setenv("MEASURA_TEMPORAL_NAMESPACE", "risk")
        monkeypatch.delenv("MEASURA_TEMPORAL_TASK_QUEUE", raising=False)
        cfg = TemporalConfig.from_env()
        assert cfg.target_host == "temporal:7233"
        assert cfg.namespace == "risk"
        assert cfg.task_queue == TASK_QUEUE

    def test_retry_policy(self) -> None:
        policy = TemporalConfig(max_attempts=5).retry_policy("KeyError")
        assert policy.maximum_attempts == 5
        assert policy.backoff_coefficient == 2.0
        assert policy.initial_interval == timedelta(seconds=2)
        assert policy.non_retryable_error_types == ["KeyError"]
