"""Runtime configuration for the calculation runner and the Temporal worker.

Pure configuration data: frozen dataclasses with production defaults.
"""

from __future__ import annotations

import os
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from typing import final

from temporalio.common import RetryPolicy

# ---------------------------------------------------------------------------
# Calculation runner
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class RunnerConfig:
    """How measures of one trade are executed.

    parallel=False runs measures one after another; otherwise they are
    submitted to a thread pool of max_workers threads.
    """

    parallel: bool = False
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise TypeError(f"RunnerConfig.max_workers must be >= 1, got {self.max_workers}")

    def executor(self) -> Executor | None:
        """A new executor, or None for sequential execution. Caller shuts it down."""
        if not self.parallel:
            return None
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="measura-calc")


# ---------------------------------------------------------------------------
# Temporal
# ---------------------------------------------------------------------------

TASK_QUEUE: str = "measura-calculations"


@final
@dataclass(frozen=True, slots=True)
class TemporalConfig:
    """Connection, queue and activity policy for the calculation workflow."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = TASK_QUEUE
    requirements_timeout: timedelta = timedelta(seconds=30)
    market_data_timeout: timedelta = timedelta(minutes=2)
    calculation_timeout: timedelta = timedelta(minutes=10)
    heartbeat_timeout: timedelta = timedelta(seconds=30)
    max_attempts: int = 3
    initial_retry_interval: timedelta = timedelta(seconds=2)
    max_retry_interval: timedelta = timedelta(seconds=30)

    @staticmethod
    def from_env() -> TemporalConfig:
        """Read MEASURA_TEMPORAL_HOST / _NAMESPACE / _TASK_QUEUE, defaulting the rest."""
        return TemporalConfig(
            target_host=os.environ.get("MEASURA_TEMPORAL_HOST", "localhost:7233"),
            namespace=os.environ.get("MEASURA_TEMPORAL_NAMESPACE", "default"),
            task_queue=os.environ.get("MEASURA_TEMPORAL_TASK_QUEUE", TASK_QUEUE),
        )

    def retry_policy(self, *non_retryable: str) -> RetryPolicy:
        return RetryPolicy(
            initial_interval=self.initial_retry_interval,
            backoff_coefficient=2.0,
            maximum_interval=self.max_retry_interval,
            maximum_attempts=self.max_attempts,
            non_retryable_error_types=list(non_retryable),
        )
