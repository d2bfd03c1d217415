"""measura.infra — runtime configuration."""

from measura.infra.config import RunnerConfig as RunnerConfig
from measura.infra.config import TemporalConfig as TemporalConfig
