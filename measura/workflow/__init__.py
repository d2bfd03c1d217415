"""measura.workflow — Temporal.io measure calculation workflow."""

from measura.workflow.types import CalculationInput as CalculationInput
from measura.workflow.types import CalculationOutcome as CalculationOutcome
from measura.workflow.types import CalculationRequest as CalculationRequest
from measura.workflow.types import MarketDataInput as MarketDataInput
from measura.workflow.types import MarketDataOutput as MarketDataOutput
from measura.workflow.types import MeasureOutcome as MeasureOutcome
from measura.workflow.types import RequirementsOutput as RequirementsOutput
