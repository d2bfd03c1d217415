"""Workflow data types for the measure calculation workflow.

Activity inputs and outputs are flat frozen dataclasses of strings, dates
and tuples so that they survive the JSON data converter unchanged. Rich
domain values (trades, market data, results) stay inside the activities.

All types: @final @dataclass(frozen=True, slots=True).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import final

# ---------------------------------------------------------------------------
# Workflow input / output
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class CalculationRequest:
    """Which trades, which measures, which valuation date.

    The request_id serves as Temporal Workflow ID for natural idempotency.
    reporting_currency: ISO code, or None for each trade's natural currency.
    """

    request_id: str
    trade_ids: tuple[str, ...]
    measures: tuple[str, ...]
    valuation_date: date
    reporting_currency: str | None = None

    def __post_init__(self) -> None:
        if not self.request_id:
            raise TypeError("CalculationRequest.request_id must be non-empty")


@final
@dataclass(frozen=True, slots=True)
class MeasureOutcome:
    """Result of one measure for one trade, flattened for the wire.

    value: per-scenario values joined with '; ' when success is True.
    reason/message: the Failure when success is False.
    """

    trade_id: str
    measure: str
    success: bool
    value: str = ""
    reason: str = ""
    message: str = ""


@final
@dataclass(frozen=True, slots=True)
class CalculationOutcome:
    """Every measure outcome of a request, or the error that stopped it."""

    request_id: str
    outcomes: tuple[MeasureOutcome, ...] = ()
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and all(o.success for o in self.outcomes)


# ---------------------------------------------------------------------------
# Activity inputs / outputs
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class RequirementsOutput:
    """Market data ids the request needs, as strings.

    curve_ids: 'group/name'. fx_pairs: 'BASE/COUNTER'.
    """

    curve_ids: tuple[str, ...] = ()
    fx_pairs: tuple[str, ...] = ()
    error: str | None = None


@final
@dataclass(frozen=True, slots=True)
class MarketDataInput:
    request_id: str
    valuation_date: date
    curve_ids: tuple[str, ...]
    fx_pairs: tuple[str, ...]


@final
@dataclass(frozen=True, slots=True)
class MarketDataOutput:
    """Handle to a market data snapshot held by the activity worker."""

    snapshot_id: str = ""
    missing: tuple[str, ...] = ()
    error: str | None = None


@final
@dataclass(frozen=True, slots=True)
class CalculationInput:
    request: CalculationRequest
    snapshot_id: str
