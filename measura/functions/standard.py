"""The calculation functions shipped with measura."""

from __future__ import annotations

from concurrent.futures import Executor

from measura.calc.runner import CalculationFunctions
from measura.functions.bill import BillTradeCalculationFunction
from measura.functions.fx_ndf import FxNdfCalculationFunction


def standard_functions(executor: Executor | None = None) -> CalculationFunctions:
    """NDF and bill functions sharing one executor, which stays owned by the caller."""
    return CalculationFunctions.of(
        FxNdfCalculationFunction(executor),
        BillTradeCalculationFunction(executor),
    )
