"""measura.functions — calculation functions per trade type."""

from measura.functions.bill import BillTradeCalculationFunction as BillTradeCalculationFunction
from measura.functions.fx_ndf import FxNdfCalculationFunction as FxNdfCalculationFunction
from measura.functions.standard import standard_functions as standard_functions
