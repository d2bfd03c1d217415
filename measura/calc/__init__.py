"""measura.calc — measures, parameters, market data and the calculation runner."""

from measura.calc.conversion import convert_results as convert_results
from measura.calc.function import CalculationFunction as CalculationFunction
from measura.calc.function import SingleMeasureCalculation as SingleMeasureCalculation
from measura.calc.function import duplicate_result as duplicate_result
from measura.calc.market_data import CurveId as CurveId
from measura.calc.market_data import FxRateId as FxRateId
from measura.calc.market_data import ImmutableScenarioMarketData as ImmutableScenarioMarketData
from measura.calc.market_data import IndexId as IndexId
from measura.calc.market_data import MarketData as MarketData
from measura.calc.market_data import ScenarioMarketData as ScenarioMarketData
from measura.calc.market_data import ScenarioValues as ScenarioValues
from measura.calc.measure import Measure as Measure
from measura.calc.measure import Measures as Measures
from measura.calc.parameters import CalculationParameters as CalculationParameters
from measura.calc.parameters import ReportingCurrency as ReportingCurrency
from measura.calc.registry import MeasureRegistry as MeasureRegistry
from measura.calc.requirements import FunctionRequirements as FunctionRequirements
from measura.calc.runner import CalculationFunctions as CalculationFunctions
from measura.calc.runner import CalculationRow as CalculationRow
from measura.calc.runner import MeasureCalculationFunction as MeasureCalculationFunction
from measura.calc.runner import calculate_measures as calculate_measures
from measura.calc.runner import requirements_for as requirements_for
from measura.calc.runner import run_calculations as run_calculations
from measura.calc.scenario import ScenarioArray as ScenarioArray
