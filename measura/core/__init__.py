"""measura.core — public API for all core types."""

from measura.core.errors import CalculationCancelledError as CalculationCancelledError
from measura.core.errors import CurrencyConversionError as CurrencyConversionError
from measura.core.errors import Failure as Failure
from measura.core.errors import FailureError as FailureError
from measura.core.errors import FailureReason as FailureReason
from measura.core.errors import MarketDataNotFoundError as MarketDataNotFoundError
from measura.core.errors import MissingParameterError as MissingParameterError
from measura.core.errors import ReferenceDataNotFoundError as ReferenceDataNotFoundError
from measura.core.identifiers import StandardId as StandardId
from measura.core.money import MEASURA_DECIMAL_CONTEXT as MEASURA_DECIMAL_CONTEXT
from measura.core.money import Currency as Currency
from measura.core.money import CurrencyAmount as CurrencyAmount
from measura.core.money import CurrencyPair as CurrencyPair
from measura.core.money import FxRate as FxRate
from measura.core.money import MultiCurrencyAmount as MultiCurrencyAmount
from measura.core.reference_data import ReferenceData as ReferenceData
from measura.core.reference_data import ReferenceDataId as ReferenceDataId
from measura.core.result import CalcResult as CalcResult
from measura.core.result import Err as Err
from measura.core.result import Ok as Ok
from measura.core.result import Result as Result
from measura.core.result import map_result as map_result
from measura.core.result import result_of as result_of
from measura.core.result import sequence as sequence
from measura.core.result import unwrap as unwrap
from measura.core.types import FrozenMap as FrozenMap
