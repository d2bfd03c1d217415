"""measura.product — trades, products and their resolved forms."""

from measura.product.bill import Bill as Bill
from measura.product.bill import BillTrade as BillTrade
from measura.product.bill import BillYieldConvention as BillYieldConvention
from measura.product.bill import ResolvedBill as ResolvedBill
from measura.product.bill import ResolvedBillTrade as ResolvedBillTrade
from measura.product.fx import FxIndex as FxIndex
from measura.product.fx import FxIndexObservation as FxIndexObservation
from measura.product.fx import FxIndices as FxIndices
from measura.product.fx import FxNdf as FxNdf
from measura.product.fx import FxNdfTrade as FxNdfTrade
from measura.product.fx import ResolvedFxNdf as ResolvedFxNdf
from measura.product.fx import ResolvedFxNdfTrade as ResolvedFxNdfTrade
from measura.product.trade import AdjustablePayment as AdjustablePayment
from measura.product.trade import Payment as Payment
from measura.product.trade import TradeInfo as TradeInfo
