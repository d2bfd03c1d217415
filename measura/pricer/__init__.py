"""measura.pricer — discounting pricers and curve sensitivities."""

from measura.pricer.bill import DiscountingBillProductPricer as DiscountingBillProductPricer
from measura.pricer.bill import DiscountingBillTradePricer as DiscountingBillTradePricer
from measura.pricer.fx_ndf import DiscountingFxNdfProductPricer as DiscountingFxNdfProductPricer
from measura.pricer.sensitivity import CurveSensitivities as CurveSensitivities
from measura.pricer.sensitivity import CurveSensitivity as CurveSensitivity
from measura.pricer.sensitivity import curve_sensitivities as curve_sensitivities
from measura.pricer.sensitivity import pv01 as pv01
