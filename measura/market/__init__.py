"""measura.market — discount curves and market data lookups."""

from measura.market.curve import DiscountCurve as DiscountCurve
from measura.market.legal_entity import DefaultLegalEntityDiscountingMarketDataLookup as DefaultLegalEntityDiscountingMarketDataLookup
from measura.market.legal_entity import LegalEntityDiscountingMarketDataLookup as LegalEntityDiscountingMarketDataLookup
from measura.market.legal_entity import LegalEntityDiscountingProvider as LegalEntityDiscountingProvider
from measura.market.rates import DefaultRatesMarketDataLookup as DefaultRatesMarketDataLookup
from measura.market.rates import RatesMarketDataLookup as RatesMarketDataLookup
from measura.market.rates import RatesProvider as RatesProvider
