"""Legal-entity discounting: issuer and repo curves per (entity, currency).

Used for bonds and bills, whose cash flows are discounted on the issuer
curve and whose settlement is discounted on the repo curve.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol, final, runtime_checkable

from measura.calc.market_data import CurveId, MarketData, ScenarioMarketData
from measura.calc.requirements import FunctionRequirements
from measura.core.errors import Failure, FailureError, FailureReason
from measura.core.identifiers import StandardId
from measura.core.money import Currency
from measura.core.types import FrozenMap
from measura.market.curve import DiscountCurve
from measura.market.rates import read_curve

type EntityKey = tuple[StandardId, Currency]


@runtime_checkable
class LegalEntityDiscountingMarketDataLookup(Protocol):
    """Calculation parameter describing where issuer and repo curves are found."""

    @property
    def query_type(self) -> type[LegalEntityDiscountingMarketDataLookup]: ...

    def requirements(self, legal_entity_id: StandardId, currency: Currency) -> FunctionRequirements: ...

    def market_data_view(self, market_data: ScenarioMarketData) -> LegalEntityScenarioMarketData: ...


def _missing(kind: str, legal_entity_id: StandardId, currency: Currency) -> FailureError:
    return FailureError(Failure.of(
        FailureReason.INVALID_INPUT,
        "Legal entity lookup has no {} curve configured for '{}' in {}",
        kind,
        legal_entity_id,
        currency,
    ))


@final
@dataclass(frozen=True, slots=True)
class DefaultLegalEntityDiscountingMarketDataLookup:
    """Issuer and repo curve ids keyed by (legal entity id, currency)."""

    issuer_curves: FrozenMap[EntityKey, CurveId]
    repo_curves: FrozenMap[EntityKey, CurveId]

    @staticmethod
    def of(
        issuer_curves: Mapping[EntityKey, CurveId],
        repo_curves: Mapping[EntityKey, CurveId],
    ) -> DefaultLegalEntityDiscountingMarketDataLookup:
        return DefaultLegalEntityDiscountingMarketDataLookup(
            issuer_curves=FrozenMap.of(dict(issuer_curves)),
            repo_curves=FrozenMap.of(dict(repo_curves)),
        )

    @property
    def query_type(self) -> type[LegalEntityDiscountingMarketDataLookup]:
        return LegalEntityDiscountingMarketDataLookup

    def issuer_curve_id(self, legal_entity_id: StandardId, currency: Currency) -> CurveId:
        curve_id = self.issuer_curves.get((legal_entity_id, currency))
        if curve_id is None:
            raise _missing("issuer", legal_entity_id, currency)
        return curve_id

    def repo_curve_id(self, legal_entity_id: StandardId, currency: Currency) -> CurveId:
        curve_id = self.repo_curves.get((legal_entity_id, currency))
        if curve_id is None:
            raise _missing("repo", legal_entity_id, currency)
        return curve_id

    def requirements(self, legal_entity_id: StandardId, currency: Currency) -> FunctionRequirements:
        return FunctionRequirements.of(
            value_requirements=[
                self.issuer_curve_id(legal_entity_id, currency),
                self.repo_curve_id(legal_entity_id, currency),
            ],
            output_currencies=[currency],
        )

    def market_data_view(self, market_data: ScenarioMarketData) -> LegalEntityScenarioMarketData:
        return LegalEntityScenarioMarketData(lookup=self, market_data=market_data)


@final
@dataclass(frozen=True, slots=True)
class LegalEntityScenarioMarketData:
    """Scenario market data seen through a legal-entity lookup."""

    lookup: DefaultLegalEntityDiscountingMarketDataLookup
    market_data: ScenarioMarketData

    @property
    def scenario_count(self) -> int:
        return self.market_data.scenario_count

    def scenario(self, scenario_index: int) -> LegalEntityDiscountingProvider:
        return LegalEntityDiscountingProvider(
            lookup=self.lookup, market_data=self.market_data.scenario(scenario_index),
        )


@final
@dataclass(frozen=True, slots=True)
class LegalEntityDiscountingProvider:
    """Issuer and repo curves for a single scenario."""

    lookup: DefaultLegalEntityDiscountingMarketDataLookup
    market_data: MarketData
    overrides: FrozenMap[CurveId, DiscountCurve] = field(default=FrozenMap.EMPTY)

    @property
    def valuation_date(self) -> date:
        return self.market_data.valuation_date

    def curve(self, curve_id: CurveId) -> DiscountCurve:
        return read_curve(self.market_data, self.overrides, curve_id)

    def issuer_curve(self, legal_entity_id: StandardId, currency: Currency) -> DiscountCurve:
        return self.curve(self.lookup.issuer_curve_id(legal_entity_id, currency))

    def repo_curve(self, legal_entity_id: StandardId, currency: Currency) -> DiscountCurve:
        return self.curve(self.lookup.repo_curve_id(legal_entity_id, currency))

    def with_curve(self, curve: DiscountCurve) -> LegalEntityDiscountingProvider:
        merged = {**self.overrides.to_dict(), curve.curve_id: curve}
        return replace(self, overrides=FrozenMap.of(merged))
