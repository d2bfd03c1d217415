"""FunctionRequirements — market data a calculation will read.

Produced before any market data exists; aggregated by union. Declaring
less than a routine reads is a correctness bug: the scoped market data view
refuses undeclared ids.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar, final

from measura.calc.market_data import MarketDataId, ObservableId
from measura.core.money import Currency


@final
@dataclass(frozen=True, slots=True)
class FunctionRequirements:
    """Value ids, time-series ids and output currencies a calculation needs."""

    value_requirements: frozenset[MarketDataId] = frozenset()
    time_series_requirements: frozenset[ObservableId] = frozenset()
    output_currencies: frozenset[Currency] = frozenset()

    EMPTY: ClassVar[FunctionRequirements]  # Assigned after class definition

    @staticmethod
    def of(
        value_requirements: Iterable[MarketDataId] = (),
        time_series_requirements: Iterable[ObservableId] = (),
        output_currencies: Iterable[Currency] = (),
    ) -> FunctionRequirements:
        return FunctionRequirements(
            value_requirements=frozenset(value_requirements),
            time_series_requirements=frozenset(time_series_requirements),
            output_currencies=frozenset(output_currencies),
        )

    def combined_with(self, other: FunctionRequirements) -> FunctionRequirements:
        """Union of both requirement sets."""
        return FunctionRequirements(
            value_requirements=self.value_requirements | other.value_requirements,
            time_series_requirements=self.time_series_requirements | other.time_series_requirements,
            output_currencies=self.output_currencies | other.output_currencies,
        )

    def is_empty(self) -> bool:
        return not (self.value_requirements or self.time_series_requirements or self.output_currencies)

    def contains_all(self, other: FunctionRequirements) -> bool:
        """True when every requirement of other is also declared here."""
        return (
            other.value_requirements <= self.value_requirements
            and other.time_series_requirements <= self.time_series_requirements
            and other.output_currencies <= self.output_currencies
        )


FunctionRequirements.EMPTY = FunctionRequirements()
