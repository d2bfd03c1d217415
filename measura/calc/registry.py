"""MeasureRegistry — static association of measures to calculation routines.

Built once (typically at module import) and never mutated. Alias pairs
(source, alias) declare measures whose value is the source's value exposed
under a second identifier; aliases have no routine of their own.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, final

from measura.calc.function import SingleMeasureCalculation
from measura.calc.measure import Measure


@final
@dataclass(frozen=True, slots=True)
class MeasureRegistry:
    """Immutable measure -> routine map plus static alias pairs."""

    calculators: Mapping[Measure, SingleMeasureCalculation[Any, Any]]
    aliases: tuple[tuple[Measure, Measure], ...] = ()

    def __post_init__(self) -> None:
        targets: set[Measure] = set()
        for source, alias in self.aliases:
            if source not in self.calculators:
                raise TypeError(f"MeasureRegistry: alias source {source} has no calculator")
            if alias in self.calculators:
                raise TypeError(f"MeasureRegistry: alias target {alias} also has a calculator")
            if alias in targets:
                raise TypeError(f"MeasureRegistry: alias target {alias} declared twice")
            targets.add(alias)

    @staticmethod
    def of(
        calculators: Mapping[Measure, SingleMeasureCalculation[Any, Any]],
        aliases: Iterable[tuple[Measure, Measure]] = (),
    ) -> MeasureRegistry:
        return MeasureRegistry(
            calculators=MappingProxyType(dict(calculators)),
            aliases=tuple(aliases),
        )

    def supported_measures(self) -> frozenset[Measure]:
        """Every measure that can be calculated, including alias-only measures."""
        return frozenset(self.calculators) | frozenset(alias for _, alias in self.aliases)

    def lookup(self, measure: Measure) -> SingleMeasureCalculation[Any, Any] | None:
        """Routine for measure, or None when not registered."""
        return self.calculators.get(measure)

    def alias_source(self, measure: Measure) -> Measure | None:
        """The source measure when measure is a declared alias."""
        for source, alias in self.aliases:
            if alias == measure:
                return source
        return None

    def alias_targets(self, measures: Iterable[Measure]) -> frozenset[Measure]:
        """Alias targets whose source is among measures."""
        requested = frozenset(measures)
        return frozenset(alias for source, alias in self.aliases if source in requested)
