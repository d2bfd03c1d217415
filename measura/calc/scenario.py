"""ScenarioArray — one calculated value per scenario."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import final


@final
@dataclass(frozen=True, slots=True)
class ScenarioArray[T]:
    """Immutable sequence of values indexed by scenario number."""

    values: tuple[T, ...]

    @staticmethod
    def of(values: Iterable[T]) -> ScenarioArray[T]:
        return ScenarioArray(values=tuple(values))

    @staticmethod
    def of_single_value(scenario_count: int, value: T) -> ScenarioArray[T]:
        if scenario_count < 0:
            raise TypeError(f"scenario_count must be >= 0, got {scenario_count}")
        return ScenarioArray(values=(value,) * scenario_count)

    @staticmethod
    def of_function(scenario_count: int, fn: Callable[[int], T]) -> ScenarioArray[T]:
        """Evaluate fn once per scenario index."""
        return ScenarioArray(values=tuple(fn(i) for i in range(scenario_count)))

    @property
    def scenario_count(self) -> int:
        return len(self.values)

    def get(self, scenario_index: int) -> T:
        if not 0 <= scenario_index < len(self.values):
            raise IndexError(
                f"Scenario index {scenario_index} out of range for {len(self.values)} scenarios"
            )
        return self.values[scenario_index]

    def map[U](self, f: Callable[[T], U]) -> ScenarioArray[U]:
        return ScenarioArray(values=tuple(f(v) for v in self.values))

    def combine_with[U, R](self, other: ScenarioArray[U], f: Callable[[T, U], R]) -> ScenarioArray[R]:
        """Pairwise combination; both arrays must have the same scenario count."""
        if other.scenario_count != self.scenario_count:
            raise TypeError(
                f"Scenario count mismatch: {self.scenario_count} vs {other.scenario_count}"
            )
        return ScenarioArray(values=tuple(f(a, b) for a, b in zip(self.values, other.values, strict=True)))

    def __iter__(self) -> Iterator[T]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)
