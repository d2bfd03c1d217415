"""Reference data: an immutable snapshot of static data keyed by typed ids.

Reference data (holiday calendars, security definitions, ...) is only read
while resolving trades. A lookup miss raises ReferenceDataNotFoundError,
which aborts the calculation of the trade being resolved.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol, final, runtime_checkable

from measura.core.errors import ReferenceDataNotFoundError


@runtime_checkable
class ReferenceDataId[T](Protocol):
    """Key into ReferenceData. Must be hashable."""

    @property
    def reference_data_type(self) -> type[T]: ...


@final
@dataclass(frozen=True, slots=True)
class ReferenceData:
    """Read-only key-value store of reference data."""

    _values: Mapping[ReferenceDataId[Any], Any]

    @staticmethod
    def of(values: Mapping[ReferenceDataId[Any], Any]) -> ReferenceData:
        """Create from a mapping; every value must match its id's type."""
        for key, value in values.items():
            expected = key.reference_data_type
            if not isinstance(value, expected):
                raise TypeError(
                    f"ReferenceData: value for '{key}' must be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
        return ReferenceData(_values=MappingProxyType(dict(values)))

    @staticmethod
    def empty() -> ReferenceData:
        return ReferenceData(_values=MappingProxyType({}))

    @staticmethod
    def standard() -> ReferenceData:
        """Weekend-only calendars for the common financial centres."""
        from measura.core.calendar import standard_calendars  # avoid circular

        return ReferenceData.of({cal.id: cal for cal in standard_calendars()})

    def contains(self, id: ReferenceDataId[Any]) -> bool:  # noqa: A002
        return id in self._values

    def find[T](self, id: ReferenceDataId[T]) -> T | None:  # noqa: A002
        """Return the value for id, or None if absent."""
        return self._values.get(id)

    def get[T](self, id: ReferenceDataId[T]) -> T:  # noqa: A002
        """Return the value for id. Raises ReferenceDataNotFoundError if absent."""
        value = self._values.get(id)
        if value is None:
            raise ReferenceDataNotFoundError(
                f"Reference data not found for '{id}' of type "
                f"'{id.reference_data_type.__name__}'"
            )
        return value

    def ids(self) -> frozenset[ReferenceDataId[Any]]:
        return frozenset(self._values)

    def combined_with(self, other: ReferenceData) -> ReferenceData:
        """Union of both snapshots; entries in self win on clash."""
        merged = {**other._values, **self._values}
        return ReferenceData(_values=MappingProxyType(merged))

    def __len__(self) -> int:
        return len(self._values)
