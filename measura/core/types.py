"""FrozenMap — the immutable mapping behind curve tables, FX overrides and amounts.

Money types live in core/money.py, calendars and tenors in core/calendar.py.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, final

from measura.core.result import Err, Ok, unwrap


@final
@dataclass(frozen=True, slots=True)
class FrozenMap[K, V]:
    """Hashable mapping stored as key-sorted (key, value) pairs.

    Two maps built from the same entries in any order are equal and hash
    alike, which keeps value objects holding them (MultiCurrencyAmount,
    rates lookups) usable as dict keys and stable across workflow replays.
    """

    _entries: tuple[tuple[K, V], ...]

    EMPTY: ClassVar[FrozenMap[Any, Any]]  # Assigned after class definition

    @staticmethod
    def create(items: dict[K, V] | Iterable[tuple[K, V]]) -> Ok[FrozenMap[K, V]] | Err[str]:
        """Build from a dict or pairs; later duplicates win. Err if keys do not order."""
        d = items if isinstance(items, dict) else dict(items)
        try:
            entries = tuple(sorted(d.items(), key=lambda kv: kv[0]))
        except TypeError as e:
            return Err(f"FrozenMap keys must be comparable: {e}")
        return Ok(FrozenMap(_entries=entries))

    @staticmethod
    def of(items: dict[K, V] | Iterable[tuple[K, V]]) -> FrozenMap[K, V]:
        return unwrap(FrozenMap.create(items))

    def _index(self, key: object) -> int:
        keys = self.keys()
        try:
            i = bisect_left(keys, key)
        except TypeError:
            return -1
        return i if i < len(keys) and keys[i] == key else -1

    def get(self, key: K, default: V | None = None) -> V | None:
        i = self._index(key)
        return self._entries[i][1] if i >= 0 else default

    def __getitem__(self, key: K) -> V:
        i = self._index(key)
        if i < 0:
            raise KeyError(key)
        return self._entries[i][1]

    def __contains__(self, key: object) -> bool:
        return self._index(key) >= 0

    def __iter__(self) -> Iterator[K]:
        return (k for k, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> tuple[K, ...]:
        return tuple(k for k, _ in self._entries)

    def values(self) -> tuple[V, ...]:
        return tuple(v for _, v in self._entries)

    def items(self) -> tuple[tuple[K, V], ...]:
        return self._entries

    def to_dict(self) -> dict[K, V]:
        return dict(self._entries)


FrozenMap.EMPTY = FrozenMap(_entries=())
