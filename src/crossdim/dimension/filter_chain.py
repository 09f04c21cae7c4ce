"""Ordered chain of filters applied to a dimension (logical AND).

Order only affects short-circuit cost, never the result. Filters without a
predicate are kept in the chain (so ``has`` reports them) but pass everything.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from crossdim.dimension.filters import Filter


class FilterChain:
    """Filters keyed by origin id, in application order."""

    def __init__(self) -> None:
        self._filters: list[Filter] = []

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[Filter]:
        return iter(self._filters)

    def __repr__(self) -> str:
        return f"FilterChain({self.ids()!r})"

    def ids(self) -> list[str]:
        return [f.id for f in self._filters]

    def add(self, flt: Filter) -> None:
        self._filters.append(flt)

    def find(self, filter_id: str) -> Optional[Filter]:
        for f in self._filters:
            if f.id == filter_id:
                return f
        return None

    def has(self, filter_id: str) -> bool:
        return self.find(filter_id) is not None

    def remove(self, filter_id: str) -> Optional[Filter]:
        """Remove the first filter with filter_id and return it (None if absent)."""
        for i, f in enumerate(self._filters):
            if f.id == filter_id:
                return self._filters.pop(i)
        return None

    def clear(self) -> None:
        self._filters = []

    def matches(self, record: Any) -> bool:
        """True if every filter accepts the record."""
        for f in self._filters:
            if not f.matches(record):
                return False
        return True
