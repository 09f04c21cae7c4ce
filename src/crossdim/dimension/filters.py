"""Filters and filter factories for cross-dimension filtering.

A Filter carries the id of the dimension it came from and a predicate over
records. A filter with ``predicate=None`` is tracked but excludes nothing.

Filter factories build a predicate from a selection and a value extractor:
``factory(selection, extractor) -> (record -> bool)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

Record = Any
Predicate = Callable[[Record], bool]
Extractor = Callable[[Record], Any]
FilterFactory = Callable[[Sequence[Any], Extractor], Predicate]


@dataclass(frozen=True)
class Filter:
    """Origin-tagged predicate.

    Attributes:
        id: Id of the dimension that produced this filter.
        predicate: Record -> bool, or None meaning "no active constraint".
    """
    id: str
    predicate: Optional[Predicate] = None

    @property
    def active(self) -> bool:
        return self.predicate is not None

    def matches(self, record: Record) -> bool:
        """True if the record passes (always True for an inactive filter)."""
        if self.predicate is None:
            return True
        return bool(self.predicate(record))


def _membership(selection: Iterable[Any]) -> Callable[[Any], bool]:
    """``value in selection`` by Python equality; unhashable values use a list scan."""
    values = list(selection)
    try:
        selected = set(values)
    except TypeError:
        return lambda value: value in values

    def contains(value: Any) -> bool:
        try:
            return value in selected
        except TypeError:
            return value in values

    return contains


def any_selection_matches_value(selection: Sequence[Any], extractor: Extractor) -> Predicate:
    """Pass records whose extracted value equals any selected value.

    Equality is Python's, so ``1``, ``1.0`` and ``np.int64(1)`` all match a
    selected ``1`` while ``"1"`` does not.
    """
    contains = _membership(selection)

    def predicate(record: Record) -> bool:
        return contains(extractor(record))

    return predicate


def any_selection_matches_text(selection: Sequence[Any], extractor: Extractor) -> Predicate:
    """Pass records whose extracted value matches any selected value as text.

    UI selections usually arrive as strings; comparing ``str()`` forms lets a
    selected ``"2"`` match a numeric ``2``.
    """
    selected = {str(v) for v in selection}

    def predicate(record: Record) -> bool:
        return str(extractor(record)) in selected

    return predicate


def any_value_in_selection(selection: Sequence[Any], extractor: Extractor) -> Predicate:
    """Pass records where any of the extracted values (an iterable) is selected."""
    contains = _membership(selection)

    def predicate(record: Record) -> bool:
        values: Iterable[Any] = extractor(record) or ()
        return any(contains(v) for v in values)

    return predicate


def value_in_range(selection: Sequence[Any], extractor: Extractor) -> Predicate:
    """Pass records whose extracted value lies in ``[low, high]`` (inclusive).

    Raises:
        ValueError: If selection is not exactly two bounds.
    """
    if len(selection) != 2:
        raise ValueError(f"value_in_range expects [low, high], got {list(selection)!r}")
    low, high = min(selection), max(selection)

    def predicate(record: Record) -> bool:
        value = extractor(record)
        if value is None:
            return False
        return low <= value <= high

    return predicate


def same_selection(a: Iterable[Any], b: Iterable[Any]) -> bool:
    """Order-independent selection equality, using Python equality between values."""
    a = list(a)
    b = list(b)
    if len(a) != len(b):
        return False
    in_a = _membership(a)
    in_b = _membership(b)
    return all(in_b(v) for v in a) and all(in_a(v) for v in b)
