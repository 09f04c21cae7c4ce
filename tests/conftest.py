# tests/conftest.py
"""Shared fixtures for crossdim tests."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest


def pytest_configure() -> None:
    # Ensure crossdim package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


def sum_init(record: dict) -> dict:
    return {"k": record["k"], "sum": 0}


def sum_add(point: dict, record: dict) -> None:
    point["sum"] += record["v"]


def sum_remove(point: dict, record: dict) -> None:
    point["sum"] -= record["v"]


@pytest.fixture
def records() -> list[dict[str, Any]]:
    """Three records: two in series A (same data point), one in series B."""
    return [
        {"g": "A", "k": 1, "v": 10},
        {"g": "A", "k": 1, "v": 20},
        {"g": "B", "k": 1, "v": 5},
    ]


@pytest.fixture
def make_dimension() -> Callable[..., Any]:
    """Factory for a sum-reducing dimension grouped by g (series) and k (data point)."""
    from crossdim import Dimension

    def _make(**options: Any) -> Dimension:
        params = dict(
            id="g",
            group_series=lambda r: r["g"],
            group_data=lambda r: r["k"],
            reduce_init=sum_init,
            reduce_add=sum_add,
            reduce_remove=sum_remove,
        )
        params.update(options)
        return Dimension(**params)

    return _make


class EventRecorder:
    """Counts events emitted by a dimension or crossfilter."""

    def __init__(self, emitter: Any, *events: str) -> None:
        self.calls: dict[str, list[tuple]] = {e: [] for e in events}
        for event in events:
            emitter.on(event, self._handler(event))

    def _handler(self, event: str) -> Callable[..., None]:
        def handler(*args: Any) -> None:
            self.calls[event].append(args)

        return handler

    def count(self, event: str) -> int:
        return len(self.calls[event])


@pytest.fixture
def recorder() -> type[EventRecorder]:
    return EventRecorder
