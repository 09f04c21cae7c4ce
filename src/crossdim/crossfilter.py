"""Coordinator linking the selections of several dimensions.

Crossfilter holds dimensions by id. When one dimension's selection changes,
its exported filter is applied to every OTHER dimension (replace_filter for
an active filter, remove_filter when the selection was cleared), then a single
``"change"`` event is emitted by the coordinator. A dimension is never
filtered by its own selection.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Optional

from crossdim.utils.logging import get_logger
from crossdim.dimension.dimension import Dimension
from crossdim.dimension.events import EventEmitter
from crossdim.dimension.filters import Filter

logger = get_logger(__name__)


class Crossfilter(EventEmitter):
    """Group of dimensions with linked selection.

    Usage:
        cf = Crossfilter([by_region, by_month])
        by_region.select(["north"])      # by_month is now filtered to north
        cf.on("change", redraw)
    """

    def __init__(self, dimensions: Optional[Iterable[Dimension]] = None) -> None:
        super().__init__()
        self._dimensions: dict[Any, Dimension] = {}
        self._listeners: dict[Any, Callable[[Filter], None]] = {}
        for dim in dimensions or ():
            self.add_dimension(dim)

    def __len__(self) -> int:
        return len(self._dimensions)

    def __iter__(self) -> Iterator[Dimension]:
        return iter(list(self._dimensions.values()))

    def __contains__(self, dim_id: object) -> bool:
        return dim_id in self._dimensions

    def __getitem__(self, dim_id: Any) -> Dimension:
        return self._dimensions[dim_id]

    def get(self, dim_id: Any) -> Optional[Dimension]:
        return self._dimensions.get(dim_id)

    def add_dimension(self, dim: Dimension) -> Dimension:
        """Link dim to the group.

        dim receives every active filter already exported by the group, and
        its own active selection (if any) is applied to the group.

        Raises:
            ValueError: If a dimension with the same id is already linked.
        """
        if dim.id in self._dimensions:
            raise ValueError(f"Dimension id {dim.id!r} is already in this crossfilter")

        for other in self._dimensions.values():
            flt = other.get_filter()
            if flt is not None and flt.active:
                dim.replace_filter(flt)

        self._dimensions[dim.id] = dim

        def _on_selection(flt: Filter, source: Dimension = dim) -> None:
            self._propagate(source, flt)

        self._listeners[dim.id] = _on_selection
        dim.on("selection", _on_selection)

        own = dim.get_filter()
        if own is not None and own.active:
            self._propagate(dim, own)
        logger.debug("Crossfilter added dimension %r (%s total)", dim.id, len(self._dimensions))
        return dim

    def remove_dimension(self, dim_id: Any) -> Dimension:
        """Unlink a dimension and drop its filter from the others.

        Raises:
            KeyError: If no dimension has dim_id.
        """
        dim = self._dimensions.pop(dim_id)
        dim.off("selection", self._listeners.pop(dim_id))
        for other in self._dimensions.values():
            other.remove_filter(dim_id)
        logger.debug("Crossfilter removed dimension %r", dim_id)
        self.emit("change")
        return dim

    def clear_selections(self) -> None:
        for dim in list(self._dimensions.values()):
            dim.clear_selection()

    def _propagate(self, source: Dimension, flt: Filter) -> None:
        targets = [d for d in self._dimensions.values() if d is not source]
        for dim in targets:
            if flt.active:
                dim.replace_filter(flt)
            else:
                dim.remove_filter(flt)
        logger.info(
            "Selection on dimension %r: %s, applied to %s dimension(s)",
            source.id,
            "active" if flt.active else "cleared",
            len(targets),
        )
        self.emit("change")
