"""Two linked dimensions over a small sales table.

Run:
    python examples/crossfilter_demo.py
"""

from __future__ import annotations

import pandas as pd

from crossdim import Crossfilter, Dimension
from crossdim.reporting import series_stats_frame, summarize, to_frame
from crossdim.utils.logging import configure_logging

configure_logging(level="INFO")

df = pd.DataFrame(
    {
        "region": ["north", "north", "south", "south", "east", "north"],
        "month": [1, 2, 1, 2, 1, 3],
        "amount": [120.0, 80.0, 200.0, 50.0, 75.0, 30.0],
    }
)


def init(r: dict) -> dict:
    return {"month": r["month"], "region": r["region"], "total": 0.0}


def add(p: dict, r: dict) -> None:
    p["total"] += r["amount"]


def remove(p: dict, r: dict) -> None:
    p["total"] -= r["amount"]


by_region = Dimension(
    id="region",
    group_series=lambda r: r["region"],
    group_data=lambda r: r["month"],
    reduce_init=init,
    reduce_add=add,
    reduce_remove=remove,
    sort_key="month",
    post_process=summarize("total"),
    verbose=True,
)
by_month = Dimension(
    id="month",
    group_series=lambda r: r["month"],
    group_data=lambda r: r["region"],
    reduce_init=init,
    reduce_add=add,
    reduce_remove=remove,
)

by_region.add_frame(df)
by_month.add_frame(df)

cf = Crossfilter([by_region, by_month])
cf.on("change", lambda: print("-- crossfilter changed"))

print(to_frame(by_month.get_data()))

by_region.select(["north"])
print(to_frame(by_month.get_data(), include_hidden=False))

by_month.select([1])
print(series_stats_frame(by_region.get_data(), "total"))

cf.clear_selections()
print(to_frame(by_month.get_data()))
