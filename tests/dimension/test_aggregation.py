"""Unit tests for grouping and reducing records into series and data points."""

from collections import Counter
from decimal import Decimal

import pandas as pd
import pytest

from crossdim import ConfigurationError


def test_add_many_groups_and_reduces(make_dimension, records):
    """Series A has one data point summing both A records; series B has one."""
    dim = make_dimension()
    dim.add_many(records)

    assert dim.find_data_point("A", 1) == {"k": 1, "sum": 30, "count": 2}
    assert dim.find_data_point("B", 1) == {"k": 1, "sum": 5, "count": 1}

    a = dim.find_series("A")
    assert a["count"] == 2
    assert a["name"] == "A"
    assert a["visible"] is True
    assert a["data_points"] == [{"k": 1, "sum": 30, "count": 2}]


def test_counts_match_record_distribution(make_dimension):
    """series.count and data point counts equal the number of records mapping to them."""
    data = [{"g": g, "k": k, "v": 1} for g in "ABC" for k in range(4) for _ in range(k + 1)]
    dim = make_dimension(data=data)

    expected_series = Counter(r["g"] for r in data)
    expected_points = Counter((r["g"], r["k"]) for r in data)
    for series in dim.get_data():
        assert series["count"] == expected_series[series["name"]]
        assert series["count"] == sum(p["count"] for p in series["data_points"])
        for point in series["data_points"]:
            assert point["count"] == expected_points[(series["name"], point["k"])]


def test_initial_data_added_at_construction(make_dimension, records):
    dim = make_dimension(data=records)
    assert len(dim.raw_data) == 3
    assert [s["name"] for s in dim.get_data()] == ["A", "B"]


def test_add_one_appends_to_existing_point(make_dimension, records):
    dim = make_dimension(data=records)
    dim.add_one({"g": "B", "k": 1, "v": 7})
    assert dim.find_data_point("B", 1) == {"k": 1, "sum": 12, "count": 2}


def test_add_many_runs_post_processing_once(make_dimension, records, recorder):
    """A batch emits a single "change"."""
    dim = make_dimension()
    events = recorder(dim, "change")
    dim.add_many(records)
    assert events.count("change") == 1


def test_add_many_accepts_generator(make_dimension, records):
    dim = make_dimension()
    dim.add_many(r for r in records)
    assert dim.find_series("A")["count"] == 2


@pytest.mark.parametrize("bad", [{"g": "A", "k": 1, "v": 1}, "records", 42, None])
def test_add_many_rejects_non_sequence(make_dimension, bad):
    """A single record, a string, or a non-iterable is a configuration error."""
    dim = make_dimension()
    with pytest.raises(ConfigurationError) as exc_info:
        dim.add_many(bad)
    assert "sequence of records" in str(exc_info.value)


def test_add_many_accepts_dataframe(make_dimension, records):
    dim = make_dimension()
    dim.add_many(pd.DataFrame(records))
    assert dim.find_data_point("A", 1)["sum"] == 30


def test_add_frame(make_dimension, records):
    dim = make_dimension()
    dim.add_frame(pd.DataFrame(records))
    assert dim.find_data_point("B", 1) == {"k": 1, "sum": 5, "count": 1}


def test_reduce_add_sees_positive_count(make_dimension, records):
    """count is incremented before reduce_add runs."""
    seen = []

    def reduce_add(point, record):
        seen.append(point["count"])
        point["sum"] += record["v"]

    dim = make_dimension(reduce_add=reduce_add)
    dim.add_many(records)
    assert seen == [1, 2, 1]


def test_split_processes_each_derived_record(make_dimension):
    """Split output is classified and reduced record by record; raw data keeps the input."""
    data = [
        {"g": "A", "tags": [1, 2], "v": 10},
        {"g": "B", "tags": [], "v": 99},
    ]
    dim = make_dimension(
        split=lambda r: [{"g": r["g"], "k": t, "v": r["v"]} for t in r["tags"]],
        data=data,
    )
    assert len(dim.raw_data) == 2
    assert len(dim.included_data) == 2
    assert dim.find_data_point("A", 1)["sum"] == 10
    assert dim.find_data_point("A", 2)["sum"] == 10
    assert dim.find_series("B") is None


def test_keys_do_not_collide_across_types(make_dimension):
    """1 and "1" group into different series even though both display as "1"."""
    data = [
        {"g": 1, "k": 1, "v": 1},
        {"g": "1", "k": 1, "v": 2},
    ]
    dim = make_dimension(data=data)
    assert len(dim.get_data()) == 2
    assert dim.find_series(1)["count"] == 1
    assert dim.find_series("1")["count"] == 1
    assert dim.find_data_point(1, 1)["sum"] == 1
    assert dim.find_data_point("1", 1)["sum"] == 2
    assert [s["name"] for s in dim.get_data()] == ["1", "1"]


def test_find_missing_returns_none(make_dimension, records):
    dim = make_dimension(data=records)
    assert dim.find_series("Z") is None
    assert dim.find_data_point("Z", 1) is None
    assert dim.find_data_point("A", 99) is None


def test_series_and_data_colors_assigned_once(make_dimension, records):
    series_calls = []

    def series_color(name):
        series_calls.append(name)
        return f"color-{name}"

    dim = make_dimension(
        series_color=series_color,
        data_color=lambda r: f"point-{r['v']}",
        data=records,
    )
    a = dim.find_series("A")
    assert a["color"] == "color-A"
    assert a["line_color"] == "color-A"
    point = dim.find_data_point("A", 1)
    assert point["line_color"] == "point-10"
    assert point["marker_color"] == "point-10"
    assert series_calls == ["A", "B"]


def test_default_series_fields_are_deep_copied(make_dimension, records):
    dim = make_dimension(
        default_series=lambda: {"visible": True, "type": "line", "meta": {"tags": []}},
        data=records,
    )
    a = dim.find_series("A")
    b = dim.find_series("B")
    assert a["type"] == "line"
    assert a["meta"] == {"tags": []}
    assert a["meta"] is not b["meta"]


def test_sort_key_field_name(make_dimension):
    data = [{"g": "A", "k": k, "v": 1} for k in (3, 1, 2)]
    dim = make_dimension(sort_key="k", data=data)
    assert [p["k"] for p in dim.find_series("A")["data_points"]] == [1, 2, 3]


def test_sort_key_callable_and_sort_fnc(make_dimension):
    data = [{"g": "A", "k": k, "v": k * 10} for k in (3, 1, 2)]
    dim = make_dimension(sort_key=lambda p: p["sum"], data=data)
    assert [p["k"] for p in dim.find_series("A")["data_points"]] == [1, 2, 3]

    dim = make_dimension(sort_fnc=lambda a, b: b["k"] - a["k"], data=data)
    assert [p["k"] for p in dim.find_series("A")["data_points"]] == [3, 2, 1]


def test_unsorted_points_keep_insertion_order(make_dimension):
    data = [{"g": "A", "k": k, "v": 1} for k in (3, 1, 2)]
    dim = make_dimension(data=data)
    assert [p["k"] for p in dim.find_series("A")["data_points"]] == [3, 1, 2]


def test_post_process_hook_receives_snapshot(make_dimension, records):
    def post_process(data):
        for series in data:
            series["total"] = sum(p["sum"] for p in series["data_points"])

    dim = make_dimension(post_process=post_process, data=records)
    assert dim.find_series("A")["total"] == 30
    assert dim.find_series("B")["total"] == 5


def test_get_data_returns_shallow_copies(make_dimension, records):
    """Series dicts are copied; data point dicts are shared."""
    dim = make_dimension(data=records)
    data = dim.get_data()
    data[0]["name"] = "changed"
    assert dim.get_data()[0]["name"] == "A"
    assert data[0]["data_points"][0] is dim.find_data_point("A", 1)


def test_snapshot_not_mutated_by_later_adds(make_dimension, records):
    dim = make_dimension(data=records)
    before = dim.get_data()
    dim.add_one({"g": "C", "k": 1, "v": 1})
    assert len(before) == 2
    assert len(dim.get_data()) == 3


def test_consumer_error_propagates(make_dimension, records):
    """Reducer exceptions reach the caller unchanged."""

    def reduce_add(point, record):
        if record["v"] == 20:
            raise RuntimeError("bad record")
        point["sum"] += record["v"]

    dim = make_dimension(reduce_add=reduce_add)
    with pytest.raises(RuntimeError, match="bad record"):
        dim.add_many(records)


def test_refresh_rebuilds_same_aggregates(make_dimension, records):
    dim = make_dimension(data=records)
    before = [dict(p) for s in dim.get_data() for p in s["data_points"]]
    dim.refresh()
    after = [dict(p) for s in dim.get_data() for p in s["data_points"]]
    assert before == after
    assert len(dim.raw_data) == 3


def test_stats_and_verbose_logging(make_dimension, records, caplog):
    caplog.set_level("INFO", logger="crossdim")
    dim = make_dimension(verbose=True, data=records)
    stats = dim.stats()
    assert stats.raw == 3
    assert stats.included == 3
    assert stats.excluded == 0
    assert stats.series == 2
    assert stats.data_points == 2
    assert "Dimension g: all data=3" in caplog.text


def test_find_series_by_display_name(make_dimension):
    """Names from get_data() find their series; ambiguous names do not."""
    dim = make_dimension(data=[{"g": 2, "k": 1, "v": 1}, {"g": 3, "k": 1, "v": 4}])
    for series in dim.get_data():
        assert dim.find_series(series["name"]) is not None
    assert dim.find_series("3")["count"] == 1
    assert dim.find_series(3)["data_points"][0]["sum"] == 4

    dim.add_one({"g": "2", "k": 1, "v": 7})
    assert dim.find_series("2")["data_points"][0]["sum"] == 7
    assert dim.find_series(2)["data_points"][0]["sum"] == 1


def test_find_series_ambiguous_name_returns_none(make_dimension):
    dim = make_dimension(data=[{"g": 1, "k": 1, "v": 1}, {"g": Decimal("1"), "k": 1, "v": 2}])
    assert [s["name"] for s in dim.get_data()] == ["1", "1"]
    assert dim.find_series("1") is None
    assert dim.find_series(Decimal("1"))["count"] == 1
