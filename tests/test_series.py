"""Tests for fleetview.engine.series — chart series reshaping."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from fleetview.engine.series import label_interval, to_chart_series
from fleetview.formatting import format_time_label
from fleetview.models import ChartPoint, MetricSample

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _sample(minutes_ago: int, cpu: float = 10.0) -> MetricSample:
    return MetricSample(
        hostname="h1",
        timestamp=NOW - timedelta(minutes=minutes_ago),
        cpu_percent=cpu,
        memory_percent=cpu + 1,
        disk_percent=cpu + 2,
    )


def _newest_first(count: int) -> list[MetricSample]:
    return [_sample(i, cpu=float(i)) for i in range(count)]


def test_empty_input_gives_empty_series():
    assert to_chart_series([]) == []


def test_newest_first_input_is_reversed():
    series = to_chart_series(_newest_first(5))
    assert [p.cpu_percent for p in series] == [4.0, 3.0, 2.0, 1.0, 0.0]
    assert series[0].timestamp < series[-1].timestamp


def test_points_keep_instant_and_values():
    sample = _sample(3, cpu=55.5)
    (point,) = to_chart_series([sample])
    assert isinstance(point, ChartPoint)
    assert point.timestamp == sample.timestamp
    assert point.label == format_time_label(sample.timestamp)
    assert point.cpu_percent == 55.5
    assert point.memory_percent == 56.5
    assert point.disk_percent == 57.5


def test_length_and_order_for_any_input():
    rng = random.Random(7)
    samples = [_sample(rng.randint(0, 500)) for _ in range(200)]
    series = to_chart_series(samples)
    assert len(series) == len(samples)
    stamps = [p.timestamp for p in series]
    assert stamps == sorted(stamps)


def test_already_ascending_input_is_still_sorted():
    samples = list(reversed(_newest_first(4)))
    series = to_chart_series(samples)
    assert [p.cpu_percent for p in series] == [3.0, 2.0, 1.0, 0.0]


def test_transforming_reversed_series_is_identity():
    series = to_chart_series(_newest_first(10))
    again = to_chart_series(list(reversed(series)))
    assert again == series


def test_input_is_not_mutated():
    samples = _newest_first(3)
    snapshot = list(samples)
    to_chart_series(samples)
    assert samples == snapshot


def test_ties_keep_reversed_source_order():
    a = _sample(1, cpu=1.0)
    b = _sample(1, cpu=2.0)
    series = to_chart_series([a, b])
    assert [p.cpu_percent for p in series] == [2.0, 1.0]


def test_mixed_naive_and_aware_timestamps_sort():
    naive = MetricSample(timestamp=datetime(2026, 1, 1, 11, 0))
    aware = MetricSample(timestamp=NOW)
    series = to_chart_series([aware, naive])
    assert series[0].timestamp == datetime(2026, 1, 1, 11, 0, tzinfo=timezone.utc)


def test_accepts_a_generator():
    series = to_chart_series(s for s in _newest_first(3))
    assert len(series) == 3


# ── tick spacing ────────────────────────────────────────


def test_label_interval():
    assert label_interval(0) == 0
    assert label_interval(60) == 10
    assert label_interval(13, labels=4) == 3


def test_label_interval_rejects_zero_labels():
    with pytest.raises(ValueError):
        label_interval(10, labels=0)
