"""
Axis Calculator Tests
=====================

INVARIANTS TESTED:
1. Padding: start = earliest - 7 days (midnight), end = now + 7 days (end of day)
2. Fallback window when no records exist
3. Out-of-window records are excluded, never clamped
4. now before the padded start is a configuration error
"""

import pytest
from datetime import date, datetime, timezone

from incident_timeline.config import LayoutConfig
from incident_timeline.contracts.base import ErrorCode, InvalidConfiguration
from incident_timeline.contracts.records import IncidentRecord
from incident_timeline.temporal.axis import (
    build_ticks, compute_axis, partition_records, project_records,
)


NOW = datetime(2025, 10, 15, 12, 0, tzinfo=timezone.utc)


def make_record(record_id: str, day: date, category: str = "notice") -> IncidentRecord:
    """Factory for test records."""
    return IncidentRecord(record_id=record_id, event_date=day, category=category)


class TestComputeAxis:

    def test_padded_window(self):
        """Earliest record 2025-10-08 gives start 2025-10-01 and 21 whole days."""
        axis = compute_axis([make_record("a", date(2025, 10, 8))], NOW)

        assert axis.start == datetime(2025, 10, 1, tzinfo=timezone.utc)
        assert axis.end.date() == date(2025, 10, 22)
        assert axis.end.hour == 23 and axis.end.minute == 59
        assert axis.total_days == 21
        assert axis.is_fallback is False

    def test_record_position_scenario(self):
        """A record 7 days into a 21-day axis sits at one third."""
        record = make_record("a", date(2025, 10, 8))
        axis = compute_axis([record], NOW)
        projected = project_records([record], axis)

        assert projected[0].days_from_start == 7
        assert projected[0].position == pytest.approx(33.333, abs=0.01)

    def test_empty_records_use_fallback_window(self):
        axis = compute_axis([], NOW)

        assert axis.is_fallback is True
        assert axis.start == datetime(2025, 10, 1, tzinfo=timezone.utc)
        assert axis.end.date() == NOW.date()
        assert axis.total_days == 14

    def test_custom_fallback_month(self):
        config = LayoutConfig(fallback_month_start=date(2025, 9, 1))
        axis = compute_axis([], NOW, config)

        assert axis.start.date() == date(2025, 9, 1)

    def test_time_of_day_is_ignored(self):
        late = IncidentRecord(record_id="a", event_date=datetime(2025, 10, 8, 23, 30))
        early = IncidentRecord(record_id="b", event_date=datetime(2025, 10, 8, 0, 5))

        assert compute_axis([late], NOW) == compute_axis([early], NOW)

    def test_naive_now_is_utc(self):
        record = make_record("a", date(2025, 10, 8))
        naive = datetime(2025, 10, 15, 12, 0)

        assert compute_axis([record], naive) == compute_axis([record], NOW)

    def test_total_days_never_below_one(self):
        """Zero padding and a record dated today still yields a usable axis."""
        config = LayoutConfig(lead_padding_days=0, trail_padding_days=0)
        now = datetime(2025, 10, 15, 0, 0, tzinfo=timezone.utc)
        axis = compute_axis([make_record("a", date(2025, 10, 15))], now, config)

        assert axis.total_days >= 1

    def test_earlier_record_extends_axis_backward(self):
        base = [make_record("a", date(2025, 10, 8))]
        extended = base + [make_record("b", date(2025, 9, 20))]

        assert compute_axis(extended, NOW).start < compute_axis(base, NOW).start

    def test_now_before_start_is_rejected(self):
        """Records far in the future push start past now."""
        with pytest.raises(InvalidConfiguration) as excinfo:
            compute_axis([make_record("a", date(2025, 12, 1))], NOW)

        assert excinfo.value.code == ErrorCode.NOW_BEFORE_AXIS_START

    def test_fallback_month_after_now_is_rejected(self):
        config = LayoutConfig(fallback_month_start=date(2026, 1, 1))

        with pytest.raises(InvalidConfiguration):
            compute_axis([], NOW, config)


class TestProjection:

    def test_out_of_window_record_is_excluded(self):
        inside = make_record("inside", date(2025, 10, 8))
        future = make_record("future", date(2025, 11, 30))
        axis = compute_axis([inside, future], NOW)

        projected, excluded = partition_records([inside, future], axis)

        assert [p.record_id for p in projected] == ["inside"]
        assert [r.record_id for r in excluded] == ["future"]

    def test_record_before_start_is_excluded(self):
        """A record older than a given axis start is dropped, not pinned to 0."""
        axis = compute_axis([make_record("a", date(2025, 10, 8))], NOW)
        old = make_record("old", date(2025, 9, 1))

        assert project_records([old], axis) == ()

    def test_boundary_days_are_visible(self):
        axis = compute_axis([make_record("a", date(2025, 10, 8))], NOW)
        first = make_record("first", date(2025, 10, 1))
        last = make_record("last", date(2025, 10, 22))

        projected = project_records([first, last], axis)

        assert [p.position for p in projected] == [0.0, 100.0]

    def test_projection_keeps_input_order(self):
        records = [
            make_record("c", date(2025, 10, 12)),
            make_record("a", date(2025, 10, 8)),
            make_record("b", date(2025, 10, 10)),
        ]
        axis = compute_axis(records, NOW)

        assert [p.record_id for p in project_records(records, axis)] == ["c", "a", "b"]


class TestTicks:

    def test_weekly_ticks(self):
        axis = compute_axis([make_record("a", date(2025, 10, 8))], NOW)
        ticks = build_ticks(axis, 7)

        assert [t.label for t in ticks] == ["Oct 1", "Oct 8", "Oct 15", "Oct 22"]
        assert ticks[0].position == 0.0
        assert ticks[-1].position == pytest.approx(100.0)

    def test_invalid_interval(self):
        axis = compute_axis([], NOW)

        with pytest.raises(InvalidConfiguration):
            build_ticks(axis, 0)
