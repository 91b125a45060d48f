"""
Property Tests for Layout Contracts
Verifies boundedness, non-collision, exclusion, monotonicity and determinism.
"""

from datetime import date, datetime, timezone

from hypothesis import given, strategies as st
from hypothesis.strategies import composite

from incident_timeline.contracts.layout import ProjectedRecord
from incident_timeline.contracts.records import IncidentRecord
from incident_timeline.temporal.axis import compute_axis, partition_records
from incident_timeline.temporal.stacking import resolve_stacking, stack_records

NOW = datetime(2025, 12, 31, 9, 30, tzinfo=timezone.utc)
ANCHOR = IncidentRecord(record_id="anchor", event_date=date(2025, 6, 1))

# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

@composite
def record_sets(draw):
    """Records spread across and beyond the window; the anchor keeps start <= now."""
    days = draw(st.lists(
        st.dates(min_value=date(2025, 1, 1), max_value=date(2026, 3, 1)),
        max_size=40,
    ))
    return [ANCHOR] + [
        IncidentRecord(record_id=f"r{i}", event_date=d)
        for i, d in enumerate(days)
    ]


@composite
def projections(draw):
    positions = draw(st.lists(
        st.floats(min_value=0, max_value=100, allow_nan=False),
        max_size=60,
    ))
    return [
        ProjectedRecord(
            record=IncidentRecord(record_id=f"p{i}", event_date=date(2025, 10, 1)),
            days_from_start=0,
            position=pos,
        )
        for i, pos in enumerate(positions)
    ]


thresholds = st.floats(min_value=0.01, max_value=20, allow_nan=False)
max_levels = st.integers(min_value=0, max_value=8)


# =============================================================================
# STACKING PROPERTIES
# =============================================================================

@given(projections(), thresholds, max_levels)
def test_levels_are_bounded(projected, threshold, max_level):
    levels = resolve_stacking(projected, threshold, max_level)

    assert len(levels) == len(projected)
    assert all(0 <= level <= max_level for level in levels.values())


@given(projections(), thresholds, max_levels)
def test_colliding_records_below_cap_never_share_level(projected, threshold, max_level):
    levels = resolve_stacking(projected, threshold, max_level)

    for i, a in enumerate(projected):
        for b in projected[i + 1:]:
            la, lb = levels[a.record_id], levels[b.record_id]
            if abs(a.position - b.position) < threshold and la < max_level and lb < max_level:
                assert la != lb


@given(projections(), thresholds, max_levels)
def test_stacking_is_deterministic(projected, threshold, max_level):
    assert stack_records(projected, threshold, max_level) == stack_records(projected, threshold, max_level)


# =============================================================================
# AXIS PROPERTIES
# =============================================================================

@given(record_sets())
def test_exclusion_correctness(records):
    axis = compute_axis(records, NOW)
    projected, excluded = partition_records(records, axis)

    assert len(projected) + len(excluded) == len(records)
    for p in projected:
        assert axis.start.date() <= p.record.event_day <= axis.end.date()
        assert 0.0 <= p.position <= 100.0
    for record in excluded:
        assert not (axis.start.date() <= record.event_day <= axis.end.date())


@given(record_sets(), st.dates(min_value=date(2024, 1, 1), max_value=date(2025, 12, 31)))
def test_adding_a_record_never_moves_start_later(records, extra_day):
    before = compute_axis(records, NOW)
    after = compute_axis(records + [IncidentRecord(record_id="extra", event_date=extra_day)], NOW)

    assert after.start <= before.start
    assert after.end == before.end


@given(record_sets())
def test_axis_is_deterministic(records):
    assert compute_axis(records, NOW) == compute_axis(list(records), NOW)
