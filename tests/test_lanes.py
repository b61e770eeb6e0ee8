from datetime import date, datetime

from dateutil import tz

from agenda_engine.dates import start_of_week
from agenda_engine.lanes import assign_lanes, pack_week, week_segments
from agenda_engine.normalizer import normalize_event
from agenda_engine.schema import DaySegment, Event

UTC = tz.UTC
WEEK = date(2024, 3, 3)


def span(item_id, start, end_exclusive):
    return normalize_event(Event(item_id, item_id, start, end_exclusive, all_day=True), UTC)


def lanes_by_id(layout):
    return {placed.segment.item.id: placed.lane for placed in layout.assignments}


def test_overlapping_items_get_separate_lanes():
    first = span("first", "2024-03-04", "2024-03-07")
    second = span("second", "2024-03-05", "2024-03-07")
    layout = pack_week([second, first], WEEK, UTC)
    assert lanes_by_id(layout) == {"first": 0, "second": 1}
    assert layout.lane_count == 2
    assert layout.max_lane == 1


def test_longer_segment_wins_on_equal_start():
    short = span("short", "2024-03-04", "2024-03-06")
    long = span("long", "2024-03-04", "2024-03-09")
    later = span("later", "2024-03-06", "2024-03-08")
    layout = pack_week([short, long, later], WEEK, UTC)
    assert lanes_by_id(layout) == {"long": 0, "short": 1, "later": 1}


def test_equal_segments_keep_input_order():
    x = span("x", "2024-03-04", "2024-03-06")
    y = span("y", "2024-03-04", "2024-03-06")
    assert lanes_by_id(pack_week([y, x], WEEK, UTC)) == {"y": 0, "x": 1}


def test_lane_is_reused_after_gap():
    layout = pack_week([span("a", "2024-03-03", "2024-03-05"), span("b", "2024-03-06", "2024-03-08")], WEEK, UTC)
    assert lanes_by_id(layout) == {"a": 0, "b": 0}
    assert layout.lane_count == 1


def test_segments_are_clipped_to_each_week():
    long = span("long", "2024-02-28", "2024-03-12")
    (before,) = week_segments([long], date(2024, 2, 25), UTC)
    (during,) = week_segments([long], WEEK, UTC)
    (after,) = week_segments([long], date(2024, 3, 10), UTC)
    assert (before.start_idx, before.end_idx) == (3, 6)
    assert (during.start_idx, during.end_idx) == (0, 6)
    assert (after.start_idx, after.end_idx) == (0, 1)
    assert week_segments([long], date(2024, 3, 17), UTC) == []


def test_single_day_items_are_not_packed():
    timed = normalize_event(Event("meet", "Meet", "2024-03-04T09:00", "2024-03-04T10:00"), UTC)
    single = span("single", "2024-03-05", "2024-03-06")
    layout = pack_week([timed, single], WEEK, UTC)
    assert layout.assignments == []
    assert layout.lane_count == 0
    assert layout.max_lane is None


def test_no_overlap_within_a_lane_and_deterministic():
    items = [
        span("a", "2024-03-01", "2024-03-05"),
        span("b", "2024-03-04", "2024-03-08"),
        span("c", "2024-03-05", "2024-03-07"),
        span("d", "2024-03-06", "2024-03-12"),
        span("e", "2024-03-03", "2024-03-05"),
        span("f", "2024-03-08", "2024-03-10"),
        span("g", "2024-03-04", "2024-03-06"),
    ]
    layout = pack_week(items, WEEK, UTC)
    assert layout == pack_week(items, WEEK, UTC)
    assert len(layout.assignments) == len(items)

    for i, left in enumerate(layout.assignments):
        for right in layout.assignments[i + 1 :]:
            if left.lane != right.lane:
                continue
            assert (
                left.segment.end_idx < right.segment.start_idx or right.segment.end_idx < left.segment.start_idx
            )


def test_assign_lanes_on_raw_segments():
    item = span("z", "2024-03-04", "2024-03-06")
    placed = assign_lanes([DaySegment(item, 2, 4), DaySegment(item, 0, 2), DaySegment(item, 3, 3)])
    assert [(p.segment.start_idx, p.lane) for p in placed] == [(0, 0), (2, 1), (3, 0)]


def test_week_boundary_may_be_a_datetime():
    ny = tz.gettz("America/New_York")
    trip = normalize_event(Event("trip", "Trip", "2024-03-04", "2024-03-07", all_day=True), ny)
    boundary = start_of_week(datetime(2024, 3, 5, 10, tzinfo=ny), zone=ny)
    layout = pack_week([trip], boundary, zone=ny)
    assert layout.week_start == date(2024, 3, 3)
    assert [(a.segment.start_idx, a.segment.end_idx, a.lane) for a in layout.assignments] == [(1, 3, 0)]
