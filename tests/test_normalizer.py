import logging
from datetime import date, datetime

from dateutil import tz

from agenda_engine.normalizer import display_range, is_multi_day, normalize, normalize_event, normalize_task
from agenda_engine.schema import DisplayRange, Event, ItemKind, SourceRef, Task

NY = tz.gettz("America/New_York")


def sample_events():
    return [
        Event("standup", "Standup", "2024-03-04T09:00:00", "2024-03-04T10:00:00"),
        Event("offsite", "Offsite", "2024-03-04", "2024-03-07", all_day=True, location="Lisbon"),
        Event("holiday", "Holiday", "2024-03-08", "2024-03-09", all_day=True),
        Event("late", "Late show", "2024-03-04T23:00:00", "2024-03-05T01:00:00"),
    ]


def sample_tasks():
    return [
        Task("t1", "Send report", "inbox", due="2024-03-05T18:00:00", notes="Q1 numbers"),
        Task("t2", "Book flights", "inbox", due="2024-03-05T18:00:00", completed=True),
        Task("t3", "Someday", "inbox"),
    ]


def test_all_day_event_display_range_drops_exclusive_end():
    item = normalize_event(sample_events()[1], NY)
    assert item.all_day
    assert item.start.hour == 12
    assert display_range(item, NY) == DisplayRange(date(2024, 3, 4), date(2024, 3, 6))
    assert is_multi_day(item, NY)


def test_single_day_all_day_event():
    item = normalize_event(sample_events()[2], NY)
    assert display_range(item, NY) == DisplayRange(date(2024, 3, 8), date(2024, 3, 8))
    assert not is_multi_day(item, NY)


def test_timed_event_passes_through():
    item = normalize_event(sample_events()[0], NY)
    assert item.kind is ItemKind.EVENT
    assert item.source == SourceRef(event_id="standup")
    assert item.start == datetime(2024, 3, 4, 9, tzinfo=NY)
    assert display_range(item, NY) == DisplayRange(date(2024, 3, 4), date(2024, 3, 4))


def test_timed_event_crossing_midnight_spans_two_days():
    item = normalize_event(sample_events()[3], NY)
    assert display_range(item, NY).days == 2
    assert is_multi_day(item, NY)


def test_open_task_becomes_all_day_item_on_due_day():
    item = normalize_task(sample_tasks()[0], NY)
    assert item.id == "task-t1"
    assert item.kind is ItemKind.TASK
    assert item.all_day
    assert item.start == item.end
    assert item.description == "Q1 numbers"
    assert item.source == SourceRef(task_list_id="inbox", task_id="t1")
    assert display_range(item, NY) == DisplayRange(date(2024, 3, 5), date(2024, 3, 5))


def test_completed_and_undated_tasks_are_excluded():
    assert normalize_task(sample_tasks()[1], NY) is None
    assert normalize_task(sample_tasks()[2], NY) is None
    ids = [item.id for item in normalize(sample_events(), sample_tasks(), NY)]
    assert ids == ["standup", "offsite", "holiday", "late", "task-t1"]


def test_task_due_uses_local_calendar_date():
    item = normalize_task(Task("t9", "Late UTC", "inbox", due="2024-03-05T02:00:00Z"), NY)
    assert display_range(item, NY).start == date(2024, 3, 4)


def test_malformed_dates_are_skipped(caplog):
    events = sample_events() + [Event("bad", "Broken", "not a date", "2024-03-04T10:00:00")]
    tasks = sample_tasks() + [Task("tbad", "Broken task", "inbox", due="soon")]
    with caplog.at_level(logging.WARNING, logger="agenda_engine.normalizer"):
        items = normalize(events, tasks, NY)
    ids = {item.id for item in items}
    assert "bad" not in ids
    assert "task-tbad" not in ids
    assert {"standup", "offsite", "task-t1"} <= ids
    assert "Skipping event bad" in caplog.text


def test_end_before_start_is_clamped():
    timed = normalize_event(Event("x", "Backwards", "2024-03-04T10:00", "2024-03-04T09:00"), NY)
    assert timed.end == timed.start
    all_day = normalize_event(Event("y", "Backwards", "2024-03-06", "2024-03-04", all_day=True), NY)
    assert display_range(all_day, NY) == DisplayRange(date(2024, 3, 6), date(2024, 3, 6))


def test_all_day_event_across_dst_change():
    item = normalize_event(Event("dst", "Ski week", "2024-03-09", "2024-03-12", all_day=True), NY)
    assert display_range(item, NY) == DisplayRange(date(2024, 3, 9), date(2024, 3, 11))


def test_kind_toggles():
    only_tasks = normalize(sample_events(), sample_tasks(), NY, include_events=False)
    assert [item.kind for item in only_tasks] == [ItemKind.TASK]
    only_events = normalize(sample_events(), sample_tasks(), NY, include_tasks=False)
    assert all(item.kind is ItemKind.EVENT for item in only_events)


def test_normalization_is_idempotent():
    first = normalize(sample_events(), sample_tasks(), NY)
    second = normalize(sample_events(), sample_tasks(), NY)
    assert first == second


def test_display_range_never_inverted():
    for item in normalize(sample_events(), sample_tasks(), NY):
        span = display_range(item, NY)
        assert span.start <= span.end
