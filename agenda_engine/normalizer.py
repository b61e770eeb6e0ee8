"""Normalize raw events and tasks into schedule items."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from agenda_engine.dates import add_days, at_local, days_between, parse_calendar_date, parse_instant, to_date
from agenda_engine.errors import ParseError
from agenda_engine.schema import DisplayRange, Event, ItemKind, ScheduleItem, SourceRef, Task

logger = logging.getLogger(__name__)

# Date-only values sit at local noon so later reduction to a date never slips a day.
ALL_DAY_ANCHOR_HOUR = 12


def task_item_id(task_id: str) -> str:
    return f"task-{task_id}"


def _anchor(value: object, zone: Optional[tzinfo]) -> datetime:
    return at_local(parse_calendar_date(value, zone), ALL_DAY_ANCHOR_HOUR, zone=zone)


def normalize_event(event: Event, zone: Optional[tzinfo] = None) -> ScheduleItem:
    """Convert one event record; raises ParseError on unusable dates."""

    if event.all_day:
        start = _anchor(event.start, zone)
        end = _anchor(event.end, zone)
    else:
        start = parse_instant(event.start, zone)
        end = parse_instant(event.end, zone)

    if end.timestamp() < start.timestamp():
        logger.debug("Event %s ends before it starts; clamping end to start", event.id)
        end = start

    return ScheduleItem(
        id=event.id,
        kind=ItemKind.EVENT,
        title=event.title,
        start=start,
        end=end,
        all_day=event.all_day,
        description=event.description,
        location=event.location,
        completed=False,
        source=SourceRef(event_id=event.id),
    )


def normalize_task(task: Task, zone: Optional[tzinfo] = None) -> Optional[ScheduleItem]:
    """Convert an open, due-dated task into an all-day item on its due day.

    Returns None for completed tasks and tasks without a due date.
    """

    if task.completed or task.due is None or task.due == "":
        return None

    due = _anchor(task.due, zone)
    return ScheduleItem(
        id=task_item_id(task.id),
        kind=ItemKind.TASK,
        title=task.title,
        start=due,
        end=due,
        all_day=True,
        description=task.notes,
        completed=task.completed,
        source=SourceRef(task_list_id=task.task_list_id, task_id=task.id),
    )


def normalize(
    events: Iterable[Event],
    tasks: Iterable[Task],
    zone: Optional[tzinfo] = None,
    include_events: bool = True,
    include_tasks: bool = True,
) -> list[ScheduleItem]:
    """Merge events and tasks into one item list, skipping malformed records."""

    items: list[ScheduleItem] = []
    if include_events:
        for event in events:
            try:
                items.append(normalize_event(event, zone))
            except ParseError as exc:
                logger.warning("Skipping event %s: %s", event.id, exc)
    if include_tasks:
        for task in tasks:
            try:
                item = normalize_task(task, zone)
            except ParseError as exc:
                logger.warning("Skipping task %s: %s", task.id, exc)
                continue
            if item is not None:
                items.append(item)
    return items


def display_range(item: ScheduleItem, zone: Optional[tzinfo] = None) -> DisplayRange:
    """Inclusive calendar days an item covers, with the all-day end made inclusive."""

    end = item.end
    if item.all_day and end.timestamp() > item.start.timestamp():
        end = add_days(end, -1, zone)
    first = to_date(item.start, zone)
    last = to_date(end, zone)
    return DisplayRange(first, max(first, last))


def is_multi_day(item: ScheduleItem, zone: Optional[tzinfo] = None) -> bool:
    span = display_range(item, zone)
    return days_between(span.start, span.end) >= 1
