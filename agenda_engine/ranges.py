"""Visible-range selection and chronological ordering for list views."""

from __future__ import annotations

import calendar
from datetime import datetime, tzinfo
from enum import Enum
from typing import Iterable, Optional, Union

from agenda_engine.dates import (
    DateLike,
    add_days,
    add_months,
    end_of_day,
    end_of_month,
    end_of_week,
    start_of_day,
    start_of_month,
    start_of_week,
    to_date,
)
from agenda_engine.normalizer import display_range
from agenda_engine.schema import ScheduleItem


class ViewMode(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def _mode(mode: Union[ViewMode, str]) -> ViewMode:
    try:
        return ViewMode(mode)
    except ValueError as exc:
        raise ValueError(f"Invalid view mode '{mode}'") from exc


def view_range(
    mode: Union[ViewMode, str],
    reference: DateLike,
    week_start: int = calendar.SUNDAY,
    zone: Optional[tzinfo] = None,
) -> tuple[datetime, datetime]:
    """Return the (start, end) instants a view of ``mode`` shows around ``reference``."""

    mode = _mode(mode)
    if mode is ViewMode.DAY:
        return start_of_day(reference, zone), end_of_day(reference, zone)
    if mode is ViewMode.WEEK:
        return start_of_week(reference, week_start, zone), end_of_week(reference, week_start, zone)
    return start_of_month(reference, zone), end_of_month(reference, zone)


def month_grid_range(
    reference: DateLike,
    week_start: int = calendar.SUNDAY,
    zone: Optional[tzinfo] = None,
) -> tuple[datetime, datetime]:
    """Whole weeks covering the month of ``reference``, adjacent-month days included."""

    first = start_of_week(start_of_month(reference, zone), week_start, zone)
    last = end_of_week(end_of_month(reference, zone), week_start, zone)
    return first, last


def overlaps(item: ScheduleItem, range_start: DateLike, range_end: DateLike, zone: Optional[tzinfo] = None) -> bool:
    span = display_range(item, zone)
    return span.start <= to_date(range_end, zone) and span.end >= to_date(range_start, zone)


def filter_visible(
    items: Iterable[ScheduleItem],
    range_start: DateLike,
    range_end: DateLike,
    zone: Optional[tzinfo] = None,
) -> list[ScheduleItem]:
    return [item for item in items if overlaps(item, range_start, range_end, zone)]


def sort_chronological(items: Iterable[ScheduleItem]) -> list[ScheduleItem]:
    """Stable sort by start instant; simultaneous items keep their input order."""

    return sorted(items, key=lambda item: item.start.timestamp())


def visible_items(
    items: Iterable[ScheduleItem],
    mode: Union[ViewMode, str],
    reference: DateLike,
    week_start: int = calendar.SUNDAY,
    zone: Optional[tzinfo] = None,
) -> list[ScheduleItem]:
    range_start, range_end = view_range(mode, reference, week_start, zone)
    return sort_chronological(filter_visible(items, range_start, range_end, zone))


def shift_reference(
    mode: Union[ViewMode, str],
    reference: DateLike,
    steps: int = 1,
    zone: Optional[tzinfo] = None,
) -> DateLike:
    """Move the reference date by ``steps`` days, weeks or months."""

    mode = _mode(mode)
    if mode is ViewMode.DAY:
        return add_days(reference, steps, zone)
    if mode is ViewMode.WEEK:
        return add_days(reference, 7 * steps, zone)
    return add_months(reference, steps, zone)
