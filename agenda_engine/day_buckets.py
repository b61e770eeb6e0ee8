"""Per-day item index for month grid cells."""

from __future__ import annotations

import calendar
from datetime import date, tzinfo
from typing import Iterable, Optional

from agenda_engine.dates import DateLike, iter_days, to_date
from agenda_engine.normalizer import display_range
from agenda_engine.ranges import month_grid_range
from agenda_engine.schema import ScheduleItem


def bucket_by_day(items: Iterable[ScheduleItem], zone: Optional[tzinfo] = None) -> dict[date, list[ScheduleItem]]:
    """Map each calendar date to the items whose display range includes it."""

    buckets: dict[date, list[ScheduleItem]] = {}
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        span = display_range(item, zone)
        for day in iter_days(span.start, span.end):
            buckets.setdefault(day, []).append(item)
    return buckets


def items_on(buckets: dict[date, list[ScheduleItem]], day: date) -> list[ScheduleItem]:
    return list(buckets.get(day, []))


def month_grid(
    reference: DateLike,
    week_start: int = calendar.SUNDAY,
    zone: Optional[tzinfo] = None,
) -> list[list[date]]:
    """Week rows of seven dates covering the month of ``reference``."""

    first, last = month_grid_range(reference, week_start, zone)
    days = list(iter_days(to_date(first, zone), to_date(last, zone)))
    return [days[i : i + 7] for i in range(0, len(days), 7)]
