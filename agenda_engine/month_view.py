"""Month grid layout: day cells plus packed multi-day bars per week."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Iterable, Optional

from agenda_engine.dates import DateLike, to_date
from agenda_engine.day_buckets import bucket_by_day, items_on, month_grid
from agenda_engine.lanes import pack_week
from agenda_engine.normalizer import is_multi_day
from agenda_engine.ranges import filter_visible, month_grid_range, sort_chronological
from agenda_engine.schema import ScheduleItem, WeekLayout


@dataclass(frozen=True)
class WeekRow:
    days: list[date]
    cells: dict[date, list[ScheduleItem]]
    layout: WeekLayout


@dataclass(frozen=True)
class MonthLayout:
    month: date
    weeks: list[WeekRow]
    buckets: dict[date, list[ScheduleItem]]
    multi_day_ids: frozenset[str]

    def day_items(self, day: date) -> list[ScheduleItem]:
        """Everything on ``day``, multi-day items included."""

        return items_on(self.buckets, day)


def build_month_layout(
    items: Iterable[ScheduleItem],
    reference: DateLike,
    week_start: int = calendar.SUNDAY,
    zone: Optional[tzinfo] = None,
) -> MonthLayout:
    grid_start, grid_end = month_grid_range(reference, week_start, zone)
    visible = sort_chronological(filter_visible(items, grid_start, grid_end, zone))
    buckets = bucket_by_day(visible, zone)
    multi_day_ids = frozenset(item.id for item in visible if is_multi_day(item, zone))

    weeks: list[WeekRow] = []
    for days in month_grid(reference, week_start, zone):
        cells = {
            day: [item for item in items_on(buckets, day) if item.id not in multi_day_ids] for day in days
        }
        weeks.append(WeekRow(days=days, cells=cells, layout=pack_week(visible, days[0], zone)))

    return MonthLayout(
        month=to_date(reference, zone).replace(day=1),
        weeks=weeks,
        buckets=buckets,
        multi_day_ids=multi_day_ids,
    )
