"""JSON-ready views of schedule items and layouts."""

from __future__ import annotations

from datetime import tzinfo
from typing import Iterable, Optional

from agenda_engine.dates import to_local
from agenda_engine.month_view import MonthLayout
from agenda_engine.normalizer import display_range
from agenda_engine.schema import ScheduleItem


def item_to_dict(item: ScheduleItem, zone: Optional[tzinfo] = None) -> dict:
    span = display_range(item, zone)
    return {
        "id": item.id,
        "kind": item.kind.value,
        "title": item.title,
        "start": to_local(item.start, zone).isoformat(),
        "end": to_local(item.end, zone).isoformat(),
        "all_day": item.all_day,
        "display_start": span.start.isoformat(),
        "display_end": span.end.isoformat(),
        "location": item.location,
        "description": item.description,
    }


def list_view_to_dict(items: Iterable[ScheduleItem], zone: Optional[tzinfo] = None) -> dict:
    payload = [item_to_dict(item, zone) for item in items]
    return {"items": payload, "total_items": len(payload)}


def month_layout_to_dict(layout: MonthLayout) -> dict:
    weeks = []
    for row in layout.weeks:
        weeks.append(
            {
                "week_start": row.layout.week_start.isoformat(),
                "lane_count": row.layout.lane_count,
                "bars": [
                    {
                        "id": placed.segment.item.id,
                        "title": placed.segment.item.title,
                        "start_idx": placed.segment.start_idx,
                        "end_idx": placed.segment.end_idx,
                        "lane": placed.lane,
                    }
                    for placed in row.layout.assignments
                ],
                "days": {day.isoformat(): [item.id for item in row.cells[day]] for day in row.days},
            }
        )
    return {
        "month": layout.month.strftime("%Y-%m"),
        "weeks": weeks,
        "multi_day_ids": sorted(layout.multi_day_ids),
        "total_items": len({item.id for items in layout.buckets.values() for item in items}),
    }
