"""Today's agenda selection for the daily briefing."""

from __future__ import annotations

from datetime import date, tzinfo
from typing import Iterable, Optional

from agenda_engine.dates import to_local
from agenda_engine.normalizer import display_range
from agenda_engine.ranges import sort_chronological
from agenda_engine.schema import ItemKind, ScheduleItem

AGENDA_LIMIT = 6


def _covers(item: ScheduleItem, day: date, zone: Optional[tzinfo]) -> bool:
    span = display_range(item, zone)
    return span.start <= day <= span.end


def due_today(items: Iterable[ScheduleItem], today: date, zone: Optional[tzinfo] = None) -> list[ScheduleItem]:
    return [
        item for item in items if item.kind is ItemKind.TASK and not item.completed and _covers(item, today, zone)
    ]


def events_today(items: Iterable[ScheduleItem], today: date, zone: Optional[tzinfo] = None) -> list[ScheduleItem]:
    return sort_chronological(item for item in items if item.kind is ItemKind.EVENT and _covers(item, today, zone))


def agenda_lines(
    items: Iterable[ScheduleItem],
    zone: Optional[tzinfo] = None,
    limit: int = AGENDA_LIMIT,
    all_day_label: str = "all day",
) -> list[str]:
    """Render items as ``- title (HH:MM)`` lines, at most ``limit`` of them."""

    lines = []
    for item in list(items)[:limit]:
        when = all_day_label if item.all_day else to_local(item.start, zone).strftime("%H:%M")
        lines.append(f"- {item.title} ({when})")
    return lines
