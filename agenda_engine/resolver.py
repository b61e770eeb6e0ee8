"""Resolve user-entered local date/time strings into committed instants."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional

from agenda_engine.dates import DateLike, add_days, at_local, parse_calendar_date, parse_instant, to_date, to_local
from agenda_engine.errors import ParseError
from agenda_engine.normalizer import ALL_DAY_ANCHOR_HOUR, display_range
from agenda_engine.schema import ScheduleItem

logger = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)
DEFAULT_START_HOUR = 9

_LOCAL_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")
_LOCAL_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ResolvedTimes:
    """Committed start/end pair.

    For all-day values ``end`` is the inclusive last day; ``stored_end`` gives the
    exclusive boundary kept by the event store.
    """

    start: datetime
    end: datetime
    all_day: bool

    def stored_end(self, zone: Optional[tzinfo] = None) -> datetime:
        if self.all_day:
            return add_days(self.end, 1, zone or self.end.tzinfo)
        return self.end


def to_local_input_value(instant: datetime, zone: Optional[tzinfo] = None) -> str:
    return to_local(instant, zone).strftime("%Y-%m-%dT%H:%M")


def to_local_date_value(value: DateLike, zone: Optional[tzinfo] = None) -> str:
    return to_date(value, zone).isoformat()


def _parse_day(text: Optional[str], zone: Optional[tzinfo]) -> Optional[date]:
    if not text or not text.strip():
        return None
    try:
        return parse_calendar_date(text, zone)
    except ParseError as exc:
        logger.warning("Ignoring date field: %s", exc)
        return None


def _parse_local(text: Optional[str], zone: Optional[tzinfo]) -> Optional[datetime]:
    if not text or not text.strip():
        return None
    try:
        return parse_instant(text, zone)
    except ParseError as exc:
        logger.warning("Ignoring date/time field: %s", exc)
        return None


def resolve_times(
    start_text: Optional[str],
    end_text: Optional[str],
    all_day: bool,
    now: Optional[datetime] = None,
    zone: Optional[tzinfo] = None,
    fallback_start: Optional[datetime] = None,
    duration: timedelta = DEFAULT_DURATION,
) -> ResolvedTimes:
    """Turn form strings into a (start, end) pair.

    Missing or unparseable starts fall back to ``fallback_start`` (the item being
    edited) and then to ``now``. All-day values land at local noon and an end day
    before the start day is clamped to the start day. Timed values get at least
    ``duration`` when the end is missing or not after the start.
    """

    if now is None:
        now = datetime.now(zone)
    base = to_local(fallback_start if fallback_start is not None else now, zone)

    if all_day:
        start_day = _parse_day(start_text, zone) or base.date()
        end_day = _parse_day(end_text, zone) or start_day
        if end_day < start_day:
            logger.debug("All-day end %s precedes start %s; clamping", end_day, start_day)
            end_day = start_day
        return ResolvedTimes(
            start=at_local(start_day, ALL_DAY_ANCHOR_HOUR, zone=zone),
            end=at_local(end_day, ALL_DAY_ANCHOR_HOUR, zone=zone),
            all_day=True,
        )

    start = _parse_local(start_text, zone) or base
    end = _parse_local(end_text, zone)
    if end is None or end.timestamp() <= start.timestamp():
        end = to_local(start.astimezone(timezone.utc) + duration, zone)
    return ResolvedTimes(start=start, end=end, all_day=False)


def form_times(item: ScheduleItem, zone: Optional[tzinfo] = None) -> tuple[str, str]:
    """Values an editor shows for an item; all-day ends are the inclusive last day."""

    if item.all_day:
        span = display_range(item, zone)
        return span.start.isoformat(), span.end.isoformat()
    return to_local_input_value(item.start, zone), to_local_input_value(item.end, zone)


def default_form_times(base: DateLike, zone: Optional[tzinfo] = None) -> tuple[str, str]:
    """Initial 09:00-10:00 values for a new event on ``base``'s day."""

    start = at_local(to_date(base, zone), DEFAULT_START_HOUR, zone=zone)
    return to_local_input_value(start, zone), to_local_input_value(start + DEFAULT_DURATION, zone)


def normalize_local_datetime(value: Optional[str], fallback: datetime, zone: Optional[tzinfo] = None) -> str:
    """Coerce a suggested local value into ``YYYY-MM-DDTHH:MM`` form."""

    if not value:
        return to_local_input_value(fallback, zone)
    if _LOCAL_DATETIME.match(value):
        return value[:16]
    if _LOCAL_DATE.match(value):
        return f"{value}T{DEFAULT_START_HOUR:02d}:00"
    return value
