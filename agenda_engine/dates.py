"""Calendar-date arithmetic in a single local time zone.

Every helper takes an optional ``zone``. ``None`` resolves to the process local
zone, so callers that want machine-independent results pass one explicitly.
Naive datetimes are read as wall time in ``zone``; aware ones are converted.
Day, week and month arithmetic works on wall time, so adding a day across a DST
transition keeps the time of day instead of adding a fixed 24 hours.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterator, Optional, Union

from dateutil import tz
from dateutil.relativedelta import relativedelta

from agenda_engine.errors import ParseError, RangeError

DateLike = Union[datetime, date]

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def local_zone() -> tzinfo:
    """Return the process local zone."""

    return tz.tzlocal()


def resolve_zone(name: Optional[str]) -> tzinfo:
    """Resolve ``local``, ``UTC`` or an IANA name into a tzinfo."""

    if name is None or not str(name).strip() or str(name).strip().lower() in {"local", "system"}:
        return tz.tzlocal()
    text = str(name).strip()
    if text.upper() in {"UTC", "Z", "GMT"}:
        return tz.UTC
    zone = tz.gettz(text)
    if zone is None:
        raise ValueError(f"Unknown time zone '{text}'")
    return zone


def _zone(zone: Optional[tzinfo]) -> tzinfo:
    return zone if zone is not None else tz.tzlocal()


def to_local(instant: datetime, zone: Optional[tzinfo] = None) -> datetime:
    """Express ``instant`` as an aware datetime in ``zone``."""

    zone = _zone(zone)
    if instant.tzinfo is None:
        return tz.resolve_imaginary(instant.replace(tzinfo=zone))
    return instant.astimezone(zone)


def at_local(
    day: date,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    microsecond: int = 0,
    zone: Optional[tzinfo] = None,
) -> datetime:
    """Materialize a wall-clock time on ``day``, shifting past a DST gap if needed."""

    naive = datetime(day.year, day.month, day.day, hour, minute, second, microsecond)
    return to_local(naive, zone)


def to_date(value: DateLike, zone: Optional[tzinfo] = None) -> date:
    """Reduce an instant to its local calendar date."""

    if isinstance(value, datetime):
        return to_local(value, zone).date()
    return value


def day_key(value: DateLike, zone: Optional[tzinfo] = None) -> str:
    return to_date(value, zone).isoformat()


def start_of_day(instant: DateLike, zone: Optional[tzinfo] = None) -> datetime:
    return at_local(to_date(instant, zone), zone=zone)


def end_of_day(instant: DateLike, zone: Optional[tzinfo] = None) -> datetime:
    return at_local(to_date(instant, zone), 23, 59, 59, 999999, zone=zone)


def _week_start_date(day: date, week_start: int) -> date:
    if week_start not in range(7):
        raise RangeError(f"week_start must be 0..6, got {week_start!r}")
    return day - timedelta(days=(day.weekday() - week_start) % 7)


def start_of_week(instant: DateLike, week_start: int = calendar.SUNDAY, zone: Optional[tzinfo] = None) -> datetime:
    return at_local(_week_start_date(to_date(instant, zone), week_start), zone=zone)


def end_of_week(instant: DateLike, week_start: int = calendar.SUNDAY, zone: Optional[tzinfo] = None) -> datetime:
    last = _week_start_date(to_date(instant, zone), week_start) + timedelta(days=6)
    return end_of_day(last, zone)


def start_of_month(instant: DateLike, zone: Optional[tzinfo] = None) -> datetime:
    return at_local(to_date(instant, zone).replace(day=1), zone=zone)


def end_of_month(instant: DateLike, zone: Optional[tzinfo] = None) -> datetime:
    return end_of_day(to_date(instant, zone) + relativedelta(day=31), zone)


def add_days(value: DateLike, days: int, zone: Optional[tzinfo] = None) -> DateLike:
    """Shift by whole calendar days, keeping the local time of day."""

    if isinstance(value, datetime):
        local = to_local(value, zone)
        return to_local(local.replace(tzinfo=None) + timedelta(days=days), zone)
    return value + timedelta(days=days)


def add_months(value: DateLike, months: int, zone: Optional[tzinfo] = None) -> DateLike:
    """Shift by calendar months, clamping the day to the target month's length."""

    if isinstance(value, datetime):
        local = to_local(value, zone)
        return to_local(local.replace(tzinfo=None) + relativedelta(months=months), zone)
    return value + relativedelta(months=months)


def days_between(a: DateLike, b: DateLike, zone: Optional[tzinfo] = None) -> int:
    """Signed number of calendar days from ``a`` to ``b``."""

    return (to_date(b, zone) - to_date(a, zone)).days


def same_day(a: DateLike, b: DateLike, zone: Optional[tzinfo] = None) -> bool:
    return to_date(a, zone) == to_date(b, zone)


def same_month(a: DateLike, b: DateLike, zone: Optional[tzinfo] = None) -> bool:
    left, right = to_date(a, zone), to_date(b, zone)
    return (left.year, left.month) == (right.year, right.month)


def iter_days(first: date, last: date) -> Iterator[date]:
    """Yield every calendar date from ``first`` through ``last`` inclusive."""

    day = first
    while day <= last:
        yield day
        day += timedelta(days=1)


def parse_instant(value: object, zone: Optional[tzinfo] = None) -> datetime:
    """Parse a raw instant into an aware local datetime.

    Date-only strings mean local midnight, not UTC midnight.
    """

    if isinstance(value, datetime):
        return to_local(value, zone)
    if isinstance(value, date):
        return at_local(value, zone=zone)
    if not isinstance(value, str) or not value.strip():
        raise ParseError(f"missing instant: {value!r}")

    text = value.strip()
    try:
        if _DATE_ONLY.match(text):
            return at_local(date.fromisoformat(text), zone=zone)
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ParseError(f"malformed instant: {value!r}") from exc
    return to_local(parsed, zone)


def parse_calendar_date(value: object, zone: Optional[tzinfo] = None) -> date:
    """Parse a raw instant and reduce it to a local calendar date."""

    if isinstance(value, datetime):
        return to_date(value, zone)
    if isinstance(value, date):
        return value
    return parse_instant(value, zone).date()
