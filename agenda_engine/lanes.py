"""Greedy lane packing of multi-day items within one week row."""

from __future__ import annotations

from datetime import timedelta, tzinfo
from typing import Iterable, Optional

import numpy as np

from agenda_engine.dates import DateLike, days_between, to_date
from agenda_engine.normalizer import display_range
from agenda_engine.schema import DaySegment, LaneAssignment, ScheduleItem, WeekLayout

DAYS_PER_WEEK = 7


def week_segments(
    items: Iterable[ScheduleItem],
    week_start: DateLike,
    zone: Optional[tzinfo] = None,
) -> list[DaySegment]:
    """Clip every multi-day item that touches the week to column indices 0..6."""

    week_start = to_date(week_start, zone)
    week_end = week_start + timedelta(days=DAYS_PER_WEEK - 1)
    segments: list[DaySegment] = []
    for item in items:
        span = display_range(item, zone)
        if span.start == span.end:
            continue
        if span.end < week_start or span.start > week_end:
            continue
        first = max(span.start, week_start)
        last = min(span.end, week_end)
        segments.append(DaySegment(item, days_between(week_start, first), days_between(week_start, last)))
    return segments


def _first_free_lane(occupancy: np.ndarray, segment: DaySegment) -> int:
    busy = occupancy[:, segment.start_idx : segment.end_idx + 1].any(axis=1)
    free = np.flatnonzero(~busy)
    return int(free[0]) if free.size else occupancy.shape[0]


def assign_lanes(segments: Iterable[DaySegment]) -> list[LaneAssignment]:
    """Place segments in the lowest lane whose slots are all free.

    Segments are visited by start column, longer spans first on equal starts;
    remaining ties keep their input order.
    """

    ordered = sorted(segments, key=lambda seg: (seg.start_idx, -seg.span))
    occupancy = np.zeros((0, DAYS_PER_WEEK), dtype=bool)
    placed: list[LaneAssignment] = []
    for segment in ordered:
        lane = _first_free_lane(occupancy, segment)
        if lane == occupancy.shape[0]:
            occupancy = np.vstack([occupancy, np.zeros((1, DAYS_PER_WEEK), dtype=bool)])
        occupancy[lane, segment.start_idx : segment.end_idx + 1] = True
        placed.append(LaneAssignment(segment, lane))
    return placed


def pack_week(items: Iterable[ScheduleItem], week_start: DateLike, zone: Optional[tzinfo] = None) -> WeekLayout:
    week_start = to_date(week_start, zone)
    assignments = assign_lanes(week_segments(items, week_start, zone))
    lane_count = max((a.lane for a in assignments), default=-1) + 1
    return WeekLayout(week_start=week_start, assignments=assignments, lane_count=lane_count)
