"""Core data schema for calendar events, tasks and schedule items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

# Raw instants as handed over by the data layer, parsed lazily by the normalizer.
RawInstant = Union[datetime, date, str, None]


class ItemKind(str, Enum):
    EVENT = "event"
    TASK = "task"


@dataclass
class Event:
    """Calendar event record owned by the event store."""

    id: str
    title: str
    start: RawInstant
    end: RawInstant
    all_day: bool = False
    location: Optional[str] = None
    description: Optional[str] = None
    calendar_id: str = "primary"


@dataclass
class EventFields:
    """Field set used to create an event."""

    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    location: Optional[str] = None
    description: Optional[str] = None


@dataclass
class Task:
    """Task record owned by the task store."""

    id: str
    title: str
    task_list_id: str
    due: RawInstant = None
    completed: bool = False
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    position: str = "0"
    parent: Optional[str] = None


@dataclass
class TaskList:
    id: str
    title: str


@dataclass(frozen=True)
class SourceRef:
    """Back-reference to the record an item was built from."""

    event_id: Optional[str] = None
    task_list_id: Optional[str] = None
    task_id: Optional[str] = None


@dataclass(frozen=True)
class ScheduleItem:
    """Normalized entity consumed by every layout stage.

    For all-day items ``end`` is an exclusive day boundary when it lies after
    ``start``; a single-day all-day item has ``end == start``.
    """

    id: str
    kind: ItemKind
    title: str
    start: datetime
    end: datetime
    all_day: bool
    description: Optional[str] = None
    location: Optional[str] = None
    completed: bool = False
    source: SourceRef = field(default_factory=SourceRef)


@dataclass(frozen=True)
class DisplayRange:
    """Inclusive calendar-day span of an item."""

    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class DaySegment:
    """An item clipped to one week, as column indices 0..6."""

    item: ScheduleItem
    start_idx: int
    end_idx: int

    @property
    def span(self) -> int:
        return self.end_idx - self.start_idx


@dataclass(frozen=True)
class LaneAssignment:
    segment: DaySegment
    lane: int


@dataclass(frozen=True)
class WeekLayout:
    """Packed multi-day bars of one week row."""

    week_start: date
    assignments: list[LaneAssignment]
    lane_count: int

    @property
    def max_lane(self) -> Optional[int]:
        return self.lane_count - 1 if self.lane_count else None


@dataclass
class Snapshot:
    """Events and tasks loaded by the data layer."""

    events: list[Event] = field(default_factory=list)
    task_lists: list[TaskList] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
