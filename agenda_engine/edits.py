"""Create/edit drafts and their commit to the event and task stores."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, tzinfo
from typing import Optional

from agenda_engine.dates import DateLike, parse_instant, to_local
from agenda_engine.errors import NotFound, ParseError
from agenda_engine.resolver import default_form_times, form_times, resolve_times, to_local_input_value
from agenda_engine.schema import Event, EventFields, ItemKind, ScheduleItem, Task
from agenda_engine.stores import EventStore, TaskStore

logger = logging.getLogger(__name__)


@dataclass
class EventDraft:
    title: str
    start_text: str
    end_text: str
    all_day: bool = False
    location: Optional[str] = None
    description: Optional[str] = None


@dataclass
class TaskDraft:
    title: str
    notes: Optional[str] = None
    due_text: Optional[str] = None


def _title(value: str) -> str:
    title = (value or "").strip()
    if not title:
        raise ValueError("title is required")
    return title


def _optional(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value.strip() or None


def new_event_draft(base: DateLike, zone: Optional[tzinfo] = None) -> EventDraft:
    start_text, end_text = default_form_times(base, zone)
    return EventDraft(title="", start_text=start_text, end_text=end_text)


def event_draft(item: ScheduleItem, zone: Optional[tzinfo] = None) -> EventDraft:
    start_text, end_text = form_times(item, zone)
    return EventDraft(
        title=item.title,
        start_text=start_text,
        end_text=end_text,
        all_day=item.all_day,
        location=item.location,
        description=item.description,
    )


def task_draft(item: ScheduleItem, task: Optional[Task] = None, zone: Optional[tzinfo] = None) -> TaskDraft:
    """Prefill a task editor, preferring the source task's own values."""

    due_text = ""
    if task is not None and task.due:
        try:
            due_text = to_local_input_value(parse_instant(task.due, zone), zone)
        except ParseError:
            logger.warning("Task %s has an unreadable due date", task.id)
    if not due_text:
        due_text = to_local_input_value(item.start, zone)
    return TaskDraft(
        title=task.title if task is not None else item.title,
        notes=(task.notes if task is not None else None) or item.description,
        due_text=due_text,
    )


def commit_new_event(
    store: EventStore,
    account_id: str,
    draft: EventDraft,
    now: Optional[datetime] = None,
    zone: Optional[tzinfo] = None,
) -> Event:
    title = _title(draft.title)
    times = resolve_times(draft.start_text, draft.end_text, draft.all_day, now=now, zone=zone)
    event = store.create_event(
        account_id,
        EventFields(
            title=title,
            start=times.start,
            end=times.stored_end(zone),
            all_day=times.all_day,
            location=_optional(draft.location),
            description=_optional(draft.description),
        ),
    )
    logger.info("Created event %s for account %s", event.id, account_id)
    return event


def _source_event(store: EventStore, account_id: str, item: ScheduleItem) -> Event:
    if item.kind is not ItemKind.EVENT or not item.source.event_id:
        raise NotFound(f"Item '{item.id}' does not reference an event")
    for event in store.list_events(account_id):
        if event.id == item.source.event_id:
            return event
    raise NotFound(f"Event '{item.source.event_id}' no longer exists")


def commit_event_edit(
    store: EventStore,
    account_id: str,
    item: ScheduleItem,
    draft: EventDraft,
    now: Optional[datetime] = None,
    zone: Optional[tzinfo] = None,
) -> Event:
    """Save an edited event; raises NotFound when the event has gone away."""

    title = _title(draft.title)
    source = _source_event(store, account_id, item)
    times = resolve_times(
        draft.start_text,
        draft.end_text,
        draft.all_day,
        now=now,
        zone=zone,
        fallback_start=item.start,
    )
    updated = replace(
        source,
        title=title,
        start=times.start,
        end=times.stored_end(zone),
        all_day=times.all_day,
        location=_optional(draft.location),
        description=_optional(draft.description),
    )
    saved = store.save_event(account_id, updated)
    logger.info("Saved event %s for account %s", saved.id, account_id)
    return saved


def commit_event_delete(store: EventStore, account_id: str, item: ScheduleItem) -> None:
    source = _source_event(store, account_id, item)
    store.delete_event(account_id, source.id)
    logger.info("Deleted event %s for account %s", source.id, account_id)


def _source_task(store: TaskStore, account_id: str, task_list_id: Optional[str], task_id: Optional[str]) -> Task:
    if not task_list_id or not task_id:
        raise NotFound("Item does not reference a task")
    for task in store.list_tasks(account_id, task_list_id):
        if task.id == task_id:
            return task
    raise NotFound(f"Task '{task_id}' no longer exists in list '{task_list_id}'")


def commit_task_edit(
    store: TaskStore,
    account_id: str,
    item: ScheduleItem,
    draft: TaskDraft,
    zone: Optional[tzinfo] = None,
) -> Task:
    """Save an edited task; an unreadable due keeps the previous one."""

    title = _title(draft.title)
    source = _source_task(store, account_id, item.source.task_list_id, item.source.task_id)

    due = source.due
    if not draft.due_text or not draft.due_text.strip():
        due = None
    else:
        try:
            due = parse_instant(draft.due_text, zone)
        except ParseError as exc:
            logger.warning("Keeping previous due for task %s: %s", source.id, exc)

    saved = store.save_task(
        account_id,
        source.task_list_id,
        replace(source, title=title, notes=_optional(draft.notes), due=due),
    )
    logger.info("Saved task %s in list %s", saved.id, saved.task_list_id)
    return saved


def toggle_task_completion(
    store: TaskStore,
    account_id: str,
    task_list_id: str,
    task_id: str,
    now: Optional[datetime] = None,
    zone: Optional[tzinfo] = None,
) -> Task:
    source = _source_task(store, account_id, task_list_id, task_id)
    completed = not source.completed
    completed_at = to_local(now or datetime.now(zone), zone) if completed else None
    return store.save_task(account_id, task_list_id, replace(source, completed=completed, completed_at=completed_at))
