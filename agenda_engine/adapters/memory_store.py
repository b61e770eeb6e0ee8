"""Dict-backed event and task stores."""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Optional

from agenda_engine.errors import NotFound
from agenda_engine.schema import Event, EventFields, Task, TaskList


class InMemoryEventStore:
    """Events per account, returned as copies so callers cannot mutate storage."""

    def __init__(self, events: Optional[dict[str, list[Event]]] = None):
        self._events: dict[str, dict[str, Event]] = {
            account_id: {event.id: replace(event) for event in items} for account_id, items in (events or {}).items()
        }

    def list_events(self, account_id: str) -> list[Event]:
        return [replace(event) for event in self._events.get(account_id, {}).values()]

    def create_event(self, account_id: str, fields: EventFields) -> Event:
        event = Event(
            id=uuid.uuid4().hex,
            title=fields.title,
            start=fields.start,
            end=fields.end,
            all_day=fields.all_day,
            location=fields.location,
            description=fields.description,
        )
        self._events.setdefault(account_id, {})[event.id] = event
        return replace(event)

    def save_event(self, account_id: str, event: Event) -> Event:
        stored = self._events.get(account_id, {})
        if event.id not in stored:
            raise NotFound(f"Event '{event.id}' not found for account '{account_id}'")
        stored[event.id] = replace(event)
        return replace(event)

    def delete_event(self, account_id: str, event_id: str) -> None:
        stored = self._events.get(account_id, {})
        if event_id not in stored:
            raise NotFound(f"Event '{event_id}' not found for account '{account_id}'")
        del stored[event_id]


class InMemoryTaskStore:
    """Task lists and their tasks per account."""

    def __init__(
        self,
        task_lists: Optional[dict[str, list[TaskList]]] = None,
        tasks: Optional[dict[str, list[Task]]] = None,
    ):
        self._lists: dict[str, list[TaskList]] = {
            account_id: [replace(tl) for tl in lists] for account_id, lists in (task_lists or {}).items()
        }
        self._tasks: dict[tuple[str, str], dict[str, Task]] = {}
        for account_id, items in (tasks or {}).items():
            for task in items:
                self._tasks.setdefault((account_id, task.task_list_id), {})[task.id] = replace(task)

    def list_task_lists(self, account_id: str) -> list[TaskList]:
        return [replace(tl) for tl in self._lists.get(account_id, [])]

    def list_tasks(self, account_id: str, task_list_id: str) -> list[Task]:
        return [replace(task) for task in self._tasks.get((account_id, task_list_id), {}).values()]

    def save_task(self, account_id: str, task_list_id: str, task: Task) -> Task:
        stored = self._tasks.get((account_id, task_list_id), {})
        if task.id not in stored:
            raise NotFound(f"Task '{task.id}' not found in list '{task_list_id}'")
        stored[task.id] = replace(task)
        return replace(task)
