"""Contracts of the external event and task stores."""

from __future__ import annotations

from typing import Protocol

from agenda_engine.schema import Event, EventFields, Task, TaskList


class EventStore(Protocol):
    def list_events(self, account_id: str) -> list[Event]: ...

    def create_event(self, account_id: str, fields: EventFields) -> Event: ...

    def save_event(self, account_id: str, event: Event) -> Event: ...

    def delete_event(self, account_id: str, event_id: str) -> None: ...


class TaskStore(Protocol):
    def list_task_lists(self, account_id: str) -> list[TaskList]: ...

    def list_tasks(self, account_id: str, task_list_id: str) -> list[Task]: ...

    def save_task(self, account_id: str, task_list_id: str, task: Task) -> Task: ...
