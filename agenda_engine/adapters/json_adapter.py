"""JSON adapter for event/task snapshots."""

from __future__ import annotations

import json
import logging
from typing import Optional

from agenda_engine.schema import Event, Snapshot, Task, TaskList

logger = logging.getLogger(__name__)

_EVENT_FIELDS = {"id", "title", "start", "end"}
_TASK_FIELDS = {"id", "title", "task_list_id"}
_LIST_FIELDS = {"id", "title"}


def _require(item: object, fields: set[str], label: str, index: int) -> dict:
    if not isinstance(item, dict):
        raise ValueError(f"{label} {index}: expected an object")
    missing = sorted(name for name in fields if item.get(name) in (None, ""))
    if missing:
        raise ValueError(f"{label} {index}: missing required fields {missing}")
    return item


def _optional_text(value: object) -> Optional[str]:
    return str(value).strip() if value not in (None, "") else None


def _flag(raw: dict, key: str, label: str, index: int) -> bool:
    value = raw.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"{label} {index}: '{key}' must be true or false")
    return value


def _parse_event(item: object, index: int) -> Event:
    raw = _require(item, _EVENT_FIELDS, "Event", index)
    return Event(
        id=str(raw["id"]).strip(),
        title=str(raw["title"]),
        start=raw["start"],
        end=raw["end"],
        all_day=_flag(raw, "all_day", "Event", index),
        location=_optional_text(raw.get("location")),
        description=_optional_text(raw.get("description")),
        calendar_id=str(raw.get("calendar_id") or "primary"),
    )


def _parse_task(item: object, index: int) -> Task:
    raw = _require(item, _TASK_FIELDS, "Task", index)
    return Task(
        id=str(raw["id"]).strip(),
        title=str(raw["title"]),
        task_list_id=str(raw["task_list_id"]).strip(),
        due=raw.get("due") or None,
        completed=_flag(raw, "completed", "Task", index),
        notes=_optional_text(raw.get("notes")),
        position=str(raw.get("position") or "0"),
        parent=_optional_text(raw.get("parent")),
    )


def _parse_list(item: object, index: int) -> TaskList:
    raw = _require(item, _LIST_FIELDS, "Task list", index)
    return TaskList(id=str(raw["id"]).strip(), title=str(raw["title"]))


def _section(payload: dict, key: str) -> list:
    value = payload.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list of objects")
    return value


def parse(file_path: str) -> Snapshot:
    """Parse a JSON snapshot file.

    Date values are kept as given; the normalizer skips the ones it cannot read.
    """

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object with events/task_lists/tasks")

    snapshot = Snapshot(
        events=[_parse_event(item, i) for i, item in enumerate(_section(payload, "events"), start=1)],
        task_lists=[_parse_list(item, i) for i, item in enumerate(_section(payload, "task_lists"), start=1)],
        tasks=[_parse_task(item, i) for i, item in enumerate(_section(payload, "tasks"), start=1)],
    )
    logger.debug(
        "Loaded %d events, %d task lists, %d tasks from %s",
        len(snapshot.events),
        len(snapshot.task_lists),
        len(snapshot.tasks),
        file_path,
    )
    return snapshot
