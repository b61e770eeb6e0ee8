"""Engine settings loaded from an optional JSON file."""

from __future__ import annotations

import calendar
import json
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from agenda_engine.dates import resolve_zone
from agenda_engine.errors import RangeError

_WEEKDAYS = {name.lower(): index for index, name in enumerate(calendar.day_name)}


@dataclass
class EngineConfig:
    timezone: str = "local"
    week_start: int = calendar.SUNDAY
    show_events: bool = True
    show_tasks: bool = True

    def zone(self) -> tzinfo:
        return resolve_zone(self.timezone)


def _week_start(value: object) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid week_start {value!r}")
    if isinstance(value, int):
        if value not in range(7):
            raise RangeError(f"week_start must be 0..6, got {value}")
        return value
    name = str(value).strip().lower()
    if name not in _WEEKDAYS:
        raise ValueError(f"Invalid week_start '{value}'")
    return _WEEKDAYS[name]


def _flag(payload: dict, key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false")
    return value


def from_mapping(payload: dict) -> EngineConfig:
    """Build a config from a dict, validating every known key."""

    if not isinstance(payload, dict):
        raise ValueError("Config payload must be an object")

    config = EngineConfig(
        timezone=str(payload.get("timezone") or "local"),
        week_start=_week_start(payload.get("week_start", calendar.SUNDAY)),
        show_events=_flag(payload, "show_events", True),
        show_tasks=_flag(payload, "show_tasks", True),
    )
    config.zone()
    return config


def load(file_path: Optional[str] = None) -> EngineConfig:
    if file_path is None:
        return EngineConfig()
    with open(file_path, encoding="utf-8") as handle:
        return from_mapping(json.load(handle))
