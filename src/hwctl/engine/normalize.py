# src/hwctl/engine/normalize.py

"""
Snapshot normalisation.

Turns a raw (already migrated) snapshot mapping into a Store, filling in
everything older snapshots may lack:

- an empty default view when there are no views,
- empty subject / task lists,
- empty date / page strings,
- every recognised setting.

normalize() is idempotent: feeding its own output back in yields an
equal Store. to_snapshot() is the inverse used for persistence.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping

from .model import DEFAULT_VIEW_NAME, SETTING_KEYS, Settings, Store, Subject, Task, View

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def normalize(raw: Mapping[str, Any] | Store) -> Store:
    """
    Build a valid Store from a raw snapshot (or re-normalise a Store).
    """
    if isinstance(raw, Store):
        raw = to_snapshot(raw)

    if not isinstance(raw, Mapping):
        logger.warning("Snapshot root is %s, not a mapping; starting empty", type(raw).__name__)
        raw = {}

    views = [_view(v) for v in _list(raw.get("views"), "views") if _is_mapping(v, "view")]

    if not views:
        logger.info("No views found; adding empty %r view", DEFAULT_VIEW_NAME)
        views.append(View(name=DEFAULT_VIEW_NAME))

    version = raw.get("version", "")
    if not isinstance(version, str):
        version = ""

    return Store(
        views=views,
        settings=_settings(raw.get("settings")),
        version=version,
    )


def to_snapshot(store: Store) -> dict[str, Any]:
    """
    Render a Store into the persisted snapshot shape.

    Entity ids are runtime-only and are not written.
    """
    settings: dict[str, Any] = dict(store.settings.extra)
    for key, attr in SETTING_KEYS.items():
        settings[key] = getattr(store.settings, attr)

    return {
        "views": [
            {
                "name": view.name,
                "subjects": [
                    {
                        "name": subject.name,
                        "tasks": [_task_dict(t) for t in subject.tasks],
                    }
                    for subject in view.subjects
                ],
                "tasks": [_task_dict(t) for t in view.tasks],
            }
            for view in store.views
        ],
        "settings": settings,
        "version": store.version,
    }


# ---------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------

def _view(data: Mapping[str, Any]) -> View:
    name = data.get("name")
    return View(
        name=DEFAULT_VIEW_NAME if name is None else _text(name),
        subjects=[_subject(s) for s in _list(data.get("subjects"), "subjects") if _is_mapping(s, "subject")],
        tasks=[_task(t) for t in _list(data.get("tasks"), "tasks") if _is_mapping(t, "task")],
    )


def _subject(data: Mapping[str, Any]) -> Subject:
    return Subject(
        name=_text(data.get("name")),
        tasks=[_task(t) for t in _list(data.get("tasks"), "tasks") if _is_mapping(t, "task")],
    )


def _task(data: Mapping[str, Any]) -> Task:
    return Task(
        name=_text(data.get("name")),
        date=_text(data.get("date")),
        page=_text(data.get("page")),
    )


def _task_dict(task: Task) -> dict[str, str]:
    return {"name": task.name, "date": task.date, "page": task.page}


# ---------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------

def _settings(raw: Any) -> Settings:
    if not isinstance(raw, Mapping):
        return Settings()

    settings = Settings()
    for key, value in raw.items():
        attr = SETTING_KEYS.get(key)
        if attr is None:
            settings.extra[str(key)] = value
            continue

        # Wrong types keep the default.
        if isinstance(value, bool):
            setattr(settings, attr, value)

    return settings


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value if isinstance(value, str) else str(value)


def _list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Ignoring %s: expected a list, got %s", what, type(value).__name__)
        return []
    return value


def _is_mapping(value: Any, what: str) -> bool:
    if isinstance(value, Mapping):
        return True
    logger.warning("Dropping %s entry: expected a mapping, got %s", what, type(value).__name__)
    return False
