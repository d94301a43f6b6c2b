# src/hwctl/engine/migrate.py

"""
Legacy snapshot migration.

Early releases stored a flat mapping:

    {subject_name: {task_name: {"page": ..., "date": ...}}}

This module converts that shape into the current one (a single default
view holding the subjects). It works on raw mappings only: the result is
handed to the normalizer, and persistence happens afterwards through the
regular save path.
"""

from __future__ import annotations

import logging
from typing import Any, Final, Mapping

from .model import DEFAULT_VIEW_NAME

logger = logging.getLogger(__name__)


# Top-level keys that may hold metadata instead of a subject.
RESERVED_KEYS: Final[tuple[str, ...]] = ("settings", "version")


def _is_reserved(key: str, value: Any) -> bool:
    """
    Return True if a top-level entry is metadata rather than a subject.

    A subject may itself be called "version" or "settings"; it is told
    apart by its value being a mapping of task records.
    """
    if key == "version":
        return isinstance(value, str)

    if key == "settings":
        if not isinstance(value, Mapping):
            return True
        return any(not isinstance(v, Mapping) for v in value.values())

    return False


def is_legacy(raw: Mapping[str, Any]) -> bool:
    """Return True if the snapshot predates views."""
    return "views" not in raw


def migrate_legacy(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert a legacy flat mapping into a current-shape raw snapshot.

    Subject and task order follow the mapping's own order.
    """
    subjects: list[dict[str, Any]] = []

    for subject_name, legacy_tasks in raw.items():
        if _is_reserved(subject_name, legacy_tasks):
            continue

        if not isinstance(legacy_tasks, Mapping):
            logger.warning("Skipping legacy subject %r: not a mapping", subject_name)
            continue

        tasks: list[dict[str, Any]] = []
        for task_name, record in legacy_tasks.items():
            if not isinstance(record, Mapping):
                record = {}

            tasks.append(
                {
                    "name": str(task_name),
                    "date": record.get("date", ""),
                    "page": record.get("page", ""),
                }
            )

        subjects.append({"name": str(subject_name), "tasks": tasks})

    out: dict[str, Any] = {
        "views": [
            {
                "name": DEFAULT_VIEW_NAME,
                "subjects": subjects,
                "tasks": [],
            }
        ],
    }

    for key in RESERVED_KEYS:
        if key in raw and _is_reserved(key, raw[key]):
            out[key] = raw[key]

    logger.info(
        "Migrated legacy data: %d subject(s), %d task(s)",
        len(subjects),
        sum(len(s["tasks"]) for s in subjects),
    )
    return out
