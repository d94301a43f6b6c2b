# src/hwctl/engine/model.py

"""
Core domain models.

This module defines the in-memory representations of views, subjects,
tasks and the store that owns them, along with the default ordering
helpers.

No persistence should happen here.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Final, Iterator


DEFAULT_VIEW_NAME: Final[str] = "Default"


def new_id() -> str:
    """Return a fresh opaque entity id."""
    return uuid.uuid4().hex


# ---------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Task:
    """
    A single assignment.

    Notes:
    - date is an ISO calendar date string or "".
    - page is a vault-relative document path or "".
    - id lives only in memory and is ignored by equality.
    """

    name: str
    date: str = ""
    page: str = ""

    id: str = field(default_factory=new_id, compare=False, repr=False)

    @property
    def has_link(self) -> bool:
        return bool(self.page)

    @property
    def has_date(self) -> bool:
        return bool(self.date)


# ---------------------------------------------------------------------
# Subject
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Subject:
    """
    A named, ordered group of tasks inside a view.
    """

    name: str
    tasks: list[Task] = field(default_factory=list)

    id: str = field(default_factory=new_id, compare=False, repr=False)


# ---------------------------------------------------------------------
# View
# ---------------------------------------------------------------------

@dataclass(slots=True)
class View:
    """
    A named page of subjects plus its own subject-less tasks.
    """

    name: str
    subjects: list[Subject] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)

    id: str = field(default_factory=new_id, compare=False, repr=False)

    @property
    def task_count(self) -> int:
        return len(self.tasks) + sum(len(s.tasks) for s in self.subjects)


# ---------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------

# persisted key -> attribute name
SETTING_KEYS: Final[dict[str, str]] = {
    "showTooltips": "show_tooltips",
    "autoSortForTaskQuantity": "auto_sort_for_task_quantity",
}


@dataclass(slots=True)
class Settings:
    """
    User options stored alongside the views.

    Unrecognised keys found in a snapshot are kept in `extra`
    so that they survive a load/save cycle.
    """

    show_tooltips: bool = True
    auto_sort_for_task_quantity: bool = False
    extra: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Store:
    """
    Root aggregate: every view plus settings, persisted as one snapshot.

    `version` is the last application version that opened the snapshot.
    """

    views: list[View] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    version: str = ""

    def iter_tasks(self) -> Iterator[Task]:
        for view in self.views:
            yield from view.tasks
            for subject in view.subjects:
                yield from subject.tasks


# ---------------------------------------------------------------------
# Ordering helpers
# ---------------------------------------------------------------------

def subjects_by_task_quantity(view: View) -> list[tuple[int, Subject]]:
    """
    Display ordering for subjects when auto-sort is enabled:

    1. task count (most first)
    2. stored position (stable tie-breaker)

    Stored order is left untouched; the original index is returned
    with every subject so callers can still address it.
    """
    return sorted(
        enumerate(view.subjects),
        key=lambda pair: (-len(pair[1].tasks), pair[0]),
    )


def swap_adjacent(items: list[Any], index: int, up: bool) -> bool:
    """
    Swap items[index] with its neighbour above (up) or below.

    Returns False (and leaves the list alone) at the boundary or
    when index is out of range.
    """
    if index < 0 or index >= len(items):
        return False

    other = index - 1 if up else index + 1
    if other < 0 or other >= len(items):
        return False

    items[index], items[other] = items[other], items[index]
    return True
