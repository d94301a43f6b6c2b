# src/hwctl/engine/editor.py

"""
Store mutation engine.

This module contains *all* state-changing operations on the store:
adding, removing, renaming and reordering views, subjects and tasks,
plus settings and update tracking.

Design principles:
- One DataEditor owns the in-memory store for the process lifetime.
- Every mutation is followed by a full snapshot write.
- Invalid indices are a silent no-op (logged at DEBUG); invalid input
  raises ValidationError before anything changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .model import SETTING_KEYS, Store, Subject, Task, View, swap_adjacent
from .store import SnapshotBackend, load, persist
from .validate import ValidationError, validate_subject_name, validate_task_date, validate_task_name

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Location:
    """
    Current position of an entity.

    subject_index is None for views and top-level tasks;
    task_index is None for views and subjects.
    """

    view_index: int
    subject_index: Optional[int] = None
    task_index: Optional[int] = None


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _at(items: list[Any], index: Optional[int]) -> Any:
    """Return items[index], or None for a missing/out-of-range index."""
    if index is None or index < 0 or index >= len(items):
        return None
    return items[index]


def _coerce_task(task: Task | Mapping[str, Any]) -> Task:
    if isinstance(task, Task):
        name, date, page = task.name, task.date, task.page
    else:
        name, date, page = task.get("name"), task.get("date", ""), task.get("page", "")

    return Task(
        name=validate_task_name(name),
        date=validate_task_date(date),
        page=str(page or "").strip(),
    )


# ---------------------------------------------------------------------
# Editor
# ---------------------------------------------------------------------

class DataEditor:
    """
    Owns the store and its backend.

    Construct with DataEditor.open(backend) on startup and close() (or use
    as a context manager) on shutdown.
    """

    def __init__(self, store: Store, backend: SnapshotBackend) -> None:
        self.store = store
        self.backend = backend

    @classmethod
    def open(cls, backend: SnapshotBackend) -> "DataEditor":
        return cls(load(backend), backend)

    def close(self) -> None:
        self.persist()

    def __enter__(self) -> "DataEditor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def persist(self) -> None:
        persist(self.store, self.backend)

    # -----------------------------------------------------------------
    # Lookup
    # -----------------------------------------------------------------

    def view_index(self, index: Optional[int]) -> int:
        """
        Return `index` if it names a view, else 0.
        """
        if _at(self.store.views, index) is None:
            if index is not None:
                logger.info("View %s not found; falling back to view 0", index)
            return 0
        return index  # type: ignore[return-value]

    def get_view(self, index: Optional[int] = 0) -> View:
        return self.store.views[self.view_index(index)]

    def _task_list(self, view_index: int, subject_index: Optional[int]) -> Optional[list[Task]]:
        view = _at(self.store.views, view_index)
        if view is None:
            return None

        if subject_index is None:
            return view.tasks

        subject = _at(view.subjects, subject_index)
        return None if subject is None else subject.tasks

    def get_task(
        self,
        view_index: int,
        task_index: int,
        subject_index: Optional[int] = None,
    ) -> Optional[Task]:
        """Return the task at a position, or None if any index is invalid."""
        tasks = self._task_list(view_index, subject_index)
        return None if tasks is None else _at(tasks, task_index)

    def locate(self, entity_id: str) -> Optional[Location]:
        """
        Find the current position of a view, subject or task by id.
        """
        for vi, view in enumerate(self.store.views):
            if view.id == entity_id:
                return Location(vi)

            for ti, task in enumerate(view.tasks):
                if task.id == entity_id:
                    return Location(vi, None, ti)

            for si, subject in enumerate(view.subjects):
                if subject.id == entity_id:
                    return Location(vi, si)

                for ti, task in enumerate(subject.tasks):
                    if task.id == entity_id:
                        return Location(vi, si, ti)

        return None

    # -----------------------------------------------------------------
    # Views
    # -----------------------------------------------------------------

    def add_view(self, name: str) -> View:
        view = View(name=name)
        self.store.views.append(view)
        self.persist()
        return view

    def remove_view(self, view_index: int) -> Optional[View]:
        """
        Delete a view with everything in it.

        The last remaining view cannot be removed.
        """
        if _at(self.store.views, view_index) is None:
            logger.debug("remove_view: no view %s", view_index)
            return None

        if len(self.store.views) == 1:
            logger.info("Refusing to remove the only view")
            return None

        view = self.store.views.pop(view_index)
        self.persist()
        return view

    def rename_view(self, view_index: int, name: str) -> bool:
        view = _at(self.store.views, view_index)
        if view is None:
            logger.debug("rename_view: no view %s", view_index)
            return False

        view.name = name
        self.persist()
        return True

    def move_view(self, view_index: int, up: bool) -> bool:
        if not swap_adjacent(self.store.views, view_index, up):
            return False

        self.persist()
        return True

    # -----------------------------------------------------------------
    # Subjects
    # -----------------------------------------------------------------

    def add_subject(self, view_index: int, name: str) -> Optional[Subject]:
        """
        Append an empty subject to a view.

        Names are validated but not required to be unique.
        """
        name = validate_subject_name(name)

        view = _at(self.store.views, view_index)
        if view is None:
            logger.debug("add_subject: no view %s", view_index)
            return None

        subject = Subject(name=name)
        view.subjects.append(subject)
        self.persist()
        return subject

    def remove_subject(self, view_index: int, subject_index: int) -> Optional[Subject]:
        """
        Delete a subject together with all of its tasks.
        """
        view = _at(self.store.views, view_index)
        if view is None or _at(view.subjects, subject_index) is None:
            logger.debug("remove_subject: no subject %s in view %s", subject_index, view_index)
            return None

        subject = view.subjects.pop(subject_index)
        self.persist()
        return subject

    def rename_subject(self, view_index: int, subject_index: int, name: str) -> bool:
        name = validate_subject_name(name)

        view = _at(self.store.views, view_index)
        subject = None if view is None else _at(view.subjects, subject_index)
        if subject is None:
            logger.debug("rename_subject: no subject %s in view %s", subject_index, view_index)
            return False

        subject.name = name
        self.persist()
        return True

    # -----------------------------------------------------------------
    # Tasks
    # -----------------------------------------------------------------

    def add_task(
        self,
        view_index: int,
        task: Task | Mapping[str, Any],
        subject_index: Optional[int] = None,
    ) -> Optional[Task]:
        """
        Append a task to a subject, or to the view's top-level list when
        subject_index is None.
        """
        new_task = _coerce_task(task)

        tasks = self._task_list(view_index, subject_index)
        if tasks is None:
            logger.debug("add_task: no target view=%s subject=%s", view_index, subject_index)
            return None

        tasks.append(new_task)
        self.persist()
        return new_task

    def remove_task(
        self,
        view_index: int,
        task_index: int,
        subject_index: Optional[int] = None,
    ) -> Optional[Task]:
        """
        Delete a task (completing a task removes it).

        Later tasks in the same list shift down by one.
        """
        tasks = self._task_list(view_index, subject_index)
        if tasks is None or _at(tasks, task_index) is None:
            logger.debug(
                "remove_task: no task %s (view=%s subject=%s)",
                task_index,
                view_index,
                subject_index,
            )
            return None

        task = tasks.pop(task_index)
        self.persist()
        return task

    def move_task(
        self,
        view_index: int,
        task_index: int,
        up: bool,
        subject_index: Optional[int] = None,
    ) -> bool:
        """
        Swap a task with its neighbour. No-op at the top (up) or bottom.
        """
        tasks = self._task_list(view_index, subject_index)
        if tasks is None or not swap_adjacent(tasks, task_index, up):
            return False

        self.persist()
        return True

    def update_task(
        self,
        view_index: int,
        task_index: int,
        subject_index: Optional[int] = None,
        *,
        name: Optional[str] = None,
        date: Optional[str] = None,
        page: Optional[str] = None,
    ) -> Optional[Task]:
        """
        Edit task fields in place. Fields left as None are unchanged.
        """
        new_name = None if name is None else validate_task_name(name)
        new_date = None if date is None else validate_task_date(date)

        tasks = self._task_list(view_index, subject_index)
        task = None if tasks is None else _at(tasks, task_index)
        if task is None:
            logger.debug("update_task: no task %s (view=%s subject=%s)", task_index, view_index, subject_index)
            return None

        if new_name is not None:
            task.name = new_name
        if new_date is not None:
            task.date = new_date
        if page is not None:
            task.page = page.strip()

        self.persist()
        return task

    # -----------------------------------------------------------------
    # Id-addressed operations
    # -----------------------------------------------------------------

    def remove(self, entity_id: str) -> bool:
        """
        Remove a view, subject or task by id.
        """
        loc = self.locate(entity_id)
        if loc is None:
            return False

        if loc.task_index is not None:
            return self.remove_task(loc.view_index, loc.task_index, loc.subject_index) is not None

        if loc.subject_index is not None:
            return self.remove_subject(loc.view_index, loc.subject_index) is not None

        return self.remove_view(loc.view_index) is not None

    def move_task_by_id(self, task_id: str, up: bool) -> bool:
        loc = self.locate(task_id)
        if loc is None or loc.task_index is None:
            return False

        return self.move_task(loc.view_index, loc.task_index, up, loc.subject_index)

    # -----------------------------------------------------------------
    # Settings / version
    # -----------------------------------------------------------------

    def set_setting(self, key: str, value: bool) -> None:
        """
        Update a recognised option. Accepts persisted (camelCase) or
        attribute (snake_case) names.
        """
        attr = SETTING_KEYS.get(key, key)
        if attr not in SETTING_KEYS.values():
            allowed = ", ".join(SETTING_KEYS)
            raise ValidationError(f"Unknown setting '{key}' (allowed: {allowed})")

        setattr(self.store.settings, attr, bool(value))
        self.persist()

    def check_updated(self, current_version: str) -> bool:
        """
        Return True once per new application version.
        """
        if self.store.version == current_version:
            return False

        logger.info("Data last opened by version %r, now %r", self.store.version, current_version)
        self.store.version = current_version
        self.persist()
        return True
