# src/hwctl/engine/render.py

"""
Rendering helpers for CLI output.

This module is responsible for:
- the view listing (views),
- the structured view body (show), in view or edit mode,
- human-friendly due date labels.

It is presentation-only: it reads the store but never mutates it.
"""

from __future__ import annotations

import sys
from datetime import date, timedelta
from typing import Optional

from .model import Store, Task, subjects_by_task_quantity


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_RESET = "\033[0m"
_DIM = "\033[90m"
_RED = "\033[31m"
_BOLD = "\033[1m"
_UNDERLINE = "\033[4m"


def _supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


# ---------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------

def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def due_label(value: str, today: Optional[date] = None) -> str:
    """
    Format a due date relative to today.

    Today / Tomorrow / Yesterday, otherwise e.g. "Mon, January 1, 2024".
    Unparseable values are returned unchanged.
    """
    d = _parse_date(value)
    if d is None:
        return value

    today = today or date.today()
    if d == today:
        return "Today"
    if d == today + timedelta(days=1):
        return "Tomorrow"
    if d == today - timedelta(days=1):
        return "Yesterday"

    return f"{d:%a, %B} {d.day}, {d.year}"


def is_overdue(value: str, today: Optional[date] = None) -> bool:
    d = _parse_date(value)
    if d is None:
        return False
    return d < (today or date.today())


# ---------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------

def render_views(store: Store, *, current: Optional[int] = None) -> None:
    """
    List views with their index and task count.
    """
    for i, view in enumerate(store.views):
        marker = "*" if i == current else " "
        print(f"{marker} [{i}] {view.name} ({view.task_count} tasks)")


def render_view(
    store: Store,
    view_index: int,
    *,
    edit_mode: bool = False,
    color: bool = True,
    today: Optional[date] = None,
) -> None:
    """
    Render one view: top-level tasks first, then subjects.

    Positional indices are printed for use with the edit commands. In
    edit mode subjects keep their stored order and every link is shown.
    """
    use_color = color and _supports_color()
    today = today or date.today()
    view = store.views[view_index]
    settings = store.settings

    def bold(s: str) -> str:
        return f"{_BOLD}{s}{_RESET}" if use_color else s

    def task_line(prefix: str, index: int, task: Task) -> str:
        label = f"[{index}] "
        name = task.name
        if task.has_link:
            name = f"{_UNDERLINE}{name}{_RESET}" if use_color else f"{name} ->"

        line = f"{prefix}{label}{name}"

        if task.has_date:
            due = due_label(task.date, today)
            if is_overdue(task.date, today):
                due = f"{_RED}{due}{_RESET}" if use_color else f"{due} (overdue)"
            line += f"  {due}"

        if task.has_link and (settings.show_tooltips or edit_mode):
            link = f"({task.page})"
            line += f"  {_DIM}{link}{_RESET}" if use_color else f"  {link}"

        return line

    title = view.name
    if edit_mode:
        title += " (editing)"
    print(bold(title))
    print("=" * max(6, len(title)))

    for ti, task in enumerate(view.tasks):
        print(task_line("", ti, task))

    if settings.auto_sort_for_task_quantity and not edit_mode:
        subjects = subjects_by_task_quantity(view)
    else:
        subjects = list(enumerate(view.subjects))

    for si, subject in subjects:
        print()
        print(bold(f"[{si}] {subject.name}"))

        if not subject.tasks:
            print(f"  {_DIM}(no tasks){_RESET}" if use_color else "  (no tasks)")

        for ti, task in enumerate(subject.tasks):
            print(task_line("  ", ti, task))
