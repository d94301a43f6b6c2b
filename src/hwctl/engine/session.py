# src/hwctl/engine/session.py

"""
Presentation session state.

Tracks which view is shown, whether the user is browsing or editing,
and whether a creation prompt (new subject / new task) is open.

The creation guard only matters to a long-lived front end that can
have a prompt open across several user actions. The one-shot CLI
builds a fresh session per command, so it never sees a conflict there.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class CreationConflict(Exception):
    """
    A creation prompt is already open.

    Flow control only: callers show the message and carry on.
    """


# ---------------------------------------------------------------------
# Mode
# ---------------------------------------------------------------------

class Mode(str, Enum):
    """
    VIEW: browse; completing a task removes it.
    EDIT: rename, reorder, change links and dates.
    """

    VIEW = "view"
    EDIT = "edit"


# ---------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------

@dataclass(slots=True)
class EditorSession:
    view_index: int = 0
    mode: Mode = Mode.VIEW
    _creating: str = ""

    @property
    def is_creating(self) -> bool:
        return bool(self._creating)

    @property
    def edit_mode(self) -> bool:
        return self.mode is Mode.EDIT

    def toggle_mode(self) -> Mode:
        if self.is_creating:
            raise CreationConflict("Please complete prompt first.")

        self.mode = Mode.VIEW if self.mode is Mode.EDIT else Mode.EDIT
        return self.mode

    @contextmanager
    def creation(self, kind: str) -> Iterator[None]:
        """
        Hold the creation slot while a prompt is open.

        Released on every exit path: confirm, cancel or error.
        """
        if self.is_creating:
            raise CreationConflict(f"Already creating {self._creating}.")

        self._creating = kind
        try:
            yield
        finally:
            self._creating = ""
