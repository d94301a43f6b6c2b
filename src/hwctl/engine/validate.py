# src/hwctl/engine/validate.py

"""
Input validation rules.

This module validates user-supplied names, dates and page links before
they reach the store.

Responsibilities:
- task / subject name rules,
- due date format,
- resolving task pages against a vault root.

It does NOT mutate the store.
"""

import re
from datetime import date
from pathlib import Path
from typing import Final


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ValidationError(Exception):
    """
    User input failed a naming or format rule.

    Raised before any mutation happens, so the store is unchanged.
    """


class BrokenLinkError(Exception):
    """
    A task page no longer resolves to an existing document.
    """

    def __init__(self, page: str, message: str = "Linked file cannot be found.") -> None:
        super().__init__(message)
        self.page = page


# ---------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------

TASK_NAME_MAX: Final[int] = 100
SUBJECT_NAME_MAX: Final[int] = 32

_ALNUM_RE = re.compile(r"[A-Za-z0-9]")


def _validate_name(value: object, *, max_len: int) -> str:
    if not isinstance(value, str):
        raise ValidationError("Name must be text.")

    name = value.strip()
    if not name:
        raise ValidationError("Name must not be empty.")

    if len(name) > max_len:
        raise ValidationError(f"Must be under {max_len} characters.")

    if not _ALNUM_RE.search(name):
        raise ValidationError("Must not contain special characters.")

    return name


def validate_task_name(value: object) -> str:
    """
    Return the stripped task name or raise ValidationError.

    A name must be 1..100 characters and contain at least one letter or digit.
    """
    return _validate_name(value, max_len=TASK_NAME_MAX)


def validate_subject_name(value: object) -> str:
    """
    Return the stripped subject name or raise ValidationError.

    A name must be 1..32 characters and contain at least one letter or digit.
    """
    return _validate_name(value, max_len=SUBJECT_NAME_MAX)


def validate_task_date(value: object) -> str:
    """
    Return the due date as `YYYY-MM-DD`, or "" for no date.
    """
    if value is None:
        return ""

    if isinstance(value, date):
        return value.isoformat()

    if not isinstance(value, str):
        raise ValidationError("Date must be text.")

    s = value.strip()
    if not s:
        return ""

    try:
        return date.fromisoformat(s).isoformat()
    except ValueError as e:
        raise ValidationError(f"Invalid date '{s}' (expected YYYY-MM-DD).") from e


# ---------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------

def resolve_page(vault_root: str | Path, page: str) -> Path:
    """
    Resolve a vault-relative page to an existing file.

    Raises BrokenLinkError if the page is empty, points outside the
    vault, or the file does not exist.
    """
    rel = (page or "").strip()
    if not rel:
        raise BrokenLinkError(page, "Task has no linked file.")

    root = Path(vault_root).resolve()
    try:
        target = (root / rel).resolve()
    except (OSError, ValueError) as e:
        raise BrokenLinkError(page) from e

    try:
        target.relative_to(root)
    except ValueError as e:
        raise BrokenLinkError(page, f"Linked file points outside the vault: {rel}") from e

    try:
        found = target.is_file()
    except (OSError, ValueError) as e:
        raise BrokenLinkError(page) from e

    if not found:
        raise BrokenLinkError(page)

    return target
