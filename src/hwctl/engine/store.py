# src/hwctl/engine/store.py

"""
Snapshot persistence.

This module contains:
- the backend protocol (load / save one opaque snapshot),
- a YAML file backend and an in-memory backend,
- the load pipeline (read -> migrate -> normalise -> write back),
- full-snapshot persistence.

The whole store is always written; there are no partial writes.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import yaml

from .migrate import is_legacy, migrate_legacy
from .model import Store
from .normalize import normalize, to_snapshot

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParseError(Exception):
    """
    Raised when a persisted snapshot cannot be read or has the wrong shape.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------

class SnapshotBackend(Protocol):
    """Key-value persistence for a single snapshot."""

    def load(self) -> dict[str, Any]: ...

    def save(self, data: dict[str, Any]) -> None: ...


class YamlSnapshotFile:
    """
    Snapshot stored as one YAML document.

    Legacy JSON data files load unchanged (YAML is a JSON superset).
    A missing file loads as an empty mapping.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.info("No data file at %s; starting empty", self.path)
            return {}

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ParseError(str(self.path), f"Cannot read file: {e}") from e

        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ParseError(str(self.path), f"Invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError(str(self.path), "YAML root must be a mapping/dictionary")

        return data

    def save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        logger.debug("Saved snapshot to %s", self.path)


class MemorySnapshot:
    """
    In-process backend. Keeps a private copy of the last saved snapshot.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = copy.deepcopy(data) if data is not None else {}
        self.saves = 0

    def load(self) -> dict[str, Any]:
        return copy.deepcopy(self.data)

    def save(self, data: dict[str, Any]) -> None:
        self.data = copy.deepcopy(data)
        self.saves += 1


# ---------------------------------------------------------------------
# Load / persist
# ---------------------------------------------------------------------

def load(backend: SnapshotBackend) -> Store:
    """
    Load the store: migrate legacy data if needed, normalise, and write
    the normalised snapshot straight back.
    """
    raw = backend.load()

    if is_legacy(raw):
        raw = migrate_legacy(raw)

    store = normalize(raw)
    persist(store, backend)
    return store


def persist(store: Store, backend: SnapshotBackend) -> None:
    """
    Overwrite the persisted snapshot with the full store.
    """
    backend.save(to_snapshot(store))
