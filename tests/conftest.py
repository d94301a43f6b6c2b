# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from hwctl.engine.editor import DataEditor
from hwctl.engine.store import MemorySnapshot


@pytest.fixture()
def backend() -> MemorySnapshot:
    """
    In-memory backend holding a single empty view.
    """
    return MemorySnapshot(
        {
            "views": [{"name": "Default", "subjects": [], "tasks": []}],
            "settings": {},
        }
    )


@pytest.fixture()
def editor(backend: MemorySnapshot) -> DataEditor:
    return DataEditor.open(backend)


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "homework.yml"
