# tests/test_editor.py

from __future__ import annotations

import pytest

from hwctl.engine.editor import DataEditor, Location
from hwctl.engine.model import Task
from hwctl.engine.store import MemorySnapshot
from hwctl.engine.validate import ValidationError


def _names(tasks: list[Task]) -> list[str]:
    return [t.name for t in tasks]


def _fill(editor: DataEditor, names: list[str], subject_index: int | None = None) -> None:
    for name in names:
        editor.add_task(0, {"name": name, "date": "", "page": ""}, subject_index)


# ---------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------

def test_add_subject_then_task(editor: DataEditor, backend: MemorySnapshot) -> None:
    editor.add_subject(0, "Math")
    editor.add_task(0, {"name": "HW1", "date": "2024-01-01", "page": ""}, 0)

    subject = editor.store.views[0].subjects[0]
    assert subject.name == "Math"
    assert subject.tasks[0] == Task(name="HW1", date="2024-01-01", page="")

    # persisted in full after every mutation
    assert backend.data["views"][0]["subjects"][0] == {
        "name": "Math",
        "tasks": [{"name": "HW1", "date": "2024-01-01", "page": ""}],
    }


def test_open_loads_legacy_data() -> None:
    backend = MemorySnapshot({"Science": {"Lab Report": {"page": "notes/lab.md", "date": "2024-02-01"}}})

    editor = DataEditor.open(backend)

    assert editor.store.views[0].subjects[0].tasks[0].page == "notes/lab.md"
    assert "views" in backend.data
    assert backend.saves == 1


def test_add_task_without_subject_goes_to_view(editor: DataEditor) -> None:
    editor.add_subject(0, "Math")
    task = editor.add_task(0, Task(name="  Laundry  "))

    assert task is not None
    assert _names(editor.store.views[0].tasks) == ["Laundry"]
    assert editor.store.views[0].subjects[0].tasks == []


def test_duplicate_subject_names_are_allowed(editor: DataEditor) -> None:
    editor.add_subject(0, "Math")
    editor.add_subject(0, "Math")

    assert [s.name for s in editor.store.views[0].subjects] == ["Math", "Math"]


# ---------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------

@pytest.mark.parametrize(
    "task",
    [
        {"name": "a" * 101},
        {"name": "???"},
        {"name": "HW", "date": "soon"},
    ],
)
def test_invalid_task_is_rejected_without_mutation(
    editor: DataEditor, backend: MemorySnapshot, task: dict[str, str]
) -> None:
    saves = backend.saves

    with pytest.raises(ValidationError):
        editor.add_task(0, task)

    assert editor.store.views[0].tasks == []
    assert backend.saves == saves


def test_task_name_boundary(editor: DataEditor) -> None:
    assert editor.add_task(0, {"name": "x" * 100}) is not None


def test_subject_name_boundary(editor: DataEditor) -> None:
    assert editor.add_subject(0, "s" * 32) is not None

    with pytest.raises(ValidationError):
        editor.add_subject(0, "s" * 33)

    assert len(editor.store.views[0].subjects) == 1


# ---------------------------------------------------------------------
# Out-of-range indices
# ---------------------------------------------------------------------

def test_out_of_range_is_a_silent_noop(editor: DataEditor, backend: MemorySnapshot) -> None:
    editor.add_subject(0, "Math")
    _fill(editor, ["A"], 0)
    saves = backend.saves

    assert editor.add_subject(5, "Art") is None
    assert editor.add_task(0, {"name": "B"}, 3) is None
    assert editor.add_task(-1, {"name": "B"}) is None
    assert editor.remove_task(0, 9, 0) is None
    assert editor.remove_task(0, 0) is None
    assert editor.remove_subject(0, 4) is None
    assert editor.remove_view(2) is None
    assert editor.rename_subject(0, 2, "Art") is False
    assert editor.rename_view(3, "X") is False
    assert editor.update_task(0, 1, 0, name="C") is None
    assert editor.move_task(0, 5, True, 0) is False

    assert backend.saves == saves
    assert _names(editor.store.views[0].subjects[0].tasks) == ["A"]


def test_view_index_falls_back_to_zero(editor: DataEditor) -> None:
    editor.add_view("Work")

    assert editor.view_index(1) == 1
    assert editor.view_index(7) == 0
    assert editor.view_index(-1) == 0
    assert editor.view_index(None) == 0
    assert editor.get_view(7).name == "Default"


# ---------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------

def test_move_boundaries_are_noops(editor: DataEditor, backend: MemorySnapshot) -> None:
    _fill(editor, ["A", "B", "C"])
    saves = backend.saves

    assert editor.move_task(0, 0, True) is False
    assert editor.move_task(0, 2, False) is False
    assert _names(editor.store.views[0].tasks) == ["A", "B", "C"]
    assert backend.saves == saves


def test_move_up_then_down_restores_order(editor: DataEditor) -> None:
    editor.add_subject(0, "Math")
    _fill(editor, ["A", "B", "C", "D"], 0)
    tasks = editor.store.views[0].subjects[0].tasks

    assert editor.move_task(0, 2, True, 0) is True
    assert _names(tasks) == ["A", "C", "B", "D"]

    assert editor.move_task(0, 1, False, 0) is True
    assert _names(tasks) == ["A", "B", "C", "D"]


def test_move_view(editor: DataEditor) -> None:
    editor.add_view("Work")

    assert editor.move_view(1, True) is True
    assert [v.name for v in editor.store.views] == ["Work", "Default"]
    assert editor.move_view(0, True) is False


# ---------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------

def test_remove_task_shifts_later_tasks(editor: DataEditor, backend: MemorySnapshot) -> None:
    _fill(editor, ["A", "B", "C"])

    removed = editor.remove_task(0, 1)

    assert removed is not None and removed.name == "B"
    assert _names(editor.store.views[0].tasks) == ["A", "C"]
    assert [t["name"] for t in backend.data["views"][0]["tasks"]] == ["A", "C"]


def test_remove_subject_removes_its_tasks(editor: DataEditor) -> None:
    editor.add_subject(0, "Math")
    editor.add_subject(0, "Art")
    _fill(editor, ["HW1", "HW2"], 0)
    _fill(editor, ["Sketch"], 1)

    editor.remove_subject(0, 0)

    assert [s.name for s in editor.store.views[0].subjects] == ["Art"]
    assert _names(list(editor.store.iter_tasks())) == ["Sketch"]


def test_only_view_cannot_be_removed(editor: DataEditor) -> None:
    assert editor.remove_view(0) is None
    assert len(editor.store.views) == 1

    editor.add_view("Work")
    assert editor.remove_view(0) is not None
    assert [v.name for v in editor.store.views] == ["Work"]


# ---------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------

def test_update_task_fields(editor: DataEditor) -> None:
    _fill(editor, ["A"])

    task = editor.update_task(0, 0, name=" Essay ", date="2024-03-01", page="eng/essay.md")
    assert task == Task(name="Essay", date="2024-03-01", page="eng/essay.md")

    editor.update_task(0, 0, date="", page="")
    assert editor.store.views[0].tasks[0] == Task(name="Essay")


def test_rename_subject_and_view(editor: DataEditor, backend: MemorySnapshot) -> None:
    editor.add_subject(0, "Math")

    assert editor.rename_subject(0, 0, "Maths") is True
    assert editor.rename_view(0, "School") is True

    with pytest.raises(ValidationError):
        editor.rename_subject(0, 0, "#")

    assert backend.data["views"][0]["name"] == "School"
    assert backend.data["views"][0]["subjects"][0]["name"] == "Maths"


# ---------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------

def test_locate_and_remove_by_id(editor: DataEditor) -> None:
    editor.add_subject(0, "Math")
    _fill(editor, ["A", "B", "C"], 0)
    b = editor.store.views[0].subjects[0].tasks[1]

    # removing an earlier sibling shifts indices, the id still finds B
    editor.remove_task(0, 0, 0)
    assert editor.locate(b.id) == Location(view_index=0, subject_index=0, task_index=0)

    assert editor.remove(b.id) is True
    assert editor.locate(b.id) is None
    assert editor.remove(b.id) is False


def test_locate_views_and_subjects(editor: DataEditor) -> None:
    work = editor.add_view("Work")
    subject = editor.add_subject(1, "Reports")
    top = editor.add_task(1, {"name": "Inbox zero"})

    assert editor.locate(work.id) == Location(1)
    assert editor.locate(subject.id) == Location(1, 0)
    assert editor.locate(top.id) == Location(1, None, 0)

    assert editor.remove(subject.id) is True
    assert editor.store.views[1].subjects == []
    assert editor.remove(work.id) is True
    assert len(editor.store.views) == 1


def test_move_task_by_id(editor: DataEditor) -> None:
    _fill(editor, ["A", "B"])
    b = editor.store.views[0].tasks[1]

    assert editor.move_task_by_id(b.id, up=True) is True
    assert _names(editor.store.views[0].tasks) == ["B", "A"]
    assert editor.move_task_by_id(b.id, up=True) is False
    assert editor.move_task_by_id(editor.store.views[0].id, up=True) is False


# ---------------------------------------------------------------------
# Settings / lifecycle
# ---------------------------------------------------------------------

def test_set_setting(editor: DataEditor, backend: MemorySnapshot) -> None:
    editor.set_setting("autoSortForTaskQuantity", True)
    editor.set_setting("show_tooltips", False)

    assert backend.data["settings"]["autoSortForTaskQuantity"] is True
    assert backend.data["settings"]["showTooltips"] is False

    with pytest.raises(ValidationError):
        editor.set_setting("theme", True)


def test_check_updated_once_per_version(editor: DataEditor, backend: MemorySnapshot) -> None:
    assert editor.check_updated("1.0.0") is True
    assert editor.check_updated("1.0.0") is False
    assert backend.data["version"] == "1.0.0"

    reopened = DataEditor.open(backend)
    assert reopened.check_updated("1.0.0") is False
    assert reopened.check_updated("1.1.0") is True


def test_context_manager_persists_on_exit(backend: MemorySnapshot) -> None:
    with DataEditor.open(backend) as editor:
        editor.store.views[0].name = "Renamed directly"

    assert backend.data["views"][0]["name"] == "Renamed directly"


def test_get_task(editor: DataEditor) -> None:
    editor.add_subject(0, "Math")
    _fill(editor, ["HW1"], 0)
    _fill(editor, ["Pens"])

    assert editor.get_task(0, 0, 0).name == "HW1"
    assert editor.get_task(0, 0).name == "Pens"
    assert editor.get_task(0, 1, 0) is None
    assert editor.get_task(0, 0, 3) is None
    assert editor.get_task(2, 0) is None
