# src/hwctl/cli.py

"""
Command-line interface for hwctl.

This module:
- defines argument parsing and subcommands,
- delegates every store change to the DataEditor,
- re-renders from the store instead of patching output after a change.

Indices printed by `show` are positional: re-run `show` after removing
anything, since later siblings shift down.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from hwctl.config import APP_VERSION, get_settings
from hwctl.engine.editor import DataEditor
from hwctl.engine.model import SETTING_KEYS
from hwctl.engine.render import render_view, render_views
from hwctl.engine.session import CreationConflict, EditorSession, Mode
from hwctl.engine.store import ParseError, YamlSnapshotFile
from hwctl.engine.validate import BrokenLinkError, ValidationError, resolve_page
from hwctl.logging_setup import setup_logging

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _add_view_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-v",
        "--view",
        type=int,
        default=0,
        help="View index (default: 0)",
    )


def _add_subject_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-s",
        "--subject",
        type=int,
        default=None,
        help="Subject index (omit for the view's own tasks)",
    )


def _add_direction_args(p: argparse.ArgumentParser) -> None:
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--up", dest="up", action="store_true", help="Move up by one")
    g.add_argument("--down", dest="up", action="store_false", help="Move down by one")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hwctl")
    parser.add_argument(
        "-f",
        "--file",
        type=str,
        default=None,
        help="Data file (default: $HWCTL_DATA or ~/.local/share/hwctl/homework.yml)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    p_show = sub.add_parser("show", help="Show a view")
    _add_view_arg(p_show)
    p_show.add_argument(
        "--edit",
        action="store_true",
        help="Edit mode layout (stored order, all links)",
    )
    p_show.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    p_show.set_defaults(func=cmd_show)

    p_views = sub.add_parser("views", help="List views")
    p_views.set_defaults(func=cmd_views)

    p_open = sub.add_parser("open", help="Print the file linked to a task")
    p_open.add_argument("task", type=int, help="Task index")
    _add_view_arg(p_open)
    _add_subject_arg(p_open)
    p_open.set_defaults(func=cmd_open)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    p_add_view = sub.add_parser("add-view", help="Create a view")
    p_add_view.add_argument("name", help="View name")
    p_add_view.set_defaults(func=cmd_add_view)

    p_rm_view = sub.add_parser("rm-view", help="Delete a view and everything in it")
    p_rm_view.add_argument("index", type=int, help="View index")
    p_rm_view.set_defaults(func=cmd_rm_view)

    p_rename_view = sub.add_parser("rename-view", help="Rename a view")
    p_rename_view.add_argument("index", type=int, help="View index")
    p_rename_view.add_argument("name", help="New name")
    p_rename_view.set_defaults(func=cmd_rename_view)

    p_move_view = sub.add_parser("move-view", help="Move a view up or down")
    p_move_view.add_argument("index", type=int, help="View index")
    _add_direction_args(p_move_view)
    p_move_view.set_defaults(func=cmd_move_view)

    # ------------------------------------------------------------------
    # Subjects
    # ------------------------------------------------------------------

    p_add_subject = sub.add_parser("add-subject", help="Create a subject")
    p_add_subject.add_argument("name", help="Subject name (max 32 characters)")
    _add_view_arg(p_add_subject)
    p_add_subject.set_defaults(func=cmd_add_subject)

    p_rm_subject = sub.add_parser("rm-subject", help="Delete a subject and its tasks")
    p_rm_subject.add_argument("index", type=int, help="Subject index")
    _add_view_arg(p_rm_subject)
    p_rm_subject.set_defaults(func=cmd_rm_subject)

    p_rename_subject = sub.add_parser("rename-subject", help="Rename a subject")
    p_rename_subject.add_argument("index", type=int, help="Subject index")
    p_rename_subject.add_argument("name", help="New name")
    _add_view_arg(p_rename_subject)
    p_rename_subject.set_defaults(func=cmd_rename_subject)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    p_add = sub.add_parser("add", help="Create a task")
    p_add.add_argument("name", help="Task name (max 100 characters)")
    _add_view_arg(p_add)
    _add_subject_arg(p_add)
    p_add.add_argument("--date", type=str, default="", help="Due date (YYYY-MM-DD)")
    p_add.add_argument("--page", type=str, default="", help="Linked file (vault-relative)")
    p_add.set_defaults(func=cmd_add)

    p_done = sub.add_parser("done", help="Complete (remove) a task")
    p_done.add_argument("task", type=int, help="Task index")
    _add_view_arg(p_done)
    _add_subject_arg(p_done)
    p_done.set_defaults(func=cmd_done)

    p_move = sub.add_parser("move", help="Move a task up or down")
    p_move.add_argument("task", type=int, help="Task index")
    _add_view_arg(p_move)
    _add_subject_arg(p_move)
    _add_direction_args(p_move)
    p_move.set_defaults(func=cmd_move)

    p_edit = sub.add_parser("edit", help="Change a task's name, date or link")
    p_edit.add_argument("task", type=int, help="Task index")
    _add_view_arg(p_edit)
    _add_subject_arg(p_edit)
    p_edit.add_argument("--name", type=str, default=None, help="New name")
    p_edit.add_argument("--date", type=str, default=None, help="New due date ('' clears)")
    p_edit.add_argument("--page", type=str, default=None, help="New linked file ('' clears)")
    p_edit.set_defaults(func=cmd_edit)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    p_set = sub.add_parser("set", help="Change a setting")
    p_set.add_argument("key", choices=sorted(SETTING_KEYS), help="Setting name")
    p_set.add_argument("value", choices=["true", "false"], help="New value")
    p_set.set_defaults(func=cmd_set)

    return parser


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_show(args: argparse.Namespace, editor: DataEditor) -> int:
    session = EditorSession(view_index=editor.view_index(args.view))
    if session.view_index != args.view:
        print(f"View {args.view} not found; showing view 0.", file=sys.stderr)

    if args.edit:
        session.toggle_mode()

    render_view(
        editor.store,
        session.view_index,
        edit_mode=session.mode is Mode.EDIT,
        color=not bool(args.no_color),
    )
    return 0


def cmd_views(args: argparse.Namespace, editor: DataEditor) -> int:
    render_views(editor.store)
    return 0


def cmd_open(args: argparse.Namespace, editor: DataEditor) -> int:
    task = editor.get_task(args.view, args.task, args.subject)
    if task is None:
        return _not_found("task", args.task)

    try:
        path = resolve_page(get_settings().vault_root, task.page)
    except BrokenLinkError as e:
        print(e)
        return 1

    print(path)
    return 0


def cmd_add_view(args: argparse.Namespace, editor: DataEditor) -> int:
    editor.add_view(args.name)
    render_views(editor.store)
    return 0


def cmd_rm_view(args: argparse.Namespace, editor: DataEditor) -> int:
    if len(editor.store.views) == 1 and args.index == 0:
        print("Error: cannot delete the only view")
        return 1

    if editor.remove_view(args.index) is None:
        return _not_found("view", args.index)

    render_views(editor.store)
    return 0


def cmd_rename_view(args: argparse.Namespace, editor: DataEditor) -> int:
    if not editor.rename_view(args.index, args.name):
        return _not_found("view", args.index)

    render_views(editor.store)
    return 0


def cmd_move_view(args: argparse.Namespace, editor: DataEditor) -> int:
    if not 0 <= args.index < len(editor.store.views):
        return _not_found("view", args.index)

    # Already at the boundary: nothing to do.
    editor.move_view(args.index, args.up)
    render_views(editor.store)
    return 0


def cmd_add_subject(args: argparse.Namespace, editor: DataEditor) -> int:
    session = EditorSession(view_index=args.view)

    with session.creation("subject"):
        subject = editor.add_subject(args.view, args.name)

    if subject is None:
        return _not_found("view", args.view)

    return _rerender(editor, args.view)


def cmd_rm_subject(args: argparse.Namespace, editor: DataEditor) -> int:
    if editor.remove_subject(args.view, args.index) is None:
        return _not_found("subject", args.index)

    return _rerender(editor, args.view)


def cmd_rename_subject(args: argparse.Namespace, editor: DataEditor) -> int:
    if not editor.rename_subject(args.view, args.index, args.name):
        return _not_found("subject", args.index)

    return _rerender(editor, args.view)


def cmd_add(args: argparse.Namespace, editor: DataEditor) -> int:
    session = EditorSession(view_index=args.view)

    with session.creation("task"):
        task = editor.add_task(
            args.view,
            {"name": args.name, "date": args.date, "page": args.page},
            args.subject,
        )

    if task is None:
        return _not_found("subject" if args.subject is not None else "view", _target(args))

    return _rerender(editor, args.view)


def cmd_done(args: argparse.Namespace, editor: DataEditor) -> int:
    if editor.remove_task(args.view, args.task, args.subject) is None:
        return _not_found("task", args.task)

    return _rerender(editor, args.view)


def cmd_move(args: argparse.Namespace, editor: DataEditor) -> int:
    if editor.get_task(args.view, args.task, args.subject) is None:
        return _not_found("task", args.task)

    # Already at the boundary: nothing to do.
    editor.move_task(args.view, args.task, args.up, args.subject)
    return _rerender(editor, args.view, edit_mode=True)


def cmd_edit(args: argparse.Namespace, editor: DataEditor) -> int:
    task = editor.update_task(
        args.view,
        args.task,
        args.subject,
        name=args.name,
        date=args.date,
        page=args.page,
    )
    if task is None:
        return _not_found("task", args.task)

    return _rerender(editor, args.view, edit_mode=True)


def cmd_set(args: argparse.Namespace, editor: DataEditor) -> int:
    editor.set_setting(args.key, args.value == "true")
    print(f"{args.key} = {args.value}")
    return 0


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _target(args: argparse.Namespace) -> int:
    return args.subject if args.subject is not None else args.view


def _not_found(what: str, index: Optional[int]) -> int:
    print(f"Error: no {what} at index {index}")
    return 1


def _rerender(editor: DataEditor, view_index: int, *, edit_mode: bool = False) -> int:
    render_view(editor.store, editor.view_index(view_index), edit_mode=edit_mode, color=False)
    return 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2

    settings = get_settings()
    setup_logging(
        console_level=getattr(logging, settings.log_level, logging.WARNING),
        log_dir=settings.log_dir,
    )

    path = Path(args.file).expanduser() if args.file else settings.data_path
    logger.debug("Using data file %s", path)

    try:
        editor = DataEditor.open(YamlSnapshotFile(path))
    except ParseError as e:
        print(f"Error: {e}")
        return 1

    with editor:
        if editor.check_updated(APP_VERSION):
            print(f"hwctl updated to {APP_VERSION}.", file=sys.stderr)

        try:
            return func(args, editor)
        except (ValidationError, CreationConflict) as e:
            print(e)
            return 1


if __name__ == "__main__":
    raise SystemExit(main())
