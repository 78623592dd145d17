from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from mp_common.api import PickerError
from mp_picker.api import Mode
from mp_ui.presenters.candidates import build_session_table, build_worktree_table
from mp_ui.wiring.dependencies import UIContext


class ListTarget(str, Enum):
    sessions = "sessions"
    worktrees = "worktrees"


_MODES = {
    ListTarget.sessions: Mode.SESSION,
    ListTarget.worktrees: Mode.WORKTREE,
}


def register_list_command(app: typer.Typer, ctx: UIContext) -> None:
    """Register the non-interactive `list` command on the given Typer app."""

    @app.command("list")
    def list_candidates(
        target: ListTarget = typer.Argument(..., help="What to list."),
        repo: Optional[Path] = typer.Option(
            None, "--repo", "-r", help="Repository to list worktrees for (default: cwd)."
        ),
    ) -> None:
        """Print the current sessions or worktrees as a table."""
        mode = _MODES[target]
        try:
            source = ctx.sources(mode, repo_path=repo).sources[mode]
            candidates = list(source.list())
        except PickerError as exc:
            ctx.ui.present.error(str(exc))
            raise typer.Exit(1)

        if not candidates:
            ctx.ui.present.warning(f"No {target.value} found.")
            return
        if mode is Mode.SESSION:
            ctx.ui.tables.show(build_session_table(candidates))
        else:
            ctx.ui.tables.show(build_worktree_table(candidates))
