"""Presenters turning candidate snapshots into tables and previews."""

from __future__ import annotations

from typing import Sequence

from rich.table import Table
from rich.text import Text

from mp_picker.models import Candidate, SessionAnnotations, WorktreeAnnotations
from mp_ui.tui.system.models import TableModel


def annotation_text(candidate: Candidate) -> str:
    """One-line annotation shown next to a candidate in the list."""
    ann = candidate.annotations
    if isinstance(ann, SessionAnnotations):
        parts = []
        if ann.project:
            parts.append(ann.project)
        parts.append(f"{ann.windows} win" if ann.windows == 1 else f"{ann.windows} wins")
        if ann.is_attached:
            parts.append("attached")
        return "  ".join(parts)
    if isinstance(ann, WorktreeAnnotations):
        parts = [ann.short_commit] if ann.short_commit else []
        if ann.is_dirty:
            parts.append("dirty")
        if ann.is_main:
            parts.append("main")
        return "  ".join(parts)
    return ""


def build_session_table(candidates: Sequence[Candidate]) -> TableModel:
    rows = []
    for candidate in candidates:
        ann = candidate.annotations
        assert isinstance(ann, SessionAnnotations)
        rows.append(
            [
                candidate.label,
                ann.project,
                str(ann.windows),
                "yes" if ann.is_attached else "",
            ]
        )
    return TableModel(
        title="tmux sessions",
        columns=["Session", "Project", "Windows", "Attached"],
        rows=rows,
    )


def build_worktree_table(candidates: Sequence[Candidate]) -> TableModel:
    rows = []
    for candidate in candidates:
        ann = candidate.annotations
        assert isinstance(ann, WorktreeAnnotations)
        rows.append(
            [
                candidate.label,
                ann.short_commit,
                "dirty" if ann.is_dirty else "clean",
                "yes" if ann.is_main else "",
                candidate.id,
            ]
        )
    return TableModel(
        title="git worktrees",
        columns=["Branch", "Commit", "Status", "Main", "Path"],
        rows=rows,
    )


def build_preview(candidate: Candidate) -> Table:
    """Rich key/value grid describing the selected candidate."""
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("Name", Text(candidate.label))
    ann = candidate.annotations
    if isinstance(ann, SessionAnnotations):
        grid.add_row("Project", Text(ann.project or "-"))
        grid.add_row("Windows", str(ann.windows))
        grid.add_row("Attached", "yes" if ann.is_attached else "no")
    elif isinstance(ann, WorktreeAnnotations):
        grid.add_row("Path", Text(candidate.id))
        grid.add_row("Branch", Text(ann.branch or "(detached)"))
        grid.add_row("Commit", Text(ann.short_commit or "-"))
        grid.add_row(
            "Status",
            Text("uncommitted changes", style="yellow") if ann.is_dirty else Text("clean", style="green"),
        )
        if ann.is_main:
            grid.add_row("Main", "yes")
    return grid
