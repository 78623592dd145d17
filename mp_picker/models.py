"""Value records shared by the picker engine, adapters and surfaces."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Mode(str, Enum):
    SESSION = "session"
    WORKTREE = "worktree"


class CandidateKind(str, Enum):
    SESSION = "session"
    WORKTREE = "worktree"


@dataclass(frozen=True)
class SessionAnnotations:
    is_attached: bool = False
    project: str = ""
    windows: int = 0


@dataclass(frozen=True)
class WorktreeAnnotations:
    branch: str = ""
    short_commit: str = ""
    is_dirty: bool = False
    is_main: bool = False


Annotations = Union[SessionAnnotations, WorktreeAnnotations]


@dataclass(frozen=True)
class Candidate:
    """One selectable row. Replaced wholesale on every refresh."""

    id: str
    label: str
    kind: CandidateKind
    annotations: Annotations

    @property
    def is_protected(self) -> bool:
        """True for the attached session or the main worktree."""
        if isinstance(self.annotations, SessionAnnotations):
            return self.annotations.is_attached
        return self.annotations.is_main

    @property
    def is_dirty(self) -> bool:
        return isinstance(self.annotations, WorktreeAnnotations) and self.annotations.is_dirty


def session_candidate(
    name: str, *, is_attached: bool = False, project: str = "", windows: int = 0
) -> Candidate:
    return Candidate(
        id=name,
        label=name,
        kind=CandidateKind.SESSION,
        annotations=SessionAnnotations(
            is_attached=is_attached, project=project, windows=windows
        ),
    )


def worktree_candidate(
    path: str,
    *,
    branch: str = "",
    short_commit: str = "",
    is_dirty: bool = False,
    is_main: bool = False,
    label: str | None = None,
) -> Candidate:
    return Candidate(
        id=path,
        label=label if label is not None else branch,
        kind=CandidateKind.WORKTREE,
        annotations=WorktreeAnnotations(
            branch=branch,
            short_commit=short_commit,
            is_dirty=is_dirty,
            is_main=is_main,
        ),
    )

