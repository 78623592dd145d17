from __future__ import annotations

from typing import Callable

import pytest

from mp_common.errors import ConflictError, NotFoundError, ValidationError
from mp_picker.models import Candidate, Mode, session_candidate, worktree_candidate


class SpySource:
    """In-memory candidate source recording every mutating call."""

    def __init__(self, mode: Mode, candidates: list[Candidate]) -> None:
        self.mode = mode
        self.candidates = list(candidates)
        self.calls: list[tuple[str, str]] = []
        self.list_calls = 0
        self.current: str | None = None
        self.fail_list: Exception | None = None

    def list(self) -> list[Candidate]:
        self.list_calls += 1
        if self.fail_list is not None:
            raise self.fail_list
        return list(self.candidates)

    def create(self, name: str) -> Candidate:
        self.calls.append(("create", name))
        if any(c.label == name for c in self.candidates):
            raise ValidationError(f"'{name}' already exists")
        if self.mode is Mode.SESSION:
            created = session_candidate(name)
        else:
            created = worktree_candidate(f"/work/{name}", branch=name)
        self.candidates.append(created)
        return created

    def delete(self, candidate_id: str) -> None:
        self.calls.append(("delete", candidate_id))
        self._require(candidate_id)
        self.candidates = [c for c in self.candidates if c.id != candidate_id]

    def switch_to(self, candidate_id: str) -> None:
        self._require(candidate_id)
        if self.current == candidate_id:
            return
        self.calls.append(("switch_to", candidate_id))
        self.current = candidate_id

    def _require(self, candidate_id: str) -> Candidate:
        for candidate in self.candidates:
            if candidate.id == candidate_id:
                return candidate
        raise NotFoundError(f"'{candidate_id}' no longer exists")


class MergeSpySource(SpySource):
    def merge(self, candidate_id: str) -> None:
        self.calls.append(("merge", candidate_id))
        candidate = self._require(candidate_id)
        if candidate.is_dirty:
            raise ConflictError(f"Worktree '{candidate.label}' has uncommitted changes")


@pytest.fixture
def session_source() -> SpySource:
    return SpySource(
        Mode.SESSION,
        [
            session_candidate("main", is_attached=True, project="main", windows=2),
            session_candidate("review", project="api", windows=1),
            session_candidate("scratch", windows=3),
        ],
    )


@pytest.fixture
def worktree_source() -> MergeSpySource:
    return MergeSpySource(
        Mode.WORKTREE,
        [
            worktree_candidate("/work/repo-feature", branch="feature", short_commit="abc1234"),
            worktree_candidate(
                "/work/repo-wip", branch="wip", short_commit="def5678", is_dirty=True
            ),
            worktree_candidate("/work/repo", branch="main", short_commit="0123456", is_main=True),
        ],
    )


@pytest.fixture
def make_source() -> Callable[..., SpySource]:
    def _make(mode: Mode, labels: list[str]) -> SpySource:
        if mode is Mode.SESSION:
            return SpySource(mode, [session_candidate(label) for label in labels])
        return MergeSpySource(
            mode, [worktree_candidate(f"/work/{label}", branch=label) for label in labels]
        )

    return _make
