from __future__ import annotations

import pytest

from mp_adapters.api import SourceBundle
from mp_common.config.settings import PickerSettings
from mp_common.errors import NotFoundError
from mp_picker.models import Candidate, Mode, session_candidate, worktree_candidate
from mp_ui.cli.main import ctx_store
from mp_ui.tui.system.headless import HeadlessUI


class StubTmux:
    def __init__(self) -> None:
        self.pending_attach: str | None = None
        self.attached: list[str] = []

    def attach_pending(self) -> int:
        if self.pending_attach is None:
            return 0
        self.attached.append(self.pending_attach)
        self.pending_attach = None
        return 0


class StubSource:
    def __init__(self, mode: Mode, candidates: list[Candidate], tmux: StubTmux) -> None:
        self.mode = mode
        self.candidates = candidates
        self.tmux = tmux
        self.switched: list[str] = []

    def list(self) -> list[Candidate]:
        return list(self.candidates)

    def create(self, name: str) -> Candidate:
        raise NotImplementedError

    def delete(self, candidate_id: str) -> None:
        raise NotImplementedError

    def switch_to(self, candidate_id: str) -> None:
        if candidate_id not in [c.id for c in self.candidates]:
            raise NotFoundError(f"'{candidate_id}' no longer exists")
        self.switched.append(candidate_id)
        self.tmux.pending_attach = candidate_id


@pytest.fixture
def cli_context():
    """Point the global CLI context at headless UI and stub sources."""
    tmux = StubTmux()
    sessions = StubSource(
        Mode.SESSION,
        [
            session_candidate("work", is_attached=True, project="api", windows=3),
            session_candidate("review", project="web", windows=1),
        ],
        tmux,
    )
    worktrees = StubSource(
        Mode.WORKTREE,
        [
            worktree_candidate("/srv/repo-feature", branch="feature", short_commit="abc1234", is_dirty=True),
            worktree_candidate("/srv/repo", branch="main", short_commit="0123456", is_main=True),
        ],
        tmux,
    )
    ui = HeadlessUI()
    saved = (ctx_store._ui, ctx_store._settings, ctx_store._bundle, ctx_store.headless, ctx_store.config_path)
    ctx_store.ui = ui
    ctx_store.settings = PickerSettings()
    ctx_store.bundle = SourceBundle(
        tmux=tmux, sources={Mode.SESSION: sessions, Mode.WORKTREE: worktrees}
    )
    yield ui, sessions, worktrees, tmux
    (
        ctx_store._ui,
        ctx_store._settings,
        ctx_store._bundle,
        ctx_store.headless,
        ctx_store.config_path,
    ) = saved
