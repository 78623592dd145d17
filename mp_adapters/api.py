"""Public API surface for mp_adapters."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from mp_adapters.git import GitClient, GitWorktreeSource, parse_worktrees
from mp_adapters.runner import CommandResult, CommandRunner
from mp_adapters.tmux import (
    TmuxClient,
    TmuxSessionSource,
    parse_sessions,
    session_name_for_path,
)
from mp_common.config.settings import PickerSettings
from mp_picker.models import Mode
from mp_picker.protocols import CandidateSource

logger = logging.getLogger(__name__)


@dataclass
class SourceBundle:
    """Candidate sources sharing one tmux client."""

    tmux: TmuxClient
    sources: dict[Mode, CandidateSource]


def build_sources(
    settings: PickerSettings,
    *,
    modes: tuple[Mode, ...] = (Mode.SESSION, Mode.WORKTREE),
    runner: CommandRunner | None = None,
    repo_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> SourceBundle:
    """Wire the tmux and git adapters from settings.

    The git repository is only probed when worktree mode is requested.
    """
    runner = runner or CommandRunner(timeout=settings.command_timeout)
    tmux = TmuxClient(runner, tmux_bin=settings.tmux_bin, env=env)
    sources: dict[Mode, CandidateSource] = {}
    if Mode.SESSION in modes:
        sources[Mode.SESSION] = TmuxSessionSource(tmux, start_dir=os.getcwd())
    if Mode.WORKTREE in modes:
        repo = repo_path or settings.repo_path or os.getcwd()
        git = GitClient(runner, repo, git_bin=settings.git_bin)
        git.ensure_repository()
        logger.debug("Using git repository at %s", git.repo_path)
        sources[Mode.WORKTREE] = GitWorktreeSource(
            git,
            tmux,
            worktree_dir=settings.worktree_dir,
            main_branch=settings.main_branch,
            allow_dirty_delete=settings.allow_dirty_delete,
        )
    return SourceBundle(tmux=tmux, sources=sources)


__all__ = [
    "CommandResult",
    "CommandRunner",
    "GitClient",
    "GitWorktreeSource",
    "SourceBundle",
    "TmuxClient",
    "TmuxSessionSource",
    "build_sources",
    "parse_sessions",
    "parse_worktrees",
    "session_name_for_path",
]
