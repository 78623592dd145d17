"""git client and the worktree-backed candidate source."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from mp_adapters.runner import CommandResult, CommandRunner
from mp_adapters.tmux import TmuxClient, session_name_for_path
from mp_common.errors import (
    AdapterError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from mp_picker.models import Candidate, Mode, worktree_candidate

logger = logging.getLogger(__name__)

SHORT_COMMIT_LEN = 7


def normalize_path(path: str | Path) -> str:
    try:
        return os.path.realpath(os.path.abspath(path))
    except OSError:
        return os.path.abspath(path)


@dataclass
class GitWorktree:
    path: str
    head: str = ""
    branch: str = ""
    detached: bool = False
    bare: bool = False
    locked: bool = False
    prunable: bool = False
    is_main: bool = False

    @property
    def label(self) -> str:
        if self.branch:
            return self.branch
        return f"detached@{Path(self.path).name}"


def parse_worktrees(output: str) -> list[GitWorktree]:
    """Parse ``git worktree list --porcelain``; the first record is the main worktree."""
    worktrees: list[GitWorktree] = []
    current: GitWorktree | None = None

    def flush() -> None:
        nonlocal current
        if current and current.path:
            current.path = normalize_path(current.path)
            worktrees.append(current)
        current = None

    for raw_line in output.replace("\r\n", "\n").split("\n"):
        if not raw_line.strip():
            flush()
            continue
        if raw_line.startswith("worktree "):
            flush()
            # Paths are taken verbatim; leading/trailing spaces are significant.
            current = GitWorktree(path=raw_line.removeprefix("worktree "))
            continue
        line = raw_line.strip()
        if current is None:
            continue
        if line.startswith("HEAD "):
            current.head = line.removeprefix("HEAD ").strip()
        elif line.startswith("branch "):
            current.branch = line.removeprefix("branch ").strip().removeprefix("refs/heads/")
        elif line == "detached":
            current.detached = True
        elif line == "bare":
            current.bare = True
        elif line.startswith("locked"):
            current.locked = True
        elif line.startswith("prunable"):
            current.prunable = True
    flush()

    if not worktrees:
        raise AdapterError("git reported no worktrees", context={"output": output[:200]})
    worktrees[0].is_main = True
    return worktrees


class GitClient:
    """Runs git against one repository."""

    def __init__(
        self,
        runner: CommandRunner,
        repo_path: str | Path,
        *,
        git_bin: str = "git",
    ) -> None:
        self._runner = runner
        self._git = git_bin
        self.repo_path = normalize_path(repo_path)

    def run(self, *args: str, cwd: str | None = None, check: bool = True) -> CommandResult:
        return self._runner.run([self._git, "-C", cwd or self.repo_path, *args], check=check)

    def ensure_repository(self) -> None:
        result = self.run("rev-parse", "--git-dir", check=False)
        if not result.ok:
            raise AdapterError(
                f"Not a git repository: {self.repo_path}",
                context={"path": self.repo_path, "stderr": result.stderr.strip()},
            )

    def list_worktrees(self) -> list[GitWorktree]:
        return parse_worktrees(self.run("worktree", "list", "--porcelain").stdout)

    def is_dirty(self, path: str) -> bool:
        return bool(self.run("status", "--porcelain", cwd=path).stdout.strip())

    def branch_exists(self, branch: str) -> bool:
        return self.run(
            "show-ref", "--verify", "--quiet", f"refs/heads/{branch}", check=False
        ).ok

    def is_valid_branch_name(self, branch: str) -> bool:
        return self.run("check-ref-format", "--branch", branch, check=False).ok

    def add_worktree(self, path: str, branch: str) -> None:
        if self.branch_exists(branch):
            self.run("worktree", "add", path, branch)
        else:
            self.run("worktree", "add", "-b", branch, path)

    def remove_worktree(self, path: str, *, force: bool = False) -> None:
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(path)
        self.run(*args)

    def merge(self, branch: str, *, cwd: str) -> CommandResult:
        return self.run("merge", "--no-edit", branch, cwd=cwd, check=False)

    def conflicted_files(self, cwd: str) -> list[str]:
        result = self.run("diff", "--name-only", "--diff-filter=U", cwd=cwd, check=False)
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]


class GitWorktreeSource:
    """Candidate source listing worktrees, linked ones first and the main one last."""

    mode = Mode.WORKTREE

    def __init__(
        self,
        git: GitClient,
        tmux: TmuxClient,
        *,
        worktree_dir: str | Path | None = None,
        main_branch: str | None = None,
        allow_dirty_delete: bool = True,
    ) -> None:
        self._git = git
        self._tmux = tmux
        self._worktree_dir = str(worktree_dir) if worktree_dir else None
        self._main_branch = main_branch
        self._allow_dirty_delete = allow_dirty_delete

    def list(self) -> list[Candidate]:
        linked: list[Candidate] = []
        main: list[Candidate] = []
        for wt in self._git.list_worktrees():
            if wt.bare or wt.prunable:
                logger.debug("Skipping worktree %s (bare or prunable)", wt.path)
                continue
            candidate = worktree_candidate(
                wt.path,
                branch=wt.branch,
                short_commit=wt.head[:SHORT_COMMIT_LEN],
                is_dirty=self._dirty(wt.path),
                is_main=wt.is_main,
                label=wt.label,
            )
            (main if wt.is_main else linked).append(candidate)
        return linked + main

    def create(self, name: str) -> Candidate:
        branch = name.strip()
        if not self._git.is_valid_branch_name(branch):
            raise ValidationError(f"Invalid branch name: '{branch}'", context={"branch": branch})
        path = self._path_for_branch(branch)
        if os.path.exists(path):
            raise ValidationError(f"Path already exists: {path}", context={"path": path})
        self._git.add_worktree(path, branch)
        logger.info("Created worktree %s for branch %s", path, branch)
        return self._candidate(path)

    def delete(self, candidate_id: str) -> None:
        wt = self._find(candidate_id)
        if wt.is_main:
            raise ValidationError("Cannot delete the main worktree", context={"path": wt.path})
        dirty = self._git.is_dirty(wt.path)
        if dirty and not self._allow_dirty_delete:
            raise ValidationError(
                f"Worktree '{wt.label}' has uncommitted changes",
                context={"path": wt.path},
            )
        self._git.remove_worktree(wt.path, force=dirty)
        logger.info("Removed worktree %s", wt.path)

    def switch_to(self, candidate_id: str) -> None:
        wt = self._find(candidate_id)
        session = session_name_for_path(wt.path)
        if not self._tmux.has_session(session):
            self._tmux.new_session(session, cwd=wt.path)
            logger.info("Created tmux session %s rooted at %s", session, wt.path)
        self._tmux.switch_client(session)

    def merge(self, candidate_id: str) -> None:
        worktrees = self._git.list_worktrees()
        wt = self._find(candidate_id, worktrees)
        main = worktrees[0]
        if wt.is_main:
            raise ValidationError("Cannot merge the main worktree into itself")
        if not wt.branch:
            raise ValidationError(
                f"Worktree '{wt.label}' has a detached HEAD; nothing to merge",
                context={"path": wt.path},
            )
        target = main.branch
        if self._main_branch and target != self._main_branch:
            raise ConflictError(
                f"Main worktree is on '{target or 'detached HEAD'}', expected '{self._main_branch}'",
                context={"path": main.path},
            )
        # Status failures propagate: a merge never runs on an unverified tree.
        if self._git.is_dirty(wt.path):
            raise ConflictError(
                f"Worktree '{wt.label}' has uncommitted changes; commit or stash them before merging",
                context={"path": wt.path},
            )
        if self._git.is_dirty(main.path):
            raise ConflictError(
                f"Main worktree has uncommitted changes: {main.path}",
                context={"path": main.path},
            )

        result = self._git.merge(wt.branch, cwd=main.path)
        if result.ok:
            logger.info("Merged %s into %s", wt.branch, target)
            return
        conflicts = self._git.conflicted_files(main.path)
        if conflicts:
            raise ConflictError(
                f"Merging '{wt.branch}' into '{target}' stopped with conflicts in "
                f"{', '.join(conflicts)}; resolve them in {main.path}",
                context={"branch": wt.branch, "target": target, "files": conflicts},
            )
        raise AdapterError(
            f"git merge failed: {result.detail}",
            context={"branch": wt.branch, "returncode": result.returncode},
        )

    def _dirty(self, path: str) -> bool:
        """Dirty flag for list annotations; an unreadable status shows as clean."""
        try:
            return self._git.is_dirty(path)
        except AdapterError as exc:
            logger.warning("Could not read status of %s: %s", path, exc)
            return False

    def _path_for_branch(self, branch: str) -> str:
        main_path = Path(self._git.list_worktrees()[0].path)
        slug = branch.replace("/", "-")
        if self._worktree_dir:
            return normalize_path(Path(self._worktree_dir).expanduser() / slug)
        return normalize_path(main_path.parent / f"{main_path.name}-{slug}")

    def _find(
        self, candidate_id: str, worktrees: list[GitWorktree] | None = None
    ) -> GitWorktree:
        key = normalize_path(candidate_id)
        for wt in worktrees if worktrees is not None else self._git.list_worktrees():
            if wt.path == key and not wt.prunable:
                return wt
        raise NotFoundError(
            f"Worktree '{candidate_id}' no longer exists",
            context={"candidate": candidate_id},
        )

    def _candidate(self, path: str) -> Candidate:
        key = normalize_path(path)
        for candidate in self.list():
            if candidate.id == key:
                return candidate
        raise AdapterError(f"Worktree {path} was not listed after creation", context={"path": path})
