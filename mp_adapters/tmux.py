"""tmux client and the session-backed candidate source."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from mp_adapters.runner import CommandRunner
from mp_common.errors import AdapterError, NotFoundError, ValidationError
from mp_picker.models import Candidate, Mode, session_candidate

logger = logging.getLogger(__name__)

SESSION_FORMAT = "\t".join(
    (
        "#{session_name}",
        "#{session_attached}",
        "#{session_windows}",
        "#{session_activity}",
        "#{session_path}",
    )
)
_NO_SERVER_HINTS = ("no server running", "no sessions", "error connecting to")
_FORBIDDEN_NAME_CHARS = ".:"


@dataclass(frozen=True)
class TmuxSession:
    name: str
    attached: bool
    windows: int
    activity: int
    path: str


def _parse_int(value: str, line: str) -> int:
    try:
        return int(value or 0)
    except ValueError as exc:
        raise AdapterError(
            f"Unexpected tmux output: {line!r}", context={"line": line}, cause=exc
        ) from exc


def parse_sessions(output: str) -> list[TmuxSession]:
    sessions: list[TmuxSession] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        if len(parts) != 5:
            raise AdapterError(f"Unexpected tmux output: {line!r}", context={"line": line})
        name, attached, windows, activity, path = parts
        sessions.append(
            TmuxSession(
                name=name,
                attached=_parse_int(attached, line) > 0,
                windows=_parse_int(windows, line),
                activity=_parse_int(activity, line),
                path=path,
            )
        )
    return sessions


def session_name_for_path(path: str) -> str:
    """Derive a tmux-safe session name from a directory path."""
    base = Path(path).name or "worktree"
    for ch in _FORBIDDEN_NAME_CHARS:
        base = base.replace(ch, "_")
    return base


def _exact(name: str) -> str:
    return f"={name}"


class TmuxClient:
    """Thin wrapper over the tmux binary.

    Outside tmux there is no client to switch, so ``switch_client`` records the
    target and ``attach_pending`` attaches to it once the picker UI has exited.
    """

    def __init__(
        self,
        runner: CommandRunner,
        *,
        tmux_bin: str = "tmux",
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._runner = runner
        self._tmux = tmux_bin
        environ = os.environ if env is None else env
        self.inside_tmux = bool(environ.get("TMUX"))
        self.pending_attach: str | None = None

    def _cmd(self, *args: str) -> list[str]:
        return [self._tmux, *args]

    def list_sessions(self) -> list[TmuxSession]:
        result = self._runner.run(
            self._cmd("list-sessions", "-F", SESSION_FORMAT), check=False
        )
        if not result.ok:
            detail = result.detail.lower()
            if any(hint in detail for hint in _NO_SERVER_HINTS):
                return []
            raise AdapterError(
                f"tmux list-sessions failed: {result.detail}",
                context={"returncode": result.returncode, "stderr": result.stderr.strip()},
            )
        return parse_sessions(result.stdout)

    def current_session(self) -> str | None:
        if not self.inside_tmux:
            return None
        result = self._runner.run(
            self._cmd("display-message", "-p", "#{session_name}"), check=False
        )
        name = result.stdout.strip()
        return name if result.ok and name else None

    def has_session(self, name: str) -> bool:
        return self._runner.run(self._cmd("has-session", "-t", _exact(name)), check=False).ok

    def new_session(self, name: str, *, cwd: str | None = None) -> None:
        args = ["new-session", "-d", "-s", name]
        if cwd:
            args.extend(["-c", cwd])
        self._runner.run(self._cmd(*args))

    def kill_session(self, name: str) -> None:
        self._runner.run(self._cmd("kill-session", "-t", _exact(name)))

    def switch_client(self, name: str) -> bool:
        """Focus ``name``; returns False when it is already the current session."""
        if self.inside_tmux:
            if self.current_session() == name:
                return False
            self._runner.run(self._cmd("switch-client", "-t", _exact(name)))
            return True
        if self.pending_attach == name:
            return False
        self.pending_attach = name
        return True

    def attach_pending(self) -> int:
        """Attach to the session chosen while running outside tmux."""
        if self.pending_attach is None:
            return 0
        name, self.pending_attach = self.pending_attach, None
        return self._runner.run_foreground(
            self._cmd("attach-session", "-t", _exact(name))
        )


class TmuxSessionSource:
    """Candidate source listing tmux sessions, attached first then most recent."""

    mode = Mode.SESSION

    def __init__(self, client: TmuxClient, *, start_dir: str | None = None) -> None:
        self._client = client
        self._start_dir = start_dir

    @property
    def client(self) -> TmuxClient:
        return self._client

    def list(self) -> list[Candidate]:
        sessions = self._client.list_sessions()
        current = self._client.current_session()
        candidates: list[tuple[bool, int, Candidate]] = []
        for session in sessions:
            attached = session.name == current if current is not None else session.attached
            candidate = session_candidate(
                session.name,
                is_attached=attached,
                project=Path(session.path).name if session.path else "",
                windows=session.windows,
            )
            candidates.append((attached, session.activity, candidate))
        candidates.sort(key=lambda item: (not item[0], -item[1]))
        return [candidate for _, _, candidate in candidates]

    def create(self, name: str) -> Candidate:
        name = name.strip()
        if any(ch in name for ch in _FORBIDDEN_NAME_CHARS):
            raise ValidationError(
                f"Session names cannot contain {' or '.join(repr(c) for c in _FORBIDDEN_NAME_CHARS)}",
                context={"name": name},
            )
        if self._client.has_session(name):
            raise ValidationError(f"Session '{name}' already exists", context={"name": name})
        self._client.new_session(name, cwd=self._start_dir)
        logger.info("Created tmux session %s", name)
        return self._find(name)

    def delete(self, candidate_id: str) -> None:
        candidate = self._find(candidate_id)
        if candidate.is_protected:
            raise ValidationError(
                f"Cannot delete the attached session '{candidate_id}'",
                context={"candidate": candidate_id},
            )
        self._client.kill_session(candidate_id)
        logger.info("Killed tmux session %s", candidate_id)

    def switch_to(self, candidate_id: str) -> None:
        if not self._client.has_session(candidate_id):
            raise NotFoundError(
                f"Session '{candidate_id}' no longer exists",
                context={"candidate": candidate_id},
            )
        if not self._client.switch_client(candidate_id):
            logger.debug("Session %s already active", candidate_id)

    def _find(self, name: str) -> Candidate:
        for candidate in self.list():
            if candidate.id == name:
                return candidate
        raise NotFoundError(f"Session '{name}' no longer exists", context={"candidate": name})
