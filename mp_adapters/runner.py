"""Blocking subprocess wrapper shared by the tmux and git adapters."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from mp_common.errors import AdapterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def detail(self) -> str:
        return self.stderr.strip() or self.stdout.strip() or f"exit status {self.returncode}"


class CommandRunner:
    """Run external commands, capturing output and mapping failures to AdapterError."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | str | None = None,
        check: bool = True,
    ) -> CommandResult:
        cmd = [str(arg) for arg in args]
        logger.debug("Running %s", shlex.join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise AdapterError(
                f"{cmd[0]} not found in PATH",
                context={"command": cmd},
                cause=exc,
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise AdapterError(
                f"`{shlex.join(cmd)}` timed out after {self.timeout}s",
                context={"command": cmd, "timeout": self.timeout},
                cause=exc,
            ) from exc

        result = CommandResult(
            args=tuple(cmd),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if check and not result.ok:
            raise AdapterError(
                f"`{shlex.join(cmd)}` failed: {result.detail}",
                context={
                    "command": cmd,
                    "returncode": result.returncode,
                    "stderr": result.stderr.strip(),
                },
            )
        return result

    def run_foreground(self, args: Sequence[str]) -> int:
        """Run a command attached to the caller's terminal (no capture, no timeout)."""
        cmd = [str(arg) for arg in args]
        logger.debug("Running in foreground: %s", shlex.join(cmd))
        try:
            return subprocess.run(cmd, check=False).returncode
        except FileNotFoundError as exc:
            raise AdapterError(
                f"{cmd[0]} not found in PATH",
                context={"command": cmd},
                cause=exc,
            ) from exc
