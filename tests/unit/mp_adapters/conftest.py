from __future__ import annotations

from typing import Callable, Sequence

import pytest

from mp_adapters.runner import CommandResult
from mp_common.errors import AdapterError

Handler = Callable[..., object]


class FakeRunner:
    """Stands in for CommandRunner; ``handler`` decides each command's outcome.

    The handler returns stdout (str), a return code (int) or a full
    CommandResult. Every call is recorded with its cwd.
    """

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.calls: list[list[str]] = []
        self.foreground: list[list[str]] = []

    def run(self, args: Sequence[str], *, cwd=None, check: bool = True) -> CommandResult:
        cmd = [str(arg) for arg in args]
        self.calls.append(cmd)
        outcome = self._handler(cmd, cwd)
        if isinstance(outcome, CommandResult):
            result = outcome
        elif isinstance(outcome, int):
            result = CommandResult(tuple(cmd), outcome, "", "failed" if outcome else "")
        else:
            result = CommandResult(tuple(cmd), 0, outcome or "")
        if check and not result.ok:
            raise AdapterError(f"{cmd[0]} failed: {result.detail}", context={"command": cmd})
        return result

    def run_foreground(self, args: Sequence[str]) -> int:
        self.foreground.append([str(arg) for arg in args])
        return 0

    def commands(self, *prefix: str) -> list[list[str]]:
        """Recorded calls whose arguments contain ``prefix`` as a contiguous run."""
        n = len(prefix)
        return [
            call
            for call in self.calls
            if any(call[i : i + n] == list(prefix) for i in range(len(call) - n + 1))
        ]


@pytest.fixture
def fake_runner() -> Callable[[Handler], FakeRunner]:
    return FakeRunner
