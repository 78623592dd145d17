from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mp_common.api import PickerError
from mp_picker.api import Mode, PickerResult, run_picker
from mp_picker.events import ENTER
from mp_ui.tui.system.headless import HeadlessSurface
from mp_ui.wiring.dependencies import UIContext, configure_logging


def register_pick_commands(app: typer.Typer, ctx: UIContext) -> None:
    """Register the `sessions` and `worktrees` pickers on the given Typer app."""

    def _pick(mode: Mode, query: str, first: bool, repo: Optional[Path] = None) -> None:
        try:
            engine = ctx.engine(mode, repo_path=repo)
        except PickerError as exc:
            ctx.ui.present.error(str(exc))
            raise typer.Exit(1)

        if first or ctx.headless:
            surface = HeadlessSurface([ENTER])
            result = run_picker(engine, surface, mode, query=query)
            if result.cancelled:
                frame = surface.last_frame
                if frame is not None and frame.message is not None:
                    ctx.ui.present.error(frame.message.text)
                else:
                    ctx.ui.present.error(f"No {mode.value} matches '{query}'")
                raise typer.Exit(1)
        else:
            result = _run_interactive(mode, query, engine)

        _finish(result)

    def _run_interactive(mode: Mode, query: str, engine) -> PickerResult:
        from mp_ui.tui.screens.picker_screen import PickerScreen

        configure_logging(debug=ctx.debug, console=False, force=True)
        try:
            return PickerScreen(engine).run(mode, query=query)
        finally:
            configure_logging(debug=ctx.debug, force=True)

    def _finish(result: PickerResult) -> None:
        target = result.switched_to
        if target is None:
            return
        bundle = ctx.bundle
        if bundle is not None and bundle.tmux.pending_attach is not None:
            try:
                code = bundle.tmux.attach_pending()
            except PickerError as exc:
                ctx.ui.present.error(str(exc))
                raise typer.Exit(1)
            if code != 0:
                raise typer.Exit(code)
        if ctx.headless:
            ctx.ui.present.success(f"Switched to {target.label}")

    @app.command("sessions")
    def pick_session(
        query: str = typer.Option("", "--query", "-q", help="Initial search text."),
        first: bool = typer.Option(
            False, "--first", help="Switch to the best match without opening the picker."
        ),
    ) -> None:
        """Pick a tmux session to switch to."""
        _pick(Mode.SESSION, query, first)

    @app.command("worktrees")
    def pick_worktree(
        repo: Optional[Path] = typer.Option(
            None, "--repo", "-r", help="Repository to list worktrees for (default: cwd)."
        ),
        query: str = typer.Option("", "--query", "-q", help="Initial search text."),
        first: bool = typer.Option(
            False, "--first", help="Switch to the best match without opening the picker."
        ),
    ) -> None:
        """Pick a git worktree and focus the tmux session rooted at it."""
        _pick(Mode.WORKTREE, query, first, repo)
