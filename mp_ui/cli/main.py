"""
Command-line interface for muxpick.

Fuzzy-pick tmux sessions and git worktrees from the terminal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mp_common.api import PickerError
from mp_ui.cli.commands.listing import register_list_command
from mp_ui.cli.commands.pick import register_pick_commands
from mp_ui.wiring.dependencies import UIContext, configure_logging

# Initialize global context (lazy)
ctx_store = UIContext()

app = typer.Typer(help="Fuzzy-pick tmux sessions and git worktrees.", no_args_is_help=True)


@app.callback(invoke_without_command=True)
def entry(
    ctx: typer.Context,
    headless: bool = typer.Option(
        False,
        "--headless",
        help="Never open the full-screen picker; pick the best match and print the outcome.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Settings file (TOML). Defaults to $MP_CONFIG or ~/.config/muxpick/config.toml.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Global entry point handling interactive vs headless modes."""
    configure_logging(debug=debug, force=True)
    ctx_store.headless = headless
    ctx_store.debug = debug
    ctx_store.config_path = config

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        _ = ctx_store.settings
    except PickerError as exc:
        ctx_store.ui.present.error(str(exc))
        raise typer.Exit(1)


register_pick_commands(app, ctx_store)
register_list_command(app, ctx_store)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
