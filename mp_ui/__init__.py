"""Terminal front end for muxpick: Typer CLI, prompt_toolkit picker, rich output."""
