from __future__ import annotations

from typing import Mapping

from rich.markup import escape

RICH_ACCENT = "blue"
RICH_ACCENT_BOLD = f"bold {RICH_ACCENT}"
RICH_BORDER_STYLE = RICH_ACCENT

PRESENTER_TEMPLATES: dict[str, str] = {
    "info": "[blue]ℹ[/blue] {message}",
    "warning": "[yellow]⚠ {message}[/yellow]",
    "error": "[red]✖ {message}[/red]",
    "success": "[green]✔ {message}[/green]",
}

# prompt_toolkit style classes used by the status line, keyed by message level.
STATUS_CLASSES: dict[str, str] = {
    "error": "class:status.error",
    "success": "class:status.success",
    "info": "class:status.info",
}

ATTACHED_MARKER = "*"
MAIN_MARKER = "⌂"
DIRTY_MARKER = "✚"


def presenter_message(level: str, message: str) -> str:
    template = PRESENTER_TEMPLATES.get(level, "{message}")
    return template.format(message=escape(message))


def status_class(level: str) -> str:
    return STATUS_CLASSES.get(level, "")


def prompt_toolkit_picker_style() -> Mapping[str, str]:
    return {
        "selected": "bg:#0000aa fg:white bold",
        "protected": "fg:#00aa00",
        "annotation": "fg:#888888",
        "dirty": "fg:#aa5500 bold",
        "separator": "fg:#0000aa",
        "frame.border": "fg:#0000aa",
        "frame.label": "fg:#0000aa bold",
        "search": "bg:#eeeeee fg:#000000",
        "prompt": "bg:#ffffaa fg:#000000 bold",
        "status.error": "fg:#aa0000 bold",
        "status.success": "fg:#00aa00",
        "status.info": "fg:#0000aa",
        "help": "fg:#888888 italic",
        "empty": "fg:#888888 italic",
        "title": "bold",
    }
