"""Full-screen prompt_toolkit surface for the picker engine."""

from __future__ import annotations

from typing import Any

from prompt_toolkit.application import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.containers import ConditionalContainer
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame
from rich.console import Console

from mp_picker.events import (
    BACKSPACE,
    DOWN,
    ENTER,
    ESCAPE,
    PAGE_DOWN,
    PAGE_UP,
    UP,
    Command,
    KeyEvent,
)
from mp_picker.models import Mode
from mp_picker.state import ConfirmPrompt, NamePrompt, PickerEngine, PickerResult, PickerView
from mp_ui.presenters.candidates import annotation_text, build_preview
from mp_ui.tui.core import theme

RowFragment = tuple[str, str]

_TITLES = {
    Mode.SESSION: "tmux sessions",
    Mode.WORKTREE: "git worktrees",
}
_MAX_LABEL_WIDTH = 40


class PickerScreen:
    """Drives a PickerEngine from prompt_toolkit key bindings.

    prompt_toolkit pushes key presses, so instead of the pull loop used by
    headless surfaces every binding forwards one KeyEvent to the engine and
    re-renders the resulting view. The application exits once the engine
    closes, returning the engine's PickerResult.
    """

    def __init__(self, engine: PickerEngine, *, console: Console | None = None) -> None:
        self._engine = engine
        self._console = console or Console(force_terminal=True)
        self._view: PickerView | None = None

        self.query_control = FormattedTextControl(self._render_query)
        self.list_control = FormattedTextControl(
            self._render_list,
            focusable=True,
            get_cursor_position=self._cursor_position,
        )
        self.preview_control = FormattedTextControl(self._render_preview)
        self.prompt_control = FormattedTextControl(self._render_prompt)
        self.status_control = FormattedTextControl(self._render_status)
        self.help_control = FormattedTextControl(self._render_help)

        inner_layout = HSplit(
            [
                Window(self.query_control, height=1, style="class:search"),
                Window(height=1, char="-", style="class:separator"),
                VSplit(
                    [
                        Window(self.list_control, width=Dimension(weight=2)),
                        Window(width=1, char="|", style="class:separator"),
                        Window(self.preview_control, width=Dimension(weight=1)),
                    ],
                    padding=1,
                ),
                ConditionalContainer(
                    Window(self.prompt_control, height=1, style="class:prompt"),
                    filter=Condition(lambda: self._view is not None and self._view.prompt is not None),
                ),
                Window(self.status_control, height=1),
                Window(self.help_control, height=1, style="class:help"),
            ]
        )
        root_container = Frame(inner_layout, title=self._render_title)
        self._app: Application[PickerResult] = Application(
            layout=Layout(root_container, focused_element=self.list_control),
            key_bindings=self._bindings(),
            style=_picker_style(),
            full_screen=True,
        )
        # Alt+<key> arrives as an escape prefix; keep lone Escape responsive.
        self._app.ttimeoutlen = 0.05
        self._app.timeoutlen = 0.3

    def run(self, mode: Mode, *, query: str = "") -> PickerResult:
        self._engine.open(mode, query=query)
        self.render(self._engine.view())
        result = self._app.run()
        if result is None:
            # Interrupted without the engine closing.
            self._engine.close()
            result = self._engine.result
        assert result is not None
        return result

    def render(self, view: PickerView) -> None:
        self._view = view
        self._app.invalidate()

    def dispatch(self, event: KeyEvent) -> None:
        self._engine.handle(event)
        if not self._engine.is_open:
            self._exit(self._engine.result)
            return
        self.render(self._engine.view())

    def _bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("up")
        @kb.add("c-p")
        def _(event: Any) -> None:
            self.dispatch(UP)

        @kb.add("down")
        @kb.add("c-n")
        def _(event: Any) -> None:
            self.dispatch(DOWN)

        @kb.add("pageup")
        def _(event: Any) -> None:
            self.dispatch(PAGE_UP)

        @kb.add("pagedown")
        def _(event: Any) -> None:
            self.dispatch(PAGE_DOWN)

        @kb.add("enter")
        def _(event: Any) -> None:
            self.dispatch(ENTER)

        @kb.add("backspace")
        def _(event: Any) -> None:
            self.dispatch(BACKSPACE)

        @kb.add("escape")
        @kb.add("c-c")
        def _(event: Any) -> None:
            self.dispatch(ESCAPE)

        for command in Command:

            @kb.add("escape", command.value)
            def _(event: Any, command: Command = command) -> None:
                self.dispatch(KeyEvent.command(command))

        @kb.add(Keys.Any)
        def _(event: Any) -> None:
            for ch in event.data:
                if ch.isprintable():
                    self.dispatch(KeyEvent.typed(ch))

        return kb

    def _render_title(self) -> str:
        view = self._view
        if view is None:
            return ""
        return f"{_TITLES[view.mode]} ({len(view.rows)}/{view.total})"

    def _render_query(self) -> list[RowFragment]:
        query = self._view.query if self._view else ""
        return [("class:title", "> "), ("", query)]

    def _cursor_position(self) -> Point:
        index = self._view.selection_index if self._view else 0
        return Point(x=0, y=max(0, index))

    def _render_list(self) -> list[RowFragment]:
        view = self._view
        if view is None:
            return []
        if not view.rows:
            return [("class:empty", "  no matches\n" if view.total else "  nothing here yet\n")]

        width = min(_MAX_LABEL_WIDTH, max(len(m.candidate.label) for m in view.rows))
        frags: list[RowFragment] = []
        for idx, item in enumerate(view.rows):
            candidate = item.candidate
            is_selected = idx == view.selection_index
            marker = " "
            if candidate.is_protected:
                marker = theme.ATTACHED_MARKER if view.mode is Mode.SESSION else theme.MAIN_MARKER
            dirty = theme.DIRTY_MARKER if candidate.is_dirty else " "
            label = candidate.label[:width].ljust(width)
            row_style = "class:selected" if is_selected else ""
            if candidate.is_protected and not is_selected:
                row_style = "class:protected"
            frags.append((row_style, f" {marker} {label} "))
            frags.append(("class:dirty" if not is_selected else row_style, dirty))
            frags.append(
                (row_style or "class:annotation", f" {annotation_text(candidate)}\n")
            )
        return frags

    def _render_preview(self) -> ANSI:
        candidate = self._view.selected if self._view else None
        if candidate is None:
            return ANSI("")
        with self._console.capture() as cap:
            self._console.print(build_preview(candidate))
        return ANSI(cap.get())

    def _render_prompt(self) -> list[RowFragment]:
        prompt = self._view.prompt if self._view else None
        if isinstance(prompt, NamePrompt):
            return [("", f" {prompt.title}: "), ("bold", prompt.text), ("blink", "_")]
        if isinstance(prompt, ConfirmPrompt):
            return [("", f" {prompt.message} [Y/n]")]
        return []

    def _render_status(self) -> list[RowFragment]:
        message = self._view.message if self._view else None
        if message is None:
            return []
        return [(theme.status_class(message.level), f" {message.text}")]

    def _render_help(self) -> list[RowFragment]:
        return [("", f" {self._view.help_text}" if self._view else "")]

    def _exit(self, result: PickerResult | None) -> None:
        try:
            self._app.exit(result=result)
        except Exception as exc:  # pragma: no cover
            if "Return value already set" not in str(exc):
                raise


def _picker_style() -> Style:
    return Style.from_dict(theme.prompt_toolkit_picker_style())
