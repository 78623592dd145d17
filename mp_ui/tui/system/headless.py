from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from mp_picker.events import KeyEvent
from mp_picker.state import PickerView
from mp_ui.tui.core.protocols import Presenter, PresenterSink, TablePresenter
from mp_ui.tui.system.models import TableModel


@dataclass
class RecordedTable:
    model: TableModel


class HeadlessSurface:
    """Render surface replaying scripted key events and recording each frame."""

    def __init__(self, events: Iterable[KeyEvent] = ()) -> None:
        self._events: deque[KeyEvent] = deque(events)
        self.frames: list[PickerView] = []

    def render(self, view: PickerView) -> None:
        self.frames.append(view)

    def next_event(self) -> KeyEvent | None:
        if not self._events:
            return None
        return self._events.popleft()

    @property
    def last_frame(self) -> PickerView | None:
        return self.frames[-1] if self.frames else None


@dataclass
class HeadlessUI:
    recorded_tables: list[RecordedTable] = field(default_factory=list)
    recorded_messages: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.tables = _HeadlessTablePresenter(self)
        self.present = _HeadlessPresenter(self)


class _HeadlessTablePresenter(TablePresenter):
    def __init__(self, ui: HeadlessUI):
        self._ui = ui

    def show(self, table: TableModel) -> None:
        self._ui.recorded_tables.append(RecordedTable(table))


class _HeadlessPresenterSink(PresenterSink):
    def __init__(self, ui: HeadlessUI) -> None:
        self._ui = ui

    def emit(self, level: str, message: str) -> None:
        self._ui.recorded_messages.append(f"{level.upper()}: {message}")


class _HeadlessPresenter(Presenter):
    def __init__(self, ui: HeadlessUI) -> None:
        super().__init__(_HeadlessPresenterSink(ui))
