from rich.console import Console

from mp_ui.tui.core import theme
from mp_ui.tui.core.protocols import Presenter, PresenterSink


class _RichPresenterSink(PresenterSink):
    def __init__(self, console: Console) -> None:
        self._console = console

    def emit(self, level: str, message: str) -> None:
        self._console.print(theme.presenter_message(level, message))


class RichPresenter(Presenter):
    def __init__(self, console: Console) -> None:
        super().__init__(_RichPresenterSink(console))
