from rich.console import Console

from mp_ui.tui.core.protocols import Presenter, TablePresenter, UI
from mp_ui.tui.system.components.presenter import RichPresenter
from mp_ui.tui.system.components.table import RichTablePresenter


class TUI(UI):
    def __init__(self, console: Console | None = None):
        self._console = console or Console()
        self.tables: TablePresenter = RichTablePresenter(self._console)
        self.present: Presenter = RichPresenter(self._console)
