from __future__ import annotations

from rich import box
from rich.cells import cell_len
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from mp_ui.tui.core import theme
from mp_ui.tui.core.protocols import TablePresenter
from mp_ui.tui.system.models import TableModel

# Frame plus padding around the title line.
_TITLE_MARGIN = 4


def build_rich_table(
    model: TableModel,
    *,
    border_style: str = theme.RICH_BORDER_STYLE,
    header_style: str = theme.RICH_ACCENT_BOLD,
    title_style: str = theme.RICH_ACCENT_BOLD,
    box_style: box.Box = box.ROUNDED,
) -> Table:
    """Build a Rich Table from a TableModel; cells are single-line and truncated.

    Cell values are rendered as plain text, never as console markup, since they
    carry session names, paths and tool output.
    """
    rich_table = Table(
        title=escape(model.title) if model.title else None,
        box=box_style,
        border_style=border_style,
        header_style=header_style,
        title_style=title_style,
        min_width=cell_len(model.title) + _TITLE_MARGIN if model.title else None,
    )
    for col in model.columns:
        rich_table.add_column(escape(col), overflow="ellipsis", no_wrap=True)
    for row in model.rows:
        rich_table.add_row(*(Text(str(cell)) for cell in row))
    return rich_table


class RichTablePresenter(TablePresenter):
    def __init__(self, console: Console):
        self._console = console

    def show(self, table: TableModel) -> None:
        self._console.print(build_rich_table(table))
