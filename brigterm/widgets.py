"""Thread-safe display state rendered with rich.

Pages are refreshed from background threads, while rich's ``Live`` display is
only ever updated from the dashboard's main loop. The widgets here hold the
content that refreshes write, and turn it into rich renderables when the main
loop asks for them. Writers call :meth:`Redrawer.request_redraw` after a change.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from rich.console import RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

SELECTED_STYLE = "bold reverse"


@dataclass(frozen=True)
class Cell:
    """One table cell."""

    text: str
    style: str = ""


class Redrawer:
    """Flag raised by writers and consumed by the render loop."""

    def __init__(self) -> None:
        self._pending = threading.Event()

    def request_redraw(self) -> None:
        self._pending.set()

    def consume(self) -> bool:
        """Return True (and lower the flag) if a redraw was requested."""
        if self._pending.is_set():
            self._pending.clear()
            return True
        return False


class TextPane:
    """A bordered block of text.

    Attributes:
        title: Panel title.
        border_style: Rich style for the border.
    """

    def __init__(self, title: str = "", border_style: str = "white", markup: bool = True) -> None:
        self.title = title
        self.border_style = border_style
        self.markup = markup
        self._text = ""
        self._lock = threading.Lock()

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    def set_text(self, text: str) -> None:
        with self._lock:
            self._text = text

    def render(self) -> Panel:
        with self._lock:
            body = Text.from_markup(self._text) if self.markup else Text(self._text)
            return Panel(body, title=self.title or None, border_style=self.border_style)


class TablePane:
    """
    A bordered table with a selectable row cursor.

    Attributes:
        title: Panel title.
        columns: Column headers.
        border_style: Rich style for the border.
    """

    def __init__(self, columns: list[str], title: str = "", border_style: str = "white") -> None:
        self.columns = columns
        self.title = title
        self.border_style = border_style
        self._rows: list[list[Cell]] = []
        self._placeholder: str | None = None
        self._selected = 0
        self._lock = threading.Lock()

    @property
    def rows(self) -> list[list[Cell]]:
        with self._lock:
            return [list(row) for row in self._rows]

    @property
    def selected_index(self) -> int:
        with self._lock:
            return self._selected

    def set_cells(self, rows: list[list[Cell]], placeholder: str | None = None) -> None:
        """
        Replace every row, keeping the cursor in range.

        Args:
            rows: New rows, one ``Cell`` per column.
            placeholder: Markup shown in place of rows when ``rows`` is empty.
        """
        with self._lock:
            self._rows = [list(row) for row in rows]
            self._placeholder = placeholder
            self._selected = min(self._selected, max(0, len(self._rows) - 1))

    def move(self, delta: int) -> None:
        """Move the cursor by ``delta`` rows, clamped to the table."""
        with self._lock:
            if not self._rows:
                self._selected = 0
                return
            self._selected = max(0, min(len(self._rows) - 1, self._selected + delta))

    def reset_cursor(self) -> None:
        with self._lock:
            self._selected = 0

    def selected_text(self, column: int) -> str | None:
        """Text of ``column`` in the selected row, or None if the table is empty."""
        with self._lock:
            if not self._rows:
                return None
            return self._rows[self._selected][column].text

    def render(self) -> RenderableType:
        with self._lock:
            table = Table(expand=True, show_header=True, header_style="bold yellow")
            for column in self.columns:
                table.add_column(column, no_wrap=True)
            for index, row in enumerate(self._rows):
                table.add_row(
                    *(Text(cell.text, style=cell.style) for cell in row),
                    style=SELECTED_STYLE if index == self._selected else None,
                )
            if not self._rows and self._placeholder:
                table.add_row(self._placeholder, *([""] * (len(self.columns) - 1)))
            return Panel(table, title=self.title or None, border_style=self.border_style, padding=0)
