"""Inline branch list rendering with rich."""

from __future__ import annotations

from types import TracebackType

from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from branchpick.git.models import BranchRecord
from branchpick.ui.state import BranchListModel

FRAME_ROWS = 2
EMPTY_VIEWPORT_ROWS = 3
LIST_TITLE = "Branches"
EMPTY_TITLE = "Error"
EMPTY_NOTICE = "No git branches found in this directory."
HIGHLIGHT_SYMBOL = "> "
HIGHLIGHT_STYLE = "reverse green"


def viewport_rows_for(branch_count: int, max_height: int, console_height: int | None = None) -> int:
    if branch_count == 0:
        return EMPTY_VIEWPORT_ROWS
    rows = min(branch_count + FRAME_ROWS, max_height)
    if console_height is not None:
        rows = min(rows, console_height)
    return max(rows, EMPTY_VIEWPORT_ROWS)


def page_size_for(viewport_rows: int) -> int:
    return max(1, viewport_rows - FRAME_ROWS)


def scroll_offset(cursor: int | None, offset: int, visible_rows: int, total: int) -> int:
    """Smallest shift of ``offset`` that keeps ``cursor`` on screen."""
    visible_rows = max(1, visible_rows)
    if cursor is not None:
        if cursor < offset:
            offset = cursor
        elif cursor >= offset + visible_rows:
            offset = cursor - visible_rows + 1
    return max(0, min(offset, total - visible_rows))


def format_branch_row(record: BranchRecord) -> Text:
    row = Text(style="dim" if record.is_stale else "")
    row.append("* " if record.is_current else "  ", style="green")
    row.append(record.name, style="" if record.is_stale else "bold")
    if record.pr_number is not None:
        row.append(f" #{record.pr_number}", style="magenta")
    row.append(" (")
    row.append(record.last_commit_display, style="yellow")
    row.append(") ")
    row.append(record.tracking_info, style="cyan")
    return row


def build_view(model: BranchListModel, *, offset: int = 0, viewport_rows: int) -> Panel:
    if model.is_empty:
        return Panel(Text(EMPTY_NOTICE), title=EMPTY_TITLE, title_align="left", box=box.SQUARE, height=EMPTY_VIEWPORT_ROWS)

    visible = page_size_for(viewport_rows)
    rows: list[Text] = []
    for index in range(offset, min(offset + visible, len(model.branches))):
        row = format_branch_row(model.branches[index])
        if index == model.cursor:
            row = Text(HIGHLIGHT_SYMBOL) + row
            row.stylize(HIGHLIGHT_STYLE)
        elif model.cursor is not None:
            row = Text(" " * len(HIGHLIGHT_SYMBOL)) + row
        row.no_wrap = True
        row.overflow = "ellipsis"
        rows.append(row)
    return Panel(Group(*rows), title=LIST_TITLE, title_align="left", box=box.SQUARE, height=viewport_rows)


class RichRenderer:
    """Draws the picker in an inline ``Live`` region below the prompt."""

    def __init__(self, *, viewport_rows: int, console: Console | None = None) -> None:
        self.viewport_rows = viewport_rows
        self.console = console or Console()
        self._offset = 0
        self._live: Live | None = None

    def __enter__(self) -> RichRenderer:
        self._live = Live(console=self.console, auto_refresh=False, transient=False)
        self._live.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def render(self, model: BranchListModel) -> None:
        if self._live is None:
            raise RuntimeError("RichRenderer must be entered before rendering.")
        self._offset = scroll_offset(
            model.cursor,
            self._offset,
            page_size_for(self.viewport_rows),
            len(model.branches),
        )
        view = build_view(model, offset=self._offset, viewport_rows=self.viewport_rows)
        self._live.update(view, refresh=True)
