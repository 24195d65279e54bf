# lease_table.py
"""Sortable DHCP lease table.

The sort/navigation logic is a pure state machine (`transition`) so it can be
tested without a terminal; `LeaseTableApp` only projects the current state
onto a textual DataTable and feeds key presses back in as SortEvents.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Static

from lease import COLUMNS, Lease

logger = logging.getLogger(__name__)

SORT_GLYPHS = {True: "↑", False: "↓"}

class SortEvent(Enum):
    NEXT_COLUMN = "next_column"
    PREVIOUS_COLUMN = "previous_column"
    TOGGLE_ORDER = "toggle_order"
    QUIT = "quit"

@dataclass(frozen=True)
class TableState:
    leases: Tuple[Lease, ...]
    sort_column: int = 0
    ascending: bool = True
    finished: bool = False

def sort_leases(leases: Iterable[Lease], column: int, ascending: bool) -> Tuple[Lease, ...]:
    """Stable sort on the string value of one column.

    sorted() with reverse=True keeps equal values in their original order,
    so ties never move relative to each other in either direction.
    """
    return tuple(sorted(leases, key=lambda lease: lease.cell(column), reverse=not ascending))

def initial_state(leases: Sequence[Lease]) -> TableState:
    """Returns the starting state: sorted by IP, ascending."""
    return TableState(leases=sort_leases(leases, 0, True))

def transition(state: TableState, event: SortEvent) -> TableState:
    """Returns the state that follows `state` after `event`."""
    if state.finished:
        return state

    column_count = len(COLUMNS)
    if event is SortEvent.QUIT:
        return replace(state, finished=True)
    if event is SortEvent.NEXT_COLUMN:
        column, ascending = (state.sort_column + 1) % column_count, state.ascending
    elif event is SortEvent.PREVIOUS_COLUMN:
        column, ascending = (state.sort_column - 1 + column_count) % column_count, state.ascending
    elif event is SortEvent.TOGGLE_ORDER:
        column, ascending = state.sort_column, not state.ascending
    else:
        raise ValueError(f"Unknown table event: {event!r}")

    return replace(state, leases=sort_leases(state.leases, column, ascending),
                   sort_column=column, ascending=ascending)

def header_line(state: TableState) -> str:
    title = COLUMNS[state.sort_column].title
    return f"Sorting by {title} {SORT_GLYPHS[state.ascending]} (← → to change column, space to toggle order)"

def row_cells(state: TableState) -> List[tuple]:
    return [lease.cells() for lease in state.leases]

class LeaseTableApp(App):
    """Interactive lease table. Left/right pick the sort column, space flips the order."""

    TITLE = "DHCP Leases"

    CSS = """
    #sort-header {
        padding: 1 0;
    }
    """

    # Priority bindings so the DataTable's own left/right scrolling does not swallow them
    BINDINGS = [
        Binding("right", "table_event('next_column')", "Next column", priority=True),
        Binding("left", "table_event('previous_column')", "Previous column", priority=True),
        Binding("space", "table_event('toggle_order')", "Toggle order", priority=True),
        Binding("q", "table_event('quit')", "Quit"),
        Binding("escape", "table_event('quit')", "Quit", show=False),
        Binding("ctrl+c", "table_event('quit')", "Quit", show=False, priority=True),
    ]

    def __init__(self, leases: Sequence[Lease]):
        super().__init__()
        self.table_state = initial_state(leases)

    def compose(self) -> ComposeResult:
        yield Static(header_line(self.table_state), id="sort-header")
        yield DataTable(id="leases", cursor_type="row")

    def on_mount(self) -> None:
        table = self.query_one("#leases", DataTable)
        for column in COLUMNS:
            table.add_column(column.title, width=column.width, key=column.field)
        self._project_state()
        table.focus()

    def action_table_event(self, name: str) -> None:
        self.table_state = transition(self.table_state, SortEvent(name))
        if self.table_state.finished:
            self.exit()
            return
        logger.debug(f"Sorting by column {self.table_state.sort_column}, ascending={self.table_state.ascending}")
        self._project_state()

    def _project_state(self) -> None:
        """Redraws the header and rows from the current state."""
        self.query_one("#sort-header", Static).update(header_line(self.table_state))
        table = self.query_one("#leases", DataTable)
        table.clear()
        # Text cells so hostnames containing "[" are not read as markup
        table.add_rows([tuple(Text(cell) for cell in row) for row in row_cells(self.table_state)])
