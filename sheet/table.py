"""Row/column table contract and an in-memory implementation."""
from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from core.exceptions import PersistWriteFailure, TableStructureError


@runtime_checkable
class RowTable(Protocol):
    """Zero-based row/column addressable table of cell strings.

    ``get_cell`` never fails: out-of-range addresses read as ``""``.
    ``write_cell`` raises ``PersistWriteFailure`` when the value cannot be
    stored or saved.
    """

    @property
    def row_count(self) -> int: ...

    @property
    def column_count(self) -> int: ...

    def get_cell(self, row: int, col: int) -> str: ...

    def write_cell(self, row: int, col: int, value: str) -> None: ...

    def persist(self) -> None: ...


class InMemoryTable:
    """Table held entirely in memory; ``persist`` is a no-op."""

    def __init__(self, rows: Optional[Sequence[Sequence[object]]] = None) -> None:
        self._rows: List[List[str]] = [
            ["" if value is None else str(value) for value in row] for row in (rows or [])
        ]

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self._rows), default=0)

    def get_cell(self, row: int, col: int) -> str:
        if row < 0 or col < 0 or row >= len(self._rows):
            return ""
        cells = self._rows[row]
        return cells[col] if col < len(cells) else ""

    def write_cell(self, row: int, col: int, value: str) -> None:
        if row < 0 or col < 0:
            raise PersistWriteFailure(f"Invalid cell address ({row}, {col})")
        while len(self._rows) <= row:
            self._rows.append([])
        cells = self._rows[row]
        while len(cells) <= col:
            cells.append("")
        cells[col] = value

    def persist(self) -> None:
        pass

    def rows(self) -> List[List[str]]:
        """Copy of the current contents."""
        return [list(row) for row in self._rows]


def validate_layout(table: RowTable, id_column: int, name_column: int) -> None:
    """Check that a loaded table can be searched by id or name.

    Raises:
        TableStructureError: If neither lookup column exists in the table
    """
    width = table.column_count
    if width and min(id_column, name_column) >= width:
        raise TableStructureError(
            f"Table has {width} columns; id column {id_column + 1} and "
            f"name column {name_column + 1} are both outside it"
        )
