"""Single writer for a table, keeping the undo/redo history."""
from __future__ import annotations

from threading import Lock
from typing import Optional

from loguru import logger

from .history import CellEdit, CommandLog
from .table import RowTable


class TableEditor:
    """Owns a table and its command log.

    Every write goes through here so that history and table stay in step.
    When the underlying write raises, history is left untouched.
    """

    def __init__(self, table: RowTable, history_limit: int = 50) -> None:
        self.table = table
        self.history = CommandLog(capacity=history_limit)
        self._lock = Lock()

    def write(self, row: int, col: int, value: str) -> CellEdit:
        with self._lock:
            edit = CellEdit(row, col, self.table.get_cell(row, col), value)
            self.table.write_cell(row, col, value)
            self.history = self.history.record(edit)
        logger.info(f"[sheet] row {row} col {col}: '{edit.old_value}' -> '{value}'")
        return edit

    def undo(self) -> Optional[CellEdit]:
        """Restore the value overwritten by the latest edit."""
        with self._lock:
            edit, history = self.history.undo()
            if edit is None:
                return None
            self.table.write_cell(edit.row, edit.col, edit.old_value)
            self.history = history
        logger.info(f"[sheet] undo row {edit.row} col {edit.col} -> '{edit.old_value}'")
        return edit

    def redo(self) -> Optional[CellEdit]:
        """Re-apply the latest undone edit."""
        with self._lock:
            edit, history = self.history.redo()
            if edit is None:
                return None
            self.table.write_cell(edit.row, edit.col, edit.new_value)
            self.history = history
        logger.info(f"[sheet] redo row {edit.row} col {edit.col} -> '{edit.new_value}'")
        return edit
