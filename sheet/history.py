"""Bounded undo/redo log of cell edits.

The log is an immutable value: every operation returns a new log, so the
component owning the table decides when history changes.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class CellEdit:
    """One cell write: the value before and after."""
    row: int
    col: int
    old_value: str
    new_value: str

    def inverse(self) -> "CellEdit":
        return CellEdit(self.row, self.col, self.new_value, self.old_value)


@dataclass(frozen=True)
class CommandLog:
    """Undo and redo stacks capped at ``capacity`` entries each (oldest dropped)."""
    capacity: int = 50
    undo_stack: Tuple[CellEdit, ...] = ()
    redo_stack: Tuple[CellEdit, ...] = ()

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def record(self, edit: CellEdit) -> "CommandLog":
        """Push a new edit; the redo side is discarded."""
        stack = (self.undo_stack + (edit,))[-self.capacity:]
        return replace(self, undo_stack=stack, redo_stack=())

    def undo(self) -> Tuple[Optional[CellEdit], "CommandLog"]:
        """Pop the latest edit. Returns (edit, new log); edit is None when empty."""
        if not self.undo_stack:
            return None, self
        edit = self.undo_stack[-1]
        return edit, replace(
            self,
            undo_stack=self.undo_stack[:-1],
            redo_stack=(self.redo_stack + (edit,))[-self.capacity:],
        )

    def redo(self) -> Tuple[Optional[CellEdit], "CommandLog"]:
        """Pop the latest undone edit back onto the undo side."""
        if not self.redo_stack:
            return None, self
        edit = self.redo_stack[-1]
        return edit, replace(
            self,
            undo_stack=(self.undo_stack + (edit,))[-self.capacity:],
            redo_stack=self.redo_stack[:-1],
        )
