"""Spreadsheet access: table contract, workbook backend and edit history."""
from __future__ import annotations

from .editor import TableEditor
from .excel_table import ExcelTable
from .history import CellEdit, CommandLog
from .table import InMemoryTable, RowTable, validate_layout

__all__ = [
    "TableEditor",
    "ExcelTable",
    "CellEdit",
    "CommandLog",
    "InMemoryTable",
    "RowTable",
    "validate_layout",
]
