"""Workbook-backed table using openpyxl."""
from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path
from threading import Lock
from typing import List, Optional, Union

from loguru import logger

from core.error_handler import retry_on_failure
from core.exceptions import PersistWriteFailure, TableLoadError

SUPPORTED_SUFFIXES = (".xlsx", ".xlsm")

_INTEGER = re.compile(r"-?(?:0|[1-9]\d*)")
_DECIMAL = re.compile(r"-?\d+\.\d+")


def cell_text(value: object) -> str:
    """Render a cell value the way it reads on screen ("12", not "12.0")."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def typed_value(text: str) -> Union[None, int, float, str]:
    """Store numeric-looking text as a number; ids with leading zeros stay text."""
    stripped = text.strip()
    if not stripped:
        return None
    if _INTEGER.fullmatch(stripped):
        return int(stripped)
    if _DECIMAL.fullmatch(stripped):
        return float(stripped)
    return text


class ExcelTable:
    """First (or named) worksheet of an .xlsx/.xlsm workbook as a RowTable.

    Cell strings are read once into a snapshot; writes update both the
    worksheet and the snapshot and, with ``auto_save``, save the file.
    """

    def __init__(self, file_path: Union[str, Path], sheet_name: Optional[str] = None, auto_save: bool = True) -> None:
        self.file_path = Path(file_path).absolute()
        self.sheet_name = sheet_name
        self.auto_save = auto_save
        self.lock = Lock()
        self._rows: List[List[str]] = []
        self._load()

    def _load(self) -> None:
        from openpyxl import load_workbook  # type: ignore

        if self.file_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise TableLoadError(
                f"Unsupported spreadsheet format '{self.file_path.suffix}' (expected .xlsx or .xlsm)"
            )
        if not self.file_path.exists():
            raise TableLoadError(f"Spreadsheet not found: {self.file_path}")

        try:
            self.workbook = load_workbook(
                self.file_path, keep_vba=self.file_path.suffix.lower() == ".xlsm"
            )
        except Exception as e:
            raise TableLoadError(f"Failed to load spreadsheet: {e}") from e

        if self.sheet_name is not None:
            if self.sheet_name not in self.workbook.sheetnames:
                raise TableLoadError(f"Worksheet '{self.sheet_name}' not found in {self.file_path.name}")
            self.sheet = self.workbook[self.sheet_name]
        else:
            if not self.workbook.worksheets:
                raise TableLoadError("No worksheets found in spreadsheet")
            self.sheet = self.workbook.worksheets[0]

        self._rows = [
            [cell_text(value) for value in row]
            for row in self.sheet.iter_rows(values_only=True)
        ]
        logger.info(
            f"Loaded '{self.sheet.title}' from {self.file_path.name}: "
            f"{self.row_count} rows x {self.column_count} columns"
        )

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
        """Write ``value`` at a zero-based address and save when auto-saving.

        A failed save puts the previous cell content back, so the table
        never holds a value that is not on disk.

        Raises:
            PersistWriteFailure: If the address is invalid or saving fails
        """
        if row < 0 or col < 0:
            raise PersistWriteFailure(f"Invalid cell address ({row}, {col})")
        with self.lock:
            try:
                cell = self.sheet.cell(row=row + 1, column=col + 1)
                old_value = cell.value
                cell.value = typed_value(value)
            except Exception as e:
                raise PersistWriteFailure(f"Failed to set cell ({row}, {col}): {e}") from e

            old_text = self.get_cell(row, col)
            self._set_text(row, col, value)

            if self.auto_save:
                try:
                    self._save_locked()
                except PersistWriteFailure:
                    cell.value = old_value
                    self._set_text(row, col, old_text)
                    logger.warning(f"Save failed, row {row + 1} col {col + 1} restored to '{old_text}'")
                    raise
        logger.debug(f"Cell updated at row {row + 1}, col {col + 1} => {value}")

    def _set_text(self, row: int, col: int, value: str) -> None:
        while len(self._rows) <= row:
            self._rows.append([])
        cells = self._rows[row]
        while len(cells) <= col:
            cells.append("")
        cells[col] = value

    def persist(self) -> None:
        """Save the workbook to disk.

        Raises:
            PersistWriteFailure: If the file cannot be written
        """
        with self.lock:
            self._save_locked()

    def _save_locked(self) -> None:
        try:
            self._save()
        except Exception as e:
            raise PersistWriteFailure(f"Failed to save {self.file_path.name}: {e}") from e

    # Spreadsheet applications hold a write lock on open files.
    @retry_on_failure(max_retries=3, delay=0.5, exceptions=(PermissionError,))
    def _save(self) -> None:
        self.workbook.save(self.file_path)
