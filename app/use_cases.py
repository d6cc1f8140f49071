"""Use cases for the voice grading workflow.

Each use case wraps one business step (find an entry, record a grade, undo,
redo) and reports expected failures as ``Failure`` values instead of raising.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger

from core.exceptions import GradeParseFailure, NoCandidatesFound, PersistWriteFailure
from core.result import Failure, Result, Success
from lookup.entry_resolver import EntryResolver, LookupResult
from lookup.grade_extractor import GradeExtractor
from sheet.editor import TableEditor
from sheet.history import CellEdit
from sheet.table import RowTable


@dataclass
class GradeEntry:
    """A grade written to the table.

    Attributes:
        row: Zero-based row of the student
        column: Zero-based grade column
        grade: Canonical grade string ("3.2", "7")
        transcript: Text the grade was extracted from
        previous_value: Cell content before the write
        timestamp: Time of the write (defaults to now)
    """
    row: int
    column: int
    grade: str
    transcript: str = ""
    previous_value: str = ""
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()


class ResolveEntryUseCase:
    """Finds the rows a spoken identifier or name refers to."""

    def __init__(self, resolver: EntryResolver, table: RowTable):
        self.resolver = resolver
        self.table = table

    def execute(self, transcript: str) -> Result[LookupResult, NoCandidatesFound]:
        """Resolve a transcript.

        Returns:
            Success with a non-empty LookupResult, or Failure(NoCandidatesFound)
        """
        result = self.resolver.resolve(transcript, self.table)
        if not result.found:
            logger.info(f"[lookup] no candidates for '{transcript}'")
            return Failure(NoCandidatesFound(result.query))
        return Success(result)


class RecordGradeUseCase:
    """Extracts a grade from a transcript and writes it to the selected row."""

    def __init__(self, extractor: GradeExtractor, editor: TableEditor, grade_column: int):
        self.extractor = extractor
        self.editor = editor
        self.grade_column = grade_column

    def extract(self, transcript: str) -> Result[str, GradeParseFailure]:
        grade = self.extractor.extract(transcript)
        if grade is None:
            logger.info(f"[grade] nothing parsable in '{transcript}'")
            return Failure(GradeParseFailure(transcript))
        logger.debug(f"[grade] '{transcript}' -> {grade}")
        return Success(grade)

    def write(self, row: int, grade: str, transcript: str = "") -> Result[GradeEntry, PersistWriteFailure]:
        """Write an already extracted grade."""
        try:
            edit = self.editor.write(row, self.grade_column, grade)
        except PersistWriteFailure as e:
            logger.error(f"Failed to write grade {grade} at row {row}: {e}")
            return Failure(e)
        return Success(
            GradeEntry(
                row=row,
                column=self.grade_column,
                grade=grade,
                transcript=transcript,
                previous_value=edit.old_value,
            )
        )

    def execute(self, row: int, transcript: str) -> Result[GradeEntry, Exception]:
        """Extract the grade from ``transcript`` and write it at ``row``.

        Returns:
            Success(GradeEntry), Failure(GradeParseFailure) when no grade was
            spoken, or Failure(PersistWriteFailure) when the write failed
        """
        extracted = self.extract(transcript)
        if extracted.is_failure():
            return extracted
        return self.write(row, extracted.unwrap(), transcript)


class UndoLastGradeUseCase:
    """Restores the cell overwritten by the latest grade write."""

    def __init__(self, editor: TableEditor):
        self.editor = editor

    def execute(self) -> Result[Optional[CellEdit], PersistWriteFailure]:
        """Undo one edit.

        Returns:
            Success with the undone edit, Success(None) when there is nothing
            to undo, or Failure(PersistWriteFailure)
        """
        try:
            return Success(self.editor.undo())
        except PersistWriteFailure as e:
            logger.error(f"Failed to undo: {e}")
            return Failure(e)


class RedoGradeUseCase:
    """Re-applies the latest undone grade write."""

    def __init__(self, editor: TableEditor):
        self.editor = editor

    def execute(self) -> Result[Optional[CellEdit], PersistWriteFailure]:
        try:
            return Success(self.editor.redo())
        except PersistWriteFailure as e:
            logger.error(f"Failed to redo: {e}")
            return Failure(e)
