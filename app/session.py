"""
Grading session state machine.

Coordinates the two-step voice workflow: a transcript first selects a
student row, the next transcript provides that row's grade.

Classes:
    Mode: The two states of a session
    GradingSession: Routes transcripts and UI events to the use cases

States:
    SELECTING_ENTRY: transcripts are resolved to candidate rows; a
        candidate must then be picked with ``select``
    RECORDING_GRADE: transcripts are parsed as grades for the selected row;
        a successful write returns to SELECTING_ENTRY, a failed parse or
        write keeps the selection so the user can try again

The session never touches a UI toolkit. Presentation happens through the
``on_*`` callbacks, which the front-end assigns.
"""
from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, List, Optional, Tuple

from loguru import logger

from core.exceptions import (
    GradingException,
    InvalidSelection,
    TranscriptionCancelled,
    TranscriptionFailure,
)
from core.result import Failure, Result, Success

from .messages import Messages
from .use_cases import (
    GradeEntry,
    RecordGradeUseCase,
    RedoGradeUseCase,
    ResolveEntryUseCase,
    UndoLastGradeUseCase,
)


class Mode(Enum):
    SELECTING_ENTRY = "selecting_entry"
    RECORDING_GRADE = "recording_grade"


class GradingSession:
    """
    State machine for one grading session.

    Transcripts are processed one at a time; ``handle_transcript``, ``select``,
    ``abort``, ``retry_write``, ``undo`` and ``redo`` all hold the same lock,
    so a write never interleaves with a lookup on the same table.

    Attributes:
        mode: Current state
        selected_row: Row receiving the next grade (RECORDING_GRADE only)
        candidates: Rows offered by the latest successful lookup
        on_candidates: Called with the candidate rows after a lookup
        on_status: Called with informational messages
        on_error: Called with user-facing error messages
        on_grade_written: Called with the GradeEntry after a successful write
        on_recording_requested: Called with the selected row when the grade
            should be recorded
    """

    def __init__(
        self,
        resolve_entry: ResolveEntryUseCase,
        record_grade: RecordGradeUseCase,
        undo_grade: Optional[UndoLastGradeUseCase] = None,
        redo_grade: Optional[RedoGradeUseCase] = None,
        messages: Optional[Messages] = None,
        describe_entry: Optional[Callable[[int], str]] = None,
    ) -> None:
        self.resolve_entry = resolve_entry
        self.record_grade = record_grade
        self.undo_grade = undo_grade or UndoLastGradeUseCase(record_grade.editor)
        self.redo_grade = redo_grade or RedoGradeUseCase(record_grade.editor)
        self.messages = messages or Messages()
        self.describe_entry = describe_entry or (lambda row: f"#{row + 1}")

        self.mode = Mode.SELECTING_ENTRY
        self.selected_row: Optional[int] = None
        self.candidates: List[int] = []
        self._pending_write: Optional[Tuple[str, str]] = None
        self._lock = threading.RLock()

        self.on_candidates: Optional[Callable[[List[int]], None]] = None
        self.on_status: Optional[Callable[[str], None]] = None
        self.on_error: Optional[Callable[[str], None]] = None
        self.on_grade_written: Optional[Callable[[GradeEntry], None]] = None
        self.on_recording_requested: Optional[Callable[[int], None]] = None

    @property
    def has_pending_write(self) -> bool:
        return self._pending_write is not None

    def handle_transcript(self, text: str) -> Result:
        """Process one transcript according to the current mode.

        Returns:
            Success(LookupResult) or Success(GradeEntry) on progress; Failure
            with NoCandidatesFound, GradeParseFailure or PersistWriteFailure
            otherwise. Unexpected errors reset the session and are returned
            as Failure as well.
        """
        with self._lock:
            logger.debug(f"[session] {self.mode.value} <- '{text}'")
            try:
                if self.mode is Mode.SELECTING_ENTRY:
                    return self._lookup(text)
                return self._record(text)
            except Exception as e:
                logger.opt(exception=e).error(f"Unexpected error while handling '{text}'")
                self._reset()
                self._error("unexpected_error", error=e)
                return Failure(e)

    def select(self, row: int) -> Result[int, InvalidSelection]:
        """Pick one of the presented candidates and start grade recording."""
        with self._lock:
            if self.mode is not Mode.SELECTING_ENTRY or row not in self.candidates:
                logger.warning(f"[session] rejected selection of row {row} in {self.mode.value}")
                self._error("invalid_selection")
                return Failure(InvalidSelection(f"Row {row} is not a current candidate"))

            self.selected_row = row
            self.candidates = []
            self._pending_write = None
            self.mode = Mode.RECORDING_GRADE
            logger.info(f"[session] selected row {row} -> {self.mode.value}")
            self._status("selected", entry=self.describe_entry(row))
            if self.on_recording_requested:
                self.on_recording_requested(row)
            return Success(row)

    def abort(self) -> None:
        """Drop the current selection and candidates."""
        with self._lock:
            self._reset()
            self._status("aborted")

    def handle_transcription_error(self, error: Exception) -> Failure:
        """Report a failed transcription; the current step can simply be retried."""
        if isinstance(error, TranscriptionCancelled):
            logger.debug("[session] transcription cancelled")
        else:
            logger.warning(f"[session] transcription failed in {self.mode.value}: {error}")
            self._error("transcription_failed", error=error)
        if not isinstance(error, TranscriptionFailure):
            error = TranscriptionFailure(str(error))
        return Failure(error)

    def retry_write(self) -> Result:
        """Write the grade whose previous write failed, to the same row."""
        with self._lock:
            if self._pending_write is None or self.selected_row is None:
                self._status("nothing_to_retry")
                return Failure(GradingException("No failed write to retry"))
            grade, transcript = self._pending_write
            return self._write(grade, transcript)

    def undo(self) -> Result:
        with self._lock:
            result = self.undo_grade.execute()
            if result.is_failure():
                self._error("write_failed", error=result.error)
            elif result.unwrap() is None:
                self._status("nothing_to_undo")
            else:
                edit = result.unwrap()
                self._status("undone", row=edit.row + 1, value=edit.old_value)
            return result

    def redo(self) -> Result:
        with self._lock:
            result = self.redo_grade.execute()
            if result.is_failure():
                self._error("write_failed", error=result.error)
            elif result.unwrap() is None:
                self._status("nothing_to_redo")
            else:
                edit = result.unwrap()
                self._status("redone", row=edit.row + 1, value=edit.new_value)
            return result

    def _lookup(self, text: str) -> Result:
        result = self.resolve_entry.execute(text)
        if result.is_failure():
            self.candidates = []
            if result.error.query:
                self._error("no_results", query=result.error.query)
            else:
                self._error("nothing_heard")
            return result

        lookup = result.unwrap()
        self.candidates = lookup.rows
        self._status("candidates", count=len(self.candidates))
        if self.on_candidates:
            self.on_candidates(list(self.candidates))
        return result

    def _record(self, text: str) -> Result:
        extracted = self.record_grade.extract(text)
        if extracted.is_failure():
            self._error("grade_parse_failed", text=text.strip())
            return extracted
        return self._write(extracted.unwrap(), text)

    def _write(self, grade: str, transcript: str) -> Result:
        row = self.selected_row
        written = self.record_grade.write(row, grade, transcript)
        if written.is_failure():
            self._pending_write = (grade, transcript)
            self._error("write_failed", error=written.error)
            return written

        entry = written.unwrap()
        label = self.describe_entry(row)
        self._reset()
        logger.info(f"[session] grade {grade} written at row {row} -> {self.mode.value}")
        self._status("grade_written", grade=grade, entry=label)
        if self.on_grade_written:
            self.on_grade_written(entry)
        return written

    def _reset(self) -> None:
        self.mode = Mode.SELECTING_ENTRY
        self.selected_row = None
        self.candidates = []
        self._pending_write = None

    def _status(self, key: str, **kwargs) -> None:
        if self.on_status:
            self.on_status(self.messages.get(key, **kwargs))

    def _error(self, key: str, **kwargs) -> None:
        if self.on_error:
            self.on_error(self.messages.get(key, **kwargs))
