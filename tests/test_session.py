"""Unit tests for the grading session state machine."""
import pytest
from unittest.mock import Mock, patch

from openpyxl import Workbook, load_workbook

from app.messages import Messages
from app.session import GradingSession, Mode
from app.use_cases import GradeEntry, RecordGradeUseCase, ResolveEntryUseCase
from config.config import ConfigLoader
from core.exceptions import (
    GradeParseFailure,
    InvalidSelection,
    NoCandidatesFound,
    PersistWriteFailure,
    TranscriptionCancelled,
    TranscriptionFailure,
)
from lookup.config import ConfigManager
from lookup.entry_resolver import EntryResolver
from lookup.grade_extractor import GradeExtractor
from sheet.editor import TableEditor
from sheet.excel_table import ExcelTable

GRADE_COLUMN = 7


@pytest.fixture
def session(class_table, greek_numbers):
    app_config, _ = ConfigLoader().load(["--language", "el"])
    editor = TableEditor(class_table)
    session = GradingSession(
        ResolveEntryUseCase(EntryResolver(ConfigManager(app_config)), class_table),
        RecordGradeUseCase(GradeExtractor(greek_numbers), editor, GRADE_COLUMN),
        messages=Messages("en"),
    )
    session.on_candidates = Mock()
    session.on_status = Mock()
    session.on_error = Mock()
    session.on_grade_written = Mock()
    session.on_recording_requested = Mock()
    return session


def select_maria(session):
    session.handle_transcript("νικολαου")
    session.select(2)


class TestGradingSessionScenario:
    """The full select-then-grade cycle."""

    def test_full_cycle_writes_exactly_once(self, session, class_table):
        with patch.object(class_table, "write_cell", wraps=class_table.write_cell) as write_cell:
            # No candidates: stay in SELECTING_ENTRY
            result = session.handle_transcript("Χατζής")
            assert result.is_failure()
            assert isinstance(result.error, NoCandidatesFound)
            assert session.mode is Mode.SELECTING_ENTRY

            # One candidate, then an external selection
            result = session.handle_transcript("νικολαου")
            assert result.is_success()
            session.on_candidates.assert_called_once_with([2])
            assert session.select(2).is_success()
            assert session.mode is Mode.RECORDING_GRADE
            session.on_recording_requested.assert_called_once_with(2)

            # Unparsable grade: keep the selection
            result = session.handle_transcript("καλημέρα")
            assert result.is_failure()
            assert isinstance(result.error, GradeParseFailure)
            assert session.mode is Mode.RECORDING_GRADE
            assert session.selected_row == 2

            # Valid grade: one write, back to SELECTING_ENTRY
            result = session.handle_transcript("3.2")
            assert result.is_success()

        write_cell.assert_called_once_with(2, GRADE_COLUMN, "3.2")
        assert class_table.get_cell(2, GRADE_COLUMN) == "3.2"
        assert session.mode is Mode.SELECTING_ENTRY
        assert session.selected_row is None
        entry = session.on_grade_written.call_args[0][0]
        assert isinstance(entry, GradeEntry)
        assert (entry.row, entry.column, entry.grade) == (2, GRADE_COLUMN, "3.2")

    def test_spoken_grade(self, session, class_table):
        select_maria(session)

        session.handle_transcript("οκτώ κόμμα πέντε")

        assert class_table.get_cell(2, GRADE_COLUMN) == "8.5"

    def test_no_candidates_reports_query(self, session):
        session.handle_transcript("Χατζής")

        session.on_error.assert_called_once_with("No results found for 'ΧΑΤΖΗΣ'")

    def test_nothing_heard(self, session):
        result = session.handle_transcript(" ... ")

        assert result.is_failure()
        session.on_error.assert_called_once_with("Nothing recognizable was heard")


class TestSelection:
    """Tests for GradingSession.select and abort."""

    def test_select_unknown_row(self, session):
        # Arrange
        session.handle_transcript("νικολαου")

        # Act
        result = session.select(3)

        # Assert
        assert result.is_failure()
        assert isinstance(result.error, InvalidSelection)
        assert session.mode is Mode.SELECTING_ENTRY

    def test_select_before_lookup(self, session):
        assert session.select(2).is_failure()

    def test_select_while_recording(self, session):
        select_maria(session)

        result = session.select(2)

        assert result.is_failure()
        assert session.selected_row == 2

    def test_failed_lookup_clears_candidates(self, session):
        session.handle_transcript("νικολαου")
        session.handle_transcript("Χατζής")

        assert session.select(2).is_failure()

    def test_abort(self, session):
        # Arrange
        select_maria(session)

        # Act
        session.abort()

        # Assert
        assert session.mode is Mode.SELECTING_ENTRY
        assert session.selected_row is None
        session.on_status.assert_called_with("Selection cleared")


class TestFailures:
    """Tests for write, transcription and unexpected failures."""

    def test_write_failure_keeps_selection_and_can_be_retried(self, session, class_table):
        # Arrange
        select_maria(session)

        # Act
        with patch.object(class_table, "write_cell", side_effect=PersistWriteFailure("file locked")):
            result = session.handle_transcript("9")

        # Assert
        assert result.is_failure()
        assert isinstance(result.error, PersistWriteFailure)
        assert session.mode is Mode.RECORDING_GRADE
        assert session.selected_row == 2
        assert session.has_pending_write
        assert "file locked" in session.on_error.call_args[0][0]

        # Act: retry once the file is writable again
        retried = session.retry_write()

        # Assert
        assert retried.is_success()
        assert class_table.get_cell(2, GRADE_COLUMN) == "9"
        assert session.mode is Mode.SELECTING_ENTRY
        assert not session.has_pending_write

    def test_failed_write_leaves_history_untouched(self, session, class_table):
        select_maria(session)

        with patch.object(class_table, "write_cell", side_effect=PersistWriteFailure("locked")):
            session.handle_transcript("9")

        assert not session.record_grade.editor.history.can_undo

    def test_retry_without_failed_write(self, session):
        result = session.retry_write()

        assert result.is_failure()
        session.on_status.assert_called_with("There is no failed write to retry")

    def test_transcription_error_keeps_state(self, session):
        # Arrange
        select_maria(session)

        # Act
        result = session.handle_transcription_error(TranscriptionFailure("whisper crashed"))

        # Assert
        assert isinstance(result.error, TranscriptionFailure)
        assert session.mode is Mode.RECORDING_GRADE
        assert session.selected_row == 2
        session.on_error.assert_called_once_with("Transcription failed: whisper crashed")

    def test_cancelled_transcription_is_silent(self, session):
        session.handle_transcription_error(TranscriptionCancelled("cancelled"))

        session.on_error.assert_not_called()

    def test_other_errors_are_wrapped(self, session):
        result = session.handle_transcription_error(OSError("pipe closed"))

        assert isinstance(result.error, TranscriptionFailure)

    def test_unexpected_error_resets(self, session):
        # Arrange
        select_maria(session)

        # Act
        with patch.object(session.record_grade, "extract", side_effect=RuntimeError("boom")):
            result = session.handle_transcript("9")

        # Assert
        assert result.is_failure()
        assert isinstance(result.error, RuntimeError)
        assert session.mode is Mode.SELECTING_ENTRY
        assert session.selected_row is None
        session.on_error.assert_called_with("Unexpected error: boom")


class TestUndoRedo:
    """Tests for undo/redo through the session."""

    def test_undo_and_redo_last_grade(self, session, class_table):
        # Arrange
        select_maria(session)
        session.handle_transcript("7")

        # Act / Assert
        assert session.undo().unwrap().new_value == "7"
        assert class_table.get_cell(2, GRADE_COLUMN) == ""
        session.on_status.assert_called_with("Undone: row 3 restored to ''")

        assert session.redo().unwrap().new_value == "7"
        assert class_table.get_cell(2, GRADE_COLUMN) == "7"
        session.on_status.assert_called_with("Redone: row 3 set to '7'")

    def test_nothing_to_undo(self, session):
        result = session.undo()

        assert result.unwrap() is None
        session.on_status.assert_called_with("Nothing to undo")

    def test_nothing_to_redo(self, session):
        session.redo()

        session.on_status.assert_called_with("Nothing to redo")

    def test_undo_does_not_change_mode(self, session):
        select_maria(session)

        session.undo()

        assert session.mode is Mode.RECORDING_GRADE


class TestSessionOverWorkbook:
    """Write failures against a real workbook."""

    def test_failed_save_then_retry_and_undo(self, tmp_path, class_table, greek_numbers):
        # Arrange
        path = tmp_path / "class.xlsx"
        wb = Workbook()
        for row in class_table.rows():
            wb.active.append(row)
        wb.active.cell(row=3, column=GRADE_COLUMN + 1).value = 5
        wb.save(path)

        table = ExcelTable(path)
        app_config, _ = ConfigLoader().load(["--language", "el"])
        editor = TableEditor(table)
        session = GradingSession(
            ResolveEntryUseCase(EntryResolver(ConfigManager(app_config)), table),
            RecordGradeUseCase(GradeExtractor(greek_numbers), editor, GRADE_COLUMN),
            messages=Messages("en"),
        )
        select_maria(session)

        # Act: the file is locked during the first attempt
        with patch("core.error_handler.time.sleep"):
            with patch.object(table.workbook, "save", side_effect=PermissionError("locked")):
                failed = session.handle_transcript("9")

        # Assert
        assert isinstance(failed.error, PersistWriteFailure)
        assert table.get_cell(2, GRADE_COLUMN) == "5"

        # Act
        retried = session.retry_write()

        # Assert
        assert retried.is_success()
        assert retried.unwrap().previous_value == "5"
        assert load_workbook(path).active.cell(row=3, column=GRADE_COLUMN + 1).value == 9

        # Act
        session.undo()

        # Assert
        assert table.get_cell(2, GRADE_COLUMN) == "5"
        assert load_workbook(path).active.cell(row=3, column=GRADE_COLUMN + 1).value == 5
