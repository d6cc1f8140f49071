"""Application wiring and lifecycle."""
from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional

from loguru import logger

from app.console import ConsoleFrontEnd
from app.messages import Messages
from app.services import (
    AudioCleanupService,
    CleanupService,
    ExceptionHandlerService,
    SignalHandlerService,
)
from app.session import GradingSession
from app.use_cases import (
    RecordGradeUseCase,
    RedoGradeUseCase,
    ResolveEntryUseCase,
    UndoLastGradeUseCase,
)
from config.service import ConfigurationService
from core.exceptions import ConfigurationError
from logger.session_logger import SessionLogger
from lookup.config import ConfigManager
from lookup.entry_resolver import EntryResolver
from lookup.grade_extractor import GradeExtractor
from sheet.editor import TableEditor
from sheet.table import RowTable, validate_layout

if TYPE_CHECKING:
    from speech import BaseTranscriber


def entry_label(table: RowTable, row: int, id_column: int, name_column: int) -> str:
    """Display text for a row: "<id> - <name>", or the row number when both are blank."""
    parts = [table.get_cell(row, id_column).strip(), table.get_cell(row, name_column).strip()]
    parts = [part for part in parts if part]
    return " - ".join(parts) if parts else f"#{row + 1}"


class Application:
    """Builds the grading session from configuration and owns its lifecycle.

    Attributes:
        config: Configuration facade
        table: The spreadsheet being graded
        editor: Single writer of ``table`` with undo/redo history
        session: Grading state machine
        transcriber: Speech-to-text engine, None for typed input only
        session_logger: Per-session log file
        cleanup_service: Shutdown handlers, run once
    """

    def __init__(
        self,
        config: ConfigurationService,
        table: Optional[RowTable] = None,
        transcriber: Optional[BaseTranscriber] = None,
        session_logger: Optional[SessionLogger] = None,
    ):
        self.config = config
        self.session_logger = session_logger or SessionLogger(config.session_log_dir, config.log_level)
        self.table = table if table is not None else self._open_table()
        validate_layout(self.table, config.id_column, config.name_column)
        self.transcriber = transcriber
        self.recorder = None
        self.worker = None

        lookup_config = ConfigManager(config.raw_config)
        self.editor = TableEditor(self.table, history_limit=config.history_limit)
        record_grade = RecordGradeUseCase(
            GradeExtractor(lookup_config.number_words), self.editor, config.grade_column
        )
        self.session = GradingSession(
            ResolveEntryUseCase(EntryResolver(lookup_config), self.table),
            record_grade,
            UndoLastGradeUseCase(self.editor),
            RedoGradeUseCase(self.editor),
            messages=Messages(config.ui_language),
            describe_entry=lambda row: entry_label(
                self.table, row, config.id_column, config.name_column
            ),
        )
        self.session.on_grade_written = lambda entry: self.session_logger.log_kv(
            "GRADE", {"row": entry.row + 1, "grade": entry.grade, "previous": entry.previous_value}
        )

        self.cleanup_service = CleanupService()
        self.exception_handler = ExceptionHandlerService(self.session_logger)
        self.signal_handler = SignalHandlerService(
            cleanup_callback=self.cleanup, quit_callback=lambda: sys.exit(0)
        )
        self.exception_handler.install()
        self.cleanup_service.install_atexit()

        self.cleanup_service.register(self._stop_audio, "audio")
        self.cleanup_service.register(self._persist_on_exit, "table")
        self.cleanup_service.register(self.session_logger.log_end, "session_logger")

    def _open_table(self) -> RowTable:
        from sheet.excel_table import ExcelTable

        if not self.config.sheet_path:
            raise ConfigurationError(
                "No spreadsheet given; pass --sheet or set SPEAK2SHEET_SHEET"
            )
        return ExcelTable(self.config.sheet_path, self.config.sheet_name, self.config.auto_save)

    def log_session_info(self) -> None:
        self.session_logger.log_kv(
            "APP",
            {
                "python": sys.version.split(" ")[0],
                "rows": self.table.row_count,
                "columns": self.table.column_count,
            },
        )
        self.session_logger.log_kv("CONFIG", self.config.to_dict())
        if self.transcriber is not None:
            self.session_logger.log_kv("TRANSCRIBER", self.transcriber.get_config())

    def create_front_end(self, **kwargs) -> ConsoleFrontEnd:
        """Create the console front-end, with voice input when a transcriber is set."""
        recorder = worker = saver = None
        if self.transcriber is not None:
            from services.audio_saver import AudioSaver
            from speech.recorder import MicrophoneRecorder
            from speech.worker import TranscriptionWorker

            recorder = MicrophoneRecorder(self.config.sample_rate, self.config.max_duration_sec)
            worker = TranscriptionWorker(
                self.transcriber,
                on_text=self.session.handle_transcript,
                on_error=self.session.handle_transcription_error,
            )
            saver = AudioSaver(self.config.recordings_dir, keep_all=self.config.save_recordings)
            self.recorder, self.worker = recorder, worker
        else:
            logger.info("No transcriber available, typed input only")

        return ConsoleFrontEnd(self.session, recorder, worker, saver, **kwargs)

    def cleanup(self) -> None:
        self.cleanup_service.cleanup()

    def _stop_audio(self) -> None:
        AudioCleanupService(self.recorder, self.worker).cleanup()

    def _persist_on_exit(self) -> None:
        if not self.config.auto_save:
            self.table.persist()
            logger.info("Spreadsheet saved on exit")
