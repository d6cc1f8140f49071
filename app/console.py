"""Terminal front-end driving a GradingSession.

Typed lines are treated like transcripts, so the whole workflow can be used
without a microphone. With a recorder attached, ``r`` records a spoken
transcript instead.

Commands:
    r          start recording (Enter stops it)
    #<number>  pick a candidate from the last result list
    u / y      undo / redo the last grade
    w          retry a failed write
    a          abort the current selection
    q          quit
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional

from loguru import logger

from core.exceptions import RecorderError

from .session import GradingSession, Mode

if TYPE_CHECKING:
    from services.audio_saver import AudioSaver
    from speech.recorder import MicrophoneRecorder
    from speech.worker import TranscriptionWorker


class ConsoleFrontEnd:
    """Reads commands from a line source and renders session callbacks."""

    PROMPTS = {
        Mode.SELECTING_ENTRY: "id/name> ",
        Mode.RECORDING_GRADE: "grade> ",
    }

    def __init__(
        self,
        session: GradingSession,
        recorder: Optional["MicrophoneRecorder"] = None,
        worker: Optional["TranscriptionWorker"] = None,
        audio_saver: Optional["AudioSaver"] = None,
        auto_record: bool = True,
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ) -> None:
        self.session = session
        self.recorder = recorder
        self.worker = worker
        self.audio_saver = audio_saver
        self.auto_record = auto_record and self.can_record
        self.input_fn = input_fn
        self.output = output
        self._shown_candidates: List[int] = []

        session.on_candidates = self.show_candidates
        session.on_status = self.show_status
        session.on_error = self.show_error
        session.on_recording_requested = self._on_recording_requested

    @property
    def can_record(self) -> bool:
        return None not in (self.recorder, self.worker, self.audio_saver)

    @property
    def is_recording(self) -> bool:
        return self.recorder is not None and self.recorder.is_recording

    def show_candidates(self, rows: List[int]) -> None:
        self._shown_candidates = list(rows)
        for number, row in enumerate(rows, start=1):
            self.output(f"  #{number} {self.session.describe_entry(row)}")

    def show_status(self, message: str) -> None:
        self.output(message)

    def show_error(self, message: str) -> None:
        self.output(f"! {message}")

    def run(self) -> None:
        self.show_status(self.session.messages.get("ready"))
        while True:
            prompt = "" if self.is_recording else self.PROMPTS[self.session.mode]
            try:
                line = self.input_fn(prompt)
            except (EOFError, KeyboardInterrupt):
                break
            if not self.handle_line(line):
                break
        if self.is_recording:
            try:
                self.recorder.stop()
            except RecorderError as e:
                logger.debug(f"Discarded recording on exit: {e}")

    def handle_line(self, line: str) -> bool:
        """Handle one input line; returns False when the user quits."""
        if self.is_recording:
            self.stop_recording()
            return True

        command = line.strip()
        if not command:
            return True
        lowered = command.lower()

        if lowered == "q":
            return False
        if lowered == "r":
            self.start_recording()
        elif lowered == "u":
            self.session.undo()
        elif lowered == "y":
            self.session.redo()
        elif lowered == "w":
            self.session.retry_write()
        elif lowered == "a":
            self._shown_candidates = []
            self.session.abort()
        elif command.startswith("#") and command[1:].isdigit():
            self._select_shown(int(command[1:]))
        else:
            self.session.handle_transcript(command)
        return True

    def _select_shown(self, number: int) -> None:
        if self.session.mode is not Mode.SELECTING_ENTRY or not 1 <= number <= len(self._shown_candidates):
            self.show_error(self.session.messages.get("invalid_selection"))
            return
        if self.session.select(self._shown_candidates[number - 1]).is_success():
            self._shown_candidates = []

    def _on_recording_requested(self, row: int) -> None:
        if self.auto_record:
            self.start_recording()

    def start_recording(self) -> None:
        if not self.can_record:
            self.show_error(self.session.messages.get("recording_failed", error="no microphone configured"))
            return
        self.worker.cancel()
        try:
            self.recorder.start()
        except RecorderError as e:
            self.show_error(self.session.messages.get("recording_failed", error=e))
            return
        self.show_status(self.session.messages.get("listening"))

    def stop_recording(self) -> None:
        try:
            samples = self.recorder.stop()
            wav_path = self.audio_saver.save(samples, self.recorder.sample_rate)
        except RecorderError as e:
            logger.warning(f"Recording failed: {e}")
            self.show_error(self.session.messages.get("recording_failed", error=e))
            return
        self.show_status(self.session.messages.get("transcribing"))
        self.worker.submit(wav_path)
