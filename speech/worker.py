"""Background transcription with cancel-on-resubmit."""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger

from core.exceptions import TranscriptionCancelled, TranscriptionFailure

from .base_transcriber import BaseTranscriber


class TranscriptionWorker:
    """Runs one transcription at a time on a background thread.

    Submitting a new job cancels the one in flight, whose result is then
    discarded. Completion is reported through ``on_text`` or ``on_error``
    from the worker thread.
    """

    def __init__(
        self,
        transcriber: BaseTranscriber,
        on_text: Callable[[str], None],
        on_error: Optional[Callable[[TranscriptionFailure], None]] = None,
    ) -> None:
        self.transcriber = transcriber
        self.on_text = on_text
        self.on_error = on_error
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="transcriber")
        self._cancel_event: Optional[threading.Event] = None
        self._lock = threading.Lock()

    def submit(self, wav_path: Union[str, Path]) -> Future:
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
            cancel_event = threading.Event()
            self._cancel_event = cancel_event
        return self._executor.submit(self._run, wav_path, cancel_event)

    def cancel(self) -> None:
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()

    def _run(self, wav_path: Union[str, Path], cancel_event: threading.Event) -> None:
        if cancel_event.is_set():
            return
        try:
            text = self.transcriber.transcribe(wav_path, cancel_event)
        except TranscriptionCancelled:
            logger.info("[transcriber] cancelled")
            return
        except TranscriptionFailure as e:
            self._report_error(e)
            return
        except Exception as e:
            self._report_error(TranscriptionFailure(f"Transcription failed: {e}"))
            return

        if cancel_event.is_set():
            logger.debug("[transcriber] discarding result of a cancelled job")
            return
        self.on_text(text)

    def _report_error(self, error: TranscriptionFailure) -> None:
        logger.error(f"[transcriber] {error}")
        if self.on_error:
            self.on_error(error)

    def shutdown(self) -> None:
        self.cancel()
        self._executor.shutdown(wait=True)
