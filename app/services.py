"""Process-level services: uncaught exceptions, signals and shutdown cleanup."""
from __future__ import annotations

import atexit
import signal
import sys
import threading
import traceback
from typing import Callable, List, Optional, Tuple

from loguru import logger

from core.error_handler import handle_exceptions
from core.exceptions import RecorderError


class ExceptionHandlerService:
    """Routes uncaught exceptions (main and worker threads) to the logs.

    The previous hooks are still called afterwards, so the interpreter keeps
    its normal termination behavior.
    """

    def __init__(self, session_logger=None):
        self.session_logger = session_logger
        self._original_excepthook = sys.excepthook
        self._original_thread_excepthook = threading.excepthook

    def _log(self, exc_type, exc_value, exc_traceback) -> None:
        tb = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
        logger.error("Uncaught exception:\n{}", tb)

    def install(self) -> None:
        def excepthook(exc_type, exc_value, exc_traceback):
            try:
                self._log(exc_type, exc_value, exc_traceback)
            finally:
                self._original_excepthook(exc_type, exc_value, exc_traceback)

        def thread_excepthook(args: threading.ExceptHookArgs) -> None:
            try:
                self._log(args.exc_type, args.exc_value, args.exc_traceback)
            finally:
                self._original_thread_excepthook(args)

        sys.excepthook = excepthook
        threading.excepthook = thread_excepthook

    def uninstall(self) -> None:
        sys.excepthook = self._original_excepthook
        threading.excepthook = self._original_thread_excepthook


class SignalHandlerService:
    """Runs cleanup, then the quit callback, on termination signals."""

    SIGNALS = ("SIGINT", "SIGTERM", "SIGHUP", "SIGQUIT")

    def __init__(
        self,
        cleanup_callback: Optional[Callable[[], None]] = None,
        quit_callback: Optional[Callable[[], None]] = None,
    ):
        self.cleanup_callback = cleanup_callback
        self.quit_callback = quit_callback

    def _handle(self, signum, frame) -> None:
        logger.info(f"Received signal {signum}, shutting down")
        try:
            if self.cleanup_callback:
                self.cleanup_callback()
        finally:
            if self.quit_callback:
                self.quit_callback()

    def install(self) -> None:
        """Register the handler for each signal this platform provides."""
        for sig_name in self.SIGNALS:
            sig = getattr(signal, sig_name, None)
            if sig is None:
                continue
            try:
                signal.signal(sig, self._handle)
            except (OSError, ValueError) as e:
                # Only the main thread may install handlers
                logger.debug(f"Could not install handler for {sig_name}: {e}")


class CleanupService:
    """Ordered, run-once registry of shutdown handlers."""

    def __init__(self):
        self._cleanup_handlers: List[Tuple[Callable[[], None], str]] = []
        self._cleaned_up = False

    def register(self, handler: Callable[[], None], name: str = "") -> None:
        self._cleanup_handlers.append((handler, name))

    @handle_exceptions(message="Cleanup failed")
    def cleanup(self) -> None:
        """Run every handler in registration order.

        A failing handler is logged and does not stop the ones after it.
        Calling this more than once has no further effect.
        """
        if self._cleaned_up:
            return
        self._cleaned_up = True
        logger.info("Starting cleanup...")

        for handler, name in self._cleanup_handlers:
            label = name or getattr(handler, "__name__", repr(handler))
            try:
                logger.debug(f"Cleaning up: {label}")
                handler()
            except Exception as e:
                logger.warning(f"Cleanup handler {label} failed: {e}")

        logger.info("Cleanup completed")

    def install_atexit(self) -> None:
        atexit.register(self.cleanup)


class AudioCleanupService:
    """Stops an active recording and the transcription worker."""

    def __init__(self, recorder=None, worker=None):
        self.recorder = recorder
        self.worker = worker

    def cleanup(self) -> None:
        if self.recorder is not None and self.recorder.is_recording:
            try:
                self.recorder.stop()
            except RecorderError as e:
                logger.debug(f"Recorder stop during cleanup: {e}")
        if self.worker is not None:
            self.worker.shutdown()
