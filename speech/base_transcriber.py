from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union


class BaseTranscriber(ABC):
    """
    Interface for speech-to-text engines.

    A transcriber turns one WAV file into a best-effort text string. The
    output is untrusted: it may be empty, garbled or partially correct, and
    callers treat it that way.

    Implementations must:
    - raise ``TranscriptionFailure`` when the engine errors
    - raise ``TranscriptionCancelled`` as soon as ``cancel_event`` is set
    - never write to the spreadsheet
    """

    def __init__(self, language: str = "el") -> None:
        self.language = language

    @abstractmethod
    def transcribe(self, wav_path: Union[str, Path], cancel_event: Optional[threading.Event] = None) -> str:
        """Transcribe ``wav_path`` and return the recognized text."""

    def get_config(self) -> Dict[str, Any]:
        """Engine settings, logged at session start."""
        return {"engine": type(self).__name__, "language": self.language}
