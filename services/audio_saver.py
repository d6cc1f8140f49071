"""Writes recordings to disk as 16-bit PCM WAV before transcription."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np
import soundfile as sf
from loguru import logger

from core.exceptions import RecorderError


class AudioSaver:
    """
    Saves recorded samples for the transcriber.

    With ``keep_all`` disabled every recording overwrites ``recording.wav``;
    enabled, each one gets its own name:

        recording_YYYYMMDD_HHMM_NNNN.wav
    """

    def __init__(self, recordings_dir: str = "audio/recordings", keep_all: bool = False):
        self.recordings_dir = Path(recordings_dir)
        self.keep_all = keep_all
        self._sequence_counter = 0
        self._session_prefix: Optional[str] = None

    def _next_filename(self) -> str:
        if not self.keep_all:
            return "recording.wav"
        if self._session_prefix is None:
            self._session_prefix = datetime.now().strftime("%Y%m%d_%H%M")
        self._sequence_counter += 1
        return f"recording_{self._session_prefix}_{self._sequence_counter:04d}.wav"

    def save(self, samples: np.ndarray, sample_rate: int, filename: Optional[str] = None) -> Path:
        """Write ``samples`` (float in [-1, 1] or int16) and return the file path.

        Raises:
            RecorderError: If there is nothing to write or the write fails
        """
        if samples is None or samples.size == 0:
            raise RecorderError("No audio was recorded")

        filename = filename or self._next_filename()
        if not filename.endswith(".wav"):
            filename += ".wav"
        path = self.recordings_dir / filename

        if np.issubdtype(samples.dtype, np.floating):
            samples = np.clip(samples, -1.0, 1.0)
        try:
            self.recordings_dir.mkdir(parents=True, exist_ok=True)
            sf.write(path, samples, sample_rate, subtype="PCM_16")
        except Exception as e:
            raise RecorderError(f"Failed to save recording: {e}") from e

        logger.debug(f"Saved recording: {path}")
        return path
