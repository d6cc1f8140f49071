"""Microphone capture with sounddevice."""
from __future__ import annotations

from threading import Lock
from typing import Any, List, Optional

import numpy as np
from loguru import logger

from core.exceptions import RecorderError


def to_mono(samples: np.ndarray) -> np.ndarray:
    """Average channels of a (frames, channels) buffer into one float32 channel."""
    if samples.ndim == 1:
        return samples.astype(np.float32, copy=False)
    return samples.mean(axis=1).astype(np.float32)


class MicrophoneRecorder:
    """Start/stop recorder returning mono float32 samples in [-1, 1].

    Capture ends once ``max_duration_sec`` worth of frames has been
    received: the stream callback stops the stream, and ``stop`` still
    returns what was recorded.
    """

    def __init__(self, sample_rate: int = 16000, max_duration_sec: int = 60, channels: int = 1) -> None:
        self.sample_rate = sample_rate
        self.max_duration_sec = max_duration_sec
        self.channels = channels
        self._stream: Optional[Any] = None
        self._chunks: List[np.ndarray] = []
        self._frames = 0
        self._lock = Lock()
        self._stop_signal: Optional[type] = None

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    def _callback(self, indata, frames, time_info, status) -> None:
        if status:
            logger.debug(f"[mic] {status}")
        with self._lock:
            remaining = self.sample_rate * self.max_duration_sec - self._frames
            if remaining > 0:
                chunk = indata[:remaining].copy()
                self._chunks.append(chunk)
                self._frames += len(chunk)
                remaining -= len(chunk)
        if remaining <= 0 and self._stop_signal is not None:
            logger.info(f"[mic] reached {self.max_duration_sec}s limit")
            raise self._stop_signal

    def start(self) -> None:
        import sounddevice as sd  # type: ignore

        if self._stream is not None:
            return
        try:
            sd.query_devices(kind="input")
        except Exception as e:
            raise RecorderError(f"No microphone detected: {e}") from e

        with self._lock:
            self._chunks = []
            self._frames = 0
        self._stop_signal = sd.CallbackStop
        try:
            self._stream = sd.InputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="float32",
                callback=self._callback,
            )
            self._stream.start()
        except Exception as e:
            self._stream = None
            raise RecorderError(f"Failed to open microphone: {e}") from e
        logger.info("[mic] recording started")

    def stop(self) -> np.ndarray:
        """Stop capturing and return the recorded samples.

        Raises:
            RecorderError: If nothing was recorded
        """
        if self._stream is None:
            raise RecorderError("Recorder is not running")
        try:
            self._stream.stop()
            self._stream.close()
        finally:
            self._stream = None

        with self._lock:
            chunks, self._chunks = self._chunks, []
        if not chunks:
            raise RecorderError("No audio was recorded")
        samples = to_mono(np.concatenate(chunks, axis=0))
        logger.info(f"[mic] recorded {len(samples) / self.sample_rate:.2f}s")
        return samples
