"""faster-whisper transcriber (CTranslate2 Whisper models)."""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from core.exceptions import TranscriptionCancelled, TranscriptionFailure

from .base_transcriber import BaseTranscriber

GRADING_PROMPT = (
    "Ο χρήστης λέει αριθμό μητρώου ή ονοματεπώνυμο φοιτητή, ή έναν βαθμό, "
    "π.χ. 1234, Παπαδόπουλος, επτά κόμμα πέντε."
)


class FasterWhisperTranscriber(BaseTranscriber):
    """Whisper via faster-whisper; the model loads on first use."""

    def __init__(
        self,
        model_name: str = "small",
        language: str = "el",
        device: str = "cpu",
        compute_type: str = "int8",
        initial_prompt: Optional[str] = GRADING_PROMPT,
    ) -> None:
        super().__init__(language)
        self.model_name = model_name
        self.device = device
        self.compute_type = compute_type
        self.initial_prompt = initial_prompt
        self._model: Optional[Any] = None  # faster_whisper.WhisperModel at runtime

    def _ensure_model(self) -> Any:
        if self._model is None:
            from faster_whisper import WhisperModel  # type: ignore

            logger.info(f"Loading faster-whisper model '{self.model_name}' on {self.device}")
            self._model = WhisperModel(self.model_name, device=self.device, compute_type=self.compute_type)
        return self._model

    def transcribe(self, wav_path: Union[str, Path], cancel_event: Optional[threading.Event] = None) -> str:
        try:
            model = self._ensure_model()
            segments, _info = model.transcribe(
                str(wav_path),
                language=self.language,
                beam_size=3,
                temperature=0.0,
                initial_prompt=self.initial_prompt,
                condition_on_previous_text=False,
                without_timestamps=True,
            )
            parts = []
            # segments is lazy; decoding happens while iterating
            for segment in segments:
                if cancel_event is not None and cancel_event.is_set():
                    raise TranscriptionCancelled("Transcription cancelled")
                parts.append(segment.text.strip())
        except TranscriptionCancelled:
            raise
        except Exception as e:
            raise TranscriptionFailure(f"faster-whisper failed: {e}") from e

        text = " ".join(part for part in parts if part)
        logger.info(f"[faster-whisper] {text}")
        return text

    def get_config(self) -> Dict[str, Any]:
        config = super().get_config()
        config.update({"model": self.model_name, "device": self.device, "compute_type": self.compute_type})
        return config
