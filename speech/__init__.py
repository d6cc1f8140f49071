"""Speech-to-text adapters.

Engines are imported lazily so that importing the package (and running the
test suite) does not pull in model runtimes or audio drivers.
"""
from .base_transcriber import BaseTranscriber
from .factory import TranscriberRegistry, create_transcriber

__all__ = [
    "BaseTranscriber",
    "TranscriberRegistry",
    "create_transcriber",
]


def __getattr__(name: str):
    if name == "WhisperCliTranscriber":
        from .whisper_cli import WhisperCliTranscriber
        return WhisperCliTranscriber
    if name == "FasterWhisperTranscriber":
        from .faster_whisper_transcriber import FasterWhisperTranscriber
        return FasterWhisperTranscriber
    if name == "MicrophoneRecorder":
        from .recorder import MicrophoneRecorder
        return MicrophoneRecorder
    if name == "TranscriptionWorker":
        from .worker import TranscriptionWorker
        return TranscriptionWorker
    raise AttributeError(f"module 'speech' has no attribute {name!r}")
