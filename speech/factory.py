"""Registry of transcription engines."""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from core.exceptions import ConfigurationError

from .base_transcriber import BaseTranscriber


class TranscriberRegistry:
    """Maps engine names to factories; new engines register without edits here."""

    _factories: Dict[str, Callable[..., BaseTranscriber]] = {}
    _metadata: Dict[str, Dict[str, Any]] = {}

    @classmethod
    def register(
        cls,
        name: str,
        factory: Callable[..., BaseTranscriber],
        description: str = "",
        requires: Optional[list[str]] = None,
    ) -> None:
        cls._factories[name.lower()] = factory
        cls._metadata[name.lower()] = {"description": description, "requires": requires or []}

    @classmethod
    def create(cls, name: str, **kwargs) -> BaseTranscriber:
        """Create a transcriber.

        Raises:
            ConfigurationError: If the engine is unknown
        """
        factory = cls._factories.get(name.lower())
        if factory is None:
            raise ConfigurationError(
                f"Unknown transcription engine '{name}'. Available: {', '.join(cls.list_engines())}"
            )
        return factory(**kwargs)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name.lower() in cls._factories

    @classmethod
    def list_engines(cls) -> list[str]:
        return sorted(cls._factories)

    @classmethod
    def get_metadata(cls, name: str) -> Dict[str, Any]:
        return cls._metadata.get(name.lower(), {})


def _create_whisper_cli(**kwargs) -> BaseTranscriber:
    from .whisper_cli import WhisperCliTranscriber

    return WhisperCliTranscriber(
        model_path=kwargs.get("model_path"),
        executable=kwargs.get("executable"),
        language=kwargs.get("language", "el"),
        grammar_path=kwargs.get("grammar_path"),
        grammar_penalty=kwargs.get("grammar_penalty", 100),
    )


def _create_faster_whisper(**kwargs) -> BaseTranscriber:
    from .faster_whisper_transcriber import FasterWhisperTranscriber

    return FasterWhisperTranscriber(
        model_name=kwargs.get("model_path") or "small",
        language=kwargs.get("language", "el"),
    )


TranscriberRegistry.register(
    "whisper_cli", _create_whisper_cli, "whisper.cpp command-line binary", requires=[]
)
TranscriberRegistry.register(
    "faster_whisper", _create_faster_whisper, "faster-whisper (CTranslate2)", requires=["faster-whisper"]
)


def create_transcriber(engine: str, **kwargs) -> BaseTranscriber:
    return TranscriberRegistry.create(engine, **kwargs)
