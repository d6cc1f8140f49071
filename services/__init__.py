"""Infrastructure services."""
from .audio_saver import AudioSaver

__all__ = ["AudioSaver"]
