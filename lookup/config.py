"""Lookup configuration drawn from the centralized application config."""
from __future__ import annotations

from typing import Optional

from .number_words import NumberWordTable


class ConfigManager:
    """Exposes the matching settings and the number-word table of an AppConfig."""

    def __init__(self, app_config=None, language: Optional[str] = None):
        if app_config is None:
            from config.config import ConfigLoader
            loader = ConfigLoader()
            app_config, _ = loader.load([])

        self.app_config = app_config
        self.sheet = app_config.sheet
        self.matching = app_config.matching
        self.language = language or app_config.speech.language
        self._number_words: Optional[NumberWordTable] = None

    @property
    def number_words(self) -> NumberWordTable:
        """Number-word table for the configured speech language (built once)."""
        if self._number_words is None:
            self._number_words = NumberWordTable.from_config(
                self.app_config.numbers_data, self.language
            )
        return self._number_words
