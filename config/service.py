"""Configuration service facade for flat access to nested settings."""
from __future__ import annotations

from typing import Any

from config.config import AppConfig, ConfigLoader, column_letter


class ConfigurationService:
    """Facade over AppConfig.

    Example:
        config_service = ConfigurationService(config)
        column = config_service.grade_column  # instead of config.sheet.grade_column
    """

    def __init__(self, config: AppConfig):
        self._config = config

    # Sheet layout
    @property
    def sheet_path(self) -> str | None:
        return self._config.sheet.path

    @property
    def sheet_name(self) -> str | None:
        return self._config.sheet.sheet_name

    @property
    def id_column(self) -> int:
        return self._config.sheet.id_column

    @property
    def name_column(self) -> int:
        return self._config.sheet.name_column

    @property
    def grade_column(self) -> int:
        return self._config.sheet.grade_column

    @property
    def start_row(self) -> int:
        return self._config.sheet.start_row

    @property
    def auto_save(self) -> bool:
        return self._config.sheet.auto_save

    @property
    def history_limit(self) -> int:
        return self._config.sheet.history_limit

    # Speech
    @property
    def engine(self) -> str:
        return self._config.speech.engine

    @property
    def language(self) -> str:
        return self._config.speech.language

    @property
    def model_path(self) -> str | None:
        return self._config.speech.model_path

    @property
    def executable(self) -> str | None:
        return self._config.speech.executable

    @property
    def grammar_path(self) -> str | None:
        return self._config.speech.grammar_path

    @property
    def grammar_penalty(self) -> int:
        return self._config.speech.grammar_penalty

    @property
    def sample_rate(self) -> int:
        return self._config.speech.sample_rate

    @property
    def max_duration_sec(self) -> int:
        return self._config.speech.max_duration_sec

    # Audio
    @property
    def recordings_dir(self) -> str:
        return self._config.audio.recordings_dir

    @property
    def save_recordings(self) -> bool:
        return self._config.audio.save_recordings

    # UI / general
    @property
    def ui_language(self) -> str:
        return self._config.ui.language

    @property
    def session_log_dir(self) -> str:
        return self._config.session_log_dir

    @property
    def debug(self) -> bool:
        return self._config.debug

    @property
    def log_level(self) -> str:
        return "DEBUG" if self._config.debug else self._config.log_level

    @property
    def raw_config(self) -> AppConfig:
        return self._config

    def to_dict(self) -> dict[str, Any]:
        """Serializable summary, logged at session start."""
        return {
            "sheet": {
                "path": self.sheet_path,
                "worksheet": self.sheet_name,
                "id_column": column_letter(self.id_column),
                "name_column": column_letter(self.name_column),
                "grade_column": column_letter(self.grade_column),
                "start_row": self.start_row,
                "surname_only": self._config.sheet.surname_only,
                "auto_save": self.auto_save,
            },
            "speech": {
                "engine": self.engine,
                "language": self.language,
                "model_path": self.model_path,
            },
            "audio": {
                "recordings_dir": self.recordings_dir,
                "save_recordings": self.save_recordings,
            },
            "ui_language": self.ui_language,
            "debug": self.debug,
            "log_level": self.log_level,
        }


class ConfigurationServiceFactory:
    """Creation helpers for ConfigurationService."""

    @staticmethod
    def create_from_args(args: list[str]) -> tuple[ConfigurationService, list[str]]:
        config, unknown_args = ConfigLoader().load(args)
        return ConfigurationService(config), unknown_args

    @staticmethod
    def create_from_config(config: AppConfig) -> ConfigurationService:
        return ConfigurationService(config)

    @staticmethod
    def create_default() -> ConfigurationService:
        config, _ = ConfigLoader().load([])
        return ConfigurationService(config)
