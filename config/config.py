"""Layered configuration: defaults, JSON files, environment, command line.

Precedence, lowest to highest:
1. Default values
2. JSON files in the config directory (``numbers.json``, ``settings.json``)
3. Environment variables
4. Command-line arguments

Dictionaries are deep-merged across sources so any source may override a
single nested key.
"""
from __future__ import annotations

import argparse
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from core.exceptions import ConfigurationError

CONFIG_DIR = Path(__file__).resolve().parent
ENGINES = ("whisper_cli", "faster_whisper")
LANGUAGES = ("el", "en")


def column_index(value: Union[str, int]) -> int:
    """Convert a spreadsheet column letter ("A", "H", "AA") or index to a zero-based index."""
    if isinstance(value, int):
        if value < 0:
            raise ConfigurationError(f"Invalid column index: {value}")
        return value
    text = str(value).strip().upper()
    if text.isdigit():
        return int(text)
    if not text or not text.isalpha() or not text.isascii():
        raise ConfigurationError(f"Invalid column: {value!r}")
    index = 0
    for ch in text:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def column_letter(index: int) -> str:
    """Inverse of :func:`column_index` for display."""
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


@dataclass(frozen=True)
class SheetConfig:
    """Spreadsheet layout.

    Attributes:
        path: Workbook to open (.xlsx / .xlsm)
        sheet_name: Worksheet to use, first sheet when None
        id_column: Zero-based column holding student identifiers
        name_column: Zero-based column holding "SURNAME NAME" cells
        grade_column: Zero-based column grades are written to
        start_row: First data row; rows above it are headers
        surname_only: Match names against the first word of the name cell only
        auto_save: Save the workbook after every write
        history_limit: Number of edits kept for undo
    """
    path: Optional[str] = None
    sheet_name: Optional[str] = None
    id_column: int = 0
    name_column: int = 1
    grade_column: int = 7
    start_row: int = 1
    surname_only: bool = False
    auto_save: bool = True
    history_limit: int = 50

    def __post_init__(self):
        for name in ("id_column", "name_column", "grade_column", "start_row"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be >= 0")
        if self.history_limit < 1:
            raise ConfigurationError("history_limit must be >= 1")


@dataclass(frozen=True)
class MatchingConfig:
    """Fuzzy matching thresholds.

    Attributes:
        fuzzy_id_query_factor: Id threshold term scaled by the query length
        fuzzy_id_cell_factor: Id threshold term scaled by the cell length
        name_distance_ratio: Share of the name fragment length allowed as edits
        name_min_distance: Lower clamp of the name edit budget
        name_max_distance: Upper clamp of the name edit budget
    """
    fuzzy_id_query_factor: float = 1.0
    fuzzy_id_cell_factor: float = 0.5
    name_distance_ratio: float = 0.5
    name_min_distance: int = 1
    name_max_distance: int = 6

    def __post_init__(self):
        if self.fuzzy_id_query_factor < 0 or self.fuzzy_id_cell_factor < 0:
            raise ConfigurationError("Fuzzy id factors must be >= 0")
        if self.name_distance_ratio < 0:
            raise ConfigurationError("name_distance_ratio must be >= 0")
        if not 0 <= self.name_min_distance <= self.name_max_distance:
            raise ConfigurationError("Expected 0 <= name_min_distance <= name_max_distance")


@dataclass(frozen=True)
class SpeechConfig:
    """Speech-to-text configuration.

    Attributes:
        engine: "whisper_cli" (whisper.cpp binary) or "faster_whisper"
        language: Transcription language, also selects the number-word table
        model_path: Model file (.bin for whisper.cpp) or model name
        executable: whisper.cpp binary, looked up on PATH when None
        grammar_path: Optional GBNF grammar constraining the output
        grammar_penalty: Grammar penalty passed to whisper.cpp (0-200)
        sample_rate: Recording sample rate in Hz
        max_duration_sec: Longest recording accepted
    """
    engine: str = "whisper_cli"
    language: str = "el"
    model_path: Optional[str] = None
    executable: Optional[str] = None
    grammar_path: Optional[str] = None
    grammar_penalty: int = 100
    sample_rate: int = 16000
    max_duration_sec: int = 60

    def __post_init__(self):
        if self.engine not in ENGINES:
            raise ConfigurationError(f"Invalid engine: {self.engine}")
        if not 0 <= self.grammar_penalty <= 200:
            raise ConfigurationError(f"grammar_penalty out of range: {self.grammar_penalty}")
        if self.sample_rate <= 0 or self.max_duration_sec <= 0:
            raise ConfigurationError("sample_rate and max_duration_sec must be positive")


@dataclass(frozen=True)
class AudioConfig:
    """Recording storage.

    Attributes:
        recordings_dir: Directory recordings are written to before transcription
        save_recordings: Keep every recording instead of overwriting one file
    """
    recordings_dir: str = "audio/recordings"
    save_recordings: bool = False


@dataclass(frozen=True)
class UIConfig:
    """Front-end settings.

    Attributes:
        language: Language of status messages ("el" or "en")
    """
    language: str = "el"

    def __post_init__(self):
        if self.language not in LANGUAGES:
            raise ConfigurationError(f"Invalid UI language: {self.language}")


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    sheet: SheetConfig
    matching: MatchingConfig
    speech: SpeechConfig
    audio: AudioConfig
    ui: UIConfig

    numbers_data: Dict[str, Any] = field(default_factory=dict)

    session_log_dir: str = "logs/sessions"
    debug: bool = False
    log_level: str = "INFO"


class ConfigLoader:
    """Loads and validates the application configuration."""

    def __init__(self, config_dir: Path = CONFIG_DIR):
        self.config_dir = Path(config_dir)

    def load(self, argv: List[str]) -> Tuple[AppConfig, List[str]]:
        """Load configuration: defaults → files → env → CLI.

        Returns:
            Tuple of (AppConfig, unknown CLI arguments)
        """
        config_dict = self._get_defaults()
        self._deep_update(config_dict, self._load_json_configs())
        self._deep_update(config_dict, self._load_env_overrides())
        cli_overrides, unknown_args = self._parse_cli_args(argv)
        self._deep_update(config_dict, cli_overrides)
        return self._build_config(config_dict), unknown_args

    def _get_defaults(self) -> Dict[str, Any]:
        return {
            "sheet": {
                "path": None,
                "id_column": 0,
                "name_column": 1,
                "grade_column": 7,
                "start_row": 1,
                "surname_only": False,
                "auto_save": True,
                "history_limit": 50,
            },
            "matching": {
                "fuzzy_id_query_factor": 1.0,
                "fuzzy_id_cell_factor": 0.5,
                "name_distance_ratio": 0.5,
                "name_min_distance": 1,
                "name_max_distance": 6,
            },
            "speech": {
                "engine": "whisper_cli",
                "language": "el",
                "grammar_penalty": 100,
                "sample_rate": 16000,
                "max_duration_sec": 60,
            },
            "audio": {
                "recordings_dir": "audio/recordings",
                "save_recordings": False,
            },
            "ui": {"language": "el"},
            "session_log_dir": "logs/sessions",
            "debug": False,
            "log_level": "INFO",
        }

    def _load_json_configs(self) -> Dict[str, Any]:
        """Load ``numbers.json`` into ``numbers_data`` and merge ``settings.json`` at the root."""
        loaded: Dict[str, Any] = {"numbers_data": self._read_json("numbers.json")}
        settings = self._read_json("settings.json")
        if settings:
            self._deep_update(loaded, settings)
        return loaded

    def _read_json(self, filename: str) -> Dict[str, Any]:
        file_path = self.config_dir / filename
        if not file_path.exists():
            return {}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load {filename}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {filename}: top level is not an object")
            return {}
        return data

    def _load_env_overrides(self) -> Dict[str, Any]:
        """Environment overrides.

        Supported variables: SPEAK2SHEET_SHEET, SPEECH_ENGINE, SPEECH_LANGUAGE,
        SPEECH_MODEL_PATH, WHISPER_EXECUTABLE, UI_LANGUAGE, DEBUG, LOG_LEVEL.
        """
        overrides: Dict[str, Any] = {}

        sheet_path = os.getenv("SPEAK2SHEET_SHEET")
        if sheet_path:
            overrides.setdefault("sheet", {})["path"] = sheet_path

        for env_name, key in (
            ("SPEECH_ENGINE", "engine"),
            ("SPEECH_LANGUAGE", "language"),
            ("SPEECH_MODEL_PATH", "model_path"),
            ("WHISPER_EXECUTABLE", "executable"),
        ):
            value = os.getenv(env_name)
            if value:
                overrides.setdefault("speech", {})[key] = value

        ui_language = os.getenv("UI_LANGUAGE")
        if ui_language:
            overrides.setdefault("ui", {})["language"] = ui_language

        if self._env_bool("DEBUG"):
            overrides["debug"] = True

        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            overrides["log_level"] = log_level.upper()

        return overrides

    def _parse_cli_args(self, argv: List[str]) -> Tuple[Dict[str, Any], List[str]]:
        parser = argparse.ArgumentParser(description="Voice-driven spreadsheet grading")
        parser.add_argument("--sheet", help="Workbook to grade (.xlsx)")
        parser.add_argument("--worksheet", help="Worksheet name (default: first sheet)")
        parser.add_argument("--id-column", help="Id column, letter or zero-based index")
        parser.add_argument("--name-column", help="Name column, letter or zero-based index")
        parser.add_argument("--grade-column", help="Grade column, letter or zero-based index")
        parser.add_argument("--start-row", type=int, help="First data row (zero-based)")
        parser.add_argument("--surname-only", action="store_true", help="Match names on surname only")
        parser.add_argument("--engine", choices=list(ENGINES), help="Transcription engine")
        parser.add_argument("--model", help="Model path or name")
        parser.add_argument("--language", help="Transcription language")
        parser.add_argument("--grammar", help="GBNF grammar file for whisper.cpp")
        parser.add_argument("--ui-language", choices=list(LANGUAGES), help="Status message language")
        parser.add_argument("--save-audio", action="store_true", help="Keep every recording")
        parser.add_argument("--debug", action="store_true", help="Enable debug mode")
        parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")

        known, unknown = parser.parse_known_args(argv)

        overrides: Dict[str, Any] = {}
        sheet: Dict[str, Any] = {}
        if known.sheet:
            sheet["path"] = known.sheet
        if known.worksheet:
            sheet["sheet_name"] = known.worksheet
        if known.id_column is not None:
            sheet["id_column"] = known.id_column
        if known.name_column is not None:
            sheet["name_column"] = known.name_column
        if known.grade_column is not None:
            sheet["grade_column"] = known.grade_column
        if known.start_row is not None:
            sheet["start_row"] = known.start_row
        if known.surname_only:
            sheet["surname_only"] = True
        if sheet:
            overrides["sheet"] = sheet

        speech: Dict[str, Any] = {}
        if known.engine:
            speech["engine"] = known.engine
        if known.model:
            speech["model_path"] = known.model
        if known.language:
            speech["language"] = known.language
        if known.grammar:
            speech["grammar_path"] = known.grammar
        if speech:
            overrides["speech"] = speech

        if known.ui_language:
            overrides["ui"] = {"language": known.ui_language}
        if known.save_audio:
            overrides["audio"] = {"save_recordings": True}
        if known.debug:
            overrides["debug"] = True
        if known.log_level:
            overrides["log_level"] = known.log_level

        return overrides, unknown

    def _build_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build the validated AppConfig, converting column letters to indices.

        Raises:
            ConfigurationError: If any section is invalid
        """
        sheet_dict = dict(config_dict.get("sheet", {}))
        for key in ("id_column", "name_column", "grade_column"):
            if key in sheet_dict:
                sheet_dict[key] = column_index(sheet_dict[key])

        try:
            return AppConfig(
                sheet=SheetConfig(**sheet_dict),
                matching=MatchingConfig(**config_dict.get("matching", {})),
                speech=SpeechConfig(**config_dict.get("speech", {})),
                audio=AudioConfig(**config_dict.get("audio", {})),
                ui=UIConfig(**config_dict.get("ui", {})),
                numbers_data=config_dict.get("numbers_data", {}),
                session_log_dir=config_dict.get("session_log_dir", "logs/sessions"),
                debug=config_dict.get("debug", False),
                log_level=config_dict.get("log_level", "INFO"),
            )
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

    @staticmethod
    def _env_bool(name: str, default: bool = False) -> bool:
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "y", "on"}

    @staticmethod
    def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Recursively merge ``updates`` into ``target`` without clobbering nested dicts."""
        for key, new_val in updates.items():
            if isinstance(new_val, dict) and isinstance(target.get(key), dict):
                ConfigLoader._deep_update(target[key], new_val)
            else:
                target[key] = new_val


__all__ = [
    "AppConfig",
    "SheetConfig",
    "MatchingConfig",
    "SpeechConfig",
    "AudioConfig",
    "UIConfig",
    "ConfigLoader",
    "column_index",
    "column_letter",
]
