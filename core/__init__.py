"""Core infrastructure shared by every layer of the application."""
from __future__ import annotations

from .exceptions import (
    GradingException,
    NoCandidatesFound,
    GradeParseFailure,
    InvalidSelection,
    TranscriptionFailure,
    TranscriptionCancelled,
    RecorderError,
    PersistWriteFailure,
    TableLoadError,
    TableStructureError,
    ConfigurationError,
)
from .result import Result, Success, Failure

__all__ = [
    "GradingException",
    "NoCandidatesFound",
    "GradeParseFailure",
    "InvalidSelection",
    "TranscriptionFailure",
    "TranscriptionCancelled",
    "RecorderError",
    "PersistWriteFailure",
    "TableLoadError",
    "TableStructureError",
    "ConfigurationError",
    "Result",
    "Success",
    "Failure",
]
