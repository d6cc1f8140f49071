"""Custom exception hierarchy for the application."""
from __future__ import annotations


class GradingException(Exception):
    """Base exception for all voice grading errors."""
    pass


class NoCandidatesFound(GradingException):
    """Raised when an identifier or name lookup matched no rows."""

    def __init__(self, query: str = "") -> None:
        super().__init__(f"No entries found for '{query}'")
        self.query = query


class GradeParseFailure(GradingException):
    """Raised when no grade could be extracted from a transcript."""

    def __init__(self, transcript: str = "") -> None:
        super().__init__(f"Could not parse grade from '{transcript}'")
        self.transcript = transcript


class InvalidSelection(GradingException):
    """Raised when a selection does not refer to a presented candidate."""
    pass


class TranscriptionFailure(GradingException):
    """Raised when speech-to-text fails."""
    pass


class TranscriptionCancelled(TranscriptionFailure):
    """Raised when an in-flight transcription was cancelled."""
    pass


class RecorderError(GradingException):
    """Raised when audio capture fails or records nothing."""
    pass


class PersistWriteFailure(GradingException):
    """Raised when a cell write or a workbook save fails."""
    pass


class TableLoadError(GradingException):
    """Raised when a spreadsheet cannot be opened."""
    pass


class TableStructureError(GradingException):
    """Raised when a table violates the row/column contract."""
    pass


class ConfigurationError(GradingException):
    """Raised when configuration is invalid or missing."""
    pass
