"""Localized status messages shown to the user."""
from __future__ import annotations

from typing import Dict

DEFAULT_LANGUAGE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "ready": "Say a student ID or name",
        "listening": "Listening...",
        "transcribing": "Transcribing...",
        "no_results": "No results found for '{query}'",
        "nothing_heard": "Nothing recognizable was heard",
        "candidates": "{count} match(es) found, pick one with #<number>",
        "selected": "Selected {entry}. Say the grade",
        "invalid_selection": "That entry is not among the current results",
        "grade_parse_failed": "Could not parse a grade from '{text}', try again",
        "grade_written": "Grade {grade} written for {entry}",
        "write_failed": "Could not save the grade: {error}",
        "nothing_to_retry": "There is no failed write to retry",
        "transcription_failed": "Transcription failed: {error}",
        "recording_failed": "Recording failed: {error}",
        "aborted": "Selection cleared",
        "undone": "Undone: row {row} restored to '{value}'",
        "redone": "Redone: row {row} set to '{value}'",
        "nothing_to_undo": "Nothing to undo",
        "nothing_to_redo": "Nothing to redo",
        "unexpected_error": "Unexpected error: {error}",
        "saved": "Spreadsheet saved",
    },
    "el": {
        "ready": "Πείτε αριθμό μητρώου ή όνομα",
        "listening": "Ακρόαση...",
        "transcribing": "Μεταγραφή...",
        "no_results": "Δεν βρέθηκαν αποτελέσματα για '{query}'",
        "nothing_heard": "Δεν αναγνωρίστηκε τίποτα",
        "candidates": "Βρέθηκαν {count} αποτελέσματα, επιλέξτε ένα με #<αριθμό>",
        "selected": "Επιλέχθηκε {entry}. Πείτε τον βαθμό",
        "invalid_selection": "Η εγγραφή δεν ανήκει στα τρέχοντα αποτελέσματα",
        "grade_parse_failed": "Δεν αναγνωρίστηκε βαθμός στο '{text}', δοκιμάστε ξανά",
        "grade_written": "Ο βαθμός {grade} καταχωρήθηκε για {entry}",
        "write_failed": "Αποτυχία αποθήκευσης βαθμού: {error}",
        "nothing_to_retry": "Δεν υπάρχει αποτυχημένη εγγραφή για επανάληψη",
        "transcription_failed": "Αποτυχία μεταγραφής: {error}",
        "recording_failed": "Αποτυχία ηχογράφησης: {error}",
        "aborted": "Η επιλογή ακυρώθηκε",
        "undone": "Αναίρεση: η γραμμή {row} επανήλθε σε '{value}'",
        "redone": "Επανάληψη: η γραμμή {row} ορίστηκε σε '{value}'",
        "nothing_to_undo": "Δεν υπάρχει κάτι για αναίρεση",
        "nothing_to_redo": "Δεν υπάρχει κάτι για επανάληψη",
        "unexpected_error": "Απρόσμενο σφάλμα: {error}",
        "saved": "Το αρχείο αποθηκεύτηκε",
    },
}


class Messages:
    """Message catalog for one UI language.

    Unknown languages use English; keys missing from a language fall back to
    the English text, and unknown keys are returned as-is.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = language if language in MESSAGES else DEFAULT_LANGUAGE

    def get(self, key: str, **kwargs) -> str:
        template = MESSAGES[self.language].get(key) or MESSAGES[DEFAULT_LANGUAGE].get(key, key)
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError):
            return template
