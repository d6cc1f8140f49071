"""Small text helpers shared by the normalizer and the resolvers."""
from __future__ import annotations

import re
import unicodedata

from rapidfuzz.distance import Levenshtein

_NON_DIGIT = re.compile(r"\D+")


def strip_accents(text: str) -> str:
    """Decompose ``text`` and drop combining (non-spacing) marks.

    ``"Παπαδόπουλος"`` and ``"Παπαδοπουλος"`` collapse to the same string.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def fold_case(text: str) -> str:
    """Fold to the single canonical case used for matching (upper)."""
    return text.upper()


def digits_only(text: str) -> str:
    return _NON_DIGIT.sub("", text or "")


def edit_distance(a: str, b: str) -> int:
    """Classic Levenshtein distance over code points (unit costs, no transpositions)."""
    return Levenshtein.distance(a, b)
