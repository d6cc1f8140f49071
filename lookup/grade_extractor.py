"""Extraction of a decimal grade from a spoken transcript."""
from __future__ import annotations

import re
from typing import List, Optional

from loguru import logger

from .number_words import NumberWordTable, SEPARATOR
from .text_normalizer import TextNormalizer
from .text_utils import fold_case, strip_accents


class GradeExtractor:
    """Finds the grade in a transcript using strategies in priority order.

    1. ``digits [.,] digits`` in the raw text ("3.2", "3,2").
    2. Two number words glued by a dot or comma ("τρία,δύο").
    3. ``number SEP number`` over normalized tokens ("τρία κόμμα δύο").
    4. The first token that is a number word or a numeric literal.

    Spoken decimals are tried before the single-token fallback so that
    "three comma two" is not cut down to "three".
    """

    def __init__(self, table: NumberWordTable, normalizer: Optional[TextNormalizer] = None) -> None:
        self.table = table
        self.normalizer = normalizer or TextNormalizer(table)
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        self._digit_decimal_pattern = re.compile(r"(\d+)[.,](\d+)")
        self._word_decimal_pattern = re.compile(r"([^\W\d_]+)\s*[.,]\s*([^\W\d_]+)")
        self._number_literal_pattern = re.compile(r"\d+(?:\.\d+)?")
        self._edge_junk_pattern = re.compile(r"^(?:[^\w]|_)+|(?:[^\w]|_)+$")

    def extract(self, transcript: str) -> Optional[str]:
        """Return the canonical decimal string, or None when no grade was spoken."""
        if not transcript or not transcript.strip():
            return None

        for strategy in (
            self._digit_decimal,
            self._word_decimal,
            self._spoken_decimal,
            self._single_number,
        ):
            grade = strategy(transcript)
            if grade is not None:
                logger.debug(f"[grade] {strategy.__name__} -> '{grade}' from '{transcript}'")
                return grade

        logger.debug(f"[grade] no grade in '{transcript}'")
        return None

    def _digit_decimal(self, transcript: str) -> Optional[str]:
        match = self._digit_decimal_pattern.search(transcript)
        if match:
            return f"{match.group(1)}.{match.group(2)}"
        return None

    def _word_decimal(self, transcript: str) -> Optional[str]:
        text = fold_case(strip_accents(transcript))
        for match in self._word_decimal_pattern.finditer(text):
            int_part = self.table.digit_value(match.group(1))
            dec_part = self.table.digit_value(match.group(2))
            if int_part is not None and dec_part is not None:
                return f"{int_part}.{dec_part}"
        return None

    def _is_separator(self, token: str) -> bool:
        return token in (".", ",") or self.table.lookup(token) == SEPARATOR

    def _spoken_decimal(self, transcript: str) -> Optional[str]:
        tokens: List[str] = self.normalizer.grade_tokens(transcript)
        for i in range(len(tokens) - 2):
            if not self._is_separator(tokens[i + 1]):
                continue
            int_part = self.normalizer.canonical_number(tokens[i])
            dec_part = self.normalizer.canonical_number(tokens[i + 2])
            if int_part is not None and dec_part is not None:
                return f"{int_part}.{dec_part}"
        return None

    def _single_number(self, transcript: str) -> Optional[str]:
        for token in self.normalizer.grade_tokens(transcript):
            candidate = self._edge_junk_pattern.sub("", token)
            if not candidate:
                continue
            value = self.table.digit_value(candidate)
            if value is not None:
                return value
            if self._number_literal_pattern.fullmatch(candidate):
                return candidate
        return None


def extract_grade(transcript: str, table: NumberWordTable) -> Optional[str]:
    """Convenience wrapper around :class:`GradeExtractor`."""
    return GradeExtractor(table).extract(transcript)
