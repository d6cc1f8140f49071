"""Transcript normalization: accent stripping, punctuation removal, tokenization."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional

from .number_words import NumberWordTable, SEPARATOR
from .text_utils import digits_only, fold_case, strip_accents

# "\w" minus "_" is letters and digits.
_PUNCTUATION = re.compile(r"[^\w\s.]|_")
_PUNCTUATION_KEEP_COMMA = re.compile(r"[^\w\s.,]|_")
_TOKEN_SPLIT = re.compile(r"(?:[^\w.]|_)+")
_TOKEN_SPLIT_KEEP_COMMA = re.compile(r"(?:[^\w.,]|_)+")
_SUBSTRING_JUNK = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")
_NUMBER_LITERAL = re.compile(r"\d+(?:\.\d+)?")
_DIGITS = re.compile(r"\d+")
_DIGIT = re.compile(r"\d")
# A dot or comma not sitting between two digits.
_LOOSE_SEPARATOR = re.compile(r"(?<!\d)[.,]|[.,](?!\d)")


def normalize(text: str, keep_comma: bool = False) -> List[str]:
    """Split a raw transcript into canonical tokens.

    Tokens contain only upper-cased, accent-free letters and digits, or dots.
    With ``keep_comma`` commas survive as well, which the grade extractor
    needs to see decimal commas.
    """
    if not text:
        return []
    text = strip_accents(text)
    punctuation = _PUNCTUATION_KEEP_COMMA if keep_comma else _PUNCTUATION
    text = fold_case(punctuation.sub(" ", text))
    splitter = _TOKEN_SPLIT_KEEP_COMMA if keep_comma else _TOKEN_SPLIT
    return [token for token in splitter.split(text) if token]


def clean_for_substring(text: str) -> str:
    """Accent-strip, upper-case, drop every non letter/digit and collapse spaces."""
    if not text:
        return ""
    text = fold_case(strip_accents(text))
    text = _SUBSTRING_JUNK.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def spoken_digits(tokens: Iterable[str], table: NumberWordTable) -> str:
    """Concatenate the digits spoken across ``tokens``.

    Number words contribute their digit value, numeric tokens their digits,
    and tokens with embedded digits ("A12") each digit in order. Anything
    else, including separator words, is dropped.
    """
    parts: List[str] = []
    for token in tokens:
        value = table.lookup(token)
        if value == SEPARATOR:
            continue
        if value is not None:
            parts.append(value)
        elif _NUMBER_LITERAL.fullmatch(token):
            parts.append(digits_only(token))
        else:
            parts.extend(_DIGIT.findall(token))
    return "".join(parts)


def isolate_separators(text: str, table: NumberWordTable) -> str:
    """Pad separator words and loose dots/commas with spaces.

    ``"ΤΡΙΑΚΟΜΜΑΔΥΟ"`` becomes ``"ΤΡΙΑ ΚΟΜΜΑ ΔΥΟ"`` and ``"ΤΡΙΑ,ΔΥΟ"``
    becomes ``"ΤΡΙΑ , ΔΥΟ"`` while ``"3.2"`` is left alone.
    """
    words = table.separator_words
    if words:
        pattern = re.compile("|".join(re.escape(word) for word in words))
        text = pattern.sub(lambda m: f" {m.group(0)} ", text)
    return _LOOSE_SEPARATOR.sub(lambda m: f" {m.group(0)} ", text)


class TextNormalizer:
    """Normalizer bound to one number-word table."""

    def __init__(self, table: NumberWordTable) -> None:
        self.table = table

    def tokens(self, text: str, keep_comma: bool = False) -> List[str]:
        return normalize(text, keep_comma=keep_comma)

    def grade_tokens(self, text: str) -> List[str]:
        """Tokens for grade extraction with glued separators pulled apart."""
        if not text:
            return []
        text = strip_accents(text)
        text = fold_case(_PUNCTUATION_KEEP_COMMA.sub(" ", text))
        text = isolate_separators(text, self.table)
        return [token for token in _TOKEN_SPLIT_KEEP_COMMA.split(text) if token]

    def digit_query(self, tokens: List[str]) -> str:
        return spoken_digits(tokens, self.table)

    def name_fragment(self, tokens: List[str]) -> str:
        """Words of the transcript usable as a name query."""
        return clean_for_substring(" ".join(tokens))

    def canonical_number(self, token: str) -> Optional[str]:
        """Digit value of a number word, or the token itself when it is all digits."""
        value = self.table.digit_value(token)
        if value is not None:
            return value
        if _DIGITS.fullmatch(token):
            return token
        return None
