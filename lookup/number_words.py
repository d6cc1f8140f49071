"""Spoken number-word dictionary used by the normalizer and grade extractor."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from core.exceptions import ConfigurationError

from .text_utils import fold_case, strip_accents

SEPARATOR = "."


class NumberWordTable:
    """Closed mapping from spoken words to digit strings or the decimal separator.

    Keys are stored accent-stripped and upper-cased so that lookups work on
    normalized tokens. Values are either a digit string (``"3"``, ``"20"``)
    or :data:`SEPARATOR`.
    """

    def __init__(self, words: Mapping[str, str], separators: Iterable[str] = ()) -> None:
        self._entries: Dict[str, str] = {}
        for word, value in words.items():
            value = str(value).strip()
            if not value.isdigit():
                raise ConfigurationError(f"Number word '{word}' maps to non-digit value '{value}'")
            self._add(word, value)
        for word in separators:
            self._add(word, SEPARATOR)

    def _add(self, word: str, value: str) -> None:
        key = self.normalize_key(word)
        if not key:
            raise ConfigurationError(f"Empty number word key: {word!r}")
        existing = self._entries.get(key)
        if existing is not None and existing != value:
            raise ConfigurationError(
                f"Number word '{word}' collides with an existing entry ({existing} vs {value})"
            )
        self._entries[key] = value

    @staticmethod
    def normalize_key(word: str) -> str:
        return fold_case(strip_accents(str(word).strip()))

    @classmethod
    def from_config(cls, numbers_data: Mapping, language: Optional[str] = None) -> "NumberWordTable":
        """Build the table for ``language`` from the ``numbers.json`` structure."""
        languages = numbers_data.get("languages") or {}
        lang = language or numbers_data.get("default_language") or "el"
        section = languages.get(lang)
        if section is None:
            raise ConfigurationError(f"No number words configured for language '{lang}'")
        return cls(section.get("words", {}), section.get("separators", []))

    def lookup(self, token: str) -> Optional[str]:
        """Return the digit string or separator for ``token``, if known."""
        return self._entries.get(self.normalize_key(token))

    def digit_value(self, token: str) -> Optional[str]:
        value = self.lookup(token)
        if value is None or value == SEPARATOR:
            return None
        return value

    def is_separator(self, token: str) -> bool:
        return self.lookup(token) == SEPARATOR

    @property
    def separator_words(self) -> List[str]:
        """Normalized separator words, longest first."""
        words = [key for key, value in self._entries.items() if value == SEPARATOR]
        return sorted(words, key=len, reverse=True)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.lookup(token) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
