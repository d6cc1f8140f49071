"""
Lookup package: transcript normalization, row resolution and grade extraction.

Main Components:
    TextNormalizer: Accent stripping, punctuation removal and tokenization
    NumberWordTable: Spoken number words and decimal-separator words
    IdResolver: Exact/substring then fuzzy matching on the id column
    NameResolver: Substring then fuzzy matching on the name column
    GradeExtractor: Decimal grade extraction from mixed digit/word speech
    EntryResolver: Facade routing a transcript to the right resolver
"""
from __future__ import annotations

from .candidates import MatchCandidate
from .config import ConfigManager
from .entry_resolver import EntryResolver, LookupResult
from .grade_extractor import GradeExtractor, extract_grade
from .id_resolver import IdResolver
from .name_resolver import NameResolver
from .number_words import NumberWordTable, SEPARATOR
from .text_normalizer import TextNormalizer, clean_for_substring, normalize, spoken_digits

__all__ = [
    "MatchCandidate",
    "ConfigManager",
    "EntryResolver",
    "LookupResult",
    "GradeExtractor",
    "extract_grade",
    "IdResolver",
    "NameResolver",
    "NumberWordTable",
    "SEPARATOR",
    "TextNormalizer",
    "clean_for_substring",
    "normalize",
    "spoken_digits",
]
