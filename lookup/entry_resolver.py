"""
Entry resolution for the voice grading workflow.

Routes a raw transcript to the identifier resolver when it carries digits
(spoken or written) and to the name resolver otherwise.

Classes:
    LookupResult: Outcome of resolving one transcript
    EntryResolver: Facade over the normalizer and both resolvers
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from loguru import logger

from core.error_handler import log_execution_time

from .candidates import MatchCandidate, rows_of
from .config import ConfigManager
from .id_resolver import IdResolver
from .name_resolver import NameResolver
from .text_normalizer import TextNormalizer

if TYPE_CHECKING:
    from sheet.table import RowTable


@dataclass
class LookupResult:
    """
    Result of resolving a transcript against the table.

    Attributes:
        transcript: Raw text as received from speech-to-text
        tokens: Normalized tokens of the transcript
        query: Digit sequence (id mode) or cleaned name fragment (name mode)
        mode: "id", "name" or "none" when nothing usable was spoken
        candidates: Matching rows, best first
        used_fuzzy: True when the id path fell back to fuzzy matching
    """
    transcript: str
    tokens: List[str] = field(default_factory=list)
    query: str = ""
    mode: str = "none"
    candidates: List[MatchCandidate] = field(default_factory=list)
    used_fuzzy: bool = False

    @property
    def rows(self) -> List[int]:
        return rows_of(self.candidates)

    @property
    def found(self) -> bool:
        return bool(self.candidates)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transcript": self.transcript,
            "query": self.query,
            "mode": self.mode,
            "rows": self.rows,
            "used_fuzzy": self.used_fuzzy,
        }


class EntryResolver:
    """
    Resolves spoken student identifiers or names to table rows.

    Processing:
        1. Normalize the transcript into tokens
        2. Extract the spoken digit sequence
        3. Digits present: direct id match, fuzzy id match if that is empty
        4. No digits: substring/fuzzy match on the name (or surname) column

    The table is only read; nothing here writes to it.
    """

    def __init__(self, config: Optional[ConfigManager] = None) -> None:
        if config is None:
            config = ConfigManager()
        self.config = config
        sheet = config.sheet
        matching = config.matching

        self.normalizer = TextNormalizer(config.number_words)
        self.id_resolver = IdResolver(
            id_column=sheet.id_column,
            start_row=sheet.start_row,
            query_factor=matching.fuzzy_id_query_factor,
            cell_factor=matching.fuzzy_id_cell_factor,
        )
        self.name_resolver = NameResolver(
            name_column=sheet.name_column,
            start_row=sheet.start_row,
            distance_ratio=matching.name_distance_ratio,
            min_distance=matching.name_min_distance,
            max_distance=matching.name_max_distance,
        )
        self.surname_only = sheet.surname_only

    @log_execution_time()
    def resolve(self, transcript: str, table: "RowTable") -> LookupResult:
        tokens = self.normalizer.tokens(transcript)
        result = LookupResult(transcript=transcript, tokens=tokens)
        if not tokens:
            return result

        digits = self.normalizer.digit_query(tokens)
        if digits:
            result.mode = "id"
            result.query = digits
            result.candidates = self.id_resolver.match_by_id(digits, table)
            if not result.candidates:
                result.candidates = self.id_resolver.match_by_fuzzy_id(digits, table)
                result.used_fuzzy = bool(result.candidates)
        else:
            fragment = self.normalizer.name_fragment(tokens)
            if not fragment:
                return result
            result.mode = "name"
            result.query = fragment
            if self.surname_only:
                result.candidates = self.name_resolver.match_by_surname(fragment, table)
            else:
                result.candidates = self.name_resolver.match_by_name(fragment, table)

        logger.info(
            f"[lookup] mode={result.mode} query='{result.query}' "
            f"rows={result.rows} fuzzy={result.used_fuzzy}"
        )
        return result
