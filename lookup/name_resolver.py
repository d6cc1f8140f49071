"""Resolution of spoken names against the name column."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, List

from loguru import logger

from .candidates import MatchCandidate, rank, rows_of
from .text_normalizer import clean_for_substring
from .text_utils import edit_distance

if TYPE_CHECKING:
    from sheet.table import RowTable


class NameResolver:
    """Substring-then-fuzzy matching of a name fragment.

    A cleaned cell containing the cleaned fragment is an exact hit. Other
    cells are kept when their edit distance to the fragment is within
    ``clamp(ceil(len(fragment) * distance_ratio), min_distance, max_distance)``.
    Exact hits come first in row order, fuzzy hits follow by distance.
    """

    def __init__(
        self,
        name_column: int = 1,
        start_row: int = 1,
        distance_ratio: float = 0.5,
        min_distance: int = 1,
        max_distance: int = 6,
    ) -> None:
        self.name_column = name_column
        self.start_row = start_row
        self.distance_ratio = distance_ratio
        self.min_distance = min_distance
        self.max_distance = max_distance

    def max_distance_for(self, fragment_length: int) -> int:
        scaled = math.ceil(fragment_length * self.distance_ratio)
        return min(self.max_distance, max(self.min_distance, scaled))

    def _match(self, fragment: str, table: "RowTable", surname_only: bool) -> List[MatchCandidate]:
        query = clean_for_substring(fragment)
        if not query:
            return []
        limit = self.max_distance_for(len(query))

        exact: List[MatchCandidate] = []
        fuzzy: List[MatchCandidate] = []
        for row in range(self.start_row, table.row_count):
            cell = clean_for_substring(table.get_cell(row, self.name_column))
            if surname_only:
                cell = cell.split(" ", 1)[0]
            if not cell:
                continue
            if query in cell:
                exact.append(MatchCandidate(row))
                continue
            distance = edit_distance(cell, query)
            if distance <= limit:
                fuzzy.append(MatchCandidate(row, distance, exact=False))

        logger.debug(
            f"[name] '{query}' (max distance {limit}) -> "
            f"{len(exact)} exact, {len(fuzzy)} fuzzy"
        )
        return rank(exact, fuzzy)

    def match_by_name(self, fragment: str, table: "RowTable") -> List[MatchCandidate]:
        return self._match(fragment, table, surname_only=False)

    def match_by_surname(self, fragment: str, table: "RowTable") -> List[MatchCandidate]:
        """Like :meth:`match_by_name` but compares only the first word of each cell."""
        return self._match(fragment, table, surname_only=True)

    def resolve_by_name(self, fragment: str, table: "RowTable") -> List[int]:
        return rows_of(self.match_by_name(fragment, table))

    def resolve_by_surname(self, fragment: str, table: "RowTable") -> List[int]:
        return rows_of(self.match_by_surname(fragment, table))
