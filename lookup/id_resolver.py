"""Resolution of spoken student identifiers against the id column."""
from __future__ import annotations

from typing import TYPE_CHECKING, List

from loguru import logger

from .candidates import MatchCandidate, rank, rows_of
from .text_utils import digits_only, edit_distance

if TYPE_CHECKING:
    from sheet.table import RowTable


class IdResolver:
    """Finds rows whose identifier matches a spoken digit sequence.

    The direct path accepts cells that contain or end with the query. When
    that finds nothing, the fuzzy path compares digit-only forms by edit
    distance, accepting ``distance <= max(len(query) * query_factor,
    len(cell) * cell_factor)``. The bound grows with the input so dropped
    leading zeros and a mis-heard digit are tolerated.
    """

    def __init__(
        self,
        id_column: int = 0,
        start_row: int = 1,
        query_factor: float = 1.0,
        cell_factor: float = 0.5,
    ) -> None:
        self.id_column = id_column
        self.start_row = start_row
        self.query_factor = query_factor
        self.cell_factor = cell_factor

    def fuzzy_threshold(self, query_length: int, cell_length: int) -> float:
        return max(query_length * self.query_factor, cell_length * self.cell_factor)

    def match_by_id(self, query: str, table: "RowTable") -> List[MatchCandidate]:
        """Rows whose id cell contains or ends with ``query`` (ordinal comparison)."""
        if not query:
            return []
        matches: List[MatchCandidate] = []
        for row in range(self.start_row, table.row_count):
            cell = table.get_cell(row, self.id_column)
            if not cell:
                continue
            if cell.endswith(query) or query in cell:
                matches.append(MatchCandidate(row))
        logger.debug(f"[id] direct '{query}' -> {len(matches)} match(es)")
        return matches

    def match_by_fuzzy_id(self, query: str, table: "RowTable") -> List[MatchCandidate]:
        """Rows whose digit-only id is within the fuzzy threshold of ``query``."""
        cleaned_query = digits_only(query)
        if not cleaned_query:
            return []
        fuzzy: List[MatchCandidate] = []
        for row in range(self.start_row, table.row_count):
            cleaned_cell = digits_only(table.get_cell(row, self.id_column))
            if not cleaned_cell:
                continue
            distance = edit_distance(cleaned_cell, cleaned_query)
            if distance <= self.fuzzy_threshold(len(cleaned_query), len(cleaned_cell)):
                fuzzy.append(MatchCandidate(row, distance, exact=False))
        logger.debug(f"[id] fuzzy '{cleaned_query}' -> {len(fuzzy)} match(es)")
        return rank([], fuzzy)

    def match(self, query: str, table: "RowTable") -> List[MatchCandidate]:
        """Direct matches, or the fuzzy fallback when there are none."""
        return self.match_by_id(query, table) or self.match_by_fuzzy_id(query, table)

    def resolve_by_id(self, query: str, table: "RowTable") -> List[int]:
        return rows_of(self.match_by_id(query, table))

    def resolve_by_fuzzy_id(self, query: str, table: "RowTable") -> List[int]:
        return rows_of(self.match_by_fuzzy_id(query, table))
