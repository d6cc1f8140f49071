"""Match candidates produced by the identifier and name resolvers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class MatchCandidate:
    """A row that matched a query.

    Attributes:
        row: Zero-based row index in the table
        distance: Edit distance to the query, 0 for exact/substring hits
        exact: Whether the row matched by containment rather than fuzzily
    """
    row: int
    distance: int = 0
    exact: bool = True


def rank(exact: Iterable[MatchCandidate], fuzzy: Iterable[MatchCandidate]) -> List[MatchCandidate]:
    """Exact hits in row order, then fuzzy hits by ascending distance.

    ``sorted`` is stable so fuzzy ties keep their row order.
    """
    return list(exact) + sorted(fuzzy, key=lambda candidate: candidate.distance)


def rows_of(candidates: Iterable[MatchCandidate]) -> List[int]:
    return [candidate.row for candidate in candidates]
