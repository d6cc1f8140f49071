"""Unit tests for identifier resolution."""
import pytest

from lookup.candidates import MatchCandidate
from lookup.id_resolver import IdResolver
from sheet.table import InMemoryTable


@pytest.fixture
def padded_ids():
    return InMemoryTable([
        ["ΑΜ", "Όνομα"],
        ["98765", "Α"],
        ["55555", "Β"],
        ["00123", "Γ"],
    ])


class TestDirectMatch:
    """Tests for IdResolver.match_by_id."""

    def test_suffix_match_on_padded_id(self, padded_ids):
        # Arrange
        resolver = IdResolver()

        # Act
        rows = resolver.resolve_by_id("123", padded_ids)

        # Assert
        assert rows == [3]

    def test_contains_match_returns_all_rows_in_order(self, class_table):
        rows = IdResolver().resolve_by_id("123", class_table)

        assert rows == [1, 5]

    def test_only_cells_containing_query(self, class_table):
        # Arrange
        resolver = IdResolver()

        # Act
        rows = resolver.resolve_by_id("45", class_table)

        # Assert
        assert rows == [2]
        assert all("45" in class_table.get_cell(row, 0) for row in rows)

    def test_header_row_skipped(self):
        table = InMemoryTable([["123"], ["0123"]])

        assert IdResolver(start_row=1).resolve_by_id("123", table) == [1]
        assert IdResolver(start_row=0).resolve_by_id("123", table) == [0, 1]

    def test_empty_query(self, class_table):
        assert IdResolver().match_by_id("", class_table) == []

    def test_candidates_are_exact(self, padded_ids):
        assert IdResolver().match_by_id("123", padded_ids) == [MatchCandidate(3, 0, True)]


class TestFuzzyMatch:
    """Tests for IdResolver.match_by_fuzzy_id."""

    def test_extra_digit_still_finds_row(self, padded_ids):
        # Arrange
        resolver = IdResolver()

        # Act
        direct = resolver.resolve_by_id("1234", padded_ids)
        fuzzy = resolver.match_by_fuzzy_id("1234", padded_ids)

        # Assert
        assert direct == []
        assert fuzzy == [MatchCandidate(3, 3, False)]

    def test_match_falls_back_to_fuzzy(self, padded_ids):
        candidates = IdResolver().match("1234", padded_ids)

        assert [c.row for c in candidates] == [3]
        assert not candidates[0].exact

    def test_match_prefers_direct(self, class_table):
        candidates = IdResolver().match("123", class_table)

        assert all(c.exact for c in candidates)

    def test_sorted_by_distance_with_stable_ties(self):
        # Arrange
        table = InMemoryTable([
            ["ΑΜ"],
            ["99345"],   # distance 2
            ["12346"],   # distance 1
            ["12355"],   # distance 1
            ["00000"],   # distance 5
        ])

        # Act
        candidates = IdResolver().match_by_fuzzy_id("12345", table)

        # Assert
        assert [c.row for c in candidates] == [2, 3, 1, 4]
        assert [c.distance for c in candidates] == [1, 1, 2, 5]

    def test_threshold_bound(self, class_table):
        # Arrange
        resolver = IdResolver()
        query = "999"

        # Act
        candidates = resolver.match_by_fuzzy_id(query, class_table)

        # Assert
        for candidate in candidates:
            cell = class_table.get_cell(candidate.row, 0)
            assert candidate.distance <= max(len(query), len(cell) / 2)
        assert [c.row for c in candidates] == [3]

    def test_empty_cells_never_match(self, class_table):
        rows = IdResolver().resolve_by_fuzzy_id("9", class_table)

        assert 4 not in rows

    def test_threshold_is_configurable(self, padded_ids):
        strict = IdResolver(query_factor=0.5, cell_factor=0.5)

        assert strict.fuzzy_threshold(4, 5) == 2.5
        assert strict.match_by_fuzzy_id("1234", padded_ids) == []

    def test_non_digit_query(self, class_table):
        assert IdResolver().match_by_fuzzy_id("abc", class_table) == []
