"""Unit tests for name resolution."""
import pytest

from lookup.candidates import MatchCandidate
from lookup.name_resolver import NameResolver


def assert_ranked(candidates):
    """Exact hits first, then fuzzy hits by non-decreasing distance."""
    flags = [c.exact for c in candidates]
    assert flags == sorted(flags, reverse=True)
    distances = [c.distance for c in candidates if not c.exact]
    assert distances == sorted(distances)


class TestNameResolver:
    """Tests for NameResolver."""

    def test_surname_one_letter_short(self, class_table):
        # Arrange
        resolver = NameResolver()

        # Act
        candidates = resolver.match_by_surname("παπαδοπουλο", class_table)

        # Assert
        assert candidates[0] == MatchCandidate(1, 0, True)
        assert all(not c.exact for c in candidates[1:])
        assert_ranked(candidates)

    def test_substring_ignores_accents_and_case(self, class_table):
        assert NameResolver().resolve_by_name("νικολαου", class_table) == [2]

    def test_fuzzy_hit_with_missing_letter(self, class_table):
        # Act
        candidates = NameResolver().match_by_name("γεωργιου κωσταντινος", class_table)

        # Assert
        assert candidates == [MatchCandidate(3, 1, False)]

    def test_surname_mode_ignores_first_names(self, class_table):
        resolver = NameResolver()

        assert resolver.resolve_by_name("γιαννης", class_table) == [1]
        assert 1 not in resolver.resolve_by_surname("γιαννης", class_table)

    def test_empty_cells_and_header_skipped(self, class_table):
        rows = NameResolver().resolve_by_name("α", class_table)

        assert 0 not in rows
        assert 4 not in rows
        assert rows == [1, 2, 3, 5]

    def test_empty_fragment(self, class_table):
        assert NameResolver().match_by_name("  ,. ", class_table) == []

    @pytest.mark.parametrize("length,expected", [
        (0, 1),
        (1, 1),
        (4, 2),
        (5, 3),
        (12, 6),
        (30, 6),
    ])
    def test_max_distance_for(self, length, expected):
        assert NameResolver().max_distance_for(length) == expected

    def test_max_distance_is_configurable(self):
        resolver = NameResolver(distance_ratio=0.25, min_distance=0, max_distance=2)

        assert resolver.max_distance_for(4) == 1
        assert resolver.max_distance_for(40) == 2

    def test_ranking_property(self, class_table):
        for fragment in ("παπα", "ΜΑΡΙΑ", "γεωργιου", "ελενη παπαδακη"):
            assert_ranked(NameResolver().match_by_name(fragment, class_table))
