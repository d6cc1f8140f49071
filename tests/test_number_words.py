"""Unit tests for the number-word table."""
import pytest

from core.exceptions import ConfigurationError
from lookup.number_words import NumberWordTable, SEPARATOR


class TestNumberWordTable:
    """Tests for NumberWordTable."""

    def test_lookup_ignores_accents_and_case(self, greek_numbers):
        assert greek_numbers.lookup("τρία") == "3"
        assert greek_numbers.lookup("ΤΡΙΑ") == "3"
        assert greek_numbers.lookup("Τρια") == "3"

    def test_misspelled_variants(self, greek_numbers):
        assert greek_numbers.digit_value("δουδεκα") == "12"
        assert greek_numbers.digit_value("εφτά") == greek_numbers.digit_value("επτά") == "7"

    def test_digit_keys_map_to_themselves(self, greek_numbers):
        assert greek_numbers.digit_value("20") == "20"
        assert greek_numbers.digit_value("90") == "90"

    def test_separators(self, greek_numbers):
        # Arrange
        words = ["κόμμα", "κομμα", "κομα", "υποδιαστολή", "τελεία", "τελια"]

        # Assert
        for word in words:
            assert greek_numbers.is_separator(word), word
            assert greek_numbers.lookup(word) == SEPARATOR
            assert greek_numbers.digit_value(word) is None

    def test_separator_words_longest_first(self, greek_numbers):
        words = greek_numbers.separator_words

        assert words[0] == "ΥΠΟΔΙΑΣΤΟΛΗ"
        assert [len(w) for w in words] == sorted((len(w) for w in words), reverse=True)

    def test_unknown_word(self, greek_numbers):
        assert greek_numbers.lookup("καλημέρα") is None
        assert "καλημέρα" not in greek_numbers
        assert "δύο" in greek_numbers

    def test_english_table(self, english_numbers):
        assert english_numbers.digit_value("seven") == "7"
        assert english_numbers.is_separator("point")

    def test_collision_raises(self):
        with pytest.raises(ConfigurationError):
            NumberWordTable({"τρία": "3", "τρια": "4"})

    def test_same_value_duplicates_are_allowed(self):
        table = NumberWordTable({"τρία": "3", "ΤΡΙΑ": "3"})

        assert len(table) == 1

    def test_non_digit_value_raises(self):
        with pytest.raises(ConfigurationError):
            NumberWordTable({"three": "III"})

    def test_separator_colliding_with_number_raises(self):
        with pytest.raises(ConfigurationError):
            NumberWordTable({"point": "1"}, separators=["point"])

    def test_unknown_language_raises(self, numbers_data):
        with pytest.raises(ConfigurationError):
            NumberWordTable.from_config(numbers_data, "fr")

    def test_default_language(self, numbers_data):
        table = NumberWordTable.from_config(numbers_data)

        assert table.digit_value("πέντε") == "5"
