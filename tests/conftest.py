"""Shared fixtures."""
import json

import pytest

from config.config import CONFIG_DIR
from lookup.number_words import NumberWordTable
from sheet.table import InMemoryTable


@pytest.fixture(scope="session")
def numbers_data():
    with open(CONFIG_DIR / "numbers.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def greek_numbers(numbers_data):
    return NumberWordTable.from_config(numbers_data, "el")


@pytest.fixture
def english_numbers(numbers_data):
    return NumberWordTable.from_config(numbers_data, "en")


@pytest.fixture
def class_table():
    """Header row plus four students; grades go to column H (index 7)."""
    return InMemoryTable([
        ["ΑΜ", "Ονοματεπώνυμο", "", "", "", "", "", "Βαθμός"],
        ["00123", "ΠΑΠΑΔΟΠΟΥΛΟΣ ΓΙΑΝΝΗΣ"],
        ["04567", "Νικολάου Μαρία"],
        ["7890", "ΓΕΩΡΓΙΟΥ ΚΩΝΣΤΑΝΤΙΝΟΣ"],
        ["", ""],
        ["55123", "Παπαδάκη Ελένη"],
    ])
