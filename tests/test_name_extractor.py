"""Tests for NameExtractor."""

import pytest

from product_advisor.core.conversation import NameExtractor


class TestNameExtractor:
    """Self-introduction phrasings."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("My name is Alex, suggest a shampoo", "Alex"),
            ("my name is Mary-Jane", "Mary-Jane"),
            ("I'm Sam.", "Sam"),
            ("I am Priya", "Priya"),
            ("Hi, this is O'Neil!", "O'Neil"),
        ],
    )
    def test_extracts_name(self, text, expected):
        assert NameExtractor.extract_name(text) == expected

    def test_multi_word_name_is_kept(self):
        """The capture continues across spaces until punctuation."""
        assert NameExtractor.extract_name("my name is Anna Maria") == "Anna Maria"

    def test_name_length_is_bounded(self):
        name = NameExtractor.extract_name("my name is " + "a" * 80)
        assert name is not None
        assert len(name) == 41

    def test_requires_word_boundary(self):
        """The phrase must start on a word boundary."""
        assert NameExtractor.extract_name("Hawaii am lovely") is None

    @pytest.mark.parametrize("text", ["", None, "recommend a serum", "my name is 42"])
    def test_no_match_returns_none(self, text):
        assert NameExtractor.extract_name(text) is None
