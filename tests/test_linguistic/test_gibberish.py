"""Tests for the gibberish pre-filter."""

import pytest

from trustlens.linguistic.gibberish import GIBBERISH_REASONS, detect_gibberish
from trustlens.linguistic.schemas import GIBBERISH_CODES

HUMAN_REVIEW = (
    "I purchased this kettle for my daughter in January. The lid occasionally "
    "sticks and the handle becomes warm, but it boils water quickly."
)


class TestDetectGibberish:
    @pytest.mark.parametrize("text,expected", [
        ("This is greaaaaat stuff", "repeated_characters"),
        ("qwerty keyboard test here", "keyboard_smash"),
        ("asdbsfbsf asdbsfbsf asdbsfbsf", "repeated_word"),
        ("12345 67890 #### $$$$ %%%% ok", "non_alphabetic_content"),
        ("a banana sofa", None),
        ("nice product, bakamitonepuraso works", "consonant_vowel_alternation"),
        ("nice product, works xyzbcdfgh fine", "random_consonant_cluster"),
    ])
    def test_reason_codes(self, text, expected):
        assert detect_gibberish(text) == expected

    def test_low_vocabulary_diversity(self):
        text = " ".join(["good"] * 10 + ["ok", "ok"])
        # 12 words, 2 distinct -> richness 0.17 is above 0.15, repetition fires instead
        assert detect_gibberish(text) == "repeated_word"
        text = " ".join(["go"] * 14)
        assert detect_gibberish(text) == "low_vocabulary_diversity"

    def test_short_text_is_never_gibberish(self):
        assert detect_gibberish("zzzzzzz") is None

    def test_first_match_wins(self):
        # Both repeated characters and keyboard smash; repetition is checked first
        assert detect_gibberish("qwertyyyyy review") == "repeated_characters"

    def test_real_review_passes(self):
        assert detect_gibberish(HUMAN_REVIEW) is None

    def test_every_code_has_reason_text(self):
        assert set(GIBBERISH_REASONS) == GIBBERISH_CODES
