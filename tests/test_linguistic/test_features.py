"""Tests for LinguisticFeatureExtractor."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from trustlens.linguistic.config import LinguisticConfig
from trustlens.linguistic.features import (
    LinguisticFeatureExtractor,
    content_hash,
    count_syllables,
    split_sentences,
)

HUMAN_REVIEW = (
    "I purchased this kettle for my daughter in January. The lid occasionally "
    "sticks and the handle becomes warm, but it boils water quickly."
)


# ── Helpers ──────────────────────────────────────────────


class TestHelpers:
    @pytest.mark.parametrize("word,expected", [
        ("cat", 1),
        ("the", 1),
        ("kettle", 1),
        ("happy", 2),
        ("purchased", 3),
        ("occasionally", 5),
    ])
    def test_count_syllables(self, word, expected):
        assert count_syllables(word) == expected

    def test_split_sentences_drops_empty_fragments(self):
        assert split_sentences("One. Two!! Three?  ") == ["One", "Two", "Three"]

    def test_content_hash_is_sha256(self):
        digest = content_hash("abc")
        assert len(digest) == 64
        assert digest == content_hash("abc")


# ── Surface metrics ──────────────────────────────────────


class TestSurface:
    def test_counts(self, extractor):
        surface = extractor.surface("Great kettle. I love it!")

        assert surface.word_count == 5
        assert surface.sentence_count == 2
        assert surface.avg_words_per_sentence == pytest.approx(2.5)
        assert surface.vocabulary_richness == 1.0

    def test_lexicon_sentiment(self, extractor):
        surface = extractor.surface("great great bad kettle")

        # 2 positive, 1 negative over 4 tokens
        assert surface.sentiment_score == pytest.approx(0.25)
        assert surface.sentiment_intensity == 1.0

    def test_repetition_and_emotion(self, extractor):
        surface = extractor.surface("love love love this")

        assert surface.repetition_score == pytest.approx(0.75)
        assert surface.emotional_word_count == 3

    def test_hash_ignores_surrounding_whitespace(self, extractor):
        assert extractor.surface("  same text ").content_hash == extractor.surface("same text").content_hash


# ── Fingerprint ──────────────────────────────────────────


class TestFingerprint:
    def test_blank_pipeline_fingerprint(self, extractor):
        fp = extractor.extract(HUMAN_REVIEW)

        assert fp.word_count == 23
        assert fp.sentence_count == 2
        assert fp.noun_ratio == 0.0
        assert fp.named_entity_count == 0
        assert 0.0 < fp.lexical_diversity <= 1.0
        assert 30 < fp.readability < 90

    def test_fingerprint_is_frozen(self, extractor):
        fp = extractor.extract(HUMAN_REVIEW)
        with pytest.raises(PydanticValidationError):
            fp.word_count = 1

    def test_reuses_given_surface(self, extractor):
        surface = extractor.surface(HUMAN_REVIEW)
        fp = extractor.extract(HUMAN_REVIEW, surface)
        assert fp.content_hash == surface.content_hash


# ── Pipeline loading ─────────────────────────────────────


class TestPipelineLoading:
    def test_missing_model_falls_back_to_blank(self, blank_nlp):
        extractor = LinguisticFeatureExtractor(LinguisticConfig(spacy_model="not_a_model"))

        with patch("spacy.load", side_effect=OSError("not found")), \
             patch("spacy.blank", return_value=blank_nlp) as blank:
            nlp = extractor.nlp

        assert nlp is blank_nlp
        blank.assert_called_once_with("en")

    def test_pipeline_loaded_once(self, blank_nlp):
        extractor = LinguisticFeatureExtractor()

        with patch("spacy.load", return_value=blank_nlp) as load:
            extractor.nlp
            extractor.nlp

        load.assert_called_once_with("en_core_web_sm", disable=["parser"])
