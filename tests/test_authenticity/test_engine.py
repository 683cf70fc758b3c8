"""Tests for AuthenticityDecisionEngine."""

import pytest

from trustlens.authenticity.config import AuthenticityConfig
from trustlens.authenticity.engine import AuthenticityDecisionEngine
from trustlens.authenticity.schemas import BehavioralMetrics, ReviewerHistory
from trustlens.behavior.schemas import BehaviorClassification
from trustlens.linguistic.schemas import (
    LinguisticSummary,
    SurfaceMetrics,
    TextAnalysis,
)

TEXT = "The kettle boils water quickly and the handle stays cool."


def _make_analysis(
    score: int = 70,
    word_count: int = 40,
    vocabulary_richness: float = 0.8,
    repetition_score: float = 0.05,
    sentiment_score: float = 0.1,
    **overrides,
) -> TextAnalysis:
    surface = SurfaceMetrics(
        char_count=word_count * 5,
        word_count=word_count,
        sentence_count=3,
        avg_words_per_sentence=word_count / 3,
        avg_chars_per_word=4.5,
        vocabulary_richness=vocabulary_richness,
        sentiment_score=sentiment_score,
        sentiment_intensity=1.0,
        punctuation_density=0.03,
        capitalization_ratio=0.02,
        repetition_score=repetition_score,
        lexical_diversity=0.8,
        emotional_word_count=1,
        content_hash="abc",
    )
    defaults = dict(
        score=score,
        is_synthetic=False,
        confidence=0.0,
        path="features",
        surface=surface,
        summary=LinguisticSummary(
            sentence_variety=50,
            emotional_authenticity=60,
            specific_details=80,
            vocabulary_complexity=70,
            grammar_score=60,
        ),
    )
    defaults.update(overrides)
    return TextAnalysis(**defaults)


@pytest.fixture
def engine() -> AuthenticityDecisionEngine:
    return AuthenticityDecisionEngine(AuthenticityConfig())


# ── Baseline ─────────────────────────────────────────────


class TestBaseline:
    def test_no_adjustments(self, engine):
        result = engine.evaluate("r-1", TEXT, _make_analysis(score=70))

        assert result.review_id == "r-1"
        assert result.score == 70
        assert result.adjustments == {}
        assert result.flags == []
        assert result.risk_tier == "low"

    def test_carries_text_verdict(self, engine):
        analysis = _make_analysis(
            is_synthetic=True,
            confidence=60.0,
            reason_codes=["marketing_language", "excessive_exclamations"],
            reasons=["Marketing or promotional phrasing", "Excessive exclamation marks"],
            flags=["ai_generated_content"],
        )

        result = engine.evaluate("r-1", TEXT, analysis)

        assert result.is_synthetic is True
        assert result.confidence == 60.0
        assert result.reason_codes == ["marketing_language", "excessive_exclamations"]
        assert result.flags == ["AI_GENERATED_CONTENT"]
        assert result.reasons[:2] == analysis.reasons


# ── Penalties ────────────────────────────────────────────


class TestPenalties:
    def test_short_review(self, engine):
        result = engine.evaluate("r-1", TEXT, _make_analysis(word_count=9))
        assert result.adjustments == {"SHORT_REVIEW": -15.0}
        assert result.score == 55
        assert "SHORT_REVIEW" in result.flags

    def test_text_quality_penalties_stack(self, engine):
        analysis = _make_analysis(vocabulary_richness=0.2, repetition_score=0.4)
        result = engine.evaluate("r-1", TEXT, analysis)
        assert result.adjustments == {"LOW_VOCABULARY": -10.0, "HIGH_REPETITION": -8.0}
        assert result.score == 52

    @pytest.mark.parametrize("sentiment", [0.6, -0.6])
    def test_extreme_sentiment(self, engine, sentiment):
        result = engine.evaluate("r-1", TEXT, _make_analysis(sentiment_score=sentiment))
        assert result.adjustments == {"EXTREME_SENTIMENT": -5.0}

    def test_spam_phrase(self, engine):
        result = engine.evaluate("r-1", "Buy now, limited time only", _make_analysis())
        assert result.adjustments == {"SPAM_INDICATORS": -15.0}
        assert "Contains promotional language" in result.reasons

    def test_length_anomaly_needs_history(self, engine):
        history = ReviewerHistory(total_reviews=10, avg_review_length=10.0)
        result = engine.evaluate("r-1", TEXT, _make_analysis(word_count=40), history=history)
        assert "LENGTH_ANOMALY" not in result.adjustments

        history = ReviewerHistory(total_reviews=11, avg_review_length=10.0)
        result = engine.evaluate("r-1", TEXT, _make_analysis(word_count=40), history=history)
        assert result.adjustments["LENGTH_ANOMALY"] == -8.0

    def test_high_activity(self, engine):
        history = ReviewerHistory(recent_review_count=6)
        result = engine.evaluate("r-1", TEXT, _make_analysis(), history=history)
        assert result.adjustments == {"HIGH_ACTIVITY": -7.0}

    def test_activity_at_limit_is_fine(self, engine):
        history = ReviewerHistory(recent_review_count=5)
        result = engine.evaluate("r-1", TEXT, _make_analysis(), history=history)
        assert result.adjustments == {}


# ── Bonuses ──────────────────────────────────────────────


class TestBonuses:
    def test_purchase_and_order_trust(self, engine):
        metrics = BehavioralMetrics(purchase_verified=True, order_trust_score=85.0)
        result = engine.evaluate("r-1", TEXT, _make_analysis(score=70), metrics=metrics)

        assert result.adjustments == {"PURCHASE_VERIFIED": 10.0, "ORDER_TRUST": 5.0}
        assert result.score == 85
        assert result.flags == []
        assert "Purchase verified - authenticity bonus" in result.reasons

    def test_order_trust_at_threshold(self, engine):
        metrics = BehavioralMetrics(order_trust_score=70.0)
        result = engine.evaluate("r-1", TEXT, _make_analysis(), metrics=metrics)
        assert result.adjustments == {}

    def test_score_clamped_to_100(self, engine):
        metrics = BehavioralMetrics(purchase_verified=True, order_trust_score=99.0)
        result = engine.evaluate("r-1", TEXT, _make_analysis(score=95), metrics=metrics)
        assert result.score == 100


# ── Behavior ─────────────────────────────────────────────


class TestBehavior:
    def test_bot(self, engine):
        behavior = BehaviorClassification(label="bot", bot_score=1.2, confidence=95.0)
        result = engine.evaluate("r-1", TEXT, _make_analysis(), behavior=behavior)

        assert result.adjustments == {"BOT_BEHAVIOR": -20.0}
        assert result.score == 50
        assert "Bot-like typing behavior (95% confidence)" in result.reasons

    def test_suspicious(self, engine):
        behavior = BehaviorClassification(label="suspicious", bot_score=0.7, confidence=70.0)
        result = engine.evaluate("r-1", TEXT, _make_analysis(), behavior=behavior)
        assert result.adjustments == {"SUSPICIOUS_BEHAVIOR": -10.0}

    @pytest.mark.parametrize("label", ["human", "insufficient_data"])
    def test_no_penalty(self, engine, label):
        behavior = BehaviorClassification(label=label)
        result = engine.evaluate("r-1", TEXT, _make_analysis(), behavior=behavior)
        assert result.adjustments == {}


# ── Risk tiers ───────────────────────────────────────────


class TestRiskTier:
    @pytest.mark.parametrize("score,tier", [
        (0, "high"),
        (39, "high"),
        (40, "medium"),
        (69, "medium"),
        (70, "low"),
        (100, "low"),
    ])
    def test_boundaries(self, engine, score, tier):
        assert engine.risk_tier(score) == tier

    def test_floor_at_zero(self, engine):
        behavior = BehaviorClassification(label="bot", bot_score=1.2, confidence=95.0)
        analysis = _make_analysis(score=10, word_count=3)
        result = engine.evaluate("r-1", "Buy now", analysis, behavior=behavior)

        assert result.score == 0
        assert result.risk_tier == "high"
