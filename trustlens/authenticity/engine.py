"""Authenticity decision engine.

Starts from the text classifier's authenticity score and applies signed
adjustments for review length, vocabulary, sentiment extremity, spam
phrasing, reviewer history, purchase verification and the behavioral
verdict. The final score is clamped, rounded and mapped to a risk tier.
"""

import logging

from trustlens.authenticity.config import AuthenticityConfig
from trustlens.authenticity.schemas import AuthenticityResult, BehavioralMetrics, ReviewerHistory
from trustlens.behavior.schemas import BehaviorClassification
from trustlens.linguistic import lexicons
from trustlens.linguistic.schemas import TextAnalysis
from trustlens.scoring import to_score

logger = logging.getLogger(__name__)


class AuthenticityDecisionEngine:
    """Combines text, purchase, history and behavior signals into one verdict."""

    def __init__(self, config: AuthenticityConfig | None = None) -> None:
        self._config = config or AuthenticityConfig()

    def risk_tier(self, score: int) -> str:
        if score < self._config.high_risk_below:
            return "high"
        if score < self._config.medium_risk_below:
            return "medium"
        return "low"

    def evaluate(
        self,
        review_id: str,
        text: str,
        analysis: TextAnalysis,
        *,
        metrics: BehavioralMetrics | None = None,
        history: ReviewerHistory | None = None,
        behavior: BehaviorClassification | None = None,
    ) -> AuthenticityResult:
        """Produce the authenticity verdict for one review.

        Args:
            review_id: Review being judged.
            text: Review text (spam phrases are matched against it).
            analysis: Output of TextAuthenticityClassifier.
            metrics: Optional purchase/order signals.
            history: Optional reviewer history.
            behavior: Optional behavioral classification.
        """
        cfg = self._config
        metrics = metrics or BehavioralMetrics()
        history = history or ReviewerHistory()
        surface = analysis.surface

        adjustments: dict[str, float] = {}
        flags = [flag.upper() for flag in analysis.flags]
        reasons = list(analysis.reasons)

        def apply(flag: str, amount: float, reason: str) -> None:
            adjustments[flag] = amount
            if amount < 0:
                flags.append(flag)
            reasons.append(reason)

        if surface.word_count < cfg.short_review_words:
            apply("SHORT_REVIEW", cfg.short_review_penalty,
                  f"Review too short (less than {cfg.short_review_words} words)")
        if surface.vocabulary_richness < cfg.low_vocabulary_threshold:
            apply("LOW_VOCABULARY", cfg.low_vocabulary_penalty, "Limited vocabulary diversity")
        if surface.repetition_score > cfg.high_repetition_threshold:
            apply("HIGH_REPETITION", cfg.high_repetition_penalty, "Excessive word repetition detected")

        if abs(surface.sentiment_score) > cfg.extreme_sentiment_threshold:
            apply("EXTREME_SENTIMENT", cfg.extreme_sentiment_penalty, "Extremely polarized sentiment")
        if lexicons.count_phrases(text.lower(), lexicons.SPAM_PHRASES) > 0:
            apply("SPAM_INDICATORS", cfg.spam_penalty, "Contains promotional language")

        if history.total_reviews > cfg.history_min_reviews and history.avg_review_length:
            deviation = abs(surface.word_count - history.avg_review_length) / history.avg_review_length
            if deviation > cfg.length_deviation_threshold:
                apply("LENGTH_ANOMALY", cfg.length_anomaly_penalty,
                      "Review length significantly different from reviewer pattern")
        if history.recent_review_count > cfg.high_activity_reviews:
            apply("HIGH_ACTIVITY", cfg.high_activity_penalty, "Unusually high review activity")

        if metrics.purchase_verified:
            apply("PURCHASE_VERIFIED", cfg.purchase_verified_bonus,
                  "Purchase verified - authenticity bonus")
        if metrics.order_trust_score is not None and metrics.order_trust_score > cfg.order_trust_threshold:
            apply("ORDER_TRUST", cfg.order_trust_bonus, "High order trust score")

        if behavior is not None:
            if behavior.label == "bot":
                apply("BOT_BEHAVIOR", cfg.bot_penalty,
                      f"Bot-like typing behavior ({behavior.confidence:.0f}% confidence)")
            elif behavior.label == "suspicious":
                apply("SUSPICIOUS_BEHAVIOR", cfg.suspicious_behavior_penalty,
                      "Suspicious typing behavior")

        score = to_score(analysis.score + sum(adjustments.values()))
        result = AuthenticityResult(
            review_id=review_id,
            score=score,
            is_synthetic=analysis.is_synthetic,
            confidence=analysis.confidence,
            reason_codes=list(analysis.reason_codes),
            risk_tier=self.risk_tier(score),
            flags=flags,
            reasons=reasons,
            adjustments=adjustments,
        )
        logger.debug("Review %s authenticity %d (%s)", review_id, score, result.risk_tier)
        return result
