"""Rule-based bot/human classification of typing cadence.

Each matched condition adds a fixed weight to an additive bot score and
is recorded as a risk factor. Address collisions from the trust pipeline
feed in as extra evidence.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

from trustlens.behavior.config import BehaviorConfig
from trustlens.behavior.features import BehavioralFeatureExtractor
from trustlens.behavior.schemas import BehaviorClassification, BehaviorFeatures
from trustlens.observability.metrics import get_metrics

if TYPE_CHECKING:
    from trustlens.trust.schemas import IPCollisionResult

logger = logging.getLogger(__name__)

_RISK_BY_LABEL = {"bot": "high", "suspicious": "medium", "human": "low"}


class BotBehaviorClassifier:
    """Classifies a keystroke interval sample as human, suspicious or bot.

    Usage:
        classifier = BotBehaviorClassifier()
        result = classifier.classify([120, 95, 180, 143, 88, 301])
    """

    def __init__(
        self,
        config: BehaviorConfig | None = None,
        extractor: BehavioralFeatureExtractor | None = None,
    ) -> None:
        self._config = config or BehaviorConfig()
        self._extractor = extractor or BehavioralFeatureExtractor(self._config)

    def classify(
        self,
        intervals: Sequence[int | float],
        pointer_intervals: Sequence[int | float] | None = None,
        ip_collision: IPCollisionResult | None = None,
    ) -> BehaviorClassification:
        """Classify one behavioral sample.

        Samples shorter than ``min_samples`` return an ``insufficient_data``
        result with zero confidence rather than raising.

        Raises:
            ValidationError: If any interval is zero or negative.
        """
        cfg = self._config
        metrics = get_metrics()

        if len(intervals) < cfg.min_samples:
            metrics.record_behavior("insufficient_data")
            return BehaviorClassification(
                label="insufficient_data",
                report=[
                    f"Only {len(intervals)} intervals recorded; "
                    f"at least {cfg.min_samples} are needed."
                ],
            )

        start = time.perf_counter()
        features = self._extractor.extract(intervals, pointer_intervals)
        score, factors, ip_contribution = self._score(features, ip_collision)

        if score > cfg.bot_threshold:
            label = "bot"
        elif score > cfg.suspicious_threshold:
            label = "suspicious"
        else:
            label = "human"

        result = BehaviorClassification(
            label=label,
            bot_score=round(score, 4),
            confidence=min(cfg.max_confidence, score * 100),
            risk_level=_RISK_BY_LABEL[label],
            risk_factors=factors,
            ip_risk_contribution=ip_contribution,
            features=features,
        )
        result.report = build_report(result, ip_collision)

        metrics.record_behavior(label)
        metrics.analysis_latency.labels(stage="behavior").observe(time.perf_counter() - start)
        logger.debug("Behavior classified %s (score %.2f): %s", label, score, factors)
        return result

    def _score(
        self,
        features: BehaviorFeatures,
        ip_collision: IPCollisionResult | None,
    ) -> tuple[float, list[str], float]:
        cfg = self._config
        stats = features.statistics
        patterns = features.patterns

        score = 0.0
        factors: list[str] = []

        if stats.variance == 0:
            score += cfg.perfect_consistency_weight
            factors.append("perfect_consistency")
        elif stats.variance < cfg.low_variance_threshold:
            score += cfg.low_variance_weight
            factors.append("low_variance")

        if not patterns.has_natural_rhythm:
            score += cfg.no_rhythm_weight
            factors.append("no_natural_rhythm")

        if not patterns.has_acceleration:
            score += cfg.uniform_acceleration_weight
            factors.append("uniform_acceleration")

        if not patterns.has_pauses:
            score += cfg.no_pauses_weight
            factors.append("no_thinking_pauses")

        if abs(stats.skewness) < cfg.perfect_distribution_skew:
            score += cfg.perfect_distribution_weight
            factors.append("perfect_distribution")

        ip_contribution = 0.0
        if ip_collision is not None:
            if ip_collision.other_account_count >= 2:
                ip_contribution = cfg.crowded_address_weight
                factors.append("multiple_accounts_same_ip")
            elif ip_collision.other_account_count == 1:
                ip_contribution = cfg.shared_address_weight
                factors.append("shared_ip_address")
            score += ip_contribution

        return score, factors, ip_contribution


def build_report(
    result: BehaviorClassification,
    ip_collision: IPCollisionResult | None = None,
) -> list[str]:
    """Human-readable findings for a classification."""
    lines = [
        f"{result.label.capitalize()} behavior detected with "
        f"{result.confidence:.0f}% confidence."
    ]
    if result.features is None:
        return lines

    stats = result.features.statistics
    patterns = result.features.patterns
    if stats.variance == 0:
        lines.append("Perfect typing consistency indicates automated behavior.")
    elif "low_variance" in result.risk_factors:
        lines.append("Low typing variance suggests potential automation.")
    else:
        lines.append("Natural typing variance detected.")

    if not patterns.has_natural_rhythm:
        lines.append("Lacks natural typing rhythm.")
    if not patterns.has_pauses:
        lines.append("No thinking pauses detected.")

    pointer = result.features.pointer
    if pointer is not None and not pointer.is_natural_correlation:
        lines.append("Pointer movement does not track typing cadence.")

    if ip_collision is not None and ip_collision.ip_address:
        if ip_collision.other_account_count >= 2:
            lines.append(
                f"High risk: {ip_collision.total_accounts} accounts from "
                f"IP {ip_collision.ip_address}."
            )
        elif ip_collision.other_account_count == 1:
            lines.append("Shared IP detected (possibly household).")
        else:
            lines.append("Unique IP address.")
    return lines
