"""Text authenticity classifier.

Pipeline per review text:
1. Gibberish pre-filter; a hit short-circuits with confidence 95 and the
   local fallback score.
2. Fingerprint extraction and synthetic-text indicators.
3. Optional hosted classifier (bounded, circuit-broken). Its detector
   score can add one weighted indicator; sentiment and toxicity only
   enrich reasons and flags.
4. Authenticity score from the fingerprint.
"""

import logging
import statistics
import time

from trustlens.errors import ValidationError
from trustlens.linguistic.config import LinguisticConfig, TextClassifierConfig
from trustlens.linguistic.external import TextClassificationClient
from trustlens.linguistic.features import LinguisticFeatureExtractor
from trustlens.linguistic.gibberish import GIBBERISH_REASONS, detect_gibberish
from trustlens.linguistic.indicators import INDICATOR_REASONS, detect_indicators
from trustlens.linguistic.schemas import (
    ClassificationResult,
    LinguisticFingerprint,
    LinguisticSummary,
    SurfaceMetrics,
    TextAnalysis,
)
from trustlens.observability.metrics import get_metrics
from trustlens.scoring import to_score

logger = logging.getLogger(__name__)


def summarize(surface: SurfaceMetrics) -> LinguisticSummary:
    """Derive the persisted 0-100 linguistic summary from surface metrics."""
    return LinguisticSummary(
        sentence_variety=to_score(
            surface.avg_words_per_sentence / 20 * 100 + surface.sentence_count * 10
        ),
        emotional_authenticity=to_score(50 + surface.sentiment_score * 100),
        specific_details=to_score(surface.vocabulary_richness * 100),
        vocabulary_complexity=to_score(
            surface.avg_chars_per_word / 8 * 100 + surface.vocabulary_richness * 50
        ),
        grammar_score=to_score(
            50 + surface.punctuation_density * 200 + surface.capitalization_ratio * 100
        ),
    )


def fallback_score(surface: SurfaceMetrics, is_synthetic: bool, confidence: float) -> int:
    """Authenticity score from surface metrics alone."""
    score = 50.0
    if is_synthetic:
        score -= min(40.0, confidence * 0.4)
    score += min(20.0, surface.sentiment_intensity * 3)
    score += surface.lexical_diversity * 30
    score += min(15.0, surface.emotional_word_count * 2)
    return to_score(score)


def feature_score(
    fingerprint: LinguisticFingerprint,
    is_synthetic: bool,
    confidence: float,
) -> int:
    """Authenticity score from the full fingerprint."""
    score = 50.0
    if is_synthetic:
        score -= min(40.0, confidence * 0.4)
    score += min(15.0, fingerprint.sentiment_intensity * 2)
    score += fingerprint.lexical_diversity * 25
    score += statistics.pstdev(fingerprint.syntactic_ratios) * 20

    if fingerprint.readability > 90:
        score -= 15
    elif fingerprint.readability < 30:
        score -= 10
    else:
        score += 10

    semantic_hits = (
        fingerprint.named_entity_count
        + fingerprint.topic_count
        + fingerprint.emotional_word_count
    )
    richness = semantic_hits / max(fingerprint.word_count, 1)
    score += min(15.0, richness * 100)
    return to_score(score)


class TextAuthenticityClassifier:
    """Classifies review text as human-written or synthetic.

    Usage:
        classifier = TextAuthenticityClassifier()
        analysis = await classifier.analyze("Bought this for my dad...")
        analysis.score, analysis.is_synthetic, analysis.reason_codes
    """

    def __init__(
        self,
        extractor: LinguisticFeatureExtractor | None = None,
        client: TextClassificationClient | None = None,
        config: LinguisticConfig | None = None,
        classifier_config: TextClassifierConfig | None = None,
    ) -> None:
        self._config = config or LinguisticConfig()
        self._classifier_config = classifier_config or TextClassifierConfig()
        self._extractor = extractor or LinguisticFeatureExtractor(self._config)
        self._client = client

    @property
    def extractor(self) -> LinguisticFeatureExtractor:
        return self._extractor

    async def aclose(self) -> None:
        """Close the hosted classifier client, if one was given."""
        if self._client is not None:
            await self._client.aclose()

    def _validate(self, text: str) -> None:
        if not text or not text.strip():
            raise ValidationError("Review text must not be empty")
        if len(text) > self._config.max_text_length:
            raise ValidationError(
                f"Review text exceeds {self._config.max_text_length} characters"
            )

    async def analyze(self, text: str) -> TextAnalysis:
        """Classify ``text``, consulting the hosted classifier when configured.

        Raises:
            ValidationError: If the text is empty or too long.
        """
        self._validate(text)
        external = None
        if self._client is not None and detect_gibberish(text, self._config) is None:
            external = await self._client.classify(text)
        return self.analyze_local(text, external)

    def analyze_local(
        self,
        text: str,
        external: ClassificationResult | None = None,
    ) -> TextAnalysis:
        """Classify ``text`` without network calls, folding in an
        already-obtained external result if given."""
        self._validate(text)
        start = time.perf_counter()
        surface = self._extractor.surface(text)

        gibberish = detect_gibberish(text, self._config)
        if gibberish is not None:
            confidence = self._config.gibberish_confidence
            analysis = TextAnalysis(
                score=fallback_score(surface, True, confidence),
                is_synthetic=True,
                confidence=confidence,
                reason_codes=[gibberish],
                reasons=[GIBBERISH_REASONS[gibberish]],
                flags=["gibberish_content"],
                path="gibberish",
                surface=surface,
                summary=summarize(surface),
            )
            get_metrics().record_text_analysis("gibberish", time.perf_counter() - start)
            return analysis

        fingerprint = self._extractor.extract(text, surface)
        codes = detect_indicators(text, fingerprint, self._config)
        local_confidence = len(codes) * self._config.indicator_confidence

        flags: list[str] = []
        reasons = [INDICATOR_REASONS[code] for code in codes]
        detector_confidence = 0.0
        outcome = external.outcome if external is not None else None
        if outcome is not None:
            cc = self._classifier_config
            if outcome.detector_score is not None:
                detector_confidence = outcome.detector_score * 100 * cc.detector_weight
                if outcome.detector_score >= cc.detector_threshold:
                    codes.append("external_detector")
                    reasons.append(
                        f"{INDICATOR_REASONS['external_detector']} "
                        f"({outcome.detector_score:.2f})"
                    )
            if outcome.toxicity_score is not None and outcome.toxicity_score >= cc.toxicity_threshold:
                flags.append("toxic_content")
                reasons.append(f"Toxic language detected ({outcome.toxicity_score:.2f})")
            if outcome.sentiment_label:
                reasons.append(
                    f"External sentiment: {outcome.sentiment_label} "
                    f"({outcome.sentiment_confidence or 0.0:.2f})"
                )

        confidence = min(
            self._config.max_confidence, max(local_confidence, detector_confidence)
        )
        is_synthetic = (
            len(set(codes)) >= self._config.synthetic_min_indicators
            or confidence > self._config.synthetic_confidence_threshold
        )
        if is_synthetic:
            flags.append("ai_generated_content")

        analysis = TextAnalysis(
            score=feature_score(fingerprint, is_synthetic, confidence),
            is_synthetic=is_synthetic,
            confidence=confidence,
            reason_codes=codes,
            reasons=reasons,
            flags=flags,
            path="features",
            surface=surface,
            fingerprint=fingerprint,
            summary=summarize(surface),
            external=outcome,
            external_error=external.error if external is not None else None,
        )
        get_metrics().record_text_analysis("features", time.perf_counter() - start)
        logger.debug(
            "Text analysis score=%d synthetic=%s codes=%s", analysis.score, is_synthetic, codes,
        )
        return analysis
