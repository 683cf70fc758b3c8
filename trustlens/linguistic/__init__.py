"""Review text analysis.

Components:
- LinguisticFeatureExtractor: surface metrics and spaCy-backed fingerprints
- detect_gibberish / detect_indicators: rule-based synthetic text checks
- TextClassificationClient: optional hosted classifier with circuit breaker
- TextAuthenticityClassifier: combines the above into a TextAnalysis
- compare_fingerprints / find_similar_pairs: stylistic similarity
"""

from trustlens.linguistic.circuit_breaker import CircuitBreaker, CircuitOpenError, CircuitState
from trustlens.linguistic.classifier import TextAuthenticityClassifier
from trustlens.linguistic.config import LinguisticConfig, TextClassifierConfig
from trustlens.linguistic.external import TextClassificationClient
from trustlens.linguistic.features import LinguisticFeatureExtractor
from trustlens.linguistic.gibberish import detect_gibberish
from trustlens.linguistic.indicators import detect_indicators
from trustlens.linguistic.schemas import (
    ClassificationOutcome,
    ClassificationResult,
    LinguisticFingerprint,
    LinguisticSummary,
    ServiceError,
    SurfaceMetrics,
    TextAnalysis,
)
from trustlens.linguistic.similarity import compare_fingerprints, find_similar_pairs

__all__ = [
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitState",
    "ClassificationOutcome",
    "ClassificationResult",
    "LinguisticConfig",
    "LinguisticFeatureExtractor",
    "LinguisticFingerprint",
    "LinguisticSummary",
    "ServiceError",
    "SurfaceMetrics",
    "TextAnalysis",
    "TextAuthenticityClassifier",
    "TextClassificationClient",
    "TextClassifierConfig",
    "compare_fingerprints",
    "detect_gibberish",
    "detect_indicators",
    "find_similar_pairs",
]
