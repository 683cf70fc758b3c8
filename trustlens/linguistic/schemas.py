"""Data models for linguistic analysis.

- SurfaceMetrics: cheap statistics computed for every text
- LinguisticFingerprint: full immutable feature set (spaCy-backed)
- ClassificationResult: outcome or error from the hosted classifier
- TextAnalysis: the classifier verdict consumed by the decision engine
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ReasonCode = Literal[
    # gibberish pre-filter
    "repeated_characters",
    "keyboard_smash",
    "low_vocabulary_diversity",
    "repeated_word",
    "non_alphabetic_content",
    "consonant_vowel_alternation",
    "random_consonant_cluster",
    # synthetic indicators
    "too_perfect_readability",
    "no_personal_pronouns",
    "generic_transitions",
    "low_lexical_diversity",
    "overly_descriptive_language",
    "excessive_superlatives",
    "marketing_language",
    "overly_enthusiastic_language",
    "excessive_exclamations",
    "repetitive_structure",
    "marketing_buzzwords",
    "external_detector",
]

GIBBERISH_CODES: frozenset[str] = frozenset({
    "repeated_characters",
    "keyboard_smash",
    "low_vocabulary_diversity",
    "repeated_word",
    "non_alphabetic_content",
    "consonant_vowel_alternation",
    "random_consonant_cluster",
})

AnalysisPath = Literal["gibberish", "features"]


class SurfaceMetrics(BaseModel):
    """Statistics that need no language model."""

    model_config = ConfigDict(frozen=True)

    char_count: int = Field(ge=0)
    word_count: int = Field(ge=0)
    sentence_count: int = Field(ge=0)
    avg_words_per_sentence: float = Field(ge=0.0)
    avg_chars_per_word: float = Field(ge=0.0)
    vocabulary_richness: float = Field(ge=0.0, le=1.0)
    sentiment_score: float = Field(ge=-1.0, le=1.0)
    sentiment_intensity: float = Field(ge=0.0, description="|positive - negative| word hits")
    punctuation_density: float = Field(ge=0.0, le=1.0)
    capitalization_ratio: float = Field(ge=0.0, le=1.0)
    repetition_score: float = Field(ge=0.0, le=1.0, description="Share of the most frequent word")
    lexical_diversity: float = Field(ge=0.0, le=1.0)
    emotional_word_count: int = Field(ge=0)
    content_hash: str


class LinguisticFingerprint(BaseModel):
    """Immutable stylistic fingerprint of a review text. Ratios lie in [0, 1]."""

    model_config = ConfigDict(frozen=True)

    vocabulary_richness: float = Field(ge=0.0, le=1.0)
    sentiment_score: float = Field(ge=-1.0, le=1.0)
    sentiment_intensity: float = Field(ge=0.0)
    punctuation_density: float = Field(ge=0.0, le=1.0)
    capitalization_ratio: float = Field(ge=0.0, le=1.0)
    repetition_score: float = Field(ge=0.0, le=1.0)
    avg_words_per_sentence: float = Field(ge=0.0)
    avg_chars_per_word: float = Field(ge=0.0)

    noun_ratio: float = Field(ge=0.0, le=1.0)
    verb_ratio: float = Field(ge=0.0, le=1.0)
    adjective_ratio: float = Field(ge=0.0, le=1.0)
    adverb_ratio: float = Field(ge=0.0, le=1.0)

    named_entity_count: int = Field(ge=0)
    topic_count: int = Field(ge=0)
    emotional_word_count: int = Field(ge=0)

    lexical_diversity: float = Field(ge=0.0, le=1.0)
    morphological_complexity: float = Field(ge=0.0, le=1.0)
    readability: float = Field(description="Flesch reading ease")
    gunning_fog: float = Field(ge=0.0)

    word_count: int = Field(ge=0)
    sentence_count: int = Field(ge=0)
    char_count: int = Field(ge=0)
    content_hash: str

    @property
    def syntactic_ratios(self) -> tuple[float, float, float, float]:
        return (self.noun_ratio, self.verb_ratio, self.adjective_ratio, self.adverb_ratio)


class ClassificationOutcome(BaseModel):
    """Parsed response from the hosted classifier. All fields advisory."""

    detector_score: float | None = Field(
        default=None, ge=0.0, le=1.0, description="Probability the text is machine-generated"
    )
    sentiment_label: str | None = None
    sentiment_confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    toxicity_score: float | None = Field(default=None, ge=0.0, le=1.0)


class ServiceError(BaseModel):
    """Why the hosted classifier produced no outcome."""

    reason: Literal["disabled", "timeout", "circuit_open", "http_error", "invalid_response"]
    message: str = ""


class ClassificationResult(BaseModel):
    """Exactly one of ``outcome`` or ``error`` is set."""

    outcome: ClassificationOutcome | None = None
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not None


class LinguisticSummary(BaseModel):
    """Per-review analysis summary persisted on the review row (0-100 each)."""

    sentence_variety: int = Field(ge=0, le=100)
    emotional_authenticity: int = Field(ge=0, le=100)
    specific_details: int = Field(ge=0, le=100)
    vocabulary_complexity: int = Field(ge=0, le=100)
    grammar_score: int = Field(ge=0, le=100)


class TextAnalysis(BaseModel):
    """Verdict of the text authenticity classifier for one review text."""

    score: int = Field(ge=0, le=100, description="Authenticity score")
    is_synthetic: bool
    confidence: float = Field(ge=0.0, le=100.0)
    reason_codes: list[str] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)
    path: AnalysisPath
    surface: SurfaceMetrics
    fingerprint: LinguisticFingerprint | None = None
    summary: LinguisticSummary
    external: ClassificationOutcome | None = None
    external_error: ServiceError | None = None
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_gibberish(self) -> bool:
        return self.path == "gibberish"
