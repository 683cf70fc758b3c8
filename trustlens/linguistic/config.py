"""Configuration for review text analysis.

``LinguisticConfig`` (``LINGUISTIC_*``) covers the local analyzer;
``TextClassifierConfig`` (``TEXT_CLASSIFIER_*``) covers the optional
hosted text-classification service.
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class LinguisticConfig(BaseSettings):
    """Local linguistic analysis settings.

    Example:
        LINGUISTIC_SPACY_MODEL=en_core_web_md
        LINGUISTIC_MAX_TEXT_LENGTH=50000
    """

    model_config = SettingsConfigDict(
        env_prefix="LINGUISTIC_",
        case_sensitive=False,
        extra="ignore",
    )

    spacy_model: str = Field(
        default="en_core_web_sm",
        description="spaCy pipeline for POS tags, lemmas and entities",
    )
    fallback_language: str = Field(
        default="en",
        description="Language for spacy.blank() when the model is not installed",
    )
    max_text_length: int = Field(default=20000, ge=100)

    # Gibberish pre-filter
    gibberish_min_length: int = Field(
        default=10,
        ge=0,
        description="Texts shorter than this skip the gibberish checks",
    )
    gibberish_confidence: float = Field(default=95.0, ge=0.0, le=100.0)
    gibberish_min_words: int = Field(default=10, ge=1)
    gibberish_vocabulary_richness: float = Field(default=0.15, ge=0.0, le=1.0)
    gibberish_word_share: float = Field(default=0.5, ge=0.0, le=1.0)
    gibberish_non_alpha_ratio: float = Field(default=0.5, ge=0.0, le=1.0)

    # Synthetic indicators
    readability_ceiling: float = Field(default=95.0)
    pronoun_min_chars: int = Field(default=100, ge=0)
    generic_transitions_min: int = Field(default=3, ge=1)
    lexical_diversity_floor: float = Field(default=0.3, ge=0.0, le=1.0)
    descriptive_phrases_min: int = Field(default=3, ge=1)
    superlatives_min: int = Field(default=4, ge=1)
    marketing_phrases_min: int = Field(default=2, ge=1)
    enthusiastic_phrases_min: int = Field(default=2, ge=1)
    exclamations_min: int = Field(default=2, ge=1)
    repeated_starter_min: int = Field(default=3, ge=2)
    buzzwords_min: int = Field(default=3, ge=1)

    # Confidence
    indicator_confidence: float = Field(
        default=15.0,
        ge=0.0,
        description="Local confidence contributed by each distinct indicator",
    )
    max_confidence: float = Field(default=95.0, ge=0.0, le=100.0)
    synthetic_confidence_threshold: float = Field(default=60.0, ge=0.0, le=100.0)
    synthetic_min_indicators: int = Field(default=2, ge=1)


class TextClassifierConfig(BaseSettings):
    """Hosted text-classification service (HuggingFace Inference API shape).

    Disabled by default; the local analyzer is always authoritative.

    Example:
        TEXT_CLASSIFIER_ENABLED=true
        TEXT_CLASSIFIER_API_KEY=hf_...
    """

    model_config = SettingsConfigDict(
        env_prefix="TEXT_CLASSIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = False
    base_url: str = Field(default="https://api-inference.huggingface.co/models")
    api_key: SecretStr | None = Field(default=None)

    sentiment_model: str = "distilbert-base-uncased-finetuned-sst-2-english"
    toxicity_model: str = "unitary/toxic-bert"
    detector_model: str = Field(
        default="openai-community/roberta-base-openai-detector",
        description="Synthetic-text detector; empty string disables the detector call",
    )
    detector_positive_label: str = Field(
        default="Fake",
        description="Detector label whose score means machine-generated",
    )
    toxicity_label: str = "toxic"

    timeout: float = Field(
        default=5.0,
        gt=0.0,
        le=60.0,
        description="Seconds before a classification call is abandoned",
    )
    circuit_failure_threshold: int = Field(default=5, ge=1)
    circuit_recovery_timeout: float = Field(default=60.0, ge=1.0)

    detector_weight: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Multiplier on detector confidence before combining with local indicators",
    )
    detector_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    toxicity_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
