"""Decision engine configuration.

All settings can be overridden via ``AUTHENTICITY_*`` environment variables.
Penalties are negative, bonuses positive.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthenticityConfig(BaseSettings):
    """Signal adjustments applied on top of the text authenticity score."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHENTICITY_",
        case_sensitive=False,
        extra="ignore",
    )

    # Text quality
    short_review_words: int = Field(default=10, ge=1)
    short_review_penalty: float = -15.0
    low_vocabulary_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    low_vocabulary_penalty: float = -10.0
    high_repetition_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    high_repetition_penalty: float = -8.0

    # Sentiment and spam
    extreme_sentiment_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    extreme_sentiment_penalty: float = -5.0
    spam_penalty: float = -15.0

    # Reviewer history
    history_min_reviews: int = Field(
        default=10,
        ge=0,
        description="Reviews on record before length anomalies are judged",
    )
    length_deviation_threshold: float = Field(default=2.0, ge=0.0)
    length_anomaly_penalty: float = -8.0
    high_activity_reviews: int = Field(default=5, ge=0)
    high_activity_penalty: float = -7.0

    # Purchase
    purchase_verified_bonus: float = 10.0
    order_trust_threshold: float = Field(default=70.0, ge=0.0, le=100.0)
    order_trust_bonus: float = 5.0

    # Behavioral classification
    bot_penalty: float = -20.0
    suspicious_behavior_penalty: float = -10.0

    # Risk tiers
    high_risk_below: int = Field(default=40, ge=0, le=100)
    medium_risk_below: int = Field(default=70, ge=0, le=100)
