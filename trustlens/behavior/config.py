"""Behavioral biometrics configuration.

All settings can be overridden via ``BEHAVIOR_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BehaviorConfig(BaseSettings):
    """Thresholds for keystroke and pointer cadence classification."""

    model_config = SettingsConfigDict(
        env_prefix="BEHAVIOR_",
        case_sensitive=False,
        extra="ignore",
    )

    min_samples: int = Field(
        default=5,
        ge=2,
        description="Fewer intervals than this yields an insufficient_data result",
    )

    # Pattern detection
    rhythm_delta_variance: float = Field(
        default=10.0,
        ge=0.0,
        description="Variance of successive deltas above which rhythm counts as natural",
    )
    acceleration_threshold_ms: float = Field(default=5.0, ge=0.0)
    acceleration_min_fraction: float = Field(default=0.3, ge=0.0, le=1.0)
    pause_mean_multiplier: float = Field(default=1.5, gt=0.0)
    consistency_scale_ms: float = Field(default=50.0, gt=0.0)

    # Score contributions
    low_variance_threshold: float = Field(default=25.0, ge=0.0)
    perfect_consistency_weight: float = 0.9
    low_variance_weight: float = 0.6
    no_rhythm_weight: float = 0.5
    uniform_acceleration_weight: float = 0.3
    no_pauses_weight: float = 0.4
    perfect_distribution_skew: float = Field(default=0.1, ge=0.0)
    perfect_distribution_weight: float = 0.3
    crowded_address_weight: float = 0.7
    shared_address_weight: float = 0.2

    # Labels
    bot_threshold: float = Field(default=0.7, ge=0.0)
    suspicious_threshold: float = Field(default=0.4, ge=0.0)
    max_confidence: float = Field(default=95.0, ge=0.0, le=100.0)

    # Pointer correlation
    pointer_match_ms: float = Field(default=20.0, ge=0.0)
    pointer_natural_fraction: float = Field(default=0.3, ge=0.0, le=1.0)
