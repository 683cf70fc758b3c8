"""Trust score configuration.

All settings can be overridden via ``TRUST_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrustConfig(BaseSettings):
    """Constants for the actor trust formula and address collision checks."""

    model_config = SettingsConfigDict(
        env_prefix="TRUST_",
        case_sensitive=False,
        extra="ignore",
    )

    base_score: float = Field(default=50.0, ge=0.0, le=100.0)

    # Account age and transaction history
    age_points_per_day: float = Field(default=2.0, ge=0.0)
    age_points_cap: float = Field(default=20.0, ge=0.0)
    transaction_points_each: float = Field(default=0.5, ge=0.0)
    transaction_points_cap: float = Field(default=15.0, ge=0.0)

    # Address collision
    unique_address_bonus: int = Field(
        default=10,
        description="Adjustment when no other account shares the address",
    )
    crowded_address_penalty: int = Field(
        default=-15,
        description="Adjustment when two or more other accounts share the address",
    )
    rapid_creation_window_hours: int = Field(
        default=24,
        ge=1,
        le=168,
        description="Rolling window for counting accounts created from one address",
    )
    rapid_creation_threshold: int = Field(
        default=3,
        ge=2,
        description="Accounts (caller included) within the window that flag rapid creation",
    )

    # Behavioral sample
    behavior_min_samples: int = Field(default=5, ge=1)
    natural_variance_low: float = Field(default=100.0, ge=0.0)
    natural_variance_high: float = Field(default=10000.0, ge=0.0)
    natural_variance_bonus: float = Field(default=10.0, ge=0.0)

    # Seller trust from return rates
    seller_base_score: float = Field(default=80.0, ge=0.0, le=100.0)
    seller_return_rate_weight: float = Field(
        default=0.5,
        ge=0.0,
        description="Points removed per percentage point of returned units",
    )

    # Risk tiers
    low_risk_min_score: int = Field(default=70, ge=0, le=100)
    medium_risk_min_score: int = Field(default=40, ge=0, le=100)
