"""Alert emitter configuration.

Controls deduplication windows, per-severity rate limits, and trigger
thresholds for all alert types. All settings can be overridden via
``ALERTS_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AlertConfig(BaseSettings):
    """Configuration for the alert emitter."""

    model_config = SettingsConfigDict(
        env_prefix="ALERTS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Deduplication: suppress repeats of (target, alert_type)
    dedup_ttl_hours: int = Field(
        default=4,
        ge=1,
        le=168,
        description="Hours to suppress duplicate alerts for the same target + type",
    )

    # Per-severity daily rate limits (0 = unlimited)
    daily_limit_critical: int = Field(default=0, ge=0)
    daily_limit_high: int = Field(default=50, ge=0)
    daily_limit_medium: int = Field(default=100, ge=0)
    daily_limit_low: int = Field(default=0, ge=0)

    # Actor triggers
    new_account_max_days: int = Field(
        default=7,
        ge=1,
        description="Accounts younger than this are checked for rapid activity",
    )
    rapid_activity_min_transactions: int = Field(
        default=10,
        ge=1,
        description="Transactions above this on a new account raise rapid_activity",
    )
    shared_address_min_accounts: int = Field(
        default=3,
        ge=2,
        description="Total accounts on one address that raise multiple_accounts_same_ip",
    )
    low_trust_threshold: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Trust scores below this raise low_trust_score",
    )
    critical_trust_threshold: int = Field(
        default=15,
        ge=0,
        le=100,
        description="Trust scores below this make low_trust_score critical",
    )

    # Review triggers
    fake_review_max_score: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Fake reviews scoring at or below this raise a critical alert",
    )
