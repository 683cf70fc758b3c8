"""Review authentication workflow configuration.

All settings can be overridden via ``WORKFLOW_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkflowConfig(BaseSettings):
    """Thresholds for automated decisions and community consensus."""

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_",
        case_sensitive=False,
        extra="ignore",
    )

    # Automated decisions on the fused score
    authentic_min_score: int = Field(
        default=75,
        ge=0,
        le=100,
        description="Fused score at or above which non-synthetic reviews are auto-approved",
    )
    fake_max_score: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Fused score at or below which reviews are auto-rejected",
    )
    investigation_min_score: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Undecided reviews at or above this need investigation, below are suspicious",
    )

    # Fusion of text and behavior scores
    text_weight: float = Field(default=0.7, ge=0.0, le=1.0)
    behavior_weight: float = Field(default=0.3, ge=0.0, le=1.0)

    # Community consensus
    quorum: int = Field(default=3, ge=1, description="Votes needed before consensus counts")
    consensus_min_confidence: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Mean voter confidence needed for the majority to decide",
    )

    # Reviewer history window
    recent_activity_days: int = Field(default=7, ge=1)
