"""Result models for behavioral cadence analysis."""

from typing import Literal

from pydantic import BaseModel, Field

BehaviorLabel = Literal["human", "suspicious", "bot", "insufficient_data"]


class TimingStatistics(BaseModel):
    """Distribution statistics over a cadence sample (population moments)."""

    count: int = Field(ge=0)
    mean: float
    variance: float = Field(ge=0.0)
    std_dev: float = Field(ge=0.0)
    skewness: float = 0.0
    kurtosis: float = Field(default=0.0, description="Excess kurtosis")


class PatternFlags(BaseModel):
    """Qualitative cadence patterns."""

    has_natural_rhythm: bool
    has_acceleration: bool
    has_pauses: bool
    consistency: float = Field(ge=0.0, le=1.0)


class PointerCorrelation(BaseModel):
    """Agreement between keystroke and pointer interval sequences."""

    correlation_score: float = Field(ge=0.0, le=1.0)
    is_natural_correlation: bool


class BehaviorFeatures(BaseModel):
    """Everything extracted from one behavioral sample."""

    statistics: TimingStatistics
    patterns: PatternFlags
    pointer: PointerCorrelation | None = None


class BehaviorClassification(BaseModel):
    """Bot/human verdict for a behavioral sample.

    ``bot_score`` is the raw additive score; ``confidence`` is that score
    as a percentage capped at 95. ``report`` holds human-readable findings.
    """

    label: BehaviorLabel
    bot_score: float = Field(default=0.0, ge=0.0)
    confidence: float = Field(default=0.0, ge=0.0, le=100.0)
    risk_level: Literal["low", "medium", "high", "unknown"] = "unknown"
    risk_factors: list[str] = Field(default_factory=list)
    ip_risk_contribution: float = 0.0
    features: BehaviorFeatures | None = None
    report: list[str] = Field(default_factory=list)

    @property
    def is_insufficient(self) -> bool:
        return self.label == "insufficient_data"
