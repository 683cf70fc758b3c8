"""Inputs and outputs of the authenticity decision engine."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


class BehavioralMetrics(BaseModel):
    """Optional signal bundle submitted alongside a review."""

    ip_address: str | None = None
    user_agent: str | None = None
    device_fingerprint: str | None = None
    purchase_verified: bool = False
    order_trust_score: float | None = Field(default=None, ge=0.0, le=100.0)
    typing_intervals: list[int] = Field(default_factory=list)
    pointer_intervals: list[int] = Field(default_factory=list)


class ReviewerHistory(BaseModel):
    """What is known about the reviewer's past reviews."""

    total_reviews: int = Field(default=0, ge=0)
    avg_review_length: float | None = Field(default=None, ge=0.0, description="Mean words per review")
    recent_review_count: int = Field(default=0, ge=0)


class AuthenticityResult(BaseModel):
    """Per-review verdict. Re-running on the same review replaces the previous one."""

    review_id: str
    score: int = Field(ge=0, le=100)
    is_synthetic: bool
    confidence: float = Field(ge=0.0, le=100.0)
    reason_codes: list[str] = Field(default_factory=list)
    risk_tier: Literal["low", "medium", "high"]
    flags: list[str] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)
    adjustments: dict[str, float] = Field(default_factory=dict)
    decided_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
