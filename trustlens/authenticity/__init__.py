"""Per-review authenticity verdicts."""

from trustlens.authenticity.config import AuthenticityConfig
from trustlens.authenticity.engine import AuthenticityDecisionEngine
from trustlens.authenticity.schemas import AuthenticityResult, BehavioralMetrics, ReviewerHistory

__all__ = [
    "AuthenticityConfig",
    "AuthenticityDecisionEngine",
    "AuthenticityResult",
    "BehavioralMetrics",
    "ReviewerHistory",
]
