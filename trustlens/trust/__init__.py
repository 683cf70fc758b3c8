"""Actor trust scoring.

Components:
- IPCollisionDetector: counts accounts sharing a registration address
- TrustScoreCalculator: multi-factor trust score with persistence
"""

from trustlens.trust.calculator import TrustScoreCalculator, risk_level_for
from trustlens.trust.config import TrustConfig
from trustlens.trust.ip_collision import IPCollisionDetector
from trustlens.trust.schemas import IPCollisionResult, SellerTrustResult, TrustScoreResult

__all__ = [
    "IPCollisionDetector",
    "IPCollisionResult",
    "SellerTrustResult",
    "TrustConfig",
    "TrustScoreCalculator",
    "TrustScoreResult",
    "risk_level_for",
]
