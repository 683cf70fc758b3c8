"""Review record as stored in the ``reviews`` table."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from trustlens.authenticity.schemas import BehavioralMetrics


@dataclass
class Review:
    """A submitted product review.

    Attributes:
        id: Review identifier.
        product_id: Reviewed product.
        reviewer_id: Authoring user.
        text: Review body.
        rating: Star rating, if given.
        behavioral_metrics: Signal bundle captured with the submission.
        authenticity_score: Last persisted authenticity score.
        is_ai_generated: Last persisted synthetic-text verdict.
        linguistic_analysis: Last persisted linguistic summary.
        created_at: Submission time.
    """

    id: str
    product_id: str
    reviewer_id: str
    text: str
    rating: int | None = None
    behavioral_metrics: BehavioralMetrics = field(default_factory=BehavioralMetrics)
    authenticity_score: int | None = None
    is_ai_generated: bool = False
    linguistic_analysis: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Review":
        metrics = data.get("behavioral_metrics") or {}
        if isinstance(metrics, str):
            metrics = json.loads(metrics)
        analysis = data.get("linguistic_analysis") or {}
        if isinstance(analysis, str):
            analysis = json.loads(analysis)
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        elif created_at is None:
            created_at = datetime.now(timezone.utc)
        return cls(
            id=data["id"],
            product_id=data["product_id"],
            reviewer_id=data["reviewer_id"],
            text=data["text"],
            rating=data.get("rating"),
            behavioral_metrics=BehavioralMetrics.model_validate(metrics),
            authenticity_score=data.get("authenticity_score"),
            is_ai_generated=bool(data.get("is_ai_generated", False)),
            linguistic_analysis=analysis,
            created_at=created_at,
        )
