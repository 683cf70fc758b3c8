"""Schema definitions for review authentication records.

One ``ReviewAuthenticationRecord`` per review maps to a row of the
``review_authentications`` table. Steps, votes, the final decision and
fraud indicators are stored as JSONB and rebuilt into the dataclasses
below. Step details are a closed set of types selected by step name.
"""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from trustlens.errors import ValidationError

WorkflowStage = Literal["initial_analysis", "community_review", "expert_validation", "completed"]

STAGE_ORDER: tuple[str, ...] = (
    "initial_analysis",
    "community_review",
    "expert_validation",
    "completed",
)

STAGE_RANK: dict[str, int] = {stage: i for i, stage in enumerate(STAGE_ORDER)}

DecisionStatus = Literal["authentic", "suspicious", "fake", "requires_investigation"]

VALID_DECISION_STATUSES: frozenset[str] = frozenset({
    "authentic",
    "suspicious",
    "fake",
    "requires_investigation",
})

StepName = Literal["initial_analysis", "behavioral_analysis", "community_validation", "manual_decision"]

VALID_STEP_STATUSES: frozenset[str] = frozenset({"pending", "passed", "failed"})

VALID_SEVERITIES: frozenset[str] = frozenset({"low", "medium", "high", "critical"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return _utcnow()


def validate_status(status: str) -> str:
    """Raise ValidationError unless ``status`` is a decision status."""
    if status not in VALID_DECISION_STATUSES:
        raise ValidationError(
            f"Invalid decision status {status!r}. "
            f"Must be one of: {sorted(VALID_DECISION_STATUSES)}"
        )
    return status


# ── Step details ───────────────────────────────────────────


@dataclass
class InitialAnalysisDetails:
    text_score: int
    authenticity_score: int
    is_synthetic: bool
    confidence: float
    risk_tier: str
    reason_codes: list[str] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)
    external_status: str = "skipped"


@dataclass
class BehavioralAnalysisDetails:
    label: str
    bot_score: float
    confidence: float
    risk_factors: list[str] = field(default_factory=list)
    other_accounts_on_ip: int | None = None
    rapid_account_creation: bool = False
    report: list[str] = field(default_factory=list)


@dataclass
class CommunityValidationDetails:
    total_votes: int
    majority_vote: str | None = None
    consensus_confidence: int = 0
    vote_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class ManualDecisionDetails:
    status: str
    decided_by: str
    reasoning: list[str] = field(default_factory=list)


STEP_DETAIL_TYPES: dict[str, type] = {
    "initial_analysis": InitialAnalysisDetails,
    "behavioral_analysis": BehavioralAnalysisDetails,
    "community_validation": CommunityValidationDetails,
    "manual_decision": ManualDecisionDetails,
}

StepDetails = (
    InitialAnalysisDetails
    | BehavioralAnalysisDetails
    | CommunityValidationDetails
    | ManualDecisionDetails
)


# ── Record components ──────────────────────────────────────


@dataclass
class AuthenticationStep:
    """One named step of the workflow; at most one per name per record."""

    step: str
    status: str
    score: int
    details: StepDetails
    processed_by: str = "system"
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        expected = STEP_DETAIL_TYPES.get(self.step)
        if expected is None:
            raise ValueError(
                f"Invalid step {self.step!r}. Must be one of: {sorted(STEP_DETAIL_TYPES)}"
            )
        if not isinstance(self.details, expected):
            raise ValueError(
                f"Step {self.step!r} requires {expected.__name__}, "
                f"got {type(self.details).__name__}"
            )
        if self.status not in VALID_STEP_STATUSES:
            raise ValueError(
                f"Invalid step status {self.status!r}. "
                f"Must be one of: {sorted(VALID_STEP_STATUSES)}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "status": self.status,
            "score": self.score,
            "details": asdict(self.details),
            "processed_by": self.processed_by,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthenticationStep":
        details_type = STEP_DETAIL_TYPES[data["step"]]
        return cls(
            step=data["step"],
            status=data["status"],
            score=data.get("score", 0),
            details=details_type(**data.get("details", {})),
            processed_by=data.get("processed_by", "system"),
            timestamp=_parse_time(data.get("timestamp")),
        )


@dataclass
class FinalDecision:
    status: str
    confidence: float
    decided_by: str
    reasoning: list[str] = field(default_factory=list)
    decided_at: datetime = field(default_factory=_utcnow)
    appealable: bool = False

    def __post_init__(self) -> None:
        validate_status(self.status)

    @property
    def is_automated(self) -> bool:
        return self.decided_by == "system"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "confidence": self.confidence,
            "decided_by": self.decided_by,
            "reasoning": list(self.reasoning),
            "decided_at": self.decided_at.isoformat(),
            "appealable": self.appealable,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FinalDecision":
        return cls(
            status=data["status"],
            confidence=data.get("confidence", 0),
            decided_by=data.get("decided_by", "system"),
            reasoning=list(data.get("reasoning", [])),
            decided_at=_parse_time(data.get("decided_at")),
            appealable=data.get("appealable", False),
        )


@dataclass
class CommunityVote:
    """A single voter's judgement. Append-only; one per voter per review."""

    voter_id: str
    choice: str
    confidence: int
    reasoning: str = ""
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.voter_id:
            raise ValidationError("voter_id is required")
        validate_status(self.choice)
        if not 0 <= self.confidence <= 100:
            raise ValidationError(
                f"Vote confidence must be between 0 and 100, got {self.confidence}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "voter_id": self.voter_id,
            "choice": self.choice,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommunityVote":
        return cls(
            voter_id=data["voter_id"],
            choice=data["choice"],
            confidence=data["confidence"],
            reasoning=data.get("reasoning", ""),
            timestamp=_parse_time(data.get("timestamp")),
        )


@dataclass
class FraudIndicator:
    type: str
    severity: str
    description: str

    def __post_init__(self) -> None:
        if self.severity not in VALID_SEVERITIES:
            raise ValueError(
                f"Invalid severity {self.severity!r}. "
                f"Must be one of: {sorted(VALID_SEVERITIES)}"
            )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FraudIndicator":
        return cls(**data)


@dataclass
class ReviewAuthenticationRecord:
    """Workflow state for one review.

    Attributes:
        review_id: Owned review (unique).
        auth_id: Record identifier used by manual decision overrides.
        overall_authentication_score: Fused text/behavior score.
        steps: Ordered steps, one per step name.
        final_decision: Current decision, if any.
        current_stage: Workflow stage; only ever moves forward.
        fraud_indicators: Indicators from the latest analysis.
        votes: Community votes in arrival order.
    """

    review_id: str
    auth_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    overall_authentication_score: int = 0
    steps: list[AuthenticationStep] = field(default_factory=list)
    final_decision: FinalDecision | None = None
    current_stage: str = "initial_analysis"
    fraud_indicators: list[FraudIndicator] = field(default_factory=list)
    votes: list[CommunityVote] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if self.current_stage not in STAGE_RANK:
            raise ValueError(
                f"Invalid stage {self.current_stage!r}. Must be one of: {list(STAGE_ORDER)}"
            )

    def get_step(self, name: str) -> AuthenticationStep | None:
        for step in self.steps:
            if step.step == name:
                return step
        return None

    def upsert_step(self, step: AuthenticationStep) -> None:
        """Replace the step with the same name in place, or append it."""
        for i, existing in enumerate(self.steps):
            if existing.step == step.step:
                self.steps[i] = step
                return
        self.steps.append(step)

    def advance_to(self, stage: str) -> bool:
        """Move to ``stage`` if it is later than the current one.

        Returns:
            True if the stage changed.
        """
        if STAGE_RANK[stage] <= STAGE_RANK[self.current_stage]:
            return False
        self.current_stage = stage
        return True

    def has_voted(self, voter_id: str) -> bool:
        return any(vote.voter_id == voter_id for vote in self.votes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "auth_id": self.auth_id,
            "review_id": self.review_id,
            "overall_authentication_score": self.overall_authentication_score,
            "authentication_steps": [s.to_dict() for s in self.steps],
            "final_decision": self.final_decision.to_dict() if self.final_decision else None,
            "current_stage": self.current_stage,
            "fraud_indicators": [f.to_dict() for f in self.fraud_indicators],
            "community_votes": [v.to_dict() for v in self.votes],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReviewAuthenticationRecord":
        decision = data.get("final_decision")
        return cls(
            auth_id=data["auth_id"],
            review_id=data["review_id"],
            overall_authentication_score=data.get("overall_authentication_score", 0),
            steps=[AuthenticationStep.from_dict(s) for s in data.get("authentication_steps", [])],
            final_decision=FinalDecision.from_dict(decision) if decision else None,
            current_stage=data.get("current_stage", "initial_analysis"),
            fraud_indicators=[
                FraudIndicator.from_dict(f) for f in data.get("fraud_indicators", [])
            ],
            votes=[CommunityVote.from_dict(v) for v in data.get("community_votes", [])],
            created_at=_parse_time(data.get("created_at")),
            updated_at=_parse_time(data.get("updated_at")),
        )
