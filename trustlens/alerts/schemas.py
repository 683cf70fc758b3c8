"""Schema definitions for alert records.

Maps 1:1 to the ``alerts`` database table. Each alert names a target
(an actor or a review) and the condition detected on it: bot-like typing,
rapid activity on a new account, shared or rapidly reused addresses, a
trust score crossing its floor, or a review judged fake.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

AlertType = Literal[
    "suspicious_typing",
    "rapid_activity",
    "multiple_accounts_same_ip",
    "rapid_account_creation",
    "low_trust_score",
    "fake_review",
]

VALID_ALERT_TYPES: frozenset[str] = frozenset({
    "suspicious_typing",
    "rapid_activity",
    "multiple_accounts_same_ip",
    "rapid_account_creation",
    "low_trust_score",
    "fake_review",
})

VALID_TARGET_TYPES: frozenset[str] = frozenset({"user", "vendor", "review"})

AlertSeverity = Literal["low", "medium", "high", "critical"]

VALID_SEVERITIES: frozenset[str] = frozenset({"low", "medium", "high", "critical"})

AlertStatus = Literal["active", "resolved", "dismissed"]

VALID_STATUSES: frozenset[str] = frozenset({"active", "resolved", "dismissed"})


@dataclass
class Alert:
    """A persisted alert record from the alerts table.

    Attributes:
        alert_id: UUID4 identifier.
        alert_type: What condition was detected.
        target_type: Kind of entity the alert is about.
        target_id: Identifier of that entity.
        severity: Urgency level.
        title: Short human-readable summary.
        description: Detailed description of the condition.
        data: JSONB payload with trigger-specific context.
        status: Lifecycle state; only resolve/dismiss change it.
        created_at: When the alert was raised.
    """

    alert_type: str
    target_type: str
    target_id: str
    severity: str
    title: str
    description: str
    alert_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    data: dict[str, Any] = field(default_factory=dict)
    status: str = "active"
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self) -> None:
        if self.alert_type not in VALID_ALERT_TYPES:
            raise ValueError(
                f"Invalid alert_type {self.alert_type!r}. "
                f"Must be one of: {sorted(VALID_ALERT_TYPES)}"
            )
        if self.target_type not in VALID_TARGET_TYPES:
            raise ValueError(
                f"Invalid target_type {self.target_type!r}. "
                f"Must be one of: {sorted(VALID_TARGET_TYPES)}"
            )
        if self.severity not in VALID_SEVERITIES:
            raise ValueError(
                f"Invalid severity {self.severity!r}. "
                f"Must be one of: {sorted(VALID_SEVERITIES)}"
            )
        if self.status not in VALID_STATUSES:
            raise ValueError(
                f"Invalid status {self.status!r}. "
                f"Must be one of: {sorted(VALID_STATUSES)}"
            )

    @property
    def target(self) -> str:
        return f"{self.target_type}:{self.target_id}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "alert_id": self.alert_id,
            "alert_type": self.alert_type,
            "target_type": self.target_type,
            "target_id": self.target_id,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
            "data": self.data,
            "status": self.status,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Alert":
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        elif created_at is None:
            created_at = datetime.now(timezone.utc)

        payload = data.get("data", {})
        if isinstance(payload, str):
            payload = json.loads(payload)

        return cls(
            alert_id=data.get("alert_id", str(uuid.uuid4())),
            alert_type=data["alert_type"],
            target_type=data["target_type"],
            target_id=data["target_id"],
            severity=data["severity"],
            title=data["title"],
            description=data["description"],
            data=payload,
            status=data.get("status", "active"),
            created_at=created_at,
        )
