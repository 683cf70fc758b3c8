"""Actor records as stored in the ``users`` and ``vendors`` tables.

Both tables share one column layout. A ``SellerRef`` names which table an
identifier lives in so lookups never have to probe both.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

ActorKind = Literal["user", "vendor"]

VALID_ACTOR_KINDS: frozenset[str] = frozenset({"user", "vendor"})

RiskLevel = Literal["low", "medium", "high"]

VALID_RISK_LEVELS: frozenset[str] = frozenset({"low", "medium", "high"})

ACTOR_TABLES: dict[str, str] = {
    "user": "users",
    "vendor": "vendors",
}


@dataclass(frozen=True)
class SellerRef:
    """Tagged reference to an actor row: ``kind`` picks the table."""

    kind: str
    id: str

    def __post_init__(self) -> None:
        if self.kind not in VALID_ACTOR_KINDS:
            raise ValueError(
                f"Invalid actor kind {self.kind!r}. "
                f"Must be one of: {sorted(VALID_ACTOR_KINDS)}"
            )

    @property
    def table(self) -> str:
        return ACTOR_TABLES[self.kind]

    def __str__(self) -> str:
        return f"{self.kind}:{self.id}"


@dataclass
class Actor:
    """A user or vendor account.

    Attributes:
        id: Actor identifier.
        kind: Which table the actor lives in.
        username: Display name.
        created_at: Account creation time, source of account age.
        ip_address: Network address recorded at registration.
        transaction_count: Completed transactions.
        trust_score: Current trust score, always within [0, 100].
        risk_level: Risk tier derived from the trust score.
        typing_cadence: Stored keystroke intervals in milliseconds.
    """

    id: str
    kind: str = "user"
    username: str = ""
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    ip_address: str | None = None
    transaction_count: int = 0
    account_age: int = 0
    trust_score: int = 50
    risk_level: str = "medium"
    typing_cadence: list[int] = field(default_factory=list)
    total_sales: int = 0
    total_returns: int = 0
    overall_return_rate: float = 0.0

    def __post_init__(self) -> None:
        if self.kind not in VALID_ACTOR_KINDS:
            raise ValueError(
                f"Invalid actor kind {self.kind!r}. "
                f"Must be one of: {sorted(VALID_ACTOR_KINDS)}"
            )
        if self.risk_level not in VALID_RISK_LEVELS:
            raise ValueError(
                f"Invalid risk_level {self.risk_level!r}. "
                f"Must be one of: {sorted(VALID_RISK_LEVELS)}"
            )
        self.trust_score = max(0, min(100, int(self.trust_score)))

    @property
    def ref(self) -> SellerRef:
        return SellerRef(kind=self.kind, id=self.id)

    def account_age_days(self, now: datetime | None = None) -> int:
        """Whole days since account creation."""
        now = now or datetime.now(timezone.utc)
        return max(0, (now - self.created_at).days)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "kind": self.kind,
            "username": self.username,
            "created_at": self.created_at.isoformat(),
            "ip_address": self.ip_address,
            "transaction_count": self.transaction_count,
            "account_age": self.account_age,
            "trust_score": self.trust_score,
            "risk_level": self.risk_level,
            "typing_cadence": list(self.typing_cadence),
            "total_sales": self.total_sales,
            "total_returns": self.total_returns,
            "overall_return_rate": self.overall_return_rate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Actor":
        """Create an Actor from a dictionary or database row mapping."""
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        elif created_at is None:
            created_at = datetime.now(timezone.utc)

        cadence = data.get("typing_cadence") or []
        if isinstance(cadence, str):
            cadence = json.loads(cadence)

        return cls(
            id=data["id"],
            kind=data.get("kind", "user"),
            username=data.get("username", ""),
            created_at=created_at,
            ip_address=data.get("ip_address"),
            transaction_count=data.get("transaction_count", 0),
            account_age=data.get("account_age", 0),
            trust_score=data.get("trust_score", 50),
            risk_level=data.get("risk_level", "medium"),
            typing_cadence=[int(v) for v in cadence],
            total_sales=data.get("total_sales", 0),
            total_returns=data.get("total_returns", 0),
            overall_return_rate=data.get("overall_return_rate", 0.0),
        )
