"""Result models for actor and seller trust scoring."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from trustlens.behavior.schemas import BehaviorClassification

AddressRisk = Literal["low", "high", "unknown"]


class IPCollisionResult(BaseModel):
    """How many other accounts share an actor's registration address."""

    ip_address: str | None = None
    other_account_count: int = Field(default=0, ge=0)
    other_actor_ids: list[str] = Field(default_factory=list)
    total_accounts: int = Field(default=0, ge=0, description="Other accounts plus the caller")
    risk_level: AddressRisk = "unknown"
    score_adjustment: int = 0
    recent_account_count: int = Field(
        default=0,
        ge=0,
        description="Accounts created from the address inside the rolling window",
    )
    rapid_account_creation: bool = False

    @property
    def status(self) -> str:
        if self.ip_address is None:
            return "No IP recorded"
        if self.other_account_count == 0:
            return "Unique IP"
        return f"Shared IP ({self.total_accounts} users)"


class TrustScoreResult(BaseModel):
    """Outcome of one actor trust recomputation."""

    actor_id: str
    kind: Literal["user", "vendor"] = "user"
    trust_score: int = Field(ge=0, le=100)
    risk_level: Literal["low", "medium", "high"]
    account_age_days: int = Field(ge=0)
    transaction_count: int = Field(ge=0)
    components: dict[str, float] = Field(
        default_factory=dict,
        description="Signed contribution of each factor before clamping",
    )
    ip_collision: IPCollisionResult = Field(default_factory=IPCollisionResult)
    behavior: BehaviorClassification | None = Field(
        default=None,
        description="Classification of the stored typing cadence, when one is recorded",
    )
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SellerTrustResult(BaseModel):
    """Seller trust derived from product return rates."""

    seller_kind: Literal["user", "vendor"]
    seller_id: str
    trust_score: int = Field(ge=0, le=100)
    total_sales: int = Field(ge=0)
    total_returns: int = Field(ge=0)
    overall_return_rate: float = Field(ge=0.0, description="Returned units as a percentage of sold")
    product_count: int = Field(ge=0)
