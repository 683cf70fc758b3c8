"""Multi-factor actor trust score.

Score = base + account age + transaction history + address collision
+ behavioral variance + activity rate + age and transaction milestones,
clamped to [0, 100] and rounded half-up. Each recomputation writes score,
risk tier, age and transaction count back in one UPDATE.
"""

import logging
import time
from collections.abc import Sequence
from datetime import datetime, timezone

import numpy as np

from trustlens.actors.repository import ActorRepository
from trustlens.actors.schemas import Actor, SellerRef
from trustlens.behavior.classifier import BotBehaviorClassifier
from trustlens.behavior.schemas import BehaviorClassification
from trustlens.errors import NotFoundError, ValidationError
from trustlens.observability.metrics import get_metrics
from trustlens.scoring import to_score
from trustlens.trust.config import TrustConfig
from trustlens.trust.ip_collision import IPCollisionDetector
from trustlens.trust.schemas import IPCollisionResult, SellerTrustResult, TrustScoreResult

logger = logging.getLogger(__name__)


def risk_level_for(score: int, config: TrustConfig | None = None) -> str:
    """Map a trust score to its risk tier."""
    cfg = config or TrustConfig()
    if score >= cfg.low_risk_min_score:
        return "low"
    if score >= cfg.medium_risk_min_score:
        return "medium"
    return "high"


class TrustScoreCalculator:
    """Computes and persists actor trust scores.

    Usage:
        calculator = TrustScoreCalculator(ActorRepository(db))
        result = await calculator.recalculate(SellerRef("user", "u1"))
    """

    def __init__(
        self,
        repository: ActorRepository,
        ip_detector: IPCollisionDetector | None = None,
        config: TrustConfig | None = None,
        behavior_classifier: BotBehaviorClassifier | None = None,
    ) -> None:
        self._repo = repository
        self._config = config or TrustConfig()
        self._ip_detector = ip_detector or IPCollisionDetector(repository, self._config)
        self._behavior = behavior_classifier or BotBehaviorClassifier()

    def behavior_adjustment(self, typing_cadence: Sequence[int]) -> float:
        """Bonus when a stored cadence sample shows human-range variance.

        Samples shorter than the minimum contribute nothing.
        """
        cfg = self._config
        if len(typing_cadence) < cfg.behavior_min_samples:
            return 0.0
        variance = float(np.var(np.asarray(typing_cadence, dtype=float)))
        if cfg.natural_variance_low < variance < cfg.natural_variance_high:
            return cfg.natural_variance_bonus
        return 0.0

    def classify_cadence(self, actor: Actor) -> BehaviorClassification | None:
        """Classify the actor's stored typing cadence.

        Returns None when no cadence is stored or the sample holds
        non-positive intervals.
        """
        if not actor.typing_cadence:
            return None
        try:
            return self._behavior.classify(actor.typing_cadence)
        except ValidationError as e:
            logger.warning("Unusable typing cadence for %s: %s", actor.ref, e)
            return None

    def calculate(
        self,
        actor: Actor,
        ip_result: IPCollisionResult,
        *,
        now: datetime | None = None,
    ) -> TrustScoreResult:
        """Compute the trust score for an actor without persisting it."""
        cfg = self._config
        age = actor.account_age_days(now)
        transactions = max(0, actor.transaction_count)

        components: dict[str, float] = {
            "base": cfg.base_score,
            "account_age": min(cfg.age_points_per_day * age, cfg.age_points_cap),
            "transactions": min(
                cfg.transaction_points_each * transactions, cfg.transaction_points_cap
            ),
            "ip_collision": float(ip_result.score_adjustment),
            "behavior": self.behavior_adjustment(actor.typing_cadence),
        }

        activity = 0.0
        if transactions > 0 and age > 0:
            rate = transactions / age
            if 0.5 < rate < 2:
                activity = 5.0
            elif rate > 5:
                activity = -10.0
        components["activity_rate"] = activity

        if age > 365:
            components["age_milestone"] = 10.0
        elif age > 90:
            components["age_milestone"] = 5.0
        elif age < 7:
            components["age_milestone"] = -5.0
        else:
            components["age_milestone"] = 0.0

        if transactions > 20:
            components["transaction_milestone"] = 5.0
        elif transactions > 5:
            components["transaction_milestone"] = 3.0
        elif transactions == 0:
            components["transaction_milestone"] = -5.0
        else:
            components["transaction_milestone"] = 0.0

        raw = sum(components.values())
        score = to_score(raw)

        return TrustScoreResult(
            actor_id=actor.id,
            kind=actor.kind,
            trust_score=score,
            risk_level=risk_level_for(score, cfg),
            account_age_days=age,
            transaction_count=transactions,
            components=components,
            ip_collision=ip_result,
            behavior=self.classify_cadence(actor),
        )

    async def recalculate(
        self,
        ref: SellerRef | str,
        *,
        now: datetime | None = None,
    ) -> TrustScoreResult:
        """Load an actor, recompute its trust score and persist it.

        Args:
            ref: Tagged actor reference, or a bare user ID.
            now: Reference time (defaults to the current UTC time).

        Raises:
            NotFoundError: If the actor does not exist.
        """
        if isinstance(ref, str):
            ref = SellerRef(kind="user", id=ref)

        start = time.perf_counter()
        actor = await self._repo.get(ref)
        if actor is None:
            raise NotFoundError("Actor", str(ref))

        now = now or datetime.now(timezone.utc)
        ip_result = await self._ip_detector.detect(
            actor.id, actor.ip_address, kind=actor.kind, now=now,
        )
        result = self.calculate(actor, ip_result, now=now)

        updated = await self._repo.update_trust_fields(
            ref,
            trust_score=result.trust_score,
            risk_level=result.risk_level,
            account_age=result.account_age_days,
            transaction_count=result.transaction_count,
        )
        if not updated:
            raise NotFoundError("Actor", str(ref))

        metrics = get_metrics()
        metrics.record_trust_score(result.risk_level)
        metrics.analysis_latency.labels(stage="trust").observe(time.perf_counter() - start)

        logger.info(
            "Trust score for %s: %d (%s risk)", ref, result.trust_score, result.risk_level,
        )
        return result

    async def calculate_seller_trust(self, ref: SellerRef) -> SellerTrustResult | None:
        """Derive seller trust from return rates across the seller's products.

        The result is written to the table selected by ``ref.kind``.

        Returns:
            SellerTrustResult, or None when the seller lists no products.

        Raises:
            NotFoundError: If the seller row does not exist.
        """
        sales = await self._repo.get_seller_sales(ref)
        if sales is None:
            logger.info("No products found for seller %s", ref)
            return None

        cfg = self._config
        sold = sales["total_sold"]
        returned = sales["total_returned"]
        return_rate = (returned / sold) * 100 if sold > 0 else 0.0
        raw = cfg.seller_base_score - return_rate * cfg.seller_return_rate_weight
        score = to_score(raw)

        updated = await self._repo.update_seller_trust(
            ref,
            trust_score=score,
            total_sales=sold,
            total_returns=returned,
            overall_return_rate=return_rate,
        )
        if not updated:
            raise NotFoundError("Seller", str(ref))

        logger.info(
            "Seller %s trust %d (return rate %.1f%% over %d products)",
            ref, score, return_rate, sales["product_count"],
        )
        return SellerTrustResult(
            seller_kind=ref.kind,
            seller_id=ref.id,
            trust_score=score,
            total_sales=sold,
            total_returns=returned,
            overall_return_rate=return_rate,
            product_count=sales["product_count"],
        )
