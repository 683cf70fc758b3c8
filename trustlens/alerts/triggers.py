"""Stateless trigger functions for alert detection.

Each function checks a single condition and returns an Alert if it holds,
or None otherwise. No I/O: dedup, rate limiting, persistence and
publishing live in AlertEmitter.
"""

from trustlens.alerts.config import AlertConfig
from trustlens.alerts.schemas import Alert
from trustlens.behavior.schemas import BehaviorClassification
from trustlens.trust.schemas import IPCollisionResult, TrustScoreResult


def check_suspicious_typing(
    kind: str,
    actor_id: str,
    behavior: BehaviorClassification,
) -> Alert | None:
    """Fire when a typing sample is classified as a bot."""
    if behavior.label != "bot":
        return None
    return Alert(
        alert_type="suspicious_typing",
        target_type=kind,
        target_id=actor_id,
        severity="high",
        title="Suspicious typing pattern",
        description="Typing pattern suggests automated behavior",
        data={
            "bot_score": behavior.bot_score,
            "confidence": behavior.confidence,
            "risk_factors": list(behavior.risk_factors),
        },
    )


def check_rapid_activity(result: TrustScoreResult, config: AlertConfig) -> Alert | None:
    """Fire when a new account already has a high transaction volume."""
    if result.account_age_days >= config.new_account_max_days:
        return None
    if result.transaction_count <= config.rapid_activity_min_transactions:
        return None
    return Alert(
        alert_type="rapid_activity",
        target_type=result.kind,
        target_id=result.actor_id,
        severity="medium",
        title="Rapid activity",
        description="High transaction volume for new account",
        data={
            "account_age_days": result.account_age_days,
            "transaction_count": result.transaction_count,
        },
    )


def check_shared_address(
    kind: str,
    actor_id: str,
    collision: IPCollisionResult,
    config: AlertConfig,
) -> Alert | None:
    """Fire when enough accounts share the actor's registration address."""
    if collision.ip_address is None:
        return None
    if collision.total_accounts < config.shared_address_min_accounts:
        return None
    return Alert(
        alert_type="multiple_accounts_same_ip",
        target_type=kind,
        target_id=actor_id,
        severity="high",
        title="Multiple accounts on one address",
        description=(
            f"{collision.total_accounts} accounts detected from IP {collision.ip_address}"
        ),
        data={
            "ip_address": collision.ip_address,
            "account_count": collision.total_accounts,
            "other_actor_ids": list(collision.other_actor_ids),
        },
    )


def check_rapid_account_creation(
    kind: str,
    actor_id: str,
    collision: IPCollisionResult,
) -> Alert | None:
    """Fire when the detector saw a burst of new accounts on one address."""
    if not collision.rapid_account_creation:
        return None
    return Alert(
        alert_type="rapid_account_creation",
        target_type=kind,
        target_id=actor_id,
        severity="critical",
        title="Rapid account creation",
        description=(
            f"{collision.recent_account_count} accounts created from same IP in 24 hours"
        ),
        data={
            "ip_address": collision.ip_address,
            "recent_account_count": collision.recent_account_count,
        },
    )


def check_low_trust(result: TrustScoreResult, config: AlertConfig) -> Alert | None:
    """Fire when a trust score falls below the configured floor."""
    if result.trust_score >= config.low_trust_threshold:
        return None
    severity = "critical" if result.trust_score < config.critical_trust_threshold else "high"
    return Alert(
        alert_type="low_trust_score",
        target_type=result.kind,
        target_id=result.actor_id,
        severity=severity,
        title="Low trust score",
        description=(
            f"Trust score {result.trust_score} is below {config.low_trust_threshold}"
        ),
        data={
            "trust_score": result.trust_score,
            "risk_level": result.risk_level,
        },
    )


def check_fake_review(
    review_id: str,
    score: int,
    decision_status: str | None,
    config: AlertConfig,
) -> Alert | None:
    """Fire when a review is decided fake; critical when its score is also at the floor."""
    if decision_status != "fake":
        return None
    severity = "critical" if score <= config.fake_review_max_score else "high"
    return Alert(
        alert_type="fake_review",
        target_type="review",
        target_id=review_id,
        severity=severity,
        title="Fake review detected",
        description=f"Review {review_id} judged fake with score {score}",
        data={
            "score": score,
            "decision": decision_status,
        },
    )


def check_actor_triggers(
    result: TrustScoreResult,
    config: AlertConfig,
    behavior: BehaviorClassification | None = None,
) -> list[Alert]:
    """Run every actor trigger against one trust recomputation."""
    candidates = [
        check_rapid_activity(result, config),
        check_shared_address(result.kind, result.actor_id, result.ip_collision, config),
        check_rapid_account_creation(result.kind, result.actor_id, result.ip_collision),
        check_low_trust(result, config),
    ]
    if behavior is not None:
        candidates.append(check_suspicious_typing(result.kind, result.actor_id, behavior))
    return [alert for alert in candidates if alert is not None]
