"""Alert emitter: filters trigger output, persists it and announces it.

Redis backs deduplication, the database backs rate limiting and
persistence, and every persisted alert is published as an
``alertRaised`` event. Trigger logic lives in ``triggers.py``.
"""

import logging
from typing import Any

from trustlens.alerts.config import AlertConfig
from trustlens.alerts.repository import AlertRepository
from trustlens.alerts.schemas import Alert
from trustlens.alerts.triggers import check_actor_triggers, check_fake_review
from trustlens.behavior.schemas import BehaviorClassification
from trustlens.events.publisher import EventPublisher
from trustlens.observability.metrics import get_metrics
from trustlens.trust.schemas import TrustScoreResult

logger = logging.getLogger(__name__)


class AlertEmitter:
    """Side-channel notifier for scores that cross configured thresholds.

    Emission never fails the caller's operation: dedup and rate-limit
    lookups degrade to "allow", persistence failures are logged per alert
    and publishing is fire-and-forget.
    """

    def __init__(
        self,
        config: AlertConfig,
        alert_repo: AlertRepository,
        redis_client: Any | None = None,
        publisher: EventPublisher | None = None,
    ) -> None:
        self._config = config
        self._alert_repo = alert_repo
        self._redis = redis_client
        self._publisher = publisher

    async def _is_duplicate(self, alert: Alert) -> bool:
        """Check Redis SET NX for a recent alert of the same type on the same target.

        Key format: ``alert:dedup:{target_type}:{target_id}:{alert_type}``.
        """
        if self._redis is None:
            return False

        key = f"alert:dedup:{alert.target_type}:{alert.target_id}:{alert.alert_type}"
        ttl_seconds = self._config.dedup_ttl_hours * 3600

        try:
            was_set = await self._redis.set(key, "1", nx=True, ex=ttl_seconds)
            return not was_set
        except Exception as e:
            logger.warning("Redis dedup check failed, allowing alert: %s", e)
            return False

    async def _is_rate_limited(self, severity: str) -> bool:
        limit_map = {
            "critical": self._config.daily_limit_critical,
            "high": self._config.daily_limit_high,
            "medium": self._config.daily_limit_medium,
            "low": self._config.daily_limit_low,
        }
        daily_limit = limit_map.get(severity, 0)
        if daily_limit == 0:
            return False

        try:
            count = await self._alert_repo.count_today_by_severity(severity)
            return count >= daily_limit
        except Exception as e:
            logger.warning("Rate limit check failed, allowing alert: %s", e)
            return False

    async def _filter_alert(self, alert: Alert) -> bool:
        if await self._is_duplicate(alert):
            logger.debug("Alert deduplicated: %s/%s", alert.target, alert.alert_type)
            return False
        if await self._is_rate_limited(alert.severity):
            logger.debug("Alert rate limited: %s severity", alert.severity)
            return False
        return True

    async def emit(self, candidates: list[Alert]) -> list[Alert]:
        """Filter, persist and publish candidate alerts.

        Returns:
            The alerts that were persisted.
        """
        if not candidates:
            return []

        filtered = [alert for alert in candidates if await self._filter_alert(alert)]
        if not filtered:
            logger.info("Alert emission: %d candidates, all filtered out", len(candidates))
            return []

        persisted = await self._alert_repo.create_batch(filtered)
        logger.info(
            "Alerts emitted: %d candidates, %d filtered, %d persisted",
            len(candidates),
            len(filtered),
            len(persisted),
        )

        metrics = get_metrics()
        for alert in persisted:
            metrics.record_alert(alert.severity)
            if self._publisher is not None:
                await self._publisher.alert_raised(
                    alert.alert_type,
                    alert.target,
                    alert.severity,
                    alert.description,
                    alert.data,
                )
        return persisted

    async def check_actor(
        self,
        result: TrustScoreResult,
        behavior: BehaviorClassification | None = None,
    ) -> list[Alert]:
        """Raise alerts for one trust recomputation."""
        return await self.emit(check_actor_triggers(result, self._config, behavior))

    async def check_review(
        self,
        review_id: str,
        score: int,
        decision_status: str | None,
    ) -> list[Alert]:
        """Raise an alert when a review is judged fake."""
        alert = check_fake_review(review_id, score, decision_status, self._config)
        return await self.emit([alert] if alert is not None else [])
