"""Fire-and-forget event publishing over Redis pub/sub.

Events are JSON envelopes ``{"event": name, "data": {...}}`` on a single
channel. Publishing never raises: delivery is best effort and a failure
only costs a log line and a ``False`` return.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from trustlens.config.settings import get_settings

logger = logging.getLogger(__name__)

REVIEW_STATUS_UPDATED = "reviewStatusUpdated"
BULK_OPERATION_COMPLETED = "bulkOperationCompleted"
ALERT_RAISED = "alertRaised"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class EventPublisher:
    """Publishes domain events to a Redis channel.

    Args:
        redis_client: A ``redis.asyncio`` client, or None to disable publishing.
        channel: Channel name; defaults to ``Settings.events_channel``.
    """

    def __init__(self, redis_client: Any | None = None, channel: str | None = None) -> None:
        self._redis = redis_client
        self._channel = channel or get_settings().events_channel

    @property
    def channel(self) -> str:
        return self._channel

    async def publish(self, event: str, data: dict[str, Any]) -> bool:
        """Publish one event.

        Returns:
            True if Redis accepted the message.
        """
        if self._redis is None:
            logger.debug("No Redis client, dropping %s event", event)
            return False

        payload = json.dumps({"event": event, "data": data}, default=str)
        try:
            await self._redis.publish(self._channel, payload)
        except Exception as e:
            logger.warning("Failed to publish %s event: %s", event, e)
            return False
        return True

    async def review_status_updated(
        self, review_id: str, new_status: str, decided_by: str,
    ) -> bool:
        return await self.publish(REVIEW_STATUS_UPDATED, {
            "reviewId": review_id,
            "newStatus": new_status,
            "decidedBy": decided_by,
            "timestamp": _timestamp(),
        })

    async def bulk_operation_completed(
        self, operation: str, success_count: int, fail_count: int,
    ) -> bool:
        return await self.publish(BULK_OPERATION_COMPLETED, {
            "operation": operation,
            "successCount": success_count,
            "failCount": fail_count,
            "timestamp": _timestamp(),
        })

    async def alert_raised(
        self,
        alert_type: str,
        target: str,
        severity: str,
        description: str,
        data: dict[str, Any],
    ) -> bool:
        return await self.publish(ALERT_RAISED, {
            "type": alert_type,
            "target": target,
            "severity": severity,
            "description": description,
            "data": data,
        })
