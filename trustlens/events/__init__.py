"""Domain event publishing."""

from trustlens.events.publisher import (
    ALERT_RAISED,
    BULK_OPERATION_COMPLETED,
    REVIEW_STATUS_UPDATED,
    EventPublisher,
)

__all__ = [
    "ALERT_RAISED",
    "BULK_OPERATION_COMPLETED",
    "REVIEW_STATUS_UPDATED",
    "EventPublisher",
]
