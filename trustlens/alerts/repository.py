"""Alert repository for persistence, listing and status changes."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from trustlens.alerts.schemas import Alert, VALID_STATUSES
from trustlens.storage.database import Database

logger = logging.getLogger(__name__)


class AlertRepository:
    """Create, read, count and resolve/dismiss alerts in the ``alerts`` table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create(self, alert: Alert) -> Alert:
        sql = """
            INSERT INTO alerts (
                alert_id, alert_type, target_type, target_id, severity,
                title, description, data, status, created_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            alert.alert_id,
            alert.alert_type,
            alert.target_type,
            alert.target_id,
            alert.severity,
            alert.title,
            alert.description,
            json.dumps(alert.data),
            alert.status,
            alert.created_at,
        )
        return _row_to_alert(row)

    async def create_batch(self, alerts: list[Alert]) -> list[Alert]:
        """Insert alerts one by one; a failed insert is logged and skipped."""
        created: list[Alert] = []
        for alert in alerts:
            try:
                created.append(await self.create(alert))
            except Exception as e:
                logger.error("Failed to persist alert %s: %s", alert.alert_id, e)
        return created

    async def get_by_id(self, alert_id: str) -> Alert | None:
        row = await self._db.fetchrow("SELECT * FROM alerts WHERE alert_id = $1", alert_id)
        if row is None:
            return None
        return _row_to_alert(row)

    async def get_recent(
        self,
        *,
        severity: str | None = None,
        alert_type: str | None = None,
        target_id: str | None = None,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Alert]:
        """List alerts newest first with optional filters."""
        conditions: list[str] = []
        params: list[Any] = []
        param_idx = 1

        for column, value in (
            ("severity", severity),
            ("alert_type", alert_type),
            ("target_id", target_id),
            ("status", status),
        ):
            if value is not None:
                conditions.append(f"{column} = ${param_idx}")
                params.append(value)
                param_idx += 1

        where_clause = ""
        if conditions:
            where_clause = "WHERE " + " AND ".join(conditions)

        sql = f"""
            SELECT * FROM alerts
            {where_clause}
            ORDER BY created_at DESC
            LIMIT ${param_idx} OFFSET ${param_idx + 1}
        """
        params.extend([limit, offset])

        rows = await self._db.fetch(sql, *params)
        return [_row_to_alert(row) for row in rows]

    async def count_today_by_severity(self, severity: str) -> int:
        """Count alerts raised since midnight UTC with the given severity."""
        today_start = datetime.now(timezone.utc).replace(
            hour=0, minute=0, second=0, microsecond=0,
        )
        sql = """
            SELECT COUNT(*) FROM alerts
            WHERE severity = $1 AND created_at >= $2
        """
        count = await self._db.fetchval(sql, severity, today_start)
        return count or 0

    async def set_status(self, alert_id: str, status: str) -> bool:
        """Move an active alert to ``resolved`` or ``dismissed``.

        Returns:
            True if updated, False if the alert is missing or not active.
        """
        if status not in VALID_STATUSES or status == "active":
            raise ValueError(f"Cannot set alert status to {status!r}")
        sql = """
            UPDATE alerts SET status = $2
            WHERE alert_id = $1 AND status = 'active'
            RETURNING alert_id
        """
        result = await self._db.fetchval(sql, alert_id, status)
        return result is not None

    async def resolve(self, alert_id: str) -> bool:
        return await self.set_status(alert_id, "resolved")

    async def dismiss(self, alert_id: str) -> bool:
        return await self.set_status(alert_id, "dismissed")


def _row_to_alert(row: Any) -> Alert:
    data = row.get("data", {})
    if isinstance(data, str):
        data = json.loads(data)

    return Alert(
        alert_id=row["alert_id"],
        alert_type=row["alert_type"],
        target_type=row["target_type"],
        target_id=row["target_id"],
        severity=row["severity"],
        title=row["title"],
        description=row["description"],
        data=data,
        status=row.get("status", "active"),
        created_at=row["created_at"],
    )
