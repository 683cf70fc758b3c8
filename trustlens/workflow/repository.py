"""Review authentication repository.

Every workflow transition reads and writes its record through
``lock_for_update``, which holds a row lock (``SELECT ... FOR UPDATE``)
for the lifetime of one transaction so concurrent votes and analyses on
the same review serialize.
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import asyncpg

from trustlens.errors import NotFoundError
from trustlens.storage.database import Database
from trustlens.workflow.schemas import ReviewAuthenticationRecord

logger = logging.getLogger(__name__)

_JSON_COLUMNS = ("authentication_steps", "final_decision", "fraud_indicators", "community_votes")


class ReviewAuthRepository:
    """Persistence for ``ReviewAuthenticationRecord`` rows."""

    def __init__(self, database: Database) -> None:
        self._db = database

    @asynccontextmanager
    async def lock_for_update(
        self,
        review_id: str,
        *,
        create: bool = False,
    ) -> AsyncIterator[tuple[ReviewAuthenticationRecord, asyncpg.Connection]]:
        """Lock the record for ``review_id`` inside a transaction.

        Args:
            review_id: Review whose record to lock.
            create: Insert an empty record first if none exists.

        Yields:
            The locked record and the transaction's connection. Pass the
            connection to ``save`` so the write commits with the lock.

        Raises:
            NotFoundError: If no record exists and ``create`` is False.
        """
        async with self._db.transaction() as conn:
            if create:
                fresh = ReviewAuthenticationRecord(review_id=review_id)
                await conn.execute(
                    """
                    INSERT INTO review_authentications (auth_id, review_id)
                    VALUES ($1, $2)
                    ON CONFLICT (review_id) DO NOTHING
                    """,
                    fresh.auth_id,
                    review_id,
                )
            row = await conn.fetchrow(
                "SELECT * FROM review_authentications WHERE review_id = $1 FOR UPDATE",
                review_id,
            )
            if row is None:
                raise NotFoundError("Review authentication", review_id)
            yield _row_to_record(row), conn

    @asynccontextmanager
    async def lock_by_auth_id(
        self,
        auth_id: str,
    ) -> AsyncIterator[tuple[ReviewAuthenticationRecord, asyncpg.Connection]]:
        """Like ``lock_for_update`` but addressed by record id."""
        async with self._db.transaction() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM review_authentications WHERE auth_id = $1 FOR UPDATE",
                auth_id,
            )
            if row is None:
                raise NotFoundError("Review authentication", auth_id)
            yield _row_to_record(row), conn

    async def save(
        self,
        record: ReviewAuthenticationRecord,
        conn: asyncpg.Connection | None = None,
    ) -> None:
        """Write every mutable column of ``record`` in one UPDATE."""
        record.updated_at = datetime.now(timezone.utc)
        data = record.to_dict()
        sql = """
            UPDATE review_authentications
            SET overall_authentication_score = $2,
                authentication_steps = $3,
                final_decision = $4,
                current_stage = $5,
                fraud_indicators = $6,
                community_votes = $7,
                updated_at = $8
            WHERE auth_id = $1
        """
        args = (
            record.auth_id,
            record.overall_authentication_score,
            json.dumps(data["authentication_steps"]),
            json.dumps(data["final_decision"]) if record.final_decision else None,
            record.current_stage,
            json.dumps(data["fraud_indicators"]),
            json.dumps(data["community_votes"]),
            record.updated_at,
        )
        if conn is not None:
            result = await conn.execute(sql, *args)
        else:
            result = await self._db.execute(sql, *args)
        if result != "UPDATE 1":
            raise NotFoundError("Review authentication", record.auth_id)

    async def get_by_id(self, auth_id: str) -> ReviewAuthenticationRecord | None:
        row = await self._db.fetchrow(
            "SELECT * FROM review_authentications WHERE auth_id = $1", auth_id,
        )
        if row is None:
            return None
        return _row_to_record(row)

    async def get_by_review_id(self, review_id: str) -> ReviewAuthenticationRecord | None:
        row = await self._db.fetchrow(
            "SELECT * FROM review_authentications WHERE review_id = $1", review_id,
        )
        if row is None:
            return None
        return _row_to_record(row)

    async def get_stats(self) -> dict[str, Any]:
        """Aggregate counts by decision status, stage and indicator severity.

        Records with no decision are reported under ``pending``.
        """
        by_status_rows = await self._db.fetch(
            """
            SELECT COALESCE(final_decision->>'status', 'pending') AS status,
                   COUNT(*) AS count,
                   AVG(overall_authentication_score) AS avg_score
            FROM review_authentications
            GROUP BY 1
            """
        )
        by_stage_rows = await self._db.fetch(
            """
            SELECT current_stage, COUNT(*) AS count
            FROM review_authentications
            GROUP BY current_stage
            """
        )
        severity_rows = await self._db.fetch(
            """
            SELECT fi->>'severity' AS severity, COUNT(*) AS count
            FROM review_authentications,
                 jsonb_array_elements(fraud_indicators) AS fi
            GROUP BY 1
            """
        )
        return {
            "by_status": {
                r["status"]: {
                    "count": r["count"],
                    "avg_score": round(float(r["avg_score"]), 1)
                    if r["avg_score"] is not None else 0.0,
                }
                for r in by_status_rows
            },
            "by_stage": {r["current_stage"]: r["count"] for r in by_stage_rows},
            "fraud_indicators_by_severity": {r["severity"]: r["count"] for r in severity_rows},
        }


def _row_to_record(row: asyncpg.Record) -> ReviewAuthenticationRecord:
    data = dict(row)
    for key in _JSON_COLUMNS:
        if isinstance(data.get(key), str):
            data[key] = json.loads(data[key])
    return ReviewAuthenticationRecord.from_dict(data)
