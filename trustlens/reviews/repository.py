"""Review repository: source text for authentication and verdict write-back."""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import asyncpg

from trustlens.authenticity.schemas import ReviewerHistory
from trustlens.linguistic.schemas import LinguisticSummary
from trustlens.reviews.schemas import Review
from trustlens.storage.database import Database

logger = logging.getLogger(__name__)


class ReviewRepository:
    """Reads reviews and reviewer history; persists authenticity verdicts."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def get_by_id(self, review_id: str) -> Review | None:
        row = await self._db.fetchrow("SELECT * FROM reviews WHERE id = $1", review_id)
        if row is None:
            return None
        return Review.from_dict(dict(row))

    async def get_reviewer_history(
        self,
        reviewer_id: str,
        *,
        exclude_review_id: str | None = None,
        recent_days: int = 7,
        now: datetime | None = None,
    ) -> ReviewerHistory:
        """Summarize a reviewer's other reviews.

        Word counts are computed in SQL by splitting on whitespace.
        """
        now = now or datetime.now(timezone.utc)
        sql = """
            SELECT COUNT(*) AS total_reviews,
                   AVG(array_length(regexp_split_to_array(trim(text), '\\s+'), 1))
                       AS avg_review_length,
                   COUNT(*) FILTER (WHERE created_at >= $3) AS recent_review_count
            FROM reviews
            WHERE reviewer_id = $1 AND ($2::text IS NULL OR id <> $2)
        """
        row = await self._db.fetchrow(
            sql, reviewer_id, exclude_review_id, now - timedelta(days=recent_days),
        )
        if row is None:
            return ReviewerHistory()
        avg = row["avg_review_length"]
        return ReviewerHistory(
            total_reviews=int(row["total_reviews"] or 0),
            avg_review_length=float(avg) if avg is not None else None,
            recent_review_count=int(row["recent_review_count"] or 0),
        )

    async def update_authenticity(
        self,
        review_id: str,
        *,
        authenticity_score: int,
        is_ai_generated: bool,
        linguistic_analysis: LinguisticSummary,
        conn: asyncpg.Connection | None = None,
    ) -> bool:
        """Write the verdict fields onto the review row.

        Pass ``conn`` to join an open transaction.

        Returns:
            True if the review row exists.
        """
        sql = """
            UPDATE reviews
            SET authenticity_score = $2,
                is_ai_generated = $3,
                linguistic_analysis = $4
            WHERE id = $1
        """
        args: tuple[Any, ...] = (
            review_id,
            authenticity_score,
            is_ai_generated,
            json.dumps(linguistic_analysis.model_dump()),
        )
        if conn is not None:
            result = await conn.execute(sql, *args)
        else:
            result = await self._db.execute(sql, *args)
        return result == "UPDATE 1"
