"""Pytest fixtures for review authentication workflow tests.

``InMemoryReviewAuthRepository`` mirrors the row-lock contract of
``ReviewAuthRepository``: one lock per review, writes staged on the
transaction and committed only when the ``lock_for_update`` block exits
cleanly.
"""

import asyncio
import copy
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from trustlens.alerts.service import AlertEmitter
from trustlens.authenticity.schemas import ReviewerHistory
from trustlens.errors import NotFoundError
from trustlens.events.publisher import EventPublisher
from trustlens.linguistic.classifier import TextAuthenticityClassifier
from trustlens.reviews.repository import ReviewRepository
from trustlens.reviews.schemas import Review
from trustlens.workflow.config import WorkflowConfig
from trustlens.workflow.schemas import ReviewAuthenticationRecord
from trustlens.workflow.service import ReviewAuthenticationWorkflow


class _Transaction:
    def __init__(self) -> None:
        self.staged = None


class InMemoryReviewAuthRepository:
    def __init__(self) -> None:
        self.records = {}
        self.save_count = 0
        self._locks = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def lock_for_update(self, review_id, *, create=False):
        async with self._locks[review_id]:
            stored = self.records.get(review_id)
            if stored is None:
                if not create:
                    raise NotFoundError("Review authentication", review_id)
                stored = ReviewAuthenticationRecord(review_id=review_id)
            txn = _Transaction()
            yield copy.deepcopy(stored), txn
            if txn.staged is not None:
                self.records[review_id] = txn.staged

    @asynccontextmanager
    async def lock_by_auth_id(self, auth_id):
        for review_id, record in self.records.items():
            if record.auth_id == auth_id:
                break
        else:
            raise NotFoundError("Review authentication", auth_id)
        async with self.lock_for_update(review_id) as locked:
            yield locked

    async def save(self, record, conn=None):
        record.updated_at = datetime.now(timezone.utc)
        self.save_count += 1
        if conn is not None:
            conn.staged = copy.deepcopy(record)
        else:
            self.records[record.review_id] = copy.deepcopy(record)

    async def get_by_review_id(self, review_id):
        record = self.records.get(review_id)
        return copy.deepcopy(record) if record is not None else None

    async def get_by_id(self, auth_id):
        for record in self.records.values():
            if record.auth_id == auth_id:
                return copy.deepcopy(record)
        return None

    async def get_stats(self):
        by_status = {}
        by_stage = {}
        for record in self.records.values():
            status = record.final_decision.status if record.final_decision else "pending"
            entry = by_status.setdefault(status, {"count": 0, "avg_score": 0.0})
            entry["count"] += 1
            by_stage[record.current_stage] = by_stage.get(record.current_stage, 0) + 1
        return {"by_status": by_status, "by_stage": by_stage, "fraud_indicators_by_severity": {}}


@pytest.fixture
def workflow_config() -> WorkflowConfig:
    return WorkflowConfig()


@pytest.fixture
def auth_repo() -> InMemoryReviewAuthRepository:
    return InMemoryReviewAuthRepository()


@pytest.fixture
def reviews() -> dict[str, Review]:
    return {
        f"r-{i}": Review(
            id=f"r-{i}",
            product_id="p-1",
            reviewer_id=f"u-{i}",
            text="The kettle boils water quickly and the handle stays cool.",
        )
        for i in range(1, 4)
    }


@pytest.fixture
def review_repo(reviews):
    repo = AsyncMock(spec=ReviewRepository)
    repo.get_by_id.side_effect = lambda review_id: reviews.get(review_id)
    repo.get_reviewer_history.return_value = ReviewerHistory()
    repo.update_authenticity.return_value = True
    return repo


@pytest.fixture
def text_classifier():
    return AsyncMock(spec=TextAuthenticityClassifier)


@pytest.fixture
def publisher():
    return AsyncMock(spec=EventPublisher)


@pytest.fixture
def alert_emitter():
    return AsyncMock(spec=AlertEmitter)


@pytest.fixture
def workflow(
    auth_repo, review_repo, text_classifier, publisher, alert_emitter, workflow_config,
) -> ReviewAuthenticationWorkflow:
    return ReviewAuthenticationWorkflow(
        auth_repo=auth_repo,
        review_repo=review_repo,
        text_classifier=text_classifier,
        publisher=publisher,
        alert_emitter=alert_emitter,
        config=workflow_config,
    )
