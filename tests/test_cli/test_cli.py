"""Tests for the trustlens CLI."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from trustlens.alerts.schemas import Alert
from trustlens.behavior.schemas import BehaviorClassification
from trustlens.cli import main
from trustlens.errors import NotFoundError
from trustlens.trust.schemas import IPCollisionResult, SellerTrustResult, TrustScoreResult
from trustlens.workflow.schemas import FinalDecision, ReviewAuthenticationRecord
from trustlens.workflow.service import BulkAuthenticationResult


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture
def runner():
    return CliRunner()


def _mock_db():
    db = AsyncMock()
    db.connect = AsyncMock()
    db.close = AsyncMock()
    db.health_check = AsyncMock(return_value=True)
    db.__aenter__.return_value = db
    return db


def _trust_result(actor_id: str, score: int = 72) -> TrustScoreResult:
    return TrustScoreResult(
        actor_id=actor_id,
        trust_score=score,
        risk_level="low",
        account_age_days=120,
        transaction_count=8,
        ip_collision=IPCollisionResult(ip_address="10.0.0.1", total_accounts=1, risk_level="low"),
    )


# ── recalculate-trust ─────────────────────────────────────


class TestRecalculateTrust:
    def test_requires_ids_or_all(self, runner):
        result = runner.invoke(main, ["recalculate-trust"])
        assert result.exit_code == 2
        assert "Pass actor IDs or --all" in result.output

    def test_named_actors(self, runner):
        calculator = AsyncMock()
        calculator.recalculate.side_effect = [
            _trust_result("u-1"),
            NotFoundError("Actor", "user:u-2"),
        ]

        with patch("trustlens.storage.database.Database", return_value=_mock_db()), \
             patch("trustlens.actors.repository.ActorRepository"), \
             patch("trustlens.trust.calculator.TrustScoreCalculator", return_value=calculator):
            result = runner.invoke(main, ["recalculate-trust", "u-1", "u-2", "--no-alerts"])

        assert result.exit_code == 1
        assert "u-1: trust=72 risk=low ip=Unique IP" in result.output
        assert "Actor not found: user:u-2" in result.output
        assert "Recomputed 1 of 2 actors" in result.output

    def test_all_actors(self, runner):
        repo = AsyncMock()
        repo.list_ids.return_value = ["v-1"]
        calculator = AsyncMock()
        calculator.recalculate.return_value = _trust_result("v-1")

        with patch("trustlens.storage.database.Database", return_value=_mock_db()), \
             patch("trustlens.actors.repository.ActorRepository", return_value=repo), \
             patch("trustlens.trust.calculator.TrustScoreCalculator", return_value=calculator):
            result = runner.invoke(
                main, ["recalculate-trust", "--all", "--kind", "vendor", "--no-alerts"],
            )

        assert result.exit_code == 0
        repo.list_ids.assert_awaited_once_with("vendor", limit=1000)
        assert calculator.recalculate.call_args.args[0].kind == "vendor"

    def test_bot_cadence_raises_typing_alert(self, runner):
        bot = BehaviorClassification(
            label="bot", bot_score=2.4, confidence=95.0, risk_level="high",
            risk_factors=["zero_variance", "no_natural_rhythm"],
        )
        calculator = AsyncMock()
        calculator.recalculate.return_value = _trust_result("u-1").model_copy(
            update={"behavior": bot}
        )
        emitter = AsyncMock()
        emitter.check_actor.return_value = [
            Alert(
                alert_type="suspicious_typing",
                target_type="user",
                target_id="u-1",
                severity="high",
                title="Suspicious typing pattern",
                description="Typing pattern suggests automated behavior",
            ),
        ]

        with patch("trustlens.storage.database.Database", return_value=_mock_db()), \
             patch("trustlens.cli._redis_client", return_value=AsyncMock()), \
             patch("trustlens.actors.repository.ActorRepository"), \
             patch("trustlens.alerts.repository.AlertRepository"), \
             patch("trustlens.alerts.service.AlertEmitter", return_value=emitter), \
             patch("trustlens.trust.calculator.TrustScoreCalculator", return_value=calculator):
            result = runner.invoke(main, ["recalculate-trust", "u-1"])

        assert result.exit_code == 0
        checked_result, behavior = emitter.check_actor.call_args.args
        assert checked_result.actor_id == "u-1"
        assert behavior.label == "bot"
        assert "! high: Suspicious typing pattern" in result.output


# ── seller-trust ─────────────────────────────────────────


class TestSellerTrust:
    def test_prints_result(self, runner):
        calculator = AsyncMock()
        calculator.calculate_seller_trust.return_value = SellerTrustResult(
            seller_kind="vendor",
            seller_id="v-1",
            trust_score=75,
            total_sales=100,
            total_returns=10,
            overall_return_rate=10.0,
            product_count=2,
        )

        with patch("trustlens.storage.database.Database", return_value=_mock_db()), \
             patch("trustlens.actors.repository.ActorRepository"), \
             patch("trustlens.trust.calculator.TrustScoreCalculator", return_value=calculator):
            result = runner.invoke(main, ["seller-trust", "vendor", "v-1"])

        assert result.exit_code == 0
        assert "Trust score:  75" in result.output
        assert "Return rate:  10.00%" in result.output

    def test_no_products(self, runner):
        calculator = AsyncMock()
        calculator.calculate_seller_trust.return_value = None

        with patch("trustlens.storage.database.Database", return_value=_mock_db()), \
             patch("trustlens.actors.repository.ActorRepository"), \
             patch("trustlens.trust.calculator.TrustScoreCalculator", return_value=calculator):
            result = runner.invoke(main, ["seller-trust", "user", "u-1"])

        assert result.exit_code == 0
        assert "has no products" in result.output

    def test_unknown_seller(self, runner):
        calculator = AsyncMock()
        calculator.calculate_seller_trust.side_effect = NotFoundError("Actor", "user:ghost")

        with patch("trustlens.storage.database.Database", return_value=_mock_db()), \
             patch("trustlens.actors.repository.ActorRepository"), \
             patch("trustlens.trust.calculator.TrustScoreCalculator", return_value=calculator):
            result = runner.invoke(main, ["seller-trust", "user", "ghost"])

        assert result.exit_code == 1
        assert "Actor not found: user:ghost" in result.output


# ── authenticate ─────────────────────────────────────────


class TestAuthenticate:
    def test_reports_each_review(self, runner):
        record = ReviewAuthenticationRecord(
            review_id="r-1",
            overall_authentication_score=91,
            final_decision=FinalDecision(status="authentic", confidence=0, decided_by="system"),
            current_stage="completed",
        )
        workflow = AsyncMock()
        workflow.bulk_authenticate.return_value = BulkAuthenticationResult(
            succeeded=["r-1"], failed={"r-2": "Review not found: r-2"},
        )
        workflow.get_record.return_value = record

        with patch("trustlens.storage.database.Database", return_value=_mock_db()), \
             patch("trustlens.cli._redis_client", return_value=AsyncMock()), \
             patch("trustlens.cli._build_workflow", return_value=workflow):
            result = runner.invoke(main, ["authenticate", "r-1", "r-2"])

        assert result.exit_code == 1
        workflow.bulk_authenticate.assert_awaited_once_with(["r-1", "r-2"])
        assert "r-1: score=91 decision=authentic stage=completed" in result.output
        assert "Review not found: r-2" in result.output
        assert "Authenticated 1 reviews, 1 failed" in result.output
        workflow.aclose.assert_awaited_once()

    def test_requires_ids(self, runner):
        result = runner.invoke(main, ["authenticate"])
        assert result.exit_code == 2


# ── auth-stats ───────────────────────────────────────────


class TestAuthStats:
    def test_prints_sections(self, runner):
        repo = MagicMock()
        repo.get_stats = AsyncMock(return_value={
            "by_status": {"fake": {"count": 2, "avg_score": 18.5}},
            "by_stage": {"completed": 2},
            "fraud_indicators_by_severity": {"high": 3},
        })

        with patch("trustlens.storage.database.Database", return_value=_mock_db()), \
             patch("trustlens.workflow.repository.ReviewAuthRepository", return_value=repo):
            result = runner.invoke(main, ["auth-stats"])

        assert result.exit_code == 0
        assert "By decision:" in result.output
        assert "avg score 18.5" in result.output
        assert "completed" in result.output


# ── health ───────────────────────────────────────────────


class TestHealth:
    def test_all_healthy(self, runner):
        redis_client = AsyncMock()
        redis_client.ping.return_value = True

        with patch("trustlens.cli._redis_client", return_value=redis_client), \
             patch("trustlens.storage.database.Database", return_value=_mock_db()):
            result = runner.invoke(main, ["health"])

        assert result.exit_code == 0
        assert "All core services healthy!" in result.output

    def test_redis_down(self, runner):
        redis_client = AsyncMock()
        redis_client.ping.side_effect = ConnectionError("refused")

        with patch("trustlens.cli._redis_client", return_value=redis_client), \
             patch("trustlens.storage.database.Database", return_value=_mock_db()):
            result = runner.invoke(main, ["health"])

        assert result.exit_code == 1
        assert "redis: False" in result.output
