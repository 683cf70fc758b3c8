"""Review authentication workflow.

Drives each review through ``initial_analysis -> community_review ->
expert_validation -> completed``. Analysis runs outside the row lock;
every state change is applied to a record locked with
``ReviewAuthRepository.lock_for_update`` and committed in one
transaction. Events and alerts go out only after the commit.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from trustlens.alerts.service import AlertEmitter
from trustlens.authenticity.engine import AuthenticityDecisionEngine
from trustlens.authenticity.schemas import AuthenticityResult
from trustlens.behavior.classifier import BotBehaviorClassifier
from trustlens.behavior.schemas import BehaviorClassification
from trustlens.errors import DuplicateVoteError, NotFoundError, ValidationError
from trustlens.events.publisher import EventPublisher
from trustlens.linguistic.classifier import TextAuthenticityClassifier
from trustlens.linguistic.schemas import TextAnalysis
from trustlens.observability.metrics import get_metrics
from trustlens.reviews.repository import ReviewRepository
from trustlens.reviews.schemas import Review
from trustlens.scoring import round_half_up, to_score
from trustlens.trust.ip_collision import IPCollisionDetector
from trustlens.trust.schemas import IPCollisionResult
from trustlens.workflow.config import WorkflowConfig
from trustlens.workflow.consensus import CommunityConsensusAggregator, ConsensusResult
from trustlens.workflow.repository import ReviewAuthRepository
from trustlens.workflow.schemas import (
    AuthenticationStep,
    BehavioralAnalysisDetails,
    CommunityValidationDetails,
    CommunityVote,
    FinalDecision,
    FraudIndicator,
    InitialAnalysisDetails,
    ManualDecisionDetails,
    ReviewAuthenticationRecord,
    validate_status,
)

logger = logging.getLogger(__name__)

SYSTEM = "system"
COMMUNITY = "community"

_HIGH_SEVERITY_FLAGS = frozenset({"GIBBERISH_CONTENT", "AI_GENERATED_CONTENT", "BOT_BEHAVIOR"})


@dataclass
class BulkAuthenticationResult:
    """Per-review outcome of ``bulk_authenticate``."""

    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def fail_count(self) -> int:
        return len(self.failed)


@dataclass
class _Analysis:
    review: Review
    text: TextAnalysis
    verdict: AuthenticityResult
    behavior: BehaviorClassification | None
    ip_collision: IPCollisionResult | None
    fused_score: int


def _is_manual(decision: FinalDecision | None) -> bool:
    return decision is not None and decision.decided_by not in (SYSTEM, COMMUNITY)


def _external_status(analysis: TextAnalysis) -> str:
    if analysis.external is not None:
        return "ok"
    if analysis.external_error is not None:
        return analysis.external_error.reason
    return "skipped"


class ReviewAuthenticationWorkflow:
    """State machine over ``ReviewAuthenticationRecord``.

    Usage:
        workflow = ReviewAuthenticationWorkflow(auth_repo, review_repo, classifier)
        record = await workflow.authenticate_review("review-1")
        consensus = await workflow.submit_vote("review-1", vote)
        await workflow.set_final_decision(record.auth_id, "fake", 90, ["..."], "moderator-7")
    """

    def __init__(
        self,
        auth_repo: ReviewAuthRepository,
        review_repo: ReviewRepository,
        text_classifier: TextAuthenticityClassifier,
        engine: AuthenticityDecisionEngine | None = None,
        behavior_classifier: BotBehaviorClassifier | None = None,
        ip_detector: IPCollisionDetector | None = None,
        aggregator: CommunityConsensusAggregator | None = None,
        publisher: EventPublisher | None = None,
        alert_emitter: AlertEmitter | None = None,
        config: WorkflowConfig | None = None,
    ) -> None:
        self._config = config or WorkflowConfig()
        self._auth_repo = auth_repo
        self._review_repo = review_repo
        self._text_classifier = text_classifier
        self._engine = engine or AuthenticityDecisionEngine()
        self._behavior_classifier = behavior_classifier or BotBehaviorClassifier()
        self._ip_detector = ip_detector
        self._aggregator = aggregator or CommunityConsensusAggregator(self._config)
        self._publisher = publisher
        self._alert_emitter = alert_emitter

    async def aclose(self) -> None:
        await self._text_classifier.aclose()

    # ── Analysis ───────────────────────────────────────────

    def fuse_scores(self, text_score: int, behavior: BehaviorClassification | None) -> int:
        """Blend the text verdict with the behavioral verdict.

        Without a usable behavior sample the text score stands alone.
        """
        if behavior is None or behavior.is_insufficient:
            return text_score
        behavior_score = to_score(100 - behavior.bot_score * 100)
        cfg = self._config
        return to_score(cfg.text_weight * text_score + cfg.behavior_weight * behavior_score)

    async def _analyze(self, review: Review) -> _Analysis:
        text = await self._text_classifier.analyze(review.text)
        metrics = review.behavioral_metrics

        history = await self._review_repo.get_reviewer_history(
            review.reviewer_id,
            exclude_review_id=review.id,
            recent_days=self._config.recent_activity_days,
        )

        ip_collision = None
        if self._ip_detector is not None and metrics.ip_address:
            ip_collision = await self._ip_detector.detect(review.reviewer_id, metrics.ip_address)

        behavior = None
        if metrics.typing_intervals:
            behavior = self._behavior_classifier.classify(
                metrics.typing_intervals,
                metrics.pointer_intervals or None,
                ip_collision,
            )

        verdict = self._engine.evaluate(
            review.id,
            review.text,
            text,
            metrics=metrics,
            history=history,
            behavior=behavior,
        )
        return _Analysis(
            review=review,
            text=text,
            verdict=verdict,
            behavior=behavior,
            ip_collision=ip_collision,
            fused_score=self.fuse_scores(verdict.score, behavior),
        )

    def _automated_decision(self, analysis: _Analysis) -> tuple[FinalDecision, str]:
        cfg = self._config
        score = analysis.fused_score
        verdict = analysis.verdict

        if score >= cfg.authentic_min_score and not verdict.is_synthetic:
            status, stage = "authentic", "completed"
        elif score <= cfg.fake_max_score:
            status, stage = "fake", "completed"
        elif score >= cfg.investigation_min_score:
            status, stage = "requires_investigation", "community_review"
        else:
            status, stage = "suspicious", "community_review"

        decision = FinalDecision(
            status=status,
            confidence=verdict.confidence,
            decided_by=SYSTEM,
            reasoning=list(verdict.reasons) or [f"Authentication score {score}"],
            appealable=status != "authentic",
        )
        return decision, stage

    def _fraud_indicators(self, analysis: _Analysis) -> list[FraudIndicator]:
        indicators = [
            FraudIndicator(
                type=flag.lower(),
                severity="high" if flag in _HIGH_SEVERITY_FLAGS else "medium",
                description=flag.replace("_", " ").capitalize(),
            )
            for flag in dict.fromkeys(analysis.verdict.flags)
        ]
        collision = analysis.ip_collision
        if collision is not None:
            if collision.other_account_count >= 2:
                indicators.append(FraudIndicator(
                    type="multiple_accounts_same_ip",
                    severity="high",
                    description=f"{collision.total_accounts} accounts share {collision.ip_address}",
                ))
            if collision.rapid_account_creation:
                indicators.append(FraudIndicator(
                    type="rapid_account_creation",
                    severity="critical",
                    description=(
                        f"{collision.recent_account_count} accounts created from "
                        f"{collision.ip_address} in 24 hours"
                    ),
                ))
        return indicators

    def _apply_analysis(self, record: ReviewAuthenticationRecord, analysis: _Analysis) -> bool:
        """Write one analysis onto a locked record.

        Returns:
            True if the final decision changed.
        """
        verdict = analysis.verdict
        passed = verdict.score >= self._config.investigation_min_score and not verdict.is_synthetic
        record.upsert_step(AuthenticationStep(
            step="initial_analysis",
            status="passed" if passed else "failed",
            score=verdict.score,
            details=InitialAnalysisDetails(
                text_score=analysis.text.score,
                authenticity_score=verdict.score,
                is_synthetic=verdict.is_synthetic,
                confidence=verdict.confidence,
                risk_tier=verdict.risk_tier,
                reason_codes=list(verdict.reason_codes),
                flags=list(verdict.flags),
                external_status=_external_status(analysis.text),
            ),
        ))

        behavior = analysis.behavior
        if behavior is not None:
            if behavior.is_insufficient:
                step_status = "pending"
            else:
                step_status = "passed" if behavior.label == "human" else "failed"
            collision = analysis.ip_collision
            record.upsert_step(AuthenticationStep(
                step="behavioral_analysis",
                status=step_status,
                score=0 if behavior.is_insufficient else to_score(100 - behavior.bot_score * 100),
                details=BehavioralAnalysisDetails(
                    label=behavior.label,
                    bot_score=behavior.bot_score,
                    confidence=behavior.confidence,
                    risk_factors=list(behavior.risk_factors),
                    other_accounts_on_ip=collision.other_account_count if collision else None,
                    rapid_account_creation=bool(collision and collision.rapid_account_creation),
                    report=list(behavior.report),
                ),
            ))

        record.overall_authentication_score = analysis.fused_score
        record.fraud_indicators = self._fraud_indicators(analysis)

        # Community and manual decisions outrank a re-run of the analysis.
        current = record.final_decision
        if current is not None and not current.is_automated:
            return False

        decision, stage = self._automated_decision(analysis)
        record.advance_to(stage)
        changed = current is None or current.status != decision.status
        record.final_decision = decision
        return changed

    # ── Transitions ────────────────────────────────────────

    async def authenticate_review(
        self,
        review_id: str,
        source_data: Review | None = None,
    ) -> ReviewAuthenticationRecord:
        """Analyze a review and record the outcome.

        Args:
            review_id: Review to authenticate.
            source_data: Review snapshot to use instead of loading it.

        Raises:
            NotFoundError: If the review does not exist.
            ValidationError: If the review text or behavior sample is malformed.
        """
        review = source_data or await self._review_repo.get_by_id(review_id)
        if review is None:
            raise NotFoundError("Review", review_id)

        analysis = await self._analyze(review)

        async with self._auth_repo.lock_for_update(review_id, create=True) as (record, conn):
            previous_stage = record.current_stage
            decision_changed = self._apply_analysis(record, analysis)
            await self._auth_repo.save(record, conn)
            updated = await self._review_repo.update_authenticity(
                review_id,
                authenticity_score=analysis.verdict.score,
                is_ai_generated=analysis.verdict.is_synthetic,
                linguistic_analysis=analysis.text.summary,
                conn=conn,
            )
            if not updated:
                raise NotFoundError("Review", review_id)

        if record.current_stage != previous_stage:
            get_metrics().record_transition(record.current_stage)

        logger.info(
            "Review %s authenticated: score=%d decision=%s stage=%s",
            review_id,
            record.overall_authentication_score,
            record.final_decision.status if record.final_decision else None,
            record.current_stage,
        )
        await self._announce(record, decision_changed)
        return record

    async def submit_vote(self, review_id: str, vote: CommunityVote) -> ConsensusResult:
        """Record one community vote and re-tally.

        Raises:
            NotFoundError: If the review has no authentication record.
            DuplicateVoteError: If the voter already voted on this review.
        """
        decision_changed = False
        async with self._auth_repo.lock_for_update(review_id) as (record, conn):
            if record.has_voted(vote.voter_id):
                raise DuplicateVoteError(review_id, vote.voter_id)

            previous_stage = record.current_stage
            record.votes.append(vote)
            consensus = self._aggregator.tally(record.votes)

            record.upsert_step(AuthenticationStep(
                step="community_validation",
                status="passed" if consensus.quorum_reached else "pending",
                score=consensus.mean_confidence,
                details=CommunityValidationDetails(
                    total_votes=consensus.total_votes,
                    majority_vote=consensus.majority_choice,
                    consensus_confidence=consensus.mean_confidence,
                    vote_counts=dict(consensus.vote_counts),
                ),
                processed_by=COMMUNITY,
            ))

            if consensus.is_decisive and not _is_manual(record.final_decision):
                current = record.final_decision
                decision_changed = current is None or current.status != consensus.majority_choice
                record.final_decision = FinalDecision(
                    status=consensus.majority_choice,
                    confidence=consensus.mean_confidence,
                    decided_by=COMMUNITY,
                    reasoning=[
                        f"Community consensus: {consensus.vote_counts[consensus.majority_choice]} "
                        f"of {consensus.total_votes} votes for {consensus.majority_choice}",
                    ],
                    appealable=consensus.majority_choice != "authentic",
                )
                record.advance_to("expert_validation")

            await self._auth_repo.save(record, conn)

        metrics = get_metrics()
        metrics.record_vote()
        if record.current_stage != previous_stage:
            metrics.record_transition(record.current_stage)

        logger.info(
            "Vote on review %s by %s: %s (%d votes, mean confidence %d)",
            review_id,
            vote.voter_id,
            vote.choice,
            consensus.total_votes,
            consensus.mean_confidence,
        )
        await self._announce(record, decision_changed)
        return consensus

    async def set_final_decision(
        self,
        auth_id: str,
        status: str,
        confidence: float,
        reasoning: list[str] | None = None,
        decided_by: str = "moderator",
    ) -> ReviewAuthenticationRecord:
        """Apply a manual decision override. Legal from any stage.

        Raises:
            ValidationError: If the status or confidence is invalid.
            NotFoundError: If no record has ``auth_id``.
        """
        validate_status(status)
        if not 0 <= confidence <= 100:
            raise ValidationError(f"Decision confidence must be between 0 and 100, got {confidence}")
        if decided_by in (SYSTEM, COMMUNITY):
            raise ValidationError(f"decided_by {decided_by!r} is reserved")
        reasoning = list(reasoning or [])

        async with self._auth_repo.lock_by_auth_id(auth_id) as (record, conn):
            previous_stage = record.current_stage
            record.final_decision = FinalDecision(
                status=status,
                confidence=confidence,
                decided_by=decided_by,
                reasoning=reasoning,
                appealable=status != "authentic",
            )
            record.advance_to("completed")
            record.upsert_step(AuthenticationStep(
                step="manual_decision",
                status="passed" if status == "authentic" else "failed",
                score=round_half_up(confidence),
                details=ManualDecisionDetails(
                    status=status,
                    decided_by=decided_by,
                    reasoning=reasoning,
                ),
                processed_by=decided_by,
            ))
            await self._auth_repo.save(record, conn)

        if record.current_stage != previous_stage:
            get_metrics().record_transition(record.current_stage)
        logger.info("Manual decision on %s by %s: %s", auth_id, decided_by, status)
        await self._announce(record, decision_changed=True)
        return record

    async def bulk_authenticate(self, review_ids: list[str]) -> BulkAuthenticationResult:
        """Authenticate several reviews; one failure does not stop the rest.

        Raises:
            ValidationError: If ``review_ids`` is empty.
        """
        if not review_ids:
            raise ValidationError("review_ids must not be empty")

        result = BulkAuthenticationResult()
        for review_id in review_ids:
            try:
                await self.authenticate_review(review_id)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Bulk authentication failed for review %s: %s", review_id, e)
                result.failed[review_id] = str(e)
            else:
                result.succeeded.append(review_id)

        logger.info(
            "Bulk authentication complete: %d succeeded, %d failed",
            result.success_count,
            result.fail_count,
        )
        if self._publisher is not None:
            await self._publisher.bulk_operation_completed(
                "authenticate", result.success_count, result.fail_count,
            )
        return result

    async def get_record(self, review_id: str) -> ReviewAuthenticationRecord:
        record = await self._auth_repo.get_by_review_id(review_id)
        if record is None:
            raise NotFoundError("Review authentication", review_id)
        return record

    async def get_stats(self) -> dict[str, Any]:
        return await self._auth_repo.get_stats()

    # ── Side channels ──────────────────────────────────────

    async def _announce(self, record: ReviewAuthenticationRecord, decision_changed: bool) -> None:
        decision = record.final_decision
        if decision is None or not decision_changed:
            return
        if self._publisher is not None:
            await self._publisher.review_status_updated(
                record.review_id, decision.status, decision.decided_by,
            )
        if self._alert_emitter is not None:
            await self._alert_emitter.check_review(
                record.review_id, record.overall_authentication_score, decision.status,
            )
