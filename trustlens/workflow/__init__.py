"""Review authentication workflow and community consensus."""

from trustlens.workflow.config import WorkflowConfig
from trustlens.workflow.consensus import CommunityConsensusAggregator, ConsensusResult
from trustlens.workflow.repository import ReviewAuthRepository
from trustlens.workflow.schemas import (
    AuthenticationStep,
    CommunityVote,
    FinalDecision,
    FraudIndicator,
    ReviewAuthenticationRecord,
)
from trustlens.workflow.service import BulkAuthenticationResult, ReviewAuthenticationWorkflow

__all__ = [
    "AuthenticationStep",
    "BulkAuthenticationResult",
    "CommunityConsensusAggregator",
    "CommunityVote",
    "ConsensusResult",
    "FinalDecision",
    "FraudIndicator",
    "ReviewAuthRepository",
    "ReviewAuthenticationRecord",
    "ReviewAuthenticationWorkflow",
    "WorkflowConfig",
]
