"""Community consensus over review authentication votes.

The tally depends only on the final vote set, never on arrival order:
majority ties break on summed confidence and then on a fixed precedence.
"""

from collections import Counter
from dataclasses import dataclass, field

from trustlens.scoring import round_half_up
from trustlens.workflow.config import WorkflowConfig
from trustlens.workflow.schemas import CommunityVote

# Earlier entries win exact ties.
CHOICE_PRECEDENCE: tuple[str, ...] = (
    "fake",
    "suspicious",
    "requires_investigation",
    "authentic",
)


@dataclass(frozen=True)
class ConsensusResult:
    """Outcome of tallying the votes on one review.

    Attributes:
        total_votes: Number of votes counted.
        majority_choice: Winning choice, None when there are no votes.
        mean_confidence: Mean voter confidence, rounded half-up.
        vote_counts: Votes per choice.
        quorum_reached: True once the configured quorum is met.
        is_decisive: True when quorum is met and mean confidence is high enough.
    """

    total_votes: int
    majority_choice: str | None
    mean_confidence: int
    vote_counts: dict[str, int] = field(default_factory=dict)
    quorum_reached: bool = False
    is_decisive: bool = False


class CommunityConsensusAggregator:
    """Tallies votes into a majority choice and mean confidence."""

    def __init__(self, config: WorkflowConfig | None = None) -> None:
        self._config = config or WorkflowConfig()

    def tally(self, votes: list[CommunityVote]) -> ConsensusResult:
        if not votes:
            return ConsensusResult(total_votes=0, majority_choice=None, mean_confidence=0)

        counts = Counter(vote.choice for vote in votes)
        confidence_sums: Counter[str] = Counter()
        for vote in votes:
            confidence_sums[vote.choice] += vote.confidence

        majority = min(
            counts,
            key=lambda choice: (
                -counts[choice],
                -confidence_sums[choice],
                CHOICE_PRECEDENCE.index(choice),
            ),
        )
        mean_confidence = round_half_up(sum(v.confidence for v in votes) / len(votes))
        quorum_reached = len(votes) >= self._config.quorum

        return ConsensusResult(
            total_votes=len(votes),
            majority_choice=majority,
            mean_confidence=mean_confidence,
            vote_counts=dict(counts),
            quorum_reached=quorum_reached,
            is_decisive=quorum_reached
            and mean_confidence >= self._config.consensus_min_confidence,
        )
