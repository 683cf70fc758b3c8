"""Tests for CommunityConsensusAggregator."""

from itertools import permutations

import pytest

from trustlens.workflow.config import WorkflowConfig
from trustlens.workflow.consensus import CommunityConsensusAggregator
from trustlens.workflow.schemas import CommunityVote


def _vote(voter: str, choice: str, confidence: int) -> CommunityVote:
    return CommunityVote(voter_id=voter, choice=choice, confidence=confidence)


@pytest.fixture
def aggregator():
    return CommunityConsensusAggregator(WorkflowConfig())


class TestTally:
    def test_no_votes(self, aggregator):
        result = aggregator.tally([])
        assert result.total_votes == 0
        assert result.majority_choice is None
        assert result.mean_confidence == 0
        assert not result.quorum_reached

    def test_simple_majority(self, aggregator):
        result = aggregator.tally([
            _vote("a", "fake", 90),
            _vote("b", "fake", 70),
            _vote("c", "authentic", 60),
        ])
        assert result.majority_choice == "fake"
        assert result.vote_counts == {"fake": 2, "authentic": 1}
        assert result.mean_confidence == 73
        assert result.quorum_reached
        assert result.is_decisive

    def test_mean_confidence_rounds_half_up(self, aggregator):
        result = aggregator.tally([_vote("a", "fake", 70), _vote("b", "fake", 71)])
        assert result.mean_confidence == 71

    def test_count_tie_breaks_on_confidence(self, aggregator):
        result = aggregator.tally([
            _vote("a", "authentic", 90),
            _vote("b", "fake", 40),
        ])
        assert result.majority_choice == "authentic"

    def test_full_tie_breaks_on_precedence(self, aggregator):
        result = aggregator.tally([
            _vote("a", "authentic", 60),
            _vote("b", "suspicious", 60),
            _vote("c", "requires_investigation", 60),
        ])
        assert result.majority_choice == "suspicious"

    def test_order_independent(self, aggregator):
        votes = [
            _vote("a", "authentic", 90),
            _vote("b", "fake", 60),
            _vote("c", "authentic", 50),
            _vote("d", "fake", 80),
        ]
        results = {
            (r.majority_choice, r.mean_confidence)
            for r in (aggregator.tally(list(p)) for p in permutations(votes))
        }
        assert results == {("fake", 70)}

    def test_quorum_without_confidence(self, aggregator):
        result = aggregator.tally([_vote(v, "fake", 69) for v in "abc"])
        assert result.quorum_reached
        assert not result.is_decisive

    def test_custom_quorum(self):
        aggregator = CommunityConsensusAggregator(WorkflowConfig(quorum=1))
        result = aggregator.tally([_vote("a", "suspicious", 70)])
        assert result.is_decisive
