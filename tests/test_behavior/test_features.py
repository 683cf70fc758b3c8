"""Tests for BehavioralFeatureExtractor."""

import numpy as np
import pytest

from trustlens.behavior.features import BehavioralFeatureExtractor, validate_intervals
from trustlens.errors import ValidationError

HUMAN_SAMPLE = [120, 340, 95, 210, 180, 450, 130, 260, 90, 310]


@pytest.fixture
def extractor():
    return BehavioralFeatureExtractor()


class TestValidation:
    def test_accepts_positive_values(self):
        data = validate_intervals([10, 20.5, 30])
        assert data.dtype == float
        assert data.tolist() == [10.0, 20.5, 30.0]

    @pytest.mark.parametrize("bad", [[10, 0, 20], [10, -5, 20]])
    def test_rejects_non_positive(self, bad):
        with pytest.raises(ValidationError, match="positive"):
            validate_intervals(bad)

    def test_empty_sample_rejected_by_extract(self, extractor):
        with pytest.raises(ValidationError):
            extractor.extract([])


class TestStatistics:
    def test_population_moments(self, extractor):
        stats = extractor.statistics(np.array([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]))

        assert stats.count == 8
        assert stats.mean == pytest.approx(5.0)
        assert stats.variance == pytest.approx(4.0)
        assert stats.std_dev == pytest.approx(2.0)

    def test_constant_sample_has_zero_moments(self, extractor):
        stats = extractor.statistics(np.array([100.0] * 6))

        assert stats.variance == 0.0
        assert stats.skewness == 0.0
        assert stats.kurtosis == 0.0

    def test_right_skewed_sample(self, extractor):
        stats = extractor.statistics(np.array(HUMAN_SAMPLE, dtype=float))
        assert stats.skewness > 0.1


class TestPatterns:
    def test_constant_sample_has_no_rhythm_or_acceleration(self, extractor):
        flags = extractor.patterns(np.array([100.0] * 6))

        assert flags.has_natural_rhythm is False
        assert flags.has_acceleration is False
        assert flags.consistency == 1.0

    def test_human_sample_has_rhythm_and_acceleration(self, extractor):
        flags = extractor.patterns(np.array(HUMAN_SAMPLE, dtype=float))

        assert flags.has_natural_rhythm is True
        assert flags.has_acceleration is True
        assert flags.has_pauses is True
        assert flags.consistency == 0.0

    def test_acceleration_counts_at_threshold_fraction(self, extractor):
        # Second differences: 0, 0, 20, -40, 20, 0, 0, 0, 0, 0 -> 3 of 10 exceed 5ms
        data = np.array([100, 100, 100, 100, 120, 100, 100, 100, 100, 100, 100, 100], dtype=float)
        flags = extractor.patterns(data)

        assert flags.has_acceleration is True


class TestPointerCorrelation:
    def test_matching_sequences_are_natural(self, extractor):
        features = extractor.extract(HUMAN_SAMPLE, [v + 5 for v in HUMAN_SAMPLE])

        assert features.pointer is not None
        assert features.pointer.correlation_score == 1.0
        assert features.pointer.is_natural_correlation is True

    def test_unrelated_sequences_are_not_natural(self, extractor):
        features = extractor.extract(HUMAN_SAMPLE, [v + 500 for v in HUMAN_SAMPLE])

        assert features.pointer.correlation_score == 0.0
        assert features.pointer.is_natural_correlation is False

    def test_unequal_lengths_are_skipped(self, extractor):
        features = extractor.extract(HUMAN_SAMPLE, [100, 200])
        assert features.pointer is None

    def test_invalid_pointer_values_rejected(self, extractor):
        with pytest.raises(ValidationError, match="pointer_intervals"):
            extractor.extract(HUMAN_SAMPLE, [0] * len(HUMAN_SAMPLE))
