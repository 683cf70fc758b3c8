"""Feature extraction over keystroke and pointer interval sequences."""

from collections.abc import Sequence

import numpy as np

from trustlens.behavior.config import BehaviorConfig
from trustlens.behavior.schemas import (
    BehaviorFeatures,
    PatternFlags,
    PointerCorrelation,
    TimingStatistics,
)
from trustlens.errors import ValidationError


def validate_intervals(intervals: Sequence[int | float], name: str = "intervals") -> np.ndarray:
    """Return intervals as a float array, rejecting non-positive values."""
    data = np.asarray(list(intervals), dtype=float)
    if data.size and (data <= 0).any():
        raise ValidationError(f"{name} must be positive milliseconds")
    return data


class BehavioralFeatureExtractor:
    """Computes timing statistics, pattern flags and pointer correlation."""

    def __init__(self, config: BehaviorConfig | None = None) -> None:
        self._config = config or BehaviorConfig()

    def statistics(self, data: np.ndarray) -> TimingStatistics:
        mean = float(data.mean())
        variance = float(data.var())
        std = float(np.sqrt(variance))
        if std == 0.0:
            skew = kurt = 0.0
        else:
            z = (data - mean) / std
            skew = float(np.mean(z**3))
            kurt = float(np.mean(z**4) - 3.0)
        return TimingStatistics(
            count=int(data.size),
            mean=mean,
            variance=variance,
            std_dev=std,
            skewness=skew,
            kurtosis=kurt,
        )

    def patterns(self, data: np.ndarray) -> PatternFlags:
        cfg = self._config
        deltas = np.diff(data)
        second = np.diff(data, n=2)

        rhythm = bool(deltas.size and float(deltas.var()) > cfg.rhythm_delta_variance)
        if second.size:
            accel_fraction = float(np.mean(np.abs(second) > cfg.acceleration_threshold_ms))
        else:
            accel_fraction = 0.0
        acceleration = accel_fraction >= cfg.acceleration_min_fraction

        pauses = bool((data < data.mean() * cfg.pause_mean_multiplier).any())

        if deltas.size:
            mean_delta = float(np.mean(np.abs(deltas)))
            consistency = 1.0 - min(1.0, mean_delta / cfg.consistency_scale_ms)
        else:
            consistency = 0.0

        return PatternFlags(
            has_natural_rhythm=rhythm,
            has_acceleration=acceleration,
            has_pauses=pauses,
            consistency=consistency,
        )

    def pointer_correlation(
        self,
        keystrokes: np.ndarray,
        pointer: np.ndarray,
    ) -> PointerCorrelation | None:
        """Fraction of aligned samples within the match window.

        Sequences of unequal length are not comparable and yield None.
        """
        if pointer.size == 0 or keystrokes.size != pointer.size:
            return None
        cfg = self._config
        score = float(np.mean(np.abs(keystrokes - pointer) < cfg.pointer_match_ms))
        return PointerCorrelation(
            correlation_score=score,
            is_natural_correlation=score > cfg.pointer_natural_fraction,
        )

    def extract(
        self,
        intervals: Sequence[int | float],
        pointer_intervals: Sequence[int | float] | None = None,
    ) -> BehaviorFeatures:
        """Extract features from a validated, non-empty sample."""
        data = validate_intervals(intervals)
        if data.size == 0:
            raise ValidationError("intervals must not be empty")
        pointer = None
        if pointer_intervals:
            pointer = self.pointer_correlation(
                data, validate_intervals(pointer_intervals, "pointer_intervals"),
            )
        return BehaviorFeatures(
            statistics=self.statistics(data),
            patterns=self.patterns(data),
            pointer=pointer,
        )
