"""Behavioral biometrics: keystroke and pointer cadence analysis."""

from trustlens.behavior.classifier import BotBehaviorClassifier, build_report
from trustlens.behavior.config import BehaviorConfig
from trustlens.behavior.features import BehavioralFeatureExtractor
from trustlens.behavior.schemas import (
    BehaviorClassification,
    BehaviorFeatures,
    PatternFlags,
    PointerCorrelation,
    TimingStatistics,
)

__all__ = [
    "BehaviorClassification",
    "BehaviorConfig",
    "BehaviorFeatures",
    "BehavioralFeatureExtractor",
    "BotBehaviorClassifier",
    "PatternFlags",
    "PointerCorrelation",
    "TimingStatistics",
    "build_report",
]
