"""Stylistic similarity between linguistic fingerprints.

Used to spot reviews that share one author's style across accounts.
"""

from collections.abc import Mapping
from itertools import combinations

from trustlens.linguistic.schemas import LinguisticFingerprint

STYLE_FEATURES: tuple[str, ...] = (
    "vocabulary_richness",
    "sentiment_score",
    "punctuation_density",
    "capitalization_ratio",
    "avg_words_per_sentence",
    "avg_chars_per_word",
    "lexical_diversity",
    "repetition_score",
)


def compare_fingerprints(a: LinguisticFingerprint, b: LinguisticFingerprint) -> float:
    """Mean per-feature similarity in [0, 1]; identical texts score 1.0.

    Each feature contributes ``1 - |a - b| / max(|a|, |b|, 0.01)``,
    floored at zero.
    """
    if a.content_hash == b.content_hash:
        return 1.0
    total = 0.0
    for name in STYLE_FEATURES:
        va = getattr(a, name)
        vb = getattr(b, name)
        scale = max(abs(va), abs(vb), 0.01)
        total += max(0.0, 1.0 - abs(va - vb) / scale)
    return total / len(STYLE_FEATURES)


def find_similar_pairs(
    fingerprints: Mapping[str, LinguisticFingerprint],
    threshold: float = 0.9,
) -> list[tuple[str, str, float]]:
    """All pairs of fingerprints at or above ``threshold``, most similar first."""
    pairs = []
    for (id_a, fp_a), (id_b, fp_b) in combinations(fingerprints.items(), 2):
        similarity = compare_fingerprints(fp_a, fp_b)
        if similarity >= threshold:
            pairs.append((id_a, id_b, similarity))
    pairs.sort(key=lambda pair: pair[2], reverse=True)
    return pairs
