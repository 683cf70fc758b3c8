"""Gibberish pre-filter.

Runs before any feature extraction. Checks are ordered; the first one
that fires names the reason code. Texts shorter than the configured
minimum are never classified as gibberish.
"""

from collections import Counter

from trustlens.linguistic import lexicons
from trustlens.linguistic.config import LinguisticConfig

GIBBERISH_REASONS: dict[str, str] = {
    "repeated_characters": "Excessive character repetition detected",
    "keyboard_smash": "Keyboard smashing pattern detected",
    "low_vocabulary_diversity": "Extremely low vocabulary diversity for text length",
    "repeated_word": "Excessive repetition of the same word",
    "non_alphabetic_content": "High ratio of non-alphabetic characters",
    "consonant_vowel_alternation": "Suspicious alternating consonant-vowel pattern",
    "random_consonant_cluster": "Random character sequence pattern detected",
}


def detect_gibberish(text: str, config: LinguisticConfig | None = None) -> str | None:
    """Return the first matching gibberish reason code, or None."""
    cfg = config or LinguisticConfig()
    if len(text) < cfg.gibberish_min_length:
        return None

    lower = text.lower()

    if lexicons.REPEATED_CHARACTER_PATTERN.search(text):
        return "repeated_characters"

    if lexicons.KEYBOARD_SMASH_PATTERN.search(lower):
        return "keyboard_smash"

    words = lower.split()
    if len(words) > cfg.gibberish_min_words:
        richness = len(set(words)) / len(words)
        if richness < cfg.gibberish_vocabulary_richness:
            return "low_vocabulary_diversity"

    counts = Counter(word for word in words if len(word) > 2)
    if counts and max(counts.values()) > len(words) * cfg.gibberish_word_share:
        return "repeated_word"

    non_alpha = len(lexicons.ALPHABETIC_CONTENT_PATTERN.sub("", text))
    if non_alpha / len(text) > cfg.gibberish_non_alpha_ratio:
        return "non_alphabetic_content"

    if lexicons.CONSONANT_VOWEL_PATTERN.search(lower):
        return "consonant_vowel_alternation"

    if lexicons.CONSONANT_CLUSTER_PATTERN.search(lower):
        return "random_consonant_cluster"

    return None
