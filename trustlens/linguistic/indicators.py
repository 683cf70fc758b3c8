"""Synthetic-text indicators.

Each check is a stateless function returning its reason code or None,
in the style of the alert triggers. ``detect_indicators`` runs them all in
a fixed order so reason codes are reported deterministically.
"""

from collections import Counter
from collections.abc import Callable

from trustlens.linguistic import lexicons
from trustlens.linguistic.config import LinguisticConfig
from trustlens.linguistic.features import split_sentences
from trustlens.linguistic.schemas import LinguisticFingerprint

INDICATOR_REASONS: dict[str, str] = {
    "too_perfect_readability": "Readability is implausibly high",
    "no_personal_pronouns": "No first-person pronouns in a long review",
    "generic_transitions": "Heavy use of generic transition phrases",
    "low_lexical_diversity": "Low lexical diversity",
    "overly_descriptive_language": "Overly descriptive language",
    "excessive_superlatives": "Excessive superlative adjectives",
    "marketing_language": "Marketing or promotional phrasing",
    "overly_enthusiastic_language": "Overly enthusiastic phrasing",
    "excessive_exclamations": "Excessive exclamation marks",
    "repetitive_structure": "Several sentences open with the same word",
    "marketing_buzzwords": "Marketing buzzwords",
    "external_detector": "External detector flagged the text as machine-generated",
}

Indicator = Callable[[str, LinguisticFingerprint, LinguisticConfig], str | None]


def check_readability(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if fp.readability > cfg.readability_ceiling:
        return "too_perfect_readability"
    return None


def check_personal_pronouns(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if len(text) > cfg.pronoun_min_chars and not lexicons.FIRST_PERSON_PATTERN.search(text):
        return "no_personal_pronouns"
    return None


def check_generic_transitions(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    count = lexicons.count_phrases(text.lower(), lexicons.GENERIC_TRANSITIONS)
    if count >= cfg.generic_transitions_min:
        return "generic_transitions"
    return None


def check_lexical_diversity(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if fp.word_count and fp.lexical_diversity < cfg.lexical_diversity_floor:
        return "low_lexical_diversity"
    return None


def check_descriptive(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if lexicons.count_phrases(text.lower(), lexicons.DESCRIPTIVE_PHRASES) >= cfg.descriptive_phrases_min:
        return "overly_descriptive_language"
    return None


def check_superlatives(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if lexicons.count_phrases(text.lower(), lexicons.SUPERLATIVE_ADJECTIVES) >= cfg.superlatives_min:
        return "excessive_superlatives"
    return None


def check_marketing(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if lexicons.count_phrases(text.lower(), lexicons.MARKETING_PHRASES) >= cfg.marketing_phrases_min:
        return "marketing_language"
    return None


def check_enthusiasm(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if lexicons.count_phrases(text.lower(), lexicons.ENTHUSIASTIC_PHRASES) >= cfg.enthusiastic_phrases_min:
        return "overly_enthusiastic_language"
    return None


def check_exclamations(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if text.count("!") >= cfg.exclamations_min:
        return "excessive_exclamations"
    return None


def check_repetitive_structure(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    sentences = split_sentences(text)
    if len(sentences) < cfg.repeated_starter_min:
        return None
    starters = Counter(s.lower().split(" ")[0] for s in sentences)
    if max(starters.values()) >= cfg.repeated_starter_min:
        return "repetitive_structure"
    return None


def check_buzzwords(text: str, fp: LinguisticFingerprint, cfg: LinguisticConfig) -> str | None:
    if lexicons.count_phrases(text.lower(), lexicons.MARKETING_BUZZWORDS) >= cfg.buzzwords_min:
        return "marketing_buzzwords"
    return None


INDICATORS: tuple[Indicator, ...] = (
    check_readability,
    check_personal_pronouns,
    check_generic_transitions,
    check_lexical_diversity,
    check_descriptive,
    check_superlatives,
    check_marketing,
    check_enthusiasm,
    check_exclamations,
    check_repetitive_structure,
    check_buzzwords,
)


def detect_indicators(
    text: str,
    fingerprint: LinguisticFingerprint,
    config: LinguisticConfig | None = None,
) -> list[str]:
    """Run every indicator and return the reason codes that fired."""
    cfg = config or LinguisticConfig()
    codes: list[str] = []
    for check in INDICATORS:
        code = check(text, fingerprint, cfg)
        if code is not None:
            codes.append(code)
    return codes
