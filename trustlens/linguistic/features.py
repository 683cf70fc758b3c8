"""
Linguistic feature extraction for review texts.

Surface metrics (word counts, lexicon sentiment, repetition) need no
language model and are computed for every text. The full fingerprint adds
spaCy tokens, POS tags, lemmas and entities plus readability indices.

The spaCy pipeline is loaded lazily on first use. When the configured
model is not installed a blank pipeline for the fallback language is used
instead: tokens and readability still work, POS ratios and entity counts
come out as zero.
"""

import hashlib
import logging
import re
from collections import Counter
from typing import TYPE_CHECKING, Any

from trustlens.linguistic import lexicons
from trustlens.linguistic.config import LinguisticConfig
from trustlens.linguistic.schemas import LinguisticFingerprint, SurfaceMetrics

if TYPE_CHECKING:
    from spacy.language import Language

logger = logging.getLogger(__name__)

NAMED_ENTITY_LABELS = frozenset({"PERSON", "GPE", "LOC"})
TOPIC_ENTITY_LABELS = frozenset({"ORG", "PRODUCT", "NORP", "EVENT", "WORK_OF_ART", "FAC"})

_VOWELS = "aeiouy"


def count_syllables(word: str) -> int:
    """Approximate syllables as vowel groups, minus a silent trailing 'e'."""
    word = word.lower()
    count = 0
    prev_vowel = False
    for char in word:
        is_vowel = char in _VOWELS
        if is_vowel and not prev_vowel:
            count += 1
        prev_vowel = is_vowel
    if word.endswith("e") and count > 1:
        count -= 1
    return max(1, count)


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation, dropping empty fragments."""
    return [s.strip() for s in lexicons.SENTENCE_SPLIT_PATTERN.split(text) if s.strip()]


def content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class LinguisticFeatureExtractor:
    """
    Computes surface metrics and linguistic fingerprints.

    Usage:
        extractor = LinguisticFeatureExtractor()
        fingerprint = extractor.extract("I bought this kettle last month...")

    Pass ``nlp`` to reuse an already-loaded spaCy pipeline (tests inject
    ``spacy.blank("en")``).
    """

    def __init__(
        self,
        config: LinguisticConfig | None = None,
        nlp: "Language | None" = None,
    ) -> None:
        self._config = config or LinguisticConfig()
        self._nlp = nlp

    @property
    def nlp(self) -> "Language":
        if self._nlp is None:
            self._nlp = self._load_pipeline()
        return self._nlp

    def _load_pipeline(self) -> "Language":
        import spacy

        model_name = self._config.spacy_model
        try:
            logger.info("Loading spaCy model: %s", model_name)
            return spacy.load(model_name, disable=["parser"])
        except OSError:
            logger.warning(
                "spaCy model '%s' not installed, using blank '%s' pipeline. "
                "Install with: python -m spacy download %s",
                model_name,
                self._config.fallback_language,
                model_name,
            )
            return spacy.blank(self._config.fallback_language)

    def surface(self, text: str) -> SurfaceMetrics:
        """Compute language-model-free statistics for ``text``."""
        stripped = text.strip()
        lower = stripped.lower()
        words = lower.split()
        tokens = lexicons.WORD_TOKEN_PATTERN.findall(lower)
        sentences = split_sentences(lower)

        n_words = len(words)
        n_tokens = len(tokens)

        positive = sum(1 for t in tokens if t in lexicons.POSITIVE_WORDS)
        negative = sum(1 for t in tokens if t in lexicons.NEGATIVE_WORDS)

        counts = Counter(words)
        top = max(counts.values()) if counts else 0

        return SurfaceMetrics(
            char_count=len(stripped),
            word_count=n_words,
            sentence_count=len(sentences),
            avg_words_per_sentence=n_words / max(len(sentences), 1),
            avg_chars_per_word=len(re.sub(r"\s", "", lower)) / max(n_words, 1),
            vocabulary_richness=len(counts) / max(n_words, 1),
            sentiment_score=(positive - negative) / max(n_tokens, 1),
            sentiment_intensity=float(abs(positive - negative)),
            punctuation_density=len(lexicons.PUNCTUATION_PATTERN.findall(lower))
            / max(len(lower), 1),
            capitalization_ratio=sum(1 for c in stripped if "A" <= c <= "Z")
            / max(len(stripped), 1),
            repetition_score=top / max(n_words, 1),
            lexical_diversity=len(set(tokens)) / n_tokens if n_tokens else 0.0,
            emotional_word_count=sum(1 for t in tokens if t in lexicons.EMOTIONAL_WORDS),
            content_hash=content_hash(stripped),
        )

    def extract(self, text: str, surface: SurfaceMetrics | None = None) -> LinguisticFingerprint:
        """Compute the full fingerprint for ``text``."""
        surface = surface or self.surface(text)
        doc = self.nlp(text)

        tokens = [t for t in doc if not t.is_punct and not t.is_space]
        n = max(len(tokens), 1)
        lowered = [t.lower_ for t in tokens]
        unique_tokens = set(lowered)
        lemmas = {(t.lemma_ or t.lower_).lower() for t in tokens}

        pos_counts = Counter(t.pos_ for t in tokens)
        named, topics = _count_entities(doc.ents)

        sentences = split_sentences(text)
        avg_sentence_length = len(tokens) / max(len(sentences), 1)
        syllables = [count_syllables(w) for w in lowered]
        avg_syllables = sum(syllables) / n
        complex_ratio = sum(1 for s in syllables if s >= 3) / n

        return LinguisticFingerprint(
            vocabulary_richness=surface.vocabulary_richness,
            sentiment_score=surface.sentiment_score,
            sentiment_intensity=surface.sentiment_intensity,
            punctuation_density=surface.punctuation_density,
            capitalization_ratio=surface.capitalization_ratio,
            repetition_score=surface.repetition_score,
            avg_words_per_sentence=surface.avg_words_per_sentence,
            avg_chars_per_word=surface.avg_chars_per_word,
            noun_ratio=(pos_counts["NOUN"] + pos_counts["PROPN"]) / n,
            verb_ratio=pos_counts["VERB"] / n,
            adjective_ratio=pos_counts["ADJ"] / n,
            adverb_ratio=pos_counts["ADV"] / n,
            named_entity_count=named,
            topic_count=topics,
            emotional_word_count=sum(1 for w in lowered if w in lexicons.EMOTIONAL_WORDS),
            lexical_diversity=len(unique_tokens) / n if tokens else 0.0,
            morphological_complexity=min(1.0, len(lemmas) / max(len(unique_tokens), 1)),
            readability=206.835 - 1.015 * avg_sentence_length - 84.6 * avg_syllables,
            gunning_fog=0.4 * (avg_sentence_length + 100 * complex_ratio),
            word_count=len(tokens),
            sentence_count=len(sentences),
            char_count=surface.char_count,
            content_hash=surface.content_hash,
        )


def _count_entities(ents: Any) -> tuple[int, int]:
    named = sum(1 for ent in ents if ent.label_ in NAMED_ENTITY_LABELS)
    topics = sum(1 for ent in ents if ent.label_ in TOPIC_ENTITY_LABELS)
    return named, topics
