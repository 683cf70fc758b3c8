"""Word and phrase lexicons for review text analysis.

Contains:
- Sentiment and emotion word sets used by the feature extractor
- Phrase sets behind each synthetic-text indicator
- Spam phrases used by the decision engine
- Regex patterns for the gibberish pre-filter

Phrase matching is case-insensitive substring containment; each phrase
counts at most once per text.
"""

import re

# ── Sentiment ──────────────────────────────────────────────

POSITIVE_WORDS = frozenset({
    "good", "great", "excellent", "amazing", "wonderful", "fantastic",
    "awesome", "love", "perfect", "best", "nice", "beautiful", "quality",
    "recommend", "happy", "satisfied", "pleased", "impressed",
})

NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "horrible", "worst", "hate",
    "disappointed", "poor", "cheap", "fake", "broken", "useless",
    "waste", "regret", "angry", "frustrated",
})

EMOTIONAL_WORDS = frozenset({
    "love", "hate", "amazing", "terrible", "fantastic", "awful",
    "excited", "disappointed", "thrilled", "frustrated", "delighted",
    "angry", "happy", "sad", "surprised", "disgusted", "fearful",
})

# ── Synthetic-text indicators ──────────────────────────────

DESCRIPTIVE_PHRASES = frozenset({
    "truly stands out", "exactly what you want", "cooks up beautifully",
    "fills the kitchen with", "turns out perfect every time",
    "definitely a", "highly recommended", "lives up to its name",
    "quality", "essential", "pantry essential", "goes a long way",
})

SUPERLATIVE_ADJECTIVES = frozenset({
    "perfect", "beautiful", "lovely", "excellent", "amazing", "fantastic",
    "wonderful", "outstanding", "superb", "magnificent", "splendid",
})

MARKETING_PHRASES = frozenset({
    "definitely", "highly recommended", "essential", "must-have",
    "game-changer", "worth every penny", "best investment",
    # promotional
    "worth the price", "good value", "reasonable price", "affordable luxury",
    "investment", "long-term", "durable", "lasting", "reliable",
})

ENTHUSIASTIC_PHRASES = frozenset({
    "absolutely love", "completely satisfied", "beyond expectations",
    "couldn't be happier", "exceeded all expectations", "perfect in every way",
})

MARKETING_BUZZWORDS = frozenset({
    "quality", "premium", "authentic", "genuine", "real", "natural",
    "organic", "traditional", "artisanal", "handcrafted", "premium quality",
})

GENERIC_TRANSITIONS = frozenset({
    "overall", "in conclusion", "to summarize", "it is worth noting",
    "furthermore", "moreover", "additionally", "in addition",
})

# ── Decision engine ────────────────────────────────────────

SPAM_PHRASES = frozenset({
    "buy now", "click here", "limited time", "special offer", "guaranteed",
    "free shipping", "discount", "sale", "promotion",
})

# ── Patterns ───────────────────────────────────────────────

FIRST_PERSON_PATTERN = re.compile(r"\b(I|me|my|mine|myself)\b", re.IGNORECASE)
SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
WORD_TOKEN_PATTERN = re.compile(r"[a-z']+")
PUNCTUATION_PATTERN = re.compile(r"[.,!?;:]")

REPEATED_CHARACTER_PATTERN = re.compile(r"([a-zA-Z])\1{4,}")
KEYBOARD_SMASH_PATTERN = re.compile(r"(qwerty|asdfgh|zxcvbn|qazwsx|edcrfv|tgbyhn|ujmikl|oplp;)")
ALPHABETIC_CONTENT_PATTERN = re.compile(r"[a-zA-Z\s.,!?]")
CONSONANT_VOWEL_PATTERN = re.compile(r"([bcdfghjklmnpqrstvwxyz][aeiou]){6,}")
CONSONANT_CLUSTER_PATTERN = re.compile(r"[a-zA-Z]{3,}[bcdfghjklmnpqrstvwxyz]{5,}")


def count_phrases(lower_text: str, phrases: frozenset[str]) -> int:
    """Number of distinct phrases contained in already-lowercased text."""
    return sum(1 for phrase in phrases if phrase in lower_text)
