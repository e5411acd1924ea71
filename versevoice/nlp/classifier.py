"""
versevoice/nlp/classifier.py
=============================
Content Classifier — VerseVoice

Responsibility:
    - Accept a transcript string
    - Decide its topic category with a fixed precedence (first match wins):
        1. Abuse filter        → abusive (fixed refusal)
        2. Religion taxonomy   → religious (verse from sub-theme or religion)
        3. Generic religious   → religious, religion=general
        4. Personal / casual   → personal (echoes the transcript)
        5. Default             → non_religious (fixed refusal)
    - Return a ClassificationResult

All matching is DETERMINISTIC and keyword/pattern based. The only random
choice is which verse to return among the matched category's fixed verse set.

This module does NOT:
    - Call any LLM or external API
    - Touch disk, network, or mutable shared state
    - Raise for any input (empty text falls through to the default)
"""

import logging
import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from versevoice.nlp.taxonomy import (
    GENERAL_VERSES,
    GENERIC_RELIGIOUS_PATTERN,
    RELIGION_ORDER,
    TAXONOMY,
    Religion,
    Verse,
)

logger = logging.getLogger("versevoice.nlp.classifier")


# ---------------------------------------------------------------------------
# Categories and fixed responses
# ---------------------------------------------------------------------------


class Category(str, Enum):
    """Top-level topic categories."""

    RELIGIOUS = "religious"
    PERSONAL = "personal"
    ABUSIVE = "abusive"
    NON_RELIGIOUS = "non_religious"


ABUSIVE_RESPONSE = (
    "Please keep the conversation respectful. I can't respond to abusive language."
)
NON_RELIGIOUS_RESPONSE = (
    "I can't answer on this topic as it is not related to religion."
)
PERSONAL_RESPONSE_TEMPLATE = (
    'That sounds personal: "{transcript}". I can only answer questions about religion.'
)


# ---------------------------------------------------------------------------
# Pattern tables
# ---------------------------------------------------------------------------

_ABUSE_MARKERS: list[str] = [
    r"\bf+u+c+k+\w*",
    r"\bshit\w*",
    r"\bbitch\w*",
    r"\bbastards?\b",
    r"\bassholes?\b",
    r"\bdickheads?\b",
    r"\bcunts?\b",
    r"\bidiots?\b",
    r"\bmorons?\b",
    r"\byou(?:'re| are)? (?:so |such an? )?(?:stupid|dumb)\b",
    r"\bdumbass\w*",
    r"\bslut\w*",
    r"\bwhores?\b",
    r"\bshut up\b",
    r"\bi hate you\b",
]

_PERSONAL_MARKERS: list[str] = [
    r"\bmy (?:mom|mum|mother|dad|father|sister|brother|wife|husband|son|daughter"
    r"|grandma|grandmother|grandpa|grandfather|family|friend|girlfriend|boyfriend)\b",
    r"\bfamily\b",
    r"\bi love (?:you|her|him|them)\b",
    r"\blove you\b",
    r"\bi miss (?:you|her|him|them)\b",
    r"\bsweetheart\b",
    r"\bdarling\b",
    r"\bmy dear\b",
]

_ABUSE_PATTERN: re.Pattern[str] = re.compile("|".join(_ABUSE_MARKERS), re.IGNORECASE)
_PERSONAL_PATTERN: re.Pattern[str] = re.compile(
    "|".join(_PERSONAL_MARKERS), re.IGNORECASE
)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassificationResult:
    """
    Outcome of classify(): exactly one category variant.

    Attributes:
        category: Which variant this is.
        text:     Response text (the verse text for religious results).
        religion: Religion tag; set only for religious results.
        subtopic: Sub-theme name (e.g. "mercy"); religious results only.
        source:   Verse source; religious results only.
    """

    category: Category
    text: str
    religion: Religion | None = None
    subtopic: str | None = None
    source: str | None = None

    def __post_init__(self) -> None:
        is_religious = self.category == Category.RELIGIOUS
        if is_religious and (self.religion is None or self.source is None):
            raise ValueError("Religious results need a religion and a verse source.")
        if not is_religious and (
            self.religion is not None or self.subtopic is not None or self.source is not None
        ):
            raise ValueError(f"{self.category.value} results carry text only.")

    @classmethod
    def religious(
        cls, religion: Religion, verse: Verse, subtopic: str | None = None
    ) -> "ClassificationResult":
        return cls(
            category=Category.RELIGIOUS,
            text=verse.text,
            religion=religion,
            subtopic=subtopic,
            source=verse.source,
        )

    def to_dict(self) -> dict[str, Any]:
        """Render as category + text, with religion details (null when absent)."""
        return {
            "category": self.category.value,
            "text": self.text,
            "religion": self.religion.value if self.religion else None,
            "subtopic": self.subtopic,
            "source": self.source,
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def is_abusive(transcript: str) -> bool:
    return _ABUSE_PATTERN.search(transcript) is not None


def matching_religions(transcript: str) -> list[Religion]:
    """
    Return every religion whose keywords appear in ``transcript``, in
    precedence order. classify() only uses the first one.
    """
    return [
        religion
        for religion in RELIGION_ORDER
        if TAXONOMY[religion].matches(transcript)
    ]


def classify(transcript: str, rng: random.Random | None = None) -> ClassificationResult:
    """
    Classify a transcript and choose a canned response.

    Args:
        transcript: Text from the transcription service. May be empty.
        rng:        Random source used to pick among equally valid verses.
                    Defaults to the module-level ``random`` functions.

    Returns:
        ClassificationResult with exactly one category populated.
    """
    chooser = rng or random
    text = transcript or ""

    # 1. Abuse short-circuits everything else
    if is_abusive(text):
        logger.info("Transcript classified as abusive.")
        return ClassificationResult(category=Category.ABUSIVE, text=ABUSIVE_RESPONSE)

    # 2. First matching religion, optionally narrowed to a sub-theme
    for religion in RELIGION_ORDER:
        entry = TAXONOMY[religion]
        if not entry.matches(text):
            continue
        subtopic = entry.subtopic_for(text)
        if subtopic is not None:
            verse = chooser.choice(subtopic.verses)
            logger.info(
                "Transcript classified as religious: %s / %s", religion.value, subtopic.name
            )
            return ClassificationResult.religious(religion, verse, subtopic.name)
        logger.info("Transcript classified as religious: %s", religion.value)
        return ClassificationResult.religious(religion, chooser.choice(entry.verses))

    # 3. Religion-agnostic spiritual terms
    if GENERIC_RELIGIOUS_PATTERN.search(text):
        logger.info("Transcript classified as religious: general")
        return ClassificationResult.religious(
            Religion.GENERAL, chooser.choice(GENERAL_VERSES)
        )

    # 4. Personal / casual
    if _PERSONAL_PATTERN.search(text):
        logger.info("Transcript classified as personal.")
        return ClassificationResult(
            category=Category.PERSONAL,
            text=PERSONAL_RESPONSE_TEMPLATE.format(transcript=text.strip()),
        )

    # 5. Default
    logger.info("Transcript classified as non-religious.")
    return ClassificationResult(category=Category.NON_RELIGIOUS, text=NON_RELIGIOUS_RESPONSE)
