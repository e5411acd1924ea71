"""
versevoice/nlp/taxonomy.py
===========================
Religious Taxonomy Table — VerseVoice

Responsibility:
    - Define the fixed religion enumeration and its precedence order
    - Hold, per religion, the keyword patterns that identify it, its general
      verse list, and finer-grained sub-themes (mercy, prayer) with their own
      verse lists
    - Hold the religion-agnostic term set and the cross-religion verse pool

The table is built once at import time and exposed through read-only
mappings and tuples. It is never mutated, so concurrent classifications share
it without any locking.

This module does NOT:
    - Decide precedence between abuse, religion and personal topics
      (see versevoice.nlp.classifier)
    - Pick verses (selection happens in the classifier)
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class Religion(str, Enum):
    """Religion tags a religious classification may carry."""

    ISLAM = "islam"
    CHRISTIANITY = "christianity"
    HINDUISM = "hinduism"
    BUDDHISM = "buddhism"
    JUDAISM = "judaism"
    SIKHISM = "sikhism"
    GENERAL = "general"


@dataclass(frozen=True)
class Verse:
    """A canned response: scripture text plus where it comes from."""

    text: str
    source: str


@dataclass(frozen=True)
class Subtopic:
    """A sub-theme inside one religion, e.g. mercy or prayer."""

    name: str
    pattern: re.Pattern[str]
    verses: tuple[Verse, ...]


@dataclass(frozen=True)
class ReligionTaxonomy:
    """Keyword pattern, general verses and sub-themes of one religion."""

    religion: Religion
    pattern: re.Pattern[str]
    verses: tuple[Verse, ...]
    subtopics: tuple[Subtopic, ...] = ()

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None

    def subtopic_for(self, text: str) -> Subtopic | None:
        """Return the first sub-theme whose keywords appear in ``text``."""
        for subtopic in self.subtopics:
            if subtopic.pattern.search(text):
                return subtopic
        return None


def _compile(markers: list[str]) -> re.Pattern[str]:
    return re.compile("|".join(markers), re.IGNORECASE)


# ---------------------------------------------------------------------------
# Sub-theme markers shared by every religion
# ---------------------------------------------------------------------------

_MERCY_MARKERS: list[str] = [
    r"\bmerc(?:y|iful|ies)\b",
    r"\bcompassion(?:ate)?\b",
    r"\bforgiv(?:e|es|en|eness|ing)\b",
    r"\bgrace\b",
    r"\bkindness\b",
]

_PRAYER_MARKERS: list[str] = [
    r"\bpray(?:s|ed|ing)?\b",
    r"\bprayers?\b",
    r"\bworship(?:s|ping)?\b",
    r"\bdevotion(?:al)?\b",
    r"\bsupplication\b",
]


def _subtopics(
    mercy: tuple[Verse, ...],
    prayer: tuple[Verse, ...],
    extra_prayer_markers: list[str] | None = None,
) -> tuple[Subtopic, ...]:
    return (
        Subtopic("mercy", _compile(_MERCY_MARKERS), mercy),
        Subtopic(
            "prayer",
            _compile(_PRAYER_MARKERS + (extra_prayer_markers or [])),
            prayer,
        ),
    )


# ---------------------------------------------------------------------------
# Islam
# ---------------------------------------------------------------------------

_ISLAM = ReligionTaxonomy(
    religion=Religion.ISLAM,
    pattern=_compile([
        r"\bislam(?:ic)?\b",
        r"\bmuslims?\b",
        r"\ballah\b",
        r"\bqur'?an\b",
        r"\bkoran\b",
        r"\bmosques?\b",
        r"\bmuhammad\b",
        r"\bramadan\b",
        r"\bhadiths?\b",
        r"\bimam\b",
        r"\bhajj\b",
        r"\bmecca\b",
    ]),
    verses=(
        Verse("Indeed, with hardship comes ease.", "Quran 94:6"),
        Verse(
            "Allah does not burden a soul beyond that it can bear.",
            "Quran 2:286",
        ),
        Verse(
            "And He found you lost and guided you.",
            "Quran 93:7",
        ),
    ),
    subtopics=_subtopics(
        mercy=(
            Verse("My mercy encompasses all things.", "Quran 7:156"),
            Verse(
                "Say, O My servants who have transgressed against themselves, "
                "do not despair of the mercy of Allah. Indeed, Allah forgives all sins.",
                "Quran 39:53",
            ),
            Verse(
                "And We have not sent you, except as a mercy to the worlds.",
                "Quran 21:107",
            ),
        ),
        prayer=(
            Verse("And seek help through patience and prayer.", "Quran 2:45"),
            Verse(
                "Indeed, prayer prohibits immorality and wrongdoing.",
                "Quran 29:45",
            ),
            Verse(
                "Call upon Me; I will respond to you.",
                "Quran 40:60",
            ),
        ),
        extra_prayer_markers=[r"\bsalah\b", r"\bsalat\b", r"\bdua\b"],
    ),
)


# ---------------------------------------------------------------------------
# Christianity
# ---------------------------------------------------------------------------

_CHRISTIANITY = ReligionTaxonomy(
    religion=Religion.CHRISTIANITY,
    pattern=_compile([
        r"\bchristian(?:s|ity)?\b",
        r"\bjesus\b",
        r"\bchrist\b",
        r"\bbible\b",
        r"\bchurch(?:es)?\b",
        r"\bgospels?\b",
        r"\beaster\b",
        r"\bchristmas\b",
        r"\bapostles?\b",
        r"\btrinity\b",
        r"\bholy spirit\b",
    ]),
    verses=(
        Verse(
            "For God so loved the world, that he gave his only Son, that whoever "
            "believes in him should not perish but have eternal life.",
            "John 3:16",
        ),
        Verse("Love is patient and kind.", "1 Corinthians 13:4"),
        Verse(
            "I can do all things through him who strengthens me.",
            "Philippians 4:13",
        ),
    ),
    subtopics=_subtopics(
        mercy=(
            Verse("Blessed are the merciful, for they shall receive mercy.", "Matthew 5:7"),
            Verse(
                "The Lord is merciful and gracious, slow to anger and abounding "
                "in steadfast love.",
                "Psalm 103:8",
            ),
            Verse(
                "Be kind to one another, tenderhearted, forgiving one another, "
                "as God in Christ forgave you.",
                "Ephesians 4:32",
            ),
        ),
        prayer=(
            Verse(
                "Do not be anxious about anything, but in everything by prayer and "
                "supplication with thanksgiving let your requests be made known to God.",
                "Philippians 4:6",
            ),
            Verse(
                "Ask, and it will be given to you; seek, and you will find; knock, "
                "and it will be opened to you.",
                "Matthew 7:7",
            ),
            Verse("Pray without ceasing.", "1 Thessalonians 5:17"),
        ),
    ),
)


# ---------------------------------------------------------------------------
# Hinduism
# ---------------------------------------------------------------------------

_HINDUISM = ReligionTaxonomy(
    religion=Religion.HINDUISM,
    pattern=_compile([
        r"\bhindus?\b",
        r"\bhinduism\b",
        r"\bkrishna\b",
        r"\bvishnu\b",
        r"\bshiva\b",
        r"\bbhagavad\b",
        r"\bgita\b",
        r"\bvedas?\b",
        r"\bvedic\b",
        r"\bupanishads?\b",
        r"\bdharma\b",
        r"\bkarma\b",
        r"\bdiwali\b",
    ]),
    verses=(
        Verse(
            "You have a right to perform your prescribed duties, but you are not "
            "entitled to the fruits of your actions.",
            "Bhagavad Gita 2.47",
        ),
        Verse(
            "The soul is neither born, nor does it ever die.",
            "Bhagavad Gita 2.20",
        ),
        Verse(
            "Truth is one; the wise call it by many names.",
            "Rig Veda 1.164.46",
        ),
    ),
    subtopics=_subtopics(
        mercy=(
            Verse(
                "One who is not envious but is a kind friend to all living entities, "
                "who is free from false ego and equal in happiness and distress, "
                "is very dear to Me.",
                "Bhagavad Gita 12.13",
            ),
            Verse(
                "Fearlessness, purity of heart, compassion towards all beings: these "
                "belong to one born of the divine nature.",
                "Bhagavad Gita 16.1-3",
            ),
        ),
        prayer=(
            Verse(
                "Whoever offers Me with devotion a leaf, a flower, a fruit, or water, "
                "that offering of love I accept.",
                "Bhagavad Gita 9.26",
            ),
            Verse(
                "Lead me from the unreal to the real, from darkness to light, "
                "from death to immortality.",
                "Brihadaranyaka Upanishad 1.3.28",
            ),
        ),
        extra_prayer_markers=[r"\bpuja\b", r"\bmantras?\b", r"\bbhakti\b"],
    ),
)


# ---------------------------------------------------------------------------
# Buddhism
# ---------------------------------------------------------------------------

_BUDDHISM = ReligionTaxonomy(
    religion=Religion.BUDDHISM,
    pattern=_compile([
        r"\bbuddhas?\b",
        r"\bbuddhis(?:m|t|ts)\b",
        r"\bdhamma\b",
        r"\bnirvana\b",
        r"\bsangha\b",
        r"\bzen\b",
        r"\bbodhisattvas?\b",
        r"\bsutras?\b",
    ]),
    verses=(
        Verse(
            "Hatred is never appeased by hatred in this world. By non-hatred alone "
            "is hatred appeased.",
            "Dhammapada 5",
        ),
        Verse(
            "Mind precedes all mental states. Mind is their chief; they are all "
            "mind-wrought.",
            "Dhammapada 1",
        ),
        Verse(
            "Better than a thousand hollow words is one word that brings peace.",
            "Dhammapada 100",
        ),
    ),
    subtopics=_subtopics(
        mercy=(
            Verse(
                "Just as a mother would protect her only child with her life, even so "
                "let one cultivate a boundless love towards all beings.",
                "Karaniya Metta Sutta, Sutta Nipata 1.8",
            ),
            Verse(
                "All tremble at violence; life is dear to all. Putting oneself in the "
                "place of another, one should not kill nor cause another to kill.",
                "Dhammapada 130",
            ),
        ),
        prayer=(
            Verse(
                "May all beings be happy; may they be safe and at ease.",
                "Karaniya Metta Sutta, Sutta Nipata 1.8",
            ),
            Verse(
                "Though one may conquer a thousand times a thousand men in battle, "
                "yet he indeed is the noblest victor who conquers himself.",
                "Dhammapada 103",
            ),
        ),
        extra_prayer_markers=[r"\bmeditat(?:e|es|ion|ing)\b", r"\bchanting\b"],
    ),
)


# ---------------------------------------------------------------------------
# Judaism
# ---------------------------------------------------------------------------

_JUDAISM = ReligionTaxonomy(
    religion=Religion.JUDAISM,
    pattern=_compile([
        r"\bjews?\b",
        r"\bjewish\b",
        r"\bjudaism\b",
        r"\btorah\b",
        r"\btalmud\b",
        r"\bsynagogues?\b",
        r"\brabbis?\b",
        r"\bshabbat\b",
        r"\bpassover\b",
        r"\byom kippur\b",
        r"\bhanukkah\b",
    ]),
    verses=(
        Verse(
            "He has told you, O man, what is good: to do justice, to love kindness, "
            "and to walk humbly with your God.",
            "Micah 6:8",
        ),
        Verse(
            "If I am not for myself, who will be for me? And if I am only for myself, "
            "what am I? And if not now, when?",
            "Pirkei Avot 1:14",
        ),
        Verse(
            "You shall love your neighbor as yourself.",
            "Leviticus 19:18",
        ),
    ),
    subtopics=_subtopics(
        mercy=(
            Verse(
                "The Lord is good to all, and his mercy is over all that he has made.",
                "Psalm 145:9",
            ),
            Verse(
                "The steadfast love of the Lord never ceases; his mercies never come "
                "to an end; they are new every morning.",
                "Lamentations 3:22-23",
            ),
        ),
        prayer=(
            Verse("Hear, O Israel: The Lord our God, the Lord is one.", "Deuteronomy 6:4"),
            Verse(
                "The Lord is near to all who call on him, to all who call on him in truth.",
                "Psalm 145:18",
            ),
        ),
        extra_prayer_markers=[r"\bshema\b", r"\bamidah\b"],
    ),
)


# ---------------------------------------------------------------------------
# Sikhism
# ---------------------------------------------------------------------------

_SIKHISM = ReligionTaxonomy(
    religion=Religion.SIKHISM,
    pattern=_compile([
        r"\bsikhs?\b",
        r"\bsikhism\b",
        r"\bguru nanak\b",
        r"\bgurdwaras?\b",
        r"\bwaheguru\b",
        r"\bgranth sahib\b",
        r"\bkhalsa\b",
    ]),
    verses=(
        Verse(
            "There is but One God. Truth is His Name. He is the Creator, without "
            "fear, without hate.",
            "Guru Granth Sahib, Mool Mantar",
        ),
        Verse(
            "Truth is higher than everything; but higher still is truthful living.",
            "Guru Granth Sahib, Ang 62",
        ),
    ),
    subtopics=_subtopics(
        mercy=(
            Verse(
                "Where there is forgiveness, there is God Himself.",
                "Guru Granth Sahib, Ang 1372",
            ),
            Verse(
                "Compassion is the cotton, contentment the thread.",
                "Guru Granth Sahib, Ang 471",
            ),
        ),
        prayer=(
            Verse(
                "Nanak, through the Name comes ever-rising spirit; by Your will, "
                "may all be blessed.",
                "Ardas",
            ),
            Verse(
                "Meditating on the Name, the mind is illumined.",
                "Guru Granth Sahib, Ang 1",
            ),
        ),
        extra_prayer_markers=[r"\bardas\b", r"\bsimran\b"],
    ),
)


# ---------------------------------------------------------------------------
# Religion-agnostic terms and the cross-religion pool
# ---------------------------------------------------------------------------

GENERIC_RELIGIOUS_PATTERN: re.Pattern[str] = _compile([
    r"\bgods?\b",
    r"\breligions?\b",
    r"\breligious\b",
    r"\bspiritual(?:ity)?\b",
    r"\bfaith\b",
    r"\bprayers?\b",
    r"\bpray(?:s|ed|ing)?\b",
    r"\bdivine\b",
    r"\btemples?\b",
    r"\bworship\b",
    r"\bholy\b",
    r"\bsacred\b",
    r"\bscriptures?\b",
    r"\bheaven\b",
    r"\bsoul\b",
])

GENERAL_VERSES: tuple[Verse, ...] = (
    _ISLAM.verses[0],
    _CHRISTIANITY.verses[1],
    _HINDUISM.verses[2],
    _BUDDHISM.verses[0],
    _JUDAISM.verses[2],
    _SIKHISM.verses[1],
)


# ---------------------------------------------------------------------------
# Public table
# ---------------------------------------------------------------------------

# Precedence order for religion matching: first match wins.
RELIGION_ORDER: tuple[Religion, ...] = (
    Religion.ISLAM,
    Religion.CHRISTIANITY,
    Religion.HINDUISM,
    Religion.BUDDHISM,
    Religion.JUDAISM,
    Religion.SIKHISM,
)

TAXONOMY: MappingProxyType = MappingProxyType({
    entry.religion: entry
    for entry in (_ISLAM, _CHRISTIANITY, _HINDUISM, _BUDDHISM, _JUDAISM, _SIKHISM)
})
