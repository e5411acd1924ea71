# versevoice/nlp/__init__.py
# ===========================
# Content Classification Layer — VerseVoice
#
# Pattern/keyword based topic classification of transcripts against the
# static religious taxonomy. No LLM, no network, no mutable state.
#
# Public API:
#   classify(transcript) → ClassificationResult

from versevoice.nlp.classifier import (  # noqa: F401
    Category,
    ClassificationResult,
    classify,
    matching_religions,
)
from versevoice.nlp.taxonomy import Religion  # noqa: F401

__all__ = [
    "classify",
    "matching_religions",
    "Category",
    "ClassificationResult",
    "Religion",
]
