"""
Phrase location in positioned page text.

- PageTextIndex: corpus + character back-map for a page (or joined pages)
- PhraseLocator: strict, aggressive and bridged phrase search
- SentenceMatcher / OpenAISentenceMatcher: optional AI fallback
"""

from qcpack.locate.index import (
    ADJACENT_GAP,
    Y_TOLERANCE,
    PageTextIndex,
    group_into_lines,
    sort_reading_order,
)
from qcpack.locate.locator import PhraseLocator
from qcpack.locate.suggest import (
    OpenAISentenceMatcher,
    SentenceMatcher,
    verify_suggestion,
)

__all__ = [
    # Index
    "PageTextIndex",
    "group_into_lines",
    "sort_reading_order",
    "Y_TOLERANCE",
    "ADJACENT_GAP",
    # Location
    "PhraseLocator",
    # AI fallback
    "SentenceMatcher",
    "OpenAISentenceMatcher",
    "verify_suggestion",
]
