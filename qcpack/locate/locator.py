"""
Phrase location in positioned page text.

PhraseLocator finds a context phrase in a PageTextIndex and returns the
per-run character ranges it covers. Strategies, per page pairing:

1. Strict: normalized corpus vs normalized phrase (see normalize()).
2. Aggressive: letters and digits only on both sides. Recovers matches
   broken by irregular whitespace or punctuation, at the cost of possibly
   merging two words across a removed space.

Pairings are tried in order: the page alone, the page joined with the next
page, then the previous page joined with the page. A phrase crossing a page
boundary therefore yields spans on both pages, each owned by its page.

If every pairing fails, an optional SentenceMatcher is consulted and its
answer is used only if it occurs verbatim in the page text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from rapidfuzz import fuzz

from qcpack.locate.index import PageTextIndex
from qcpack.locate.suggest import SentenceMatcher, verify_suggestion
from qcpack.models import Diagnostic, DiagnosticKind, LocatedSpan
from qcpack.normalizers.text import normalize, strip_to_alphanumeric

logger = logging.getLogger(__name__)


def _find_all(haystack: str, needle: str) -> Iterator[int]:
    """Start offsets of every (possibly overlapping) occurrence."""
    pos = haystack.find(needle)
    while pos != -1:
        yield pos
        pos = haystack.find(needle, pos + 1)


def _is_whole_word(haystack: str, start: int, length: int) -> bool:
    before = haystack[start - 1] if start > 0 else " "
    end = start + length
    after = haystack[end] if end < len(haystack) else " "
    return before == " " and after == " "


class PhraseLocator:
    """Finds phrases in page text indexes.

    Usage:
        locator = PhraseLocator()
        span = locator.locate("the quick brown fox", page_index, next_page=following)
        if span is None:
            ...  # list the correction unmarked
    """

    def __init__(
        self,
        matcher: SentenceMatcher | None = None,
        *,
        bridge_pages: bool = True,
    ):
        """
        Initialize the locator.

        Args:
            matcher: Optional AI fallback used when all strategies fail.
            bridge_pages: Whether to retry across the next/previous page.
        """
        self.matcher = matcher
        self.bridge_pages = bridge_pages

    # -------------------------------------------------------------------------
    # Single-index search
    # -------------------------------------------------------------------------

    def occurrences(self, phrase: str, index: PageTextIndex) -> Iterator[LocatedSpan]:
        """
        Yield every match of ``phrase`` in ``index``.

        Strict matches come first (whole-word hits before partial-word hits,
        each in corpus order). Aggressive matches are tried only if the
        strict strategy found nothing.
        """
        found = False
        for start, end in self._strict_hits(phrase, index):
            found = True
            yield LocatedSpan(runs=index.spans_for(start, end), strategy="strict")
        if found:
            return

        for start, end in self._aggressive_hits(phrase, index):
            yield LocatedSpan(runs=index.spans_for(start, end), strategy="aggressive")

    def search(self, phrase: str, index: PageTextIndex) -> LocatedSpan | None:
        """First match of ``phrase`` in ``index``, or None."""
        for span in self.occurrences(phrase, index):
            if span:
                return span
        return None

    def _strict_hits(self, phrase: str, index: PageTextIndex) -> list[tuple[int, int]]:
        needle = normalize(phrase)
        haystack, mapping = index.normalized
        if not needle or not haystack:
            return []

        whole, partial = [], []
        for pos in _find_all(haystack, needle):
            bounds = (mapping[pos], mapping[pos + len(needle) - 1])
            if _is_whole_word(haystack, pos, len(needle)):
                whole.append(bounds)
            else:
                partial.append(bounds)
        return whole + partial

    def _aggressive_hits(self, phrase: str, index: PageTextIndex) -> list[tuple[int, int]]:
        needle = strip_to_alphanumeric(phrase)
        haystack, mapping = index.alphanumeric
        if not needle or not haystack:
            return []
        return [
            (mapping[pos], mapping[pos + len(needle) - 1]) for pos in _find_all(haystack, needle)
        ]

    # -------------------------------------------------------------------------
    # Page-level location
    # -------------------------------------------------------------------------

    def locate(
        self,
        phrase: str,
        page: PageTextIndex,
        next_page: PageTextIndex | None = None,
        prev_page: PageTextIndex | None = None,
        diagnostics: list[Diagnostic] | None = None,
    ) -> LocatedSpan | None:
        """
        Locate a phrase on a page, bridging to neighbours when needed.

        Args:
            phrase: Context phrase to find.
            page: Index of the primary page.
            next_page: Index of the following page, if any.
            prev_page: Index of the preceding page, if any.
            diagnostics: List receiving any rejected-suggestion diagnostic.

        Returns:
            LocatedSpan whose RunSpans carry their owning page, or None.
        """
        pairings = [page]
        if self.bridge_pages:
            if next_page is not None:
                pairings.append(PageTextIndex.join(page, next_page))
            if prev_page is not None:
                pairings.append(PageTextIndex.join(prev_page, page))

        for index in pairings:
            span = self.search(phrase, index)
            if span is not None:
                logger.debug(
                    "Located %r on pages %s (%s)", phrase[:40], span.pages, span.strategy
                )
                return span

        if self.matcher is not None:
            span = self._suggested(phrase, page, diagnostics)
            if span is not None:
                return span

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Phrase %r not located (closest match %.0f%%)",
                phrase[:40],
                self.closest_score(phrase, page) * 100,
            )
        return None

    def _suggested(
        self,
        phrase: str,
        page: PageTextIndex,
        diagnostics: list[Diagnostic] | None,
    ) -> LocatedSpan | None:
        raw = self.matcher.suggest(page.corpus, phrase)
        suggestion = verify_suggestion(page.corpus, raw)
        if suggestion is None:
            if raw:
                message = f"Suggested text for {phrase[:40]!r} does not occur on the page"
                logger.warning(message)
                if diagnostics is not None:
                    diagnostics.append(
                        Diagnostic(
                            kind=DiagnosticKind.SUGGESTION_REJECTED,
                            message=message,
                            page=page.pages[0] if page.pages else None,
                        )
                    )
            return None

        start = page.corpus.find(suggestion)
        runs = page.spans_for(start, start + len(suggestion) - 1)
        return LocatedSpan(runs=runs, strategy="suggested") if runs else None

    def closest_score(self, phrase: str, page: PageTextIndex) -> float:
        """Best partial similarity (0-1) of the phrase anywhere on the page."""
        needle = normalize(phrase)
        haystack = page.normalized[0]
        if not needle or not haystack:
            return 0.0
        return fuzz.partial_ratio(needle, haystack) / 100.0
