"""
Annotation planning.

Given a correction and the span where its context phrase was found, decide
what to draw:

- underline: always the whole located context;
- emphasis: the words to circle, searched only inside the located context.
  Insertions circle the two words flanking the insertion point; misreads
  and omissions circle the emphasis phrase.

A failed emphasis search leaves the emphasis empty; the underline is still
drawn.
"""

from __future__ import annotations

import logging

from qcpack.locate.index import PageTextIndex
from qcpack.locate.locator import PhraseLocator
from qcpack.models import AnnotationPlan, Correction, CorrectionType, LocatedSpan, RunSpan

logger = logging.getLogger(__name__)

# Narrowest fraction of a run a mark may cover
MIN_VISIBLE_FRACTION = 0.02


def clamp_fractions(start: float, end: float) -> tuple[float, float]:
    """
    Clamp a fractional span to [0, 1] so it is never inverted or empty.

    An end before the start is raised to the start; a zero-width span is
    widened to MIN_VISIBLE_FRACTION (staying inside [0, 1]).

    Example:
        >>> clamp_fractions(-0.2, 1.4)
        (0.0, 1.0)
        >>> clamp_fractions(1.0, 1.0)
        (0.98, 1.0)
    """
    start = min(max(start, 0.0), 1.0)
    end = min(max(end, start), 1.0)
    if end == start:
        end = min(start + MIN_VISIBLE_FRACTION, 1.0)
        start = end - MIN_VISIBLE_FRACTION
    return start, end


def _order(index: PageTextIndex) -> dict[tuple[int, int], int]:
    return {owner: i for i, owner in enumerate(index.owners)}


def _starts_after(later: LocatedSpan, earlier: LocatedSpan, order: dict) -> bool:
    """Whether ``later`` begins at or after the end of ``earlier``."""
    first: RunSpan = later.runs[0]
    last: RunSpan = earlier.runs[-1]
    first_pos = order[(first.page_number, first.run_index)]
    last_pos = order[(last.page_number, last.run_index)]
    if first_pos != last_pos:
        return first_pos > last_pos
    return first.char_start >= last.char_end


class AnnotationPlanner:
    """Computes underline and emphasis regions for located corrections.

    Usage:
        planner = AnnotationPlanner(PhraseLocator())
        plan = planner.plan(correction, context_span, neighbourhood_index)
    """

    def __init__(self, locator: PhraseLocator | None = None):
        self.locator = locator or PhraseLocator()

    def plan(
        self,
        correction: Correction,
        context_span: LocatedSpan | None,
        source: PageTextIndex,
    ) -> AnnotationPlan:
        """
        Plan the marks for one correction.

        Args:
            correction: The classified correction.
            context_span: Where its context phrase was found (None if not found).
            source: Index containing every run of ``context_span``.

        Returns:
            AnnotationPlan; empty when the context was not found.
        """
        if not context_span:
            return AnnotationPlan()

        words = correction.words_for_emphasis
        if not words:
            return AnnotationPlan(underline=context_span.runs)

        within = PageTextIndex.from_span(context_span, source)

        if correction.correction_type is CorrectionType.INSERTED and len(words) == 2:
            emphasis = self._boundary_words(words, within)
        else:
            phrase = " ".join(words)
            match = self.locator.search(phrase, within)
            emphasis = match.runs if match else ()

        if not emphasis:
            logger.warning(
                "Could not find emphasis words %r within context of correction %s",
                " ".join(words),
                correction.id,
            )

        return AnnotationPlan(underline=context_span.runs, emphasis=emphasis)

    def _boundary_words(
        self, words: tuple[str, ...], within: PageTextIndex
    ) -> tuple[RunSpan, ...]:
        """Spans of the two words flanking an insertion, in reading order."""
        first = self.locator.search(words[0], within)
        if first is None:
            return ()

        order = _order(within)
        for second in self.locator.occurrences(words[1], within):
            if second and _starts_after(second, first, order):
                return first.runs + second.runs
        return ()
