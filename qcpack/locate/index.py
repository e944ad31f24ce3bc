"""
Searchable text index over a page's positioned runs.

A PageTextIndex concatenates the runs of a page (in reading order) into one
corpus string and keeps two parallel integer arrays mapping every corpus
character back to ``(run, offset within run)``. Matches found in the corpus
can therefore be turned into per-run character ranges for drawing.

Runs that are not glued together on the same line are joined with a
synthetic space so that words from consecutive lines do not run into each
other. Separators map to run -1 and are never part of a mark. No separator
follows a run ending in a hyphen, so a word wrapped as "exam-" / "ple" is
rejoined by the normalizer's soft-hyphen rule.

Indexes are immutable and are built once per page per pack, then reused for
every correction on that page and its neighbours.
"""

from __future__ import annotations

from array import array
from collections.abc import Iterable, Sequence
from functools import cached_property

from qcpack.models import LocatedSpan, PositionedTextRun, RunSpan
from qcpack.normalizers.text import (
    HYPHENS,
    normalize_with_index_map,
    strip_to_alphanumeric_with_index_map,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Runs whose baselines differ by less than this share a line
Y_TOLERANCE = 5.0

# Runs on one line closer than this are treated as one piece of text
ADJACENT_GAP = 1.0

SEPARATOR = " "


# =============================================================================
# READING ORDER
# =============================================================================


def group_into_lines(runs: Iterable[PositionedTextRun]) -> list[list[PositionedTextRun]]:
    """
    Group runs into lines by baseline, top to bottom, each line left to right.

    Whitespace-only runs are dropped. A run joins the first line whose
    baseline is within Y_TOLERANCE of its own.
    """
    lines: list[tuple[float, list[PositionedTextRun]]] = []

    for run in sorted(runs, key=lambda r: (-r.y, r.x)):
        if not run.text.strip():
            continue
        for y, members in lines:
            if abs(y - run.y) < Y_TOLERANCE:
                members.append(run)
                break
        else:
            lines.append((run.y, [run]))

    lines.sort(key=lambda line: -line[0])
    return [sorted(members, key=lambda r: r.x) for _, members in lines]


def sort_reading_order(runs: Iterable[PositionedTextRun]) -> list[PositionedTextRun]:
    """Flatten group_into_lines() into one reading-ordered list."""
    return [run for line in group_into_lines(runs) for run in line]


def _needs_separator(
    prev: PositionedTextRun,
    prev_piece: str,
    run: PositionedTextRun,
    piece: str,
) -> bool:
    if not prev_piece or not piece:
        return False
    if prev_piece[-1].isspace() or prev_piece[-1] in HYPHENS or piece[0].isspace():
        return False
    same_line = abs(prev.y - run.y) < Y_TOLERANCE
    return not (same_line and -ADJACENT_GAP < run.x - prev.right < ADJACENT_GAP)


# =============================================================================
# PAGE TEXT INDEX
# =============================================================================


class PageTextIndex:
    """Corpus plus character back-map for one page (or a joined pair of pages).

    Attributes:
        runs: Runs in corpus order.
        owners: For every run, ``(page_number, run_index_on_page)``.
        corpus: Concatenated run text with synthetic separators.
        char_runs: Corpus index -> position in ``runs`` (-1 for separators).
        char_offsets: Corpus index -> character offset in the full run text.

    Usage:
        index = PageTextIndex.build(12, runs)
        index.spans_for(0, 4)  # RunSpans covering corpus chars 0..4
    """

    def __init__(
        self,
        runs: Sequence[PositionedTextRun],
        owners: Sequence[tuple[int, int]],
        ranges: Sequence[tuple[int, int]] | None = None,
    ):
        """
        Assemble an index from runs already in reading order.

        Args:
            runs: Runs in corpus order.
            owners: ``(page_number, run_index_on_page)`` per run.
            ranges: Optional ``(start, end)`` slice of each run's text to
                include; defaults to the whole run.
        """
        if len(owners) != len(runs):
            raise ValueError(f"Expected {len(runs)} owners, got {len(owners)}")

        self.runs = tuple(runs)
        self.owners = tuple(owners)

        pieces: list[str] = []
        char_runs = array("i")
        char_offsets = array("i")
        prev: PositionedTextRun | None = None
        prev_piece = ""

        for i, run in enumerate(self.runs):
            start, end = ranges[i] if ranges is not None else (0, len(run.text))
            piece = run.text[start:end]
            if not piece:
                continue

            if prev is not None and _needs_separator(prev, prev_piece, run, piece):
                pieces.append(SEPARATOR)
                char_runs.append(-1)
                char_offsets.append(-1)

            pieces.append(piece)
            char_runs.extend([i] * len(piece))
            char_offsets.extend(range(start, end))
            prev, prev_piece = run, piece

        self.corpus = "".join(pieces)
        self.char_runs = char_runs
        self.char_offsets = char_offsets

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        page_number: int,
        runs: Iterable[PositionedTextRun],
        *,
        ordered: bool = False,
    ) -> PageTextIndex:
        """Index one page. Runs are put in reading order unless ``ordered``."""
        runs = list(runs) if ordered else sort_reading_order(runs)
        return cls(runs, [(page_number, i) for i in range(len(runs))])

    @classmethod
    def join(cls, *indexes: PageTextIndex) -> PageTextIndex:
        """Index consecutive pages as one corpus (for page bridging)."""
        runs = tuple(run for index in indexes for run in index.runs)
        owners = tuple(owner for index in indexes for owner in index.owners)
        return cls(runs, owners)

    @classmethod
    def from_span(cls, span: LocatedSpan, source: PageTextIndex) -> PageTextIndex:
        """
        Index only the characters covered by ``span``.

        ``source`` must contain every run the span refers to. Matches in
        the result map back to the same page-local runs and offsets.
        """
        position = {owner: i for i, owner in enumerate(source.owners)}
        runs, owners, ranges = [], [], []
        for run_span in span.runs:
            key = (run_span.page_number, run_span.run_index)
            if key not in position:
                raise ValueError(f"Span refers to run {key} not present in the source index")
            runs.append(source.runs[position[key]])
            owners.append(key)
            ranges.append((run_span.char_start, run_span.char_end))
        return cls(runs, owners, ranges)

    # -------------------------------------------------------------------------
    # Derived search forms
    # -------------------------------------------------------------------------

    @cached_property
    def normalized(self) -> tuple[str, list[int]]:
        """Strict form of the corpus with its index map."""
        return normalize_with_index_map(self.corpus)

    @cached_property
    def alphanumeric(self) -> tuple[str, list[int]]:
        """Aggressive form of the corpus with its index map."""
        return strip_to_alphanumeric_with_index_map(self.corpus)

    @property
    def pages(self) -> list[int]:
        return sorted({page for page, _ in self.owners})

    def __len__(self) -> int:
        return len(self.corpus)

    # -------------------------------------------------------------------------
    # Offset mapping
    # -------------------------------------------------------------------------

    def spans_for(self, start: int, end: int) -> tuple[RunSpan, ...]:
        """
        Map an inclusive corpus range to per-run character ranges.

        Characters are grouped by run, keeping the lowest and highest offset
        seen in each run. Separators are skipped.
        """
        per_run: dict[int, tuple[int, int]] = {}
        for i in range(max(start, 0), min(end, len(self.corpus) - 1) + 1):
            run = self.char_runs[i]
            if run < 0:
                continue
            offset = self.char_offsets[i]
            if run in per_run:
                lo, hi = per_run[run]
                per_run[run] = (min(lo, offset), max(hi, offset))
            else:
                per_run[run] = (offset, offset)

        spans = []
        for run, (lo, hi) in sorted(per_run.items()):
            page_number, run_index = self.owners[run]
            spans.append(
                RunSpan(
                    page_number=page_number,
                    run_index=run_index,
                    char_start=lo,
                    char_end=hi + 1,
                    run_length=len(self.runs[run].text),
                )
            )
        return tuple(spans)

    def text_for(self, span: LocatedSpan) -> str:
        """Reconstruct the text covered by ``span``, joined as in the corpus."""
        return PageTextIndex.from_span(span, self).corpus
