"""
Data models for qcpack.

Corrections are produced once by the extraction stage and are read-only
afterwards. Text runs and spans describe where a correction sits on a page,
in document coordinates (origin bottom-left, y increasing upward).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class CorrectionType(Enum):
    """Kind of narration defect a correction describes."""

    MISREAD = "misread"
    MISSING = "missing"
    INSERTED = "inserted"


class DiagnosticKind(Enum):
    """Non-fatal conditions reported while building a pack."""

    CORRECTION_DROPPED = "correction_dropped"
    PHRASE_NOT_LOCATED = "phrase_not_located"
    PAGE_OUT_OF_RANGE = "page_out_of_range"
    SUGGESTION_REJECTED = "suggestion_rejected"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem with a single row, correction or page."""

    kind: DiagnosticKind
    message: str
    page: int | None = None
    correction_id: str | None = None

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


@dataclass(frozen=True)
class Correction:
    """A classified QC finding, ready to be located in the script.

    Attributes:
        id: Identifier from the report (or a synthetic counter).
        page: 1-based page number as stated in the report, before any offset.
        context_phrase: Literal script text surrounding the defect.
        notes: Formatted description of the fix, including any role prefix.
        correction_type: Which sub-phrase gets marked and how.
        words_for_emphasis: Words to circle inside the context. Empty means
            the context underline alone marks the defect.
        track: Track id from the report, if any.
        timestamp: Time code from the report, if any.
    """

    id: str
    page: int
    context_phrase: str
    notes: str
    correction_type: CorrectionType = CorrectionType.MISREAD
    words_for_emphasis: tuple[str, ...] = ()
    track: str = ""
    timestamp: str = ""


@dataclass(frozen=True)
class PositionedTextRun:
    """One contiguous run of text as laid out on a page.

    ``x``/``y`` locate the left end of the run's baseline in document
    space (origin bottom-left, y up).
    """

    text: str
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        """Right edge of the run."""
        return self.x + self.width


@dataclass(frozen=True)
class RunSpan:
    """A character range ``[char_start, char_end)`` inside one run.

    Fractions are relative to the run's character length, not its pixel
    width; placement multiplies them by the run width, which assumes
    uniform character width within a run.
    """

    page_number: int
    run_index: int
    char_start: int
    char_end: int
    run_length: int

    @property
    def start_fraction(self) -> float:
        return self.char_start / max(self.run_length, 1)

    @property
    def end_fraction(self) -> float:
        return self.char_end / max(self.run_length, 1)


@dataclass(frozen=True)
class LocatedSpan:
    """Where a phrase was found: one RunSpan per touched run, in corpus order."""

    runs: tuple[RunSpan, ...]
    strategy: str = "strict"  # "strict", "aggressive" or "suggested"

    @property
    def pages(self) -> list[int]:
        """Pages the span touches, ascending."""
        return sorted({r.page_number for r in self.runs})

    def for_page(self, page_number: int) -> tuple[RunSpan, ...]:
        """RunSpans that belong to ``page_number``."""
        return tuple(r for r in self.runs if r.page_number == page_number)

    def __bool__(self) -> bool:
        return bool(self.runs)


@dataclass(frozen=True)
class AnnotationPlan:
    """Regions to draw for one correction."""

    underline: tuple[RunSpan, ...] = ()
    emphasis: tuple[RunSpan, ...] = ()

    @property
    def pages(self) -> list[int]:
        return sorted({r.page_number for r in (*self.underline, *self.emphasis)})

    def for_page(self, page_number: int) -> AnnotationPlan:
        """The part of the plan drawn on ``page_number``."""
        return AnnotationPlan(
            underline=tuple(r for r in self.underline if r.page_number == page_number),
            emphasis=tuple(r for r in self.emphasis if r.page_number == page_number),
        )


@dataclass
class PackResult:
    """Output of pack assembly."""

    pdf_bytes: bytes
    page_count: int
    pages: list[int] = field(default_factory=list)  # 1-based source pages included
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def save(self, path: str | Path) -> None:
        """
        Write the pack to a file.

        Args:
            path: Output file path
        """
        Path(path).write_bytes(self.pdf_bytes)
