"""
QC pack assembly.

Orchestrates one pack:

1. For every correction, resolve its page (stated page + offset), locate the
   context phrase (bridging to neighbours) and plan the marks.
2. Bucket each (correction, plan) under every page the plan touches, or
   under the resolved page with no marks when the phrase was not found.
3. Copy each bucket page from the script, draw its marks and a notes box.

Page indexes are built lazily and cached for the duration of one
assemble() call. Unlocated phrases and out-of-range pages are reported as
diagnostics; the pack is still produced.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import fitz  # PyMuPDF

from qcpack.annotate.planner import AnnotationPlanner
from qcpack.assemble.drawing import draw_notes_box, draw_oblongs, draw_underlines
from qcpack.config import PackConfig
from qcpack.locate.index import PageTextIndex
from qcpack.locate.locator import PhraseLocator
from qcpack.models import (
    AnnotationPlan,
    Correction,
    CorrectionType,
    Diagnostic,
    DiagnosticKind,
    PackResult,
)
from qcpack.readers.pdf_reader import ScriptReader, open_pdf

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Notes formatting
# ═══════════════════════════════════════════════════════════════════════════════


def format_timestamp(timestamp: str | None) -> str:
    """
    Shorten a report time code to ``mm:ss``.

    Example:
        >>> format_timestamp("00:03:07.84")
        '03:07'
        >>> format_timestamp("3:7.2")
        '3:07'
    """
    if not timestamp:
        return ""
    parts = timestamp.strip().split(":")
    if len(parts) not in (2, 3):
        return timestamp.strip()

    minutes = parts[-2]
    try:
        seconds = math.floor(float(parts[-1]))
    except (ValueError, OverflowError):
        return timestamp.strip()
    return f"{minutes}:{seconds:02d}"


def provenance(correction: Correction) -> str:
    """``track/mm:ss`` (or whichever half is known) for a correction."""
    track = correction.track.strip()
    stamp = format_timestamp(correction.timestamp)
    if track and stamp:
        return f"{track}/{stamp}"
    return track or stamp


@dataclass
class PageEntry:
    """One correction's contribution to one output page."""

    correction: Correction
    plan: AnnotationPlan


def notes_text(entries: Iterable[PageEntry], show_provenance: bool = True) -> str:
    """
    Notes box text for one page.

    Identical notes are shown once, with the provenance of every occurrence
    joined on the line below.
    """
    grouped: dict[str, list[str]] = {}
    for entry in entries:
        suffixes = grouped.setdefault(entry.correction.notes, [])
        suffix = provenance(entry.correction) if show_provenance else ""
        if suffix and suffix not in suffixes:
            suffixes.append(suffix)

    blocks = []
    for note, suffixes in grouped.items():
        blocks.append(f"{note}\n{', '.join(suffixes)}" if suffixes else note)
    return "\n\n".join(blocks)


# ═══════════════════════════════════════════════════════════════════════════════
# Assembler
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class AssemblyContext:
    """State accumulated during one assemble() call."""

    doc: fitz.Document
    indexes: dict[int, PageTextIndex | None] = field(default_factory=dict)
    buckets: dict[int, list[PageEntry]] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)


class PackAssembler:
    """
    Builds the annotated QC pack PDF.

    Usage:
        assembler = PackAssembler(PackConfig(page_offset=2))
        result = assembler.assemble(corrections, "script.pdf")
        result.save("qc_pack.pdf")
    """

    def __init__(
        self,
        config: PackConfig | None = None,
        locator: PhraseLocator | None = None,
    ) -> None:
        """Initialize the assembler."""
        self.config = config or PackConfig()
        self.locator = locator or PhraseLocator(bridge_pages=self.config.bridge_pages)
        self.planner = AnnotationPlanner(self.locator)
        self.reader = ScriptReader()

    def assemble(
        self,
        corrections: Iterable[Correction],
        source: str | Path | bytes | fitz.Document,
        page_offset: int | None = None,
    ) -> PackResult:
        """
        Build a QC pack.

        Args:
            corrections: Classified corrections, in report order.
            source: Script PDF as a path, bytes or open document.
            page_offset: Overrides config.page_offset when given.

        Returns:
            PackResult with the PDF bytes, included page count and diagnostics.

        Raises:
            FileNotFoundError: If a script path doesn't exist.
            ValueError: If the script is not a valid PDF.
        """
        offset = self.config.page_offset if page_offset is None else page_offset
        doc = open_pdf(source)
        try:
            ctx = AssemblyContext(doc=doc)
            for correction in corrections:
                self._place(correction, correction.page + offset, ctx)
            return self._render(ctx)
        finally:
            if doc is not source:
                doc.close()

    # -------------------------------------------------------------------------
    # Location and bucketing
    # -------------------------------------------------------------------------

    def _index(self, ctx: AssemblyContext, number: int) -> PageTextIndex | None:
        """Cached index of a 1-based page (None outside the document)."""
        if number not in ctx.indexes:
            if 1 <= number <= len(ctx.doc):
                page = self.reader.read_page(ctx.doc[number - 1], number)
                ctx.indexes[number] = PageTextIndex.build(number, page.runs)
                logger.debug("Indexed page %d (%d runs)", number, len(page.runs))
            else:
                ctx.indexes[number] = None
        return ctx.indexes[number]

    def _place(self, correction: Correction, resolved: int, ctx: AssemblyContext) -> None:
        plan = AnnotationPlan()

        if self.config.locate_phrases:
            plan = self._plan(correction, resolved, ctx)

        pages = plan.pages
        if not pages:
            ctx.buckets.setdefault(resolved, []).append(PageEntry(correction, AnnotationPlan()))
            return

        for page_number in pages:
            ctx.buckets.setdefault(page_number, []).append(
                PageEntry(correction, plan.for_page(page_number))
            )

    def _plan(self, correction: Correction, resolved: int, ctx: AssemblyContext) -> AnnotationPlan:
        page = self._index(ctx, resolved)
        if page is None:
            # Reported once per page when rendering
            return AnnotationPlan()

        next_page = prev_page = None
        if self.locator.bridge_pages:
            next_page = self._index(ctx, resolved + 1)
            prev_page = self._index(ctx, resolved - 1)

        span = self.locator.locate(
            correction.context_phrase,
            page,
            next_page=next_page,
            prev_page=prev_page,
            diagnostics=ctx.diagnostics,
        )
        if span is None:
            message = (
                f"Could not find context phrase for correction {correction.id} "
                f"on page {resolved}: {correction.context_phrase!r}"
            )
            logger.warning(message)
            ctx.diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.PHRASE_NOT_LOCATED,
                    message=message,
                    page=resolved,
                    correction_id=correction.id,
                )
            )
            return AnnotationPlan()

        if not correction.words_for_emphasis:
            return AnnotationPlan(underline=span.runs)

        neighbourhood = PageTextIndex.join(
            *(index for index in (prev_page, page, next_page) if index is not None)
        )
        return self.planner.plan(correction, span, neighbourhood)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _render(self, ctx: AssemblyContext) -> PackResult:
        out = fitz.open()
        try:
            included = []
            for page_number in sorted(ctx.buckets):
                if not 1 <= page_number <= len(ctx.doc):
                    message = (
                        f"Page {page_number} is outside the script "
                        f"(1-{len(ctx.doc)}); {len(ctx.buckets[page_number])} note(s) skipped"
                    )
                    logger.warning(message)
                    ctx.diagnostics.append(
                        Diagnostic(
                            kind=DiagnosticKind.PAGE_OUT_OF_RANGE,
                            message=message,
                            page=page_number,
                        )
                    )
                    continue

                out.insert_pdf(ctx.doc, from_page=page_number - 1, to_page=page_number - 1)
                self._draw_page(out[out.page_count - 1], page_number, ctx)
                included.append(page_number)

            pdf_bytes = out.tobytes() if included else b""
        finally:
            out.close()

        logger.debug("QC pack assembled: %d pages", len(included))
        return PackResult(
            pdf_bytes=pdf_bytes,
            page_count=len(included),
            pages=included,
            diagnostics=ctx.diagnostics,
        )

    def _draw_page(self, page: fitz.Page, page_number: int, ctx: AssemblyContext) -> None:
        entries = ctx.buckets[page_number]
        height = page.rect.height

        index = self._index(ctx, page_number) if self.config.locate_phrases else None
        if index is not None:
            for entry in entries:
                draw_underlines(page, entry.plan.underline, index.runs, height)
                draw_oblongs(
                    page,
                    entry.plan.emphasis,
                    index.runs,
                    height,
                    separate=entry.correction.correction_type is CorrectionType.INSERTED,
                )

        draw_notes_box(
            page,
            notes_text(entries, self.config.show_provenance),
            fontsize=self.config.notes_font_size,
            width_ratio=self.config.notes_box_width_ratio,
        )
