"""
Pytest configuration and fixtures for qcpack tests.

Script PDFs are built in memory with PyMuPDF so no sample files are needed.
"""

from __future__ import annotations

import fitz
import pytest

from qcpack.locate.index import PageTextIndex
from qcpack.models import PositionedTextRun

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
FONT_SIZE = 12


def build_pdf(pages: list[list[tuple[float, float, str]]]) -> bytes:
    """Build a PDF; each page is a list of (x, baseline_from_top, text) lines."""
    doc = fitz.open()
    try:
        for lines in pages:
            page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            for x, y, text in lines:
                page.insert_text((x, y), text, fontname="helv", fontsize=FONT_SIZE)
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def make_pdf():
    """Factory building an in-memory script PDF."""
    return build_pdf


@pytest.fixture
def make_run():
    """Factory for PositionedTextRun with 6 units per character by default."""

    def _make(
        text: str,
        x: float = 72.0,
        y: float = 700.0,
        width: float | None = None,
        height: float = 12.0,
    ) -> PositionedTextRun:
        return PositionedTextRun(
            text=text,
            x=x,
            y=y,
            width=len(text) * 6.0 if width is None else width,
            height=height,
        )

    return _make


@pytest.fixture
def make_index(make_run):
    """Factory indexing one page of lines, one run per line, top to bottom."""

    def _make(page_number: int, *lines: str) -> PageTextIndex:
        runs = [make_run(text, y=700.0 - 20.0 * i) for i, text in enumerate(lines)]
        return PageTextIndex.build(page_number, runs)

    return _make


@pytest.fixture
def bridged_script() -> bytes:
    """Two pages; "brown fox jumps" crosses the page break."""
    return build_pdf(
        [
            [(72, 300, "Some opening words here."), (72, 700, "the quick brown")],
            [(72, 300, "fox jumps over"), (72, 330, "the lazy dog.")],
        ]
    )


@pytest.fixture
def single_page_script() -> bytes:
    """One page with two lines of text."""
    return build_pdf(
        [
            [
                (72, 300, "The quick brown fox jumps over the lazy dog."),
                (72, 330, "I am happy today and over their heads."),
            ]
        ]
    )
