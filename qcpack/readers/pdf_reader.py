"""
Script PDF reader using PyMuPDF (fitz).

Extracts positioned text runs (one per PyMuPDF span) from every page of a
script PDF. Coordinates are converted to document space with the origin at
the bottom-left and y increasing upward; a run's ``y`` is its baseline.

Runs are returned in PyMuPDF's extraction order. Reading order is imposed
later, when a page is indexed (see qcpack.locate.index.sort_reading_order).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import fitz  # PyMuPDF

from qcpack.models import PositionedTextRun

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass
class ScriptPage:
    """Positioned text of a single script page."""

    number: int  # 1-based page number
    width: float
    height: float
    runs: list[PositionedTextRun] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Run text joined with spaces (extraction order)."""
        return " ".join(run.text for run in self.runs)


@dataclass
class ScriptDocument:
    """Positioned text of a whole script."""

    pages: list[ScriptPage]
    source_path: Path | None = None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, number: int) -> ScriptPage | None:
        """Page by 1-based number, or None when out of range."""
        if 1 <= number <= len(self.pages):
            return self.pages[number - 1]
        return None


def open_pdf(source: str | Path | bytes | fitz.Document) -> fitz.Document:
    """
    Open a PDF from a path, raw bytes or an already open document.

    Raises:
        FileNotFoundError: If a path does not exist.
        ValueError: If the data is not a valid PDF.
    """
    if isinstance(source, fitz.Document):
        return source

    if isinstance(source, (bytes, bytearray)):
        try:
            return fitz.open(stream=bytes(source), filetype="pdf")
        except Exception as e:
            raise ValueError(f"Failed to open PDF: {e}") from e

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"PDF not found: {path}")
    try:
        return fitz.open(path)
    except Exception as e:
        raise ValueError(f"Failed to open PDF: {e}") from e


class ScriptReader:
    """Extracts positioned text runs from script PDFs.

    Usage:
        reader = ScriptReader()
        script = reader.read("/path/to/script.pdf")
        script.page(12).runs
    """

    def read(self, source: str | Path | bytes | fitz.Document) -> ScriptDocument:
        """
        Read a script PDF.

        Args:
            source: Path, PDF bytes or an open fitz.Document (left open).

        Returns:
            ScriptDocument with one ScriptPage per PDF page.

        Raises:
            FileNotFoundError: If a path does not exist.
            ValueError: If the data is not a valid PDF.
        """
        doc = open_pdf(source)
        try:
            return ScriptDocument(
                pages=list(self._extract_pages(doc)),
                source_path=Path(source) if isinstance(source, (str, Path)) else None,
            )
        finally:
            if doc is not source:
                doc.close()

    def _extract_pages(self, doc: fitz.Document) -> Iterator[ScriptPage]:
        """Extract runs from each page."""
        for page_idx in range(len(doc)):
            yield self.read_page(doc[page_idx], page_idx + 1)

    def read_page(self, page: fitz.Page, number: int) -> ScriptPage:
        """Extract runs from a single page."""
        rect = page.rect
        return ScriptPage(
            number=number,
            width=rect.width,
            height=rect.height,
            runs=self._extract_runs(page, rect.height),
        )

    def _extract_runs(self, page: fitz.Page, page_height: float) -> list[PositionedTextRun]:
        """Convert PyMuPDF spans to bottom-left positioned runs."""
        runs = []

        page_dict = page.get_text("dict", flags=fitz.TEXT_PRESERVE_WHITESPACE)

        for block in page_dict.get("blocks", []):
            # Skip image blocks
            if block.get("type") != 0:
                continue

            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text.strip():
                        continue

                    x0, y0, x1, y1 = span.get("bbox", (0, 0, 0, 0))
                    baseline = span.get("origin", (x0, y1))[1]

                    runs.append(
                        PositionedTextRun(
                            text=text,
                            x=x0,
                            y=page_height - baseline,
                            width=x1 - x0,
                            height=y1 - y0,
                        )
                    )

        return runs
