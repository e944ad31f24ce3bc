"""
QC pack orchestrator.

This module provides the main `build_qc_pack()` function that turns a QC
report and a script PDF into an annotated pack by wiring together:
- read_table (report rows)
- RowExtractor (dialect detection, note classification)
- PackAssembler (location, planning, drawing)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from qcpack.assemble.pack import PackAssembler
from qcpack.config import PackConfig
from qcpack.extractors.rows import RowExtractor, detect_dialect
from qcpack.locate.locator import PhraseLocator
from qcpack.models import Correction, Diagnostic, PackResult
from qcpack.readers.table_reader import read_table

if TYPE_CHECKING:
    import fitz

    from qcpack.locate.suggest import SentenceMatcher

logger = logging.getLogger(__name__)


def load_corrections(
    qc_report: str | Path,
    audible_mode: bool = False,
    diagnostics: list[Diagnostic] | None = None,
) -> list[Correction]:
    """
    Read and classify every correction in a QC report.

    Args:
        qc_report: Path to a .csv or .xlsx report.
        audible_mode: Prefix formatted notes with MR:/MW:/ML: roles.
        diagnostics: Optional list receiving dropped-row diagnostics.

    Returns:
        Corrections in report order.

    Raises:
        FileNotFoundError: If the report doesn't exist.
        UnsupportedFormatError: If the report format isn't supported.
        UnsupportedDialectError: If the report layout isn't recognized.
        HeaderNotFoundError: If the header row is missing.
    """
    rows = read_table(qc_report)
    dialect = detect_dialect(rows)
    logger.debug("Reading %s as %s report", qc_report, dialect.name)

    extractor = RowExtractor(audible_mode=audible_mode)
    corrections = extractor.extract(rows, dialect)
    if diagnostics is not None:
        diagnostics.extend(extractor.diagnostics)
    return corrections


def build_qc_pack(
    qc_report: str | Path,
    script_pdf: str | Path | bytes | fitz.Document,
    config: PackConfig | None = None,
    matcher: SentenceMatcher | None = None,
) -> PackResult:
    """
    Build an annotated QC pack from a report and a script.

    Args:
        qc_report: Path to the QC report.
        script_pdf: Script PDF as a path, bytes or open document.
        config: Pack options. Uses defaults if not provided.
        matcher: Optional AI fallback for phrases the text search misses.

    Returns:
        PackResult with the PDF bytes and every diagnostic from extraction
        and assembly.

    Raises:
        FileNotFoundError: If an input file doesn't exist.
        UnsupportedFormatError: If the report format isn't supported.
        UnsupportedDialectError: If the report layout isn't recognized.
        HeaderNotFoundError: If the report header row is missing.
        ValueError: If the script is not a valid PDF.

    Example:
        >>> result = build_qc_pack("qc.xlsx", "script.pdf", PackConfig(page_offset=2))
        >>> result.save("qc_pack.pdf")
    """
    config = config or PackConfig()

    diagnostics: list[Diagnostic] = []
    corrections = load_corrections(qc_report, config.audible_mode, diagnostics)

    locator = PhraseLocator(matcher, bridge_pages=config.bridge_pages)
    result = PackAssembler(config, locator).assemble(corrections, script_pdf)

    result.diagnostics = diagnostics + result.diagnostics
    logger.info(
        "Built QC pack: %d corrections on %d pages (%d diagnostics)",
        len(corrections),
        result.page_count,
        len(result.diagnostics),
    )
    return result
