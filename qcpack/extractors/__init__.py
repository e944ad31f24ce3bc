"""
QC report extraction.

Reads the rows of a QC report into classified corrections. Two report
dialects are supported:
- STANDARD: ID/PAGE/CONTEXT/NOTES with a pickup status column
- POST_QC: CD-TRK/TIME/PAGE*/TEXT/PROBLEM DESCRIPTION/EDITOR COMMENTS

Callers normally let detect_dialect() pick the layout from the header.
"""

from qcpack.extractors.dialects import (
    DIALECTS,
    PICKUP_STATUS,
    POST_QC,
    POST_QC_ACCEPTED_COMMENTS,
    STANDARD,
    Dialect,
    RawRow,
    ScanState,
    cell_text,
    interpret_post_qc,
    interpret_standard,
)
from qcpack.extractors.rows import (
    RowExtractor,
    detect_dialect,
    extract_corrections,
    find_header,
)

__all__ = [
    # Extraction
    "RowExtractor",
    "extract_corrections",
    "detect_dialect",
    "find_header",
    # Dialects
    "Dialect",
    "DIALECTS",
    "STANDARD",
    "POST_QC",
    "PICKUP_STATUS",
    "POST_QC_ACCEPTED_COMMENTS",
    "interpret_standard",
    "interpret_post_qc",
    # Row scanning
    "RawRow",
    "ScanState",
    "cell_text",
]
