"""
QC pack assembly: bucketing corrections by page and drawing the marks.

Drawing uses PyMuPDF (fitz) primitives on pages copied from the script.
"""

from qcpack.assemble.drawing import (
    draw_notes_box,
    draw_oblongs,
    draw_underlines,
    group_spans_into_lines,
    wrap_text,
)
from qcpack.assemble.pack import (
    PackAssembler,
    PageEntry,
    format_timestamp,
    notes_text,
    provenance,
)

__all__ = [
    # Assembly
    "PackAssembler",
    "PageEntry",
    "notes_text",
    "provenance",
    "format_timestamp",
    # Drawing
    "draw_underlines",
    "draw_oblongs",
    "draw_notes_box",
    "group_spans_into_lines",
    "wrap_text",
]
