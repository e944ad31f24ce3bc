"""Readers for the two inputs of a QC pack: the script PDF and the QC report.

The PDF reader uses PyMuPDF (fitz) for positioned text extraction.
"""

from qcpack.readers.pdf_reader import (
    ScriptDocument,
    ScriptPage,
    ScriptReader,
    open_pdf,
)
from qcpack.readers.table_reader import (
    read_table,
    supported_extensions,
)

__all__ = [
    # Script PDF
    "ScriptReader",
    "ScriptDocument",
    "ScriptPage",
    "open_pdf",
    # QC report
    "read_table",
    "supported_extensions",
]
