"""
qcpack: Build annotated QC packs for audiobook proofing.

Reads a QC report (the proofer's list of narration defects), finds each
defect's context phrase in the narration script PDF, and produces a smaller
PDF containing only the affected pages with the context underlined, the
defective words circled and a notes box listing every correction.

Example:
    >>> import qcpack
    >>> result = qcpack.build_qc_pack("qc_report.xlsx", "script.pdf")
    >>> result.save("qc_pack.pdf")
    >>> for diagnostic in result.diagnostics:
    ...     print(diagnostic)
"""

from qcpack.annotate.planner import AnnotationPlanner
from qcpack.assemble.pack import PackAssembler, format_timestamp
from qcpack.build import build_qc_pack, load_corrections
from qcpack.config import PackConfig
from qcpack.exceptions import (
    ConfigurationError,
    HeaderNotFoundError,
    QCPackError,
    UnsupportedDialectError,
    UnsupportedFormatError,
)
from qcpack.extractors import (
    POST_QC,
    STANDARD,
    Dialect,
    RowExtractor,
    detect_dialect,
    extract_corrections,
)
from qcpack.locate import (
    OpenAISentenceMatcher,
    PageTextIndex,
    PhraseLocator,
    SentenceMatcher,
)
from qcpack.models import (
    AnnotationPlan,
    Correction,
    CorrectionType,
    Diagnostic,
    DiagnosticKind,
    LocatedSpan,
    PackResult,
    PositionedTextRun,
    RunSpan,
)
from qcpack.normalizers import normalize
from qcpack.notes import NoteClassifier, classify
from qcpack.readers import ScriptReader, read_table

__version__ = "0.1.0"
__all__ = [
    # Main API
    "build_qc_pack",
    "load_corrections",
    # Configuration
    "PackConfig",
    # Pipeline stages
    "read_table",
    "detect_dialect",
    "extract_corrections",
    "RowExtractor",
    "Dialect",
    "STANDARD",
    "POST_QC",
    "classify",
    "NoteClassifier",
    "normalize",
    "ScriptReader",
    "PageTextIndex",
    "PhraseLocator",
    "AnnotationPlanner",
    "PackAssembler",
    "format_timestamp",
    # AI fallback
    "SentenceMatcher",
    "OpenAISentenceMatcher",
    # Models
    "Correction",
    "CorrectionType",
    "PositionedTextRun",
    "RunSpan",
    "LocatedSpan",
    "AnnotationPlan",
    "PackResult",
    "Diagnostic",
    "DiagnosticKind",
    # Exceptions
    "QCPackError",
    "HeaderNotFoundError",
    "UnsupportedDialectError",
    "UnsupportedFormatError",
    "ConfigurationError",
]
