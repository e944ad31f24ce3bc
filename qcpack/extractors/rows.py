"""
QC report row extraction.

Turns a raw table (every row of the sheet, header included) into classified
Correction records:

1. Find the header row for the dialect (first row carrying all required columns).
2. Fold the dialect's row interpreter over the data rows, threading a ScanState.
3. Classify every candidate's note; drop candidates without searchable context.

Dropped candidates are recorded as Diagnostic entries and logged; only a
missing header (or an unknown report layout) aborts extraction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from qcpack.exceptions import HeaderNotFoundError, UnsupportedDialectError
from qcpack.extractors.dialects import (
    POST_QC,
    STANDARD,
    Dialect,
    RawRow,
    ScanState,
    parse_number,
)
from qcpack.models import Correction, CorrectionType, Diagnostic, DiagnosticKind
from qcpack.notes.classifier import NoteClassifier

logger = logging.getLogger(__name__)

Row = Sequence[object]


def find_header(rows: Sequence[Row], dialect: Dialect) -> int:
    """
    Locate the header row of a report.

    Args:
        rows: Full table, top to bottom.
        dialect: Dialect whose required columns identify the header.

    Returns:
        Index of the header row.

    Raises:
        HeaderNotFoundError: If no row carries all required columns.
    """
    for index, row in enumerate(rows):
        if isinstance(row, (list, tuple)) and dialect.matches_header(row):
            return index
    raise HeaderNotFoundError(
        f"Could not find required header columns ({', '.join(dialect.required_columns)}) "
        f"in the QC file."
    )


def detect_dialect(rows: Sequence[Row]) -> Dialect:
    """
    Pick the dialect of a report by sniffing its header.

    POST_QC wins only when its columns are present and the standard ones are
    not; otherwise STANDARD is used if its columns are present.

    Raises:
        UnsupportedDialectError: If neither header profile is present.
    """
    has_standard = any(
        isinstance(row, (list, tuple)) and STANDARD.matches_header(row) for row in rows
    )
    has_post_qc = any(
        isinstance(row, (list, tuple)) and POST_QC.matches_header(row) for row in rows
    )

    if has_post_qc and not has_standard:
        return POST_QC
    if has_standard:
        return STANDARD
    raise UnsupportedDialectError(
        "QC file matches no known report layout. Expected columns "
        f"({', '.join(STANDARD.required_columns)}) or "
        f"({', '.join(POST_QC.required_columns)})."
    )


class RowExtractor:
    """Extracts corrections from QC report rows.

    Usage:
        extractor = RowExtractor(audible_mode=True)
        corrections = extractor.extract(rows, STANDARD)
        for diagnostic in extractor.diagnostics:
            print(diagnostic)
    """

    def __init__(self, audible_mode: bool = False):
        """Initialize the extractor.

        Args:
            audible_mode: Prefix formatted notes with MR:/MW:/ML: roles.
        """
        self.classifier = NoteClassifier(audible_mode=audible_mode)
        self.diagnostics: list[Diagnostic] = []

    def extract(self, rows: Sequence[Row], dialect: Dialect) -> list[Correction]:
        """
        Extract corrections from a full table.

        Args:
            rows: Every row of the sheet, header included.
            dialect: Report layout (see detect_dialect()).

        Returns:
            Corrections in report order.

        Raises:
            HeaderNotFoundError: If the dialect's header row is missing.
        """
        self.diagnostics = []
        header_index = find_header(rows, dialect)
        columns = dialect.column_map(rows[header_index])

        corrections: list[Correction] = []
        state = ScanState()

        for row_number in range(header_index + 1, len(rows)):
            row = rows[row_number]
            if not isinstance(row, (list, tuple)) or not row:
                continue

            raw, state = dialect.interpret(row_number, row, columns, state)
            if raw is None:
                continue

            correction = self._build(raw, state)
            if correction is not None:
                corrections.append(correction)
                state = replace(state, emitted=state.emitted + 1)

        logger.debug(
            "Extracted %d corrections (%s dialect, %d dropped)",
            len(corrections),
            dialect.name,
            len(self.diagnostics),
        )
        return corrections

    def _build(self, raw: RawRow, state: ScanState) -> Correction | None:
        """Classify a candidate and turn it into a Correction (None if dropped)."""
        correction_id = raw.id or str(state.emitted + 1)

        page = parse_number(raw.page)
        if page is None or not page.is_integer():
            self._drop(raw, correction_id, f"page {raw.page!r} is not a page number")
            return None

        classification = self.classifier.classify(raw.note, raw.context)
        if not classification.searchable_context:
            self._drop(raw, correction_id, f"correction on page {int(page)} has no context phrase")
            return None

        words = classification.words_for_emphasis
        if raw.bracket_words:
            words = raw.bracket_words
        elif raw.quoted_words and classification.correction_type is not CorrectionType.INSERTED:
            words = raw.quoted_words

        return Correction(
            id=correction_id,
            page=int(page),
            context_phrase=classification.searchable_context,
            notes=classification.formatted_note,
            correction_type=classification.correction_type,
            words_for_emphasis=tuple(words),
            track=raw.track,
            timestamp=raw.timestamp,
        )

    def _drop(self, raw: RawRow, correction_id: str, reason: str) -> None:
        message = f"Row {raw.row_number + 1} skipped: {reason}"
        logger.warning(message)
        self.diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.CORRECTION_DROPPED,
                message=message,
                correction_id=correction_id,
            )
        )


def extract_corrections(
    rows: Sequence[Row],
    dialect: Dialect | None = None,
    audible_mode: bool = False,
) -> list[Correction]:
    """
    Extract corrections from a QC report table.

    Args:
        rows: Every row of the sheet, header included.
        dialect: Report layout; detected from the header when None.
        audible_mode: Prefix formatted notes with MR:/MW:/ML: roles.

    Returns:
        Corrections in report order.

    Raises:
        HeaderNotFoundError: If the dialect's header row is missing.
        UnsupportedDialectError: If no dialect is given and none matches.
    """
    dialect = dialect or detect_dialect(rows)
    return RowExtractor(audible_mode=audible_mode).extract(rows, dialect)
