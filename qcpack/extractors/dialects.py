"""QC report dialects.

A dialect bundles the header columns that identify a report layout with the
function that reads one data row of that layout. Two dialects are known:

- STANDARD: proofing reports with ID, PAGE, CONTEXT, NOTES (and optionally
  TIME CODE). The status sits in the column right after CONTEXT, and track
  filenames (``003_Chapter_One.wav``) appear as marker rows.
- POST_QC: post-production reports with CD-TRK, TIME, PAGE*, TEXT,
  PROBLEM DESCRIPTION and EDITOR COMMENTS. No ID column.

Row interpreters are pure: they take the row, the column map and a ScanState
and return the candidate (or None to skip) together with the next state.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

# =============================================================================
# CONSTANTS
# =============================================================================

# Status meaning the defect can only be fixed by re-recording
PICKUP_STATUS = "fix not possible without pickup"

# EDITOR COMMENTS values that mark a post-QC row as needing a pickup
POST_QC_ACCEPTED_COMMENTS = frozenset(
    {
        "pickup",
        "pick up",
        "pickup required",
        "needs pickup",
        "fix not possible without pickup",
    }
)

TRACK_PATTERN = re.compile(r"^(\d+)")
BRACKET_PATTERN = re.compile(r"\[([^\]]*)\]")
QUOTED_PATTERN = re.compile(r"[\"“]([^\"“”]+)[\"”]")


# =============================================================================
# CELL HELPERS
# =============================================================================


def cell_text(cell: object) -> str:
    """Render a spreadsheet cell as trimmed text.

    Integral floats (as delivered by spreadsheet readers) lose their ".0".
    """
    if cell is None:
        return ""
    if isinstance(cell, float):
        if math.isnan(cell):
            return ""
        if cell.is_integer():
            return str(int(cell))
    return str(cell).strip()


def parse_number(cell: object) -> float | None:
    """Parse a cell as a number, or None."""
    text = cell_text(cell)
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def fold_status(text: str) -> str:
    """Case-fold and collapse whitespace for literal status comparison."""
    return " ".join(text.split()).casefold()


def row_get(row: Sequence[object], index: int | None) -> object:
    if index is None or index < 0 or index >= len(row):
        return None
    return row[index]


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class ScanState:
    """Accumulator threaded through a row scan."""

    current_track: str = ""
    emitted: int = 0  # corrections emitted so far


@dataclass(frozen=True)
class RawRow:
    """A correction candidate read from one data row, before classification."""

    row_number: int  # 0-based index in the full table
    id: str  # empty when the dialect has no ID column
    page: object
    context: str
    note: str
    track: str = ""
    timestamp: str = ""
    bracket_words: tuple[str, ...] = ()
    quoted_words: tuple[str, ...] = ()


Interpreter = Callable[
    [int, Sequence[object], dict[str, int], ScanState], tuple["RawRow | None", ScanState]
]


@dataclass(frozen=True)
class Dialect:
    """A QC report layout.

    Attributes:
        name: Dialect identifier ("standard", "post_qc").
        description: Human-readable description.
        required_columns: Header names that must all be present.
        optional_columns: Header names used when present.
        column_aliases: (name, alternatives) pairs accepted for a column.
        interpret: Row interpreter for this layout.
    """

    name: str
    description: str
    required_columns: tuple[str, ...]
    interpret: Interpreter
    optional_columns: tuple[str, ...] = ()
    column_aliases: tuple[tuple[str, tuple[str, ...]], ...] = ()

    def canonical(self, header_cell: object) -> str:
        """Map a header cell to this dialect's column name (upper-cased)."""
        name = cell_text(header_cell).upper()
        for column, aliases in self.column_aliases:
            if name in aliases:
                return column
        return name

    def matches_header(self, row: Sequence[object]) -> bool:
        """Whether ``row`` carries every required column."""
        names = {self.canonical(cell) for cell in row}
        return set(self.required_columns) <= names

    def column_map(self, header: Sequence[object]) -> dict[str, int]:
        """Column name to index; the first occurrence wins."""
        columns: dict[str, int] = {}
        for index, cell in enumerate(header):
            name = self.canonical(cell)
            if name and name not in columns:
                columns[name] = index
        return columns


# =============================================================================
# INTERPRETERS
# =============================================================================


def _track_marker(row: Sequence[object]) -> str | None:
    """Track id of a ``*.wav`` marker row ("" if it has no leading digits), else None."""
    for cell in row:
        text = cell_text(cell)
        if text.lower().endswith(".wav"):
            m = TRACK_PATTERN.match(text)
            return m.group(1) if m else ""
    return None


def interpret_standard(
    row_number: int,
    row: Sequence[object],
    columns: dict[str, int],
    state: ScanState,
) -> tuple[RawRow | None, ScanState]:
    """Read one row of a standard QC report."""
    track = _track_marker(row)
    if track is not None:
        if track:
            state = replace(state, current_track=track)
        return None, state

    id_cell = row_get(row, columns["ID"])
    if parse_number(id_cell) is None:
        return None, state

    status = cell_text(row_get(row, columns["CONTEXT"] + 1))
    if fold_status(status) != PICKUP_STATUS:
        return None, state

    return (
        RawRow(
            row_number=row_number,
            id=cell_text(id_cell),
            page=row_get(row, columns["PAGE"]),
            context=cell_text(row_get(row, columns["CONTEXT"])),
            note=cell_text(row_get(row, columns["NOTES"])),
            track=state.current_track,
            timestamp=cell_text(row_get(row, columns.get("TIME CODE"))),
        ),
        state,
    )


def interpret_post_qc(
    row_number: int,
    row: Sequence[object],
    columns: dict[str, int],
    state: ScanState,
) -> tuple[RawRow | None, ScanState]:
    """Read one row of a post-QC report."""
    comment = fold_status(cell_text(row_get(row, columns["EDITOR COMMENTS"])))
    if comment not in POST_QC_ACCEPTED_COMMENTS:
        return None, state

    text = cell_text(row_get(row, columns["TEXT"]))
    description = cell_text(row_get(row, columns["PROBLEM DESCRIPTION"]))

    bracketed = " ".join(BRACKET_PATTERN.findall(text))
    quoted = QUOTED_PATTERN.search(description)

    return (
        RawRow(
            row_number=row_number,
            id="",
            page=row_get(row, columns["PAGE*"]),
            context=text.replace("[", "").replace("]", ""),
            note=description,
            track=cell_text(row_get(row, columns["CD-TRK"])),
            timestamp=cell_text(row_get(row, columns["TIME"])),
            bracket_words=tuple(bracketed.split()),
            quoted_words=tuple(quoted.group(1).split()) if quoted else (),
        ),
        state,
    )


# =============================================================================
# KNOWN DIALECTS
# =============================================================================

STANDARD = Dialect(
    name="standard",
    description="Proofing report with ID/PAGE/CONTEXT/NOTES and a status column",
    required_columns=("ID", "PAGE", "CONTEXT", "NOTES"),
    optional_columns=("TIME CODE",),
    interpret=interpret_standard,
)

POST_QC = Dialect(
    name="post_qc",
    description="Post-production report keyed by CD track and editor comments",
    required_columns=("CD-TRK", "TIME", "PAGE*", "TEXT", "PROBLEM DESCRIPTION", "EDITOR COMMENTS"),
    column_aliases=(("PAGE*", ("PAGE", "PAGE *")),),
    interpret=interpret_post_qc,
)

DIALECTS: dict[str, Dialect] = {
    "standard": STANDARD,
    "post_qc": POST_QC,
}
