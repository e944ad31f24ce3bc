"""
QC report table reader.

Reads every row of a report (header included) as a list of cells:
- .csv through the standard csv module (UTF-8, BOM tolerated)
- .xlsx through pandas and openpyxl (``xlsx`` extra), first sheet only

Cells are returned as-is (strings for CSV, scalars for Excel); empty Excel
cells become None. Header detection is left to the extractors.
"""

from __future__ import annotations

import csv
import math
from pathlib import Path

from qcpack.exceptions import UnsupportedFormatError

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx",)


def supported_extensions() -> list[str]:
    """Return list of supported report file extensions."""
    return [*CSV_EXTENSIONS, *EXCEL_EXTENSIONS]


def read_table(path: str | Path) -> list[list[object]]:
    """
    Read all rows of a QC report.

    Args:
        path: Path to a .csv or .xlsx file.

    Returns:
        Rows top to bottom. Blank CSV lines are skipped.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        UnsupportedFormatError: If the extension isn't supported.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"QC report not found: {path}")

    ext = path.suffix.lower()
    if ext in CSV_EXTENSIONS:
        return _read_csv(path)
    if ext in EXCEL_EXTENSIONS:
        return _read_excel(path)

    raise UnsupportedFormatError(
        f"Format '{ext}' is not supported. Supported: {', '.join(supported_extensions())}"
    )


def _read_csv(path: Path) -> list[list[object]]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        return [row for row in csv.reader(f) if any(cell.strip() for cell in row)]


def _read_excel(path: Path) -> list[list[object]]:
    # Lazy import: pandas is only needed for spreadsheet reports
    import pandas as pd

    frame = pd.read_excel(path, header=None, sheet_name=0, engine="openpyxl")
    rows = []
    for values in frame.itertuples(index=False, name=None):
        rows.append([None if _is_blank(v) else v for v in values])
    return rows


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))
