"""
Exception classes for qcpack.

All qcpack exceptions inherit from QCPackError,
making it easy to catch all library errors.

Only conditions that make a whole call meaningless are raised.
Per-row, per-correction and per-page problems are reported as
Diagnostic records (see qcpack.models) and logged as warnings.

Example:
    >>> try:
    ...     result = qcpack.build_qc_pack("report.csv", "script.pdf")
    ... except qcpack.HeaderNotFoundError as e:
    ...     print(f"Not a QC report: {e}")
    ... except qcpack.QCPackError as e:
    ...     print(f"qcpack error: {e}")
"""


class QCPackError(Exception):
    """
    Base exception for all qcpack errors.

    Catch this to handle any qcpack-specific error.
    """

    pass


class HeaderNotFoundError(QCPackError):
    """
    Raised when no row of a QC report carries a dialect's required columns.

    Example:
        >>> extract_corrections([["foo", "bar"]], STANDARD)
        HeaderNotFoundError: Could not find required header columns (ID, PAGE, CONTEXT, NOTES)
    """

    pass


class UnsupportedDialectError(QCPackError):
    """
    Raised when a QC report matches none of the known header profiles.
    """

    pass


class UnsupportedFormatError(QCPackError):
    """
    Raised when a report or script file format is not supported.

    Example:
        >>> read_table("report.ods")
        UnsupportedFormatError: Format '.ods' is not supported. Supported: .csv, .xlsx
    """

    pass


class ConfigurationError(QCPackError):
    """
    Raised for invalid configuration.

    Example:
        >>> PackConfig(notes_box_width_ratio=0)
        ConfigurationError: notes_box_width_ratio must be in (0, 1], got 0
    """

    pass
