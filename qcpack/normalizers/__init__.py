"""
Text normalizers shared by note classification and phrase location.

- normalize / normalize_with_index_map: strict matching form
- strip_to_alphanumeric / strip_to_alphanumeric_with_index_map: aggressive form
- collapse_placeholders: blank-run glyphs in QC report contexts to spaces
"""

from qcpack.normalizers.text import (
    PLACEHOLDER_PATTERN,
    collapse_placeholders,
    normalize,
    normalize_with_index_map,
    strip_to_alphanumeric,
    strip_to_alphanumeric_with_index_map,
)

__all__ = [
    "normalize",
    "normalize_with_index_map",
    "strip_to_alphanumeric",
    "strip_to_alphanumeric_with_index_map",
    "collapse_placeholders",
    "PLACEHOLDER_PATTERN",
]
