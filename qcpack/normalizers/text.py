"""
Text canonicalization for phrase matching.

Script PDFs and QC reports disagree on case, ligatures, quote styles,
punctuation and line-wrap hyphenation. Both sides are reduced to the same
canonical form before any substring search.

Two forms are provided:
- normalize(): letters, digits, apostrophes and double quotes separated by
  single spaces. Used for the strict match.
- strip_to_alphanumeric(): letters and digits only. Used for the aggressive
  fallback match; it can merge two distinct words across a removed space.

The ``*_with_index_map`` variants also return, for every output character,
the offset in the input that produced it, so a match can be mapped back to
the original text for drawing.
"""

from __future__ import annotations

import re

# =============================================================================
# CONSTANTS
# =============================================================================

LIGATURES = {
    "ﬀ": "ff",
    "ﬁ": "fi",
    "ﬂ": "fl",
    "ﬃ": "ffi",
    "ﬄ": "ffl",
    "ﬅ": "st",
    "ﬆ": "st",
}

QUOTES = {
    "‘": "'",
    "’": "'",
    "‚": "'",
    "‛": "'",
    "′": "'",
    "“": '"',
    "”": '"',
    "„": '"',
    "‟": '"',
    "″": '"',
}

HYPHENS = frozenset("-­‐‑")

# Glyph runs used in QC reports to stand for elided or inserted text
PLACEHOLDER_PATTERN = re.compile(r"[_﹏＿▁]+")
WHITESPACE_PATTERN = re.compile(r"\s+")


# =============================================================================
# NORMALIZATION
# =============================================================================


def _canonical_chars(s: str):
    """Yield (char, source_index) after lowercasing and ligature/quote mapping."""
    for i, raw in enumerate(s):
        for ch in raw.lower():
            expanded = LIGATURES.get(ch)
            if expanded:
                for part in expanded:
                    yield part, i
            else:
                yield QUOTES.get(ch, ch), i


def normalize_with_index_map(s: str) -> tuple[str, list[int]]:
    """
    Normalize text and record where each output character came from.

    Args:
        s: Raw text (may be empty).

    Returns:
        Tuple of (normalized, indices) where ``indices[i]`` is the offset
        in ``s`` that produced ``normalized[i]``.

    Example:
        >>> normalize_with_index_map("exam-ple  Text")
        ('example text', [0, 1, 2, 3, 5, 6, 7, 8, 10, 11, 12, 13])
    """
    if not s:
        return "", []

    out: list[str] = []
    indices: list[int] = []
    last_was_space = True  # suppresses leading spaces

    def emit_space(index: int) -> None:
        nonlocal last_was_space
        if not last_was_space:
            out.append(" ")
            indices.append(index)
            last_was_space = True

    for ch, i in _canonical_chars(s):
        if ch in HYPHENS:
            # Soft hyphen / line-wrap: join the word halves
            if i + 1 < len(s) and s[i + 1].isalpha():
                continue
            emit_space(i)
        elif ch.isalnum() or ch in ("'", '"'):
            out.append(ch)
            indices.append(i)
            last_was_space = False
        else:
            emit_space(i)

    if out and out[-1] == " ":
        out.pop()
        indices.pop()

    return "".join(out), indices


def normalize(s: str) -> str:
    """
    Normalize text for equality and substring checks.

    Never raises; empty or all-punctuation input yields "".

    Example:
        >>> normalize("ﬁnd “quotes’s”")
        'find "quotes\\'s"'
    """
    return normalize_with_index_map(s)[0]


def strip_to_alphanumeric_with_index_map(s: str) -> tuple[str, list[int]]:
    """Keep only letters and digits (lowercased, ligatures expanded), with offsets."""
    out: list[str] = []
    indices: list[int] = []
    for ch, i in _canonical_chars(s or ""):
        if ch.isalnum():
            out.append(ch)
            indices.append(i)
    return "".join(out), indices


def strip_to_alphanumeric(s: str) -> str:
    """Aggressive form used when the strict match fails.

    Example:
        >>> strip_to_alphanumeric("Don't  stop-me, now!")
        'dontstopmenow'
    """
    return strip_to_alphanumeric_with_index_map(s)[0]


def collapse_placeholders(s: str) -> str:
    """Replace placeholder glyph runs with spaces and tidy whitespace.

    Case and punctuation are preserved; the result is still literal
    script text.

    Example:
        >>> collapse_placeholders("I am happy ﹏﹏ today")
        'I am happy today'
    """
    if not s:
        return ""
    return WHITESPACE_PATTERN.sub(" ", PLACEHOLDER_PATTERN.sub(" ", s)).strip()
