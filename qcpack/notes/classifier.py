"""
QC note classification.

Proofers write remarks in a handful of loose dialects ("X S/B Y",
"Missing: ...", "Inserted: ..."). Each dialect is one NoteRule; rules are
tried in priority order and the first match wins. A note no rule
understands is passed through verbatim as a misread, so classification
never fails a row.

Example:
    >>> result = classify('Missing: the dog ran', "", audible_mode=True)
    >>> result.correction_type
    <CorrectionType.MISSING: 'missing'>
    >>> result.formatted_note
    'ML: "the dog ran" is missing and should be read.'
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from qcpack.models import CorrectionType
from qcpack.normalizers.text import PLACEHOLDER_PATTERN, collapse_placeholders

# =============================================================================
# CONSTANTS
# =============================================================================

ROLE_PATTERN = re.compile(r"^(MR|MW|ML)\s*:\s*", re.IGNORECASE)

# Double quotes stripped from the ends of quoted note fragments
DOUBLE_QUOTES = "\"“”"

# Single quotes are stripped only as a pair; a lone one is an apostrophe
SINGLE_QUOTE_PAIRS = (("'", "'"), ("‘", "’"))

# Punctuation trimmed from boundary words taken out of a context phrase
WORD_EDGE_PATTERN = re.compile(r"^[^\w']+|[^\w']+$")


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class Classification:
    """Structured reading of one QC remark."""

    formatted_note: str
    words_for_emphasis: tuple[str, ...]
    correction_type: CorrectionType
    searchable_context: str


@dataclass(frozen=True)
class RuleMatch:
    """What a rule extracted, before role prefixes are applied."""

    note: str
    words: tuple[str, ...]
    correction_type: CorrectionType
    # Number of words inserted/omitted; decides MW vs ML
    span_words: int = 0


@dataclass(frozen=True)
class NoteRule:
    """One note dialect: a pattern and a builder for its match."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str], str], RuleMatch]


# =============================================================================
# HELPERS
# =============================================================================


def _unquote(text: str) -> str:
    text = text.strip().strip(DOUBLE_QUOTES).strip()
    for opening, closing in SINGLE_QUOTE_PAIRS:
        if len(text) >= 2 and text.startswith(opening) and text.endswith(closing):
            return text[1:-1].strip()
    return text


def _words(text: str) -> tuple[str, ...]:
    return tuple(w for w in text.split() if w)


def boundary_words(raw_context: str) -> tuple[str, ...]:
    """Words flanking the first placeholder run in a raw context.

    Returns two words when both sides have one, a single word when only
    one side does, and nothing when the context has no placeholder.

    Example:
        >>> boundary_words("I am happy ____ today.")
        ('happy', 'today')
    """
    match = PLACEHOLDER_PATTERN.search(raw_context or "")
    if not match:
        return ()

    before = raw_context[: match.start()].split()
    after = raw_context[match.end() :].split()

    words = []
    if before:
        words.append(WORD_EDGE_PATTERN.sub("", before[-1]))
    if after:
        words.append(WORD_EDGE_PATTERN.sub("", after[0]))
    return tuple(w for w in words if w)


# =============================================================================
# RULES
# =============================================================================


def _should_be(m: re.Match[str], _context: str) -> RuleMatch:
    # The script contains the corrected reading
    wrong, right = _unquote(m.group("a")), _unquote(m.group("b"))
    return RuleMatch(
        note=f'read as "{wrong}" should be read as "{right}"',
        words=_words(right),
        correction_type=CorrectionType.MISREAD,
    )


def _sounds_like(m: re.Match[str], _context: str) -> RuleMatch:
    script, heard = _unquote(m.group("a")), _unquote(m.group("b"))
    return RuleMatch(
        note=f'"{script}" is misheard as "{heard}"',
        words=_words(script),
        correction_type=CorrectionType.MISREAD,
    )


def _read_as(m: re.Match[str], _context: str) -> RuleMatch:
    right, wrong = _unquote(m.group("a")), _unquote(m.group("b"))
    return RuleMatch(
        note=f'read as "{wrong}" should be read as "{right}"',
        words=_words(right),
        correction_type=CorrectionType.MISREAD,
    )


def _missing(m: re.Match[str], _context: str) -> RuleMatch:
    missing = _unquote(m.group("x"))
    words = _words(missing)
    return RuleMatch(
        note=f'"{missing}" is missing and should be read.',
        words=words,
        correction_type=CorrectionType.MISSING,
        span_words=len(words),
    )


def _inserted(m: re.Match[str], context: str) -> RuleMatch:
    inserted = _unquote(m.group("x"))
    # The inserted words are not in the script; mark where they went instead
    return RuleMatch(
        note=f'"{inserted}" was inserted and should be omitted.',
        words=boundary_words(context),
        correction_type=CorrectionType.INSERTED,
        span_words=len(_words(inserted)),
    )


NOTE_RULES: tuple[NoteRule, ...] = (
    NoteRule(
        "should_be",
        re.compile(r"^(?P<a>.+?)\s+S/B\s+(?P<b>.+)$", re.IGNORECASE | re.DOTALL),
        _should_be,
    ),
    NoteRule(
        "sounds_like",
        re.compile(r"^(?P<a>.+?)\s+sounds\s+like\s+(?P<b>.+)$", re.IGNORECASE | re.DOTALL),
        _sounds_like,
    ),
    NoteRule(
        "read_as",
        re.compile(r"^(?P<a>.+?)\s+read\s+as\s+(?P<b>.+)$", re.IGNORECASE | re.DOTALL),
        _read_as,
    ),
    NoteRule(
        "missing",
        re.compile(
            r"^(?:omitted\s+line\s*:\s*|(?:words?\s+)?missing\s*:\s*|omitted\s*:\s*|omitted\s+)"
            r"(?P<x>.+)$",
            re.IGNORECASE | re.DOTALL,
        ),
        _missing,
    ),
    NoteRule(
        "inserted",
        re.compile(r"^(?:words?\s+)?inserted\s*:\s*(?P<x>.+)$", re.IGNORECASE | re.DOTALL),
        _inserted,
    ),
)


# =============================================================================
# CLASSIFIER
# =============================================================================


def _role_for(match: RuleMatch) -> str:
    if match.correction_type is CorrectionType.MISREAD:
        return "MR"
    return "ML" if match.span_words >= 2 else "MW"


def classify(
    raw_note: str | None,
    raw_context: str | None,
    audible_mode: bool = False,
    rules: tuple[NoteRule, ...] = NOTE_RULES,
) -> Classification:
    """
    Classify one QC remark.

    Args:
        raw_note: Remark text from the report. May carry an MR:/MW:/ML: role.
        raw_context: Script context from the report, possibly containing
            placeholder glyph runs.
        audible_mode: Prefix the formatted note with a role tag.
        rules: Rule list to apply, in priority order.

    Returns:
        Classification. Never raises.
    """
    context = raw_context or ""
    note = (raw_note or "").strip()

    explicit_role = None
    role_match = ROLE_PATTERN.match(note)
    if role_match:
        explicit_role = role_match.group(1).upper()
        note = note[role_match.end() :].strip()

    result = None
    for rule in rules:
        m = rule.pattern.match(note)
        if m:
            result = rule.build(m, context)
            break

    if result is None:
        result = RuleMatch(note=note, words=(), correction_type=CorrectionType.MISREAD)

    formatted = result.note
    if audible_mode and formatted:
        formatted = f"{explicit_role or _role_for(result)}: {formatted}"

    return Classification(
        formatted_note=formatted,
        words_for_emphasis=result.words,
        correction_type=result.correction_type,
        searchable_context=collapse_placeholders(context),
    )


class NoteClassifier:
    """Stateless classifier bound to an audible-mode setting.

    Example:
        >>> classifier = NoteClassifier(audible_mode=True)
        >>> classifier.classify('"there" S/B "their"', "over their heads").formatted_note
        'MR: read as "there" should be read as "their"'
    """

    def __init__(self, audible_mode: bool = False, rules: tuple[NoteRule, ...] = NOTE_RULES):
        self.audible_mode = audible_mode
        self.rules = rules

    def classify(self, raw_note: str | None, raw_context: str | None) -> Classification:
        return classify(raw_note, raw_context, self.audible_mode, self.rules)
