"""
QC note classification.

Turns free-text proofing remarks into typed corrections:
- classify(): pure function, first matching NoteRule wins
- NoteClassifier: classify() bound to an audible-mode setting
- NOTE_RULES: the rule list in priority order
"""

from qcpack.notes.classifier import (
    NOTE_RULES,
    Classification,
    NoteClassifier,
    NoteRule,
    RuleMatch,
    boundary_words,
    classify,
)

__all__ = [
    "classify",
    "NoteClassifier",
    "Classification",
    "NoteRule",
    "RuleMatch",
    "NOTE_RULES",
    "boundary_words",
]
