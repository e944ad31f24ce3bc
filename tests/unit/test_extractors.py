"""
Unit tests for QC report extraction.

Tests dialect detection, row gating and the correction records produced
for both report layouts.
"""

import logging

import pytest

from qcpack.exceptions import HeaderNotFoundError, UnsupportedDialectError
from qcpack.extractors import (
    POST_QC,
    STANDARD,
    RowExtractor,
    ScanState,
    cell_text,
    detect_dialect,
    extract_corrections,
    find_header,
    interpret_standard,
)
from qcpack.models import CorrectionType, DiagnosticKind

PICKUP = "Fix not possible without pickup"

STANDARD_HEADER = ["ID", "PAGE", "CONTEXT", "STATUS", "NOTES", "TIME CODE"]
POST_QC_HEADER = ["CD-TRK", "TIME", "PAGE", "TEXT", "PROBLEM DESCRIPTION", "EDITOR COMMENTS"]


@pytest.fixture
def standard_rows() -> list[list[object]]:
    """A standard report with a title row, track markers and mixed statuses."""
    return [
        ["Project QC", None, None, None, None, None],
        STANDARD_HEADER,
        ["003_Chapter_One.wav", None, None, None, None, None],
        [1, 12, "over their heads", PICKUP, '"there" S/B "their"', "00:03:07.84"],
        [2, 13, "some text", "Fixed", "whatever", ""],
        ["004_Chapter_Two.wav", None, None, None, None, None],
        [
            3.0,
            14.0,
            "I am happy ____ today.",
            "FIX NOT POSSIBLE  WITHOUT PICKUP",
            "Inserted: very",
            "00:10:00.0",
        ],
        ["Total", None, None, PICKUP, None, None],
    ]


@pytest.fixture
def post_qc_rows() -> list[list[object]]:
    """A post-QC report."""
    return [
        POST_QC_HEADER,
        ["05", "01:02.5", 7, "He walked [slowly] home", "Rushed delivery", "Pickup"],
        ["05", "01:30.0", 7, "nothing to see", "Noise", "ok"],
        [6, "02:00.0", 8, "the cat sat", 'Said "cot" for "cat"', "pick up"],
    ]


class TestCellHelpers:
    """Tests for cell_text()."""

    def test_integral_float(self):
        """Spreadsheet floats lose their '.0'."""
        assert cell_text(12.0) == "12"
        assert cell_text(12.5) == "12.5"

    def test_empty_cells(self):
        """None and NaN render as empty text."""
        assert cell_text(None) == ""
        assert cell_text(float("nan")) == ""

    def test_strips(self):
        """Text is trimmed."""
        assert cell_text("  x ") == "x"


class TestDialectDetection:
    """Tests for header sniffing."""

    def test_standard(self, standard_rows):
        """Standard columns select STANDARD."""
        assert detect_dialect(standard_rows) is STANDARD

    def test_post_qc_with_page_alias(self, post_qc_rows):
        """PAGE is accepted for PAGE*."""
        assert detect_dialect(post_qc_rows) is POST_QC

    def test_unknown_layout(self):
        """Neither header profile is an error."""
        with pytest.raises(UnsupportedDialectError):
            detect_dialect([["foo", "bar"], [1, 2]])

    def test_header_is_case_insensitive(self):
        """Header names are matched upper-cased."""
        assert find_header([["id", "page", "context", "notes"]], STANDARD) == 0

    def test_missing_header(self):
        """A table without the dialect's header raises."""
        with pytest.raises(HeaderNotFoundError):
            find_header([["ID", "PAGE"], [1, 2]], STANDARD)


class TestStandardExtraction:
    """Tests for the standard dialect."""

    def test_only_pickup_rows_are_emitted(self, standard_rows):
        """Rows with another status are skipped."""
        corrections = extract_corrections(standard_rows)

        assert [c.id for c in corrections] == ["1", "3"]
        assert [c.page for c in corrections] == [12, 14]

    def test_gating_is_exact(self):
        """A status that merely resembles the pickup literal is rejected."""
        rows = [
            STANDARD_HEADER,
            [1, 1, "text", "Fix not possible without pickup!", "note", ""],
            [2, 1, "text", "fix possible without pickup", "note", ""],
        ]
        assert extract_corrections(rows) == []

    def test_track_accumulates(self, standard_rows):
        """Each correction carries the last track marker above it."""
        corrections = extract_corrections(standard_rows)
        assert [c.track for c in corrections] == ["003", "004"]

    def test_track_state_is_explicit(self):
        """The interpreter returns the updated track instead of storing it."""
        columns = STANDARD.column_map(STANDARD_HEADER)
        raw, state = interpret_standard(0, ["007_Epilogue.wav"], columns, ScanState())

        assert raw is None
        assert state.current_track == "007"

    def test_classified_fields(self, standard_rows):
        """Notes are classified and context cleaned."""
        first, second = extract_corrections(standard_rows)

        assert first.notes == 'read as "there" should be read as "their"'
        assert first.words_for_emphasis == ("their",)
        assert first.timestamp == "00:03:07.84"
        assert second.correction_type is CorrectionType.INSERTED
        assert second.context_phrase == "I am happy today."
        assert second.words_for_emphasis == ("happy", "today")

    def test_audible_mode(self, standard_rows):
        """Audible mode adds role prefixes."""
        corrections = extract_corrections(standard_rows, audible_mode=True)
        assert corrections[0].notes.startswith("MR: ")
        assert corrections[1].notes.startswith("MW: ")

    def test_bad_page_is_dropped(self, caplog):
        """A non-numeric page drops the row with a diagnostic."""
        rows = [
            STANDARD_HEADER,
            [1, "ten", "text", PICKUP, "note", ""],
            [2, 10, "text", PICKUP, "note", ""],
        ]
        extractor = RowExtractor()
        with caplog.at_level(logging.WARNING, logger="qcpack.extractors.rows"):
            corrections = extractor.extract(rows, STANDARD)

        assert [c.id for c in corrections] == ["2"]
        assert len(extractor.diagnostics) == 1
        assert extractor.diagnostics[0].kind is DiagnosticKind.CORRECTION_DROPPED
        assert extractor.diagnostics[0].correction_id == "1"
        assert "not a page number" in caplog.text

    def test_empty_context_is_dropped(self):
        """A context of only placeholders has nothing to search for."""
        rows = [STANDARD_HEADER, [1, 2, "____", PICKUP, "Inserted: x", ""]]
        extractor = RowExtractor()

        assert extractor.extract(rows, STANDARD) == []
        assert extractor.diagnostics[0].kind is DiagnosticKind.CORRECTION_DROPPED

    def test_diagnostics_reset_per_call(self):
        """Each extract() call starts with no diagnostics."""
        bad = [STANDARD_HEADER, [1, "x", "text", PICKUP, "note", ""]]
        extractor = RowExtractor()
        extractor.extract(bad, STANDARD)
        extractor.extract([STANDARD_HEADER], STANDARD)

        assert extractor.diagnostics == []


class TestPostQCExtraction:
    """Tests for the post-QC dialect."""

    def test_accepted_comments_only(self, post_qc_rows):
        """Rows whose editor comment is not a pickup are skipped."""
        corrections = extract_corrections(post_qc_rows)
        assert len(corrections) == 2

    def test_synthetic_ids(self, post_qc_rows):
        """Ids count emitted corrections."""
        corrections = extract_corrections(post_qc_rows)
        assert [c.id for c in corrections] == ["1", "2"]

    def test_bracket_words_win(self, post_qc_rows):
        """Bracketed text is emphasized and brackets removed from context."""
        first = extract_corrections(post_qc_rows)[0]

        assert first.context_phrase == "He walked slowly home"
        assert first.words_for_emphasis == ("slowly",)
        assert first.track == "05"
        assert first.timestamp == "01:02.5"
        assert first.page == 7

    def test_quoted_words_from_description(self, post_qc_rows):
        """Without brackets, the first quoted phrase is emphasized."""
        second = extract_corrections(post_qc_rows)[1]

        assert second.words_for_emphasis == ("cot",)
        assert second.track == "6"
        assert second.notes == 'Said "cot" for "cat"'
