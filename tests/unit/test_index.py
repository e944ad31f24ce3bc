"""Tests for PageTextIndex and reading order."""

import pytest

from qcpack.locate.index import (
    PageTextIndex,
    group_into_lines,
    sort_reading_order,
)
from qcpack.models import LocatedSpan, RunSpan


class TestReadingOrder:
    """Tests for line grouping."""

    def test_lines_top_to_bottom_left_to_right(self, make_run):
        """Runs are grouped by baseline and sorted by x."""
        b = make_run("b", x=100, y=700)
        a = make_run("a", x=50, y=698)
        c = make_run("c", x=50, y=680)

        assert group_into_lines([c, b, a]) == [[a, b], [c]]
        assert sort_reading_order([c, b, a]) == [a, b, c]

    def test_whitespace_runs_dropped(self, make_run):
        """Whitespace-only runs never reach the corpus."""
        runs = [make_run("word"), make_run("   ", x=200)]
        assert sort_reading_order(runs) == [runs[0]]


class TestCorpus:
    """Tests for corpus construction."""

    def test_separator_between_distant_runs(self, make_run):
        """Runs with a gap are joined by a synthetic space."""
        index = PageTextIndex.build(1, [make_run("Hello", x=0), make_run("world", x=40)])

        assert index.corpus == "Hello world"
        assert index.char_runs[5] == -1
        assert index.char_offsets[5] == -1

    def test_adjacent_runs_are_glued(self, make_run):
        """Touching runs on one line form one word."""
        index = PageTextIndex.build(1, [make_run("Hel", x=0, width=18), make_run("lo", x=18)])
        assert index.corpus == "Hello"

    def test_lines_are_separated(self, make_run):
        """Consecutive lines never run together."""
        index = PageTextIndex.build(1, [make_run("end", y=700), make_run("start", y=680)])
        assert index.corpus == "end start"

    def test_no_separator_after_hyphen(self, make_run):
        """A line ending in a hyphen continues the word."""
        index = PageTextIndex.build(1, [make_run("exam-", y=700), make_run("ple text", y=680)])

        assert index.corpus == "exam-ple text"
        assert index.normalized[0] == "example text"

    def test_existing_whitespace_is_not_doubled(self, make_run):
        """A run ending in a space needs no separator."""
        index = PageTextIndex.build(1, [make_run("one ", y=700), make_run("two", y=680)])
        assert index.corpus == "one two"

    def test_owner_count_must_match(self, make_run):
        """Runs and owners are parallel."""
        with pytest.raises(ValueError):
            PageTextIndex([make_run("a")], [])


class TestSpans:
    """Tests for corpus to run mapping."""

    def test_spans_for_second_run(self, make_run):
        """A corpus range maps to page-local run offsets."""
        index = PageTextIndex.build(3, [make_run("Hello", x=0), make_run("world", x=40)])

        assert index.spans_for(6, 10) == (RunSpan(3, 1, 0, 5, 5),)

    def test_spans_skip_separators(self, make_run):
        """A range across runs yields one span per run."""
        index = PageTextIndex.build(1, [make_run("Hello", x=0), make_run("world", x=40)])
        spans = index.spans_for(3, 7)

        assert spans == (RunSpan(1, 0, 3, 5, 5), RunSpan(1, 1, 0, 2, 5))

    def test_join_keeps_owners(self, make_index):
        """Joined pages keep each run's page and local index."""
        joined = PageTextIndex.join(make_index(1, "first", "second"), make_index(2, "third"))

        assert joined.owners == ((1, 0), (1, 1), (2, 0))
        assert joined.pages == [1, 2]
        assert joined.corpus == "first second third"

    def test_from_span_clips(self, make_index):
        """A clipped index only contains the spanned characters."""
        index = make_index(1, "their house, over their heads")
        span = LocatedSpan(runs=(RunSpan(1, 0, 13, 29, 29),))
        clipped = PageTextIndex.from_span(span, index)

        assert clipped.corpus == "over their heads"
        assert clipped.spans_for(5, 9) == (RunSpan(1, 0, 18, 23, 29),)

    def test_from_span_needs_source_runs(self, make_index):
        """Spans must refer to runs of the source index."""
        span = LocatedSpan(runs=(RunSpan(2, 0, 0, 1, 1),))
        with pytest.raises(ValueError):
            PageTextIndex.from_span(span, make_index(1, "text"))

    def test_text_for(self, make_index):
        """Reconstructs the spanned text."""
        index = make_index(1, "exam-", "ple text")
        span = LocatedSpan(runs=(RunSpan(1, 0, 0, 5, 5), RunSpan(1, 1, 0, 3, 8)))

        assert index.text_for(span) == "exam-ple"
