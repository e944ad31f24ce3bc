"""Tests for qcpack data models."""

from qcpack.models import (
    AnnotationPlan,
    Diagnostic,
    DiagnosticKind,
    LocatedSpan,
    PackResult,
    PositionedTextRun,
    RunSpan,
)


class TestRunSpan:
    """Tests for RunSpan fractions."""

    def test_fractions(self):
        """Fractions are relative to the character length."""
        span = RunSpan(page_number=1, run_index=0, char_start=5, char_end=10, run_length=20)
        assert span.start_fraction == 0.25
        assert span.end_fraction == 0.5

    def test_empty_run(self):
        """A zero-length run does not divide by zero."""
        span = RunSpan(1, 0, 0, 0, 0)
        assert span.start_fraction == 0.0


class TestSpans:
    """Tests for LocatedSpan and AnnotationPlan page splitting."""

    def test_located_span_pages(self):
        """Pages are reported ascending and split by for_page()."""
        span = LocatedSpan(runs=(RunSpan(2, 0, 0, 3, 3), RunSpan(3, 0, 0, 3, 3)))

        assert span.pages == [2, 3]
        assert span.for_page(3) == (RunSpan(3, 0, 0, 3, 3),)
        assert bool(span) is True
        assert bool(LocatedSpan(runs=())) is False

    def test_plan_for_page(self):
        """A plan is split into per-page plans."""
        plan = AnnotationPlan(
            underline=(RunSpan(1, 4, 0, 5, 5), RunSpan(2, 0, 0, 3, 8)),
            emphasis=(RunSpan(2, 0, 0, 3, 8),),
        )

        assert plan.pages == [1, 2]
        assert plan.for_page(1) == AnnotationPlan(underline=(RunSpan(1, 4, 0, 5, 5),))
        assert plan.for_page(5) == AnnotationPlan()


class TestMisc:
    """Tests for the remaining records."""

    def test_run_right_edge(self):
        """right is x plus width."""
        assert PositionedTextRun("abc", x=10, y=0, width=15, height=12).right == 25

    def test_diagnostic_str(self):
        """Diagnostics render with their kind."""
        diagnostic = Diagnostic(DiagnosticKind.PAGE_OUT_OF_RANGE, "Page 9 is outside the script")
        assert str(diagnostic) == "[page_out_of_range] Page 9 is outside the script"

    def test_pack_result_save(self, tmp_path):
        """save() writes the bytes."""
        out = tmp_path / "pack.pdf"
        PackResult(pdf_bytes=b"%PDF-1.7", page_count=1).save(out)
        assert out.read_bytes() == b"%PDF-1.7"
