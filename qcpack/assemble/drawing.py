"""
Drawing QC marks on PyMuPDF pages.

Plans are expressed in document space (origin bottom-left, y up); PyMuPDF
draws in page space (origin top-left, y down). Every function here takes the
page height and converts.

Marks:
- underline: a line just below the baseline of each underlined run span;
- oblong: an ellipse around emphasized words, one per text line (or one per
  span for insertion boundary words);
- notes box: a white, black-bordered box in the top-left corner listing
  the page's notes in Helvetica.
"""

from __future__ import annotations

from collections.abc import Sequence

import fitz  # PyMuPDF

from qcpack.annotate.planner import clamp_fractions
from qcpack.locate.index import Y_TOLERANCE
from qcpack.models import PositionedTextRun, RunSpan

BLACK = (0, 0, 0)
WHITE = (1, 1, 1)
LINE_WIDTH = 1.0
UNDERLINE_DROP = 2.0  # distance below the baseline

NOTES_FONT = "helv"
NOTES_MARGIN = 25.0
NOTES_PADDING = 8.0
NOTES_LINE_FACTOR = 1.3
MAX_FIT_ATTEMPTS = 4


def _segment(run: PositionedTextRun, span: RunSpan) -> tuple[float, float]:
    start, end = clamp_fractions(span.start_fraction, span.end_fraction)
    return run.x + run.width * start, run.x + run.width * end


def draw_underlines(
    page: fitz.Page,
    spans: Sequence[RunSpan],
    runs: Sequence[PositionedTextRun],
    page_height: float,
) -> int:
    """Underline every span. Returns the number of lines drawn."""
    drawn = 0
    for span in spans:
        run = runs[span.run_index]
        x0, x1 = _segment(run, span)
        y = page_height - (run.y - UNDERLINE_DROP)
        page.draw_line(fitz.Point(x0, y), fitz.Point(x1, y), color=BLACK, width=LINE_WIDTH)
        drawn += 1
    return drawn


def group_spans_into_lines(
    spans: Sequence[RunSpan], runs: Sequence[PositionedTextRun]
) -> list[list[RunSpan]]:
    """Group spans by baseline; each line sorted left to right."""
    lines: list[tuple[float, list[RunSpan]]] = []
    for span in spans:
        y = runs[span.run_index].y
        for line_y, members in lines:
            if abs(line_y - y) < Y_TOLERANCE:
                members.append(span)
                break
        else:
            lines.append((y, [span]))
    return [
        sorted(members, key=lambda s: _segment(runs[s.run_index], s)[0]) for _, members in lines
    ]


def draw_oblongs(
    page: fitz.Page,
    spans: Sequence[RunSpan],
    runs: Sequence[PositionedTextRun],
    page_height: float,
    *,
    separate: bool = False,
) -> int:
    """
    Circle emphasized spans.

    Args:
        separate: One ellipse per span instead of one per text line.

    Returns:
        Number of ellipses drawn.
    """
    groups = [[span] for span in spans] if separate else group_spans_into_lines(spans, runs)

    drawn = 0
    for group in groups:
        if not group:
            continue
        first_run = runs[group[0].run_index]
        left = _segment(first_run, group[0])[0]
        right = _segment(runs[group[-1].run_index], group[-1])[1]

        center_x = (left + right) / 2
        center_y = first_run.y + first_run.height * 0.35 - 1
        x_radius = (right - left) / 2 + 2
        y_radius = first_run.height * 0.6 + 1

        rect = fitz.Rect(
            center_x - x_radius,
            page_height - (center_y + y_radius),
            center_x + x_radius,
            page_height - (center_y - y_radius),
        )
        page.draw_oval(rect, color=BLACK, width=LINE_WIDTH)
        drawn += 1
    return drawn


def wrap_text(
    text: str, max_width: float, fontsize: float, fontname: str = NOTES_FONT
) -> list[str]:
    """Greedy word wrap measured with the notes font."""
    lines = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            width = fitz.get_text_length(candidate, fontname=fontname, fontsize=fontsize)
            if width <= max_width or not current:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines


def draw_notes_box(
    page: fitz.Page,
    text: str,
    *,
    fontsize: float = 10.0,
    width_ratio: float = 0.4,
) -> fitz.Rect:
    """
    Draw the notes box in the top-left corner of the page.

    The box is sized from the wrapped text and grown if PyMuPDF reports
    that the text does not fit.

    Returns:
        The rectangle of the box, in page space.
    """
    max_width = page.rect.width * width_ratio
    lines = wrap_text(text, max_width, fontsize)
    line_height = fontsize * NOTES_LINE_FACTOR
    text_height = len(lines) * line_height

    left = page.rect.x0 + NOTES_MARGIN
    top = page.rect.y0 + NOTES_MARGIN

    box = fitz.Rect(left, top, left, top)
    for _ in range(MAX_FIT_ATTEMPTS):
        box = fitz.Rect(
            left,
            top,
            left + max_width + 2 * NOTES_PADDING,
            top + text_height + 2 * NOTES_PADDING,
        )
        page.draw_rect(box, color=BLACK, fill=WHITE, width=LINE_WIDTH)
        inner = fitz.Rect(
            box.x0 + NOTES_PADDING,
            box.y0 + NOTES_PADDING,
            box.x1 - NOTES_PADDING,
            box.y1 - NOTES_PADDING + line_height,
        )
        remaining = page.insert_textbox(
            inner,
            "\n".join(lines),
            fontname=NOTES_FONT,
            fontsize=fontsize,
            lineheight=NOTES_LINE_FACTOR,
            color=BLACK,
        )
        if remaining >= 0:
            break
        text_height += -remaining + line_height
    return box
