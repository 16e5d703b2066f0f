"""Line and run placement.

Lines are stacked top to bottom and the whole block is centered vertically
in the target rect. Inside a line, left-aligned runs pack from the left edge,
right-aligned runs pack from the right edge and centered runs sit in the
middle without claiming space. All runs of a line share its bottom edge as
their baseline.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterator

from postergen.models import Content, Line, Run
from postergen.render.canvas import Canvas
from postergen.utils.colors import is_transparent
from postergen.utils.dimensions import Rect

logger = logging.getLogger(__name__)

LINE_SPACING = 1.5


@dataclass
class LineLayout:
    """Per-line cursor: space already claimed from each edge."""

    line_rect: Rect
    offset_left: int = 0
    offset_right: int = 0

    def place(self, run: Run) -> Rect:
        """
        Compute the run's box and advance the cursor.

        Args:
            run: Run with a resolved face.

        Returns:
            Box the run occupies; its top is where glyphs are drawn.
        """
        width, height = run.size()
        rect = self.line_rect

        # Put every run's baseline on the bottom of the line box
        top = rect.top + rect.height - run.ascent()

        alignment = run.resolved_alignment()
        if alignment == "left":
            left = rect.left + self.offset_left
            self.offset_left += width
        elif alignment == "center":
            left = rect.left + (rect.width - width) // 2
        else:
            left = rect.left + (rect.width - self.offset_right - width)
            self.offset_right += width

        return Rect(left, top, width, height)


@dataclass(frozen=True)
class PlacedRun:
    """Draw command: a run at its final position."""

    run: Run
    rect: Rect

    def draw(self, canvas: Canvas) -> None:
        run = self.run
        # A transparent fill would still overwrite what's underneath
        if not is_transparent(run.background_color):
            canvas.fill_rect(self.rect, run.background_color)
        canvas.draw_glyphs(
            self.rect.left,
            self.rect.top,
            run.face,
            run.font_size,
            run.font_color,
            run.content,
        )


def draw_order(line: Line) -> list[Run]:
    """
    Order in which a line's runs are placed.

    Right-aligned runs come first, last one first, so the run appearing last
    in the document claims the outermost slot on the right. Left and centered
    runs follow in document order.
    """
    queue: deque[Run] = deque()
    for run in line.runs:
        if run.resolved_alignment() == "right":
            queue.appendleft(run)
        else:
            queue.append(run)
    return list(queue)


def line_rects(
    content: Content, target_rect: Rect, line_spacing: float = LINE_SPACING
) -> Iterator[tuple[Line, Rect]]:
    """
    Yield each non-empty line with its drawing rect.

    The block is centered in target_rect. A block taller than the rect starts
    above it; nothing is clamped.
    """
    content_height = content.content_height(line_spacing)
    start_y = target_rect.top + (target_rect.height - content_height) // 2

    for line in content.lines:
        if line.is_empty():
            continue
        top = start_y + line.line_height(line_spacing - 1.0) // 2
        yield line, Rect(target_rect.left, top, target_rect.width, line.line_height(1.0))
        start_y += line.line_height(line_spacing)


def layout(
    content: Content, target_rect: Rect, line_spacing: float = LINE_SPACING
) -> Iterator[PlacedRun]:
    """
    Position every run of the content.

    Args:
        content: Parsed content.
        target_rect: Content area of the canvas.
        line_spacing: Vertical advance factor between lines.

    Yields:
        PlacedRun commands in drawing order.
    """
    for line, rect in line_rects(content, target_rect, line_spacing):
        cursor = LineLayout(rect)
        for run in draw_order(line):
            yield PlacedRun(run, cursor.place(run))


def render(
    content: Content, target_rect: Rect, canvas: Canvas, line_spacing: float = LINE_SPACING
) -> int:
    """
    Lay out content and draw it onto a canvas.

    Returns:
        Number of runs drawn.
    """
    count = 0
    for placed in layout(content, target_rect, line_spacing):
        placed.draw(canvas)
        count += 1
    logger.debug(f"Drew {count} run(s) into {target_rect}")
    return count
