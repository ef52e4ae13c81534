"""Box-and-whisker panels of per-position score distributions.

A :class:`BoxPlot` summarizes every distinct position of an interval
collection with a five-number summary and emits the primitives for one
box per position:

- a filled rectangle spanning the interquartile range
- a median line
- whiskers to the most extreme non-outlier scores, with caps
- optional circles for outliers

Positions with no scores produce no box. Boxes are emitted in ascending
position order.

Example:
    >>> from splicemap.viz.boxplot import BoxPlot
    >>> x_scale = LinearScale((95, 106), (0, 75))
    >>> plot = BoxPlot(window, x_scale, width=75, height=100)
    >>> prims = plot.build()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from splicemap.core.stats import FiveNumberSummary, five_number_summary
from splicemap.viz.primitives import (
    Circle,
    LinearScale,
    Line,
    Primitive,
    Rect,
    frame,
    padded_scale,
)

if TYPE_CHECKING:
    from splicemap.io.bed import BedData

logger = logging.getLogger(__name__)

# Default colors
BOXPLOT_COLORS = {
    "box": "#69b3a2",
    "median": "#000000",
    "whisker": "#000000",
    "outlier": "#e8504c",
}

# Fraction of the score range added above and below a derived y axis
Y_PADDING = 0.1

OUTLIER_RADIUS = 3.0


class BoxPlot:
    """Box plot of the scores recorded at each position of a track window.

    Attributes:
        bed: Intervals to summarize (gap-filled if continuity matters).
        x_scale: Position-to-pixel scale; boxes are centred on each
            position's base.
        width: Panel width in pixels.
        height: Panel height in pixels.
        y_scale: Score-to-pixel scale.
        box_width: Box width in pixels.
        show_outliers: Whether outlier circles are drawn.
        colors: Colors keyed by ``box``, ``median``, ``whisker``, ``outlier``.
    """

    def __init__(
        self,
        bed: BedData,
        x_scale: LinearScale,
        width: float,
        height: float,
        y_scale: LinearScale | None = None,
        box_width: float | None = None,
        show_outliers: bool = True,
        colors: dict[str, str] | None = None,
    ) -> None:
        """Initialize the plot.

        Args:
            bed: Intervals to summarize.
            x_scale: Position-to-pixel scale.
            width: Panel width in pixels.
            height: Panel height in pixels.
            y_scale: Score-to-pixel scale. Derived from the padded score
                range when omitted.
            box_width: Box width in pixels. Defaults to half the width
                available per position.
            show_outliers: Draw outlier circles.
            colors: Color overrides merged over :data:`BOXPLOT_COLORS`.
        """
        self.bed = bed
        self.x_scale = x_scale
        self.width = width
        self.height = height
        self.show_outliers = show_outliers
        self.colors = {**BOXPLOT_COLORS, **(colors or {})}

        self._summaries: list[FiveNumberSummary] | None = None

        if y_scale is None:
            y_scale = padded_scale(bed.scores(), height, 0.0, padding=Y_PADDING)
        self.y_scale = y_scale

        if box_width is None:
            n_positions = len(bed.positions())
            box_width = width / (n_positions * 2) if n_positions else width / 2
        self.box_width = box_width

    def summaries(self) -> list[FiveNumberSummary]:
        """Five-number summary of each distinct position, ascending."""
        if self._summaries is None:
            grouped: dict[int, list[float]] = {}
            for line in self.bed.explode():
                grouped.setdefault(line.start, []).append(line.score)

            summaries = []
            for pos in sorted(grouped):
                summary = five_number_summary(grouped[pos], position=pos)
                if summary is not None:
                    summaries.append(summary)
            self._summaries = summaries
        return self._summaries

    def box_center(self, position: int) -> float:
        """Pixel x of the centre of a position's base."""
        return (self.x_scale(position) + self.x_scale(position + 1)) / 2

    def box_primitives(self, summary: FiveNumberSummary) -> list[Primitive]:
        """Primitives for the box of one summary."""
        y = self.y_scale
        center = self.box_center(summary.position)
        half = self.box_width / 2
        cap = self.box_width / 4
        whisker = self.colors["whisker"]

        top = y(summary.q3)
        bottom = y(summary.q1)
        y_top, y_bottom = min(top, bottom), max(top, bottom)

        prims: list[Primitive] = [
            # Whiskers
            Line(center, y(summary.adjusted_max), center, y(summary.q3), stroke=whisker),
            Line(center, y(summary.q1), center, y(summary.adjusted_min), stroke=whisker),
            # Box
            Rect(
                center - half,
                y_top,
                self.box_width,
                y_bottom - y_top,
                fill=self.colors["box"],
                stroke="#000000",
            ),
            # Median
            Line(
                center - half,
                y(summary.median),
                center + half,
                y(summary.median),
                stroke=self.colors["median"],
                stroke_width=2,
            ),
            # Caps
            Line(center - cap, y(summary.adjusted_max), center + cap, y(summary.adjusted_max), stroke=whisker),
            Line(center - cap, y(summary.adjusted_min), center + cap, y(summary.adjusted_min), stroke=whisker),
        ]

        if self.show_outliers:
            prims.extend(
                Circle(center, y(value), OUTLIER_RADIUS, fill=self.colors["outlier"])
                for value in summary.outliers
            )

        return prims

    def build(self) -> list[Primitive]:
        """Background frame followed by every box, ascending by position."""
        prims: list[Primitive] = [frame(self.width, self.height)]
        for summary in self.summaries():
            prims.extend(self.box_primitives(summary))
        logger.debug(f"Built box plot with {len(self.summaries())} boxes")
        return prims
