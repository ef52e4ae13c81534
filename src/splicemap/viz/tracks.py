"""Overview tracks: gene model, transcripts, bar chart, axes and site lines.

These renderers produce the genome-wide panels the zoom strips hang off.
Each returns a list of primitives in panel-local pixel coordinates.

Example:
    >>> from splicemap.viz.tracks import bar_track
    >>> x_scale = LinearScale((0, transcriptome.end), (0, 990))
    >>> prims = bar_track(mean_scores, x_scale, height=35, color="#F78154")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from splicemap.viz.primitives import LinearScale, Line, Primitive, Rect, Text, frame

if TYPE_CHECKING:
    from splicemap.io.bed import BedData
    from splicemap.io.gtf import Transcript, Transcriptome

logger = logging.getLogger(__name__)

# Colors
BACKBONE_COLOR = "#555555"
GENE_COLOR = "#B8D4E3"
CDS_COLOR = "#4C72B0"
EXON_COLOR = "#7A9CC6"
INTRON_COLOR = "#333333"


# =============================================================================
# Helpers
# =============================================================================


def assign_lanes(spans: list[tuple[int, int]]) -> list[int]:
    """Greedy lane assignment so overlapping spans never share a lane.

    Args:
        spans: (start, end) half-open spans in any order.

    Returns:
        Lane index for each span, in input order.
    """
    order = sorted(range(len(spans)), key=lambda i: spans[i])
    lane_ends: list[int] = []
    lanes = [0] * len(spans)
    for i in order:
        start, end = spans[i]
        for lane, lane_end in enumerate(lane_ends):
            if lane_end <= start:
                lane_ends[lane] = end
                lanes[i] = lane
                break
        else:
            lanes[i] = len(lane_ends)
            lane_ends.append(end)
    return lanes


# =============================================================================
# Gene Model Panel
# =============================================================================


def gene_model_track(
    transcriptome: Transcriptome,
    x_scale: LinearScale,
    height: float,
    font_size: float = 10,
) -> list[Primitive]:
    """Genome backbone with gene spans and their coding regions.

    Genes overlapping each other are drawn on separate lanes.
    """
    width = max(x_scale.range)
    prims: list[Primitive] = [
        Line(0, height - 1, width, height - 1, stroke=BACKBONE_COLOR, stroke_width=2)
    ]

    genes = transcriptome.genes()
    if not genes:
        return prims

    spans = [(start, end) for start, end, _ in genes.values()]
    lanes = assign_lanes(spans)
    n_lanes = max(lanes) + 1
    lane_height = (height - 2) / n_lanes

    cds_by_gene: dict[str, list[tuple[int, int]]] = {}
    for tx in transcriptome:
        cds_by_gene.setdefault(tx.gene_id, []).extend(tx.cds)

    for (gene_id, (start, end, label)), lane in zip(genes.items(), lanes):
        x0 = x_scale(start)
        x1 = x_scale(end)
        y = lane * lane_height + lane_height * 0.15
        h = lane_height * 0.7
        prims.append(Rect(x0, y, x1 - x0, h, fill=GENE_COLOR, stroke="#000000", stroke_width=0.5))
        for cds_start, cds_end in cds_by_gene.get(gene_id, []):
            c0 = x_scale(cds_start)
            c1 = x_scale(cds_end)
            prims.append(Rect(c0, y, c1 - c0, h, fill=CDS_COLOR, fill_opacity=0.8))
        prims.append(
            Text(
                (x0 + x1) / 2,
                y + h / 2,
                label,
                font_size=font_size,
                color="#000000",
                anchor="middle",
            )
        )

    return prims


def _transcript_primitives(tx: Transcript, x_scale: LinearScale, y: float, h: float) -> list[Primitive]:
    mid = y + h / 2
    prims: list[Primitive] = [
        Line(x_scale(tx.start), mid, x_scale(tx.end), mid, stroke=INTRON_COLOR, stroke_width=1)
    ]
    for start, end in tx.exons:
        x0 = x_scale(start)
        prims.append(
            Rect(x0, y, x_scale(end) - x0, h, fill=EXON_COLOR, stroke="#000000", stroke_width=0.5)
        )
    for start, end in tx.cds:
        x0 = x_scale(start)
        prims.append(Rect(x0, y, x_scale(end) - x0, h, fill=CDS_COLOR))
    return prims


def transcript_track(
    transcriptome: Transcriptome,
    x_scale: LinearScale,
    height: float,
) -> tuple[list[Primitive], list[tuple[str, float]]]:
    """Exon/intron diagrams, one row per transcript.

    Returns:
        Tuple of (primitives, [(label, row centre y)]) so labels can be
        drawn in a neighbouring column.
    """
    prims: list[Primitive] = []
    labels: list[tuple[str, float]] = []
    n = len(transcriptome)
    if n == 0:
        return prims, labels

    row_height = height / n
    for i, tx in enumerate(transcriptome):
        y = i * row_height + row_height * 0.25
        h = row_height * 0.5
        prims.extend(_transcript_primitives(tx, x_scale, y, h))
        labels.append((tx.transcript_id, y + h / 2))

    return prims, labels


def label_column(labels: list[tuple[str, float]], font_size: float = 10, x: float = 4) -> list[Primitive]:
    """Left-aligned labels at the given vertical positions."""
    return [Text(x, y, text, font_size=font_size, color="#000000") for text, y in labels]


# =============================================================================
# Bar Chart
# =============================================================================


def bar_track(
    bed: BedData,
    x_scale: LinearScale,
    height: float,
    color: str,
    y_max: float | None = None,
) -> tuple[list[Primitive], LinearScale]:
    """Bar per record, bars growing upwards from the panel bottom.

    Args:
        bed: Records to draw (typically per-base means).
        x_scale: Genomic-coordinate scale.
        height: Panel height in pixels.
        color: Bar colour.
        y_max: Top of the y domain; defaults to the largest score.

    Returns:
        Tuple of (primitives, y scale used).
    """
    scores = bed.scores()
    if y_max is None:
        y_max = max(scores) if scores else 1.0
    if y_max <= 0:
        y_max = 1.0
    y_scale = LinearScale((0.0, y_max), (height, 0.0))

    width = max(x_scale.range)
    prims: list[Primitive] = [frame(width, height, stroke="black", stroke_width=1)]
    for line in bed:
        if line.score <= 0:
            continue
        x0 = x_scale(line.start)
        bar_width = max(x_scale(line.end) - x0, 1.0)
        top = y_scale(min(line.score, y_max))
        prims.append(Rect(x0, top, bar_width, height - top, fill=color))

    return prims, y_scale


# =============================================================================
# Axes and Overlays
# =============================================================================


def y_axis(
    y_scale: LinearScale,
    ticks: int = 5,
    font_size: float = 10,
    tick_size: float = 3,
    color: str = "#333333",
) -> list[Primitive]:
    """Vertical axis at x=0 with ticks and labels to its right."""
    r0, r1 = y_scale.range
    prims: list[Primitive] = [Line(0, r0, 0, r1, stroke=color)]
    for value in y_scale.ticks(ticks):
        y = y_scale(value)
        prims.append(Line(0, y, tick_size, y, stroke=color))
        prims.append(
            Text(
                tick_size + 2,
                y,
                f"{value:g}",
                font_size=font_size,
                color=color,
            )
        )
    return prims


def site_lines(
    sites: list[int],
    x_scale: LinearScale,
    height: float,
    color: str,
    dash: tuple[float, ...] = (5, 5),
) -> list[Primitive]:
    """Dashed vertical line at every site."""
    return [
        Line(x_scale(site), 0, x_scale(site), height, stroke=color, stroke_width=1, dash=dash)
        for site in sites
    ]
