"""Zoom/overview splice-site figure.

:class:`SplicePlot` relates a genome-wide overview (gene model,
transcripts, mean read-support bars) to zoomed box plots around every
donor and acceptor site. It works in two phases:

1. :meth:`SplicePlot.compute_track_scales` computes one outlier-robust
   y maximum per site category over the whole track, so every detail
   panel of a category shares one axis.
2. :meth:`SplicePlot.build` lays out the grid, allocates one detail slot
   per site, draws each panel with the shared scale and joins it to its
   overview position with a connector.

The result is a :class:`~splicemap.viz.primitives.Scene` whose layers are
ordered bottom to top; nothing is drawn until a backend renders it.

Example:
    >>> from splicemap.viz.splice_plot import SplicePlot
    >>> plot = SplicePlot(transcriptome, donors, acceptors, config)
    >>> scene = plot.build()
    >>> save_scene(scene, "splice.png")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import attrs

from splicemap.config import Config, GridConfig
from splicemap.core.aggregate import (
    compute_max_non_outlier_score,
    compute_mean_scores,
    fill_empty_positions,
)
from splicemap.core.stats import FiveNumberSummary
from splicemap.io.bed import BedData
from splicemap.io.sj import NucleotideCounts, SJData
from splicemap.viz.boxplot import BoxPlot
from splicemap.viz.layout import CellBox, GridLayout, ZoomMapping, ZoomStrip, connector
from splicemap.viz.logo import SequenceLogo
from splicemap.viz.primitives import Layer, LinearScale, Primitive, Scene, translate
from splicemap.viz.tracks import (
    bar_track,
    gene_model_track,
    label_column,
    site_lines,
    transcript_track,
    y_axis,
)

if TYPE_CHECKING:
    from splicemap.io.gtf import Transcriptome

logger = logging.getLogger(__name__)

SITE_CATEGORIES = ("donor", "acceptor")

# Shared y maximum when a track holds no usable scores
DEFAULT_TRACK_MAX = 1.0

# Ticks on strip and bar axes
AXIS_TICKS = 4

# Layers raised above the site overlays, bottom first
PROMOTED_LAYERS = ("gene_model", "donor_bar", "donor_strip")


# =============================================================================
# Data Structures
# =============================================================================


@attrs.frozen
class SitePanel:
    """Plan of the detail panel for one site.

    Attributes:
        category: ``donor`` or ``acceptor``.
        site: Site coordinate.
        window: Inclusive (first, last) position shown.
        slot: Slot rectangle, local to the zoom strip.
        mapping: Overview interval to slot interval mapping.
        track: Gap-filled per-base records of the window.
        summaries: Five-number summary per window position, ascending.
        boxes: Box plot of the window, in slot-local pixels.
    """

    category: str
    site: int
    window: tuple[int, int]
    slot: CellBox
    mapping: ZoomMapping
    track: BedData = attrs.field(eq=False, repr=False)
    summaries: tuple[FiveNumberSummary, ...] = ()
    boxes: BoxPlot | None = attrs.field(default=None, eq=False, repr=False)


# =============================================================================
# Orchestrator
# =============================================================================


class SplicePlot:
    """Multi-panel splice-site figure builder.

    Attributes:
        transcriptome: Transcript models providing sites and genome length.
        tracks: Per-base score tracks keyed by category.
        counts: Optional nucleotide counts keyed by category, for logos.
        config: Plot configuration.
        genome_length: Length of the overview coordinate space.
    """

    def __init__(
        self,
        transcriptome: Transcriptome,
        donors: BedData,
        acceptors: BedData,
        config: Config | None = None,
        donor_counts: SJData | None = None,
        acceptor_counts: SJData | None = None,
    ) -> None:
        """Initialize the plot.

        Args:
            transcriptome: Transcript models.
            donors: Donor score track.
            acceptors: Acceptor score track.
            config: Configuration; defaults when None.
            donor_counts: Nucleotide counts around donors.
            acceptor_counts: Nucleotide counts around acceptors.
        """
        self.transcriptome = transcriptome
        self.tracks = {"donor": donors, "acceptor": acceptors}
        self.counts = {"donor": donor_counts, "acceptor": acceptor_counts}
        self.config = config or Config()

        self.genome_length = self._genome_length()

        plot = self.config.plot
        grid = self.config.grid
        self.grid = GridLayout(
            plot.width,
            plot.height,
            grid.column_ratios,
            [grid.row_ratios, grid.row_ratios],
        )
        main = self.grid.cell(0, 0)
        self.x_scale = LinearScale((0, self.genome_length), (0, main.width))

        self._scales: dict[str, float] | None = None

    def _genome_length(self) -> int:
        length = self.transcriptome.end
        for track in self.tracks.values():
            span = track.span
            if span is not None:
                length = max(length, span[1])
        return max(length, 1)

    def _cell(self, column: int, row: str) -> CellBox:
        return self.grid.cell(column, GridConfig.row_index(row))

    # -------------------------------------------------------------------------
    # Phase 1: scales
    # -------------------------------------------------------------------------

    def compute_track_scales(self) -> dict[str, float]:
        """Shared y maximum per category over the whole track.

        Returns:
            Mapping of category to the largest non-outlier score, or
            :data:`DEFAULT_TRACK_MAX` when the track is empty or has no
            positive score.
        """
        if self._scales is None:
            scales = {}
            for category, track in self.tracks.items():
                value = compute_max_non_outlier_score(track)
                if value is None or value <= 0:
                    value = DEFAULT_TRACK_MAX
                scales[category] = value
                logger.debug(f"Shared {category} y maximum: {value:g}")
            self._scales = scales
        return self._scales

    def strip_y_scale(self, category: str) -> LinearScale:
        """Shared score-to-pixel scale of a category's detail panels."""
        height = self._cell(0, f"{category}_boxes").height
        return LinearScale((0.0, self.compute_track_scales()[category]), (height, 0.0))

    # -------------------------------------------------------------------------
    # Phase 2: planning
    # -------------------------------------------------------------------------

    def window(self, site: int) -> tuple[int, int]:
        """Inclusive window shown around a site."""
        zoom_width = self.config.plot.zoom_width
        return site - zoom_width, site + zoom_width

    def window_track(self, category: str, site: int) -> BedData:
        """Dense per-base records of a site's window.

        Records are windowed, exploded to single bases and clipped to the
        window before gaps are filled with zero-score placeholders.
        """
        lo, hi = self.window(site)
        exploded = self.tracks[category].get_range(lo, hi).explode()
        clipped = BedData(line for line in exploded if lo <= line.start <= hi)
        return fill_empty_positions(clipped, lo, hi)

    def window_counts(self, category: str, site: int) -> list[NucleotideCounts]:
        """Nucleotide counts of a site's window, one row per base.

        Positions without a count row get an all-zero row, which draws no
        letters but keeps every logo column one base wide.

        Returns:
            Rows ascending by position, or an empty list when the category
            has no counts inside the window.
        """
        counts = self.counts[category]
        if counts is None:
            return []
        lo, hi = self.window(site)
        rows = counts.get_range(lo, hi)
        if not rows:
            return []

        present = {row.position for row in rows}
        seqid = rows[0].seqid
        rows.extend(NucleotideCounts(seqid, pos) for pos in range(lo, hi + 1) if pos not in present)
        return sorted(rows, key=lambda row: row.position)

    def strip(self, category: str) -> ZoomStrip:
        """Slot allocation for the sorted sites of a category."""
        box = self._cell(0, f"{category}_boxes")
        return ZoomStrip(
            width=box.width,
            height=box.height,
            coordinate_length=self.genome_length,
            elements=sorted(self.transcriptome.sites(category)),
            element_width=self.config.plot.zoom_window_width,
        )

    def plan_sites(self, category: str) -> list[SitePanel]:
        """Plan every detail panel of a category, ascending by site.

        Raises:
            ValueError: If the category is unknown.
        """
        if category not in SITE_CATEGORIES:
            raise ValueError(
                f"Unknown site category: {category}, expected one of {SITE_CATEGORIES}"
            )

        strip = self.strip(category)
        y_scale = self.strip_y_scale(category)

        panels = []
        for index, site in enumerate(strip.elements):
            track = self.window_track(category, site)
            slot = strip.cell(index)
            lo, hi = self.window(site)
            boxes = BoxPlot(
                track,
                LinearScale((lo, hi + 1), (0.0, slot.width)),
                slot.width,
                slot.height,
                y_scale=y_scale,
                show_outliers=self.config.plot.show_outliers,
            )
            panels.append(
                SitePanel(
                    category=category,
                    site=site,
                    window=(lo, hi),
                    slot=slot,
                    mapping=strip.mapping(index),
                    track=track,
                    summaries=tuple(boxes.summaries()),
                    boxes=boxes,
                )
            )

        logger.info(f"Planned {len(panels)} {category} panels")
        return panels

    # -------------------------------------------------------------------------
    # Phase 2: drawing
    # -------------------------------------------------------------------------

    def _overview_layers(self) -> list[Layer]:
        font_size = self.config.plot.font_size

        gene_box = self._cell(0, "gene_model")
        tx_box = self._cell(0, "transcripts")
        label_box = self._cell(1, "transcripts")

        tx_prims, labels = transcript_track(self.transcriptome, self.x_scale, tx_box.height)
        return [
            Layer(
                "gene_model",
                tuple(gene_model_track(self.transcriptome, self.x_scale, gene_box.height, font_size)),
                gene_box.x,
                gene_box.y,
            ),
            Layer("transcripts", tuple(tx_prims), tx_box.x, tx_box.y),
            Layer(
                "transcript_labels",
                tuple(label_column(labels, font_size)),
                label_box.x,
                label_box.y,
            ),
        ]

    def _bar_layers(self, category: str) -> list[Layer]:
        color, _ = self.config.colors.for_category(category)
        box = self._cell(0, f"{category}_bar")
        axis_box = self._cell(1, f"{category}_bar")

        means = compute_mean_scores(self.tracks[category])
        prims, y_scale = bar_track(means, self.x_scale, box.height, color)
        return [
            Layer(f"{category}_bar", tuple(prims), box.x, box.y),
            Layer(
                f"{category}_bar_axis",
                tuple(y_axis(y_scale, ticks=2, font_size=self.config.plot.font_size)),
                axis_box.x,
                axis_box.y,
            ),
        ]

    def _strip_layers(self, category: str) -> list[Layer]:
        plot = self.config.plot
        _, connector_color = self.config.colors.for_category(category)

        box = self._cell(0, f"{category}_boxes")
        link_box = self._cell(0, f"{category}_connector")
        logo_box = self._cell(0, f"{category}_logos")
        axis_box = self._cell(1, f"{category}_boxes")

        y_scale = self.strip_y_scale(category)
        zoom_span = self.x_scale(2 * plot.zoom_width + 1) - self.x_scale(0)

        strip_prims: list[Primitive] = []
        link_prims: list[Primitive] = []
        logo_prims: list[Primitive] = []

        for panel in self.plan_sites(category):
            slot = panel.slot
            strip_prims.extend(_shift(panel.boxes.build(), slot.x))

            link_prims.append(
                connector(panel.mapping, link_box.height, zoom_span, color=connector_color)
            )

            rows = self.window_counts(category, panel.site)
            if rows:
                logo = SequenceLogo(
                    rows,
                    panel.boxes.x_scale,
                    slot.width,
                    logo_box.height,
                    colors=self.config.colors.nucleotides,
                )
                logo_prims.extend(_shift(logo.build(), slot.x))

        layers = [
            Layer(f"{category}_connectors", tuple(link_prims), link_box.x, link_box.y),
            Layer(f"{category}_strip", tuple(strip_prims), box.x, box.y),
            Layer(
                f"{category}_strip_axis",
                tuple(y_axis(y_scale, ticks=AXIS_TICKS, font_size=plot.font_size)),
                axis_box.x,
                axis_box.y,
            ),
        ]
        if logo_prims:
            layers.append(Layer(f"{category}_logos", tuple(logo_prims), logo_box.x, logo_box.y))
        return layers

    def _site_overlays(self) -> list[Layer]:
        layers = []
        # Lines reach down to the top of each category's bar track
        for category, last_row in (("donor", "spacer_top"), ("acceptor", "spacer_mid")):
            color, _ = self.config.colors.for_category(category)
            first = GridConfig.row_index("gene_model")
            last = GridConfig.row_index(last_row)
            span = self.grid.span(0, range(first, last + 1))
            sites = self.transcriptome.sites(category)
            layers.append(
                Layer(
                    f"{category}_sites",
                    tuple(site_lines(sites, self.x_scale, span.height, color)),
                    span.x,
                    span.y,
                )
            )
        return layers

    def build(self) -> Scene:
        """Assemble the full figure.

        Returns:
            Scene with layers bottom to top; the gene model, donor bar and
            donor strip sit above the dashed site overlays.
        """
        self.compute_track_scales()

        layers: list[Layer] = []
        layers.extend(self._overview_layers())
        for category in SITE_CATEGORIES:
            layers.extend(self._bar_layers(category))
            layers.extend(self._strip_layers(category))
        layers.extend(self._site_overlays())

        plot = self.config.plot
        scene = Scene(plot.width, plot.height, tuple(layers))
        return scene.promote(*PROMOTED_LAYERS)


def _shift(primitives: list[Primitive], dx: float) -> list[Primitive]:
    return [translate(p, dx, 0.0) for p in primitives]
