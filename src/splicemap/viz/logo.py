"""Sequence logos of per-base nucleotide frequencies.

Each position becomes a column of letters stacked bottom-up in a fixed
nucleotide order. A letter's height is its relative frequency times the
panel height, so every column with reads fills the panel exactly.

Example:
    >>> from splicemap.viz.logo import SequenceLogo
    >>> logo = SequenceLogo(counts.get_range(95, 105), x_scale, width=75, height=40)
    >>> glyphs = logo.glyphs()
"""

from __future__ import annotations

from typing import Iterable, Sequence

from splicemap.io.sj import NUCLEOTIDE_ORDER, NucleotideCounts
from splicemap.viz.primitives import Glyph, LinearScale, Primitive, frame

NUCLEOTIDE_COLORS = {
    "A": "#32CD32",  # Lime green
    "C": "#1E90FF",  # Dodger blue
    "G": "#FFD700",  # Gold
    "T": "#DC143C",  # Crimson
    "N": "#808080",  # Gray
}


class SequenceLogo:
    """Stacked-letter logo over a run of positions.

    Attributes:
        counts: Count rows, one per position.
        x_scale: Position-to-pixel scale.
        width: Panel width in pixels.
        height: Panel height in pixels.
        colors: Letter colors keyed by nucleotide.
        order: Stacking order, bottom first.
    """

    def __init__(
        self,
        counts: Iterable[NucleotideCounts],
        x_scale: LinearScale,
        width: float,
        height: float,
        colors: dict[str, str] | None = None,
        order: Sequence[str] = NUCLEOTIDE_ORDER,
    ) -> None:
        self.counts = sorted(counts, key=lambda row: row.position)
        self.x_scale = x_scale
        self.width = width
        self.height = height
        self.colors = {**NUCLEOTIDE_COLORS, **(colors or {})}
        self.order = tuple(order)

    @property
    def slot_width(self) -> float:
        """Horizontal space per distinct position."""
        n_positions = len({row.position for row in self.counts})
        return self.width / n_positions if n_positions else self.width

    def column(self, row: NucleotideCounts) -> list[Glyph]:
        """Glyphs of one position, bottom glyph first."""
        freqs = row.frequencies()
        if not freqs:
            return []

        slot = self.slot_width
        x = self.x_scale(row.position) + slot / 2
        y_bottom = self.height
        glyphs = []
        for nuc in self.order:
            freq = freqs.get(nuc, 0.0)
            if freq <= 0:
                continue
            glyph_height = freq * self.height
            y_top = y_bottom - glyph_height
            glyphs.append(
                Glyph(
                    x=x,
                    y=y_top,
                    char=nuc,
                    font_size=slot,
                    height=glyph_height,
                    color=self.colors.get(nuc, "#000000"),
                )
            )
            y_bottom = y_top
        return glyphs

    def glyphs(self) -> list[Glyph]:
        """All glyphs, ascending by position."""
        result: list[Glyph] = []
        for row in self.counts:
            result.extend(self.column(row))
        return result

    def build(self) -> list[Primitive]:
        """Background frame followed by the glyphs."""
        return [frame(self.width, self.height), *self.glyphs()]
