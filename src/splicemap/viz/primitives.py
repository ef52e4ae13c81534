"""Drawing primitives, scales and layers.

Plots in SpliceMap never draw directly. Each renderer turns statistics
into an immutable list of primitive descriptors (rectangles, lines, text,
circles, polygons and scaled glyphs) positioned in pixel coordinates, and
a backend in :mod:`splicemap.viz.render` draws them. Primitives are
grouped into layers; a :class:`Scene` lists layers bottom to top.

Pixel coordinates follow the SVG convention: origin at the top left, y
increasing downwards.

Example:
    >>> scale = LinearScale((0, 10), (0, 100))
    >>> scale(2.5)
    25.0
    >>> layer = Layer("panel", (Rect(0, 0, 10, 10, fill="red"),))
    >>> scene = Scene(200, 100, (layer,))
"""

from __future__ import annotations

from typing import Iterable, Union

import attrs
import numpy as np
from matplotlib.ticker import MaxNLocator

# =============================================================================
# Scales
# =============================================================================


@attrs.frozen(slots=True)
class LinearScale:
    """Continuous linear map from a data domain to a pixel range.

    Attributes:
        domain: (d0, d1) data interval.
        range: (r0, r1) pixel interval; may be inverted for y axes.
    """

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) * (r1 - r0) / (d1 - d0)

    def ticks(self, count: int = 5) -> list[float]:
        """Round tick values inside the domain.

        Args:
            count: Approximate number of ticks.
        """
        lo, hi = sorted(self.domain)
        if lo == hi:
            return [float(lo)]
        values = MaxNLocator(nbins=max(1, count)).tick_values(lo, hi)
        eps = (hi - lo) * 1e-9
        return [float(v) for v in values if lo - eps <= v <= hi + eps]


def padded_scale(values: Iterable[float], r0: float, r1: float, padding: float = 0.1) -> LinearScale:
    """Scale whose domain is the min/max of values padded by a fraction.

    A degenerate (single-valued) sample gets a unit-wide domain centred
    on the value; an empty sample gets [0, 1].

    Args:
        values: Data values.
        r0: Pixel range start.
        r1: Pixel range end.
        padding: Fraction of the data range added on each side.
    """
    data = np.asarray(list(values), dtype=float)
    if data.size == 0:
        return LinearScale((0.0, 1.0), (r0, r1))

    lo = float(data.min())
    hi = float(data.max())
    pad = (hi - lo) * padding
    if pad == 0:
        return LinearScale((lo - 0.5, hi + 0.5), (r0, r1))
    return LinearScale((lo - pad, hi + pad), (r0, r1))


# =============================================================================
# Primitives
# =============================================================================


@attrs.frozen(slots=True)
class Rect:
    """Axis-aligned rectangle; (x, y) is the top-left corner."""

    x: float
    y: float
    width: float
    height: float
    fill: str | None = None
    fill_opacity: float = 1.0
    stroke: str | None = None
    stroke_width: float = 1.0


@attrs.frozen(slots=True)
class Line:
    """Straight line segment."""

    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = "#000000"
    stroke_width: float = 1.0
    dash: tuple[float, ...] | None = None


@attrs.frozen(slots=True)
class Text:
    """Text label anchored at (x, y)."""

    x: float
    y: float
    text: str
    font_size: float = 10.0
    color: str = "#333333"
    anchor: str = "start"  # start | middle | end
    baseline: str = "middle"  # top | middle | bottom
    rotation: float = 0.0


@attrs.frozen(slots=True)
class Circle:
    """Filled circle."""

    cx: float
    cy: float
    r: float
    fill: str = "#000000"


@attrs.frozen(slots=True)
class Polygon:
    """Closed polygon."""

    points: tuple[tuple[float, float], ...]
    fill: str | None = None
    fill_opacity: float = 1.0
    stroke: str | None = None
    stroke_width: float = 1.0


@attrs.frozen(slots=True)
class Glyph:
    """A letter stretched vertically to fill a band.

    The letter is set at ``font_size`` (the slot width) and scaled by
    ``scale_y`` so its nominal em box spans exactly ``height`` pixels;
    (x, y) is the horizontal centre and top edge of the band.
    """

    x: float
    y: float
    char: str
    font_size: float
    height: float
    color: str = "#000000"

    @property
    def scale_y(self) -> float:
        """Vertical stretch factor applied to the letter."""
        if self.font_size == 0:
            return 0.0
        return self.height / self.font_size

    @property
    def width(self) -> float:
        """Horizontal extent of the band."""
        return self.font_size


Primitive = Union[Rect, Line, Text, Circle, Polygon, Glyph]


def translate(primitive: Primitive, dx: float, dy: float) -> Primitive:
    """Shift a primitive by (dx, dy)."""
    if isinstance(primitive, Rect):
        return attrs.evolve(primitive, x=primitive.x + dx, y=primitive.y + dy)
    if isinstance(primitive, Line):
        return attrs.evolve(
            primitive,
            x1=primitive.x1 + dx,
            y1=primitive.y1 + dy,
            x2=primitive.x2 + dx,
            y2=primitive.y2 + dy,
        )
    if isinstance(primitive, (Text, Glyph)):
        return attrs.evolve(primitive, x=primitive.x + dx, y=primitive.y + dy)
    if isinstance(primitive, Circle):
        return attrs.evolve(primitive, cx=primitive.cx + dx, cy=primitive.cy + dy)
    if isinstance(primitive, Polygon):
        return attrs.evolve(
            primitive, points=tuple((x + dx, y + dy) for x, y in primitive.points)
        )
    raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")


def frame(width: float, height: float, stroke: str = "black", stroke_width: float = 3.0) -> Rect:
    """Unfilled border around a panel."""
    return Rect(0, 0, width, height, fill=None, stroke=stroke, stroke_width=stroke_width)


# =============================================================================
# Layers and Scene
# =============================================================================


@attrs.frozen
class Layer:
    """Named group of primitives in panel-local coordinates.

    Attributes:
        name: Unique layer name.
        primitives: Primitives in drawing order.
        x: Horizontal offset of the panel in the scene.
        y: Vertical offset of the panel in the scene.
    """

    name: str
    primitives: tuple[Primitive, ...] = ()
    x: float = 0.0
    y: float = 0.0

    def absolute(self) -> list[Primitive]:
        """Primitives shifted into scene coordinates."""
        if self.x == 0 and self.y == 0:
            return list(self.primitives)
        return [translate(p, self.x, self.y) for p in self.primitives]


@attrs.frozen
class Scene:
    """Complete drawing: size and layers ordered bottom to top."""

    width: float
    height: float
    layers: tuple[Layer, ...] = ()

    def layer_names(self) -> list[str]:
        """Layer names bottom to top."""
        return [layer.name for layer in self.layers]

    def get_layer(self, name: str) -> Layer:
        """Look up a layer by name.

        Raises:
            KeyError: If no layer has that name.
        """
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(name)

    def promote(self, *names: str) -> Scene:
        """Move the named layers to the top, in argument order.

        Equivalent to raising each layer in turn; the last name ends up
        topmost. Unknown names are ignored.
        """
        by_name = {layer.name: layer for layer in self.layers}
        raised = [by_name[name] for name in dict.fromkeys(names) if name in by_name]
        wanted = {layer.name for layer in raised}
        kept = [layer for layer in self.layers if layer.name not in wanted]
        return attrs.evolve(self, layers=tuple(kept + raised))

    def primitives(self) -> list[Primitive]:
        """All primitives in scene coordinates, bottom to top."""
        result: list[Primitive] = []
        for layer in self.layers:
            result.extend(layer.absolute())
        return result
