"""Panel geometry: the figure grid and zoom strips.

This module maps the figure configuration onto pixel rectangles:

- :class:`GridLayout` splits the figure into columns and per-column rows
  from ratio lists.
- :class:`ZoomStrip` places one fixed-width detail slot per genomic site
  along a strip, as close as possible to the site's position on the
  overview axis, and reports the overview-to-detail mapping of each slot.
- :func:`connector` builds the trapezoid joining an overview interval to
  its detail slot.

Example:
    >>> grid = GridLayout(1100, 700, [0.9, 0.1], [[0.5, 0.5], [0.5, 0.5]])
    >>> box = grid.cell(0, 1)  # lower half of the wide column
    >>> strip = ZoomStrip(width=990, height=100, coordinate_length=9000,
    ...                   elements=[700, 5000], element_width=75)
    >>> strip.mapping(0).detail_interval
"""

from __future__ import annotations

import logging
from typing import Sequence

import attrs

from splicemap.viz.primitives import Polygon

logger = logging.getLogger(__name__)


# =============================================================================
# Grid
# =============================================================================


@attrs.frozen(slots=True)
class CellBox:
    """Pixel rectangle of a grid cell or strip slot."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


def _normalize(ratios: Sequence[float]) -> list[float]:
    total = float(sum(ratios))
    if total <= 0:
        raise ValueError(f"Ratios must sum to a positive value, got {list(ratios)}")
    return [r / total for r in ratios]


class GridLayout:
    """Column/row grid over a figure.

    Columns are laid out left to right from ``column_ratios``; each column
    is split top to bottom by its own list in ``row_ratios_per_column``.
    Ratios are normalized, so they need not sum to one.

    Attributes:
        width: Figure width in pixels.
        height: Figure height in pixels.
    """

    def __init__(
        self,
        width: float,
        height: float,
        column_ratios: Sequence[float],
        row_ratios_per_column: Sequence[Sequence[float]],
    ) -> None:
        """Initialize the grid.

        Raises:
            ValueError: If there are fewer row lists than columns or any
                ratio list does not sum to a positive value.
        """
        if len(row_ratios_per_column) < len(column_ratios):
            raise ValueError(
                f"Need row ratios for {len(column_ratios)} columns, "
                f"got {len(row_ratios_per_column)}"
            )

        self.width = width
        self.height = height

        self._columns: list[tuple[float, float]] = []
        x = 0.0
        for ratio in _normalize(column_ratios):
            self._columns.append((x, ratio * width))
            x += ratio * width

        self._rows: list[list[tuple[float, float]]] = []
        for ratios in row_ratios_per_column[: len(column_ratios)]:
            rows = []
            y = 0.0
            for ratio in _normalize(ratios):
                rows.append((y, ratio * height))
                y += ratio * height
            self._rows.append(rows)

    def cell(self, column: int, row: int) -> CellBox:
        """Pixel rectangle of a cell.

        Raises:
            IndexError: If the cell does not exist.
        """
        x, w = self._columns[column]
        y, h = self._rows[column][row]
        return CellBox(x, y, w, h)

    def span(self, column: int, rows: Sequence[int]) -> CellBox:
        """Bounding rectangle of several rows of one column."""
        boxes = [self.cell(column, row) for row in rows]
        top = min(box.y for box in boxes)
        bottom = max(box.bottom for box in boxes)
        return CellBox(boxes[0].x, top, boxes[0].width, bottom - top)


# =============================================================================
# Zoom Strip
# =============================================================================


@attrs.frozen(slots=True)
class ZoomMapping:
    """Pairs an overview interval with the detail slot that expands it.

    Attributes:
        overview_interval: (x0, x1) pixels of the site base on the overview axis.
        detail_interval: (x0, x1) pixels of the allocated detail slot.
    """

    overview_interval: tuple[float, float]
    detail_interval: tuple[float, float]

    @property
    def overview_mid(self) -> float:
        return (self.overview_interval[0] + self.overview_interval[1]) / 2


class ZoomStrip:
    """Fixed-width detail slots placed along a horizontal strip.

    Each element (a genomic coordinate) gets a slot of ``element_width``
    pixels centred under its overview position where possible. Slots that
    would overlap are pushed apart, and slots are kept inside the strip.
    When all slots cannot fit side by side, the slot width is reduced so
    they tile the strip exactly.

    Attributes:
        width: Strip width in pixels.
        height: Strip height in pixels.
        coordinate_length: Length of the continuous coordinate space.
        elements: Element coordinates, in the order given.
        slot_width: Effective slot width after compression.
    """

    def __init__(
        self,
        width: float,
        height: float,
        coordinate_length: float,
        elements: Sequence[int],
        element_width: float,
    ) -> None:
        """Initialize and allocate the slots.

        Raises:
            ValueError: If the coordinate length or element width is not positive.
        """
        if coordinate_length <= 0:
            raise ValueError(f"coordinate_length must be positive, got {coordinate_length}")
        if element_width <= 0:
            raise ValueError(f"element_width must be positive, got {element_width}")

        self.width = width
        self.height = height
        self.coordinate_length = coordinate_length
        self.elements = list(elements)

        n = len(self.elements)
        self.slot_width = min(float(element_width), width / n) if n else float(element_width)
        if n and self.slot_width < element_width:
            logger.debug(
                f"Compressed {n} zoom slots from {element_width} to {self.slot_width:.1f}px"
            )

        self._lefts = self._allocate()

    def overview_x(self, coordinate: float) -> float:
        """Pixel position of a coordinate on the overview axis."""
        return coordinate / self.coordinate_length * self.width

    def _allocate(self) -> list[float]:
        w = self.slot_width
        order = sorted(range(len(self.elements)), key=lambda i: self.elements[i])
        ideal = [self.overview_x(self.elements[i] + 0.5) - w / 2 for i in order]

        # Forward pass: no overlap with the left neighbour, not past the left edge
        lefts: list[float] = []
        for value in ideal:
            floor = lefts[-1] + w if lefts else 0.0
            lefts.append(max(value, floor))

        # Backward pass: not past the right edge, no overlap with the right neighbour
        ceiling = self.width - w
        for i in range(len(lefts) - 1, -1, -1):
            lefts[i] = min(lefts[i], ceiling)
            ceiling = lefts[i] - w

        result = [0.0] * len(lefts)
        for rank, index in enumerate(order):
            result[index] = max(0.0, lefts[rank])
        return result

    def __len__(self) -> int:
        return len(self.elements)

    def cell(self, index: int) -> CellBox:
        """Slot rectangle in strip-local pixels."""
        return CellBox(self._lefts[index], 0.0, self.slot_width, self.height)

    def mapping(self, index: int) -> ZoomMapping:
        """Overview interval of the element's base and its slot interval."""
        coordinate = self.elements[index]
        left = self._lefts[index]
        return ZoomMapping(
            overview_interval=(self.overview_x(coordinate), self.overview_x(coordinate + 1)),
            detail_interval=(left, left + self.slot_width),
        )


# =============================================================================
# Connectors
# =============================================================================


def connector(
    mapping: ZoomMapping,
    height: float,
    overview_width: float = 0.0,
    color: str = "red",
    opacity: float = 0.3,
) -> Polygon:
    """Trapezoid joining an overview interval to its detail slot.

    The top edge is an interval of ``overview_width`` pixels centred on
    the midpoint of the mapping's overview interval (a point when zero,
    giving a triangle); the bottom edge is the detail slot.

    Args:
        mapping: Overview/detail mapping of one slot.
        height: Height of the connector band in pixels.
        overview_width: Width of the top edge in pixels.
        color: Fill and stroke colour.
        opacity: Fill opacity.
    """
    mid = mapping.overview_mid
    half = overview_width / 2
    d0, d1 = mapping.detail_interval
    return Polygon(
        points=((mid - half, 0.0), (mid + half, 0.0), (d1, height), (d0, height)),
        fill=color,
        fill_opacity=opacity,
        stroke=color,
        stroke_width=0.5,
    )
