"""Unit tests for splicemap.viz.layout module.

Tests cover:
- Grid cells from column and row ratios
- Zoom strip slot allocation (centring, overlap, edges, compression)
- Overview-to-detail mappings and connectors
"""

import pytest

from splicemap.viz.layout import CellBox, GridLayout, ZoomStrip, connector


# =============================================================================
# GridLayout Tests
# =============================================================================


class TestGridLayout:
    """Tests for GridLayout."""

    @pytest.fixture
    def grid(self) -> GridLayout:
        """1000x500 grid, wide main column and a narrow side column."""
        return GridLayout(1000, 500, [0.9, 0.1], [[0.2, 0.8], [0.5, 0.5]])

    def test_cells(self, grid: GridLayout) -> None:
        """Test cell rectangles."""
        main = grid.cell(0, 1)
        side = grid.cell(1, 0)

        assert (main.x, main.y, main.width, main.height) == pytest.approx((0, 100, 900, 400))
        assert (side.x, side.y, side.width, side.height) == pytest.approx((900, 0, 100, 250))

    def test_span(self, grid: GridLayout) -> None:
        """Test the bounding box of several rows."""
        box = grid.span(0, [0, 1])

        assert (box.x, box.y, box.width, box.height) == pytest.approx((0, 0, 900, 500))

    def test_ratios_normalized(self) -> None:
        """Test ratios need not sum to one."""
        grid = GridLayout(100, 100, [3, 1], [[1, 1], [1]])

        assert grid.cell(0, 1).y == pytest.approx(50.0)
        assert grid.cell(1, 0).x == pytest.approx(75.0)

    def test_cell_box_edges(self) -> None:
        """Test right and bottom edges."""
        box = CellBox(10, 20, 30, 40)

        assert box.right == 40
        assert box.bottom == 60

    def test_missing_rows(self) -> None:
        """Test every column needs row ratios."""
        with pytest.raises(ValueError):
            GridLayout(100, 100, [0.5, 0.5], [[1.0]])

    def test_zero_ratios(self) -> None:
        """Test ratios must sum to a positive value."""
        with pytest.raises(ValueError):
            GridLayout(100, 100, [0, 0], [[1.0], [1.0]])

    def test_missing_cell(self, grid: GridLayout) -> None:
        """Test out-of-range cells."""
        with pytest.raises(IndexError):
            grid.cell(0, 5)


# =============================================================================
# ZoomStrip Tests
# =============================================================================


class TestZoomStrip:
    """Tests for ZoomStrip slot allocation."""

    def test_centred_slot(self) -> None:
        """Test a free slot is centred under its base."""
        strip = ZoomStrip(1000, 40, 1000, [100, 500], 50)

        assert strip.cell(0).x == pytest.approx(75.5)
        assert strip.cell(1).x == pytest.approx(475.5)
        assert strip.cell(0).width == 50
        assert strip.cell(0).height == 40

    def test_mapping(self) -> None:
        """Test the overview interval and detail interval of a slot."""
        mapping = ZoomStrip(1000, 40, 1000, [100, 500], 50).mapping(0)

        assert mapping.overview_interval == pytest.approx((100.0, 101.0))
        assert mapping.detail_interval == pytest.approx((75.5, 125.5))
        assert mapping.overview_mid == pytest.approx(100.5)

    def test_overlap_pushed_right(self) -> None:
        """Test neighbouring slots never overlap."""
        strip = ZoomStrip(1000, 40, 1000, [100, 101], 50)

        assert strip.cell(0).x == pytest.approx(75.5)
        assert strip.cell(1).x == pytest.approx(125.5)

    def test_edges_clamped(self) -> None:
        """Test slots stay inside the strip."""
        strip = ZoomStrip(1000, 40, 1000, [0, 999], 50)

        assert strip.cell(0).x == pytest.approx(0.0)
        assert strip.cell(1).right == pytest.approx(1000.0)

    def test_right_edge_pushes_left(self) -> None:
        """Test crowding at the right edge pushes earlier slots left."""
        strip = ZoomStrip(1000, 40, 1000, [998, 999], 50)

        assert strip.cell(1).x == pytest.approx(950.0)
        assert strip.cell(0).x == pytest.approx(900.0)

    def test_compression(self) -> None:
        """Test slots shrink to tile the strip when they cannot all fit."""
        strip = ZoomStrip(1000, 40, 1000, list(range(30)), 50)

        assert strip.slot_width == pytest.approx(1000 / 30)
        for i in range(29):
            assert strip.cell(i + 1).x >= strip.cell(i).right - 1e-9
        assert strip.cell(0).x >= 0
        assert strip.cell(29).right <= 1000 + 1e-9

    def test_unsorted_elements(self) -> None:
        """Test slots follow element coordinates, not input order."""
        strip = ZoomStrip(1000, 40, 1000, [500, 100], 50)

        assert len(strip) == 2
        assert strip.cell(0).x == pytest.approx(475.5)
        assert strip.cell(1).x == pytest.approx(75.5)

    def test_empty(self) -> None:
        """Test a strip without elements."""
        strip = ZoomStrip(1000, 40, 1000, [], 50)

        assert len(strip) == 0
        assert strip.slot_width == 50

    @pytest.mark.parametrize("length,element_width", [(0, 50), (1000, 0), (-1, 50)])
    def test_invalid_arguments(self, length: float, element_width: float) -> None:
        """Test non-positive coordinate length or slot width."""
        with pytest.raises(ValueError):
            ZoomStrip(1000, 40, length, [1], element_width)


# =============================================================================
# Connector Tests
# =============================================================================


class TestConnector:
    """Tests for connector."""

    def test_trapezoid(self) -> None:
        """Test the top edge is centred on the overview base."""
        mapping = ZoomStrip(1000, 40, 1000, [100], 50).mapping(0)
        polygon = connector(mapping, 20, overview_width=10, color="red")

        flat = [value for point in polygon.points for value in point]
        assert flat == pytest.approx([95.5, 0, 105.5, 0, 125.5, 20, 75.5, 20])
        assert polygon.fill == "red"
        assert polygon.fill_opacity == pytest.approx(0.3)

    def test_triangle(self) -> None:
        """Test a zero-width top edge collapses to a point."""
        mapping = ZoomStrip(1000, 40, 1000, [100], 50).mapping(0)
        polygon = connector(mapping, 20)

        assert polygon.points[0] == polygon.points[1]
