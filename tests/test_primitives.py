"""Unit tests for splicemap.viz.primitives module.

Tests cover:
- LinearScale mapping, inversion and ticks
- Padded scales for derived y axes
- Primitive translation
- Layer offsets and scene ordering
"""

import pytest

from splicemap.viz.primitives import (
    Circle,
    Glyph,
    Layer,
    LinearScale,
    Line,
    Polygon,
    Rect,
    Scene,
    Text,
    frame,
    padded_scale,
    translate,
)


# =============================================================================
# Scale Tests
# =============================================================================


class TestLinearScale:
    """Tests for LinearScale."""

    def test_call(self) -> None:
        """Test mapping a value into the range."""
        scale = LinearScale((0, 10), (0, 100))

        assert scale(2.5) == pytest.approx(25.0)
        assert scale(0) == pytest.approx(0.0)
        assert scale(10) == pytest.approx(100.0)

    def test_inverted_range(self) -> None:
        """Test a y axis growing upwards."""
        scale = LinearScale((0, 10), (100, 0))

        assert scale(2.5) == pytest.approx(75.0)

    def test_degenerate_domain(self) -> None:
        """Test a zero-width domain maps to the middle of the range."""
        scale = LinearScale((5, 5), (0, 100))

        assert scale(5) == 50.0
        assert scale.ticks() == [5.0]

    def test_ticks(self) -> None:
        """Test ticks are ascending and inside the domain."""
        ticks = LinearScale((0, 10), (100, 0)).ticks(5)

        assert ticks == sorted(ticks)
        assert ticks[0] == pytest.approx(0.0)
        assert ticks[-1] == pytest.approx(10.0)
        assert all(0 <= t <= 10 for t in ticks)


class TestPaddedScale:
    """Tests for padded_scale."""

    def test_padding(self) -> None:
        """Test 10% of the data range is added on each side."""
        scale = padded_scale([0, 10, 5], 100, 0)

        assert scale.domain == pytest.approx((-1.0, 11.0))
        assert scale.range == (100, 0)

    def test_empty(self) -> None:
        """Test an empty sample gets a unit domain."""
        assert padded_scale([], 100, 0).domain == (0.0, 1.0)

    def test_single_value(self) -> None:
        """Test a single value gets a unit-wide domain around it."""
        assert padded_scale([5], 100, 0).domain == pytest.approx((4.5, 5.5))


# =============================================================================
# Primitive Tests
# =============================================================================


class TestTranslate:
    """Tests for translate."""

    @pytest.mark.parametrize(
        "primitive,expected",
        [
            (Rect(1, 2, 3, 4), Rect(11, 7, 3, 4)),
            (Line(0, 0, 1, 1), Line(10, 5, 11, 6)),
            (Text(1, 1, "a"), Text(11, 6, "a")),
            (Circle(0, 0, 2), Circle(10, 5, 2)),
            (Glyph(0, 0, "A", 10, 20), Glyph(10, 5, "A", 10, 20)),
            (Polygon(((0, 0), (1, 0), (1, 1))), Polygon(((10, 5), (11, 5), (11, 6)))),
        ],
    )
    def test_translate(self, primitive, expected) -> None:
        """Test every primitive kind shifts by (10, 5)."""
        assert translate(primitive, 10, 5) == expected

    def test_unsupported(self) -> None:
        """Test unknown objects are rejected."""
        with pytest.raises(TypeError):
            translate("not a primitive", 1, 1)  # type: ignore[arg-type]


class TestGlyph:
    """Tests for Glyph."""

    def test_scale_y(self) -> None:
        """Test the vertical stretch fills the band."""
        glyph = Glyph(0, 0, "G", font_size=20, height=30)

        assert glyph.scale_y == pytest.approx(1.5)
        assert glyph.width == 20

    def test_zero_font(self) -> None:
        """Test a zero-width slot does not divide by zero."""
        assert Glyph(0, 0, "G", font_size=0, height=30).scale_y == 0.0


def test_frame() -> None:
    """Test the panel border is an unfilled rectangle at the origin."""
    border = frame(100, 50)

    assert (border.x, border.y, border.width, border.height) == (0, 0, 100, 50)
    assert border.fill is None
    assert border.stroke == "black"


# =============================================================================
# Layer / Scene Tests
# =============================================================================


class TestScene:
    """Tests for Layer and Scene."""

    @pytest.fixture
    def scene(self) -> Scene:
        """Scene with four single-rectangle layers."""
        layers = tuple(Layer(name, (Rect(0, 0, 1, 1),)) for name in "abcd")
        return Scene(100, 100, layers)

    def test_layer_absolute(self) -> None:
        """Test layer offsets move primitives into scene coordinates."""
        layer = Layer("panel", (Rect(1, 1, 5, 5), Circle(0, 0, 1)), x=10, y=20)

        assert layer.absolute() == [Rect(11, 21, 5, 5), Circle(10, 20, 1)]

    def test_promote_order(self, scene: Scene) -> None:
        """Test promoted layers move to the top in argument order."""
        promoted = scene.promote("b", "a")

        assert promoted.layer_names() == ["c", "d", "b", "a"]
        assert scene.layer_names() == ["a", "b", "c", "d"]

    def test_promote_unknown(self, scene: Scene) -> None:
        """Test unknown names are ignored."""
        assert scene.promote("z").layer_names() == ["a", "b", "c", "d"]

    def test_get_layer(self, scene: Scene) -> None:
        """Test lookup by name."""
        assert scene.get_layer("c").name == "c"
        with pytest.raises(KeyError):
            scene.get_layer("missing")

    def test_primitives(self) -> None:
        """Test flattening follows layer order."""
        scene = Scene(
            100,
            100,
            (
                Layer("bottom", (Rect(0, 0, 1, 1),), x=5),
                Layer("top", (Circle(0, 0, 1),), y=5),
            ),
        )

        assert scene.primitives() == [Rect(5, 0, 1, 1), Circle(0, 5, 1)]
