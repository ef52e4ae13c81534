"""Rendering backends for scenes.

Scenes are drawn in pixel coordinates (origin top left) by one of two
backends:

- Matplotlib, for static PNG/PDF/SVG output
- Plotly, for interactive HTML output

Each call creates a new figure, so rendering never depends on, or
modifies, anything drawn before.

Example:
    >>> from splicemap.viz.render import save_scene
    >>> save_scene(scene, "splice.png")
    >>> save_scene(scene, "splice.html")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from matplotlib.font_manager import FontProperties
from matplotlib.path import Path as MplPath
from matplotlib.textpath import TextPath
from matplotlib.transforms import Affine2D

from splicemap.viz.primitives import Circle, Glyph, Line, Polygon, Rect, Scene, Text

if TYPE_CHECKING:
    import matplotlib.figure
    import plotly.graph_objects as go

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("png", "pdf", "svg", "html")

GLYPH_FONT = FontProperties(family="DejaVu Sans", weight="bold")

# Anchor names to backend alignment names
_H_ALIGN = {"start": "left", "middle": "center", "end": "right"}
_V_ALIGN = {"top": "top", "middle": "center", "bottom": "bottom"}


# =============================================================================
# Glyph Outlines
# =============================================================================


def glyph_path(glyph: Glyph) -> MplPath:
    """Letter outline placed and stretched into its band.

    The letter is set at the glyph's font size with its baseline on the
    bottom of the band, centred horizontally on ``glyph.x``, then scaled
    vertically by ``glyph.scale_y``.
    """
    text_path = TextPath((0, 0), glyph.char, size=glyph.font_size, prop=GLYPH_FONT)
    extents = text_path.get_extents()
    center_x = (extents.x0 + extents.x1) / 2

    transform = (
        Affine2D()
        .translate(-center_x, 0)
        .scale(1, -glyph.scale_y)
        .translate(glyph.x, glyph.y + glyph.height)
    )
    return transform.transform_path(text_path)


def path_to_svg(path: MplPath) -> str:
    """SVG path data for a Matplotlib path."""
    commands = []
    for vertices, code in path.iter_segments():
        points = " ".join(
            f"{vertices[i]:.2f},{vertices[i + 1]:.2f}" for i in range(0, len(vertices), 2)
        )
        if code == MplPath.MOVETO:
            commands.append(f"M {points}")
        elif code == MplPath.LINETO:
            commands.append(f"L {points}")
        elif code == MplPath.CURVE3:
            commands.append(f"Q {points}")
        elif code == MplPath.CURVE4:
            commands.append(f"C {points}")
        elif code == MplPath.CLOSEPOLY:
            commands.append("Z")
    return " ".join(commands)


# =============================================================================
# Matplotlib Backend
# =============================================================================


def render_matplotlib(scene: Scene, dpi: int = 100) -> "matplotlib.figure.Figure":
    """Draw a scene onto a new Matplotlib figure.

    Args:
        scene: Scene to draw.
        dpi: Figure resolution; the figure is ``scene.width`` x
            ``scene.height`` pixels at this resolution.

    Returns:
        Matplotlib figure.
    """
    from matplotlib.colors import to_rgba
    from matplotlib.figure import Figure
    from matplotlib.patches import Circle as CirclePatch
    from matplotlib.patches import PathPatch
    from matplotlib.patches import Polygon as PolygonPatch
    from matplotlib.patches import Rectangle

    fig = Figure(figsize=(scene.width / dpi, scene.height / dpi), dpi=dpi)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, scene.width)
    ax.set_ylim(scene.height, 0)
    ax.axis("off")

    # Pixel sizes to points
    pt = 72 / dpi

    for zorder, prim in enumerate(scene.primitives()):
        if isinstance(prim, Rect):
            ax.add_patch(
                Rectangle(
                    (prim.x, prim.y),
                    prim.width,
                    prim.height,
                    facecolor=to_rgba(prim.fill, prim.fill_opacity) if prim.fill else "none",
                    edgecolor=prim.stroke or "none",
                    linewidth=prim.stroke_width * pt if prim.stroke else 0,
                    zorder=zorder,
                )
            )
        elif isinstance(prim, Line):
            ax.plot(
                [prim.x1, prim.x2],
                [prim.y1, prim.y2],
                color=prim.stroke,
                linewidth=prim.stroke_width * pt,
                linestyle=(0, tuple(d * pt for d in prim.dash)) if prim.dash else "-",
                zorder=zorder,
            )
        elif isinstance(prim, Text):
            ax.text(
                prim.x,
                prim.y,
                prim.text,
                fontsize=prim.font_size * pt,
                color=prim.color,
                ha=_H_ALIGN.get(prim.anchor, "left"),
                va=_V_ALIGN.get(prim.baseline, "center"),
                rotation=prim.rotation,
                zorder=zorder,
            )
        elif isinstance(prim, Circle):
            ax.add_patch(
                CirclePatch((prim.cx, prim.cy), prim.r, facecolor=prim.fill, zorder=zorder)
            )
        elif isinstance(prim, Polygon):
            ax.add_patch(
                PolygonPatch(
                    prim.points,
                    closed=True,
                    facecolor=to_rgba(prim.fill, prim.fill_opacity) if prim.fill else "none",
                    edgecolor=prim.stroke or "none",
                    linewidth=prim.stroke_width * pt,
                    zorder=zorder,
                )
            )
        elif isinstance(prim, Glyph):
            if prim.height <= 0:
                continue
            ax.add_patch(
                PathPatch(glyph_path(prim), facecolor=prim.color, edgecolor="none", zorder=zorder)
            )

    return fig


# =============================================================================
# Plotly Backend
# =============================================================================


def render_plotly(scene: Scene) -> "go.Figure":
    """Draw a scene as Plotly layout shapes and annotations.

    Args:
        scene: Scene to draw.

    Returns:
        Plotly Figure.
    """
    import plotly.graph_objects as go

    shapes: list[dict] = []
    annotations: list[dict] = []

    for prim in scene.primitives():
        if isinstance(prim, Rect):
            shapes.append(
                dict(
                    type="rect",
                    x0=prim.x,
                    y0=prim.y,
                    x1=prim.x + prim.width,
                    y1=prim.y + prim.height,
                    fillcolor=prim.fill or "rgba(0,0,0,0)",
                    opacity=prim.fill_opacity,
                    line=dict(
                        color=prim.stroke or "rgba(0,0,0,0)",
                        width=prim.stroke_width if prim.stroke else 0,
                    ),
                )
            )
        elif isinstance(prim, Line):
            shapes.append(
                dict(
                    type="line",
                    x0=prim.x1,
                    y0=prim.y1,
                    x1=prim.x2,
                    y1=prim.y2,
                    line=dict(
                        color=prim.stroke,
                        width=prim.stroke_width,
                        dash="dash" if prim.dash else "solid",
                    ),
                )
            )
        elif isinstance(prim, Circle):
            shapes.append(
                dict(
                    type="circle",
                    x0=prim.cx - prim.r,
                    y0=prim.cy - prim.r,
                    x1=prim.cx + prim.r,
                    y1=prim.cy + prim.r,
                    fillcolor=prim.fill,
                    line=dict(width=0),
                )
            )
        elif isinstance(prim, Polygon):
            path = "M " + " L ".join(f"{x:.2f},{y:.2f}" for x, y in prim.points) + " Z"
            shapes.append(
                dict(
                    type="path",
                    path=path,
                    fillcolor=prim.fill or "rgba(0,0,0,0)",
                    opacity=prim.fill_opacity,
                    line=dict(color=prim.stroke or "rgba(0,0,0,0)", width=prim.stroke_width),
                )
            )
        elif isinstance(prim, Glyph):
            if prim.height <= 0:
                continue
            shapes.append(
                dict(
                    type="path",
                    path=path_to_svg(glyph_path(prim)),
                    fillcolor=prim.color,
                    line=dict(width=0),
                )
            )
        elif isinstance(prim, Text):
            annotations.append(
                dict(
                    x=prim.x,
                    y=prim.y,
                    text=prim.text,
                    showarrow=False,
                    font=dict(size=prim.font_size, color=prim.color),
                    xanchor=_H_ALIGN.get(prim.anchor, "left"),
                    yanchor=prim.baseline,
                    textangle=prim.rotation,
                )
            )

    fig = go.Figure()
    fig.update_layout(
        width=scene.width,
        height=scene.height,
        margin=dict(l=0, r=0, t=0, b=0),
        plot_bgcolor="white",
        paper_bgcolor="white",
        showlegend=False,
        shapes=shapes,
        annotations=annotations,
    )
    fig.update_xaxes(range=[0, scene.width], visible=False)
    fig.update_yaxes(range=[scene.height, 0], visible=False)
    return fig


# =============================================================================
# Output
# =============================================================================


def save_scene(
    scene: Scene,
    path: Path | str,
    format: str | None = None,
    dpi: int = 100,
) -> Path:
    """Render a scene and write it to disk.

    Args:
        scene: Scene to draw.
        path: Output file.
        format: Output format (``png``, ``pdf``, ``svg`` or ``html``);
            taken from the file extension when None.
        dpi: Raster resolution for Matplotlib output.

    Returns:
        The output path.

    Raises:
        ValueError: If the format is not supported.
    """
    path = Path(path)
    fmt = (format or path.suffix.lstrip(".") or "png").lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported output format '{fmt}', expected one of {', '.join(SUPPORTED_FORMATS)}"
        )

    if fmt == "html":
        fig = render_plotly(scene)
        fig.write_html(str(path))
    else:
        fig = render_matplotlib(scene, dpi=dpi)
        fig.savefig(path, format=fmt, dpi=dpi)

    logger.info(f"Saved figure to {path}")
    return path
