"""Visualization tools for SpliceMap.

This module turns statistics into drawing primitives and renders them:

- Box plots of per-position score distributions
- Sequence logos of per-base nucleotide frequencies
- Genome overview tracks (gene model, transcripts, mean bars)
- The zoom/overview splice-site figure
- Matplotlib and Plotly backends

Example:
    >>> from splicemap.viz import SplicePlot, save_scene
    >>> scene = SplicePlot(transcriptome, donors, acceptors).build()
    >>> save_scene(scene, "splice.png")
"""

from splicemap.viz.boxplot import BoxPlot
from splicemap.viz.layout import GridLayout, ZoomMapping, ZoomStrip, connector
from splicemap.viz.logo import SequenceLogo
from splicemap.viz.primitives import Layer, LinearScale, Scene
from splicemap.viz.render import render_matplotlib, render_plotly, save_scene
from splicemap.viz.splice_plot import SitePanel, SplicePlot

__all__ = [
    # Panels
    "BoxPlot",
    "SequenceLogo",
    "SplicePlot",
    "SitePanel",
    # Layout
    "GridLayout",
    "ZoomMapping",
    "ZoomStrip",
    "connector",
    # Scene
    "Layer",
    "LinearScale",
    "Scene",
    # Backends
    "render_matplotlib",
    "render_plotly",
    "save_scene",
]
