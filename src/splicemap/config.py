"""Configuration management for SpliceMap.

This module handles loading, validating, and providing access to
plot settings. Configuration can come from:
- Default values
- Configuration files (TOML/JSON)
- Command-line arguments

Example:
    >>> from splicemap.config import Config
    >>> config = Config.load("splicemap.toml")
    >>> config.plot.zoom_width
    5
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

import attrs

logger = logging.getLogger(__name__)

# =============================================================================
# Default Configuration Values
# =============================================================================

# Plot geometry defaults
DEFAULT_ZOOM_WIDTH = 5  # Bases either side of a site
DEFAULT_ZOOM_WINDOW_WIDTH = 75  # Pixels per detail slot
DEFAULT_FONT_SIZE = 10
DEFAULT_WIDTH = 1100
DEFAULT_HEIGHT = 700
DEFAULT_DPI = 100

# Panel colors
DEFAULT_DONOR_COLOR = "#F78154"
DEFAULT_ACCEPTOR_COLOR = "#5FAD56"

# Grid rows, top to bottom; the same rows apply to both columns
GRID_ROWS = (
    "gene_model",
    "transcripts",
    "spacer_top",
    "donor_bar",
    "donor_connector",
    "donor_boxes",
    "donor_logos",
    "spacer_mid",
    "acceptor_bar",
    "acceptor_connector",
    "acceptor_boxes",
    "acceptor_logos",
)
DEFAULT_ROW_RATIOS = [0.08, 0.32, 0.02, 0.05, 0.04, 0.13, 0.06, 0.02, 0.05, 0.04, 0.13, 0.06]
DEFAULT_COLUMN_RATIOS = [0.9, 0.1]

CONFIG_SUFFIXES = {".toml", ".json"}


# =============================================================================
# Configuration Classes
# =============================================================================


@attrs.define
class PlotConfig:
    """Plot geometry and behaviour.

    Attributes:
        zoom_width: Bases shown either side of each site in a detail panel.
        zoom_window_width: Width of one detail slot in pixels.
        font_size: Label font size.
        width: Figure width in pixels.
        height: Figure height in pixels.
        show_outliers: Draw outlier markers in detail box plots.
        dpi: Raster output resolution.
    """

    zoom_width: int = DEFAULT_ZOOM_WIDTH
    zoom_window_width: float = DEFAULT_ZOOM_WINDOW_WIDTH
    font_size: float = DEFAULT_FONT_SIZE
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    show_outliers: bool = False
    dpi: int = DEFAULT_DPI


@attrs.define
class ColorConfig:
    """Colors for tracks, connectors and logo letters.

    Attributes:
        donor: Donor bar track and site line color.
        acceptor: Acceptor bar track and site line color.
        donor_connector: Donor zoom connector color.
        acceptor_connector: Acceptor zoom connector color.
        nucleotides: Logo letter colors keyed by nucleotide.
    """

    donor: str = DEFAULT_DONOR_COLOR
    acceptor: str = DEFAULT_ACCEPTOR_COLOR
    donor_connector: str = "red"
    acceptor_connector: str = "green"
    nucleotides: dict[str, str] = attrs.Factory(
        lambda: {"A": "#32CD32", "C": "#1E90FF", "G": "#FFD700", "T": "#DC143C", "N": "#808080"}
    )

    def for_category(self, category: str) -> tuple[str, str]:
        """(track color, connector color) for ``donor`` or ``acceptor``."""
        if category == "donor":
            return self.donor, self.donor_connector
        return self.acceptor, self.acceptor_connector


@attrs.define
class GridConfig:
    """Figure grid ratios.

    Attributes:
        column_ratios: Main panel column and label/axis column widths.
        row_ratios: Heights of the rows named in :data:`GRID_ROWS`.
    """

    column_ratios: list[float] = attrs.Factory(lambda: list(DEFAULT_COLUMN_RATIOS))
    row_ratios: list[float] = attrs.Factory(lambda: list(DEFAULT_ROW_RATIOS))

    @staticmethod
    def row_index(name: str) -> int:
        """Index of a named row.

        Raises:
            KeyError: If the row name is unknown.
        """
        try:
            return GRID_ROWS.index(name)
        except ValueError:
            raise KeyError(name) from None


@attrs.define
class Config:
    """Main configuration container for SpliceMap.

    Attributes:
        plot: Plot geometry configuration.
        colors: Color configuration.
        grid: Grid ratio configuration.
    """

    plot: PlotConfig = attrs.Factory(PlotConfig)
    colors: ColorConfig = attrs.Factory(ColorConfig)
    grid: GridConfig = attrs.Factory(GridConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration from nested section dictionaries.

        Missing sections and keys keep their defaults.

        Raises:
            ValueError: If a section or key is unknown.
        """
        sections = attrs.fields_dict(cls)
        kwargs = {}
        for section, values in data.items():
            if section not in sections:
                raise ValueError(f"Unknown configuration section: {section}")
            if not isinstance(values, dict):
                raise ValueError(f"Configuration section [{section}] must be a table")
            section_cls = sections[section].default.factory
            known = attrs.fields_dict(section_cls)
            unknown = set(values) - set(known)
            if unknown:
                raise ValueError(
                    f"Unknown keys in [{section}]: {', '.join(sorted(unknown))}"
                )
            kwargs[section] = section_cls(**values)
        return cls(**kwargs)

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load configuration from file.

        Args:
            path: Path to configuration file (TOML or JSON).
                  If None, returns default configuration.

        Returns:
            Loaded and validated configuration object.

        Raises:
            FileNotFoundError: If configuration file doesn't exist.
            ValueError: If configuration file is invalid.
        """
        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in CONFIG_SUFFIXES:
            raise ValueError(
                f"Unsupported configuration format '{suffix}', expected one of "
                f"{', '.join(sorted(CONFIG_SUFFIXES))}"
            )

        if suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            with open(path) as f:
                data = json.load(f)

        config = cls.from_dict(data)
        config.validate()
        logger.debug(f"Loaded configuration from {path}")
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration.
        """
        return attrs.asdict(self)

    def save(self, path: Path | str) -> None:
        """Save configuration to a JSON file.

        Args:
            path: Path to save configuration file.
        """
        path = Path(path)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ValueError: If any setting is out of range.
        """
        plot = self.plot
        if plot.width <= 0 or plot.height <= 0:
            raise ValueError(f"Figure size must be positive, got {plot.width}x{plot.height}")
        if plot.zoom_width < 0:
            raise ValueError(f"zoom_width must be non-negative, got {plot.zoom_width}")
        if plot.zoom_window_width <= 0:
            raise ValueError(
                f"zoom_window_width must be positive, got {plot.zoom_window_width}"
            )
        if plot.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {plot.font_size}")
        if plot.dpi <= 0:
            raise ValueError(f"dpi must be positive, got {plot.dpi}")

        grid = self.grid
        if len(grid.column_ratios) != 2:
            raise ValueError(
                f"column_ratios needs 2 entries, got {len(grid.column_ratios)}"
            )
        if len(grid.row_ratios) != len(GRID_ROWS):
            raise ValueError(
                f"row_ratios needs {len(GRID_ROWS)} entries "
                f"({', '.join(GRID_ROWS)}), got {len(grid.row_ratios)}"
            )
        for name, ratios in (("column_ratios", grid.column_ratios), ("row_ratios", grid.row_ratios)):
            if any(r < 0 for r in ratios) or sum(ratios) <= 0:
                raise ValueError(f"{name} must be non-negative and sum to a positive value")
