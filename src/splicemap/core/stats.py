"""Quantile and outlier statistics for per-position score samples.

This module computes five-number summaries with Tukey (1.5 x IQR) fences,
the building block for every box plot and for the outlier-robust axis
scaling shared by all zoom panels of a track.

Quantiles come from ``numpy.quantile`` with linear interpolation between
closest ranks (rank ``p * (n - 1)``).

Example:
    >>> from splicemap.core.stats import five_number_summary
    >>> s = five_number_summary([1, 2, 3, 4, 5, 6, 7, 8, 9, 100])
    >>> s.q1, s.median, s.q3
    (3.25, 5.5, 7.75)
    >>> s.outliers, s.adjusted_max
    ((100.0,), 9.0)
"""

from __future__ import annotations

from typing import Iterable, Sequence

import attrs
import numpy as np

# =============================================================================
# Constants
# =============================================================================

# Tukey fence multiplier
OUTLIER_IQR_FACTOR = 1.5


# =============================================================================
# Data Structures
# =============================================================================


@attrs.frozen(slots=True)
class FiveNumberSummary:
    """Five-number summary of the scores recorded at one position.

    ``min``/``max`` are the raw extremes; ``adjusted_min``/``adjusted_max``
    are the most extreme values inside the fences, used as whisker ends.

    Attributes:
        position: Genomic position the sample was collected at.
        min: Smallest score.
        q1: First quartile.
        median: Median.
        q3: Third quartile.
        max: Largest score.
        outliers: Scores strictly outside the fences, ascending.
        adjusted_min: Smallest non-outlier score.
        adjusted_max: Largest non-outlier score.
    """

    position: int
    min: float
    q1: float
    median: float
    q3: float
    max: float
    outliers: tuple[float, ...]
    adjusted_min: float
    adjusted_max: float

    @property
    def iqr(self) -> float:
        """Interquartile range."""
        return self.q3 - self.q1

    @property
    def lower_fence(self) -> float:
        """Lower outlier threshold."""
        return self.q1 - OUTLIER_IQR_FACTOR * self.iqr

    @property
    def upper_fence(self) -> float:
        """Upper outlier threshold."""
        return self.q3 + OUTLIER_IQR_FACTOR * self.iqr

    def to_dict(self) -> dict:
        """Dictionary representation for reports."""
        return {
            "position": self.position,
            "min": self.min,
            "q1": self.q1,
            "median": self.median,
            "q3": self.q3,
            "max": self.max,
            "adjusted_min": self.adjusted_min,
            "adjusted_max": self.adjusted_max,
            "n_outliers": len(self.outliers),
            "outliers": ",".join(f"{v:g}" for v in self.outliers),
        }


# =============================================================================
# Quantiles
# =============================================================================


def quantile_sorted(values: Sequence[float], p: float) -> float | None:
    """Linear-interpolation quantile of an ascending sequence.

    Args:
        values: Values sorted ascending.
        p: Probability in [0, 1].

    Returns:
        The interpolated quantile, or None for an empty sequence.
    """
    if len(values) == 0:
        return None
    return float(np.quantile(values, p, method="linear"))


def _fences(q1: float, q3: float) -> tuple[float, float]:
    iqr = q3 - q1
    return q1 - OUTLIER_IQR_FACTOR * iqr, q3 + OUTLIER_IQR_FACTOR * iqr


def five_number_summary(
    scores: Iterable[float],
    position: int = 0,
) -> FiveNumberSummary | None:
    """Compute the five-number summary and outliers of a sample.

    Args:
        scores: Unordered scores.
        position: Position label carried on the result.

    Returns:
        Summary, or None when the sample is empty. An empty sample means
        "no data" at the position and must not be drawn as zero.
    """
    values = np.sort(np.asarray(list(scores), dtype=float))
    if values.size == 0:
        return None

    q1, median, q3 = (float(q) for q in np.quantile(values, [0.25, 0.5, 0.75]))
    lower, upper = _fences(q1, q3)

    outside = (values < lower) | (values > upper)
    inside = values[~outside]

    raw_min = float(values[0])
    raw_max = float(values[-1])

    return FiveNumberSummary(
        position=position,
        min=raw_min,
        q1=q1,
        median=median,
        q3=q3,
        max=raw_max,
        outliers=tuple(float(v) for v in values[outside]),
        adjusted_min=float(inside[0]) if inside.size else raw_min,
        adjusted_max=float(inside[-1]) if inside.size else raw_max,
    )


def max_non_outlier(scores: Iterable[float]) -> float | None:
    """Largest score at or below the upper fence.

    Only the upper fence is applied; this is used for axis scaling, where
    low outliers never stretch the top of the axis.

    Args:
        scores: Unordered scores.

    Returns:
        Largest non-outlier score, or None for an empty sample.
    """
    values = np.sort(np.asarray(list(scores), dtype=float))
    if values.size == 0:
        return None

    q1, q3 = (float(q) for q in np.quantile(values, [0.25, 0.75]))
    _, upper = _fences(q1, q3)

    # q3 <= upper always holds, so at least one value survives
    return float(values[values <= upper][-1])
