"""Statistical core of SpliceMap.

This module contains the per-position statistics behind every plot:

- Five-number summaries with Tukey outlier fences
- Mean and outlier-robust maximum per position
- Gap filling of windows with zero-score placeholders

Example:
    >>> from splicemap.core import five_number_summary, compute_mean_scores
    >>> summary = five_number_summary([2, 4, 6])
"""

from splicemap.core.aggregate import (
    compute_max_non_outlier_score,
    compute_mean_scores,
    fill_empty_positions,
    group_scores_by_position,
    summarize_positions,
)
from splicemap.core.stats import (
    OUTLIER_IQR_FACTOR,
    FiveNumberSummary,
    five_number_summary,
    max_non_outlier,
    quantile_sorted,
)

__all__: list[str] = [
    # Statistics
    "OUTLIER_IQR_FACTOR",
    "FiveNumberSummary",
    "five_number_summary",
    "max_non_outlier",
    "quantile_sorted",
    # Aggregation
    "compute_max_non_outlier_score",
    "compute_mean_scores",
    "fill_empty_positions",
    "group_scores_by_position",
    "summarize_positions",
]
