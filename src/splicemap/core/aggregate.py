"""Per-position aggregation of scored interval tracks.

This module reduces sparse per-base interval tracks into the series the
plots draw:

- Mean per position, for genome-wide overview bar tracks
- Outlier-robust maximum across a whole track, for shared axis scaling
- Dense, gap-filled windows for zoomed box plots

All functions return new collections and never mutate their input.

Example:
    >>> from splicemap.core.aggregate import compute_mean_scores, fill_empty_positions
    >>> means = compute_mean_scores(donors)
    >>> window = fill_empty_positions(donors.get_range(95, 105), 95, 105)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from splicemap.core.stats import FiveNumberSummary, five_number_summary, max_non_outlier
from splicemap.io.bed import BedData, ScoredInterval

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

MEAN_SEQID = "mean"

# Field defaults for synthesized gap records
PLACEHOLDER_DEFAULTS: dict[str, Any] = {
    "seqid": "placeholder",
    "name": "empty",
    "score": 0.0,
    "strand": ".",
}


# =============================================================================
# Grouping
# =============================================================================


def group_scores_by_position(bed: BedData) -> dict[int, list[float]]:
    """Group the scores of every covered base by position.

    Multi-base intervals are exploded first, so an interval contributes
    its score once to every base it covers.

    Args:
        bed: Interval collection.

    Returns:
        Mapping of position to the list of scores recorded there, with
        positions in ascending order.
    """
    grouped: dict[int, list[float]] = defaultdict(list)
    for line in bed.explode():
        grouped[line.start].append(line.score)
    return dict(sorted(grouped.items()))


# =============================================================================
# Reductions
# =============================================================================


def compute_mean_scores(bed: BedData) -> BedData:
    """Reduce a track to one mean-score record per position.

    Args:
        bed: Interval collection.

    Returns:
        Sorted per-base collection with ``score = sum / count``. Empty
        input gives an empty collection.
    """
    means = BedData()
    for pos, scores in group_scores_by_position(bed).items():
        means.add(
            ScoredInterval(
                seqid=MEAN_SEQID,
                start=pos,
                end=pos + 1,
                name=f"mean@{pos}",
                score=sum(scores) / len(scores),
                strand=".",
            )
        )
    means.sort()
    return means


def compute_max_non_outlier_score(bed: BedData) -> float | None:
    """Largest non-outlier score over every position of a track.

    Each position is reduced to its maximum score at or below its own
    upper fence; the track value is the maximum of those. This seeds the
    shared y-axis of all zoom panels of the track, so a single extreme
    read count cannot flatten every other panel.

    Args:
        bed: Interval collection (the whole track, not a window).

    Returns:
        The global maximum, or None when the track is empty.
    """
    per_position = [
        max_non_outlier(scores) for scores in group_scores_by_position(bed).values()
    ]
    per_position = [value for value in per_position if value is not None]
    if not per_position:
        return None
    return max(per_position)


def summarize_positions(bed: BedData) -> list[FiveNumberSummary]:
    """Five-number summary for every covered position, ascending.

    Args:
        bed: Interval collection.

    Returns:
        One summary per position holding at least one score.
    """
    summaries = []
    for pos in bed.positions():
        summary = five_number_summary((line.score for line in bed.get_pos(pos)), position=pos)
        if summary is not None:
            summaries.append(summary)
    return summaries


# =============================================================================
# Gap Filling
# =============================================================================


def fill_empty_positions(
    bed: BedData,
    start_pos: int,
    end_pos: int,
    **placeholder_options: Any,
) -> BedData:
    """Produce a dense track over the inclusive window [start_pos, end_pos].

    Records already covering a position are copied through unchanged
    (each record once, even when it spans several positions). Every
    position with no record gets exactly one zero-score placeholder so a
    box plot never shows a gap that could be misread as missing data.

    Args:
        bed: Source collection, usually already windowed.
        start_pos: First position of the window.
        end_pos: Last position of the window (inclusive).
        **placeholder_options: Field overrides merged over
            :data:`PLACEHOLDER_DEFAULTS`. ``start``/``end`` are always set
            per position.

    Returns:
        New collection covering every position of the window.
    """
    template = {**PLACEHOLDER_DEFAULTS, **placeholder_options}
    template.pop("start", None)
    template.pop("end", None)

    filled = BedData()
    n_placeholders = 0

    for pos in range(start_pos, end_pos + 1):
        entries = bed.get_pos(pos)
        if entries:
            for entry in entries:
                # Emitted at the first window position it covers
                if pos == max(entry.start, start_pos):
                    filled.add(entry)
        else:
            filled.add(ScoredInterval(start=pos, end=pos + 1, **template))
            n_placeholders += 1

    logger.debug(
        f"Filled window {start_pos}-{end_pos}: {len(filled) - n_placeholders} records, "
        f"{n_placeholders} placeholders"
    )
    return filled

