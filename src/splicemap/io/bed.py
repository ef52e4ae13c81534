"""BED interval track handling.

This module provides the scored interval model and the in-memory interval
collection used by every per-base track in SpliceMap (donor and acceptor
read support, genome-wide summaries, gap-filled zoom windows).

Features:
    - Parse BED6 files into ScoredInterval objects
    - Windowed range queries and exact per-position lookup
    - Explode multi-base intervals into per-base records
    - Write collections back to BED6

Example:
    >>> from splicemap.io.bed import read_bed
    >>> track = read_bed("donors.bed")
    >>> track.sort()
    >>> window = track.get_range(95, 105)
    >>> [line.score for line in window.get_pos(100)]
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Iterator

import attrs

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# BED column indices
COL_SEQID = 0
COL_START = 1
COL_END = 2
COL_NAME = 3
COL_SCORE = 4
COL_STRAND = 5

BED_MIN_COLUMNS = 6

# Header lines that are not intervals
SKIP_PREFIXES = ("#", "track", "browser")


# =============================================================================
# Exceptions
# =============================================================================


class TrackParseError(ValueError):
    """Raised when a track file cannot be parsed.

    Parsing is all-or-nothing: when this is raised no partial collection
    is returned to the caller.
    """

    def __init__(self, message: str, path: Path | str | None = None, line_number: int | None = None) -> None:
        location = ""
        if path is not None:
            location = f"{path}"
            if line_number is not None:
                location += f":{line_number}"
            location += ": "
        super().__init__(f"{location}{message}")
        self.path = path
        self.line_number = line_number


class BedParseError(TrackParseError):
    """Raised for malformed BED records."""


# =============================================================================
# Data Models
# =============================================================================


def _check_interval(instance: ScoredInterval, attribute: attrs.Attribute, value: int) -> None:
    if value <= instance.start:
        raise ValueError(
            f"Interval end must be greater than start, got [{instance.start}, {value})"
        )


@attrs.frozen(slots=True)
class ScoredInterval:
    """A half-open genomic interval carrying a numeric score.

    Attributes:
        seqid: Scaffold/chromosome name.
        start: Start position (0-based, inclusive).
        end: End position (0-based, exclusive).
        name: Feature name.
        score: Numeric score (read support, mean, placeholder zero).
        strand: Strand (+, - or . for unstranded).
    """

    seqid: str
    start: int
    end: int = attrs.field(validator=_check_interval)
    name: str = "."
    score: float = 0.0
    strand: str = "."

    @property
    def length(self) -> int:
        """Interval length in bases."""
        return self.end - self.start

    @property
    def is_per_base(self) -> bool:
        """Whether the interval covers exactly one base."""
        return self.end == self.start + 1

    def explode(self) -> Iterator[ScoredInterval]:
        """Yield one per-base record for every covered base.

        Score and metadata are copied onto each resulting base.
        """
        if self.is_per_base:
            yield self
            return
        for pos in range(self.start, self.end):
            yield attrs.evolve(self, start=pos, end=pos + 1)

    def overlaps(self, lo: int, hi: int) -> bool:
        """Check overlap with the inclusive window [lo, hi]."""
        return self.start <= hi and self.end > lo

    def to_bed_line(self) -> str:
        """Format as a BED6 line (without newline)."""
        return (
            f"{self.seqid}\t{self.start}\t{self.end}\t{self.name}\t"
            f"{self.score:g}\t{self.strand}"
        )


class BedData:
    """Ordered, queryable collection of scored intervals.

    Intervals are kept in insertion order until :meth:`sort` is called.
    Range queries and per-position lookups work on either order; a
    position index is rebuilt lazily after mutation.

    Example:
        >>> data = BedData([ScoredInterval("chr1", 10, 13, score=2.0)])
        >>> len(data.explode())
        3
    """

    def __init__(self, lines: Iterable[ScoredInterval] | None = None) -> None:
        """Initialize the collection.

        Args:
            lines: Optional initial intervals.
        """
        self._lines: list[ScoredInterval] = list(lines) if lines is not None else []
        self._pos_index: dict[int, list[ScoredInterval]] | None = None
        self._sorted = False

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[ScoredInterval]:
        return iter(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    def __repr__(self) -> str:
        return f"BedData(n={len(self._lines)})"

    def get_data(self) -> list[ScoredInterval]:
        """Return a copy of the underlying interval list."""
        return list(self._lines)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add(self, line: ScoredInterval) -> None:
        """Append an interval."""
        self._lines.append(line)
        self._pos_index = None
        self._sorted = False

    def extend(self, lines: Iterable[ScoredInterval]) -> None:
        """Append several intervals."""
        for line in lines:
            self.add(line)

    def sort(self) -> None:
        """Sort intervals in place by start, then end."""
        self._lines.sort(key=lambda line: (line.start, line.end))
        self._pos_index = None
        self._sorted = True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _ensure_index(self) -> dict[int, list[ScoredInterval]]:
        if self._pos_index is None:
            index: dict[int, list[ScoredInterval]] = defaultdict(list)
            for line in self._lines:
                for pos in range(line.start, line.end):
                    index[pos].append(line)
            self._pos_index = index
        return self._pos_index

    def get_pos(self, position: int) -> list[ScoredInterval]:
        """Get all intervals covering a position.

        Args:
            position: 0-based position.

        Returns:
            Intervals covering the position, in collection order.
        """
        return list(self._ensure_index().get(position, []))

    def get_range(self, lo: int, hi: int) -> BedData:
        """Get intervals overlapping the inclusive window [lo, hi].

        Args:
            lo: First position of the window.
            hi: Last position of the window.

        Returns:
            New collection holding the overlapping intervals.
        """
        if hi < lo:
            return BedData()

        if self._sorted:
            starts = [line.start for line in self._lines]
            stop = bisect_right(starts, hi)
            candidates = self._lines[:stop]
        else:
            candidates = self._lines

        return BedData(line for line in candidates if line.overlaps(lo, hi))

    def positions(self) -> list[int]:
        """Sorted list of distinct covered positions."""
        return sorted(self._ensure_index().keys())

    def scores(self) -> list[float]:
        """Scores of all intervals in collection order."""
        return [line.score for line in self._lines]

    def explode(self) -> BedData:
        """Expand every interval into per-base records.

        Returns:
            New collection with one record per covered base.
        """
        exploded = BedData()
        for line in self._lines:
            exploded._lines.extend(line.explode())
        return exploded

    @property
    def span(self) -> tuple[int, int] | None:
        """(min start, max end) of the collection, or None if empty."""
        if not self._lines:
            return None
        return (
            min(line.start for line in self._lines),
            max(line.end for line in self._lines),
        )


# =============================================================================
# Reader / Writer
# =============================================================================


def _parse_bed_line(line: str, path: Path, line_number: int) -> ScoredInterval:
    parts = line.rstrip("\r\n").split("\t")
    if len(parts) < BED_MIN_COLUMNS:
        raise BedParseError(
            f"expected at least {BED_MIN_COLUMNS} tab-separated columns, got {len(parts)}",
            path,
            line_number,
        )

    try:
        start = int(parts[COL_START])
        end = int(parts[COL_END])
        score = 0.0 if parts[COL_SCORE] == "." else float(parts[COL_SCORE])
    except ValueError as e:
        raise BedParseError(f"invalid numeric field ({e})", path, line_number) from e

    strand = parts[COL_STRAND] if parts[COL_STRAND] in ("+", "-") else "."

    try:
        return ScoredInterval(
            seqid=parts[COL_SEQID],
            start=start,
            end=end,
            name=parts[COL_NAME],
            score=score,
            strand=strand,
        )
    except ValueError as e:
        raise BedParseError(str(e), path, line_number) from e


def read_bed(path: Path | str, sort: bool = True) -> BedData:
    """Read a BED6 file into a BedData collection.

    Comment, ``track`` and ``browser`` lines are skipped. Any malformed
    record aborts the whole file.

    Args:
        path: Path to the BED file.
        sort: Sort the collection by position after loading.

    Returns:
        Loaded collection.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        BedParseError: If any record is malformed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"BED file not found: {path}")

    lines: list[ScoredInterval] = []
    with open(path) as f:
        for line_number, line in enumerate(f, 1):
            if not line.strip() or line.startswith(SKIP_PREFIXES):
                continue
            lines.append(_parse_bed_line(line, path, line_number))

    data = BedData(lines)
    if sort:
        data.sort()

    logger.info(f"Loaded {len(data)} intervals from {path.name}")
    return data


def write_bed(data: Iterable[ScoredInterval], path: Path | str) -> None:
    """Write intervals to a BED6 file.

    Args:
        data: Intervals to write.
        path: Output file path.
    """
    with open(path, "w") as f:
        for line in data:
            f.write(line.to_bed_line() + "\n")
