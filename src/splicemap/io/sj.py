"""Per-base nucleotide count (SJ) tables.

An SJ table records, for every base around a splice site, how many reads
carry each nucleotide. The file is tab-separated with a mandatory header
row followed by exactly seven fields per row::

    seqid       position    A       C   G       T   N
    K03455.1    738         11      2   2051    13  0
    K03455.1    739         1652    7   406     8   4

Rows with any other shape abort the whole file.

Example:
    >>> from splicemap.io.sj import read_sj
    >>> counts = read_sj("donors.sj.tsv")
    >>> counts.get_range(730, 745)[0].frequencies()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

import attrs

from splicemap.io.bed import BedData, ScoredInterval, TrackParseError

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# Fixed glyph/category order, bottom to top in a sequence logo
NUCLEOTIDE_ORDER = ("A", "C", "G", "T", "N")

SJ_COLUMNS = ("seqid", "position") + NUCLEOTIDE_ORDER
SJ_N_FIELDS = len(SJ_COLUMNS)


# =============================================================================
# Exceptions
# =============================================================================


class SJParseError(TrackParseError):
    """Raised for malformed SJ table rows."""


# =============================================================================
# Data Models
# =============================================================================


def _non_negative(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value < 0:
        raise ValueError(f"Count for {attribute.name} must be non-negative, got {value}")


@attrs.frozen(slots=True)
class NucleotideCounts:
    """Read counts per nucleotide at a single base.

    Attributes:
        seqid: Scaffold/chromosome name.
        position: Genomic position.
        A, C, G, T, N: Non-negative read counts.
    """

    seqid: str
    position: int
    A: int = attrs.field(default=0, validator=_non_negative)
    C: int = attrs.field(default=0, validator=_non_negative)
    G: int = attrs.field(default=0, validator=_non_negative)
    T: int = attrs.field(default=0, validator=_non_negative)
    N: int = attrs.field(default=0, validator=_non_negative)

    @property
    def total(self) -> int:
        """Total reads at this base."""
        return self.A + self.C + self.G + self.T + self.N

    def counts(self) -> dict[str, int]:
        """Counts keyed by nucleotide in logo order."""
        return {nuc: getattr(self, nuc) for nuc in NUCLEOTIDE_ORDER}

    def frequencies(self) -> dict[str, float]:
        """Relative frequencies keyed by nucleotide.

        Returns:
            Empty dict when no reads were recorded at this base.
        """
        total = self.total
        if total == 0:
            return {}
        return {nuc: count / total for nuc, count in self.counts().items()}

    def to_interval(self) -> ScoredInterval:
        """Convert to a per-base record scoring the total read count."""
        return ScoredInterval(
            seqid=self.seqid,
            start=self.position,
            end=self.position + 1,
            name=f"sj@{self.position}",
            score=float(self.total),
            strand=".",
        )


class SJData:
    """Collection of NucleotideCounts rows."""

    def __init__(self, rows: Iterable[NucleotideCounts] | None = None) -> None:
        self._rows: list[NucleotideCounts] = list(rows) if rows is not None else []

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[NucleotideCounts]:
        return iter(self._rows)

    def __bool__(self) -> bool:
        return bool(self._rows)

    def __repr__(self) -> str:
        return f"SJData(n={len(self._rows)})"

    def add(self, row: NucleotideCounts) -> None:
        """Append a row."""
        self._rows.append(row)

    def sort(self) -> None:
        """Sort rows in place by position."""
        self._rows.sort(key=lambda row: (row.position, row.seqid))

    def get_data(self) -> list[NucleotideCounts]:
        """Return a copy of the rows."""
        return list(self._rows)

    def get_range(self, lo: int, hi: int) -> list[NucleotideCounts]:
        """Rows with position in the inclusive window [lo, hi], by position."""
        rows = [row for row in self._rows if lo <= row.position <= hi]
        return sorted(rows, key=lambda row: row.position)

    def positions(self) -> list[int]:
        """Sorted distinct positions."""
        return sorted({row.position for row in self._rows})

    def to_bed(self) -> BedData:
        """Convert to a per-base score track of total read counts."""
        data = BedData(row.to_interval() for row in self._rows)
        data.sort()
        return data


# =============================================================================
# Reader
# =============================================================================


def _parse_sj_line(line: str, path: Path, line_number: int) -> NucleotideCounts:
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) != SJ_N_FIELDS:
        raise SJParseError(
            f"expected {SJ_N_FIELDS} tab-separated fields "
            f"({', '.join(SJ_COLUMNS)}), got {len(fields)}",
            path,
            line_number,
        )

    seqid = fields[0]
    try:
        position, a, c, g, t, n = (int(value) for value in fields[1:])
        return NucleotideCounts(seqid=seqid, position=position, A=a, C=c, G=g, T=t, N=n)
    except ValueError as e:
        raise SJParseError(f"invalid count ({e})", path, line_number) from e


def read_sj(path: Path | str, sort: bool = True) -> SJData:
    """Read an SJ nucleotide count table.

    The first line is always treated as the header and skipped. Blank
    lines are ignored.

    Args:
        path: Path to the SJ table.
        sort: Sort rows by position after loading.

    Returns:
        Loaded SJData.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SJParseError: If any data row does not have exactly seven fields
            or holds a non-integer / negative count.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"SJ file not found: {path}")

    rows: list[NucleotideCounts] = []
    with open(path) as f:
        for line_number, line in enumerate(f, 1):
            if line_number == 1:
                continue
            if not line.strip():
                continue
            rows.append(_parse_sj_line(line, path, line_number))

    data = SJData(rows)
    if sort:
        data.sort()

    logger.info(f"Loaded {len(data)} count rows from {path.name}")
    return data
