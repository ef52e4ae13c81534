"""Input/output handlers for SpliceMap.

This module provides readers for the file formats SpliceMap consumes:

- GTF: Transcript annotation (exon structure, splice sites)
- BED: Scored per-base interval tracks
- SJ: Per-base nucleotide count tables

Example:
    >>> from splicemap.io import read_gtf, read_bed, read_sj
    >>> transcriptome = read_gtf("pathogen.gtf")
    >>> donors = read_bed("donors.bed")
    >>> donor_counts = read_sj("donors.sj.tsv")
"""

from pathlib import Path

from splicemap.io.bed import (
    BedData,
    BedParseError,
    ScoredInterval,
    TrackParseError,
    read_bed,
    write_bed,
)
from splicemap.io.gtf import GTFParseError, Transcript, Transcriptome, read_gtf
from splicemap.io.sj import NucleotideCounts, SJData, SJParseError, read_sj

# Extensions read as SJ count tables rather than BED
SJ_SUFFIXES = {".sj", ".tsv", ".txt"}


def read_track(path: Path | str) -> tuple[BedData, SJData | None]:
    """Read a score track from either a BED file or an SJ count table.

    SJ tables are converted to a per-base score track of total read
    counts and also returned as-is for sequence logos.

    Args:
        path: Path to a ``.bed`` file or an SJ table (``.sj``, ``.tsv``, ``.txt``).

    Returns:
        Tuple of (score track, counts or None for BED input).
    """
    path = Path(path)
    if path.suffix.lower() in SJ_SUFFIXES:
        counts = read_sj(path)
        return counts.to_bed(), counts
    return read_bed(path), None


__all__: list[str] = [
    "BedData",
    "BedParseError",
    "GTFParseError",
    "NucleotideCounts",
    "SJData",
    "SJParseError",
    "ScoredInterval",
    "TrackParseError",
    "Transcript",
    "Transcriptome",
    "read_bed",
    "read_gtf",
    "read_sj",
    "read_track",
    "write_bed",
]
