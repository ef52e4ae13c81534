"""Pytest configuration and shared fixtures for SpliceMap tests.

This module contains fixtures that are shared across multiple test modules.
Fixtures are organized by category:

- GTF fixtures: Transcript annotations with known splice sites
- Track fixtures: BED and SJ read-support tracks
- Object fixtures: Loaded models built from the files above
"""

from pathlib import Path
from typing import Callable

import matplotlib
import pytest

from splicemap.io.bed import BedData, ScoredInterval
from splicemap.io.gtf import Transcriptome, read_gtf
from splicemap.io.sj import NucleotideCounts, SJData

matplotlib.use("Agg")

SEQID = "chr1"

# Sites of the synthetic annotation (0-based)
DONOR_SITES = [199, 800]
ACCEPTOR_SITES = [300, 350, 699]
GENOME_LENGTH = 900


# =============================================================================
# GTF Fixtures
# =============================================================================


@pytest.fixture
def synthetic_gtf(tmp_path: Path) -> Path:
    """Create a GTF file with two genes and three transcripts.

    - g1 (+): t1 exons 101-200, 301-400; t2 exons 101-200, 351-400
    - g2 (-): t3 exons 601-700, 801-900

    Donors: 199 (t1, t2), 800 (t3). Acceptors: 300, 350, 699.
    """
    gtf_path = tmp_path / "genes.gtf"
    rows = [
        "# synthetic annotation",
        f'{SEQID}\ttest\tgene\t101\t400\t.\t+\t.\tgene_id "g1"; gene_name "ALPHA";',
        f'{SEQID}\ttest\texon\t101\t200\t.\t+\t.\tgene_id "g1"; transcript_id "t1"; gene_name "ALPHA";',
        f'{SEQID}\ttest\texon\t301\t400\t.\t+\t.\tgene_id "g1"; transcript_id "t1"; gene_name "ALPHA";',
        f'{SEQID}\ttest\tCDS\t121\t200\t.\t+\t0\tgene_id "g1"; transcript_id "t1"; gene_name "ALPHA";',
        f'{SEQID}\ttest\tCDS\t301\t380\t.\t+\t1\tgene_id "g1"; transcript_id "t1"; gene_name "ALPHA";',
        f'{SEQID}\ttest\texon\t101\t200\t.\t+\t.\tgene_id "g1"; transcript_id "t2"; gene_name "ALPHA";',
        f'{SEQID}\ttest\texon\t351\t400\t.\t+\t.\tgene_id "g1"; transcript_id "t2"; gene_name "ALPHA";',
        f'{SEQID}\ttest\texon\t801\t900\t.\t-\t.\tgene_id "g2"; transcript_id "t3";',
        f'{SEQID}\ttest\texon\t601\t700\t.\t-\t.\tgene_id "g2"; transcript_id "t3";',
    ]
    gtf_path.write_text("\n".join(rows) + "\n")
    return gtf_path


@pytest.fixture
def transcriptome(synthetic_gtf: Path) -> Transcriptome:
    """Transcriptome loaded from the synthetic GTF."""
    return read_gtf(synthetic_gtf)


# =============================================================================
# Track Fixtures
# =============================================================================


@pytest.fixture
def synthetic_bed(tmp_path: Path) -> Path:
    """Create a donor BED track.

    Position 199 holds scores [1, 2, 2, 2, 100]; a 3-base interval scores
    4 over 195-197; position 800 scores 10.
    """
    bed_path = tmp_path / "donors.bed"
    rows = [
        "track name=donors",
        "# per-base donor support",
        f"{SEQID}\t800\t801\tr6\t10\t-",
        f"{SEQID}\t199\t200\tr1\t1\t+",
        f"{SEQID}\t199\t200\tr2\t2\t+",
        f"{SEQID}\t199\t200\tr3\t2\t+",
        f"{SEQID}\t199\t200\tr4\t2\t+",
        f"{SEQID}\t199\t200\tr5\t100\t+",
        f"{SEQID}\t195\t198\tspan\t4\t+",
    ]
    bed_path.write_text("\n".join(rows) + "\n")
    return bed_path


@pytest.fixture
def acceptor_bed(tmp_path: Path) -> Path:
    """Create an acceptor BED track with one record per acceptor."""
    bed_path = tmp_path / "acceptors.bed"
    rows = [
        f"{SEQID}\t300\t301\ta1\t7\t+",
        f"{SEQID}\t350\t351\ta2\t3\t+",
        f"{SEQID}\t699\t700\ta3\t5\t-",
    ]
    bed_path.write_text("\n".join(rows) + "\n")
    return bed_path


@pytest.fixture
def synthetic_sj(tmp_path: Path) -> Path:
    """Create an SJ count table around donor 199.

    Includes a blank line, which the reader skips.
    """
    sj_path = tmp_path / "donors.sj.tsv"
    rows = [
        "seqid\tposition\tA\tC\tG\tT\tN",
        f"{SEQID}\t198\t3\t1\t0\t0\t0",
        f"{SEQID}\t199\t0\t0\t10\t0\t0",
        "",
        f"{SEQID}\t200\t0\t0\t0\t8\t2",
        f"{SEQID}\t201\t0\t0\t0\t0\t0",
    ]
    sj_path.write_text("\n".join(rows) + "\n")
    return sj_path


@pytest.fixture
def malformed_sj(tmp_path: Path) -> Path:
    """Create an SJ table whose third line has six fields."""
    sj_path = tmp_path / "bad.sj.tsv"
    rows = [
        "seqid\tposition\tA\tC\tG\tT\tN",
        f"{SEQID}\t198\t3\t1\t0\t0\t0",
        f"{SEQID}\t199\t0\t0\t10\t0",
    ]
    sj_path.write_text("\n".join(rows) + "\n")
    return sj_path


# =============================================================================
# Object Fixtures
# =============================================================================


def _build_track(scores_by_position: dict[int, list[float]]) -> BedData:
    track = BedData()
    for pos, scores in scores_by_position.items():
        for i, score in enumerate(scores):
            track.add(ScoredInterval(SEQID, pos, pos + 1, name=f"r{pos}_{i}", score=score))
    track.sort()
    return track


@pytest.fixture
def make_track() -> Callable[[dict[int, list[float]]], BedData]:
    """Factory building a sorted per-base track from scores keyed by position."""
    return _build_track


@pytest.fixture
def donor_track() -> BedData:
    """Donor track: [1, 2, 2, 2, 100] at 199 and [50] at 800."""
    return _build_track({199: [1, 2, 2, 2, 100], 800: [50]})


@pytest.fixture
def donor_counts() -> SJData:
    """Nucleotide counts over the window around donor 199."""
    return SJData(
        [
            NucleotideCounts(SEQID, 198, A=3, C=1),
            NucleotideCounts(SEQID, 199, G=10),
            NucleotideCounts(SEQID, 200, T=8, N=2),
        ]
    )
