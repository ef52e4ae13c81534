"""GTF transcript model handling.

This module reads GTF annotation files into an immutable transcript model
that exposes the splice sites SpliceMap zooms into.

Features:
    - Parse GTF exon records into Transcript objects
    - Derive donor and acceptor site coordinates
    - Report the overall genome/annotation length for overview axes

Coordinate conventions:
    - GTF files: 1-based inclusive
    - Internal storage: 0-based half-open
    - Donor site: last exonic base before an intron (0-based)
    - Acceptor site: first exonic base after an intron (0-based)

Example:
    >>> from splicemap.io.gtf import read_gtf
    >>> transcriptome = read_gtf("pathogen.gtf")
    >>> transcriptome.donors()
    [737, 5591]
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Iterator

import attrs

from splicemap.io.bed import TrackParseError

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# GTF column indices
COL_SEQID = 0
COL_SOURCE = 1
COL_TYPE = 2
COL_START = 3
COL_END = 4
COL_SCORE = 5
COL_STRAND = 6
COL_FRAME = 7
COL_ATTRIBUTES = 8

GTF_N_COLUMNS = 9

FEATURE_EXON = "exon"
FEATURE_CDS = "CDS"

_ATTRIBUTE_PATTERN = re.compile(r'\s*(\S+)\s+"?([^";]*)"?\s*')


# =============================================================================
# Exceptions
# =============================================================================


class GTFParseError(TrackParseError):
    """Raised for malformed GTF records."""


# =============================================================================
# Data Models
# =============================================================================


@attrs.frozen(slots=True)
class Transcript:
    """A transcript with its exon structure.

    Attributes:
        transcript_id: Unique transcript identifier.
        gene_id: Parent gene identifier.
        seqid: Scaffold/chromosome name.
        strand: Strand (+ or -).
        exons: Sorted (start, end) tuples, 0-based half-open.
        cds: Sorted (start, end) tuples, 0-based half-open.
        gene_name: Display name (falls back to gene_id).
    """

    transcript_id: str
    gene_id: str
    seqid: str
    strand: str
    exons: tuple[tuple[int, int], ...]
    cds: tuple[tuple[int, int], ...] = ()
    gene_name: str = ""

    @property
    def start(self) -> int:
        """Transcript start (0-based)."""
        return self.exons[0][0]

    @property
    def end(self) -> int:
        """Transcript end (0-based, exclusive)."""
        return self.exons[-1][1]

    @property
    def label(self) -> str:
        """Label used on the gene-model track."""
        return self.gene_name or self.gene_id or self.transcript_id

    @property
    def introns(self) -> list[tuple[int, int]]:
        """Intron coordinates between consecutive exons."""
        introns = []
        for (_, left_end), (right_start, _) in zip(self.exons, self.exons[1:]):
            if left_end < right_start:
                introns.append((left_end, right_start))
        return introns

    @property
    def donors(self) -> list[int]:
        """Donor site positions, strand-aware."""
        if self.strand == "-":
            return [end for _, end in self.introns]
        return [start - 1 for start, _ in self.introns]

    @property
    def acceptors(self) -> list[int]:
        """Acceptor site positions, strand-aware."""
        if self.strand == "-":
            return [start - 1 for start, _ in self.introns]
        return [end for _, end in self.introns]


@attrs.frozen
class Transcriptome:
    """Immutable collection of transcripts.

    Attributes:
        transcripts: Transcripts in file order.
    """

    transcripts: tuple[Transcript, ...] = ()

    def __len__(self) -> int:
        return len(self.transcripts)

    def __iter__(self) -> Iterator[Transcript]:
        return iter(self.transcripts)

    @property
    def start(self) -> int:
        """Smallest transcript start, 0 when empty."""
        if not self.transcripts:
            return 0
        return min(tx.start for tx in self.transcripts)

    @property
    def end(self) -> int:
        """Largest transcript end, used as the genome length."""
        if not self.transcripts:
            return 0
        return max(tx.end for tx in self.transcripts)

    def donors(self) -> list[int]:
        """Distinct donor site coordinates, ascending."""
        return sorted({pos for tx in self.transcripts for pos in tx.donors})

    def acceptors(self) -> list[int]:
        """Distinct acceptor site coordinates, ascending."""
        return sorted({pos for tx in self.transcripts for pos in tx.acceptors})

    def sites(self, category: str) -> list[int]:
        """Site coordinates for ``"donor"`` or ``"acceptor"``.

        Raises:
            ValueError: If the category is unknown.
        """
        if category == "donor":
            return self.donors()
        if category == "acceptor":
            return self.acceptors()
        raise ValueError(f"Unknown site category: {category!r}")

    def genes(self) -> dict[str, tuple[int, int, str]]:
        """Gene spans keyed by gene id: (start, end, label)."""
        spans: dict[str, tuple[int, int, str]] = {}
        for tx in self.transcripts:
            if tx.gene_id in spans:
                start, end, label = spans[tx.gene_id]
                spans[tx.gene_id] = (min(start, tx.start), max(end, tx.end), label)
            else:
                spans[tx.gene_id] = (tx.start, tx.end, tx.label)
        return spans


# =============================================================================
# Attribute Parsing
# =============================================================================


def parse_attributes(attr_string: str) -> dict[str, str]:
    """Parse a GTF attribute column.

    Args:
        attr_string: Semicolon-separated ``key "value"`` pairs.

    Returns:
        Dictionary of attribute key-value pairs.
    """
    attributes = {}
    if not attr_string or attr_string == ".":
        return attributes

    for item in attr_string.split(";"):
        if not item.strip():
            continue
        match = _ATTRIBUTE_PATTERN.fullmatch(item)
        if match:
            attributes[match.group(1)] = match.group(2)

    return attributes


# =============================================================================
# GTF Parser
# =============================================================================


class GTFParser:
    """Parse a GTF file into a Transcriptome.

    Only exon and CDS records are used; gene and transcript lines are
    accepted but their spans are recomputed from exons.

    Example:
        >>> parser = GTFParser("annotations.gtf")
        >>> transcriptome = parser.parse()
        >>> len(transcriptome)
    """

    def __init__(self, gtf_path: Path | str) -> None:
        """Initialize the parser.

        Args:
            gtf_path: Path to GTF file.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        self.path = Path(gtf_path)
        if not self.path.exists():
            raise FileNotFoundError(f"GTF file not found: {self.path}")

    def _parse_line(self, line: str, line_number: int) -> dict | None:
        """Parse a single GTF line.

        Returns:
            Parsed feature dictionary or None for comments/empty lines.

        Raises:
            GTFParseError: If the line is malformed.
        """
        line = line.rstrip("\r\n")
        if not line.strip() or line.startswith("#"):
            return None

        parts = line.split("\t")
        if len(parts) != GTF_N_COLUMNS:
            raise GTFParseError(
                f"expected {GTF_N_COLUMNS} tab-separated columns, got {len(parts)}",
                self.path,
                line_number,
            )

        try:
            # GTF is 1-based inclusive, convert to 0-based half-open
            start = int(parts[COL_START]) - 1
            end = int(parts[COL_END])
        except ValueError as e:
            raise GTFParseError(f"invalid coordinate ({e})", self.path, line_number) from e

        if end <= start:
            raise GTFParseError(
                f"feature end {end} precedes start {start + 1}", self.path, line_number
            )

        return {
            "seqid": parts[COL_SEQID],
            "type": parts[COL_TYPE],
            "start": start,
            "end": end,
            "strand": parts[COL_STRAND] if parts[COL_STRAND] in ("+", "-") else "+",
            "attributes": parse_attributes(parts[COL_ATTRIBUTES]),
        }

    def parse(self) -> Transcriptome:
        """Parse the file.

        Returns:
            Transcriptome holding every transcript with at least one exon.

        Raises:
            GTFParseError: If any line is malformed.
        """
        exons: dict[str, list[tuple[int, int]]] = defaultdict(list)
        cds: dict[str, list[tuple[int, int]]] = defaultdict(list)
        meta: dict[str, dict] = {}

        with open(self.path) as f:
            for line_number, line in enumerate(f, 1):
                feature = self._parse_line(line, line_number)
                if feature is None:
                    continue

                ftype = feature["type"]
                if ftype not in (FEATURE_EXON, FEATURE_CDS):
                    continue

                attributes = feature["attributes"]
                tx_id = attributes.get("transcript_id") or attributes.get("gene_id")
                if not tx_id:
                    raise GTFParseError(
                        "record has neither transcript_id nor gene_id", self.path, line_number
                    )

                meta.setdefault(
                    tx_id,
                    {
                        "gene_id": attributes.get("gene_id", tx_id),
                        "gene_name": attributes.get("gene_name", ""),
                        "seqid": feature["seqid"],
                        "strand": feature["strand"],
                    },
                )
                target = exons if ftype == FEATURE_EXON else cds
                target[tx_id].append((feature["start"], feature["end"]))

        transcripts = []
        for tx_id, info in meta.items():
            if tx_id not in exons:
                logger.debug(f"Transcript {tx_id} has CDS but no exons, using CDS as exons")
            tx_exons = exons.get(tx_id) or cds[tx_id]
            transcripts.append(
                Transcript(
                    transcript_id=tx_id,
                    gene_id=info["gene_id"],
                    seqid=info["seqid"],
                    strand=info["strand"],
                    exons=tuple(sorted(tx_exons)),
                    cds=tuple(sorted(cds.get(tx_id, []))),
                    gene_name=info["gene_name"],
                )
            )

        logger.info(f"Parsed {len(transcripts)} transcripts from {self.path.name}")
        return Transcriptome(tuple(transcripts))


# =============================================================================
# Convenience Functions
# =============================================================================


def read_gtf(path: Path | str) -> Transcriptome:
    """Read a transcript model from a GTF file.

    Args:
        path: Path to the GTF file.

    Returns:
        Parsed Transcriptome.
    """
    return GTFParser(path).parse()
