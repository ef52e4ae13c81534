"""Unit tests for splicemap.io.bed module.

Tests cover:
- ScoredInterval validation and explode
- BedData range queries and per-position lookup
- BED reading, malformed records and writing
"""

from pathlib import Path

import pytest

from splicemap.io.bed import (
    BedData,
    BedParseError,
    ScoredInterval,
    TrackParseError,
    _parse_bed_line,
    read_bed,
    write_bed,
)


# =============================================================================
# ScoredInterval Tests
# =============================================================================


class TestScoredInterval:
    """Tests for ScoredInterval."""

    def test_invalid_interval(self) -> None:
        """Test that end must exceed start."""
        with pytest.raises(ValueError):
            ScoredInterval("chr1", 10, 10)
        with pytest.raises(ValueError):
            ScoredInterval("chr1", 10, 5)

    def test_length(self) -> None:
        """Test interval length."""
        line = ScoredInterval("chr1", 10, 15)

        assert line.length == 5
        assert not line.is_per_base
        assert ScoredInterval("chr1", 10, 11).is_per_base

    def test_explode_preserves_fields(self) -> None:
        """Test exploding copies score and metadata onto every base."""
        line = ScoredInterval("chr1", 10, 13, name="feat", score=2.5, strand="-")
        exploded = list(line.explode())

        assert [(r.start, r.end) for r in exploded] == [(10, 11), (11, 12), (12, 13)]
        for record in exploded:
            assert record.seqid == "chr1"
            assert record.name == "feat"
            assert record.score == 2.5
            assert record.strand == "-"

    def test_explode_per_base(self) -> None:
        """Test a per-base record explodes to itself."""
        line = ScoredInterval("chr1", 10, 11, score=1.0)
        assert list(line.explode()) == [line]

    def test_overlaps_inclusive_window(self) -> None:
        """Test overlap with an inclusive window."""
        line = ScoredInterval("chr1", 10, 13)

        assert line.overlaps(12, 20)
        assert line.overlaps(0, 10)
        assert not line.overlaps(13, 20)
        assert not line.overlaps(0, 9)

    def test_to_bed_line(self) -> None:
        """Test BED6 formatting."""
        line = ScoredInterval("chr1", 10, 11, name="r1", score=2.0, strand="+")
        assert line.to_bed_line() == "chr1\t10\t11\tr1\t2\t+"


# =============================================================================
# BedData Tests
# =============================================================================


class TestBedData:
    """Tests for BedData collection queries."""

    @pytest.fixture
    def lines(self) -> list[ScoredInterval]:
        """Records around a window of 95-105, in unsorted order."""
        return [
            ScoredInterval("chr1", 106, 107, name="after"),
            ScoredInterval("chr1", 95, 96, name="first"),
            ScoredInterval("chr1", 90, 96, name="spanning"),
            ScoredInterval("chr1", 94, 95, name="before"),
            ScoredInterval("chr1", 105, 106, name="last"),
        ]

    def test_container_protocol(self, lines: list[ScoredInterval]) -> None:
        """Test len, iteration and truthiness."""
        bed = BedData(lines)

        assert len(bed) == 5
        assert list(bed) == lines
        assert bed
        assert not BedData()

    def test_sort(self, lines: list[ScoredInterval]) -> None:
        """Test in-place sort by start then end."""
        bed = BedData(lines)
        bed.sort()

        assert [line.name for line in bed] == ["spanning", "before", "first", "last", "after"]

    @pytest.mark.parametrize("sort", [False, True])
    def test_get_range_inclusive(self, lines: list[ScoredInterval], sort: bool) -> None:
        """Test range queries include both window ends, sorted or not."""
        bed = BedData(lines)
        if sort:
            bed.sort()
        window = bed.get_range(95, 105)

        assert sorted(line.name for line in window) == ["first", "last", "spanning"]

    def test_get_range_reversed(self, lines: list[ScoredInterval]) -> None:
        """Test an empty window."""
        assert len(BedData(lines).get_range(10, 5)) == 0

    def test_get_pos(self, lines: list[ScoredInterval]) -> None:
        """Test per-position lookup includes covering intervals."""
        bed = BedData(lines)

        assert sorted(line.name for line in bed.get_pos(95)) == ["first", "spanning"]
        assert bed.get_pos(200) == []

    def test_index_refreshes_after_add(self) -> None:
        """Test lookups see records added after a query."""
        bed = BedData([ScoredInterval("chr1", 10, 11)])
        assert len(bed.get_pos(20)) == 0

        bed.add(ScoredInterval("chr1", 20, 21))
        assert len(bed.get_pos(20)) == 1

    def test_positions_and_span(self, lines: list[ScoredInterval]) -> None:
        """Test covered positions and overall span."""
        bed = BedData(lines)

        assert bed.positions()[:3] == [90, 91, 92]
        assert bed.span == (90, 107)
        assert BedData().span is None

    def test_explode(self) -> None:
        """Test exploding the whole collection."""
        bed = BedData([ScoredInterval("chr1", 10, 13, score=2.0)])
        exploded = bed.explode()

        assert len(exploded) == 3
        assert len(bed) == 1


# =============================================================================
# Reader / Writer Tests
# =============================================================================


class TestReadBed:
    """Tests for read_bed and write_bed."""

    def test_read(self, synthetic_bed: Path) -> None:
        """Test reading skips track and comment lines and sorts."""
        bed = read_bed(synthetic_bed)

        assert len(bed) == 7
        starts = [line.start for line in bed]
        assert starts == sorted(starts)
        assert sorted(line.score for line in bed.get_pos(199)) == [1.0, 2.0, 2.0, 2.0, 100.0]

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_bed(tmp_path / "missing.bed")

    def test_too_few_columns(self, tmp_path: Path) -> None:
        """Test a short record aborts the file with its line number."""
        path = tmp_path / "short.bed"
        path.write_text("chr1\t10\t11\tr1\t1\t+\nchr1\t12\t13\tr2\t1\n")

        with pytest.raises(BedParseError, match=":2:"):
            read_bed(path)

    def test_bad_coordinate(self, tmp_path: Path) -> None:
        """Test non-integer coordinates raise a parse error."""
        path = tmp_path / "bad.bed"
        path.write_text("chr1\tten\t11\tr1\t1\t+\n")

        with pytest.raises(TrackParseError):
            read_bed(path)

    def test_inverted_interval(self, tmp_path: Path) -> None:
        """Test an interval with end before start raises a parse error."""
        path = tmp_path / "inverted.bed"
        path.write_text("chr1\t20\t11\tr1\t1\t+\n")

        with pytest.raises(BedParseError):
            read_bed(path)

    def test_parse_error_is_value_error(self) -> None:
        """Test the error hierarchy."""
        assert issubclass(BedParseError, TrackParseError)
        assert issubclass(TrackParseError, ValueError)

    def test_missing_score(self, tmp_path: Path) -> None:
        """Test a '.' score reads as zero."""
        path = tmp_path / "dot.bed"
        path.write_text("chr1\t10\t11\tr1\t.\t.\n")

        assert list(read_bed(path))[0].score == 0.0

    def test_crlf_line_endings(self, tmp_path: Path) -> None:
        """Test Windows line endings keep the strand column intact."""
        path = tmp_path / "crlf.bed"
        path.write_bytes(b"chr1\t10\t11\tr1\t2\t+\r\nchr1\t12\t13\tr2\t1\t-\r\n")

        assert [line.strand for line in read_bed(path)] == ["+", "-"]
        assert _parse_bed_line("chr1\t10\t11\tr1\t2\t+\r\n", path, 1).strand == "+"

    def test_write_then_read(self, tmp_path: Path) -> None:
        """Test writing and reading back a collection."""
        lines = [
            ScoredInterval("chr1", 10, 11, name="r1", score=2.0, strand="+"),
            ScoredInterval("chr1", 12, 15, name="r2", score=0.5, strand="-"),
        ]
        path = tmp_path / "out.bed"
        write_bed(lines, path)

        assert read_bed(path).get_data() == lines
