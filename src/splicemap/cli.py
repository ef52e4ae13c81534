"""Command-line interface for SpliceMap.

This module provides the main entry point for the splicemap CLI tool.
It uses Click to define commands for rendering and reporting.

Commands:
    plot: Render the zoom/overview splice-site figure
    stats: Per-site, per-position five-number summaries
    sites: List donor and acceptor coordinates

Example:
    $ splicemap --help
    $ splicemap plot --gtf genes.gtf --donors donors.bed --acceptors acceptors.bed -o splice.png
    $ splicemap stats --gtf genes.gtf --track donors.sj.tsv --category donor -o donor_stats.tsv
    $ splicemap sites --gtf genes.gtf
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from splicemap import __version__

# Initialize rich console for pretty output
console = Console()

STATS_COLUMNS = [
    "category",
    "site",
    "position",
    "min",
    "q1",
    "median",
    "q3",
    "max",
    "adjusted_min",
    "adjusted_max",
    "n_outliers",
    "outliers",
]


@click.group()
@click.version_option(version=__version__, prog_name="splicemap")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """SpliceMap: Relate genome-wide splice-site support to per-site detail.

    SpliceMap draws a genome overview of transcripts and read support, and
    a zoomed box plot and sequence logo around every donor and acceptor.
    """
    from splicemap.utils.logging import setup_logging

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    verbosity = 0 if quiet else 2 if verbose else 1
    setup_logging(verbosity=verbosity)


# =============================================================================
# plot command
# =============================================================================


@main.command()
@click.option(
    "--gtf",
    "-g",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Transcript annotation GTF file.",
)
@click.option(
    "--donors",
    "-d",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Donor read-support track (BED, or SJ table with .sj/.tsv/.txt suffix).",
)
@click.option(
    "--acceptors",
    "-a",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Acceptor read-support track (BED, or SJ table with .sj/.tsv/.txt suffix).",
)
@click.option(
    "--donor-counts",
    type=click.Path(exists=True, path_type=Path),
    help="SJ nucleotide counts around donors, for sequence logos.",
)
@click.option(
    "--acceptor-counts",
    type=click.Path(exists=True, path_type=Path),
    help="SJ nucleotide counts around acceptors, for sequence logos.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file (TOML or JSON).",
)
@click.option("--zoom-width", type=int, help="Bases shown either side of each site [default: 5].")
@click.option(
    "--zoom-window-width",
    type=float,
    help="Width of each detail panel in pixels [default: 75].",
)
@click.option("--font-size", type=float, help="Label font size [default: 10].")
@click.option("--width", type=float, help="Figure width in pixels [default: 1100].")
@click.option("--height", type=float, help="Figure height in pixels [default: 700].")
@click.option(
    "--show-outliers/--hide-outliers",
    default=None,
    help="Draw outlier markers in detail panels [default: hide].",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    required=True,
    help="Output figure (.png, .pdf, .svg or .html).",
)
@click.pass_context
def plot(
    ctx: click.Context,
    gtf: Path,
    donors: Path,
    acceptors: Path,
    donor_counts: Optional[Path],
    acceptor_counts: Optional[Path],
    config_path: Optional[Path],
    zoom_width: Optional[int],
    zoom_window_width: Optional[float],
    font_size: Optional[float],
    width: Optional[float],
    height: Optional[float],
    show_outliers: Optional[bool],
    output: Path,
) -> None:
    """Render the zoom/overview splice-site figure.

    SJ tracks given as --donors/--acceptors are scored by total reads per
    base and also used for the sequence logos unless --donor-counts /
    --acceptor-counts are given.

    \b
    Examples:
        $ splicemap plot -g genes.gtf -d donors.bed -a acceptors.bed -o splice.png

        # Sequence logos and a larger zoom window
        $ splicemap plot -g genes.gtf -d donors.sj.tsv -a acceptors.sj.tsv \\
            --zoom-width 8 -o splice.html
    """
    from splicemap.config import Config
    from splicemap.io import read_gtf, read_sj, read_track
    from splicemap.utils.logging import Timer
    from splicemap.viz.render import save_scene
    from splicemap.viz.splice_plot import SplicePlot

    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)

    try:
        config = Config.load(config_path)
        overrides = {
            "zoom_width": zoom_width,
            "zoom_window_width": zoom_window_width,
            "font_size": font_size,
            "width": width,
            "height": height,
            "show_outliers": show_outliers,
        }
        for key, value in overrides.items():
            if value is not None:
                setattr(config.plot, key, value)
        config.validate()

        transcriptome = read_gtf(gtf)
        donor_track, donor_sj = read_track(donors)
        acceptor_track, acceptor_sj = read_track(acceptors)
        if donor_counts is not None:
            donor_sj = read_sj(donor_counts)
        if acceptor_counts is not None:
            acceptor_sj = read_sj(acceptor_counts)

        with Timer("Rendering"):
            splice_plot = SplicePlot(
                transcriptome,
                donor_track,
                acceptor_track,
                config,
                donor_counts=donor_sj,
                acceptor_counts=acceptor_sj,
            )
            scene = splice_plot.build()
            save_scene(scene, output, dpi=config.plot.dpi)

        if not quiet:
            console.print(f"  Transcripts:     {len(transcriptome):,}")
            console.print(f"  Donor sites:     {len(transcriptome.donors()):,}")
            console.print(f"  Acceptor sites:  {len(transcriptome.acceptors()):,}")
            console.print(f"[green]Wrote figure:[/green] {output}")

    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        raise SystemExit(1)


# =============================================================================
# stats command
# =============================================================================


@main.command()
@click.option(
    "--gtf",
    "-g",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Transcript annotation GTF file.",
)
@click.option(
    "--track",
    "-t",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Read-support track (BED or SJ table).",
)
@click.option(
    "--category",
    type=click.Choice(["donor", "acceptor"]),
    default="donor",
    show_default=True,
    help="Site category the track belongs to.",
)
@click.option(
    "--zoom-width",
    type=int,
    default=5,
    show_default=True,
    help="Bases summarized either side of each site.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output TSV (printed to the console if omitted).",
)
@click.pass_context
def stats(
    ctx: click.Context,
    gtf: Path,
    track: Path,
    category: str,
    zoom_width: int,
    output: Optional[Path],
) -> None:
    """Five-number summaries of every position around every site.

    Positions with no reads are reported as zero-score placeholders, the
    same values the detail panels draw.

    \b
    Examples:
        $ splicemap stats -g genes.gtf -t donors.bed --category donor -o donor_stats.tsv
    """
    from splicemap.config import Config
    from splicemap.io import BedData, read_gtf, read_track
    from splicemap.viz.splice_plot import SplicePlot

    verbose = ctx.obj.get("verbose", False)

    try:
        config = Config()
        config.plot.zoom_width = zoom_width
        config.validate()

        transcriptome = read_gtf(gtf)
        scores, _ = read_track(track)
        tracks = {"donor": BedData(), "acceptor": BedData()}
        tracks[category] = scores

        splice_plot = SplicePlot(transcriptome, tracks["donor"], tracks["acceptor"], config)
        rows = []
        for panel in splice_plot.plan_sites(category):
            for summary in panel.summaries:
                values = summary.to_dict()
                rows.append([category, str(panel.site)] + [
                    _format_value(values[column]) for column in STATS_COLUMNS[2:]
                ])

        if output is not None:
            import csv

            with open(output, "w", newline="") as f:
                writer = csv.writer(f, delimiter="\t", lineterminator="\n")
                writer.writerow(STATS_COLUMNS)
                writer.writerows(rows)
            console.print(f"[green]Wrote {len(rows):,} summaries:[/green] {output}")
        else:
            click.echo("\t".join(STATS_COLUMNS))
            for row in rows:
                click.echo("\t".join(row))

    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        raise SystemExit(1)


def _format_value(value: object) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


# =============================================================================
# sites command
# =============================================================================


@main.command()
@click.option(
    "--gtf",
    "-g",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Transcript annotation GTF file.",
)
def sites(gtf: Path) -> None:
    """List donor and acceptor coordinates (0-based) of every transcript.

    \b
    Examples:
        $ splicemap sites -g genes.gtf
    """
    from splicemap.io import read_gtf

    try:
        transcriptome = read_gtf(gtf)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    click.echo("category\tposition")
    for category in ("donor", "acceptor"):
        for position in transcriptome.sites(category):
            click.echo(f"{category}\t{position}")


if __name__ == "__main__":
    main()
