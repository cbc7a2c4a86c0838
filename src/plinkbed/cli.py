"""plinkbed command-line interface.

Thin Typer wrapper that opens a PLINK file set from a path prefix and
reports counts, single genotypes, or exports .ped/.map text files.
"""

from pathlib import Path
from typing import Annotated

import typer

import plinkbed
from plinkbed.core import OutputConfig, call_name
from plinkbed.dataset import PlinkDataset
from plinkbed.errors import PlinkError
from plinkbed.io import make_ped
from plinkbed.utils import setup_logging

app = typer.Typer(
    name="plinkbed",
    help="plinkbed: random-access reader for PLINK binary genotype files.",
    add_completion=False,
)

# Store global options set by callback
_global_config: OutputConfig | None = None

BfileOption = Annotated[
    Path,
    typer.Option("-bfile", help="PLINK binary file prefix (.bed/.bim/.fam)"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"plinkbed version {plinkbed.__version__}")
        raise typer.Exit()


def _open(bfile: Path) -> PlinkDataset:
    try:
        return PlinkDataset.open(bfile)
    except (PlinkError, FileNotFoundError) as e:
        typer.echo(f"Error loading PLINK data: {e}", err=True)
        raise typer.Exit(code=1) from None


@app.callback()
def main(
    outdir: Annotated[
        Path,
        typer.Option("-outdir", help="Output directory"),
    ] = Path("output"),
    output: Annotated[
        str,
        typer.Option("-o", help="Output file prefix"),
    ] = "plink",
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Verbose output"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Only log warnings and errors"),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write JSON debug log to this file"),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """plinkbed: random-access reader for PLINK binary genotype files."""
    global _global_config
    _global_config = OutputConfig(outdir=outdir, prefix=output, verbose=verbose)
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)


@app.command("info")
def info_command(bfile: BfileOption) -> None:
    """Show sample/marker counts and per-marker genotype counts."""
    with _open(bfile) as ds:
        typer.echo(f"Loaded {ds.n_samples} samples, {ds.n_markers} markers")

        counts = ds.marker_genotype_counts()
        typer.echo("marker\tchrom\tpos\thom1\thet\thom2\tmissing")
        for i, m in enumerate(ds.markers):
            typer.echo(
                f"{m.id}\t{m.chrom}\t{m.pos}\t{counts.hom1[i]}\t{counts.het[i]}\t"
                f"{counts.hom2[i]}\t{counts.missing[i]}"
            )


@app.command("genotype")
def genotype_command(
    bfile: BfileOption,
    marker: Annotated[str, typer.Option("--marker", help="Marker ID")],
    sample_index: Annotated[
        int | None,
        typer.Option("--sample-index", help="0-based sample index"),
    ] = None,
    fid: Annotated[str | None, typer.Option("--fid", help="Family ID")] = None,
    iid: Annotated[str | None, typer.Option("--iid", help="Individual ID")] = None,
) -> None:
    """Print one sample's genotype call at one marker."""
    if sample_index is None and (fid is None or iid is None):
        typer.echo("Error: give --sample-index or both --fid and --iid", err=True)
        raise typer.Exit(code=1)

    with _open(bfile) as ds:
        try:
            if sample_index is None:
                si = ds.sample_index(fid, iid)
            else:
                si = sample_index
            mi = ds.marker_index(marker)
            gt = ds.genotype(si, mi)
        except (PlinkError, IndexError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from None

        s = ds.samples[si]
        m = ds.markers[mi]
        call = call_name(gt)
        alleles = {
            "hom1": f"{m.a1}/{m.a1}",
            "het": f"{m.a1}/{m.a2}",
            "hom2": f"{m.a2}/{m.a2}",
            "missing": "0/0",
        }[call]
        typer.echo(f"{s.fid}\t{s.iid}\t{m.id}\t{call}\t{alleles}")


@app.command("export")
def export_command(
    bfile: BfileOption,
    progress: Annotated[
        bool,
        typer.Option("--progress/--no-progress", help="Show progress bar"),
    ] = False,
) -> None:
    """Export the file set as legacy .ped/.map text files."""
    global _global_config
    if _global_config is None:
        _global_config = OutputConfig()

    with _open(bfile) as ds:
        _global_config.ensure_outdir()
        ped_path, map_path = make_ped(
            ds, _global_config.export_prefix, show_progress=progress
        )

    typer.echo(f"Wrote {ped_path}")
    typer.echo(f"Wrote {map_path}")


if __name__ == "__main__":
    app()
