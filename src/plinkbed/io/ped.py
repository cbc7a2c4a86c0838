"""Legacy PLINK text format (.ped/.map) export and re-import.

Used to verify decoding: a dataset exported with make_ped() and read back
with read_map()/read_ped() must reproduce the samples, markers and genotype
codes of the original binary file set.

.map: one marker per line, "chrom id cm pos" separated by single spaces. The
centimorgan position uses the shortest round-trip digits, switching to
exponent form ("1.0e-5", "1.5e6") outside [1e-4, 1e6).

.ped: one sample per line, the six .fam columns followed by two allele
columns per marker, all tab separated. Genotypes are written as

    hom allele 1  -> a1 a1
    het           -> a1 a2
    hom allele 2  -> a2 a2
    missing       -> 0 0

A marker whose allele is the missing code "0" exports a genotype as "0 0"
that cannot be told apart from a missing call, so read_ped() rejects it.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from loguru import logger

from plinkbed.core.progress import progress_iterator
from plinkbed.errors import FormatError
from plinkbed.io.records import (
    N_FAM_COLUMNS,
    TEXT_ENCODING,
    Marker,
    Sample,
    parse_fam_columns,
    parse_float,
    parse_position,
    split_lines,
    with_suffix,
)

if TYPE_CHECKING:
    from plinkbed.dataset import PlinkDataset

MISSING_ALLELE = "0"

# 2-bit codes (2 * a2 + a1)
CODE_HOM1 = 0
CODE_MISSING = 1
CODE_HET = 2
CODE_HOM2 = 3


def _allele_columns(marker: Marker) -> list[str]:
    """Allele column text for one marker, indexed by 2-bit code."""
    a1, a2 = marker.a1, marker.a2
    return [
        f"{a1}\t{a1}",
        f"{MISSING_ALLELE}\t{MISSING_ALLELE}",
        f"{a1}\t{a2}",
        f"{a2}\t{a2}",
    ]


def format_cm(cm: float) -> str:
    """Format a centimorgan position for the .map file.

    Example:
        >>> format_cm(2.5), format_cm(1e-05), format_cm(1500000.0)
        ('2.5', '1.0e-5', '1.5e6')
    """
    if np.isnan(cm):
        return "NaN"
    if np.isinf(cm):
        return "Inf" if cm > 0 else "-Inf"
    if cm != 0 and not 1e-4 <= abs(cm) < 1e6:
        text = np.format_float_scientific(cm, unique=True, trim="0", exp_digits=1)
        return text.replace("e+", "e")
    return repr(float(cm))


def write_map(dataset: PlinkDataset, path: Path | str) -> Path:
    """Write the .map file for ``dataset``. Returns the written path."""
    map_path = with_suffix(path, ".map")
    with open(map_path, "w", **TEXT_ENCODING) as f:
        for m in dataset.markers:
            f.write(f"{m.chrom} {m.id} {format_cm(m.cm)} {m.pos}\n")
    return map_path


def write_ped(
    dataset: PlinkDataset, path: Path | str, show_progress: bool = False
) -> Path:
    """Write the .ped file for ``dataset``. Returns the written path."""
    ped_path = with_suffix(path, ".ped")
    columns = [_allele_columns(m) for m in dataset.markers]

    indices = progress_iterator(
        range(dataset.n_samples),
        total=dataset.n_samples,
        desc="Writing .ped",
        enabled=show_progress,
    )

    with open(ped_path, "w", **TEXT_ENCODING) as f:
        for si in indices:
            s = dataset.samples[si]
            fields = [s.fid, s.iid, s.father, s.mother, str(s.sex), str(s.phenotype)]
            for mi, alleles in enumerate(columns):
                a2, a1 = dataset.genotype(si, mi)
                fields.append(alleles[2 * a2 + a1])
            f.write("\t".join(fields))
            f.write("\n")
    return ped_path


def make_ped(
    dataset: PlinkDataset, outfile: Path | str, show_progress: bool = False
) -> tuple[Path, Path]:
    """Export ``dataset`` as ``<outfile>.ped`` and ``<outfile>.map``.

    Args:
        dataset: Open PLINK dataset.
        outfile: Output path prefix (without extension).
        show_progress: Whether to show a progress bar over samples.

    Returns:
        Tuple of (ped_path, map_path).
    """
    map_path = write_map(dataset, f"{outfile}.map")
    ped_path = write_ped(dataset, f"{outfile}.ped", show_progress=show_progress)
    logger.info(
        f"Exported {dataset.n_samples} samples x {dataset.n_markers} markers "
        f"to {ped_path} and {map_path}"
    )
    return ped_path, map_path


def read_map(path: Path | str) -> list[Marker]:
    """Read a 4-column .map file.

    Alleles are not stored in .map files, so a1/a2 are set to "0".

    Raises:
        FormatError: If a line has fewer than 4 columns or unparsable
            positions.
    """
    map_path = with_suffix(path, ".map")
    markers = []
    with open(map_path, **TEXT_ENCODING) as f:
        for lineno, cols in split_lines(f, map_path, 4):
            markers.append(
                Marker(
                    chrom=cols[0],
                    id=cols[1],
                    cm=parse_float(cols[2], "centimorgan position", map_path, lineno),
                    pos=parse_position(cols[3], map_path, lineno),
                    a1=MISSING_ALLELE,
                    a2=MISSING_ALLELE,
                )
            )
    return markers


def _decode_pair(x: str, y: str, marker: Marker) -> int | None:
    if x == MISSING_ALLELE and y == MISSING_ALLELE:
        return CODE_MISSING
    if x == y == marker.a1:
        return CODE_HOM1
    if x == y == marker.a2:
        return CODE_HOM2
    if {x, y} == {marker.a1, marker.a2}:
        return CODE_HET
    return None


def read_ped(
    path: Path | str, markers: list[Marker]
) -> tuple[list[Sample], np.ndarray]:
    """Read a .ped file back into samples and 2-bit genotype codes.

    Args:
        path: Path to the .ped file (or prefix).
        markers: Markers in .ped column order, with alleles (e.g. from the
            .bim file of the exported dataset).

    Returns:
        Tuple of (samples, codes) where codes is a uint8 array of shape
        (n_samples, n_markers) matching BedMatrix.codes().

    Raises:
        FormatError: If a line has the wrong column count, malformed .fam
            columns, an allele pair that does not fit its marker, or a
            marker whose allele is the missing code "0".
    """
    ped_path = with_suffix(path, ".ped")
    for marker in markers:
        if MISSING_ALLELE in (marker.a1, marker.a2):
            raise FormatError(
                f"{ped_path}: marker {marker.id} has missing allele code "
                f"'{MISSING_ALLELE}', its genotypes cannot be decoded"
            )
    n_columns = N_FAM_COLUMNS + 2 * len(markers)

    samples: list[Sample] = []
    rows: list[list[int]] = []
    with open(ped_path, **TEXT_ENCODING) as f:
        for lineno, cols in split_lines(f, ped_path, n_columns):
            if len(cols) > n_columns:
                raise FormatError(
                    f"{ped_path}, line {lineno}: expected {n_columns} columns, "
                    f"got {len(cols)}"
                )
            samples.append(parse_fam_columns(cols, ped_path, lineno))

            row = []
            for mi, marker in enumerate(markers):
                x = cols[N_FAM_COLUMNS + 2 * mi]
                y = cols[N_FAM_COLUMNS + 2 * mi + 1]
                code = _decode_pair(x, y, marker)
                if code is None:
                    raise FormatError(
                        f"{ped_path}, line {lineno}: genotype '{x} {y}' does not "
                        f"match alleles {marker.a1}/{marker.a2} of {marker.id}"
                    )
                row.append(code)
            rows.append(row)

    codes = np.array(rows, dtype=np.uint8).reshape(len(samples), len(markers))
    return samples, codes
