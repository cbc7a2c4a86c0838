"""PLINK .fam/.bim text parsing.

Both files are whitespace-delimited with one record per line and no header:

.fam columns: FID, IID, father IID, mother IID, sex, phenotype
    - sex: 1 = male, 2 = female, 0 = unknown
    - phenotype: 1 = control, 2 = case, 0 or -9 = missing

.bim columns: chromosome, marker ID, centimorgan position, base-pair position,
    allele 1, allele 2

Columns beyond the sixth are ignored. Every line is a record, so a blank line
is a line with too few columns. Files are decoded as UTF-8; bytes that are not
valid UTF-8 are kept as surrogate escapes and written back unchanged.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from plinkbed.errors import FormatError

N_FAM_COLUMNS = 6
N_BIM_COLUMNS = 6

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Open kwargs for every PLINK text file, read or written
TEXT_ENCODING = {"encoding": "utf-8", "errors": "surrogateescape"}


@dataclass(frozen=True)
class Sample:
    """One individual from a .fam file.

    Attributes:
        fid: Family ID.
        iid: Individual ID.
        father: Father's IID ("0" if unknown).
        mother: Mother's IID ("0" if unknown).
        sex: 1 = male, 2 = female, 0 = unknown.
        phenotype: 1 = control, 2 = case, 0 or -9 = missing.
    """

    fid: str
    iid: str
    father: str
    mother: str
    sex: int
    phenotype: int

    @property
    def is_male(self) -> bool:
        return self.sex == 1

    @property
    def is_female(self) -> bool:
        return self.sex == 2

    @property
    def is_control(self) -> bool:
        return self.phenotype == 1

    @property
    def is_case(self) -> bool:
        return self.phenotype == 2

    @property
    def phenotype_missing(self) -> bool:
        return self.phenotype in (0, -9)


@dataclass(frozen=True)
class Marker:
    """One variant from a .bim file.

    Attributes:
        chrom: Chromosome code (kept as text, e.g. "1", "X", "MT").
        id: Marker identifier (e.g. rs number).
        cm: Genetic position in centimorgans.
        pos: Base-pair position.
        a1: Allele 1 (usually minor).
        a2: Allele 2 (usually major).
    """

    chrom: str
    id: str
    cm: float
    pos: int
    a1: str
    a2: str


def with_suffix(path: Path | str, suffix: str) -> Path:
    """Return ``path`` with ``suffix`` appended unless it already ends with it."""
    text = str(path)
    return Path(text if text.endswith(suffix) else f"{text}{suffix}")


def split_lines(
    lines: Iterable[str], path: Path, n_columns: int
) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, columns) for each line.

    Raises:
        FormatError: If a line has fewer than ``n_columns`` columns.
    """
    for lineno, line in enumerate(lines, start=1):
        cols = line.split()
        if len(cols) < n_columns:
            raise FormatError(
                f"{path}, line {lineno}: expected {n_columns} columns, "
                f"got {len(cols)}"
            )
        yield lineno, cols


def parse_int(
    value: str, lo: int, hi: int, field: str, path: Path, lineno: int
) -> int:
    try:
        parsed = int(value)
    except ValueError as e:
        raise FormatError(
            f"{path}, line {lineno}: cannot parse {field} '{value}' as integer"
        ) from e
    if not lo <= parsed <= hi:
        raise FormatError(
            f"{path}, line {lineno}: {field} {parsed} out of range [{lo}, {hi}]"
        )
    return parsed


def parse_float(value: str, field: str, path: Path, lineno: int) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise FormatError(
            f"{path}, line {lineno}: cannot parse {field} '{value}' as float"
        ) from e


def parse_position(value: str, path: Path, lineno: int) -> int:
    """Parse a base-pair position (signed 64-bit)."""
    return parse_int(value, INT64_MIN, INT64_MAX, "base-pair position", path, lineno)


def parse_fam_columns(cols: list[str], path: Path, lineno: int) -> Sample:
    """Build a Sample from the first six .fam-style columns."""
    return Sample(
        fid=cols[0],
        iid=cols[1],
        father=cols[2],
        mother=cols[3],
        sex=parse_int(cols[4], 0, 255, "sex", path, lineno),
        phenotype=parse_int(cols[5], -128, 127, "phenotype", path, lineno),
    )


def _load(
    path: Path | str,
    suffix: str,
    n_columns: int,
    build: Callable[[list[str], Path, int], object],
) -> list:
    file_path = with_suffix(path, suffix)
    if not file_path.exists():
        raise FileNotFoundError(f"PLINK {suffix} file not found: {file_path}")

    records = []
    with open(file_path, **TEXT_ENCODING) as f:
        for lineno, cols in split_lines(f, file_path, n_columns):
            records.append(build(cols, file_path, lineno))
    logger.debug(f"Parsed {len(records)} records from {file_path}")
    return records


def load_fam(path: Path | str) -> list[Sample]:
    """Load sample records from a PLINK .fam file.

    Args:
        path: Path prefix, or a path already ending in ".fam".

    Returns:
        Samples in file order.

    Raises:
        FileNotFoundError: If the .fam file does not exist.
        FormatError: If a line has fewer than 6 columns, or sex/phenotype
            are not integers in their 8-bit ranges.
    """
    return _load(path, ".fam", N_FAM_COLUMNS, parse_fam_columns)


def _parse_bim_columns(cols: list[str], path: Path, lineno: int) -> Marker:
    return Marker(
        chrom=cols[0],
        id=cols[1],
        cm=parse_float(cols[2], "centimorgan position", path, lineno),
        pos=parse_position(cols[3], path, lineno),
        a1=cols[4],
        a2=cols[5],
    )


def load_bim(path: Path | str) -> list[Marker]:
    """Load marker records from a PLINK .bim file.

    Args:
        path: Path prefix, or a path already ending in ".bim".

    Returns:
        Markers in file order.

    Raises:
        FileNotFoundError: If the .bim file does not exist.
        FormatError: If a line has fewer than 6 columns, the cM position is
            not a float, or the base-pair position is not an integer.
    """
    return _load(path, ".bim", N_BIM_COLUMNS, _parse_bim_columns)
