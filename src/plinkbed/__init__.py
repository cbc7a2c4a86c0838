"""plinkbed: random-access reader for PLINK binary genotype files.

Reads a .fam/.bim/.bed file set and decodes genotypes straight from the
memory-mapped .bed file, so the genotype matrix is never loaded into memory.

Example:
    >>> from plinkbed import open_plink
    >>> with open_plink("data/plink") as ds:
    ...     print(ds.n_samples, ds.n_markers)
    ...     print(ds.genotype(11, ds.marker_index("rs001")))
    1056 4
    (True, False)
"""

from importlib.metadata import version

from plinkbed.utils.logging import setup_logging

__version__ = version("plinkbed")

# Console logging to stdout on import; call setup_logging() or
# loguru.logger.remove()/add() to change it
setup_logging()

from plinkbed.core.genotypes import GenotypeCounts  # noqa: E402
from plinkbed.dataset import PlinkDataset, open_plink  # noqa: E402
from plinkbed.errors import (  # noqa: E402
    DimensionMismatchError,
    FormatError,
    NotFoundError,
    PlinkError,
    UnsupportedFormatError,
)
from plinkbed.io import BedMatrix, Marker, Sample, make_ped  # noqa: E402

__all__ = [
    "BedMatrix",
    "DimensionMismatchError",
    "FormatError",
    "GenotypeCounts",
    "Marker",
    "NotFoundError",
    "PlinkDataset",
    "PlinkError",
    "Sample",
    "UnsupportedFormatError",
    "__version__",
    "make_ped",
    "open_plink",
]
