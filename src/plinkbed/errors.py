"""Exception hierarchy for plinkbed.

Load-time errors (FormatError, UnsupportedFormatError, DimensionMismatchError)
abort opening a dataset. NotFoundError is raised by identifier lookups and
leaves the dataset usable. Out-of-range genotype access raises the builtin
IndexError.
"""


class PlinkError(Exception):
    """Base class for all plinkbed errors."""


class FormatError(PlinkError, ValueError):
    """Malformed .fam/.bim/.ped line (column count or numeric field)."""


class UnsupportedFormatError(PlinkError, ValueError):
    """Bad or unsupported .bed magic header (e.g. sample-major layout)."""


class DimensionMismatchError(PlinkError, ValueError):
    """Sample/marker counts inconsistent with the .bed file size."""


class NotFoundError(PlinkError, LookupError):
    """Identifier lookup with no matching sample or marker."""
