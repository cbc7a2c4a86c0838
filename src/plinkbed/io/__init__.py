"""I/O modules for plinkbed.

- records: .fam/.bim text parsing into Sample/Marker records
- bed: memory-mapped .bed genotype matrix
- ped: legacy .ped/.map export and re-import
"""

from plinkbed.io.bed import BedMatrix, read_bed_header, validate_bed_size
from plinkbed.io.ped import make_ped, read_map, read_ped, write_map, write_ped
from plinkbed.io.records import Marker, Sample, load_bim, load_fam

__all__ = [
    "BedMatrix",
    "Marker",
    "Sample",
    "load_bim",
    "load_fam",
    "make_ped",
    "read_bed_header",
    "read_map",
    "read_ped",
    "validate_bed_size",
    "write_map",
    "write_ped",
]
