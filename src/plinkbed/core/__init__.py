"""Core building blocks for plinkbed.

- config: Output configuration dataclass
- genotypes: Genotype classes derived from A1/A2 bit planes
- progress: progressbar2 wrapper
"""

from plinkbed.core.config import OutputConfig
from plinkbed.core.genotypes import (
    GenotypeCounts,
    call_name,
    genotype_counts,
    gt_het,
    gt_hom1,
    gt_hom2,
    gt_missing,
)
from plinkbed.core.progress import progress_iterator

__all__ = [
    "OutputConfig",
    "GenotypeCounts",
    "call_name",
    "genotype_counts",
    "gt_het",
    "gt_hom1",
    "gt_hom2",
    "gt_missing",
    "progress_iterator",
]
