"""Genotype classes derived from the A1/A2 bit planes.

Each class is an elementwise boolean combination of the two planes, so masks
and counts for whole markers (or chunks of markers) cost a handful of
vectorized numpy operations:

    hom1    = ~A1 & ~A2
    het     = ~A1 &  A2
    hom2    =  A1 &  A2
    missing =  A1 & ~A2
"""

from dataclasses import dataclass

import numpy as np

HOM1 = "hom1"
HET = "het"
HOM2 = "hom2"
MISSING = "missing"

# Indexed by (a2, a1)
CALLS = {
    (False, False): HOM1,
    (False, True): MISSING,
    (True, False): HET,
    (True, True): HOM2,
}


def gt_hom1(a1: np.ndarray, a2: np.ndarray) -> np.ndarray:
    return ~(a1 | a2)


def gt_het(a1: np.ndarray, a2: np.ndarray) -> np.ndarray:
    return ~a1 & a2


def gt_hom2(a1: np.ndarray, a2: np.ndarray) -> np.ndarray:
    return a1 & a2


def gt_missing(a1: np.ndarray, a2: np.ndarray) -> np.ndarray:
    return a1 & ~a2


def call_name(genotype: tuple[bool, bool]) -> str:
    """Name of an (a2, a1) pair: "hom1", "het", "hom2" or "missing"."""
    a2, a1 = genotype
    return CALLS[bool(a2), bool(a1)]


@dataclass
class GenotypeCounts:
    """Per-marker genotype class counts.

    Fields are numpy scalars when computed for a single marker and arrays of
    length n_markers when computed over a [sample, marker] plane.

    Attributes:
        hom1: Samples homozygous for allele 1.
        het: Heterozygous samples.
        hom2: Samples homozygous for allele 2.
        missing: Samples with a missing call.
    """

    hom1: np.ndarray
    het: np.ndarray
    hom2: np.ndarray
    missing: np.ndarray

    @property
    def n_called(self) -> np.ndarray:
        """Non-missing calls."""
        return self.hom1 + self.het + self.hom2

    @property
    def missing_rate(self) -> np.ndarray:
        """Fraction of missing calls (NaN when there are no samples)."""
        with np.errstate(invalid="ignore", divide="ignore"):
            return np.true_divide(self.missing, self.n_called + self.missing)

    @property
    def a1_frequency(self) -> np.ndarray:
        """Allele 1 frequency among called genotypes (NaN if none called)."""
        with np.errstate(invalid="ignore", divide="ignore"):
            return np.true_divide(2 * self.hom1 + self.het, 2 * self.n_called)


def genotype_counts(a1: np.ndarray, a2: np.ndarray) -> GenotypeCounts:
    """Count genotype classes along the sample axis.

    Args:
        a1: A1 plane, shape (n_samples,) or (n_samples, n_markers).
        a2: A2 plane with the same shape as a1.

    Returns:
        GenotypeCounts summed over axis 0.
    """
    if a1.shape != a2.shape:
        raise ValueError(f"Plane shapes differ: {a1.shape} vs {a2.shape}")

    return GenotypeCounts(
        hom1=np.count_nonzero(gt_hom1(a1, a2), axis=0),
        het=np.count_nonzero(gt_het(a1, a2), axis=0),
        hom2=np.count_nonzero(gt_hom2(a1, a2), axis=0),
        missing=np.count_nonzero(gt_missing(a1, a2), axis=0),
    )
