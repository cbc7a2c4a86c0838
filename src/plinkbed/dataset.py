"""PLINK file set (.fam/.bim/.bed) opened as a single handle.

All indices are 0-based and follow file order.

Example:
    >>> from plinkbed import PlinkDataset
    >>> with PlinkDataset.open("data/plink") as ds:
    ...     ds.genotype(11, 0)
    (True, False)
"""

from collections.abc import Sequence
from pathlib import Path

import numpy as np
from loguru import logger

from plinkbed.core.genotypes import GenotypeCounts, genotype_counts
from plinkbed.errors import NotFoundError
from plinkbed.io.bed import BedMatrix
from plinkbed.io.records import Marker, Sample, load_bim, load_fam

PLINK_SUFFIXES = (".bed", ".bim", ".fam")


def plink_prefix(path: Path | str) -> Path:
    """Strip a trailing .bed/.bim/.fam suffix from ``path``, if any."""
    path = Path(path)
    if path.suffix in PLINK_SUFFIXES:
        return path.with_suffix("")
    return path


class PlinkDataset:
    """Samples, markers and the memory-mapped genotype matrix of one file set.

    Use PlinkDataset.open() (or open_plink()) rather than the constructor.
    """

    def __init__(
        self,
        path: Path,
        samples: Sequence[Sample],
        markers: Sequence[Marker],
        bed: BedMatrix,
    ) -> None:
        self.path = path
        self._samples = tuple(samples)
        self._markers = tuple(markers)
        self._bed = bed

    @classmethod
    def open(cls, path: Path | str) -> "PlinkDataset":
        """Load a PLINK binary file set.

        Args:
            path: Path prefix for the PLINK files (without extension). A path
                ending in .bed/.bim/.fam is accepted and the suffix dropped.

        Returns:
            Open dataset. Close it (or use it as a context manager) to release
            the mapping.

        Raises:
            FileNotFoundError: If any of the three files is missing.
            FormatError: If the .fam or .bim file is malformed.
            UnsupportedFormatError: If the .bed header is not SNP-major v1.0.
            DimensionMismatchError: If the .bed file is too small for the
                sample and marker counts.
        """
        prefix = plink_prefix(path)

        samples = load_fam(prefix)
        markers = load_bim(prefix)
        bed = BedMatrix(prefix, n_samples=len(samples), n_markers=len(markers))

        dataset = cls(prefix, samples, markers, bed)

        logger.info(
            f"Loaded {dataset.n_samples} samples, {dataset.n_markers} markers "
            f"from {prefix}"
        )
        return dataset

    @property
    def n_samples(self) -> int:
        """Number of samples in the dataset."""
        return len(self._samples)

    @property
    def n_markers(self) -> int:
        """Number of markers in the dataset."""
        return len(self._markers)

    @property
    def samples(self) -> tuple[Sample, ...]:
        return self._samples

    @property
    def markers(self) -> tuple[Marker, ...]:
        return self._markers

    @property
    def bed(self) -> BedMatrix:
        """Underlying genotype matrix, for bulk plane access."""
        return self._bed

    @property
    def closed(self) -> bool:
        return self._bed.closed

    def close(self) -> None:
        self._bed.close()

    def __enter__(self) -> "PlinkDataset":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"<PLINK file ({self.n_samples} samples x {self.n_markers} markers) "
            f"at {self.path}>"
        )

    def genotype(self, sample_index: int, marker_index: int) -> tuple[bool, bool]:
        """Genotype of one sample at one marker as an (a2, a1) bit pair.

        (False, False) = hom allele 1, (True, False) = het,
        (True, True) = hom allele 2, (False, True) = missing.

        Raises:
            IndexError: If either index is outside [0, count).
        """
        return self._bed.genotype(sample_index, marker_index)

    def __getitem__(self, index: tuple[int, int]) -> tuple[bool, bool]:
        sample_index, marker_index = index
        return self.genotype(sample_index, marker_index)

    def sample_index(self, fid: str, iid: str) -> int:
        """Index of the first sample with matching FID and IID (linear search).

        Raises:
            NotFoundError: If no sample matches both fields.
        """
        for i, sample in enumerate(self._samples):
            if sample.iid == iid and sample.fid == fid:
                return i
        raise NotFoundError(f"No such sample: {fid} {iid}")

    def marker_index(self, marker_id: str) -> int:
        """Index of the first marker with matching ID (linear search).

        Raises:
            NotFoundError: If no marker has this ID.
        """
        for i, marker in enumerate(self._markers):
            if marker.id == marker_id:
                return i
        raise NotFoundError(f"No such marker: {marker_id}")

    def sample(self, fid: str, iid: str) -> Sample:
        return self._samples[self.sample_index(fid, iid)]

    def marker(self, marker_id: str) -> Marker:
        return self._markers[self.marker_index(marker_id)]

    def genotype_counts(self, marker_index: int) -> GenotypeCounts:
        """Genotype class counts for one marker."""
        a1, a2 = self._bed.marker_planes(marker_index)
        return genotype_counts(a1, a2)

    def marker_genotype_counts(
        self, chunk_size: int = 10_000, show_progress: bool = False
    ) -> GenotypeCounts:
        """Genotype class counts for every marker, streamed in chunks.

        Returns:
            GenotypeCounts whose fields are arrays of length n_markers.
        """
        chunks = [
            genotype_counts(a1, a2)
            for a1, a2, _, _ in self._bed.iter_planes(chunk_size, show_progress)
        ]
        if not chunks:
            empty = np.zeros(0, dtype=np.intp)
            return GenotypeCounts(empty, empty, empty, empty)

        return GenotypeCounts(
            hom1=np.concatenate([c.hom1 for c in chunks]),
            het=np.concatenate([c.het for c in chunks]),
            hom2=np.concatenate([c.hom2 for c in chunks]),
            missing=np.concatenate([c.missing for c in chunks]),
        )


def open_plink(path: Path | str) -> PlinkDataset:
    """Open a PLINK binary file set. See PlinkDataset.open()."""
    return PlinkDataset.open(path)
