"""Memory-mapped PLINK .bed genotype matrix.

A .bed file is a 3-byte magic header followed by the packed genotype matrix.
Only SNP-major BED v1.0 (header 0x6C 0x1B 0x01) is supported: every marker
occupies ceil(n_samples / 4) consecutive bytes, four samples per byte, least
significant bit pair first. The last byte of each marker block is padded.

For marker m and sample s (0-based):

    byte  = data[m * bytes_per_marker + s // 4]
    code  = (byte >> 2 * (s % 4)) & 0b11
    a1    = code & 1
    a2    = (code >> 1) & 1

    A2 A1
     0  0   homozygous allele 1
     0  1   missing
     1  0   heterozygous
     1  1   homozygous allele 2

The matrix is never loaded into memory: single-cell lookups read one byte
of the mapping, and bulk views decode one marker block (or a chunk of
blocks) at a time with numpy.
"""

import operator
from collections.abc import Iterator
from pathlib import Path

import numpy as np
from loguru import logger

from plinkbed.core.progress import progress_iterator
from plinkbed.errors import DimensionMismatchError, UnsupportedFormatError
from plinkbed.io.records import with_suffix

BED_MAGIC = b"\x6c\x1b"
SNP_MAJOR = 0x01
SAMPLE_MAJOR = 0x00
HEADER_SIZE = 3

_CODE_SHIFTS = np.array([0, 2, 4, 6], dtype=np.uint8)


def bytes_per_marker(n_samples: int) -> int:
    """Number of packed bytes holding one marker's genotypes."""
    return (n_samples + 3) // 4


def read_bed_header(bed_path: Path) -> bytes:
    """Read and validate the 3-byte .bed header.

    Raises:
        UnsupportedFormatError: If the magic bytes are wrong, the file is
            shorter than the header, or the mode byte is not SNP-major.
    """
    with open(bed_path, "rb") as f:
        header = f.read(HEADER_SIZE)

    if len(header) < HEADER_SIZE or header[:2] != BED_MAGIC:
        raise UnsupportedFormatError(
            f"{bed_path}: not a PLINK .bed file (header bytes {header.hex()})"
        )
    if header[2] == SAMPLE_MAJOR:
        raise UnsupportedFormatError(
            f"{bed_path}: sample-major .bed layout is not supported, "
            "only SNP-major BED v1.0"
        )
    if header[2] != SNP_MAJOR:
        raise UnsupportedFormatError(
            f"{bed_path}: unknown .bed mode byte 0x{header[2]:02x}, "
            "only SNP-major BED v1.0 supported"
        )
    return header


def validate_bed_size(bed_path: Path, n_samples: int, n_markers: int) -> int:
    """Check the .bed data region is large enough for the given dimensions.

    Returns:
        Number of data bytes past the header.

    Raises:
        DimensionMismatchError: If fewer than
            ceil(n_samples / 4) * n_markers data bytes are present.
    """
    data_bytes = bed_path.stat().st_size - HEADER_SIZE
    expected = bytes_per_marker(n_samples) * n_markers

    if data_bytes < expected:
        raise DimensionMismatchError(
            f"{bed_path}: dimension mismatch, {n_samples} samples x "
            f"{n_markers} markers need {expected} data bytes, file has "
            f"{max(data_bytes, 0)}"
        )
    if data_bytes > expected:
        logger.debug(
            f"{bed_path}: ignoring {data_bytes - expected} trailing bytes "
            "past the genotype matrix"
        )
    return data_bytes


def _check_index(index: int, count: int, kind: str) -> int:
    i = operator.index(index)
    if not 0 <= i < count:
        raise IndexError(f"{kind} index {i} out of range [0, {count})")
    return i


class BedMatrix:
    """Read-only view of a SNP-major .bed file.

    Attributes:
        path: Path of the .bed file.
        n_samples: Number of samples (rows).
        n_markers: Number of markers (columns).
        bytes_per_marker: Packed bytes per marker block.

    Example:
        >>> with BedMatrix("data/plink", n_samples=1056, n_markers=4) as bed:
        ...     bed.genotype(11, 0)
        (True, False)
    """

    def __init__(self, path: Path | str, n_samples: int, n_markers: int) -> None:
        bed_path = with_suffix(path, ".bed")
        if not bed_path.exists():
            raise FileNotFoundError(f"PLINK .bed file not found: {bed_path}")

        read_bed_header(bed_path)
        data_bytes = validate_bed_size(bed_path, n_samples, n_markers)

        self.path = bed_path
        self.n_samples = n_samples
        self.n_markers = n_markers
        self.bytes_per_marker = bytes_per_marker(n_samples)

        shape = (n_markers, self.bytes_per_marker)
        if n_samples == 0 or n_markers == 0:
            # Nothing to map
            self._packed: np.ndarray | None = np.zeros(shape, dtype=np.uint8)
        else:
            self._packed = np.memmap(
                bed_path, dtype=np.uint8, mode="r", offset=HEADER_SIZE, shape=shape
            )

        logger.debug(
            f"Mapped {bed_path} ({data_bytes} data bytes, "
            f"{self.bytes_per_marker} bytes per marker)"
        )

    @property
    def shape(self) -> tuple[int, int]:
        """(n_samples, n_markers)."""
        return self.n_samples, self.n_markers

    @property
    def closed(self) -> bool:
        return self._packed is None

    @property
    def _data(self) -> np.ndarray:
        if self._packed is None:
            raise ValueError(f"BedMatrix for {self.path} is closed")
        return self._packed

    def close(self) -> None:
        """Release the mapping. Views handed out earlier keep their pages alive."""
        if self._packed is not None:
            self._packed = None
            logger.debug(f"Closed {self.path}")

    def __enter__(self) -> "BedMatrix":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed " if self.closed else ""
        return (
            f"<{state}BedMatrix ({self.n_samples} samples x "
            f"{self.n_markers} markers) at {self.path}>"
        )

    def genotype(self, sample: int, marker: int) -> tuple[bool, bool]:
        """Decode one cell.

        Args:
            sample: 0-based sample index.
            marker: 0-based marker index.

        Returns:
            (a2, a1) bit pair, see the module docstring for the meaning.

        Raises:
            IndexError: If either index is outside [0, count).
        """
        s = _check_index(sample, self.n_samples, "sample")
        m = _check_index(marker, self.n_markers, "marker")
        byte = int(self._data[m, s // 4])
        code = (byte >> (2 * (s % 4))) & 0b11
        return bool(code >> 1), bool(code & 1)

    def marker_bytes(self, marker: int) -> np.ndarray:
        """Raw packed bytes of one marker block (read-only, not decoded)."""
        m = _check_index(marker, self.n_markers, "marker")
        return np.asarray(self._data[m])

    def marker_planes(self, marker: int) -> tuple[np.ndarray, np.ndarray]:
        """Decode one marker into its A1 and A2 bit planes.

        Returns:
            Tuple of (a1, a2) boolean arrays of length n_samples.
        """
        bits = np.unpackbits(self.marker_bytes(marker), bitorder="little")
        a1 = bits[0::2][: self.n_samples].astype(bool)
        a2 = bits[1::2][: self.n_samples].astype(bool)
        return a1, a2

    def _planes(self, start: int, end: int) -> tuple[np.ndarray, np.ndarray]:
        bits = np.unpackbits(self._data[start:end], axis=1, bitorder="little")
        a1 = bits[:, 0::2][:, : self.n_samples].T.astype(bool)
        a2 = bits[:, 1::2][:, : self.n_samples].T.astype(bool)
        return a1, a2

    def planes(self) -> tuple[np.ndarray, np.ndarray]:
        """Decode the full matrix into A1 and A2 bit planes.

        Memory: two (n_samples, n_markers) boolean arrays. Use
        iter_planes() for large files.

        Returns:
            Tuple of (A1, A2) boolean arrays indexed [sample, marker].
        """
        return self._planes(0, self.n_markers)

    def iter_planes(
        self, chunk_size: int = 10_000, show_progress: bool = False
    ) -> Iterator[tuple[np.ndarray, np.ndarray, int, int]]:
        """Stream bit planes in marker chunks.

        Memory: O(n_samples * chunk_size) per chunk.

        Args:
            chunk_size: Number of markers per chunk.
            show_progress: Whether to show a progress bar.

        Yields:
            Tuple of (a1, a2, start, end) where the planes have shape
            (n_samples, end - start).
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        n_chunks = (self.n_markers + chunk_size - 1) // chunk_size
        starts = progress_iterator(
            range(0, self.n_markers, chunk_size),
            total=n_chunks,
            desc="Decoding markers",
            enabled=show_progress,
        )
        for start in starts:
            end = min(start + chunk_size, self.n_markers)
            a1, a2 = self._planes(start, end)
            yield a1, a2, start, end

    def codes(self) -> np.ndarray:
        """Decode the full matrix into 2-bit codes (2 * a2 + a1).

        Returns:
            uint8 array of shape (n_samples, n_markers) with values in
            {0, 1, 2, 3}.
        """
        unpacked = (self._data[:, :, np.newaxis] >> _CODE_SHIFTS) & 0b11
        flat = unpacked.reshape(self.n_markers, 4 * self.bytes_per_marker)
        return np.ascontiguousarray(flat[:, : self.n_samples].T)
