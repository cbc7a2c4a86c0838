"""Pytest fixtures for the plinkbed test suite.

PLINK file sets are synthesized into tmp_path from a 2-bit code matrix
(code = 2 * a2 + a1, indexed [sample, marker]) so every test knows the exact
genotypes it should decode.

Tiers:
    tier0 - fast unit tests, no reference library
    tier1 - parity against the bed-reader reference decoder

    pytest -m tier0
    pytest -m "tier0 or tier1"
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest

BED_HEADER = bytes([0x6C, 0x1B, 0x01])

# Scenario data set: 1056 samples x 4 markers
N_SCENARIO_SAMPLES = 1056
SCENARIO_BIM = [
    "1\trs001\t0.0\t123455\tA\tG",
    "1\trs002\t1.1\t123456\tC\tT",
    "1\trs003\t2.2\t123457\tG\tA",
    "2\trs004\t3.3\t123458\tT\tC",
]


def pack_codes(codes: np.ndarray) -> bytes:
    """Pack a (n_samples, n_markers) code matrix into SNP-major .bed bytes."""
    n_samples, n_markers = codes.shape
    bytes_per_marker = (n_samples + 3) // 4
    padded = np.zeros((n_markers, 4 * bytes_per_marker), dtype=np.uint8)
    padded[:, :n_samples] = codes.T
    quads = padded.reshape(n_markers, bytes_per_marker, 4)
    packed = (
        quads[:, :, 0]
        | (quads[:, :, 1] << 2)
        | (quads[:, :, 2] << 4)
        | (quads[:, :, 3] << 6)
    )
    return packed.astype(np.uint8).tobytes()


def fam_lines(n_samples: int) -> list[str]:
    """Deterministic .fam lines with mixed sex and phenotype values."""
    phenotypes = ["1", "2", "-9"]
    return [
        f"FAM{i // 4} IND{i} 0 0 {1 + i % 2} {phenotypes[i % 3]}"
        for i in range(n_samples)
    ]


def bim_lines(n_markers: int) -> list[str]:
    return [
        f"{1 + i // 10}\trs{i:05d}\t{i * 0.5}\t{1000 + 100 * i}\tA\tG"
        for i in range(n_markers)
    ]


PlinkWriter = Callable[..., Path]


@pytest.fixture
def write_plink(tmp_path: Path) -> PlinkWriter:
    """Factory writing a .fam/.bim/.bed triple and returning its prefix.

    Args (of the returned callable):
        codes: uint8 code matrix (n_samples, n_markers).
        name: File prefix inside tmp_path.
        fam: Optional .fam lines (default: fam_lines()).
        bim: Optional .bim lines (default: bim_lines()).
        header: .bed header bytes.
        extra: Bytes appended after the genotype data.
    """

    def _write(
        codes: np.ndarray,
        name: str = "test",
        fam: list[str] | None = None,
        bim: list[str] | None = None,
        header: bytes = BED_HEADER,
        extra: bytes = b"",
    ) -> Path:
        codes = np.asarray(codes, dtype=np.uint8)
        n_samples, n_markers = codes.shape
        prefix = tmp_path / name
        fam = fam_lines(n_samples) if fam is None else fam
        bim = bim_lines(n_markers) if bim is None else bim
        Path(f"{prefix}.fam").write_text("".join(f"{line}\n" for line in fam))
        Path(f"{prefix}.bim").write_text("".join(f"{line}\n" for line in bim))
        Path(f"{prefix}.bed").write_bytes(header + pack_codes(codes) + extra)
        return prefix

    return _write


@pytest.fixture
def scenario_codes() -> np.ndarray:
    """Codes for the 1056 x 4 scenario; sample 11 is het at rs001."""
    rng = np.random.default_rng(20240601)
    codes = rng.choice(
        np.array([0, 1, 2, 3], dtype=np.uint8),
        size=(N_SCENARIO_SAMPLES, len(SCENARIO_BIM)),
        p=[0.4, 0.05, 0.35, 0.2],
    )
    codes[11, 0] = 2
    return codes


@pytest.fixture
def scenario_plink(write_plink: PlinkWriter, scenario_codes: np.ndarray) -> Path:
    """Path prefix for the 1056-sample, 4-marker scenario file set."""
    return write_plink(scenario_codes, name="plink", bim=SCENARIO_BIM)


@pytest.fixture
def small_codes() -> np.ndarray:
    """5 samples x 3 markers covering every code; 5 samples force padding."""
    return np.array(
        [
            [0, 3, 1],
            [1, 2, 0],
            [2, 1, 3],
            [3, 0, 2],
            [2, 2, 1],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def small_plink(write_plink: PlinkWriter, small_codes: np.ndarray) -> Path:
    return write_plink(small_codes, name="small")


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create temporary output directory for test results."""
    out = tmp_path / "output"
    out.mkdir()
    return out
