"""Tests for genotype classes derived from A1/A2 planes."""

import numpy as np
import pytest

from plinkbed.core.genotypes import (
    call_name,
    genotype_counts,
    gt_het,
    gt_hom1,
    gt_hom2,
    gt_missing,
)

# One sample per code: 0 hom1, 1 missing, 2 het, 3 hom2
CODES = np.array([0, 1, 2, 3], dtype=np.uint8)
A1 = (CODES & 1).astype(bool)
A2 = (CODES >> 1).astype(bool)


@pytest.mark.tier0
class TestMasks:
    """Tests for the four genotype-class masks."""

    def test_each_mask_selects_its_code(self) -> None:
        np.testing.assert_array_equal(gt_hom1(A1, A2), [True, False, False, False])
        np.testing.assert_array_equal(gt_missing(A1, A2), [False, True, False, False])
        np.testing.assert_array_equal(gt_het(A1, A2), [False, False, True, False])
        np.testing.assert_array_equal(gt_hom2(A1, A2), [False, False, False, True])

    def test_masks_partition_random_planes(self) -> None:
        """Every cell falls in exactly one class."""
        rng = np.random.default_rng(0)
        a1 = rng.integers(0, 2, size=(50, 7)).astype(bool)
        a2 = rng.integers(0, 2, size=(50, 7)).astype(bool)

        total = (
            gt_hom1(a1, a2).astype(int)
            + gt_het(a1, a2).astype(int)
            + gt_hom2(a1, a2).astype(int)
            + gt_missing(a1, a2).astype(int)
        )
        np.testing.assert_array_equal(total, np.ones((50, 7), dtype=int))


@pytest.mark.tier0
class TestCallName:
    """Tests for call_name."""

    @pytest.mark.parametrize(
        ("genotype", "name"),
        [
            ((False, False), "hom1"),
            ((False, True), "missing"),
            ((True, False), "het"),
            ((True, True), "hom2"),
            ((1, 0), "het"),
        ],
    )
    def test_names(self, genotype, name: str) -> None:
        assert call_name(genotype) == name


@pytest.mark.tier0
class TestGenotypeCounts:
    """Tests for genotype_counts."""

    def test_single_marker(self) -> None:
        codes = np.array([0, 0, 2, 3, 1, 2], dtype=np.uint8)
        counts = genotype_counts((codes & 1).astype(bool), (codes >> 1).astype(bool))

        assert (counts.hom1, counts.het, counts.hom2, counts.missing) == (2, 2, 1, 1)
        assert counts.n_called == 5
        assert counts.missing_rate == pytest.approx(1 / 6)
        # allele 1 copies: 2 * 2 hom1 + 2 het = 6 out of 10
        assert counts.a1_frequency == pytest.approx(0.6)

    def test_matrix_counts_per_marker(self) -> None:
        codes = np.array([[0, 3], [2, 3], [1, 3]], dtype=np.uint8)
        counts = genotype_counts((codes & 1).astype(bool), (codes >> 1).astype(bool))

        np.testing.assert_array_equal(counts.hom1, [1, 0])
        np.testing.assert_array_equal(counts.het, [1, 0])
        np.testing.assert_array_equal(counts.hom2, [0, 3])
        np.testing.assert_array_equal(counts.missing, [1, 0])
        np.testing.assert_allclose(counts.a1_frequency, [0.75, 0.0])

    def test_all_missing_frequency_is_nan(self) -> None:
        codes = np.array([1, 1, 1], dtype=np.uint8)
        counts = genotype_counts((codes & 1).astype(bool), (codes >> 1).astype(bool))

        assert counts.missing_rate == 1.0
        assert np.isnan(counts.a1_frequency)

    def test_shape_mismatch(self) -> None:
        with pytest.raises(ValueError, match="shapes differ"):
            genotype_counts(np.zeros(3, dtype=bool), np.zeros(4, dtype=bool))
