"""
Unit tests for stochastic vector and matrix primitives.
"""

import numpy as np
import pytest

from discrete_hmm.stochastic import (
    apply_floor,
    is_column_stochastic,
    is_row_stochastic,
    is_stochastic_vector,
    normalize_columns,
    normalize_rows,
    normalize_vector,
    safe_log,
)


class TestChecks:
    """Test stochasticity predicates."""

    def test_stochastic_vector(self):
        assert is_stochastic_vector([0.25, 0.75])
        assert is_stochastic_vector([1.0])

    def test_vector_sum_tolerance(self):
        """Sums within 1e-9 pass, larger deviations fail."""
        assert is_stochastic_vector([0.5, 0.5 + 1e-10])
        assert not is_stochastic_vector([0.5, 0.5 + 1e-6])

    def test_vector_rejects_negative_and_empty(self):
        assert not is_stochastic_vector([-0.1, 1.1])
        assert not is_stochastic_vector([])
        assert not is_stochastic_vector([np.nan, 1.0])

    def test_row_vs_column_stochastic(self):
        """A matrix can satisfy one convention but not the other."""
        rows_ok = np.array([[0.8, 0.2], [0.3, 0.7]])
        assert is_row_stochastic(rows_ok)
        assert not is_column_stochastic(rows_ok)
        assert is_column_stochastic(rows_ok.T)

    def test_matrix_rejects_wrong_ndim(self):
        assert not is_row_stochastic([0.5, 0.5])
        assert not is_column_stochastic([0.5, 0.5])


class TestNormalization:
    """Test normalization helpers."""

    def test_normalize_vector(self):
        np.testing.assert_allclose(normalize_vector([1.0, 3.0]), [0.25, 0.75])

    def test_normalize_zero_vector_unchanged(self):
        np.testing.assert_array_equal(normalize_vector([0.0, 0.0]), [0.0, 0.0])

    def test_normalize_rows_keeps_zero_rows(self):
        matrix = np.array([[1.0, 1.0], [0.0, 0.0]])
        result = normalize_rows(matrix)
        np.testing.assert_allclose(result, [[0.5, 0.5], [0.0, 0.0]])

    def test_normalize_columns(self):
        matrix = np.array([[1.0, 2.0], [3.0, 2.0]])
        result = normalize_columns(matrix)
        np.testing.assert_allclose(result.sum(axis=0), [1.0, 1.0])
        np.testing.assert_allclose(result[:, 0], [0.25, 0.75])

    def test_normalize_does_not_mutate_input(self):
        matrix = np.array([[1.0, 3.0]])
        normalize_rows(matrix)
        np.testing.assert_array_equal(matrix, [[1.0, 3.0]])


class TestFloorAndLog:
    """Test probability floor and safe logarithm."""

    def test_apply_floor(self):
        np.testing.assert_array_equal(apply_floor([0.0, 0.5], 1e-12), [1e-12, 0.5])

    def test_zero_floor_is_noop(self):
        np.testing.assert_array_equal(apply_floor([0.0, 1.0], 0.0), [0.0, 1.0])

    def test_safe_log_of_zero(self):
        with np.errstate(all='raise'):
            result = safe_log([0.0, 1.0])
        assert np.isneginf(result[0])
        assert result[1] == 0.0
