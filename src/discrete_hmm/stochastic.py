"""
Stochastic vector and matrix primitives.

Helpers for checking and restoring the probability constraints shared by
the initial vector, the column-stochastic transition matrix and the
row-stochastic emission table.
"""

import numpy as np

from .config import get_config


def _tolerance(tolerance):
    if tolerance is None:
        tolerance = get_config('hmm', 'tolerance') or 1e-9
    return tolerance


def as_probability_vector(values) -> np.ndarray:
    """Convert input to a 1-D float64 array (always a fresh copy)."""
    return np.array(values, dtype=np.float64).reshape(-1)


def is_stochastic_vector(vector: np.ndarray, tolerance: float = None) -> bool:
    """
    Check that a vector is non-negative, finite and sums to 1.

    Args:
        vector: 1-D array of probabilities
        tolerance: Allowed absolute deviation of the sum from 1.0

    Returns:
        True if the vector is a valid probability distribution
    """
    vector = np.asarray(vector, dtype=np.float64)
    if vector.ndim != 1 or vector.size == 0:
        return False
    if not np.all(np.isfinite(vector)) or np.any(vector < 0):
        return False
    return abs(vector.sum() - 1.0) <= _tolerance(tolerance)


def is_row_stochastic(matrix: np.ndarray, tolerance: float = None) -> bool:
    """Check that every row of a 2-D matrix is a stochastic vector."""
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2 or matrix.size == 0:
        return False
    if not np.all(np.isfinite(matrix)) or np.any(matrix < 0):
        return False
    return bool(np.all(np.abs(matrix.sum(axis=1) - 1.0) <= _tolerance(tolerance)))


def is_column_stochastic(matrix: np.ndarray, tolerance: float = None) -> bool:
    """Check that every column of a 2-D matrix is a stochastic vector."""
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2:
        return False
    return is_row_stochastic(matrix.T, tolerance)


def normalize_vector(vector: np.ndarray) -> np.ndarray:
    """Scale a non-negative vector to sum to 1; an all-zero vector is returned unchanged."""
    vector = np.asarray(vector, dtype=np.float64)
    total = vector.sum()
    if total <= 0:
        return vector.copy()
    return vector / total


def normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """Scale each row to sum to 1, leaving all-zero rows untouched."""
    matrix = np.asarray(matrix, dtype=np.float64)
    sums = matrix.sum(axis=1, keepdims=True)
    safe = np.where(sums > 0, sums, 1.0)
    return matrix / safe


def normalize_columns(matrix: np.ndarray) -> np.ndarray:
    """Scale each column to sum to 1, leaving all-zero columns untouched."""
    return normalize_rows(np.asarray(matrix, dtype=np.float64).T).T


def apply_floor(values: np.ndarray, floor: float) -> np.ndarray:
    """Raise every entry to at least ``floor`` (no-op for floor <= 0)."""
    values = np.asarray(values, dtype=np.float64)
    if floor <= 0:
        return values.copy()
    return np.maximum(values, floor)


def safe_log(values) -> np.ndarray:
    """Natural log with log(0) = -inf and no runtime warnings."""
    with np.errstate(divide='ignore'):
        return np.log(np.asarray(values, dtype=np.float64))
