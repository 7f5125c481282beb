"""
Dissimilarity matrix handling: shape checks, raw conversion and sanitization.

Two numeric views of the same input are produced here and must not be mixed:

- the *raw* view keeps unknown entries as NaN so statistics can skip them,
- the *sanitized* view replaces them with a sentinel distance so the
  clustering arithmetic always sees finite numbers.
"""

import math
import numbers
from typing import Any, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from clustermap.config import DEFAULT_SENTINEL_DISTANCE
from clustermap.exceptions import InvalidMatrixShapeError

DistanceMatrixLike = Union[Sequence[Sequence[Any]], NDArray[Any]]


def is_valid_distance(value: Any) -> bool:
    """True for finite real numbers; booleans, None and strings are not distances."""
    if value is None or isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, numbers.Real):
        return False
    return math.isfinite(float(value))


def validate_square(
    matrix: DistanceMatrixLike,
    what: str = "distance_matrix",
    size: Optional[int] = None,
) -> int:
    """
    Check that ``matrix`` is an n x n grid and return n.

    If ``size`` is given the matrix must also have exactly that many rows.
    """
    if isinstance(matrix, np.ndarray):
        if matrix.ndim != 2 and not (matrix.ndim == 1 and matrix.size == 0):
            InvalidMatrixShapeError.raise_for_shape(what, 2, matrix.ndim)
        n = matrix.shape[0]
        if matrix.ndim == 2 and matrix.shape[1] != n:
            InvalidMatrixShapeError.raise_for_shape(what, n, matrix.shape[1])
    else:
        n = len(matrix)
        for row_index, row in enumerate(matrix):
            if len(row) != n:
                InvalidMatrixShapeError.raise_for_shape(what, n, len(row), row_index)

    if size is not None and n != size:
        InvalidMatrixShapeError.raise_for_shape(what, size, n)
    return n


def as_raw_matrix(matrix: DistanceMatrixLike) -> NDArray[np.float64]:
    """Convert to a float array, encoding every unknown entry as NaN."""
    n = validate_square(matrix)
    raw = np.full((n, n), np.nan, dtype=np.float64)
    for i, row in enumerate(matrix):
        for j, value in enumerate(row):
            if is_valid_distance(value):
                raw[i, j] = float(value)
    return raw


def sanitize_matrix(
    matrix: DistanceMatrixLike,
    sentinel_distance: float = DEFAULT_SENTINEL_DISTANCE,
) -> NDArray[np.float64]:
    """
    Produce the clustering view of a dissimilarity matrix.

    The diagonal is forced to 0, finite values pass through unchanged and every
    other entry (None, NaN, inf, non-numeric) becomes ``sentinel_distance``.
    """
    sanitized = as_raw_matrix(matrix)
    sanitized[~np.isfinite(sanitized)] = sentinel_distance
    np.fill_diagonal(sanitized, 0.0)
    return sanitized
