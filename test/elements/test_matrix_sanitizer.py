import math

import numpy as np
import pytest

from clustermap.elements.matrix import (
    as_raw_matrix,
    is_valid_distance,
    sanitize_matrix,
    validate_square,
)
from clustermap.exceptions import InvalidMatrixShapeError


def test_diagonal_is_zero_regardless_of_input():
    sanitized = sanitize_matrix([[5.0, 0.2], [0.2, None]])
    assert sanitized[0, 0] == 0.0
    assert sanitized[1, 1] == 0.0


def test_finite_values_pass_through_unchanged():
    sanitized = sanitize_matrix([[0.0, 0.37], [0.41, 0.0]])
    assert sanitized[0, 1] == 0.37
    assert sanitized[1, 0] == 0.41


@pytest.mark.parametrize(
    "missing", [None, float("nan"), float("inf"), -float("inf"), "0.3", True]
)
def test_missing_or_invalid_entries_become_sentinel(missing):
    sanitized = sanitize_matrix([[0.0, missing], [missing, 0.0]])
    assert sanitized[0, 1] == 1.0
    assert sanitized[1, 0] == 1.0


def test_custom_sentinel():
    sanitized = sanitize_matrix([[0.0, None], [None, 0.0]], sentinel_distance=0.5)
    assert sanitized[0, 1] == 0.5


def test_sanitize_accepts_numpy_input():
    raw = np.array([[0.0, np.nan], [0.25, 0.0]])
    sanitized = sanitize_matrix(raw)
    assert sanitized.tolist() == [[0.0, 1.0], [0.25, 0.0]]


def test_empty_matrix():
    assert sanitize_matrix([]).shape == (0, 0)
    assert as_raw_matrix([]).shape == (0, 0)


def test_raw_matrix_keeps_unknowns_as_nan():
    raw = as_raw_matrix([[None, 0.2], ["bad", 0.0]])
    assert math.isnan(raw[0, 0])
    assert raw[0, 1] == 0.2
    assert math.isnan(raw[1, 0])


def test_is_valid_distance():
    assert is_valid_distance(0)
    assert is_valid_distance(np.float32(0.5))
    assert not is_valid_distance(None)
    assert not is_valid_distance(False)
    assert not is_valid_distance(float("nan"))
    assert not is_valid_distance("1.0")


def test_validate_square_returns_size():
    assert validate_square([[0, 1], [1, 0]]) == 2
    assert validate_square([]) == 0


def test_ragged_row_is_rejected():
    with pytest.raises(InvalidMatrixShapeError, match="row 1"):
        validate_square([[0, 1], [1]])


def test_non_square_array_is_rejected():
    with pytest.raises(InvalidMatrixShapeError):
        validate_square(np.zeros((2, 3)))


def test_size_mismatch_is_rejected():
    with pytest.raises(InvalidMatrixShapeError):
        validate_square([[0]], what="pair_count_matrix", size=2)


def test_sanitize_rejects_non_square_matrix():
    with pytest.raises(InvalidMatrixShapeError):
        sanitize_matrix([[0.0, 0.1, 0.2], [0.1, 0.0, 0.3]])
