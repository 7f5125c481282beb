"""
Custom exceptions for the clustermap engine.
"""

from __future__ import annotations
from typing import NoReturn, Optional


class ClustermapError(Exception):
    """Base exception for clustermap errors."""

    pass


class InvalidMatrixShapeError(ClustermapError):
    """Raised when a matrix (or its labels) does not describe an n x n grid."""

    @staticmethod
    def raise_for_shape(
        what: str, expected: int, found: int, row: Optional[int] = None
    ) -> NoReturn:
        """
        Raises an InvalidMatrixShapeError describing the mismatch.

        Args:
            what: Name of the offending input (e.g. "distance_matrix")
            expected: The size implied by the number of rows
            found: The size actually encountered
            row: Index of the ragged row, if the mismatch is row-local

        Raises:
            InvalidMatrixShapeError: Always raised with detailed error information
        """
        from clustermap.logger import cm_logger

        location = f" (row {row})" if row is not None else ""
        message = (
            f"Invalid shape for {what}: expected length {expected}{location}, "
            f"found {found}."
        )
        if not cm_logger.disabled:
            cm_logger.error(message)
        raise InvalidMatrixShapeError(message)


class DatasetFormatError(ClustermapError):
    """Raised when a clustermap payload lacks required keys or has the wrong types."""

    pass


class ConfigurationError(ClustermapError):
    """Raised for out-of-range configuration values."""

    pass
