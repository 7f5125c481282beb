"""Logging package for clustermap."""

from clustermap.logger.base_logger import AlgorithmLogger
from clustermap.logger.table_logger import TableLogger
from clustermap.logger.matrix_logger import MatrixLogger
from clustermap.logger.combined_logger import Logger
from clustermap.logger.formatting import (
    format_set,
    format_distance,
    format_indices,
)

# Shared algorithm logger; disabled unless a caller opts in
cm_logger = Logger("Clustermap")
cm_logger.disabled = True

__all__ = [
    "AlgorithmLogger",
    "TableLogger",
    "MatrixLogger",
    "Logger",
    "cm_logger",
    "format_set",
    "format_distance",
    "format_indices",
]
