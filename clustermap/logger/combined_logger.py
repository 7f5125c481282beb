"""Combined logger with all functionality."""

from clustermap.logger.base_logger import AlgorithmLogger
from clustermap.logger.table_logger import TableLogger
from clustermap.logger.matrix_logger import MatrixLogger


class Logger(TableLogger, MatrixLogger):
    """
    Combined logger that inherits all visualization capabilities.

    Usage:
        logger = Logger("my_algorithm")
        logger.section("Clustering")
        logger.table(rows, headers=["step", "distance"])
        logger.matrix(distance_matrix, labels=countries)
    """

    def __init__(self, name: str):
        AlgorithmLogger.__init__(self, name)
