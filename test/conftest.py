import logging

import pytest

from clustermap.logger import cm_logger


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Enable the algorithm logger so its code paths run under test
    cm_logger.disabled = False


@pytest.fixture(autouse=True)
def _reset_algorithm_log():
    yield
    cm_logger.clear()


@pytest.fixture
def two_bloc_dataset():
    """Two tight pairs {A, B} and {C, D}, far apart from each other."""
    near, far = 0.1, 0.9
    return {
        "countries": ["A", "B", "C", "D"],
        "distance_matrix": [
            [0.0, near, far, far],
            [near, 0.0, far, far],
            [far, far, 0.0, near],
            [far, far, near, 0.0],
        ],
        "pair_count_matrix": [
            [0, 12, 10, 10],
            [12, 0, 10, 10],
            [10, 10, 0, 8],
            [10, 10, 8, 0],
        ],
    }
