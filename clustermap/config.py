import math
from dataclasses import dataclass

from clustermap.exceptions import ConfigurationError

DEFAULT_SENTINEL_DISTANCE: float = 1.0
DEFAULT_CUT_PERCENTILE: float = 0.60
DEFAULT_MIN_CLUSTER_SIZE: int = 2


@dataclass
class ClusteringConfig:
    """Configuration for the clustermap pipeline."""

    sentinel_distance: float = DEFAULT_SENTINEL_DISTANCE
    cut_percentile: float = DEFAULT_CUT_PERCENTILE
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE
    validate_shape: bool = True
    logger_name: str = "clustermap"

    def __post_init__(self) -> None:
        if not math.isfinite(self.sentinel_distance) or self.sentinel_distance < 0:
            raise ConfigurationError(
                f"sentinel_distance must be a finite non-negative number, got {self.sentinel_distance!r}"
            )
        if not 0.0 <= self.cut_percentile <= 1.0:
            raise ConfigurationError(
                f"cut_percentile must lie in [0, 1], got {self.cut_percentile!r}"
            )
        if self.min_cluster_size < 1:
            raise ConfigurationError(
                f"min_cluster_size must be at least 1, got {self.min_cluster_size!r}"
            )
