from clustermap.elements.matrix import (
    DistanceMatrixLike,
    is_valid_distance,
    validate_square,
    as_raw_matrix,
    sanitize_matrix,
)
from clustermap.elements.dendrogram import (
    ClusterTreeNode,
    MergeEvent,
    Dendrogram,
)

__all__ = [
    "DistanceMatrixLike",
    "is_valid_distance",
    "validate_square",
    "as_raw_matrix",
    "sanitize_matrix",
    "ClusterTreeNode",
    "MergeEvent",
    "Dendrogram",
]
