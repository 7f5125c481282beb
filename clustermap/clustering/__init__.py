from clustermap.clustering.linkage import (
    AgglomerativeClusterer,
    average_linkage_distance,
    build_dendrogram,
)
from clustermap.clustering.ordering import (
    leaf_order,
    inverse_order,
    ordered_labels,
    prioritize_order,
)
from clustermap.clustering.cutting import (
    ClusterGroup,
    ManualClusterOverride,
    cut_threshold,
    automatic_cut,
    manual_cut,
    cut_dendrogram,
)
from clustermap.clustering.segments import (
    ClusterSegment,
    build_segments,
    segments_for_groups,
)
from clustermap.clustering.statistics import (
    SetStatistics,
    UNAVAILABLE,
    within_set_statistics,
    between_set_statistics,
    resolve_indices,
    group_statistics,
    selection_statistics,
)

__all__ = [
    "AgglomerativeClusterer",
    "average_linkage_distance",
    "build_dendrogram",
    "leaf_order",
    "inverse_order",
    "ordered_labels",
    "prioritize_order",
    "ClusterGroup",
    "ManualClusterOverride",
    "cut_threshold",
    "automatic_cut",
    "manual_cut",
    "cut_dendrogram",
    "ClusterSegment",
    "build_segments",
    "segments_for_groups",
    "SetStatistics",
    "UNAVAILABLE",
    "within_set_statistics",
    "between_set_statistics",
    "resolve_indices",
    "group_statistics",
    "selection_statistics",
]
