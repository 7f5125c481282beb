"""Distance-matrix clustering and reordering engine for clustermap heatmaps."""

__all__ = [
    "ClusteringConfig",
    "ClustermapPipeline",
    "ClustermapResult",
    "cluster_dataset",
    "ClustermapMatrix",
    "ClustermapCollection",
    "sanitize_matrix",
    "build_dendrogram",
    "leaf_order",
    "cut_dendrogram",
    "build_segments",
    "within_set_statistics",
    "between_set_statistics",
]


def __getattr__(name):
    if name == "ClusteringConfig":
        from .config import ClusteringConfig

        return ClusteringConfig
    if name in {"ClustermapPipeline", "ClustermapResult", "cluster_dataset"}:
        from .pipeline import ClustermapPipeline, ClustermapResult, cluster_dataset

        return locals()[name]
    if name in {"ClustermapMatrix", "ClustermapCollection"}:
        from .io import ClustermapMatrix, ClustermapCollection

        return locals()[name]
    if name == "sanitize_matrix":
        from .elements.matrix import sanitize_matrix

        return sanitize_matrix
    if name in {
        "build_dendrogram",
        "leaf_order",
        "cut_dendrogram",
        "build_segments",
        "within_set_statistics",
        "between_set_statistics",
    }:
        from . import clustering

        return getattr(clustering, name)
    raise AttributeError(name)
