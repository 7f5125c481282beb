"""
Greedy average-linkage agglomerative clustering.

Each round scans every unordered pair of active clusters in row-major order
over the active list and merges the pair with the strictly smallest mean
cross distance; on ties the first pair encountered wins. The two merged
clusters are removed from the active list and the new cluster is appended at
the end, so the active-list order (and therefore tie-breaking) depends on the
merge history. Time is O(n^3), memory O(n^2).
"""

from typing import List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from clustermap.config import DEFAULT_SENTINEL_DISTANCE
from clustermap.elements.dendrogram import ClusterTreeNode, Dendrogram, MergeEvent
from clustermap.elements.matrix import DistanceMatrixLike, sanitize_matrix
from clustermap.logger import cm_logger, format_indices


def average_linkage_distance(
    indices_a: Sequence[int],
    indices_b: Sequence[int],
    sanitized: Sequence[Sequence[float]],
    sentinel_distance: float = DEFAULT_SENTINEL_DISTANCE,
) -> float:
    """
    Mean of ``sanitized[a][b]`` over all a in ``indices_a`` and b in ``indices_b``.

    Values are accumulated left to right (row-major over the block) so the
    result is reproducible bit for bit. An empty side yields
    ``sentinel_distance``.
    """
    count = len(indices_a) * len(indices_b)
    if count == 0:
        return sentinel_distance
    total = 0.0
    for a in indices_a:
        row = sanitized[a]
        for b in indices_b:
            total += row[b]
    return total / count


def _closest_pair(
    active: List[ClusterTreeNode],
    rows: List[List[float]],
    sentinel_distance: float,
) -> Tuple[int, int, float]:
    min_distance = float("inf")
    min_i, min_j = 0, 1
    for i in range(len(active)):
        for j in range(i + 1, len(active)):
            distance = average_linkage_distance(
                active[i].indices, active[j].indices, rows, sentinel_distance
            )
            if distance < min_distance:
                min_distance = distance
                min_i, min_j = i, j
    return min_i, min_j, min_distance


def build_dendrogram(
    sanitized: NDArray[np.float64],
    sentinel_distance: float = DEFAULT_SENTINEL_DISTANCE,
) -> Dendrogram:
    """
    Cluster a sanitized n x n matrix into a binary merge tree.

    Returns an empty dendrogram for n == 0 and a single leaf for n == 1;
    otherwise exactly n - 1 merges are recorded.
    """
    n = len(sanitized)
    # Plain Python floats keep the accumulation order identical to a scalar loop
    rows: List[List[float]] = np.asarray(sanitized, dtype=np.float64).tolist()
    dendrogram = Dendrogram()
    active: List[ClusterTreeNode] = []
    for index in range(n):
        leaf = ClusterTreeNode(node_id=index, indices=(index,))
        dendrogram.nodes.append(leaf)
        active.append(leaf)

    log_merges = not cm_logger.disabled
    merge_rows: List[List[object]] = []

    while len(active) > 1:
        min_i, min_j, min_distance = _closest_pair(active, rows, sentinel_distance)
        left = active[min_i]
        right = active[min_j]
        merged = ClusterTreeNode(
            node_id=len(dendrogram.nodes),
            indices=left.indices + right.indices,
            left=left.node_id,
            right=right.node_id,
            distance=min_distance,
        )
        # min_j > min_i, so removing j first keeps i valid
        del active[min_j]
        del active[min_i]
        active.append(merged)

        dendrogram.nodes.append(merged)
        dendrogram.merges.append(
            MergeEvent(
                distance=min_distance,
                left_size=len(left.indices),
                right_size=len(right.indices),
            )
        )
        if log_merges:
            merge_rows.append(
                [
                    len(dendrogram.merges),
                    format_indices(left.indices),
                    format_indices(right.indices),
                    f"{min_distance:.4f}",
                ]
            )

    if log_merges:
        cm_logger.section("Average linkage clustering")
        cm_logger.info(f"{n} entities, {len(dendrogram.merges)} merges")
        if merge_rows:
            cm_logger.table(
                merge_rows, headers=["step", "left", "right", "distance"]
            )

    return dendrogram


class AgglomerativeClusterer:
    """Sanitizes a raw dissimilarity matrix and builds its average-linkage dendrogram."""

    def __init__(self, sentinel_distance: float = DEFAULT_SENTINEL_DISTANCE):
        self.sentinel_distance = sentinel_distance

    def sanitize(self, matrix: DistanceMatrixLike) -> NDArray[np.float64]:
        return sanitize_matrix(matrix, sentinel_distance=self.sentinel_distance)

    def fit(self, matrix: DistanceMatrixLike) -> Dendrogram:
        return build_dendrogram(
            self.sanitize(matrix), sentinel_distance=self.sentinel_distance
        )
