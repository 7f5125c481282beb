"""
Average pairwise distance over entity subsets.

Statistics read the *raw* matrix: unknown entries are excluded from both the
sum and the pair count instead of being replaced by the clustering sentinel.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from clustermap.clustering.cutting import ClusterGroup
from clustermap.elements.matrix import DistanceMatrixLike, as_raw_matrix


@dataclass(frozen=True)
class SetStatistics:
    average_distance: float
    pair_count: int

    @property
    def is_available(self) -> bool:
        return not math.isnan(self.average_distance)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageDistance": self.average_distance if self.is_available else None,
            "pairCount": self.pair_count,
        }


UNAVAILABLE = SetStatistics(average_distance=float("nan"), pair_count=0)


def _as_raw(matrix: DistanceMatrixLike) -> NDArray[np.float64]:
    if isinstance(matrix, np.ndarray) and matrix.dtype == np.float64:
        return matrix
    return as_raw_matrix(matrix)


def _unique(indices: Iterable[int]) -> List[int]:
    seen: List[int] = []
    for index in indices:
        if index not in seen:
            seen.append(index)
    return seen


def _summarize(values: NDArray[np.float64]) -> SetStatistics:
    valid = values[np.isfinite(values)]
    if valid.size == 0:
        return UNAVAILABLE
    return SetStatistics(
        average_distance=float(valid.sum() / valid.size), pair_count=int(valid.size)
    )


def within_set_statistics(
    matrix: DistanceMatrixLike, indices: Iterable[int]
) -> SetStatistics:
    """
    Mean over the valid entries ``matrix[a][b]`` for every unordered pair in
    the subset, reading each pair once in the order the indices are given.
    """
    members = _unique(indices)
    if len(members) < 2:
        return UNAVAILABLE
    raw = _as_raw(matrix)
    rows, cols = np.triu_indices(len(members), k=1)
    member_array = np.asarray(members)
    return _summarize(raw[member_array[rows], member_array[cols]])


def between_set_statistics(
    matrix: DistanceMatrixLike,
    indices_a: Iterable[int],
    indices_b: Iterable[int],
) -> SetStatistics:
    """Mean over the valid entries ``matrix[a][b]`` for a in A and b in B."""
    members_a = _unique(indices_a)
    members_b = _unique(indices_b)
    if not members_a or not members_b:
        return UNAVAILABLE
    raw = _as_raw(matrix)
    return _summarize(raw[np.ix_(members_a, members_b)].ravel())


def resolve_indices(labels: Sequence[str], selection: Iterable[str]) -> List[int]:
    """Original indices of the selected labels; unknown labels are skipped."""
    label_index: Dict[str, int] = {}
    for index, label in enumerate(labels):
        label_index.setdefault(label, index)
    return _unique(
        label_index[label] for label in selection if label in label_index
    )


def group_statistics(
    matrix: DistanceMatrixLike, groups: Sequence[ClusterGroup]
) -> Tuple[Dict[str, SetStatistics], Dict[Tuple[str, str], SetStatistics]]:
    """
    Within-set statistics for every group and between-set statistics for every
    ordered pair of distinct groups (A before B in ``groups``).
    """
    raw = _as_raw(matrix)
    within = {
        group.cluster_id: within_set_statistics(raw, group.original_indices)
        for group in groups
    }
    between: Dict[Tuple[str, str], SetStatistics] = {}
    for i, group_a in enumerate(groups):
        for group_b in groups[i + 1 :]:
            between[(group_a.cluster_id, group_b.cluster_id)] = between_set_statistics(
                raw, group_a.original_indices, group_b.original_indices
            )
    return within, between


def selection_statistics(
    matrix: DistanceMatrixLike,
    labels: Sequence[str],
    selections: Mapping[str, Iterable[str]],
    compare: Optional[Tuple[str, str]] = None,
) -> Tuple[Dict[str, SetStatistics], Optional[SetStatistics]]:
    """
    Label-based statistics for ad hoc selections, plus the between-set
    comparison of the two selections named in ``compare``.
    """
    raw = _as_raw(matrix)
    resolved = {
        selection_id: resolve_indices(labels, selection)
        for selection_id, selection in selections.items()
    }
    within = {
        selection_id: within_set_statistics(raw, indices)
        for selection_id, indices in resolved.items()
    }
    comparison: Optional[SetStatistics] = None
    if compare is not None:
        first, second = compare
        comparison = between_set_statistics(
            raw, resolved.get(first, []), resolved.get(second, [])
        )
    return within, comparison
