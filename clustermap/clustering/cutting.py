"""
Flat clusters from a dendrogram.

Two modes produce the same output type:

- automatic: pick the merge distance at a fixed percentile as threshold and
  split every node whose merge distance exceeds it,
- manual: resolve caller-supplied label groups against the entity labels,
  bypassing the tree entirely.

Groups are reported in ordering space and sorted by their first position.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from clustermap.config import DEFAULT_CUT_PERCENTILE, DEFAULT_MIN_CLUSTER_SIZE
from clustermap.clustering.ordering import inverse_order
from clustermap.elements.dendrogram import ClusterTreeNode, Dendrogram, MergeEvent
from clustermap.logger import cm_logger, format_set

# A manual group is either a bare list of labels or {"name": ..., "countries": [...]}
ManualGroup = Union[Sequence[str], Mapping[str, Any]]
ManualClusterOverride = Mapping[str, Sequence[ManualGroup]]


@dataclass
class ClusterGroup:
    """A flat cluster; ``indices`` are ascending ordering-space positions."""

    cluster_id: str
    indices: List[int]
    labels: List[str]
    original_indices: List[int] = field(default_factory=list)
    name: Optional[str] = None

    def __len__(self) -> int:
        return len(self.indices)

    @property
    def first_index(self) -> int:
        return self.indices[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clusterId": self.cluster_id,
            "indices": list(self.indices),
            "labels": list(self.labels),
            "originalIndices": list(self.original_indices),
            "name": self.name,
        }


def cut_threshold(
    merges: Sequence[MergeEvent], percentile: float = DEFAULT_CUT_PERCENTILE
) -> Optional[float]:
    """
    Merge distance at ``percentile`` of the ascending merge distances.

    The index is ``floor(m * percentile)`` clamped to ``m - 1``; None when there
    were no merges.
    """
    if not merges:
        return None
    distances = sorted(merge.distance for merge in merges)
    index = min(len(distances) - 1, int(math.floor(len(distances) * percentile)))
    return distances[index]


def _split_at_threshold(dendrogram: Dendrogram, threshold: float) -> List[ClusterTreeNode]:
    """Maximal subtrees whose merge distance does not exceed ``threshold``."""
    root = dendrogram.root
    if root is None:
        return []
    kept: List[ClusterTreeNode] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if not node.is_leaf() and node.distance > threshold:
            left, right = dendrogram.children(node)
            stack.append(right)
            stack.append(left)
        else:
            kept.append(node)
    return kept


def _make_groups(
    members: Iterable[Sequence[int]],
    ordering: Sequence[int],
    labels: Sequence[str],
    names: Optional[Sequence[Optional[str]]] = None,
) -> List[ClusterGroup]:
    positions = inverse_order(ordering)
    pending = []
    for k, original in enumerate(members):
        ordered_positions = sorted(positions[index] for index in original)
        name = names[k] if names is not None else None
        pending.append((ordered_positions, name))

    pending.sort(key=lambda item: item[0][0])

    # Ids key segments and statistics, so they must be unique. Explicit names
    # win over generated ids; repeats get a numeric suffix.
    reserved = {name for _, name in pending if name}
    used: Set[str] = set()
    groups: List[ClusterGroup] = []
    for rank, (ordered_positions, name) in enumerate(pending, start=1):
        original_indices = [ordering[position] for position in ordered_positions]
        base = name if name else f"cluster-{rank}"
        cluster_id = base
        suffix = 2
        while cluster_id in used or (not name and cluster_id in reserved):
            cluster_id = f"{base}-{suffix}"
            suffix += 1
        used.add(cluster_id)
        groups.append(
            ClusterGroup(
                cluster_id=cluster_id,
                indices=ordered_positions,
                labels=[labels[index] for index in original_indices],
                original_indices=original_indices,
                name=name or None,
            )
        )
    return groups


def automatic_cut(
    dendrogram: Dendrogram,
    ordering: Sequence[int],
    labels: Sequence[str],
    percentile: float = DEFAULT_CUT_PERCENTILE,
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
) -> List[ClusterGroup]:
    threshold = cut_threshold(dendrogram.merges, percentile)
    if threshold is None:
        return []

    subtrees = [
        node
        for node in _split_at_threshold(dendrogram, threshold)
        if len(node.indices) >= min_cluster_size
    ]
    groups = _make_groups([node.indices for node in subtrees], ordering, labels)

    if not cm_logger.disabled:
        cm_logger.section("Automatic dendrogram cut")
        cm_logger.result("Percentile", percentile)
        cm_logger.result("Threshold", f"{threshold:.4f}")
        cm_logger.subsection(f"{len(groups)} cluster(s)")
        for group in groups:
            cm_logger.info(f"{group.cluster_id}: {format_set(group.labels)}")
    return groups


def _group_name_and_labels(group: ManualGroup) -> Tuple[Optional[str], List[str]]:
    if isinstance(group, str):
        return None, [group]
    if isinstance(group, Mapping):
        members = group.get("countries", group.get("members", []))
        if isinstance(members, str):
            members = [members]
        return group.get("name"), list(members)
    return None, list(group)


def manual_cut(
    groups: Sequence[ManualGroup],
    ordering: Sequence[int],
    labels: Sequence[str],
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
) -> List[ClusterGroup]:
    """
    Resolve explicit label groups to cluster groups.

    Unknown labels are dropped silently, repeated labels count once and groups
    left with fewer than ``min_cluster_size`` members are excluded.
    """
    label_index: Dict[str, int] = {}
    for index, label in enumerate(labels):
        label_index.setdefault(label, index)

    resolved_members: List[List[int]] = []
    names: List[Optional[str]] = []
    for group in groups:
        name, group_labels = _group_name_and_labels(group)
        resolved: List[int] = []
        for label in group_labels:
            index = label_index.get(label)
            if index is not None and index not in resolved:
                resolved.append(index)
        if len(resolved) < min_cluster_size:
            if not cm_logger.disabled:
                cm_logger.warning(
                    f"Skipping manual group {name or group_labels!r}: "
                    f"{len(resolved)} resolvable member(s)"
                )
            continue
        resolved_members.append(resolved)
        names.append(name)

    return _make_groups(resolved_members, ordering, labels, names)


def cut_dendrogram(
    dendrogram: Dendrogram,
    ordering: Sequence[int],
    labels: Sequence[str],
    manual_overrides: Optional[ManualClusterOverride] = None,
    domain_key: Optional[str] = None,
    percentile: float = DEFAULT_CUT_PERCENTILE,
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
) -> List[ClusterGroup]:
    """Manual cut when ``manual_overrides`` has an entry for ``domain_key``, automatic otherwise."""
    if manual_overrides is not None and domain_key is not None:
        groups = manual_overrides.get(domain_key)
        if groups is not None:
            return manual_cut(groups, ordering, labels, min_cluster_size)
    return automatic_cut(dendrogram, ordering, labels, percentile, min_cluster_size)
