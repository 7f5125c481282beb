from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from clustermap.clustering.cutting import ClusterGroup


@dataclass
class ClusterSegment:
    """A contiguous run of one cluster's members in ordering space (inclusive bounds)."""

    cluster_id: str
    start_index: int
    end_index: int
    members: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return self.end_index - self.start_index + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clusterId": self.cluster_id,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "members": list(self.members),
        }


def build_segments(
    ordering: Sequence[int],
    labels: Sequence[str],
    selections: Mapping[str, Iterable[str]],
) -> List[ClusterSegment]:
    """
    Contiguous runs of each selection along the ordered label sequence.

    Selections are processed in mapping order; a selection whose members are
    scattered yields one segment per run. Labels absent from ``labels`` and
    empty selections contribute nothing.
    """
    row_labels = [labels[index] for index in ordering]
    segments: List[ClusterSegment] = []

    for cluster_id, selection in selections.items():
        selection_set = set(selection)
        if not selection_set:
            continue

        start: Optional[int] = None
        members: List[str] = []
        for position, label in enumerate(row_labels):
            if label in selection_set:
                if start is None:
                    start = position
                    members = [label]
                else:
                    members.append(label)
            elif start is not None:
                segments.append(ClusterSegment(cluster_id, start, position - 1, members))
                start = None
                members = []

        if start is not None:
            segments.append(
                ClusterSegment(cluster_id, start, len(row_labels) - 1, members)
            )

    return segments


def segments_for_groups(
    ordering: Sequence[int],
    labels: Sequence[str],
    groups: Sequence[ClusterGroup],
) -> List[ClusterSegment]:
    """Segments for cut-derived groups, one selection per group id."""
    return build_segments(
        ordering, labels, {group.cluster_id: group.labels for group in groups}
    )
