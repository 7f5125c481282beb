"""
Binary merge tree produced by agglomerative clustering.

Nodes live in a single list owned by the :class:`Dendrogram`; children are
referenced by their position in that list. Leaves occupy positions ``0..n-1``
(position == original entity index) and every merge appends one internal
node, so the root is always the last node.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class ClusterTreeNode:
    node_id: int
    indices: Tuple[int, ...]
    left: Optional[int] = None
    right: Optional[int] = None
    distance: float = 0.0

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __len__(self) -> int:
        return len(self.indices)

    def __repr__(self) -> str:
        if self.is_leaf():
            return f"ClusterTreeNode(leaf={self.indices[0]})"
        return (
            f"ClusterTreeNode(id={self.node_id}, size={len(self.indices)}, "
            f"distance={self.distance:.4f})"
        )


@dataclass(frozen=True)
class MergeEvent:
    """One merge step: its linkage distance and the leaf counts of both children."""

    distance: float
    left_size: int
    right_size: int


@dataclass
class Dendrogram:
    nodes: List[ClusterTreeNode] = field(default_factory=list)
    merges: List[MergeEvent] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Number of clustered entities (leaves)."""
        return len(self.nodes) - len(self.merges)

    @property
    def root(self) -> Optional[ClusterTreeNode]:
        if not self.nodes:
            return None
        return self.nodes[-1]

    def node(self, node_id: int) -> ClusterTreeNode:
        return self.nodes[node_id]

    def children(self, node: ClusterTreeNode) -> Tuple[ClusterTreeNode, ...]:
        if node.is_leaf():
            return ()
        # Internal nodes always carry both children
        return (self.nodes[node.left], self.nodes[node.right])  # type: ignore[index]

    def internal_nodes(self) -> Iterator[ClusterTreeNode]:
        """Internal nodes in creation (merge) order."""
        return iter(self.nodes[self.size :])

    def merge_distances(self) -> List[float]:
        return [merge.distance for merge in self.merges]

    def to_dict(self, labels: Optional[List[str]] = None) -> Optional[Dict[str, Any]]:
        """
        Nested dictionary view of the tree, built iteratively so deep (chained)
        trees do not hit the recursion limit.
        """
        root = self.root
        if root is None:
            return None

        def serialize(node: ClusterTreeNode) -> Dict[str, Any]:
            entry: Dict[str, Any] = {"indices": list(node.indices)}
            if node.is_leaf():
                if labels is not None:
                    entry["name"] = labels[node.indices[0]]
            else:
                entry["distance"] = node.distance
                entry["children"] = []
            return entry

        root_serialized = serialize(root)
        stack: List[Tuple[ClusterTreeNode, Dict[str, Any]]] = [(root, root_serialized)]
        while stack:
            node, serialized = stack.pop()
            for child in self.children(node):
                child_serialized = serialize(child)
                serialized["children"].append(child_serialized)
                stack.append((child, child_serialized))
        return root_serialized
