from typing import Iterable, List, Sequence, Set

from clustermap.elements.dendrogram import Dendrogram


def leaf_order(dendrogram: Dendrogram) -> List[int]:
    """
    In-order leaf traversal: left subtree before right subtree, with "left"
    being the first argument of the merge that created the node.

    Leaves below any internal node come out contiguous. Implemented with an
    explicit stack so chained trees of a few hundred leaves are safe.
    """
    root = dendrogram.root
    if root is None:
        return []

    order: List[int] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf():
            order.append(node.indices[0])
            continue
        left, right = dendrogram.children(node)
        # Right is pushed first so left is visited first
        stack.append(right)
        stack.append(left)
    return order


def inverse_order(ordering: Sequence[int]) -> List[int]:
    """Map original index -> ordering-space position."""
    positions = [0] * len(ordering)
    for position, index in enumerate(ordering):
        positions[index] = position
    return positions


def ordered_labels(ordering: Sequence[int], labels: Sequence[str]) -> List[str]:
    return [labels[index] for index in ordering]


def prioritize_order(
    ordering: Sequence[int],
    labels: Sequence[str],
    selections: Iterable[Iterable[str]],
) -> List[int]:
    """
    Move selected entities to the front of an ordering.

    Each selection (in the given order) contributes its members in their
    base-ordering sequence; an index already placed by an earlier selection
    is not repeated. Unselected indices follow in base order.
    """
    included: Set[int] = set()
    prioritized: List[int] = []

    for selection in selections:
        selection_set = set(selection)
        if not selection_set:
            continue
        for index in ordering:
            if index in included:
                continue
            if labels[index] in selection_set:
                included.add(index)
                prioritized.append(index)

    for index in ordering:
        if index not in included:
            included.add(index)
            prioritized.append(index)
    return prioritized
