import numpy as np
import pytest

from clustermap.clustering.linkage import (
    AgglomerativeClusterer,
    average_linkage_distance,
    build_dendrogram,
)
from clustermap.clustering.ordering import leaf_order
from clustermap.elements.dendrogram import MergeEvent
from clustermap.elements.matrix import sanitize_matrix


def _random_symmetric(n: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    values = rng.random((n, n))
    matrix = (values + values.T) / 2
    np.fill_diagonal(matrix, 0.0)
    return matrix


def test_empty_input_has_no_tree():
    dendrogram = build_dendrogram(sanitize_matrix([]))
    assert dendrogram.root is None
    assert dendrogram.merges == []


def test_single_entity_is_a_lone_leaf():
    dendrogram = build_dendrogram(sanitize_matrix([[0.0]]))
    assert dendrogram.root.is_leaf()
    assert dendrogram.root.indices == (0,)
    assert dendrogram.merges == []


@pytest.mark.parametrize("n", [2, 3, 5, 8, 13])
def test_exactly_n_minus_one_merges(n):
    dendrogram = build_dendrogram(sanitize_matrix(_random_symmetric(n, seed=n)))
    assert len(dendrogram.merges) == n - 1
    assert sorted(dendrogram.root.indices) == list(range(n))


def test_singleton_linkage_equals_matrix_entry():
    sanitized = sanitize_matrix(_random_symmetric(4, seed=7))
    for i in range(4):
        for j in range(4):
            if i != j:
                assert average_linkage_distance([i], [j], sanitized) == sanitized[i, j]


def test_linkage_is_mean_over_cross_pairs():
    sanitized = sanitize_matrix(
        [
            [0.0, 0.1, 0.4, 0.6],
            [0.1, 0.0, 0.2, 0.8],
            [0.4, 0.2, 0.0, 0.3],
            [0.6, 0.8, 0.3, 0.0],
        ]
    )
    distance = average_linkage_distance([0, 1], [2, 3], sanitized)
    assert distance == pytest.approx((0.4 + 0.6 + 0.2 + 0.8) / 4)


def test_empty_side_falls_back_to_sentinel():
    sanitized = sanitize_matrix([[0.0, 0.2], [0.2, 0.0]])
    assert average_linkage_distance([], [1], sanitized) == 1.0
    assert average_linkage_distance([0], [], sanitized, sentinel_distance=0.7) == 0.7


def test_two_blocs_merge_within_before_across(two_bloc_dataset):
    dendrogram = build_dendrogram(sanitize_matrix(two_bloc_dataset["distance_matrix"]))

    assert dendrogram.merges[0] == MergeEvent(distance=0.1, left_size=1, right_size=1)
    assert dendrogram.merges[1] == MergeEvent(distance=0.1, left_size=1, right_size=1)
    assert dendrogram.merges[2].distance == pytest.approx(0.9)
    assert (dendrogram.merges[2].left_size, dendrogram.merges[2].right_size) == (2, 2)


def test_ties_resolve_to_first_pair_and_merged_node_is_appended():
    # All pairs tie: (0, 1) merges first, then leaf 2 sits before the merged
    # node in the active list and becomes the left child of the root.
    sanitized = sanitize_matrix(
        [[0.0, 0.5, 0.5], [0.5, 0.0, 0.5], [0.5, 0.5, 0.0]]
    )
    dendrogram = build_dendrogram(sanitized)

    assert dendrogram.merges == [
        MergeEvent(distance=0.5, left_size=1, right_size=1),
        MergeEvent(distance=0.5, left_size=1, right_size=2),
    ]
    assert dendrogram.root.indices == (2, 0, 1)
    assert leaf_order(dendrogram) == [2, 0, 1]


def test_missing_entries_cluster_with_sentinel_distance():
    # A-B unknown (sentinel 1.0) so A joins C first
    clusterer = AgglomerativeClusterer()
    dendrogram = clusterer.fit(
        [[0.0, None, 0.2], [None, 0.0, 0.5], [0.2, 0.5, 0.0]]
    )
    assert dendrogram.node(3).indices == (0, 2)
    assert dendrogram.merges[1].distance == pytest.approx((1.0 + 0.5) / 2)


def test_custom_sentinel_changes_merge_order():
    matrix = [[0.0, None, 0.2], [None, 0.0, 0.5], [0.2, 0.5, 0.0]]
    dendrogram = AgglomerativeClusterer(sentinel_distance=0.0).fit(matrix)
    assert dendrogram.node(3).indices == (0, 1)


def test_clustering_is_deterministic():
    matrix = _random_symmetric(12, seed=3)
    first = build_dendrogram(sanitize_matrix(matrix))
    second = build_dendrogram(sanitize_matrix(matrix))
    assert first.nodes == second.nodes
    assert first.merges == second.merges
