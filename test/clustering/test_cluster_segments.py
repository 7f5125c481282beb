from clustermap.clustering.cutting import automatic_cut
from clustermap.clustering.linkage import build_dendrogram
from clustermap.clustering.ordering import leaf_order
from clustermap.clustering.segments import (
    ClusterSegment,
    build_segments,
    segments_for_groups,
)
from clustermap.elements.matrix import sanitize_matrix

LABELS = ["X", "Y", "Z", "W"]
IDENTITY = [0, 1, 2, 3]


def _bounds(segments):
    return [(s.start_index, s.end_index) for s in segments]


def test_contiguous_selection_yields_one_segment():
    segments = build_segments(IDENTITY, LABELS, {"clusterA": ["X", "Y"]})
    assert segments == [ClusterSegment("clusterA", 0, 1, ["X", "Y"])]


def test_scattered_selection_yields_one_segment_per_run():
    segments = build_segments(IDENTITY, LABELS, {"clusterA": ["X", "Z"]})
    assert _bounds(segments) == [(0, 0), (2, 2)]
    assert [s.members for s in segments] == [["X"], ["Z"]]


def test_run_reaching_the_end_is_closed():
    segments = build_segments(IDENTITY, LABELS, {"clusterA": ["Z", "W"]})
    assert _bounds(segments) == [(2, 3)]
    assert len(segments[0]) == 2


def test_segments_follow_the_ordering():
    segments = build_segments([2, 0, 1], ["A", "B", "C"], {"c": ["A", "B"]})
    assert _bounds(segments) == [(1, 2)]
    assert segments[0].members == ["A", "B"]


def test_clusters_emitted_in_mapping_order():
    segments = build_segments(
        IDENTITY,
        LABELS,
        {"clusterB": ["W"], "clusterA": ["X", "Y", "Nowhere"], "empty": []},
    )
    assert [s.cluster_id for s in segments] == ["clusterB", "clusterA"]
    assert _bounds(segments) == [(3, 3), (0, 1)]


def test_segments_for_cut_groups(two_bloc_dataset):
    dendrogram = build_dendrogram(sanitize_matrix(two_bloc_dataset["distance_matrix"]))
    ordering = leaf_order(dendrogram)
    labels = two_bloc_dataset["countries"]
    groups = automatic_cut(dendrogram, ordering, labels)

    segments = segments_for_groups(ordering, labels, groups)
    assert _bounds(segments) == [(0, 1), (2, 3)]
    assert [s.cluster_id for s in segments] == ["cluster-1", "cluster-2"]


def test_segment_to_dict():
    segment = ClusterSegment("clusterA", 2, 4, ["a", "b", "c"])
    assert segment.to_dict() == {
        "clusterId": "clusterA",
        "startIndex": 2,
        "endIndex": 4,
        "members": ["a", "b", "c"],
    }
