import math

import pytest

from clustermap.clustering.cutting import ClusterGroup
from clustermap.clustering.statistics import (
    UNAVAILABLE,
    between_set_statistics,
    group_statistics,
    resolve_indices,
    selection_statistics,
    within_set_statistics,
)

RAW = [
    [0.0, 0.2, None, 0.6],
    [0.2, 0.0, 0.4, 0.7],
    [None, 0.4, 0.0, float("nan")],
    [0.6, 0.7, float("nan"), 0.0],
]


@pytest.mark.parametrize("indices", [[], [1], [2, 2]])
def test_fewer_than_two_members_is_unavailable(indices):
    stats = within_set_statistics(RAW, indices)
    assert stats == UNAVAILABLE or (
        math.isnan(stats.average_distance) and stats.pair_count == 0
    )
    assert not stats.is_available


def test_all_invalid_pairs_is_unavailable():
    stats = within_set_statistics(RAW, [2, 3])
    assert not stats.is_available
    assert stats.pair_count == 0


def test_unknown_pairs_are_excluded_not_substituted():
    stats = within_set_statistics(RAW, [0, 1, 2])
    # (0, 2) is unknown; (0, 1) and (1, 2) remain
    assert stats.pair_count == 2
    assert stats.average_distance == pytest.approx(0.3)


def test_true_zero_average_is_distinguishable():
    stats = within_set_statistics([[0.0, 0.0], [0.0, 0.0]], [0, 1])
    assert stats.is_available
    assert stats.average_distance == 0.0
    assert stats.pair_count == 1


def test_between_sets():
    stats = between_set_statistics(RAW, [0, 1], [2, 3])
    # (0, 2) unknown; (0, 3)=0.6, (1, 2)=0.4, (1, 3)=0.7
    assert stats.pair_count == 3
    assert stats.average_distance == pytest.approx((0.6 + 0.4 + 0.7) / 3)


@pytest.mark.parametrize("a, b", [([], [1]), ([0], []), ([], [])])
def test_between_with_empty_side_is_unavailable(a, b):
    assert not between_set_statistics(RAW, a, b).is_available


def test_to_dict_uses_none_for_unavailable():
    assert UNAVAILABLE.to_dict() == {"averageDistance": None, "pairCount": 0}
    assert within_set_statistics(RAW, [0, 1]).to_dict() == {
        "averageDistance": 0.2,
        "pairCount": 1,
    }


def test_resolve_indices_skips_unknown_and_repeats():
    assert resolve_indices(["A", "B", "C"], ["C", "X", "A", "C"]) == [2, 0]


def test_group_statistics_two_blocs(two_bloc_dataset):
    matrix = two_bloc_dataset["distance_matrix"]
    groups = [
        ClusterGroup("west", [0, 1], ["A", "B"], [0, 1]),
        ClusterGroup("east", [2, 3], ["C", "D"], [2, 3]),
    ]
    within, between = group_statistics(matrix, groups)

    assert within["west"].average_distance == pytest.approx(0.1)
    assert within["east"].average_distance == pytest.approx(0.1)
    assert within["west"].pair_count == 1
    assert list(between) == [("west", "east")]
    assert between[("west", "east")].average_distance == pytest.approx(0.9)
    assert between[("west", "east")].pair_count == 4


def test_selection_statistics_by_label(two_bloc_dataset):
    within, comparison = selection_statistics(
        two_bloc_dataset["distance_matrix"],
        two_bloc_dataset["countries"],
        {"clusterA": ["A", "B", "Ghost"], "clusterB": ["D"]},
        compare=("clusterA", "clusterB"),
    )
    assert within["clusterA"].average_distance == pytest.approx(0.1)
    assert not within["clusterB"].is_available
    assert comparison.pair_count == 2
    assert comparison.average_distance == pytest.approx(0.9)


def test_selection_statistics_without_comparison(two_bloc_dataset):
    _, comparison = selection_statistics(
        two_bloc_dataset["distance_matrix"],
        two_bloc_dataset["countries"],
        {"clusterA": ["A", "B"]},
    )
    assert comparison is None
