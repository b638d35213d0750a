"""Tests for dendrogram construction."""

import numpy as np
import pytest
from scipy.cluster.hierarchy import leaves_list, linkage as scipy_linkage

from hclust import (
    Dendrogram,
    DistanceMatrix,
    HACClusterer,
    InvalidInput,
    Linkage,
    Metric,
    MergeRecord,
    UnsupportedLinkage,
    UnsupportedMetric,
    as_distance_matrix,
    build_dendrogram,
    compute_distance_matrix,
)


MONOTONIC = ["single", "complete", "average", "weighted", "ward"]


def test_four_points_complete_linkage():
    """[1, 2, 6, 7]: the tie at distance 1 goes to the lowest id pair."""
    d = build_dendrogram([1, 2, 6, 7], "euclidean", "complete")

    assert d.merges == [
        MergeRecord(0, 1, 1.0, 2),
        MergeRecord(2, 3, 1.0, 2),
        MergeRecord(4, 5, 6.0, 4),
    ]
    assert d.leaf_order == [0, 1, 2, 3]
    assert d.metric is Metric.EUCLIDEAN
    assert d.linkage is Linkage.COMPLETE


def test_tie_break_uses_cluster_ids_not_positions():
    """Points 0 and 2 are closest together with 1 and 3; (0, 2) wins the tie."""
    d = build_dendrogram([[0.0], [10.0], [1.0], [11.0]], "euclidean", "complete")

    assert [(m.left, m.right) for m in d.merges] == [(0, 2), (1, 3), (4, 5)]
    assert d.merges[2].distance == pytest.approx(11.0)
    assert d.leaf_order == [0, 2, 1, 3]


def test_tie_break_prefers_merged_cluster_by_id():
    """Equidistant chain: (0, 1) first, then the new cluster 3 absorbs 2."""
    d = build_dendrogram([0.0, 1.0, 2.0], "euclidean", "single")
    assert [(m.left, m.right, m.distance) for m in d.merges] == [(0, 1, 1.0), (2, 3, 1.0)]


def test_binary_infection_table(infections):
    features = infections.drop(columns=["group"])
    d = build_dendrogram(features, "euclidean", "complete")

    assert [(m.left, m.right, m.distance, m.size) for m in d.merges] == [
        (0, 1, 0.0, 2),
        (2, 5, 0.0, 2),
        (3, 7, 1.0, 3),
        (4, 6, 1.0, 3),
        (8, 9, 2.0, 6),
    ]
    assert d.leaf_order == [3, 2, 5, 4, 0, 1]
    assert d.labels == ["p1", "p2", "p3", "p4", "p5", "p6"]


@pytest.mark.parametrize("method", [l.value for l in Linkage])
def test_structure(method, random_points):
    """n-1 merges, root holds everything, every id merged exactly once."""
    d = build_dendrogram(random_points, "euclidean", method)
    n = len(random_points)

    assert len(d.merges) == n - 1
    assert d.merges[-1].size == n
    assert d.n_observations == n

    merged = [c for m in d.merges for c in (m.left, m.right)]
    assert len(merged) == len(set(merged))
    assert set(merged) == set(range(2 * n - 2))
    for step, m in enumerate(d.merges):
        assert m.left < m.right < n + step

    assert sorted(d.leaf_order) == list(range(n))


@pytest.mark.parametrize("method", MONOTONIC)
def test_monotonic_heights(method):
    rng = np.random.default_rng(3)
    for _ in range(5):
        d = build_dendrogram(rng.normal(size=(20, 4)), "euclidean", method)
        assert d.is_monotonic()
        assert np.all(np.diff(d.heights) >= 0)


@pytest.mark.parametrize("method", MONOTONIC)
def test_matches_scipy_linkage(method, random_points):
    """On tie-free data the merge sequence equals SciPy's linkage matrix."""
    d = build_dendrogram(random_points, "euclidean", method)
    expected = scipy_linkage(random_points, method=method, metric="euclidean")

    assert np.allclose(d.to_linkage_matrix(), expected)


@pytest.mark.parametrize("method", ["centroid", "median"])
def test_geometric_heights_match_scipy(method, random_points):
    d = build_dendrogram(random_points, "euclidean", method)
    expected = scipy_linkage(random_points, method=method, metric="euclidean")

    assert np.allclose(np.sort(d.heights), np.sort(expected[:, 2]))


@pytest.mark.parametrize("method", ["centroid", "median"])
def test_inversions_recorded_faithfully(method):
    """Merging 0 and 1 moves the centroid closer to 2 than they were apart."""
    d = build_dendrogram([[0.0, 0.0], [1.0, 0.0], [0.5, 0.9]], "euclidean", method)

    assert (d.merges[0].left, d.merges[0].right) == (0, 1)
    assert d.merges[0].distance == pytest.approx(1.0)
    assert d.merges[1].distance == pytest.approx(0.9)
    assert not d.is_monotonic()


def test_leaf_order_matches_scipy_leaves_list(random_points):
    d = build_dendrogram(random_points, "euclidean", "average")
    assert d.leaf_order == leaves_list(d.to_linkage_matrix()).tolist()


def test_deterministic(infections):
    features = infections.drop(columns=["group"])
    first = build_dendrogram(features, "euclidean", "average")
    second = build_dendrogram(features, "euclidean", "average")

    assert first.merges == second.merges
    assert first.leaf_order == second.leaf_order


def test_precomputed_distance_matrix():
    dm = as_distance_matrix(
        [[0, 2, 6, 10],
         [2, 0, 5, 9],
         [6, 5, 0, 4],
         [10, 9, 4, 0]],
        labels=["a", "b", "c", "d"],
    )
    d = build_dendrogram(dm, linkage="single")

    assert [(m.left, m.right, m.distance) for m in d.merges] == [
        (0, 1, 2.0), (2, 3, 4.0), (4, 5, 5.0),
    ]
    assert d.labels == ["a", "b", "c", "d"]
    assert d.metric is None


def test_distance_matrix_metric_wins():
    dm = compute_distance_matrix([[0.0, 0.0], [1.0, 1.0], [3.0, 0.0]], "cityblock")
    d = build_dendrogram(dm, "euclidean", "average")
    assert d.metric is Metric.CITYBLOCK
    assert d.merges[0].distance == pytest.approx(2.0)


def test_single_observation():
    d = build_dendrogram([[1.0, 2.0]])
    assert d.merges == []
    assert d.leaf_order == [0]
    assert d.n_observations == 1


def test_input_errors_fail_before_merging():
    with pytest.raises(InvalidInput):
        build_dendrogram([])
    with pytest.raises(InvalidInput):
        build_dendrogram([[1.0, 2.0], [1.0]])
    with pytest.raises(InvalidInput):
        build_dendrogram([[1.0], [np.nan]])


def test_malformed_distance_matrix_fails_before_merging():
    """A negative or asymmetric matrix never reaches the merge loop."""
    with pytest.raises(InvalidInput, match="negative"):
        build_dendrogram(DistanceMatrix([[0, -1], [-1, 0]]), linkage="single")
    with pytest.raises(InvalidInput, match="symmetric"):
        build_dendrogram(DistanceMatrix([[0, 1, 9], [5, 0, 2], [9, 7, 0]]))


def test_heights_are_non_negative_and_sizes_add_up(random_points):
    for linkage in ["single", "complete", "average", "weighted", "centroid", "median", "ward"]:
        d = build_dendrogram(random_points, "euclidean", linkage)
        assert np.all(d.heights >= 0)
        assert d.merges[-1].size == len(random_points)
        rebuilt = Dendrogram.from_linkage_matrix(d.to_linkage_matrix())
        assert rebuilt.merges == d.merges


def test_option_errors():
    with pytest.raises(UnsupportedMetric):
        build_dendrogram([1, 2], metric="levenshtein")
    with pytest.raises(UnsupportedLinkage):
        build_dendrogram([1, 2], linkage="mean")
    with pytest.raises(UnsupportedLinkage, match="euclidean"):
        HACClusterer(metric="cityblock", linkage="ward")


def test_linkage_matrix_roundtrip_and_validation(random_points):
    d = build_dendrogram(random_points, "euclidean", "complete")
    rebuilt = Dendrogram.from_linkage_matrix(d.to_linkage_matrix())
    assert rebuilt.merges == d.merges
    assert rebuilt.leaf_order == d.leaf_order

    with pytest.raises(InvalidInput, match="merged twice"):
        Dendrogram.from_linkage_matrix([[0, 1, 1.0, 2], [0, 2, 2.0, 2]])
    with pytest.raises(InvalidInput, match="does not exist"):
        Dendrogram.from_linkage_matrix([[0, 5, 1.0, 2], [2, 3, 2.0, 3]])
    with pytest.raises(InvalidInput, match="size"):
        Dendrogram.from_linkage_matrix([[0, 1, 1.0, 3], [2, 3, 2.0, 4]])


def test_to_frame(infections):
    d = build_dendrogram(infections.drop(columns=["group"]), "euclidean", "complete")
    frame = d.to_frame()

    assert list(frame.columns) == ["step", "cluster", "left", "right", "distance", "size"]
    assert frame["cluster"].tolist() == [6, 7, 8, 9, 10]
    assert frame["size"].iloc[-1] == 6


def test_clusterer_fit_and_cluster(infections):
    features = infections.drop(columns=["group"])
    clusterer = HACClusterer(metric="hamming", linkage="average", n_clusters=2)

    partition = clusterer.cluster(features)

    assert clusterer.dendrogram_ is not None
    assert clusterer.name == "hac_average"
    assert partition.n_clusters == 2
    assert partition.labels.tolist() == [0, 0, 1, 1, 0, 1]


def test_to_dict_is_plain_data():
    d = build_dendrogram([1, 2, 6, 7], "euclidean", "complete")
    data = d.to_dict()

    assert data["n_observations"] == 4
    assert data["metric"] == "euclidean"
    assert data["linkage"] == "complete"
    assert data["merges"][2] == {"left": 4, "right": 5, "distance": 6.0, "size": 4}
    assert data["leaf_order"] == [0, 1, 2, 3]
