"""Tests for observation validation and distance matrices."""

import numpy as np
import pandas as pd
import pytest
from scipy.spatial.distance import cdist

from hclust import (
    DistanceMatrix,
    InvalidInput,
    Metric,
    UnsupportedMetric,
    as_distance_matrix,
    compute_distance_matrix,
)


def test_euclidean_matches_definition():
    X = np.array([[0.0, 0.0], [3.0, 4.0], [1.0, 1.0]])
    dm = compute_distance_matrix(X, "euclidean")

    assert dm.n == 3
    assert dm.metric is Metric.EUCLIDEAN
    assert dm[0, 1] == pytest.approx(5.0)
    assert dm[0, 2] == pytest.approx(np.sqrt(2))


@pytest.mark.parametrize("metric", [m.value for m in Metric])
def test_matrix_symmetric_zero_diagonal(metric, random_points):
    """Every metric yields a symmetric, zero-diagonal, non-negative matrix."""
    X = np.abs(random_points) + 0.1
    if metric in ("hamming", "jaccard"):
        X = (random_points > 0).astype(float)
        X[:, 0] = 1.0  # no all-zero rows
    dm = compute_distance_matrix(X, metric)
    D = dm.values

    assert np.array_equal(D, D.T)
    assert np.all(np.diag(D) == 0)
    assert np.all(D >= 0)


def test_matches_scipy_cdist(random_points):
    dm = compute_distance_matrix(random_points, Metric.CITYBLOCK)
    expected = cdist(random_points, random_points, metric="cityblock")
    assert np.allclose(dm.values, expected)


def test_matrix_is_read_only():
    dm = compute_distance_matrix([[0.0], [1.0]])
    with pytest.raises(ValueError):
        dm.values[0, 1] = 5.0


def test_dataframe_labels_kept(infections):
    features = infections.drop(columns=["group"])
    dm = compute_distance_matrix(features, "hamming")

    assert dm.labels == ["p1", "p2", "p3", "p4", "p5", "p6"]
    assert dm[0, 1] == 0.0
    assert dm[0, 2] == pytest.approx(1.0)


def test_one_dimensional_input_is_column():
    dm = compute_distance_matrix([1, 2, 6, 7])
    assert dm.n == 4
    assert dm[0, 3] == pytest.approx(6.0)


def test_single_observation():
    dm = compute_distance_matrix([[1.0, 2.0]])
    assert dm.values.shape == (1, 1)
    assert dm[0, 0] == 0.0


def test_manhattan_alias():
    assert Metric.parse("Manhattan") is Metric.CITYBLOCK


@pytest.mark.parametrize(
    "observations",
    [
        [],
        np.empty((0, 3)),
        [[1.0, 2.0], [3.0]],
        [[1.0, np.nan], [0.0, 1.0]],
        [[1.0, np.inf], [0.0, 1.0]],
        [["a", "b"], ["c", "d"]],
        [["1", "2"], ["3", "4"]],
        np.array([["1.5", "2"], ["3", "4"]]),
        np.empty((3, 0)),
    ],
)
def test_invalid_observations(observations):
    with pytest.raises(InvalidInput):
        compute_distance_matrix(observations)


def test_non_numeric_column_rejected(infections):
    with pytest.raises(InvalidInput, match="group"):
        compute_distance_matrix(infections)


def test_cosine_zero_vector_rejected():
    with pytest.raises(InvalidInput, match="non-finite"):
        compute_distance_matrix([[0.0, 0.0], [1.0, 1.0]], "cosine")


def test_unknown_metric():
    with pytest.raises(UnsupportedMetric):
        compute_distance_matrix([[0.0], [1.0]], "mahalanobis-ish")
    with pytest.raises(KeyError):
        Metric.parse("nope")


def test_as_distance_matrix_validates():
    good = as_distance_matrix([[0, 1], [1, 0]], labels=["a", "b"])
    assert good.labels == ["a", "b"]
    assert good.metric is None

    with pytest.raises(InvalidInput, match="symmetric"):
        as_distance_matrix([[0, 1], [2, 0]])
    with pytest.raises(InvalidInput, match="diagonal"):
        as_distance_matrix([[1, 1], [1, 0]])
    with pytest.raises(InvalidInput, match="negative"):
        as_distance_matrix([[0, -1], [-1, 0]])
    with pytest.raises(InvalidInput, match="square"):
        as_distance_matrix([[0, 1, 2], [1, 0, 3]])
    with pytest.raises(InvalidInput, match="non-finite"):
        as_distance_matrix([[0, np.nan], [np.nan, 0]])


def test_as_distance_matrix_from_frame():
    frame = pd.DataFrame([[0, 2], [2, 0]], index=["x", "y"], columns=["x", "y"])
    dm = as_distance_matrix(frame)
    assert dm.labels == ["x", "y"]
    assert dm[0, 1] == 2.0


@pytest.mark.parametrize(
    "values, fragment",
    [
        ([[0, -1], [-1, 0]], "negative"),
        ([[0, 1, 9], [5, 0, 2], [9, 7, 0]], "symmetric"),
        ([[0, 1, 2], [1, 0, 3]], "square"),
        ([[0.5, 1], [1, 0]], "diagonal"),
        (np.empty((0, 0)), "empty"),
    ],
)
def test_distance_matrix_constructor_validates(values, fragment):
    """Direct construction enforces the same rules as as_distance_matrix."""
    with pytest.raises(InvalidInput, match=fragment):
        DistanceMatrix(values)


def test_distance_matrix_averages_rounding_noise():
    dm = DistanceMatrix([[0.0, 1.0], [1.0 + 1e-12, 0.0]])
    assert np.array_equal(dm.values, dm.values.T)


def test_numeric_strings_rejected():
    with pytest.raises(InvalidInput, match="strings"):
        compute_distance_matrix([["1", "2"], ["3", "4"]])
