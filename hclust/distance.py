"""Observation validation and pairwise distance computation."""

from typing import Any, List, Tuple, Union

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist, squareform

from .core.errors import InvalidInput
from .core.options import Metric
from .core.registry import get_registry
from .core.types import DistanceMatrix


metrics = get_registry("metrics")


def _scipy_metric(name: str):
    def compute(X: np.ndarray) -> np.ndarray:
        return pdist(X, metric=name)
    compute.__name__ = f"{name}_distances"
    return compute


for _metric in Metric:
    metrics.register(_metric, _scipy_metric(_metric.value))


def validate_observations(observations) -> Tuple[np.ndarray, List[Any]]:
    """
    Convert observations to a float matrix and collect their labels.

    Args:
        observations: DataFrame (index gives labels), 2D array, or sequence
            of equal-length rows.

    Returns:
        Tuple of (X, labels) with X of shape (n, d).

    Raises:
        InvalidInput: Empty set, no features, ragged rows, non-numeric or
            non-finite values.
    """
    if isinstance(observations, pd.DataFrame):
        labels = list(observations.index)
        non_numeric = [
            c for c in observations.columns
            if not (pd.api.types.is_numeric_dtype(observations[c])
                    or pd.api.types.is_bool_dtype(observations[c]))
        ]
        if non_numeric:
            raise InvalidInput(f"Non-numeric feature columns: {non_numeric}")
        X = observations.to_numpy(dtype=float)
    else:
        if isinstance(observations, np.ndarray):
            rows = observations
        else:
            rows = list(observations)
            lengths = {len(np.atleast_1d(r)) for r in rows}
            if len(lengths) > 1:
                raise InvalidInput(
                    f"Feature vectors have mismatched dimensionality: {sorted(lengths)}"
                )
        try:
            raw = np.asarray(rows)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Observations must be numeric: {e}") from e
        if raw.dtype.kind in "US" or (
            raw.dtype.kind == "O" and any(isinstance(v, (str, bytes)) for v in raw.ravel())
        ):
            raise InvalidInput("Observations must be numeric, got strings")
        try:
            X = raw.astype(float)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Observations must be numeric: {e}") from e
        if X.ndim == 0:
            raise InvalidInput("Observations must be a table, got a scalar")
        if X.shape[0] == 0:
            raise InvalidInput("Observation set is empty")
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        labels = list(range(X.shape[0]))

    if X.ndim != 2:
        raise InvalidInput(f"Observations must form a 2D table, got shape {X.shape}")
    if X.shape[0] == 0:
        raise InvalidInput("Observation set is empty")
    if X.shape[1] == 0:
        raise InvalidInput("Observations have no features")

    bad = ~np.isfinite(X)
    if bad.any():
        rows_bad = sorted(set(np.nonzero(bad)[0].tolist()))
        raise InvalidInput(
            f"Non-finite feature values in observations {[labels[i] for i in rows_bad[:10]]}"
        )

    return X, labels


def compute_distance_matrix(
    observations,
    metric: Union[str, Metric] = Metric.EUCLIDEAN,
) -> DistanceMatrix:
    """
    Compute the n x n pairwise distance matrix.

    Args:
        observations: DataFrame, 2D array, or sequence of equal-length rows.
        metric: Metric name or ``Metric`` member.

    Returns:
        Read-only DistanceMatrix.

    Raises:
        UnsupportedMetric: Unknown metric name.
        InvalidInput: Malformed observations, or the metric produced a
            non-finite distance (e.g. cosine on an all-zero vector).
    """
    metric = Metric.parse(metric)
    X, labels = validate_observations(observations)

    if X.shape[0] == 1:
        return DistanceMatrix(np.zeros((1, 1)), metric=metric, labels=labels)

    if metric is Metric.COSINE:
        zero_rows = np.nonzero(~np.any(X != 0, axis=1))[0]
        if zero_rows.size:
            raise InvalidInput(
                f"Metric 'cosine' produced non-finite distances: zero vectors at "
                f"{[labels[i] for i in zero_rows[:10]]}"
            )

    condensed = metrics.get(metric)(X)
    if not np.all(np.isfinite(condensed)):
        raise InvalidInput(
            f"Metric '{metric.value}' produced non-finite distances for these observations"
        )

    values = squareform(np.maximum(condensed, 0.0), checks=False)
    return DistanceMatrix(values, metric=metric, labels=labels)


def as_distance_matrix(distances, labels=None, atol: float = 1e-9) -> DistanceMatrix:
    """
    Validate a caller-supplied square matrix.

    Asymmetry and diagonal noise within ``atol`` are cleaned up before the
    matrix is checked.

    Raises:
        InvalidInput: Not square, not symmetric, non-zero diagonal, negative
            or non-finite entries, or empty.
    """
    if isinstance(distances, DistanceMatrix):
        return distances

    if isinstance(distances, pd.DataFrame):
        if labels is None:
            labels = list(distances.index)
        distances = distances.to_numpy()

    try:
        D = np.array(distances, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Distance matrix must be numeric: {e}") from e

    if D.ndim == 2 and D.shape[0] == D.shape[1] and np.all(np.isfinite(D)):
        if np.allclose(D, D.T, atol=atol):
            D = (D + D.T) / 2.0
        if np.all(np.abs(np.diag(D)) <= atol):
            np.fill_diagonal(D, 0.0)

    return DistanceMatrix(D, metric=None, labels=labels)
