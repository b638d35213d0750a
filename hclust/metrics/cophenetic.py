"""Cophenetic distances and correlation."""

import numpy as np

from ..core.types import Dendrogram, DistanceMatrix


def cophenetic_matrix(dendrogram: Dendrogram) -> np.ndarray:
    """
    Height at which each pair of observations first shares a cluster.

    Args:
        dendrogram: Dendrogram over n observations.

    Returns:
        (n, n) symmetric array with a zero diagonal.
    """
    n = dendrogram.n_observations
    C = np.zeros((n, n))
    members = {i: [i] for i in range(n)}

    for step, merge in enumerate(dendrogram.merges):
        left = members.pop(merge.left)
        right = members.pop(merge.right)
        C[np.ix_(left, right)] = merge.distance
        C[np.ix_(right, left)] = merge.distance
        members[n + step] = left + right

    return C


def cophenetic_correlation(dendrogram: Dendrogram, distances: DistanceMatrix) -> float:
    """
    Pearson correlation between cophenetic and original distances.

    Closer to 1 means the tree preserves the original pairwise distances
    better. Returns 0.0 when either side is constant (fewer than 3
    observations, or all distances equal).
    """
    n = dendrogram.n_observations
    if n < 3:
        return 0.0

    iu = np.triu_indices(n, k=1)
    coph = cophenetic_matrix(dendrogram)[iu]
    orig = distances.condensed()

    if np.std(coph) < 1e-12 or np.std(orig) < 1e-12:
        return 0.0

    return float(np.corrcoef(coph, orig)[0, 1])
