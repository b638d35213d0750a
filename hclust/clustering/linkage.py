"""
Lance-Williams distance updates.

Each rule computes the distance from the merged cluster (a + b) to every
remaining cluster k, vectorised over k:

    update(d_ak, d_bk, d_ab, size_a, size_b, size_k) -> d_(a+b)k

The geometric rules (centroid, median, ward) work on squared Euclidean
distances internally and return the square root, so merge heights stay in
the units of the input distances.
"""

import numpy as np

from ..core.options import Linkage
from ..core.registry import get_registry


linkages = get_registry("linkages")


@linkages.register(Linkage.SINGLE)
def single(d_ak, d_bk, d_ab, size_a, size_b, size_k):
    return np.minimum(d_ak, d_bk)


@linkages.register(Linkage.COMPLETE)
def complete(d_ak, d_bk, d_ab, size_a, size_b, size_k):
    return np.maximum(d_ak, d_bk)


@linkages.register(Linkage.AVERAGE)
def average(d_ak, d_bk, d_ab, size_a, size_b, size_k):
    """UPGMA: mean over all member pairs, so weighted by cluster size."""
    return (size_a * d_ak + size_b * d_bk) / (size_a + size_b)


@linkages.register(Linkage.WEIGHTED)
def weighted(d_ak, d_bk, d_ab, size_a, size_b, size_k):
    """WPGMA: both halves count equally regardless of size."""
    return (d_ak + d_bk) / 2.0


@linkages.register(Linkage.CENTROID)
def centroid(d_ak, d_bk, d_ab, size_a, size_b, size_k):
    """UPGMC: distance between cluster centroids."""
    total = size_a + size_b
    sq = (
        (size_a * d_ak ** 2 + size_b * d_bk ** 2) / total
        - size_a * size_b * d_ab ** 2 / total ** 2
    )
    return np.sqrt(np.maximum(sq, 0.0))


@linkages.register(Linkage.MEDIAN)
def median(d_ak, d_bk, d_ab, size_a, size_b, size_k):
    """WPGMC: centroid rule with the merged halves weighted equally."""
    sq = d_ak ** 2 / 2.0 + d_bk ** 2 / 2.0 - d_ab ** 2 / 4.0
    return np.sqrt(np.maximum(sq, 0.0))


@linkages.register(Linkage.WARD)
def ward(d_ak, d_bk, d_ab, size_a, size_b, size_k):
    """Minimum-variance rule."""
    total = size_a + size_b + size_k
    sq = (
        (size_a + size_k) * d_ak ** 2
        + (size_b + size_k) * d_bk ** 2
        - size_k * d_ab ** 2
    ) / total
    return np.sqrt(np.maximum(sq, 0.0))
