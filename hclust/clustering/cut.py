"""Flat partitions from a dendrogram."""

import math
import numbers
from typing import Dict, List, Optional

import numpy as np

from ..core.errors import InvalidParameter
from ..core.types import Dendrogram, Partition


def _first_appearance_labels(raw: np.ndarray) -> np.ndarray:
    """Renumber arbitrary cluster ids 0..k-1 in order of first appearance."""
    _, first_idx, inverse = np.unique(raw, return_index=True, return_inverse=True)
    rank = np.empty(first_idx.size, dtype=int)
    rank[np.argsort(first_idx)] = np.arange(first_idx.size)
    return rank[inverse.ravel()]


def _flatten(dendrogram: Dendrogram, keep: List[bool]) -> Partition:
    """
    Apply the merges flagged in ``keep`` and label the surviving clusters.

    A merge may only be kept if both of its children were formed, which
    holds for every prefix of the merge sequence and for subtree-closed
    selections such as the height cut.
    """
    n = dendrogram.n_observations
    members: Dict[int, List[int]] = {i: [i] for i in range(n)}

    for step, (merge, kept) in enumerate(zip(dendrogram.merges, keep)):
        if kept:
            members[n + step] = members.pop(merge.left) + members.pop(merge.right)

    raw = np.empty(n, dtype=int)
    for cluster_id, member_idx in members.items():
        raw[member_idx] = cluster_id

    return Partition(
        labels=_first_appearance_labels(raw),
        observation_labels=list(dendrogram.labels),
    )


def cut_tree(dendrogram: Dendrogram, k: int) -> Partition:
    """
    Partition into exactly ``k`` clusters.

    Applies the first n-k merges, i.e. cuts right before merge n-k+1.

    Args:
        dendrogram: Dendrogram to cut.
        k: Number of clusters, 1 <= k <= n.

    Raises:
        InvalidParameter: If k is not an integer in [1, n].
    """
    n = dendrogram.n_observations
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidParameter(f"Cluster count must be an integer, got {k!r}")
    if not 1 <= k <= n:
        raise InvalidParameter(f"Cluster count must be in [1, {n}], got {k}")

    n_applied = n - int(k)
    keep = [step < n_applied for step in range(len(dendrogram.merges))]
    return _flatten(dendrogram, keep)


def cut_tree_at_height(dendrogram: Dendrogram, height: float) -> Partition:
    """
    Partition induced by removing every merge above ``height``.

    A subtree stays whole only if no merge inside it exceeds the height, so
    inverted (non-monotonic) dendrograms are cut consistently.

    Raises:
        InvalidParameter: If height is negative or not a finite number.
    """
    if isinstance(height, bool) or not isinstance(height, numbers.Real):
        raise InvalidParameter(f"Cut height must be a number, got {height!r}")
    if not math.isfinite(height) or height < 0:
        raise InvalidParameter(f"Cut height must be finite and non-negative, got {height}")

    n = dendrogram.n_observations
    max_height = np.zeros(n + len(dendrogram.merges))
    keep = []
    for step, merge in enumerate(dendrogram.merges):
        h = max(merge.distance, max_height[merge.left], max_height[merge.right])
        max_height[n + step] = h
        keep.append(h <= height)

    return _flatten(dendrogram, keep)


def cut(
    dendrogram: Dendrogram,
    n_clusters: Optional[int] = None,
    height: Optional[float] = None,
) -> Partition:
    """Cut by cluster count or by height; exactly one must be given."""
    if (n_clusters is None) == (height is None):
        raise InvalidParameter("Specify exactly one of n_clusters or height")
    if n_clusters is not None:
        return cut_tree(dendrogram, n_clusters)
    return cut_tree_at_height(dendrogram, height)
