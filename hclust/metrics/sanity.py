"""Sanity checks for dendrograms, partitions and distance matrices."""

from typing import Dict

import numpy as np

from ..core.types import Dendrogram, DistanceMatrix, Partition


def run_sanity_checks(
    dendrogram: Dendrogram = None,
    partition: Partition = None,
    distance_matrix: DistanceMatrix = None,
) -> Dict[str, bool]:
    """
    Run structural checks on clustering outputs.

    Catches issues like:
    - Wrong number of merges, or a root that does not hold everything
    - Clusters merged twice or referenced before they exist
    - Height inversions under a linkage that should be monotonic
    - Partitions that drop or duplicate observations
    - Asymmetric distance matrices

    Args:
        dendrogram: Dendrogram to check.
        partition: Partition to check (against the dendrogram when given).
        distance_matrix: Distance matrix to check.

    Returns:
        Dict of check names to pass/fail booleans.
    """
    checks = {}

    if dendrogram is not None:
        n = dendrogram.n_observations
        merges = dendrogram.merges

        checks["merge_count"] = len(merges) == n - 1
        checks["root_holds_all"] = (merges[-1].size == n) if merges else n == 1

        seen = set()
        valid_ids = True
        for step, m in enumerate(merges):
            if not (0 <= m.left < m.right < n + step) or m.left in seen or m.right in seen:
                valid_ids = False
                break
            seen.update((m.left, m.right))
        checks["merge_ids_valid"] = valid_ids

        checks["leaf_order_is_permutation"] = sorted(dendrogram.leaf_order) == list(range(n))

        if dendrogram.linkage is not None and dendrogram.linkage.is_monotonic:
            checks["heights_monotonic"] = dendrogram.is_monotonic()

    if partition is not None:
        labels = np.asarray(partition.labels)
        k = partition.n_clusters
        checks["partition_labels_contiguous"] = (
            set(labels.tolist()) == set(range(k))
        )
        checks["partition_no_empty_clusters"] = all(s > 0 for s in partition.sizes())
        if dendrogram is not None:
            checks["partition_covers_observations"] = (
                len(partition) == dendrogram.n_observations
            )

    if distance_matrix is not None:
        D = np.asarray(distance_matrix.values)
        checks["distance_symmetric"] = bool(np.allclose(D, D.T))
        checks["distance_zero_diagonal"] = bool(np.all(np.diag(D) == 0))
        checks["distance_non_negative"] = bool(np.all(D >= 0))

    return checks
