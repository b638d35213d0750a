"""Hierarchical Agglomerative Clustering."""

from typing import List, Optional, Union

import numpy as np

from ..core.options import Linkage, Metric, resolve_options
from ..core.registry import get_registry
from ..core.types import Dendrogram, DistanceMatrix, MergeRecord, Partition, leaf_order
from ..distance import compute_distance_matrix
from .cut import cut
from . import linkage as _linkage_rules  # noqa: F401 (registers update rules)


def build_dendrogram(
    observations,
    metric: Union[str, Metric] = Metric.EUCLIDEAN,
    linkage: Union[str, Linkage] = Linkage.COMPLETE,
) -> Dendrogram:
    """
    Merge the closest pair of clusters until one cluster remains.

    Ties between pairs at exactly the minimum distance go to the pair
    (a, b), a < b, that is lexicographically smallest by cluster id.

    Args:
        observations: Observation table, or a precomputed DistanceMatrix.
        metric: Metric for the pairwise distances. Ignored for a
            DistanceMatrix that already records its metric.
        linkage: Linkage rule.

    Returns:
        Dendrogram with n-1 merge records and a non-crossing leaf order.
    """
    if isinstance(observations, DistanceMatrix):
        dm = observations
        metric, linkage = resolve_options(dm.metric or metric, linkage)
        recorded_metric = dm.metric
    else:
        metric, linkage = resolve_options(metric, linkage)
        dm = compute_distance_matrix(observations, metric)
        recorded_metric = metric

    n = dm.n

    update = get_registry("linkages").get(linkage)

    # size of each cluster, indexed by cluster id
    cluster_sizes: List[int] = [1] * n
    merges: List[MergeRecord] = []

    D = np.array(dm.values, dtype=float)
    np.fill_diagonal(D, np.inf)
    slot_ids = np.arange(n)
    sizes = np.ones(n, dtype=float)
    active = np.ones(n, dtype=bool)

    for step in range(n - 1):
        d_min = D.min()
        cand_i, cand_j = np.nonzero(D == d_min)
        ids_i, ids_j = slot_ids[cand_i], slot_ids[cand_j]
        lo, hi = np.minimum(ids_i, ids_j), np.maximum(ids_i, ids_j)
        pick = np.lexsort((hi, lo))[0]

        a, b = int(lo[pick]), int(hi[pick])
        if ids_i[pick] == a:
            slot_a, slot_b = int(cand_i[pick]), int(cand_j[pick])
        else:
            slot_a, slot_b = int(cand_j[pick]), int(cand_i[pick])

        new_id = n + step
        size = cluster_sizes[a] + cluster_sizes[b]

        others = np.nonzero(active)[0]
        others = others[(others != slot_a) & (others != slot_b)]
        if others.size:
            new_d = update(
                D[slot_a, others], D[slot_b, others], d_min,
                sizes[slot_a], sizes[slot_b], sizes[others],
            )
        keep, drop = min(slot_a, slot_b), max(slot_a, slot_b)
        D[drop, :] = np.inf
        D[:, drop] = np.inf
        if others.size:
            D[keep, others] = new_d
            D[others, keep] = new_d
        active[drop] = False
        sizes[keep] = size
        slot_ids[keep] = new_id

        cluster_sizes.append(size)
        merges.append(MergeRecord(a, b, float(d_min), size))

    return Dendrogram(
        merges=merges,
        leaf_order=leaf_order(merges, n),
        labels=list(dm.labels),
        metric=recorded_metric,
        linkage=linkage,
    )


class HACClusterer:
    """
    Hierarchical Agglomerative Clustering.

    Complete linkage on Euclidean distances by default. ``fit`` builds the
    dendrogram; ``cluster`` also cuts it into a flat partition.
    """

    def __init__(
        self,
        metric: Union[str, Metric] = Metric.EUCLIDEAN,
        linkage: Union[str, Linkage] = Linkage.COMPLETE,
        n_clusters: Optional[int] = None,
        height: Optional[float] = None,
    ):
        """
        Initialize HAC clusterer.

        Args:
            metric: Distance metric (euclidean, cityblock, jaccard, ...).
            linkage: Linkage rule (single, complete, average, ward, ...).
            n_clusters: Default cluster count for ``cluster``.
            height: Default cut height for ``cluster``.

        Raises:
            UnsupportedMetric, UnsupportedLinkage: Bad option or combination.
        """
        self.metric, self.linkage = resolve_options(metric, linkage)
        self.n_clusters = n_clusters
        self.height = height
        self.name = f"hac_{self.linkage.value}"
        self.dendrogram_: Optional[Dendrogram] = None

    def fit(self, observations) -> Dendrogram:
        """Build and keep the dendrogram for ``observations``."""
        self.dendrogram_ = build_dendrogram(observations, self.metric, self.linkage)
        return self.dendrogram_

    def cluster(
        self,
        observations,
        n_clusters: Optional[int] = None,
        height: Optional[float] = None,
    ) -> Partition:
        """
        Build the dendrogram and cut it.

        Args:
            observations: Observation table or DistanceMatrix.
            n_clusters: Cluster count; overrides the constructor default.
            height: Cut height; overrides the constructor default.

        Returns:
            Partition of all observations.
        """
        if n_clusters is None and height is None:
            n_clusters, height = self.n_clusters, self.height
        dendrogram = self.fit(observations)
        return cut(dendrogram, n_clusters=n_clusters, height=height)
