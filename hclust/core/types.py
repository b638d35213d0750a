"""Core data types: distance matrices, merge records, dendrograms, partitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import InvalidInput
from .options import Linkage, Metric


@dataclass(frozen=True, eq=False)
class DistanceMatrix:
    """
    Symmetric, zero-diagonal, non-negative pairwise distance matrix.

    The backing array is validated and made read-only on construction.
    Asymmetry within ``SYMMETRY_ATOL`` is averaged away.

    Attributes:
        values: (n, n) float array.
        metric: Metric the distances were computed with (None if supplied
            directly by the caller).
        labels: Observation labels aligned to rows.

    Raises:
        InvalidInput: Not square, empty, non-finite, negative, non-zero
            diagonal or not symmetric.
    """
    values: np.ndarray
    metric: Optional[Metric] = None
    labels: Optional[List[Any]] = None

    SYMMETRY_ATOL: ClassVar[float] = 1e-9

    def __post_init__(self):
        try:
            values = np.array(self.values, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Distance matrix must be numeric: {e}") from e

        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise InvalidInput(f"Distance matrix must be square, got shape {values.shape}")
        if values.shape[0] == 0:
            raise InvalidInput("Distance matrix is empty")
        if not np.all(np.isfinite(values)):
            raise InvalidInput("Distance matrix contains non-finite values")
        if np.any(values < 0):
            raise InvalidInput("Distance matrix contains negative values")
        if np.any(np.abs(np.diag(values)) > self.SYMMETRY_ATOL):
            raise InvalidInput("Distance matrix diagonal must be zero")
        if not np.allclose(values, values.T, rtol=0.0, atol=self.SYMMETRY_ATOL):
            raise InvalidInput("Distance matrix is not symmetric")

        values = (values + values.T) / 2.0
        np.fill_diagonal(values, 0.0)
        values.setflags(write=False)
        object.__setattr__(self, "values", values)
        if self.labels is None:
            object.__setattr__(self, "labels", list(range(values.shape[0])))
        elif len(self.labels) != values.shape[0]:
            raise InvalidInput(
                f"Got {len(self.labels)} labels for {values.shape[0]} observations"
            )

    @property
    def n(self) -> int:
        return int(self.values.shape[0])

    def condensed(self) -> np.ndarray:
        """Upper triangle (i < j) as a flat vector, SciPy ``pdist`` order."""
        iu = np.triu_indices(self.n, k=1)
        return self.values[iu]

    def __getitem__(self, key):
        return self.values[key]


@dataclass(frozen=True)
class MergeRecord:
    """
    One merge step of the dendrogram.

    Attributes:
        left: Smaller id of the two merged clusters.
        right: Larger id of the two merged clusters.
        distance: Linkage distance at which they merged.
        size: Number of observations in the resulting cluster.
    """
    left: int
    right: int
    distance: float
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "left": self.left,
            "right": self.right,
            "distance": self.distance,
            "size": self.size,
        }


@dataclass(frozen=True)
class Dendrogram:
    """
    Ordered merge records over n observations.

    Cluster ids 0..n-1 are the observations; merge ``s`` creates id ``n + s``.

    Attributes:
        merges: The n-1 merge records, in merge order.
        leaf_order: Observation indices in a non-crossing drawing order.
        labels: Observation labels aligned to indices.
        metric: Metric used for the distances (None if precomputed).
        linkage: Linkage rule used to build the tree.
    """
    merges: List[MergeRecord]
    leaf_order: List[int]
    labels: List[Any]
    metric: Optional[Metric] = None
    linkage: Optional[Linkage] = None

    @property
    def n_observations(self) -> int:
        return len(self.merges) + 1

    @property
    def heights(self) -> np.ndarray:
        return np.array([m.distance for m in self.merges], dtype=float)

    def is_monotonic(self) -> bool:
        """True when merge heights never decrease."""
        heights = self.heights
        return bool(np.all(np.diff(heights) >= 0)) if heights.size > 1 else True

    def to_linkage_matrix(self) -> np.ndarray:
        """
        Export as a SciPy-style linkage matrix.

        Returns:
            (n-1, 4) float array with rows [left, right, distance, size].
        """
        Z = np.zeros((len(self.merges), 4), dtype=float)
        for i, m in enumerate(self.merges):
            Z[i] = (m.left, m.right, m.distance, m.size)
        return Z

    @classmethod
    def from_linkage_matrix(
        cls,
        Z: np.ndarray,
        labels: Optional[Sequence[Any]] = None,
        metric: Optional[Metric] = None,
        linkage: Optional[Linkage] = None,
    ) -> "Dendrogram":
        """
        Rebuild a dendrogram from a SciPy-style linkage matrix.

        Args:
            Z: (n-1, 4) array of [left, right, distance, size] rows.
            labels: Optional observation labels.

        Raises:
            InvalidInput: If the matrix does not describe a valid binary tree.
        """
        Z = np.asarray(Z, dtype=float)
        if Z.ndim != 2 or Z.shape[1] != 4:
            raise InvalidInput(f"Linkage matrix must have shape (n-1, 4), got {Z.shape}")

        n = Z.shape[0] + 1
        sizes = [1] * n
        used = set()
        merges = []

        for step, row in enumerate(Z):
            a, b = int(row[0]), int(row[1])
            if a != row[0] or b != row[1]:
                raise InvalidInput(f"Row {step}: cluster ids must be integers")
            a, b = min(a, b), max(a, b)
            next_id = n + step
            for c in (a, b):
                if c < 0 or c >= next_id:
                    raise InvalidInput(f"Row {step}: cluster id {c} does not exist yet")
                if c in used:
                    raise InvalidInput(f"Row {step}: cluster {c} merged twice")
            if a == b:
                raise InvalidInput(f"Row {step}: cluster {a} merged with itself")
            if not np.isfinite(row[2]) or row[2] < 0:
                raise InvalidInput(f"Row {step}: invalid merge distance {row[2]}")
            size = sizes[a] + sizes[b]
            if int(row[3]) != size:
                raise InvalidInput(
                    f"Row {step}: size {int(row[3])} does not match members ({size})"
                )
            used.update((a, b))
            sizes.append(size)
            merges.append(MergeRecord(a, b, float(row[2]), size))

        labels = list(labels) if labels is not None else list(range(n))
        if len(labels) != n:
            raise InvalidInput(f"Got {len(labels)} labels for {n} observations")

        return cls(
            merges=merges,
            leaf_order=leaf_order(merges, n),
            labels=labels,
            metric=metric,
            linkage=linkage,
        )

    def to_frame(self) -> pd.DataFrame:
        """Merge records as a DataFrame, one row per merge step."""
        n = self.n_observations
        return pd.DataFrame(
            [dict(step=i, cluster=n + i, **m.to_dict()) for i, m in enumerate(self.merges)],
            columns=["step", "cluster", "left", "right", "distance", "size"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_observations": self.n_observations,
            "metric": self.metric.value if self.metric else None,
            "linkage": self.linkage.value if self.linkage else None,
            "merges": [m.to_dict() for m in self.merges],
            "leaf_order": list(self.leaf_order),
        }


def leaf_order(merges: Sequence[MergeRecord], n: int) -> List[int]:
    """
    Depth-first, left-child-first leaf sequence from the root.

    Drawing leaves in this order gives a dendrogram with no crossing branches.
    """
    if n == 1:
        return [0]

    order = []
    stack = [n + len(merges) - 1]
    while stack:
        node = stack.pop()
        if node < n:
            order.append(node)
            continue
        m = merges[node - n]
        stack.append(m.right)
        stack.append(m.left)
    return order


@dataclass(frozen=True, eq=False)
class Partition:
    """
    Flat clustering of n observations.

    Labels run 0..k-1, numbered in order of first appearance by
    observation index.
    """
    labels: np.ndarray
    observation_labels: List[Any] = field(default_factory=list)

    def __post_init__(self):
        labels = np.asarray(self.labels, dtype=int)
        labels.setflags(write=False)
        object.__setattr__(self, "labels", labels)
        if not self.observation_labels:
            object.__setattr__(self, "observation_labels", list(range(labels.size)))

    @property
    def n_clusters(self) -> int:
        return int(self.labels.max()) + 1 if self.labels.size else 0

    def clusters(self) -> List[List[int]]:
        """Member observation indices of each cluster, ordered by label."""
        clusters: List[List[int]] = [[] for _ in range(self.n_clusters)]
        for idx, label in enumerate(self.labels):
            clusters[label].append(idx)
        return clusters

    def sizes(self) -> List[int]:
        return np.bincount(self.labels, minlength=self.n_clusters).tolist()

    def to_series(self, name: str = "cluster") -> pd.Series:
        """Cluster labels indexed by observation label."""
        return pd.Series(self.labels, index=self.observation_labels, name=name)

    def __len__(self) -> int:
        return int(self.labels.size)
