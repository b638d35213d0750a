"""Agreement between two flat partitions: ARI and B-cubed."""

from collections import defaultdict
from typing import Dict, Sequence, Tuple, Union

import numpy as np

from ..core.errors import InvalidInput
from ..core.types import Partition


LabelsLike = Union[Partition, Sequence[int], np.ndarray]


def _as_labels(labels: LabelsLike) -> np.ndarray:
    if isinstance(labels, Partition):
        return np.asarray(labels.labels, dtype=int)
    return np.asarray(labels)


def _comb2(n: int) -> float:
    """Compute n choose 2 as a float."""
    if n < 2:
        return 0.0
    return float(n * (n - 1) / 2)


def adjusted_rand_index(labels_a: LabelsLike, labels_b: LabelsLike) -> float:
    """
    Compute Adjusted Rand Index (ARI) for two labelings.

    Args:
        labels_a: First labeling (Partition or per-observation labels).
        labels_b: Second labeling, aligned to the same observations.

    Returns:
        ARI score in [-1, 1]; 1.0 for identical partitions up to renaming.
    """
    a = _as_labels(labels_a)
    b = _as_labels(labels_b)
    if a.shape != b.shape:
        raise InvalidInput(f"Labelings differ in length: {a.size} vs {b.size}")

    if a.size < 2:
        return 1.0

    _, a_idx = np.unique(a, return_inverse=True)
    _, b_idx = np.unique(b, return_inverse=True)
    a_idx, b_idx = a_idx.ravel(), b_idx.ravel()

    contingency = np.zeros((int(a_idx.max()) + 1, int(b_idx.max()) + 1), dtype=int)
    np.add.at(contingency, (a_idx, b_idx), 1)

    sum_comb = float(np.sum([_comb2(int(x)) for x in contingency.ravel()]))
    sum_a = float(np.sum([_comb2(int(x)) for x in contingency.sum(axis=1)]))
    sum_b = float(np.sum([_comb2(int(x)) for x in contingency.sum(axis=0)]))

    total = _comb2(int(contingency.sum()))
    expected = (sum_a * sum_b) / total
    max_index = 0.5 * (sum_a + sum_b)
    denom = max_index - expected
    if denom == 0.0:
        # Both labelings trivial (all singletons or one cluster)
        return 1.0 if sum_comb == max_index else 0.0

    return float((sum_comb - expected) / denom)


def compute_b3_metrics(labels_true: LabelsLike, labels_pred: LabelsLike) -> Tuple[float, float, float]:
    """
    Compute B-cubed precision, recall, and F1.

    B³ is less sensitive than ARI to skewed cluster sizes.

    Returns:
        Tuple of (precision, recall, f1).
    """
    t = _as_labels(labels_true)
    p = _as_labels(labels_pred)
    if t.shape != p.shape:
        raise InvalidInput(f"Labelings differ in length: {t.size} vs {p.size}")
    if t.size == 0:
        return 0.0, 0.0, 0.0

    true_clusters = defaultdict(set)
    pred_clusters = defaultdict(set)
    for idx, (tl, pl) in enumerate(zip(t, p)):
        true_clusters[tl].add(idx)
        pred_clusters[pl].add(idx)

    precisions = []
    recalls = []
    for idx, (tl, pl) in enumerate(zip(t, p)):
        true_cluster = true_clusters[tl]
        pred_cluster = pred_clusters[pl]
        intersection = len(true_cluster & pred_cluster)
        precisions.append(intersection / len(pred_cluster))
        recalls.append(intersection / len(true_cluster))

    precision = float(np.mean(precisions))
    recall = float(np.mean(recalls))
    f1 = 2 * precision * recall / (precision + recall) if precision + recall > 0 else 0.0

    return precision, recall, f1


def compute_partition_agreement(labels_true: LabelsLike, labels_pred: LabelsLike) -> Dict[str, float]:
    """
    Compare a partition against a reference one.

    Args:
        labels_true: Reference partition (e.g. known groups).
        labels_pred: Partition to evaluate (e.g. a dendrogram cut).

    Returns:
        Dict with ARI, B³ precision/recall/F1 and cluster counts.
    """
    t = _as_labels(labels_true)
    p = _as_labels(labels_pred)

    b3_p, b3_r, b3_f1 = compute_b3_metrics(t, p)

    return {
        "ari": adjusted_rand_index(t, p),
        "b3_precision": b3_p,
        "b3_recall": b3_r,
        "b3_f1": b3_f1,
        "n_observations": int(t.size),
        "n_true_clusters": int(len(np.unique(t))),
        "n_pred_clusters": int(len(np.unique(p))),
    }
