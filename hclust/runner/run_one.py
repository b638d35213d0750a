"""Run a single clustering configuration."""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from ..clustering import build_dendrogram, cut
from ..config.schema import InputConfig, RunConfig, parse_config
from ..core.errors import InvalidInput
from ..core.options import resolve_options
from ..core.types import Dendrogram, DistanceMatrix, Partition
from ..distance import compute_distance_matrix
from ..metrics import cophenetic_correlation, compute_partition_agreement, run_sanity_checks


@dataclass
class ClusteringRun:
    """Outputs of one clustering run."""
    config: RunConfig
    distance_matrix: DistanceMatrix
    dendrogram: Dendrogram
    partition: Optional[Partition] = None
    cophenetic_correlation: float = 0.0
    agreement: Dict[str, float] = field(default_factory=dict)
    sanity: Dict[str, bool] = field(default_factory=dict)
    elapsed_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Flat summary row, without the per-observation detail."""
        heights = self.dendrogram.heights
        row = {
            "name": self.config.name,
            "metric": self.config.clustering.metric,
            "linkage": self.config.clustering.linkage,
            "n_observations": self.dendrogram.n_observations,
            "max_height": float(heights.max()) if heights.size else 0.0,
            "monotonic": self.dendrogram.is_monotonic(),
            "cophenetic_correlation": self.cophenetic_correlation,
            "n_clusters": self.partition.n_clusters if self.partition is not None else None,
            "sanity_passed": all(self.sanity.values()),
            "elapsed_seconds": self.elapsed_seconds,
        }
        row.update(self.agreement)
        return row


def load_table(input_config: InputConfig) -> pd.DataFrame:
    """Read the observation table described by ``input_config``."""
    if not input_config.path:
        raise InvalidInput("No input path configured")
    try:
        return pd.read_csv(input_config.path, index_col=input_config.index_col)
    except FileNotFoundError as e:
        raise InvalidInput(f"Input file not found: {input_config.path}") from e
    except ValueError as e:
        raise InvalidInput(f"Could not read {input_config.path}: {e}") from e


def split_features(data: pd.DataFrame, input_config: InputConfig) -> Tuple[pd.DataFrame, Optional[pd.Series]]:
    """Select feature columns and pull out the reference label column, if any."""
    reference = None
    if input_config.label_col:
        if input_config.label_col not in data.columns:
            raise InvalidInput(f"Label column '{input_config.label_col}' not in input")
        reference = data[input_config.label_col]
        data = data.drop(columns=[input_config.label_col])

    if input_config.columns:
        missing = [c for c in input_config.columns if c not in data.columns]
        if missing:
            raise InvalidInput(f"Feature columns not in input: {missing}")
        data = data[input_config.columns]

    return data, reference


def run_clustering(
    config: Dict[str, Any],
    data: pd.DataFrame = None,
    verbose: bool = False,
) -> ClusteringRun:
    """
    Run a single clustering from configuration.

    Args:
        config: Run configuration dict (see ``config.schema``).
        data: Observation table; read from ``input.path`` when omitted.
        verbose: Print progress.

    Returns:
        ClusteringRun with dendrogram, optional partition and diagnostics.
    """
    run_config = parse_config(config)
    cc = run_config.clustering
    metric, linkage = resolve_options(cc.metric, cc.linkage)

    start_time = time.time()

    if verbose:
        print(f"Running clustering: {run_config.name}")

    if data is None:
        data = load_table(run_config.input)
    features, reference = split_features(data, run_config.input)

    if verbose:
        print(f"  Loaded {features.shape[0]} observations x {features.shape[1]} features")

    distances = compute_distance_matrix(features, metric)
    dendrogram = build_dendrogram(distances, metric, linkage)

    if verbose:
        print(f"  Built dendrogram: {metric.value} / {linkage.value}, "
              f"{len(dendrogram.merges)} merges")

    partition = None
    if cc.n_clusters is not None or cc.height is not None:
        partition = cut(dendrogram, n_clusters=cc.n_clusters, height=cc.height)
        if verbose:
            print(f"  Cut into {partition.n_clusters} clusters: sizes {partition.sizes()}")

    agreement = {}
    if partition is not None and reference is not None:
        agreement = compute_partition_agreement(
            pd.factorize(reference)[0], partition.labels
        )
        if verbose:
            print(f"  ARI vs '{run_config.input.label_col}': {agreement['ari']:.3f}")

    coph = cophenetic_correlation(dendrogram, distances)
    sanity = run_sanity_checks(dendrogram, partition, distances)

    if verbose:
        print(f"  Cophenetic correlation: {coph:.3f}")
        failed = [name for name, ok in sanity.items() if not ok]
        if failed:
            print(f"  WARNING: sanity checks failed: {failed}")

    return ClusteringRun(
        config=run_config,
        distance_matrix=distances,
        dendrogram=dendrogram,
        partition=partition,
        cophenetic_correlation=coph,
        agreement=agreement,
        sanity=sanity,
        elapsed_seconds=time.time() - start_time,
    )
