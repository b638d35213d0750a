"""
hclust: Hierarchical agglomerative clustering

Computes pairwise distances, builds a dendrogram by repeatedly merging the
closest pair of clusters, and cuts it into flat partitions.
"""

__version__ = "0.1.0"

from .core.errors import (
    ClusteringError,
    InvalidInput,
    InvalidParameter,
    UnsupportedMetric,
    UnsupportedLinkage,
)
from .core.options import Metric, Linkage, resolve_options
from .core.types import DistanceMatrix, MergeRecord, Dendrogram, Partition
from .core.registry import Registry, get_registry
from .distance import compute_distance_matrix, as_distance_matrix
from .clustering import HACClusterer, build_dendrogram, cut, cut_tree, cut_tree_at_height

from . import metrics
from . import runner
