"""Core types, options, errors, and registries."""

from .errors import (
    ClusteringError,
    InvalidInput,
    InvalidParameter,
    UnsupportedLinkage,
    UnsupportedMetric,
)
from .options import Linkage, Metric, resolve_options
from .types import DistanceMatrix, MergeRecord, Dendrogram, Partition
from .registry import Registry, get_registry
