"""
Supported distance metrics and linkage rules.

Both are closed enums. Names coming from configuration files or the command
line are resolved here, so an unknown name or an impossible metric/linkage
combination is rejected before any distance is computed.
"""

from enum import Enum
from typing import Tuple, Union

from .errors import UnsupportedLinkage, UnsupportedMetric


class Metric(str, Enum):
    """Pairwise distance between two observations."""

    EUCLIDEAN = "euclidean"
    SQEUCLIDEAN = "sqeuclidean"
    CITYBLOCK = "cityblock"
    CHEBYSHEV = "chebyshev"
    COSINE = "cosine"
    HAMMING = "hamming"
    JACCARD = "jaccard"

    @classmethod
    def parse(cls, value: Union[str, "Metric"]) -> "Metric":
        """Resolve a metric name (case-insensitive) or pass an enum through."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key == "manhattan":
                key = "cityblock"
            for member in cls:
                if member.value == key:
                    return member
        raise UnsupportedMetric(
            f"Unsupported metric '{value}'. Available: {[m.value for m in cls]}"
        )


class Linkage(str, Enum):
    """Inter-cluster distance rule."""

    SINGLE = "single"
    COMPLETE = "complete"
    AVERAGE = "average"
    WEIGHTED = "weighted"
    CENTROID = "centroid"
    MEDIAN = "median"
    WARD = "ward"

    @classmethod
    def parse(cls, value: Union[str, "Linkage"]) -> "Linkage":
        """Resolve a linkage name (case-insensitive) or pass an enum through."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        raise UnsupportedLinkage(
            f"Unsupported linkage '{value}'. Available: {[l.value for l in cls]}"
        )

    @property
    def is_geometric(self) -> bool:
        """Centroid-based rules that only make sense in Euclidean space."""
        return self in (Linkage.CENTROID, Linkage.MEDIAN, Linkage.WARD)

    @property
    def is_monotonic(self) -> bool:
        """Whether merge heights are guaranteed non-decreasing."""
        return self not in (Linkage.CENTROID, Linkage.MEDIAN)


def resolve_options(
    metric: Union[str, Metric],
    linkage: Union[str, Linkage],
) -> Tuple[Metric, Linkage]:
    """
    Resolve and cross-check a metric/linkage pair.

    Args:
        metric: Metric name or enum member.
        linkage: Linkage name or enum member.

    Returns:
        Tuple of (Metric, Linkage).

    Raises:
        UnsupportedMetric: Unknown metric name.
        UnsupportedLinkage: Unknown linkage name, or a geometric linkage
            (centroid, median, ward) paired with a non-euclidean metric.
    """
    metric = Metric.parse(metric)
    linkage = Linkage.parse(linkage)

    if linkage.is_geometric and metric is not Metric.EUCLIDEAN:
        raise UnsupportedLinkage(
            f"Linkage '{linkage.value}' requires the euclidean metric, "
            f"got '{metric.value}'"
        )

    return metric, linkage
