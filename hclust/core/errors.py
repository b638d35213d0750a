"""
Error hierarchy for clustering runs.

Every error is raised synchronously before any partial result exists.
"""


class ClusteringError(Exception):
    """Base class for all clustering errors."""


class InvalidInput(ClusteringError, ValueError):
    """Malformed observations, distance matrix or linkage matrix."""


class InvalidParameter(ClusteringError, ValueError):
    """Cluster count or cut height outside its valid range."""


class UnsupportedMetric(ClusteringError, KeyError):
    """Unrecognised distance metric."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""


class UnsupportedLinkage(ClusteringError, KeyError):
    """Unrecognised linkage rule, or a linkage the metric cannot support."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""
