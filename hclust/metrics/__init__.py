"""Dendrogram and partition quality metrics."""

from .cophenetic import cophenetic_matrix, cophenetic_correlation
from .partition import adjusted_rand_index, compute_b3_metrics, compute_partition_agreement
from .sanity import run_sanity_checks
