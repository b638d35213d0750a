"""Hierarchical agglomerative clustering and dendrogram cuts."""

from . import linkage
from .hac import HACClusterer, build_dendrogram
from .cut import cut, cut_tree, cut_tree_at_height

__all__ = [
    "HACClusterer",
    "build_dendrogram",
    "cut",
    "cut_tree",
    "cut_tree_at_height",
]
