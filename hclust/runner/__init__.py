"""Single-run and grid runners."""

from .run_one import ClusteringRun, run_clustering, load_table, split_features
from .run_grid import run_grid
