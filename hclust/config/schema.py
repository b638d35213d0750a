"""Configuration schema and validation."""

import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from ..core.errors import ClusteringError
from ..core.options import resolve_options


@dataclass
class InputConfig:
    path: str = None
    index_col: Optional[str] = None
    columns: List[str] = field(default_factory=list)
    label_col: Optional[str] = None


@dataclass
class ClusteringConfig:
    metric: str = "euclidean"
    linkage: str = "complete"
    n_clusters: Optional[int] = None
    height: Optional[float] = None


@dataclass
class RunConfig:
    name: str = "unnamed"
    input: InputConfig = field(default_factory=InputConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "input": dict(vars(self.input)),
            "clustering": dict(vars(self.clustering)),
        }


def load_config(path: str) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def validate_config(config: Dict[str, Any], require_input: bool = True) -> List[str]:
    """Validate configuration, return list of errors."""
    errors = []

    if not isinstance(config, dict):
        return ["Configuration must be a mapping"]

    input_cfg = config.get("input")
    if require_input:
        if not isinstance(input_cfg, dict):
            errors.append("Missing 'input' section")
        elif not input_cfg.get("path"):
            errors.append("Missing 'input.path'")
    if isinstance(input_cfg, dict) and "columns" in input_cfg:
        if not isinstance(input_cfg["columns"], list):
            errors.append("'input.columns' must be a list")

    clustering = config.get("clustering")
    if clustering is None:
        clustering = {}
    if not isinstance(clustering, dict):
        errors.append("'clustering' must be a mapping")
        return errors

    try:
        resolve_options(
            clustering.get("metric", "euclidean"),
            clustering.get("linkage", "complete"),
        )
    except ClusteringError as e:
        errors.append(str(e))

    n_clusters = clustering.get("n_clusters")
    height = clustering.get("height")
    if n_clusters is not None and height is not None:
        errors.append("Specify at most one of 'clustering.n_clusters' and 'clustering.height'")
    if n_clusters is not None and (
        isinstance(n_clusters, bool)
        or not isinstance(n_clusters, numbers.Integral)
        or n_clusters < 1
    ):
        errors.append(f"'clustering.n_clusters' must be a positive integer, got {n_clusters!r}")
    if height is not None and (
        isinstance(height, bool)
        or not isinstance(height, numbers.Real)
        or height < 0
    ):
        errors.append(f"'clustering.height' must be a non-negative number, got {height!r}")

    return errors


def parse_config(config: Dict[str, Any]) -> RunConfig:
    """Build a RunConfig from a validated configuration dict."""
    input_cfg = config.get("input") or {}
    clustering = config.get("clustering") or {}
    return RunConfig(
        name=config.get("name", "unnamed"),
        input=InputConfig(
            path=input_cfg.get("path"),
            index_col=input_cfg.get("index_col"),
            columns=list(input_cfg.get("columns") or []),
            label_col=input_cfg.get("label_col"),
        ),
        clustering=ClusteringConfig(
            metric=clustering.get("metric", "euclidean"),
            linkage=clustering.get("linkage", "complete"),
            n_clusters=clustering.get("n_clusters"),
            height=clustering.get("height"),
        ),
    )
