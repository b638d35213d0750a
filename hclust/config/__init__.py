"""Run configuration."""

from .schema import (
    InputConfig,
    ClusteringConfig,
    RunConfig,
    load_config,
    validate_config,
    parse_config,
)
