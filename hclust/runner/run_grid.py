"""Run a grid of clustering configurations."""

import copy
import itertools
from typing import Any, Dict, Tuple

import pandas as pd

from ..core.errors import ClusteringError, InvalidParameter
from .run_one import load_table, run_clustering
from ..config.schema import InputConfig


# grid keys that change which table is read
_TABLE_KEYS = ("input.path", "input.index_col")


def run_grid(
    grid_config: Dict[str, Any],
    data: pd.DataFrame = None,
    verbose: bool = False,
) -> pd.DataFrame:
    """
    Run every combination of grid parameters.

    Args:
        grid_config: ``base`` run configuration plus a ``grid`` mapping of
            dotted keys (e.g. ``clustering.linkage``) to value lists.
        data: Observation table shared by every combination. When omitted,
            each distinct ``input.path`` / ``input.index_col`` is read once.
        verbose: Print progress.

    Returns:
        DataFrame with one summary row per combination. Combinations that
        fail carry an ``error`` message instead of metrics.

    Raises:
        InvalidParameter: ``data`` is given and the grid varies a key that
            selects the table to load.
    """
    base_config = grid_config.get("base", {})
    grid_params = grid_config.get("grid", {})

    param_names = list(grid_params.keys())
    param_values = [grid_params[k] if isinstance(grid_params[k], list) else [grid_params[k]]
                    for k in param_names]
    combos = list(itertools.product(*param_values))

    table_keys = [k for k in param_names if k in _TABLE_KEYS]
    if data is not None and table_keys:
        raise InvalidParameter(
            f"Grid varies {table_keys} but an observation table was passed in"
        )
    tables: Dict[Tuple[Any, Any], pd.DataFrame] = {}

    all_results = []

    for i, values in enumerate(combos):
        config = copy.deepcopy(base_config)

        for name, value in zip(param_names, values):
            _set_nested(config, name, value)

        config["name"] = f"run_{i:04d}"

        if verbose:
            print(f"\n{'='*60}")
            print(f"Run {i+1}/{len(combos)}")
            params_str = ", ".join(f"{n}={v}" for n, v in zip(param_names, values))
            print(f"  {params_str}")

        try:
            table = data
            if table is None:
                input_cfg = config.get("input") or {}
                key = (input_cfg.get("path"), input_cfg.get("index_col"))
                if key not in tables:
                    tables[key] = load_table(InputConfig(path=key[0], index_col=key[1]))
                table = tables[key]

            result = run_clustering(config, data=table, verbose=verbose)

            row = result.to_dict()
            for name, value in zip(param_names, values):
                row[f"param_{name}"] = value

            all_results.append(row)
        except ClusteringError as e:
            if verbose:
                print(f"  ERROR: {e}")
            all_results.append({
                "name": config["name"],
                "error": str(e),
                **{f"param_{name}": value for name, value in zip(param_names, values)}
            })

    return pd.DataFrame(all_results)


def _set_nested(d: Dict, key: str, value: Any):
    """Set a nested key in a dict (e.g., 'clustering.linkage')."""
    keys = key.split(".")
    current = d
    for k in keys[:-1]:
        if k not in current or current[k] is None:
            current[k] = {}
        current = current[k]
    current[keys[-1]] = value
