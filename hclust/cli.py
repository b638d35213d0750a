"""Command-line interface for hclust."""

import argparse
import sys

import pandas as pd

from .config.schema import load_config, validate_config
from .core.errors import ClusteringError
from .core.registry import get_registry
from .runner import run_clustering, run_grid


def _print_run(result):
    dendrogram = result.dendrogram
    print(f"\nMerges ({dendrogram.metric.value if dendrogram.metric else 'precomputed'}"
          f" / {dendrogram.linkage.value}):")
    print(dendrogram.to_frame().to_string(index=False))
    print(f"\nLeaf order: {[dendrogram.labels[i] for i in dendrogram.leaf_order]}")
    print(f"Cophenetic correlation: {result.cophenetic_correlation:.4f}")

    if result.partition is not None:
        print(f"\nPartition ({result.partition.n_clusters} clusters):")
        print(result.partition.to_series().to_string())

    if result.agreement:
        print(f"\nAgreement with reference labels: ARI={result.agreement['ari']:.4f}, "
              f"B3 F1={result.agreement['b3_f1']:.4f}")


def _report_config_errors(errors) -> bool:
    if errors:
        print("Configuration errors:")
        for e in errors:
            print(f"  - {e}")
    return bool(errors)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="hclust: hierarchical agglomerative clustering"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    run_parser = subparsers.add_parser("run", help="Run a single clustering configuration")
    run_parser.add_argument("config", help="Path to config YAML file")
    run_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    grid_parser = subparsers.add_parser("grid", help="Run a grid of configurations")
    grid_parser.add_argument("config", help="Path to grid config YAML file")
    grid_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    cluster_parser = subparsers.add_parser("cluster", help="Cluster a CSV table directly")
    cluster_parser.add_argument("path", help="CSV file, one observation per row")
    cluster_parser.add_argument("--metric", default="euclidean", help="Distance metric")
    cluster_parser.add_argument("--linkage", default="complete", help="Linkage rule")
    cluster_parser.add_argument("--index-col", default=None, help="Column holding observation labels")
    cluster_parser.add_argument("--label-col", default=None, help="Reference grouping column")
    cut_group = cluster_parser.add_mutually_exclusive_group()
    cut_group.add_argument("-k", "--n-clusters", type=int, default=None, help="Number of clusters")
    cut_group.add_argument("--height", type=float, default=None, help="Cut height")
    cluster_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    list_parser = subparsers.add_parser("list", help="List supported options")
    list_parser.add_argument("component", choices=["metrics", "linkages"])

    args = parser.parse_args(argv)

    try:
        if args.command == "run":
            config = load_config(args.config)
            if _report_config_errors(validate_config(config)):
                return 1
            result = run_clustering(config, verbose=args.verbose)
            _print_run(result)

        elif args.command == "grid":
            config = load_config(args.config)
            base = config.get("base", {})
            if _report_config_errors(validate_config(base)):
                return 1
            results = run_grid(config, verbose=args.verbose)
            with pd.option_context("display.max_columns", None, "display.width", 200):
                print(results.to_string(index=False))

        elif args.command == "cluster":
            config = {
                "name": args.path,
                "input": {
                    "path": args.path,
                    "index_col": args.index_col,
                    "label_col": args.label_col,
                },
                "clustering": {
                    "metric": args.metric,
                    "linkage": args.linkage,
                    "n_clusters": args.n_clusters,
                    "height": args.height,
                },
            }
            if _report_config_errors(validate_config(config)):
                return 1
            result = run_clustering(config, verbose=args.verbose)
            _print_run(result)

        elif args.command == "list":
            registry = get_registry(args.component)
            print(f"Available {args.component}:")
            for name in registry.list():
                print(f"  - {name}")

        else:
            parser.print_help()

    except ClusteringError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
