"""CLI for turning a standardized parameter table into a graph.

Usage:
    uv run semgraph data/holzinger_std.csv
    uv run semgraph data/holzinger_std.csv --format dot | dot -Tsvg > model.svg

Emits machine-friendly JSON by default (nodes, edges, latent names and dangling
references). Use ``--format dot`` for graphviz source.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from semgraph.render import to_dot
from semgraph.tables import load_records
from semgraph.transform import latent_names, model_to_graph
from semgraph.utils.config import get_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert a fitted SEM parameter table to a graph.")
    parser.add_argument(
        "path",
        type=Path,
        help="Path to a standardized parameter table (.csv, .json or .parquet).",
    )
    parser.add_argument(
        "--format",
        choices=("json", "dot"),
        default="json",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--p-max",
        type=float,
        default=None,
        help="Significance threshold for edges (default: transform.p_max from config.yaml).",
    )
    parser.add_argument(
        "--layout",
        default=None,
        help="Graphviz layout program for --format dot (default: style.layout).",
    )
    parser.add_argument(
        "--latent",
        default=None,
        type=lambda value: [name.strip() for name in value.split(",") if name.strip()],
        help="Comma-separated factor names, needed to read loadings from semopy tables.",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indent level (use 0 for compact output).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = get_config()
    except (FileNotFoundError, ValueError) as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 1

    try:
        records = load_records(args.path, latent=args.latent)
    except FileNotFoundError:
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    p_max = config.transform.p_max if args.p_max is None else args.p_max
    try:
        graph = model_to_graph(records, p_max=p_max)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.format == "json":
        payload = graph.to_dict()
        # Every factor with a drawn loading, including ones without a variance row
        payload["latent"] = sorted(latent_names(graph.edges))
        payload["dangling"] = graph.dangling_references()
        payload["input_path"] = str(args.path.resolve())
        indent = None if args.indent <= 0 else args.indent
        print(json.dumps(payload, indent=indent))
    else:
        print(to_dot(graph, config.style, layout=args.layout))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
