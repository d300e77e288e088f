"""
Command-line runner for the lessons.

Usage::

    python -m algolessons.cli tilings 30 --modulus 1000000007
    python -m algolessons.cli recurrence --coefficients 1 1 --initial 0 1 --n 90
    python -m algolessons.cli toposort ./edges.json
    python -m algolessons.cli zero-one-bfs ./edges.json --source a --target d

Every subcommand prints a JSON document on stdout; logs go to stderr.
A ``--config`` JSON file supplies defaults (modulus, jumps, log level)
that explicit flags override.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, Hashable, List, Optional

import networkx as nx

from algolessons.matrix import LinearRecurrence, count_tilings_matrix, jump_recurrence
from algolessons.models import Edge, LessonConfig
from algolessons.tiling import count_paths, count_tilings, count_tilings_table
from algolessons.traversal import (
    CycleError,
    compute_metrics,
    graph_from_edges,
    topological_sort,
    zero_one_bfs,
)
from algolessons.utils import normalize_jumps, setup_logging, timed

logger = logging.getLogger(__name__)


# =========================================================================
# Config & input helpers
# =========================================================================


def load_config(path: Optional[str]) -> LessonConfig:
    """Read a ``LessonConfig`` from JSON; defaults when *path* is ``None``."""
    if path is None:
        return LessonConfig()
    with open(path, "r", encoding="utf-8") as fh:
        return LessonConfig.model_validate(json.load(fh))


def save_config(config: LessonConfig, path: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(config.model_dump(), fh, indent=2)
    logger.info("Config saved → %s", path)


def load_edges(path: str) -> List[Edge]:
    """Read a JSON list of ``{"source", "target", "weight"}`` objects."""
    with open(path, "r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON list of edges")
    return [Edge.model_validate(e) for e in raw]


def _resolve_node(graph: nx.Graph, label: str) -> Hashable:
    """Match a CLI label against graph nodes, which may be ints in the JSON."""
    if label in graph:
        return label
    try:
        as_int = int(label)
    except ValueError:
        raise KeyError(f"node {label!r} is not in the graph") from None
    if as_int in graph:
        return as_int
    raise KeyError(f"node {label!r} is not in the graph")


def _emit(payload: Dict[str, Any]) -> None:
    json.dump(payload, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


# =========================================================================
# Subcommands
# =========================================================================


def run_tilings(args: argparse.Namespace, config: LessonConfig) -> Dict[str, Any]:
    jumps = normalize_jumps(args.jumps or config.jumps)
    modulus = args.modulus if args.modulus is not None else config.modulus
    blocked = sorted(set(args.blocked or []))

    with timed("Table DP"):
        count = count_paths(args.n, jumps, blocked, modulus=modulus)
    results: Dict[str, Any] = {"count": count}

    if not blocked:
        with timed("Matrix power"):
            results["matrix"] = jump_recurrence(jumps).nth(args.n, modulus)
        if jumps == (1, 2):
            results["table"] = count_tilings_table(args.n, modulus)
            results["iterative"] = count_tilings(args.n, modulus)
            results["fibonacci_matrix"] = count_tilings_matrix(args.n, modulus)

    return {
        "n": args.n,
        "jumps": list(jumps),
        "blocked": blocked,
        "modulus": modulus,
        **results,
        # With blocked cells only the table DP runs, so there is nothing to compare.
        "agree": len(set(results.values())) == 1 if len(results) > 1 else None,
    }


def run_recurrence(args: argparse.Namespace, config: LessonConfig) -> Dict[str, Any]:
    modulus = args.modulus if args.modulus is not None else config.modulus
    rec = LinearRecurrence(coefficients=args.coefficients, initial=args.initial)
    with timed("Recurrence a(%d)" % args.n):
        value = rec.nth(args.n, modulus)
    return {
        "coefficients": rec.coefficients,
        "initial": rec.initial,
        "n": args.n,
        "modulus": modulus,
        "value": value,
    }


def run_toposort(args: argparse.Namespace, config: LessonConfig) -> Dict[str, Any]:
    graph = graph_from_edges(load_edges(args.edges))
    metrics = compute_metrics(graph)
    try:
        order = topological_sort(graph)
    except CycleError as exc:
        logger.warning("Graph is NOT acyclic: %s", exc)
        return {"order": None, "cycle": exc.cycle, "metrics": metrics}
    logger.info("Graph is acyclic (%d nodes ordered).", len(order))
    return {"order": order, "cycle": None, "metrics": metrics}


def run_zero_one_bfs(args: argparse.Namespace, config: LessonConfig) -> Dict[str, Any]:
    graph = graph_from_edges(load_edges(args.edges))
    if args.undirected:
        graph = graph.to_undirected()
    source = _resolve_node(graph, args.source)
    result = zero_one_bfs(graph, source)

    payload: Dict[str, Any] = {
        "source": source,
        "distances": result.distances,
    }
    if args.target is not None:
        target = _resolve_node(graph, args.target)
        payload["target"] = target
        payload["distance"] = result.distances.get(target)
        payload["path"] = result.path_to(target) if target in result.distances else None
    return payload


_COMMANDS = {
    "tilings": run_tilings,
    "recurrence": run_recurrence,
    "toposort": run_toposort,
    "zero-one-bfs": run_zero_one_bfs,
}


# =========================================================================
# CLI
# =========================================================================


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="algolessons",
        description="Run the dynamic programming and graph traversal lessons.",
    )
    parser.add_argument("--config", default=None, help="LessonConfig JSON file.")
    parser.add_argument(
        "--save-config", default=None,
        help="Write the effective config to this path and exit.",
    )
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("tilings", help="Grasshopper / tiling counts.")
    p.add_argument("n", type=int)
    p.add_argument("--jumps", type=int, nargs="+", default=None)
    p.add_argument("--blocked", type=int, nargs="+", default=None)
    p.add_argument("--modulus", type=int, default=None)

    p = sub.add_parser("recurrence", help="Linear recurrence term via matrix power.")
    p.add_argument("--coefficients", type=int, nargs="+", required=True)
    p.add_argument("--initial", type=int, nargs="+", required=True)
    p.add_argument("--n", type=int, required=True)
    p.add_argument("--modulus", type=int, default=None)

    p = sub.add_parser("toposort", help="Topological order or a cycle.")
    p.add_argument("edges", help="JSON list of edges.")

    p = sub.add_parser("zero-one-bfs", help="Shortest paths on 0/1 weights.")
    p.add_argument("edges", help="JSON list of edges.")
    p.add_argument("--source", required=True)
    p.add_argument("--target", default=None)
    p.add_argument("--undirected", action="store_true")

    return parser.parse_args(argv)


def main(argv=None):
    """CLI entry-point."""
    args = _parse_args(argv)

    try:
        config = load_config(args.config)
        if args.log_level:
            config = config.model_copy(update={"log_level": args.log_level.upper()})
            config = LessonConfig.model_validate(config.model_dump())
    except (OSError, ValueError) as exc:
        setup_logging()
        logger.error("Could not load config: %s", exc)
        raise SystemExit(1)

    setup_logging(level=getattr(logging, config.log_level))

    overrides = {
        key: getattr(args, key)
        for key in ("modulus", "jumps")
        if getattr(args, key, None) is not None
    }
    if overrides:
        try:
            config = LessonConfig.model_validate({**config.model_dump(), **overrides})
        except ValueError as exc:
            logger.error("Invalid option: %s", exc)
            raise SystemExit(1)

    # --save-config: just dump settings and exit
    if args.save_config:
        save_config(config, args.save_config)
        return

    if args.command is None:
        logger.error("No subcommand given; see --help.")
        raise SystemExit(1)

    logger.info("Running %s (config: %s)", args.command, config.model_dump())
    try:
        payload = _COMMANDS[args.command](args, config)
    except (ValueError, KeyError, OSError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        raise SystemExit(1)

    _emit(payload)


if __name__ == "__main__":
    main()
