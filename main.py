import argparse
import logging
import os
import sys
import threading

from core.exceptions import GemLayoutError
from geometry.graph_io import load_data, parse_graph, save_layout
from runtime.logging_config import setup_logging
from runtime.scheduler import RoundScheduler

logger = logging.getLogger("gem_layout")

_EXTENSIONS = (".json", ".yaml", ".yml")


def resolve_graph_path(path: str) -> str:
    """Return a valid graph file path, allowing a path without extension."""
    if os.path.isfile(path):
        return path
    if not path.lower().endswith(_EXTENSIONS):
        for ext in _EXTENSIONS:
            alt = path + ext
            if os.path.isfile(alt):
                return alt
    raise FileNotFoundError(f"Cannot find file '{path}' (tried .json/.yaml/.yml)")


def main(argv=None):
    parser = argparse.ArgumentParser(description="GEM Graph Layout Driver")
    parser.add_argument("-i", "--input", help="Input graph JSON/YAML file")
    parser.add_argument("-o", "--output", default=None, help="Output layout JSON file")
    parser.add_argument(
        "--debugger",
        action="store_true",
        help="Enter a post-mortem debugger (ipdb/pdb) on uncaught exceptions.",
    )
    parser.add_argument(
        "--compact-output-json",
        action="store_true",
        help="Write output JSON in compact (single-line) form.",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for the random source."
    )
    parser.add_argument(
        "--metric",
        choices=["euclidean", "manhattan"],
        default=None,
        help="Override the distance metric.",
    )
    parser.add_argument(
        "--mode",
        choices=["in_place", "snapshot"],
        default=None,
        help="Round update mode (in_place = move immediately; snapshot = "
        "impulses from the positions at round start).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for the snapshot impulse pass.",
    )
    parser.add_argument(
        "--edge-length",
        type=float,
        default=None,
        help="Override the desired edge length.",
    )
    parser.add_argument(
        "--print-positions",
        action="store_true",
        help="Print final node positions to stdout.",
    )
    parser.add_argument("--log", default=None, help="Optional log file")
    parser.add_argument(
        "--log-every",
        type=int,
        default=1,
        help="With --debug, log the temperature of every k-th round only.",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress console output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable verbose debug logging"
    )
    args = parser.parse_args(argv)

    old_excepthook = sys.excepthook
    if args.debugger:
        import traceback

        def _post_mortem_excepthook(exc_type, exc, tb):
            if issubclass(exc_type, KeyboardInterrupt):
                return old_excepthook(exc_type, exc, tb)
            traceback.print_exception(exc_type, exc, tb)
            try:
                import ipdb  # type: ignore

                ipdb.post_mortem(tb)
            except Exception:
                import pdb

                pdb.post_mortem(tb)

        sys.excepthook = _post_mortem_excepthook

    if not args.input:
        try:
            args.input = input("Input graph file: ").strip()
        except EOFError:
            print("No input file provided.", file=sys.stderr)
            sys.exit(1)
    try:
        args.input = resolve_graph_path(args.input)
    except FileNotFoundError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    global logger
    if args.log_every < 1:
        parser.error("--log-every must be >= 1")
    logger = setup_logging(
        args.log,
        quiet=args.quiet,
        debug=args.debug,
        round_interval=args.log_every,
    )

    try:
        graph, params = parse_graph(load_data(args.input))
    except (GemLayoutError, ValueError) as exc:
        print(f"Could not load graph '{args.input}': {exc}", file=sys.stderr)
        sys.exit(1)

    overrides = {
        "seed": args.seed,
        "distance_metric": args.metric,
        "update_mode": args.mode,
        "workers": args.workers,
        "desired_edge_length": args.edge_length,
    }
    params.update({k: v for k, v in overrides.items() if v is not None})

    logger.info(
        "Loaded %d nodes and %d edges from %s.",
        len(graph.nodes),
        len(graph.edges),
        args.input,
    )

    cancel = threading.Event()
    try:
        scheduler = RoundScheduler(graph, params, cancel=cancel)
        try:
            summary = scheduler.run()
        except KeyboardInterrupt:
            # Publish the coordinates reached so far.
            cancel.set()
            summary = scheduler.run()
    except GemLayoutError as exc:
        print(f"Layout failed: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.print_positions:
            for node_id, (x, y) in summary["positions"].items():
                print(f"{node_id}\t{x:.6f}\t{y:.6f}")
        if args.output:
            save_layout(
                graph,
                args.output,
                params=params,
                summary=summary,
                compact=args.compact_output_json,
            )
            logger.info(f"Layout complete. Output saved to {args.output}")
        else:
            logger.info("Layout complete. No output file written.")
    finally:
        if args.debugger:
            sys.excepthook = old_excepthook


if __name__ == "__main__":
    main()
