"""
Command line entry point for Maze Lab.

Runs a single strategy on a maze, or compares strategies across mazes,
and prints the result as JSON on stdout.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from mazelab.core.errors import (
    IllegalMoveRequest,
    MazeConfigError,
    MazeParseError,
    StrategyOptionError,
)
from mazelab.core.maze_model import Maze
from mazelab.core.maze_parser import load_maze_file
from mazelab.core.simulation import simulate
from mazelab.services.comparison_service import ComparisonService
from mazelab.services.maze_service import get_maze_catalog
from mazelab.strategies.registry import get_strategy


def resolve_maze(name: str) -> Maze:
    """Look up a maze by catalog name, or load it from a maze file path."""
    maze = get_maze_catalog().get(name)
    if maze is not None:
        return maze
    path = Path(name)
    if path.is_file():
        return load_maze_file(path)
    raise LookupError(f"Maze not found: {name}")


def run_command(args: argparse.Namespace) -> dict:
    maze = resolve_maze(args.maze)
    try:
        strategy = get_strategy(args.strategy, seed=args.seed, commands=args.commands)
    except TypeError as e:
        raise StrategyOptionError(args.strategy) from e
    trace = simulate(maze, strategy, record_frames=args.frames, max_iterations=args.max_iterations)
    return trace.to_dict(include_frames=args.frames)


def compare_command(args: argparse.Namespace) -> dict:
    mazes = [resolve_maze(name) for name in args.maze] if args.maze else None
    service = ComparisonService(iteration_factor=args.iteration_factor, seed=args.seed)
    report = service.run(strategy_names=args.strategy, mazes=mazes)
    return report.to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mazelab",
        description="Evaluate maze exploration strategies",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one strategy on one maze")
    run_parser.add_argument("strategy", help="Registered strategy name, e.g. left-hand")
    run_parser.add_argument("maze", help="Maze name or path to a maze file")
    run_parser.add_argument("--commands", help="Commands for manual-input, e.g. 'F,L,F,R'")
    run_parser.add_argument("--seed", type=int, help="Seed for random-mouse")
    run_parser.add_argument("--frames", action="store_true", help="Include every step frame")
    run_parser.add_argument("--max-iterations", type=int, help="Cap on strategy invocations")
    run_parser.set_defaults(handler=run_command)

    compare_parser = subparsers.add_parser("compare", help="Rank strategies across mazes")
    compare_parser.add_argument(
        "--strategy",
        action="append",
        help="Strategy to include (repeatable, default: all non-interactive)",
    )
    compare_parser.add_argument(
        "--maze",
        action="append",
        help="Maze name or file to include (repeatable, default: all catalog mazes)",
    )
    compare_parser.add_argument("--seed", type=int, help="Seed for randomized strategies")
    compare_parser.add_argument(
        "--iteration-factor",
        type=int,
        default=2,
        help="Invocation cap as a multiple of each maze's step budget (default: 2)",
    )
    compare_parser.set_defaults(handler=compare_command)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        result = args.handler(args)
    except (
        LookupError,
        MazeConfigError,
        MazeParseError,
        IllegalMoveRequest,
        StrategyOptionError,
    ) as e:
        print(json.dumps({"success": False, "error": str(e)}))
        return 2

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
