"""
Quick-run script for the assembly line balancer.

Usage:
    python balance_line.py data/example.in2                        # defaults from config
    python balance_line.py data/example.in2 --cycle-time 10
    python balance_line.py data/example.in2 --heuristic shortest_duration
    python balance_line.py data/example.in2 --algorithm shortest_station
    python balance_line.py data/example.in2 --plot station_loads.png
    python balance_line.py data/example.in2 --config config/default_line.yaml

Heuristic options:
    longest_duration         longest task first [default]
    shortest_duration        shortest task first
    most_successors          most recursive successors first      (experimental)
    least_successors         fewest recursive successors first    (experimental)
    longest_successor_time   largest recursive successor time     (experimental)
    shortest_successor_time  smallest recursive successor time    (experimental)

Outputs the balancing report to stdout.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from src.analysis.metrics import format_report
from src.assembly.config import BalancerConfig, configure_logging, load_config
from src.assembly.errors import LineBalancingError
from src.assembly.line import ALGORITHMS
from src.balancing.engine import LineBalancer
from src.balancing.heuristics import heuristic_names

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    """Command-line interface definition."""

    parser = argparse.ArgumentParser(description="Balance an assembly line")
    parser.add_argument("input", type=str, help="Path to the .in2 line definition")
    parser.add_argument(
        "--config",
        type=str,
        default="config/default_line.yaml",
        help="Path to balancer config YAML",
    )
    parser.add_argument(
        "--cycle-time", type=float, default=None, help="Cycle time of the line (overrides config)"
    )
    parser.add_argument(
        "--heuristic",
        type=str,
        default=None,
        choices=heuristic_names(),
        help="Task selection heuristic (overrides config)",
    )
    parser.add_argument(
        "--algorithm",
        type=str,
        default=None,
        choices=list(ALGORITHMS),
        help="Balancing algorithm (overrides config)",
    )
    parser.add_argument(
        "--strict-pacing",
        action="store_true",
        help="Fail on tasks longer than the cycle time instead of raising the cycle time",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=LOG_LEVELS,
        help="Logging level (overrides config)",
    )
    parser.add_argument("--plot", type=str, default=None, help="Save a station load chart to this path")
    return parser


def resolve_config(args: argparse.Namespace) -> BalancerConfig:
    """Load the YAML config (defaults if missing) and apply CLI overrides."""

    config_path = Path(args.config)
    if config_path.exists():
        config = load_config(config_path)
    else:
        config = BalancerConfig()

    line = config.line
    if args.cycle_time is not None:
        line = replace(line, cycle_time=args.cycle_time)
    if args.strict_pacing:
        line = replace(line, adjust_pacing=False)

    balancing = config.balancing
    if args.heuristic is not None:
        balancing = replace(balancing, heuristic=args.heuristic)
    if args.algorithm is not None:
        balancing = replace(balancing, algorithm=args.algorithm)

    logging_cfg = config.logging
    if args.log_level is not None:
        logging_cfg = replace(logging_cfg, level=args.log_level)

    return BalancerConfig(line=line, balancing=balancing, logging=logging_cfg)


def main(argv: list[str] | None = None) -> int:
    """Main function that runs if the file is run directly."""

    args = build_parser().parse_args(argv)
    config = resolve_config(args)
    try:
        configure_logging(config.logging.level)
        result = LineBalancer(config).run(args.input)
    except (LineBalancingError, ValueError, OSError) as exc:
        print(f"balance: {exc}", file=sys.stderr)
        return 1

    print(format_report(result.metrics))

    if args.plot:
        from src.analysis.visualizations import plot_station_loads  # pylint: disable=import-outside-toplevel

        fig = plot_station_loads(result.line, result.cycle_time)
        fig.savefig(args.plot, dpi=150, bbox_inches="tight")

    return 0


if __name__ == "__main__":
    sys.exit(main())
