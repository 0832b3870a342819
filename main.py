#!/usr/bin/env python3
"""Command-line entry point: solve one ACP challenge instance.

Prints instance statistics, then one log line per improving solution with
the product of every period (``-1`` for idle periods).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from acp.algorithms import LocalSearchDriver
from acp.config import SolverConfig, load_config
from acp.errors import AcpError
from acp.parser import load_instance

logger = logging.getLogger("acp")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Runs the ACP 2014 production scheduling challenge solver"
    )
    parser.add_argument("--input", default="", help="Instance file (required)")
    parser.add_argument("--config", default=None, help="Optional YAML configuration file")
    parser.add_argument("--lns_size", type=int, default=None, help="LNS size (default 10)")
    parser.add_argument(
        "--lns_limit",
        type=int,
        default=None,
        help="Limit the number of failures of the lns loop (default 30)",
    )
    parser.add_argument(
        "--lns_pass", type=int, default=None, help="LNS moves per neighborhood pass"
    )
    parser.add_argument(
        "--operators", default=None, help="Comma separated operators: lns, swap (default lns)"
    )
    parser.add_argument(
        "--time_limit", dest="time_limit_s", type=float, default=None, help="Time limit in s"
    )
    parser.add_argument(
        "--solution_limit", type=int, default=None, help="Stop after this many solutions"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--trace", dest="trace_file", default=None, help="CSV trace of accepted moves"
    )
    parser.add_argument("--charts_dir", default=None, help="Directory for PNG charts")
    parser.add_argument("--log_level", default=None, help="Logging level (default INFO)")
    return parser


def resolve_config(args: argparse.Namespace) -> SolverConfig:
    """Merge defaults, the optional YAML file and explicit flags."""
    config = load_config(args.config) if args.config else SolverConfig()
    return config.with_overrides(
        {
            "lns_size": args.lns_size,
            "lns_limit": args.lns_limit,
            "lns_pass": args.lns_pass,
            "operators": args.operators,
            "time_limit_s": args.time_limit_s,
            "solution_limit": args.solution_limit,
            "seed": args.seed,
            "trace_file": args.trace_file,
            "charts_dir": args.charts_dir,
            "log_level": args.log_level,
        }
    )


def save_charts(driver: LocalSearchDriver, instance_path: str, charts_dir: str) -> None:
    from acp.visualization import plot_cost_progress, plot_production_timeline

    state = driver.state
    if state is None:
        return
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base = os.path.basename(instance_path)
    timeline_path = os.path.join(
        charts_dir, f"plan_{base}_c{state.best.objective}_{stamp}.png"
    )
    plot_production_timeline(state.best, driver.instance, save_path=timeline_path)
    logger.info("Saved production plan chart to %s", timeline_path)
    progress_path = os.path.join(charts_dir, f"progress_{base}_{stamp}.png")
    plot_cost_progress(state.time_history_ms, state.cost_history, save_path=progress_path)
    logger.info("Saved cost progress chart to %s", progress_path)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    logging.getLogger().setLevel(config.log_level.upper())

    if not args.input:
        logger.error("Please supply a data file with --input=")
        return 1
    try:
        instance = load_instance(args.input)
    except AcpError as e:
        logger.error("%s", e)
        return 1

    driver = LocalSearchDriver(instance, config)
    for schedule in driver.solutions():
        logger.info("%s", schedule.format_products())
    if config.charts_dir and driver.state is not None:
        save_charts(driver, args.input, config.charts_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
