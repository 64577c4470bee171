#!/usr/bin/env python3
"""
Game of Life Runner

A small CLI that seeds a named pattern, advances it a number of
generations and prints a summary of the resulting board.
"""

import argparse
import sys
import time

from life_sim import LifeConfig, LifeSimulator, utils
from life_sim.patterns import get_pattern_names


def build_config(args: argparse.Namespace) -> LifeConfig:
    """Merge an optional parameter file with explicit CLI flags."""
    params = utils.load_params(args.config) if args.config else {}
    if args.pattern is not None:
        params["pattern"] = args.pattern
    if args.generations is not None:
        params["generations"] = args.generations
    if args.offset is not None:
        params["offset"] = tuple(args.offset)
    if args.level is not None:
        params["render_level"] = args.level
    if args.verbose:
        params["verbose"] = True
    return LifeConfig.from_dict(params)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run a Game of Life simulation on an unbounded board",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--pattern",
        choices=get_pattern_names(),
        default=None,
        help="Seed pattern (default: acorn)",
    )
    parser.add_argument(
        "--generations",
        type=int,
        default=None,
        help="Number of generations to advance (default: 100)",
    )
    parser.add_argument(
        "--offset",
        type=int,
        nargs=2,
        metavar=("X", "Y"),
        default=None,
        help="Top-left corner of the seed pattern (default: 25 23)",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=None,
        help="Quadtree level to summarise; blocks are 2**level cells wide",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON or TOML parameter file; CLI flags take precedence",
    )
    parser.add_argument("--verbose", action="store_true", help="Print progress")
    parser.add_argument(
        "--list-patterns", action="store_true", help="List seed patterns and exit"
    )

    args = parser.parse_args(argv)

    if args.list_patterns:
        for name in get_pattern_names():
            print(name)
        return 0

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    sim = LifeSimulator(config)
    print(f"Running {config.pattern}: generations={config.generations}, "
          f"offset={config.offset}")
    start_time = time.time()
    sim.run()
    elapsed_time = time.time() - start_time

    snap = sim.snapshot()
    blocks = sim.block_coords()
    print(f"\nSimulation completed in {elapsed_time:.2f} seconds")
    print(f"   Generation: {snap['generation']}")
    print(f"   Population: {snap['population']}")
    print(f"   Bounding square: ({snap['x_top_left']}, {snap['y_top_left']}) "
          f"size {snap['size']}")
    print(f"   Populated blocks at level {config.render_level}: {blocks.shape[0]}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
