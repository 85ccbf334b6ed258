"""
Example: Solving a cutting stock instance using Column Generation.

This example demonstrates the complete workflow:
1. Load a BPPLIB instance (or use the built-in paper-roll instance)
2. Run column generation with the knapsack pricing oracle
3. Solve the integer model over the generated patterns
4. Report the patterns in use

Usage:
    python examples/scripts/cutting_stock/solve_cutstock.py [instance_file] [--max-columns N] [--verbose]

Prerequisites:
    - Install lprefine: pip install -e .
"""

import argparse
import sys
import time
from pathlib import Path

# Add parent directory to path (for running without installation)
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from lprefine.applications import CuttingStockInstance, solve_cutting_stock
from lprefine.config import config, configure_logging
from lprefine.errors import LPRefineError
from lprefine.model import HIGHS_AVAILABLE


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Solve a cutting stock instance using Column Generation"
    )
    parser.add_argument(
        "instance",
        nargs="?",
        default=None,
        help="Path to a BPPLIB .txt file (default: built-in five-width instance)"
    )
    parser.add_argument(
        "--max-columns",
        type=int,
        default=config.max_columns,
        help=f"Maximum patterns to generate (default: {config.max_columns})"
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=config.tolerance,
        help=f"Improvement tolerance (default: {config.tolerance:g})"
    )
    parser.add_argument(
        "--lp-only",
        action="store_true",
        help="Skip the integer solve after column generation"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every pass"
    )
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        help=f"Logging level (default: {config.log_level})"
    )
    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_args()
    configure_logging(args.log_level)

    if not HIGHS_AVAILABLE:
        print("Error: HiGHS solver not available.")
        print("Install with: pip install highspy")
        return 1

    if args.instance:
        instance_path = Path(args.instance)
        if not instance_path.exists():
            print(f"Error: Instance not found: {instance_path}")
            return 1
        instance = CuttingStockInstance.from_bpplib(str(instance_path))
    else:
        instance = CuttingStockInstance.default()

    print("=" * 70)
    print("LPRefine - Cutting Stock Solver")
    print("=" * 70)
    print(f"Instance: {instance.name}")
    print(f"  Roll width: {instance.roll_width:g}")
    print(f"  Item types: {instance.num_items}, pieces: {instance.total_demand}")
    print(f"  Max patterns: {args.max_columns}")
    print()

    start = time.time()
    try:
        solution = solve_cutting_stock(
            instance,
            max_columns=args.max_columns,
            verbose=args.verbose,
            solve_ip=not args.lp_only,
            tolerance=args.tolerance,
        )
    except LPRefineError as e:
        print(f"Error: {e}")
        return 1
    elapsed = time.time() - start

    print()
    print("=" * 70)
    print("RESULTS")
    print("=" * 70)
    print(solution.report())
    if solution.cg_solution is not None and solution.cg_solution.gap is not None:
        print(f"  Gap to LP: {solution.cg_solution.gap:.2%}")
    print(f"  Time: {elapsed:.2f}s")

    return 0


if __name__ == "__main__":
    sys.exit(main())
