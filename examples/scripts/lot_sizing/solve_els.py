"""
Example: Solving an economic lot-sizing instance using Cut Generation.

The LP relaxation of the lot-sizing model is tightened with
(l,S)-inequalities until none is violated; the final LP point is then
integral.

Usage:
    python examples/scripts/lot_sizing/solve_els.py [--demands 1 3 5 ...] [--setup-costs ...]
        [--production-costs ...] [--max-passes N] [--verbose]
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path (for running without installation)
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from lprefine.applications import LotSizingInstance, solve_lot_sizing
from lprefine.config import config, configure_logging
from lprefine.errors import LPRefineError
from lprefine.model import HIGHS_AVAILABLE


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Solve an uncapacitated lot-sizing instance using (l,S) cuts"
    )
    parser.add_argument("--demands", type=float, nargs="+", help="Demand per period")
    parser.add_argument("--setup-costs", type=float, nargs="+", help="Setup cost per period")
    parser.add_argument(
        "--production-costs", type=float, nargs="+", help="Unit production cost per period"
    )
    parser.add_argument(
        "--max-passes",
        type=int,
        default=0,
        help="Maximum passes, 0 for no limit (default: 0)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every pass and the final plan"
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

    given = [args.demands, args.setup_costs, args.production_costs]
    if any(v is not None for v in given):
        if any(v is None for v in given):
            print("Error: --demands, --setup-costs and --production-costs go together")
            return 1
        try:
            instance = LotSizingInstance(
                demands=args.demands,
                setup_costs=args.setup_costs,
                production_costs=args.production_costs,
                name="cli",
            )
        except ValueError as e:
            print(f"Error: {e}")
            return 1
    else:
        instance = LotSizingInstance.default()

    print("=" * 70)
    print("LPRefine - Lot Sizing Solver")
    print("=" * 70)
    print(f"Periods: {instance.num_periods}, total demand: {instance.demand_table.remaining(0):g}")
    print()

    try:
        solution = solve_lot_sizing(instance, max_passes=args.max_passes, verbose=args.verbose)
    except LPRefineError as e:
        print(f"Error: {e}")
        return 1

    print()
    print(solution.report())
    print(f"  Setup cost: {solution.setup_cost:g}, production cost: {solution.production_cost:g}")
    print(f"  Time: {solution.solve_time:.2f}s")

    return 0


if __name__ == "__main__":
    sys.exit(main())
