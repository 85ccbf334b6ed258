"""
Cutting Stock Problem via root-node column generation.

The Cutting Stock Problem (CSP) asks: given item types with widths and
demands, and raw rolls of fixed width, find the minimum number of rolls
needed to cut all pieces.

Master problem: select patterns (columns) to minimize roll usage.
Pricing problem: bounded knapsack over the demand-row duals.

Usage:
------
    from lprefine.applications import CuttingStockInstance, solve_cutting_stock

    instance = CuttingStockInstance(
        roll_width=100,
        item_sizes=[45, 36, 31, 14],
        item_demands=[97, 610, 395, 211],
    )

    solution = solve_cutting_stock(instance)
    print(f"Rolls needed: {solution.num_rolls_ip}")
    for counts, rolls in solution.patterns:
        print(f"  Cut {counts} x {rolls}")
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from lprefine.core.instance import CuttingStockInstance
from lprefine.solver.column_generation import CGConfig, ColumnGeneration
from lprefine.solver.solution import CGSolution, CGStatus


@dataclass
class CuttingStockSolution:
    """Solution to a cutting stock problem."""
    status: CGStatus
    num_rolls: Optional[float]               # LP relaxation may be fractional
    num_rolls_ip: Optional[int]              # Integer solution
    patterns: List[Tuple[Tuple[int, ...], float]]  # (counts, rolls) with rolls > 0
    lp_objective: Optional[float]
    ip_objective: Optional[float]
    solve_time: float
    iterations: int
    num_columns: int
    lower_bound: Optional[float] = None      # L2 lower bound
    item_sizes: Tuple[float, ...] = field(default_factory=tuple)
    cg_solution: Optional[CGSolution] = field(default=None, repr=False)

    @property
    def converged(self) -> bool:
        return self.status == CGStatus.OPTIMAL

    def report(self) -> str:
        """Human-readable report of the patterns in use."""
        lines = [f"Cutting stock ({self.status.name}):"]
        if self.lp_objective is not None:
            lines.append(f"  LP bound: {self.lp_objective:.4f} rolls")
        if self.ip_objective is not None:
            lines.append(f"  Integer solution: {self.ip_objective:g} rolls")
        if self.lower_bound is not None:
            lines.append(f"  L2 lower bound: {self.lower_bound:g}")
        lines.append(f"  Passes: {self.iterations}, patterns: {self.num_columns}")
        for counts, rolls in self.patterns:
            parts = "  ".join(
                f"{w:g}:{c}" for w, c in zip(self.item_sizes, counts) if c > 0
            )
            lines.append(f"    {rolls:g} x [{parts}]")
        return "\n".join(lines)


def solve_cutting_stock(
    instance: Optional[CuttingStockInstance] = None,
    max_columns: Optional[int] = None,
    verbose: bool = False,
    solve_ip: bool = True,
    tolerance: Optional[float] = None,
) -> CuttingStockSolution:
    """
    Solve a cutting stock problem using column generation.

    Args:
        instance: The problem instance (default: CuttingStockInstance.default())
        max_columns: Maximum patterns to generate (default: config.max_columns)
        verbose: Print progress
        solve_ip: Whether to solve the integer model after column generation
        tolerance: Numerical tolerance (default: config.tolerance)

    Returns:
        CuttingStockSolution with results
    """
    if instance is None:
        instance = CuttingStockInstance.default()

    overrides = {}
    if max_columns is not None:
        overrides['max_columns'] = max_columns
    if tolerance is not None:
        overrides['tolerance'] = tolerance
    cg_config = CGConfig(solve_ip=solve_ip, verbose=verbose, **overrides)

    lower_bound = instance.l2_lower_bound()
    if verbose:
        print(f"L2 lower bound: {lower_bound}")

    cg = ColumnGeneration(instance, cg_config)
    result = cg.solve()

    used = [
        (p.counts, p.value) for p in result.patterns
        if p.value is not None and p.value > cg_config.tolerance
    ]

    return CuttingStockSolution(
        status=result.status,
        num_rolls=result.lp_objective,
        num_rolls_ip=round(result.ip_objective) if result.ip_objective is not None else None,
        patterns=used,
        lp_objective=result.lp_objective,
        ip_objective=result.ip_objective,
        solve_time=result.total_time,
        iterations=result.iterations,
        num_columns=result.num_patterns,
        lower_bound=lower_bound,
        item_sizes=instance.item_sizes,
        cg_solution=result,
    )
