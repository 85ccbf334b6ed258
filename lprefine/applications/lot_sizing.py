"""
Uncapacitated Economic Lot Sizing via (l,S) cut generation.

Each period has a demand that must be met from production in that period
or earlier. Producing in a period incurs a setup cost plus a unit cost.
The weak LP relaxation is tightened with (l,S)-inequalities until no
inequality is violated.

Usage:
------
    from lprefine.applications import LotSizingInstance, solve_lot_sizing

    solution = solve_lot_sizing(LotSizingInstance.default())
    print(solution.report())
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from lprefine.core.instance import LotSizingInstance
from lprefine.solver.cut_generation import CutConfig, CutGeneration
from lprefine.solver.solution import CutSolution, CutStatus


@dataclass
class LotSizingSolution:
    """Solution to a lot-sizing problem."""
    status: CutStatus
    objective_value: Optional[float]
    production: Tuple[float, ...]
    setups: Tuple[float, ...]
    num_cuts: int
    iterations: int
    solve_time: float
    is_integral: bool
    instance: LotSizingInstance = field(repr=False)
    cut_solution: Optional[CutSolution] = field(default=None, repr=False)

    @property
    def setup_cost(self) -> float:
        return sum(f * y for f, y in zip(self.instance.setup_costs, self.setups))

    @property
    def production_cost(self) -> float:
        return sum(p * x for p, x in zip(self.instance.production_costs, self.production))

    @property
    def setup_periods(self) -> Tuple[int, ...]:
        """Periods (0-based) with a setup value of at least one half."""
        return tuple(t for t, y in enumerate(self.setups) if y >= 0.5)

    def report(self) -> str:
        """Per-period production plan."""
        inst = self.instance
        lines = [f"Lot sizing ({self.status.name}):"]
        if self.objective_value is not None:
            lines.append(f"  Total cost: {self.objective_value:g}")
        lines.append(f"  Passes: {self.iterations}, cuts: {self.num_cuts}")
        lines.append("  Solution is integer" if self.is_integral else "  Solution is fractional")
        for t in range(inst.num_periods):
            lines.append(
                f"    Period {t + 1}: prod {self.production[t]:g} "
                f"(demand: {inst.demands[t]:g}), setup {self.setups[t]:g}"
            )
        return "\n".join(lines)


def solve_lot_sizing(
    instance: Optional[LotSizingInstance] = None,
    max_passes: int = 0,
    verbose: bool = False,
    tolerance: Optional[float] = None,
) -> LotSizingSolution:
    """
    Solve a lot-sizing problem by cut generation at the root node.

    Args:
        instance: The problem instance (default: LotSizingInstance.default())
        max_passes: Maximum passes (0 = unlimited)
        verbose: Print progress
        tolerance: Numerical tolerance (default: config.tolerance)

    Returns:
        LotSizingSolution with results
    """
    if instance is None:
        instance = LotSizingInstance.default()

    overrides = {}
    if tolerance is not None:
        overrides['tolerance'] = tolerance
    loop = CutGeneration(instance, CutConfig(max_passes=max_passes, verbose=verbose, **overrides))
    result = loop.solve()

    return LotSizingSolution(
        status=result.status,
        objective_value=result.objective_value,
        production=result.production,
        setups=result.setups,
        num_cuts=result.num_cuts,
        iterations=result.iterations,
        solve_time=result.total_time,
        is_integral=result.is_integral,
        instance=instance,
        cut_solution=result,
    )
