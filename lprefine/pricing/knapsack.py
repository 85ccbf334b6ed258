"""
Bounded integer knapsack pricing for cutting stock.

Pricing Subproblem (Bounded Knapsack):
    max  sum_i c_i * x_i              (c_i = dual price of demand row i)
    s.t. sum_i a_i * x_i <= R         (a_i = item width, R = roll width)
         0 <= x_i <= d_i              (d_i = demand of item i)
         x_i integer

A pattern improves the master (minimize rolls, every pattern costs 1) if
its reduced cost 1 - z* is negative, i.e. z* > 1.

The knapsack is solved as its own small MIP on a fresh solver model, so
fractional widths need no discretization. The oracle has no side effect
on the caller's model.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple

from lprefine.config import config
from lprefine.errors import AllocationFailure
from lprefine.model import HighsModel, ObjectiveSense, Relation, VarType
from lprefine.model.base import SolverAdapter
from lprefine.model.expression import LinearExpression
from lprefine.pricing.base import PricingProblem, PricingSolution, PricingStatus

logger = logging.getLogger(__name__)

ModelFactory = Callable[[str], SolverAdapter]


def _exact_highs_model(name: str) -> SolverAdapter:
    return HighsModel(name, mip_rel_gap=0.0)


@dataclass
class KnapsackResult:
    """
    Optimal knapsack solution.

    Attributes:
        value: z* recomputed from the integer counts
        counts: Optimal x* per item type
        solver_value: Objective reported by the solver (None when no
            solve was needed)
        nodes: Branch-and-bound nodes used by the nested solve
    """
    value: float
    counts: Tuple[int, ...] = field(default_factory=tuple)
    solver_value: Optional[float] = None
    nodes: int = 0

    def weight(self, weights: Sequence[float]) -> float:
        return sum(a * x for a, x in zip(weights, self.counts))


class KnapsackOracle:
    """
    Exact bounded integer knapsack solver built on a nested MIP.

    Example:
        >>> oracle = KnapsackOracle()
        >>> result = oracle.solve([0.2, 0.25], [17, 21], 94, [150, 96])
        >>> result.counts
        (3, 2)
    """

    def __init__(
        self,
        model_factory: Optional[ModelFactory] = None,
        tolerance: Optional[float] = None,
    ):
        """
        Args:
            model_factory: Builds the working model for one solve
                (default: HiGHS with zero relative MIP gap)
            tolerance: Integrality tolerance (default: config.tolerance)
        """
        self._model_factory = model_factory or _exact_highs_model
        self._tolerance = tolerance if tolerance is not None else config.tolerance

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def solve(
        self,
        profits: Sequence[float],
        weights: Sequence[float],
        capacity: float,
        caps: Sequence[int],
    ) -> KnapsackResult:
        """
        Solve max{c x : a x <= R, 0 <= x <= d, x integer}.

        Args:
            profits: Unit profit c_i of each item type
            weights: Unit resource use a_i of each item type
            capacity: Total resource R
            caps: Upper bound d_i on each count

        Returns:
            KnapsackResult with z* and x*

        Raises:
            ValueError: If the input lengths differ
            AllocationFailure: If the working model cannot be created
            SolverError: If the nested solve is not optimal
        """
        n = len(profits)
        if len(weights) != n or len(caps) != n:
            raise ValueError("profits, weights and caps must have same length")

        # Items that can never be part of an optimal pattern
        active = [
            i for i in range(n)
            if profits[i] > 0 and caps[i] > 0 and weights[i] <= capacity
        ]
        if not active:
            return KnapsackResult(value=0.0, counts=(0,) * n)

        try:
            model = self._model_factory("Knapsack")
            x = {
                i: model.create_variable(f"x_{i}", VarType.INTEGER, 0, caps[i])
                for i in active
            }
        except MemoryError as exc:
            raise AllocationFailure("Allocating the knapsack model failed") from exc

        objective = LinearExpression()
        knap = LinearExpression()
        for i in active:
            objective.add_term(x[i], profits[i])
            knap.add_term(x[i], weights[i])
        model.set_objective(objective, ObjectiveSense.MAXIMIZE)
        model.create_constraint("Knap", knap, Relation.LE, capacity)

        solution = model.solve_integer()
        solution.raise_for_status("Knapsack")

        counts = [0] * n
        for i in active:
            counts[i] = min(self._to_count(model.get_solution_value(x[i])), int(caps[i]))

        value = sum(profits[i] * counts[i] for i in active)
        logger.debug("knapsack: z*=%.6f x*=%s", value, counts)

        return KnapsackResult(
            value=value,
            counts=tuple(counts),
            solver_value=solution.objective_value,
            nodes=solution.nodes,
        )

    def _to_count(self, value: float) -> int:
        """Round values within tolerance of an integer, floor the others."""
        nearest = math.floor(value + 0.5)
        if abs(value - nearest) <= self._tolerance:
            return max(int(nearest), 0)
        return max(int(math.floor(value)), 0)


class PatternPricing(PricingProblem):
    """
    Pricing problem for cutting stock.

    Prices the demand rows with the knapsack oracle; the candidate pattern
    improves the master when z* >= 1 + tolerance.
    """

    def __init__(
        self,
        widths: Sequence[float],
        capacity: float,
        demands: Sequence[int],
        oracle: Optional[KnapsackOracle] = None,
        tolerance: Optional[float] = None,
    ):
        super().__init__()
        self._widths = tuple(widths)
        self._capacity = capacity
        self._demands = tuple(demands)
        self._tolerance = tolerance if tolerance is not None else config.tolerance
        self._oracle = oracle or KnapsackOracle(tolerance=self._tolerance)

    @property
    def oracle(self) -> KnapsackOracle:
        return self._oracle

    def _solve_impl(self) -> PricingSolution:
        duals = [self._dual_values.get(i, 0.0) for i in range(len(self._widths))]
        result = self._oracle.solve(duals, self._widths, self._capacity, self._demands)

        improving = result.value >= 1.0 + self._tolerance
        return PricingSolution(
            status=PricingStatus.COLUMNS_FOUND if improving else PricingStatus.NO_COLUMNS,
            counts=result.counts,
            value=result.value,
            reduced_cost=1.0 - result.value,
        )
