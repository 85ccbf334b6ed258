"""
Column Generation controller for the cutting stock problem.

This module implements the root-node column generation loop that
coordinates the restricted pattern model and the knapsack pricing oracle.

Algorithm Overview:
------------------
1. Start with one trivial pattern per item type
2. Solve the LP relaxation of the pattern model and save its basis
3. Extract pattern values and the duals of the demand rows
4. Solve the knapsack pricing problem with the duals as profits
5. If z* < 1 + tolerance, no pattern improves the LP: stop
6. Otherwise add the pattern, reload the model, restore the saved basis
   and go to step 2
7. Solve the integer model over all patterns found

Step 7 makes the procedure a heuristic for the integer problem: columns
are only generated at the root node, never inside branch-and-bound.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from lprefine.config import config as global_config
from lprefine.core.instance import CuttingStockInstance
from lprefine.core.pattern import Pattern
from lprefine.master.cutting_stock import CuttingStockMaster
from lprefine.pricing.base import PricingProblem, PricingSolution
from lprefine.pricing.knapsack import PatternPricing
from lprefine.solver.solution import CGIteration, CGSolution, CGStatus

logger = logging.getLogger(__name__)


@dataclass
class CGConfig:
    """
    Configuration for the column generation loop.

    Attributes:
        max_columns: Maximum number of passes, hence of patterns the loop
            may add. When exhausted the integer model is solved anyway.
        tolerance: A pattern improves the LP if z* >= 1 + tolerance
        solve_ip: Whether to solve the integer model after the loop
        verbose: Print progress information
    """
    max_columns: int = field(default_factory=lambda: global_config.max_columns)
    tolerance: float = field(default_factory=lambda: global_config.tolerance)
    solve_ip: bool = True
    verbose: bool = False

    def __post_init__(self):
        if self.max_columns < 0:
            raise ValueError("max_columns must be non-negative")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")


# Type alias for callback functions
CGCallback = Callable[['ColumnGeneration', CGIteration], bool]


class ColumnGeneration:
    """
    Column generation loop controller.

    Example:
        >>> from lprefine.solver import ColumnGeneration, CGConfig
        >>> cg = ColumnGeneration(CuttingStockInstance.default(), CGConfig(verbose=True))
        >>> solution = cg.solve()
        >>> print(f"Rolls: {solution.ip_objective}")

    Customization:
        A master built on another solver adapter, or another pricing
        implementation, can be set before solving:

        >>> cg = ColumnGeneration(instance)
        >>> cg.set_master(CuttingStockMaster(instance, model=MyAdapter("cs")))
        >>> solution = cg.solve()

    Callbacks:
        Register callbacks to monitor progress:

        >>> def my_callback(cg, iteration):
        ...     print(f"Pass {iteration.iteration}: obj={iteration.lp_objective}")
        ...     return True  # Continue solving
        >>> cg.add_callback(my_callback)
    """

    def __init__(
        self,
        instance: CuttingStockInstance,
        config: Optional[CGConfig] = None,
    ):
        """
        Initialize the column generation controller.

        Args:
            instance: The cutting stock instance to solve
            config: Configuration options (uses defaults if not provided)
        """
        self._instance = instance
        self._config = config or CGConfig()

        # Components (created lazily or set externally)
        self._master: Optional[CuttingStockMaster] = None
        self._pricing: Optional[PricingProblem] = None

        self._callbacks: List[CGCallback] = []

        self._is_solved = False
        self._solution: Optional[CGSolution] = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def instance(self) -> CuttingStockInstance:
        return self._instance

    @property
    def config(self) -> CGConfig:
        return self._config

    @property
    def master(self) -> Optional[CuttingStockMaster]:
        return self._master

    @property
    def pricing(self) -> Optional[PricingProblem]:
        return self._pricing

    @property
    def is_solved(self) -> bool:
        return self._is_solved

    @property
    def solution(self) -> Optional[CGSolution]:
        return self._solution

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_master(self, master: CuttingStockMaster) -> None:
        self._master = master

    def set_pricing(self, pricing: PricingProblem) -> None:
        self._pricing = pricing

    def add_callback(self, callback: CGCallback) -> None:
        """
        Add a callback function.

        Callbacks are called after each pass with the ColumnGeneration
        instance and the pass record. Return False to stop pricing; the
        integer model is still solved.

        Args:
            callback: Function taking (ColumnGeneration, CGIteration) -> bool
        """
        self._callbacks.append(callback)

    # =========================================================================
    # Main Algorithm
    # =========================================================================

    def solve(self) -> CGSolution:
        """
        Run column generation, then the integer solve.

        Returns:
            CGSolution with results and statistics

        Raises:
            SolverInfeasible: If the LP relaxation or integer model is infeasible
            SolverError: If a solve ends with another non-optimal status
            AllocationFailure: If the pricing oracle cannot build its model
        """
        start_time = time.time()
        self._initialize()

        solution = self._run_column_generation(start_time)
        self._finalize(solution, start_time)

        solution.total_time = time.time() - start_time
        self._solution = solution
        self._is_solved = True
        return solution

    def _initialize(self) -> None:
        if self._master is None:
            self._master = CuttingStockMaster(self._instance, tolerance=self._config.tolerance)
        if self._pricing is None:
            self._pricing = PatternPricing(
                self._instance.item_sizes,
                self._instance.roll_width,
                self._instance.item_demands,
                tolerance=self._config.tolerance,
            )

    def _run_column_generation(self, start_time: float) -> CGSolution:
        model = self._master.model
        history: List[CGIteration] = []
        status = CGStatus.COLUMN_LIMIT
        lp_objective = None
        generated = 0

        for npass in range(self._config.max_columns):
            lp = model.solve_relaxation()
            lp.raise_for_status("Cutting stock master")
            lp_objective = lp.objective_value

            with model.saved_basis() as basis:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "pass %d: obj=%.6f values=%s",
                        npass + 1, lp_objective, self._master.get_pattern_values(),
                    )
                self._pricing.set_dual_values(self._master.get_duals())
                priced = self._pricing.solve()
                elapsed = time.time() - start_time

                iteration = CGIteration(
                    iteration=npass + 1,
                    lp_objective=lp_objective,
                    pricing_value=priced.value,
                    reduced_cost=priced.reduced_cost,
                    elapsed=elapsed,
                    lp_iterations=lp.iterations,
                )

                if not priced.has_negative_reduced_cost:
                    if self._config.verbose:
                        print(f"({elapsed:g} sec) Pass {npass + 1}: no profitable column found.\n")
                    history.append(iteration)
                    self._invoke_callbacks(iteration)
                    status = CGStatus.OPTIMAL
                    break

                pattern = self._master.add_pattern(priced.counts, priced.reduced_cost)
                generated += 1
                iteration.pattern = pattern
                if self._config.verbose:
                    self._print_pattern(npass + 1, elapsed, priced, pattern)

                model.reload_model()
                model.load_basis(basis)

            history.append(iteration)
            if not self._invoke_callbacks(iteration):
                status = CGStatus.STOPPED
                break

        logger.info(
            "%s: column generation ended with %s after %d passes (%d patterns added)",
            self._instance.name, status.name, len(history), generated,
        )

        return CGSolution(
            status=status,
            lp_objective=lp_objective,
            num_generated=generated,
            iterations=len(history),
            iteration_history=history,
        )

    def _finalize(self, solution: CGSolution, start_time: float) -> None:
        """Solve the integer model (or refresh the LP) and collect pattern values."""
        model = self._master.model

        if self._config.solve_ip:
            ip = model.solve_integer()
            if not ip.has_solution:
                ip.raise_for_status("Cutting stock master")
            solution.ip_objective = ip.objective_value
        elif solution.status != CGStatus.OPTIMAL:
            # A pattern was added after the last LP solve
            lp = model.solve_relaxation()
            lp.raise_for_status("Cutting stock master")
            solution.lp_objective = lp.objective_value

        solution.patterns = self._master.patterns_with_values()

        if self._config.verbose:
            elapsed = time.time() - start_time
            values = ", ".join(f"{p.value:g}" for p in solution.patterns)
            print(
                f"({elapsed:g} sec) Optimal solution: {solution.objective_value:g} rolls, "
                f"{solution.num_patterns} patterns\n"
                f"   Rolls per pattern: {values}"
            )

    def _print_pattern(
        self,
        npass: int,
        elapsed: float,
        priced: PricingSolution,
        pattern: Pattern,
    ) -> None:
        widths = self._instance.item_sizes
        print(f"({elapsed:g} sec) Pass {npass}: new pattern found with marginal cost "
              f"{priced.value - 1:g}")
        print(f"   Widths distribution: {pattern.describe(widths)}  "
              f"Total width: {pattern.total_width(widths):g}")

    def _invoke_callbacks(self, iteration: CGIteration) -> bool:
        """
        Invoke all callbacks.

        Returns:
            True to continue, False to stop
        """
        for callback in self._callbacks:
            if not callback(self, iteration):
                return False
        return True
