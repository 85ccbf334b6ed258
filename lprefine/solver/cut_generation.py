"""
Cut Generation controller for economic lot sizing.

This module implements the root-node cutting-plane loop that tightens the
LP relaxation of the lot-sizing model with (l,S)-inequalities.

Algorithm Overview:
------------------
1. Switch off the solver's own cuts and presolve
2. Solve the LP relaxation and save its basis
3. Read production and setup values
4. Separate: one most-violated (l,S)-inequality per violated period l
5. If none is violated, the LP optimum is reported: stop
6. Otherwise add every cut of the pass, reload the model, restore the
   saved basis and go to step 2

The (l,S)-inequalities describe the convex hull of the uncapacitated
problem, so the loop ends at an integral setup vector on well-posed
instances. No integer solve is performed.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from lprefine.config import config as global_config
from lprefine.core.instance import LotSizingInstance
from lprefine.master.lot_sizing import LotSizingMaster
from lprefine.separation.ls_inequalities import LSSeparator
from lprefine.solver.solution import CutIteration, CutSolution, CutStatus

logger = logging.getLogger(__name__)


@dataclass
class CutConfig:
    """
    Configuration for the cut generation loop.

    Attributes:
        max_passes: Maximum number of passes (0 = unlimited)
        tolerance: Violation and integrality tolerance
        verbose: Print progress information
    """
    max_passes: int = 0
    tolerance: float = field(default_factory=lambda: global_config.tolerance)
    verbose: bool = False

    def __post_init__(self):
        if self.max_passes < 0:
            raise ValueError("max_passes must be non-negative")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")


CutCallback = Callable[['CutGeneration', CutIteration], bool]


class CutGeneration:
    """
    Cut generation loop controller.

    Example:
        >>> from lprefine.solver import CutGeneration, CutConfig
        >>> loop = CutGeneration(LotSizingInstance.default(), CutConfig(verbose=True))
        >>> solution = loop.solve()
        >>> solution.is_integral
        True
    """

    def __init__(
        self,
        instance: LotSizingInstance,
        config: Optional[CutConfig] = None,
    ):
        self._instance = instance
        self._config = config or CutConfig()

        self._master: Optional[LotSizingMaster] = None
        self._separator: Optional[LSSeparator] = None
        self._callbacks: List[CutCallback] = []

        self._is_solved = False
        self._solution: Optional[CutSolution] = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def instance(self) -> LotSizingInstance:
        return self._instance

    @property
    def config(self) -> CutConfig:
        return self._config

    @property
    def master(self) -> Optional[LotSizingMaster]:
        return self._master

    @property
    def separator(self) -> Optional[LSSeparator]:
        return self._separator

    @property
    def is_solved(self) -> bool:
        return self._is_solved

    @property
    def solution(self) -> Optional[CutSolution]:
        return self._solution

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_master(self, master: LotSizingMaster) -> None:
        self._master = master

    def set_separator(self, separator: LSSeparator) -> None:
        self._separator = separator

    def add_callback(self, callback: CutCallback) -> None:
        """
        Add a callback called after each pass that added cuts.

        Return False to stop; the current LP point is reported.
        """
        self._callbacks.append(callback)

    # =========================================================================
    # Main Algorithm
    # =========================================================================

    def solve(self) -> CutSolution:
        """
        Run the cutting-plane loop.

        Returns:
            CutSolution with the last LP point and statistics

        Raises:
            SolverInfeasible: If the LP relaxation is infeasible
            SolverError: If an LP solve ends with another non-optimal status
        """
        start_time = time.time()
        self._initialize()

        model = self._master.model
        model.disable_automatic_cuts()
        model.disable_presolve()

        history: List[CutIteration] = []
        status = CutStatus.NOT_SOLVED
        total_cuts = 0
        npass = 0

        while True:
            if self._config.max_passes > 0 and npass >= self._config.max_passes:
                status = CutStatus.PASS_LIMIT
                # Cuts of the last pass are not reflected in the LP point yet
                lp = model.solve_relaxation()
                lp.raise_for_status("Lot sizing model")
                objective = lp.objective_value
                break

            npass += 1
            lp = model.solve_relaxation()
            lp.raise_for_status("Lot sizing model")
            objective = lp.objective_value

            with model.saved_basis() as basis:
                prod = self._master.get_production()
                setup = self._master.get_setups()
                cuts = self._separator.separate(prod, setup)

                for cut in cuts:
                    self._master.add_cut(cut)
                total_cuts += len(cuts)
                elapsed = time.time() - start_time

                iteration = CutIteration(
                    iteration=npass,
                    lp_objective=objective,
                    cuts_added=len(cuts),
                    total_cuts=total_cuts,
                    elapsed=elapsed,
                    cuts=list(cuts),
                )
                history.append(iteration)

                if self._config.verbose:
                    print(f"Pass {npass} ({elapsed:g} sec), objective value {objective:g}, "
                          f"cuts added: {len(cuts)} (total {total_cuts})")

                if not cuts:
                    status = CutStatus.OPTIMAL
                    if self._config.verbose:
                        print("Optimal integer solution found:")
                    break

                model.reload_model()
                model.load_basis(basis)

            if not self._invoke_callbacks(iteration):
                status = CutStatus.STOPPED
                lp = model.solve_relaxation()
                lp.raise_for_status("Lot sizing model")
                objective = lp.objective_value
                break

        solution = CutSolution(
            status=status,
            objective_value=objective,
            production=tuple(self._master.get_production()),
            setups=tuple(self._master.get_setups()),
            cuts=self._master.cuts,
            iterations=npass,
            iteration_history=history,
            tolerance=self._config.tolerance,
        )
        solution.total_time = time.time() - start_time

        logger.info(
            "%s: cut generation ended with %s after %d passes (%d cuts)",
            self._instance.name, status.name, npass, total_cuts,
        )
        if self._config.verbose:
            self._print_solution(solution)

        self._solution = solution
        self._is_solved = True
        return solution

    def _initialize(self) -> None:
        if self._master is None:
            self._master = LotSizingMaster(self._instance)
        if self._separator is None:
            self._separator = LSSeparator(
                self._instance.demand_table, tolerance=self._config.tolerance
            )

    def _print_solution(self, solution: CutSolution) -> None:
        inst = self._instance
        for t in range(inst.num_periods):
            print(f"Period {t + 1}: prod {solution.production[t]:g} "
                  f"(demand: {inst.demands[t]:g}, cost: {inst.production_costs[t]:g}), "
                  f"setup {solution.setups[t]:g} (cost: {inst.setup_costs[t]:g})")

    def _invoke_callbacks(self, iteration: CutIteration) -> bool:
        for callback in self._callbacks:
            if not callback(self, iteration):
                return False
        return True
