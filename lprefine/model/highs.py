"""
HiGHS implementation of the solver adapter.

This module provides the default solver adapter using HiGHS via the highspy
Python bindings.

Structural edits (new columns, rows, matrix entries, costs, bounds) are
kept in Python and pushed to HiGHS on ``reload_model()``. The HiGHS model
itself is always kept continuous; ``solve_integer()`` switches the integer
columns to integral for the duration of the solve only, so a relaxation
can be solved again afterwards.

Usage:
    >>> from lprefine.model import HighsModel, ObjectiveSense, Relation, VarType
    >>> model = HighsModel("example")
    >>> x = model.create_variable("x", VarType.INTEGER, 0, 4)
    >>> model.create_constraint("cap", 3 * x, Relation.LE, 10)
    >>> model.set_objective(x, ObjectiveSense.MAXIMIZE)
    >>> model.solve_integer().objective_value
    3.0
"""

import logging
import math
import time
from typing import Any, Dict, List, Optional, Set, Tuple

try:
    import highspy
    HIGHS_AVAILABLE = True
except ImportError:
    HIGHS_AVAILABLE = False

from lprefine.model.base import SolverAdapter
from lprefine.model.expression import (
    Constraint,
    ObjectiveSense,
    Relation,
    Variable,
)
from lprefine.model.solution import BasisHandle, ModelSolution, SolutionStatus

logger = logging.getLogger(__name__)


# HiGHS status mapping
def _map_highs_status(status: Any) -> SolutionStatus:
    """Map HiGHS model status to our SolutionStatus."""
    if not HIGHS_AVAILABLE:
        return SolutionStatus.ERROR

    status_map = {
        highspy.HighsModelStatus.kNotset: SolutionStatus.NOT_SOLVED,
        highspy.HighsModelStatus.kLoadError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kModelError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kPresolveError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kSolveError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kPostsolveError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kModelEmpty: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kOptimal: SolutionStatus.OPTIMAL,
        highspy.HighsModelStatus.kInfeasible: SolutionStatus.INFEASIBLE,
        highspy.HighsModelStatus.kUnbounded: SolutionStatus.UNBOUNDED,
        highspy.HighsModelStatus.kUnboundedOrInfeasible: SolutionStatus.INF_OR_UNBOUNDED,
        highspy.HighsModelStatus.kTimeLimit: SolutionStatus.TIME_LIMIT,
        highspy.HighsModelStatus.kIterationLimit: SolutionStatus.ITERATION_LIMIT,
    }

    return status_map.get(status, SolutionStatus.ERROR)


def _bound(value: float) -> float:
    """Translate an infinite bound to the HiGHS infinity."""
    if value == math.inf:
        return highspy.kHighsInf
    if value == -math.inf:
        return -highspy.kHighsInf
    return value


class HighsModel(SolverAdapter):
    """
    Solver adapter backed by HiGHS.

    Features:
    - LP and MIP solving on the same model
    - Buffered structural edits flushed by reload_model()
    - Basis save/restore with extension to newly added columns and rows

    Attributes:
        time_limit: Maximum solve time in seconds (None = no limit)
        verbosity: HiGHS output level (0 = silent, 1 = normal)
        mip_rel_gap: Relative gap at which integer solves stop
    """

    def __init__(
        self,
        name: str = "model",
        time_limit: Optional[float] = None,
        verbosity: int = 0,
        mip_rel_gap: Optional[float] = None,
    ):
        """
        Initialize the HiGHS model.

        Args:
            name: Model name
            time_limit: Maximum solve time in seconds (None = no limit)
            verbosity: HiGHS output level (0 = silent)
            mip_rel_gap: Relative MIP gap (None = HiGHS default)

        Raises:
            ImportError: If highspy is not installed
        """
        if not HIGHS_AVAILABLE:
            raise ImportError(
                "HiGHS is not available. Install it with: pip install highspy"
            )

        self._time_limit = time_limit
        self._verbosity = verbosity
        self._mip_rel_gap = mip_rel_gap

        self._highs: Optional[highspy.Highs] = None

        # Python-side copy of the model
        self._col_lower: List[float] = []
        self._col_upper: List[float] = []
        self._col_cost: List[float] = []
        self._row_lower: List[float] = []
        self._row_upper: List[float] = []
        self._coefficients: Dict[Tuple[int, int], float] = {}
        self._sense = ObjectiveSense.MINIMIZE
        self._offset = 0.0

        # Edits not yet pushed to HiGHS
        self._synced_cols = 0
        self._synced_rows = 0
        self._pending_coefficients: Set[Tuple[int, int]] = set()
        self._pending_costs: Set[int] = set()
        self._pending_bounds: Set[int] = set()
        self._pending_objective = True

        # Values of the last solve
        self._col_value: List[float] = []
        self._row_dual: List[float] = []

        super().__init__(name)

    # =========================================================================
    # Abstract Method Implementations
    # =========================================================================

    def _build_model(self) -> None:
        """Create the HiGHS instance and apply options."""
        self._highs = highspy.Highs()

        self._highs.setOptionValue('output_flag', self._verbosity > 0)
        self._highs.setOptionValue('log_to_console', self._verbosity > 0)

        if self._time_limit is not None:
            self._highs.setOptionValue('time_limit', float(self._time_limit))
        if self._mip_rel_gap is not None:
            self._highs.setOptionValue('mip_rel_gap', float(self._mip_rel_gap))

    def _create_variable_impl(self, var: Variable, lower: float, upper: float) -> None:
        self._col_lower.append(lower)
        self._col_upper.append(upper)
        self._col_cost.append(0.0)

    def _create_constraint_impl(
        self,
        con: Constraint,
        terms: List[Tuple[Variable, float]],
        relation: Relation,
        rhs: float,
    ) -> None:
        if relation is Relation.LE:
            lower, upper = -math.inf, rhs
        elif relation is Relation.GE:
            lower, upper = rhs, math.inf
        else:
            lower, upper = rhs, rhs
        self._row_lower.append(lower)
        self._row_upper.append(upper)

        for var, coeff in terms:
            key = (con.index, var.index)
            self._coefficients[key] = self._coefficients.get(key, 0.0) + coeff
            self._pending_coefficients.add(key)

    def _set_objective_impl(
        self,
        terms: List[Tuple[Variable, float]],
        sense: ObjectiveSense,
        constant: float,
    ) -> None:
        for j, cost in enumerate(self._col_cost):
            if cost != 0.0:
                self._col_cost[j] = 0.0
                self._pending_costs.add(j)
        for var, coeff in terms:
            self._col_cost[var.index] += coeff
            self._pending_costs.add(var.index)
        self._sense = sense
        self._offset = constant
        self._pending_objective = True

    def _add_term_to_objective_impl(self, var: Variable, coeff: float) -> None:
        self._col_cost[var.index] += coeff
        self._pending_costs.add(var.index)

    def _add_term_to_constraint_impl(self, con: Constraint, var: Variable, coeff: float) -> None:
        key = (con.index, var.index)
        self._coefficients[key] = self._coefficients.get(key, 0.0) + coeff
        self._pending_coefficients.add(key)

    def _set_variable_upper_bound_impl(self, var: Variable, value: float) -> None:
        if value < self._col_lower[var.index]:
            raise ValueError(
                f"Upper bound {value} of {var.name} is below its lower bound "
                f"{self._col_lower[var.index]}"
            )
        self._col_upper[var.index] = value
        self._pending_bounds.add(var.index)

    def _reload_model_impl(self) -> None:
        """Push buffered edits to HiGHS."""
        num_cols = len(self._col_cost)
        num_rows = len(self._row_lower)

        for j in range(self._synced_cols, num_cols):
            self._highs.addCol(
                self._col_cost[j],
                _bound(self._col_lower[j]),
                _bound(self._col_upper[j]),
                0, [], []
            )
        for i in range(self._synced_rows, num_rows):
            self._highs.addRow(
                _bound(self._row_lower[i]),
                _bound(self._row_upper[i]),
                0, [], []
            )

        for row, col in sorted(self._pending_coefficients):
            self._highs.changeCoeff(row, col, self._coefficients[(row, col)])
        for j in sorted(self._pending_costs):
            self._highs.changeColCost(j, self._col_cost[j])
        for j in sorted(self._pending_bounds):
            self._highs.changeColBounds(
                j, _bound(self._col_lower[j]), _bound(self._col_upper[j])
            )

        if self._pending_objective:
            if self._sense == ObjectiveSense.MINIMIZE:
                self._highs.changeObjectiveSense(highspy.ObjSense.kMinimize)
            else:
                self._highs.changeObjectiveSense(highspy.ObjSense.kMaximize)
            self._highs.changeObjectiveOffset(self._offset)

        logger.debug(
            "%s: pushed %d columns, %d rows, %d coefficients to HiGHS",
            self._name,
            num_cols - self._synced_cols,
            num_rows - self._synced_rows,
            len(self._pending_coefficients),
        )

        self._synced_cols = num_cols
        self._synced_rows = num_rows
        self._pending_coefficients.clear()
        self._pending_costs.clear()
        self._pending_bounds.clear()
        self._pending_objective = False

    def _solve_relaxation_impl(self) -> ModelSolution:
        """Solve the LP relaxation."""
        start_time = time.time()
        self._highs.run()
        solve_time = time.time() - start_time

        status = _map_highs_status(self._highs.getModelStatus())
        info = self._highs.getInfo()

        solution = ModelSolution(
            status=status,
            is_relaxation=True,
            solve_time=solve_time,
            iterations=info.simplex_iteration_count,
        )

        self._col_value = []
        self._row_dual = []
        if status == SolutionStatus.OPTIMAL:
            solution.objective_value = info.objective_function_value
            sol = self._highs.getSolution()
            self._col_value = list(sol.col_value)
            self._row_dual = list(sol.row_dual)

        return solution

    def _solve_integer_impl(self) -> ModelSolution:
        """Solve as integer program."""
        integer_cols = [var.index for var in self._variables if var.var_type.is_integral]
        if integer_cols and not self._automatic_cuts:
            logger.warning(
                "%s: HiGHS has no switch for branch-and-bound cuts; "
                "the integer solve may still add its own cuts", self._name,
            )
        for j in integer_cols:
            self._highs.changeColIntegrality(j, highspy.HighsVarType.kInteger)

        try:
            start_time = time.time()
            self._highs.run()
            solve_time = time.time() - start_time

            status = _map_highs_status(self._highs.getModelStatus())
            info = self._highs.getInfo()

            solution = ModelSolution(
                status=status,
                is_relaxation=False,
                solve_time=solve_time,
                iterations=info.simplex_iteration_count,
                nodes=info.mip_node_count,
            )

            self._col_value = []
            self._row_dual = []
            if status in (SolutionStatus.OPTIMAL, SolutionStatus.TIME_LIMIT):
                sol = self._highs.getSolution()
                if sol.value_valid:
                    solution.objective_value = info.objective_function_value
                    solution.gap = info.mip_gap
                    self._col_value = list(sol.col_value)
        finally:
            # Back to LP mode for later relaxations
            for j in integer_cols:
                self._highs.changeColIntegrality(j, highspy.HighsVarType.kContinuous)

        return solution

    def _get_solution_value_impl(self, var: Variable) -> float:
        if var.index >= len(self._col_value):
            raise ValueError(f"{var.name} was added after the last solve")
        return self._col_value[var.index]

    def _get_dual_value_impl(self, con: Constraint) -> float:
        if con.index >= len(self._row_dual):
            raise ValueError(f"{con.name} was added after the last solve")
        return self._row_dual[con.index]

    def _save_basis_impl(self) -> BasisHandle:
        basis = self._highs.getBasis()
        return BasisHandle(
            col_status=list(basis.col_status),
            row_status=list(basis.row_status),
            valid=bool(basis.valid),
        )

    def _load_basis_impl(self, basis: BasisHandle) -> None:
        """
        Install a saved basis.

        Columns added since the snapshot enter nonbasic at a finite bound,
        rows added since the snapshot enter with their slack basic, so the
        extended basis keeps one basic variable per row.
        """
        num_cols = len(self._col_cost)
        num_rows = len(self._row_lower)
        if basis.num_columns > num_cols or basis.num_rows > num_rows:
            raise ValueError(
                f"Basis of size ({basis.num_columns}, {basis.num_rows}) does not fit "
                f"model of size ({num_cols}, {num_rows})"
            )

        col_status = list(basis.col_status)
        for j in range(basis.num_columns, num_cols):
            if self._col_lower[j] > -math.inf:
                col_status.append(highspy.HighsBasisStatus.kLower)
            elif self._col_upper[j] < math.inf:
                col_status.append(highspy.HighsBasisStatus.kUpper)
            else:
                col_status.append(highspy.HighsBasisStatus.kZero)
        row_status = list(basis.row_status)
        row_status.extend(
            highspy.HighsBasisStatus.kBasic for _ in range(basis.num_rows, num_rows)
        )

        highs_basis = highspy.HighsBasis()
        highs_basis.col_status = col_status
        highs_basis.row_status = row_status
        highs_basis.valid = True

        status = self._highs.setBasis(highs_basis)
        if status == highspy.HighsStatus.kError:
            logger.warning("%s: HiGHS rejected the saved basis, solving cold", self._name)
        else:
            logger.debug(
                "%s: basis restored (%d new columns, %d new rows)",
                self._name,
                num_cols - basis.num_columns,
                num_rows - basis.num_rows,
            )

    # =========================================================================
    # Optional Method Implementations
    # =========================================================================

    def _disable_automatic_cuts_impl(self) -> None:
        # Relaxations run the simplex solver on a continuous model, where
        # HiGHS never separates cuts. Integer solves are not covered.
        logger.debug("%s: automatic cuts disabled", self._name)

    def _disable_presolve_impl(self) -> None:
        self._highs.setOptionValue('presolve', 'off')

    def _set_option_impl(self, name: str, value: Any) -> None:
        status = self._highs.setOptionValue(name, value)
        if status == highspy.HighsStatus.kError:
            raise ValueError(f"Invalid HiGHS option {name}={value!r}")
