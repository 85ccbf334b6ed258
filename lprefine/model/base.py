"""
Solver adapter abstract base class.

This module defines the interface through which the refinement loops talk
to an external LP/MIP solver. The loops never solve anything themselves:
they create variables and constraints, solve relaxations or integer
models, read primal and dual values, and save/restore bases.

Design Philosophy:
-----------------
- The public methods validate handles and keep the bookkeeping (names,
  kinds, dirty state); the ``_*_impl`` methods talk to the solver
- Structural edits may be buffered by an implementation and are pushed
  to the solver on ``reload_model()``; a solve on a dirty model reloads
  first
- Basis snapshots are scoped: ``with model.saved_basis() as basis:``
  releases the snapshot on every exit path

Lifecycle:
---------
1. Create: model = HighsModel("CutStock")
2. Declare: create_variable / create_constraint / set_objective
3. Solve: model.solve_relaxation()
4. Read: get_solution_value / get_dual_value / save_basis
5. Mutate: create_variable, add_term_to_constraint, ...
6. Reload: reload_model(); load_basis(saved); release_basis(saved)
7. Repeat 3-6, finally solve_integer() if needed
"""

import logging
import math
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Tuple

from lprefine.model.expression import (
    Constraint,
    LinearExpression,
    ObjectiveSense,
    Relation,
    Variable,
    VarType,
)
from lprefine.model.solution import BasisHandle, ModelSolution

logger = logging.getLogger(__name__)


class SolverAdapter(ABC):
    """
    Abstract base class for solver adapters.

    Attributes:
        name: Model name used in log messages
    """

    def __init__(self, name: str = "model"):
        self._name = name
        self._variables: List[Variable] = []
        self._constraints: List[Constraint] = []
        self._dirty = False
        self._last_solution: Optional[ModelSolution] = None
        self._automatic_cuts = True
        self._presolve = True

        self._build_model()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def num_variables(self) -> int:
        return len(self._variables)

    @property
    def num_constraints(self) -> int:
        return len(self._constraints)

    @property
    def variables(self) -> List[Variable]:
        return self._variables.copy()

    @property
    def constraints(self) -> List[Constraint]:
        return self._constraints.copy()

    @property
    def is_dirty(self) -> bool:
        """True when edits were made since the last reload."""
        return self._dirty

    @property
    def last_solution(self) -> Optional[ModelSolution]:
        return self._last_solution

    @property
    def automatic_cuts_enabled(self) -> bool:
        return self._automatic_cuts

    @property
    def presolve_enabled(self) -> bool:
        return self._presolve

    # =========================================================================
    # Abstract Methods (MUST be implemented by subclasses)
    # =========================================================================

    @abstractmethod
    def _build_model(self) -> None:
        """Create the (empty) solver model."""

    @abstractmethod
    def _create_variable_impl(self, var: Variable, lower: float, upper: float) -> None:
        """Register a new column."""

    @abstractmethod
    def _create_constraint_impl(
        self,
        con: Constraint,
        terms: List[Tuple[Variable, float]],
        relation: Relation,
        rhs: float,
    ) -> None:
        """Register a new row."""

    @abstractmethod
    def _set_objective_impl(
        self,
        terms: List[Tuple[Variable, float]],
        sense: ObjectiveSense,
        constant: float,
    ) -> None:
        """Replace the objective function."""

    @abstractmethod
    def _add_term_to_objective_impl(self, var: Variable, coeff: float) -> None:
        """Add coeff to the objective coefficient of var."""

    @abstractmethod
    def _add_term_to_constraint_impl(self, con: Constraint, var: Variable, coeff: float) -> None:
        """Add coeff to the matrix entry (con, var)."""

    @abstractmethod
    def _set_variable_upper_bound_impl(self, var: Variable, value: float) -> None:
        """Change the upper bound of var."""

    @abstractmethod
    def _reload_model_impl(self) -> None:
        """Push buffered edits to the solver."""

    @abstractmethod
    def _solve_relaxation_impl(self) -> ModelSolution:
        """Solve with every variable continuous."""

    @abstractmethod
    def _solve_integer_impl(self) -> ModelSolution:
        """Solve with integrality enforced."""

    @abstractmethod
    def _get_solution_value_impl(self, var: Variable) -> float:
        """Primal value of var in the last solve."""

    @abstractmethod
    def _get_dual_value_impl(self, con: Constraint) -> float:
        """Dual value of con in the last relaxation solve."""

    @abstractmethod
    def _save_basis_impl(self) -> BasisHandle:
        """Snapshot the current basis."""

    @abstractmethod
    def _load_basis_impl(self, basis: BasisHandle) -> None:
        """Install a basis snapshot, extending it to the current model size."""

    # =========================================================================
    # Optional Implementation Methods (override in subclasses)
    # =========================================================================

    def _disable_automatic_cuts_impl(self) -> None:
        pass

    def _disable_presolve_impl(self) -> None:
        pass

    def _set_option_impl(self, name: str, value: Any) -> None:
        raise NotImplementedError(
            f"{self.__class__.__name__} does not support solver options"
        )

    # =========================================================================
    # Public API - Model Building
    # =========================================================================

    def create_variable(
        self,
        name: str,
        kind: VarType = VarType.CONTINUOUS,
        lower_bound: float = 0.0,
        upper_bound: float = math.inf,
    ) -> Variable:
        """
        Create a decision variable.

        Args:
            name: Variable name
            kind: Continuous, integer or binary
            lower_bound: Lower bound (default 0)
            upper_bound: Upper bound (default +inf); binaries are capped at 1

        Returns:
            Handle to the new variable

        Raises:
            ValueError: If lower_bound > upper_bound
        """
        if kind is VarType.BINARY:
            lower_bound = max(lower_bound, 0.0)
            upper_bound = min(upper_bound, 1.0)
        if lower_bound > upper_bound:
            raise ValueError(
                f"Variable {name}: lower bound {lower_bound} exceeds upper bound {upper_bound}"
            )

        var = Variable(index=len(self._variables), name=name, var_type=kind)
        self._create_variable_impl(var, float(lower_bound), float(upper_bound))
        self._variables.append(var)
        self._dirty = True
        return var

    def create_constraint(
        self,
        name: str,
        expression: LinearExpression,
        relation: Relation,
        rhs: float,
    ) -> Constraint:
        """
        Create a linear constraint ``expression relation rhs``.

        The constant part of the expression is moved to the right-hand side.

        Returns:
            Handle to the new constraint
        """
        if isinstance(expression, Variable):
            expression = LinearExpression({expression: 1.0})
        terms = list(expression.terms())
        for var, _ in terms:
            self._check_variable(var)

        con = Constraint(index=len(self._constraints), name=name)
        self._create_constraint_impl(con, terms, relation, float(rhs) - expression.constant)
        self._constraints.append(con)
        self._dirty = True
        return con

    def set_objective(
        self,
        expression: LinearExpression,
        sense: ObjectiveSense = ObjectiveSense.MINIMIZE,
    ) -> None:
        """Replace the objective function."""
        if isinstance(expression, Variable):
            expression = LinearExpression({expression: 1.0})
        terms = list(expression.terms())
        for var, _ in terms:
            self._check_variable(var)
        self._set_objective_impl(terms, sense, expression.constant)
        self._dirty = True

    def add_term_to_objective(self, var: Variable, coeff: float) -> None:
        self._check_variable(var)
        self._add_term_to_objective_impl(var, float(coeff))
        self._dirty = True

    def add_term_to_constraint(self, con: Constraint, var: Variable, coeff: float) -> None:
        self._check_constraint(con)
        self._check_variable(var)
        self._add_term_to_constraint_impl(con, var, float(coeff))
        self._dirty = True

    def set_variable_upper_bound(self, var: Variable, value: float) -> None:
        self._check_variable(var)
        self._set_variable_upper_bound_impl(var, float(value))
        self._dirty = True

    def reload_model(self) -> None:
        """Resynchronize the solver after variables/constraints were added."""
        self._reload_model_impl()
        self._dirty = False
        logger.debug(
            "%s reloaded: %d variables, %d constraints",
            self._name, self.num_variables, self.num_constraints,
        )

    # =========================================================================
    # Public API - Solving
    # =========================================================================

    def solve_relaxation(self) -> ModelSolution:
        """Solve the LP relaxation of the current model."""
        if self._dirty:
            self.reload_model()
        solution = self._solve_relaxation_impl()
        self._last_solution = solution
        logger.debug("%s LP solve: %r", self._name, solution)
        return solution

    def solve_integer(self) -> ModelSolution:
        """Solve the current model with integrality enforced."""
        if self._dirty:
            self.reload_model()
        solution = self._solve_integer_impl()
        self._last_solution = solution
        logger.debug("%s MIP solve: %r", self._name, solution)
        return solution

    def get_solution_value(self, var: Variable) -> float:
        """
        Value of a variable in the last solve.

        Raises:
            ValueError: If no solution is available
        """
        self._check_variable(var)
        if self._last_solution is None or not self._last_solution.has_solution:
            raise ValueError(f"{self._name}: no solution available")
        return self._get_solution_value_impl(var)

    def get_dual_value(self, con: Constraint) -> float:
        """
        Dual price of a constraint in the last LP solve.

        Raises:
            ValueError: If the last solve was not an optimal relaxation
        """
        self._check_constraint(con)
        if self._last_solution is None or not self._last_solution.is_optimal:
            raise ValueError(f"{self._name}: no optimal solution available")
        if not self._last_solution.is_relaxation:
            raise ValueError(
                f"{self._name}: dual values are only available after solve_relaxation()"
            )
        return self._get_dual_value_impl(con)

    # =========================================================================
    # Public API - Warm Starting
    # =========================================================================

    def save_basis(self) -> BasisHandle:
        """Snapshot the current LP basis."""
        return self._save_basis_impl()

    def load_basis(self, basis: BasisHandle) -> None:
        """
        Install a saved basis as warm start for the next solve.

        Raises:
            ValueError: If the handle was already released
        """
        if basis.released:
            raise ValueError("Cannot load a released basis")
        if self._dirty:
            self.reload_model()
        if not basis.valid:
            logger.debug("%s: saved basis is not valid, solving cold", self._name)
            return
        self._load_basis_impl(basis)

    def release_basis(self, basis: BasisHandle) -> None:
        basis.reset()

    @contextmanager
    def saved_basis(self) -> Iterator[BasisHandle]:
        """Save the basis and release it when the block exits."""
        basis = self.save_basis()
        try:
            yield basis
        finally:
            self.release_basis(basis)

    # =========================================================================
    # Public API - Settings
    # =========================================================================

    def disable_automatic_cuts(self) -> None:
        """
        Prevent the solver from adding its own cutting planes to relaxations.

        Relaxations are solved as plain LPs, where the solver never adds
        cuts. Solvers without a switch for their branch-and-bound cuts
        (HiGHS) still separate cuts inside ``solve_integer()``; HighsModel
        logs a warning when that happens.
        """
        self._automatic_cuts = False
        self._disable_automatic_cuts_impl()

    def disable_presolve(self) -> None:
        """Switch solver presolve off."""
        self._presolve = False
        self._disable_presolve_impl()

    def set_option(self, name: str, value: Any) -> None:
        """Set a solver-specific option."""
        self._set_option_impl(name, value)

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _check_variable(self, var: Variable) -> None:
        if not 0 <= var.index < len(self._variables) or self._variables[var.index] != var:
            raise ValueError(f"{var!r} does not belong to model {self._name!r}")

    def _check_constraint(self, con: Constraint) -> None:
        if not 0 <= con.index < len(self._constraints) or self._constraints[con.index] != con:
            raise ValueError(f"{con!r} does not belong to model {self._name!r}")

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self._name!r}, "
            f"variables={self.num_variables}, "
            f"constraints={self.num_constraints})"
        )
