"""
Model solution module.

This module defines the data structures returned by a solver adapter after
an LP or MIP solve, and the basis snapshot used for warm starting.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, List, Optional

from lprefine.errors import SolverError, SolverInfeasible


class SolutionStatus(Enum):
    """
    Status of a model solve.

    These statuses cover both LP and MIP solving outcomes.
    """
    OPTIMAL = auto()           # Optimal solution found
    INFEASIBLE = auto()        # Problem is infeasible
    UNBOUNDED = auto()         # Problem is unbounded
    INF_OR_UNBOUNDED = auto()  # Infeasible or unbounded (solver couldn't determine)
    TIME_LIMIT = auto()        # Time limit reached (may have feasible solution)
    ITERATION_LIMIT = auto()   # Iteration limit reached
    NOT_SOLVED = auto()        # Solve not called yet
    ERROR = auto()             # Solver error occurred


@dataclass
class ModelSolution:
    """
    Result of solving a model.

    Primal and dual values are read back from the adapter through the
    variable/constraint handles; this object carries status and statistics.

    Attributes:
        status: Solution status (OPTIMAL, INFEASIBLE, etc.)
        objective_value: Objective function value (None if not solved/infeasible)
        is_relaxation: True for LP solves, False for integer solves
        solve_time: Time spent solving in seconds
        iterations: Number of simplex iterations
        nodes: Number of B&B nodes explored (integer solves)
        gap: Relative MIP gap (None for LP)
    """
    status: SolutionStatus = SolutionStatus.NOT_SOLVED
    objective_value: Optional[float] = None
    is_relaxation: bool = True
    solve_time: float = 0.0
    iterations: int = 0
    nodes: int = 0
    gap: Optional[float] = None

    @property
    def is_optimal(self) -> bool:
        """Check if solution is optimal."""
        return self.status == SolutionStatus.OPTIMAL

    @property
    def is_infeasible(self) -> bool:
        """Check if the model is infeasible."""
        return self.status == SolutionStatus.INFEASIBLE

    @property
    def has_solution(self) -> bool:
        """Check if a feasible solution is available."""
        return self.status in (
            SolutionStatus.OPTIMAL,
            SolutionStatus.TIME_LIMIT,
            SolutionStatus.ITERATION_LIMIT,
        ) and self.objective_value is not None

    def raise_for_status(self, context: str = "model") -> None:
        """
        Raise if the solve did not end optimal.

        Raises:
            SolverInfeasible: If the model is infeasible
            SolverError: For any other non-optimal status
        """
        if self.is_optimal:
            return
        kind = "relaxation" if self.is_relaxation else "integer model"
        if self.is_infeasible:
            raise SolverInfeasible(f"{context}: {kind} is infeasible")
        raise SolverError(
            f"{context}: {kind} solve ended with status {self.status.name}",
            status=self.status,
        )

    def __repr__(self) -> str:
        kind = "LP" if self.is_relaxation else "MIP"
        obj_str = f", obj={self.objective_value:.4f}" if self.objective_value is not None else ""
        return f"ModelSolution({kind}, {self.status.name}{obj_str})"


@dataclass
class BasisHandle:
    """
    Snapshot of an LP basis.

    The status lists are solver specific. A handle is owned by one pass of
    a refinement loop and must be released once it was loaded or discarded;
    a released handle cannot be loaded again.

    Attributes:
        col_status: Status of each column when the snapshot was taken
        row_status: Status of each row when the snapshot was taken
        valid: False when the solver had no basis to save
    """
    col_status: List[Any] = field(default_factory=list)
    row_status: List[Any] = field(default_factory=list)
    valid: bool = True
    released: bool = False

    @property
    def num_columns(self) -> int:
        return len(self.col_status)

    @property
    def num_rows(self) -> int:
        return len(self.row_status)

    def reset(self) -> None:
        """Drop the stored statuses and mark the handle released."""
        self.col_status = []
        self.row_status = []
        self.released = True

    def __repr__(self) -> str:
        state = "released" if self.released else ("valid" if self.valid else "invalid")
        return f"BasisHandle(cols={self.num_columns}, rows={self.num_rows}, {state})"
