"""
Model module - the solver adapter consumed by the refinement loops.

The loops never solve LPs or MIPs themselves. They go through a
SolverAdapter, which exposes variable/constraint creation, objective
setting, LP and MIP solves, primal/dual retrieval, basis save/restore and
model reload.

This module provides:
- SolverAdapter: Abstract base class for custom implementations
- HighsModel: Default implementation using the HiGHS solver
- Variable, Constraint, LinearExpression: Handles and expressions
- ModelSolution, SolutionStatus, BasisHandle: Solve results and warm starts

Usage:
------
    >>> from lprefine.model import HighsModel, Relation, VarType
    >>> model = HighsModel("CutStock")
    >>> x = model.create_variable("pat_1", VarType.INTEGER, 0, 38)
    >>> dem = model.create_constraint("Demand", 5 * x, Relation.GE, 150)
    >>> model.set_objective(1 * x)
    >>> solution = model.solve_relaxation()
    >>> with model.saved_basis() as basis:
    ...     ...  # add columns, reload, load_basis(basis)
"""

from lprefine.model.expression import (
    Constraint,
    LinearExpression,
    ObjectiveSense,
    Relation,
    Variable,
    VarType,
)
from lprefine.model.solution import BasisHandle, ModelSolution, SolutionStatus
from lprefine.model.base import SolverAdapter

# Try to import HiGHS implementation
try:
    from lprefine.model.highs import HighsModel, HIGHS_AVAILABLE
except ImportError:
    HIGHS_AVAILABLE = False
    HighsModel = None  # type: ignore


__all__ = [
    # Handles and expressions
    'Variable',
    'Constraint',
    'LinearExpression',
    'VarType',
    'Relation',
    'ObjectiveSense',

    # Solution
    'ModelSolution',
    'SolutionStatus',
    'BasisHandle',

    # Base class
    'SolverAdapter',

    # HiGHS implementation
    'HighsModel',
    'HIGHS_AVAILABLE',
]
