"""
Solver module - the iterative LP refinement loops.

This module provides:
- ColumnGeneration / CGConfig: Pattern generation for cutting stock
- CutGeneration / CutConfig: (l,S) cut generation for lot sizing
- CGSolution, CGIteration, CGStatus: Column generation results
- CutSolution, CutIteration, CutStatus: Cut generation results

Usage:
------
    >>> from lprefine.solver import ColumnGeneration, CGConfig
    >>> cg = ColumnGeneration(instance, CGConfig(max_columns=25))
    >>> solution = cg.solve()
    >>> print(solution.summary())
"""

from lprefine.solver.column_generation import CGCallback, CGConfig, ColumnGeneration
from lprefine.solver.cut_generation import CutCallback, CutConfig, CutGeneration
from lprefine.solver.solution import (
    CGIteration,
    CGSolution,
    CGStatus,
    CutIteration,
    CutSolution,
    CutStatus,
)

__all__ = [
    # Column generation
    'ColumnGeneration',
    'CGConfig',
    'CGCallback',
    'CGSolution',
    'CGIteration',
    'CGStatus',

    # Cut generation
    'CutGeneration',
    'CutConfig',
    'CutCallback',
    'CutSolution',
    'CutIteration',
    'CutStatus',
]
