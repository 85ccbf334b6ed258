"""
Applications - ready-to-run solvers for the two shipped problems.

This module provides:
- Cutting stock: solve_cutting_stock, CuttingStockSolution
- Economic lot sizing: solve_lot_sizing, LotSizingSolution

Usage:
------
    >>> from lprefine.applications import solve_cutting_stock, solve_lot_sizing
    >>> print(solve_cutting_stock(verbose=True).report())
    >>> print(solve_lot_sizing(verbose=True).report())
"""

from lprefine.applications.cutting_stock import CuttingStockSolution, solve_cutting_stock
from lprefine.applications.lot_sizing import LotSizingSolution, solve_lot_sizing
from lprefine.core.instance import CuttingStockInstance, LotSizingInstance

__all__ = [
    # Cutting stock
    'CuttingStockInstance',
    'CuttingStockSolution',
    'solve_cutting_stock',

    # Lot sizing
    'LotSizingInstance',
    'LotSizingSolution',
    'solve_lot_sizing',
]
