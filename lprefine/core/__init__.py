"""
Core data structures for LPRefine.

This package provides the data the refinement loops operate on:
- CuttingStockInstance / LotSizingInstance: Problem data
- Pattern / PatternPool: Cutting patterns (columns)
- CumulativeDemandTable: Range demand sums D[s, t]
"""

from lprefine.core.demand import CumulativeDemandTable
from lprefine.core.instance import CuttingStockInstance, LotSizingInstance
from lprefine.core.pattern import Pattern, PatternPool

__all__ = [
    'CumulativeDemandTable',
    'CuttingStockInstance',
    'LotSizingInstance',
    'Pattern',
    'PatternPool',
]
