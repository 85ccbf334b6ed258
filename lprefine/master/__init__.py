"""
Master module - the models the refinement loops grow.

This module provides:
- CuttingStockMaster: Restricted pattern model, grown by column generation
- LotSizingMaster: Lot-sizing model, tightened by cut generation
"""

from lprefine.master.base import create_model
from lprefine.master.cutting_stock import CuttingStockMaster
from lprefine.master.lot_sizing import LotSizingMaster

__all__ = [
    'create_model',
    'CuttingStockMaster',
    'LotSizingMaster',
]
