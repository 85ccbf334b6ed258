"""
LPRefine: Iterative LP Refinement

Root-node column generation and cut generation loops on top of an
external LP/MIP solver, with two ready-to-run applications: cutting stock
(knapsack pricing) and uncapacitated economic lot sizing ((l,S) cuts).
"""

__version__ = "0.1.0"

# Applications (ready-to-use solvers)
from lprefine.applications import (
    CuttingStockSolution,
    LotSizingSolution,
    solve_cutting_stock,
    solve_lot_sizing,
)

# Configuration and errors
from lprefine.config import LPRefineConfig, config, configure_logging

# Core classes
from lprefine.core import (
    CumulativeDemandTable,
    CuttingStockInstance,
    LotSizingInstance,
    Pattern,
    PatternPool,
)
from lprefine.errors import AllocationFailure, LPRefineError, SolverError, SolverInfeasible

# Master models
from lprefine.master import CuttingStockMaster, LotSizingMaster

# Solver adapter
from lprefine.model import (
    HIGHS_AVAILABLE,
    BasisHandle,
    HighsModel,
    ModelSolution,
    SolutionStatus,
    SolverAdapter,
)

# Pricing and separation
from lprefine.pricing import KnapsackOracle, PatternPricing, PricingProblem, PricingSolution
from lprefine.separation import LSInequality, LSSeparator, separate_ls_inequalities

# Refinement loops
from lprefine.solver import (
    CGConfig,
    CGSolution,
    CGStatus,
    ColumnGeneration,
    CutConfig,
    CutGeneration,
    CutSolution,
    CutStatus,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "config",
    "LPRefineConfig",
    "configure_logging",
    # Errors
    "LPRefineError",
    "SolverInfeasible",
    "SolverError",
    "AllocationFailure",
    # Core classes
    "CumulativeDemandTable",
    "CuttingStockInstance",
    "LotSizingInstance",
    "Pattern",
    "PatternPool",
    # Solver adapter
    "SolverAdapter",
    "HighsModel",
    "HIGHS_AVAILABLE",
    "ModelSolution",
    "SolutionStatus",
    "BasisHandle",
    # Masters
    "CuttingStockMaster",
    "LotSizingMaster",
    # Pricing and separation
    "PricingProblem",
    "PricingSolution",
    "KnapsackOracle",
    "PatternPricing",
    "LSInequality",
    "LSSeparator",
    "separate_ls_inequalities",
    # Loops
    "ColumnGeneration",
    "CGConfig",
    "CGSolution",
    "CGStatus",
    "CutGeneration",
    "CutConfig",
    "CutSolution",
    "CutStatus",
    # Applications
    "solve_cutting_stock",
    "CuttingStockSolution",
    "solve_lot_sizing",
    "LotSizingSolution",
]
