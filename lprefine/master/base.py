"""
Shared helpers for the master models.
"""

from lprefine.config import config
from lprefine.model import HIGHS_AVAILABLE, HighsModel
from lprefine.model.base import SolverAdapter


def create_model(name: str) -> SolverAdapter:
    """
    Build the default solver adapter for a master model.

    Solver settings (time limit, verbosity, MIP gap) come from the global
    config.

    Raises:
        ImportError: If highspy is not installed
    """
    if not HIGHS_AVAILABLE:
        raise ImportError(
            "HiGHS is not available. Install it with: pip install highspy\n"
            "Or provide a custom SolverAdapter implementation."
        )
    return HighsModel(
        name,
        time_limit=config.time_limit,
        verbosity=config.verbosity,
        mip_rel_gap=config.mip_rel_gap,
    )
