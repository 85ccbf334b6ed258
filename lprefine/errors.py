"""
Error taxonomy for LPRefine.

Every solver call either succeeds or fails fatally; there are no retries.
Failing to find an improving column or a violated cut is the normal
termination signal of a loop and is never reported through an exception.
"""


class LPRefineError(Exception):
    """Base class for all LPRefine errors."""


class SolverInfeasible(LPRefineError):
    """
    The relaxation or the integer model has no feasible solution.

    The initial patterns (cutting stock) and the demand rows (lot sizing)
    guarantee feasibility, so this indicates a modeling error.
    """


class SolverError(LPRefineError):
    """The solver stopped without an optimal solution for another reason."""

    def __init__(self, message: str, status=None):
        super().__init__(message)
        self.status = status


class AllocationFailure(LPRefineError):
    """The pricing oracle could not build its working model."""
