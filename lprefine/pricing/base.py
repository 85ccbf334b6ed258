"""
Pricing problem abstract base class.

The pricing problem finds a column with negative reduced cost given the
dual prices of the master's demand rows. For a minimization master whose
columns have cost c_j the reduced cost is c_j - sum_i(pi_i * a_ij).

To create a custom pricing solver:

1. Subclass PricingProblem
2. Implement _solve_impl
3. Optionally override the hooks
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Tuple


class PricingStatus(Enum):
    """
    Status of the pricing problem solution.
    """
    COLUMNS_FOUND = auto()    # Found a column with negative RC
    NO_COLUMNS = auto()       # No column with negative RC exists


@dataclass
class PricingSolution:
    """
    Result of solving the pricing problem.

    Attributes:
        status: Solution status
        counts: Best column found (item counts), even when not improving
        value: Optimal pricing objective z* = sum_i pi_i * x_i
        reduced_cost: Reduced cost of the best column
        solve_time: Time spent solving in seconds
    """
    status: PricingStatus = PricingStatus.NO_COLUMNS
    counts: Tuple[int, ...] = field(default_factory=tuple)
    value: float = 0.0
    reduced_cost: Optional[float] = None
    solve_time: float = 0.0

    @property
    def has_negative_reduced_cost(self) -> bool:
        """Check if an improving column was found."""
        return self.status == PricingStatus.COLUMNS_FOUND

    def summary(self) -> str:
        """Return a human-readable summary."""
        lines = [
            "PricingSolution:",
            f"  Status: {self.status.name}",
            f"  Value: {self.value:.6f}",
        ]
        if self.reduced_cost is not None:
            lines.append(f"  Reduced cost: {self.reduced_cost:.6f}")
        lines.append(f"  Solve time: {self.solve_time:.3f}s")
        return "\n".join(lines)

    def __repr__(self) -> str:
        rc_str = f", rc={self.reduced_cost:.4f}" if self.reduced_cost is not None else ""
        return f"PricingSolution({self.status.name}, z={self.value:.4f}{rc_str})"


class PricingProblem(ABC):
    """
    Abstract base class for pricing problem solvers.

    Lifecycle:
    ---------
    1. Create: pricing = PatternPricing(instance)
    2. Each pass: pricing.set_dual_values(duals); pricing.solve()
    """

    def __init__(self):
        self._dual_values: Dict[int, float] = {}

    @property
    def dual_values(self) -> Dict[int, float]:
        return self._dual_values.copy()

    def set_dual_values(self, duals: Dict[int, float]) -> None:
        """
        Set the dual prices of the current LP optimum.

        Args:
            duals: Mapping from item index to dual value (pi)
        """
        self._dual_values = dict(duals)

    def solve(self) -> PricingSolution:
        """
        Solve the pricing problem for the current duals.

        Returns:
            PricingSolution with the best column found
        """
        self._before_solve()
        start_time = time.time()
        solution = self._solve_impl()
        solution.solve_time = time.time() - start_time
        return self._after_solve(solution)

    @abstractmethod
    def _solve_impl(self) -> PricingSolution:
        """Compute the best column for self._dual_values."""

    # =========================================================================
    # Hooks (override for custom behavior)
    # =========================================================================

    def _before_solve(self) -> None:
        pass

    def _after_solve(self, solution: PricingSolution) -> PricingSolution:
        return solution
