"""
Refinement loop solution module.

This module defines the data structures for the results of the column
generation and cut generation loops.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from lprefine.core.pattern import Pattern
from lprefine.separation.ls_inequalities import LSInequality


class CGStatus(Enum):
    """
    Status of the column generation loop.
    """
    OPTIMAL = auto()           # No improving pattern left, LP converged
    COLUMN_LIMIT = auto()      # Pattern budget exhausted before convergence
    STOPPED = auto()           # A callback asked to stop
    NOT_SOLVED = auto()        # Not yet solved


class CutStatus(Enum):
    """
    Status of the cut generation loop.
    """
    OPTIMAL = auto()           # A pass found no violated inequality
    PASS_LIMIT = auto()        # Pass budget exhausted
    STOPPED = auto()           # A callback asked to stop
    NOT_SOLVED = auto()        # Not yet solved


@dataclass
class CGIteration:
    """
    Information about a single column generation pass.

    Attributes:
        iteration: Pass number (1-based)
        lp_objective: LP objective of the restricted master
        pricing_value: Optimal knapsack value z*
        reduced_cost: Reduced cost 1 - z* of the priced pattern
        pattern: Pattern added in this pass (None on the last pass)
        elapsed: Seconds since the loop started
        lp_iterations: Simplex iterations of the LP solve
    """
    iteration: int
    lp_objective: float
    pricing_value: float
    reduced_cost: float
    pattern: Optional[Pattern] = None
    elapsed: float = 0.0
    lp_iterations: int = 0

    @property
    def marginal_cost(self) -> float:
        """z* - 1, as printed in the progress report."""
        return -self.reduced_cost


@dataclass
class CGSolution:
    """
    Result of the column generation loop.

    Attributes:
        status: Loop status
        lp_objective: LP objective of the last pass
        ip_objective: Objective of the final integer solve (None if skipped
            or not solved to optimality)
        patterns: Every pattern of the final model, carrying its value in
            the final solve
        num_generated: Patterns added by pricing
        iterations: Number of passes
        total_time: Total solve time in seconds
        iteration_history: One record per pass
    """
    status: CGStatus = CGStatus.NOT_SOLVED
    lp_objective: Optional[float] = None
    ip_objective: Optional[float] = None
    patterns: List[Pattern] = field(default_factory=list)
    num_generated: int = 0
    iterations: int = 0
    total_time: float = 0.0
    iteration_history: List[CGIteration] = field(default_factory=list)

    @property
    def objective_value(self) -> Optional[float]:
        """IP objective if available, LP objective otherwise."""
        return self.ip_objective if self.ip_objective is not None else self.lp_objective

    @property
    def converged(self) -> bool:
        return self.status == CGStatus.OPTIMAL

    @property
    def num_patterns(self) -> int:
        return len(self.patterns)

    @property
    def active_patterns(self) -> List[Pattern]:
        """Patterns used in the final solution."""
        return [p for p in self.patterns if p.value is not None and p.value > 1e-6]

    @property
    def gap(self) -> Optional[float]:
        """Relative gap between the integer and the LP objective."""
        if self.ip_objective is None or self.lp_objective is None:
            return None
        return (self.ip_objective - self.lp_objective) / max(abs(self.ip_objective), 1e-6)

    def get_convergence_history(self) -> List[float]:
        """LP objective values over passes."""
        return [it.lp_objective for it in self.iteration_history]

    def summary(self) -> str:
        lines = [
            "Column Generation Solution:",
            f"  Status: {self.status.name}",
        ]
        if self.lp_objective is not None:
            lines.append(f"  LP Objective: {self.lp_objective:.6f}")
        if self.ip_objective is not None:
            lines.append(f"  IP Objective: {self.ip_objective:.6f}")
        if self.gap is not None:
            lines.append(f"  Gap: {self.gap:.4%}")
        lines.extend([
            "",
            f"  Passes: {self.iterations}",
            f"  Patterns: {self.num_patterns} ({self.num_generated} generated)",
            f"  Active patterns: {len(self.active_patterns)}",
            f"  Total time: {self.total_time:.3f}s",
        ])
        return "\n".join(lines)

    def __repr__(self) -> str:
        obj = self.objective_value
        obj_str = f", obj={obj:.4f}" if obj is not None else ""
        return f"CGSolution({self.status.name}{obj_str}, patterns={self.num_patterns})"


@dataclass
class CutIteration:
    """
    Information about a single cut generation pass.

    Attributes:
        iteration: Pass number (1-based)
        lp_objective: LP objective before the cuts of this pass
        cuts_added: Inequalities added in this pass
        total_cuts: Inequalities added over the run so far
        elapsed: Seconds since the loop started
        cuts: The inequalities themselves
    """
    iteration: int
    lp_objective: float
    cuts_added: int
    total_cuts: int
    elapsed: float = 0.0
    cuts: List[LSInequality] = field(default_factory=list)

    @property
    def max_violation(self) -> float:
        return max((c.violation for c in self.cuts), default=0.0)


@dataclass
class CutSolution:
    """
    Result of the cut generation loop.

    The reported point is the LP optimum of the last pass; no integer solve
    is performed.

    Attributes:
        status: Loop status
        objective_value: LP objective of the last pass
        production: Production amount per period
        setups: Setup value per period
        cuts: Every inequality added over the run
        iterations: Number of passes
        total_time: Total solve time in seconds
        iteration_history: One record per pass
        tolerance: Tolerance used for the integrality check
    """
    status: CutStatus = CutStatus.NOT_SOLVED
    objective_value: Optional[float] = None
    production: Tuple[float, ...] = field(default_factory=tuple)
    setups: Tuple[float, ...] = field(default_factory=tuple)
    cuts: List[LSInequality] = field(default_factory=list)
    iterations: int = 0
    total_time: float = 0.0
    iteration_history: List[CutIteration] = field(default_factory=list)
    tolerance: float = 1e-6

    @property
    def num_cuts(self) -> int:
        return len(self.cuts)

    @property
    def is_integral(self) -> bool:
        """Whether every setup value is within tolerance of 0 or 1."""
        return all(abs(v - round(v)) <= self.tolerance for v in self.setups)

    def get_convergence_history(self) -> List[float]:
        """LP objective values over passes."""
        return [it.lp_objective for it in self.iteration_history]

    def summary(self) -> str:
        lines = [
            "Cut Generation Solution:",
            f"  Status: {self.status.name}",
        ]
        if self.objective_value is not None:
            lines.append(f"  Objective: {self.objective_value:.6f}")
        lines.extend([
            "",
            f"  Passes: {self.iterations}",
            f"  Cuts: {self.num_cuts}",
            f"  Total time: {self.total_time:.3f}s",
            "",
            "  Solution is integer" if self.is_integral else "  Solution is fractional",
        ])
        return "\n".join(lines)

    def __repr__(self) -> str:
        obj_str = f", obj={self.objective_value:.4f}" if self.objective_value is not None else ""
        return f"CutSolution({self.status.name}{obj_str}, cuts={self.num_cuts})"
