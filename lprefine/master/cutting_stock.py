"""
Restricted master model for the cutting stock problem.

Master Problem (Set Covering over patterns):
    min  sum_p x_p                    (minimize number of rolls)
    s.t. sum_p a_ip * x_p >= d_i      (meet demand for item i)
         0 <= x_p <= u_p, integer

Where:
- x_p = number of rolls cut with pattern p
- a_ip = number of pieces of item i in pattern p
- u_p = max_i ceil(d_i / a_ip) over the items served by p

The model starts with one trivial pattern per item type (as many pieces
of that item as fit into a roll), which keeps it feasible. Column
generation then adds priced patterns through add_pattern().
"""

import logging
from typing import Dict, List, Optional, Sequence

from lprefine.config import config
from lprefine.core.instance import CuttingStockInstance
from lprefine.core.pattern import Pattern, PatternPool
from lprefine.master.base import create_model
from lprefine.model import Relation, VarType
from lprefine.model.base import SolverAdapter
from lprefine.model.expression import Constraint, LinearExpression

logger = logging.getLogger(__name__)


class CuttingStockMaster:
    """
    Pattern model of a cutting stock instance.

    Example:
        >>> master = CuttingStockMaster(CuttingStockInstance.default())
        >>> master.model.solve_relaxation()
        >>> duals = master.get_duals()
        >>> master.add_pattern((1, 1, 0, 1, 0))
    """

    def __init__(
        self,
        instance: CuttingStockInstance,
        model: Optional[SolverAdapter] = None,
        tolerance: Optional[float] = None,
    ):
        """
        Build the initial model.

        Args:
            instance: The cutting stock instance
            model: Empty solver adapter to build into (default: HiGHS)
            tolerance: Numerical tolerance (default: config.tolerance)
        """
        self._instance = instance
        self._model = model if model is not None else create_model(instance.name)
        self._tolerance = tolerance if tolerance is not None else config.tolerance
        self._pool = PatternPool()
        self._demand_constraints: List[Constraint] = []

        self._build()

    def _build(self) -> None:
        inst = self._instance

        for counts in inst.trivial_patterns():
            pattern = Pattern(counts=counts, attributes={'trivial': True})
            var = self._model.create_variable(
                f"pat_{self._pool.size + 1}",
                VarType.INTEGER,
                0,
                pattern.upper_bound(inst.item_demands),
            )
            self._pool.add(pattern.with_variable(var))

        self._model.set_objective(LinearExpression({p.variable: 1.0 for p in self._pool}))

        for i in range(inst.num_items):
            lhs = LinearExpression()
            for pattern in self._pool:
                if pattern.counts[i] > 0:
                    lhs.add_term(pattern.variable, pattern.counts[i])
            self._demand_constraints.append(
                self._model.create_constraint("Demand", lhs, Relation.GE, inst.item_demands[i])
            )

        logger.debug(
            "%s: built with %d trivial patterns", inst.name, self._pool.size,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def instance(self) -> CuttingStockInstance:
        return self._instance

    @property
    def model(self) -> SolverAdapter:
        """The underlying solver adapter."""
        return self._model

    @property
    def patterns(self) -> PatternPool:
        return self._pool

    @property
    def demand_constraints(self) -> List[Constraint]:
        return list(self._demand_constraints)

    @property
    def num_patterns(self) -> int:
        return self._pool.size

    # =========================================================================
    # Column management
    # =========================================================================

    def add_pattern(
        self,
        counts: Sequence[int],
        reduced_cost: Optional[float] = None,
    ) -> Pattern:
        """
        Add a pattern as a new integer column.

        The column gets objective coefficient 1, coefficient x_i in the
        demand row of every item with x_i > 0, and the upper bound
        max_i ceil(d_i / x_i). The model is left dirty; call
        ``model.reload_model()`` before restoring a basis.

        Args:
            counts: Pieces of each item type in one roll
            reduced_cost: Reduced cost the pattern was priced at

        Returns:
            The stored pattern, bound to its variable

        Raises:
            ValueError: If the pattern does not fit into a roll or exceeds
                a demand
        """
        inst = self._instance
        pattern = Pattern(counts=tuple(counts), reduced_cost=reduced_cost)
        if not pattern.is_feasible(
            inst.item_sizes, inst.roll_width, inst.item_demands, self._tolerance
        ):
            raise ValueError(f"Pattern {list(pattern.counts)} is not feasible")

        var = self._model.create_variable(
            f"pat_{self._pool.size + 1}", VarType.INTEGER, 0, float('inf'),
        )
        self._model.add_term_to_objective(var, 1.0)
        for i, count in enumerate(pattern.counts):
            if count > self._tolerance:
                self._model.add_term_to_constraint(self._demand_constraints[i], var, count)
        self._model.set_variable_upper_bound(var, pattern.upper_bound(inst.item_demands))

        stored = self._pool.add(pattern.with_variable(var))
        logger.debug("%s: added %r", inst.name, stored)
        return stored

    # =========================================================================
    # Solution access
    # =========================================================================

    def get_duals(self) -> Dict[int, float]:
        """Dual price of each demand row in the last LP solve."""
        return {
            i: self._model.get_dual_value(con)
            for i, con in enumerate(self._demand_constraints)
        }

    def get_pattern_values(self) -> List[float]:
        """Value of every pattern variable in the last solve, in pool order."""
        return [self._model.get_solution_value(p.variable) for p in self._pool]

    def patterns_with_values(self) -> List[Pattern]:
        """All patterns carrying their value in the last solve."""
        return [
            p.with_value(v) for p, v in zip(self._pool, self.get_pattern_values())
        ]

    def __repr__(self) -> str:
        return f"CuttingStockMaster({self._instance.name!r}, patterns={self._pool.size})"
