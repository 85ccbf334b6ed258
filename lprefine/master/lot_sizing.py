"""
Economic lot-sizing model with cut insertion.

Formulation:
    min  sum_t (f_t * setup_t + p_t * prod_t)
    s.t. prod_t <= D[t][T-1] * setup_t          (Production, one per t)
         sum_{s<=t} prod_s >= D[0][t]           (Demand, one per t)
         prod_t >= 0, setup_t in {0, 1}

The LP relaxation of this model is weak; (l,S)-inequalities found by the
separator are added as rows named cut1, cut2, ... over the run.
"""

import logging
from typing import List, Optional

from lprefine.config import config
from lprefine.core.instance import LotSizingInstance
from lprefine.master.base import create_model
from lprefine.model import Relation, VarType
from lprefine.model.base import SolverAdapter
from lprefine.model.expression import Constraint, LinearExpression, Variable
from lprefine.separation.ls_inequalities import LSInequality

logger = logging.getLogger(__name__)


class LotSizingMaster:
    """
    Lot-sizing model of an ELS instance.

    Example:
        >>> master = LotSizingMaster(LotSizingInstance.default())
        >>> master.model.solve_relaxation()
        >>> prod, setup = master.get_production(), master.get_setups()
    """

    def __init__(
        self,
        instance: LotSizingInstance,
        model: Optional[SolverAdapter] = None,
    ):
        """
        Args:
            instance: The lot-sizing instance
            model: Empty solver adapter to build into (default: HiGHS)
        """
        self._instance = instance
        self._model = model if model is not None else create_model(instance.name)

        self._prod: List[Variable] = []
        self._setup: List[Variable] = []
        self._production_constraints: List[Constraint] = []
        self._demand_constraints: List[Constraint] = []
        self._cuts: List[LSInequality] = []
        self._cut_constraints: List[Constraint] = []

        self._build()

    def _build(self) -> None:
        inst = self._instance
        table = inst.demand_table
        num_periods = inst.num_periods

        for t in range(num_periods):
            self._prod.append(self._model.create_variable(f"prod{t + 1}"))
            self._setup.append(self._model.create_variable(f"setup{t + 1}", VarType.BINARY))

        objective = LinearExpression()
        for t in range(num_periods):
            objective.add_term(self._setup[t], inst.setup_costs[t])
            objective.add_term(self._prod[t], inst.production_costs[t])
        self._model.set_objective(objective)

        for t in range(num_periods):
            lhs = LinearExpression({
                self._prod[t]: 1.0,
                self._setup[t]: -table.remaining(t),
            })
            self._production_constraints.append(
                self._model.create_constraint("Production", lhs, Relation.LE, 0.0)
            )

        for t in range(num_periods):
            lhs = LinearExpression({self._prod[s]: 1.0 for s in range(t + 1)})
            self._demand_constraints.append(
                self._model.create_constraint("Demand", lhs, Relation.GE, table[0, t])
            )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def instance(self) -> LotSizingInstance:
        return self._instance

    @property
    def model(self) -> SolverAdapter:
        return self._model

    @property
    def production_variables(self) -> List[Variable]:
        return list(self._prod)

    @property
    def setup_variables(self) -> List[Variable]:
        return list(self._setup)

    @property
    def cuts(self) -> List[LSInequality]:
        """Inequalities added so far, in insertion order."""
        return list(self._cuts)

    @property
    def num_cuts(self) -> int:
        return len(self._cuts)

    # =========================================================================
    # Cuts
    # =========================================================================

    def add_cut(self, cut: LSInequality) -> Constraint:
        """
        Add an (l,S)-inequality as a new row.

        The model is left dirty; call ``model.reload_model()`` before
        restoring a basis.
        """
        lhs = LinearExpression()
        for kind, t, coeff in cut.terms(self._instance.demand_table):
            var = self._prod[t] if kind == "prod" else self._setup[t]
            lhs.add_term(var, coeff)

        con = self._model.create_constraint(
            f"cut{len(self._cuts) + 1}", lhs, Relation.GE, cut.rhs
        )
        self._cuts.append(cut)
        self._cut_constraints.append(con)
        logger.debug("%s: added %s as %r", self._instance.name, con.name, cut)
        return con

    # =========================================================================
    # Solution access
    # =========================================================================

    def get_production(self) -> List[float]:
        return [self._model.get_solution_value(v) for v in self._prod]

    def get_setups(self) -> List[float]:
        return [self._model.get_solution_value(v) for v in self._setup]

    def is_integral(self, tolerance: Optional[float] = None) -> bool:
        """Whether every setup value of the last solve is within tolerance of 0 or 1."""
        tol = tolerance if tolerance is not None else config.tolerance
        return all(abs(v - round(v)) <= tol for v in self.get_setups())

    def __repr__(self) -> str:
        return (
            f"LotSizingMaster({self._instance.name!r}, "
            f"periods={self._instance.num_periods}, cuts={len(self._cuts)})"
        )
