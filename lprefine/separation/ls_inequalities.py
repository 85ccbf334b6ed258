"""
Separation of (l,S)-inequalities for uncapacitated lot sizing.

For a period l and a subset S of the periods 0..l, the (l,S)-inequality

    sum_{t in S} prod[t] + sum_{t <= l, t not in S} D[t][l] * setup[t] >= D[0][l]

is valid for every integer solution: production in a period without a
setup is zero, and production in t can serve at most D[t][l] units of the
demand of periods t..l.

Given a fractional (prod, setup), the most violated inequality for a fixed
l picks for each t the smaller of prod[t] and D[t][l] * setup[t]; if the
resulting sum stays below D[0][l], the inequality cuts the point off.

Usage:
------
    >>> separator = LSSeparator(CumulativeDemandTable([1, 3, 5]))
    >>> cuts = separator.separate(prod=[9, 0, 0], setup=[0.5, 0, 0])
    >>> [cut.period for cut in cuts]
    [0, 1, 2]
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence, Tuple

from lprefine.config import config
from lprefine.core.demand import CumulativeDemandTable


@dataclass(frozen=True)
class LSInequality:
    """
    One (l,S)-inequality.

    Attributes:
        period: The period l closing the demand window 0..l
        production_periods: S, the periods whose production term enters
        rhs: D[0][l]
        violation: rhs minus left-hand side at the separated point
    """
    period: int
    production_periods: FrozenSet[int]
    rhs: float
    violation: float = 0.0

    @property
    def setup_periods(self) -> Tuple[int, ...]:
        """Periods t <= l outside S, entering through D[t][l] * setup[t]."""
        return tuple(t for t in range(self.period + 1) if t not in self.production_periods)

    def terms(self, table: CumulativeDemandTable) -> List[Tuple[str, int, float]]:
        """
        Left-hand side as (kind, period, coefficient) triples.

        kind is "prod" or "setup".
        """
        result = []
        for t in range(self.period + 1):
            if t in self.production_periods:
                result.append(("prod", t, 1.0))
            else:
                result.append(("setup", t, float(table[t, self.period])))
        return result

    def evaluate(
        self,
        prod: Sequence[float],
        setup: Sequence[float],
        table: CumulativeDemandTable,
    ) -> float:
        """Left-hand side value at (prod, setup)."""
        total = 0.0
        for kind, t, coeff in self.terms(table):
            total += coeff * (prod[t] if kind == "prod" else setup[t])
        return total

    def is_satisfied(
        self,
        prod: Sequence[float],
        setup: Sequence[float],
        table: CumulativeDemandTable,
        tolerance: float = 1e-6,
    ) -> bool:
        return self.evaluate(prod, setup, table) >= self.rhs - tolerance

    def __repr__(self) -> str:
        return (
            f"LSInequality(l={self.period}, S={sorted(self.production_periods)}, "
            f"rhs={self.rhs:g}, violation={self.violation:.4f})"
        )


def separate_ls_inequalities(
    prod: Sequence[float],
    setup: Sequence[float],
    table: CumulativeDemandTable,
    tolerance: float = 1e-6,
) -> List[LSInequality]:
    """
    Find every period l with a violated (l,S)-inequality.

    Ties within tolerance count as "production is binding" when choosing S
    and as "not violated" when testing the inequality.

    Args:
        prod: Production amount per period
        setup: Setup indicator per period (fractional)
        table: Cumulative demand table of the instance
        tolerance: Numerical tolerance

    Returns:
        One most-violated inequality per violated period, by period
    """
    num_periods = table.num_periods
    if len(prod) != num_periods or len(setup) != num_periods:
        raise ValueError("prod and setup must have one value per period")

    cuts = []
    for l in range(num_periods):
        ds = 0.0
        production_periods = set()
        for t in range(l + 1):
            capacity_term = table[t, l] * setup[t]
            if prod[t] < capacity_term + tolerance:
                ds += prod[t]
                production_periods.add(t)
            else:
                ds += capacity_term

        rhs = table[0, l]
        if ds < rhs - tolerance:
            cuts.append(LSInequality(
                period=l,
                production_periods=frozenset(production_periods),
                rhs=float(rhs),
                violation=rhs - ds,
            ))

    return cuts


class LSSeparator:
    """
    Separator bound to one instance's demand table.

    Attributes:
        table: Cumulative demand table
        tolerance: Numerical tolerance (default: config.tolerance)
    """

    def __init__(self, table: CumulativeDemandTable, tolerance: Optional[float] = None):
        self._table = table
        self._tolerance = tolerance if tolerance is not None else config.tolerance

    @property
    def table(self) -> CumulativeDemandTable:
        return self._table

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def separate(self, prod: Sequence[float], setup: Sequence[float]) -> List[LSInequality]:
        """All violated inequalities at (prod, setup), batched."""
        return separate_ls_inequalities(prod, setup, self._table, self._tolerance)
