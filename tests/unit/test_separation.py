"""
Tests for the cumulative demand table and (l,S) separation.

This module tests:
- CumulativeDemandTable values and monotonicity
- separate_ls_inequalities on hand-checked points
- Validity of every separated cut for integer-feasible plans
"""

import itertools
import random

import pytest

from lprefine.core import CumulativeDemandTable, LotSizingInstance
from lprefine.separation import LSInequality, LSSeparator, separate_ls_inequalities


class TestCumulativeDemandTable:
    """Tests for CumulativeDemandTable."""

    def test_range_sums(self):
        demands = [1, 3, 5, 3, 4, 2]
        table = CumulativeDemandTable(demands)

        for s in range(len(demands)):
            for t in range(len(demands)):
                expected = sum(demands[s:t + 1]) if s <= t else 0
                assert table[s, t] == expected

    def test_monotone_in_end_period(self):
        table = CumulativeDemandTable([2, 0, 7, 1])
        for s in range(4):
            for t in range(3):
                assert table[s, t] <= table[s, t + 1]

    def test_remaining(self):
        table = CumulativeDemandTable([1, 3, 5, 3, 4, 2])
        assert table.remaining(0) == 18
        assert table.remaining(5) == 2
        assert table.row(2) == (0, 0, 5, 8, 12, 14)
        assert len(table) == 6

    def test_negative_demand_rejected(self):
        with pytest.raises(ValueError):
            CumulativeDemandTable([1, -1])


class TestSeparation:
    """Tests for separate_ls_inequalities."""

    def test_fractional_setup_cut(self):
        table = CumulativeDemandTable([1, 3, 5])

        cuts = separate_ls_inequalities([9, 0, 0], [0.5, 0, 0], table)

        assert [c.period for c in cuts] == [0, 1, 2]
        cut = cuts[1]
        assert cut.production_periods == frozenset({1})
        assert cut.setup_periods == (0,)
        assert cut.rhs == 4
        assert cut.violation == pytest.approx(2.0)
        assert cut.terms(table) == [("setup", 0, 4.0), ("prod", 1, 1.0)]

    def test_integral_point_not_cut(self):
        table = CumulativeDemandTable([1, 3, 5])
        assert separate_ls_inequalities([9, 0, 0], [1, 0, 0], table) == []

    def test_tie_is_not_violated(self):
        table = CumulativeDemandTable([4])
        # min(prod, D * setup) = 4 - 1e-7 is within tolerance of D[0][0] = 4
        assert separate_ls_inequalities([4 - 1e-7], [1.0], table, tolerance=1e-6) == []

    def test_length_mismatch(self):
        table = CumulativeDemandTable([1, 3, 5])
        with pytest.raises(ValueError):
            separate_ls_inequalities([1, 2], [1, 1, 1], table)

    def test_violation_matches_evaluation(self):
        table = CumulativeDemandTable([1, 3, 5, 3, 4, 2])
        prod = [18, 0, 0, 0, 0, 0]
        setup = [0.4, 0, 0, 0, 0, 0]

        cuts = separate_ls_inequalities(prod, setup, table)

        assert cuts
        for cut in cuts:
            lhs = cut.evaluate(prod, setup, table)
            assert cut.violation == pytest.approx(cut.rhs - lhs)
            assert not cut.is_satisfied(prod, setup, table)

    def test_separator_binds_table(self):
        instance = LotSizingInstance.default()
        separator = LSSeparator(instance.demand_table, tolerance=1e-6)

        cuts = separator.separate([18, 0, 0, 0, 0, 0], [1, 0, 0, 0, 0, 0])

        assert cuts == []
        assert separator.tolerance == 1e-6
        assert separator.table is instance.demand_table


def _integer_plans(demands):
    """
    Feasible plans with binary setups.

    For each setup vector with a setup in period 0, produce each period's
    demand in the latest (and, separately, the earliest) setup period at or
    before it.
    """
    n = len(demands)
    for tail in itertools.product([0, 1], repeat=n - 1):
        setup = (1,) + tail
        open_periods = [t for t in range(n) if setup[t]]
        for pick in (max, min):
            prod = [0.0] * n
            for t in range(n):
                s = pick(p for p in open_periods if p <= t)
                prod[s] += demands[t]
            yield prod, list(setup)


class TestCutValidity:
    """Every separated cut keeps every integer-feasible plan."""

    def test_cuts_valid_for_integer_plans(self):
        instance = LotSizingInstance.default()
        table = instance.demand_table
        plans = list(_integer_plans(instance.demands))
        rng = random.Random(42)

        found = 0
        for _ in range(200):
            setup = [rng.random() for _ in range(instance.num_periods)]
            prod = [rng.uniform(0, table.remaining(t)) for t in range(instance.num_periods)]

            for cut in separate_ls_inequalities(prod, setup, table):
                found += 1
                assert cut.evaluate(prod, setup, table) < cut.rhs
                for plan_prod, plan_setup in plans:
                    assert cut.is_satisfied(plan_prod, plan_setup, table)

        assert found > 0

    def test_cut_is_frozen(self):
        cut = LSInequality(period=0, production_periods=frozenset(), rhs=1.0)
        with pytest.raises(AttributeError):
            cut.rhs = 2.0
