"""
Integration tests for the lot-sizing cut generation.

These tests run the cutting-plane loop end to end and compare the final
LP point with the integer optimum found by enumeration.
"""

import itertools

import pytest

from lprefine import LotSizingInstance, solve_lot_sizing
from lprefine.model import HIGHS_AVAILABLE
from lprefine.solver import CutConfig, CutGeneration, CutStatus


pytestmark = pytest.mark.skipif(not HIGHS_AVAILABLE, reason="HiGHS not installed")


def brute_force_cost(instance):
    """
    Optimal cost by enumerating setup vectors.

    Without holding costs, each period's demand is produced in the open
    period at or before it with the cheapest unit cost.
    """
    n = instance.num_periods
    best = None
    for setup in itertools.product([0, 1], repeat=n):
        open_periods = [t for t in range(n) if setup[t]]
        cost = sum(f for f, y in zip(instance.setup_costs, setup) if y)
        feasible = True
        for t, d in enumerate(instance.demands):
            if d == 0:
                continue
            choices = [instance.production_costs[s] for s in open_periods if s <= t]
            if not choices:
                feasible = False
                break
            cost += d * min(choices)
        if feasible and (best is None or cost < best):
            best = cost
    return best


class TestCutGeneration:
    """Cut generation on the six-period instance."""

    def test_converges_to_integral_point(self, els_instance):
        loop = CutGeneration(els_instance)

        solution = loop.solve()

        assert solution.status == CutStatus.OPTIMAL
        assert solution.is_integral
        assert solution.num_cuts > 0
        assert solution.iteration_history[-1].cuts_added == 0
        assert solution.iterations == len(solution.iteration_history)
        assert loop.is_solved

    def test_matches_enumeration(self, els_instance):
        solution = CutGeneration(els_instance).solve()

        assert solution.objective_value == pytest.approx(brute_force_cost(els_instance), abs=1e-5)

    def test_objective_non_decreasing(self, els_instance):
        solution = CutGeneration(els_instance).solve()

        history = solution.get_convergence_history()
        for before, after in zip(history, history[1:]):
            assert after >= before - 1e-7

    def test_plan_meets_demand(self, els_instance):
        solution = CutGeneration(els_instance).solve()

        table = els_instance.demand_table
        produced = 0.0
        for t in range(els_instance.num_periods):
            produced += solution.production[t]
            assert produced >= table[0, t] - 1e-6
            if solution.production[t] > 1e-6:
                assert solution.setups[t] == pytest.approx(1.0, abs=1e-6)

    def test_final_point_satisfies_every_cut(self, els_instance):
        solution = CutGeneration(els_instance).solve()

        for cut in solution.cuts:
            assert cut.is_satisfied(solution.production, solution.setups, els_instance.demand_table)

    def test_pass_limit(self, els_instance):
        solution = CutGeneration(els_instance, CutConfig(max_passes=1)).solve()

        assert solution.status == CutStatus.PASS_LIMIT
        assert solution.iterations == 1
        assert solution.iteration_history[0].cuts_added > 0
        # the reported point already includes the first cuts
        assert solution.objective_value >= solution.iteration_history[0].lp_objective - 1e-7

    def test_callback_stops(self, els_instance):
        loop = CutGeneration(els_instance)
        loop.add_callback(lambda _, iteration: False)

        solution = loop.solve()

        assert solution.status == CutStatus.STOPPED
        assert solution.iterations == 1

    def test_verbose_output(self, els_instance, capsys):
        CutGeneration(els_instance, CutConfig(verbose=True)).solve()

        out = capsys.readouterr().out
        assert "Pass 1 (" in out
        assert "cuts added:" in out
        assert "Optimal integer solution found:" in out
        assert "Period 1: prod" in out
        assert "Period 6: prod" in out

    def test_single_period(self):
        instance = LotSizingInstance(demands=[4], setup_costs=[10], production_costs=[2])

        solution = CutGeneration(instance).solve()

        assert solution.status == CutStatus.OPTIMAL
        assert solution.iterations == 1
        assert solution.num_cuts == 0
        assert solution.objective_value == pytest.approx(18.0)


class TestSolveLotSizing:
    """Tests for the solve_lot_sizing entry point."""

    def test_default_instance(self):
        solution = solve_lot_sizing()

        assert solution.status == CutStatus.OPTIMAL
        assert solution.is_integral
        assert solution.setup_periods[0] == 0
        assert solution.setup_cost + solution.production_cost == pytest.approx(
            solution.objective_value
        )

        report = solution.report()
        assert "Solution is integer" in report
        assert "Period 6:" in report

    @pytest.mark.parametrize("seed", range(5))
    def test_random_instances(self, seed):
        import random

        rng = random.Random(seed)
        n = rng.randint(3, 7)
        instance = LotSizingInstance(
            demands=[rng.randint(0, 6) for _ in range(n)],
            setup_costs=[rng.randint(1, 20) for _ in range(n)],
            production_costs=[rng.randint(1, 5) for _ in range(n)],
        )

        solution = solve_lot_sizing(instance)

        assert solution.status == CutStatus.OPTIMAL
        assert solution.objective_value == pytest.approx(brute_force_cost(instance), abs=1e-5)
