"""
Tests for the master models.

This module tests:
- CuttingStockMaster: initial patterns, duals, add_pattern
- LotSizingMaster: variables, rows, cut insertion
"""

import pytest

from lprefine.core import LotSizingInstance
from lprefine.master import CuttingStockMaster, LotSizingMaster
from lprefine.model import HIGHS_AVAILABLE
from lprefine.separation import separate_ls_inequalities


pytestmark = pytest.mark.skipif(not HIGHS_AVAILABLE, reason="HiGHS not installed")


class TestCuttingStockMaster:
    """Tests for CuttingStockMaster."""

    def test_initial_model(self, cutstock_instance):
        master = CuttingStockMaster(cutstock_instance)

        assert master.num_patterns == 5
        assert master.model.num_variables == 5
        assert master.model.num_constraints == 5
        assert [p.variable.name for p in master.patterns] == [
            "pat_1", "pat_2", "pat_3", "pat_4", "pat_5",
        ]
        assert all(p.attributes.get('trivial') for p in master.patterns)

    def test_initial_lp_duals(self, cutstock_instance):
        master = CuttingStockMaster(cutstock_instance)

        sol = master.model.solve_relaxation()

        # each row is covered by its own trivial pattern only
        assert sol.objective_value == pytest.approx(30 + 24 + 12 + 36 + 227 / 3)
        duals = master.get_duals()
        assert duals[0] == pytest.approx(1 / 5)
        assert duals[1] == pytest.approx(1 / 4)
        assert duals[2] == pytest.approx(1 / 4)
        assert duals[3] == pytest.approx(1 / 3)
        assert duals[4] == pytest.approx(1 / 3)

    def test_add_pattern(self, cutstock_instance):
        master = CuttingStockMaster(cutstock_instance)
        master.model.solve_relaxation()

        stored = master.add_pattern((1, 1, 0, 1, 1), reduced_cost=-0.117)

        assert stored.column_id == 5
        assert stored.variable.name == "pat_6"
        assert stored.reduced_cost == -0.117
        assert master.num_patterns == 6
        assert master.model.is_dirty

        sol = master.model.solve_relaxation()
        assert sol.is_optimal
        assert len(master.get_pattern_values()) == 6

    def test_new_pattern_lowers_lp(self, cutstock_instance):
        master = CuttingStockMaster(cutstock_instance)
        before = master.model.solve_relaxation().objective_value

        master.add_pattern((1, 1, 0, 1, 1))
        after = master.model.solve_relaxation().objective_value

        assert after < before

    def test_infeasible_pattern_rejected(self, cutstock_instance):
        master = CuttingStockMaster(cutstock_instance)

        with pytest.raises(ValueError):
            master.add_pattern((1, 1, 1, 1, 1))
        with pytest.raises(ValueError):
            master.add_pattern((0, 0, 0, 0, 300))

        assert master.num_patterns == 5

    def test_patterns_with_values(self, simple_csp_instance):
        master = CuttingStockMaster(simple_csp_instance)
        master.model.solve_relaxation()

        patterns = master.patterns_with_values()

        assert len(patterns) == 4
        assert all(p.value is not None and p.value >= 0 for p in patterns)


class TestLotSizingMaster:
    """Tests for LotSizingMaster."""

    def test_initial_model(self, els_instance):
        master = LotSizingMaster(els_instance)

        assert master.model.num_variables == 12
        assert master.model.num_constraints == 12
        assert [v.name for v in master.production_variables][:2] == ["prod1", "prod2"]
        assert [v.name for v in master.setup_variables][-1] == "setup6"
        assert master.num_cuts == 0

    def test_lp_relaxation_is_fractional(self, els_instance):
        master = LotSizingMaster(els_instance)

        sol = master.model.solve_relaxation()

        assert sol.is_optimal
        prod = master.get_production()
        assert sum(prod) == pytest.approx(18)
        assert not master.is_integral()

    def test_add_cut(self, els_instance):
        master = LotSizingMaster(els_instance)
        master.model.solve_relaxation()
        prod, setup = master.get_production(), master.get_setups()

        cuts = separate_ls_inequalities(prod, setup, els_instance.demand_table)
        assert cuts

        con = master.add_cut(cuts[0])

        assert con.name == "cut1"
        assert master.num_cuts == 1
        assert master.cuts == [cuts[0]]
        assert master.model.num_constraints == 13

        master.model.solve_relaxation()
        assert cuts[0].is_satisfied(
            master.get_production(), master.get_setups(), els_instance.demand_table
        )

    def test_single_period(self):
        inst = LotSizingInstance(demands=[4], setup_costs=[10], production_costs=[2])
        master = LotSizingMaster(inst)

        sol = master.model.solve_relaxation()

        # prod = 4 and setup = 4 / 4 = 1
        assert sol.objective_value == pytest.approx(18.0)
        assert master.is_integral()
