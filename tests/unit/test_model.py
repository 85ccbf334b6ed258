"""
Tests for the solver adapter module.

This module tests:
- LinearExpression arithmetic
- ModelSolution / BasisHandle dataclasses
- HighsModel: LP and MIP solves, duals, reload, basis reuse, options
"""

import logging

import pytest

from lprefine.errors import SolverError, SolverInfeasible
from lprefine.model import (
    HIGHS_AVAILABLE,
    BasisHandle,
    HighsModel,
    LinearExpression,
    ModelSolution,
    ObjectiveSense,
    Relation,
    SolutionStatus,
    Variable,
    VarType,
)


# =============================================================================
# Expressions and data classes
# =============================================================================


class TestLinearExpression:
    """Tests for LinearExpression."""

    def test_variable_arithmetic(self):
        x = Variable(0, "x")
        y = Variable(1, "y")

        expr = 2 * x + y + 3

        assert expr.coefficient(x) == 2.0
        assert expr.coefficient(y) == 1.0
        assert expr.constant == 3.0
        assert len(expr) == 2

    def test_add_term_accumulates(self):
        x = Variable(0, "x")
        expr = LinearExpression().add_term(x, 1.5).add_term(x, 2.5)
        assert expr.coefficient(x) == 4.0

    def test_zero_terms_skipped(self):
        x = Variable(0, "x")
        y = Variable(1, "y")
        expr = LinearExpression({x: 0.0, y: 1.0})
        assert [v for v, _ in expr.terms()] == [y]

    def test_value(self):
        x = Variable(0, "x")
        y = Variable(1, "y")
        expr = LinearExpression({x: 2.0, y: -1.0}, constant=1.0)
        assert expr.value({x: 3.0, y: 4.0}) == 3.0

    def test_scaling(self):
        x = Variable(0, "x")
        expr = (x + 1) * 3
        assert expr.coefficient(x) == 3.0
        assert expr.constant == 3.0


class TestModelSolution:
    """Tests for ModelSolution."""

    def test_defaults(self):
        sol = ModelSolution()
        assert sol.status == SolutionStatus.NOT_SOLVED
        assert not sol.is_optimal
        assert not sol.has_solution

    def test_raise_for_status_optimal(self):
        ModelSolution(status=SolutionStatus.OPTIMAL, objective_value=1.0).raise_for_status()

    def test_raise_for_status_infeasible(self):
        sol = ModelSolution(status=SolutionStatus.INFEASIBLE)
        with pytest.raises(SolverInfeasible):
            sol.raise_for_status("test")

    def test_raise_for_status_other(self):
        sol = ModelSolution(status=SolutionStatus.TIME_LIMIT, is_relaxation=False)
        with pytest.raises(SolverError) as excinfo:
            sol.raise_for_status("test")
        assert excinfo.value.status == SolutionStatus.TIME_LIMIT

    def test_infeasible_is_solver_error_family(self):
        from lprefine.errors import LPRefineError
        assert issubclass(SolverInfeasible, LPRefineError)
        assert issubclass(SolverError, LPRefineError)


class TestBasisHandle:
    """Tests for BasisHandle."""

    def test_reset_releases(self):
        basis = BasisHandle(col_status=[1, 2], row_status=[3])
        assert basis.num_columns == 2
        assert basis.num_rows == 1

        basis.reset()

        assert basis.released
        assert basis.num_columns == 0
        assert basis.num_rows == 0


# =============================================================================
# HiGHS adapter
# =============================================================================


def _small_lp():
    """min x + y  s.t.  x + 2y >= 4,  x, y >= 0  (optimum y = 2, obj 2)."""
    model = HighsModel("small")
    x = model.create_variable("x")
    y = model.create_variable("y")
    con = model.create_constraint("c", x + 2 * y, Relation.GE, 4)
    model.set_objective(x + y)
    return model, x, y, con


@pytest.mark.skipif(not HIGHS_AVAILABLE, reason="HiGHS not installed")
class TestHighsModel:
    """Tests for HighsModel."""

    def test_create_variable_bounds_checked(self):
        model = HighsModel("m")
        with pytest.raises(ValueError):
            model.create_variable("x", VarType.CONTINUOUS, 2.0, 1.0)

    def test_counts(self):
        model, _, _, _ = _small_lp()
        assert model.num_variables == 2
        assert model.num_constraints == 1
        assert model.is_dirty

    def test_solve_relaxation(self):
        model, x, y, con = _small_lp()

        sol = model.solve_relaxation()

        assert sol.is_optimal
        assert sol.is_relaxation
        assert sol.objective_value == pytest.approx(2.0)
        assert model.get_solution_value(x) == pytest.approx(0.0, abs=1e-9)
        assert model.get_solution_value(y) == pytest.approx(2.0)
        assert model.get_dual_value(con) == pytest.approx(0.5)
        assert not model.is_dirty

    def test_solution_before_solve_raises(self):
        model, x, _, con = _small_lp()
        with pytest.raises(ValueError):
            model.get_solution_value(x)
        with pytest.raises(ValueError):
            model.get_dual_value(con)

    def test_foreign_handle_rejected(self):
        model, _, _, _ = _small_lp()
        with pytest.raises(ValueError):
            model.get_solution_value(Variable(7, "ghost"))

    def test_maximize(self):
        model = HighsModel("max")
        x = model.create_variable("x", VarType.CONTINUOUS, 0, 3)
        model.set_objective(2 * x, ObjectiveSense.MAXIMIZE)

        sol = model.solve_relaxation()

        assert sol.objective_value == pytest.approx(6.0)

    def test_binary_upper_bound(self):
        model = HighsModel("bin")
        b = model.create_variable("b", VarType.BINARY, 0, 10)
        model.set_objective(b, ObjectiveSense.MAXIMIZE)

        model.solve_relaxation()

        assert model.get_solution_value(b) == pytest.approx(1.0)

    def test_objective_constant(self):
        model = HighsModel("const")
        x = model.create_variable("x", VarType.CONTINUOUS, 1, 5)
        model.set_objective(x + 10)

        sol = model.solve_relaxation()

        assert sol.objective_value == pytest.approx(11.0)

    def test_solve_integer_restores_lp_mode(self):
        """min x s.t. 2x >= 3: LP 1.5, integer 2, LP again 1.5."""
        model = HighsModel("int")
        x = model.create_variable("x", VarType.INTEGER)
        model.create_constraint("c", 2 * x, Relation.GE, 3)
        model.set_objective(1 * x)

        lp = model.solve_relaxation()
        assert lp.objective_value == pytest.approx(1.5)

        ip = model.solve_integer()
        assert ip.is_optimal
        assert not ip.is_relaxation
        assert ip.objective_value == pytest.approx(2.0)
        assert model.get_solution_value(x) == pytest.approx(2.0)

        lp_again = model.solve_relaxation()
        assert lp_again.objective_value == pytest.approx(1.5)

    def test_duals_unavailable_after_integer_solve(self):
        model, _, _, con = _small_lp()
        model.solve_integer()
        with pytest.raises(ValueError):
            model.get_dual_value(con)

    def test_infeasible(self):
        model = HighsModel("inf")
        x = model.create_variable("x", VarType.CONTINUOUS, 0, 1)
        model.create_constraint("c", 1 * x, Relation.GE, 2)
        model.set_objective(1 * x)
        model.disable_presolve()

        sol = model.solve_relaxation()

        assert sol.is_infeasible
        with pytest.raises(SolverInfeasible):
            sol.raise_for_status()

    def test_add_column_and_reload_with_basis(self):
        model, x, y, con = _small_lp()
        model.solve_relaxation()

        with model.saved_basis() as basis:
            z = model.create_variable("z")
            model.add_term_to_objective(z, 0.25)
            model.add_term_to_constraint(con, z, 1.0)
            model.set_variable_upper_bound(z, 8.0)
            assert model.is_dirty

            model.reload_model()
            model.load_basis(basis)

        assert basis.released

        sol = model.solve_relaxation()

        # z covers the row at cost 0.25 per unit, but only up to 8 units
        assert sol.objective_value == pytest.approx(1.0)
        assert model.get_solution_value(z) == pytest.approx(4.0)

    def test_add_row_and_reload_with_basis(self):
        model, x, y, _ = _small_lp()
        model.solve_relaxation()

        with model.saved_basis() as basis:
            model.create_constraint("cut", 1 * x, Relation.GE, 1)
            model.reload_model()
            model.load_basis(basis)

        sol = model.solve_relaxation()

        # x = 1, y = 1.5
        assert sol.objective_value == pytest.approx(2.5)

    def test_released_basis_cannot_be_loaded(self):
        model, _, _, _ = _small_lp()
        model.solve_relaxation()
        basis = model.save_basis()
        model.release_basis(basis)

        with pytest.raises(ValueError):
            model.load_basis(basis)

    def test_saved_basis_released_on_error(self):
        model, _, _, _ = _small_lp()
        model.solve_relaxation()

        with pytest.raises(RuntimeError):
            with model.saved_basis() as basis:
                raise RuntimeError("boom")

        assert basis.released

    def test_disable_cuts_and_presolve(self):
        model, _, _, _ = _small_lp()
        assert model.automatic_cuts_enabled
        assert model.presolve_enabled

        model.disable_automatic_cuts()
        model.disable_presolve()

        assert not model.automatic_cuts_enabled
        assert not model.presolve_enabled
        assert model.solve_relaxation().objective_value == pytest.approx(2.0)

    def test_integer_solve_warns_when_cuts_disabled(self, caplog):
        model = HighsModel("int_cuts")
        x = model.create_variable("x", VarType.INTEGER)
        model.create_constraint("c", 2 * x, Relation.GE, 3)
        model.set_objective(1 * x)
        model.disable_automatic_cuts()

        with caplog.at_level(logging.WARNING, logger="lprefine.model.highs"):
            sol = model.solve_integer()

        assert sol.objective_value == pytest.approx(2.0)
        assert "no switch for branch-and-bound cuts" in caplog.text

    def test_integer_solve_silent_with_cuts_enabled(self, caplog):
        model = HighsModel("int_cuts_on")
        x = model.create_variable("x", VarType.INTEGER)
        model.create_constraint("c", 2 * x, Relation.GE, 3)
        model.set_objective(1 * x)

        with caplog.at_level(logging.WARNING, logger="lprefine.model.highs"):
            model.solve_integer()

        assert "branch-and-bound cuts" not in caplog.text

    def test_invalid_option(self):
        model = HighsModel("opt")
        with pytest.raises(ValueError):
            model.set_option("no_such_option", 1)

    def test_unbounded_variable_bound(self):
        model = HighsModel("inf_ub")
        x = model.create_variable("x")
        model.create_constraint("c", 1 * x, Relation.LE, 5)
        model.set_objective(1 * x, ObjectiveSense.MAXIMIZE)

        sol = model.solve_relaxation()

        assert sol.objective_value == pytest.approx(5.0)
