"""
Tests for the knapsack pricing oracle.

This module tests:
- KnapsackOracle against brute-force enumeration
- Edge cases (no positive profit, excluded items, zero caps)
- Failure reporting (AllocationFailure)
- PatternPricing (improving / non-improving decisions)
"""

import itertools
import math
import random

import pytest

from lprefine.errors import AllocationFailure
from lprefine.model import HIGHS_AVAILABLE
from lprefine.pricing import KnapsackOracle, PatternPricing, PricingStatus


def brute_force_knapsack(profits, weights, capacity, caps):
    """Enumerate every integer vector within the caps."""
    ranges = [
        range(min(int(cap), int(math.floor(capacity / w))) + 1) for w, cap in zip(weights, caps)
    ]
    best = 0.0
    for x in itertools.product(*ranges):
        if sum(w * c for w, c in zip(weights, x)) <= capacity + 1e-9:
            best = max(best, sum(p * c for p, c in zip(profits, x)))
    return best


def _failing_factory(name):
    raise AssertionError("the oracle should not build a model")


def _out_of_memory_factory(name):
    raise MemoryError()


class TestKnapsackEdgeCases:
    """Cases decided without a solve."""

    def test_no_positive_profit(self):
        oracle = KnapsackOracle(model_factory=_failing_factory)

        result = oracle.solve([0.0, -1.0, 0.0], [10, 20, 30], 50, [3, 3, 3])

        assert result.value == 0.0
        assert result.counts == (0, 0, 0)

    def test_all_items_too_wide(self):
        oracle = KnapsackOracle(model_factory=_failing_factory)

        result = oracle.solve([1.0, 2.0], [60, 70], 50, [1, 1])

        assert result.value == 0.0
        assert result.counts == (0, 0)

    def test_zero_caps(self):
        oracle = KnapsackOracle(model_factory=_failing_factory)

        result = oracle.solve([1.0, 2.0], [10, 10], 50, [0, 0])

        assert result.counts == (0, 0)

    def test_length_mismatch(self):
        oracle = KnapsackOracle(model_factory=_failing_factory)
        with pytest.raises(ValueError):
            oracle.solve([1.0], [10, 20], 50, [1, 1])

    def test_allocation_failure(self):
        oracle = KnapsackOracle(model_factory=_out_of_memory_factory)
        with pytest.raises(AllocationFailure):
            oracle.solve([1.0, 2.0], [10, 20], 50, [3, 3])


@pytest.mark.skipif(not HIGHS_AVAILABLE, reason="HiGHS not installed")
class TestKnapsackOracle:
    """Tests that solve the nested MIP."""

    def test_paper_widths(self):
        oracle = KnapsackOracle()

        result = oracle.solve([0.2, 0.25], [17, 21], 94, [150, 96])

        assert result.counts == (3, 2)
        assert result.value == pytest.approx(1.1)
        assert result.weight([17, 21]) == 93

    def test_demand_cap_binds(self):
        oracle = KnapsackOracle()

        result = oracle.solve([1.0, 0.1], [10, 10], 100, [2, 20])

        assert result.counts == (2, 8)
        assert result.value == pytest.approx(2.8)

    def test_excluded_items_stay_zero(self):
        oracle = KnapsackOracle()

        result = oracle.solve([1.0, -0.5, 3.0, 2.0], [10, 5, 200, 20], 50, [5, 5, 5, 0])

        assert result.counts == (5, 0, 0, 0)
        assert result.value == pytest.approx(5.0)

    def test_fractional_widths(self):
        oracle = KnapsackOracle()

        result = oracle.solve([0.3, 0.4], [22.5, 29.5], 94, [48, 227])

        expected = brute_force_knapsack([0.3, 0.4], [22.5, 29.5], 94, [48, 227])
        assert result.value == pytest.approx(expected, abs=1e-9)
        assert result.weight([22.5, 29.5]) <= 94

    def test_matches_brute_force(self):
        rng = random.Random(1234)
        oracle = KnapsackOracle()

        for _ in range(25):
            n = rng.randint(1, 4)
            weights = [rng.randint(5, 40) for _ in range(n)]
            caps = [rng.randint(0, 4) for _ in range(n)]
            profits = [round(rng.uniform(-0.2, 1.0), 3) for _ in range(n)]
            capacity = rng.randint(20, 100)

            result = oracle.solve(profits, weights, capacity, caps)

            expected = brute_force_knapsack(profits, weights, capacity, caps)
            assert result.value == pytest.approx(expected, abs=1e-6)
            assert all(0 <= c <= cap for c, cap in zip(result.counts, caps))
            assert result.weight(weights) <= capacity + 1e-9
            assert result.value == pytest.approx(
                sum(p * c for p, c in zip(profits, result.counts))
            )

    def test_no_side_effect_between_calls(self):
        oracle = KnapsackOracle()
        first = oracle.solve([0.2, 0.25], [17, 21], 94, [150, 96])
        oracle.solve([1.0], [10], 30, [3])
        again = oracle.solve([0.2, 0.25], [17, 21], 94, [150, 96])
        assert again.counts == first.counts


@pytest.mark.skipif(not HIGHS_AVAILABLE, reason="HiGHS not installed")
class TestPatternPricing:
    """Tests for PatternPricing."""

    def test_improving_pattern(self):
        pricing = PatternPricing([17, 21], 94, [150, 96])
        pricing.set_dual_values({0: 0.2, 1: 0.25})

        solution = pricing.solve()

        assert solution.status == PricingStatus.COLUMNS_FOUND
        assert solution.has_negative_reduced_cost
        assert solution.counts == (3, 2)
        assert solution.reduced_cost == pytest.approx(-0.1)
        assert solution.solve_time >= 0.0

    def test_no_improving_pattern(self):
        pricing = PatternPricing([17, 21], 94, [150, 96])
        pricing.set_dual_values({0: 1 / 5, 1: 0.0})

        solution = pricing.solve()

        # Five pieces of width 17 give exactly z* = 1: not improving
        assert solution.status == PricingStatus.NO_COLUMNS
        assert solution.value == pytest.approx(1.0)
        assert solution.reduced_cost == pytest.approx(0.0, abs=1e-9)

    def test_missing_duals_default_to_zero(self):
        pricing = PatternPricing([17, 21], 94, [150, 96])
        pricing.set_dual_values({})

        solution = pricing.solve()

        assert solution.status == PricingStatus.NO_COLUMNS
        assert solution.value == 0.0
