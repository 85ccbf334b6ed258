"""
Pricing module - finds improving columns from dual prices.

This module provides:
- PricingProblem: Abstract base class for pricing solvers
- PricingSolution / PricingStatus: Pricing results
- KnapsackOracle: Exact bounded integer knapsack (nested MIP)
- PatternPricing: Cutting-stock pricing built on the oracle

Usage:
------
    >>> from lprefine.pricing import PatternPricing
    >>> pricing = PatternPricing(widths, roll_width, demands)
    >>> pricing.set_dual_values(duals)
    >>> solution = pricing.solve()
    >>> if solution.has_negative_reduced_cost:
    ...     print(solution.counts)
"""

from lprefine.pricing.base import PricingProblem, PricingSolution, PricingStatus
from lprefine.pricing.knapsack import KnapsackOracle, KnapsackResult, PatternPricing

__all__ = [
    'PricingProblem',
    'PricingSolution',
    'PricingStatus',
    'KnapsackOracle',
    'KnapsackResult',
    'PatternPricing',
]
