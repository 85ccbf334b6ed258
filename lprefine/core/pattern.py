"""
Pattern module - a cutting pattern (column) of the cutting-stock model.

A pattern is a non-negative integer vector over item types: how many
pieces of each width are cut from one raw roll. In column generation it is
a column of the restricted master model and owns the integer variable that
counts how many rolls are cut with it.

Pattern Lifecycle:
-----------------
1. Created by the pricing oracle (or as a trivial initial pattern)
2. Added to the master model (becomes a variable)
3. Receives a value when the master is solved
4. Never removed during a run
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from lprefine.model.expression import Variable


@dataclass(frozen=True)
class Pattern:
    """
    A cutting pattern.

    Attributes:
        counts: Number of pieces of each item type in one roll
        column_id: Position of the pattern in its pool
        variable: Model variable counting the rolls cut with this pattern
        reduced_cost: Reduced cost the pattern was priced at (None for
            initial patterns)
        value: Value in the last solution
        attributes: Additional attributes (e.g. "trivial": True)

    Example:
        >>> p = Pattern(counts=(2, 0, 1))
        >>> p.total_width([17, 21, 22.5])
        56.5
        >>> p.upper_bound([150, 96, 48])
        75
    """
    counts: Tuple[int, ...]
    column_id: Optional[int] = None
    variable: Optional[Variable] = None
    reduced_cost: Optional[float] = None
    value: Optional[float] = None
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not isinstance(self.counts, tuple):
            object.__setattr__(self, 'counts', tuple(int(c) for c in self.counts))
        if any(c < 0 for c in self.counts):
            raise ValueError(f"Pattern counts must be non-negative: {self.counts}")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def num_items(self) -> int:
        return len(self.counts)

    @property
    def served_items(self) -> List[int]:
        """Item types with at least one piece in the pattern."""
        return [i for i, c in enumerate(self.counts) if c > 0]

    @property
    def is_empty(self) -> bool:
        return not any(self.counts)

    # =========================================================================
    # Methods
    # =========================================================================

    def total_width(self, widths: Sequence[float]) -> float:
        return sum(w * c for w, c in zip(widths, self.counts))

    def is_feasible(
        self,
        widths: Sequence[float],
        capacity: float,
        demands: Sequence[int],
        tolerance: float = 1e-6,
    ) -> bool:
        """Check ``0 <= x_i <= d_i`` and ``sum_i a_i x_i <= R``."""
        if len(self.counts) != len(widths) or len(self.counts) != len(demands):
            return False
        if any(c > d for c, d in zip(self.counts, demands)):
            return False
        return self.total_width(widths) <= capacity + tolerance

    def upper_bound(self, demands: Sequence[int]) -> int:
        """
        Largest number of rolls worth cutting with this pattern.

        One roll covers at most ``x_i`` units of the demand of item ``i``,
        so more than ``max_i ceil(d_i / x_i)`` rolls never help.
        """
        bounds = [
            math.ceil(demands[i] / self.counts[i]) for i in self.served_items
        ]
        return max(bounds) if bounds else 0

    def with_variable(self, variable: Variable) -> 'Pattern':
        return replace(self, variable=variable)

    def with_id(self, column_id: int) -> 'Pattern':
        return replace(self, column_id=column_id)

    def with_value(self, value: float) -> 'Pattern':
        return replace(self, value=value)

    def describe(self, widths: Sequence[float]) -> str:
        """Widths distribution in the console report format."""
        parts = [f"{w:g}:{c}" for w, c in zip(widths, self.counts)]
        return "  ".join(parts)

    def __repr__(self) -> str:
        name = self.variable.name if self.variable is not None else "unbound"
        val_str = f", value={self.value:.4f}" if self.value is not None else ""
        return f"Pattern({name}, counts={list(self.counts)}{val_str})"


class PatternPool:
    """
    Ordered storage of the patterns of one column-generation run.

    Patterns receive consecutive column ids in insertion order. Duplicate
    count vectors are detected by lookup.
    """

    def __init__(self):
        self._patterns: List[Pattern] = []
        self._by_counts: Dict[Tuple[int, ...], int] = {}

    def add(self, pattern: Pattern) -> Pattern:
        """Assign the next column id and store the pattern."""
        stored = pattern.with_id(len(self._patterns))
        self._patterns.append(stored)
        self._by_counts.setdefault(stored.counts, stored.column_id)
        return stored

    def get(self, column_id: int) -> Optional[Pattern]:
        if 0 <= column_id < len(self._patterns):
            return self._patterns[column_id]
        return None

    def contains_counts(self, counts: Sequence[int]) -> bool:
        return tuple(counts) in self._by_counts

    @property
    def size(self) -> int:
        return len(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)
