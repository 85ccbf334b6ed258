"""
Problem instances.

Instances are plain, validated data: item widths and demands for cutting
stock, per-period demand and costs for economic lot sizing. They are not
modified once built.

Usage:
------
    >>> from lprefine.core import CuttingStockInstance, LotSizingInstance
    >>> cs = CuttingStockInstance.default()
    >>> cs.trivial_patterns()[0]
    (5, 0, 0, 0, 0)
    >>> els = LotSizingInstance.default()
    >>> els.demand_table[0, 5]
    18
"""

import math
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from lprefine.core.demand import CumulativeDemandTable


@dataclass(frozen=True)
class CuttingStockInstance:
    """
    A Cutting Stock Problem instance.

    Attributes:
        roll_width: Width of each raw roll (capacity)
        item_sizes: Width of each item type
        item_demands: Number of pieces of each item type needed
        item_names: Optional names for items
        name: Optional instance name
    """
    roll_width: float
    item_sizes: Tuple[float, ...]
    item_demands: Tuple[int, ...]
    item_names: Optional[Tuple[str, ...]] = None
    name: str = "CutStock"

    def __post_init__(self):
        object.__setattr__(self, 'item_sizes', tuple(self.item_sizes))
        if any(d != math.floor(d) for d in self.item_demands):
            raise ValueError("demands must be integral")
        object.__setattr__(self, 'item_demands', tuple(int(d) for d in self.item_demands))
        if len(self.item_sizes) != len(self.item_demands):
            raise ValueError("item_sizes and item_demands must have same length")
        if self.roll_width <= 0:
            raise ValueError("roll_width must be positive")
        if any(s <= 0 for s in self.item_sizes):
            raise ValueError("item sizes must be positive")
        if any(s > self.roll_width for s in self.item_sizes):
            raise ValueError("every item must fit into one roll")
        if any(d < 0 for d in self.item_demands):
            raise ValueError("demands must be non-negative")

        if self.item_names is None:
            object.__setattr__(
                self, 'item_names', tuple(f"item_{i}" for i in range(len(self.item_sizes)))
            )
        else:
            object.__setattr__(self, 'item_names', tuple(self.item_names))
        if len(self.item_names) != len(self.item_sizes):
            raise ValueError("item_names must have same length as item_sizes")

    @property
    def num_items(self) -> int:
        """Number of item types."""
        return len(self.item_sizes)

    @property
    def total_demand(self) -> int:
        """Total number of pieces demanded."""
        return sum(self.item_demands)

    def max_copies(self, item_idx: int) -> int:
        """Maximum copies of an item that fit in one roll."""
        return int(math.floor(self.roll_width / self.item_sizes[item_idx]))

    def trivial_patterns(self) -> List[Tuple[int, ...]]:
        """
        One single-item pattern per item type, cutting as many pieces as fit.

        Together they make the restricted master feasible.
        """
        patterns = []
        for j in range(self.num_items):
            counts = [0] * self.num_items
            counts[j] = self.max_copies(j)
            patterns.append(tuple(counts))
        return patterns

    def l2_lower_bound(self) -> int:
        """ceil(total demanded width / roll width), a lower bound on rolls."""
        total_area = sum(s * d for s, d in zip(self.item_sizes, self.item_demands))
        return math.ceil(total_area / self.roll_width - 1e-9)

    @classmethod
    def default(cls) -> 'CuttingStockInstance':
        """Five paper widths cut from 94-wide raw rolls."""
        return cls(
            roll_width=94,
            item_sizes=(17, 21, 22.5, 24, 29.5),
            item_demands=(150, 96, 48, 108, 227),
            name="CutStock",
        )

    @classmethod
    def from_bpplib(cls, filepath: str) -> 'CuttingStockInstance':
        """
        Load a cutting stock instance from BPPLIB format.

        BPPLIB format (for CSP):
            Line 1: Number of item types
            Line 2: Roll/bin capacity
            Lines 3+: size<tab>demand for each item type

        Args:
            filepath: Path to the BPPLIB .txt file

        Returns:
            CuttingStockInstance
        """
        name = os.path.splitext(os.path.basename(filepath))[0]

        with open(filepath, 'r') as f:
            lines = [line.strip() for line in f if line.strip()]

        num_types = int(lines[0])
        capacity = float(lines[1])

        sizes = []
        demands = []
        for i in range(2, 2 + num_types):
            parts = lines[i].split()
            sizes.append(float(parts[0]))
            demands.append(int(parts[1]))

        return cls(
            roll_width=capacity,
            item_sizes=tuple(sizes),
            item_demands=tuple(demands),
            name=name,
        )


@dataclass(frozen=True)
class LotSizingInstance:
    """
    An uncapacitated economic lot-sizing instance.

    In period t there is a demand that must be met by production in t or
    earlier; producing in t costs a setup cost plus a unit production cost.
    There is no stock-holding cost.

    Attributes:
        demands: Demand per period
        setup_costs: Setup cost per period
        production_costs: Unit production cost per period
        name: Optional instance name
    """
    demands: Tuple[float, ...]
    setup_costs: Tuple[float, ...]
    production_costs: Tuple[float, ...]
    name: str = "Els"
    demand_table: CumulativeDemandTable = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'demands', tuple(self.demands))
        object.__setattr__(self, 'setup_costs', tuple(self.setup_costs))
        object.__setattr__(self, 'production_costs', tuple(self.production_costs))
        n = len(self.demands)
        if n == 0:
            raise ValueError("at least one period is required")
        if len(self.setup_costs) != n or len(self.production_costs) != n:
            raise ValueError("demands, setup_costs and production_costs must have same length")
        object.__setattr__(self, 'demand_table', CumulativeDemandTable(self.demands))

    @property
    def num_periods(self) -> int:
        return len(self.demands)

    @classmethod
    def default(cls) -> 'LotSizingInstance':
        """Six-period instance."""
        return cls(
            demands=(1, 3, 5, 3, 4, 2),
            setup_costs=(17, 16, 11, 6, 9, 6),
            production_costs=(5, 3, 2, 1, 3, 1),
            name="Els",
        )
