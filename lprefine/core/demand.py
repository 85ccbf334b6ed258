"""
Cumulative demand table for lot-sizing models.

``D[s, t]`` is the total demand of periods ``s`` through ``t`` inclusive,
and 0 when ``s > t``. The table is built once from the per-period demands
and is read-only afterwards.
"""

from typing import List, Sequence, Tuple


class CumulativeDemandTable:
    """
    Square table of range demand sums.

    Example:
        >>> D = CumulativeDemandTable([1, 3, 5])
        >>> D[0, 2]
        9
        >>> D[1, 1]
        3
        >>> D[2, 1]
        0
    """

    __slots__ = ('_demands', '_table')

    def __init__(self, demands: Sequence[float]):
        if any(d < 0 for d in demands):
            raise ValueError("demands must be non-negative")
        self._demands: Tuple[float, ...] = tuple(demands)

        n = len(self._demands)
        table: List[List[float]] = [[0] * n for _ in range(n)]
        for s in range(n):
            running = 0
            for t in range(s, n):
                running += self._demands[t]
                table[s][t] = running
        self._table = tuple(tuple(row) for row in table)

    @property
    def num_periods(self) -> int:
        return len(self._demands)

    @property
    def demands(self) -> Tuple[float, ...]:
        return self._demands

    def __getitem__(self, key: Tuple[int, int]) -> float:
        s, t = key
        return self._table[s][t]

    def remaining(self, t: int) -> float:
        """Total demand from period t to the end of the horizon."""
        return self._table[t][-1]

    def row(self, s: int) -> Tuple[float, ...]:
        return self._table[s]

    def __len__(self) -> int:
        return len(self._demands)

    def __repr__(self) -> str:
        return f"CumulativeDemandTable(periods={self.num_periods})"
