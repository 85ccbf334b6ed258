"""
Handles and linear expressions exchanged with a solver adapter.

A Variable or Constraint is a lightweight, immutable handle: it records the
position of the column/row in the adapter that created it and a name for
reporting. Linear expressions are built with ordinary arithmetic:

    >>> expr = 3 * x + y
    >>> expr += 2.5 * z
    >>> model.create_constraint("cap", expr, Relation.LE, 10)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterator, Tuple, Union


class VarType(Enum):
    """Kind of a decision variable."""
    CONTINUOUS = auto()
    INTEGER = auto()
    BINARY = auto()

    @property
    def is_integral(self) -> bool:
        return self is not VarType.CONTINUOUS


class Relation(Enum):
    """Relation between a linear expression and its right-hand side."""
    LE = '<='
    GE = '>='
    EQ = '='


class ObjectiveSense(Enum):
    """Direction of optimization."""
    MINIMIZE = auto()
    MAXIMIZE = auto()


@dataclass(frozen=True)
class Variable:
    """
    Handle to a column of a solver model.

    Attributes:
        index: Column index inside the owning adapter
        name: Human-readable name (e.g. "pat_3", "setup2")
        var_type: Continuous, integer or binary
    """
    index: int
    name: str
    var_type: VarType = VarType.CONTINUOUS

    def __mul__(self, coeff: float) -> 'LinearExpression':
        return LinearExpression({self: float(coeff)})

    __rmul__ = __mul__

    def __add__(self, other) -> 'LinearExpression':
        return LinearExpression({self: 1.0}) + other

    __radd__ = __add__

    def __neg__(self) -> 'LinearExpression':
        return LinearExpression({self: -1.0})

    def __repr__(self) -> str:
        return f"Variable({self.name!r}, index={self.index})"


@dataclass(frozen=True)
class Constraint:
    """
    Handle to a row of a solver model.

    Attributes:
        index: Row index inside the owning adapter
        name: Human-readable name (e.g. "Demand", "cut4")
    """
    index: int
    name: str

    def __repr__(self) -> str:
        return f"Constraint({self.name!r}, index={self.index})"


Term = Union[Variable, 'LinearExpression', int, float]


class LinearExpression:
    """
    Sum of coefficient * variable terms plus a constant.

    Terms on the same variable are merged. The constant is folded into the
    right-hand side when the expression is turned into a constraint.
    """

    __slots__ = ('_terms', 'constant')

    def __init__(self, terms: Dict[Variable, float] = None, constant: float = 0.0):
        self._terms: Dict[Variable, float] = dict(terms) if terms else {}
        self.constant = float(constant)

    def add_term(self, var: Variable, coeff: float) -> 'LinearExpression':
        """Add coeff * var in place and return self."""
        self._terms[var] = self._terms.get(var, 0.0) + float(coeff)
        return self

    def copy(self) -> 'LinearExpression':
        return LinearExpression(self._terms, self.constant)

    def terms(self) -> Iterator[Tuple[Variable, float]]:
        """Iterate over (variable, coefficient) pairs with non-zero coefficient."""
        for var, coeff in self._terms.items():
            if coeff != 0.0:
                yield var, coeff

    def coefficient(self, var: Variable) -> float:
        return self._terms.get(var, 0.0)

    def value(self, values: Dict[Variable, float]) -> float:
        """Evaluate the expression for the given variable values."""
        return self.constant + sum(
            coeff * values.get(var, 0.0) for var, coeff in self._terms.items()
        )

    def __iadd__(self, other: Term) -> 'LinearExpression':
        if isinstance(other, Variable):
            self.add_term(other, 1.0)
        elif isinstance(other, LinearExpression):
            for var, coeff in other._terms.items():
                self.add_term(var, coeff)
            self.constant += other.constant
        elif isinstance(other, (int, float)):
            self.constant += float(other)
        else:
            return NotImplemented
        return self

    def __add__(self, other: Term) -> 'LinearExpression':
        result = self.copy()
        return result.__iadd__(other)

    __radd__ = __add__

    def __mul__(self, factor: float) -> 'LinearExpression':
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return LinearExpression(
            {var: coeff * factor for var, coeff in self._terms.items()},
            self.constant * factor,
        )

    __rmul__ = __mul__

    def __len__(self) -> int:
        return sum(1 for _ in self.terms())

    def __repr__(self) -> str:
        parts = [f"{coeff:g}*{var.name}" for var, coeff in self.terms()]
        if self.constant or not parts:
            parts.append(f"{self.constant:g}")
        return " + ".join(parts)
