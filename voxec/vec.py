"""Small fixed-length numeric vectors with element-wise arithmetic."""

from __future__ import annotations

import math
import operator
from typing import Any, Callable, Iterable, Iterator, Union

Number = Union[int, float, bool]


def _trunc_div(a: Any, b: Any) -> Any:
    """Division that truncates towards zero for integers."""
    if isinstance(a, int) and isinstance(b, int):
        quotient = abs(a) // abs(b)
        return quotient if (a < 0) == (b < 0) else -quotient
    return a / b


def _trunc_mod(a: Any, b: Any) -> Any:
    return a - b * _trunc_div(a, b)


def integer_ceil_div(a: int, b: int) -> int:
    """Truncating quotient, plus one when there is a remainder."""
    return _trunc_div(a, b) + (1 if _trunc_mod(a, b) != 0 else 0)


def integer_floor_div(a: int, b: int) -> int:
    """Integer division rounded down for a non-positive numerator."""
    quotient = _trunc_div(a, b)
    if a > 0:
        return quotient
    return quotient - (1 if _trunc_mod(a, b) != 0 else 0)


def _floor(value: Number) -> Number:
    return float(math.floor(value)) if isinstance(value, float) else value


def _ceil(value: Number) -> Number:
    return float(math.ceil(value)) if isinstance(value, float) else value


def _format_element(value: Number) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


class Vec:
    """An immutable vector of numbers supporting element-wise operations.

    Arithmetic accepts another vector of the same length or a scalar.
    Element-wise comparisons are methods returning a vector of booleans.
    """

    __slots__ = ("_values",)

    def __init__(self, *args: Number) -> None:
        self._values = tuple(args)

    @classmethod
    def _of(cls, values: Iterable[Any]) -> "Vec":
        vec = cls.__new__(cls)
        vec._values = tuple(values)
        return vec

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Number]:
        return iter(self._values)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Vec._of(self._values[index])
        return self._values[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Vec) and self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"Vec({', '.join(repr(v) for v in self._values)})"

    def replace(self, index: int, value: Number) -> "Vec":
        """Return a copy with the element at ``index`` set to ``value``."""
        values = list(self._values)
        values[index] = value
        return Vec._of(values)

    def _map(self, fn: Callable[[Any], Any]) -> "Vec":
        return Vec._of(fn(v) for v in self._values)

    def _binary(self, other: Any, fn: Callable[[Any, Any], Any]) -> "Vec":
        if isinstance(other, Vec):
            if len(other) != len(self):
                raise ValueError(
                    f"vector lengths differ: {len(self)} and {len(other)}"
                )
            return Vec._of(fn(a, b) for a, b in zip(self._values, other._values))
        return Vec._of(fn(a, other) for a in self._values)

    # arithmetic

    def __add__(self, other: Any) -> "Vec":
        return self._binary(other, operator.add)

    def __radd__(self, other: Any) -> "Vec":
        return self._map(lambda v: other + v)

    def __sub__(self, other: Any) -> "Vec":
        return self._binary(other, operator.sub)

    def __mul__(self, other: Any) -> "Vec":
        return self._binary(other, operator.mul)

    def __rmul__(self, other: Any) -> "Vec":
        return self._map(lambda v: other * v)

    def __floordiv__(self, other: Any) -> "Vec":
        return self._binary(other, operator.floordiv)

    def __truediv__(self, other: Any) -> "Vec":
        return self._binary(other, operator.truediv)

    def __mod__(self, other: Any) -> "Vec":
        return self._binary(other, operator.mod)

    def __neg__(self) -> "Vec":
        return self._map(operator.neg)

    def __pos__(self) -> "Vec":
        return self

    # element-wise comparisons

    def equal(self, other: Any) -> "Vec":
        return self._binary(other, operator.eq)

    def not_equal(self, other: Any) -> "Vec":
        return self._binary(other, operator.ne)

    def less(self, other: Any) -> "Vec":
        return self._binary(other, operator.lt)

    def greater(self, other: Any) -> "Vec":
        return self._binary(other, operator.gt)

    def less_equal(self, other: Any) -> "Vec":
        return self._binary(other, operator.le)

    def greater_equal(self, other: Any) -> "Vec":
        return self._binary(other, operator.ge)

    # reductions and helpers

    def all(self) -> bool:
        return all(self._values)

    def any(self) -> bool:
        return any(self._values)

    def dot(self, other: "Vec") -> Number:
        return sum(self._binary(other, operator.mul))

    def abs(self) -> "Vec":
        return self._map(abs)

    def floor(self) -> "Vec":
        return self._map(_floor)

    def ceil(self) -> "Vec":
        return self._map(_ceil)

    def maximum(self, other: "Vec") -> "Vec":
        return self._binary(other, max)

    def minimum(self, other: "Vec") -> "Vec":
        return self._binary(other, min)

    def astype(self, kind: Callable[[Any], Any]) -> "Vec":
        """Convert every element with ``kind`` (for example ``int`` or ``float``)."""
        return self._map(kind)

    def max_element(self) -> Number:
        return max(self._values)

    def min_element(self) -> Number:
        return min(self._values)

    def format(self, braces: bool = True) -> str:
        """Render as ``(a, b, c)`` or, without braces, ``a b c``."""
        parts = [_format_element(v) for v in self._values]
        if braces:
            return "(" + ", ".join(parts) + ")"
        return " ".join(parts)

    def sum(self) -> Number:
        return sum(self._values)

    def _require_integral(self, divisor: Any) -> None:
        if not all(isinstance(v, int) for v in self._values) or not isinstance(divisor, int):
            raise TypeError("integer division requires integral elements and divisor")

    def ceil_div(self, divisor: int) -> "Vec":
        self._require_integral(divisor)
        return self._map(lambda v: integer_ceil_div(v, divisor))

    def floor_div(self, divisor: int) -> "Vec":
        self._require_integral(divisor)
        return self._map(lambda v: integer_floor_div(v, divisor))

    def cross(self, other: "Vec"):
        """Cross product: a scalar for 2-vectors, a vector for 3-vectors."""
        if len(self) != len(other):
            raise ValueError("vector lengths differ")
        if len(self) == 2:
            return self[0] * other[1] - self[1] * other[0]
        if len(self) == 3:
            x, y, z = self._values
            ox, oy, oz = other._values
            return Vec(y * oz - z * oy, z * ox - x * oz, x * oy - y * ox)
        raise ValueError("cross product is defined for 2 and 3 dimensions only")


def make_vec(*args: Number) -> Vec:
    """Build a vector from its components."""
    return Vec(*args)