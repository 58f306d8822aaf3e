from collections.abc import Iterable, Iterator
from typing import Any, Self

import numpy as np

from dualdescent.typing import Scalar


class DimensionError(TypeError):
    """Error raised when derivative vectors of different lengths are combined."""


def zero(value: Any) -> Any:
    """Return zero of the same type as `value`, also when `value` is infinite or
    ``nan``."""
    tmp = value * 0

    # inf * 0 is nan
    if tmp != tmp:
        return type(value)(0)

    return tmp


def divide(lhs: Any, rhs: Any) -> Any:
    """Return ``lhs / rhs``, giving ``inf`` or ``nan`` instead of raising on a zero
    divisor."""
    try:
        return lhs / rhs
    except ZeroDivisionError:
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.divide(float(lhs), float(rhs)))


class Vector[T: Scalar]:
    """Immutable vector of partial derivatives.

    Only the operations of a module over the scalars are defined: addition and
    subtraction of vectors of the same length, and multiplication or division by a
    scalar.
    """

    __slots__ = ("_coeffs",)
    __array_ufunc__ = None
    _coeffs: tuple[T, ...]

    def __init__(self, coeffs: Iterable[T]):
        self._coeffs = tuple(coeffs)

    @classmethod
    def zeros(cls, zero: T, n: int) -> Self:
        return cls((zero,) * n)

    @classmethod
    def unit(cls, zero: T, one: T, n: int, index: int) -> Self:
        return cls(one if i == index else zero for i in range(n))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._coeffs)!r})"

    def __len__(self) -> int:
        return len(self._coeffs)

    def __iter__(self) -> Iterator[T]:
        return iter(self._coeffs)

    def __getitem__(self, key: int) -> T:
        return self._coeffs[key]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        return other._coeffs == self._coeffs  # type: ignore

    def __hash__(self) -> int:
        return hash(self._coeffs)

    def _check(self, other: Self) -> None:
        if len(other._coeffs) != len(self._coeffs):
            raise DimensionError(
                f"dimension mismatch: {len(self._coeffs)} != {len(other._coeffs)}"
            )

    def __add__(self, rhs: Self) -> Self:
        if not isinstance(rhs, Vector):
            return NotImplemented

        self._check(rhs)
        return self.__class__(x + y for x, y in zip(self._coeffs, rhs._coeffs))

    def __sub__(self, rhs: Self) -> Self:
        if not isinstance(rhs, Vector):
            return NotImplemented

        self._check(rhs)
        return self.__class__(x - y for x, y in zip(self._coeffs, rhs._coeffs))

    def __mul__(self, rhs: Any) -> Self:
        if isinstance(rhs, Vector):
            return NotImplemented

        return self.__class__(x * rhs for x in self._coeffs)

    def __rmul__(self, lhs: Any) -> Self:
        if isinstance(lhs, Vector):
            return NotImplemented

        return self.__class__(lhs * x for x in self._coeffs)

    def __truediv__(self, rhs: Any) -> Self:
        if isinstance(rhs, Vector):
            return NotImplemented

        return self.__class__(divide(x, rhs) for x in self._coeffs)

    def __neg__(self) -> Self:
        return self.__class__(-x for x in self._coeffs)

    def __pos__(self) -> Self:
        return self.__class__(+x for x in self._coeffs)
