import numbers
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Final, Self, final

import mpmath.ctx_mp_python

from dualdescent.autodiff._vector import Vector, divide, zero
from dualdescent.typing import Scalar


class DualNumber[T: Scalar, D](Scalar, ABC):
    r"""Abstract base class for dual numbers.

    Parameters
    ----------
    real : T
    imag : D

    Attributes
    ----------
    real : T
        Value of the function at the evaluation point.
    imag : D
        Derivative part. A scalar for :class:`Dual`, a vector for :class:`MultiDual`.

    Warnings
    --------
    Users cannot define classes derived from this. New elementary functions are added
    with :func:`dualdescent.autodiff.primitive` instead.

    See Also
    --------
    Dual, MultiDual

    Notes
    -----
    Instances are immutable. Every operator returns a new instance whose derivative
    part follows the sum, product and quotient rules, so an ordinary function written
    with ``+``, ``-``, ``*``, ``/`` and ``**`` carries its derivative along with its
    value.

    A zero divisor gives ``inf`` or ``nan`` following IEEE 754 instead of raising
    :exc:`ZeroDivisionError`.
    """

    __slots__ = ("_real", "_imag")
    __IS_SEALED: Final = True
    __array_ufunc__ = None
    _real: T
    _imag: D

    def __init__(self, real: T, imag: D):
        if isinstance(real, DualNumber):
            raise TypeError("nesting dual numbers is not supported")

        self._real = real
        self._imag = imag

    @property
    def real(self) -> T:
        return self._real

    @property
    def imag(self) -> D:
        return self._imag

    @property
    def value(self) -> T:
        """Alias of :attr:`real`."""
        return self._real

    @abstractmethod
    def _constant(self, value: T) -> Self:
        raise NotImplementedError

    def _is_acceptable(self, value: object) -> bool:
        if isinstance(value, DualNumber):
            return type(value) is type(self)

        return isinstance(value, numbers.Number | mpmath.ctx_mp_python.mpnumeric)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(real={self._real!r}, imag={self._imag!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        return other._real == self._real and other._imag == self._imag  # type: ignore

    def __add__(self, rhs: Self | T | int) -> Self:
        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, DualNumber):
            return self.__class__(self._real + rhs, self._imag)

        return self.__class__(self._real + rhs._real, self._imag + rhs._imag)

    def __sub__(self, rhs: Self | T | int) -> Self:
        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, DualNumber):
            return self.__class__(self._real - rhs, self._imag)

        return self.__class__(self._real - rhs._real, self._imag - rhs._imag)

    def __mul__(self, rhs: Self | T | int) -> Self:
        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, DualNumber):
            return self.__class__(self._real * rhs, self._imag * rhs)

        imag = self._imag * rhs._real + self._real * rhs._imag
        return self.__class__(self._real * rhs._real, imag)

    def __truediv__(self, rhs: Self | T | int) -> Self:
        if not self._is_acceptable(rhs):
            return NotImplemented

        if not isinstance(rhs, DualNumber):
            return self.__class__(divide(self._real, rhs), divide(self._imag, rhs))

        # quotient rule as (f' - q g') / g with q = f / g
        q = divide(self._real, rhs._real)
        imag = divide(self._imag - q * rhs._imag, rhs._real)
        return self.__class__(q, imag)

    def __pow__(self, rhs: int) -> Self:
        if not isinstance(rhs, numbers.Integral):
            return NotImplemented

        n = int(rhs)

        if n < 0:
            return 1 / self.__pow__(-n)

        result = self._constant(zero(self._real) + 1)
        tmp = self

        while n != 0:
            if n % 2 != 0:
                result *= tmp

            n //= 2

            if n != 0:
                tmp *= tmp

        return result

    def __neg__(self) -> Self:
        return self.__class__(-self._real, -self._imag)

    def __pos__(self) -> Self:
        return self.__class__(+self._real, +self._imag)

    def __radd__(self, lhs: T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        return self.__class__(lhs + self._real, self._imag)

    def __rsub__(self, lhs: T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        return self.__class__(lhs - self._real, -self._imag)

    def __rmul__(self, lhs: T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        return self.__class__(lhs * self._real, lhs * self._imag)

    def __rtruediv__(self, lhs: T | int) -> Self:
        if not self._is_acceptable(lhs):
            return NotImplemented

        q = divide(lhs, self._real)
        imag = divide(-q * self._imag, self._real)
        return self.__class__(q, imag)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        if cls.__IS_SEALED:
            raise RuntimeError("subclassing is forbidden")


DualNumber._DualNumber__IS_SEALED = False  # type: ignore


@final
class Dual[T: Scalar](DualNumber[T, T]):
    """Dual number carrying a single derivative.

    Parameters
    ----------
    real : T
        Value.
    imag : T
        Derivative with respect to the single independent variable.

    Examples
    --------
    >>> x = Dual.variable(3.0)
    >>> y = x**2 + 5 * x
    >>> y
    Dual(real=24.0, imag=11.0)
    >>> y.derivative
    11.0
    """

    __slots__ = ()

    def __init__(self, real: T, imag: T):
        if isinstance(imag, DualNumber | Vector):
            raise TypeError("derivative of Dual must be a scalar")

        super().__init__(real, imag)

    @classmethod
    def variable(cls, value: T) -> Self:
        """Return `value` seeded as the independent variable, that is, with derivative
        one."""
        return cls(value, zero(value) + 1)

    @classmethod
    def constant(cls, value: T) -> Self:
        """Return `value` as a constant, that is, with derivative zero."""
        return cls(value, zero(value))

    @property
    def derivative(self) -> T:
        """Alias of :attr:`imag`."""
        return self._imag

    def _constant(self, value: T) -> Self:
        return self.__class__(value, zero(value))


@final
class MultiDual[T: Scalar](DualNumber[T, Vector[T]]):
    r"""Dual number carrying a vector of partial derivatives.

    Parameters
    ----------
    real : T
        Value.
    imag : Iterable[T]
        Partial derivatives, one for each independent variable.

    Raises
    ------
    ValueError
        If `imag` is empty.

    Notes
    -----
    Instances behave like elements of the ring

    .. math::

        T[\varepsilon_1,\dotsc,\varepsilon_n]/(\varepsilon_i\varepsilon_j\mid
        i,j\in\{1,\dotsc,n\}),

    where :math:`n` is the length of `imag`. Combining two instances of different
    lengths raises :exc:`~dualdescent.autodiff.DimensionError`.

    Examples
    --------
    >>> x, y = MultiDual.variable(3.0, 4.0)
    >>> z = (2 * x + y) ** 2
    >>> z.real
    100.0
    >>> z.derivatives
    (40.0, 20.0)
    """

    __slots__ = ()

    def __init__(self, real: T, imag: Iterable[T]):
        imag = Vector(imag)

        if len(imag) == 0:
            raise ValueError("derivative vector must not be empty")

        if any(isinstance(x, DualNumber) for x in imag):
            raise TypeError("nesting dual numbers is not supported")

        super().__init__(real, imag)

    @classmethod
    def variable(cls, *args: T) -> tuple[Self, ...]:
        """Return `args` seeded as independent variables.

        The `i`-th result carries the `i`-th unit vector as its derivative part.
        """
        if not args:
            raise ValueError("at least one variable is required")

        result: list[Self] = []

        for argnum, arg in enumerate(args):
            ZERO = zero(arg)
            ONE = ZERO + 1
            result.append(cls(arg, Vector.unit(ZERO, ONE, len(args), argnum)))

        return tuple(result)

    @classmethod
    def constant(cls, value: T, n: int) -> Self:
        """Return `value` as a constant in `n` directions."""
        return cls(value, Vector.zeros(zero(value), n))

    @property
    def ndim(self) -> int:
        """Number of independent variables."""
        return len(self._imag)

    @property
    def derivatives(self) -> tuple[Any, ...]:
        """Partial derivatives as a tuple."""
        return tuple(self._imag)

    def _constant(self, value: T) -> Self:
        return self.__class__(value, Vector.zeros(zero(value), len(self._imag)))


DualNumber._DualNumber__IS_SEALED = True  # type: ignore
