"""
##################################
Typing (:mod:`dualdescent.typing`)
##################################

This module provides type definitions commonly used between modules.

.. autoclass:: Scalar
    :show-inheritance:
    :no-members:

"""

from abc import abstractmethod
from typing import Protocol, Self


class Scalar(Protocol):
    """Protocol for values a differentiable function may be evaluated on.

    This is the operator set closed over by :class:`~dualdescent.autodiff.Dual` and
    :class:`~dualdescent.autodiff.MultiDual`: ``+``, ``-``, ``*`` and ``/`` with an
    operand of the same type or an integer on either side, unary ``-`` and ``+``, and
    ``**`` with an integer exponent. A function written only with these operators
    (and the functions in :mod:`dualdescent.function`) returns its value on plain
    numbers and its derivative on dual numbers.
    """

    __slots__ = ()

    @abstractmethod
    def __add__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __sub__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __mul__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __truediv__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __pow__(self, rhs: int) -> Self: ...

    @abstractmethod
    def __radd__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rsub__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rmul__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rtruediv__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __neg__(self) -> Self: ...

    @abstractmethod
    def __pos__(self) -> Self: ...
