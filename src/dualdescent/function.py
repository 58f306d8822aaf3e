"""
####################################################
Mathematical functions (:mod:`dualdescent.function`)
####################################################

.. currentmodule:: dualdescent.function

This module provides elementary functions that accept plain numbers as well as dual
numbers. Further functions are added with :func:`dualdescent.autodiff.primitive` and
:func:`dualdescent.autodiff.defderiv`, as done here.

Power, exponents, and logarithmic functions
===========================================

.. autosummary::
    :toctree: generated/

    exp
    log
    pow
    sqrt

Trigonometric functions
=======================

.. autosummary::
    :toctree: generated/

    cos
    sin

"""

import numbers
from typing import Any, overload

import mpmath
import mpmath.ctx_mp_python
import numpy as np

from dualdescent.autodiff._vector import divide
from dualdescent.autodiff.autodiff import defderiv, primitive
from dualdescent.autodiff.dual import Dual, MultiDual


def _ieee(ufunc: np.ufunc, *args: float | int) -> float:
    with np.errstate(all="ignore"):
        return float(ufunc(*args))


@overload
def exp[T: Dual | MultiDual](x: T, /) -> T: ...


@overload
def exp(x: float | int, /) -> float: ...


@overload
def exp(x: Any, /) -> Any: ...


@primitive
def exp(x, /):
    """Exponential.

    Examples
    --------
    >>> print(format(exp(2), ".6f"))
    7.389056
    >>> exp(Dual.variable(0.0))
    Dual(real=1.0, imag=1.0)
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.exp(x)

        case numbers.Real():
            return _ieee(np.exp, float(x))

        case _:
            raise TypeError(f"unsupported type: {type(x).__name__}")


@overload
def log[T: Dual | MultiDual](x: T, /) -> T: ...


@overload
def log(x: float | int, /) -> float: ...


@overload
def log(x: Any, /) -> Any: ...


@primitive
def log(x, /):
    """Natural logarithm.

    A non-positive argument gives ``-inf`` or ``nan``.

    Examples
    --------
    >>> print(format(log(5), ".6f"))
    1.609438
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.log(x)

        case numbers.Real():
            return _ieee(np.log, float(x))

        case _:
            raise TypeError(f"unsupported type: {type(x).__name__}")


@overload
def pow[T: Dual | MultiDual](x: T | float | int, y: T, /) -> T: ...


@overload
def pow[T: Dual | MultiDual](x: T, y: float | int, /) -> T: ...


@overload
def pow(x: float | int, y: float | int, /) -> float: ...


@overload
def pow(x: Any, y: Any, /) -> Any: ...


@primitive
def pow(x, y, /):
    """`x` raised to the power `y`.

    Unlike ``x**n``, the exponent may be real or a dual number.

    Examples
    --------
    >>> print(format(pow(3.25, 1.25), ".6f"))
    4.363693
    """
    mpnumeric = mpmath.ctx_mp_python.mpnumeric

    match x, y:
        case (mpnumeric(), _) | (_, mpnumeric()):
            return mpmath.power(x, y)

        case (numbers.Real(), numbers.Real()):
            return _ieee(np.power, float(x), float(y))

        case _:
            names = f"{type(x).__name__}, {type(y).__name__}"
            raise TypeError(f"unsupported types: {names}")


@overload
def sqrt[T: Dual | MultiDual](x: T, /) -> T: ...


@overload
def sqrt(x: float | int, /) -> float: ...


@overload
def sqrt(x: Any, /) -> Any: ...


@primitive
def sqrt(x, /):
    """Square root.

    Examples
    --------
    >>> print(format(sqrt(2.0), ".6f"))
    1.414214
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.sqrt(x)

        case numbers.Real():
            return _ieee(np.sqrt, float(x))

        case _:
            raise TypeError(f"unsupported type: {type(x).__name__}")


@overload
def sin[T: Dual | MultiDual](x: T, /) -> T: ...


@overload
def sin(x: float | int, /) -> float: ...


@overload
def sin(x: Any, /) -> Any: ...


@primitive
def sin(x, /):
    """Sine."""
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.sin(x)

        case numbers.Real():
            return _ieee(np.sin, float(x))

        case _:
            raise TypeError(f"unsupported type: {type(x).__name__}")


@overload
def cos[T: Dual | MultiDual](x: T, /) -> T: ...


@overload
def cos(x: float | int, /) -> float: ...


@overload
def cos(x: Any, /) -> Any: ...


@primitive
def cos(x, /):
    """Cosine."""
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.cos(x)

        case numbers.Real():
            return _ieee(np.cos, float(x))

        case _:
            raise TypeError(f"unsupported type: {type(x).__name__}")


defderiv(exp, exp)
defderiv(log, lambda x: divide(1, x))
defderiv(pow, lambda x, y: divide(y * pow(x, y), x), argnum=0)
defderiv(pow, lambda x, y: log(x) * pow(x, y), argnum=1)
defderiv(sqrt, lambda x: divide(1, 2 * sqrt(x)))
defderiv(sin, cos)
defderiv(cos, lambda x: -sin(x))
