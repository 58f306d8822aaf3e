import functools
from collections.abc import Callable, Sequence
from typing import Any

from dualdescent.autodiff._vector import DimensionError, zero
from dualdescent.autodiff.dual import Dual, DualNumber, MultiDual


def derivative(fun: Callable[[Any], Any], x: Any) -> Any:
    """Return the derivative of the univariate scalar-valued function at `x`.

    Parameters
    ----------
    fun : Callable
        Differentiated function.
    x
        Evaluation point.

    Warnings
    --------
    `fun` must be built from ``+``, ``-``, ``*``, ``/``, integer ``**`` and the
    functions in :mod:`dualdescent.function` (or functions registered with
    :func:`primitive`). Any other operation raises :exc:`TypeError`.

    Examples
    --------
    >>> derivative(lambda x: x**2 + 5 * x, 3.0)
    11.0
    >>> derivative(lambda x: 1 / x, 2.0)
    -0.25
    """
    tmp = fun(Dual.variable(x))

    if isinstance(tmp, Dual):
        return tmp.imag

    if isinstance(tmp, DualNumber):
        raise TypeError(f"expected Dual, got {type(tmp).__name__}")

    return zero(x)


def gradient(fun: Callable[[list], Any], x: Sequence[Any]) -> tuple[Any, ...]:
    """Return the gradient of the multivariate scalar-valued function at `x`.

    `fun` is called once with a list of :class:`MultiDual`, the `i`-th of which is
    ``x[i]`` seeded with the `i`-th unit vector.

    Parameters
    ----------
    fun : Callable
        Differentiated function. It takes one sequence argument.
    x : Sequence
        Evaluation point.

    Returns
    -------
    tuple
        Partial derivatives in the order of `x`.

    Raises
    ------
    ValueError
        If `x` is empty.

    Examples
    --------
    >>> gradient(lambda x: (2 * x[0] + x[1]) ** 2, [3.0, 4.0])
    (40.0, 20.0)
    """
    return value_and_gradient(fun, x)[1]


def value_and_gradient(
    fun: Callable[[list], Any], x: Sequence[Any]
) -> tuple[Any, tuple[Any, ...]]:
    """Return the value and the gradient of the multivariate scalar-valued function
    at `x` from a single evaluation.

    See Also
    --------
    gradient
    """
    args = list(x)

    if not args:
        raise ValueError("x must not be empty")

    tmp = fun(list(MultiDual.variable(*args)))
    return _split(tmp, args)


def jacobian(
    fun: Callable[[list], Sequence[Any]], x: Sequence[Any]
) -> tuple[tuple[Any, ...], ...]:
    """Return the Jacobian matrix of the multivariate vector-valued function at `x`.

    Parameters
    ----------
    fun : Callable
        Differentiated function. It takes one sequence argument and returns a
        sequence.
    x : Sequence
        Evaluation point.

    Returns
    -------
    tuple[tuple, ...]
        One row of partial derivatives per output of `fun`.

    Examples
    --------
    >>> jacobian(lambda x: (x[0] * x[1], x[0] - x[1]), [2.0, 3.0])
    ((3.0, 2.0), (1.0, -1.0))
    """
    args = list(x)

    if not args:
        raise ValueError("x must not be empty")

    tmp = fun(list(MultiDual.variable(*args)))
    return tuple(_split(y, args)[1] for y in tmp)


def deriv[T](fun: Callable[[T], Any]) -> Callable[[T], Any]:
    """Return a function that evaluates the derivative of `fun`.

    Examples
    --------
    >>> df = deriv(lambda x: x**3)
    >>> df(2.0)
    12.0
    """

    @functools.wraps(fun)
    def result(x):
        return derivative(fun, x)

    return result


def grad(fun: Callable[[list], Any]) -> Callable[[Sequence[Any]], tuple[Any, ...]]:
    """Return a function that evaluates the gradient of `fun`.

    Examples
    --------
    >>> df = grad(lambda x: x[0] ** 2 + x[1])
    >>> df([3.0, 4.0])
    (6.0, 1.0)
    """

    @functools.wraps(fun)
    def result(x):
        return gradient(fun, x)

    return result


def _split(tmp: Any, args: list) -> tuple[Any, tuple[Any, ...]]:
    if isinstance(tmp, MultiDual):
        if tmp.ndim != len(args):
            raise DimensionError(f"dimension mismatch: {tmp.ndim} != {len(args)}")

        return tmp.real, tmp.derivatives

    if isinstance(tmp, DualNumber):
        raise TypeError(f"expected MultiDual, got {type(tmp).__name__}")

    return tmp, tuple(zero(x) for x in args)


def defderiv(
    fun: Callable[..., Any], deriv: Callable[..., Any], *, argnum: int = 0
) -> None:
    """Register `deriv` as the partial derivative of the primitive `fun` with respect
    to its `argnum`-th argument.

    Raises
    ------
    ValueError
        If `fun` is not decorated with :func:`primitive`.

    See Also
    --------
    primitive
    """
    if "_dualdescent_is_primitive" not in getattr(fun, "__dict__", {}):
        raise ValueError(f"{fun.__name__} is not a primitive")

    fun.__dict__["_dualdescent_derivs"][argnum] = deriv


def primitive[T, **P](fun: Callable[P, T]) -> Callable[P, T]:
    """Make `fun` accept dual numbers.

    The decorated function evaluates `fun` on the real parts and applies the chain rule
    with the partial derivatives registered by :func:`defderiv`. Positional arguments
    that are not dual numbers are treated as constants.

    Examples
    --------
    >>> import math
    >>> @primitive
    ... def sin(x):
    ...     return math.sin(x)
    >>> defderiv(sin, lambda x: math.cos(x))
    >>> derivative(sin, 0.0)
    1.0
    """
    derivs: dict[int, Callable] = {}

    @functools.wraps(fun)
    def wrapper(*args, **kwargs):
        args_dual = [(i, x) for i, x in enumerate(args) if isinstance(x, DualNumber)]

        if not args_dual:
            return fun(*args, **kwargs)

        cls = type(args_dual[0][1])

        if any(type(x) is not cls for _, x in args_dual):
            raise TypeError("cannot mix Dual and MultiDual")

        args_real = [x.real if isinstance(x, DualNumber) else x for x in args]
        imag: Any = None

        for argnum, arg in args_dual:
            if argnum not in derivs:
                raise TypeError(
                    f"{fun.__name__} is not differentiable w.r.t. argument {argnum}"
                )

            tmp = derivs[argnum](*args_real, **kwargs) * arg.imag
            imag = tmp if imag is None else imag + tmp

        return cls(fun(*args_real, **kwargs), imag)

    wrapper.__dict__["_dualdescent_is_primitive"] = True
    wrapper.__dict__["_dualdescent_derivs"] = derivs
    return wrapper  # type: ignore
