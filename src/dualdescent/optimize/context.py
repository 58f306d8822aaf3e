import contextlib
import contextvars
import math
import numbers
from types import EllipsisType
from typing import Any, Self


class InvalidConfigurationError(ValueError):
    """Error raised when an optimizer or a run is configured with invalid
    parameters."""


def _check_step_size(step_size: Any) -> float:
    if isinstance(step_size, bool) or not isinstance(step_size, numbers.Real):
        raise InvalidConfigurationError(f"step size must be real, got {step_size!r}")

    if not (math.isfinite(step_size) and step_size > 0):
        raise InvalidConfigurationError(
            f"step size must be positive, got {step_size!r}"
        )

    return float(step_size)


def _check_tol(tol: Any) -> float | None:
    if tol is None:
        return None

    if isinstance(tol, bool) or not isinstance(tol, numbers.Real):
        raise InvalidConfigurationError(f"tol must be real, got {tol!r}")

    if not tol >= 0:
        raise InvalidConfigurationError(f"tol must be non-negative, got {tol!r}")

    return float(tol)


class Context:
    """Create a new context.

    A context holds the defaults used by :class:`GradientDescent` when a parameter is
    omitted.

    Parameters
    ----------
    step_size : float, default=0.1
        Default step size.
    tol : float | None, default=None
        Default gradient tolerance for early stopping. ``None`` disables it.

    Raises
    ------
    InvalidConfigurationError
        If `step_size` is not a positive finite real number or `tol` is neither
        ``None`` nor a non-negative real number.
    """

    __slots__ = ("_step_size", "_tol")
    _step_size: float
    _tol: float | None

    def __init__(self, step_size: float = 0.1, tol: float | None = None):
        self._step_size = _check_step_size(step_size)
        self._tol = _check_tol(tol)

    @property
    def step_size(self) -> float:
        return self._step_size

    @property
    def tol(self) -> float | None:
        return self._tol

    def copy(self) -> Self:
        return self.__class__(self._step_size, self._tol)

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(step_size={self._step_size!r}, tol={self._tol!r})"

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("optimize")


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    _var.set(ctx)


@contextlib.contextmanager
def localcontext(
    ctx: Context | None = None,
    *,
    step_size: float | None = None,
    tol: float | None | EllipsisType = ...,
):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Examples
    --------
    >>> with localcontext(step_size=0.02):
    ...     print(getcontext().step_size)
    0.02
    >>> getcontext().step_size
    0.1
    """
    if ctx is None:
        ctx = getcontext()

    if step_size is None:
        step_size = ctx._step_size

    if tol is ...:
        tol = ctx._tol

    ctx = Context(step_size, tol)
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)
