import dataclasses
import logging
import numbers
from collections.abc import Callable, Iterator, Sequence
from typing import Any, Literal, overload

import numpy as np
import numpy.typing as npt

from dualdescent.autodiff.autodiff import grad
from dualdescent.optimize.context import (
    InvalidConfigurationError,
    _check_step_size,
    _check_tol,
    getcontext,
)

logger = logging.getLogger(__name__)


class AbortOptimization(Exception):
    """Raised by a callback function to abort :meth:`GradientDescent.optimize`.

    Parameters
    ----------
    message : str, default="aborted"
    """

    message: str

    def __init__(self, message="aborted", *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.message = message


class Trajectory(Sequence[npt.NDArray[np.float64]]):
    """Iterates recorded by one gradient-descent run.

    Element `t` is the iterate before the update computed from its own gradient, so
    the point reached by the last update is not an element; it is kept in :attr:`x`.
    Elements are read-only copies.

    Attributes
    ----------
    x : ndarray
        Iterate after the last update.
    status : Literal["ABORTED", "CONVERGED", "SUCCESS"]
        ``"SUCCESS"`` if every iteration ran, ``"CONVERGED"`` if the run stopped
        because the gradient fell below the tolerance, and ``"ABORTED"`` if a callback
        raised :exc:`AbortOptimization`.
    """

    __slots__ = ("_states", "x", "status")
    _states: list[npt.NDArray[np.float64]]
    x: npt.NDArray[np.float64] | None
    status: Literal["ABORTED", "CONVERGED", "SUCCESS"]

    def __init__(self):
        self._states = []
        self.x = None
        self.status = "SUCCESS"

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(nit={len(self._states)}, status={self.status!r})"

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[npt.NDArray[np.float64]]:
        return iter(self._states)

    @overload
    def __getitem__(self, key: int) -> npt.NDArray[np.float64]: ...

    @overload
    def __getitem__(self, key: slice) -> list[npt.NDArray[np.float64]]: ...

    def __getitem__(self, key):
        return self._states[key]

    @property
    def nit(self) -> int:
        """Number of recorded iterates."""
        return len(self._states)

    def append(self, state: npt.ArrayLike) -> None:
        """Append a copy of `state`."""
        tmp = np.array(state, dtype=np.float64)
        tmp.setflags(write=False)
        self._states.append(tmp)

    def to_array(self) -> npt.NDArray[np.float64]:
        """Return the iterates stacked into an array of shape ``(nit, n)``."""
        if not self._states:
            return np.empty((0, 0 if self.x is None else len(self.x)))

        return np.stack(self._states)


@dataclasses.dataclass(frozen=True, slots=True)
class GradientDescent:
    r"""Gradient descent with a fixed step size.

    Parameters
    ----------
    step_size : float, optional
        Step size :math:`\eta>0` (the default is the step size of the current
        context, see :func:`getcontext`).

    Raises
    ------
    InvalidConfigurationError
        If `step_size` is not a positive finite real number.

    Examples
    --------
    >>> opt = GradientDescent(0.25)
    >>> r = opt.optimize([4.0], lambda x: x[0] ** 2, 3)
    >>> [float(x[0]) for x in r]
    [4.0, 2.0, 1.0]
    >>> float(r.x[0])
    0.5
    """

    step_size: float = None  # type: ignore

    def __post_init__(self):
        step_size = self.step_size

        if step_size is None:
            step_size = getcontext().step_size

        object.__setattr__(self, "step_size", _check_step_size(step_size))

    def step(
        self, x: npt.ArrayLike, fprime: npt.ArrayLike
    ) -> npt.NDArray[np.float64]:
        """Return the next iterate ``x - step_size * fprime`` as a new array."""
        x = np.asarray(x, dtype=np.float64)
        return x - self.step_size * np.asarray(fprime, dtype=np.float64)

    def optimize(
        self,
        x0: npt.ArrayLike,
        fun: Callable[[list], Any],
        n: int,
        *,
        fprime: Callable[[list], Sequence[Any]] | None = None,
        tol: float | None = None,
        callback: Callable[..., Any] | None = None,
    ) -> Trajectory:
        """Minimize the multivariate scalar-valued function.

        Parameters
        ----------
        x0 : ArrayLike
            Initial point. It is copied and never modified.
        fun : Callable
            Function to be minimized. It takes one sequence argument.
        n : int
            Number of iterations.
        fprime : Callable, optional
            Gradient of `fun` (the default is ``grad(fun)``).
        tol : float, optional
            Stop once the largest absolute component of the gradient is at most
            `tol` (the default is the tolerance of the current context, which is
            ``None``, that is, never stop early).
        callback : Callable, optional
            Called as ``callback(t, x, g)`` after the `t`-th update with the new
            iterate and the gradient used for it. Raising :exc:`AbortOptimization`
            stops the run.

        Returns
        -------
        Trajectory
            The `n` iterates before each update (fewer if the run stopped early).

        Raises
        ------
        InvalidConfigurationError
            If `n` is not a non-negative integer, `x0` is not a non-empty
            one-dimensional array, `tol` is not a non-negative real number, or
            `fprime` returns a vector of the wrong length.

        Warnings
        --------
        `fun` must neither be a constant nor contain conditional branches when
        `fprime` is omitted. ``nan`` and ``inf`` in the gradient are not detected.
        """
        if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 0:
            raise InvalidConfigurationError(
                f"number of iterations must be a non-negative integer, got {n!r}"
            )

        x = np.array(x0, dtype=np.float64)

        if x.ndim != 1 or x.size == 0:
            raise InvalidConfigurationError(
                f"x0 must be a non-empty vector, got shape {x.shape}"
            )

        tol = getcontext().tol if tol is None else _check_tol(tol)

        if fprime is None:
            fprime = grad(fun)

        result = Trajectory()

        for t in range(1, n + 1):
            result.append(x)
            g = np.asarray(fprime(x.tolist()), dtype=np.float64)

            if g.shape != x.shape:
                raise InvalidConfigurationError(
                    f"gradient has shape {g.shape}, expected {x.shape}"
                )

            gmax = float(np.max(np.abs(g)))
            logger.debug("iteration %d: x=%s, max|g|=%g", t, x, gmax)

            if tol is not None and gmax <= tol:
                logger.info("converged after %d iterations (max|g|=%g)", t, gmax)
                result.x = x
                result.status = "CONVERGED"
                return result

            x = self.step(x, g)

            if callback is None:
                continue

            try:
                callback(t, x.copy(), g)
            except AbortOptimization as e:
                logger.info("aborted after %d iterations: %s", t, e.message)
                result.x = x
                result.status = "ABORTED"
                return result

        result.x = x
        return result


def optimize(
    step_size: float,
    x0: npt.ArrayLike,
    fun: Callable[[list], Any],
    iterations: int,
    **kwargs,
) -> Trajectory:
    """Minimize `fun` by gradient descent from `x0`.

    This is a shorthand for ``GradientDescent(step_size).optimize(x0, fun,
    iterations, **kwargs)``.

    Examples
    --------
    >>> r = optimize(0.02, [1.0, 1.0], lambda x: x[0] ** 4 + x[1] ** 3, 5)
    >>> len(r)
    5
    >>> [round(float(v), 6) for v in r[1]]
    [0.92, 0.94]
    """
    return GradientDescent(step_size).optimize(x0, fun, iterations, **kwargs)
