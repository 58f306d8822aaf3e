import dataclasses
import itertools
import logging
import math

import numpy as np
import pytest

from dualdescent.autodiff import gradient
from dualdescent.optimize import (
    AbortOptimization,
    Context,
    GradientDescent,
    InvalidConfigurationError,
    getcontext,
    localcontext,
    optimize,
)


def test_convex_bowl():
    r = optimize(0.1, [5.0], lambda x: x[0] ** 2, 50)
    assert len(r) == 50
    assert r.status == "SUCCESS"

    xs = [abs(x[0]) for x in r]
    assert all(b < a for a, b in itertools.pairwise(xs))
    assert xs[-1] < 1e-3
    assert abs(r.x[0]) < xs[-1]


def test_snapshot_before_update():
    def fun(x):
        return x[0] ** 2 * x[1] + x[1] ** 4

    opt = GradientDescent(0.05)
    r = opt.optimize([1.0, -0.5], fun, 10)
    assert len(r) == 10
    np.testing.assert_array_equal(r[0], [1.0, -0.5])

    for a, b in itertools.pairwise(r):
        np.testing.assert_array_equal(b, opt.step(a, gradient(fun, a.tolist())))

    np.testing.assert_array_equal(r.x, opt.step(r[-1], gradient(fun, r[-1].tolist())))


def test_end_to_end():
    r = optimize(0.02, [1.0, 1.0], lambda x: x[0] ** 4 + x[1] ** 3, 5)
    assert len(r) == 5
    assert r[0].tolist() == [1.0, 1.0]
    assert pytest.approx(r[1].tolist()) == [0.92, 0.94]
    assert pytest.approx(r[2].tolist()) == [0.85770496, 0.886984]

    x1, x2 = 1.0, 1.0

    for state in r:
        assert pytest.approx(state.tolist()) == [x1, x2]
        x1, x2 = x1 - 0.02 * 4 * x1**3, x2 - 0.02 * 3 * x2**2

    assert pytest.approx(r.x.tolist()) == [x1, x2]
    assert r.to_array().shape == (5, 2)


def test_copy_in():
    x0 = np.array([1.0, 2.0])
    r0 = optimize(0.1, x0, lambda x: x[0] ** 2 + x[1] ** 2, 4)
    r1 = optimize(0.1, x0, lambda x: x[0] ** 2 + x[1] ** 2, 4)
    np.testing.assert_array_equal(x0, [1.0, 2.0])
    np.testing.assert_array_equal(r0.to_array(), r1.to_array())

    with pytest.raises(ValueError):
        r0[0][0] = 3.0


def test_zero_iterations():
    r = optimize(0.1, [3.0], lambda x: x[0] ** 2, 0)
    assert len(r) == 0
    assert r.x.tolist() == [3.0]
    assert r.to_array().shape == (0, 1)


@pytest.mark.parametrize("step_size", [0, -0.1, math.nan, math.inf, True, "0.1"])
def test_invalid_step_size(step_size):
    with pytest.raises(InvalidConfigurationError):
        GradientDescent(step_size)


def test_invalid_run():
    opt = GradientDescent(0.1)

    def fun(x):
        return x[0] ** 2

    with pytest.raises(InvalidConfigurationError):
        opt.optimize([1.0], fun, -1)

    with pytest.raises(InvalidConfigurationError):
        opt.optimize([1.0], fun, 2.5)  # type: ignore

    with pytest.raises(InvalidConfigurationError):
        opt.optimize([], fun, 3)

    with pytest.raises(InvalidConfigurationError):
        opt.optimize([[1.0]], fun, 3)

    with pytest.raises(InvalidConfigurationError):
        opt.optimize([1.0], fun, 3, tol=-1.0)

    with pytest.raises(InvalidConfigurationError):
        opt.optimize([1.0], fun, 3, tol="1e-3")  # type: ignore

    with pytest.raises(InvalidConfigurationError):
        opt.optimize([1.0], fun, 3, tol=math.nan)

    with pytest.raises(InvalidConfigurationError):
        opt.optimize([1.0], fun, 3, fprime=lambda x: [1.0, 2.0])

    with pytest.raises(dataclasses.FrozenInstanceError):
        opt.step_size = 0.2  # type: ignore


def test_tol():
    r = optimize(0.5, [1.0], lambda x: x[0] ** 2, 10, tol=1e-12)
    assert len(r) == 2
    assert r.status == "CONVERGED"
    assert r.x.tolist() == [0.0]


def test_callback():
    seen = []

    def callback(t, x, g):
        seen.append((t, x.tolist(), g.tolist()))

        if t == 3:
            raise AbortOptimization("enough")

    r = optimize(0.25, [4.0], lambda x: x[0] ** 2, 10, callback=callback)
    assert len(r) == 3
    assert r.status == "ABORTED"
    assert r.x.tolist() == [0.5]
    assert seen == [(1, [2.0], [8.0]), (2, [1.0], [4.0]), (3, [0.5], [2.0])]


def test_fprime():
    r = optimize(0.25, [4.0, 2.0], None, 3, fprime=lambda x: [2 * v for v in x])
    assert [x.tolist() for x in r] == [[4.0, 2.0], [2.0, 1.0], [1.0, 0.5]]


def test_context():
    assert getcontext().step_size == 0.1
    assert GradientDescent().step_size == 0.1

    with localcontext(step_size=0.25, tol=1e-12) as ctx:
        assert ctx.step_size == 0.25
        assert GradientDescent().step_size == 0.25
        r = GradientDescent().optimize([1.0], lambda x: x[0] ** 2, 10)
        assert r.status == "SUCCESS"
        assert GradientDescent(0.5).optimize([1.0], lambda x: x[0] ** 2, 10).nit == 2

    assert getcontext().step_size == 0.1
    assert getcontext().tol is None

    with pytest.raises(InvalidConfigurationError):
        with localcontext(step_size=-1.0):
            pass

    with pytest.raises(InvalidConfigurationError):
        Context(tol=-1.0)

    with pytest.raises(InvalidConfigurationError):
        Context(step_size="0.1")  # type: ignore

    assert getcontext().step_size == 0.1


def test_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="dualdescent.optimize.gradientdescent")
    optimize(0.5, [1.0], lambda x: x[0] ** 2, 5, tol=0.0)
    messages = [record.getMessage() for record in caplog.records]
    assert messages[0].startswith("iteration 1:")
    assert messages[-1].startswith("converged after 2 iterations")
