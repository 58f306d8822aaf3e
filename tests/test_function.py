import math

import mpmath
import numpy as np
import pytest

from dualdescent import function as ddf
from dualdescent.autodiff import (
    Dual,
    MultiDual,
    defderiv,
    derivative,
    gradient,
    primitive,
)


def test_exp():
    assert pytest.approx(derivative(ddf.exp, 1.0)) == math.e
    assert pytest.approx(derivative(lambda x: ddf.exp(x**2), 0.5)) == math.exp(0.25)
    assert ddf.exp(1000.0) == math.inf

    with pytest.raises(TypeError):
        ddf.exp("1")  # type: ignore


def test_log_and_sqrt():
    assert pytest.approx(derivative(ddf.log, 4.0)) == 0.25
    assert pytest.approx(derivative(ddf.sqrt, 4.0)) == 0.25
    assert ddf.log(0.0) == -math.inf
    assert math.isnan(ddf.log(-1.0))
    assert derivative(ddf.log, 0.0) == math.inf


def test_pow():
    dfdy = derivative(lambda y: ddf.pow(2.0, y), 3.0)
    assert pytest.approx(dfdy) == 8 * math.log(2)
    assert pytest.approx(derivative(lambda x: ddf.pow(x, 0.5), 4.0)) == 0.25

    x, y = MultiDual.variable(1.0, 2.0)

    with pytest.raises(TypeError):
        ddf.pow(Dual(1.0, 1.0), y)

    assert pytest.approx(ddf.pow(x + 1, y).derivatives) == (4.0, 4 * math.log(2))


def test_trigonometric():
    assert pytest.approx(derivative(ddf.sin, 0.3)) == math.cos(0.3)
    assert pytest.approx(derivative(ddf.cos, 0.3)) == -math.sin(0.3)


def test_numpy_scalar():
    assert derivative(ddf.exp, np.int64(0)) == 1.0
    assert ddf.pow(np.int64(2), 3) == 8.0
    assert pytest.approx(ddf.sin(np.float32(0.5))) == math.sin(0.5)

    result = gradient(lambda v: ddf.exp(v[0]) * v[1], np.array([0, 2]))
    assert result == (2.0, 1.0)


def test_mpmath():
    x = mpmath.mpf("0.5")
    assert derivative(ddf.exp, x) == mpmath.exp(x)
    assert mpmath.almosteq(derivative(lambda t: t**3 / 3, x), x**2)
    assert mpmath.almosteq(gradient(lambda v: v[0] * ddf.log(v[1]), [x, x])[1], 1)


def test_primitive():
    @primitive
    def tanh(x):
        return math.tanh(x)

    with pytest.raises(TypeError):
        derivative(tanh, 0.5)

    defderiv(tanh, lambda x: 1 - math.tanh(x) ** 2)
    assert pytest.approx(derivative(tanh, 0.5)) == 1 - math.tanh(0.5) ** 2
    assert tanh(0.5) == math.tanh(0.5)

    with pytest.raises(ValueError):
        defderiv(lambda x: x, lambda x: 1)
