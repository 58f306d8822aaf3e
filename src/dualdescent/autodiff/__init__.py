"""
#######################################################
Automatic differentiation (:mod:`dualdescent.autodiff`)
#######################################################

.. currentmodule:: dualdescent.autodiff

This module provides forward-mode automatic differentiation.

Differential operators
----------------------

.. autosummary::
    :toctree: generated/

    derivative
    gradient
    jacobian
    value_and_gradient
    deriv
    grad

Number systems containing infinitesimals
----------------------------------------

.. autosummary::
    :toctree: generated/

    Dual
    MultiDual
    DualNumber

Defining new elementary functions
---------------------------------

.. autosummary::
    :toctree: generated/

    primitive
    defderiv

Exceptions
----------

.. autosummary::
    :toctree: generated/

    DimensionError

"""

from ._vector import DimensionError
from .autodiff import (
    defderiv,
    deriv,
    derivative,
    grad,
    gradient,
    jacobian,
    primitive,
    value_and_gradient,
)
from .dual import Dual, DualNumber, MultiDual

__all__ = [
    "defderiv",
    "deriv",
    "derivative",
    "grad",
    "gradient",
    "jacobian",
    "primitive",
    "value_and_gradient",
    "Dual",
    "DualNumber",
    "MultiDual",
    "DimensionError",
]
