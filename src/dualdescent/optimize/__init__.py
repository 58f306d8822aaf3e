"""
##########################################
Optimization (:mod:`dualdescent.optimize`)
##########################################

.. currentmodule:: dualdescent.optimize

This module provides gradient descent driven by forward-mode automatic
differentiation.

Local optimization
==================

.. autosummary::
    :toctree: generated/

    GradientDescent
    optimize
    Trajectory

Context
=======

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    localcontext
    setcontext

Exceptions
==========

.. autosummary::
    :toctree: generated/

    AbortOptimization
    InvalidConfigurationError

"""

from .context import (
    Context,
    InvalidConfigurationError,
    getcontext,
    localcontext,
    setcontext,
)
from .gradientdescent import (
    AbortOptimization,
    GradientDescent,
    Trajectory,
    optimize,
)

__all__ = [
    "Context",
    "getcontext",
    "localcontext",
    "setcontext",
    "AbortOptimization",
    "GradientDescent",
    "InvalidConfigurationError",
    "Trajectory",
    "optimize",
]
