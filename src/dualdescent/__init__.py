from .autodiff import Dual, MultiDual, derivative, gradient, jacobian
from .function import exp, log, pow, sqrt
from .optimize import GradientDescent, Trajectory, optimize

__all__ = [
    "Dual",
    "MultiDual",
    "derivative",
    "gradient",
    "jacobian",
    "exp",
    "log",
    "pow",
    "sqrt",
    "GradientDescent",
    "Trajectory",
    "optimize",
]
