"""
Exception hierarchy shared by the model and solver layers.
"""


class HeatEquationError(Exception):
    """Base class for all errors raised by the package."""


class InvalidParameterError(HeatEquationError, ValueError):
    """A physical or discretisation parameter is out of its valid range."""


class NumericalError(HeatEquationError, ArithmeticError):
    """The linear system is ill-conditioned or a step produced non-finite values."""
