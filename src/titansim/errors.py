"""
Exception types raised by the TitanSim package.

Configuration and input errors subclass ValueError so that callers catching
the builtin keep working; numerical failures subclass ArithmeticError.
"""


class TitanSimError(Exception):
    """Base class for all TitanSim errors."""


class ConfigurationError(TitanSimError, ValueError):
    """Catalog or simulator set up incorrectly (e.g. no Earth, no bodies)."""


class InputValidationError(TitanSimError, ValueError):
    """Solver or trajectory arguments rejected before any stepping."""


class NumericalError(TitanSimError, ArithmeticError):
    """
    Force evaluation hit a singular or non-finite configuration.

    Attributes
    ----------
    pairs : list of tuple of int
        Index pairs of coincident bodies, empty when the failure was
        a non-finite value rather than a coincidence.
    """
    def __init__(self, message, pairs=None):
        super().__init__(message)
        self.pairs = list(pairs) if pairs is not None else []
