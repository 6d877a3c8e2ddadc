"""
Exceptions and warnings raised by the clustering engines.
"""


class ClusteringError(Exception):
    """Base class for all clustering errors."""


class InvalidArgumentError(ClusteringError, ValueError):
    """Raised for bad input data or parameters.

    Always raised before any engine state is modified.
    """


class NotSeededError(ClusteringError, RuntimeError):
    """Raised when clustering is requested before centers were seeded."""


class DegenerateGeometryError(ClusteringError, ArithmeticError):
    """Raised when a neighbour query yields nothing to average.

    This indicates a broken spatial index or malformed input and aborts
    the current run.
    """


class ConvergenceWarning(UserWarning):
    """Non-fatal warning issued when an engine hits its iteration cap.

    The engine still produces a usable result.
    """

    def __init__(self, iterations: int, delta: float):
        self.iterations = iterations
        self.delta = delta
        super().__init__(f"exceeded maximum iterations: delta={delta:f}")
