"""
Exception hierarchy for bicreg.

All exceptions inherit from BicRegError so callers can catch any
library-specific error in one place.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class BicRegError(Exception):
    """Base exception for all bicreg errors."""
    pass


class ValidationError(BicRegError):
    """
    Input validation failed.

    Raised at the public-API boundary when user-provided inputs fail
    validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class NumericalError(BicRegError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        rank: Numerical rank, if computed
        expected_rank: Expected rank (number of columns)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.rank = rank
        self.expected_rank = expected_rank


class UnidentifiableModelError(NumericalError):
    """
    Model has too few observations to be scored.

    BIC needs n > p + 1 (p predictors plus the intercept). Selection
    routines treat such subsets as unscorable and skip them; this
    exception is raised only when a caller asks for one directly.

    Attributes:
        n: Number of observations
        p: Number of predictors, intercept excluded
    """

    def __init__(self, message: str, n: int, p: int):
        super().__init__(message)
        self.n = n
        self.p = p
