"""
Core infrastructure for bicreg.

Shared abstractions and utilities used by the domain submodules
(regression, selection, posterior).

Key components:
    protocols: DataSource, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    datasource: Named-column table container
    compute: Timing, tolerances, linear algebra kernels
"""

from bicreg.core.protocols import Backend
from bicreg.core.datasource import DataSource
from bicreg.core.result import Result
from bicreg.core.exceptions import (
    BicRegError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    UnidentifiableModelError,
)

__all__ = [
    # Protocols
    "Backend",
    # Data
    "DataSource",
    # Result
    "Result",
    # Exceptions
    "BicRegError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "UnidentifiableModelError",
]
