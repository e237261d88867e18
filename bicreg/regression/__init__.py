"""
Ordinary least squares regression.

Every subset the model-selection routines score is fitted here.

Public API:
    fit(X, y, ...) -> LinearSolution

Example:
    >>> from bicreg.regression import fit
    >>> result = fit(X, y)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from bicreg.regression.design import Design
from bicreg.regression.solution import LinearSolution, LinearParams
from bicreg.regression.solvers import fit

__all__ = [
    "fit",
    "Design",
    "LinearSolution",
    "LinearParams",
]
