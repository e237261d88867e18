"""
Solver dispatch for regression.

This module provides the fit() function (public API) and backend selection.
"""

from collections.abc import Sequence
from typing import Literal

from numpy.typing import ArrayLike

from bicreg.core.validation import check_array
from bicreg.regression.design import Design
from bicreg.regression.solution import LinearSolution
from bicreg.regression.backends.cpu import CPUQRBackend


BackendChoice = Literal['auto', 'cpu', 'cpu_qr']


def fit(
    X: ArrayLike | Design,
    y: ArrayLike | None = None,
    *,
    names: Sequence[str] | None = None,
    backend: BackendChoice = 'auto',
) -> LinearSolution:
    """
    Fit a linear regression model.

    Solves the ordinary least squares problem:
        min_β ||y - Xβ||²

    All input validation, backend selection, and result wrapping happens
    here. X is used as given; include a column of ones for an intercept.

    Args:
        X: Design matrix (n x p), or a prebuilt Design.
        y: Response vector (n,). Required unless X is a Design.
        names: Column names for X (ignored when X is a Design).
        backend: Computational backend:
            - 'auto' / 'cpu' / 'cpu_qr': CPU pivoted QR decomposition

    Returns:
        LinearSolution with coefficients, diagnostics, and summary methods

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent dimensions

    Example:
        >>> X = np.column_stack([np.ones(100), rng.standard_normal((100, 2))])
        >>> y = X @ [1, 2, 3] + rng.standard_normal(100) * 0.1
        >>> result = fit(X, y, names=['(Intercept)', 'a', 'b'])
        >>> print(result.summary())
    """
    if isinstance(X, Design):
        design = X
    else:
        if y is None:
            raise ValueError("y required when X is not a Design")
        # This is the boundary - validate here, trust everywhere else
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        design = Design.from_arrays(X_arr, y_arr, names=names)

    backend_impl = _get_backend(backend)
    result = backend_impl.solve(design)
    return LinearSolution(_result=result, _design=design)


def _get_backend(choice: BackendChoice) -> CPUQRBackend:
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_qr'):
        return CPUQRBackend()
    raise ValueError(f"Unknown backend: {choice!r}")
