"""
Regression Design.

Design wraps a DataSource (or raw arrays) and extracts X (design matrix)
and y (response). It knows it's building a regression; DataSource doesn't.

The design matrix is used as given: add an intercept column yourself,
or build subset designs through bicreg.selection, which always does.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from bicreg.core.datasource import DataSource
from bicreg.core.capabilities import CAPABILITY_MATERIALIZED, CAPABILITY_REPEATABLE
from bicreg.core.validation import (
    check_finite,
    check_2d,
    check_1d,
    check_consistent_length,
    check_min_samples,
    check_column_names,
)


@dataclass(frozen=True)
class Design:
    """
    Regression design matrix specification.

    Immutable after construction.

    Construction:
        Design.from_datasource(ds, y='kid_score')                 # X = all other columns
        Design.from_datasource(ds, x=['mom_hs'], y='kid_score')   # X = specified columns
        Design.from_arrays(X, y)                                   # Direct from arrays
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _names: tuple[str, ...]
    _source: DataSource | None = None

    @classmethod
    def from_datasource(
        cls,
        source: DataSource,
        *,
        x: str | list[str] | None = None,
        y: str,
    ) -> Design:
        """
        Build Design from DataSource.

        Args:
            source: The DataSource
            x: Predictor column(s). If None, all columns except y, in
               the source's column order.
            y: Response column.

        Returns:
            Design ready for regression
        """
        y_arr = np.asarray(source[y], dtype=np.float64)

        if x is None:
            x_cols = [k for k in source.columns if k != y]
            if not x_cols:
                raise ValueError("No predictor columns available")
        elif isinstance(x, str):
            x_cols = [x]
        else:
            x_cols = list(x)

        X_arr = np.column_stack([np.asarray(source[c], dtype=np.float64) for c in x_cols])
        return cls._build(X_arr, y_arr, names=x_cols, source=source)

    @classmethod
    def from_arrays(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        names: Sequence[str] | None = None,
    ) -> Design:
        """Build Design directly from arrays."""
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        return cls._build(X, y, names=names, source=None)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        names: Sequence[str] | None,
        source: DataSource | None,
    ) -> Design:
        """Internal builder with validation."""
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n, p = X.shape
        check_min_samples(X, p, 'X')

        if names is None:
            names = [f"x{i}" for i in range(p)]
        names = check_column_names(names, p, 'names')

        return cls(_X=X, _y=y, _n=n, _p=p, _names=names, _source=source)

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of columns in X."""
        return self._p

    @property
    def names(self) -> tuple[str, ...]:
        """Column names of X."""
        return self._names

    @property
    def source(self) -> DataSource | None:
        """Original DataSource, if available."""
        return self._source

    def supports(self, capability: str) -> bool:
        """Check if underlying data supports a capability."""
        if self._source is not None:
            return self._source.supports(capability)
        return capability in (CAPABILITY_MATERIALIZED, CAPABILITY_REPEATABLE)

    def XtX(self) -> NDArray[np.floating[Any]]:
        """Compute X'X (for standard errors)."""
        return self._X.T @ self._X

    def Xty(self) -> NDArray[np.floating[Any]]:
        """Compute X'y."""
        return self._X.T @ self._y
