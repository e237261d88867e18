"""
Model-selection design.

Holds the response and the k candidate predictors of a selection problem,
and turns a predictor subset into the design matrix [1, X_S] that gets
fitted. The intercept is part of every model and never a candidate.

Predictors are addressed by position 0..k-1 internally (the order they
were supplied in) and by name at the API boundary.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from bicreg.core.datasource import DataSource
from bicreg.core.exceptions import ValidationError
from bicreg.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_2d,
    check_consistent_length,
    check_min_samples,
    check_column_names,
)
from bicreg.regression.design import Design

if TYPE_CHECKING:
    import pandas as pd


INTERCEPT = '(Intercept)'

Subset = frozenset[int]


@dataclass(frozen=True)
class SelectionDesign:
    """
    Response plus candidate predictors. Immutable after construction.

    Construction:
        SelectionDesign.from_datasource(ds, y='kid_score')
        SelectionDesign.from_datasource(ds, y='kid_score', x=['mom_hs', 'mom_iq'])
        SelectionDesign.from_dataframe(df, y='kid_score')
        SelectionDesign.from_arrays(X, y, names=['hs', 'iq', 'work', 'age'])
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _names: tuple[str, ...]
    _response: str

    @classmethod
    def from_datasource(
        cls,
        source: DataSource,
        *,
        y: str,
        x: Sequence[str] | None = None,
    ) -> SelectionDesign:
        """
        Build from a DataSource.

        Args:
            source: The DataSource
            y: Response column
            x: Candidate predictor columns, in index order. Default: every
               other column, in the source's column order.
        """
        if y not in source:
            raise ValidationError(
                f"y: DataSource has no column '{y}'. Available: {list(source.columns)}"
            )
        x_cols = [c for c in source.columns if c != y] if x is None else list(x)
        if y in x_cols:
            raise ValidationError(f"x: response column '{y}' listed as a predictor")
        if not x_cols:
            raise ValidationError("x: no candidate predictor columns")

        X = np.column_stack([source[c] for c in x_cols])
        return cls._build(X, source[y], names=x_cols, response=y)

    @classmethod
    def from_dataframe(
        cls,
        df: 'pd.DataFrame',
        *,
        y: str,
        x: Sequence[str] | None = None,
    ) -> SelectionDesign:
        """Build from a pandas DataFrame (see from_datasource)."""
        return cls.from_datasource(DataSource.from_dataframe(df), y=y, x=x)

    @classmethod
    def from_arrays(
        cls,
        X: Any,
        y: Any,
        *,
        names: Sequence[str] | None = None,
        response: str = 'y',
    ) -> SelectionDesign:
        """Build directly from a predictor matrix (no intercept column) and response."""
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        if names is None:
            names = [f"x{i + 1}" for i in range(X_arr.shape[1] if X_arr.ndim == 2 else 0)]
        return cls._build(X_arr, y_arr, names=names, response=response)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        names: Sequence[str],
        response: str,
    ) -> SelectionDesign:
        """Internal builder with validation."""
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))
        # The intercept-only model needs n > 1 to be scored at all
        check_min_samples(X, 2, 'X')
        if np.ptp(y) == 0:
            raise ValidationError(
                "y: response is constant (total sum of squares is 0); no model can be scored"
            )

        names = check_column_names(names, X.shape[1], 'names')
        if INTERCEPT in names:
            raise ValidationError(
                f"names: '{INTERCEPT}' is reserved; the intercept is always included"
            )

        return cls(_X=X, _y=y, _names=names, _response=str(response))

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Candidate predictors (n x k), no intercept column."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._X.shape[0]

    @property
    def k(self) -> int:
        """Number of candidate predictors."""
        return self._X.shape[1]

    @property
    def names(self) -> tuple[str, ...]:
        """Predictor names in index order."""
        return self._names

    @property
    def response(self) -> str:
        return self._response

    @property
    def full_subset(self) -> Subset:
        return frozenset(range(self.k))

    @property
    def tss(self) -> float:
        """Total sum of squares of y about its mean."""
        return float(np.sum((self._y - self._y.mean()) ** 2))

    # === Subsets ===

    def resolve(self, predictors: Iterable[str | int] | None, name: str = 'subset') -> Subset:
        """
        Turn predictor names and/or positions into a subset.

        Args:
            predictors: Names or 0-based positions; None means the empty set
            name: Parameter name for error messages

        Raises:
            ValidationError: On unknown names or out-of-range positions
        """
        if predictors is None:
            return frozenset()
        if isinstance(predictors, str):
            predictors = [predictors]
        indices: set[int] = set()
        for item in predictors:
            if isinstance(item, str):
                if item == INTERCEPT:
                    continue
                if item not in self._names:
                    raise ValidationError(
                        f"{name}: unknown predictor '{item}'. Available: {list(self._names)}"
                    )
                indices.add(self._names.index(item))
            else:
                idx = int(item)
                if not 0 <= idx < self.k:
                    raise ValidationError(
                        f"{name}: predictor index {idx} out of range [0, {self.k})"
                    )
                indices.add(idx)
        return frozenset(indices)

    def subset_names(self, subset: Subset) -> tuple[str, ...]:
        """Names of the predictors in a subset, in index order."""
        return tuple(self._names[i] for i in sorted(subset))

    def indicator(self, subset: Subset) -> tuple[bool, ...]:
        """Inclusion vector over [intercept, x_1, ..., x_k]; intercept always True."""
        return (True,) + tuple(i in subset for i in range(self.k))

    def subset_design(self, subset: Subset) -> Design:
        """Regression design [1, X_S] for a subset."""
        cols = sorted(subset)
        X_s = np.column_stack([np.ones(self.n), self._X[:, cols]])
        return Design.from_arrays(X_s, self._y, names=(INTERCEPT,) + self.subset_names(subset))
