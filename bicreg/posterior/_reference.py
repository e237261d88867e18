"""
Closed-form posterior for a linear model under the reference prior.

With π(β, σ²) ∝ 1/σ² and the model y = Xβ + ε, ε ~ N(0, σ²I):

    β | y   ~ t_{n-p-1}(β̂, s²(X'X)⁻¹)       s² = RSS/(n-p-1)
    σ² | y  ~ Inv-Gamma((n-p-1)/2, RSS/2)

so the posterior mean of β is the OLS estimate and its posterior scale
is the OLS standard error. Predictors outside the model have β = 0
exactly.

With centering, predictors enter as x - x̄. The slopes are unchanged and
the intercept becomes the mean response ȳ with scale s/√n.
"""

import math

import numpy as np
from scipy import stats as sp_stats

from bicreg.core.exceptions import SingularMatrixError, UnidentifiableModelError
from bicreg.regression.design import Design
from bicreg.regression.solvers import fit
from bicreg.posterior._common import CoefficientPosterior, PosteriorParams
from bicreg.selection.design import INTERCEPT, SelectionDesign, Subset


def reference_posterior(
    design: SelectionDesign,
    subset: Subset,
    *,
    conf_level: float,
    center: bool,
) -> PosteriorParams:
    """
    Posterior summaries for every coefficient of ``design`` given ``subset``.

    Raises:
        UnidentifiableModelError: If n <= p + 1 (no residual degrees of freedom)
        SingularMatrixError: If the subset's columns are collinear
    """
    n = design.n
    cols = sorted(subset)
    p = len(cols)
    if n <= p + 1:
        raise UnidentifiableModelError(
            f"posterior needs n > p + 1, got n={n}, p={p}", n=n, p=p,
        )

    X_s = design.X[:, cols]
    if center:
        X_s = X_s - X_s.mean(axis=0)
    X = np.column_stack([np.ones(n), X_s])
    names = (INTERCEPT,) + design.subset_names(subset)
    solution = fit(Design.from_arrays(X, design.y, names=names))

    if solution.rank < X.shape[1]:
        raise SingularMatrixError(
            f"model {list(names[1:])} is rank-deficient (rank {solution.rank} < {X.shape[1]}); "
            f"the reference posterior is improper",
            matrix_name='X',
            rank=solution.rank,
            expected_rank=X.shape[1],
        )

    df = solution.df_residual
    tq = float(sp_stats.t.ppf(0.5 + conf_level / 2.0, df))
    means = solution.coefficients
    sds = solution.standard_errors

    fitted = {
        name: CoefficientPosterior(
            name=name,
            included=True,
            mean=float(m),
            sd=float(s),
            lower=float(m - tq * s),
            upper=float(m + tq * s),
        )
        for name, m, s in zip(names, means, sds)
    }

    coefficients = [fitted[INTERCEPT]]
    for name in design.names:
        coefficients.append(fitted.get(name) or CoefficientPosterior(
            name=name, included=False, mean=0.0, sd=0.0, lower=0.0, upper=0.0,
        ))

    rss = solution.rss
    return PosteriorParams(
        coefficients=tuple(coefficients),
        subset=subset,
        df=df,
        rss=rss,
        sigma2_mean=rss / (df - 2) if df > 2 else math.nan,
        conf_level=conf_level,
        t_quantile=tq,
        centered=center,
        n_obs=n,
    )
