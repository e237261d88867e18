"""
Bayesian Information Criterion for Gaussian linear models.

A model with p predictors plus an intercept, fitted to n observations,
scores

    likelihood form:  BIC = -2·ln(L) + (p+1)·ln(n)
                      ln L = -n/2 · (ln(2π) + ln(RSS/n) + 1)
    R² form:          BIC = n·ln(1 - R²) + (p+1)·ln(n)
    deviance form:    BIC = n·ln(RSS/n) + (p+1)·ln(n)

Lower is better. The deviance form is the scale R's step(k = log(n))
prints. On a fixed dataset the three differ only by an additive constant
depending on (n, TSS), so every difference between two models, and
therefore every ranking, is identical across forms:

    deviance   = R² form + n·ln(TSS/n)
    likelihood = R² form + n·ln(2π·TSS/n) + n

A score that cannot be computed (n ≤ p+1, R² ≥ 1, RSS ≤ 0) is +inf, so
the model is never preferred.
"""

import math
from typing import Literal

from bicreg.core.exceptions import ValidationError

CriterionKind = Literal['r_squared', 'rss', 'deviance', 'loglik']

CRITERION_KINDS = ('r_squared', 'rss', 'deviance', 'loglik')


def is_identifiable(n: int, p: int) -> bool:
    """True when n observations can score a model with p predictors plus intercept."""
    return n > p + 1


def gaussian_log_likelihood(rss: float, n: int) -> float:
    """
    Maximised Gaussian log-likelihood of a least squares fit.

    +inf for a perfect fit (RSS = 0).
    """
    if rss <= 0:
        return math.inf
    return -0.5 * n * (math.log(2.0 * math.pi) + math.log(rss / n) + 1.0)


def bic(n: int, p: int, value: float, *, kind: CriterionKind = 'r_squared') -> float:
    """
    BIC of a Gaussian linear model with an intercept and p predictors.

    Args:
        n: Number of observations
        p: Number of predictors, intercept excluded
        value: R² (kind='r_squared'), residual sum of squares
            (kind='rss' or 'deviance'), or maximised log-likelihood
            (kind='loglik')
        kind: Which form to compute:
            - 'r_squared': n·ln(1 - R²) + (p+1)·ln(n)
            - 'rss': likelihood form with the Gaussian ln L at this RSS
            - 'deviance': n·ln(RSS/n) + (p+1)·ln(n)
            - 'loglik': -2·value + (p+1)·ln(n)

    Returns:
        The score; +inf when the model is unidentifiable (n ≤ p+1) or
        the fit is degenerate (R² ≥ 1, RSS ≤ 0, ln L = +inf)

    Raises:
        ValidationError: On negative counts, NaN, or an unknown kind

    Examples:
        >>> bic(100, 1, 0.0)          # intercept + 1 predictor, R² = 0
        9.210340371976184
        >>> bic(3, 1, 0.5)            # n ≤ p+1
        inf
    """
    if kind not in CRITERION_KINDS:
        raise ValidationError(f"kind: expected one of {CRITERION_KINDS}, got {kind!r}")
    if int(n) != n or n < 1:
        raise ValidationError(f"n: must be a positive integer, got {n}")
    if int(p) != p or p < 0:
        raise ValidationError(f"p: must be a non-negative integer, got {p}")
    value = float(value)
    if math.isnan(value):
        raise ValidationError(f"value: NaN passed as {kind}")

    n = int(n)
    p = int(p)
    if not is_identifiable(n, p):
        return math.inf

    penalty = (p + 1) * math.log(n)

    if kind == 'r_squared':
        if value >= 1.0:
            return math.inf
        return n * math.log1p(-value) + penalty

    if kind == 'loglik':
        if value == math.inf:
            return math.inf
        return -2.0 * value + penalty

    if value < 0:
        raise ValidationError(f"value: residual sum of squares is negative ({value})")
    if value == 0 or math.isinf(value):
        return math.inf

    if kind == 'deviance':
        return n * math.log(value / n) + penalty
    return -2.0 * gaussian_log_likelihood(value, n) + penalty


def form_offset(n: int, tss: float, kind: CriterionKind) -> float:
    """
    Constant separating a BIC form from the R² form on the same data.

        bic(n, p, rss, kind=kind) == bic(n, p, 1 - rss/tss) + form_offset(n, tss, kind)
    """
    if kind not in CRITERION_KINDS:
        raise ValidationError(f"kind: expected one of {CRITERION_KINDS}, got {kind!r}")
    if tss <= 0:
        raise ValidationError(f"tss: must be positive, got {tss}")
    if kind == 'r_squared':
        return 0.0
    if kind == 'deviance':
        return n * math.log(tss / n)
    return n * math.log(2.0 * math.pi * tss / n) + n


def log_marginal_likelihood(bic_value: float) -> float:
    """Laplace/BIC approximation to the log marginal likelihood: -BIC/2."""
    return -0.5 * bic_value
