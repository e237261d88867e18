"""
bicreg: BIC model selection for linear regression.

Scores Gaussian linear models with the Bayesian Information Criterion,
searches over predictor subsets, and summarises the coefficients of the
chosen model under the reference prior.

Submodules:
    regression: Ordinary least squares fits
    selection: BIC scorer, backward elimination, best subset / MC³
    posterior: Posterior mean, SD and credible interval per coefficient
"""

__version__ = "0.1.0"

from bicreg import regression
from bicreg import selection
from bicreg import posterior
from bicreg.core.datasource import DataSource
from bicreg.selection import bic, backward_elimination, best_subset, score_subset
from bicreg.posterior import coef_posterior

__all__ = [
    "__version__",
    "regression",
    "selection",
    "posterior",
    "DataSource",
    "bic",
    "score_subset",
    "backward_elimination",
    "best_subset",
    "coef_posterior",
]
