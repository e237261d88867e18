"""
Posterior coefficient summaries for a selected linear model.

Public API:
    coef_posterior(data, subset, ...) -> PosteriorSolution
"""

from bicreg.posterior._common import CoefficientPosterior, PosteriorParams
from bicreg.posterior.solution import PosteriorSolution
from bicreg.posterior.solvers import coef_posterior

__all__ = [
    "coef_posterior",
    "PosteriorSolution",
    "CoefficientPosterior",
    "PosteriorParams",
]
