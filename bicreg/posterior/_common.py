"""
Common data types for posterior coefficient summaries.

Frozen payloads that go inside Result[P] envelopes.
"""

from dataclasses import dataclass

from bicreg.selection.design import Subset


@dataclass(frozen=True)
class CoefficientPosterior:
    """Marginal posterior summary of one coefficient."""
    name: str
    included: bool
    mean: float
    sd: float
    lower: float
    upper: float

    @property
    def excludes_zero(self) -> bool:
        """True when the credible interval lies strictly on one side of 0."""
        return self.lower > 0.0 or self.upper < 0.0


@dataclass(frozen=True)
class PosteriorParams:
    """
    Parameter payload for the reference-prior posterior of one model.

    Under π(β|σ²) ∝ 1, π(σ²) ∝ 1/σ² each included coefficient is
    marginally Student-t with ``df`` degrees of freedom, location ``mean``
    and scale ``sd``.
    """
    coefficients: tuple[CoefficientPosterior, ...]   # intercept first, then x_1..x_k
    subset: Subset
    df: int                          # n - p - 1
    rss: float
    sigma2_mean: float               # E[σ² | y] = RSS/(df - 2); nan when df <= 2
    conf_level: float
    t_quantile: float
    centered: bool
    n_obs: int
