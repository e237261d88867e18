"""
Common data types for model selection.

Contains the frozen parameter payloads that go inside Result[P] envelopes.
Each payload is a pure data container: no computation beyond trivial
accessors.
"""

from dataclasses import dataclass

from bicreg.selection.design import Subset


@dataclass(frozen=True)
class SubsetScore:
    """BIC of one predictor subset on one design."""
    subset: Subset
    p: int                  # effective predictor count (rank - 1)
    rss: float
    r_squared: float
    bic: float              # +inf when unidentifiable or degenerate
    identifiable: bool

    @property
    def log_marginal(self) -> float:
        return -0.5 * self.bic


@dataclass(frozen=True)
class CandidateRow:
    """One row of a backward-elimination step table ('- term' or '<none>')."""
    term: str
    removed: int | None     # predictor index, None for the '<none>' row
    df: int                 # predictors removed relative to the current model
    rss: float
    bic: float


@dataclass(frozen=True)
class StepRecord:
    """One pass of backward elimination from a current model."""
    subset: Subset                         # model at the start of the pass
    bic: float                             # its score
    candidates: tuple[CandidateRow, ...]   # sorted by BIC, '<none>' included
    removed: int | None                    # None on the terminating pass


@dataclass(frozen=True)
class StepParams:
    """Parameter payload for backward elimination."""
    start: Subset
    final: Subset
    final_bic: float
    passes: tuple[StepRecord, ...]
    kept: Subset                           # predictors never offered for removal
    criterion: str
    n_obs: int

    @property
    def removed(self) -> tuple[int, ...]:
        """Predictors in the order they were dropped."""
        return tuple(r.removed for r in self.passes if r.removed is not None)


@dataclass(frozen=True)
class ModelEntry:
    """One model in a best-subset / model-averaging table."""
    subset: Subset
    size: int
    bic: float
    r_squared: float
    log_marginal: float
    log_prior: float
    posterior_prob: float
    visits: int             # MCMC visit count; 1 for enumerated models


@dataclass(frozen=True)
class SubsetParams:
    """Parameter payload for best-subset selection."""
    models: tuple[ModelEntry, ...]        # sorted best first
    best: Subset
    best_bic: float
    inclusion_probs: tuple[float, ...]    # intercept first, always 1.0
    median_model: Subset
    method: str                           # 'enumerate' or 'mcmc'
    modelprior: str
    estimator: str
    n_models_visited: int
    n_unscorable: int
    criterion: str
    n_obs: int
