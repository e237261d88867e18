"""
Best-subset search and BIC model averaging.

Each model S gets the BIC approximation to its log marginal likelihood,
log p(y | S) ≈ -BIC(S)/2, plus a log prior over models:

    uniform:        log p(S) = -k·ln 2
    beta-binomial:  p(S) = 1 / ((k+1)·C(k, |S|))   (Beta(1,1) on model size)

Posterior model probabilities are normalised over the models scored.
Small k enumerates all 2^k models. Larger k runs MC³, a Metropolis
sampler that proposes adding or dropping one predictor per iteration
and visits models in proportion to their posterior probability.
"""

import itertools
import math
from typing import Literal

import numpy as np
from scipy.special import gammaln, logsumexp

from bicreg.core.exceptions import NumericalError
from bicreg.selection._common import ModelEntry, SubsetParams, SubsetScore
from bicreg.selection._scoring import SubsetScorer
from bicreg.selection.design import Subset

ModelPrior = Literal['uniform', 'beta-binomial']
Estimator = Literal['renormalized', 'mc']

MODEL_PRIORS = ('uniform', 'beta-binomial')
ESTIMATORS = ('renormalized', 'mc')


def log_model_prior(size: int, k: int, modelprior: ModelPrior) -> float:
    """Log prior probability of one particular model with ``size`` of k predictors."""
    if modelprior == 'uniform':
        return -k * math.log(2.0)
    log_choose = gammaln(k + 1) - gammaln(size + 1) - gammaln(k - size + 1)
    return float(-math.log(k + 1) - log_choose)


def enumerate_models(scorer: SubsetScorer) -> dict[Subset, SubsetScore]:
    """Score every subset of the k predictors, smallest models first."""
    k = scorer.design.k
    scores: dict[Subset, SubsetScore] = {}
    for size in range(k + 1):
        for combo in itertools.combinations(range(k), size):
            subset = frozenset(combo)
            scores[subset] = scorer(subset)
    return scores


def mc3_sample(
    scorer: SubsetScorer,
    *,
    n_iter: int,
    burn_in: int,
    rng: np.random.Generator,
    modelprior: ModelPrior,
    start: Subset,
) -> tuple[dict[Subset, SubsetScore], dict[Subset, int]]:
    """
    MC³ sampler over models.

    Proposal: flip the inclusion of one predictor chosen uniformly.
    The proposal is symmetric, so the acceptance ratio is the ratio of
    unnormalised posteriors. Unscorable models are never accepted.

    Returns:
        (scores of every model proposed, visit counts after burn-in)
    """
    k = scorer.design.k

    def log_post(score: SubsetScore) -> float:
        return score.log_marginal + log_model_prior(len(score.subset), k, modelprior)

    current = scorer(start)
    if not math.isfinite(current.bic):
        raise NumericalError(
            f"MCMC start model {sorted(start)} cannot be scored (n={scorer.design.n})"
        )
    current_lp = log_post(current)

    scores: dict[Subset, SubsetScore] = {current.subset: current}
    visits: dict[Subset, int] = {}

    for it in range(n_iter + burn_in):
        j = int(rng.integers(k))
        proposal = scorer(current.subset ^ {j})
        scores[proposal.subset] = proposal

        if math.isfinite(proposal.bic):
            proposal_lp = log_post(proposal)
            if math.log(rng.random()) < proposal_lp - current_lp:
                current, current_lp = proposal, proposal_lp

        if it >= burn_in:
            visits[current.subset] = visits.get(current.subset, 0) + 1

    return scores, visits


def _rank_key(subset: Subset, log_post: float) -> tuple:
    # Higher posterior first; ties to the smaller model, then smaller indices
    return (-log_post, len(subset), tuple(sorted(subset)))


def summarize_models(
    scores: dict[Subset, SubsetScore],
    visits: dict[Subset, int] | None,
    *,
    k: int,
    modelprior: ModelPrior,
    estimator: Estimator,
    method: str,
    criterion: str,
    n_obs: int,
) -> SubsetParams:
    """
    Turn scored (and possibly sampled) models into posterior summaries.

    Raises:
        NumericalError: If no model could be scored
    """
    finite = {s: sc for s, sc in scores.items() if math.isfinite(sc.bic)}
    if not finite:
        raise NumericalError(
            f"No scorable model among {len(scores)} candidates (n={n_obs}, k={k})"
        )
    n_unscorable = len(scores) - len(finite)

    subsets = list(finite)
    log_prior = np.array([log_model_prior(len(s), k, modelprior) for s in subsets])
    log_marg = np.array([finite[s].log_marginal for s in subsets])
    log_post = log_marg + log_prior

    if estimator == 'mc' and visits:
        counts = np.array([visits.get(s, 0) for s in subsets], dtype=np.float64)
        probs = counts / counts.sum()
    else:
        probs = np.exp(log_post - logsumexp(log_post))

    order = sorted(range(len(subsets)), key=lambda i: _rank_key(subsets[i], log_post[i]))

    models = tuple(
        ModelEntry(
            subset=subsets[i],
            size=len(subsets[i]),
            bic=finite[subsets[i]].bic,
            r_squared=finite[subsets[i]].r_squared,
            log_marginal=float(log_marg[i]),
            log_prior=float(log_prior[i]),
            posterior_prob=float(probs[i]),
            visits=visits.get(subsets[i], 0) if visits is not None else 1,
        )
        for i in order
    )

    inclusion = [1.0]
    for j in range(k):
        inclusion.append(float(sum(m.posterior_prob for m in models if j in m.subset)))
    median_model = frozenset(j for j in range(k) if inclusion[j + 1] >= 0.5)

    best = models[0]
    return SubsetParams(
        models=models,
        best=best.subset,
        best_bic=best.bic,
        inclusion_probs=tuple(inclusion),
        median_model=median_model,
        method=method,
        modelprior=modelprior,
        estimator=estimator if method == 'mcmc' else 'exact',
        n_models_visited=len(finite),
        n_unscorable=n_unscorable,
        criterion=criterion,
        n_obs=n_obs,
    )
