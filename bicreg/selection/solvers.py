"""
Model-selection solver dispatch.

Public API:
    score_subset(data, subset, ...) -> SubsetScore
    backward_elimination(data, ...) -> StepSolution
    best_subset(data, ...) -> SubsetSolution
"""

import math
import warnings
from collections.abc import Iterable, Sequence
from typing import Any, Literal

import numpy as np

from bicreg.core.compute.timing import Timer
from bicreg.core.datasource import DataSource
from bicreg.core.exceptions import ValidationError
from bicreg.core.result import Result
from bicreg.selection._backward import backward_eliminate
from bicreg.selection._common import SubsetScore
from bicreg.selection._criteria import CRITERION_KINDS, CriterionKind
from bicreg.selection._scoring import SubsetScorer
from bicreg.selection._subsets import (
    ESTIMATORS,
    MODEL_PRIORS,
    Estimator,
    ModelPrior,
    enumerate_models,
    mc3_sample,
    summarize_models,
)
from bicreg.selection.design import SelectionDesign
from bicreg.selection.solution import StepSolution, SubsetSolution

SearchMethod = Literal['auto', 'enumerate', 'mcmc']

# Largest k enumerated exhaustively under method='auto' (2^12 = 4096 fits)
MAX_ENUMERATE_K = 12


def as_selection_design(
    data: Any,
    *,
    y: Any = None,
    x: Sequence[str] | None = None,
) -> SelectionDesign:
    """
    Coerce the supported inputs into a SelectionDesign.

    Accepts:
        SelectionDesign                 (y and x must be omitted)
        DataSource / pandas DataFrame   with y = response column name
        predictor matrix                with y = response array, x = names
    """
    if isinstance(data, SelectionDesign):
        if y is not None or x is not None:
            raise ValidationError("y/x: not accepted together with a SelectionDesign")
        return data
    if isinstance(data, DataSource):
        if not isinstance(y, str):
            raise ValidationError("y: name of the response column required for a DataSource")
        return SelectionDesign.from_datasource(data, y=y, x=x)
    if hasattr(data, 'columns') and hasattr(data, 'iloc'):
        if not isinstance(y, str):
            raise ValidationError("y: name of the response column required for a DataFrame")
        return SelectionDesign.from_dataframe(data, y=y, x=x)
    if y is None:
        raise ValidationError("y: response required")
    return SelectionDesign.from_arrays(data, y, names=x)


def _check_kind(kind: str) -> None:
    if kind not in CRITERION_KINDS:
        raise ValidationError(f"kind: expected one of {CRITERION_KINDS}, got {kind!r}")


def _scorer_warnings(scorer: SubsetScorer) -> list[str]:
    design = scorer.design
    messages: list[str] = []
    n_unscorable = scorer.n_unidentifiable
    if n_unscorable:
        messages.append(
            f"{n_unscorable} model(s) skipped: n={design.n} too small to score them (n <= p+1)"
        )
    if scorer.rank_deficient:
        worst = sorted(scorer.rank_deficient, key=lambda s: (len(s), sorted(s)))[0]
        messages.append(
            f"{len(scorer.rank_deficient)} rank-deficient model(s) scored on their effective "
            f"size, e.g. {list(design.subset_names(worst))}"
        )
    return messages


def _emit(messages: list[str]) -> None:
    for message in messages:
        warnings.warn(message, RuntimeWarning, stacklevel=3)


def score_subset(
    data: Any,
    subset: Iterable[str | int] | None,
    *,
    y: Any = None,
    x: Sequence[str] | None = None,
    kind: CriterionKind = 'r_squared',
) -> SubsetScore:
    """
    BIC of one predictor subset (intercept always included).

    Args:
        data: SelectionDesign, DataSource, DataFrame or predictor matrix
        subset: Predictor names or positions; None for intercept-only
        y, x: See as_selection_design()
        kind: BIC form ('r_squared', 'rss', 'deviance', 'loglik')

    Returns:
        SubsetScore; bic is +inf when the subset cannot be scored
    """
    _check_kind(kind)
    design = as_selection_design(data, y=y, x=x)
    return SubsetScorer(design, kind)(design.resolve(subset))


def backward_elimination(
    data: Any,
    *,
    y: Any = None,
    x: Sequence[str] | None = None,
    kind: CriterionKind = 'deviance',
    start: Iterable[str | int] | None = None,
    keep: Iterable[str | int] | None = None,
) -> StepSolution:
    """
    Backward elimination by BIC.

    Starting from every predictor (or ``start``), repeatedly drop the
    predictor whose removal gives the lowest BIC, as long as that lowers
    BIC. Ties go to the predictor that comes first in column order.

    Args:
        data: SelectionDesign, DataSource, DataFrame or predictor matrix
        y, x: See as_selection_design()
        kind: BIC form. Default 'deviance', the scale R's
            step(k = log(n)) reports; every form selects the same model.
        start: Initial model. Default: all predictors.
        keep: Predictors never removed (they must be in start).

    Returns:
        StepSolution with the selected model, its BIC and the full trace

    Examples:
        >>> result = backward_elimination(df, y='kid_score')
        >>> result.removed
        ('mom_age', 'mom_work')
        >>> print(result.summary())
    """
    _check_kind(kind)
    design = as_selection_design(data, y=y, x=x)
    start_set = design.full_subset if start is None else design.resolve(start, 'start')
    keep_set = design.resolve(keep, 'keep')
    if not keep_set <= start_set:
        missing = design.subset_names(keep_set - start_set)
        raise ValidationError(f"keep: {list(missing)} not in the starting model")

    timer = Timer()
    timer.start()
    scorer = SubsetScorer(design, kind)
    with timer.section('elimination'):
        params = backward_eliminate(scorer, start_set, keep_set)
    timer.stop()

    messages = _scorer_warnings(scorer)
    if not math.isfinite(params.final_bic):
        messages.append(
            f"the final model could not be scored (n={design.n}); "
            f"keep pins {list(design.subset_names(params.final))}"
        )
    _emit(messages)

    result = Result(
        params=params,
        info={
            'criterion': kind,
            'n_steps': len(params.removed),
            'n_fits': scorer.n_fits,
            'models_on_path': len(params.passes),
        },
        timing=timer.result(),
        backend_name='cpu_backward',
        warnings=tuple(messages),
    )
    return StepSolution(_result=result, _design=design)


def best_subset(
    data: Any,
    *,
    y: Any = None,
    x: Sequence[str] | None = None,
    method: SearchMethod = 'auto',
    kind: CriterionKind = 'r_squared',
    modelprior: ModelPrior = 'uniform',
    estimator: Estimator = 'renormalized',
    n_iter: int = 10_000,
    burn_in: int | None = None,
    seed: int | np.random.Generator | None = None,
) -> SubsetSolution:
    """
    Best-subset selection and BIC model averaging.

    Every model's log marginal likelihood is approximated by -BIC/2.
    With the default uniform prior over models the selected model is the
    minimum-BIC subset. Posterior model probabilities and marginal
    inclusion probabilities are reported alongside.

    Args:
        data: SelectionDesign, DataSource, DataFrame or predictor matrix
        y, x: See as_selection_design()
        method:
            - 'enumerate': score all 2^k subsets
            - 'mcmc': MC³ sampler (add/drop one predictor per iteration)
            - 'auto': enumerate when k <= 12, otherwise sample
        kind: BIC form (does not change the selection)
        modelprior: 'uniform' or 'beta-binomial' (Beta(1,1) on model size)
        estimator: For MCMC, 'renormalized' (normalise exp(-BIC/2) over
            visited models) or 'mc' (visit frequencies)
        n_iter: MCMC iterations after burn-in
        burn_in: MCMC iterations discarded first (default n_iter // 10)
        seed: Seed or Generator for the sampler

    Returns:
        SubsetSolution; ``indicator`` is the inclusion vector over
        [intercept, x_1, ..., x_k]

    Examples:
        >>> result = best_subset(df, y='kid_score')
        >>> result.indicator
        (True, True, True, False, False)
        >>> print(result.summary())
    """
    _check_kind(kind)
    if modelprior not in MODEL_PRIORS:
        raise ValidationError(f"modelprior: expected one of {MODEL_PRIORS}, got {modelprior!r}")
    if estimator not in ESTIMATORS:
        raise ValidationError(f"estimator: expected one of {ESTIMATORS}, got {estimator!r}")
    if method not in ('auto', 'enumerate', 'mcmc'):
        raise ValidationError(f"method: expected 'auto', 'enumerate' or 'mcmc', got {method!r}")
    design = as_selection_design(data, y=y, x=x)

    if method == 'auto':
        method = 'enumerate' if design.k <= MAX_ENUMERATE_K else 'mcmc'
    if method == 'mcmc' and design.k == 0:
        method = 'enumerate'

    timer = Timer()
    timer.start()
    scorer = SubsetScorer(design, kind)
    messages: list[str] = []
    visits: dict | None = None
    info: dict[str, Any] = {'criterion': kind, 'method': method}

    if method == 'enumerate':
        with timer.section('enumeration'):
            scores = enumerate_models(scorer)
    else:
        if int(n_iter) < 1:
            raise ValidationError(f"n_iter: must be >= 1, got {n_iter}")
        burn = int(n_iter) // 10 if burn_in is None else int(burn_in)
        if burn < 0:
            raise ValidationError(f"burn_in: must be >= 0, got {burn_in}")
        rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
        with timer.section('sampling'):
            scores, visits = mc3_sample(
                scorer,
                n_iter=int(n_iter),
                burn_in=burn,
                rng=rng,
                modelprior=modelprior,
                start=frozenset(),
            )
        info.update({'n_iter': int(n_iter), 'burn_in': burn})
        if len(visits) < 2:
            messages.append(
                f"MCMC visited {len(visits)} distinct model(s) in {n_iter} iterations; "
                f"posterior probabilities are not informative"
            )

    with timer.section('summary'):
        params = summarize_models(
            scores,
            visits,
            k=design.k,
            modelprior=modelprior,
            estimator=estimator,
            method=method,
            criterion=kind,
            n_obs=design.n,
        )
    timer.stop()

    messages = _scorer_warnings(scorer) + messages
    _emit(messages)
    info['n_fits'] = scorer.n_fits

    result = Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name=f'cpu_{method}',
        warnings=tuple(messages),
    )
    return SubsetSolution(_result=result, _design=design)
