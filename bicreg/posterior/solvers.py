"""
Posterior coefficient solver.

Public API:
    coef_posterior(data, subset, ...) -> PosteriorSolution
"""

from collections.abc import Iterable, Sequence
from typing import Any

from bicreg.core.compute.timing import Timer
from bicreg.core.exceptions import ValidationError
from bicreg.core.result import Result
from bicreg.core.validation import check_probability
from bicreg.posterior._reference import reference_posterior
from bicreg.posterior.solution import PosteriorSolution
from bicreg.selection.solution import StepSolution, SubsetSolution
from bicreg.selection.solvers import as_selection_design


def coef_posterior(
    data: Any,
    subset: Iterable[str | int] | None = None,
    *,
    y: Any = None,
    x: Sequence[str] | None = None,
    conf_level: float = 0.95,
    center: bool = True,
) -> PosteriorSolution:
    """
    Posterior summaries of the coefficients of one model under the
    reference prior π(β|σ²) ∝ 1, π(σ²) ∝ 1/σ².

    Args:
        data: A StepSolution or SubsetSolution (its selected model is
            used), or anything best_subset() accepts.
        subset: Predictor names or positions in the model. Required
            unless ``data`` is a selection result; None there.
        y, x: See bicreg.selection.as_selection_design()
        conf_level: Credible interval level
        center: Report the intercept for centred predictors (= mean
            response). Slopes are unaffected.

    Returns:
        PosteriorSolution; excluded predictors have mean 0, SD 0 and
        interval [0, 0]

    Raises:
        UnidentifiableModelError: If n <= p + 1
        SingularMatrixError: If the model's columns are collinear

    Examples:
        >>> step = backward_elimination(df, y='kid_score')
        >>> post = coef_posterior(step)
        >>> post['mom_iq'].mean, post['mom_iq'].sd
        >>> print(post.summary())
    """
    conf_level = check_probability(conf_level, 'conf_level')

    if isinstance(data, (StepSolution, SubsetSolution)):
        if subset is not None or y is not None or x is not None:
            raise ValidationError(
                "subset/y/x: not accepted with a selection result; its selected model is used"
            )
        design = data.design
        chosen = data.subset
        source = type(data).__name__
    else:
        design = as_selection_design(data, y=y, x=x)
        chosen = design.full_subset if subset is None else design.resolve(subset)
        source = 'subset'

    timer = Timer()
    timer.start()
    with timer.section('posterior'):
        params = reference_posterior(design, chosen, conf_level=conf_level, center=center)
    timer.stop()

    result = Result(
        params=params,
        info={
            'prior': 'reference',
            'model_from': source,
            'selected': list(design.subset_names(chosen)),
        },
        timing=timer.result(),
        backend_name='cpu_closed_form',
    )
    return PosteriorSolution(_result=result, _design=design)
