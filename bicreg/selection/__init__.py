"""
BIC model selection for Gaussian linear regression.

Public API:
    bic(n, p, value, kind=...) -> float                  # the score itself
    score_subset(data, subset, ...) -> SubsetScore       # BIC of one model
    backward_elimination(data, ...) -> StepSolution      # drop-one search
    best_subset(data, ...) -> SubsetSolution             # all subsets / MC³

The intercept is part of every model. Lower BIC is better.
"""

from bicreg.selection._common import (
    CandidateRow,
    ModelEntry,
    StepParams,
    StepRecord,
    SubsetParams,
    SubsetScore,
)
from bicreg.selection._criteria import (
    bic,
    form_offset,
    gaussian_log_likelihood,
    is_identifiable,
    log_marginal_likelihood,
)
from bicreg.selection.design import INTERCEPT, SelectionDesign
from bicreg.selection.solution import StepSolution, SubsetSolution
from bicreg.selection.solvers import (
    as_selection_design,
    backward_elimination,
    best_subset,
    score_subset,
)

__all__ = [
    "bic",
    "form_offset",
    "gaussian_log_likelihood",
    "is_identifiable",
    "log_marginal_likelihood",
    "score_subset",
    "backward_elimination",
    "best_subset",
    "as_selection_design",
    "INTERCEPT",
    "SelectionDesign",
    "StepSolution",
    "SubsetSolution",
    "SubsetScore",
    "CandidateRow",
    "StepRecord",
    "StepParams",
    "ModelEntry",
    "SubsetParams",
]
