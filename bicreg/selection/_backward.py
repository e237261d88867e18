"""
Backward elimination by BIC.

From the current model S, every single-predictor removal S \\ {x} is
scored. The best removal x* is taken if it lowers BIC; otherwise the
search stops at S. While S itself cannot be scored (BIC = +inf) the best
removal is always taken, so an unscorable S is never the answer unless
`keep` pins it. Ties between removals go to the lowest predictor
index (scores equal to within floating-point tolerance count as tied),
so the path is deterministic. S shrinks by one predictor per
accepted pass, so there are at most k accepted passes.
"""

import math

from bicreg.core.compute.tolerances import CPU_FP64
from bicreg.selection._common import CandidateRow, StepParams, StepRecord, SubsetScore
from bicreg.selection._scoring import SubsetScorer
from bicreg.selection.design import Subset


def _candidate_table(
    scorer: SubsetScorer,
    current: SubsetScore,
    removals: list[tuple[int, SubsetScore]],
) -> tuple[CandidateRow, ...]:
    names = scorer.design.names
    rows = [
        CandidateRow(term=f"- {names[x]}", removed=x, df=1, rss=s.rss, bic=s.bic)
        for x, s in removals
    ]
    rows.append(CandidateRow(term='<none>', removed=None, df=0, rss=current.rss, bic=current.bic))
    # Stable sort: equal scores keep index order, '<none>' last among equals
    return tuple(sorted(rows, key=lambda r: r.bic))


def _best_removal(
    removals: list[tuple[int, SubsetScore]],
) -> tuple[int | None, SubsetScore | None]:
    """Lowest-BIC removal; scores within CPU_FP64 tolerance of the minimum tie to the lowest index."""
    if not removals:
        return None, None
    lowest = min(s.bic for _, s in removals)
    if not math.isfinite(lowest):
        return removals[0]
    return next((x, s) for x, s in removals if CPU_FP64.close(s.bic, lowest))


def backward_eliminate(
    scorer: SubsetScorer,
    start: Subset,
    keep: Subset,
) -> StepParams:
    """
    Run backward elimination from ``start``.

    Args:
        scorer: Memoising scorer for the design
        start: Initial model (normally every predictor)
        keep: Predictors that are never offered for removal

    Returns:
        StepParams with the path of passes and the terminal model
    """
    current = start
    current_score = scorer(current)
    passes: list[StepRecord] = []

    while True:
        removals = [(x, scorer(current - {x})) for x in sorted(current - keep)]
        table = _candidate_table(scorer, current_score, removals)

        best_x, best = _best_removal(removals)

        # An unscorable model is never kept: shrink until the score is finite
        improves = best is not None and (
            not math.isfinite(current_score.bic) or best.bic < current_score.bic
        )
        if not improves:
            passes.append(StepRecord(
                subset=current, bic=current_score.bic, candidates=table, removed=None,
            ))
            break

        passes.append(StepRecord(
            subset=current, bic=current_score.bic, candidates=table, removed=best_x,
        ))
        current = best.subset
        current_score = best

    return StepParams(
        start=start,
        final=current,
        final_bic=current_score.bic,
        passes=tuple(passes),
        kept=keep,
        criterion=scorer.kind,
        n_obs=scorer.design.n,
    )
