"""
Subset scoring.

Fits [1, X_S] by least squares and converts the fit into a BIC on the
requested scale. Scores are memoised per subset: backward elimination
and MCMC both revisit the same models many times.
"""

import math

from bicreg.regression.solvers import fit
from bicreg.selection._common import SubsetScore
from bicreg.selection._criteria import CriterionKind, bic, is_identifiable
from bicreg.selection.design import SelectionDesign, Subset


class SubsetScorer:
    """
    Memoising BIC scorer over the subsets of one design.

    Unidentifiable subsets (n ≤ p+1) are never fitted; they score +inf.
    A rank-deficient subset is scored with its effective predictor count
    (rank - 1), the way R's extractAIC counts an lm with aliased terms.
    """

    def __init__(self, design: SelectionDesign, kind: CriterionKind):
        self._design = design
        self._kind = kind
        self._tss = design.tss
        self._cache: dict[Subset, SubsetScore] = {}
        self.n_fits = 0
        self.rank_deficient: set[Subset] = set()

    @property
    def design(self) -> SelectionDesign:
        return self._design

    @property
    def kind(self) -> CriterionKind:
        return self._kind

    @property
    def n_unidentifiable(self) -> int:
        """Subsets requested so far that were too large for n (n <= p+1)."""
        return sum(1 for s in self._cache.values() if not s.identifiable)

    def __call__(self, subset: Subset) -> SubsetScore:
        cached = self._cache.get(subset)
        if cached is None:
            cached = self._score(subset)
            self._cache[subset] = cached
        return cached

    def _score(self, subset: Subset) -> SubsetScore:
        n = self._design.n
        p = len(subset)
        if not is_identifiable(n, p):
            return SubsetScore(
                subset=subset, p=p, rss=math.nan, r_squared=math.nan,
                bic=math.inf, identifiable=False,
            )

        solution = fit(self._design.subset_design(subset))
        self.n_fits += 1

        p_eff = solution.rank - 1
        if p_eff < p:
            self.rank_deficient.add(subset)

        rss = solution.rss
        r_squared = 1.0 - rss / self._tss if self._tss > 0 else math.nan

        if self._kind == 'r_squared':
            value = r_squared if self._tss > 0 else 1.0
        elif self._kind == 'loglik':
            value = solution.log_likelihood
        else:
            value = rss

        return SubsetScore(
            subset=subset,
            p=p_eff,
            rss=rss,
            r_squared=r_squared,
            bic=bic(n, p_eff, value, kind=self._kind),
            identifiable=True,
        )
