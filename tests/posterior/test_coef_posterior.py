"""
Tests for coef_posterior().

Under the reference prior the posterior of an included coefficient is
Student-t on n - p - 1 df centred at the OLS estimate with the OLS
standard error as scale. These tests recompute that by hand.

Validates:
    - Means, SDs and intervals against direct least squares
    - Centred intercept (= mean response, SD s/√n)
    - Excluded predictors reported as exactly zero
    - Accepts selection results, names/positions and full-model default
    - Errors: unidentifiable, collinear, bad arguments
"""

import math

import numpy as np
import pytest
from scipy import stats

from bicreg.core.exceptions import (
    SingularMatrixError,
    UnidentifiableModelError,
    ValidationError,
)
from bicreg.posterior import PosteriorSolution, coef_posterior
from bicreg.selection import INTERCEPT, backward_elimination, best_subset

N = 434


def _ols(df, cols, center):
    X_s = df[cols].to_numpy()
    if center:
        X_s = X_s - X_s.mean(axis=0)
    X = np.column_stack([np.ones(len(df)), X_s])
    y = df['score'].to_numpy()
    beta, *_ = np.linalg.lstsq(X, y, rcond=None)
    resid = y - X @ beta
    rss = float(resid @ resid)
    df_resid = len(df) - X.shape[1]
    se = np.sqrt(rss / df_resid * np.diag(np.linalg.inv(X.T @ X)))
    return beta, se, rss, df_resid


class TestFromBackwardElimination:

    @pytest.fixture
    def post(self, child_scores):
        return coef_posterior(backward_elimination(child_scores, y='score'))

    def test_layout(self, post):
        assert isinstance(post, PosteriorSolution)
        assert post.names == (INTERCEPT, 'hs', 'iq', 'work', 'age')
        assert post.included == (True, True, True, False, False)
        assert post.subset == frozenset({0, 1})

    def test_means_and_sds_match_ols(self, child_scores, post):
        beta, se, _, _ = _ols(child_scores, ['hs', 'iq'], center=True)
        np.testing.assert_allclose(post.mean[:3], beta, rtol=1e-9)
        np.testing.assert_allclose(post.sd[:3], se, rtol=1e-9)

    def test_centred_intercept(self, child_scores, post):
        _, _, rss, df_resid = _ols(child_scores, ['hs', 'iq'], center=True)
        intercept = post[INTERCEPT]
        assert intercept.mean == pytest.approx(child_scores['score'].mean(), rel=1e-12)
        assert intercept.sd == pytest.approx(math.sqrt(rss / df_resid / N), rel=1e-9)

    def test_intervals(self, post):
        tq = stats.t.ppf(0.975, N - 3)
        np.testing.assert_allclose(post.lower[:3], post.mean[:3] - tq * post.sd[:3])
        np.testing.assert_allclose(post.upper[:3], post.mean[:3] + tq * post.sd[:3])
        assert post.df == N - 3

    def test_excluded_are_zero(self, post):
        for name in ('work', 'age'):
            coef = post[name]
            assert not coef.included
            assert (coef.mean, coef.sd, coef.lower, coef.upper) == (0.0, 0.0, 0.0, 0.0)
            assert not coef.excludes_zero

    def test_strong_effects_exclude_zero(self, post):
        assert post.excludes_zero == {
            INTERCEPT: True, 'hs': True, 'iq': True, 'work': False, 'age': False,
        }

    def test_sigma2_mean(self, child_scores, post):
        _, _, rss, df_resid = _ols(child_scores, ['hs', 'iq'], center=True)
        assert post.sigma2_mean == pytest.approx(rss / (df_resid - 2), rel=1e-9)

    def test_metadata(self, post):
        assert post.backend_name == 'cpu_closed_form'
        assert post.info['model_from'] == 'StepSolution'
        assert post.info['selected'] == ['hs', 'iq']
        assert 'posterior' in post.timing


class TestOtherInputs:

    def test_from_best_subset(self, child_scores):
        step = coef_posterior(backward_elimination(child_scores, y='score'))
        subset = coef_posterior(best_subset(child_scores, y='score'))
        np.testing.assert_allclose(subset.mean, step.mean)
        assert subset.info['model_from'] == 'SubsetSolution'

    def test_explicit_subset(self, child_scores):
        post = coef_posterior(child_scores, ['iq'], y='score')
        assert post.included == (True, False, True, False, False)
        assert post.df == N - 2

    def test_default_is_full_model(self, child_scores):
        post = coef_posterior(child_scores, y='score')
        assert all(post.included)
        assert post.df == N - 5

    def test_uncentred_intercept(self, child_scores):
        beta, se, _, _ = _ols(child_scores, ['hs', 'iq'], center=False)
        post = coef_posterior(child_scores, ['hs', 'iq'], y='score', center=False)
        assert post[INTERCEPT].mean == pytest.approx(beta[0], rel=1e-9)
        assert post[INTERCEPT].sd == pytest.approx(se[0], rel=1e-9)
        # Slopes do not depend on centring
        centred = coef_posterior(child_scores, ['hs', 'iq'], y='score')
        np.testing.assert_allclose(post.mean[1:], centred.mean[1:], rtol=1e-9)

    def test_conf_level_changes_width_and_labels(self, child_scores):
        post = coef_posterior(child_scores, ['hs', 'iq'], y='score', conf_level=0.9)
        wide = coef_posterior(child_scores, ['hs', 'iq'], y='score')
        assert np.all(post.upper[:3] - post.lower[:3] < wide.upper[:3] - wide.lower[:3])
        frame = post.to_dataframe()
        assert list(frame.columns) == ['post mean', 'post SD', '5%', '95%', 'included']
        assert frame.loc['iq', 'post mean'] == pytest.approx(post['iq'].mean)


class TestErrors:

    def test_unidentifiable(self, rng):
        X, y = rng.standard_normal((4, 3)), rng.standard_normal(4)
        with pytest.raises(UnidentifiableModelError) as exc_info:
            coef_posterior(X, [0, 1, 2], y=y)
        assert exc_info.value.n == 4
        assert exc_info.value.p == 3

    def test_collinear(self, child_scores):
        df = child_scores.copy()
        df['hs_iq'] = df['hs'] + df['iq']
        with pytest.raises(SingularMatrixError):
            coef_posterior(df, ['hs', 'iq', 'hs_iq'], y='score')

    def test_subset_with_selection_result(self, child_scores):
        step = backward_elimination(child_scores, y='score')
        with pytest.raises(ValidationError, match="not accepted with a selection result"):
            coef_posterior(step, ['hs'])

    @pytest.mark.parametrize("level", [0.0, 1.0, 95])
    def test_bad_conf_level(self, child_scores, level):
        with pytest.raises(ValidationError, match="conf_level"):
            coef_posterior(child_scores, y='score', conf_level=level)

    def test_unknown_coefficient(self, child_scores):
        post = coef_posterior(child_scores, ['hs'], y='score')
        with pytest.raises(KeyError, match="mom_iq"):
            post['mom_iq']


class TestSummary:

    def test_summary_lists_every_coefficient(self, child_scores):
        post = coef_posterior(backward_elimination(child_scores, y='score'))
        text = post.summary()
        for name in post.names:
            assert name in text
        assert "2.5%" in text and "97.5%" in text
        assert "Residual df: 431" in text
        assert "included=['(Intercept)', 'hs', 'iq']" in repr(post)
