"""
Tests for backward elimination by BIC.

The child_scores fixture is constructed so the path is known exactly:
age adds nothing (removing it saves ln n), work adds a factor of
1 + 0.05² to the likelihood ratio (removing it saves ln n - n·ln(1.0025)),
and hs and iq are strong.

Validates:
    - Removal order, BIC path and selected model
    - Every BIC form selects the same model along the same path
    - Ties go to the predictor that comes first in column order
    - start / keep restrictions
    - Small-n designs: unscorable models are skipped with a warning
"""

import math
import warnings

import numpy as np
import pytest

from bicreg.core.datasource import DataSource
from bicreg.core.exceptions import ValidationError
from bicreg.selection import SelectionDesign, StepSolution, backward_elimination, best_subset

N = 434


class TestChildScores:

    @pytest.fixture
    def result(self, child_scores):
        return backward_elimination(child_scores, y='score')

    def test_removal_order(self, result):
        assert isinstance(result, StepSolution)
        assert result.removed == ('age', 'work')
        assert result.n_steps == 2

    def test_selected_model(self, result):
        assert result.selected == ('hs', 'iq')
        assert result.subset == frozenset({0, 1})
        assert result.indicator == (True, True, True, False, False)

    def test_path_differences(self, result, work_signal):
        path = result.path
        assert len(path) == 3
        assert path[0] - path[1] == pytest.approx(math.log(N), abs=1e-6)
        assert path[1] - path[2] == pytest.approx(
            math.log(N) - N * math.log1p(work_signal ** 2), abs=1e-6
        )
        assert result.bic == path[-1]
        assert result.start_bic == path[0]

    def test_path_strictly_decreasing(self, result):
        assert all(a > b for a, b in zip(result.path, result.path[1:]))

    def test_start_bic_deviance_form(self, child_scores, result):
        X = np.column_stack([np.ones(N), child_scores[['hs', 'iq', 'work', 'age']].to_numpy()])
        y = child_scores['score'].to_numpy()
        beta, *_ = np.linalg.lstsq(X, y, rcond=None)
        rss = float(np.sum((y - X @ beta) ** 2))
        assert result.start_bic == pytest.approx(N * math.log(rss / N) + 5 * math.log(N), rel=1e-10)

    def test_step_tables(self, result):
        first = result.steps[0]
        assert first.removed == 3
        terms = [row.term for row in first.candidates]
        assert terms[0] == '- age'
        assert '<none>' in terms
        bics = [row.bic for row in first.candidates]
        assert bics == sorted(bics)
        last = result.steps[-1]
        assert last.removed is None
        assert last.candidates[0].term == '<none>'

    def test_info_and_backend(self, result):
        assert result.backend_name == 'cpu_backward'
        assert result.criterion == 'deviance'
        assert result.info['n_steps'] == 2
        assert result.info['models_on_path'] == 3
        assert result.warnings == ()
        assert 'elimination' in result.timing

    def test_summary(self, result):
        text = result.summary()
        assert text.startswith("Start:  BIC=")
        assert "score ~ hs + iq + work + age" in text
        assert "- age" in text
        assert "<none>" in text
        assert "Selected: score ~ hs + iq" in text
        assert "hs" in repr(result)


class TestFormsAgree:

    @pytest.mark.parametrize("kind", ['r_squared', 'rss', 'loglik'])
    def test_same_path_every_form(self, child_scores, kind):
        reference = backward_elimination(child_scores, y='score', kind='deviance')
        result = backward_elimination(child_scores, y='score', kind=kind)
        assert result.removed == reference.removed
        np.testing.assert_allclose(np.diff(result.path), np.diff(reference.path), rtol=1e-8)


class TestInputs:

    def test_datasource_input(self, child_scores):
        result = backward_elimination(DataSource.from_dataframe(child_scores), y='score')
        assert result.selected == ('hs', 'iq')

    def test_array_input(self, child_scores):
        X = child_scores[['hs', 'iq', 'work', 'age']].to_numpy()
        result = backward_elimination(X, y=child_scores['score'].to_numpy(), x=['hs', 'iq', 'work', 'age'])
        assert result.removed == ('age', 'work')

    def test_permuted_columns_same_model(self, child_scores):
        result = backward_elimination(child_scores, y='score', x=['age', 'iq', 'work', 'hs'])
        assert set(result.selected) == {'hs', 'iq'}
        assert result.removed == ('age', 'work')

    def test_unknown_kind(self, child_scores):
        with pytest.raises(ValidationError, match="kind"):
            backward_elimination(child_scores, y='score', kind='aic')

    def test_dataframe_requires_response(self, child_scores):
        with pytest.raises(ValidationError, match="response column"):
            backward_elimination(child_scores)


class TestStartAndKeep:

    def test_keep_is_never_removed(self, child_scores):
        result = backward_elimination(child_scores, y='score', keep=['age'])
        assert result.removed == ('work',)
        assert result.selected == ('hs', 'iq', 'age')
        assert all(row.term != '- age' for step in result.steps for row in step.candidates)

    def test_start_subset(self, child_scores):
        result = backward_elimination(child_scores, y='score', start=['hs', 'iq', 'work'])
        assert result.removed == ('work',)
        assert result.selected == ('hs', 'iq')

    def test_keep_outside_start(self, child_scores):
        with pytest.raises(ValidationError, match="not in the starting model"):
            backward_elimination(child_scores, y='score', start=['hs', 'iq'], keep=['age'])

    def test_empty_start(self, child_scores):
        result = backward_elimination(child_scores, y='score', start=[])
        assert result.selected == ()
        assert result.path == (result.bic,)


class TestTies:
    """Predictors with identical scores are removed in column order."""

    @pytest.fixture
    def tied_data(self, rng, orthonormal_complement):
        n = 200
        a = rng.standard_normal(n)
        y = 1.0 + 2.0 * a + rng.standard_normal(n)
        Z = orthonormal_complement(rng, np.column_stack([np.ones(n), a, y]), 2)
        return a, Z[:, 0], Z[:, 1], y

    def test_first_column_removed_first(self, tied_data):
        a, z1, z2, y = tied_data
        X = np.column_stack([a, z1, z2])
        result = backward_elimination(X, y=y, x=['a', 'z1', 'z2'])
        assert result.removed == ('z1', 'z2')

    def test_reversed_order_reverses_removal(self, tied_data):
        a, z1, z2, y = tied_data
        X = np.column_stack([a, z2, z1])
        result = backward_elimination(X, y=y, x=['a', 'z2', 'z1'])
        assert result.removed == ('z2', 'z1')


class TestSmallN:
    """n = 4, k = 3: the full model has n <= p + 1 and cannot be scored."""

    @pytest.fixture
    def small(self, rng):
        return rng.standard_normal((4, 3)), rng.standard_normal(4)

    def test_unscorable_start_is_skipped(self, small):
        X, y = small
        with pytest.warns(RuntimeWarning, match="skipped"):
            result = backward_elimination(X, y=y)
        assert result.path[0] == math.inf
        assert math.isfinite(result.bic)
        assert result.n_steps >= 1
        assert result.steps[0].candidates[0].term.startswith('- ')
        assert any("skipped" in w for w in result.warnings)

    def test_two_unscorable_levels(self):
        # n = 4, k = 4: the full model and every three-predictor model are unscorable
        rng = np.random.default_rng(0)
        X, y = rng.standard_normal((4, 4)), rng.standard_normal(4)
        with pytest.warns(RuntimeWarning, match="skipped"):
            result = backward_elimination(X, y=y, kind="deviance")
        assert result.path[:2] == (math.inf, math.inf)
        assert result.removed[0] == "x1"
        assert len(result.selected) <= 2
        assert math.isfinite(result.bic)

        with pytest.warns(RuntimeWarning, match="skipped"):
            subsets = best_subset(X, y=y, kind="deviance")
        scored = {m.subset: m.bic for m in subsets.models}
        assert result.bic == pytest.approx(scored[result.subset], rel=1e-12)
        assert subsets.bic <= result.bic

    def test_keep_pins_unscorable_model(self):
        rng = np.random.default_rng(0)
        X, y = rng.standard_normal((4, 4)), rng.standard_normal(4)
        with pytest.warns(RuntimeWarning, match="could not be scored"):
            result = backward_elimination(X, y=y, keep=[0, 1, 2])
        assert result.removed == ("x4",)
        assert result.selected == ("x1", "x2", "x3")
        assert result.bic == math.inf

    def test_no_warning_when_every_model_scores(self, child_scores):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            backward_elimination(SelectionDesign.from_dataframe(child_scores, y='score'))


class TestRankDeficient:

    def test_duplicated_column_warns(self, child_scores):
        df = child_scores.copy()
        df['hs_iq'] = df['hs'] + df['iq']
        with pytest.warns(RuntimeWarning, match="rank-deficient"):
            result = backward_elimination(df, y='score')
        assert any("rank-deficient" in w for w in result.warnings)
        assert math.isfinite(result.bic)
