"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression dataset for basic tests (intercept column included)."""
    n = 100
    X = np.column_stack([np.ones(n), rng.standard_normal((n, 2))])
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2
    X = np.column_stack([np.ones(n), x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y


def orthonormal_complement(rng, basis, n_cols):
    """Columns orthonormal to each other and to the column span of ``basis``."""
    Z = rng.standard_normal((basis.shape[0], n_cols))
    Q, _ = np.linalg.qr(np.column_stack([basis, Z]))
    return Q[:, basis.shape[1]:]


# Correlation of `work` with the {hs, iq} residual; adding work to the
# {hs, iq} model divides RSS by exactly (1 + WORK_SIGNAL**2).
WORK_SIGNAL = 0.05


@pytest.fixture
def work_signal():
    return WORK_SIGNAL


@pytest.fixture(name="orthonormal_complement")
def orthonormal_complement_fixture():
    """The orthonormal_complement helper, for tests that build exact designs."""
    return orthonormal_complement


@pytest.fixture
def child_scores():
    """
    Child test scores against mother's characteristics, n = 434.

    Built so that the selection outcome is known exactly:
        hs, iq   strong effects on score
        work     uncorrelated with hs and iq; explains a sliver of the
                 {hs, iq} residual (below the ln(n) penalty)
        age      exactly orthogonal to score and every other column
    """
    rng = np.random.default_rng(20240131)
    n = 434
    hs = (rng.random(n) < 0.79).astype(np.float64)
    iq = rng.normal(100.0, 15.0, n)
    score = 26.0 + 12.0 * hs + 0.56 * iq + rng.normal(0.0, 15.0, n)

    base = np.column_stack([np.ones(n), hs, iq])
    beta, *_ = np.linalg.lstsq(base, score, rcond=None)
    resid = score - base @ beta
    resid_unit = resid / np.linalg.norm(resid)

    Z = orthonormal_complement(rng, np.column_stack([base, score]), 2)
    work = 2.9 + 1.1 * np.sqrt(n) * (Z[:, 0] + WORK_SIGNAL * resid_unit)
    age = 22.8 + 2.7 * np.sqrt(n) * Z[:, 1]

    return pd.DataFrame({
        'score': score,
        'hs': hs,
        'iq': iq,
        'work': work,
        'age': age,
    })
