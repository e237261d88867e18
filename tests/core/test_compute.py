"""
Tests for shared compute infrastructure.

Validates:
    - Timer: sections accumulate, result() before stop() raises
    - timed(): context-manager wrapper
    - ToleranceTier.close()
    - QR kernels: rank detection, aliased coefficients, rank check
"""

import numpy as np
import pytest

from bicreg.core.compute import Timer, timed
from bicreg.core.compute.linalg import qr_cpu, qr_solve_cpu
from bicreg.core.compute.tolerances import CPU_FP64
from bicreg.core.exceptions import SingularMatrixError


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        for _ in range(3):
            with timer.section('scoring'):
                pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'scoring'}
        assert result['scoring'] >= 0.0

    def test_result_before_stop_raises(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()

    def test_stop_before_start_raises(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()

    def test_timed(self):
        with timed() as timer:
            pass
        assert timer.result()['total_seconds'] >= 0.0


class TestTolerance:

    def test_close_within_relative_tolerance(self):
        assert CPU_FP64.close(1000.0 + 1e-9, 1000.0)

    def test_not_close(self):
        assert not CPU_FP64.close(1000.001, 1000.0)


class TestQR:

    def test_full_rank_solution(self, simple_regression_data):
        X, y, _ = simple_regression_data
        beta = qr_solve_cpu(X, y, check_rank=True)
        expected, *_ = np.linalg.lstsq(X, y, rcond=None)
        np.testing.assert_allclose(beta, expected, rtol=CPU_FP64.rtol, atol=1e-10)

    def test_rank_detected(self, collinear_data):
        X, _ = collinear_data
        qr = qr_cpu(X)
        assert qr.rank == 3
        assert qr.condition_estimate < np.inf

    def test_aliased_coefficient_is_nan(self, collinear_data):
        X, y = collinear_data
        beta = qr_solve_cpu(X, y, check_rank=False)
        assert np.sum(np.isnan(beta)) == 1

    def test_check_rank_raises(self, collinear_data):
        X, y = collinear_data
        with pytest.raises(SingularMatrixError) as exc_info:
            qr_solve_cpu(X, y, check_rank=True)
        assert exc_info.value.rank == 3
        assert exc_info.value.expected_rank == 4

    def test_unpivoted_identity_permutation(self, simple_regression_data):
        X, _, _ = simple_regression_data
        qr = qr_cpu(X, pivoting=False)
        np.testing.assert_array_equal(qr.pivot, [0, 1, 2])
