"""
CPU reference backend for linear regression.

Uses column-pivoted QR decomposition via LAPACK (through SciPy) to solve
the least squares problem. Replicates R's lm(): aliased coefficients of
a rank-deficient design come back as NaN rather than raising.
"""

from typing import Any
import numpy as np

from bicreg.core.result import Result
from bicreg.core.compute.timing import Timer
from bicreg.core.compute.tolerances import ILL_CONDITIONED_THRESHOLD
from bicreg.core.compute.linalg.qr import qr_solve_cpu, qr_cpu
from bicreg.regression.design import Design
from bicreg.regression.solution import LinearParams


class CPUQRBackend:
    """
    CPU backend using QR decomposition.

    Implements the Backend protocol for Design -> LinearParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: Design) -> Result[LinearParams]:
        """
        Solve OLS via pivoted QR decomposition.

        Algorithm:
            1. Compute QR decomposition: X[:, pivot] = QR
            2. Solve: β = R⁻¹ Q'y over the numerical rank
            3. Compute residuals, fitted values, and diagnostics

        Args:
            design: Validated regression design

        Returns:
            Result containing LinearParams
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n = design.n
        warnings_list: list[str] = []

        with timer.section('qr_decomposition'):
            qr_result = qr_cpu(X)

        with timer.section('solve'):
            coefficients = qr_solve_cpu(X, y, check_rank=False, qr=qr_result)

        with timer.section('residuals'):
            active = np.where(np.isnan(coefficients), 0.0, coefficients)
            fitted_values = X @ active
            residuals = y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            y_mean = np.mean(y)
            tss = float(np.sum((y - y_mean) ** 2))

        timer.stop()

        if qr_result.rank < design.p:
            aliased = [design.names[i] for i in qr_result.pivot[qr_result.rank:]]
            warnings_list.append(
                f"rank-deficient design (rank {qr_result.rank} < {design.p}); "
                f"aliased: {aliased}"
            )

        condition = qr_result.condition_estimate

        params = LinearParams(
            coefficients=coefficients,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            rank=qr_result.rank,
            df_residual=n - qr_result.rank,
        )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
            'pivot': qr_result.pivot.tolist(),
            'condition_estimate': condition,
            'ill_conditioned': condition > ILL_CONDITIONED_THRESHOLD,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
