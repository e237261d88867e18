"""
QR decomposition kernels.

Least squares for every subset fit goes through here. Column-pivoted
QR (LAPACK geqp3 via SciPy) gives a numerical rank, so a subset whose
columns are collinear is detected instead of returning garbage.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import linalg as sla

from bicreg.core.exceptions import SingularMatrixError


@dataclass(frozen=True)
class QRResult:
    """
    Result of a (pivoted) QR decomposition.

    X[:, pivot] = Q @ R

    Attributes:
        Q: Orthonormal columns (n x k, k = min(n, p))
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from the R diagonal
        pivot: Column permutation (identity when pivoting is off)
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int
    pivot: NDArray[np.intp]

    @property
    def condition_estimate(self) -> float:
        """Ratio of largest to smallest |R_ii| over the numerical rank."""
        diag_R = np.abs(np.diag(self.R))[:self.rank]
        if self.rank == 0 or diag_R.min() == 0:
            return float('inf')
        return float(diag_R.max() / diag_R.min())


def _numerical_rank(R: NDArray[np.floating[Any]], shape: tuple[int, int]) -> int:
    diag_R = np.abs(np.diag(R))
    if len(diag_R) == 0 or diag_R.max() == 0:
        return 0
    tol = max(shape) * np.finfo(R.dtype).eps * diag_R.max()
    return int(np.sum(diag_R > tol))


def qr_cpu(X: NDArray[np.floating[Any]], *, pivoting: bool = True) -> QRResult:
    """
    Economy QR decomposition using LAPACK.

    Args:
        X: Matrix to decompose (n x p)
        pivoting: Use column pivoting (rank revealing)

    Returns:
        QRResult with Q, R, numerical rank and pivot
    """
    if pivoting:
        Q, R, pivot = sla.qr(X, mode='economic', pivoting=True)
    else:
        Q, R = sla.qr(X, mode='economic')
        pivot = np.arange(X.shape[1])

    return QRResult(Q=Q, R=R, rank=_numerical_rank(R, X.shape), pivot=np.asarray(pivot))


def qr_solve_cpu(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    *,
    check_rank: bool,
    qr: QRResult | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Solve min_β ||y - Xβ||² via QR decomposition.

        X[:, pivot] = QR
        β[pivot[:r]] = R[:r, :r]⁻¹ (Q'y)[:r]

    Aliased coefficients (beyond the numerical rank) are NaN, the way R's
    lm() reports them.

    Args:
        X: Design matrix (n x p), n >= p
        y: Response vector (n,)
        check_rank: If True, raise SingularMatrixError on rank-deficient X
        qr: Precomputed decomposition of X, if the caller already has one

    Returns:
        Coefficient vector β (p,)

    Raises:
        SingularMatrixError: If X is rank-deficient and check_rank=True
    """
    p = X.shape[1]
    if qr is None:
        qr = qr_cpu(X)

    if check_rank and qr.rank < p:
        raise SingularMatrixError(
            f"Design matrix is rank-deficient: rank={qr.rank}, expected={p}. "
            f"This indicates perfect multicollinearity.",
            matrix_name='X',
            rank=qr.rank,
            expected_rank=p,
        )

    r = qr.rank
    Qty = qr.Q.T @ y
    beta = np.full(p, np.nan, dtype=np.float64)
    if r > 0:
        beta[qr.pivot[:r]] = sla.solve_triangular(qr.R[:r, :r], Qty[:r], lower=False)
    return beta
