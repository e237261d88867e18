"""
Linear algebra kernels for bicreg.

CPU functions use NumPy/SciPy (LAPACK under the hood). Each operation
returns a structured result dataclass and raises immediately with a
clear message on failure.
"""

from bicreg.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    qr_solve_cpu,
)

__all__ = [
    "QRResult",
    "qr_cpu",
    "qr_solve_cpu",
]
