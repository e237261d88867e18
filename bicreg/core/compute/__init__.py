"""
Shared compute infrastructure for bicreg.

Timing utilities, tolerance tiers and linear algebra kernels shared by
the regression, selection and posterior domains.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical comparison tiers
    linalg: Linear algebra kernels (QR)
"""

from bicreg.core.compute.timing import Timer, timed

__all__ = [
    "Timer",
    "timed",
]
