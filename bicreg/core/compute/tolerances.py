"""
Tolerance tiers for numerical comparison.

Used by the score tie detection in model search, by the conditioning
flag on regression fits, and by the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str

    def close(self, a: float, b: float) -> bool:
        """True when |a - b| <= atol + rtol·|b|."""
        return abs(a - b) <= self.atol + self.rtol * abs(b)


# Reference double-precision path
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision',
)

# Condition number above which a design is flagged as ill-conditioned,
# e.g. raw IQ scores next to a 0/1 column.
ILL_CONDITIONED_THRESHOLD = 1e4
