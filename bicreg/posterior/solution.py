"""
User-facing posterior coefficient summary.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from bicreg.core.result import Result
from bicreg.posterior._common import CoefficientPosterior, PosteriorParams
from bicreg.selection.design import SelectionDesign, Subset

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class PosteriorSolution:
    """
    Posterior mean, SD and credible interval per coefficient of one model.

    Produced by coef_posterior(). Coefficients of predictors outside the
    model are reported as exactly zero with a zero-width interval.
    """
    _result: Result[PosteriorParams]
    _design: SelectionDesign

    @property
    def coefficients(self) -> tuple[CoefficientPosterior, ...]:
        return self._result.params.coefficients

    def __getitem__(self, name: str) -> CoefficientPosterior:
        for coef in self.coefficients:
            if coef.name == name:
                return coef
        raise KeyError(
            f"No coefficient '{name}'. Available: {[c.name for c in self.coefficients]}"
        )

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.coefficients)

    @property
    def mean(self) -> NDArray[np.floating[Any]]:
        return np.array([c.mean for c in self.coefficients])

    @property
    def sd(self) -> NDArray[np.floating[Any]]:
        return np.array([c.sd for c in self.coefficients])

    @property
    def lower(self) -> NDArray[np.floating[Any]]:
        return np.array([c.lower for c in self.coefficients])

    @property
    def upper(self) -> NDArray[np.floating[Any]]:
        return np.array([c.upper for c in self.coefficients])

    @property
    def included(self) -> tuple[bool, ...]:
        return tuple(c.included for c in self.coefficients)

    @property
    def excludes_zero(self) -> dict[str, bool]:
        return {c.name: c.excludes_zero for c in self.coefficients}

    @property
    def subset(self) -> Subset:
        return self._result.params.subset

    @property
    def df(self) -> int:
        return self._result.params.df

    @property
    def sigma2_mean(self) -> float:
        return self._result.params.sigma2_mean

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def _interval_labels(self) -> tuple[str, str]:
        tail = (1.0 - self.conf_level) / 2.0 * 100.0
        return f"{tail:g}%", f"{100.0 - tail:g}%"

    def to_dataframe(self) -> 'pd.DataFrame':
        """Coefficient table indexed by name."""
        import pandas as pd
        lo, hi = self._interval_labels()
        return pd.DataFrame(
            {
                'post mean': self.mean,
                'post SD': self.sd,
                lo: self.lower,
                hi: self.upper,
                'included': self.included,
            },
            index=pd.Index(self.names, name='coefficient'),
        )

    def summary(self) -> str:
        """Coefficient table in the layout of BAS's coef() printout."""
        lo, hi = self._interval_labels()
        params = self._result.params
        lines = [
            f"Marginal posterior summaries of coefficients ({params.conf_level:.0%} intervals)",
            "=" * 64,
            f"{'':<14} {'post mean':>12} {'post SD':>12} {lo:>11} {hi:>11}",
            "-" * 64,
        ]
        for c in self.coefficients:
            lines.append(
                f"{c.name:<14} {c.mean:>12.6g} {c.sd:>12.6g} {c.lower:>11.6g} {c.upper:>11.6g}"
            )
        lines.append("-" * 64)
        lines.append(
            f"Residual df: {params.df}  t quantile: {params.t_quantile:.4f}  "
            f"E[sigma^2|y]: {params.sigma2_mean:.4f}"
        )
        if params.centered:
            lines.append("Intercept reported for centred predictors (mean response).")
        return "\n".join(lines)

    def __repr__(self) -> str:
        inc = [c.name for c in self.coefficients if c.included]
        return f"PosteriorSolution(included={inc}, df={self.df})"
