"""
User-facing model-selection solution types.

Each solution wraps a Result[Params] plus the design it was computed on,
and provides named accessors and R-style printed output.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

from bicreg.core.result import Result
from bicreg.selection._common import ModelEntry, StepParams, StepRecord, SubsetParams
from bicreg.selection.design import INTERCEPT, SelectionDesign, Subset


def _formula(design: SelectionDesign, subset: Subset) -> str:
    terms = design.subset_names(subset)
    return f"{design.response} ~ {' + '.join(terms) if terms else '1'}"


# =====================================================================
# StepSolution  (backward elimination)
# =====================================================================


@dataclass
class StepSolution:
    """
    Result of backward elimination by BIC.

    Produced by backward_elimination().
    """
    _result: Result[StepParams]
    _design: SelectionDesign

    @property
    def subset(self) -> Subset:
        """Selected predictor indices."""
        return self._result.params.final

    @property
    def selected(self) -> tuple[str, ...]:
        """Selected predictor names, in column order."""
        return self._design.subset_names(self.subset)

    @property
    def indicator(self) -> tuple[bool, ...]:
        """Inclusion vector over [intercept, x_1, ..., x_k]."""
        return self._design.indicator(self.subset)

    @property
    def bic(self) -> float:
        """BIC of the selected model."""
        return self._result.params.final_bic

    @property
    def start_bic(self) -> float:
        return self._result.params.passes[0].bic

    @property
    def removed(self) -> tuple[str, ...]:
        """Predictor names in the order they were eliminated."""
        return tuple(self._design.names[i] for i in self._result.params.removed)

    @property
    def path(self) -> tuple[float, ...]:
        """BIC of each model along the elimination path, start to final."""
        passes = self._result.params.passes
        return tuple(p.bic for p in passes)

    @property
    def steps(self) -> tuple[StepRecord, ...]:
        return self._result.params.passes

    @property
    def n_steps(self) -> int:
        """Number of predictors removed."""
        return len(self._result.params.removed)

    @property
    def criterion(self) -> str:
        return self._result.params.criterion

    @property
    def design(self) -> SelectionDesign:
        return self._design

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

    def summary(self) -> str:
        """Step-by-step trace in the layout of R's step()."""
        lines: list[str] = []
        for i, record in enumerate(self.steps):
            label = "Start:  " if i == 0 else "Step:  "
            lines.append(f"{label}BIC={record.bic:.2f}")
            lines.append(_formula(self._design, record.subset))
            lines.append("")
            lines.append(f"{'':<16} {'Df':>3} {'Sum of Sq':>12} {'RSS':>12} {'BIC':>10}")
            current_rss = next(r.rss for r in record.candidates if r.removed is None)
            for row in record.candidates:
                if row.removed is None:
                    lines.append(f"{row.term:<16} {'':>3} {'':>12} {row.rss:>12.1f} {row.bic:>10.2f}")
                else:
                    delta = row.rss - current_rss
                    lines.append(
                        f"{row.term:<16} {row.df:>3} {delta:>12.1f} {row.rss:>12.1f} {row.bic:>10.2f}"
                    )
            lines.append("")

        lines.append(f"Selected: {_formula(self._design, self.subset)}")
        lines.append(f"Criterion: BIC ({self.criterion} form), n = {self._design.n}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"StepSolution(selected={list(self.selected)}, bic={self.bic:.4f})"


# =====================================================================
# SubsetSolution  (best subset / BIC model averaging)
# =====================================================================


@dataclass
class SubsetSolution:
    """
    Result of best-subset selection with BIC posterior model probabilities.

    Produced by best_subset().
    """
    _result: Result[SubsetParams]
    _design: SelectionDesign

    @property
    def subset(self) -> Subset:
        """Highest posterior probability model (minimum BIC under a uniform prior)."""
        return self._result.params.best

    @property
    def selected(self) -> tuple[str, ...]:
        return self._design.subset_names(self.subset)

    @property
    def indicator(self) -> tuple[bool, ...]:
        """Inclusion vector over [intercept, x_1, ..., x_k] of the best model."""
        return self._design.indicator(self.subset)

    @property
    def bic(self) -> float:
        return self._result.params.best_bic

    @property
    def models(self) -> tuple[ModelEntry, ...]:
        """Every scored model, best first."""
        return self._result.params.models

    def top(self, n: int = 5) -> tuple[ModelEntry, ...]:
        return self.models[:n]

    @property
    def coefficient_names(self) -> tuple[str, ...]:
        return (INTERCEPT,) + self._design.names

    @property
    def inclusion_probs(self) -> dict[str, float]:
        """Marginal posterior inclusion probability per coefficient."""
        return dict(zip(self.coefficient_names, self._result.params.inclusion_probs))

    @property
    def median_model(self) -> tuple[str, ...]:
        """Predictors with inclusion probability >= 0.5."""
        return self._design.subset_names(self._result.params.median_model)

    @property
    def median_indicator(self) -> tuple[bool, ...]:
        return self._design.indicator(self._result.params.median_model)

    @property
    def posterior_probs(self) -> np.ndarray:
        return np.array([m.posterior_prob for m in self.models])

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def modelprior(self) -> str:
        return self._result.params.modelprior

    @property
    def n_models(self) -> int:
        return self._result.params.n_models_visited

    @property
    def design(self) -> SelectionDesign:
        return self._design

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

    def summary(self, n_models: int = 5) -> str:
        """
        Table of the top models in the layout of BAS's summary():
        one row per coefficient (1 = included), P(B != 0 | Y) first,
        followed by Bayes factor to the best model, posterior
        probability, R², dimension and log marginal likelihood.
        """
        top = self.top(n_models)
        best_lm = top[0].log_marginal
        width = 10
        header = f"{'':<14} {'P(B!=0|Y)':>10}" + "".join(
            f"{f'model {i + 1}':>{width}}" for i in range(len(top))
        )
        lines = [
            f"Best-subset selection by BIC ({self.method}, {self.modelprior} prior)",
            "=" * len(header),
            header,
        ]
        probs = self._result.params.inclusion_probs
        for j, name in enumerate(self.coefficient_names):
            row = f"{name:<14} {probs[j]:>10.4f}"
            for m in top:
                included = j == 0 or (j - 1) in m.subset
                row += f"{int(included):>{width}}"
            lines.append(row)

        def stat_row(label: str, values: list[str]) -> str:
            return f"{label:<14} {'NA':>10}" + "".join(f"{v:>{width}}" for v in values)

        lines.append(stat_row("BF", [
            f"{np.exp(m.log_marginal - best_lm):.4g}" for m in top
        ]))
        lines.append(stat_row("PostProbs", [f"{m.posterior_prob:.4f}" for m in top]))
        lines.append(stat_row("R2", [f"{m.r_squared:.4f}" for m in top]))
        lines.append(stat_row("dim", [str(m.size + 1) for m in top]))
        lines.append(stat_row("logmarg", [f"{m.log_marginal:.3f}" for m in top]))
        lines.append("")
        lines.append(f"Models scored: {self.n_models}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"SubsetSolution(selected={list(self.selected)}, bic={self.bic:.4f}, "
            f"n_models={self.n_models})"
        )
