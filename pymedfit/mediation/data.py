"""
MediationData: a ParameterEstimate plus the structure of a simple
mediation model X -> M -> Y.

Parameter naming convention (as produced by extract_mediation):
    m_<name>  coefficient in the mediator model  M ~ X + ...
    y_<name>  coefficient in the outcome model   Y ~ X + M + ...

so a = m_<treatment>, b = y_<mediator>, c' = y_<treatment>.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pymedfit.bootstrap.estimate import ParameterEstimate
from pymedfit.core.exceptions import ValidationError
from pymedfit.core.validation import check_open_unit_interval

COEF_TYPES = ("paths", "effects", "all")


def _check_choice(value: Any, name: str, choices: tuple[str, ...]) -> str:
    if value not in choices:
        raise ValidationError(
            f"{name}: must be one of {', '.join(map(repr, choices))}, got {value!r}"
        )
    return value


def _check_name(value: Any, name: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{name}: must be a non-empty string, got {value!r}")


def _check_sigma(value: Any, name: str) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name}: must be a number or None, got {type(value).__name__}")
    if not value >= 0:
        raise ValidationError(f"{name}: must be non-negative, got {value}")


@dataclass(frozen=True, eq=False)
class MediationData:
    """
    Standardized mediation model structure.

    Attributes:
        parameters: All coefficients of both models with their joint
            covariance (block-diagonal for separately fitted models).
        treatment, mediator, outcome: Variable names.
        mediator_predictors: Predictors in the mediator model.
        outcome_predictors: Predictors in the outcome model.
        sigma_m, sigma_y: Residual SDs of the Gaussian models, if known.
    """
    parameters: ParameterEstimate
    treatment: str
    mediator: str
    outcome: str
    mediator_predictors: tuple[str, ...] = ()
    outcome_predictors: tuple[str, ...] = ()
    sigma_m: float | None = None
    sigma_y: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.parameters, ParameterEstimate):
            raise ValidationError(
                f"parameters: must be a ParameterEstimate, "
                f"got {type(self.parameters).__name__}"
            )
        _check_name(self.treatment, 'treatment')
        _check_name(self.mediator, 'mediator')
        _check_name(self.outcome, 'outcome')
        _check_sigma(self.sigma_m, 'sigma_m')
        _check_sigma(self.sigma_y, 'sigma_y')

        for label, key in (('a path', self.a_name), ('b path', self.b_name),
                           ("c' path", self.c_prime_name)):
            if key not in self.parameters.estimates:
                raise ValidationError(
                    f"parameters: {label} estimate {key!r} not found; "
                    f"available: {list(self.parameters.names)}"
                )

        object.__setattr__(self, 'mediator_predictors', tuple(self.mediator_predictors))
        object.__setattr__(self, 'outcome_predictors', tuple(self.outcome_predictors))

    # --- Parameter names ---

    @property
    def a_name(self) -> str:
        return f"m_{self.treatment}"

    @property
    def b_name(self) -> str:
        return f"y_{self.mediator}"

    @property
    def c_prime_name(self) -> str:
        return f"y_{self.treatment}"

    # --- Paths ---

    @property
    def a_path(self) -> float:
        """Effect of treatment on mediator."""
        return self.parameters[self.a_name]

    @property
    def b_path(self) -> float:
        """Effect of mediator on outcome, adjusting for treatment."""
        return self.parameters[self.b_name]

    @property
    def c_prime(self) -> float:
        """Direct effect of treatment on outcome, adjusting for mediator."""
        return self.parameters[self.c_prime_name]

    @property
    def n_obs(self) -> int | None:
        return self.parameters.n_obs

    @property
    def converged(self) -> bool:
        return self.parameters.converged

    @property
    def source(self) -> str | None:
        return self.parameters.source

    # --- Model accessors ---

    def coef(self, type: str = "paths") -> dict[str, float]:
        """
        Coefficients by name.

        Args:
            type: "paths" for a, b, c_prime; "effects" for nie, nde, te;
                "all" for every parameter of both models.
        """
        _check_choice(type, 'type', COEF_TYPES)
        if type == "paths":
            return {"a": self.a_path, "b": self.b_path, "c_prime": self.c_prime}
        if type == "effects":
            from pymedfit.mediation.effects import effects
            return effects(self)
        return self.parameters.as_dict()

    def vcov(self) -> NDArray[np.floating[Any]]:
        """Joint covariance of all parameters, as a writable copy."""
        return np.array(self.parameters.covariance, copy=True)

    def _path_covariance(self) -> NDArray[np.floating[Any]]:
        # rows/columns ordered a, b, c'
        index = [self.parameters.names.index(key)
                 for key in (self.a_name, self.b_name, self.c_prime_name)]
        return self.parameters.covariance[np.ix_(index, index)]

    def confint(self, level: float = 0.95, parm: str = "paths") -> dict[str, tuple[float, float]]:
        """
        Normal-approximation (Wald) confidence intervals.

        Intervals are estimate +/- z * SE with z the (1 + level) / 2
        standard normal quantile. For parm="effects" the standard errors
        come from the delta method on (a, b, c'); a RuntimeWarning is
        issued since a*b is not normally distributed in small samples.

        Args:
            level: Confidence level in (0, 1).
            parm: "paths" (a, b, c_prime) or "effects" (nie, nde, te).

        Returns:
            Name -> (lower, upper).
        """
        level = check_open_unit_interval(level, 'level')
        _check_choice(parm, 'parm', ("paths", "effects"))

        if parm == "paths":
            estimates = self.coef("paths")
            se = dict(zip(estimates, np.sqrt(np.diag(self._path_covariance())).tolist()))
        else:
            warnings.warn(
                "Normal approximation for the indirect effect may be inaccurate; "
                "consider bootstrap() for the product of paths.",
                RuntimeWarning,
                stacklevel=2,
            )
            estimates = self.coef("effects")
            a, b = self.a_path, self.b_path
            gradients = np.array([
                [b, a, 0.0],  # nie = a * b
                [0.0, 0.0, 1.0],  # nde = c'
                [b, a, 1.0],  # te = a * b + c'
            ])
            var = np.einsum('ij,jk,ik->i', gradients, self._path_covariance(), gradients)
            se = dict(zip(estimates, np.sqrt(np.maximum(var, 0.0)).tolist()))

        z = float(sp_stats.norm.ppf(1.0 - (1.0 - level) / 2.0))
        return {
            name: (est - z * se[name], est + z * se[name])
            for name, est in estimates.items()
        }

    # --- Tidy output ---

    def tidy(
        self,
        type: str = "all",
        conf_int: bool = False,
        conf_level: float = 0.95,
    ) -> list[dict[str, Any]]:
        """
        One record per path coefficient and/or effect.

        Each record has term, estimate, std_error and, with conf_int,
        conf_low and conf_high. Effects carry no standard error here
        (std_error and the bounds are None); use confint(parm="effects")
        or bootstrap() for those.

        Args:
            type: "all" (paths then effects), "paths", or "effects".
            conf_int: Add Wald interval bounds for the paths.
            conf_level: Level of those intervals.
        """
        _check_choice(type, 'type', COEF_TYPES)
        if conf_int:
            conf_level = check_open_unit_interval(conf_level, 'conf_level')
        records: list[dict[str, Any]] = []

        if type in ("paths", "all"):
            ci = self.confint(conf_level, "paths") if conf_int else {}
            se = np.sqrt(np.diag(self._path_covariance())).tolist()
            for (term, est), std_error in zip(self.coef("paths").items(), se):
                records.append({"term": term, "estimate": est, "std_error": std_error})
                if conf_int:
                    records[-1]["conf_low"], records[-1]["conf_high"] = ci[term]

        if type in ("effects", "all"):
            for term, est in self.coef("effects").items():
                records.append({"term": term, "estimate": est, "std_error": None})
                if conf_int:
                    records[-1]["conf_low"] = records[-1]["conf_high"] = None

        return records

    def glance(self) -> dict[str, Any]:
        """One-row summary: nie, nde, te, pm, n_obs, converged."""
        from pymedfit.mediation.effects import effects, pm

        row = effects(self)
        row["pm"] = pm(self)
        row["n_obs"] = self.n_obs
        row["converged"] = self.converged
        return row

    # --- Display ---

    def summary(self) -> str:
        lines = [
            "MediationData",
            "=============",
            "",
            "Path coefficients:",
            f"  a (X -> M):      {self.a_path:8.4f}",
            f"  b (M -> Y|X):    {self.b_path:8.4f}",
            f"  c' (X -> Y|M):   {self.c_prime:8.4f}",
            f"  Indirect (a*b):  {self.a_path * self.b_path:8.4f}",
            "",
            "Variables:",
            f"  Treatment: {self.treatment}",
            f"  Mediator:  {self.mediator}",
            f"  Outcome:   {self.outcome}",
            "",
            "Model info:",
            f"  N observations: {self.n_obs if self.n_obs is not None else 'unknown'}",
            f"  Converged:      {'Yes' if self.converged else 'No'}",
            f"  Source:         {self.source or 'unknown'}",
        ]
        if self.sigma_m is not None or self.sigma_y is not None:
            lines += ["", "Residual SDs:"]
            if self.sigma_m is not None:
                lines.append(f"  Mediator model: {self.sigma_m:8.4f}")
            if self.sigma_y is not None:
                lines.append(f"  Outcome model:  {self.sigma_y:8.4f}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MediationData(treatment={self.treatment!r}, mediator={self.mediator!r}, "
            f"outcome={self.outcome!r}, a={self.a_path:.4g}, b={self.b_path:.4g}, "
            f"c_prime={self.c_prime:.4g})"
        )
