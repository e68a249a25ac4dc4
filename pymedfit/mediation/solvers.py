"""
Solver entry points for mediation analysis.

fit_mediation(): fit the mediator and outcome models, extract MediationData.
med(): fit, optionally bootstrap the indirect effect, in one call.
"""

from __future__ import annotations

from typing import Any, Sequence

from pymedfit.bootstrap.solvers import bootstrap
from pymedfit.core.exceptions import MissingRequiredInput, ValidationError
from pymedfit.mediation._ols import fit_ols
from pymedfit.mediation.data import MediationData
from pymedfit.mediation.effects import indirect_statistic
from pymedfit.mediation.extract import extract_mediation
from pymedfit.mediation.solution import MediationAnalysis


def _check_variables(
    treatment: str,
    mediator: str,
    outcome: str,
    covariates: Sequence[str],
) -> None:
    for label, value in (('treatment', treatment), ('mediator', mediator),
                         ('outcome', outcome)):
        if not isinstance(value, str) or not value:
            raise ValidationError(f"{label}: must be a variable name, got {value!r}")
    for c in covariates:
        if not isinstance(c, str) or not c:
            raise ValidationError(f"covariates: must be variable names, got {c!r}")

    roles = [treatment, mediator, outcome, *covariates]
    if len(set(roles)) != len(roles):
        raise ValidationError(
            f"treatment, mediator, outcome, covariates: must be distinct "
            f"variables, got {roles}"
        )


def fit_mediation(
    data: Any,
    treatment: str,
    mediator: str,
    outcome: str,
    covariates: Sequence[str] | None = None,
) -> MediationData:
    """
    Fit a simple mediation model by OLS.

    Fits
        mediator ~ 1 + treatment + covariates
        outcome  ~ 1 + treatment + mediator + covariates

    Parameters
    ----------
    data : mapping of column name -> values, or DataFrame
        Numeric columns of equal length.
    treatment, mediator, outcome : str
        Variable names.
    covariates : sequence of str or None
        Additional adjustment variables in both models.

    Returns
    -------
    MediationData
        Paths a = m_<treatment>, b = y_<mediator>, c' = y_<treatment>,
        with the block-diagonal covariance of all coefficients.

    Raises
    ------
    MissingRequiredInput
        data is None.
    ValidationError
        Variables missing, non-numeric, non-finite, or not distinct.
    SingularMatrixError
        Collinear predictors.
    """
    if data is None:
        raise MissingRequiredInput(
            "data is required to fit a mediation model", argument='data',
        )
    covariates = list(covariates or [])
    _check_variables(treatment, mediator, outcome, covariates)

    model_m = fit_ols(data, mediator, [treatment, *covariates])
    model_y = fit_ols(data, outcome, [treatment, mediator, *covariates])

    return extract_mediation(
        model_m, model_y,
        treatment=treatment, mediator=mediator, outcome=outcome, data=data,
    )


def med(
    data: Any,
    treatment: str,
    mediator: str,
    outcome: str,
    covariates: Sequence[str] | None = None,
    *,
    boot: bool = False,
    n_boot: int = 1000,
    ci_level: float = 0.95,
    seed: int | None = None,
) -> MediationAnalysis:
    """
    Mediation analysis in one call.

    Fits the models with fit_mediation() and, if boot is True, runs a
    parametric bootstrap of the indirect effect a * b.

    Usage:
        result = med(data, "X", "M", "Y", boot=True, seed=42)
        print(result.quick())
    """
    md = fit_mediation(data, treatment, mediator, outcome, covariates)

    boot_result = None
    if boot:
        boot_result = bootstrap(
            indirect_statistic(md),
            "parametric",
            parameter_estimate=md.parameters,
            n_boot=n_boot,
            ci_level=ci_level,
            seed=seed,
        )

    return MediationAnalysis(mediation_data=md, bootstrap=boot_result)
