"""
Extraction of MediationData from fitted models.

Extractors are registered per model type and looked up along the model's
MRO, so a subclass of a registered type uses its parent's extractor
unless it registers its own. Registration happens at import time; the
bootstrap engine never sees this registry, only the ParameterEstimate
inside the MediationData an extractor returns.

Usage:
    @register_extractor(MyFit)
    def _extract_myfit(model_m, model_y, *, treatment, mediator, outcome, data):
        ...
        return MediationData(...)
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np
from scipy.linalg import block_diag

from pymedfit.bootstrap.estimate import ParameterEstimate
from pymedfit.core.exceptions import ValidationError
from pymedfit.mediation._ols import OLSFit
from pymedfit.mediation.data import MediationData

Extractor = Callable[..., MediationData]

_EXTRACTORS: dict[type, Extractor] = {}


def register_extractor(model_type: type) -> Callable[[Extractor], Extractor]:
    """
    Decorator registering an extractor for model_type.

    Raises:
        ValidationError: If model_type is not a class or already registered.
    """
    if not isinstance(model_type, type):
        raise ValidationError(
            f"model_type: must be a class, got {type(model_type).__name__}"
        )

    def decorator(fn: Extractor) -> Extractor:
        if model_type in _EXTRACTORS:
            raise ValidationError(
                f"model_type: an extractor for {model_type.__name__} is already registered"
            )
        _EXTRACTORS[model_type] = fn
        return fn

    return decorator


def unregister_extractor(model_type: type) -> None:
    """Remove the extractor for model_type, if any."""
    _EXTRACTORS.pop(model_type, None)


def registered_types() -> tuple[type, ...]:
    return tuple(_EXTRACTORS)


def get_extractor(model: Any) -> Extractor:
    """
    Extractor for model's type, searching its MRO.

    Raises:
        ValidationError: If no extractor handles this type.
    """
    for klass in type(model).__mro__:
        fn = _EXTRACTORS.get(klass)
        if fn is not None:
            return fn
    known = sorted(t.__name__ for t in _EXTRACTORS)
    raise ValidationError(
        f"model_m: no extractor registered for {type(model).__name__}; "
        f"supported types: {known}"
    )


def extract_mediation(
    model_m: Any,
    model_y: Any,
    treatment: str,
    mediator: str,
    outcome: str | None = None,
    data: Any = None,
) -> MediationData:
    """
    Build MediationData from a fitted mediator model and outcome model.

    Args:
        model_m: Fitted mediator model (M ~ X + ...).
        model_y: Fitted outcome model (Y ~ X + M + ...).
        treatment: Treatment variable name.
        mediator: Mediator variable name.
        outcome: Outcome variable name; taken from model_y if None.
        data: Dataset both models were fitted on, kept as reference.

    Raises:
        ValidationError: Missing model or names, no extractor for the
            model type, or variables absent from the models.
    """
    if model_y is None:
        raise ValidationError("model_y: the outcome model is required")
    if not isinstance(treatment, str) or not treatment:
        raise ValidationError("treatment: variable name is required")
    if not isinstance(mediator, str) or not mediator:
        raise ValidationError("mediator: variable name is required")

    extractor = get_extractor(model_m)
    return extractor(
        model_m, model_y,
        treatment=treatment, mediator=mediator, outcome=outcome, data=data,
    )


@register_extractor(OLSFit)
def _extract_ols(
    model_m: OLSFit,
    model_y: OLSFit,
    *,
    treatment: str,
    mediator: str,
    outcome: str | None,
    data: Any,
) -> MediationData:
    """
    Mediator and outcome OLS fits -> MediationData.

    Estimates are the mediator coefficients prefixed "m_" followed by the
    outcome coefficients prefixed "y_". The two models are fitted
    separately, so the joint covariance is block-diagonal.
    """
    if not isinstance(model_y, OLSFit):
        raise ValidationError(
            f"model_y: must be an OLSFit like model_m, got {type(model_y).__name__}"
        )
    if treatment not in model_m.names:
        raise ValidationError(
            f"treatment: variable {treatment!r} not found in mediator model"
        )
    if treatment not in model_y.names:
        raise ValidationError(
            f"treatment: variable {treatment!r} not found in outcome model"
        )
    if mediator not in model_y.names:
        raise ValidationError(
            f"mediator: variable {mediator!r} not found in outcome model"
        )
    if model_m.n_obs != model_y.n_obs:
        raise ValidationError(
            f"model_y: fitted on {model_y.n_obs} observations, "
            f"mediator model on {model_m.n_obs}"
        )

    names = [f"m_{n}" for n in model_m.names] + [f"y_{n}" for n in model_y.names]
    values = np.concatenate([model_m.coefficients, model_y.coefficients])
    covariance = block_diag(model_m.vcov, model_y.vcov)

    parameters = ParameterEstimate.from_arrays(
        names, values, covariance,
        data=data,
        n_obs=model_m.n_obs,
        converged=True,
        source="pymedfit.ols",
    )

    return MediationData(
        parameters=parameters,
        treatment=treatment,
        mediator=mediator,
        outcome=outcome if outcome is not None else model_y.response,
        mediator_predictors=model_m.predictors,
        outcome_predictors=model_y.predictors,
        sigma_m=model_m.sigma,
        sigma_y=model_y.sigma,
    )
