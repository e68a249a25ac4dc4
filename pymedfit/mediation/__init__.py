"""
pymedfit mediation models.

Fits the mediator and outcome models of X -> M -> Y, extracts their
coefficients and covariance as MediationData, and exposes the effects
(nie, nde, te, pm) for bootstrap inference.

Usage:
    from pymedfit.mediation import fit_mediation, indirect_statistic
    from pymedfit.bootstrap import bootstrap

    md = fit_mediation(data, treatment="X", mediator="M", outcome="Y")
    result = bootstrap(indirect_statistic(md), "parametric",
                       parameter_estimate=md.parameters, seed=1)
"""

from pymedfit.mediation._ols import OLSFit, fit_ols
from pymedfit.mediation.data import MediationData
from pymedfit.mediation.effects import (
    ProductStatistic,
    effects,
    indirect_statistic,
    nde,
    nie,
    paths,
    pm,
    te,
)
from pymedfit.mediation.extract import (
    extract_mediation,
    get_extractor,
    register_extractor,
    registered_types,
    unregister_extractor,
)
from pymedfit.mediation.solution import MediationAnalysis
from pymedfit.mediation.solvers import fit_mediation, med

__all__ = [
    "fit_mediation",
    "med",
    "MediationData",
    "MediationAnalysis",
    "OLSFit",
    "fit_ols",
    "extract_mediation",
    "register_extractor",
    "unregister_extractor",
    "get_extractor",
    "registered_types",
    "nie",
    "nde",
    "te",
    "pm",
    "paths",
    "effects",
    "ProductStatistic",
    "indirect_statistic",
]
