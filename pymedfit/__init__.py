"""
pymedfit: bootstrap inference for mediation analysis.

Point estimates and percentile confidence intervals for derived
statistics, such as the indirect effect a * b, by parametric,
nonparametric, or plugin bootstrap.

Submodules:
    bootstrap: Bootstrap inference engine and its value objects
    mediation: Mediation model fitting, extraction, and effects
"""

__version__ = "0.1.0"

from pymedfit import bootstrap
from pymedfit import mediation

__all__ = [
    "__version__",
    "bootstrap",
    "mediation",
]
