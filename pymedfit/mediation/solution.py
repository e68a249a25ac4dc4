"""
MediationAnalysis: what med() returns.

Wraps a MediationData and, when requested, a bootstrap of the indirect
effect, with a one-line quick() summary.
"""

from __future__ import annotations

from dataclasses import dataclass

from pymedfit.bootstrap.solution import BootstrapResult
from pymedfit.mediation.data import MediationData
from pymedfit.mediation.effects import nde, nie, pm, te


@dataclass(frozen=True, eq=False)
class MediationAnalysis:
    """
    User-facing mediation analysis results.

    Attributes:
        mediation_data: Fitted paths and parameter covariance.
        bootstrap: Parametric bootstrap of the indirect effect, or None.
    """
    mediation_data: MediationData
    bootstrap: BootstrapResult | None = None

    @property
    def nie(self) -> float:
        return nie(self.mediation_data)

    @property
    def nde(self) -> float:
        return nde(self.mediation_data)

    @property
    def te(self) -> float:
        return te(self.mediation_data)

    @property
    def pm(self) -> float:
        return pm(self.mediation_data)

    def quick(self, digits: int = 3) -> str:
        """
        One-line summary, e.g.

            NIE = 0.2 [0.118, 0.295] | NDE = 0.1 | PM = 66.7%
        """
        ci = ""
        if self.bootstrap is not None and self.bootstrap.has_ci:
            ci = (
                f" [{self.bootstrap.ci_lower:.{digits}g}, "
                f"{self.bootstrap.ci_upper:.{digits}g}]"
            )
        return (
            f"NIE = {self.nie:.{digits}g}{ci} | NDE = {self.nde:.{digits}g} "
            f"| PM = {self.pm * 100:.{digits}g}%"
        )

    def summary(self) -> str:
        lines = [self.mediation_data.summary()]
        if self.bootstrap is not None:
            lines.append(self.bootstrap.summary())
        return "\n".join(lines)

    def __repr__(self) -> str:
        boot = "none" if self.bootstrap is None else f"{self.bootstrap.n_boot} replicates"
        return f"MediationAnalysis(nie={self.nie:.4g}, nde={self.nde:.4g}, bootstrap={boot})"
