"""
BootstrapResult: the value returned by bootstrap().

Frozen, validated at construction. Fields are stored exactly as supplied
(the distribution as a read-only float64 copy); summary quantities such as
the standard error are derived on access.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pymedfit.bootstrap._common import ReplicateParams
from pymedfit.bootstrap.design import METHODS
from pymedfit.core.exceptions import DimensionError, ValidationError
from pymedfit.core.result import Result
from pymedfit.core.validation import check_array, check_int


def _is_real(value: Any) -> bool:
    return (isinstance(value, (int, float, np.integer, np.floating))
            and not isinstance(value, (bool, np.bool_)))


@dataclass(frozen=True, eq=False)
class BootstrapResult:
    """
    Result of one bootstrap call.

    Attributes:
        estimate: Statistic evaluated on the point estimates (parametric,
            plugin) or on the original data (nonparametric).
        ci_lower, ci_upper, ci_level: Percentile interval. All three are
            set, or all three are None (plugin only).
        distribution: Bootstrap replicates in iteration order, shape
            (n_boot,); empty for plugin.
        n_boot: Number of replicates (0 for plugin).
        method: "parametric", "nonparametric", or "plugin".
        seed: Master seed the replicates were drawn with.
        info: Backend metadata (execution mode, worker count, ...).
        timing: Backend timing breakdown, if measured.
        backend_name: Backend that produced the replicates.
        warnings: Non-fatal issues encountered during the run.

    Raises:
        ValidationError: If an invariant does not hold.
        DimensionError: If len(distribution) != n_boot.
    """
    estimate: float
    ci_lower: float | None
    ci_upper: float | None
    ci_level: float | None
    distribution: NDArray[np.floating[Any]]
    n_boot: int
    method: str
    seed: int | None = None
    info: dict[str, Any] = field(default_factory=dict)
    timing: dict[str, float] | None = None
    backend_name: str = ''
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.method not in METHODS:
            raise ValidationError(
                f"method: must be 'parametric', 'nonparametric', or 'plugin', "
                f"got {self.method!r}"
            )

        if not _is_real(self.estimate):
            raise ValidationError(
                f"estimate: must be a real scalar, got {type(self.estimate).__name__}"
            )

        ci = (self.ci_lower, self.ci_upper, self.ci_level)
        n_set = sum(v is not None for v in ci)
        if n_set not in (0, 3):
            raise ValidationError(
                "ci_lower, ci_upper, ci_level: must all be set or all be None, "
                f"got ci_lower={self.ci_lower}, ci_upper={self.ci_upper}, "
                f"ci_level={self.ci_level}"
            )
        if n_set == 0 and self.method != "plugin":
            raise ValidationError(
                f"ci_lower, ci_upper, ci_level: required for method {self.method!r}"
            )
        if n_set == 3:
            if self.method == "plugin":
                raise ValidationError(
                    "ci_lower, ci_upper, ci_level: must be None for method 'plugin'"
                )
            for name in ('ci_lower', 'ci_upper', 'ci_level'):
                if not _is_real(getattr(self, name)):
                    raise ValidationError(
                        f"{name}: must be a real scalar, "
                        f"got {type(getattr(self, name)).__name__}"
                    )
            if not 0.0 < self.ci_level < 1.0:
                raise ValidationError(
                    f"ci_level: must be between 0 and 1 (exclusive), got {self.ci_level}"
                )
            if self.ci_lower > self.ci_upper:
                raise ValidationError(
                    f"ci_lower: must be <= ci_upper, got ci_lower={self.ci_lower} "
                    f"> ci_upper={self.ci_upper}"
                )

        n_boot = check_int(self.n_boot, 'n_boot', minimum=0)
        if self.method == "plugin" and n_boot != 0:
            raise ValidationError(
                f"n_boot: must be 0 for method 'plugin', got {n_boot}"
            )
        if self.method != "plugin" and n_boot < 1:
            raise ValidationError(
                f"n_boot: must be >= 1 for method {self.method!r}, got {n_boot}"
            )

        dist = check_array(self.distribution, 'distribution')
        if dist.ndim != 1:
            raise DimensionError(
                f"distribution: expected 1D array, got {dist.ndim}D with shape {dist.shape}"
            )
        if dist.shape[0] != n_boot:
            raise DimensionError(
                f"distribution: length {dist.shape[0]} must equal n_boot ({n_boot})"
            )

        if self.seed is not None:
            object.__setattr__(self, 'seed', check_int(self.seed, 'seed', minimum=0))

        dist = np.array(dist, dtype=np.float64, copy=True)
        dist.flags.writeable = False
        object.__setattr__(self, 'distribution', dist)
        object.__setattr__(self, 'n_boot', n_boot)
        object.__setattr__(self, 'warnings', tuple(self.warnings))

    @classmethod
    def from_result(
        cls,
        result: Result[ReplicateParams],
        ci: tuple[float, float] | None,
        ci_level: float | None,
    ) -> BootstrapResult:
        """Package a backend Result and its interval."""
        lower, upper = ci if ci is not None else (None, None)
        return cls(
            estimate=result.params.estimate,
            ci_lower=lower,
            ci_upper=upper,
            ci_level=ci_level,
            distribution=result.params.replicates,
            n_boot=result.params.replicates.shape[0],
            method=result.info['method'],
            seed=result.info.get('seed'),
            info=dict(result.info),
            timing=result.timing,
            backend_name=result.backend_name,
            warnings=result.warnings,
        )

    # --- Derived ---

    @property
    def has_ci(self) -> bool:
        return self.ci_level is not None

    @property
    def conf_int(self) -> tuple[float, float] | None:
        """(ci_lower, ci_upper), or None for plugin."""
        if not self.has_ci:
            return None
        return (self.ci_lower, self.ci_upper)

    @property
    def se(self) -> float | None:
        """Bootstrap standard error: sd(distribution), ddof=1."""
        if self.n_boot < 2:
            return None
        return float(np.std(self.distribution, ddof=1))

    @property
    def bias(self) -> float | None:
        """Bootstrap bias estimate: mean(distribution) - estimate."""
        if self.n_boot < 1:
            return None
        return float(np.mean(self.distribution)) - self.estimate

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)

    # --- Tidy output ---

    def tidy(self) -> list[dict[str, Any]]:
        """
        One record: term, estimate, std_error, conf_low, conf_high.

        std_error and the bounds are None when there is no interval.
        """
        lower, upper = self.conf_int if self.has_ci else (None, None)
        return [{
            "term": "estimate",
            "estimate": self.estimate,
            "std_error": self.se,
            "conf_low": lower,
            "conf_high": upper,
        }]

    def glance(self) -> dict[str, Any]:
        """One-row summary: estimate, ci_level, method, n_boot."""
        return {
            "estimate": self.estimate,
            "ci_level": self.ci_level,
            "method": self.method,
            "n_boot": self.n_boot,
        }

    # --- Display ---

    def summary(self) -> str:
        """
        Printable summary.

        Produces:
            PARAMETRIC BOOTSTRAP

            Estimate:             0.2000
            Bootstrap replicates: 1000
            Std. error:           0.0447

            95% percentile CI: (0.1180, 0.2950)
        """
        title = {
            "parametric": "PARAMETRIC BOOTSTRAP",
            "nonparametric": "ORDINARY NONPARAMETRIC BOOTSTRAP",
            "plugin": "PLUGIN ESTIMATE",
        }[self.method]
        lines = [f"\n{title}\n", f"Estimate:             {self.estimate:10.4f}"]

        if not self.has_ci:
            lines.append("")
            lines.append("(No confidence interval for plugin method)")
            return "\n".join(lines)

        lines.append(f"Bootstrap replicates: {self.n_boot:>10d}")
        se = self.se
        if se is not None and math.isfinite(se):
            lines.append(f"Std. error:           {se:10.4f}")
        lines.append("")
        lines.append(
            f"{self.ci_level * 100:g}% percentile CI: "
            f"({self.ci_lower:.4f}, {self.ci_upper:.4f})"
        )
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        if self.has_ci:
            ci = f", ci=({self.ci_lower:.4g}, {self.ci_upper:.4g})"
        else:
            ci = ""
        return (
            f"BootstrapResult(method={self.method!r}, "
            f"estimate={self.estimate:.4g}{ci}, n_boot={self.n_boot})"
        )
