"""
Common data structures for bootstrap backends.

ReplicateParams is the payload wrapped by Result[P] and turned into a
BootstrapResult by the solver.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, eq=False)
class ReplicateParams:
    """
    Parameter payload produced by a resampling backend.

    - estimate: statistic on the point estimates / original data
    - replicates: statistic on each resample, in iteration order
    """
    estimate: float
    replicates: NDArray[np.floating[Any]]      # shape (n_boot,)
