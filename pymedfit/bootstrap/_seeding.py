"""
Per-iteration seed derivation.

Each bootstrap iteration gets its own generator, derived from the master
seed and the iteration index alone:

    SeedSequence(master_seed, spawn_key=(index,))

This is the same stream ``SeedSequence(master_seed).spawn(n)[index]`` would
give, but computable for any index without materializing the others, so
chunked and pooled execution reproduce the sequential draws exactly.
"""

from __future__ import annotations

import numpy as np

from pymedfit.core.exceptions import ValidationError
from pymedfit.core.validation import check_int


def resolve_master_seed(seed: int | None) -> int:
    """
    Return a concrete non-negative master seed.

    When seed is None a fresh 128-bit seed is drawn from OS entropy; it is
    recorded on the result so the run can be replayed.
    """
    if seed is None:
        return int(np.random.SeedSequence().entropy)
    return check_int(seed, 'seed', minimum=0)


def iteration_seed(master_seed: int, index: int) -> np.random.SeedSequence:
    """Seed sequence for iteration ``index`` of a run seeded with master_seed."""
    if index < 0:
        raise ValidationError(f"index: must be >= 0, got {index}")
    return np.random.SeedSequence(master_seed, spawn_key=(index,))


def iteration_rng(master_seed: int, index: int) -> np.random.Generator:
    """Fresh, unshared generator for one iteration."""
    return np.random.default_rng(iteration_seed(master_seed, index))
