"""
Result envelope returned by every backend's solve().

The envelope carries the payload (for bootstrap backends, the point
estimate and replicate vector) together with what is needed to reproduce
and diagnose the run: the master seed and execution mode in ``info``,
a stage timing breakdown, the backend name, and non-fatal warnings.
Solvers turn it into the user-facing result class.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Frozen backend output.

    Attributes:
        params: Backend payload, e.g. ReplicateParams.
        info: Run metadata: method, seed, n_boot, execution mode, worker
            and chunk counts.
        timing: Seconds per stage plus 'total_seconds', or None.
        backend_name: Name of the producing backend, e.g. 'cpu_parametric'.
        warnings: Messages for conditions that did not stop the run, such
            as a process pool falling back to sequential execution.
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default=())

    def has_warning(self, substring: str) -> bool:
        """True if any warning message contains substring."""
        return any(substring in message for message in self.warnings)
