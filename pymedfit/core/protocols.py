"""
Structural interface shared by the bootstrap backends.

A backend is anything with a ``name`` and a ``solve(design)`` returning a
Result envelope. Structural typing (Protocol) lets tests and extensions
supply their own backends without subclassing.
"""

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from pymedfit.core.result import Result

D = TypeVar('D', contravariant=True)  # design accepted
P = TypeVar('P', covariant=True)  # payload produced


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    One resampling strategy.

    Backends keep no state between calls; everything a run needs comes
    from the frozen design (or, for an injected executor, the constructor).
    """

    @property
    def name(self) -> str:
        """'<device>_<strategy>', e.g. 'cpu_parametric' or 'cpu_plugin'."""
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Run the strategy on a validated design.

        Raises:
            BootstrapError: The statistic or a resample failed
        """
        ...
