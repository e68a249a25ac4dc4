"""
Wall-clock timing for backend stages.

Backends time the point estimate and the replicate loop separately; the
breakdown lands in ``Result.timing`` and ``BootstrapResult.timing``.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Total elapsed time plus named, accumulating sections.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('point_estimate'):
            estimate = evaluate(theta_hat)
        with timer.section('replicates'):
            record = executor.run(replicate, n_boot, seed)
        timer.stop()
        timer.result()
        # {'total_seconds': 0.05, 'point_estimate': 1e-05, 'replicates': 0.049}

    A section entered more than once reports the sum of its durations.
    Sections are not required to be disjoint.
    """

    def __init__(self):
        self._t0: float | None = None
        self._elapsed: float | None = None
        self._sections: dict[str, float] = {}

    def start(self) -> None:
        self._t0 = time.perf_counter()
        self._elapsed = None

    def stop(self) -> None:
        if self._t0 is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._elapsed = time.perf_counter() - self._t0

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the duration of the enclosed block to section ``name``."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self._sections[name] = (
                self._sections.get(name, 0.0) + time.perf_counter() - t0
            )

    def result(self) -> dict[str, float]:
        """
        {'total_seconds': ..., <section>: ...}.

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._elapsed is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._elapsed, **self._sections}


@contextmanager
def timed() -> Iterator[Timer]:
    """
    Time a block; the timer is stopped on exit, even on error.

    Usage:
        with timed() as timer:
            md = fit_mediation(data, "X", "M", "Y")
        timer.result()['total_seconds']
    """
    timer = Timer()
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
