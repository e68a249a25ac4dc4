"""
Execution of bootstrap iterations, sequentially or on a worker pool.

Iterations are independent: iteration ``i`` draws only from
``iteration_rng(master_seed, i)`` and reads only shared, read-only inputs.
The replicate vector is therefore identical for every execution mode,
worker count, and chunking; only wall-clock time changes.

Failure of any iteration aborts the run. No partial replicate vector is
ever returned.
"""

from __future__ import annotations

import math
import os
import pickle
import warnings
from concurrent.futures import (
    FIRST_EXCEPTION,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray

from pymedfit.bootstrap._seeding import iteration_rng
from pymedfit.core.exceptions import BootstrapError, ResamplingFailure, ValidationError
from pymedfit.core.validation import check_int

# replicate(index, rng) -> float
Replicate = Callable[[int, np.random.Generator], float]

POOL_KINDS = ("thread", "process")

# Chunks per worker; more chunks balance uneven iteration cost.
_CHUNKS_PER_WORKER = 4


def default_worker_count() -> int:
    """Available cores minus one, at least 1."""
    return max(1, (os.cpu_count() or 1) - 1)


def _run_chunk(
    replicate: Replicate,
    master_seed: int,
    start: int,
    stop: int,
) -> NDArray[np.floating[Any]]:
    """Evaluate iterations [start, stop). Module-level so processes can pickle it."""
    out = np.empty(stop - start, dtype=np.float64)
    for i in range(start, stop):
        try:
            out[i - start] = replicate(i, iteration_rng(master_seed, i))
        except BootstrapError as e:
            if e.iteration is None:
                e.iteration = i
            raise
        except Exception as e:
            raise ResamplingFailure(
                f"iteration {i}: {type(e).__name__}: {e}", iteration=i,
            ) from e
    return out


@dataclass(frozen=True)
class ExecutionRecord:
    """Replicates plus how they were computed."""
    replicates: NDArray[np.floating[Any]]
    mode: str
    n_workers: int
    n_chunks: int
    warnings: tuple[str, ...] = ()


class ParallelExecutor:
    """
    Runs ``n_boot`` iterations of a replicate function.

    Args:
        parallel: Use a worker pool. If False, iterations run in order
            on the calling thread.
        n_workers: Pool size. Defaults to available cores minus one
            (at least 1). Ignored when parallel is False.
        pool: "thread" (default) or "process". A process pool requires
            the replicate function, and everything it references, to be
            picklable; otherwise execution falls back to sequential with
            a RuntimeWarning.
        chunk_size: Iterations per submitted task. Defaults to spreading
            the work over four chunks per worker.
    """

    def __init__(
        self,
        parallel: bool = False,
        n_workers: int | None = None,
        pool: str = "thread",
        chunk_size: int | None = None,
    ):
        if pool not in POOL_KINDS:
            raise ValidationError(
                f"pool: must be 'thread' or 'process', got {pool!r}"
            )
        self.parallel = bool(parallel)
        self.n_workers = (
            default_worker_count() if n_workers is None
            else check_int(n_workers, 'n_workers', minimum=1)
        )
        self.pool = pool
        self.chunk_size = (
            None if chunk_size is None
            else check_int(chunk_size, 'chunk_size', minimum=1)
        )

    def run(
        self,
        replicate: Replicate,
        n_boot: int,
        master_seed: int,
    ) -> ExecutionRecord:
        """
        Evaluate iterations 0 .. n_boot-1.

        Returns:
            ExecutionRecord whose replicates[i] is iteration i's value.

        Raises:
            BootstrapError: The failure of the lowest-indexed failing
                iteration observed, with its ``iteration`` attribute set.
        """
        if not self.parallel or self.n_workers == 1 or n_boot == 1:
            return self._run_sequential(replicate, n_boot, master_seed)

        if self.pool == "process":
            problem = self._process_pool_problem(replicate)
            if problem is not None:
                msg = (
                    f"Process pool unavailable ({problem}); "
                    f"running {n_boot} iterations sequentially"
                )
                warnings.warn(msg, RuntimeWarning, stacklevel=3)
                return self._run_sequential(
                    replicate, n_boot, master_seed, fallback_warnings=(msg,),
                )

        return self._run_pooled(replicate, n_boot, master_seed)

    # ------------------------------------------------------------------

    def _run_sequential(
        self,
        replicate: Replicate,
        n_boot: int,
        master_seed: int,
        fallback_warnings: tuple[str, ...] = (),
    ) -> ExecutionRecord:
        return ExecutionRecord(
            replicates=_run_chunk(replicate, master_seed, 0, n_boot),
            mode="sequential",
            n_workers=1,
            n_chunks=1,
            warnings=fallback_warnings,
        )

    def _chunks(self, n_boot: int) -> list[tuple[int, int]]:
        size = self.chunk_size or max(
            1, math.ceil(n_boot / (self.n_workers * _CHUNKS_PER_WORKER))
        )
        return [(s, min(s + size, n_boot)) for s in range(0, n_boot, size)]

    def _make_pool(self) -> Executor:
        if self.pool == "process":
            return ProcessPoolExecutor(max_workers=self.n_workers)
        return ThreadPoolExecutor(max_workers=self.n_workers)

    def _process_pool_problem(self, replicate: Replicate) -> str | None:
        """Reason a process pool cannot run this work, or None."""
        try:
            pickle.dumps(replicate)
        except (pickle.PicklingError, AttributeError, TypeError) as e:
            return f"work is not picklable: {e}"
        try:
            import multiprocessing
            multiprocessing.get_context()
            from multiprocessing import synchronize  # noqa: F401
        except (ImportError, NotImplementedError, OSError) as e:
            return f"platform lacks multiprocessing support: {e}"
        return None

    def _run_pooled(
        self,
        replicate: Replicate,
        n_boot: int,
        master_seed: int,
    ) -> ExecutionRecord:
        chunks = self._chunks(n_boot)
        out = np.empty(n_boot, dtype=np.float64)

        with self._make_pool() as executor:
            futures: dict[Future, int] = {
                executor.submit(_run_chunk, replicate, master_seed, start, stop): start
                for start, stop in chunks
            }
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            failed = [f for f in done if f.exception() is not None]
            if failed:
                for f in pending:
                    f.cancel()
                # Let chunks already running finish so the lowest failing
                # index among them can be reported.
                running = [f for f in pending if not f.cancelled()]
                wait(running)
                failed.extend(
                    f for f in running if f.exception() is not None
                )
                first = min(failed, key=lambda f: futures[f])
                err = first.exception()
                if isinstance(err, BrokenProcessPool):
                    raise ResamplingFailure(
                        f"worker pool terminated abruptly: {err}"
                    ) from err
                raise err

            for future, start in futures.items():
                values = future.result()
                out[start:start + values.shape[0]] = values

        return ExecutionRecord(
            replicates=out,
            mode=self.pool,
            n_workers=self.n_workers,
            n_chunks=len(chunks),
        )
