"""
Tests for the Result envelope, Timer, and the Backend protocol.
"""

import dataclasses

import pytest

from pymedfit.bootstrap.backends import (
    CPUNonparametricBackend,
    CPUParametricBackend,
    CPUPluginBackend,
)
from pymedfit.core import Backend
from pymedfit.core.compute import Timer, timed
from pymedfit.core.result import Result


# ═══════════════════════════════════════════════════════════════════════
# Result
# ═══════════════════════════════════════════════════════════════════════


class TestResult:
    """The backend Result envelope."""

    def _result(self, **kwargs):
        defaults = dict(
            params={"estimate": 0.2},
            info={"method": "parametric", "seed": 1},
            timing=None,
            backend_name="cpu_parametric",
        )
        defaults.update(kwargs)
        return Result(**defaults)

    def test_fields(self):
        """Fields read back; warnings default to empty."""
        result = self._result()
        assert result.params == {"estimate": 0.2}
        assert result.info["seed"] == 1
        assert result.backend_name == "cpu_parametric"
        assert result.warnings == ()

    def test_frozen(self):
        result = self._result()
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.backend_name = "other"

    def test_has_warning(self):
        """Substring search over warnings."""
        result = self._result(warnings=("process pool unavailable; ran sequentially",))
        assert result.has_warning("sequentially")
        assert not result.has_warning("diverged")


# ═══════════════════════════════════════════════════════════════════════
# Timer
# ═══════════════════════════════════════════════════════════════════════


class TestTimer:
    """Wall-clock timing sections."""

    def test_sections_accumulate(self):
        """Repeated sections accumulate under one key."""
        timer = Timer()
        timer.start()
        with timer.section("replicates"):
            pass
        with timer.section("replicates"):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {"total_seconds", "replicates"}
        assert result["total_seconds"] >= 0.0
        assert result["replicates"] >= 0.0

    def test_stop_before_start(self):
        """stop() needs a prior start()."""
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()

    def test_result_before_stop(self):
        """result() needs a prior stop()."""
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()

    def test_timed(self):
        """timed() starts and stops the timer."""
        with timed() as timer:
            sum(range(100))
        assert timer.result()["total_seconds"] >= 0.0


# ═══════════════════════════════════════════════════════════════════════
# Backend protocol
# ═══════════════════════════════════════════════════════════════════════


class TestBackendProtocol:
    """Structural Backend interface."""

    @pytest.mark.parametrize("backend_cls,name", [
        (CPUParametricBackend, "cpu_parametric"),
        (CPUNonparametricBackend, "cpu_nonparametric"),
        (CPUPluginBackend, "cpu_plugin"),
    ])
    def test_backends_satisfy_protocol(self, backend_cls, name):
        """Each CPU backend is a Backend with its name."""
        backend = backend_cls()
        assert isinstance(backend, Backend)
        assert backend.name == name

    def test_plain_object_does_not(self):
        """Objects without name/solve are not backends."""
        assert not isinstance(object(), Backend)
