"""
Tests for MediationData and the effect functions.
"""

import math
import pickle

import numpy as np
import pytest

from pymedfit.bootstrap import ParameterEstimate
from pymedfit.core.exceptions import ValidationError
from pymedfit.mediation import (
    MediationData,
    ProductStatistic,
    effects,
    indirect_statistic,
    nde,
    nie,
    paths,
    pm,
    te,
)


# ═══════════════════════════════════════════════════════════════════════
# MediationData
# ═══════════════════════════════════════════════════════════════════════


class TestMediationData:
    """Construction and paths of MediationData."""

    def test_paths(self, simple_md):
        """Paths are read from the m_/y_ named estimates."""
        assert simple_md.a_name == "m_X"
        assert simple_md.b_name == "y_M"
        assert simple_md.c_prime_name == "y_X"
        assert simple_md.a_path == 0.5
        assert simple_md.b_path == 0.4
        assert simple_md.c_prime == 0.1
        assert simple_md.n_obs == 100
        assert simple_md.source == "test"
        assert simple_md.converged

    def test_missing_path(self):
        """A missing path estimate lists the available names."""
        pe = ParameterEstimate({"m_X": 0.5, "y_X": 0.1}, np.eye(2))
        with pytest.raises(ValidationError, match=r"b path estimate 'y_M' not found"):
            MediationData(parameters=pe, treatment="X", mediator="M", outcome="Y")

    def test_not_a_parameter_estimate(self):
        """Parameters must be a ParameterEstimate."""
        with pytest.raises(ValidationError, match="parameters"):
            MediationData(parameters={"m_X": 0.5}, treatment="X", mediator="M",
                          outcome="Y")

    def test_empty_name(self, simple_md):
        """Variable names must be non-empty."""
        with pytest.raises(ValidationError, match="outcome"):
            MediationData(parameters=simple_md.parameters, treatment="X",
                          mediator="M", outcome="")

    def test_negative_sigma(self, simple_md):
        """Residual SDs must be non-negative."""
        with pytest.raises(ValidationError, match="sigma_m"):
            MediationData(parameters=simple_md.parameters, treatment="X",
                          mediator="M", outcome="Y", sigma_m=-1.0)

    def test_summary(self, simple_md):
        """Summary lists paths, variables, and sample size."""
        text = simple_md.summary()
        assert "a (X -> M):" in text
        assert "Treatment: X" in text
        assert "N observations: 100" in text

    def test_repr(self, simple_md):
        assert repr(simple_md).startswith("MediationData(treatment='X'")


# ═══════════════════════════════════════════════════════════════════════
# Effects
# ═══════════════════════════════════════════════════════════════════════


class TestEffects:
    """Effect functions."""

    def test_values(self, simple_md):
        """nie = a*b, nde = c', te = nie + nde, pm = nie / te."""
        assert nie(simple_md) == pytest.approx(0.2)
        assert nde(simple_md) == pytest.approx(0.1)
        assert te(simple_md) == pytest.approx(0.3)
        assert pm(simple_md) == pytest.approx(2.0 / 3.0)

    def test_paths(self, simple_md):
        assert paths(simple_md) == {"a": 0.5, "b": 0.4, "c_prime": 0.1}

    def test_effects(self, simple_md):
        """Total effect is the sum of the parts."""
        result = effects(simple_md)
        assert set(result) == {"nie", "nde", "te"}
        assert result["te"] == pytest.approx(result["nie"] + result["nde"])

    def test_pm_zero_total(self):
        """A zero total effect warns and returns NaN."""
        pe = ParameterEstimate({"m_X": 0.5, "y_M": 0.4, "y_X": -0.2}, np.eye(3))
        md = MediationData(parameters=pe, treatment="X", mediator="M", outcome="Y")
        with pytest.warns(RuntimeWarning, match="proportion mediated is undefined"):
            assert math.isnan(pm(md))


class TestProductStatistic:
    """The picklable product statistic."""

    def test_product(self):
        """Only the named parameters enter the product."""
        stat = ProductStatistic("a", "b", "c")
        assert stat({"a": 2.0, "b": 3.0, "c": 0.5, "d": 100.0}) == pytest.approx(3.0)

    def test_indirect(self, simple_md):
        """indirect_statistic multiplies the a and b estimates."""
        stat = indirect_statistic(simple_md)
        assert stat.names == ("m_X", "y_M")
        assert stat(simple_md.parameters.as_dict()) == pytest.approx(0.2)

    def test_picklable(self):
        """Survives a pickle round trip."""
        stat = pickle.loads(pickle.dumps(ProductStatistic("a", "b")))
        assert stat({"a": 2.0, "b": 4.0}) == 8.0

    def test_requires_names(self):
        """At least one name is required."""
        with pytest.raises(ValidationError, match="at least one"):
            ProductStatistic()

    def test_repr(self):
        assert repr(ProductStatistic("a", "b")) == "ProductStatistic('a', 'b')"


# ═══════════════════════════════════════════════════════════════════════
# Model accessors and tidy output
# ═══════════════════════════════════════════════════════════════════════

Z95 = 1.959963984540054


class TestAccessors:
    """coef(), vcov(), and confint() on MediationData."""

    def test_coef_paths(self, simple_md):
        """Default type gives a, b, c_prime."""
        assert simple_md.coef() == {"a": 0.5, "b": 0.4, "c_prime": 0.1}

    def test_coef_effects(self, simple_md):
        """Effects are nie, nde, te."""
        result = simple_md.coef("effects")
        assert result["nie"] == pytest.approx(0.2)
        assert result["nde"] == pytest.approx(0.1)
        assert result["te"] == pytest.approx(0.3)

    def test_coef_all(self, simple_md):
        """All parameters by their model names."""
        assert simple_md.coef("all") == {"m_X": 0.5, "y_M": 0.4, "y_X": 0.1}

    def test_coef_bad_type(self, simple_md):
        """Unknown types are rejected."""
        with pytest.raises(ValidationError, match="type: must be one of"):
            simple_md.coef("indirect")

    def test_vcov_is_copy(self, simple_md):
        """The returned matrix is writable and detached from the model."""
        cov = simple_md.vcov()
        np.testing.assert_array_equal(cov, np.diag([0.01, 0.01, 0.01]))
        cov[0, 0] = 9.0
        assert simple_md.parameters.covariance[0, 0] == 0.01

    def test_confint_paths(self, simple_md):
        """Wald bounds estimate +/- z * SE with SE = 0.1."""
        ci = simple_md.confint()
        assert list(ci) == ["a", "b", "c_prime"]
        assert ci["a"] == pytest.approx((0.5 - Z95 * 0.1, 0.5 + Z95 * 0.1))
        assert ci["c_prime"] == pytest.approx((0.1 - Z95 * 0.1, 0.1 + Z95 * 0.1))

    def test_confint_level(self, simple_md):
        """Narrower level gives a narrower interval."""
        wide = simple_md.confint(0.99)["b"]
        narrow = simple_md.confint(0.90)["b"]
        assert wide[0] < narrow[0] < 0.4 < narrow[1] < wide[1]

    def test_confint_uses_named_paths(self):
        """Standard errors follow the parameter names, not their order."""
        pe = ParameterEstimate(
            {"m_Intercept": 1.0, "y_X": 0.1, "y_M": 0.4, "m_X": 0.5},
            np.diag([4.0, 0.09, 0.04, 0.01]),
        )
        md = MediationData(parameters=pe, treatment="X", mediator="M", outcome="Y")
        ci = md.confint()
        assert ci["a"] == pytest.approx((0.5 - Z95 * 0.1, 0.5 + Z95 * 0.1))
        assert ci["b"] == pytest.approx((0.4 - Z95 * 0.2, 0.4 + Z95 * 0.2))
        assert ci["c_prime"] == pytest.approx((0.1 - Z95 * 0.3, 0.1 + Z95 * 0.3))

    def test_confint_effects(self, simple_md):
        """Delta-method SEs for nie and te, with a warning."""
        with pytest.warns(RuntimeWarning, match="Normal approximation"):
            ci = simple_md.confint(parm="effects")
        se_nie = math.sqrt(0.4**2 * 0.01 + 0.5**2 * 0.01)
        se_te = math.sqrt(se_nie**2 + 0.01)
        assert ci["nie"] == pytest.approx((0.2 - Z95 * se_nie, 0.2 + Z95 * se_nie))
        assert ci["nde"] == pytest.approx((0.1 - Z95 * 0.1, 0.1 + Z95 * 0.1))
        assert ci["te"] == pytest.approx((0.3 - Z95 * se_te, 0.3 + Z95 * se_te))

    @pytest.mark.parametrize("level", [0.0, 1.0, 95, "0.95"])
    def test_confint_bad_level(self, simple_md, level):
        """Level must be strictly between 0 and 1."""
        with pytest.raises(ValidationError, match="level"):
            simple_md.confint(level)

    def test_confint_bad_parm(self, simple_md):
        """parm must be paths or effects."""
        with pytest.raises(ValidationError, match="parm"):
            simple_md.confint(parm="all")


class TestMediationTidy:
    """tidy() and glance() on MediationData."""

    def test_tidy_all(self, simple_md):
        """Paths carry SEs; effects do not."""
        records = simple_md.tidy()
        assert [r["term"] for r in records] == ["a", "b", "c_prime", "nie", "nde", "te"]
        assert [r["std_error"] for r in records[:3]] == pytest.approx([0.1, 0.1, 0.1])
        assert all(r["std_error"] is None for r in records[3:])
        assert "conf_low" not in records[0]

    def test_tidy_paths(self, simple_md):
        """Paths only."""
        records = simple_md.tidy("paths")
        assert [r["estimate"] for r in records] == [0.5, 0.4, 0.1]

    def test_tidy_effects(self, simple_md):
        """Effects only."""
        records = simple_md.tidy("effects")
        assert [r["term"] for r in records] == ["nie", "nde", "te"]
        assert records[0]["estimate"] == pytest.approx(0.2)

    def test_tidy_conf_int(self, simple_md):
        """Path bounds match confint(); effect bounds are None."""
        records = simple_md.tidy(conf_int=True, conf_level=0.9)
        ci = simple_md.confint(0.9)
        assert (records[1]["conf_low"], records[1]["conf_high"]) == pytest.approx(ci["b"])
        assert records[3]["conf_low"] is None
        assert records[3]["conf_high"] is None

    def test_tidy_bad_conf_level(self, simple_md):
        """conf_level is checked even without paths."""
        with pytest.raises(ValidationError, match="conf_level"):
            simple_md.tidy("effects", conf_int=True, conf_level=1.5)

    def test_glance(self, simple_md):
        """One row of effects and model info."""
        row = simple_md.glance()
        assert row["nie"] == pytest.approx(0.2)
        assert row["te"] == pytest.approx(0.3)
        assert row["pm"] == pytest.approx(2.0 / 3.0)
        assert row["n_obs"] == 100
        assert row["converged"] is True
