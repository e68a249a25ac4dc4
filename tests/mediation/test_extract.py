"""
Tests for model extraction and the extractor registry.

Validates:
    - OLS fits produce m_/y_ prefixed estimates with block-diagonal covariance
    - Registry lookup follows the MRO; unknown types list supported types
    - Duplicate and non-class registrations are rejected
"""

import numpy as np
import pytest

from pymedfit.bootstrap import ParameterEstimate
from pymedfit.core.exceptions import ValidationError
from pymedfit.mediation import (
    MediationData,
    OLSFit,
    extract_mediation,
    fit_ols,
    get_extractor,
    register_extractor,
    registered_types,
    unregister_extractor,
)


@pytest.fixture
def ols_models(mediation_columns):
    model_m = fit_ols(mediation_columns, "M", ["X", "C"])
    model_y = fit_ols(mediation_columns, "Y", ["X", "M", "C"])
    return model_m, model_y


# ═══════════════════════════════════════════════════════════════════════
# OLS extraction
# ═══════════════════════════════════════════════════════════════════════


class TestExtractOLS:
    """Extraction from a pair of OLS fits."""

    def test_names_and_values(self, ols_models):
        """Estimates are prefixed m_/y_ and paths read from the right model."""
        model_m, model_y = ols_models
        md = extract_mediation(model_m, model_y, treatment="X", mediator="M")
        pe = md.parameters
        assert pe.names == (
            "m_(Intercept)", "m_X", "m_C",
            "y_(Intercept)", "y_X", "y_M", "y_C",
        )
        assert md.a_path == pytest.approx(model_m.coef()["X"])
        assert md.b_path == pytest.approx(model_y.coef()["M"])
        assert md.c_prime == pytest.approx(model_y.coef()["X"])
        assert md.outcome == "Y"
        assert pe.source == "pymedfit.ols"
        assert pe.n_obs == 200

    def test_block_diagonal(self, ols_models):
        """Joint covariance is block-diagonal with each model's vcov."""
        model_m, model_y = ols_models
        pe = extract_mediation(model_m, model_y, "X", "M").parameters
        np.testing.assert_array_equal(pe.covariance[:3, 3:], 0.0)
        np.testing.assert_allclose(pe.covariance[:3, :3], model_m.vcov)
        np.testing.assert_allclose(pe.covariance[3:, 3:], model_y.vcov)

    def test_sigmas_and_predictors(self, ols_models):
        """Residual SDs and predictor lists are carried over."""
        model_m, model_y = ols_models
        md = extract_mediation(model_m, model_y, "X", "M", outcome="Y")
        assert md.sigma_m == pytest.approx(model_m.sigma)
        assert md.sigma_y == pytest.approx(model_y.sigma)
        assert md.mediator_predictors == ("X", "C")
        assert md.outcome_predictors == ("X", "M", "C")

    def test_mediator_not_in_outcome_model(self, mediation_columns):
        """The outcome model must contain the mediator."""
        model_m = fit_ols(mediation_columns, "M", ["X"])
        model_y = fit_ols(mediation_columns, "Y", ["X"])
        with pytest.raises(ValidationError, match="mediator: variable 'M' not found"):
            extract_mediation(model_m, model_y, "X", "M")

    def test_treatment_not_in_mediator_model(self, mediation_columns):
        """The mediator model must contain the treatment."""
        model_m = fit_ols(mediation_columns, "M", ["C"])
        model_y = fit_ols(mediation_columns, "Y", ["X", "M"])
        with pytest.raises(ValidationError, match="treatment"):
            extract_mediation(model_m, model_y, "X", "M")

    def test_sample_size_mismatch(self, mediation_columns):
        """Both models must use the same observations."""
        half = {k: v[:100] for k, v in mediation_columns.items()}
        model_m = fit_ols(half, "M", ["X"])
        model_y = fit_ols(mediation_columns, "Y", ["X", "M"])
        with pytest.raises(ValidationError, match="observations"):
            extract_mediation(model_m, model_y, "X", "M")

    def test_mixed_model_types(self, ols_models):
        """Both models must be of the same type."""
        model_m, _ = ols_models
        with pytest.raises(ValidationError, match="model_y"):
            extract_mediation(model_m, object(), "X", "M")

    def test_missing_outcome_model(self, ols_models):
        model_m, _ = ols_models
        with pytest.raises(ValidationError, match="model_y"):
            extract_mediation(model_m, None, "X", "M")


# ═══════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════


class FakeFit:
    def __init__(self, a, b, c_prime):
        self.a, self.b, self.c_prime = a, b, c_prime


class TestRegistry:
    """Extractor registration and lookup."""

    def test_ols_registered(self):
        """OLSFit is registered on import."""
        assert OLSFit in registered_types()

    def test_unknown_type(self):
        """Unknown types list the supported ones."""
        with pytest.raises(ValidationError, match=r"no extractor registered for str.*OLSFit"):
            get_extractor("not a model")

    def test_register_custom(self):
        """A custom extractor is used and can be removed."""
        @register_extractor(FakeFit)
        def _extract_fake(model_m, model_y, *, treatment, mediator, outcome, data):
            pe = ParameterEstimate(
                {f"m_{treatment}": model_m.a, f"y_{mediator}": model_y.b,
                 f"y_{treatment}": model_y.c_prime},
                np.eye(3) * 0.01,
            )
            return MediationData(pe, treatment, mediator, outcome or "Y")

        try:
            md = extract_mediation(FakeFit(0.3, 0, 0), FakeFit(0, 0.6, 0.1), "T", "Med")
            assert md.a_path == 0.3
            assert md.b_path == 0.6
            assert md.outcome == "Y"
        finally:
            unregister_extractor(FakeFit)
        assert FakeFit not in registered_types()

    def test_subclass_uses_parent_extractor(self):
        """Lookup follows the MRO."""
        class SubFit(FakeFit):
            pass

        @register_extractor(FakeFit)
        def _extract_fake(model_m, model_y, **kwargs):
            return "fake"

        try:
            assert get_extractor(SubFit(0, 0, 0)) is _extract_fake
        finally:
            unregister_extractor(FakeFit)

    def test_duplicate_registration(self):
        """A type can only be registered once."""
        with pytest.raises(ValidationError, match="already registered"):
            @register_extractor(OLSFit)
            def _again(*args, **kwargs):
                pass

    def test_non_class(self):
        """Only classes can be registered."""
        with pytest.raises(ValidationError, match="must be a class"):
            register_extractor("OLSFit")
