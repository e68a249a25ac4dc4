"""
Numerical tolerances shared across pymedfit.

Used by value-object validation (symmetry of covariance matrices) and by
the parametric bootstrap's positive semi-definiteness check.
"""

# Covariance matrices from fitted models are symmetric only up to
# round-off in X'X inversion.
SYMMETRY_RTOL = 1e-8
SYMMETRY_ATOL = 1e-10

# Relative eigenvalue floor for positive semi-definiteness:
# min(eig) >= -PSD_TOL * max(1, max|eig|).
PSD_TOL = 1e-10
