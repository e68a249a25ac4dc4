"""
Linear algebra kernels for pymedfit.

CPU functions use NumPy/SciPy (LAPACK under the hood), return structured
results, and raise immediately with clear messages.
"""

from pymedfit.core.compute.linalg.qr import QRResult, qr_cpu, qr_lstsq

__all__ = [
    "QRResult",
    "qr_cpu",
    "qr_lstsq",
]
