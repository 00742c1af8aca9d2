# stats.py
# Standard-normal primitives built on the Abramowitz-Stegun erf (7.1.26).
# Scalar versions use ``math``; the ``*_vec`` versions accept NumPy arrays.

from __future__ import annotations

import math

import numpy as np

# Abramowitz & Stegun 7.1.26, |error| <= 1.5e-7
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911

_SQRT_2 = math.sqrt(2.0)
_SQRT_2PI = math.sqrt(2.0 * math.pi)


# ---------------------------------------------------------------------------
# Scalar
# ---------------------------------------------------------------------------
def erf(x: float) -> float:
    """Error function via the Abramowitz-Stegun rational approximation.

    Evaluated on ``|x|`` and the sign reapplied, so ``erf(-x) == -erf(x)``
    for every ``x != 0``. Saturates to +/-1 for large ``|x|``.
    """
    sign = -1.0 if x < 0 else 1.0
    x = abs(x)
    t = 1.0 / (1.0 + _P * x)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    return sign * (1.0 - poly * math.exp(-x * x))


def norm_cdf(x: float) -> float:
    """Standard normal CDF, ``P(Z <= x)``."""
    return 0.5 * (1.0 + erf(x / _SQRT_2))


def norm_pdf(x: float) -> float:
    """Standard normal density, ``exp(-x**2/2) / sqrt(2*pi)``."""
    return math.exp(-0.5 * x * x) / _SQRT_2PI


# ---------------------------------------------------------------------------
# Vectorised
# ---------------------------------------------------------------------------
def erf_vec(x) -> np.ndarray:
    """Element-wise :func:`erf` with identical coefficients."""
    x = np.asarray(x, dtype=float)
    sign = np.where(x < 0, -1.0, 1.0)
    ax = np.abs(x)
    t = 1.0 / (1.0 + _P * ax)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    return sign * (1.0 - poly * np.exp(-ax * ax))


def norm_cdf_vec(x) -> np.ndarray:
    return 0.5 * (1.0 + erf_vec(np.asarray(x, dtype=float) / _SQRT_2))


def norm_pdf_vec(x) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    return np.exp(-0.5 * x * x) / _SQRT_2PI
