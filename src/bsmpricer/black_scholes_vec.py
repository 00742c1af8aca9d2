# black_scholes_vec.py
# Vectorised Black-Scholes pricing, Greeks, and implied-vol.
# All public functions accept scalars *or* NumPy arrays and broadcast.
# Units and solver rules match the scalar functions in black_scholes.py.

from __future__ import annotations

import logging

import numpy as np

from .black_scholes import (
    DAYS_PER_YEAR,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    INITIAL_VOL_GUESS,
    MIN_VEGA,
    VOL_FLOOR,
)
from .core import OptionKind
from .stats import norm_cdf_vec as _N
from .stats import norm_pdf_vec as _n

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _d1_d2(S, K, T, r, q, sigma):
    """Compute d1, d2 arrays.  All inputs broadcast."""
    S, K, T, r, q, sigma = (np.asarray(x, dtype=float) for x in (S, K, T, r, q, sigma))
    sqrt_T = np.sqrt(T)
    sig_sqrt_T = sigma * sqrt_T
    d1 = (np.log(S / K) + (r - q + 0.5 * sigma * sigma) * T) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T
    return d1, d2


def _is_call(kind) -> np.ndarray:
    """Return boolean mask: True where kind is a call."""
    kind = np.asarray(kind, dtype=object)
    if kind.ndim == 0:
        return np.bool_(OptionKind.parse(kind.item()) is OptionKind.CALL)
    flags = [OptionKind.parse(k) is OptionKind.CALL for k in kind.flat]
    return np.array(flags, dtype=bool).reshape(kind.shape)


# ---------------------------------------------------------------------------
# Vectorised price
# ---------------------------------------------------------------------------
def bs_price_vec(S, K, T, r, q, sigma, kind) -> np.ndarray:
    """Vectorised Black-Scholes price.

    Parameters accept scalars or arrays; NumPy broadcasting rules apply.
    Inputs are not validated here; build an ``OptionSpec`` first when the
    values come from outside.

    Returns
    -------
    np.ndarray
        Option prices (same shape as broadcasted inputs).
    """
    return _price(S, K, T, r, q, sigma, _is_call(kind))


def _price(S, K, T, r, q, sigma, is_call) -> np.ndarray:
    S, K, T, r, q, sigma = (np.asarray(x, dtype=float) for x in (S, K, T, r, q, sigma))
    d1, d2 = _d1_d2(S, K, T, r, q, sigma)
    disc_r = np.exp(-r * T)
    disc_q = np.exp(-q * T)

    call_px = disc_q * S * _N(d1) - disc_r * K * _N(d2)
    put_px = disc_r * K * _N(-d2) - disc_q * S * _N(-d1)

    return np.where(is_call, call_px, put_px)


# ---------------------------------------------------------------------------
# Vectorised Greeks
# ---------------------------------------------------------------------------
def bs_greeks_vec(S, K, T, r, q, sigma, kind) -> dict[str, np.ndarray]:
    """Vectorised Black-Scholes Greeks.

    Returns dict with keys: delta, gamma, vega, theta, rho.
    Vega and rho are per 1 point, theta is per calendar day.
    """
    S, K, T, r, q, sigma = (np.asarray(x, dtype=float) for x in (S, K, T, r, q, sigma))
    d1, d2 = _d1_d2(S, K, T, r, q, sigma)
    disc_r = np.exp(-r * T)
    disc_q = np.exp(-q * T)
    sqrt_T = np.sqrt(T)
    n_d1 = _n(d1)
    is_call = _is_call(kind)

    # Common
    gamma = disc_q * n_d1 / (S * sigma * sqrt_T)
    vega = S * disc_q * n_d1 * sqrt_T / 100.0
    decay = -S * n_d1 * sigma * disc_q / (2 * sqrt_T)

    # Call-specific
    delta_c = disc_q * _N(d1)
    theta_c = decay - q * S * _N(d1) * disc_q + r * K * disc_r * _N(d2)
    rho_c = K * T * disc_r * _N(d2)

    # Put-specific
    delta_p = -disc_q * _N(-d1)
    theta_p = decay + q * S * _N(-d1) * disc_q - r * K * disc_r * _N(-d2)
    rho_p = -K * T * disc_r * _N(-d2)

    delta = np.where(is_call, delta_c, delta_p)
    theta = np.where(is_call, theta_c, theta_p) / DAYS_PER_YEAR
    rho = np.where(is_call, rho_c, rho_p) / 100.0

    return {
        "delta": delta,
        "gamma": np.broadcast_to(gamma, delta.shape),
        "vega": np.broadcast_to(vega, delta.shape),
        "theta": theta,
        "rho": rho,
    }


# ---------------------------------------------------------------------------
# Vectorised implied-vol (Newton-Raphson, same rules as the scalar solver)
# ---------------------------------------------------------------------------
def bs_implied_vol_vec(
    S, K, T, r, q, target_prices, kind,
    *, tol: float = DEFAULT_TOLERANCE, maxiter: int = DEFAULT_MAX_ITERATIONS,
    init_vol: float = INITIAL_VOL_GUESS,
) -> np.ndarray:
    """Recover implied vol from market prices via Newton-Raphson on vega.

    Each entry follows the scalar ``implied_vol`` exactly: stop with failure
    when raw vega < ``MIN_VEGA``, succeed when ``|target - price| < tol``,
    otherwise step and clamp non-positive vols to ``VOL_FLOOR``.

    Returns
    -------
    np.ndarray
        Implied volatilities.  Entries that fail for either reason are ``NaN``.
    """
    S, K, T, r, q, target_prices = (
        np.asarray(x, dtype=float) for x in (S, K, T, r, q, target_prices)
    )
    is_call = _is_call(kind)
    shape = np.broadcast_shapes(
        S.shape, K.shape, T.shape, r.shape, q.shape, target_prices.shape, is_call.shape
    )
    S, K, T, r, q, target_prices, is_call = (
        np.broadcast_to(x, shape) for x in (S, K, T, r, q, target_prices, is_call)
    )
    sigma = np.full(shape, init_vol, dtype=float)
    result = np.full(shape, np.nan)
    active = np.ones(shape, dtype=bool)

    for _ in range(maxiter):
        if not active.any():
            break
        px = _price(S, K, T, r, q, sigma, is_call)
        d1, _ = _d1_d2(S, K, T, r, q, sigma)
        vega = S * np.exp(-q * T) * _n(d1) * np.sqrt(T)

        failed = active & (np.abs(vega) < MIN_VEGA)
        active &= ~failed

        diff = target_prices - px
        done = active & (np.abs(diff) < tol)
        result[done] = sigma[done]
        active &= ~done

        step = np.zeros(shape)
        np.divide(diff, vega, out=step, where=active)
        sigma = np.where(active, sigma + step, sigma)
        sigma = np.where(active & (sigma <= 0.0), VOL_FLOOR, sigma)

    n_bad = int(np.isnan(result).sum())
    if n_bad:
        logger.debug("iv (vec): %d of %d entries did not converge", n_bad, result.size)
    return result
