"""Bump-and-reprice risk checks.

Numerical Greeks via central finite differences on the closed-form pricer,
reported in the same units as :func:`bsmpricer.black_scholes.greeks`, and a
spot ladder of call/put prices.
"""

from __future__ import annotations

from dataclasses import replace

import numpy as np

from .black_scholes import DAYS_PER_YEAR, price
from .black_scholes_vec import bs_price_vec
from .core import CALL, PUT, Greeks, OptionKind, OptionSpec

__all__ = [
    "numerical_greeks",
    "spot_ladder",
]


# ---------------------------------------------------------------------------
# Numerical Greeks
# ---------------------------------------------------------------------------

def numerical_greeks(
    opt: OptionSpec,
    kind: OptionKind | str = CALL,
    *,
    bump_pct: float = 0.01,
    rate_bump: float = 1e-4,
) -> Greeks:
    """Compute Greeks by repricing bumped copies of ``opt``.

    Parameters
    ----------
    opt : OptionSpec
    kind : OptionKind or str
    bump_pct : float
        Relative bump size for spot and vol (default 0.01).
    rate_bump : float
        Absolute bump for the rate (default 1bp).

    Returns
    -------
    Greeks
        Vega and rho per 1 point, theta per calendar day.  Theta is 0 when
        less than one day remains.
    """
    kind = OptionKind.parse(kind)
    P0 = price(opt, kind)

    # --- Delta & Gamma (spot bump) ---
    eps_S = bump_pct * opt.S0
    P_up = price(replace(opt, S0=opt.S0 + eps_S), kind)
    P_dn = price(replace(opt, S0=opt.S0 - eps_S), kind)
    delta = (P_up - P_dn) / (2.0 * eps_S)
    gamma = (P_up - 2.0 * P0 + P_dn) / (eps_S ** 2)

    # --- Vega (vol bump) ---
    eps_v = min(max(bump_pct * opt.sigma, 1e-4), 0.5 * opt.sigma)
    P_vup = price(opt.with_sigma(opt.sigma + eps_v), kind)
    P_vdn = price(opt.with_sigma(opt.sigma - eps_v), kind)
    vega = (P_vup - P_vdn) / (2.0 * eps_v)

    # --- Theta (time decay, 1-day bump) ---
    dt = 1.0 / DAYS_PER_YEAR
    if opt.T > dt:
        theta = price(replace(opt, T=opt.T - dt), kind) - P0
    else:
        theta = 0.0

    # --- Rho (rate bump) ---
    P_rup = price(replace(opt, r=opt.r + rate_bump), kind)
    P_rdn = price(replace(opt, r=opt.r - rate_bump), kind)
    rho = (P_rup - P_rdn) / (2.0 * rate_bump)

    return Greeks(
        delta=delta,
        gamma=gamma,
        vega=vega / 100.0,
        theta=theta,
        rho=rho / 100.0,
    )


# ---------------------------------------------------------------------------
# Spot ladder
# ---------------------------------------------------------------------------

def spot_ladder(opt: OptionSpec, spots) -> dict[str, np.ndarray]:
    """Call and put prices of ``opt`` re-struck at each spot in ``spots``.

    Every spot is validated through ``OptionSpec`` before pricing.

    Returns
    -------
    dict
        ``"spot"``, ``"call"``, ``"put"`` arrays of shape ``(n_spot,)``.
    """
    spots = np.atleast_1d(np.asarray(spots, dtype=float))
    for s in spots:
        replace(opt, S0=float(s))  # raises InvalidParameter for s <= 0

    args = (spots, opt.K, opt.T, opt.r, opt.q, opt.sigma)
    return {
        "spot": spots,
        "call": bs_price_vec(*args, CALL),
        "put": bs_price_vec(*args, PUT),
    }
