# black_scholes.py
# Closed-form Black-Scholes-Merton price, Greeks and implied vol for a
# single European option.

from __future__ import annotations

import logging
import math
from math import exp, log, sqrt

from .core import (
    CALL,
    ConvergenceFailure,
    FailureReason,
    Greeks,
    InvalidParameter,
    OptionKind,
    OptionSpec,
)
from .stats import norm_cdf, norm_pdf

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0
INITIAL_VOL_GUESS = 0.3
MIN_VEGA = 1e-10
VOL_FLOOR = 1e-3
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TOLERANCE = 1e-6


def d1_d2(opt: OptionSpec) -> tuple[float, float]:
    rt = opt.sigma * sqrt(opt.T)
    d1 = (log(opt.S0 / opt.K) + (opt.r - opt.q + 0.5 * opt.sigma * opt.sigma) * opt.T) / rt
    d2 = d1 - rt
    return d1, d2


def price(opt: OptionSpec, kind: OptionKind | str = CALL) -> float:
    kind = OptionKind.parse(kind)
    d1, d2 = d1_d2(opt)
    disc_r = exp(-opt.r * opt.T)
    disc_q = exp(-opt.q * opt.T)
    if kind is OptionKind.CALL:
        return opt.S0 * disc_q * norm_cdf(d1) - opt.K * disc_r * norm_cdf(d2)
    return opt.K * disc_r * norm_cdf(-d2) - opt.S0 * disc_q * norm_cdf(-d1)


def parity_gap(opt: OptionSpec) -> float:
    """``(C - P) - (S*e^{-qT} - K*e^{-rT})``; zero up to rounding."""
    forward_leg = opt.S0 * exp(-opt.q * opt.T) - opt.K * exp(-opt.r * opt.T)
    return (price(opt, OptionKind.CALL) - price(opt, OptionKind.PUT)) - forward_leg


def greeks(opt: OptionSpec, kind: OptionKind | str = CALL) -> Greeks:
    """All five Greeks from one evaluation of d1/d2.

    Vega and rho are per 1 vol/rate point (divided by 100), theta is per
    calendar day (divided by 365).
    """
    kind = OptionKind.parse(kind)
    d1, d2 = d1_d2(opt)
    sqrt_T = math.sqrt(opt.T)
    disc_r = math.exp(-opt.r * opt.T)
    disc_q = math.exp(-opt.q * opt.T)
    n_d1 = norm_pdf(d1)

    # Common
    gamma = disc_q * n_d1 / (opt.S0 * opt.sigma * sqrt_T)
    vega = opt.S0 * disc_q * n_d1 * sqrt_T / 100.0
    decay = -opt.S0 * n_d1 * opt.sigma * disc_q / (2.0 * sqrt_T)

    if kind is OptionKind.CALL:
        N_d1 = norm_cdf(d1)
        N_d2 = norm_cdf(d2)
        delta = disc_q * N_d1
        theta = (decay
                 - opt.q * opt.S0 * N_d1 * disc_q
                 + opt.r * opt.K * disc_r * N_d2)
        rho = opt.K * opt.T * disc_r * N_d2
    else:
        N_md1 = norm_cdf(-d1)
        N_md2 = norm_cdf(-d2)
        delta = -disc_q * N_md1
        theta = (decay
                 + opt.q * opt.S0 * N_md1 * disc_q
                 - opt.r * opt.K * disc_r * N_md2)
        rho = -opt.K * opt.T * disc_r * N_md2

    return Greeks(
        delta=delta,
        gamma=gamma,
        vega=vega,
        theta=theta / DAYS_PER_YEAR,
        rho=rho / 100.0,
    )


# ---------------------------------------------------------------------------
# Implied volatility
# ---------------------------------------------------------------------------
def implied_vol(
    opt: OptionSpec,
    kind: OptionKind | str,
    market_price: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> float:
    """Newton-Raphson on sigma, starting from ``INITIAL_VOL_GUESS``.

    ``opt.sigma`` is ignored; every other input is held fixed. A step that
    lands on a non-positive vol is clamped to ``VOL_FLOOR`` and iteration
    continues.

    Raises
    ------
    ConvergenceFailure
        ``VEGA_TOO_SMALL`` when raw vega drops below ``MIN_VEGA``, or
        ``FAILED_TO_CONVERGE`` once ``max_iterations`` passes are used up.
    """
    kind = OptionKind.parse(kind)
    vol = INITIAL_VOL_GUESS

    for i in range(1, max_iterations + 1):
        trial = opt.with_sigma(vol)
        px = price(trial, kind)
        vega = greeks(trial, kind).vega * 100.0  # back to dPrice/dSigma

        if abs(vega) < MIN_VEGA:
            logger.debug("iv: vega %.3e below floor at sigma=%.6g (iteration %d)", vega, vol, i)
            raise ConvergenceFailure(FailureReason.VEGA_TOO_SMALL, iterations=i, sigma=vol)

        diff = market_price - px
        if abs(diff) < tolerance:
            logger.debug("iv: converged to sigma=%.8f in %d iteration(s)", vol, i)
            return vol

        vol += diff / vega
        if not math.isfinite(vol):
            logger.debug("iv: step gave non-finite sigma at iteration %d", i)
            raise ConvergenceFailure(FailureReason.FAILED_TO_CONVERGE, iterations=i, sigma=vol)
        if vol <= 0.0:
            logger.debug("iv: step gave sigma=%.6g, clamping to %g", vol, VOL_FLOOR)
            vol = VOL_FLOOR

    logger.debug("iv: no convergence after %d iteration(s), last sigma=%.6g", max_iterations, vol)
    raise ConvergenceFailure(
        FailureReason.FAILED_TO_CONVERGE,
        iterations=max_iterations,
        sigma=vol if max_iterations > 0 else None,
    )


def implied_vol_brent(
    opt: OptionSpec,
    kind: OptionKind | str,
    market_price: float,
    *,
    tol: float = 1e-8,
    maxiter: int = 100,
    bracket: tuple[float, float] = (1e-6, 5.0),
) -> float:
    """Brent root find on sigma inside ``bracket``."""
    from scipy.optimize import brentq

    kind = OptionKind.parse(kind)

    def f(sig):
        return price(opt.with_sigma(sig), kind) - market_price

    a, b = bracket
    try:
        root, info = brentq(f, a, b, xtol=tol, maxiter=maxiter, full_output=True, disp=False)
    except InvalidParameter:
        # bracket end is not a valid vol
        raise
    except ValueError as exc:
        # f(a) and f(b) share a sign
        raise ConvergenceFailure(FailureReason.FAILED_TO_CONVERGE, detail=str(exc)) from exc
    if not info.converged:
        raise ConvergenceFailure(
            FailureReason.FAILED_TO_CONVERGE, iterations=info.iterations, sigma=float(root)
        )
    logger.debug("iv (brent): sigma=%.8f in %d iteration(s)", root, info.iterations)
    return float(root)
