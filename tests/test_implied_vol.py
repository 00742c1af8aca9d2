"""Tests for the Newton-Raphson and Brent implied-volatility solvers."""

import logging
import math

import pytest

from bsmpricer import (
    CALL,
    PUT,
    ConvergenceFailure,
    FailureReason,
    InvalidParameter,
    OptionSpec,
    implied_vol,
    implied_vol_brent,
    price,
)
from bsmpricer.black_scholes import VOL_FLOOR

OPT = OptionSpec(S0=100, K=100, T=1.0, r=0.05, sigma=0.2)


def test_recovers_reference_vol():
    iv = implied_vol(OPT, CALL, price(OPT, CALL), 100, 1e-6)
    assert abs(iv - 0.2) < 1e-3


def test_defaults():
    assert abs(implied_vol(OPT, PUT, price(OPT, PUT)) - 0.2) < 1e-3


def test_input_sigma_is_ignored():
    target = price(OPT, CALL)
    assert implied_vol(OPT.with_sigma(0.9), CALL, target) == implied_vol(OPT, CALL, target)


@pytest.mark.parametrize("K", [90.0, 100.0, 110.0])
@pytest.mark.parametrize("T", [0.5, 1.0, 2.0])
@pytest.mark.parametrize("sigma", [0.15, 0.2, 0.35, 0.6])
@pytest.mark.parametrize("kind", [CALL, PUT])
def test_round_trip_grid(K, T, sigma, kind):
    opt = OptionSpec(S0=100.0, K=K, T=T, r=0.03, sigma=sigma, q=0.01)
    iv = implied_vol(opt, kind, price(opt, kind))
    assert abs(iv - sigma) < 1e-3


@pytest.mark.parametrize("T, sigma", [
    (0.01, 0.2), (0.05, 0.5), (5.0, 0.05), (5.0, 1.0), (1.0, 0.05), (0.25, 1.0),
])
def test_round_trip_atm_extremes(T, sigma):
    opt = OptionSpec(S0=100.0, K=100.0, T=T, r=0.05, sigma=sigma)
    iv = implied_vol(opt, CALL, price(opt, CALL))
    assert abs(iv - sigma) < 1e-3


def test_vega_too_small_far_otm_short_expiry():
    opt = OptionSpec(S0=100.0, K=300.0, T=0.01, r=0.05, sigma=0.2)
    with pytest.raises(ConvergenceFailure) as exc:
        implied_vol(opt, CALL, 1.0)
    assert exc.value.reason is FailureReason.VEGA_TOO_SMALL
    assert exc.value.reason == "vega too small"
    assert exc.value.iterations == 1
    assert exc.value.sigma == 0.3


@pytest.mark.parametrize("kind", [CALL, PUT])
def test_zero_iterations_always_fails(kind):
    with pytest.raises(ConvergenceFailure) as exc:
        implied_vol(OPT, kind, price(OPT, kind), max_iterations=0)
    assert exc.value.reason is FailureReason.FAILED_TO_CONVERGE
    assert exc.value.iterations == 0
    assert exc.value.sigma is None


def test_iteration_budget_exhausted():
    with pytest.raises(ConvergenceFailure) as exc:
        implied_vol(OPT, CALL, price(OPT, CALL), max_iterations=1, tolerance=1e-12)
    assert exc.value.reason is FailureReason.FAILED_TO_CONVERGE
    assert exc.value.iterations == 1
    assert "failed to converge" in str(exc.value)


def test_non_positive_step_is_clamped(caplog):
    # ATM price at sigma=0.3 is ~14.2 with raw vega ~37.9, so a target of 1.0
    # steps below zero; the clamped vol then has vanishing vega.
    with caplog.at_level(logging.DEBUG, logger="bsmpricer.black_scholes"):
        with pytest.raises(ConvergenceFailure) as exc:
            implied_vol(OPT, CALL, 1.0)
    assert exc.value.reason is FailureReason.VEGA_TOO_SMALL
    assert exc.value.iterations == 2
    assert exc.value.sigma == VOL_FLOOR
    assert "clamping" in caplog.text


@pytest.mark.parametrize("target", [math.nan, math.inf, -math.inf])
def test_non_finite_target_fails_to_converge(target):
    with pytest.raises(ConvergenceFailure) as exc:
        implied_vol(OPT, CALL, target)
    assert exc.value.reason is FailureReason.FAILED_TO_CONVERGE
    assert exc.value.iterations == 1


def test_failure_is_runtime_error():
    assert issubclass(ConvergenceFailure, RuntimeError)


class TestBrent:
    def test_matches_newton(self):
        target = price(OPT, PUT)
        assert implied_vol_brent(OPT, PUT, target) == pytest.approx(
            implied_vol(OPT, PUT, target), abs=1e-5
        )

    def test_recovers_high_vol(self):
        opt = OptionSpec(S0=100.0, K=120.0, T=0.5, r=0.02, sigma=1.5)
        assert implied_vol_brent(opt, CALL, price(opt, CALL)) == pytest.approx(1.5, abs=1e-6)

    def test_price_outside_bracket(self):
        with pytest.raises(ConvergenceFailure) as exc:
            implied_vol_brent(OPT, CALL, 150.0)  # above the spot
        assert exc.value.reason is FailureReason.FAILED_TO_CONVERGE

    def test_invalid_bracket_is_not_a_convergence_failure(self):
        with pytest.raises(InvalidParameter) as exc:
            implied_vol_brent(OPT, CALL, price(OPT, CALL), bracket=(0.0, 5.0))
        assert exc.value.field == "volatility"
