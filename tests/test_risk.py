"""Tests for the bump-and-reprice risk checks."""

import numpy as np
import pytest
from bsmpricer import OptionSpec, CALL, PUT, InvalidParameter, greeks, price
from bsmpricer.risk import numerical_greeks, spot_ladder

OPT = OptionSpec(S0=100, K=100, T=1.0, r=0.05, sigma=0.2)


class TestNumericalGreeks:
    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_vs_analytical_bs(self, kind):
        ng = numerical_greeks(OPT, kind)
        ag = greeks(OPT, kind)
        assert abs(ng.delta - ag.delta) < 5e-4
        assert abs(ng.gamma - ag.gamma) < 1e-4
        assert abs(ng.vega - ag.vega) < 1e-4
        assert abs(ng.rho - ag.rho) < 1e-4

    def test_with_dividend(self):
        opt = OptionSpec(S0=105, K=95, T=0.5, r=0.03, sigma=0.35, q=0.02)
        ng = numerical_greeks(opt, CALL)
        ag = greeks(opt, CALL)
        assert abs(ng.delta - ag.delta) < 5e-4
        assert abs(ng.vega - ag.vega) < 1e-4

    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_theta_matches_without_carry(self, kind):
        # the closed-form carry terms only vanish when r = q = 0
        opt = OptionSpec(S0=100, K=110, T=0.8, r=0.0, sigma=0.25)
        assert numerical_greeks(opt, kind).theta == pytest.approx(greeks(opt, kind).theta, abs=1e-4)

    def test_put_delta_negative(self):
        assert numerical_greeks(OPT, PUT).delta < 0

    def test_theta_zero_inside_last_day(self):
        opt = OptionSpec(S0=100, K=100, T=0.5 / 365.0, r=0.05, sigma=0.2)
        assert numerical_greeks(opt, CALL).theta == 0.0


class TestSpotLadder:
    def test_matches_scalar(self):
        ladder = spot_ladder(OPT, [90, 95, 100, 105, 110])
        assert ladder["call"].shape == (5,)
        for s, c, p in zip(ladder["spot"], ladder["call"], ladder["put"]):
            opt = OptionSpec(S0=s, K=OPT.K, T=OPT.T, r=OPT.r, sigma=OPT.sigma)
            assert c == pytest.approx(price(opt, CALL), abs=1e-10)
            assert p == pytest.approx(price(opt, PUT), abs=1e-10)

    def test_monotone_in_spot(self):
        ladder = spot_ladder(OPT, np.linspace(80, 120, 9))
        assert np.all(np.diff(ladder["call"]) > 0)
        assert np.all(np.diff(ladder["put"]) < 0)

    def test_rejects_non_positive_spot(self):
        with pytest.raises(InvalidParameter):
            spot_ladder(OPT, [100.0, 0.0])
