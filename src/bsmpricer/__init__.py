# bsmpricer: Black-Scholes-Merton pricing engine
# Public API

from .core import (
    OptionSpec, OptionKind, CALL, PUT, Greeks, construct,
    InvalidParameter, ConvergenceFailure, FailureReason,
)
from .stats import erf, norm_cdf, norm_pdf
from .black_scholes import (
    price, greeks, implied_vol, implied_vol_brent, parity_gap, d1_d2,
)

# Vectorised pricers
from .black_scholes_vec import bs_price_vec, bs_greeks_vec, bs_implied_vol_vec

# Risk checks
from .risk import numerical_greeks, spot_ladder

__all__ = [
    # Model
    "OptionSpec", "OptionKind", "CALL", "PUT", "Greeks", "construct",
    # Errors
    "InvalidParameter", "ConvergenceFailure", "FailureReason",
    # Statistics
    "erf", "norm_cdf", "norm_pdf",
    # Scalar
    "price", "greeks", "implied_vol", "implied_vol_brent", "parity_gap", "d1_d2",
    # Vectorised
    "bs_price_vec", "bs_greeks_vec", "bs_implied_vol_vec",
    # Risk
    "numerical_greeks", "spot_ladder",
]

__version__ = "0.1.0"
