from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class InvalidParameter(ValueError):
    """Raised when an :class:`OptionSpec` is built with a non-positive input.

    ``field`` is one of ``"spot"``, ``"strike"``, ``"expiry"``,
    ``"volatility"``.
    """

    def __init__(self, field: str, value: float, message: str):
        super().__init__(message)
        self.field = field
        self.value = value


class FailureReason(str, Enum):
    VEGA_TOO_SMALL = "vega too small"
    FAILED_TO_CONVERGE = "failed to converge"


class ConvergenceFailure(RuntimeError):
    """Raised by the implied-volatility solvers.

    Attributes
    ----------
    reason : FailureReason
        Why the solver stopped.
    iterations : int
        Number of solver passes performed before giving up.
    sigma : float | None
        Last volatility guess, if any pass ran.
    """

    def __init__(self, reason: FailureReason, iterations: int = 0,
                 sigma: float | None = None, detail: str = ""):
        msg = f"implied volatility {reason.value} after {iterations} iteration(s)"
        if sigma is not None:
            msg += f" (last sigma={sigma:.6g})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.reason = reason
        self.iterations = iterations
        self.sigma = sigma


# ---------------------------------------------------------------------------
# Option kind
# ---------------------------------------------------------------------------
class OptionKind(str, Enum):
    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, kind) -> OptionKind:
        """Accept a member or its (case-insensitive) string value."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).strip().lower())
        except ValueError:
            raise ValueError(f"kind must be 'call' or 'put', got {kind!r}") from None


CALL = OptionKind.CALL
PUT = OptionKind.PUT


# ---------------------------------------------------------------------------
# Model parameters
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OptionSpec:
    """Black-Scholes-Merton inputs for one European option.

    Construction is the only validation point: spot, strike, expiry and
    volatility must be strictly positive and are checked in that order.
    Rate and dividend yield may take any sign.
    """
    S0: float
    K: float
    T: float          # years
    r: float          # continuous risk-free
    sigma: float
    q: float = 0.0    # continuous dividend yield

    def __post_init__(self):
        # ``not x > 0`` also rejects NaN
        if not self.S0 > 0:
            raise InvalidParameter("spot", self.S0, f"spot price S0 must be positive, got {self.S0}")
        if not self.K > 0:
            raise InvalidParameter("strike", self.K, f"strike K must be positive, got {self.K}")
        if not self.T > 0:
            raise InvalidParameter("expiry", self.T, f"time to expiry T must be positive, got {self.T}")
        if not self.sigma > 0:
            raise InvalidParameter(
                "volatility", self.sigma, f"volatility sigma must be positive, got {self.sigma}"
            )

    def with_sigma(self, sigma: float) -> OptionSpec:
        """Validated copy with a different volatility."""
        return replace(self, sigma=sigma)


def construct(S0: float, K: float, T: float, r: float, sigma: float, q: float = 0.0) -> OptionSpec:
    return OptionSpec(S0=S0, K=K, T=T, r=r, sigma=sigma, q=q)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Greeks:
    """Sensitivities at one evaluation point.

    Attributes
    ----------
    delta : float
        dV/dS.
    gamma : float
        d2V/dS2.
    vega : float
        Price change for a one-point (0.01) move in volatility.
    theta : float
        Time decay per calendar day.
    rho : float
        Price change for a one-point (0.01) move in the rate.
    """
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)
