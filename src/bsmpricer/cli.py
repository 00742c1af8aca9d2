import argparse
import logging
import sys
from math import exp

from .core import CALL, PUT, ConvergenceFailure, InvalidParameter, OptionKind, OptionSpec
from .black_scholes import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    INITIAL_VOL_GUESS,
    greeks,
    implied_vol,
    parity_gap,
    price,
)
from .risk import spot_ladder


def _kind(s: str):
    s = s.lower()
    if s in {"call", "c"}:
        return CALL
    if s in {"put", "p"}:
        return PUT
    raise argparse.ArgumentTypeError("kind must be 'call' or 'put'")


def add_common(parser: argparse.ArgumentParser, *, need_sigma: bool = True):
    parser.add_argument("--S0", type=float, required=True)
    parser.add_argument("--K", type=float, required=True)
    parser.add_argument("--T", type=float, required=True, help="years")
    parser.add_argument("--r", type=float, required=True, help="cont. risk-free")
    if need_sigma:
        parser.add_argument("--sigma", type=float, required=True)
    else:
        parser.add_argument("--sigma", type=float, default=INITIAL_VOL_GUESS, help=argparse.SUPPRESS)
    parser.add_argument("--q", type=float, default=0.0, help="cont. dividend yield")
    parser.add_argument("--kind", type=_kind, default=CALL, help="call|put")


def _spec(args) -> OptionSpec:
    return OptionSpec(args.S0, args.K, args.T, args.r, args.sigma, args.q)


def _print_greeks(g, indent: str = ""):
    for key, value in g.as_dict().items():
        print(f"{indent}{key.capitalize() + ':':<7} {value:.4f}")


def cmd_price(args):
    print(f"{price(_spec(args), args.kind):.10f}")


def cmd_greeks(args):
    _print_greeks(greeks(_spec(args), args.kind))


def cmd_iv(args):
    iv = implied_vol(_spec(args), args.kind, args.price, args.max_iter, args.tol)
    print(f"{iv:.10f}")


def cmd_ladder(args):
    ladder = spot_ladder(_spec(args), args.spots)
    print("Spot Price | Call Price | Put Price")
    print("-----------|------------|----------")
    for s, c, p in zip(ladder["spot"], ladder["call"], ladder["put"]):
        print(f" {s:>9.2f} | {c:>10.4f} | {p:>9.4f}")


def report(opt: OptionSpec):
    """Print parameters, prices, Greeks, parity, IV round trip and a spot ladder."""
    print("Parameters:")
    print(f"  Spot Price (S):        {opt.S0:.2f}")
    print(f"  Strike Price (K):      {opt.K:.2f}")
    print(f"  Time to Expiry (T):    {opt.T:.2f} years")
    print(f"  Risk-Free Rate (r):    {opt.r * 100:.2f}%")
    print(f"  Volatility (sigma):    {opt.sigma * 100:.2f}%")
    print(f"  Dividend Yield (q):    {opt.q * 100:.2f}%")

    for kind in OptionKind:
        print(f"\n--- {kind.value.capitalize()} Option ---")
        print(f"Price: {price(opt, kind):.4f}")
        print("Greeks:")
        _print_greeks(greeks(opt, kind), indent="  ")

    print("\n--- Put-Call Parity Check ---")
    gap = parity_gap(opt)
    forward_leg = opt.S0 * exp(-opt.q * opt.T) - opt.K * exp(-opt.r * opt.T)
    print(f"C - P = {forward_leg + gap:.4f}")
    print(f"S*e^(-qT) - K*e^(-rT) = {forward_leg:.4f}")
    print(f"Difference: {abs(gap):.6f}")

    print("\n--- Implied Volatility ---")
    try:
        iv = implied_vol(opt, CALL, price(opt, CALL))
        print(f"Implied Vol from Call Price: {iv:.4f} ({iv * 100:.2f}%)")
    except ConvergenceFailure as e:
        print(f"Error calculating implied volatility: {e}")

    print("\n--- Price Sensitivity Analysis ---")
    ladder = spot_ladder(opt, [opt.S0 + d for d in (-10, -5, 0, 5, 10) if opt.S0 + d > 0])
    print("Spot Price | Call Price | Put Price")
    print("-----------|------------|----------")
    for s, c, p in zip(ladder["spot"], ladder["call"], ladder["put"]):
        print(f" {s:>9.2f} | {c:>10.2f} | {p:>9.2f}")


def cmd_report(args):
    report(_spec(args))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bsmpricer", description="Black-Scholes-Merton pricing CLI")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    p_price = sub.add_parser("price", help="Black-Scholes price")
    add_common(p_price)
    p_price.set_defaults(func=cmd_price)

    p_greeks = sub.add_parser("greeks", help="delta, gamma, vega, theta, rho")
    add_common(p_greeks)
    p_greeks.set_defaults(func=cmd_greeks)

    p_iv = sub.add_parser("iv", help="implied volatility from a market price")
    add_common(p_iv, need_sigma=False)
    p_iv.add_argument("--price", type=float, required=True, help="observed option price")
    p_iv.add_argument("--max-iter", dest="max_iter", type=int, default=DEFAULT_MAX_ITERATIONS)
    p_iv.add_argument("--tol", type=float, default=DEFAULT_TOLERANCE)
    p_iv.set_defaults(func=cmd_iv)

    p_ladder = sub.add_parser("ladder", help="call/put prices across spots")
    add_common(p_ladder)
    p_ladder.add_argument("--spots", type=float, nargs="+", required=True)
    p_ladder.set_defaults(func=cmd_ladder)

    p_report = sub.add_parser("report", help="full pricing report")
    add_common(p_report)
    p_report.set_defaults(func=cmd_report)

    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except InvalidParameter as e:
        print(f"invalid parameter ({e.field}): {e}", file=sys.stderr)
        return 2
    except ConvergenceFailure as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
