#!/usr/bin/env python3
"""Print a pricing report for two worked examples.

Usage
-----
    python scripts/demo.py
"""

from __future__ import annotations
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from bsmpricer import CALL, PUT, OptionSpec, greeks, price
from bsmpricer.cli import report


def main():
    print("=== Black-Scholes Option Pricing Model ===\n")
    report(OptionSpec(S0=100.0, K=100.0, T=1.0, r=0.05, sigma=0.2, q=0.0))

    # Six-month option struck 5% out of the money
    print("\n=== Out-of-the-money call, 6 months ===\n")
    opt = OptionSpec(S0=100.0, K=105.0, T=0.5, r=0.05, sigma=0.25)
    print(f"Call Option Price: {price(opt, CALL):.2f}")
    print(f"Put Option Price:  {price(opt, PUT):.2f}")
    g = greeks(opt, CALL)
    print("\nCall Option Greeks:")
    print(f"  Delta: {g.delta:.4f} (sensitivity to spot price)")
    print(f"  Gamma: {g.gamma:.4f} (rate of change of delta)")
    print(f"  Vega:  {g.vega:.4f} (sensitivity to volatility)")
    print(f"  Theta: {g.theta:.4f} (time decay per day)")
    print(f"  Rho:   {g.rho:.4f} (sensitivity to interest rate)")


if __name__ == "__main__":
    main()
