#!/usr/bin/env python3
"""
Odds Table - Analytic vs simulated expected value per risk tier.

Usage:
    # Analytic table only
    python scripts/simulate_odds.py

    # Add a Monte Carlo estimate per tier (cost 10, 200k gems, seeded)
    python scripts/simulate_odds.py --simulate --cost 10 --rounds 200000 --seed 42

    # JSON output
    python scripts/simulate_odds.py --simulate --json
"""

import sys
import os
import json
import argparse

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fugazzi.services.odds import tier_odds, simulate_tier
from fugazzi.services.population import RiskTier


def main():
    parser = argparse.ArgumentParser(description="Expected value per Fugazzi risk tier")
    parser.add_argument("--simulate", action="store_true", help="Add a Monte Carlo estimate")
    parser.add_argument("--cost", type=int, default=10, help="Gem cost for the simulation")
    parser.add_argument("--rounds", type=int, default=100_000, help="Gems sampled per tier")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the simulation")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    args = parser.parse_args()

    rows = []
    for tier in RiskTier:
        analytic = tier_odds(tier)
        row = {"analytic": analytic.to_dict()}
        if args.simulate:
            row["simulated"] = simulate_tier(tier, args.cost, args.rounds, args.seed).to_dict()
        rows.append(row)

    if args.json:
        print(json.dumps(rows, indent=2))
        return

    print(f"{'tier':<8} {'p(fake)':>8} {'real EV':>9} {'fugazzi EV':>11}", end="")
    print(f" {'sim real':>9} {'sim fugazzi':>12}" if args.simulate else "")
    print("-" * (38 + (23 if args.simulate else 0)))
    for row in rows:
        a = row["analytic"]
        line = f"{a['tier']:<8} {a['fake_probability']:>8.2f} {a['real_call_ev']:>+9.3f} {a['fugazzi_call_ev']:>+11.3f}"
        if args.simulate:
            s = row["simulated"]
            line += f" {s['real_call_ev']:>+9.3f} {s['fugazzi_call_ev']:>+12.3f}"
        print(line)


if __name__ == "__main__":
    main()
