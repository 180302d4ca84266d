#!/usr/bin/env python3
"""Play a headless BoardSiege session and report how far it got.

Usage:
    python3 run_autoplay.py [--seed N] [--ticks N] [--dt SECONDS] [--waves N]
"""

import argparse
import json
import random
import sys
from pathlib import Path

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from boardsiege.config import Settings
from boardsiege.simulation import GameSession, run_autoplay
from boardsiege.simulation.autoplay import choose_highest_damage


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--ticks", type=int, default=20_000)
    parser.add_argument("--dt", type=float, default=0.1)
    parser.add_argument("--waves", type=int, default=None, help="stop after N cleared waves")
    args = parser.parse_args()

    settings = Settings(seed=args.seed) if args.seed is not None else Settings()
    session = GameSession(settings=settings, rng=random.Random(settings.seed))
    report = run_autoplay(
        session,
        dt=args.dt,
        max_ticks=args.ticks,
        chooser=choose_highest_damage,
        max_waves=args.waves,
    )

    print(json.dumps(report.to_dict(), indent=2))
    print("\n  --- Last log lines ---")
    for line in session.log_lines():
        print(f"  {line}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
