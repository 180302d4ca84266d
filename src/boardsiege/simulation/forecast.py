"""Quick battle forecast from the explorer's stats.

A read-only back-of-the-envelope estimate shown between explore segments:
how long the current stat block would take to grind down a few waves and a
boss.  It never touches session state.
"""

from __future__ import annotations

import random

from .stats import PlayerStats

FORECAST_WAVES = 3
WAVE_BASE_HP = 60.0
WAVE_HP_GROWTH = 0.2
ELITE_CHANCE = 0.25
ELITE_HP_MULT = 1.5
BOSS_HP = 180.0
TIME_LIMIT = 20.0
BOSS_TIME_BONUS = 10.0


def player_dps(stats: PlayerStats) -> float:
    return stats.atk * stats.atk_speed * (1.0 + stats.crit)


def forecast_battle(stats: PlayerStats, rng: random.Random, waves: int = FORECAST_WAVES) -> list[str]:
    dps = max(player_dps(stats), 0.1)
    lines = [f"Forecast: total DPS {dps:.1f}."]

    for i in range(1, waves + 1):
        elite = rng.random() < ELITE_CHANCE
        hp = WAVE_BASE_HP * (ELITE_HP_MULT if elite else 1.0) * (1 + i * WAVE_HP_GROWTH)
        time_to_kill = hp / dps
        kind = "elite" if elite else "normal"
        lines.append(f"Wave {i}: {kind} enemies, HP {hp:.0f}.")
        if time_to_kill <= TIME_LIMIT:
            lines.append(f"Wave {i}: cleared in {time_to_kill:.1f}s.")
        else:
            lines.append(f"Wave {i}: not cleared within {TIME_LIMIT:.0f}s.")

    boss_time = BOSS_HP / dps
    lines.append(f"Boss: HP {BOSS_HP:.0f}.")
    if boss_time <= TIME_LIMIT + BOSS_TIME_BONUS:
        lines.append(f"Boss: defeated in {boss_time:.1f}s.")
    else:
        lines.append(f"Boss: drawn-out fight, {boss_time:.1f}s.")
    return lines
