"""Headless driver that plays a GameSession without a view.

Useful for soak tests and balance checks: it rolls whenever exploring,
answers reward prompts with a chooser callback, and feeds fixed ``dt``
ticks to battles until the base falls or the tick budget runs out.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable, Sequence

from loguru import logger

from .session import GameSession, Phase
from .weapons import WeaponDefinition, expected_dps

Chooser = Callable[[Sequence[WeaponDefinition]], int]


def choose_first(options: Sequence[WeaponDefinition]) -> int:
    return 0


def choose_highest_damage(options: Sequence[WeaponDefinition]) -> int:
    return max(range(len(options)), key=lambda i: expected_dps(options[i]))


@dataclass
class AutoplayReport:
    rolls: int
    ticks: int
    waves_cleared: int
    final_phase: str
    base_health: int
    total_kills: int

    def to_dict(self) -> dict:
        return asdict(self)


def run_autoplay(
    session: GameSession,
    dt: float = 0.1,
    max_ticks: int = 20_000,
    chooser: Chooser = choose_first,
    max_waves: int | None = None,
) -> AutoplayReport:
    """Drive *session* until GameOver, *max_waves* cleared, or *max_ticks* spent.

    Every loop iteration counts against the tick budget, so a session
    that can never leave a phase still terminates.
    """
    rolls = 0
    ticks = 0
    for _ in range(max_ticks):
        if session.phase is Phase.GAME_OVER:
            break
        if max_waves is not None and session.waves_cleared >= max_waves:
            break
        if session.phase is Phase.CHOOSING_REWARD:
            pending = session.pending_reward
            session.choose_weapon(chooser(pending.options) if pending else 0)
        elif session.phase is Phase.EXPLORE:
            if session.roll().accepted:
                rolls += 1
        else:
            session.tick(dt)
            ticks += 1

    report = AutoplayReport(
        rolls=rolls,
        ticks=ticks,
        waves_cleared=session.waves_cleared,
        final_phase=session.phase.value,
        base_health=session.base_health,
        total_kills=session.wave_sim.total_kills,
    )
    logger.info(f"Autoplay finished: {report.to_dict()}")
    return report
