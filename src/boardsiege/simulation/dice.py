"""DiceEconomy — the dice budget for one explore segment."""

from __future__ import annotations

import random

DIE_FACES = 6


class DiceEconomy:
    """Tracks how many dice remain before the next battle."""

    def __init__(self, rng: random.Random | None = None, dice_left: int = 0) -> None:
        self._rng = rng or random.Random()
        self.dice_left = max(0, dice_left)

    def reset(self, base: int) -> None:
        self.dice_left = max(0, base)

    def roll(self) -> int | None:
        """Consume one die and return its face, or None if none are left."""
        if self.dice_left <= 0:
            return None
        self.dice_left -= 1
        return self._rng.randint(1, DIE_FACES)

    def add_dice(self, extra: int) -> None:
        self.dice_left += max(0, extra)

    @property
    def exhausted(self) -> bool:
        return self.dice_left <= 0
