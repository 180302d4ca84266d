"""Simulation error taxonomy.

All of these are recoverable.  GameOver is a phase, not an exception.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for rejected simulation actions."""


class NoDiceRemaining(SimulationError):
    """A roll was attempted with no dice left in the explore segment."""

    def __init__(self) -> None:
        super().__init__("no dice left")


class InvalidPhase(SimulationError):
    """An action was attempted outside the phase that accepts it."""

    def __init__(self, action: str, phase: str, reason: str | None = None) -> None:
        self.action = action
        self.phase = phase
        super().__init__(reason or f"{action} not allowed during {phase}")


class InvalidChoice(SimulationError, ValueError):
    """A reward choice index fell outside the offered options."""

    def __init__(self, index: int, option_count: int) -> None:
        self.index = index
        self.option_count = option_count
        super().__init__(f"choice {index} out of range (0..{option_count - 1})")


class DegenerateBoard(SimulationError):
    """The board has no tiles, so there is nothing to target or stand on."""

    def __init__(self) -> None:
        super().__init__("board has no tiles")
