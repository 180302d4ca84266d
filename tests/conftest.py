"""Shared fixtures for BoardSiege tests."""

from __future__ import annotations

import random
from typing import Callable, Iterable

import pytest

from boardsiege.config import Settings
from boardsiege.simulation.board import BoardLayout, BoardModel, TileType


class ScriptedRandom(random.Random):
    """Random source that replays scripted integers before falling back.

    ``randint`` and ``randrange`` pop from the script while it lasts, so a
    test can pin dice faces and tile-effect draws.  Everything else (and
    any call after the script runs out) behaves like a seeded Random.
    """

    def __init__(self, ints: Iterable[int] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self.script = list(ints)

    def randint(self, a: int, b: int) -> int:
        if self.script:
            value = self.script.pop(0)
            assert a <= value <= b, f"scripted {value} outside [{a}, {b}]"
            return value
        return super().randint(a, b)

    def randrange(self, start, stop=None, step=1):
        if self.script:
            value = self.script.pop(0)
            upper = start if stop is None else stop
            assert value < upper, f"scripted {value} outside range {upper}"
            return value
        return super().randrange(start, stop, step)


@pytest.fixture
def scripted_rng() -> Callable[..., ScriptedRandom]:
    return ScriptedRandom


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides) -> Settings:
        values = {
            "base_dice": 3,
            "base_health": 10,
            "log_capacity": 12,
            "seed": None,
        }
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def line_board() -> Callable[..., BoardModel]:
    """Build a single-row board of the given tile types.

    Tiles are 10 units wide with no spacing, so cell i sits at
    ``(-5 * (n - 1) + 10 * i, 0)`` and the base is at the origin.
    """
    def _make(types: Iterable[TileType | str], **kwargs) -> BoardModel:
        types = list(types)
        layout = BoardLayout(columns=max(1, len(types)), tile_size=10.0, spacing=0.0)
        return BoardModel.from_types(types, layout=layout, **kwargs)
    return _make
