"""BoardModel — the linear track of tiles the player walks along.

Architecture
------------
The board is a fixed-length, ordered list of Tile entries.  Only a tile's
``level`` ever changes after construction (Weapon and Skill tiles level up
when landed on).  Movement never wraps: overshooting the last tile clamps
to it.

Tiles are also laid out on a 2D grid so the battle phase has something to
aim at.  Tiles are placed row-major, ``columns`` per row, each
``tile_size`` wide with ``spacing`` gaps, and the whole grid is centred on
the origin (y grows upward).  The defended base sits at the board centre
by default; enemies enter from a spawn point below the grid.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from .errors import DegenerateBoard

Vec2 = tuple[float, float]

# Highest level a Weapon/Skill tile can reach
MAX_TILE_LEVEL = 5


class TileType(str, Enum):
    WEAPON = "Weapon"
    HEAL = "Heal"
    BUFF = "Buff"
    SKILL = "Skill"
    FORTUNE = "Fortune"
    SHOP = "Shop"
    DICE = "Dice"
    EMPTY = "Empty"


# Tile types that carry an upgrade level
UPGRADEABLE_TYPES = frozenset({TileType.WEAPON, TileType.SKILL})


@dataclass
class Tile:
    """A single board cell."""

    type: TileType
    level: int | None = None

    def __post_init__(self) -> None:
        self.type = TileType(self.type)
        if self.level is None and self.type in UPGRADEABLE_TYPES:
            self.level = 0

    @property
    def upgradeable(self) -> bool:
        return self.type in UPGRADEABLE_TYPES

    @property
    def maxed(self) -> bool:
        return self.upgradeable and (self.level or 0) >= MAX_TILE_LEVEL

    def to_dict(self) -> dict:
        return {"type": self.type.value, "level": self.level}


@dataclass(frozen=True)
class BoardLayout:
    """Grid geometry used to place tiles in world space."""

    columns: int = 6
    tile_size: float = 90.0
    spacing: float = 12.0

    @property
    def pitch(self) -> float:
        return self.tile_size + self.spacing


class BoardModel:
    """Ordered, fixed-length sequence of tiles plus their world positions."""

    def __init__(
        self,
        tiles: Iterable[Tile],
        layout: BoardLayout | None = None,
        base_position: Vec2 | None = None,
        spawn_position: Vec2 | None = None,
    ) -> None:
        self._tiles: list[Tile] = list(tiles)
        self.layout = layout or BoardLayout()
        self.base_position: Vec2 = base_position or (0.0, 0.0)
        self.spawn_position: Vec2 = spawn_position or self._default_spawn_position()

    @classmethod
    def generate(
        cls,
        size: int,
        rng: random.Random,
        tile_types: Sequence[TileType] = tuple(TileType),
        layout: BoardLayout | None = None,
    ) -> BoardModel:
        """Build a board of *size* tiles with types drawn uniformly from *tile_types*."""
        tiles = [Tile(rng.choice(tile_types)) for _ in range(max(0, size))]
        return cls(tiles, layout=layout)

    @classmethod
    def from_types(cls, types: Iterable[TileType | str], **kwargs) -> BoardModel:
        return cls([Tile(TileType(t)) for t in types], **kwargs)

    # -- Queries ---------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._tiles)

    @property
    def length(self) -> int:
        return len(self._tiles)

    @property
    def is_empty(self) -> bool:
        return not self._tiles

    @property
    def last_index(self) -> int:
        return max(0, len(self._tiles) - 1)

    def tile_at(self, index: int) -> Tile:
        """Return the tile at *index*.  Raises IndexError when out of range."""
        if not 0 <= index < len(self._tiles):
            raise IndexError(f"tile index {index} out of range")
        return self._tiles[index]

    def clamp_index(self, index: int) -> int:
        return max(0, min(index, self.last_index))

    # -- Movement --------------------------------------------------------------

    def advance(self, current_index: int, steps: int) -> tuple[int, Tile | None]:
        """Move *steps* tiles forward from *current_index*, clamping at the end.

        Returns ``(new_index, landed_tile)``.  The tile is the live board
        entry, so resolution logic can level it up in place.  On an empty
        board the index stays 0 and the tile is None.
        """
        if self.is_empty:
            return 0, None
        new_index = self.clamp_index(current_index + max(0, steps))
        return new_index, self._tiles[new_index]

    # -- Geometry --------------------------------------------------------------

    @property
    def rows(self) -> int:
        return math.ceil(len(self._tiles) / max(1, self.layout.columns))

    def _grid_extent(self) -> Vec2:
        lay = self.layout
        columns = max(1, lay.columns)
        rows = max(1, self.rows)
        width = columns * lay.tile_size + (columns - 1) * lay.spacing
        height = rows * lay.tile_size + (rows - 1) * lay.spacing
        return width, height

    def cell_position(self, index: int) -> Vec2:
        """World position of the centre of tile *index*."""
        if self.is_empty:
            raise DegenerateBoard()
        index = self.clamp_index(index)
        lay = self.layout
        columns = max(1, lay.columns)
        width, height = self._grid_extent()
        offset_x = -width / 2 + lay.tile_size / 2
        offset_y = height / 2 - lay.tile_size / 2
        row, col = divmod(index, columns)
        return (offset_x + col * lay.pitch, offset_y - row * lay.pitch)

    def random_cell_index(self, rng: random.Random) -> int:
        if self.is_empty:
            raise DegenerateBoard()
        return rng.randrange(len(self._tiles))

    def _default_spawn_position(self) -> Vec2:
        _, height = self._grid_extent()
        return (0.0, -height / 2 - 1.5 * self.layout.tile_size)

    def to_list(self) -> list[dict]:
        return [t.to_dict() for t in self._tiles]
