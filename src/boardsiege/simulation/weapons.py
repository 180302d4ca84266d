"""WeaponTargetingEngine — placed weapons, cooldowns, and target priority.

Architecture
------------
Weapons are bound to board cells, at most one per cell.  They are stored
in a dict keyed by cell index, so placing a weapon on an occupied cell
replaces the old one in place (its slot in iteration order is kept) and
lookups never scan a list.

Each tick every weapon's cooldown drops by ``dt`` (floored at 0).  A weapon
fires only when its cooldown is exactly 0 after that reduction.  It then
picks a target among live enemies inside its range:

  1. the enemy closest to the defended base wins,
  2. ties go to the enemy closest to the firing weapon,
  3. remaining ties keep the earliest-spawned enemy.

Damage is a roll in ``[1, floor(damage)]``, so a weapon's ``damage`` is
its maximum hit, not a guaranteed amount.  With no target in range the
weapon stays ready and tries again next tick.

The enemy list is re-queried for every weapon, so an enemy killed by one
weapon is never targeted by the next one in the same tick.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Protocol

from loguru import logger

if TYPE_CHECKING:
    from .board import BoardModel, Vec2


@dataclass(frozen=True)
class WeaponDefinition:
    """Catalog entry a weapon instance is built from."""

    name: str
    damage: float
    interval: float
    weapon_range: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "damage": self.damage,
            "interval": self.interval,
            "range": self.weapon_range,
        }


# Fixed catalog offered on Weapon tiles (ranges in board units)
WEAPON_CATALOG: tuple[WeaponDefinition, ...] = (
    WeaponDefinition("Short Sword",  damage=3, interval=0.9, weapon_range=220.0),
    WeaponDefinition("Long Spear",   damage=5, interval=1.3, weapon_range=260.0),
    WeaponDefinition("Ballista",     damage=4, interval=0.7, weapon_range=180.0),
    WeaponDefinition("Staff",        damage=6, interval=1.6, weapon_range=300.0),
    WeaponDefinition("Flying Blade", damage=2, interval=0.4, weapon_range=160.0),
)


@dataclass
class WeaponInstance:
    """A weapon placed on a board cell."""

    name: str
    damage: float
    interval: float
    weapon_range: float
    cell_index: int
    cooldown: float = 0.0

    @classmethod
    def from_definition(cls, cell_index: int, definition: WeaponDefinition) -> WeaponInstance:
        return cls(
            name=definition.name,
            damage=definition.damage,
            interval=definition.interval,
            weapon_range=definition.weapon_range,
            cell_index=cell_index,
        )

    @property
    def ready(self) -> bool:
        return self.cooldown == 0

    def to_dict(self) -> dict:
        return {
            "cell_index": self.cell_index,
            "name": self.name,
            "cooldown_remaining": round(self.cooldown, 4),
        }


class Targetable(Protocol):
    id: int
    position: Vec2

    @property
    def alive(self) -> bool: ...


class EnemyQuery(Protocol):
    """What the targeting engine needs from whoever owns the enemies."""

    def active_enemies(self) -> list: ...

    def damage_enemy(self, enemy_id: int, amount: int) -> bool: ...


@dataclass(frozen=True)
class Shot:
    """Record of one weapon firing."""

    cell_index: int
    weapon_name: str
    enemy_id: int
    damage: int
    killed: bool


def find_priority_enemy(
    origin: Vec2,
    weapon_range: float,
    base_position: Vec2,
    enemies: Iterable[Targetable],
) -> Targetable | None:
    """Pick the in-range enemy closest to the base, then closest to *origin*.

    Dead enemies are skipped.  Returns None when nothing is in range.
    """
    best: Targetable | None = None
    best_base = math.inf
    best_weapon = math.inf
    for enemy in enemies:
        if not enemy.alive:
            continue
        weapon_dist = math.dist(origin, enemy.position)
        if weapon_dist > weapon_range:
            continue
        base_dist = math.dist(base_position, enemy.position)
        if base_dist < best_base or (base_dist == best_base and weapon_dist < best_weapon):
            best = enemy
            best_base = base_dist
            best_weapon = weapon_dist
    return best


def roll_damage(rng: random.Random, max_damage: float) -> int:
    """Uniform integer hit in ``[1, max(1, floor(max_damage))]``."""
    upper = max(1, math.floor(max_damage))
    return rng.randint(1, upper)


def expected_dps(definition: WeaponDefinition) -> float:
    """Mean damage per second: the average of a [1, floor(damage)] roll per interval."""
    upper = max(1, math.floor(definition.damage))
    return (1 + upper) / 2 / definition.interval


class WeaponTargetingEngine:
    """Owns placed weapons and resolves their fire each tick."""

    def __init__(self, board: BoardModel, rng: random.Random | None = None) -> None:
        self._board = board
        self._rng = rng or random.Random()
        self._weapons: dict[int, WeaponInstance] = {}

    @property
    def weapons(self) -> list[WeaponInstance]:
        return list(self._weapons.values())

    @property
    def weapon_count(self) -> int:
        return len(self._weapons)

    def weapon_at(self, cell_index: int) -> WeaponInstance | None:
        return self._weapons.get(cell_index)

    def add_weapon_to_cell(self, cell_index: int, definition: WeaponDefinition) -> WeaponInstance:
        """Bind *definition* to *cell_index*, replacing any weapon already there."""
        instance = WeaponInstance.from_definition(cell_index, definition)
        replaced = self._weapons.get(cell_index)
        self._weapons[cell_index] = instance
        if replaced is not None:
            logger.debug(f"Cell {cell_index}: {replaced.name} replaced by {instance.name}")
        else:
            logger.debug(f"Cell {cell_index}: placed {instance.name}")
        return instance

    def clear(self) -> None:
        self._weapons.clear()

    def tick(self, dt: float, enemies: EnemyQuery) -> list[Shot]:
        """Advance cooldowns and fire every ready weapon that has a target."""
        shots: list[Shot] = []
        if not self._weapons or self._board.is_empty:
            return shots

        base_position = self._board.base_position
        for weapon in self._weapons.values():
            weapon.cooldown = max(0.0, weapon.cooldown - dt)
            if weapon.cooldown > 0:
                continue
            origin = self._board.cell_position(weapon.cell_index)
            target = find_priority_enemy(
                origin, weapon.weapon_range, base_position, enemies.active_enemies()
            )
            if target is None:
                continue
            damage = roll_damage(self._rng, weapon.damage)
            killed = enemies.damage_enemy(target.id, damage)
            weapon.cooldown = weapon.interval
            shots.append(Shot(
                cell_index=weapon.cell_index,
                weapon_name=weapon.name,
                enemy_id=target.id,
                damage=damage,
                killed=killed,
            ))
            logger.debug(
                f"{weapon.name}@{weapon.cell_index} hit enemy {target.id} for {damage}"
                + (" (killed)" if killed else "")
            )
        return shots
