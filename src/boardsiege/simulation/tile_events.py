"""TileEventResolver — what happens when the explorer lands on a tile.

Resolution mutates the landed tile (level-ups) and the PlayerStats handle it
is given, and returns a TileOutcome describing everything the caller still
has to apply: base healing, bonus dice, or a pending weapon choice.  The
resolver never touches dice, base health, or placed weapons itself.

Weapon tiles level up and offer a choice of three catalog weapons; the
caller suspends until one is picked and then binds it to the landed cell.
Once a tile is at MAX_TILE_LEVEL it pays out gold instead.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .board import MAX_TILE_LEVEL, Tile, TileType
from .stats import PlayerStats
from .weapons import WEAPON_CATALOG, WeaponDefinition

HEAL_AMOUNT = 2
BUFF_DICE = 1
MAXED_TILE_GOLD = 5
WEAPON_CHOICES = 3

FORTUNE_TIERS = ("low", "mid", "high")


@dataclass
class TileOutcome:
    """Effects of one tile resolution that the session must still apply."""

    tile_type: TileType
    log: str
    extra_dice: int = 0
    base_heal: int = 0
    weapon_options: tuple[WeaponDefinition, ...] = field(default_factory=tuple)

    @property
    def awaiting_choice(self) -> bool:
        return bool(self.weapon_options)


class TileEventResolver:
    """Dispatches tile resolution by tile type."""

    def __init__(
        self,
        rng: random.Random | None = None,
        catalog: Sequence[WeaponDefinition] = WEAPON_CATALOG,
        choice_count: int = WEAPON_CHOICES,
    ) -> None:
        self._rng = rng or random.Random()
        self._catalog = tuple(catalog)
        self._choice_count = min(choice_count, len(self._catalog))
        self._handlers: dict[TileType, Callable[[Tile, PlayerStats], TileOutcome]] = {
            TileType.WEAPON: self._apply_weapon,
            TileType.SKILL: self._apply_skill,
            TileType.FORTUNE: self._apply_fortune,
            TileType.SHOP: self._apply_shop,
            TileType.DICE: self._apply_dice,
            TileType.HEAL: self._apply_heal,
            TileType.BUFF: self._apply_buff,
            TileType.EMPTY: self._apply_empty,
        }

    def resolve(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        return self._handlers[tile.type](tile, stats)

    def pick_weapon_options(self) -> tuple[WeaponDefinition, ...]:
        return tuple(self._rng.sample(self._catalog, self._choice_count))

    # -- Upgradeable tiles -----------------------------------------------------

    def _level_up(self, tile: Tile) -> bool:
        """Raise the tile one level.  Returns False when already maxed."""
        level = tile.level or 0
        if level >= MAX_TILE_LEVEL:
            tile.level = MAX_TILE_LEVEL
            return False
        tile.level = level + 1
        return True

    def _apply_weapon(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        if not self._level_up(tile):
            stats.add_gold(MAXED_TILE_GOLD)
            return TileOutcome(TileType.WEAPON, f"Weapon: tile maxed out, +{MAXED_TILE_GOLD} gold.")
        stats.level_weapon()
        options = self.pick_weapon_options()
        return TileOutcome(
            TileType.WEAPON,
            f"Weapon: tile up to Lv.{tile.level}, choose a weapon.",
            weapon_options=options,
        )

    def _apply_skill(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        if not self._level_up(tile):
            stats.add_gold(MAXED_TILE_GOLD)
            return TileOutcome(TileType.SKILL, f"Skill: tile maxed out, +{MAXED_TILE_GOLD} gold.")
        stats.level_skill()
        prefix = f"Skill: tile up to Lv.{tile.level},"
        roll = self._rng.randrange(4)
        if roll == 0:
            stats.add_atk(1)
            return TileOutcome(TileType.SKILL, f"{prefix} attack +1.")
        if roll == 1:
            stats.add_atk_speed(0.1)
            return TileOutcome(TileType.SKILL, f"{prefix} attack speed +0.1.")
        if roll == 2:
            stats.add_crit(0.05)
            return TileOutcome(TileType.SKILL, f"{prefix} crit +0.05.")
        stats.add_shop_discount(0.05)
        return TileOutcome(TileType.SKILL, f"{prefix} shop discount +5%.")

    # -- Random tiles ----------------------------------------------------------

    def _apply_fortune(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        tier_index = self._rng.randrange(len(FORTUNE_TIERS))
        tier = FORTUNE_TIERS[tier_index]
        low = tier_index == 0
        high = tier_index == 2
        roll = self._rng.randrange(6)
        if roll == 0:
            stats.add_atk(4 if high else 2)
            text = "attack up"
        elif roll == 1:
            stats.add_atk(-(2 if low else 1))
            text = "attack down"
        elif roll == 2:
            stats.add_atk_speed(0.2 if high else 0.1)
            text = "attack speed up"
        elif roll == 3:
            stats.add_atk_speed(-0.1)
            text = "attack speed down"
        elif roll == 4:
            stats.add_crit(0.1 if high else 0.05)
            text = "crit up"
        else:
            stats.add_hp(-(10 if low else 5))
            text = "hp down"
        return TileOutcome(TileType.FORTUNE, f"Fortune: {tier} draw, {text}.")

    def _apply_shop(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        pick = self._rng.randrange(4)
        if pick == 0:
            stats.add_atk(1)
            return TileOutcome(TileType.SHOP, "Shop: bought attack +1.")
        if pick == 1:
            stats.add_atk_speed(0.1)
            return TileOutcome(TileType.SHOP, "Shop: bought attack speed +0.1.")
        if pick == 2:
            stats.add_crit(0.05)
            return TileOutcome(TileType.SHOP, "Shop: bought crit +0.05.")
        stats.add_hp(10)
        return TileOutcome(TileType.SHOP, "Shop: bought a potion, hp +10.")

    def _apply_dice(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        extra = self._rng.randint(1, 3)
        stats.add_gold(1)
        return TileOutcome(TileType.DICE, f"Dice: +{extra} bonus dice, +1 gold.", extra_dice=extra)

    # -- Fixed tiles -----------------------------------------------------------

    def _apply_heal(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        return TileOutcome(TileType.HEAL, f"Heal: base health +{HEAL_AMOUNT}.", base_heal=HEAL_AMOUNT)

    def _apply_buff(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        return TileOutcome(TileType.BUFF, f"Buff: +{BUFF_DICE} bonus die.", extra_dice=BUFF_DICE)

    def _apply_empty(self, tile: Tile, stats: PlayerStats) -> TileOutcome:
        return TileOutcome(TileType.EMPTY, "Empty: nothing happens.")
