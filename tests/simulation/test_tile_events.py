"""Unit tests for TileEventResolver dispatch and stat effects."""

from __future__ import annotations

import random

import pytest

from boardsiege.simulation.board import MAX_TILE_LEVEL, Tile, TileType
from boardsiege.simulation.stats import PlayerStats
from boardsiege.simulation.tile_events import (
    BUFF_DICE,
    HEAL_AMOUNT,
    MAXED_TILE_GOLD,
    WEAPON_CHOICES,
    TileEventResolver,
)
from boardsiege.simulation.weapons import WEAPON_CATALOG


pytestmark = pytest.mark.unit


# --------------------------------------------------------------------------
# Weapon tiles
# --------------------------------------------------------------------------

class TestWeaponTile:
    def test_level_climbs_then_pays_gold(self):
        resolver = TileEventResolver(random.Random(1))
        tile = Tile(TileType.WEAPON)
        stats = PlayerStats()
        for expected in range(1, MAX_TILE_LEVEL + 1):
            outcome = resolver.resolve(tile, stats)
            assert tile.level == expected
            assert outcome.awaiting_choice
        assert stats.gold == 0

        for n in range(1, 4):
            outcome = resolver.resolve(tile, stats)
            assert tile.level == MAX_TILE_LEVEL
            assert not outcome.awaiting_choice
            assert stats.gold == MAXED_TILE_GOLD * n

    def test_offers_distinct_catalog_weapons(self):
        resolver = TileEventResolver(random.Random(9))
        outcome = resolver.resolve(Tile(TileType.WEAPON), PlayerStats())
        assert len(outcome.weapon_options) == WEAPON_CHOICES
        assert len(set(outcome.weapon_options)) == WEAPON_CHOICES
        assert all(o in WEAPON_CATALOG for o in outcome.weapon_options)

    def test_weapon_level_stat_capped(self):
        resolver = TileEventResolver(random.Random(1))
        stats = PlayerStats(weapon_level=4)
        resolver.resolve(Tile(TileType.WEAPON), stats)
        resolver.resolve(Tile(TileType.WEAPON), stats)
        assert stats.weapon_level == 5

    def test_weapon_tile_does_not_touch_attack(self):
        resolver = TileEventResolver(random.Random(1))
        stats = PlayerStats()
        resolver.resolve(Tile(TileType.WEAPON), stats)
        assert stats.atk == PlayerStats().atk

    def test_small_catalog_limits_choices(self):
        resolver = TileEventResolver(random.Random(1), catalog=WEAPON_CATALOG[:2])
        outcome = resolver.resolve(Tile(TileType.WEAPON), PlayerStats())
        assert len(outcome.weapon_options) == 2


# --------------------------------------------------------------------------
# Skill tiles
# --------------------------------------------------------------------------

class TestSkillTile:
    @pytest.mark.parametrize("roll, field, expected", [
        (0, "atk", 11),
        (1, "atk_speed", 1.1),
        (2, "crit", 0.15),
        (3, "shop_discount", 0.05),
    ])
    def test_sub_effects(self, scripted_rng, roll, field, expected):
        resolver = TileEventResolver(scripted_rng([roll]))
        stats = PlayerStats()
        tile = Tile(TileType.SKILL)
        outcome = resolver.resolve(tile, stats)
        assert getattr(stats, field) == pytest.approx(expected)
        assert tile.level == 1
        assert stats.skill_level == 2
        assert not outcome.awaiting_choice

    def test_shop_discount_capped(self, scripted_rng):
        resolver = TileEventResolver(scripted_rng([3]))
        stats = PlayerStats(shop_discount=0.48)
        resolver.resolve(Tile(TileType.SKILL), stats)
        assert stats.shop_discount == pytest.approx(0.5)

    def test_maxed_skill_pays_gold(self):
        resolver = TileEventResolver(random.Random(1))
        stats = PlayerStats()
        tile = Tile(TileType.SKILL, level=MAX_TILE_LEVEL)
        outcome = resolver.resolve(tile, stats)
        assert stats.gold == MAXED_TILE_GOLD
        assert tile.level == MAX_TILE_LEVEL
        assert "maxed" in outcome.log


# --------------------------------------------------------------------------
# Fortune tiles
# --------------------------------------------------------------------------

class TestFortuneTile:
    @pytest.mark.parametrize("tier, roll, field, expected", [
        (2, 0, "atk", 14),           # high tier doubles attack gain
        (1, 0, "atk", 12),
        (0, 1, "atk", 8),            # low tier doubles attack loss
        (2, 1, "atk", 9),
        (2, 2, "atk_speed", 1.2),
        (0, 2, "atk_speed", 1.1),
        (1, 3, "atk_speed", 0.9),
        (2, 4, "crit", 0.2),
        (0, 4, "crit", 0.15),
        (0, 5, "hp", 90),
        (2, 5, "hp", 95),
    ])
    def test_outcomes(self, scripted_rng, tier, roll, field, expected):
        resolver = TileEventResolver(scripted_rng([tier, roll]))
        stats = PlayerStats()
        resolver.resolve(Tile(TileType.FORTUNE), stats)
        assert getattr(stats, field) == pytest.approx(expected)

    def test_attack_floor(self, scripted_rng):
        resolver = TileEventResolver(scripted_rng([0, 1]))
        stats = PlayerStats(atk=2)
        resolver.resolve(Tile(TileType.FORTUNE), stats)
        assert stats.atk == 1

    def test_attack_speed_floor(self, scripted_rng):
        resolver = TileEventResolver(scripted_rng([1, 3]))
        stats = PlayerStats(atk_speed=0.35)
        resolver.resolve(Tile(TileType.FORTUNE), stats)
        assert stats.atk_speed == pytest.approx(0.3)

    def test_hp_floor(self, scripted_rng):
        resolver = TileEventResolver(scripted_rng([0, 5]))
        stats = PlayerStats(hp=5)
        resolver.resolve(Tile(TileType.FORTUNE), stats)
        assert stats.hp == 1

    def test_log_names_tier(self, scripted_rng):
        resolver = TileEventResolver(scripted_rng([2, 4]))
        outcome = resolver.resolve(Tile(TileType.FORTUNE), PlayerStats())
        assert "high" in outcome.log


# --------------------------------------------------------------------------
# Shop, dice and fixed tiles
# --------------------------------------------------------------------------

class TestShopTile:
    @pytest.mark.parametrize("pick, field, expected", [
        (0, "atk", 11),
        (1, "atk_speed", 1.1),
        (2, "crit", 0.15),
        (3, "hp", 110),
    ])
    def test_purchases(self, scripted_rng, pick, field, expected):
        resolver = TileEventResolver(scripted_rng([pick]))
        stats = PlayerStats()
        outcome = resolver.resolve(Tile(TileType.SHOP), stats)
        assert getattr(stats, field) == pytest.approx(expected)
        assert outcome.extra_dice == 0


class TestDiceTile:
    def test_bonus_dice_and_gold(self, scripted_rng):
        resolver = TileEventResolver(scripted_rng([2]))
        stats = PlayerStats()
        outcome = resolver.resolve(Tile(TileType.DICE), stats)
        assert outcome.extra_dice == 2
        assert stats.gold == 1

    def test_bonus_dice_range(self):
        resolver = TileEventResolver(random.Random(4))
        seen = {resolver.resolve(Tile(TileType.DICE), PlayerStats()).extra_dice for _ in range(200)}
        assert seen == {1, 2, 3}


class TestFixedTiles:
    def test_heal(self):
        outcome = TileEventResolver(random.Random(1)).resolve(Tile(TileType.HEAL), PlayerStats())
        assert outcome.base_heal == HEAL_AMOUNT
        assert outcome.extra_dice == 0

    def test_buff(self):
        outcome = TileEventResolver(random.Random(1)).resolve(Tile(TileType.BUFF), PlayerStats())
        assert outcome.extra_dice == BUFF_DICE
        assert outcome.base_heal == 0

    def test_empty_is_noop(self):
        stats = PlayerStats()
        outcome = TileEventResolver(random.Random(1)).resolve(Tile(TileType.EMPTY), stats)
        assert stats == PlayerStats()
        assert outcome.extra_dice == 0
        assert outcome.base_heal == 0
        assert not outcome.awaiting_choice
        assert outcome.log
