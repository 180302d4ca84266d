"""PlayerStats — the explorer's stat block, mutated by tile events."""

from __future__ import annotations

from dataclasses import asdict, dataclass

# Stat floors and caps enforced at every mutation site
MIN_ATK = 1
MIN_ATK_SPEED = 0.3
MIN_HP = 1
MAX_SHOP_DISCOUNT = 0.5
MAX_STAT_LEVEL = 5


@dataclass
class PlayerStats:
    atk: float = 10
    atk_speed: float = 1.0
    crit: float = 0.1
    hp: int = 100
    gold: int = 0
    shop_discount: float = 0.0
    weapon_level: int = 1
    skill_level: int = 1
    permanent_dice_bonus: int = 0

    def add_atk(self, amount: float) -> None:
        self.atk = max(MIN_ATK, self.atk + amount)

    def add_atk_speed(self, amount: float) -> None:
        self.atk_speed = max(MIN_ATK_SPEED, round(self.atk_speed + amount, 4))

    def add_crit(self, amount: float) -> None:
        self.crit = max(0.0, round(self.crit + amount, 4))

    def add_hp(self, amount: int) -> None:
        self.hp = max(MIN_HP, self.hp + amount)

    def add_gold(self, amount: int) -> None:
        self.gold = max(0, self.gold + amount)

    def add_shop_discount(self, amount: float) -> None:
        self.shop_discount = min(MAX_SHOP_DISCOUNT, max(0.0, round(self.shop_discount + amount, 4)))

    def level_weapon(self) -> None:
        self.weapon_level = min(MAX_STAT_LEVEL, self.weapon_level + 1)

    def level_skill(self) -> None:
        self.skill_level = min(MAX_STAT_LEVEL, self.skill_level + 1)

    def to_dict(self) -> dict:
        return asdict(self)
