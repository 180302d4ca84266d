"""WaveSimulation — enemy spawning, marching, and attack cadence.

Architecture
------------
A battle runs one wave at a time.  Each wave is looked up in an ordered
table of WaveDefinition entries; wave numbers past the end of the table
reuse the last entry, so the game never runs out of waves.

Three timers drive a wave, all advanced by the host's ``dt``:

  1. Spawn accumulator — while the wave still owes enemies, the
     accumulator grows by ``dt`` and every full ``spawn_interval`` it holds
     spawns one enemy.  A long tick can spawn several.

  2. Movement — a spawned enemy walks a straight line from the spawn
     point to a randomly chosen board cell at ``speed`` units/s.  When the
     remaining distance fits in one step it snaps onto the cell and is
     marked ``arrived``.

  3. Attack accumulator — once arrived, every full ``attack_interval``
     produces one BaseHit.  A long tick can produce several.

WaveSimulation only *reports* hits; whoever owns the base applies them.
Enemies live in a dict keyed by a monotonically increasing id that is
never reused, so removal is O(1) and safe mid-iteration.

Wave cleared = every owed enemy has spawned and none are left alive.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from loguru import logger

from .errors import DegenerateBoard

if TYPE_CHECKING:
    from .board import BoardModel, Vec2

# Profile speeds are tuned for this reference speed
REFERENCE_SPEED = 250.0

# Floor so a mis-tuned multiplier cannot stall the attack loop
MIN_ATTACK_INTERVAL = 0.05


class EnemyType(str, Enum):
    NORMAL = "normal"
    ELITE = "elite"
    BOSS = "boss"


@dataclass(frozen=True)
class EnemyProfile:
    name: str
    max_hp: int
    damage: int
    attack_interval: float
    speed: float


ENEMY_PROFILES: dict[EnemyType, EnemyProfile] = {
    EnemyType.NORMAL: EnemyProfile("Grunt", max_hp=12, damage=1, attack_interval=1.3, speed=220.0),
    EnemyType.ELITE:  EnemyProfile("Elite", max_hp=28, damage=2, attack_interval=1.1, speed=200.0),
    EnemyType.BOSS:   EnemyProfile("Boss",  max_hp=80, damage=4, attack_interval=0.9, speed=160.0),
}


@dataclass(frozen=True)
class WaveDefinition:
    """One row of the wave table."""

    enemy_type: EnemyType
    spawn_count: int
    spawn_interval: float

    def to_dict(self) -> dict:
        return {
            "type": self.enemy_type.value,
            "spawn_count": self.spawn_count,
            "spawn_interval": self.spawn_interval,
        }


WAVE_DEFINITIONS: tuple[WaveDefinition, ...] = (
    WaveDefinition(EnemyType.NORMAL, spawn_count=4, spawn_interval=1.2),
    WaveDefinition(EnemyType.NORMAL, spawn_count=7, spawn_interval=1.0),
    WaveDefinition(EnemyType.ELITE,  spawn_count=3, spawn_interval=1.6),
    WaveDefinition(EnemyType.BOSS,   spawn_count=1, spawn_interval=2.4),
)


@dataclass
class Enemy:
    """A live enemy on the battlefield."""

    id: int
    enemy_type: EnemyType
    hp: int
    max_hp: int
    damage: int
    attack_interval: float
    speed: float
    target_cell_index: int
    position: Vec2
    target_position: Vec2
    attack_timer: float = 0.0
    arrived: bool = False

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.enemy_type.value,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "target_cell_index": self.target_cell_index,
            "position": {"x": self.position[0], "y": self.position[1]},
            "arrived": self.arrived,
        }


@dataclass(frozen=True)
class BaseHit:
    """An arrived enemy striking the base through its target cell."""

    cell_index: int
    damage: int
    enemy_id: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class WaveSimulation:
    """Spawns and advances the enemies of the current wave."""

    def __init__(
        self,
        board: BoardModel,
        rng: random.Random | None = None,
        waves: Sequence[WaveDefinition] = WAVE_DEFINITIONS,
        enemy_speed: float = REFERENCE_SPEED,
        enemy_damage: float = 1.0,
        attack_interval_multiplier: float = 1.0,
    ) -> None:
        if not waves:
            raise ValueError("wave table must define at least one wave")
        self._board = board
        self._rng = rng or random.Random()
        self._waves: tuple[WaveDefinition, ...] = tuple(waves)
        self._speed_scale = enemy_speed / REFERENCE_SPEED
        self._damage_scale = enemy_damage
        self._attack_interval_mult = attack_interval_multiplier

        self._enemies: dict[int, Enemy] = {}
        self._next_id = 0
        self._spawn_timer = 0.0
        self._spawn_enabled = False

        self.current_wave: WaveDefinition | None = None
        self.spawn_count = 0
        self.spawned_count = 0
        self.wave_kills = 0
        self.total_kills = 0

    # -- Wave table --------------------------------------------------------------

    @property
    def total_waves(self) -> int:
        return len(self._waves)

    def definition_for(self, wave_no: int) -> WaveDefinition:
        index = max(0, min(len(self._waves) - 1, wave_no - 1))
        return self._waves[index]

    # -- Lifecycle ---------------------------------------------------------------

    def start_wave(self, wave_no: int) -> WaveDefinition:
        """Discard any leftover enemies and arm the spawner for *wave_no*."""
        wave = self.definition_for(wave_no)
        self._enemies.clear()
        self._spawn_timer = 0.0
        self._spawn_enabled = True
        self.current_wave = wave
        self.spawn_count = wave.spawn_count
        self.spawned_count = 0
        self.wave_kills = 0
        logger.info(
            f"Wave {wave_no} armed: {wave.spawn_count} x {wave.enemy_type.value} "
            f"every {wave.spawn_interval}s"
        )
        return wave

    def stop_spawning(self) -> None:
        self._spawn_enabled = False

    @property
    def spawning(self) -> bool:
        return self._spawn_enabled and self.spawned_count < self.spawn_count

    def is_wave_cleared(self) -> bool:
        return self.spawned_count >= self.spawn_count and not self._enemies

    # -- Enemy queries -----------------------------------------------------------

    def active_enemies(self) -> list[Enemy]:
        return [e for e in self._enemies.values() if e.alive]

    @property
    def enemy_count(self) -> int:
        return len(self._enemies)

    def get_enemy(self, enemy_id: int) -> Enemy | None:
        return self._enemies.get(enemy_id)

    def damage_enemy(self, enemy_id: int, amount: int) -> bool:
        """Apply *amount* damage.  Returns True if the enemy died and was removed."""
        enemy = self._enemies.get(enemy_id)
        if enemy is None:
            return False
        enemy.hp = max(0, enemy.hp - max(0, amount))
        if enemy.hp > 0:
            return False
        del self._enemies[enemy_id]
        self.wave_kills += 1
        self.total_kills += 1
        logger.debug(f"Enemy {enemy_id} ({enemy.enemy_type.value}) destroyed")
        return True

    # -- Tick --------------------------------------------------------------------

    def update(self, dt: float) -> list[BaseHit]:
        """Advance spawning, movement, and attacks.  Returns hits in order."""
        if self.spawning:
            interval = self.current_wave.spawn_interval if self.current_wave else 0.0
            self._spawn_timer += dt
            while self._spawn_timer >= interval and self.spawning:
                self._spawn_timer -= interval
                self._spawn_enemy()
        return self._update_enemies(dt)

    def _spawn_enemy(self) -> Enemy | None:
        try:
            target_index = self._board.random_cell_index(self._rng)
            target_pos = self._board.cell_position(target_index)
        except DegenerateBoard:
            logger.warning("No board cells to target; closing the wave's spawn budget")
            self.spawn_count = self.spawned_count
            return None

        enemy_type = self.current_wave.enemy_type if self.current_wave else EnemyType.NORMAL
        profile = ENEMY_PROFILES[enemy_type]
        enemy = Enemy(
            id=self._next_id,
            enemy_type=enemy_type,
            hp=profile.max_hp,
            max_hp=profile.max_hp,
            damage=max(1, _round_half_up(profile.damage * self._damage_scale)),
            attack_interval=max(MIN_ATTACK_INTERVAL,
                                profile.attack_interval * self._attack_interval_mult),
            speed=profile.speed * self._speed_scale,
            target_cell_index=target_index,
            position=self._board.spawn_position,
            target_position=target_pos,
        )
        self._next_id += 1
        self._enemies[enemy.id] = enemy
        self.spawned_count += 1
        logger.debug(f"Spawned enemy {enemy.id} ({enemy_type.value}) -> cell {target_index}")
        return enemy

    def _update_enemies(self, dt: float) -> list[BaseHit]:
        hits: list[BaseHit] = []
        for enemy in list(self._enemies.values()):
            if not enemy.alive:
                continue
            if not enemy.arrived:
                self._move(enemy, dt)
            if enemy.arrived:
                enemy.attack_timer += dt
                while enemy.attack_timer >= enemy.attack_interval:
                    enemy.attack_timer -= enemy.attack_interval
                    hits.append(BaseHit(enemy.target_cell_index, enemy.damage, enemy.id))
        return hits

    @staticmethod
    def _move(enemy: Enemy, dt: float) -> None:
        step = enemy.speed * dt
        dx = enemy.target_position[0] - enemy.position[0]
        dy = enemy.target_position[1] - enemy.position[1]
        dist = math.hypot(dx, dy)
        if dist <= step:
            enemy.position = enemy.target_position
            enemy.arrived = True
            enemy.attack_timer = 0.0
            return
        enemy.position = (
            enemy.position[0] + (dx / dist) * step,
            enemy.position[1] + (dy / dist) * step,
        )
