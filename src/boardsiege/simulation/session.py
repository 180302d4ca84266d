"""GameSession — phase state machine and orchestrator for one play session.

Architecture
------------
GameSession is the single writer of all session state: phase, dice, base
health, wave number, board position, and the player's stats.  The other
components are collaborators it owns and calls in a fixed order:

  roll()  ->  DiceEconomy.roll  ->  BoardModel.advance
          ->  TileEventResolver.resolve  ->  apply outcome
          ->  (Weapon tile) suspend in ChoosingReward
          ->  otherwise check dice exhaustion  ->  maybe enter Battle

  tick(dt) in Battle  ->  WaveSimulation.update  ->  apply base hits
                      ->  WeaponTargetingEngine.tick  ->  wave cleared?

Phases:

  Explore -> ChoosingReward -> Explore        (weapon tile, choose_weapon)
  Explore -> Battle -> Explore                (dice exhausted, wave cleared)
  Battle  -> GameOver                         (base health reaches 0)

GameOver is terminal.  Every inbound command checks the phase first, so
entering GameOver is the only thing needed to make later rolls, spawns and
damage no-ops.  Within one battle tick enemies move and attack before
weapons fire; hits that arrive after the base has fallen are dropped and
weapons do not fire in that tick.

Events published on the EventBus for views:
  - ``phase_change``: any phase transition
  - ``reward_offered``: weapon options waiting for a choice
  - ``wave_start`` / ``wave_cleared``: battle boundaries
  - ``base_hit``: an enemy struck the base
  - ``game_over``: base destroyed
  - ``log``: a line was added to the player-facing event log
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Sequence

from loguru import logger

from ..comms.event_bus import EventBus
from .board import BoardLayout, BoardModel, Tile
from .dice import DiceEconomy
from .errors import InvalidChoice, InvalidPhase, NoDiceRemaining, SimulationError
from .forecast import forecast_battle
from .stats import PlayerStats
from .tile_events import TileEventResolver, TileOutcome
from .waves import WAVE_DEFINITIONS, BaseHit, WaveDefinition, WaveSimulation
from .weapons import WEAPON_CATALOG, WeaponDefinition, WeaponInstance, WeaponTargetingEngine

if TYPE_CHECKING:
    from ..config import Settings


class Phase(str, Enum):
    EXPLORE = "Explore"
    CHOOSING_REWARD = "ChoosingReward"
    BATTLE = "Battle"
    GAME_OVER = "GameOver"


@dataclass(frozen=True)
class RollResult:
    """Answer to a roll command."""

    accepted: bool
    reason: str | None = None
    value: int | None = None
    position_index: int | None = None
    outcome: TileOutcome | None = None


@dataclass(frozen=True)
class PendingReward:
    """Weapon options waiting on ``choose_weapon``."""

    cell_index: int
    options: tuple[WeaponDefinition, ...]


class EventLog:
    """Bounded player-facing log; the oldest line is evicted first."""

    def __init__(self, capacity: int = 12) -> None:
        self._lines: deque[str] = deque(maxlen=max(1, capacity))

    def append(self, message: str) -> None:
        self._lines.append(message)

    @property
    def capacity(self) -> int:
        return self._lines.maxlen or 0

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)


class GameSession:
    """One play session: explore with dice, defend the base in battles."""

    def __init__(
        self,
        board: BoardModel | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        event_bus: EventBus | None = None,
        waves: Sequence[WaveDefinition] = WAVE_DEFINITIONS,
        catalog: Sequence[WeaponDefinition] = WEAPON_CATALOG,
        stats: PlayerStats | None = None,
    ) -> None:
        if settings is None:
            from ..config import settings as app_settings
            settings = app_settings
        self.settings = settings
        self._rng = rng or random.Random(settings.seed)
        self.board = board if board is not None else BoardModel.generate(
            settings.board_size,
            self._rng,
            layout=BoardLayout(
                columns=settings.board_columns,
                tile_size=settings.tile_size,
                spacing=settings.tile_spacing,
            ),
        )
        self.event_bus = event_bus or EventBus()
        self.stats = stats or PlayerStats()

        self.base_dice: int = settings.base_dice
        self.base_health: int = max(0, settings.base_health)
        self.wave_no: int = 1
        self.position_index: int = 0
        self.phase: Phase = Phase.EXPLORE
        self.waves_cleared: int = 0

        self.dice = DiceEconomy(self._rng)
        self.dice.reset(self.base_dice)
        self.resolver = TileEventResolver(self._rng, catalog)
        self.wave_sim = WaveSimulation(
            self.board,
            self._rng,
            waves,
            enemy_speed=settings.enemy_speed,
            enemy_damage=settings.enemy_damage,
            attack_interval_multiplier=settings.enemy_attack_interval_multiplier,
        )
        self.weapon_engine = WeaponTargetingEngine(self.board, self._rng)
        self.event_log = EventLog(settings.log_capacity)
        self._pending: PendingReward | None = None

        self._log("Exploration begins: roll to advance.")

    # -- Queries -----------------------------------------------------------------

    @property
    def dice_left(self) -> int:
        return self.dice.dice_left

    @property
    def pending_reward(self) -> PendingReward | None:
        return self._pending

    @property
    def is_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    def tile_at(self, index: int) -> Tile:
        return self.board.tile_at(index)

    def enemies(self) -> list[dict]:
        return [e.to_dict() for e in self.wave_sim.active_enemies()]

    def weapons(self) -> list[dict]:
        return [w.to_dict() for w in self.weapon_engine.weapons]

    def log_lines(self) -> list[str]:
        return self.event_log.lines

    def forecast(self) -> list[str]:
        return forecast_battle(self.stats, self._rng)

    def snapshot(self) -> dict:
        """Return serializable session state for views."""
        pending = self._pending
        return {
            "phase": self.phase.value,
            "dice_left": self.dice_left,
            "base_health": self.base_health,
            "wave_no": self.wave_no,
            "waves_cleared": self.waves_cleared,
            "position_index": self.position_index,
            "stats": self.stats.to_dict(),
            "enemies": self.enemies(),
            "weapons": self.weapons(),
            "pending_options": [o.to_dict() for o in pending.options] if pending else [],
            "total_kills": self.wave_sim.total_kills,
            "log": self.log_lines(),
        }

    # -- Inbound commands --------------------------------------------------------

    def roll(self) -> RollResult:
        """Roll a die, move, and resolve the landed tile."""
        try:
            self._ensure_can_roll()
        except SimulationError as exc:
            self._log(f"Cannot roll: {exc}.")
            return RollResult(accepted=False, reason=str(exc))

        value = self.dice.roll()
        new_index, tile = self.board.advance(self.position_index, value)
        self.position_index = new_index
        self._log(f"Rolled {value}.")

        if tile is None:
            self._check_auto_battle()
            return RollResult(accepted=True, value=value, position_index=new_index)

        self._log(f"Landed on tile {new_index + 1}/{len(self.board)}.")
        outcome = self.resolver.resolve(tile, self.stats)
        self._apply_outcome(outcome)

        if outcome.awaiting_choice:
            self._pending = PendingReward(new_index, outcome.weapon_options)
            self._set_phase(Phase.CHOOSING_REWARD)
            self.event_bus.publish("reward_offered", {
                "cell_index": new_index,
                "options": [o.to_dict() for o in outcome.weapon_options],
            })
        else:
            self._check_auto_battle()
        return RollResult(accepted=True, value=value, position_index=new_index, outcome=outcome)

    def choose_weapon(self, index: int) -> WeaponInstance:
        """Resume a pending weapon reward by binding option *index* to its cell."""
        pending = self._pending
        if self.phase is not Phase.CHOOSING_REWARD or pending is None:
            raise InvalidPhase("choose_weapon", self.phase.value, "no reward pending")
        if not 0 <= index < len(pending.options):
            raise InvalidChoice(index, len(pending.options))

        definition = pending.options[index]
        instance = self.weapon_engine.add_weapon_to_cell(pending.cell_index, definition)
        self._pending = None
        self._log(f"Equipped {definition.name} on tile {pending.cell_index + 1}.")
        self._set_phase(Phase.EXPLORE)
        self._check_auto_battle()
        return instance

    def tick(self, dt: float) -> None:
        """Advance the battle by *dt* seconds.  No-op outside Battle."""
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        if self.phase is not Phase.BATTLE:
            return

        for hit in self.wave_sim.update(dt):
            self._on_base_hit(hit)
            if self.phase is not Phase.BATTLE:
                break
        if self.phase is not Phase.BATTLE:
            return

        self.weapon_engine.tick(dt, self.wave_sim)
        if self.wave_sim.is_wave_cleared():
            self._finish_wave()

    # -- Transitions -------------------------------------------------------------

    def _ensure_can_roll(self) -> None:
        if self.phase is Phase.GAME_OVER:
            raise InvalidPhase("roll", self.phase.value, "game over")
        if self.phase is not Phase.EXPLORE:
            raise InvalidPhase("roll", self.phase.value, "not exploring")
        if self.dice.exhausted:
            raise NoDiceRemaining()

    def _apply_outcome(self, outcome: TileOutcome) -> None:
        self._log(outcome.log)
        if outcome.base_heal:
            self.base_health += outcome.base_heal
        if outcome.extra_dice:
            self.dice.add_dice(outcome.extra_dice)

    def _check_auto_battle(self) -> None:
        if self.phase is Phase.EXPLORE and self.dice.exhausted:
            self._enter_battle()

    def _enter_battle(self) -> None:
        self._set_phase(Phase.BATTLE)
        self._log("Out of dice: battle begins.")
        wave = self.wave_sim.start_wave(self.wave_no)
        self.event_bus.publish("wave_start", {
            "wave_no": self.wave_no,
            "enemy_type": wave.enemy_type.value,
            "spawn_count": wave.spawn_count,
        })

    def _finish_wave(self) -> None:
        cleared = self.wave_no
        kills = self.wave_sim.wave_kills
        self.waves_cleared += 1
        self.wave_no += 1
        self.dice.reset(self.base_dice + self.stats.permanent_dice_bonus)
        self._log(f"Wave {cleared} cleared: back to exploring.")
        self._set_phase(Phase.EXPLORE)
        self.event_bus.publish("wave_cleared", {"wave_no": cleared, "kills": kills})

    def _on_base_hit(self, hit: BaseHit) -> None:
        if self.phase is Phase.GAME_OVER:
            return
        self.base_health = max(0, self.base_health - hit.damage)
        self._log(f"Enemy hit tile {hit.cell_index + 1}, base health -{hit.damage}.")
        self.event_bus.publish("base_hit", {
            "cell_index": hit.cell_index,
            "damage": hit.damage,
            "base_health": self.base_health,
        })
        if self.base_health <= 0:
            self._game_over()

    def _game_over(self) -> None:
        self.wave_sim.stop_spawning()
        self._set_phase(Phase.GAME_OVER)
        self._log("Game over.")
        logger.info(f"Game over on wave {self.wave_no} ({self.wave_sim.total_kills} kills)")
        self.event_bus.publish("game_over", {
            "wave_no": self.wave_no,
            "total_kills": self.wave_sim.total_kills,
        })

    def _set_phase(self, phase: Phase) -> None:
        previous = self.phase
        if previous is phase:
            return
        self.phase = phase
        logger.info(f"Phase {previous.value} -> {phase.value}")
        self.event_bus.publish("phase_change", {
            "phase": phase.value,
            "previous": previous.value,
        })

    def _log(self, message: str) -> None:
        self.event_log.append(message)
        self.event_bus.publish("log", {"message": message})
