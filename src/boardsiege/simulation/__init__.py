"""Simulation subsystem — board, dice, tile events, waves, weapons, session."""
from .autoplay import AutoplayReport, run_autoplay
from .board import MAX_TILE_LEVEL, BoardLayout, BoardModel, Tile, TileType
from .dice import DiceEconomy
from .errors import DegenerateBoard, InvalidChoice, InvalidPhase, NoDiceRemaining, SimulationError
from .forecast import forecast_battle
from .session import EventLog, GameSession, PendingReward, Phase, RollResult
from .stats import PlayerStats
from .tile_events import TileEventResolver, TileOutcome
from .waves import (
    ENEMY_PROFILES,
    WAVE_DEFINITIONS,
    BaseHit,
    Enemy,
    EnemyProfile,
    EnemyType,
    WaveDefinition,
    WaveSimulation,
)
from .weapons import (
    WEAPON_CATALOG,
    Shot,
    WeaponDefinition,
    WeaponInstance,
    WeaponTargetingEngine,
    expected_dps,
    find_priority_enemy,
)

__all__ = [
    "AutoplayReport",
    "BaseHit",
    "BoardLayout",
    "BoardModel",
    "DegenerateBoard",
    "DiceEconomy",
    "ENEMY_PROFILES",
    "Enemy",
    "EnemyProfile",
    "EnemyType",
    "EventLog",
    "GameSession",
    "InvalidChoice",
    "InvalidPhase",
    "MAX_TILE_LEVEL",
    "NoDiceRemaining",
    "PendingReward",
    "Phase",
    "PlayerStats",
    "RollResult",
    "Shot",
    "SimulationError",
    "Tile",
    "TileEventResolver",
    "TileOutcome",
    "TileType",
    "WAVE_DEFINITIONS",
    "WEAPON_CATALOG",
    "WaveDefinition",
    "WaveSimulation",
    "WeaponDefinition",
    "WeaponInstance",
    "WeaponTargetingEngine",
    "expected_dps",
    "find_priority_enemy",
    "forecast_battle",
    "run_autoplay",
]
