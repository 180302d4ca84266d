"""Configuration management using Pydantic settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Simulation settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BOARDSIEGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Board
    board_size: int = 20
    board_columns: int = 6
    tile_size: float = 90.0
    tile_spacing: float = 12.0

    # Exploration economy
    base_dice: int = 3          # dice granted per explore segment
    base_health: int = 10       # starting health of the defended base

    # Enemy tuning (per-type profiles are scaled by these)
    enemy_speed: float = 250.0  # reference speed; 250 = profile speeds unchanged
    enemy_damage: float = 1.0
    enemy_attack_interval_multiplier: float = 1.0

    # Player-facing event log
    log_capacity: int = 12

    # Random source seed (None = nondeterministic)
    seed: Optional[int] = None


settings = Settings()
