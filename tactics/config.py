"""Configuration management using Pydantic settings."""

import sys
from typing import List

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Simulation settings loaded from environment variables (TACTICS_*)."""

    model_config = SettingsConfigDict(
        env_prefix="TACTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Grid
    grid_width: int = 10
    grid_height: int = 10
    tile_size: float = 64.0  # world units per tile

    # Turn pacing: minimum time the enemy phase stays on screen
    enemy_turn_delay_ms: int = 1000

    # Tick driver
    tick_ms: int = 100
    time_compression: float = 1.0
    autorun: bool = True

    # Skirmish layouts
    seed: int = 42

    # Server
    cors_origins: List[str] = ["http://localhost:5173"]
    log_level: str = "INFO"


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=(level or settings.log_level).upper())
