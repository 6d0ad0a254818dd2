"""Application configuration using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory (backend/)
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        env_file_encoding="utf-8",
        env_prefix="MAZELAB_",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Maze Lab"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:8080,http://127.0.0.1:5500"

    # Mazes loaded from *.txt files in addition to the built-in ones
    mazes_dir: Path = BASE_DIR / "mazes"

    # Simulation
    flag_exit_from_start: bool = True
    max_advance_steps: int = 1000
    max_stored_runs: int = 200
    random_seed: Optional[int] = None

    # Rate limiting (comparisons per minute per client)
    rate_limit_comparisons: int = 30

    # Comparison harness
    max_concurrent_runs: int = 4
    comparison_iteration_factor: int = 2

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("max_concurrent_runs", "comparison_iteration_factor", "max_advance_steps")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Limits must be at least 1."""
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.debug:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
