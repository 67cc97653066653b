"""Centralized configuration management for the draft lottery.

This module provides a unified configuration system for the lottery engine rules,
the JSON store location and global settings. Configuration values can be loaded
from environment variables for deployment flexibility.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

MAX_MOVEMENT = 2
MAX_ATTEMPTS = 1000


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class LotteryRules:
    """Rules the lottery engine runs under."""

    max_movement: int = MAX_MOVEMENT  # Max spots a team may move up or down
    max_attempts: int = MAX_ATTEMPTS  # Attempts per round before falling back
    strict: bool = False  # Raise instead of returning the no-movement order

    def __post_init__(self) -> None:
        if self.max_movement < 0:
            raise ValueError(f"max_movement must be >= 0, got {self.max_movement}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @classmethod
    def from_env(cls) -> LotteryRules:
        """Load engine rules from environment variables."""
        return cls(
            max_movement=int(os.getenv("LOTTERY_MAX_MOVEMENT", str(MAX_MOVEMENT))),
            max_attempts=int(os.getenv("LOTTERY_MAX_ATTEMPTS", str(MAX_ATTEMPTS))),
            strict=_env_flag("LOTTERY_STRICT"),
        )


@dataclass
class StorageConfig:
    """Configuration for the JSON-file lottery store."""

    db_path: Path = field(default_factory=lambda: Path("data/database.json"))
    indent: int = 2

    @classmethod
    def from_env(cls) -> StorageConfig:
        """Load storage configuration from environment variables."""
        return cls(
            db_path=Path(os.getenv("LOTTERY_DB_PATH", "data/database.json")),
            indent=int(os.getenv("LOTTERY_DB_INDENT", "2")),
        )


@dataclass
class Config:
    """Main configuration object combining all sub-configurations."""

    rules: LotteryRules = field(default_factory=LotteryRules)
    storage: StorageConfig = field(default_factory=StorageConfig)

    # Global settings
    log_level: str = "INFO"
    random_seed: int | None = None  # None draws from OS entropy

    # Singleton instance
    _instance: ClassVar[Config | None] = None

    @classmethod
    def get_instance(cls) -> Config:
        """Get or create the singleton configuration instance."""
        if cls._instance is None:
            cls._instance = cls.from_env()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the cached singleton so the next access re-reads the environment."""
        cls._instance = None

    @classmethod
    def from_env(cls) -> Config:
        """Load full configuration from environment variables."""
        seed = os.getenv("RANDOM_SEED")
        return cls(
            rules=LotteryRules.from_env(),
            storage=StorageConfig.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            random_seed=int(seed) if seed else None,
        )


# Global configuration accessor
def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        The singleton Config object with all settings.

    Example:
        >>> config = get_config()
        >>> print(config.rules.max_movement)
        2
    """
    return Config.get_instance()
