"""
Configuration management for FeedHarvest.

Handles loading, validation, and management of application settings
from YAML files, environment variables, and CLI arguments.

Per-run collection settings (mode, item cap, date window) are NOT kept
here; they live in :class:`feedharvest.engine.schema.ScrapeConfig`, which
is supplied once per run and never mutated.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from dotenv import load_dotenv

from .constants import (
    DEFAULT_BASE_URL,
    DEFAULT_EXPAND_DELAY,
    DEFAULT_SAMPLE_SIZE,
    DEFAULT_SEEK_GRACE_ATTEMPTS,
    DEFAULT_SEEK_MAX_ATTEMPTS,
    DEFAULT_SETTLE_DELAY,
    MIN_TIMEOUT,
    VALID_EXPORT_FORMATS,
    VALID_LOG_LEVELS,
)

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Config:
    """Configuration class for FeedHarvest settings."""

    # Target settings
    target_url: str = field(default_factory=lambda: os.getenv("TARGET_URL", f"{DEFAULT_BASE_URL}/home"))

    # Browser settings
    headless: bool = field(default_factory=lambda: _env_bool("HEADLESS", "true"))
    user_data_dir: Optional[str] = field(default_factory=lambda: os.getenv("USER_DATA_DIR"))
    timeout: int = field(default_factory=lambda: int(os.getenv("TIMEOUT", "30")))

    # Pagination settings
    settle_delay: float = field(default_factory=lambda: float(os.getenv("SETTLE_DELAY", str(DEFAULT_SETTLE_DELAY))))
    expand_delay: float = field(default_factory=lambda: float(os.getenv("EXPAND_DELAY", str(DEFAULT_EXPAND_DELAY))))
    sample_size: int = field(default_factory=lambda: int(os.getenv("SAMPLE_SIZE", str(DEFAULT_SAMPLE_SIZE))))
    seek_max_attempts: int = field(
        default_factory=lambda: int(os.getenv("SEEK_MAX_ATTEMPTS", str(DEFAULT_SEEK_MAX_ATTEMPTS)))
    )
    seek_grace_attempts: int = field(
        default_factory=lambda: int(os.getenv("SEEK_GRACE_ATTEMPTS", str(DEFAULT_SEEK_GRACE_ATTEMPTS)))
    )
    max_duration: float = field(default_factory=lambda: float(os.getenv("MAX_DURATION", "0")))

    # Export settings
    output_dir: str = field(default_factory=lambda: os.getenv("OUTPUT_DIR", "data"))
    export_format: str = field(default_factory=lambda: os.getenv("EXPORT_FORMAT", "csv"))

    # Notification settings (console only)
    notify_console: bool = field(default_factory=lambda: _env_bool("NOTIFY_CONSOLE", "true"))

    # Logging settings
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", "logs/feedharvest.log"))

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values."""
        if self.timeout < MIN_TIMEOUT:
            raise ValueError(f"timeout must be at least {MIN_TIMEOUT} seconds")

        if self.settle_delay < 0:
            raise ValueError("settle_delay must not be negative")

        if self.expand_delay < 0:
            raise ValueError("expand_delay must not be negative")

        if self.sample_size < 1:
            raise ValueError("sample_size must be at least 1")

        if self.seek_max_attempts < 1:
            raise ValueError("seek_max_attempts must be at least 1")

        if self.seek_grace_attempts < 0:
            raise ValueError("seek_grace_attempts must not be negative")

        if self.max_duration < 0:
            raise ValueError("max_duration must not be negative")

        if self.export_format not in VALID_EXPORT_FORMATS:
            raise ValueError(f"Invalid export_format: {self.export_format}")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

    @classmethod
    def from_file(cls, config_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Config instance
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    def save_to_file(self, config_path: str | Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            config_path: Path to save YAML configuration file
        """
        path = Path(config_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "target_url": self.target_url,
            "headless": self.headless,
            "user_data_dir": self.user_data_dir,
            "timeout": self.timeout,
            "settle_delay": self.settle_delay,
            "expand_delay": self.expand_delay,
            "sample_size": self.sample_size,
            "seek_max_attempts": self.seek_max_attempts,
            "seek_grace_attempts": self.seek_grace_attempts,
            "max_duration": self.max_duration,
            "output_dir": self.output_dir,
            "export_format": self.export_format,
            "notify_console": self.notify_console,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }

    def __repr__(self) -> str:
        """String representation of configuration."""
        return f"Config(target_url={self.target_url}, headless={self.headless})"
