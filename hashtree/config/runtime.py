"""
Runtime Configuration

Central configuration for tree construction and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from hashtree.schemas.errors import ConfigurationException

load_dotenv()


ENV_PREFIX = "HASHTREE_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationException(f"Expected a boolean for {key}, got {raw!r}", key=key)


def _parse_int(key: str, raw: str, minimum: int) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationException(f"Expected an integer for {key}, got {raw!r}", key=key) from e
    if value < minimum:
        raise ConfigurationException(f"{key} must be >= {minimum}, got {value}", key=key)
    return value


@dataclass
class BuildConfig:
    """Configuration for tree construction."""
    max_workers: int = 1  # 1 = sequential
    parallel_threshold: int = 1024  # minimum item count before using a pool
    index_leaves: bool = True

    def __post_init__(self):
        if self.max_workers < 1:
            raise ConfigurationException(
                f"max_workers must be >= 1, got {self.max_workers}", key="max_workers"
            )
        if self.parallel_threshold < 1:
            raise ConfigurationException(
                f"parallel_threshold must be >= 1, got {self.parallel_threshold}",
                key="parallel_threshold",
            )


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "WARNING"
    file: Optional[str] = None

    def __post_init__(self):
        self.level = self.level.upper()
        if self.level not in _LOG_LEVELS:
            raise ConfigurationException(f"Unknown log level: {self.level}", key="level")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (a .env file in the working directory is read first)
    - YAML file
    - Programmatic construction
    """
    build: BuildConfig = field(default_factory=BuildConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - HASHTREE_LOG_LEVEL: Log level name
        - HASHTREE_LOG_FILE: Also write logs to this file
        - HASHTREE_MAX_WORKERS: Thread pool size for builds (1 = sequential)
        - HASHTREE_PARALLEL_THRESHOLD: Minimum item count for pooled builds
        - HASHTREE_INDEX_LEAVES: Keep a leaf-hash index for proof lookups
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        key = f"{ENV_PREFIX}MAX_WORKERS"
        if os.getenv(key):
            overrides.setdefault("build", {})["max_workers"] = _parse_int(key, os.environ[key], 1)
        key = f"{ENV_PREFIX}PARALLEL_THRESHOLD"
        if os.getenv(key):
            overrides.setdefault("build", {})["parallel_threshold"] = _parse_int(
                key, os.environ[key], 1
            )
        key = f"{ENV_PREFIX}INDEX_LEAVES"
        if os.getenv(key):
            overrides.setdefault("build", {})["index_leaves"] = _parse_bool(key, os.environ[key])

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationException(f"Config file must contain a mapping: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        build_data = data.get("build", {}) or {}
        logging_data = data.get("logging", {}) or {}

        try:
            build = BuildConfig(**build_data) if build_data else BuildConfig()
            log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

        return cls(
            build=build,
            logging=log,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        build_data = {**self.to_dict()["build"], **overrides.get("build", {})}
        logging_data = {**self.to_dict()["logging"], **overrides.get("logging", {})}
        new_config.build = BuildConfig(**build_data)
        new_config.logging = LoggingConfig(**logging_data)
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "build": {
                "max_workers": self.build.max_workers,
                "parallel_threshold": self.build.parallel_threshold,
                "index_leaves": self.build.index_leaves,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets to environment)."""
    global _default_config
    _default_config = config
