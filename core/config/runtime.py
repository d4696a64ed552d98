"""
Runtime Configuration

Central configuration for hashing, limits, logging and the API server.

Resolution order (later wins):
1. Dataclass defaults
2. JSON config file (./merkle.json, ./.merkle.json, ~/.config/merkle/config.json)
3. MERKLE_* environment variables (a .env file is loaded on import)
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.crypto.hashing import DEFAULT_ALGORITHM, SUPPORTED_ALGORITHMS

load_dotenv()

logger = logging.getLogger(__name__)


# Environment variable prefix
ENV_PREFIX = "MERKLE_"

CONFIG_SEARCH_PATHS: tuple[Path, ...] = (
    Path("merkle.json"),
    Path(".merkle.json"),
    Path.home() / ".config" / "merkle" / "config.json",
)


@dataclass
class ApiConfig:
    """Configuration for the HTTP API server."""
    host: str = "127.0.0.1"
    port: int = 3030


@dataclass
class LimitsConfig:
    """Input limits enforced by the API and CLI before calling the core."""
    max_leaves: int = 100_000
    max_leaf_bytes: int = 1_048_576


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - JSON file
    - Programmatic construction
    """
    hash_algorithm: str = DEFAULT_ALGORITHM
    log_level: str = "INFO"
    log_file: Optional[str] = None
    api: ApiConfig = field(default_factory=ApiConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.hash_algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"hash_algorithm must be one of {', '.join(SUPPORTED_ALGORITHMS)}, "
                f"got {self.hash_algorithm!r}"
            )

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLE_HASH_ALGORITHM: sha256, sha3_256 or blake2s
        - MERKLE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
        - MERKLE_LOG_FILE: Optional log file path
        - MERKLE_API_HOST / MERKLE_API_PORT: API bind address
        - MERKLE_MAX_LEAVES / MERKLE_MAX_LEAF_BYTES: input limits
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM", "").lower()
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        if os.getenv(f"{ENV_PREFIX}API_HOST"):
            overrides.setdefault("api", {})["host"] = os.getenv(f"{ENV_PREFIX}API_HOST")
        if os.getenv(f"{ENV_PREFIX}API_PORT"):
            overrides.setdefault("api", {})["port"] = int(os.getenv(f"{ENV_PREFIX}API_PORT", "3030"))

        if os.getenv(f"{ENV_PREFIX}MAX_LEAVES"):
            overrides.setdefault("limits", {})["max_leaves"] = int(
                os.getenv(f"{ENV_PREFIX}MAX_LEAVES", "100000")
            )
        if os.getenv(f"{ENV_PREFIX}MAX_LEAF_BYTES"):
            overrides.setdefault("limits", {})["max_leaf_bytes"] = int(
                os.getenv(f"{ENV_PREFIX}MAX_LEAF_BYTES", "1048576")
            )

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        api_data = data.get("api", {}) or {}
        limits_data = data.get("limits", {}) or {}

        return cls(
            hash_algorithm=data.get("hash_algorithm", DEFAULT_ALGORITHM),
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            api=ApiConfig(**api_data),
            limits=LimitsConfig(**limits_data),
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
        for key in ("hash_algorithm", "log_level", "log_file"):
            if key in overrides:
                setattr(new_config, key, overrides[key])
        for section in ("api", "limits"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        # Re-run validation on the overridden values
        new_config.__post_init__()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash_algorithm": self.hash_algorithm,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "api": {
                "host": self.api.host,
                "port": self.api.port,
            },
            "limits": {
                "max_leaves": self.limits.max_leaves,
                "max_leaf_bytes": self.limits.max_leaf_bytes,
            },
            "extra": self.extra,
        }


def load_runtime_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """
    Load RuntimeConfig from a config file, then overlay environment variables.

    When `config_path` is None the standard search paths are tried in
    order; the first existing file wins.
    """
    config: RuntimeConfig | None = None

    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        for path in CONFIG_SEARCH_PATHS:
            if path.exists():
                config = RuntimeConfig.from_file(path)
                logger.info(f"Loaded config from {path}")
                break

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = load_runtime_config()
    return _default_config


def set_default_config(config: RuntimeConfig | None) -> None:
    """Set (or clear, with None) the default runtime configuration."""
    global _default_config
    _default_config = config
