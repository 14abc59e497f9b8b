"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml
with built-in defaults when the file is missing.

Usage:
    from coursequest.config.app_config import load_app_config, get_data_dir

    config = load_app_config()
    data_dir = get_data_dir()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Environment override for the data directory
DATA_DIR_ENV = "COURSEQUEST_DATA_DIR"


@dataclass
class PlayerConfig:
    """Defaults for a freshly created player."""

    default_name: str = "Student"


@dataclass
class ServerConfig:
    """Local web API settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class AppConfig:
    """Application-wide configuration."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    paths: dict[str, str] = field(default_factory=dict)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "player": {
            "default_name": "Student",
        },
        "server": {
            "host": "127.0.0.1",
            "port": 8000,
            "cors_origins": ["*"],
        },
        "paths": {
            "data_dir": "data",
            "state_filename": "game_state_v1.json",
            "export_filename": "coursework-rpg-data.json",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    player_data = data.get("player") or {}
    player = PlayerConfig(
        default_name=player_data.get("default_name", defaults["player"]["default_name"]),
    )

    server_data = data.get("server") or {}
    server = ServerConfig(
        host=server_data.get("host", defaults["server"]["host"]),
        port=int(server_data.get("port", defaults["server"]["port"])),
        cors_origins=[
            str(origin)
            for origin in server_data.get("cors_origins") or defaults["server"]["cors_origins"]
        ],
    )

    paths = dict(defaults["paths"])
    paths.update(data.get("paths") or {})

    return AppConfig(player=player, server=server, paths=paths)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.debug("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def get_data_dir() -> Path:
    """Resolve the data directory (env var wins over config)."""
    env_value = os.environ.get(DATA_DIR_ENV)
    if env_value:
        return Path(env_value)
    return Path(load_app_config().paths.get("data_dir", "data"))


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
