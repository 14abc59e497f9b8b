"""Configuration package for the coursework tracker."""

from coursequest.config.app_config import (
    AppConfig,
    PlayerConfig,
    ServerConfig,
    clear_config_cache,
    get_data_dir,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "PlayerConfig",
    "ServerConfig",
    "clear_config_cache",
    "get_data_dir",
    "load_app_config",
]
