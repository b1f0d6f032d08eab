"""Configuration package for TrackAcademia."""

from trackacademia.config.app_config import (
    AppConfig,
    AuthConfig,
    RouteConfig,
    StoreConfig,
    UploadConfig,
    WebConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "RouteConfig",
    "StoreConfig",
    "UploadConfig",
    "WebConfig",
    "clear_config_cache",
    "load_app_config",
]
