"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults (memory backends, no uploads).

Usage:
    from trackacademia.config.app_config import load_app_config

    config = load_app_config()
    api_key = config.auth.get_api_key()
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

DEFAULT_ALLOWED_IMAGE_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
)

# 10 MiB
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)


@dataclass
class StoreConfig:
    """Document store backend selection."""

    backend: str = "memory"  # memory | firestore
    project_id: str | None = None
    database: str | None = None


@dataclass
class AuthConfig:
    """Identity provider selection."""

    backend: str = "memory"  # memory | firebase
    base_url: str = "https://identitytoolkit.googleapis.com/v1"
    api_key_env: str | None = "FIREBASE_API_KEY"
    timeout: float = 10.0

    def get_api_key(self) -> str | None:
        """Get API key from environment variable."""
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        return None


@dataclass
class UploadConfig:
    """Cover image upload settings."""

    backend: str = "disabled"  # disabled | cloudinary
    cloud_name: str = ""
    upload_preset: str = ""
    folder: str = "trackacademia_books"
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_types: tuple[str, ...] = DEFAULT_ALLOWED_IMAGE_TYPES
    timeout: float = 30.0


@dataclass
class RouteConfig:
    """Redirect targets issued by the route guard."""

    sign_in: str = "/auth/login"
    profile_setup: str = "/degree-setup"


@dataclass
class WebConfig:
    """HTTP surface settings."""

    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS


@dataclass
class AppConfig:
    """Application-wide configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    uploads: UploadConfig = field(default_factory=UploadConfig)
    routes: RouteConfig = field(default_factory=RouteConfig)
    web: WebConfig = field(default_factory=WebConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "store": {
            "backend": "memory",
            "project_id": None,
            "database": None,
        },
        "auth": {
            "backend": "memory",
            "base_url": "https://identitytoolkit.googleapis.com/v1",
            "api_key_env": "FIREBASE_API_KEY",
            "timeout": 10.0,
        },
        "uploads": {
            "backend": "disabled",
            "cloud_name": "",
            "upload_preset": "",
            "folder": "trackacademia_books",
            "max_bytes": DEFAULT_MAX_UPLOAD_BYTES,
            "allowed_types": list(DEFAULT_ALLOWED_IMAGE_TYPES),
            "timeout": 30.0,
        },
        "routes": {
            "sign_in": "/auth/login",
            "profile_setup": "/degree-setup",
        },
        "web": {
            "cors_origins": list(DEFAULT_CORS_ORIGINS),
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    store_data = data.get("store") or {}
    store = StoreConfig(
        backend=store_data.get("backend", "memory"),
        project_id=store_data.get("project_id"),
        database=store_data.get("database"),
    )

    auth_data = data.get("auth") or {}
    auth = AuthConfig(
        backend=auth_data.get("backend", "memory"),
        base_url=auth_data.get("base_url", "https://identitytoolkit.googleapis.com/v1"),
        api_key_env=auth_data.get("api_key_env", "FIREBASE_API_KEY"),
        timeout=float(auth_data.get("timeout", 10.0)),
    )

    uploads_data = data.get("uploads") or {}
    uploads = UploadConfig(
        backend=uploads_data.get("backend", "disabled"),
        cloud_name=uploads_data.get("cloud_name", ""),
        upload_preset=uploads_data.get("upload_preset", ""),
        folder=uploads_data.get("folder", "trackacademia_books"),
        max_bytes=int(uploads_data.get("max_bytes", DEFAULT_MAX_UPLOAD_BYTES)),
        allowed_types=tuple(
            uploads_data.get("allowed_types", DEFAULT_ALLOWED_IMAGE_TYPES)
        ),
        timeout=float(uploads_data.get("timeout", 30.0)),
    )

    routes_data = data.get("routes") or {}
    routes = RouteConfig(
        sign_in=routes_data.get("sign_in", "/auth/login"),
        profile_setup=routes_data.get("profile_setup", "/degree-setup"),
    )

    web_data = data.get("web") or {}
    web = WebConfig(
        cors_origins=tuple(web_data.get("cors_origins", DEFAULT_CORS_ORIGINS)),
    )

    return AppConfig(store=store, auth=auth, uploads=uploads, routes=routes, web=web)


def load_app_config(
    force_reload: bool = False,
    config_file: Path | None = None,
) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.
        config_file: Alternate YAML file (default: CONFIG_FILE).

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    path = config_file or CONFIG_FILE
    data: dict[str, Any]

    if path.exists():
        logger.debug("loading_app_config", source=str(path))
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
