"""
Centralized settings and backend factory for elephas.

Manifesto:
    The process that embeds a cache decides which backend it talks to and
    under which namespace. That choice belongs in configuration, resolved
    once and validated, and handed to a ``Cache`` explicitly. No module
    keeps a process-wide default backend.

Features:
    - **ElephasSettings:** pydantic-settings model, ``ELEPHAS_*`` env vars
    - **BackendKind:** supported backends (memory / redis)
    - **get_settings():** cached settings instance
    - **create_backend():** backend instance from settings (lazy imports)
    - **log_level / log_format:** applied by
      ``elephas.logging.configure_logging_from_settings``

Examples:
    >>> import os
    >>> os.environ["ELEPHAS_BACKEND"] = "redis"
    >>> os.environ["ELEPHAS_REDIS_URL"] = "redis://cache:6379/2"
    >>> settings = get_settings(_force_reload=True)
    >>> backend = create_backend(settings)

Tags:
    configuration, settings, pydantic, factory-pattern, elephas

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from elephas.errors import InvalidConfigError
from elephas.timestamps import DEFAULT_TTL
from elephas.version import __version__

if TYPE_CHECKING:
    from elephas.backends.base import CacheBackend

DEFAULT_PREFIX = f"elephas-{__version__}-cache"


class BackendKind(str, Enum):
    """Supported storage backends."""

    MEMORY = "memory"
    REDIS = "redis"


class ElephasSettings(BaseSettings):
    """elephas configuration.

    All fields can be set via ``ELEPHAS_*`` environment variables (e.g.
    ``ELEPHAS_BACKEND=redis``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ELEPHAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    backend: BackendKind = Field(default=BackendKind.MEMORY)
    redis_url: str = Field(default="redis://localhost:6379/0")

    # ── Cache defaults ───────────────────────────────────────────
    prefix: str = Field(default=DEFAULT_PREFIX, description="Namespace for complete keys")
    default_ttl_ms: int = Field(default=DEFAULT_TTL, ge=0, description="Default TTL in milliseconds")

    # ── Logging ──────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["console", "json", "auto"] = Field(default="console")

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("log_format", mode="before")
    @classmethod
    def lower_format(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


_settings_cache: dict[str, ElephasSettings] = {}


def get_settings(*, _force_reload: bool = False) -> ElephasSettings:
    """Load, validate, and cache an :class:`ElephasSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = ElephasSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


def create_backend(settings: ElephasSettings) -> CacheBackend:
    """Create a storage backend based on *settings.backend*."""
    match settings.backend:
        case BackendKind.MEMORY:
            from elephas.backends.memory import MemoryBackend

            return MemoryBackend()
        case BackendKind.REDIS:
            from elephas.backends.redis import RedisBackend

            return RedisBackend(url=settings.redis_url)
        case _:
            raise InvalidConfigError(
                f"Unsupported cache backend: {settings.backend!r}"
            ).with_context(operation="create_backend")


__all__ = [
    "BackendKind",
    "DEFAULT_PREFIX",
    "ElephasSettings",
    "clear_settings_cache",
    "create_backend",
    "get_settings",
]
