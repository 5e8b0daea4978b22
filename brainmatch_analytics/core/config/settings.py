# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
BrainMatch analytics bridge. Settings are loaded from environment
variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A cached instance is provided via get_settings().

Example:
    >>> from brainmatch_analytics.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.analytics.flush_delay_ms
    2000
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    """Report aggregation and delivery configuration.

    Attributes:
        game_id: Identifier stamped on every session report.
        pending_queue_key: Fixed namespace of the durable pending queue.
        flush_delay_ms: Delay before the post-submission flush runs.
        default_parent_origin: Target origin for parent-frame delivery
            until a handshake negotiates another one.
        handshake_message_type: Message type that carries a parent origin.
        queue_backend: Storage used for undelivered payloads.
        queue_dir: Directory used by the file backend.
    """

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_",
        extra="ignore",
    )

    game_id: str = "BrainMatch_Flags"
    pending_queue_key: str = "ignite_pending_sessions_jsplugin"
    flush_delay_ms: int = Field(default=2000, ge=0)
    default_parent_origin: str = "*"
    handshake_message_type: str = "ANALYTICS_CONFIG"
    queue_backend: Literal["memory", "file", "redis"] = "file"
    queue_dir: Path = Path(".analytics")

    @property
    def flush_delay_seconds(self) -> float:
        """Flush delay converted for schedulers that work in seconds."""
        return self.flush_delay_ms / 1000


class RedisSettings(BaseSettings):
    """Redis configuration for the pending queue backend.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr = SecretStr("")
    database: int = 0

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        pwd = self.password.get_secret_value()
        auth = f":{pwd}@" if pwd else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.database}"


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        analytics: Report aggregation and delivery settings.
        redis: Redis settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Subsettings - loaded with their own env prefixes
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
