"""
Configuration module for the explore service.

All configuration values are loaded from environment variables with sensible defaults.
See .env.example for all available configuration options.
"""
import os
from dataclasses import dataclass, field


def _get_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    return float(os.getenv(key, default))


def _get_bool(key: str, default: bool) -> bool:
    """Get bool from environment variable ("1", "true", "yes" are truthy)."""
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ExploreConfig:
    """Service-level settings."""

    service_name: str = field(default_factory=lambda: os.getenv("SERVICE_NAME", "explore-service"))

    # Bound for the background job that marks listed likes as seen
    mark_seen_timeout_seconds: float = field(default_factory=lambda: _get_float("MARK_SEEN_TIMEOUT_SECONDS", 5.0))

    # How long shutdown waits for pending background jobs
    shutdown_drain_timeout_seconds: float = field(default_factory=lambda: _get_float("SHUTDOWN_DRAIN_TIMEOUT_SECONDS", 5.0))


@dataclass
class DatabaseConfig:
    """Connection settings for the decisions database."""

    host: str = field(default_factory=lambda: os.getenv("DB_HOST", "localhost"))
    port: str = field(default_factory=lambda: os.getenv("DB_PORT", "5432"))
    user: str = field(default_factory=lambda: os.getenv("DB_USER", "postgres"))
    password: str = field(default_factory=lambda: os.getenv("DB_PASSWORD", "postgres"))
    name: str = field(default_factory=lambda: os.getenv("DB_NAME", "explore"))
    url_override: str = field(default_factory=lambda: os.getenv("DATABASE_URL", ""))
    create_tables: bool = field(default_factory=lambda: _get_bool("DB_CREATE_TABLES", True))

    @property
    def url(self) -> str:
        """DATABASE_URL if set, otherwise a postgresql+asyncpg URL built from the parts."""
        if self.url_override:
            return self.url_override
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


# Global config instances (lazy loaded)
_explore_config = None
_database_config = None


def get_explore_config() -> ExploreConfig:
    """Get service configuration."""
    global _explore_config
    if _explore_config is None:
        _explore_config = ExploreConfig()
    return _explore_config


def get_database_config() -> DatabaseConfig:
    """Get database configuration."""
    global _database_config
    if _database_config is None:
        _database_config = DatabaseConfig()
    return _database_config


def reload_config():
    """Force reload of all configuration from environment variables."""
    global _explore_config, _database_config
    _explore_config = ExploreConfig()
    _database_config = DatabaseConfig()
