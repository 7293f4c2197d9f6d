"""Configuration management for sacco-portal."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class BackendConfig:
    """Remote backend (auth provider + relational store) configuration."""

    url: str | None = None
    anon_key: str | None = None
    database_url: str | None = None
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        """Whether a remote backend can be reached at all."""
        return bool(self.url and self.anon_key)

    @property
    def rest_url(self) -> str:
        """Base URL of the REST (PostgREST) surface."""
        return f"{(self.url or '').rstrip('/')}/rest/v1"

    @property
    def auth_url(self) -> str:
        """Base URL of the auth (GoTrue) surface."""
        return f"{(self.url or '').rstrip('/')}/auth/v1"


@dataclass
class LocalStoreConfig:
    """Fallback-mode durable state configuration."""

    state_path: Path = field(default_factory=lambda: Path(".sacco_portal/state.json"))


@dataclass
class MigrationConfig:
    """Data migration configuration."""

    temp_password: str = "TempPassword123!"
    goal_horizon_days: int = 365


@dataclass
class PortalConfig:
    """Main configuration for sacco-portal."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    local: LocalStoreConfig = field(default_factory=LocalStoreConfig)
    migration: MigrationConfig = field(default_factory=MigrationConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "PortalConfig":
        """Create config from environment variables."""
        import os

        backend = BackendConfig(
            url=os.getenv("SUPABASE_URL") or None,
            anon_key=os.getenv("SUPABASE_ANON_KEY") or None,
            database_url=os.getenv("DATABASE_URL") or None,
            timeout=float(os.getenv("SUPABASE_TIMEOUT", "10")),
        )

        local = LocalStoreConfig(
            state_path=Path(os.getenv("SACCO_STATE_PATH", ".sacco_portal/state.json")),
        )

        migration = MigrationConfig(
            temp_password=os.getenv("SACCO_TEMP_PASSWORD", "TempPassword123!"),
        )

        return cls(
            backend=backend,
            local=local,
            migration=migration,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
