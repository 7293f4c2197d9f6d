"""Startup wiring: choose remote or fallback mode once and build components."""

import logging
from dataclasses import dataclass

from sacco_portal.auth.base import IdentityStore
from sacco_portal.auth.gotrue import GoTrueAuthProvider
from sacco_portal.auth.keyvalue import FileKeyValueStore
from sacco_portal.auth.local import LocalIdentityStore
from sacco_portal.auth.provider import AuthProvider
from sacco_portal.auth.remote import RemoteIdentityStore
from sacco_portal.auth.session import SessionManager
from sacco_portal.config import PortalConfig
from sacco_portal.exceptions import ConfigurationError
from sacco_portal.migration.orchestrator import DataMigration
from sacco_portal.services.member_data import MemberDataService
from sacco_portal.store.base import RelationalStore

logger = logging.getLogger(__name__)


@dataclass
class Portal:
    """Explicitly owned component instances for one process."""

    config: PortalConfig
    session: SessionManager
    store: RelationalStore | None
    migration: DataMigration
    member_data: MemberDataService | None

    def close(self) -> None:
        if self.store is not None:
            self.store.close()


def create_auth_provider(config: PortalConfig) -> AuthProvider:
    """Build the HTTP auth provider for a configured backend."""
    backend = config.backend
    if not backend.is_configured:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must both be set")
    return GoTrueAuthProvider(backend.auth_url, backend.anon_key, timeout=backend.timeout)


def create_relational_store(
    config: PortalConfig,
    provider: AuthProvider | None = None,
) -> RelationalStore | None:
    """Postgres when a database URL is set, REST otherwise, None when unconfigured."""
    backend = config.backend
    if not backend.is_configured:
        return None
    if backend.database_url:
        from sacco_portal.store.postgres import PostgresStore

        return PostgresStore(backend.database_url, connect_timeout=int(backend.timeout))

    from sacco_portal.store.rest import RestStore

    return RestStore(
        backend.rest_url,
        backend.anon_key,
        token_provider=provider.access_token if provider else None,
        timeout=backend.timeout,
    )


def create_identity_store(
    config: PortalConfig,
    provider: AuthProvider | None = None,
    store: RelationalStore | None = None,
) -> IdentityStore:
    """Remote identity store when the backend is configured, local fallback otherwise."""
    if not config.backend.is_configured:
        logger.warning("Backend not configured, using local fallback identity store at %s", config.local.state_path)
        return LocalIdentityStore(FileKeyValueStore(config.local.state_path))

    provider = provider or create_auth_provider(config)
    store = store or create_relational_store(config, provider)
    return RemoteIdentityStore(provider, store)


def build_portal(config: PortalConfig | None = None) -> Portal:
    """Construct session, store, migration and member services from config."""
    config = config or PortalConfig.from_env()

    store: RelationalStore | None = None
    if config.backend.is_configured:
        provider = create_auth_provider(config)
        store = create_relational_store(config, provider)
        identity_store = create_identity_store(config, provider, store)
    else:
        identity_store = create_identity_store(config)

    session = SessionManager(identity_store)
    migration = DataMigration(
        session,
        store,
        temp_password=config.migration.temp_password,
        goal_horizon_days=config.migration.goal_horizon_days,
    )
    member_data = MemberDataService(session, store) if store is not None else None

    mode = "remote" if session.is_remote else "fallback"
    logger.info("Portal started in %s mode", mode, extra={"mode": mode})
    return Portal(
        config=config,
        session=session,
        store=store,
        migration=migration,
        member_data=member_data,
    )
