"""Pytest configuration and fixtures."""

import uuid
from datetime import datetime, timezone
from typing import Any

import pytest

from sacco_portal.auth import (
    AuthAccount,
    AuthEvent,
    AuthProvider,
    AuthSession,
    FileKeyValueStore,
    LocalIdentityStore,
    RemoteIdentityStore,
    SessionManager,
)
from sacco_portal.exceptions import AuthProviderError, StoreError
from sacco_portal.migration import DataMigration, get_mock_data
from sacco_portal.models import MemberDataset, ProfileFields
from sacco_portal.store import InMemoryRelationalStore


class FakeAuthProvider(AuthProvider):
    """In-process auth provider with GoTrue-like behaviour."""

    def __init__(self) -> None:
        super().__init__()
        self.accounts: dict[str, tuple[str, AuthAccount]] = {}
        self.sign_up_error: Exception | None = None
        self._session: AuthSession | None = None

    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> AuthAccount:
        if self.sign_up_error is not None:
            raise self.sign_up_error
        if email in self.accounts:
            raise AuthProviderError("User already registered", code="user_already_exists", status=422)
        account = AuthAccount(id=str(uuid.uuid4()), email=email, user_metadata=dict(metadata))
        self.accounts[email] = (password, account)
        self._start(account)
        return account

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        entry = self.accounts.get(email)
        if entry is None or entry[0] != password:
            raise AuthProviderError("Invalid login credentials", code="invalid_grant", status=400)
        return self._start(entry[1])

    def sign_out(self) -> None:
        if self._session is not None:
            self._session = None
            self._emit(AuthEvent.SIGNED_OUT, None)

    def get_session(self) -> AuthSession | None:
        return self._session

    def get_user(self) -> AuthAccount | None:
        return self._session.user if self._session else None

    def _start(self, account: AuthAccount) -> AuthSession:
        self._session = AuthSession(access_token=f"token-{account.id}", user=account)
        self._emit(AuthEvent.SIGNED_IN, self._session)
        return self._session


class RejectingStore(InMemoryRelationalStore):
    """In-memory store that rejects every insert into the given tables."""

    def __init__(self, rejected: set[str]) -> None:
        super().__init__()
        self.rejected = rejected

    def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if table in self.rejected:
            self.insert_calls += 1
            raise StoreError(f'new row for relation "{table}" violates check constraint', code="23514")
        return super().insert(table, rows)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def fixed_now() -> datetime:
    """Migration instant used by clock-dependent tests."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now: datetime):
    return lambda: fixed_now


@pytest.fixture
def profile() -> ProfileFields:
    return ProfileFields(
        first_name="Jane",
        last_name="Nakato",
        phone="+256 772 000 111",
        national_id="CF98765432109876",
        occupation="teacher",
    )


@pytest.fixture
def mock_data() -> MemberDataset:
    return get_mock_data()


@pytest.fixture
def memory_store() -> InMemoryRelationalStore:
    return InMemoryRelationalStore()


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture
def remote_session(auth_provider: FakeAuthProvider, memory_store: InMemoryRelationalStore) -> SessionManager:
    return SessionManager(RemoteIdentityStore(auth_provider, memory_store))


@pytest.fixture
def state_path(tmp_path) -> Any:
    return tmp_path / "state.json"


@pytest.fixture
def local_session(state_path) -> SessionManager:
    return SessionManager(LocalIdentityStore(FileKeyValueStore(state_path)))


@pytest.fixture
def migration(remote_session: SessionManager, memory_store: InMemoryRelationalStore, clock) -> DataMigration:
    return DataMigration(remote_session, memory_store, clock=clock)


@pytest.fixture
def make_rejecting_migration(auth_provider: FakeAuthProvider, clock):
    """Build a migration whose store rejects inserts into the given tables."""

    def factory(*tables: str) -> tuple[DataMigration, RejectingStore]:
        store = RejectingStore(set(tables))
        session = SessionManager(RemoteIdentityStore(auth_provider, store))
        return DataMigration(session, store, clock=clock), store

    return factory
