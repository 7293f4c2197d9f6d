"""Identity stores and the session component."""

from sacco_portal.auth.base import IdentityStore
from sacco_portal.auth.keyvalue import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from sacco_portal.auth.local import LocalIdentityStore
from sacco_portal.auth.provider import AuthAccount, AuthEvent, AuthProvider, AuthSession, Subscription
from sacco_portal.auth.remote import RemoteIdentityStore
from sacco_portal.auth.session import AuthResult, SessionManager

__all__ = [
    "AuthAccount",
    "AuthEvent",
    "AuthProvider",
    "AuthResult",
    "AuthSession",
    "FileKeyValueStore",
    "IdentityStore",
    "KeyValueStore",
    "LocalIdentityStore",
    "MemoryKeyValueStore",
    "RemoteIdentityStore",
    "SessionManager",
    "Subscription",
]
