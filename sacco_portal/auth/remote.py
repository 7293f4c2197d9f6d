"""Identity store delegating to the external auth provider and the users table."""

import logging
from typing import Any

from sacco_portal.auth.base import IdentityListener, IdentityStore
from sacco_portal.auth.provider import AuthAccount, AuthEvent, AuthProvider, AuthSession, Subscription
from sacco_portal.exceptions import StoreError
from sacco_portal.models.identity import Identity, ProfileFields, generate_member_id
from sacco_portal.store.base import USERS_TABLE, RelationalStore

logger = logging.getLogger(__name__)


class RemoteIdentityStore(IdentityStore):
    """Identity store for a configured remote backend.

    Accounts live with the auth provider; the profile lives in the
    ``users`` table keyed by the account id.
    """

    is_remote = True

    def __init__(self, provider: AuthProvider, store: RelationalStore) -> None:
        self.provider = provider
        self.store = store

    def create_account(self, email: str, password: str, profile: ProfileFields) -> Identity:
        """Create the provider account, then its profile row."""
        metadata = {
            "first_name": profile.first_name,
            "last_name": profile.last_name,
            "phone": profile.phone,
            "national_id": profile.national_id,
            "occupation": profile.occupation,
            "member_id": generate_member_id(),
        }
        account = self.provider.sign_up(email, password, metadata)

        row = {"id": account.id, "email": account.email or email, **metadata}
        try:
            self.store.insert(USERS_TABLE, [row])
        except Exception:
            # Do not leave a session open for an account without a profile
            try:
                self.provider.sign_out()
            except Exception as e:
                logger.warning("Sign out after failed profile insert for %s failed: %s", email, e)
            raise
        return _identity(account.id, row["email"], row)

    def authenticate(self, email: str, password: str) -> Identity:
        session = self.provider.sign_in_with_password(email, password)
        return self._enrich(session.user)

    def end_session(self) -> None:
        self.provider.sign_out()

    def resolve_current(self) -> Identity | None:
        account = self.provider.get_user()
        if account is None:
            return None
        return self._enrich(account)

    def watch(self, listener: IdentityListener) -> Subscription:
        """Deliver the enriched identity on every provider session transition."""

        def on_change(event: AuthEvent, session: AuthSession | None) -> None:
            logger.debug("Auth state changed: %s", event.value)
            listener(self._enrich(session.user) if session else None)

        return self.provider.on_auth_state_change(on_change)

    def _enrich(self, account: AuthAccount) -> Identity:
        """Build the identity from the profile row, or from account metadata when there is none."""
        try:
            rows = self.store.select(USERS_TABLE, {"id": account.id}, limit=1)
        except StoreError as e:
            logger.warning("Profile lookup failed for %s: %s", account.id, e)
            rows = []
        if rows:
            return _identity(account.id, account.email or "", rows[0])
        return _identity(account.id, account.email or "", account.user_metadata)


def _identity(account_id: str, email: str, source: dict[str, Any]) -> Identity:
    return Identity(
        id=account_id,
        email=email,
        first_name=source.get("first_name") or "",
        last_name=source.get("last_name") or "",
        phone=source.get("phone"),
        national_id=source.get("national_id"),
        occupation=source.get("occupation"),
        member_id=source.get("member_id"),
    )
