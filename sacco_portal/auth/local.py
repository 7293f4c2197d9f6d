"""Fallback identity store backed by a local key-value store."""

import json
import logging
import random
from datetime import datetime
from typing import Callable

from sacco_portal.auth.base import IdentityListener, IdentityStore
from sacco_portal.auth.keyvalue import KeyValueStore
from sacco_portal.auth.passwords import hash_password, verify_password
from sacco_portal.auth.provider import Subscription
from sacco_portal.exceptions import InvalidCredentialsError
from sacco_portal.models.identity import CredentialEntry, Identity, ProfileFields, generate_member_id
from sacco_portal.serialization import (
    credential_from_dict,
    credential_to_dict,
    identity_from_dict,
    to_dict,
)

logger = logging.getLogger(__name__)

CREDENTIALS_KEY = "credentials"
CURRENT_IDENTITY_KEY = "current_identity"


class LocalIdentityStore(IdentityStore):
    """Identity store for running without a remote backend.

    Credential entries are held in memory, keyed by email, loaded once from
    the key-value store at construction and written back on every change.
    A later sign-up for the same email replaces the earlier entry.

    Parameters
    ----------
    storage : KeyValueStore
        Durable mirror of credentials and the current identity.
    clock : Callable[[], datetime] | None
        Source of "now" for identity ids and membership numbers.
    rng : random.Random | None
        Random source for membership numbers.
    """

    is_remote = False

    def __init__(
        self,
        storage: KeyValueStore,
        clock: Callable[[], datetime] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._storage = storage
        self._clock = clock or datetime.now
        self._rng = rng
        self._credentials: dict[str, CredentialEntry] = {}
        self._current: Identity | None = None
        self._load()

    def create_account(self, email: str, password: str, profile: ProfileFields) -> Identity:
        now = self._clock()
        identity = Identity(
            id=f"local-user-{int(now.timestamp() * 1000)}",
            email=email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            phone=profile.phone,
            national_id=profile.national_id,
            occupation=profile.occupation,
            member_id=generate_member_id(now, self._rng),
        )
        if email in self._credentials:
            logger.info("Replacing local credential entry for %s", email)
        self._credentials[email] = CredentialEntry(email, hash_password(password), identity)
        self._save_credentials()
        self._set_current(identity)
        return identity

    def authenticate(self, email: str, password: str) -> Identity:
        entry = self._credentials.get(email)
        if entry is None or not verify_password(password, entry.password_hash):
            raise InvalidCredentialsError("Invalid email or password")
        self._set_current(entry.identity)
        return entry.identity

    def end_session(self) -> None:
        self._current = None
        self._storage.remove(CURRENT_IDENTITY_KEY)

    def resolve_current(self) -> Identity | None:
        return self._current

    def watch(self, listener: IdentityListener) -> Subscription:
        """Call ``listener`` once, now, with the current identity.

        This is a one-shot notification: later sign-ins and sign-outs are
        not delivered. Callers that need fresh state must subscribe again or
        poll ``resolve_current``.
        """
        listener(self._current)
        return Subscription()

    def reset(self) -> None:
        """Drop every credential entry and the current identity."""
        self._credentials.clear()
        self._current = None
        self._storage.clear()

    def _load(self) -> None:
        raw = self._storage.get(CREDENTIALS_KEY)
        if raw:
            try:
                self._credentials = {
                    email: credential_from_dict(data) for email, data in json.loads(raw).items()
                }
            except (ValueError, KeyError, AttributeError, TypeError) as e:
                logger.warning("Ignoring corrupt credential store: %s", e)

        raw = self._storage.get(CURRENT_IDENTITY_KEY)
        if raw:
            try:
                self._current = identity_from_dict(json.loads(raw))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning("Ignoring corrupt current identity: %s", e)

        logger.debug("Loaded %d local credential entries", len(self._credentials))

    def _save_credentials(self) -> None:
        data = {email: credential_to_dict(entry) for email, entry in self._credentials.items()}
        self._storage.set(CREDENTIALS_KEY, json.dumps(data))

    def _set_current(self, identity: Identity) -> None:
        self._current = identity
        self._storage.set(CURRENT_IDENTITY_KEY, json.dumps(to_dict(identity)))
