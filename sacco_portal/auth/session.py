"""Session component: sign-up, sign-in and current identity tracking."""

import logging
from dataclasses import dataclass

from sacco_portal.auth.base import IdentityListener, IdentityStore
from sacco_portal.auth.provider import Subscription
from sacco_portal.exceptions import InvalidCredentialsError, PortalError
from sacco_portal.models.identity import Identity, ProfileFields

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Outcome of a sign-up or sign-in: an identity or an error."""

    identity: Identity | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.identity is not None and self.error is None


class SessionManager:
    """Owns the current identity for one session.

    Wraps an ``IdentityStore`` chosen at startup. No operation raises:
    failures come back as ``AuthResult.error`` (or the returned error for
    ``sign_out``) and are logged.

    State machine::

        Anonymous --sign_up/sign_in ok--> Authenticated --sign_out--> Anonymous
    """

    def __init__(self, store: IdentityStore) -> None:
        self.store = store
        self._current: Identity | None = None

    @property
    def is_remote(self) -> bool:
        return self.store.is_remote

    @property
    def current(self) -> Identity | None:
        """Last identity seen by this session, without contacting the store."""
        return self._current

    def sign_up(self, email: str, password: str, profile: ProfileFields) -> AuthResult:
        if not email or not email.strip():
            return AuthResult(error=ValueError("Email is required"))
        try:
            identity = self.store.create_account(email, password, profile)
        except PortalError as e:
            logger.error("Sign up error for %s: %s", email, e)
            return AuthResult(error=e)
        except Exception as e:
            logger.exception("Unexpected sign up error for %s", email)
            return AuthResult(error=e)

        self._current = identity
        logger.info("Signed up %s (%s)", email, identity.member_id)
        return AuthResult(identity=identity)

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            identity = self.store.authenticate(email, password)
        except InvalidCredentialsError as e:
            logger.warning("Rejected sign in for %s", email)
            return AuthResult(error=e)
        except PortalError as e:
            logger.error("Sign in error for %s: %s", email, e)
            return AuthResult(error=e)
        except Exception as e:
            logger.exception("Unexpected sign in error for %s", email)
            return AuthResult(error=e)

        self._current = identity
        logger.info("Signed in %s", email)
        return AuthResult(identity=identity)

    def sign_out(self) -> Exception | None:
        """End the session. The current identity is cleared even when the store fails."""
        self._current = None
        try:
            self.store.end_session()
        except PortalError as e:
            logger.error("Sign out error: %s", e)
            return e
        except Exception as e:
            logger.exception("Unexpected sign out error")
            return e
        return None

    def get_current_identity(self) -> Identity | None:
        try:
            identity = self.store.resolve_current()
        except Exception as e:
            logger.error("Get current identity error: %s", e)
            return None
        self._current = identity
        return identity

    def on_identity_change(self, listener: IdentityListener) -> Subscription:
        """Subscribe to identity changes.

        In fallback mode the listener fires exactly once, at subscribe time;
        in remote mode it fires on every session transition.
        """

        def track(identity: Identity | None) -> None:
            self._current = identity
            listener(identity)

        return self.store.watch(track)
