"""External auth provider boundary."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass
class AuthAccount:
    """Account as known to the auth provider."""

    id: str
    email: str | None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthAccount":
        return cls(
            id=data["id"],
            email=data.get("email"),
            user_metadata=dict(data.get("user_metadata") or {}),
        )


@dataclass
class AuthSession:
    """Signed-in session issued by the auth provider."""

    access_token: str
    user: AuthAccount
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str = "bearer"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthSession":
        return cls(
            access_token=data["access_token"],
            user=AuthAccount.from_dict(data["user"]),
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            token_type=data.get("token_type", "bearer"),
        )


StateListener = Callable[[AuthEvent, AuthSession | None], None]


class Subscription:
    """Handle returned by change subscriptions."""

    def __init__(self, unsubscribe: Callable[[], None] | None = None) -> None:
        self._unsubscribe = unsubscribe

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def unsubscribe(self) -> None:
        """Detach the listener. Safe to call more than once."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


class AuthProvider(ABC):
    """Account creation, password sign-in and session tracking.

    Implementations hold the current session and notify listeners on
    every transition.
    """

    def __init__(self) -> None:
        self._listeners: list[StateListener] = []

    @abstractmethod
    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> AuthAccount:
        """Create an account and return it."""

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Start a session for an existing account."""

    @abstractmethod
    def sign_out(self) -> None:
        """End the current session."""

    @abstractmethod
    def get_session(self) -> AuthSession | None:
        """Return the current session, if any."""

    @abstractmethod
    def get_user(self) -> AuthAccount | None:
        """Return the account behind the current session, if any."""

    def access_token(self) -> str | None:
        """Bearer token of the current session."""
        session = self.get_session()
        return session.access_token if session else None

    def on_auth_state_change(self, listener: StateListener) -> Subscription:
        """Call ``listener(event, session)`` on every session transition."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(unsubscribe)

    def _emit(self, event: AuthEvent, session: AuthSession | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("Auth state listener failed on %s", event.value)
