"""Identity store interface shared by remote and fallback modes."""

from abc import ABC, abstractmethod
from typing import Callable

from sacco_portal.auth.provider import Subscription
from sacco_portal.models.identity import Identity, ProfileFields

IdentityListener = Callable[[Identity | None], None]


class IdentityStore(ABC):
    """Creates, authenticates and resolves member identities.

    Operations raise on failure; ``SessionManager`` turns errors into
    results.
    """

    is_remote: bool = False

    @abstractmethod
    def create_account(self, email: str, password: str, profile: ProfileFields) -> Identity:
        """Register a member and make them current."""

    @abstractmethod
    def authenticate(self, email: str, password: str) -> Identity:
        """Check credentials and make the member current."""

    @abstractmethod
    def end_session(self) -> None:
        """Forget the current member."""

    @abstractmethod
    def resolve_current(self) -> Identity | None:
        """Return the current member, if any."""

    @abstractmethod
    def watch(self, listener: IdentityListener) -> Subscription:
        """Subscribe to current-member changes."""
