"""Custom exception hierarchy for sacco-portal."""

from typing import Any


class PortalError(Exception):
    """Base exception for all sacco-portal errors."""


class ConfigurationError(PortalError):
    """Raised when the remote backend is not configured."""


class BackendError(PortalError):
    """Raised when a remote store or auth provider rejects a request.

    Parameters
    ----------
    message : str
        Human readable cause.
    code : str | None
        Backend error code (SQLSTATE, PostgREST code, GoTrue error code).
    status : int | None
        HTTP status, when the failure came over HTTP.
    details : Any
        Raw error payload for logging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status = status
        self.details = details


class StoreError(BackendError):
    """Raised when the relational store rejects a read or write."""


class AuthProviderError(BackendError):
    """Raised when the external auth provider rejects a request."""


class InvalidCredentialsError(PortalError):
    """Raised when an email/password pair does not match a credential entry."""


class NotAuthenticatedError(PortalError):
    """Raised when an operation needs a signed-in member and there is none."""


class MissingOwnerError(PortalError):
    """Raised when a record group is migrated before the owning identity exists."""
