"""GoTrue-compatible auth provider (the Supabase auth API) over HTTP."""

import logging
from typing import Any

import requests

from sacco_portal.auth.provider import AuthAccount, AuthEvent, AuthProvider, AuthSession
from sacco_portal.exceptions import AuthProviderError

logger = logging.getLogger(__name__)


class GoTrueAuthProvider(AuthProvider):
    """Auth provider talking to a GoTrue ``/auth/v1`` endpoint.

    The current session lives in memory only; it is lost when the process
    exits.

    Parameters
    ----------
    base_url : str
        Auth root, e.g. ``https://xyz.supabase.co/auth/v1``.
    api_key : str
        Project anon key.
    timeout : float
        Per-request timeout in seconds.
    session : requests.Session | None
        HTTP session to reuse.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.http = session or requests.Session()
        self._session: AuthSession | None = None

    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> AuthAccount:
        """Create an account; signs in immediately when the project auto-confirms."""
        body = self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": metadata},
        )

        # Auto-confirmed projects return a session, others the bare user
        if body.get("access_token"):
            self._start(AuthSession.from_dict(body))
            return self._session.user
        user = body.get("user") or body
        if not user.get("id"):
            raise AuthProviderError("No user returned from sign up", details=body)
        return AuthAccount.from_dict(user)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange email and password for a session."""
        body = self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = AuthSession.from_dict(body)
        self._start(session)
        return session

    def sign_out(self) -> None:
        """Revoke the current session. The local session is dropped even if revocation fails."""
        session, self._session = self._session, None
        if session is None:
            return
        try:
            self._request("POST", "/logout", token=session.access_token, expect_body=False)
        finally:
            self._emit(AuthEvent.SIGNED_OUT, None)

    def get_session(self) -> AuthSession | None:
        return self._session

    def get_user(self) -> AuthAccount | None:
        """Fetch the account behind the current session from the server."""
        if self._session is None:
            return None
        try:
            body = self._request("GET", "/user", token=self._session.access_token)
        except AuthProviderError as e:
            if e.status == 401:
                logger.info("Session token rejected, treating as signed out")
                self._session = None
                self._emit(AuthEvent.SIGNED_OUT, None)
                return None
            raise
        return AuthAccount.from_dict(body)

    def _start(self, session: AuthSession) -> None:
        self._session = session
        self._emit(AuthEvent.SIGNED_IN, session)

    def _request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        expect_body: bool = True,
        **kwargs: Any,
    ) -> dict[str, Any]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token or self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise AuthProviderError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise _auth_error(response)
        if not expect_body or not response.content:
            return {}
        return response.json()


def _auth_error(response: requests.Response) -> AuthProviderError:
    """Build an AuthProviderError from a GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        body = {"msg": response.text}
    if not isinstance(body, dict):
        body = {"msg": str(body)}

    message = (
        body.get("msg")
        or body.get("error_description")
        or body.get("message")
        or body.get("error")
        or f"HTTP {response.status_code}"
    )
    return AuthProviderError(
        message,
        code=body.get("error_code") or body.get("error"),
        status=response.status_code,
        details=body,
    )
