"""Tests for the GoTrue HTTP auth provider."""

from unittest.mock import MagicMock

import pytest
import requests

from sacco_portal.auth import AuthEvent
from sacco_portal.auth.gotrue import GoTrueAuthProvider
from sacco_portal.exceptions import AuthProviderError

USER = {"id": "acc-1", "email": "jane@example.com", "user_metadata": {"first_name": "Jane"}}
SESSION = {"access_token": "jwt-1", "refresh_token": "r-1", "expires_in": 3600, "user": USER}


def make_response(status: int = 200, body=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.content = b"{}" if body is not None else b""
    response.json.return_value = body
    response.text = str(body)
    return response


@pytest.fixture
def http() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def provider(http: MagicMock) -> GoTrueAuthProvider:
    return GoTrueAuthProvider("https://demo.supabase.co/auth/v1/", "anon-key", timeout=5.0, session=http)


class TestSignUp:
    def test_auto_confirmed_session(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, SESSION)
        events = []
        provider.on_auth_state_change(lambda event, session: events.append(event))

        account = provider.sign_up("jane@example.com", "pw", {"first_name": "Jane"})

        assert account.id == "acc-1"
        assert provider.access_token() == "jwt-1"
        assert events == [AuthEvent.SIGNED_IN]

        method, url = http.request.call_args.args
        kwargs = http.request.call_args.kwargs
        assert (method, url) == ("POST", "https://demo.supabase.co/auth/v1/signup")
        assert kwargs["json"] == {"email": "jane@example.com", "password": "pw", "data": {"first_name": "Jane"}}
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
        assert kwargs["timeout"] == 5.0

    def test_unconfirmed_returns_user(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, USER)

        account = provider.sign_up("jane@example.com", "pw", {})

        assert account.email == "jane@example.com"
        assert provider.get_session() is None

    def test_missing_user(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, {"user": {}})

        with pytest.raises(AuthProviderError, match="No user returned"):
            provider.sign_up("jane@example.com", "pw", {})

    def test_error_body(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(
            422, {"code": 422, "error_code": "user_already_exists", "msg": "User already registered"}
        )

        with pytest.raises(AuthProviderError) as exc_info:
            provider.sign_up("jane@example.com", "pw", {})

        assert str(exc_info.value) == "User already registered"
        assert exc_info.value.code == "user_already_exists"
        assert exc_info.value.status == 422


class TestSignIn:
    def test_password_grant(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, SESSION)

        session = provider.sign_in_with_password("jane@example.com", "pw")

        assert session.user.user_metadata == {"first_name": "Jane"}
        assert session.expires_in == 3600
        assert http.request.call_args.kwargs["params"] == {"grant_type": "password"}

    def test_invalid_grant(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(
            400, {"error": "invalid_grant", "error_description": "Invalid login credentials"}
        )

        with pytest.raises(AuthProviderError, match="Invalid login credentials") as exc_info:
            provider.sign_in_with_password("jane@example.com", "bad")

        assert exc_info.value.code == "invalid_grant"
        assert provider.get_session() is None

    def test_network_error(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(AuthProviderError, match="POST /token failed"):
            provider.sign_in_with_password("jane@example.com", "pw")

    def test_non_json_error(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        response = make_response(502, {})
        response.json.side_effect = ValueError("no json")
        response.text = "Bad Gateway"
        http.request.return_value = response

        with pytest.raises(AuthProviderError, match="Bad Gateway"):
            provider.sign_in_with_password("jane@example.com", "pw")


class TestSignOut:
    def test_revokes_with_session_token(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, SESSION)
        provider.sign_in_with_password("jane@example.com", "pw")
        events = []
        provider.on_auth_state_change(lambda event, session: events.append((event, session)))
        http.request.return_value = make_response(204)

        provider.sign_out()

        assert http.request.call_args.args == ("POST", "https://demo.supabase.co/auth/v1/logout")
        assert http.request.call_args.kwargs["headers"]["Authorization"] == "Bearer jwt-1"
        assert events == [(AuthEvent.SIGNED_OUT, None)]
        assert provider.get_session() is None

    def test_failed_revocation_still_signs_out(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, SESSION)
        provider.sign_in_with_password("jane@example.com", "pw")
        http.request.return_value = make_response(500, {"msg": "oops"})

        with pytest.raises(AuthProviderError):
            provider.sign_out()

        assert provider.get_session() is None

    def test_noop_when_signed_out(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        provider.sign_out()

        http.request.assert_not_called()


class TestGetUser:
    def test_signed_out_skips_request(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        assert provider.get_user() is None
        http.request.assert_not_called()

    def test_fetches_user(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, SESSION)
        provider.sign_in_with_password("jane@example.com", "pw")
        http.request.return_value = make_response(200, {**USER, "email": "new@example.com"})

        assert provider.get_user().email == "new@example.com"

    def test_expired_token_signs_out(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, SESSION)
        provider.sign_in_with_password("jane@example.com", "pw")
        events = []
        provider.on_auth_state_change(lambda event, session: events.append(event))
        http.request.return_value = make_response(401, {"msg": "JWT expired"})

        assert provider.get_user() is None
        assert provider.get_session() is None
        assert events == [AuthEvent.SIGNED_OUT]

    def test_other_errors_raise(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, SESSION)
        provider.sign_in_with_password("jane@example.com", "pw")
        http.request.return_value = make_response(500, {"message": "down"})

        with pytest.raises(AuthProviderError, match="down"):
            provider.get_user()


class TestListeners:
    def test_failing_listener_does_not_block_others(self, provider: GoTrueAuthProvider, http: MagicMock) -> None:
        http.request.return_value = make_response(200, SESSION)
        seen = []

        def broken(event, session):
            raise RuntimeError("listener bug")

        provider.on_auth_state_change(broken)
        provider.on_auth_state_change(lambda event, session: seen.append(event))

        provider.sign_in_with_password("jane@example.com", "pw")

        assert seen == [AuthEvent.SIGNED_IN]
