"""PostgREST-style HTTP store (the Supabase REST surface)."""

import logging
from typing import Any, Callable

import requests

from sacco_portal.exceptions import StoreError
from sacco_portal.serialization import serialize_value, to_dict
from sacco_portal.store.base import RelationalStore, Row

logger = logging.getLogger(__name__)


class RestStore(RelationalStore):
    """Relational store reached over a PostgREST HTTP API.

    Parameters
    ----------
    base_url : str
        REST root, e.g. ``https://xyz.supabase.co/rest/v1``.
    api_key : str
        Project anon key, sent as ``apikey``.
    token_provider : Callable[[], str | None] | None
        Returns the signed-in user's access token; row-level security
        policies are evaluated against it. Falls back to the anon key.
    timeout : float
        Per-request timeout in seconds.
    session : requests.Session | None
        HTTP session to reuse.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        token_provider: Callable[[], str | None] | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.token_provider = token_provider
        self.timeout = timeout
        self.session = session or requests.Session()

    def insert(self, table: str, rows: list[Row]) -> list[Row]:
        """POST all rows in a single request."""
        if not rows:
            return []
        response = self._request(
            "POST",
            table,
            json=[to_dict(row) for row in rows],
            extra_headers={"Prefer": "return=representation"},
        )
        return response.json()

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """GET rows using PostgREST ``eq`` filters."""
        params: dict[str, str] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{_filter_value(value)}"
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)

        response = self._request("GET", table, params=params)
        return response.json()

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def _headers(self) -> dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token or self.api_key}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        table: str,
        extra_headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        url = f"{self.base_url}/{table}"
        headers = {**self._headers(), **(extra_headers or {})}
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"{method} {table} failed: {e}") from e

        if response.status_code >= 400:
            raise _store_error(table, response)
        return response


def _filter_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(serialize_value(value))


def _store_error(table: str, response: requests.Response) -> StoreError:
    """Build a StoreError from a PostgREST error body."""
    try:
        body = response.json()
    except ValueError:
        body = {"message": response.text}
    if not isinstance(body, dict):
        body = {"message": str(body)}

    message = body.get("message") or f"HTTP {response.status_code}"
    logger.debug("REST error on %s: %s", table, body)
    return StoreError(
        f"{table}: {message}",
        code=body.get("code"),
        status=response.status_code,
        details=body,
    )
