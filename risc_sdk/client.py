"""Synchronous client for the RISC API."""

from __future__ import annotations

from typing import Any

import requests

from risc_sdk._base import (
    SESSIONS_PATH,
    USERS_PATH,
    VALIDATE_PATH,
    VERIFY_PATH,
    _RiscClientBase,
)
from risc_sdk.models import DEFAULT_HOST, DEFAULT_TIMEOUT, ClientConfig, Snapshot
from risc_sdk.output import Output


class RiscClient(_RiscClientBase):
    """Synchronous client for the RISC API.

    Each call performs at most one request and either returns the parsed JSON
    response or raises a :class:`~risc_sdk.exceptions.RiscError`.

    Args:
        token: API token.
        secret: API secret.
        host: API host name.
        port: API port; defaults to 443 or 80 depending on *https*.
        https: Use TLS.
        http_basic_auth: Use Basic auth instead of HMAC request signing.
        timeout: Request timeout in seconds.
        verbose: Log every request and response through *output*.
        lenient_status: Treat 3xx responses as success.
        output: Logging sink with ``info``/``success``/``warn``/``error``
            methods; defaults to :class:`~risc_sdk.output.ConsoleOutput`.
        session: Optional pre-configured :class:`requests.Session`.

    Example::

        client = RiscClient("my-api-token-0123", "0123456789abcdef0123456789abcdef")
        client.create_user("u-1", "jane@example.com", "+15555550100")
    """

    def __init__(
        self,
        token: str = "",
        secret: str = "",
        host: str = DEFAULT_HOST,
        port: int | None = None,
        https: bool = True,
        http_basic_auth: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        verbose: bool = False,
        lenient_status: bool = False,
        output: Output | None = None,
        session: requests.Session | None = None,
    ) -> None:
        config = ClientConfig(
            token=token,
            secret=secret,
            host=host,
            port=port,
            https=https,
            http_basic_auth=http_basic_auth,
            timeout=timeout,
            verbose=verbose,
            lenient_status=lenient_status,
        )
        self._configure(config, output)
        self._session = session or requests.Session()

    def verify_api_key(self) -> Any:
        """Check that the configured token and secret are accepted by the server."""
        return self._rest(VERIFY_PATH, "GET", {})

    def create_user(self, user_id: str, email: str, phone: str, name: str | None = None) -> Any:
        """Register a user.

        Raises:
            RiscValidationError: If *user_id*, *email* or *phone* is empty.
        """
        return self._rest(USERS_PATH, "POST", self._create_user_params(user_id, email, phone, name))

    def get_user(self, user_id: str) -> Any:
        return self._rest(USERS_PATH, "GET", self._user_params(user_id))

    def modify_user(
        self,
        user_id: str,
        email: str | None = None,
        phone: str | None = None,
        name: str | None = None,
    ) -> Any:
        """Update a user's email, phone or display name.

        Raises:
            RiscValidationError: If *user_id* is empty or no field is given.
        """
        return self._rest(USERS_PATH, "PUT", self._modify_user_params(user_id, email, phone, name))

    def delete_user(self, user_id: str) -> Any:
        return self._rest(USERS_PATH, "DELETE", self._user_params(user_id))

    def create_session(self, user_id: str) -> Any:
        return self._rest(SESSIONS_PATH, "POST", self._user_params(user_id))

    def get_session(self, session_id: str) -> Any:
        return self._rest(SESSIONS_PATH, "GET", self._session_params(session_id))

    def validate_snapshot(self, snapshot: Snapshot) -> Snapshot:
        """Confirm a decrypted snapshot with the server.

        Returns:
            The same *snapshot* that was passed in, once the server accepts it.

        Raises:
            RiscValidationError: If a required snapshot field is missing.
            RiscAPIError: If the server rejects the snapshot.
        """
        self._rest(VALIDATE_PATH, "GET", self._snapshot_params(snapshot))
        return snapshot

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> RiscClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _rest(self, path: str, method: str, params: dict[str, Any]) -> Any:
        signed = self._prepare(path, method, params)
        try:
            resp = self._session.request(
                signed.method,
                signed.url,
                data=signed.body,
                headers=signed.headers,
                timeout=self.config.timeout,
                allow_redirects=False,
            )
        except requests.Timeout as exc:
            raise self._timeout_error(signed.method, signed.url) from exc
        except requests.RequestException as exc:
            raise self._connection_error(signed.method, signed.url, exc) from exc

        return self._handle_response(signed.method, signed.url, resp.status_code, resp.text)
