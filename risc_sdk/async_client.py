"""Asynchronous client for the RISC API (requires ``httpx``)."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from risc_sdk._base import (
    SESSIONS_PATH,
    USERS_PATH,
    VALIDATE_PATH,
    VERIFY_PATH,
    _RiscClientBase,
)
from risc_sdk.models import DEFAULT_HOST, DEFAULT_TIMEOUT, ClientConfig, Snapshot
from risc_sdk.output import Output


class AsyncRiscClient(_RiscClientBase):
    """Asynchronous client for the RISC API.

    Requires the ``httpx`` package (install with ``pip install risc-sdk[async]``).
    Calls may be awaited concurrently; each carries its own deadline of
    *timeout* seconds, after which the in-flight request is cancelled and
    :class:`~risc_sdk.exceptions.RiscTimeoutError` is raised.

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
        output: Logging sink; defaults to :class:`~risc_sdk.output.ConsoleOutput`.
        client: Optional pre-configured :class:`httpx.AsyncClient`.

    Example::

        async with AsyncRiscClient(token, secret) as client:
            snapshot = client.decrypt_snapshot(blob)
            if snapshot is not None:
                await client.validate_snapshot(snapshot)
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
        client: httpx.AsyncClient | None = None,
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
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def verify_api_key(self) -> Any:
        """Check that the configured token and secret are accepted by the server."""
        return await self._rest(VERIFY_PATH, "GET", {})

    async def create_user(self, user_id: str, email: str, phone: str, name: str | None = None) -> Any:
        """Register a user.

        Raises:
            RiscValidationError: If *user_id*, *email* or *phone* is empty.
        """
        return await self._rest(USERS_PATH, "POST", self._create_user_params(user_id, email, phone, name))

    async def get_user(self, user_id: str) -> Any:
        return await self._rest(USERS_PATH, "GET", self._user_params(user_id))

    async def modify_user(
        self,
        user_id: str,
        email: str | None = None,
        phone: str | None = None,
        name: str | None = None,
    ) -> Any:
        """Update a user's email, phone or display name."""
        return await self._rest(USERS_PATH, "PUT", self._modify_user_params(user_id, email, phone, name))

    async def delete_user(self, user_id: str) -> Any:
        return await self._rest(USERS_PATH, "DELETE", self._user_params(user_id))

    async def create_session(self, user_id: str) -> Any:
        return await self._rest(SESSIONS_PATH, "POST", self._user_params(user_id))

    async def get_session(self, session_id: str) -> Any:
        return await self._rest(SESSIONS_PATH, "GET", self._session_params(session_id))

    async def validate_snapshot(self, snapshot: Snapshot) -> Snapshot:
        """Confirm a decrypted snapshot with the server.

        Returns:
            The same *snapshot* that was passed in, once the server accepts it.
        """
        await self._rest(VALIDATE_PATH, "GET", self._snapshot_params(snapshot))
        return snapshot

    async def close(self) -> None:
        """Close the underlying HTTP client if owned by this instance."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncRiscClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _rest(self, path: str, method: str, params: dict[str, Any]) -> Any:
        signed = self._prepare(path, method, params)
        request = self._client.request(
            signed.method,
            signed.url,
            content=signed.body,
            headers=signed.headers,
            timeout=self.config.timeout,
            follow_redirects=False,
        )
        try:
            resp = await asyncio.wait_for(request, timeout=self.config.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise self._timeout_error(signed.method, signed.url) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise self._connection_error(signed.method, signed.url, exc) from exc

        return self._handle_response(signed.method, signed.url, resp.status_code, resp.text)
