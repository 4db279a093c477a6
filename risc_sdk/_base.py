"""Transport-independent request orchestration shared by the RISC clients."""

from __future__ import annotations

import json
from typing import Any

from risc_sdk.exceptions import (
    RiscAPIError,
    RiscConfigurationError,
    RiscConnectionError,
    RiscResponseError,
    RiscTimeoutError,
    RiscValidationError,
)
from risc_sdk.models import ClientConfig, SignedRequest, Snapshot
from risc_sdk.output import Output, resolve_output
from risc_sdk.signing import build_signed_request
from risc_sdk.snapshot import SnapshotBlob, decrypt_snapshot

USERS_PATH = "api/users"
SESSIONS_PATH = "api/sessions"
VERIFY_PATH = "api/verify"
VALIDATE_PATH = "api/validate"


def _require(value: Any, message: str) -> None:
    if not value:
        raise RiscValidationError(message)


class _RiscClientBase:
    """Configuration, validation and response handling common to both clients.

    Subclasses supply the transport and call :meth:`_prepare` before and
    :meth:`_handle_response` after each round trip.
    """

    config: ClientConfig
    output: Output
    initialized: bool

    def _configure(self, config: ClientConfig, output: Any | None) -> None:
        self.config = config
        self.output = resolve_output(output)
        problems = config.problems()
        for problem in problems:
            self.output.error(problem)
        self.initialized = not problems

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> Any:
        """Create a client from a prebuilt :class:`ClientConfig`.

        Extra keyword arguments (``output``, transport) are passed through.
        """
        return cls(
            token=config.token,
            secret=config.secret,
            host=config.host,
            port=config.port,
            https=config.https,
            http_basic_auth=config.http_basic_auth,
            timeout=config.timeout,
            verbose=config.verbose,
            lenient_status=config.lenient_status,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def decrypt_snapshot(self, blob: SnapshotBlob, now: float | None = None) -> Snapshot | None:
        """Decrypt a snapshot blob produced by the browser script.

        Never raises. Returns ``None`` (and logs through the output sink) when
        the client is not initialized, the blob cannot be decrypted, or the
        snapshot is more than ten minutes old.
        """
        if not self.initialized:
            self.output.error("Cannot decrypt snapshot: RISC API client has not been initialized!")
            return None
        if not blob:
            self.output.error("Error decrypting snapshot: no snapshot specified")
            return None
        return decrypt_snapshot(blob, self.config.secret, self.output, now=now)

    # ------------------------------------------------------------------
    # Parameter validation
    # ------------------------------------------------------------------

    @staticmethod
    def _create_user_params(user_id: str, email: str, phone: str, name: str | None) -> dict[str, Any]:
        _require(user_id, "No user ID specified")
        _require(email, "No email address specified")
        _require(phone, "No phone number specified")
        params = {"user_id": user_id, "email": email, "phone": phone}
        if name:
            params["name"] = name
        return params

    @staticmethod
    def _modify_user_params(
        user_id: str, email: str | None, phone: str | None, name: str | None
    ) -> dict[str, Any]:
        _require(user_id, "No user ID specified")
        options = {"email": email, "phone": phone, "name": name}
        options = {k: v for k, v in options.items() if v}
        _require(options, "No user options specified")
        return {"user_id": user_id, **options}

    @staticmethod
    def _user_params(user_id: str) -> dict[str, Any]:
        _require(user_id, "No user ID specified")
        return {"user_id": user_id}

    @staticmethod
    def _session_params(session_id: str) -> dict[str, Any]:
        _require(session_id, "No session ID specified")
        return {"session_id": session_id}

    @staticmethod
    def _snapshot_params(snapshot: Snapshot | None) -> dict[str, Any]:
        _require(snapshot, "No snapshot specified")
        _require(getattr(snapshot, "snapshot_id", None), "No snapshot ID specified")
        _require(getattr(snapshot, "browser_id", None), "No browser ID specified")
        _require(getattr(snapshot, "date", None), "No snapshot date specified")
        if getattr(snapshot, "score", None) is None:
            raise RiscValidationError("No snapshot score specified")
        _require(getattr(snapshot, "status", None), "No snapshot status specified")
        return snapshot.to_params()  # type: ignore[union-attr]

    # ------------------------------------------------------------------
    # Request / response handling
    # ------------------------------------------------------------------

    def _prepare(self, path: str, method: str, params: dict[str, Any]) -> SignedRequest:
        if not self.initialized:
            raise RiscConfigurationError("RISC API client has not been initialized!")
        url = self.config.base_url + path.lstrip("/")
        signed = build_signed_request(self.config, method, url, params, output=self.output)
        if self.config.verbose:
            self.output.info(
                f"Calling '{signed.method} {url}' ({self.config.auth_mode}), params: {','.join(params)}"
            )
        return signed

    def _is_success(self, status_code: int) -> bool:
        upper = 400 if self.config.lenient_status else 300
        return 200 <= status_code < upper

    def _handle_response(self, method: str, url: str, status_code: int, text: str) -> Any:
        mess = f"Received API response for '{method} {url}': response code {status_code}"

        if self._is_success(status_code):
            if self.config.verbose:
                self.output.success(mess)
            try:
                return json.loads(text)
            except ValueError as exc:
                raise RiscResponseError(
                    f"Invalid JSON in API response for '{method} {url}': {exc}", status_code
                ) from exc

        error = self._extract_error(text)
        if self.config.verbose:
            self.output.error(f"{mess}, error: {error}")
        raise RiscAPIError(f"{status_code}: {error}", status_code)

    @staticmethod
    def _extract_error(text: str) -> str:
        try:
            body = json.loads(text)
        except ValueError:
            return text
        if isinstance(body, dict) and "error" in body:
            return str(body["error"])
        return text

    def _timeout_error(self, method: str, url: str) -> RiscTimeoutError:
        mess = f"HTTP request '{method} {url}' timed out"
        if self.config.verbose:
            self.output.error(mess)
        return RiscTimeoutError(mess)

    def _connection_error(self, method: str, url: str, exc: Exception) -> RiscConnectionError:
        mess = f"Error calling API '{method} {url}': {exc}"
        if self.config.verbose:
            self.output.error(mess)
        return RiscConnectionError(mess)
