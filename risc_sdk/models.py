"""Data models for the RISC SDK."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Any, Mapping

DEFAULT_HOST = "risc.lastwall.com"
DEFAULT_TIMEOUT = 5.0
MIN_CREDENTIAL_LENGTH = 16

STATUS_RISKY = "risky"
STATUS_PASSED = "passed"
STATUS_FAILED = "failed"
SNAPSHOT_STATUSES = frozenset({STATUS_RISKY, STATUS_PASSED, STATUS_FAILED})

_TRUTHY = {"1", "true", "yes", "on"}


def _finite_number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"snapshot {name} is not a finite number: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"snapshot {name} is not a finite number: {value!r}")
    return value


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Settled configuration of a RISC client.

    Attributes:
        token: API token, sent with every request.
        secret: API secret; HMAC key and snapshot key material.
        host: API host name.
        port: API port; ``None`` selects 443 or 80 from *https*.
        https: Use TLS when ``True``.
        http_basic_auth: Authenticate with Basic auth instead of HMAC headers.
        timeout: Per-request deadline in seconds.
        verbose: Log every call and response through the output sink.
        lenient_status: Accept ``[200, 400)`` as success instead of ``[200, 300)``.
    """

    token: str
    secret: str
    host: str = DEFAULT_HOST
    port: int | None = None
    https: bool = True
    http_basic_auth: bool = False
    timeout: float = DEFAULT_TIMEOUT
    verbose: bool = False
    lenient_status: bool = False

    @property
    def scheme(self) -> str:
        return "https" if self.https else "http"

    @property
    def effective_port(self) -> int:
        if self.port:
            return self.port
        return 443 if self.https else 80

    @property
    def base_url(self) -> str:
        """Root URL including the port, e.g. ``https://risc.lastwall.com:443/``."""
        return f"{self.scheme}://{self.host}:{self.effective_port}/"

    @property
    def auth_mode(self) -> str:
        return "basic" if self.http_basic_auth else "digest"

    def problems(self) -> list[str]:
        """Return the reasons these credentials cannot be used (empty when valid)."""
        issues = []
        if not self.token:
            issues.append("No API token specified")
        elif len(self.token) < MIN_CREDENTIAL_LENGTH:
            issues.append(f"API token must be at least {MIN_CREDENTIAL_LENGTH} characters")
        if not self.secret:
            issues.append("No API secret specified")
        elif len(self.secret) < MIN_CREDENTIAL_LENGTH:
            issues.append(f"API secret must be at least {MIN_CREDENTIAL_LENGTH} characters")
        return issues

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a configuration from ``RISC_*`` environment variables."""
        env = os.environ if environ is None else environ
        port = env.get("RISC_PORT")
        timeout = env.get("RISC_TIMEOUT")

        return cls(
            token=env.get("RISC_API_TOKEN", ""),
            secret=env.get("RISC_API_SECRET", ""),
            host=env.get("RISC_HOST") or DEFAULT_HOST,
            port=int(port) if port else None,
            https=_env_flag(env, "RISC_HTTPS", True),
            http_basic_auth=_env_flag(env, "RISC_HTTP_BASIC_AUTH", False),
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
            verbose=_env_flag(env, "RISC_VERBOSE", False),
            lenient_status=_env_flag(env, "RISC_LENIENT_STATUS", False),
        )


@dataclass(frozen=True, slots=True)
class SignedRequest:
    """A fully authenticated outbound request, built fresh for every call.

    Attributes:
        method: Upper-case HTTP method.
        url: Absolute URL that was signed (no query string).
        body: Form-encoded request parameters.
        headers: Authentication and content headers.
        request_id: HMAC nonce; ``None`` in Basic mode.
        timestamp: HMAC timestamp in epoch seconds; ``None`` in Basic mode.
    """

    method: str
    url: str
    body: str
    headers: dict[str, str] = field(default_factory=dict)
    request_id: str | None = None
    timestamp: str | None = None


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Decrypted risk assessment produced by the browser fingerprinting script.

    Attributes:
        snapshot_id: Identifier of the snapshot.
        browser_id: Identifier of the fingerprinted browser.
        date: Issue time in epoch seconds.
        score: Numeric risk score.
        status: One of ``"risky"``, ``"passed"`` or ``"failed"``.
    """

    snapshot_id: str
    browser_id: str
    date: int
    score: float
    status: str

    @property
    def risky(self) -> bool:
        return self.status == STATUS_RISKY

    @property
    def passed(self) -> bool:
        return self.status == STATUS_PASSED

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAILED

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Snapshot:
        """Build a snapshot from its decrypted JSON record.

        Raises:
            ValueError: If a field is missing or malformed.
        """
        missing = [k for k in ("snapshot_id", "browser_id", "date", "score", "status") if data.get(k) is None]
        if missing:
            raise ValueError(f"snapshot is missing fields: {', '.join(missing)}")
        status = data["status"]
        if status not in SNAPSHOT_STATUSES:
            raise ValueError(f"unknown snapshot status: {status!r}")
        score = _finite_number(data["score"], "score")
        date = _finite_number(data["date"], "date")
        return cls(
            snapshot_id=str(data["snapshot_id"]),
            browser_id=str(data["browser_id"]),
            date=int(date),
            score=score,
            status=status,
        )

    def to_params(self) -> dict[str, Any]:
        """Fields sent to the server when validating this snapshot."""
        return {
            "snapshot_id": self.snapshot_id,
            "browser_id": self.browser_id,
            "date": self.date,
            "score": self.score,
            "status": self.status,
        }
