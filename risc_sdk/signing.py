"""Request signing for the RISC API.

Two authentication modes are supported:

* Basic: ``Authorization: Basic base64(token:secret)``.
* HMAC (default): a random version-4 UUID request id and an epoch-seconds
  timestamp are generated per request, and
  ``base64(HMAC-SHA1(secret, url + request_id + timestamp))`` is sent in the
  ``X-Lastwall-Signature`` header.

The signed material is the URL, request id and timestamp only. The body and
the HTTP method are not covered; the server computes the same digest.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
import random
import time
import uuid
from typing import Any, Mapping
from urllib.parse import urlencode

from risc_sdk.models import ClientConfig, SignedRequest
from risc_sdk.output import Output

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

HEADER_TOKEN = "X-Lastwall-Token"
HEADER_TIMESTAMP = "X-Lastwall-Timestamp"
HEADER_REQUEST_ID = "X-Lastwall-Request-Id"
HEADER_SIGNATURE = "X-Lastwall-Signature"


def create_request_id(output: Output | None = None) -> str:
    """Return a random version-4 UUID string for use as a request nonce.

    Uses the operating system CSPRNG. If it is unavailable, falls back to
    :mod:`random` and reports the degradation through *output*.
    """
    try:
        return str(uuid.UUID(bytes=os.urandom(16), version=4))
    except NotImplementedError as exc:
        if output is not None:
            output.warn(f"Error generating crypto-secure random guid. Resorting to pseudo-random: {exc}")
        return str(uuid.UUID(int=random.getrandbits(128), version=4))


def sign(url: str, request_id: str, timestamp: str, secret: str) -> str:
    """Compute the base64 HMAC-SHA1 signature of ``url + request_id + timestamp``."""
    message = f"{url}{request_id}{timestamp}".encode()
    digest = hmac.new(secret.encode(), message, hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def basic_auth_header(token: str, secret: str) -> str:
    credentials = base64.b64encode(f"{token}:{secret}".encode()).decode("ascii")
    return f"Basic {credentials}"


def encode_params(params: Mapping[str, Any]) -> str:
    """Form-encode request parameters, omitting ``None`` values."""
    return urlencode([(k, v) for k, v in params.items() if v is not None])


def build_signed_request(
    config: ClientConfig,
    method: str,
    url: str,
    params: Mapping[str, Any],
    *,
    request_id: str | None = None,
    timestamp: str | None = None,
    output: Output | None = None,
) -> SignedRequest:
    """Build the headers and body for one call.

    Args:
        config: Client configuration holding the credentials and auth mode.
        method: HTTP method.
        url: Absolute URL of the endpoint; this exact string is signed.
        params: Request parameters, sent form-encoded in the body.
        request_id: Fixed nonce for HMAC mode; generated when omitted.
        timestamp: Fixed epoch-seconds timestamp for HMAC mode; current time
            when omitted.
        output: Sink for the degraded-randomness warning.

    Returns:
        A new :class:`SignedRequest`.
    """
    body = encode_params(params)
    method = method.upper()

    if config.http_basic_auth:
        headers = {
            "Authorization": basic_auth_header(config.token, config.secret),
            "Content-Type": FORM_CONTENT_TYPE,
        }
        return SignedRequest(method=method, url=url, body=body, headers=headers)

    request_id = request_id or create_request_id(output)
    timestamp = timestamp or str(int(time.time()))
    headers = {
        "Content-Type": FORM_CONTENT_TYPE,
        HEADER_TOKEN: config.token,
        HEADER_TIMESTAMP: timestamp,
        HEADER_REQUEST_ID: request_id,
        HEADER_SIGNATURE: sign(url, request_id, timestamp, config.secret),
    }
    return SignedRequest(
        method=method,
        url=url,
        body=body,
        headers=headers,
        request_id=request_id,
        timestamp=timestamp,
    )
