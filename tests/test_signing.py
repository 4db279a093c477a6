"""Tests for risc_sdk.signing."""

from __future__ import annotations

import base64
import hashlib
import hmac
import re

import pytest

from conftest import SECRET, TOKEN
from risc_sdk import signing
from risc_sdk.models import ClientConfig
from risc_sdk.signing import (
    HEADER_REQUEST_ID,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    HEADER_TOKEN,
    basic_auth_header,
    build_signed_request,
    create_request_id,
    encode_params,
    sign,
)

UUID4 = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")
URL = "https://risc.lastwall.com:443/api/users"


def independent_signature(url: str, request_id: str, timestamp: str, secret: str) -> str:
    mac = hmac.new(secret.encode(), (url + request_id + timestamp).encode(), hashlib.sha1)
    return base64.b64encode(mac.digest()).decode()


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(token=TOKEN, secret=SECRET)


class TestSign:
    @pytest.mark.parametrize(
        "request_id,timestamp",
        [
            ("2f1c4b1e-9d3a-4c55-8a0e-0123456789ab", "1700000000"),
            ("00000000-0000-4000-8000-000000000000", "0"),
        ],
    )
    def test_matches_independent_hmac(self, request_id: str, timestamp: str):
        assert sign(URL, request_id, timestamp, SECRET) == independent_signature(URL, request_id, timestamp, SECRET)

    def test_deterministic(self):
        assert sign(URL, "abc", "1", SECRET) == sign(URL, "abc", "1", SECRET)

    def test_depends_on_url(self):
        other = "https://risc.lastwall.com:443/api/sessions"
        assert sign(URL, "abc", "1", SECRET) != sign(other, "abc", "1", SECRET)


class TestBasicAuthHeader:
    def test_decodes_to_token_and_secret(self):
        header = basic_auth_header(TOKEN, SECRET)
        assert header.startswith("Basic ")
        assert base64.b64decode(header[len("Basic "):]).decode() == f"{TOKEN}:{SECRET}"


class TestCreateRequestId:
    def test_uuid4_shape(self):
        assert UUID4.match(create_request_id())

    def test_unique(self):
        assert len({create_request_id() for _ in range(50)}) == 50

    def test_fallback_when_urandom_unavailable(self, monkeypatch, output):
        def unavailable(n: int) -> bytes:
            raise NotImplementedError("no randomness source")

        monkeypatch.setattr(signing.os, "urandom", unavailable)
        request_id = create_request_id(output)
        assert UUID4.match(request_id)
        assert len(output.messages("warn")) == 1
        assert "pseudo-random" in output.messages("warn")[0]


class TestEncodeParams:
    def test_form_encoding(self):
        assert encode_params({"user_id": "u 1", "email": "a@b.c"}) == "user_id=u+1&email=a%40b.c"

    def test_none_values_dropped(self):
        assert encode_params({"user_id": "u1", "name": None}) == "user_id=u1"

    def test_empty(self):
        assert encode_params({}) == ""


class TestBuildSignedRequest:
    def test_hmac_headers(self, config: ClientConfig):
        req = build_signed_request(
            config, "post", URL, {"user_id": "u1"}, request_id="rid-1", timestamp="1700000000"
        )
        assert req.method == "POST"
        assert req.url == URL
        assert req.body == "user_id=u1"
        assert req.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert req.headers[HEADER_TOKEN] == TOKEN
        assert req.headers[HEADER_TIMESTAMP] == "1700000000"
        assert req.headers[HEADER_REQUEST_ID] == "rid-1"
        assert req.headers[HEADER_SIGNATURE] == independent_signature(URL, "rid-1", "1700000000", SECRET)
        assert "Authorization" not in req.headers

    def test_signature_excludes_body(self, config: ClientConfig):
        a = build_signed_request(config, "POST", URL, {"user_id": "a"}, request_id="r", timestamp="1")
        b = build_signed_request(config, "PUT", URL, {"user_id": "b"}, request_id="r", timestamp="1")
        assert a.headers[HEADER_SIGNATURE] == b.headers[HEADER_SIGNATURE]

    def test_generates_nonce_and_timestamp(self, config: ClientConfig, monkeypatch):
        monkeypatch.setattr(signing.time, "time", lambda: 1700000123.9)
        req = build_signed_request(config, "GET", URL, {})
        assert UUID4.match(req.request_id)
        assert req.timestamp == "1700000123"
        assert req.headers[HEADER_SIGNATURE] == independent_signature(URL, req.request_id, req.timestamp, SECRET)

    def test_fresh_nonce_per_request(self, config: ClientConfig):
        a = build_signed_request(config, "GET", URL, {})
        b = build_signed_request(config, "GET", URL, {})
        assert a.request_id != b.request_id

    def test_basic_mode(self):
        config = ClientConfig(token=TOKEN, secret=SECRET, http_basic_auth=True)
        req = build_signed_request(config, "GET", URL, {"user_id": "u1"})
        assert req.headers["Authorization"] == basic_auth_header(TOKEN, SECRET)
        assert req.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert HEADER_SIGNATURE not in req.headers
        assert req.request_id is None
        assert req.timestamp is None
        assert req.body == "user_id=u1"
