"""Shared test fixtures."""

from __future__ import annotations

import base64
import json
from typing import Any, Callable

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

TOKEN = "test-api-token-0001"
SECRET = "00112233445566778899aabbccddeeff"
NOW = 1_700_000_000
IV = bytes(range(16))


class RecordingOutput:
    """Output sink that keeps every line for inspection."""

    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.lines.append(("info", message))

    def success(self, message: str) -> None:
        self.lines.append(("success", message))

    def warn(self, message: str) -> None:
        self.lines.append(("warn", message))

    def error(self, message: str) -> None:
        self.lines.append(("error", message))

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m in self.lines if lvl == level]


@pytest.fixture()
def output() -> RecordingOutput:
    return RecordingOutput()


@pytest.fixture()
def snapshot_record() -> dict[str, Any]:
    return {
        "snapshot_id": "snap-42",
        "browser_id": "browser-7",
        "date": NOW,
        "score": 12.5,
        "status": "passed",
    }


def encrypt_blob(record: Any, secret: str = SECRET, ix: int = 5, iv: bytes = IV) -> str:
    """Produce a blob the way the browser script does."""
    key = bytes.fromhex((secret + secret)[ix : ix + 32])
    padder = padding.PKCS7(128).padder()
    plaintext = json.dumps(record).encode() if not isinstance(record, bytes) else record
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return json.dumps({"ix": ix, "iv": iv.hex(), "data": base64.b64encode(ciphertext).decode()})


@pytest.fixture()
def make_blob() -> Callable[..., str]:
    return encrypt_blob
