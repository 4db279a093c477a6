"""Decryption of risk snapshots produced by the browser fingerprinting script.

A snapshot blob is a JSON object::

    {"ix": 7, "iv": "<32 hex chars>", "data": "<base64 ciphertext>"}

The AES-128-CBC key is 32 hex characters of the API secret taken at offset
``ix`` from the secret concatenated with itself. The plaintext is a JSON
snapshot record, accepted only if its ``date`` is within
:data:`MAX_SNAPSHOT_AGE` seconds of now.
"""

from __future__ import annotations

import base64
import json
import time
from typing import Any, Mapping, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from risc_sdk.models import Snapshot
from risc_sdk.output import Output

MAX_SNAPSHOT_AGE = 600  # seconds
KEY_HEX_LENGTH = 32

SnapshotBlob = Union[str, bytes, Mapping[str, Any]]


def derive_key(secret: str, ix: int) -> bytes:
    """Derive the 16-byte AES key for ciphertext index *ix*.

    Raises:
        ValueError: If *ix* is out of range or the selected characters are not hex.
    """
    if isinstance(ix, bool) or not isinstance(ix, int) or ix < 0:
        raise ValueError(f"invalid key index: {ix!r}")
    key_hex = (secret + secret)[ix : ix + KEY_HEX_LENGTH]
    if len(key_hex) != KEY_HEX_LENGTH:
        raise ValueError(f"key index {ix} is out of range for the API secret")
    return bytes.fromhex(key_hex)


def decrypt_payload(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """AES-CBC decrypt and strip PKCS#7 padding.

    Raises:
        ValueError: On a bad IV length, truncated ciphertext or invalid padding.
    """
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def _load_blob(blob: SnapshotBlob) -> Mapping[str, Any]:
    data = blob if isinstance(blob, Mapping) else json.loads(blob)
    if not isinstance(data, Mapping):
        raise ValueError("snapshot blob is not a JSON object")
    return data


def decrypt_snapshot(
    blob: SnapshotBlob,
    secret: str,
    output: Output,
    now: float | None = None,
) -> Snapshot | None:
    """Decrypt and freshness-check a snapshot blob.

    Never raises: every failure is reported through ``output.error`` and
    results in ``None``.

    Args:
        blob: Serialized snapshot envelope (JSON text or an already-parsed mapping).
        secret: API secret used for key derivation.
        output: Sink for diagnostics.
        now: Current epoch time in seconds; defaults to :func:`time.time`.

    Returns:
        The decrypted :class:`Snapshot`, or ``None``.
    """
    try:
        envelope = _load_blob(blob)
        key = derive_key(secret, envelope["ix"])
        iv = bytes.fromhex(envelope["iv"])
        ciphertext = base64.b64decode(envelope["data"], validate=True)
        plaintext = decrypt_payload(key, iv, ciphertext)
        record = json.loads(plaintext.decode("utf-8"))
        if not isinstance(record, Mapping):
            raise ValueError("decrypted snapshot is not a JSON object")
        snapshot = Snapshot.from_dict(record)
    except (ValueError, TypeError, KeyError, OverflowError, RecursionError) as exc:
        output.error(f"Error decrypting snapshot: {exc}")
        return None

    current = time.time() if now is None else now
    if abs(current - snapshot.date) > MAX_SNAPSHOT_AGE:
        output.error("Error decrypting snapshot: result too far out of date")
        return None
    return snapshot
