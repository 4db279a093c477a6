"""RISC SDK — Python client for the RISC identity-risk API."""

from risc_sdk.client import RiscClient
from risc_sdk.exceptions import (
    RiscAPIError,
    RiscConfigurationError,
    RiscConnectionError,
    RiscError,
    RiscResponseError,
    RiscTimeoutError,
    RiscValidationError,
)
from risc_sdk.models import ClientConfig, SignedRequest, Snapshot
from risc_sdk.output import ConsoleOutput, LoggingOutput, Output

__all__ = [
    "RiscClient",
    "AsyncRiscClient",
    "ClientConfig",
    "SignedRequest",
    "Snapshot",
    "Output",
    "ConsoleOutput",
    "LoggingOutput",
    "RiscError",
    "RiscConfigurationError",
    "RiscValidationError",
    "RiscConnectionError",
    "RiscTimeoutError",
    "RiscAPIError",
    "RiscResponseError",
]


def __getattr__(name: str) -> object:
    """Lazy-import the async client so ``httpx`` is optional at import time."""
    if name == "AsyncRiscClient":
        from risc_sdk.async_client import AsyncRiscClient

        return AsyncRiscClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
