"""Exceptions raised by modular-accounts.

Upstream failures (resolver callbacks, RPC errors, HTTP errors) are never
wrapped; they reach the caller as raised.
"""
from __future__ import annotations

from typing import Any


class AccountError(Exception):
    """Base exception for smart account operations."""


class EncodingError(AccountError, ValueError):
    """Raised when codec input is malformed or out of domain."""

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


class UnrecognizedCallTypeError(AccountError):
    """Raised when execution calldata carries an unknown call type."""

    def __init__(self, call_type: bytes):
        self.call_type = call_type
        super().__init__(f"Unrecognized call type: 0x{call_type.hex()}")


class UnsupportedOperationError(AccountError, NotImplementedError):
    """Raised when a signer is asked for an operation it cannot perform."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        super().__init__(f"{operation}: {reason}")


class MissingFieldError(AccountError, ValueError):
    """Raised when a required user operation field is absent."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")
