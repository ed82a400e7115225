"""Exceptions for the gateway client.

Exception Hierarchy:
    TradfriError
    ├── TransportError - secure channel failure, surfaced unchanged
    ├── AuthenticationFailed - credential exchange did not yield a key
    ├── DecodeError - payload did not match the expected structure
    ├── ValidationError - client-side precondition failed, nothing sent
    ├── FormatError - malformed input to a conversion function
    └── GatewayError - the gateway answered with an error code
"""
from __future__ import annotations


class TradfriError(Exception):
    """Base exception for gateway client errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self.code = code


class TransportError(TradfriError):
    """Secure channel failure such as a lost connection or a timeout."""

    def __init__(self, message: str = "Secure channel failure") -> None:
        """Initialize transport error."""
        super().__init__(message)


class AuthenticationFailed(TradfriError):
    """Credential exchange returned an unexpected status or no secret."""

    def __init__(
        self,
        message: str = "Unable to obtain a pre-shared key",
        code: str | None = None,
    ) -> None:
        """Initialize authentication error."""
        super().__init__(message, code=code)


class DecodeError(TradfriError):
    """Payload did not match the expected structure."""

    def __init__(self, message: str, payload: bytes | None = None) -> None:
        """Initialize decode error."""
        super().__init__(message)
        self.payload = payload


class ValidationError(TradfriError):
    """Client-side precondition failed; no request was issued."""


class FormatError(TradfriError, ValueError):
    """Malformed input to a conversion function."""

    def __init__(self, value: str, expected: str) -> None:
        """Initialize format error."""
        super().__init__(f"Invalid value {value!r}: expected {expected}")
        self.value = value


class GatewayError(TradfriError):
    """The gateway answered a request with an error-class code."""

    def __init__(self, path: str, code: str) -> None:
        """Initialize gateway error."""
        super().__init__(f"{path}: gateway returned {code}", code=code)
        self.path = path
