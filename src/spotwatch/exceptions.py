"""Custom exception hierarchy for spotwatch."""

from __future__ import annotations


class SpotwatchError(Exception):
    """Base exception for all spotwatch errors."""


class SpotwatchConfigError(SpotwatchError):
    """Invalid or missing configuration."""


class SpotwatchTransportError(SpotwatchError):
    """HTTP-level failure (network, timeout, unexpected status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MetadataTokenError(SpotwatchTransportError):
    """The IMDSv2 session token could not be obtained."""


class MetadataDecodeError(SpotwatchError):
    """A metadata endpoint answered 200 but the body is not the expected record."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class NotificationError(SpotwatchError):
    """The push notification could not be delivered.

    ``status_code`` and ``body`` are set when the webhook answered with an
    error status; both are ``None`` for rejected messages and transport
    failures.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)
