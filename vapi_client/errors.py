"""
Exception types raised and published by the call client.

Control-operation errors (AlreadyInCall, NoCallInProgress, EncodeError) are
raised directly to the caller. Everything that happens asynchronously
(provisioning, joining, leaving, decoding inbound messages) is published on
the event bus wrapped in an ErrorEvent instead.
"""

from typing import Optional


class VapiError(Exception):
    """Base class for all client errors."""


class InvalidConfiguration(VapiError):
    """The configured host cannot be turned into a valid URL."""


class AlreadyInCall(VapiError):
    """start() was called while a call is pending or active."""

    def __init__(self, message: str = "An existing call is in progress"):
        super().__init__(message)


class NoCallInProgress(VapiError):
    """A call-scoped operation was attempted without an active call."""

    def __init__(self, message: str = "No call in progress"):
        super().__init__(message)


class ProvisioningFailed(VapiError):
    """The backend could not create a web call."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text

    def __str__(self):
        text = super().__str__()
        if self.status_code is not None:
            text = f"{text} (HTTP {self.status_code})"
        return text


class TransportJoinFailed(VapiError):
    """The transport refused or failed to join the call URL."""


class TransportLeaveFailed(VapiError):
    """The transport failed to leave. The session is still reset."""


class DecodeError(VapiError):
    """An inbound app message was malformed or of an unknown type."""

    def __init__(self, reason: str, raw_text: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.raw_text = raw_text

    def __str__(self):
        return f"{self.reason}\n{self.raw_text if self.raw_text is not None else 'No response data'}"


class EncodeError(VapiError):
    """An outbound message could not be serialized."""
