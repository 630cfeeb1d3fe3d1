# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

import ssl
from enum import Enum

TIMEOUT_MESSAGE = "socket timeout"


class SniProbeError(Exception):
    """Base class for every error raised by sniprobe."""


class InvalidTarget(SniProbeError, ValueError):
    """The requested target is not a dotted-quad IPv4 address with a port in range."""


class ProbeError(SniProbeError):
    """The probe could not complete against the remote endpoint."""


class TransportError(ProbeError):
    """Dial, handshake, or stream failure (refused, reset, TLS negotiation failure)."""


class SocketTimeout(ProbeError):
    """The probe deadline fired before the peer closed the stream."""

    def __init__(self, message: str = TIMEOUT_MESSAGE):
        super().__init__(message)


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    INVALID_TARGET = "INVALID_TARGET"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map sniprobe/socket/ssl exceptions to ErrorCategory.

    Wrapped transport errors are categorized by their cause when one is attached.
    """
    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, InvalidTarget):
        return ErrorCategory.INVALID_TARGET

    if isinstance(exc, (SocketTimeout, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, TransportError) and exc.__cause__ is not None:
        return categorize_exception(exc.__cause__)

    if isinstance(exc, (ssl.SSLError, ssl.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (ConnectionError, TransportError, OSError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Peer did not close the stream before the probe deadline",
        ErrorCategory.SSL_ERROR: "TLS negotiation failed",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.INVALID_TARGET: "Target must be IP:PORT",
        ErrorCategory.UNKNOWN_ERROR: "Probe failed",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed")


__all__ = [
    "ErrorCategory",
    "InvalidTarget",
    "ProbeError",
    "SniProbeError",
    "SocketTimeout",
    "TIMEOUT_MESSAGE",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
]
