# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""TLS transport exports and factory."""

from ..config import ProbeSettings, load_probe_settings
from .base import RECV_SIZE, TlsStream, TlsTransport, build_client_context
from .bio_backend import BioTlsStream, BioTransport
from .socket_backend import SocketTlsStream, SocketTransport
from .stub import StubStream, StubTransport

_BACKENDS = {
    "socket": SocketTransport,
    "bio": BioTransport,
}


def create_transport(settings: ProbeSettings | None = None) -> TlsTransport:
    """Factory for the backend named by `settings.transport`."""
    name = (settings or load_probe_settings()).transport
    try:
        backend = _BACKENDS[name]
    except KeyError:
        raise ValueError(f"unknown transport backend: {name!r}") from None
    return backend()


__all__ = [
    "RECV_SIZE",
    "BioTlsStream",
    "BioTransport",
    "SocketTlsStream",
    "SocketTransport",
    "StubStream",
    "StubTransport",
    "TlsStream",
    "TlsTransport",
    "build_client_context",
    "create_transport",
]
