# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Encrypted byte-stream abstraction shared by every backend."""

from __future__ import annotations

import ssl
from collections.abc import Sequence
from typing import Protocol

from ..models.response import TlsSessionInfo
from ..utils.deadline import Deadline

RECV_SIZE = 16 * 1024


class TlsStream(Protocol):
    """
    A connected, handshaken TLS stream.

    Every blocking call is bounded by the deadline the stream was opened with.
    `recv` returns `b""` once the peer has closed, whether it sent close_notify
    or just dropped the TCP connection.
    """

    @property
    def closed(self) -> bool: ...

    def send(self, data: bytes) -> None: ...

    def shutdown_write(self) -> None: ...

    def recv(self, bufsize: int = RECV_SIZE) -> bytes: ...

    def session_info(self) -> TlsSessionInfo: ...

    def close(self) -> None: ...


class TlsTransport(Protocol):
    """Minimal protocol for dialing an IP and upgrading it to TLS with an explicit SNI."""

    def open(
        self,
        ip: str,
        port: int,
        *,
        server_hostname: str,
        alpn_protocols: Sequence[str],
        deadline: Deadline,
    ) -> TlsStream: ...


def build_client_context(alpn_protocols: Sequence[str]) -> ssl.SSLContext:
    """
    Client context that accepts any peer certificate.

    The presented server name never matches the dialed address, so hostname
    checks and chain verification are both off.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    if alpn_protocols:
        context.set_alpn_protocols(list(alpn_protocols))
    # Peers often close without close_notify; treat that as a normal EOF.
    context.options |= getattr(ssl, "OP_IGNORE_UNEXPECTED_EOF", 0)
    return context


__all__ = ["RECV_SIZE", "TlsStream", "TlsTransport", "build_client_context"]
