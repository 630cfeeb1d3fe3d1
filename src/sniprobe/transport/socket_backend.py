# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""`ssl.SSLSocket`-backed transport."""

from __future__ import annotations

import logging
import socket
import ssl
from collections.abc import Sequence

from ..models.response import TlsSessionInfo
from ..utils.deadline import Deadline
from .base import RECV_SIZE, build_client_context

logger = logging.getLogger(__name__)


class SocketTlsStream:
    def __init__(self, sock: ssl.SSLSocket, *, deadline: Deadline, server_hostname: str | None = None):
        self._sock = sock
        self._deadline = deadline
        self._server_hostname = server_hostname
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, data: bytes) -> None:
        self._sock.settimeout(self._deadline.remaining())
        self._sock.sendall(data)

    def shutdown_write(self) -> None:
        # SSLSocket.shutdown() discards the TLS session; half-close the TCP socket only.
        socket.socket.shutdown(self._sock, socket.SHUT_WR)

    def recv(self, bufsize: int = RECV_SIZE) -> bytes:
        self._sock.settimeout(self._deadline.remaining())
        try:
            return self._sock.recv(bufsize)
        except (ssl.SSLZeroReturnError, ssl.SSLEOFError):
            return b""

    def session_info(self) -> TlsSessionInfo:
        cipher = self._sock.cipher()
        return TlsSessionInfo(
            server_hostname=self._server_hostname,
            alpn_protocol=self._sock.selected_alpn_protocol(),
            tls_version=self._sock.version(),
            cipher=cipher[0] if cipher else None,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._sock.close()


class SocketTransport:
    """Dial with `socket.create_connection` and let `SSLContext.wrap_socket` drive TLS."""

    name = "socket"

    def open(
        self,
        ip: str,
        port: int,
        *,
        server_hostname: str,
        alpn_protocols: Sequence[str],
        deadline: Deadline,
    ) -> SocketTlsStream:
        context = build_client_context(alpn_protocols)
        sock = socket.create_connection((ip, port), timeout=deadline.remaining())
        logger.debug("Connected to %s:%s", ip, port)
        try:
            tls_sock = context.wrap_socket(sock, server_hostname=server_hostname, do_handshake_on_connect=False)
        except Exception:
            sock.close()
            raise
        try:
            tls_sock.settimeout(deadline.remaining())
            tls_sock.do_handshake()
        except Exception:
            tls_sock.close()
            raise
        return SocketTlsStream(tls_sock, deadline=deadline, server_hostname=server_hostname)


__all__ = ["SocketTlsStream", "SocketTransport"]
