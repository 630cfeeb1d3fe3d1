# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Plain TCP socket upgraded to TLS by hand through `ssl.MemoryBIO`.

The TLS engine never touches the socket: records are pumped between the socket
and a pair of memory BIOs, which keeps the TCP half-close and every socket
timeout under our control.
"""

from __future__ import annotations

import logging
import socket
import ssl
from collections.abc import Sequence

from ..models.response import TlsSessionInfo
from ..utils.deadline import Deadline
from .base import RECV_SIZE, build_client_context

logger = logging.getLogger(__name__)


class BioTlsStream:
    def __init__(
        self,
        sock: socket.socket,
        context: ssl.SSLContext,
        *,
        deadline: Deadline,
        server_hostname: str,
    ):
        self._sock = sock
        self._deadline = deadline
        self._server_hostname = server_hostname
        self._incoming = ssl.MemoryBIO()
        self._outgoing = ssl.MemoryBIO()
        self._sslobj = context.wrap_bio(
            self._incoming,
            self._outgoing,
            server_side=False,
            server_hostname=server_hostname,
        )
        self._eof = False
        self._write_closed = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _flush(self) -> None:
        pending = self._outgoing.read()
        # After the half-close nothing more can reach the peer.
        if pending and not self._write_closed:
            self._sock.settimeout(self._deadline.remaining())
            self._sock.sendall(pending)

    def _fill(self) -> None:
        self._sock.settimeout(self._deadline.remaining())
        chunk = self._sock.recv(RECV_SIZE)
        if chunk:
            self._incoming.write(chunk)
        else:
            self._eof = True
            self._incoming.write_eof()

    def handshake(self) -> None:
        while True:
            try:
                self._sslobj.do_handshake()
                break
            except ssl.SSLWantReadError:
                self._flush()
                if self._eof:
                    raise ConnectionAbortedError("peer closed the connection during the TLS handshake") from None
                self._fill()
        self._flush()

    def send(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = self._sslobj.write(view)
            view = view[written:]
            self._flush()

    def shutdown_write(self) -> None:
        self._write_closed = True
        self._sock.shutdown(socket.SHUT_WR)

    def recv(self, bufsize: int = RECV_SIZE) -> bytes:
        while True:
            try:
                data = self._sslobj.read(bufsize)
                # Reading can queue records of our own, e.g. a KeyUpdate reply.
                self._flush()
                return data
            except ssl.SSLWantReadError:
                self._flush()
                if self._eof:
                    return b""
                self._fill()
            except (ssl.SSLZeroReturnError, ssl.SSLEOFError):
                return b""

    def session_info(self) -> TlsSessionInfo:
        cipher = self._sslobj.cipher()
        return TlsSessionInfo(
            server_hostname=self._server_hostname,
            alpn_protocol=self._sslobj.selected_alpn_protocol(),
            tls_version=self._sslobj.version(),
            cipher=cipher[0] if cipher else None,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._sock.close()


class BioTransport:
    """Dial a plain TCP socket, then run the TLS handshake over memory BIOs."""

    name = "bio"

    def open(
        self,
        ip: str,
        port: int,
        *,
        server_hostname: str,
        alpn_protocols: Sequence[str],
        deadline: Deadline,
    ) -> BioTlsStream:
        context = build_client_context(alpn_protocols)
        sock = socket.create_connection((ip, port), timeout=deadline.remaining())
        logger.debug("Connected to %s:%s", ip, port)
        try:
            stream = BioTlsStream(sock, context, deadline=deadline, server_hostname=server_hostname)
            stream.handshake()
        except Exception:
            sock.close()
            raise
        return stream


__all__ = ["BioTlsStream", "BioTransport"]
