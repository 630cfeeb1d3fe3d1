# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Deterministic, scripted transport for tests and offline runs."""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence

from ..models.response import TlsSessionInfo
from ..utils.deadline import Deadline
from .base import RECV_SIZE


class StubStream:
    def __init__(
        self,
        chunks: Iterable[bytes],
        *,
        deadline: Deadline,
        address: tuple[str, int],
        server_hostname: str,
        alpn_protocols: Sequence[str],
        hang: bool = False,
        recv_error: Exception | None = None,
    ):
        self._chunks = list(chunks)
        self._deadline = deadline
        self._hang = hang
        self._recv_error = recv_error
        self.address = address
        self.server_hostname = server_hostname
        self.alpn_protocols = tuple(alpn_protocols)
        self.sent = bytearray()
        self.write_shutdown = False
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def send(self, data: bytes) -> None:
        self._deadline.remaining()
        if self.write_shutdown:
            raise BrokenPipeError("write side already shut down")
        self.sent.extend(data)

    def shutdown_write(self) -> None:
        self.write_shutdown = True

    def recv(self, bufsize: int = RECV_SIZE) -> bytes:
        self._deadline.remaining()
        if self._chunks:
            chunk = self._chunks.pop(0)
            if len(chunk) > bufsize:
                self._chunks.insert(0, chunk[bufsize:])
                chunk = chunk[:bufsize]
            return chunk
        if self._recv_error is not None:
            raise self._recv_error
        while self._hang:
            time.sleep(min(0.01, self._deadline.remaining()))
        return b""

    def session_info(self) -> TlsSessionInfo:
        alpn = self.alpn_protocols[0] if self.alpn_protocols else None
        return TlsSessionInfo(server_hostname=self.server_hostname, alpn_protocol=alpn, tls_version="TLSv1.3")

    def close(self) -> None:
        self.close_calls += 1


class StubTransport:
    """
    Replays a canned byte stream for every opened connection.

    `hang=True` models a peer that never closes; `connect_error` fails the
    dial/handshake and `recv_error` fails the read after the canned chunks.
    """

    name = "stub"

    def __init__(
        self,
        chunks: Iterable[bytes] | bytes = (),
        *,
        hang: bool = False,
        connect_error: Exception | None = None,
        recv_error: Exception | None = None,
    ):
        self._chunks = [chunks] if isinstance(chunks, (bytes, bytearray)) else list(chunks)
        self._hang = hang
        self._connect_error = connect_error
        self._recv_error = recv_error
        self.open_calls = 0
        self.streams: list[StubStream] = []

    def open(
        self,
        ip: str,
        port: int,
        *,
        server_hostname: str,
        alpn_protocols: Sequence[str],
        deadline: Deadline,
    ) -> StubStream:
        self.open_calls += 1
        deadline.remaining()
        if self._connect_error is not None:
            raise self._connect_error
        stream = StubStream(
            [bytes(chunk) for chunk in self._chunks],
            deadline=deadline,
            address=(ip, port),
            server_hostname=server_hostname,
            alpn_protocols=alpn_protocols,
            hang=self._hang,
            recv_error=self._recv_error,
        )
        self.streams.append(stream)
        return stream


__all__ = ["StubStream", "StubTransport"]
