# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""SNI-spoofed TLS probe: dial, handshake, send one request, read until the peer closes."""

from __future__ import annotations

import codecs
import logging

from ..config import ProbeSettings, load_probe_settings
from ..errors import SocketTimeout, TransportError
from ..models.response import RawResponse, TlsSessionInfo
from ..models.target import Target
from ..transport import RECV_SIZE, TlsStream, TlsTransport, create_transport
from ..utils.deadline import Deadline
from .framing import parse_raw_response

logger = logging.getLogger(__name__)


def read_until_close(stream: TlsStream, bufsize: int = RECV_SIZE) -> tuple[str, int]:
    """Drain `stream` until EOF, decoding UTF-8 incrementally. Returns (text, bytes read)."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    parts: list[str] = []
    total = 0
    while True:
        chunk = stream.recv(bufsize)
        if not chunk:
            break
        total += len(chunk)
        parts.append(decoder.decode(chunk))
    parts.append(decoder.decode(b"", final=True))
    return "".join(parts), total


class ProbeEngine:
    """
    Runs one probe per call against an arbitrary IP:port.

    The server name sent in the ClientHello and the `Host` header always come from
    settings, never from the dialed address. One deadline, armed when the call
    starts, bounds dial + handshake + write + read; the stream is closed on every
    exit path.
    """

    def __init__(self, settings: ProbeSettings | None = None, transport: TlsTransport | None = None):
        self.settings = settings or load_probe_settings()
        self.transport = transport or create_transport(self.settings)

    def probe(self, ip: str, port: int) -> RawResponse:
        return self.probe_target(Target(ip=ip, port=port))

    def probe_target(self, target: Target) -> RawResponse:
        settings = self.settings
        deadline = Deadline(settings.timeout)
        stream: TlsStream | None = None
        session: TlsSessionInfo | None = None
        stage = "dial"
        try:
            stream = self.transport.open(
                target.ip,
                target.port,
                server_hostname=settings.sni_host,
                alpn_protocols=settings.alpn_protocols,
                deadline=deadline,
            )
            session = stream.session_info()
            logger.debug(
                "Handshake with %s as %s: %s alpn=%s",
                target,
                settings.sni_host,
                session.tls_version,
                session.alpn_protocol,
            )

            stage = "write"
            stream.send(settings.request_template)
            if settings.half_close:
                stream.shutdown_write()

            stage = "read"
            text, bytes_read = read_until_close(stream)
        except TimeoutError as exc:
            logger.info("Probe %s: socket timeout during %s after %.3fs", target, stage, deadline.elapsed())
            raise SocketTimeout() from exc
        except OSError as exc:
            logger.info("Probe %s failed during %s: %s", target, stage, exc)
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        finally:
            if stream is not None:
                stream.close()

        if bytes_read == 0:
            logger.info("Probe %s: peer closed with 0 bytes", target)
        else:
            logger.debug("Probe %s: read %d bytes in %.3fs", target, bytes_read, deadline.elapsed())
        return parse_raw_response(text, bytes_read=bytes_read, session=session)


__all__ = ["ProbeEngine", "read_until_close"]
