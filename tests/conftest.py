# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Loopback TLS peers for transport and end-to-end tests.

Each peer serves exactly one connection on 127.0.0.1 with a throwaway
self-signed certificate whose subject matches neither the dialed IP nor the
presented server name.
"""

from __future__ import annotations

import datetime
import socket
import ssl
import threading

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID


@pytest.fixture(scope="session")
def tls_cert_files(tmp_path_factory):
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "unrelated.invalid")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    directory = tmp_path_factory.mktemp("tls")
    certfile = directory / "cert.pem"
    keyfile = directory / "key.pem"
    certfile.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    keyfile.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return str(certfile), str(keyfile)


class TlsPeer:
    """One-shot TLS server: handshake, read the request head, answer, close."""

    def __init__(self, certfile: str, keyfile: str, *, response: bytes | None = None, hold_open: bool = False):
        self.response = response
        self.hold_open = hold_open
        self.server_names: list[str | None] = []
        self.requests: list[bytes] = []
        self.connections = 0
        self.release = threading.Event()

        self.context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        self.context.load_cert_chain(certfile, keyfile)
        self.context.set_alpn_protocols(["http/1.1"])
        self.context.sni_callback = self._on_sni

        self.listener = socket.create_server(("127.0.0.1", 0))
        self.port = self.listener.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    def _on_sni(self, sslobj, server_name, context):  # noqa: ARG002
        self.server_names.append(server_name)

    def _serve(self) -> None:
        self.listener.settimeout(5)
        try:
            conn, _ = self.listener.accept()
        except OSError:
            return
        self.connections += 1
        conn.settimeout(5)
        try:
            tls = self.context.wrap_socket(conn, server_side=True)
        except OSError:
            conn.close()
            return
        with tls:
            data = b""
            try:
                while b"\r\n\r\n" not in data:
                    chunk = tls.recv(4096)
                    if not chunk:
                        break
                    data += chunk
                self.requests.append(data)
                if self.response is not None:
                    tls.sendall(self.response)
                if self.hold_open:
                    self.release.wait(5)
            except OSError:
                return

    def close(self) -> None:
        self.release.set()
        self.listener.close()
        self.thread.join(5)


class RawPeer:
    """One-shot plain TCP server that writes `payload` (or nothing) and optionally holds the socket."""

    def __init__(self, payload: bytes = b"", *, hold_open: bool = False):
        self.payload = payload
        self.hold_open = hold_open
        self.release = threading.Event()
        self.listener = socket.create_server(("127.0.0.1", 0))
        self.port = self.listener.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    def _serve(self) -> None:
        self.listener.settimeout(5)
        try:
            conn, _ = self.listener.accept()
        except OSError:
            return
        with conn:
            if self.payload:
                conn.sendall(self.payload)
            if self.hold_open:
                self.release.wait(5)

    def close(self) -> None:
        self.release.set()
        self.listener.close()
        self.thread.join(5)


@pytest.fixture
def tls_peer(tls_cert_files):
    peers: list[TlsPeer] = []

    def start(**kwargs) -> TlsPeer:
        peer = TlsPeer(*tls_cert_files, **kwargs)
        peers.append(peer)
        return peer

    yield start
    for peer in peers:
        peer.close()


@pytest.fixture
def raw_peer():
    peers: list[RawPeer] = []

    def start(**kwargs) -> RawPeer:
        peer = RawPeer(**kwargs)
        peers.append(peer)
        return peer

    yield start
    for peer in peers:
        peer.close()


@pytest.fixture
def closed_port():
    sock = socket.create_server(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
