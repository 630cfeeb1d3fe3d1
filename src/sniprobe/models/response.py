# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Raw probe response models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TlsSessionInfo:
    """What the handshake negotiated; informational only."""

    server_hostname: str | None = None
    alpn_protocol: str | None = None
    tls_version: str | None = None
    cipher: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "server_hostname": self.server_hostname,
            "alpn_protocol": self.alpn_protocol,
            "tls_version": self.tls_version,
            "cipher": self.cipher,
        }


@dataclass(frozen=True)
class RawResponse:
    """
    An HTTP response as framed from the raw stream.

    `headers` keys are lower-cased; on duplicates the last value wins. `body` is
    never truncated here.
    """

    status_line: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    bytes_read: int = 0
    session: TlsSessionInfo | None = None
