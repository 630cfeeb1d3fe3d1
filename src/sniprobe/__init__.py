# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
sniprobe package entrypoint.

sniprobe dials an arbitrary IPv4 address and port, negotiates TLS while
presenting a fixed server name that has nothing to do with the dialed address,
sends one HTTP/1.1 request, and reports what came back. It is meant for
checking how edge proxies route on SNI (domain fronting, SNI routing).
TLS backends sit behind an injectable transport interface, and domain objects
are modeled with typed dataclasses.
"""

from .config import ProbeSettings, load_probe_settings
from .errors import ErrorCategory, InvalidTarget, ProbeError, SocketTimeout, TransportError
from .handler import ProbeHandler
from .log import setup_logging
from .models import (
    ProbeDiagnostic,
    ProbeFailure,
    ProbeSuccess,
    RawResponse,
    Target,
    parse_target,
)
from .probe import ProbeEngine, parse_raw_response
from .runtime import SniProbe
from .transport import BioTransport, SocketTransport, StubTransport, create_transport
from .version import __version__

__all__ = [
    "BioTransport",
    "ErrorCategory",
    "InvalidTarget",
    "ProbeDiagnostic",
    "ProbeEngine",
    "ProbeError",
    "ProbeFailure",
    "ProbeHandler",
    "ProbeSettings",
    "ProbeSuccess",
    "RawResponse",
    "SniProbe",
    "SocketTimeout",
    "SocketTransport",
    "StubTransport",
    "Target",
    "TransportError",
    "create_transport",
    "load_probe_settings",
    "parse_raw_response",
    "parse_target",
    "setup_logging",
    "__version__",
]
