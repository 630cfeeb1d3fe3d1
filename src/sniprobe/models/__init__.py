# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for sniprobe."""

from .envelope import (
    USAGE_TEXT,
    HandlerResult,
    ProbeDiagnostic,
    ProbeEnvelope,
    ProbeFailure,
    ProbeSuccess,
    UsageResponse,
)
from .response import RawResponse, TlsSessionInfo
from .target import Target, parse_target

__all__ = [
    "HandlerResult",
    "ProbeDiagnostic",
    "ProbeEnvelope",
    "ProbeFailure",
    "ProbeSuccess",
    "RawResponse",
    "Target",
    "TlsSessionInfo",
    "USAGE_TEXT",
    "UsageResponse",
    "parse_target",
]
