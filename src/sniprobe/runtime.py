# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade wiring settings, transport, engine, and handler."""

from __future__ import annotations

from .config import ProbeSettings, load_probe_settings
from .handler import ProbeHandler
from .models.envelope import HandlerResult, ProbeEnvelope, ProbeFailure, UsageResponse
from .models.response import RawResponse
from .models.target import TARGET_FORMAT_MESSAGE, Target, parse_target
from .probe.engine import ProbeEngine
from .transport import TlsTransport, create_transport


class SniProbe:
    """
    Convenience wrapper for library and CLI callers.

    `probe()` returns the framed response and raises on failure; `run()` and
    `handle()` go through the handler and always return an envelope.
    """

    def __init__(self, settings: ProbeSettings | None = None, transport: TlsTransport | None = None):
        self.settings = settings or load_probe_settings()
        self.transport = transport or create_transport(self.settings)
        self.engine = ProbeEngine(self.settings, self.transport)
        self.handler = ProbeHandler(self.engine, self.settings)

    def probe(self, target: Target | str) -> RawResponse:
        if not isinstance(target, Target):
            target = parse_target(target)
        return self.engine.probe_target(target)

    def run(self, target: Target | str) -> ProbeEnvelope:
        result = self.handler.handle(f"/{target}")
        if isinstance(result, UsageResponse):
            return ProbeFailure(error=TARGET_FORMAT_MESSAGE)
        return result

    def handle(self, path: str) -> HandlerResult:
        return self.handler.handle(path)
