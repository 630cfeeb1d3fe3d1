# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request handler: validate the path, probe, and map every outcome to one envelope."""

from __future__ import annotations

import logging

from .config import ProbeSettings
from .errors import categorize_exception, error_category_to_reason
from .models.envelope import HandlerResult, ProbeFailure, UsageResponse
from .models.target import parse_target
from .probe.engine import ProbeEngine
from .report import build_envelope

logger = logging.getLogger(__name__)

ROOT_PATH = "/"


def failure_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class ProbeHandler:
    """Single top-level boundary: `handle()` never raises."""

    def __init__(self, engine: ProbeEngine, settings: ProbeSettings | None = None):
        self.engine = engine
        self.settings = settings or engine.settings

    def handle(self, path: str) -> HandlerResult:
        if path == ROOT_PATH:
            return UsageResponse()
        try:
            target = parse_target(path)
            raw = self.engine.probe_target(target)
            envelope = build_envelope(target, raw, body_limit=self.settings.body_limit)
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            logger.warning(
                "Probe request %r failed [%s] %s: %s", path, category.value, error_category_to_reason(category), exc
            )
            return ProbeFailure(error=failure_message(exc))
        logger.info("Probe %s -> %s", envelope.target, envelope.status_code)
        return envelope


__all__ = ["ROOT_PATH", "ProbeHandler", "failure_message"]
