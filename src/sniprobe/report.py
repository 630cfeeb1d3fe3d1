# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Turn a framed probe response into a Success or Diagnostic envelope."""

from __future__ import annotations

import json
import math
from typing import Any

from .models.envelope import ProbeDiagnostic, ProbeSuccess
from .models.response import RawResponse
from .models.target import Target

NO_JSON = object()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_or_null(text: str) -> float | None:
    # Literals like 1e400 overflow to inf, which has no JSON form; render them as null.
    value = float(text)
    return value if math.isfinite(value) else None


def parse_json_body(body: str) -> Any:
    """Return the decoded JSON value, or `NO_JSON` when the body is not strict JSON."""
    try:
        return json.loads(body, parse_float=_finite_or_null, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return NO_JSON


def build_envelope(target: Target | str, raw: RawResponse, *, body_limit: int) -> ProbeSuccess | ProbeDiagnostic:
    """
    JSON body -> ProbeSuccess; anything else -> ProbeDiagnostic.

    Non-HTTP garbage and valid HTTP with a non-JSON body both land in the
    diagnostic branch. The body is truncated here and only here.
    """
    target_text = str(target)
    result = parse_json_body(raw.body)
    if result is not NO_JSON:
        return ProbeSuccess(target=target_text, result=result)
    return ProbeDiagnostic(
        target=target_text,
        status_line=raw.status_line,
        headers=dict(raw.headers),
        body=raw.body[:body_limit],
    )


__all__ = ["NO_JSON", "build_envelope", "parse_json_body"]
