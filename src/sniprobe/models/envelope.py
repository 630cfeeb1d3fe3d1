# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Output envelopes: exactly one is produced per handled request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

USAGE_TEXT = "Usage: /<IP>:<PORT>  e.g. /149.129.250.8:443\n"


@dataclass(frozen=True)
class ProbeSuccess:
    """The peer answered with a JSON body."""

    target: str
    result: Any

    ok: ClassVar[bool] = True
    status_code: ClassVar[int] = 200
    pretty: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "target": self.target, "result": self.result}


@dataclass(frozen=True)
class ProbeDiagnostic:
    """The peer answered, but not with JSON; the raw framing is echoed back."""

    target: str
    status_line: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    ok: ClassVar[bool] = False
    status_code: ClassVar[int] = 502
    pretty: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": False,
            "target": self.target,
            "statusLine": self.status_line,
            "headers": dict(self.headers),
            "body": self.body,
        }


@dataclass(frozen=True)
class ProbeFailure:
    """Validation or probing failed; `error` is the human-readable message."""

    error: str

    ok: ClassVar[bool] = False
    status_code: ClassVar[int] = 400
    pretty: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        return {"ok": False, "error": self.error}


@dataclass(frozen=True)
class UsageResponse:
    """Static help text returned for the root path."""

    text: str = USAGE_TEXT

    ok: ClassVar[bool] = True
    status_code: ClassVar[int] = 200


ProbeEnvelope = Union[ProbeSuccess, ProbeDiagnostic, ProbeFailure]
HandlerResult = Union[ProbeEnvelope, UsageResponse]

__all__ = [
    "HandlerResult",
    "ProbeDiagnostic",
    "ProbeEnvelope",
    "ProbeFailure",
    "ProbeSuccess",
    "USAGE_TEXT",
    "UsageResponse",
]
