# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed client for a deployed probe service (same `/<IP>:<PORT>` surface)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from .config import ProbeSettings, load_probe_settings
from .models.target import Target
from .version import __version__

# The remote side spends up to its own probe timeout before answering.
REMOTE_TIMEOUT_SLACK = 5.0


@dataclass
class RemoteProbeResult:
    status_code: int
    payload: Any
    text: str = ""

    @property
    def ok(self) -> bool:
        return isinstance(self.payload, dict) and self.payload.get("ok") is True


class RemoteProbeClient:
    """Synchronous httpx wrapper around `GET {base_url}/{ip}:{port}`."""

    def __init__(
        self,
        base_url: str,
        settings: ProbeSettings | None = None,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.settings = settings or load_probe_settings()
        self._client = client or httpx.Client(
            timeout=self.settings.timeout + REMOTE_TIMEOUT_SLACK,
            headers={"User-Agent": f"sniprobe/{__version__}"},
        )

    def probe(self, target: Target | str) -> RemoteProbeResult:
        response = self._client.get(f"{self.base_url}/{target}")
        text = response.text
        try:
            payload = response.json()
        except json.JSONDecodeError:
            payload = None
        return RemoteProbeResult(status_code=response.status_code, payload=payload, text=text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RemoteProbeClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["REMOTE_TIMEOUT_SLACK", "RemoteProbeClient", "RemoteProbeResult"]
