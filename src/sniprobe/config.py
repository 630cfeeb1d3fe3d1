# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for sniprobe."""

import os
from dataclasses import dataclass, field

DEFAULT_SNI_HOST = "myip.ipeek.workers.dev"
DEFAULT_USER_AGENT = "ProxyScanner/1.0"
TRANSPORT_CHOICES = ("socket", "bio")


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def render_request(sni_host: str, user_agent: str) -> bytes:
    """Render the fixed HTTP/1.1 request sent over every probe connection."""
    return (
        "GET / HTTP/1.1\r\n"
        f"Host: {sni_host}\r\n"
        f"User-Agent: {user_agent}\r\n"
        "Connection: close\r\n"
        "\r\n"
    ).encode("ascii")


@dataclass(frozen=True)
class ProbeSettings:
    """
    Probe defaults, built once and handed to the engine.

    `sni_host` is both the TLS server name and the `Host` header; it is never
    derived from the dialed address.
    """

    sni_host: str = DEFAULT_SNI_HOST
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 5.0
    body_limit: int = 2000
    alpn_protocols: tuple[str, ...] = ("http/1.1",)
    transport: str = "socket"
    half_close: bool = True
    request_template: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "request_template", render_request(self.sni_host, self.user_agent))

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("SNIPROBE_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        body_limit = _int_env("SNIPROBE_BODY_LIMIT", cls.body_limit)
        if body_limit <= 0:
            body_limit = cls.body_limit
        transport = os.getenv("SNIPROBE_TRANSPORT", cls.transport).strip().lower()
        if transport not in TRANSPORT_CHOICES:
            transport = cls.transport
        return cls(
            sni_host=os.getenv("SNIPROBE_SNI_HOST", cls.sni_host),
            user_agent=os.getenv("SNIPROBE_USER_AGENT", cls.user_agent),
            timeout=timeout,
            body_limit=body_limit,
            transport=transport,
            half_close=_bool_env("SNIPROBE_HALF_CLOSE", cls.half_close),
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()
