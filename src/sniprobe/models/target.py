# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe target model and path parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import InvalidTarget

TARGET_FORMAT_MESSAGE = "bad target format; use /IP:PORT"
TARGET_RANGE_MESSAGE = "invalid IP or port"

_TARGET_RE = re.compile(r"\d{1,3}(?:\.\d{1,3}){3}:\d{1,5}", re.ASCII)


def _valid_octets(ip: str) -> bool:
    return all(0 <= int(octet) <= 255 for octet in ip.split("."))


@dataclass(frozen=True)
class Target:
    """A dotted-quad IPv4 address and TCP port; validated on construction."""

    ip: str
    port: int

    def __post_init__(self) -> None:
        if not isinstance(self.port, int) or isinstance(self.port, bool):
            raise InvalidTarget(TARGET_RANGE_MESSAGE)
        if not _TARGET_RE.fullmatch(f"{self.ip}:{self.port}"):
            raise InvalidTarget(TARGET_FORMAT_MESSAGE)
        if not _valid_octets(self.ip) or not 1 <= self.port <= 65535:
            raise InvalidTarget(TARGET_RANGE_MESSAGE)

    def __str__(self) -> str:
        return f"{self.ip}:{self.port}"

    @property
    def address(self) -> tuple[str, int]:
        return (self.ip, self.port)


def parse_target(path: str) -> Target:
    """
    Parse `/IP:PORT` (any number of leading slashes) into a Target.

    Only the exact `ddd.ddd.ddd.ddd:ppppp` shape is accepted: no hostnames,
    IPv6, CIDR, or surrounding whitespace.
    """
    candidate = str(path or "").lstrip("/")
    if not _TARGET_RE.fullmatch(candidate):
        raise InvalidTarget(TARGET_FORMAT_MESSAGE)
    ip, _, port_text = candidate.partition(":")
    port = int(port_text)
    if not _valid_octets(ip) or not 1 <= port <= 65535:
        raise InvalidTarget(TARGET_RANGE_MESSAGE)
    return Target(ip=ip, port=port)


__all__ = ["TARGET_FORMAT_MESSAGE", "TARGET_RANGE_MESSAGE", "Target", "parse_target"]
