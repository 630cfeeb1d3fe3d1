# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Minimal HTTP/1.1 response framing over an already-decoded stream.

Nothing is rejected: a stream without a blank line is all head and no body,
header lines without a colon are skipped, and chunked bodies are left encoded.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..models.response import RawResponse, TlsSessionInfo

HEAD_SEPARATOR = "\r\n\r\n"
LINE_SEPARATOR = "\r\n"


def split_head_body(raw: str) -> tuple[str, str]:
    """Split on the first blank line; the body keeps any later blank lines."""
    head, separator, body = raw.partition(HEAD_SEPARATOR)
    if not separator:
        return raw, ""
    return head, body


def parse_header_lines(lines: Iterable[str]) -> dict[str, str]:
    """Lower-cased name -> trimmed value; the last duplicate wins."""
    headers: dict[str, str] = {}
    for line in lines:
        name, colon, value = line.partition(":")
        if not colon:
            continue
        headers[name.strip().lower()] = value.strip()
    return headers


def parse_raw_response(
    raw: str,
    *,
    bytes_read: int | None = None,
    session: TlsSessionInfo | None = None,
) -> RawResponse:
    head, body = split_head_body(raw)
    status_line, *header_lines = head.split(LINE_SEPARATOR)
    return RawResponse(
        status_line=status_line,
        headers=parse_header_lines(header_lines),
        body=body,
        bytes_read=len(raw.encode("utf-8")) if bytes_read is None else bytes_read,
        session=session,
    )


__all__ = ["HEAD_SEPARATOR", "LINE_SEPARATOR", "parse_header_lines", "parse_raw_response", "split_head_body"]
