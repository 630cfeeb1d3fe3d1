# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""FastAPI surface: `/` prints usage, `/<IP>:<PORT>` runs one probe."""

from __future__ import annotations

import json
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..config import ProbeSettings, load_probe_settings
from ..handler import ProbeHandler
from ..models.envelope import HandlerResult, UsageResponse
from ..probe.engine import ProbeEngine
from ..transport import TlsTransport
from ..version import __version__


ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def dump_json(content: Any, *, indent: int | None = None) -> bytes:
    """
    Serialize an envelope as UTF-8 JSON.

    Bodies such as `"\\ud800"` decode to lone surrogates, which have no UTF-8
    form; those documents are emitted with `\\uXXXX` escapes instead.
    """
    separators = (",", ":") if indent is None else None
    try:
        text = json.dumps(content, ensure_ascii=False, allow_nan=False, indent=indent, separators=separators)
        return text.encode("utf-8")
    except UnicodeEncodeError:
        text = json.dumps(content, ensure_ascii=True, allow_nan=False, indent=indent, separators=separators)
        return text.encode("ascii")


class CompactJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return dump_json(content)


class PrettyJSONResponse(JSONResponse):
    """JSON rendered with two-space indentation."""

    def render(self, content: Any) -> bytes:
        return dump_json(content, indent=2)


def request_path(request: Request) -> str:
    """The path exactly as received; `%3A` is not turned back into `:`."""
    raw_path = request.scope.get("raw_path")
    if raw_path is None:
        return request.url.path
    return raw_path.split(b"?", 1)[0].decode("latin-1")


def render_result(result: HandlerResult) -> Response:
    if isinstance(result, UsageResponse):
        return PlainTextResponse(result.text, status_code=result.status_code)
    response_class = PrettyJSONResponse if result.pretty else CompactJSONResponse
    return response_class(result.to_dict(), status_code=result.status_code)


def create_app(
    settings: ProbeSettings | None = None,
    *,
    transport: TlsTransport | None = None,
    handler: ProbeHandler | None = None,
) -> FastAPI:
    """Build the app; `handler` (or `transport`) may be injected for tests."""
    if handler is None:
        settings = settings or load_probe_settings()
        handler = ProbeHandler(ProbeEngine(settings, transport), settings)

    app = FastAPI(title="sniprobe", version=__version__, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.handler = handler

    # Sync endpoint: FastAPI runs it in the threadpool, so a slow probe never blocks the loop.
    @app.api_route("/", methods=ALL_METHODS, include_in_schema=False)
    @app.api_route("/{target:path}", methods=ALL_METHODS, include_in_schema=False)
    def probe_endpoint(request: Request) -> Response:
        return render_result(request.app.state.handler.handle(request_path(request)))

    return app


__all__ = [
    "ALL_METHODS",
    "CompactJSONResponse",
    "PrettyJSONResponse",
    "create_app",
    "dump_json",
    "render_result",
    "request_path",
]
