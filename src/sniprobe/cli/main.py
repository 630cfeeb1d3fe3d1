# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""sniprobe CLI."""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import Any

from ..config import TRANSPORT_CHOICES, ProbeSettings, load_probe_settings
from ..log import setup_logging
from ..models.envelope import ProbeEnvelope
from ..remote import RemoteProbeClient
from ..runtime import SniProbe

DEFAULT_SERVE_HOST = "127.0.0.1"
DEFAULT_SERVE_PORT = 8787


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sniprobe",
        description="Probe an IP:PORT over TLS while presenting a fixed, unrelated SNI hostname",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: SNIPROBE_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    probe = subparsers.add_parser("probe", help="Probe a single IP:PORT target")
    probe.add_argument("target", help="Target as IP:PORT, e.g. 149.129.250.8:443")
    probe.add_argument("--json", action="store_true", help="Output the JSON envelope instead of a summary")
    probe.add_argument("--sni", default=None, help="Server name to present (also sent as Host)")
    probe.add_argument("--timeout", type=float, default=None, help="Probe deadline in seconds")
    probe.add_argument("--transport", choices=TRANSPORT_CHOICES, default=None, help="TLS backend")
    probe.add_argument(
        "--no-half-close",
        action="store_true",
        help="Keep the write side open after sending the request",
    )
    probe.add_argument("--remote", default=None, help="Ask a deployed sniprobe service at this base URL instead")

    serve = subparsers.add_parser("serve", help="Serve the /<IP>:<PORT> HTTP endpoint")
    serve.add_argument("--host", default=DEFAULT_SERVE_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_SERVE_PORT)
    return parser


def apply_overrides(settings: ProbeSettings, args: argparse.Namespace) -> ProbeSettings:
    changes: dict[str, Any] = {}
    if getattr(args, "sni", None):
        changes["sni_host"] = args.sni
    if getattr(args, "timeout", None) is not None and args.timeout > 0:
        changes["timeout"] = args.timeout
    if getattr(args, "transport", None):
        changes["transport"] = args.transport
    if getattr(args, "no_half_close", False):
        changes["half_close"] = False
    return dataclasses.replace(settings, **changes) if changes else settings


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


def _pretty_print(envelope: ProbeEnvelope | dict[str, Any]) -> None:
    payload = envelope.to_dict() if hasattr(envelope, "to_dict") else envelope
    if not isinstance(payload, dict):
        print(payload)
        return
    target = payload.get("target") or "-"
    if payload.get("ok"):
        print(f"[sniprobe] {target}: JSON response")
        print(json.dumps(payload.get("result"), indent=2))
        return
    if "error" in payload:
        print(f"[sniprobe] probe failed: {payload['error']}")
        return
    print(f"[sniprobe] {target}: non-JSON response")
    print(f"Status line: {payload.get('statusLine') or '-'}")
    headers = payload.get("headers") or {}
    for name, value in headers.items():
        print(f"  {name}: {value}")
    body = payload.get("body") or ""
    if body:
        print("Body:")
        print(body)


def _run_probe(args: argparse.Namespace, settings: ProbeSettings) -> int:
    if args.remote:
        with RemoteProbeClient(args.remote, settings) as client:
            result = client.probe(args.target)
        if result.payload is None:
            print(f"[sniprobe] remote answered {result.status_code}: {result.text.strip()}")
            return 1
        if args.json:
            _print_json(result.payload)
        else:
            _pretty_print(result.payload)
        return 0 if result.ok else 1

    envelope = SniProbe(settings).run(args.target)
    if args.json:
        _print_json(envelope)
    else:
        _pretty_print(envelope)
    return 0 if envelope.ok else 1


def _serve(args: argparse.Namespace, settings: ProbeSettings) -> int:
    import uvicorn

    from ..server import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level="info")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings = apply_overrides(load_probe_settings(), args)
    if args.command == "serve":
        return _serve(args, settings)
    return _run_probe(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
