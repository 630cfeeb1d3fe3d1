# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import dataclasses
import socket
import ssl
import unittest

import pytest

from sniprobe import config
from sniprobe.config import DEFAULT_SNI_HOST, DEFAULT_USER_AGENT, ProbeSettings, render_request
from sniprobe.errors import (
    ErrorCategory,
    InvalidTarget,
    ProbeError,
    SocketTimeout,
    TransportError,
    categorize_exception,
    error_category_to_reason,
)


def test_defaults_match_probe_constants():
    settings = ProbeSettings()
    assert settings.sni_host == DEFAULT_SNI_HOST == "myip.ipeek.workers.dev"
    assert settings.user_agent == DEFAULT_USER_AGENT == "ProxyScanner/1.0"
    assert settings.timeout == 5.0
    assert settings.body_limit == 2000
    assert settings.alpn_protocols == ("http/1.1",)
    assert settings.transport == "socket"
    assert settings.half_close is True


def test_request_template_is_fixed_get_with_connection_close():
    settings = ProbeSettings()
    assert settings.request_template == (
        b"GET / HTTP/1.1\r\n"
        b"Host: myip.ipeek.workers.dev\r\n"
        b"User-Agent: ProxyScanner/1.0\r\n"
        b"Connection: close\r\n"
        b"\r\n"
    )


def test_settings_are_immutable_and_replace_rerenders_template():
    settings = ProbeSettings()
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.timeout = 1.0  # type: ignore[misc]

    other = dataclasses.replace(settings, sni_host="front.example")
    assert b"Host: front.example\r\n" in other.request_template
    assert other.request_template == render_request("front.example", DEFAULT_USER_AGENT)


def test_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("SNIPROBE_SNI_HOST", "edge.example")
    monkeypatch.setenv("SNIPROBE_USER_AGENT", "Custom/2.0")
    monkeypatch.setenv("SNIPROBE_TIMEOUT", "1.5")
    monkeypatch.setenv("SNIPROBE_BODY_LIMIT", "64")
    monkeypatch.setenv("SNIPROBE_TRANSPORT", "BIO")
    monkeypatch.setenv("SNIPROBE_HALF_CLOSE", "off")

    settings = config.load_probe_settings()

    assert settings.sni_host == "edge.example"
    assert settings.user_agent == "Custom/2.0"
    assert settings.timeout == 1.5
    assert settings.body_limit == 64
    assert settings.transport == "bio"
    assert settings.half_close is False
    assert b"User-Agent: Custom/2.0\r\n" in settings.request_template


def test_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("SNIPROBE_TIMEOUT", "soon")
    monkeypatch.setenv("SNIPROBE_BODY_LIMIT", "-5")
    monkeypatch.setenv("SNIPROBE_TRANSPORT", "carrier-pigeon")

    settings = config.load_probe_settings()

    assert settings.timeout == ProbeSettings.timeout
    assert settings.body_limit == ProbeSettings.body_limit
    assert settings.transport == ProbeSettings.transport


def test_load_probe_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("SNIPROBE_TIMEOUT", "2.5")
    assert config.load_probe_settings().timeout == 2.5
    monkeypatch.setenv("SNIPROBE_TIMEOUT", "3.5")
    assert config.load_probe_settings().timeout == 3.5


class TestErrorTaxonomy(unittest.TestCase):
    def test_error_hierarchy(self):
        self.assertTrue(issubclass(TransportError, ProbeError))
        self.assertTrue(issubclass(SocketTimeout, ProbeError))
        self.assertTrue(issubclass(InvalidTarget, ValueError))
        self.assertFalse(issubclass(InvalidTarget, ProbeError))
        self.assertEqual(str(SocketTimeout()), "socket timeout")

    def test_categorize_exception(self):
        self.assertIs(categorize_exception(None), ErrorCategory.NONE)
        self.assertIs(categorize_exception(InvalidTarget("bad")), ErrorCategory.INVALID_TARGET)
        self.assertIs(categorize_exception(SocketTimeout()), ErrorCategory.TIMEOUT)
        self.assertIs(categorize_exception(socket.timeout("timed out")), ErrorCategory.TIMEOUT)
        self.assertIs(categorize_exception(ssl.SSLError("wrong version number")), ErrorCategory.SSL_ERROR)
        self.assertIs(categorize_exception(ConnectionRefusedError()), ErrorCategory.CONNECTION_ERROR)
        self.assertIs(categorize_exception(RuntimeError("?")), ErrorCategory.UNKNOWN_ERROR)
        self.assertIs(categorize_exception(TransportError("reset")), ErrorCategory.CONNECTION_ERROR)

    def test_wrapped_transport_error_uses_cause(self):
        try:
            try:
                raise ssl.SSLError("handshake failure")
            except ssl.SSLError as exc:
                raise TransportError(str(exc)) from exc
        except TransportError as wrapped:
            self.assertIs(categorize_exception(wrapped), ErrorCategory.SSL_ERROR)

    def test_error_category_reasons(self):
        self.assertTrue(error_category_to_reason(ErrorCategory.TIMEOUT))
        self.assertEqual(error_category_to_reason(ErrorCategory.NONE), "")
        self.assertEqual(error_category_to_reason(None), "")
