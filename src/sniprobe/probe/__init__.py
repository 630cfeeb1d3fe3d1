# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe engine and response framing."""

from .engine import ProbeEngine, read_until_close
from .framing import parse_header_lines, parse_raw_response, split_head_body

__all__ = ["ProbeEngine", "parse_header_lines", "parse_raw_response", "read_until_close", "split_head_body"]
