# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared utilities."""

from .deadline import Deadline

__all__ = ["Deadline"]
