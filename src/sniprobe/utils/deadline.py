# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Single countdown shared by every blocking step of a probe.

The deadline is armed once, when the probe starts. Each socket operation sets
its own timeout to whatever is left, so dial + handshake + read together never
exceed the configured budget by more than scheduling noise.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from ..errors import TIMEOUT_MESSAGE


class Deadline:
    def __init__(self, timeout: float, *, clock: Callable[[], float] = time.monotonic):
        self.timeout = float(timeout)
        self._clock = clock
        self.started_at = clock()
        self.expires_at = self.started_at + self.timeout

    def remaining(self) -> float:
        """Seconds left before expiry; raises TimeoutError once the budget is spent."""
        left = self.expires_at - self._clock()
        if left <= 0:
            raise TimeoutError(TIMEOUT_MESSAGE)
        return left

    def elapsed(self) -> float:
        return self._clock() - self.started_at


__all__ = ["Deadline"]
