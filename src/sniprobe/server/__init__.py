# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP surface exports."""

from .app import CompactJSONResponse, PrettyJSONResponse, create_app, render_result

__all__ = ["CompactJSONResponse", "PrettyJSONResponse", "create_app", "render_result"]
