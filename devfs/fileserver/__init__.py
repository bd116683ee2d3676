# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0
"""Fileserver package for read-only filesystem access over HTTP.

Exposes a small HTTP server that lets a browser-side development client
read files, list directories and stat paths below a configured root.
"""

from .router import ReadRouter
from .server import application

__all__ = [
    "ReadRouter",
    "application",
]
