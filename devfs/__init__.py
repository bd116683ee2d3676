# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0
"""Development-time HTTP proxy for browser filesystem reads."""

__version__ = "1.0.0"
