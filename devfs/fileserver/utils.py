"""Utility helpers for the fileserver implementation (framework-agnostic)."""

# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0
import logging
import os
import posixpath
import socket
from typing import Callable

LOG = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the fileserver configuration is unusable."""

    pass


def make_path_resolver(root_dir: str) -> Callable[[str], str]:
    """Return a resolver mapping HTTP paths onto files below root_dir.

    The returned function is pure and total: ``..`` segments are
    collapsed before joining, so a request path never resolves above
    the root.
    """
    root = os.path.abspath(root_dir)

    def resolve(http_path: str) -> str:
        relative = posixpath.normpath("/" + http_path).lstrip("/")
        if not relative:
            return root
        return os.path.join(root, *relative.split("/"))

    return resolve


def find_available_port(host: str, start_port: int, max_attempts: int = 10) -> int:
    """Find an available port starting from start_port.

    Tries start_port first, then increments until finding one that can
    be bound on host.
    """
    for offset in range(max_attempts):
        port = start_port + offset
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind((host, port))
                return port
        except OSError:
            LOG.debug("Port %d on %s is busy", port, host)
            continue
    raise ConfigurationError(
        f"Could not find available port in range {start_port}-{start_port + max_attempts - 1}"
    )
