# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0
"""Filesystem access used by the read router."""

import os
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory entry with its type, taken without following symlinks."""

    name: str
    is_file: bool
    is_dir: bool


class FilesystemAccessor(Protocol):
    """Read operations the router needs from a filesystem."""

    def stat(self, path: str) -> os.stat_result:
        """Return metadata for path, raising FileNotFoundError if missing."""
        ...

    def read_file(self, path: str) -> bytes:
        """Return the full contents of a regular file."""
        ...

    def read_directory(
        self, path: str, detailed: bool = False
    ) -> list[str] | list[DirectoryEntry]:
        """List a directory as names, or as typed entries when detailed."""
        ...


class LocalFilesystem:
    """FilesystemAccessor backed by the local ``os`` module."""

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def read_file(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def read_directory(
        self, path: str, detailed: bool = False
    ) -> list[str] | list[DirectoryEntry]:
        if not detailed:
            return os.listdir(path)
        with os.scandir(path) as it:
            return [
                DirectoryEntry(
                    name=entry.name,
                    is_file=entry.is_file(follow_symlinks=False),
                    is_dir=entry.is_dir(follow_symlinks=False),
                )
                for entry in it
            ]
