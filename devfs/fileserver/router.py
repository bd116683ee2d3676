# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0
"""Read router mapping GET requests onto filesystem reads.

The router resolves the request path, stats it, and depending on the
``command`` query parameter returns the file contents, a directory
listing or the stat metadata. Outcomes are modelled as envelopes (see
``envelope``) and rendered onto a WebOb response.
"""

import os
import stat as _stat
from typing import Callable

from oslo_log import log as logging
from webob import Request, Response

from .accessor import FilesystemAccessor, LocalFilesystem
from .envelope import (
    BUFFER_ENCODING,
    DirectoryEnvelope,
    DirectoryItem,
    Envelope,
    ErrorEnvelope,
    FileEnvelope,
    Metadata,
    StatsEnvelope,
    TypeMismatch,
)

LOG = logging.getLogger(__name__)

READFILE = "readfile"
READDIR = "readdir"
READDIR_DETAILED = "readdir-detailed"
STAT = "stat"


class ReadRouter:
    """Produce one envelope per GET request and render it as a response."""

    def __init__(
        self,
        resolve_path: Callable[[str], str],
        accessor: FilesystemAccessor | None = None,
        binary_encoding: str = BUFFER_ENCODING,
    ):
        self._resolve_path = resolve_path
        self._accessor = accessor if accessor is not None else LocalFilesystem()
        self._binary_encoding = binary_encoding

    def handle(self, request: Request) -> Response:
        """Serve a read request.

        A missing path yields 404 and any other stat failure 500, both
        with an empty body. Failures while reading after a successful
        stat are logged and yield an opaque 500.
        """
        try:
            http_path = request.path_info
            commands = request.GET.getall("command")
        except UnicodeDecodeError as exc:
            LOG.debug("undecodable request %r: %s", request.environ.get("PATH_INFO"), exc)
            return Response(status=404)
        command = ",".join(commands)
        path = self._resolve_path(http_path)
        LOG.debug("GET %s (command=%s) -> %s", http_path, command, path)
        try:
            st = self._accessor.stat(path)
        except FileNotFoundError:
            return Response(status=404)
        except (OSError, ValueError) as exc:
            LOG.error("stat failed for %s: %s", path, exc)
            return Response(status=500)

        try:
            envelope = self.build_envelope(path, st, command)
        except OSError as exc:
            LOG.exception("reading %s failed: %s", path, exc)
            return Response(status=500)
        return self.render(envelope)

    def build_envelope(
        self, path: str, st: os.stat_result, command: str | None
    ) -> Envelope:
        """Select the operation for command and run it against path."""
        if not command:
            envelope = self._read_if_file(path, st)
            if isinstance(envelope, TypeMismatch):
                envelope = self._read_if_dir(path, st)
            return envelope
        if command == READFILE:
            return self._read_if_file(path, st)
        if command == READDIR:
            return self._read_if_dir(path, st)
        if command == READDIR_DETAILED:
            return self._read_if_dir(path, st, detailed=True)
        if command == STAT:
            return self._stat_if_supported(st)
        return ErrorEnvelope(code=500, message=f"Unknown command {command}")

    def render(self, envelope: Envelope) -> Response:
        """Translate an envelope into a WebOb response."""
        match envelope:
            case TypeMismatch():
                return Response(status=500)
            case ErrorEnvelope(code=code, message=message):
                if message is None:
                    return Response(status=code)
                return Response(status=code, text=message, content_type="text/plain")
            case FileEnvelope() | DirectoryEnvelope() | StatsEnvelope():
                payload = envelope.model_dump(
                    mode="json",
                    by_alias=True,
                    context={"binary_encoding": self._binary_encoding},
                )
                return Response(json_body=payload)
            case _:
                raise TypeError(f"unsupported envelope {type(envelope).__name__}")

    def _read_if_file(self, path: str, st: os.stat_result) -> FileEnvelope | TypeMismatch:
        if not _stat.S_ISREG(st.st_mode):
            return TypeMismatch()
        return FileEnvelope(data=self._accessor.read_file(path))

    def _read_if_dir(
        self, path: str, st: os.stat_result, detailed: bool = False
    ) -> DirectoryEnvelope | TypeMismatch:
        if not _stat.S_ISDIR(st.st_mode):
            return TypeMismatch()
        if not detailed:
            return DirectoryEnvelope(items=list(self._accessor.read_directory(path)))
        items = [
            DirectoryItem(name=entry.name, dir=entry.is_dir)
            for entry in self._accessor.read_directory(path, detailed=True)
            if entry.is_file or entry.is_dir
        ]
        return DirectoryEnvelope(items=items)

    def _stat_if_supported(self, st: os.stat_result) -> StatsEnvelope | TypeMismatch:
        if not (_stat.S_ISREG(st.st_mode) or _stat.S_ISDIR(st.st_mode)):
            return TypeMismatch()
        return StatsEnvelope(stats=Metadata.from_stat_result(st))
