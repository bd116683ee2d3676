# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0
"""Pydantic models for the read API response envelope.

Every read request produces exactly one envelope. ``FileEnvelope``,
``DirectoryEnvelope`` and ``StatsEnvelope`` are returned to the client
as JSON with a 200 status. ``ErrorEnvelope`` carries its own status
code and an optional plain-text message. ``TypeMismatch`` stands for a
path that exists but does not fit the requested command.
"""
import base64
import os
import stat as _stat
from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SerializationInfo, field_serializer

BUFFER_ENCODING = "buffer"
BASE64_ENCODING = "base64"
BINARY_ENCODINGS = (BUFFER_ENCODING, BASE64_ENCODING)


class FileEnvelope(BaseModel):
    """Contents of a regular file."""

    type: Literal["file"] = "file"
    data: bytes

    @field_serializer("data")
    def serialize_data(self, data: bytes, info: SerializationInfo):
        """Encode the payload as a Buffer object or as base64 text.

        The encoding is taken from the ``binary_encoding`` key of the
        serialization context and defaults to the Buffer form.
        """
        context = info.context or {}
        encoding = context.get("binary_encoding", BUFFER_ENCODING)
        if encoding == BASE64_ENCODING:
            return {"type": "base64", "data": base64.b64encode(data).decode("ascii")}
        return {"type": "Buffer", "data": list(data)}


class DirectoryItem(BaseModel):
    """One entry of a detailed directory listing."""

    name: str
    dir: bool


class DirectoryEnvelope(BaseModel):
    """Directory listing, either bare names or detailed items."""

    type: Literal["dir"] = "dir"
    items: Union[List[str], List[DirectoryItem]]


def _iso_timestamp(ns: int) -> str:
    moment = datetime.fromtimestamp(ns / 1e9, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Metadata(BaseModel):
    """Stat metadata of a file or directory."""

    model_config = ConfigDict(populate_by_name=True)

    dev: int
    ino: int
    mode: int
    nlink: int
    uid: int
    gid: int
    rdev: int = 0
    size: int
    blksize: int = 0
    blocks: int = 0
    atime_ms: float = Field(alias="atimeMs")
    mtime_ms: float = Field(alias="mtimeMs")
    ctime_ms: float = Field(alias="ctimeMs")
    birthtime_ms: float = Field(alias="birthtimeMs")
    atime: str
    mtime: str
    ctime: str
    birthtime: str
    dir: bool

    @classmethod
    def from_stat_result(cls, st: os.stat_result) -> "Metadata":
        """Build metadata from an ``os.stat_result``.

        Platforms without a birth time report the change time instead.
        """
        birthtime_ns = getattr(st, "st_birthtime_ns", None)
        if birthtime_ns is None:
            birthtime = getattr(st, "st_birthtime", None)
            birthtime_ns = int(birthtime * 1e9) if birthtime is not None else st.st_ctime_ns
        return cls(
            dev=st.st_dev,
            ino=st.st_ino,
            mode=st.st_mode,
            nlink=st.st_nlink,
            uid=st.st_uid,
            gid=st.st_gid,
            rdev=getattr(st, "st_rdev", 0),
            size=st.st_size,
            blksize=getattr(st, "st_blksize", 0),
            blocks=getattr(st, "st_blocks", 0),
            atime_ms=st.st_atime_ns / 1e6,
            mtime_ms=st.st_mtime_ns / 1e6,
            ctime_ms=st.st_ctime_ns / 1e6,
            birthtime_ms=birthtime_ns / 1e6,
            atime=_iso_timestamp(st.st_atime_ns),
            mtime=_iso_timestamp(st.st_mtime_ns),
            ctime=_iso_timestamp(st.st_ctime_ns),
            birthtime=_iso_timestamp(birthtime_ns),
            dir=_stat.S_ISDIR(st.st_mode),
        )


class StatsEnvelope(BaseModel):
    """Metadata of a file or directory."""

    type: Literal["stats"] = "stats"
    stats: Metadata


class ErrorEnvelope(BaseModel):
    """Request failure with an explicit status code."""

    type: Literal["error"] = "error"
    code: int
    message: Optional[str] = None


class TypeMismatch(BaseModel):
    """The path exists but is not of the type the command expects."""

    type: Literal["type-mismatch"] = "type-mismatch"


Envelope = Annotated[
    Union[FileEnvelope, DirectoryEnvelope, StatsEnvelope, ErrorEnvelope, TypeMismatch],
    Field(discriminator="type"),
]
