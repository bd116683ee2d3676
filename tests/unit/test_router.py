# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0

import json
import stat
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from webob import Request

from devfs.fileserver.accessor import DirectoryEntry
from devfs.fileserver.envelope import ErrorEnvelope, TypeMismatch
from devfs.fileserver.router import ReadRouter

FILE_STAT = SimpleNamespace(st_mode=stat.S_IFREG | 0o644)
DIR_STAT = SimpleNamespace(st_mode=stat.S_IFDIR | 0o755)
SOCKET_STAT = SimpleNamespace(st_mode=stat.S_IFSOCK | 0o644)


@pytest.fixture
def accessor():
    """Create a mock filesystem accessor."""
    return MagicMock()


@pytest.fixture
def router(accessor):
    return ReadRouter(lambda path: "/srv" + path, accessor=accessor)


def _get(router: ReadRouter, path: str, command: str | None = None):
    full_path = f"{path}?command={command}" if command is not None else path
    return router.handle(Request.blank(full_path))


class TestReadRouter:
    """Tests for ReadRouter with a stubbed filesystem."""

    def test_resolves_path_before_stat(self, router, accessor):
        accessor.stat.return_value = FILE_STAT
        accessor.read_file.return_value = b"abc"
        _get(router, "/dir/file.txt")
        accessor.stat.assert_called_once_with("/srv/dir/file.txt")
        accessor.read_file.assert_called_once_with("/srv/dir/file.txt")

    def test_not_found(self, router, accessor):
        accessor.stat.side_effect = FileNotFoundError("gone")
        resp = _get(router, "/x", "stat")
        assert resp.status_int == 404
        assert resp.body == b""

    def test_stat_failure_is_opaque_500(self, router, accessor):
        accessor.stat.side_effect = PermissionError("denied")
        resp = _get(router, "/x", "readfile")
        assert resp.status_int == 500
        assert resp.body == b""
        accessor.read_file.assert_not_called()

    def test_invalid_path_for_stat_is_opaque_500(self, router, accessor):
        accessor.stat.side_effect = ValueError("embedded null byte")
        resp = _get(router, "/a%00b", "stat")
        assert resp.status_int == 500
        assert resp.body == b""

    def test_undecodable_path_is_404(self, router, accessor):
        resp = _get(router, "/%ff", "stat")
        assert resp.status_int == 404
        assert resp.body == b""
        accessor.stat.assert_not_called()

    def test_repeated_command_values_are_joined(self, router, accessor):
        accessor.stat.return_value = FILE_STAT
        resp = router.handle(Request.blank("/x?command=readfile&command=stat"))
        assert resp.status_int == 500
        assert resp.text == "Unknown command readfile,stat"
        accessor.read_file.assert_not_called()

    def test_read_failure_after_stat_is_opaque_500(self, router, accessor):
        accessor.stat.return_value = FILE_STAT
        accessor.read_file.side_effect = FileNotFoundError("removed meanwhile")
        resp = _get(router, "/x", "readfile")
        assert resp.status_int == 500
        assert resp.body == b""

    def test_list_failure_after_stat_is_opaque_500(self, router, accessor):
        accessor.stat.return_value = DIR_STAT
        accessor.read_directory.side_effect = PermissionError("denied")
        assert _get(router, "/x", "readdir").status_int == 500

    def test_readfile(self, router, accessor):
        accessor.stat.return_value = FILE_STAT
        accessor.read_file.return_value = b"\x01\x02"
        resp = _get(router, "/x", "readfile")
        assert resp.status_int == 200
        assert json.loads(resp.text) == {
            "type": "file",
            "data": {"type": "Buffer", "data": [1, 2]},
        }

    def test_readfile_on_directory_does_not_read(self, router, accessor):
        accessor.stat.return_value = DIR_STAT
        resp = _get(router, "/x", "readfile")
        assert resp.status_int == 500
        accessor.read_file.assert_not_called()

    def test_readdir_keeps_listing_order(self, router, accessor):
        accessor.stat.return_value = DIR_STAT
        accessor.read_directory.return_value = ["sub", "a.txt"]
        resp = _get(router, "/x", "readdir")
        assert json.loads(resp.text) == {"type": "dir", "items": ["sub", "a.txt"]}
        accessor.read_directory.assert_called_once_with("/srv/x")

    def test_readdir_detailed_filters_other_kinds(self, router, accessor):
        accessor.stat.return_value = DIR_STAT
        accessor.read_directory.return_value = [
            DirectoryEntry(name="a.txt", is_file=True, is_dir=False),
            DirectoryEntry(name="link", is_file=False, is_dir=False),
            DirectoryEntry(name="sub", is_file=False, is_dir=True),
        ]
        resp = _get(router, "/x", "readdir-detailed")
        assert resp.status_int == 200
        assert json.loads(resp.text)["items"] == [
            {"name": "a.txt", "dir": False},
            {"name": "sub", "dir": True},
        ]
        accessor.read_directory.assert_called_once_with("/srv/x", detailed=True)

    def test_readdir_on_file_is_500(self, router, accessor):
        accessor.stat.return_value = FILE_STAT
        assert _get(router, "/x", "readdir-detailed").status_int == 500
        accessor.read_directory.assert_not_called()

    def test_stat_on_socket_is_500(self, router, accessor):
        accessor.stat.return_value = SOCKET_STAT
        resp = _get(router, "/x", "stat")
        assert resp.status_int == 500
        assert resp.body == b""

    def test_no_command_on_socket_is_500(self, router, accessor):
        accessor.stat.return_value = SOCKET_STAT
        assert _get(router, "/x").status_int == 500
        accessor.read_file.assert_not_called()
        accessor.read_directory.assert_not_called()

    def test_no_command_prefers_file(self, router, accessor):
        accessor.stat.return_value = FILE_STAT
        accessor.read_file.return_value = b"f"
        assert json.loads(_get(router, "/x").text)["type"] == "file"
        accessor.read_directory.assert_not_called()

    def test_no_command_falls_back_to_directory(self, router, accessor):
        accessor.stat.return_value = DIR_STAT
        accessor.read_directory.return_value = ["a"]
        assert json.loads(_get(router, "/x").text) == {"type": "dir", "items": ["a"]}

    def test_unknown_command(self, router, accessor):
        accessor.stat.return_value = FILE_STAT
        resp = _get(router, "/x", "bogus")
        assert resp.status_int == 500
        assert resp.text == "Unknown command bogus"

    def test_base64_encoding(self, accessor):
        router = ReadRouter(lambda path: path, accessor=accessor, binary_encoding="base64")
        accessor.stat.return_value = FILE_STAT
        accessor.read_file.return_value = b"hi"
        payload = json.loads(_get(router, "/x", "readfile").text)
        assert payload["data"] == {"type": "base64", "data": "aGk="}


class TestRender:
    """Tests for envelope to response translation."""

    def test_type_mismatch(self, router):
        resp = router.render(TypeMismatch())
        assert resp.status_int == 500
        assert resp.body == b""

    def test_error_uses_code_and_message(self, router):
        resp = router.render(ErrorEnvelope(code=418, message="teapot"))
        assert resp.status_int == 418
        assert resp.text == "teapot"

    def test_error_without_message(self, router):
        resp = router.render(ErrorEnvelope(code=503))
        assert resp.status_int == 503
        assert resp.body == b""

    def test_unknown_envelope_raises(self, router):
        with pytest.raises(TypeError):
            router.render(object())
