# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0

import pytest

from devfs.fileserver.server import CONF


@pytest.fixture(autouse=True)
def reset_conf():
    """Drop config overrides and parsed arguments between tests."""
    yield
    CONF.reset()


@pytest.fixture
def root(tmp_path):
    """A served root holding a.txt and an empty sub directory."""
    (tmp_path / "a.txt").write_bytes(b"hello\x00world")
    (tmp_path / "sub").mkdir()
    CONF.set_override("root_dir", str(tmp_path), group="fileserver")
    return tmp_path
