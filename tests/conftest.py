"""Pytest configuration and fixtures"""

import os
from pathlib import Path
from typing import Generator

import pytest

from splicefs.core.config import Settings, reset_settings
from splicefs.infrastructure.filesystem import FileHandle, HandleRegistry


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch) -> Generator[Settings, None, None]:
    """Start every test from default settings, unaffected by the environment"""
    for key in list(os.environ):
        if key.upper().startswith("SPLICEFS_"):
            monkeypatch.delenv(key)
    settings = reset_settings(Settings(_env_file=None))
    yield settings
    reset_settings(Settings(_env_file=None))


@pytest.fixture
def small_chunk_settings() -> Settings:
    """Settings that force chunked tail shifting for anything above 4 bytes"""
    return Settings(_env_file=None, splice_buffer_limit=4, splice_chunk_size=3, copy_buffer_size=5)


@pytest.fixture
def registry() -> HandleRegistry:
    """Create a fresh handle registry"""
    return HandleRegistry()


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """A 10 byte file containing the digits 0-9"""
    path = tmp_path / "sample.bin"
    path.write_bytes(b"0123456789")
    return path


@pytest.fixture
def rw_handle(sample_file: Path) -> Generator[FileHandle, None, None]:
    """Read/write handle on the sample file"""
    handle = FileHandle.open(sample_file, "rw")
    yield handle
    handle.close()


@pytest.fixture
def listing_tree(tmp_path: Path) -> Path:
    """
    Directory tree used by the listing tests:

        root/a.txt
        root/b.log
        root/sub/c.txt
        root/sub/deeper/d.TXT
    """
    root = tmp_path / "root"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("a")
    (root / "b.log").write_text("bb")
    (root / "sub" / "c.txt").write_text("ccc")
    (root / "sub" / "deeper" / "d.TXT").write_text("dddd")
    return root
