"""Tests for the re-entrant advisory lock"""

import fcntl
from pathlib import Path

import pytest

from splicefs.core.exceptions import ClosedError, NotLockedError
from splicefs.infrastructure.filesystem import FileHandle


def _lock_is_held_elsewhere(path: Path) -> bool:
    """Try a non-blocking exclusive lock through a separate open file"""
    with open(path, "rb") as other:
        try:
            fcntl.flock(other.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return True
        fcntl.flock(other.fileno(), fcntl.LOCK_UN)
        return False


class TestAdvisoryLock:
    """Test lock depth counting and the OS lock"""

    def test_lock_depth_counts(self, rw_handle: FileHandle):
        """Test that lock and unlock move the depth by one"""
        assert rw_handle.locked() == 0
        assert rw_handle.lock() == 1
        assert rw_handle.lock() == 2
        assert rw_handle.locked() == 2
        assert rw_handle.unlock() == 1
        assert rw_handle.unlock() == 0

    def test_unlock_unlocked_fails(self, rw_handle: FileHandle):
        """Test that unlocking at depth zero raises and keeps depth at zero"""
        with pytest.raises(NotLockedError):
            rw_handle.unlock()
        assert rw_handle.locked() == 0

    def test_os_lock_held_while_depth_positive(self, rw_handle: FileHandle, sample_file: Path):
        """Test that the OS lock is held exactly while depth > 0"""
        assert not _lock_is_held_elsewhere(sample_file)

        rw_handle.lock()
        rw_handle.lock()
        assert _lock_is_held_elsewhere(sample_file)

        rw_handle.unlock()
        assert _lock_is_held_elsewhere(sample_file)

        rw_handle.unlock()
        assert not _lock_is_held_elsewhere(sample_file)

    def test_close_releases_os_lock(self, sample_file: Path):
        """Test that closing a locked handle frees the file for others"""
        handle = FileHandle.open(sample_file, "r")
        handle.lock()
        handle.close()
        assert not _lock_is_held_elsewhere(sample_file)

    def test_lock_closed_handle_fails(self, sample_file: Path):
        """Test that a closed handle cannot be locked"""
        handle = FileHandle.open(sample_file)
        handle.close()
        with pytest.raises(ClosedError):
            handle.lock()
        with pytest.raises(ClosedError):
            handle.unlock()
