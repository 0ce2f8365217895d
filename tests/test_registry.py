"""Tests for the open handle registry"""

from pathlib import Path

from splicefs.infrastructure.filesystem import FileHandle, HandleRegistry


class TestHandleRegistry:
    """Test registration by path"""

    def test_open_registers_and_close_unregisters(self, sample_file: Path, registry: HandleRegistry):
        """Test the registry follows the handle lifecycle"""
        handle = FileHandle.open(sample_file, "r", registry=registry)
        assert registry.get(str(sample_file)) is handle
        assert len(registry) == 1
        handle.close()
        assert len(registry) == 0

    def test_last_open_wins(self, sample_file: Path, registry: HandleRegistry):
        """Test that reopening a path replaces the entry without closing the first handle"""
        first = FileHandle.open(sample_file, "r", registry=registry)
        second = FileHandle.open(sample_file, "rw", registry=registry)
        assert registry.get(str(sample_file)) is second
        assert first.is_open

        first.close()
        assert registry.get(str(sample_file)) is second
        second.close()
        assert str(sample_file) not in registry

    def test_close_all(self, tmp_path: Path, registry: HandleRegistry):
        """Test that close_all closes every tracked handle"""
        handles = [
            FileHandle.open(tmp_path / f"f{number}", "w", registry=registry)
            for number in range(3)
        ]
        assert sorted(registry.paths()) == sorted(handle.path for handle in handles)
        assert registry.close_all() == 3
        assert all(not handle.is_open for handle in handles)
        assert len(registry) == 0
        assert registry.close_all() == 0

    def test_untracked_handle(self, sample_file: Path, registry: HandleRegistry):
        """Test that handles opened without a registry are not tracked"""
        with FileHandle.open(sample_file):
            assert len(registry) == 0
            assert list(registry) == []
