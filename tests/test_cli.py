"""Tests for the splicefs command line"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from splicefs import __version__
from splicefs.cli.main import app
from splicefs.core.config import Settings
from splicefs.infrastructure.logging import setup_logging

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """Point the log handler back at the real stderr after each invocation"""
    yield
    setup_logging(Settings(_env_file=None))


def _json(result) -> object:
    return json.loads(result.stdout)


class TestGlobalOptions:
    """Test options shared by every command"""

    def test_version(self):
        """Test --version prints the version and exits cleanly"""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"splicefs v{__version__}" in result.stdout

    def test_help_lists_commands(self):
        """Test that help mentions the commands"""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("files", "info", "dirs", "tree", "cat", "copy", "mkdir"):
            assert command in result.stdout


class TestListingCommands:
    """Test files, info, dirs and tree"""

    def test_files_json(self, listing_tree: Path):
        """Test a recursive filtered listing as JSON"""
        result = runner.invoke(app, ["-o", "json", "files", str(listing_tree), "--ext", "txt", "-r"])
        assert result.exit_code == 0
        items = _json(result)
        assert [item["name"] for item in items] == ["a.txt", "c.txt", "d.TXT"]
        assert [item["index"] for item in items] == [1, 2, 3]

    def test_files_table(self, listing_tree: Path):
        """Test that the table view shows the file names"""
        result = runner.invoke(app, ["files", str(listing_tree), "-e", "log"])
        assert result.exit_code == 0
        assert "b.log" in result.stdout

    def test_files_missing_directory(self, tmp_path: Path):
        """Test that a missing directory is a warning with exit code 1"""
        result = runner.invoke(app, ["-o", "json", "files", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert _json(result)["status"] == "warning"

    def test_info(self, listing_tree: Path):
        """Test details of one listed file"""
        result = runner.invoke(app, ["-o", "json", "info", str(listing_tree), "1", "--ext", "txt"])
        assert result.exit_code == 0
        info = _json(result)
        assert info["name"] == "a.txt"
        assert info["size"] == 1
        assert info["kind"] == "file"

    def test_info_invalid_number(self, listing_tree: Path):
        """Test that a number outside the listing fails with its error code"""
        result = runner.invoke(app, ["-o", "json", "info", str(listing_tree), "9"])
        assert result.exit_code == 1
        error = _json(result)
        assert error["status"] == "error"
        assert error["code"] == "SPFS-422"

    def test_dirs_yaml(self, listing_tree: Path):
        """Test the directory listing as YAML"""
        result = runner.invoke(app, ["-o", "yaml", "dirs", str(listing_tree), "-r"])
        assert result.exit_code == 0
        assert "name: sub" in result.stdout
        assert "depth: 1" in result.stdout

    def test_tree_json(self, listing_tree: Path):
        """Test the two-sequence tree as JSON"""
        (listing_tree / "to_sub").symlink_to(listing_tree / "sub")
        result = runner.invoke(app, ["-o", "json", "tree", str(listing_tree)])
        assert result.exit_code == 0
        tree = _json(result)
        kinds = {item["name"]: item["kind"] for item in tree["dirs"]}
        assert kinds == {"sub": "directory", "to_sub": "symlink_to_directory"}
        assert {item["name"] for item in tree["files"]} == {"a.txt", "b.log"}


class TestFileCommands:
    """Test cat, copy and mkdir"""

    def test_cat_whole_file(self, sample_file: Path):
        """Test printing a whole file"""
        result = runner.invoke(app, ["cat", str(sample_file)])
        assert result.exit_code == 0
        assert result.stdout_bytes == b"0123456789"

    def test_cat_range(self, sample_file: Path):
        """Test printing a byte range"""
        result = runner.invoke(app, ["cat", str(sample_file), "--offset", "3", "-n", "4"])
        assert result.exit_code == 0
        assert result.stdout_bytes == b"3456"

    def test_cat_out_of_range(self, sample_file: Path):
        """Test that a range past the end fails"""
        result = runner.invoke(app, ["-o", "json", "cat", str(sample_file), "--offset", "8", "-n", "5"])
        assert result.exit_code == 1
        assert _json(result)["code"] == "SPFS-416"

    def test_copy(self, sample_file: Path, tmp_path: Path):
        """Test copying a file"""
        destination = tmp_path / "copied.bin"
        result = runner.invoke(app, ["copy", str(sample_file), str(destination)])
        assert result.exit_code == 0
        assert destination.read_bytes() == b"0123456789"

    def test_copy_no_overwrite(self, sample_file: Path, tmp_path: Path):
        """Test that --no-overwrite keeps the destination"""
        destination = tmp_path / "kept.bin"
        destination.write_bytes(b"keep")
        result = runner.invoke(app, ["-o", "json", "copy", "-n", str(sample_file), str(destination)])
        assert result.exit_code == 0
        assert _json(result)["status"] == "warning"
        assert destination.read_bytes() == b"keep"

    def test_copy_missing_source(self, tmp_path: Path):
        """Test that a missing source fails with its error code"""
        result = runner.invoke(app, ["-o", "json", "copy", str(tmp_path / "nope"), str(tmp_path / "x")])
        assert result.exit_code == 1
        assert _json(result)["code"] == "SPFS-404"

    def test_mkdir_with_mode(self, tmp_path: Path):
        """Test creating a directory chain with explicit permissions"""
        target = tmp_path / "m" / "n"
        result = runner.invoke(app, ["mkdir", str(target), "--mode", "750"])
        assert result.exit_code == 0
        assert target.is_dir()

    def test_mkdir_invalid_mode(self, tmp_path: Path):
        """Test that a non-octal mode is rejected"""
        result = runner.invoke(app, ["mkdir", str(tmp_path / "z"), "-m", "9x"])
        assert result.exit_code == 1
        assert not (tmp_path / "z").exists()
