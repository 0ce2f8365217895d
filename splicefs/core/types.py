"""Listing record types"""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class EntryKind(str, Enum):
    """What a listed path is"""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK_TO_FILE = "symlink_to_file"
    SYMLINK_TO_DIRECTORY = "symlink_to_directory"

    @property
    def is_directory(self) -> bool:
        return self in (EntryKind.DIRECTORY, EntryKind.SYMLINK_TO_DIRECTORY)

    @property
    def is_symlink(self) -> bool:
        return self in (EntryKind.SYMLINK_TO_FILE, EntryKind.SYMLINK_TO_DIRECTORY)


@dataclass(frozen=True)
class DirectoryEntry:
    """One record produced by a directory traversal"""
    base_name: str
    extension: str
    name: str
    directory: str
    full_path: str
    kind: EntryKind
    depth: Optional[int] = None
    index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


@dataclass(frozen=True)
class FileInfo:
    """Entry details combined with a fresh stat"""
    base_name: str
    extension: str
    name: str
    directory: str
    full_path: str
    level: Optional[int]
    kind: EntryKind
    mode: int
    size: int
    atime: float
    mtime: float
    ctime: float

    @property
    def is_directory(self) -> bool:
        return self.kind.is_directory

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        data["is_directory"] = self.is_directory
        return data
