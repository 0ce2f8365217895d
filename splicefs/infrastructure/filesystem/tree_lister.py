"""Directory tree listing split into directories and files"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from splicefs.core.exceptions import DirectoryOpenError
from splicefs.core.types import DirectoryEntry, EntryKind
from splicefs.infrastructure.filesystem.paths import (
    PathLike,
    join_entry,
    normalize_separators,
    split_name,
)
from splicefs.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DirectoryTreeListing:
    """Result of :func:`dirlist`"""
    root_dir: str
    exists: bool
    recursive: bool
    dirs: List[DirectoryEntry] = field(default_factory=list)
    files: List[DirectoryEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "dir": self.root_dir,
            "exists": self.exists,
            "recursive": self.recursive,
            "dirs": [entry.to_dict() for entry in self.dirs],
            "files": [entry.to_dict() for entry in self.files],
        }


def _classify(dirent: os.DirEntry) -> Optional[EntryKind]:
    try:
        if dirent.is_symlink():
            # Resolve the target to decide the kind; dangling links give None
            if dirent.is_dir():
                return EntryKind.SYMLINK_TO_DIRECTORY
            if dirent.is_file():
                return EntryKind.SYMLINK_TO_FILE
            return None
        if dirent.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if dirent.is_file(follow_symlinks=False):
            return EntryKind.FILE
    except OSError:
        return None
    return None


def _walk(listing: DirectoryTreeListing, directory: str, depth: int) -> None:
    try:
        with os.scandir(directory) as it:
            dirents = list(it)
    except OSError as e:
        raise DirectoryOpenError(
            f"Error opening directory '{directory}': {e}",
            {"dir": directory},
        ) from e

    for dirent in dirents:
        kind = _classify(dirent)
        if kind is None:
            continue

        name = dirent.name
        base_name, extension = split_name(name)
        full_path = join_entry(directory, name)
        target = listing.dirs if kind.is_directory else listing.files
        target.append(
            DirectoryEntry(
                base_name=base_name,
                extension=extension,
                name=name,
                directory=directory,
                full_path=full_path,
                kind=kind,
                depth=depth if kind.is_directory else None,
                index=len(target) + 1,
            )
        )
        # Pre-order: a directory's subtree directly follows it in ``dirs``
        if listing.recursive and kind is EntryKind.DIRECTORY:
            _walk(listing, full_path, depth + 1)


def dirlist(directory: PathLike, recursive: bool = False) -> DirectoryTreeListing:
    """
    List directories and files under ``directory`` in two sequences

    Symbolic links are listed as ``symlink_to_directory`` (with ``dirs``) or
    ``symlink_to_file`` (with ``files``) and never followed. A missing root
    gives ``exists=False`` with both sequences empty.

    Raises:
        DirectoryOpenError: A directory in the tree could not be opened
    """
    root = normalize_separators(directory)
    listing = DirectoryTreeListing(root_dir=root, exists=True, recursive=bool(recursive))
    if not os.path.exists(root):
        listing.exists = False
        logger.debug("directory_missing", dir=root)
        return listing

    _walk(listing, root, 0)
    logger.debug(
        "tree_listed",
        dir=root,
        recursive=listing.recursive,
        dirs=len(listing.dirs),
        files=len(listing.files),
    )
    return listing
