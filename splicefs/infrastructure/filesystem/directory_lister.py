"""Numbered file and directory listings"""
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, List, Optional

from splicefs.core.config import Settings, get_settings
from splicefs.core.exceptions import DirectoryOpenError, InvalidIndexError
from splicefs.core.types import DirectoryEntry, EntryKind, FileInfo
from splicefs.infrastructure.console import ProgressReporter
from splicefs.infrastructure.filesystem.paths import (
    PathLike,
    join_entry,
    normalize_separators,
    split_name,
)
from splicefs.infrastructure.logging import get_logger

logger = get_logger(__name__)


def parse_extensions(extensions: Optional[str]) -> Optional[FrozenSet[str]]:
    """Turn ``"txt, Log,.md"`` into ``{"txt", "log", "md"}``.

    ``None``, an empty string and ``"*"`` select every file and give ``None``.
    """
    if extensions is None:
        return None
    cleaned = "".join(extensions.split())
    if not cleaned or cleaned == "*":
        return None
    return frozenset(
        item.lstrip(".").lower() for item in cleaned.split(",") if item.lstrip(".")
    )


@dataclass
class FileListing:
    """Result of :func:`readfiles` or :func:`readdirs`"""
    root_dir: str
    exists: bool
    recursive: bool
    extensions: Optional[FrozenSet[str]] = None
    entries: List[DirectoryEntry] = field(default_factory=list)

    @property
    def all_extensions(self) -> bool:
        return self.extensions is None

    def numfiles(self) -> int:
        return len(self.entries)

    def getfile(self, number: int) -> FileInfo:
        """
        Return entry ``number`` (1-based) with a fresh stat of its path

        Raises:
            InvalidIndexError: number is outside 1..numfiles()
        """
        total = self.numfiles()
        if number < 1 or number > total:
            raise InvalidIndexError(
                f"File '{number}' is invalid (must be between 1 and {total}, "
                f"reading '{self.root_dir}')",
                {"index": number, "count": total, "dir": self.root_dir},
            )
        entry = self.entries[number - 1]
        try:
            st = os.stat(entry.full_path)
            mode, size = st.st_mode, st.st_size
            atime, mtime, ctime = st.st_atime, st.st_mtime, st.st_ctime
        except OSError as e:
            logger.warning("listed_entry_unavailable", path=entry.full_path, error=str(e))
            mode = size = 0
            atime = mtime = ctime = 0.0

        return FileInfo(
            base_name=entry.base_name,
            extension=entry.extension,
            name=entry.name,
            directory=entry.directory,
            full_path=entry.full_path,
            level=entry.depth,
            kind=entry.kind,
            mode=mode,
            size=size,
            atime=atime,
            mtime=mtime,
            ctime=ctime,
        )

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DirectoryEntry]:
        return iter(self.entries)


class _Walker:
    """Depth-first traversal shared by readfiles and readdirs.

    When collecting files, each directory's own files are numbered before
    any subdirectory is entered. When collecting directories, each one is
    descended into right after it is recorded. Symlinks, unreadable entries
    and excluded names are skipped.
    """

    def __init__(
        self,
        listing: FileListing,
        collect_files: bool,
        settings: Settings,
        progress: ProgressReporter,
    ):
        self.listing = listing
        self.collect_files = collect_files
        self.excluded = set(settings.excluded_names)
        self.progress = progress

    def walk(self, directory: str, depth: int) -> None:
        try:
            with os.scandir(directory or ".") as it:
                dirents = list(it)
        except OSError as e:
            raise DirectoryOpenError(
                f"Error opening directory '{directory}': {e}",
                {"dir": directory},
            ) from e

        subdirs = []
        for dirent in dirents:
            subdir = self._visit(directory, dirent, depth)
            if subdir is None or not self.listing.recursive:
                continue
            if self.collect_files:
                subdirs.append(subdir)
            else:
                # Each directory is followed by its own subtree
                self.walk(subdir, depth + 1)

        for subdir in subdirs:
            self.walk(subdir, depth + 1)

    def _visit(self, directory: str, dirent: os.DirEntry, depth: int) -> Optional[str]:
        name = dirent.name
        if name.lower() in self.excluded:
            return None

        full_path = join_entry(directory, name)
        try:
            if dirent.is_symlink():
                return None
            is_dir = dirent.is_dir(follow_symlinks=False)
            is_file = dirent.is_file(follow_symlinks=False)
        except OSError:
            return None
        if not os.access(full_path, os.R_OK):
            return None

        base_name, extension = split_name(name)
        if is_dir:
            self.progress.visit(f"[{full_path}]")
            if not self.collect_files:
                self._record(base_name, extension, name, directory, full_path,
                             EntryKind.DIRECTORY, depth)
            return full_path

        if self.collect_files and is_file:
            extensions = self.listing.extensions
            if extensions is None or extension.lower() in extensions:
                entry = self._record(base_name, extension, name, directory, full_path,
                                     EntryKind.FILE, None)
                self.progress.visit(f"{entry.index}. {name}")
        return None

    def _record(self, base_name, extension, name, directory, full_path, kind, depth):
        entry = DirectoryEntry(
            base_name=base_name,
            extension=extension,
            name=name,
            directory=directory,
            full_path=full_path,
            kind=kind,
            depth=depth,
            index=len(self.listing.entries) + 1,
        )
        self.listing.entries.append(entry)
        return entry


def readfiles(
    directory: PathLike,
    extensions: Optional[str] = None,
    recursive: bool = False,
    verbose: bool = False,
    settings: Optional[Settings] = None,
) -> FileListing:
    """
    List files under ``directory`` whose extension is in ``extensions``

    Args:
        directory: Root of the listing; backslashes are read as slashes
        extensions: Comma separated extensions, or None/""/"*" for all files
        recursive: Descend into subdirectories
        verbose: Show transient progress on the console

    Returns:
        A listing numbered 1..n in visiting order. A missing root gives
        ``exists=False`` and no entries.

    Raises:
        DirectoryOpenError: A directory in the tree could not be opened
    """
    root = normalize_separators(directory)
    listing = FileListing(
        root_dir=root,
        exists=True,
        recursive=bool(recursive),
        extensions=parse_extensions(extensions),
    )
    if not os.path.exists(root):
        listing.exists = False
        logger.debug("directory_missing", dir=root)
        return listing

    with ProgressReporter(verbose) as progress:
        _Walker(listing, True, settings or get_settings(), progress).walk(root, 0)

    logger.debug(
        "files_listed",
        dir=root,
        recursive=listing.recursive,
        extensions=sorted(listing.extensions) if listing.extensions else "*",
        count=listing.numfiles(),
    )
    return listing


def readdirs(
    directory: PathLike,
    recursive: bool = False,
    verbose: bool = False,
    settings: Optional[Settings] = None,
) -> FileListing:
    """List the directories under ``directory``, each with its depth (0 for
    direct children). A missing root gives ``exists=False``."""
    root = normalize_separators(directory)
    listing = FileListing(root_dir=root, exists=True, recursive=bool(recursive))
    if not os.path.exists(root):
        listing.exists = False
        logger.debug("directory_missing", dir=root)
        return listing

    with ProgressReporter(verbose) as progress:
        _Walker(listing, False, settings or get_settings(), progress).walk(root, 0)

    logger.debug(
        "directories_listed",
        dir=root,
        recursive=listing.recursive,
        count=listing.numfiles(),
    )
    return listing
