"""One-shot file operations built on FileHandle"""
import os
import sys
from typing import Optional

from splicefs.core.config import Settings, get_settings
from splicefs.core.exceptions import (
    InvalidTargetError,
    IOFailureError,
    NotFoundError,
    OutOfRangeError,
)
from splicefs.infrastructure.filesystem.directory_lister import (
    FileListing,
    readdirs,
    readfiles,
)
from splicefs.infrastructure.filesystem.file_handle import Data, FileHandle
from splicefs.infrastructure.filesystem.paths import (
    PathLike,
    create_directory_chain,
    is_regular_file,
)
from splicefs.infrastructure.filesystem.registry import HandleRegistry
from splicefs.infrastructure.filesystem.tree_lister import DirectoryTreeListing, dirlist
from splicefs.infrastructure.logging import get_logger

logger = get_logger(__name__)


def _require_regular_file(path: str, operation: str) -> None:
    if not os.path.lexists(path):
        raise NotFoundError(f"{operation}: File '{path}' does not exist", {"path": path})
    if not is_regular_file(path):
        raise InvalidTargetError(
            f"{operation}: '{path}' is not a plain file", {"path": path}
        )


def _remove_existing(path: str) -> None:
    if is_regular_file(path):
        try:
            os.unlink(path)
        except OSError as e:
            raise IOFailureError(f"Cannot remove '{path}': {e}", {"path": path}) from e


def create(
    path: PathLike,
    content: Optional[Data] = None,
    skip_empty: bool = False,
    mode: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> bool:
    """
    Create ``path`` holding ``content``, replacing an existing regular file

    Args:
        path: File to create; missing parent directories are made
        content: Initial bytes (str is written as UTF-8)
        skip_empty: Do nothing when content is None or empty
        mode: Permission bits applied after writing

    Returns:
        False when skipped because of ``skip_empty``, else True
    """
    path = os.fspath(path)
    if skip_empty and not content:
        return False

    _remove_existing(path)
    with FileHandle.open(path, "w", settings=settings) as handle:
        if content:
            handle.write(content)

    if mode:
        try:
            os.chmod(path, mode)
        except OSError as e:
            raise IOFailureError(f"Cannot chmod '{path}': {e}", {"path": path}) from e

    logger.debug("file_created", path=path, size=handle.filesize())
    return True


def newfile(
    path: PathLike,
    content: Optional[Data] = None,
    write_only: bool = False,
    registry: Optional[HandleRegistry] = None,
    settings: Optional[Settings] = None,
) -> FileHandle:
    """Open ``path`` for writing (and reading unless ``write_only``), write
    ``content`` at the start and return the still open handle."""
    handle = FileHandle.open(
        path, "w" if write_only else "rw", registry=registry, settings=settings
    )
    if content:
        handle.write(content)
    return handle


def content(
    path: PathLike,
    offset: int = 0,
    length: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> bytes:
    """
    Return ``length`` bytes of ``path`` from ``offset`` (default: to the end)

    Raises:
        NotFoundError: path does not exist
        InvalidTargetError: path is not a plain file
        OutOfRangeError: the slice reaches outside the file
    """
    path = os.fspath(path)
    _require_regular_file(path, "Content")

    with FileHandle.open(path, "r", settings=settings) as handle:
        size = handle.filesize()
        if length is None:
            length = size - offset
        if offset < 0 or offset > size:
            raise OutOfRangeError(
                f"Content: Read beyond boundaries of '{path}', offset={offset}, size={size}",
                {"path": path, "offset": offset, "size": size},
            )
        if length < 0 or offset + length > size:
            raise OutOfRangeError(
                f"Content: Read beyond boundaries of '{path}', offset={offset}, "
                f"reading {length} bytes, size={size}",
                {"path": path, "offset": offset, "length": length, "size": size},
            )
        handle.seek(offset)
        return handle.read(length)


def append(path: PathLike, data: Optional[Data], settings: Optional[Settings] = None) -> int:
    """Append ``data`` to an existing file; returns the bytes written"""
    path = os.fspath(path)
    if not os.path.lexists(path):
        raise NotFoundError(f"Append: File '{path}' does not exist", {"path": path})
    with FileHandle.open(path, "a", settings=settings) as handle:
        return handle.write(data)


def copy(
    source: PathLike,
    destination: PathLike,
    no_overwrite: bool = False,
    settings: Optional[Settings] = None,
) -> bool:
    """
    Copy ``source`` to ``destination`` in ``copy_buffer_size`` chunks

    Returns:
        False when ``no_overwrite`` is set and the destination exists (it is
        left untouched), True after copying

    Raises:
        NotFoundError: source does not exist
        InvalidTargetError: source is not a plain file, the destination is a
            symbolic link (dangling or not), or both name the same file
    """
    source = os.fspath(source)
    destination = os.fspath(destination)
    settings = settings or get_settings()
    _require_regular_file(source, "Copy")
    if no_overwrite and os.path.lexists(destination):
        logger.debug("copy_skipped", source=source, destination=destination)
        return False

    if os.path.islink(destination):
        raise InvalidTargetError(
            f"Copy: destination '{destination}' is a symbolic link",
            {"source": source, "destination": destination},
        )
    try:
        same_file = os.path.exists(destination) and os.path.samefile(source, destination)
    except OSError as e:
        raise IOFailureError(
            f"Copy: cannot compare '{source}' and '{destination}': {e}",
            {"source": source, "destination": destination},
        ) from e
    if same_file:
        raise InvalidTargetError(
            f"Copy: '{source}' and '{destination}' are the same file",
            {"source": source, "destination": destination},
        )

    _remove_existing(destination)
    with FileHandle.open(source, "r", settings=settings) as src:
        with FileHandle.open(destination, "w", settings=settings) as dst:
            remaining = src.filesize()
            while remaining:
                block = src.read(min(settings.copy_buffer_size, remaining))
                dst.write(block)
                remaining -= len(block)

    logger.debug("file_copied", source=source, destination=destination, size=src.filesize())
    return True


def makedir(path: PathLike, mode: Optional[int] = None, settings: Optional[Settings] = None) -> list:
    """Create ``path`` and any missing parents (default mode 0o700)"""
    if not path:
        return []
    settings = settings or get_settings()
    created = create_directory_chain(path, mode or settings.default_dir_mode)
    if created:
        logger.debug("directories_created", path=os.fspath(path), created=created)
    return created


def changeowner(path: PathLike, user: str, group: str) -> bool:
    """chown ``path`` to the named user and group.

    Does nothing on Windows or when either name is unknown; returns whether
    ownership was changed.
    """
    if sys.platform.startswith("win"):
        return False

    import grp
    import pwd

    try:
        uid = pwd.getpwnam(user).pw_uid
        gid = grp.getgrnam(group).gr_gid
    except KeyError:
        logger.warning("owner_unknown", path=os.fspath(path), user=user, group=group)
        return False

    try:
        os.chown(path, uid, gid)
    except OSError as e:
        raise IOFailureError(f"Cannot change owner of '{path}': {e}", {"path": os.fspath(path)}) from e
    return True


class FileSession:
    """Owns a handle registry so every handle opened through it can be
    closed at once, e.g. at the end of a ``with`` block."""

    def __init__(self, settings: Optional[Settings] = None, registry: Optional[HandleRegistry] = None):
        self.settings = settings or get_settings()
        self.registry = registry if registry is not None else HandleRegistry()

    def open(self, path: PathLike, mode: Optional[str] = "r") -> FileHandle:
        return FileHandle.open(path, mode, registry=self.registry, settings=self.settings)

    def newfile(self, path: PathLike, content: Optional[Data] = None, write_only: bool = False) -> FileHandle:
        return newfile(path, content, write_only, registry=self.registry, settings=self.settings)

    def create(self, path: PathLike, content: Optional[Data] = None, skip_empty: bool = False,
               mode: Optional[int] = None) -> bool:
        return create(path, content, skip_empty, mode, settings=self.settings)

    def content(self, path: PathLike, offset: int = 0, length: Optional[int] = None) -> bytes:
        return content(path, offset, length, settings=self.settings)

    def append(self, path: PathLike, data: Optional[Data]) -> int:
        return append(path, data, settings=self.settings)

    def copy(self, source: PathLike, destination: PathLike, no_overwrite: bool = False) -> bool:
        return copy(source, destination, no_overwrite, settings=self.settings)

    def makedir(self, path: PathLike, mode: Optional[int] = None) -> list:
        return makedir(path, mode, settings=self.settings)

    def readfiles(self, directory: PathLike, extensions: Optional[str] = None,
                  recursive: bool = False, verbose: bool = False) -> FileListing:
        return readfiles(directory, extensions, recursive, verbose, settings=self.settings)

    def readdirs(self, directory: PathLike, recursive: bool = False, verbose: bool = False) -> FileListing:
        return readdirs(directory, recursive, verbose, settings=self.settings)

    def dirlist(self, directory: PathLike, recursive: bool = False) -> DirectoryTreeListing:
        return dirlist(directory, recursive)

    def close_all(self) -> int:
        return self.registry.close_all()

    def __enter__(self) -> "FileSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_all()
