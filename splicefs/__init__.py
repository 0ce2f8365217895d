"""File handles with byte splicing, advisory locking and directory listings."""

__version__ = "0.1.0"

from splicefs.core.exceptions import (
    ClosedError,
    DirectoryOpenError,
    EmptyWriteError,
    InvalidIndexError,
    InvalidTargetError,
    IOFailureError,
    NotFoundError,
    NotLockedError,
    NotReadableError,
    NotWritableError,
    OutOfRangeError,
    SplicefsError,
)
from splicefs.core.types import DirectoryEntry, EntryKind, FileInfo
from splicefs.infrastructure.filesystem import (
    APPEND,
    DirectoryTreeListing,
    FileHandle,
    FileListing,
    FileSession,
    HandleRegistry,
    append,
    changeowner,
    content,
    copy,
    create,
    dirlist,
    makedir,
    newfile,
    open_file,
    readdirs,
    readfiles,
)

__all__ = [
    "APPEND",
    "ClosedError",
    "DirectoryEntry",
    "DirectoryOpenError",
    "DirectoryTreeListing",
    "EmptyWriteError",
    "EntryKind",
    "FileHandle",
    "FileInfo",
    "FileListing",
    "FileSession",
    "HandleRegistry",
    "IOFailureError",
    "InvalidIndexError",
    "InvalidTargetError",
    "NotFoundError",
    "NotLockedError",
    "NotReadableError",
    "NotWritableError",
    "OutOfRangeError",
    "SplicefsError",
    "append",
    "changeowner",
    "content",
    "copy",
    "create",
    "dirlist",
    "makedir",
    "newfile",
    "open_file",
    "readdirs",
    "readfiles",
]
