"""Path helpers shared by handles and listings."""
import os
from typing import Optional, Tuple, Union

from splicefs.core.exceptions import IOFailureError

PathLike = Union[str, "os.PathLike[str]"]


def normalize_separators(path: PathLike) -> str:
    """Return ``path`` as a string with backslashes turned into slashes"""
    return os.fspath(path).replace("\\", "/")


def split_name(name: str) -> Tuple[str, str]:
    """Split a file name into (base name, extension) on the last dot.

    A name without a dot has an empty extension and keeps the whole name as
    base name. ``.profile`` splits into ``("", "profile")``.
    """
    if "." not in name:
        return name, ""
    base, _, extension = name.rpartition(".")
    return base, extension


def join_entry(directory: str, name: str) -> str:
    """Join a listing directory and an entry name with a single slash"""
    if not directory or directory.endswith("/"):
        return directory + name
    return f"{directory}/{name}"


def parent_segments(path: PathLike) -> list:
    """Cumulative parent directory prefixes of ``path``, shortest first.

    ``a/b/c.txt`` gives ``["a", "a/b"]``; ``/x/y`` gives ``["/x"]``.
    """
    parts = normalize_separators(path).split("/")[:-1]
    prefixes = []
    current = ""
    for part in parts:
        current += part
        if current and current not in (".", ".."):
            prefixes.append(current)
        current += "/"
    return prefixes


def create_directory_chain(path: PathLike, mode: int, include_last: bool = True) -> list:
    """Create every missing directory leading to ``path``.

    With ``include_last`` the final segment is a directory to create too,
    otherwise it is a file name and only its parents are made. Segments equal
    to ``.`` or ``..`` are skipped. Returns the directories actually created.
    """
    target = normalize_separators(path)
    if include_last:
        target = target.rstrip("/") + "/"

    created = []
    for segment in parent_segments(target):
        if os.path.lexists(segment):
            continue
        try:
            os.mkdir(segment, mode)
        except FileExistsError:
            continue
        except OSError as e:
            raise IOFailureError(
                f"Failed to create directory '{segment}': {e}",
                {"path": segment},
            ) from e
        created.append(segment)
    return created


def is_regular_file(path: PathLike) -> bool:
    """True for a regular file that is not reached through a symlink"""
    return not os.path.islink(path) and os.path.isfile(path)


def describe_non_regular(path: PathLike) -> Optional[str]:
    """Name the kind of an existing non-regular path, or None"""
    if os.path.islink(path):
        return "symlink"
    if os.path.isdir(path):
        return "directory"
    if os.path.lexists(path) and not os.path.isfile(path):
        return "special file"
    return None
