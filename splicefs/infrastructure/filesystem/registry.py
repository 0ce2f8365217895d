from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from splicefs.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from splicefs.infrastructure.filesystem.file_handle import FileHandle

logger = get_logger(__name__)


class HandleRegistry:
    """Tracks open file handles by path so they can be closed in bulk.

    Opening a path that is already registered replaces the entry without
    closing the earlier handle. Not thread-safe.
    """

    def __init__(self):
        self._handles: Dict[str, "FileHandle"] = {}

    def register(self, handle: "FileHandle") -> None:
        previous = self._handles.get(handle.path)
        if previous is not None and previous is not handle:
            logger.debug("handle_registration_replaced", path=handle.path)
        self._handles[handle.path] = handle

    def unregister(self, handle: "FileHandle") -> bool:
        """Remove ``handle`` if it is the current entry for its path"""
        if self._handles.get(handle.path) is handle:
            del self._handles[handle.path]
            return True
        return False

    def get(self, path: str) -> Optional["FileHandle"]:
        return self._handles.get(path)

    def paths(self) -> List[str]:
        return list(self._handles)

    def close_all(self) -> int:
        """Close every registered handle, returning how many were closed"""
        handles = list(self._handles.values())
        for handle in handles:
            handle.close()
        if handles:
            logger.debug("handles_closed", count=len(handles))
        return len(handles)

    def __contains__(self, path: object) -> bool:
        return path in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator["FileHandle"]:
        return iter(list(self._handles.values()))
