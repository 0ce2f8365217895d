"""Error kinds raised by splicefs"""

from typing import Any, Dict, Optional


class SplicefsError(Exception):
    """Base exception for all splicefs errors"""

    code = "SPFS-000"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(SplicefsError):
    """Target path does not exist and the mode does not allow creating it"""

    code = "SPFS-404"


class InvalidTargetError(SplicefsError):
    """Target exists but is not a regular file"""

    code = "SPFS-415"


class ClosedError(SplicefsError):
    """Operation on a handle that has been closed"""

    code = "SPFS-410"


class NotReadableError(SplicefsError):
    """Handle was not opened for reading"""

    code = "SPFS-403R"


class NotWritableError(SplicefsError):
    """Handle was not opened for writing or appending"""

    code = "SPFS-403W"


class OutOfRangeError(SplicefsError):
    """Seek, read or splice outside of [0, size]"""

    code = "SPFS-416"


class EmptyWriteError(SplicefsError):
    """Writing None while that is prohibited"""

    code = "SPFS-400"


class NotLockedError(SplicefsError):
    """Unlock on a handle whose lock depth is already zero"""

    code = "SPFS-409"


class InvalidIndexError(SplicefsError):
    """Listing index outside of 1..numfiles"""

    code = "SPFS-422"


class DirectoryOpenError(SplicefsError):
    """A directory in a traversal could not be opened"""

    code = "SPFS-423"


class IOFailureError(SplicefsError):
    """An underlying OS call failed"""

    code = "SPFS-500"


ERROR_CODES = {
    cls.code: cls.__doc__
    for cls in (
        NotFoundError,
        InvalidTargetError,
        ClosedError,
        NotReadableError,
        NotWritableError,
        OutOfRangeError,
        EmptyWriteError,
        NotLockedError,
        InvalidIndexError,
        DirectoryOpenError,
        IOFailureError,
    )
}
