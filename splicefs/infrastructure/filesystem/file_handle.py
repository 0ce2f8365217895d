"""Stateful random-access file handle with byte splicing"""
import os
from typing import Any, Dict, Optional, Union

from splicefs.core.config import Settings, get_settings
from splicefs.core.exceptions import (
    ClosedError,
    EmptyWriteError,
    InvalidTargetError,
    IOFailureError,
    NotFoundError,
    NotReadableError,
    NotWritableError,
    OutOfRangeError,
)
from splicefs.infrastructure.concurrency import AdvisoryLock
from splicefs.infrastructure.filesystem.paths import (
    PathLike,
    create_directory_chain,
    describe_non_regular,
)
from splicefs.infrastructure.filesystem.registry import HandleRegistry
from splicefs.infrastructure.logging import get_logger

logger = get_logger(__name__)

Data = Union[bytes, bytearray, memoryview, str]

APPEND = "append"


def _as_bytes(data: Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class FileHandle:
    """An open file with a cached size and its own position cursor.

    ``0 <= position <= size`` holds between calls. Reads and writes go to
    the OS at ``position``; ``size`` is only refreshed by this handle, so
    changes made by other writers are not observed.
    """

    def __init__(
        self,
        path: PathLike,
        mode: Optional[str] = "r",
        registry: Optional[HandleRegistry] = None,
        settings: Optional[Settings] = None,
    ):
        self.path = os.fspath(path)
        self.mode = mode or "r"
        self.registry = registry
        self.settings = settings or get_settings()

        letters = self.mode.lower()
        unknown = set(letters) - set("rwa")
        if unknown:
            raise ValueError(f"Invalid mode '{self.mode}': unknown letters {''.join(sorted(unknown))}")
        self.appendable = "a" in letters
        self.writable = "w" in letters or self.appendable
        self.readable = "r" in letters

        self._file = None
        self._position = 0
        self._size = 0
        self.is_open = False
        self._lock = AdvisoryLock(self.fileno, self.path)

    @classmethod
    def open(
        cls,
        path: PathLike,
        mode: Optional[str] = "r",
        registry: Optional[HandleRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> "FileHandle":
        """
        Open ``path`` in ``mode`` (letters r, w, a in any case or combination)

        Raises:
            NotFoundError: path is missing and mode has neither w nor a
            InvalidTargetError: path is a directory, symlink or special file
            IOFailureError: the OS refused to open the file
        """
        handle = cls(path, mode, registry=registry, settings=settings)
        handle._open()
        return handle

    def _open(self) -> None:
        path = self.path
        flags = getattr(os, "O_BINARY", 0)
        if self.writable:
            flags |= os.O_RDWR if self.readable else os.O_WRONLY
        else:
            flags |= os.O_RDONLY

        if not os.path.lexists(path):
            if not self.writable:
                raise NotFoundError(
                    f"File '{path}' does not exist and mode '{self.mode}' does not allow creation",
                    {"path": path, "mode": self.mode},
                )
            self.makepath()
            flags |= os.O_CREAT
        else:
            kind = describe_non_regular(path)
            if kind:
                raise InvalidTargetError(
                    f"Cannot overwrite {kind} '{path}' with a file",
                    {"path": path, "kind": kind},
                )

        try:
            fd = os.open(path, flags, 0o666)
        except OSError as e:
            raise IOFailureError(
                f"Cannot open '{path}' in mode '{self.mode}': {e}",
                {"path": path, "mode": self.mode},
            ) from e

        file_mode = "r+b" if self.readable and self.writable else ("wb" if self.writable else "rb")
        try:
            self._file = os.fdopen(fd, file_mode, buffering=0)
            self._size = os.fstat(fd).st_size
        except OSError as e:
            os.close(fd)
            raise IOFailureError(f"Cannot open '{path}': {e}", {"path": path}) from e

        self._position = self._size if self.appendable else 0
        self.is_open = True
        if self.registry is not None:
            self.registry.register(self)

        logger.debug("handle_opened", path=path, mode=self.mode, size=self._size)

    def close(self) -> None:
        """Unlock, flush and close; does nothing when already closed"""
        if not self.is_open:
            return
        try:
            self._lock.release_all()
            self._file.flush()
            self._file.close()
        except OSError as e:
            raise IOFailureError(f"Error closing '{self.path}': {e}", {"path": self.path}) from e
        finally:
            self.is_open = False
            if self.registry is not None:
                self.registry.unregister(self)
        logger.debug("handle_closed", path=self.path, size=self._size)

    def __enter__(self) -> "FileHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<FileHandle {self.path!r} mode={self.mode!r} {state} pos={self._position} size={self._size}>"

    @property
    def position(self) -> int:
        return self._position

    @property
    def size(self) -> int:
        return self._size

    def fileno(self) -> int:
        self._ensure_open("Fileno")
        return self._file.fileno()

    def tell(self) -> int:
        return self._position

    def filesize(self) -> int:
        return self._size

    def seek(self, position: int) -> int:
        """Move the cursor; position must lie in [0, size]"""
        self._ensure_open("Seek")
        if position < 0:
            raise OutOfRangeError(
                f"Trying to seek before beginning of file '{self.path}'",
                self._details(seek=position),
            )
        if position > self._size:
            raise OutOfRangeError(
                f"Seek beyond end of file '{self.path}'",
                self._details(seek=position),
            )
        self._os_seek(position)
        self._position = position
        return position

    def read(self, length: int, stop_at_end: bool = False) -> bytes:
        """
        Read ``length`` bytes at the cursor and advance it

        Args:
            length: Number of bytes to read
            stop_at_end: Clamp to the bytes left instead of failing

        Raises:
            OutOfRangeError: The read would pass the end of the file
        """
        if not length:
            return b""
        self._ensure_open("Read")
        self._ensure_readable("Read")
        if length < 0:
            raise OutOfRangeError(
                f"Negative read length on file '{self.path}'",
                self._details(length=length),
            )

        if self._position + length > self._size:
            if self._position > self._size or not stop_at_end:
                raise OutOfRangeError(
                    f"Trying to read beyond the end of file '{self.path}', "
                    f"position={self._position} len={length} size={self._size}",
                    self._details(length=length),
                )
            length = self._size - self._position

        data = self._read_at(self._position, length)
        self._position += length
        return data

    def write(self, data: Optional[Data], reject_none: bool = False) -> int:
        """Overwrite bytes at the cursor, growing the file when writing past its end"""
        if data is None:
            if reject_none:
                raise EmptyWriteError(
                    f"Trying to write empty data to '{self.path}', while prohibited",
                    {"path": self.path},
                )
            return 0
        self._ensure_open("Write")
        self._ensure_writable("Write")

        payload = _as_bytes(data)
        self._write_at(self._position, payload)
        self._position += len(payload)
        return len(payload)

    def append_data(self, data: Optional[Data]) -> int:
        """Write ``data`` at the end of the file"""
        self._ensure_open("Append")
        self._ensure_writable("Append")
        self.seek(self._size)
        return self.write(data)

    def truncate(self, length: int) -> int:
        """Shrink the file to ``length`` bytes; no-op when it is not larger"""
        self._ensure_open("Truncate")
        if length < 0:
            raise OutOfRangeError(
                f"Negative truncate length on file '{self.path}'",
                self._details(length=length),
            )
        if self._size <= length:
            return self._size
        self._ensure_writable("Truncate")

        try:
            self._file.truncate(length)
        except OSError as e:
            raise IOFailureError(
                f"Error truncating '{self.path}' to {length}: {e}",
                self._details(length=length),
            ) from e

        self._size = length
        if self._position > length:
            self._position = length
            self._os_seek(length)
        return length

    def insert(
        self,
        position: Union[int, str],
        data: Optional[Data],
        chunk_size: Optional[int] = None,
    ) -> int:
        """
        Splice ``data`` into the file at ``position``, shifting the rest along

        Args:
            position: Offset in [0, size], or "append" for the end of the file
            data: Bytes to insert
            chunk_size: Shift the tail in pieces of this size. Without it,
                tails above ``splice_buffer_limit`` are shifted in pieces of
                ``splice_chunk_size`` and smaller tails in one piece.

        Returns:
            The new cursor, right after the inserted bytes
        """
        self._ensure_open("Insert")
        self._ensure_writable("Insert")
        if position == APPEND:
            position = self._size
        if not isinstance(position, int) or position < 0 or position > self._size:
            raise OutOfRangeError(
                f"Insert position outside of file '{self.path}'",
                self._details(insert=position),
            )

        payload = _as_bytes(data) if data is not None else b""
        if not payload:
            return self.seek(position)

        tail_length = self._size - position
        if tail_length and not self.readable:
            raise NotReadableError(
                f"Insert into '{self.path}' needs read access to move {tail_length} bytes",
                self._details(insert=position),
            )

        chunk = self._splice_chunk(tail_length, chunk_size)
        if chunk is None:
            tail = self._read_at(position, tail_length)
            self._write_at(position, payload)
            self._write_at(position + len(payload), tail)
        else:
            # Walk backwards so no byte is overwritten before it is moved
            shift = len(payload)
            end = self._size
            while end > position:
                start = max(position, end - chunk)
                self._write_at(start + shift, self._read_at(start, end - start))
                end = start
            self._write_at(position, payload)

        new_position = position + len(payload)
        self.seek(new_position)
        logger.debug(
            "bytes_inserted",
            path=self.path,
            position=position,
            length=len(payload),
            moved=tail_length,
            chunked=chunk is not None,
        )
        return new_position

    def extract(self, length: int, chunk_size: Optional[int] = None) -> bytes:
        """
        Remove ``length`` bytes at the cursor and return them

        The following bytes move back to close the gap and the file shrinks;
        the cursor stays where it was. When fewer than ``length`` bytes are
        left, everything up to the end is returned and the file is cut at
        the cursor.
        """
        self._ensure_open("Extract")
        if length < 0:
            raise OutOfRangeError(
                f"Negative extract length on file '{self.path}'",
                self._details(length=length),
            )
        if not length:
            return b""
        self._ensure_readable("Extract")
        self._ensure_writable("Extract")

        start = self._position
        end = start + length
        old_size = self._size

        if end > old_size:
            data = self._read_at(start, old_size - start)
            self.truncate(start)
            self._os_seek(start)
            logger.debug("bytes_extracted", path=self.path, position=start, length=len(data))
            return data

        data = self._read_at(start, length)
        tail_length = old_size - end
        chunk = self._splice_chunk(tail_length, chunk_size)
        if chunk is None:
            self._write_at(start, self._read_at(end, tail_length))
        else:
            read_pos, write_pos = end, start
            while read_pos < old_size:
                n = min(chunk, old_size - read_pos)
                self._write_at(write_pos, self._read_at(read_pos, n))
                read_pos += n
                write_pos += n

        self.truncate(old_size - length)
        self.seek(start)
        logger.debug(
            "bytes_extracted",
            path=self.path,
            position=start,
            length=length,
            moved=tail_length,
            chunked=chunk is not None,
        )
        return data

    def lock(self) -> int:
        """Take (or deepen) the exclusive advisory lock; returns the new depth"""
        self._ensure_open("Lock")
        return self._lock.acquire()

    def unlock(self) -> int:
        """Drop one lock level, releasing the OS lock at zero"""
        self._ensure_open("Unlock")
        return self._lock.release()

    def locked(self) -> int:
        return self._lock.depth

    def makepath(self) -> list:
        """Create the missing parent directories of this handle's path"""
        created = create_directory_chain(
            self.path, self.settings.default_dir_mode, include_last=False
        )
        if created:
            logger.debug("directories_created", path=self.path, created=created)
        return created

    def _splice_chunk(self, tail_length: int, chunk_size: Optional[int]) -> Optional[int]:
        if chunk_size is not None:
            if chunk_size <= 0:
                raise ValueError("chunk_size must be positive")
            return chunk_size
        if tail_length > self.settings.splice_buffer_limit:
            return self.settings.splice_chunk_size
        return None

    def _details(self, **extra: Any) -> Dict[str, Any]:
        details = {"path": self.path, "position": self._position, "size": self._size}
        details.update(extra)
        return details

    def _ensure_open(self, operation: str) -> None:
        if not self.is_open:
            raise ClosedError(
                f"{operation}: File '{self.path}' is closed", {"path": self.path}
            )

    def _ensure_readable(self, operation: str) -> None:
        if not self.readable:
            raise NotReadableError(
                f"{operation}: File '{self.path}' is read-protected",
                {"path": self.path, "mode": self.mode},
            )

    def _ensure_writable(self, operation: str) -> None:
        if not self.writable:
            raise NotWritableError(
                f"{operation}: File '{self.path}' is write-protected",
                {"path": self.path, "mode": self.mode},
            )

    def _os_seek(self, position: int) -> None:
        try:
            self._file.seek(position)
        except OSError as e:
            raise IOFailureError(
                f"Error seeking in file '{self.path}' pos={position}: {e}",
                self._details(seek=position),
            ) from e

    def _read_at(self, position: int, length: int) -> bytes:
        """Read exactly ``length`` bytes at ``position`` without moving the cursor"""
        if not length:
            return b""
        self._os_seek(position)
        chunks = []
        remaining = length
        try:
            while remaining:
                chunk = self._file.read(remaining)
                if not chunk:
                    raise IOFailureError(
                        f"Unexpected end of file '{self.path}' at {position + length - remaining}",
                        self._details(length=length),
                    )
                chunks.append(chunk)
                remaining -= len(chunk)
        except OSError as e:
            raise IOFailureError(
                f"Error reading from file '{self.path}', len={length}: {e}",
                self._details(length=length),
            ) from e
        return b"".join(chunks)

    def _write_at(self, position: int, data: bytes) -> None:
        """Write all of ``data`` at ``position``, extending the cached size"""
        if not data:
            return
        self._os_seek(position)
        view = memoryview(data)
        try:
            while view:
                written = self._file.write(view)
                view = view[written:]
        except OSError as e:
            raise IOFailureError(
                f"Error writing to file '{self.path}', len={len(data)}: {e}",
                self._details(length=len(data)),
            ) from e
        end = position + len(data)
        if end > self._size:
            self._size = end


def open_file(
    path: PathLike,
    mode: Optional[str] = "r",
    registry: Optional[HandleRegistry] = None,
    settings: Optional[Settings] = None,
) -> FileHandle:
    """Open ``path`` and return its handle; see :meth:`FileHandle.open`"""
    return FileHandle.open(path, mode, registry=registry, settings=settings)
