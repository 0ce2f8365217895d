import fcntl
from typing import Callable

from splicefs.core.exceptions import IOFailureError, NotLockedError
from splicefs.infrastructure.logging import get_logger

logger = get_logger(__name__)


class AdvisoryLock:
    """Re-entrant exclusive advisory lock on one open descriptor.

    A depth counter tracks nested ``acquire`` calls; the OS lock
    (``flock(LOCK_EX)``) is taken on the 0 -> 1 transition and released on
    1 -> 0. It only deters other processes that also use ``flock`` and it is
    single-owner: the counter itself is not synchronized.
    """

    def __init__(self, fileno: Callable[[], int], resource_id: str):
        self._fileno = fileno
        self.resource_id = resource_id
        self.depth = 0
        self.os_lock_held = False

    def acquire(self) -> int:
        if self.depth == 0:
            try:
                fcntl.flock(self._fileno(), fcntl.LOCK_EX)
            except OSError as e:
                raise IOFailureError(
                    f"Cannot lock '{self.resource_id}': {e}",
                    {"path": self.resource_id},
                ) from e
            self.os_lock_held = True
            logger.debug("lock_acquired", resource_id=self.resource_id)
        self.depth += 1
        return self.depth

    def release(self) -> int:
        if self.depth == 0:
            raise NotLockedError(
                f"File '{self.resource_id}' was not locked",
                {"path": self.resource_id},
            )
        self.depth -= 1
        if self.depth == 0:
            try:
                fcntl.flock(self._fileno(), fcntl.LOCK_UN)
            except OSError as e:
                raise IOFailureError(
                    f"Cannot unlock '{self.resource_id}': {e}",
                    {"path": self.resource_id},
                ) from e
            finally:
                self.os_lock_held = False
            logger.debug("lock_released", resource_id=self.resource_id)
        return self.depth

    def release_all(self) -> None:
        """Unlock until the depth reaches zero"""
        while self.depth:
            self.release()
