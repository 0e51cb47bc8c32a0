import threading
from contextlib import contextmanager

from services.errors import LockTimeoutError


class StoreLock:
    """Mutual-exclusion guard for read-modify-write sequences on one store"""

    def __init__(self):
        self._lock = threading.Lock()

    @contextmanager
    def hold(self, timeout: float):
        # bounded wait, never retried
        if not self._lock.acquire(timeout=timeout):
            raise LockTimeoutError(timeout)
        try:
            yield
        finally:
            self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()
