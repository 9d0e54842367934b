"""Write serialization for the order store.

Every mutation of Order and ReturnRequest records runs inside
``store_write_lock()`` so that "read current state, validate, write" is
indivisible for other callers in this process. The re-read, the check and
the commit of the repository write must all happen while the lock is held.
Reads outside the lock are allowed but must never be used as the expected
state of a write.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from ordering import config
from ordering.order.errors import StoreUnavailable

logger = structlog.get_logger(__name__)

# Re-entrant so that a store operation may call another one
_write_lock = threading.RLock()


@contextmanager
def store_write_lock(timeout: float | None = None) -> Iterator[None]:
    """Hold the store-wide write lock, or raise ``StoreUnavailable`` on timeout."""
    wait = config.STORE_LOCK_TIMEOUT if timeout is None else timeout
    if not _write_lock.acquire(timeout=wait):
        logger.warning("Order store write lock timed out", timeout=wait)
        raise StoreUnavailable(f"order store busy, gave up after {wait:.1f}s")
    try:
        yield
    finally:
        _write_lock.release()
