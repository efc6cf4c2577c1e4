"""Fire-and-forget write-through of the session document."""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait

from backend.app.models.saved import SavedTrip
from backend.app.persistence.storage import TripStorage

logger = logging.getLogger(__name__)


class PersistenceWriter:
    """Hands saves to a single background worker.

    One worker keeps writes in submission order, so the last document
    submitted is the one left in storage. Failures are logged and never
    propagate back to the caller.
    """

    def __init__(self, storage: TripStorage) -> None:
        self._storage = storage
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="trip-persist")
        self._pending: set[Future[None]] = set()
        self._lock = threading.Lock()

    @property
    def storage(self) -> TripStorage:
        return self._storage

    def submit(self, saved: SavedTrip) -> None:
        self._schedule(lambda: self._storage.save(saved))

    def submit_clear(self) -> None:
        self._schedule(self._storage.clear)

    def flush(self, timeout: float | None = None) -> None:
        """Block until every submitted write has finished."""
        with self._lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _schedule(self, write: Callable[[], None]) -> None:
        future = self._executor.submit(write)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._on_done)

    def _on_done(self, future: Future[None]) -> None:
        with self._lock:
            self._pending.discard(future)
        error = future.exception()
        if error is not None:
            logger.error(
                f"Trip persistence failed: {error}",
                extra={"structured": {"backend": self._storage.backend, "error": type(error).__name__}},
            )
