"""Trip storage interface, in-memory implementation and factory."""

import json
import logging
from typing import Any, Protocol

from pydantic import ValidationError

from backend.app.config import Settings, get_settings
from backend.app.models.itinerary import check_integrity
from backend.app.models.saved import SavedTrip

logger = logging.getLogger(__name__)


class TripStorage(Protocol):
    """Durable storage for the persisted session document."""

    backend: str

    def load(self) -> SavedTrip | None:
        """Load the saved trip.

        Returns:
            The saved document, or None if nothing valid is stored. A stored
            document that fails validation is discarded, never repaired.
        """
        ...

    def save(self, saved: SavedTrip) -> None:
        """Overwrite the saved trip."""
        ...

    def clear(self) -> None:
        """Remove the saved trip."""
        ...


def encode_saved_trip(saved: SavedTrip) -> str:
    return saved.model_dump_json()


def decode_saved_trip(raw: str | bytes | dict[str, Any] | None) -> SavedTrip | None:
    """Parse and check a stored document.

    Returns None when the payload is missing, is not valid JSON, does not
    match the schema, or holds an itinerary that breaks the place/day
    invariant.
    """
    if raw is None:
        return None

    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
        saved = SavedTrip.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(
            "Discarding malformed saved trip",
            extra={"structured": {"reason": "schema", "error": str(e)[:200]}},
        )
        return None

    if saved.itinerary is not None:
        problems = check_integrity(saved.itinerary)
        if problems:
            logger.warning(
                "Discarding inconsistent saved trip",
                extra={"structured": {"reason": "integrity", "problems": problems[:10]}},
            )
            return None

    return saved


class InMemoryTripStorage:
    """In-memory implementation of TripStorage.

    Keeps the encoded document rather than the model so that load() goes
    through the same validation path as the durable backends.
    """

    backend = "memory"

    def __init__(self, raw: str | None = None) -> None:
        self._raw = raw

    def load(self) -> SavedTrip | None:
        saved = decode_saved_trip(self._raw)
        if saved is None:
            self._raw = None
        return saved

    def save(self, saved: SavedTrip) -> None:
        self._raw = encode_saved_trip(saved)

    def clear(self) -> None:
        self._raw = None

    @property
    def raw(self) -> str | None:
        return self._raw


def create_trip_storage(settings: Settings | None = None) -> TripStorage:
    """Pick a storage backend from configuration.

    DATABASE_URL wins over REDIS_URL; with neither set the trip only lives
    for the current process.
    """
    settings = settings or get_settings()

    if settings.database_url:
        from backend.app.persistence.sql_storage import SQLTripStorage

        logger.info("Using SQL trip storage")
        return SQLTripStorage.from_url(settings.database_url, storage_key=settings.storage_key)

    if settings.redis_url:
        from backend.app.persistence.redis_storage import RedisTripStorage

        logger.info("Using Redis trip storage")
        return RedisTripStorage.from_url(settings.redis_url, storage_key=settings.storage_key)

    logger.warning("No DATABASE_URL or REDIS_URL configured, trips will not survive a restart")
    return InMemoryTripStorage()
