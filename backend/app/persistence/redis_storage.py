"""Redis-backed trip storage."""

import redis

from backend.app.models.saved import SavedTrip
from backend.app.persistence.storage import decode_saved_trip, encode_saved_trip


class RedisTripStorage:
    """TripStorage implementation using a single Redis string key."""

    backend = "redis"

    def __init__(self, redis_client: redis.Redis, storage_key: str) -> None:
        """Initialize storage.

        Args:
            redis_client: Redis client (decode_responses=True expected)
            storage_key: Key holding the encoded document
        """
        self._redis = redis_client
        self._storage_key = storage_key

    @classmethod
    def from_url(cls, redis_url: str, storage_key: str) -> "RedisTripStorage":
        client = redis.from_url(redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        return cls(client, storage_key)

    def load(self) -> SavedTrip | None:
        raw = self._redis.get(self._storage_key)
        if raw is None:
            return None

        saved = decode_saved_trip(raw)  # type: ignore[arg-type]
        if saved is None:
            self._redis.delete(self._storage_key)
        return saved

    def save(self, saved: SavedTrip) -> None:
        self._redis.set(self._storage_key, encode_saved_trip(saved))

    def clear(self) -> None:
        self._redis.delete(self._storage_key)
