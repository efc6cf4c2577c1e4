"""SQLAlchemy-backed trip storage."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Engine, Text, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from backend.app.models.saved import SavedTrip
from backend.app.persistence.storage import decode_saved_trip


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class SavedTripRow(Base):
    """One persisted session document per storage key."""

    __tablename__ = "saved_trip"

    storage_key: Mapped[str] = mapped_column(Text, primary_key=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SQLTripStorage:
    """TripStorage implementation over any SQLAlchemy database."""

    backend = "sql"

    def __init__(self, session_factory: sessionmaker[Session], storage_key: str) -> None:
        self._session_factory = session_factory
        self._storage_key = storage_key

    @classmethod
    def from_url(cls, database_url: str, storage_key: str) -> "SQLTripStorage":
        """Create storage from a database URL, creating the table if needed."""
        engine = create_engine(database_url, pool_pre_ping=True, echo=False)
        Base.metadata.create_all(engine)
        return cls(create_session_factory(engine), storage_key)

    def load(self) -> SavedTrip | None:
        with self._session_factory() as session:
            row = session.get(SavedTripRow, self._storage_key)
            if row is None:
                return None
            payload = row.payload

        saved = decode_saved_trip(payload)
        if saved is None:
            self.clear()
        return saved

    def save(self, saved: SavedTrip) -> None:
        with self._session_factory() as session:
            session.merge(
                SavedTripRow(
                    storage_key=self._storage_key,
                    payload=saved.model_dump(mode="json"),
                    updated_at=datetime.now(timezone.utc),
                )
            )
            session.commit()

    def clear(self) -> None:
        with self._session_factory() as session:
            row = session.get(SavedTripRow, self._storage_key)
            if row is not None:
                session.delete(row)
                session.commit()


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create sessionmaker for creating database sessions.

    Args:
        engine: SQLAlchemy engine

    Returns:
        Sessionmaker bound to the engine
    """
    return sessionmaker(bind=engine, expire_on_commit=False)
