"""Persisted session document."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from backend.app.models.itinerary import Itinerary


class SavedTrip(BaseModel):
    """What survives a page reload.

    Filter and pagination state are deliberately absent: they always start
    from their defaults.
    """

    itinerary: Itinerary | None = None
    active_day: int = 1
    selected_place_id: str | None = None
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
