"""Models package - re-exports for convenience."""

from backend.app.models.common import (
    ALL_CATEGORIES,
    Category,
    CategoryFilter,
    Coordinates,
    CostTier,
    PartySize,
    TimeSlot,
    ViewState,
)
from backend.app.models.itinerary import (
    MAX_VIBE_TAGS,
    Day,
    EstimatedCost,
    Itinerary,
    Place,
    TripMeta,
    check_integrity,
)
from backend.app.models.preferences import TripPreferences
from backend.app.models.saved import SavedTrip
from backend.app.models.views import CostTierSlice, TripView

__all__ = [
    # Common
    "ALL_CATEGORIES",
    "Category",
    "CategoryFilter",
    "Coordinates",
    "CostTier",
    "PartySize",
    "TimeSlot",
    "ViewState",
    # Itinerary
    "MAX_VIBE_TAGS",
    "Day",
    "EstimatedCost",
    "Itinerary",
    "Place",
    "TripMeta",
    "check_integrity",
    # Preferences
    "TripPreferences",
    # Persistence
    "SavedTrip",
    # Views
    "CostTierSlice",
    "TripView",
]
