"""Read-only view models handed to presentation."""

from pydantic import BaseModel, ConfigDict

from backend.app.models.common import Category, CategoryFilter, CostTier, ViewState
from backend.app.models.itinerary import Day, Itinerary, Place


class CostTierSlice(BaseModel):
    """One slice of the trip-balance chart."""

    model_config = ConfigDict(frozen=True)

    tier: CostTier
    name: str
    value: int
    color: str


class TripView(BaseModel):
    """Everything a single render pass needs, derived from one snapshot."""

    model_config = ConfigDict(frozen=True)

    view_state: ViewState
    itinerary: Itinerary | None
    error: str | None
    is_generating: bool

    selected_place_id: str | None
    active_day: int
    days: tuple[Day, ...]
    active_day_theme: str
    visible_pins: tuple[Place, ...]

    dragged_place_id: str | None
    drag_over_day: int | None

    category_filter: CategoryFilter
    recommendation_limit: int
    all_recommended_pins: tuple[Place, ...]
    filtered_recommended_pins: tuple[Place, ...]
    recommended_pins: tuple[Place, ...]
    available_categories: tuple[Category, ...]
    has_more_recommendations: bool

    cost_distribution: tuple[CostTierSlice, ...]
