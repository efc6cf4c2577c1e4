"""Derived itinerary views.

Every function here is pure: it reads a snapshot (plus filter/pagination
state) and returns a new value. Nothing is cached and nothing is mutated, so
the views can be recomputed on every render.
"""

from collections.abc import Sequence

from backend.app.models.common import ALL_CATEGORIES, Category, CategoryFilter, CostTier, ViewState
from backend.app.models.itinerary import Itinerary, Place
from backend.app.models.views import CostTierSlice, TripView

DEFAULT_DAY_THEME = "Explore"

# Chart label and colour per tier, in display order
COST_TIER_STYLES: dict[CostTier, tuple[str, str]] = {
    CostTier.budget: ("Budget ($)", "#4ade80"),
    CostTier.standard: ("Standard ($$)", "#facc15"),
    CostTier.luxury: ("Luxury ($$$)", "#f43f5e"),
}


def visible_pins_for_day(snapshot: Itinerary | None, day_num: int) -> list[Place]:
    """Places scheduled on a day, in the day's pin_ids order.

    The order comes from pin_ids, not from the place collection, so a
    reordered day renders in its edited order.
    """
    if snapshot is None:
        return []
    day = snapshot.get_day(day_num)
    if day is None:
        return []

    places = {place.id: place for place in snapshot.map_pins}
    visible: list[Place] = []
    for pin_id in day.pin_ids:
        place = places.get(pin_id)
        if place is not None and place.day_index == day_num:
            visible.append(place)
    return visible


def recommendation_pool(snapshot: Itinerary | None) -> list[Place]:
    """All unscheduled places, in place-collection order."""
    if snapshot is None:
        return []
    return [place for place in snapshot.map_pins if place.day_index == 0]


def filtered_recommendation_pool(
    snapshot: Itinerary | None, category_filter: CategoryFilter
) -> list[Place]:
    """Recommendation pool restricted to one category ("all" keeps everything)."""
    pool = recommendation_pool(snapshot)
    if category_filter == ALL_CATEGORIES:
        return pool
    return [place for place in pool if place.category_icon == category_filter]


def displayed_recommendation_window(filtered_pool: Sequence[Place], limit: int) -> list[Place]:
    """First `limit` entries of the filtered pool."""
    return list(filtered_pool[: max(0, limit)])


def has_more_recommendations(filtered_pool: Sequence[Place], limit: int) -> bool:
    return len(filtered_pool) > limit


def available_categories(snapshot: Itinerary | None) -> list[Category]:
    """Distinct categories in the recommendation pool, first-seen order."""
    categories: list[Category] = []
    for place in recommendation_pool(snapshot):
        if place.category_icon not in categories:
            categories.append(place.category_icon)
    return categories


def active_day_theme(snapshot: Itinerary | None, day_num: int) -> str:
    if snapshot is None:
        return DEFAULT_DAY_THEME
    day = snapshot.get_day(day_num)
    if day is None or not day.theme:
        return DEFAULT_DAY_THEME
    return day.theme


def cost_tier_distribution(snapshot: Itinerary | None) -> list[CostTierSlice]:
    """Count places per cost tier over the whole trip (scheduled and pooled).

    Tiers with no places are omitted so the chart has no empty slices.
    """
    if snapshot is None:
        return []

    counts = {tier: 0 for tier in COST_TIER_STYLES}
    for place in snapshot.map_pins:
        counts[place.cost_tier] += 1

    slices: list[CostTierSlice] = []
    for tier, (name, color) in COST_TIER_STYLES.items():
        if counts[tier] > 0:
            slices.append(CostTierSlice(tier=tier, name=name, value=counts[tier], color=color))
    return slices


def find_place(snapshot: Itinerary | None, place_id: str | None) -> Place | None:
    if snapshot is None or place_id is None:
        return None
    return snapshot.get_place(place_id)


def first_day_num(snapshot: Itinerary | None, default: int = 1) -> int:
    """Day number of the first day in the daily flow."""
    if snapshot is None or not snapshot.daily_flow:
        return default
    return snapshot.daily_flow[0].day_num


def first_scheduled_place_id(snapshot: Itinerary | None) -> str | None:
    """First place id of the first day, or None if that day is empty."""
    if snapshot is None or not snapshot.daily_flow:
        return None
    pin_ids = snapshot.daily_flow[0].pin_ids
    return pin_ids[0] if pin_ids else None


def build_trip_view(
    snapshot: Itinerary | None,
    *,
    view_state: ViewState,
    active_day: int,
    category_filter: CategoryFilter,
    recommendation_limit: int,
    selected_place_id: str | None = None,
    dragged_place_id: str | None = None,
    drag_over_day: int | None = None,
    error: str | None = None,
    is_generating: bool = False,
) -> TripView:
    """Bundle every derived value for one render pass."""
    filtered = filtered_recommendation_pool(snapshot, category_filter)
    return TripView(
        view_state=view_state,
        itinerary=snapshot,
        error=error,
        is_generating=is_generating,
        selected_place_id=selected_place_id,
        active_day=active_day,
        days=snapshot.daily_flow if snapshot is not None else (),
        active_day_theme=active_day_theme(snapshot, active_day),
        visible_pins=tuple(visible_pins_for_day(snapshot, active_day)),
        dragged_place_id=dragged_place_id,
        drag_over_day=drag_over_day,
        category_filter=category_filter,
        recommendation_limit=recommendation_limit,
        all_recommended_pins=tuple(recommendation_pool(snapshot)),
        filtered_recommended_pins=tuple(filtered),
        recommended_pins=tuple(displayed_recommendation_window(filtered, recommendation_limit)),
        available_categories=tuple(available_categories(snapshot)),
        has_more_recommendations=has_more_recommendations(filtered, recommendation_limit),
        cost_distribution=tuple(cost_tier_distribution(snapshot)),
    )
