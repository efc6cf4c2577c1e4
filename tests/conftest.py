"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable, Generator
from typing import Any

import pytest

from backend.app.config import get_settings
from backend.app.models.common import Category, Coordinates, CostTier, TimeSlot
from backend.app.models.itinerary import Day, Itinerary, Place, TripMeta
from backend.app.models.preferences import TripPreferences


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Every test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_place() -> Callable[..., Place]:
    """Factory for places with sensible defaults.

    Usage:
        place = make_place("p1", day_index=1, category_icon=Category.food)
    """

    def _make(place_id: str, day_index: int = 0, **overrides: Any) -> Place:
        fields: dict[str, Any] = {
            "id": place_id,
            "day_index": day_index,
            "name": f"Place {place_id}",
            "coordinates": Coordinates(lat=35.0, lng=135.7),
            "category_icon": Category.sights,
            "short_description": "A place worth seeing",
            "image_search_query": f"{place_id} photo",
            "time_slot": TimeSlot.morning,
            "logistics_note": "10 min walk",
            "cost_tier": CostTier.budget,
            "rating": 4.4,
        }
        fields.update(overrides)
        return Place(**fields)

    return _make


@pytest.fixture
def sample_itinerary(make_place: Callable[..., Place]) -> Itinerary:
    """Two-day trip: day 1 = [p1, p2], day 2 = [p3], pool = [r1, r2, r3]."""
    return Itinerary(
        trip_meta=TripMeta(title="2 Days in Kyoto", duration="2 days", vibe_tags=("Temples", "Food")),
        map_pins=(
            make_place("p1", 1, category_icon=Category.food, cost_tier=CostTier.budget),
            make_place("p2", 1, category_icon=Category.sights, cost_tier=CostTier.standard),
            make_place("p3", 2, category_icon=Category.nature, cost_tier=CostTier.budget),
            make_place("r1", 0, category_icon=Category.food, cost_tier=CostTier.budget),
            make_place("r2", 0, category_icon=Category.sights, cost_tier=CostTier.standard),
            make_place("r3", 0, category_icon=Category.food, cost_tier=CostTier.luxury),
        ),
        daily_flow=(
            Day(day_num=1, theme="Old Town", pin_ids=("p1", "p2")),
            Day(day_num=2, theme="", pin_ids=("p3",)),
        ),
    )


@pytest.fixture
def sample_preferences() -> TripPreferences:
    return TripPreferences(destination="Kyoto", duration=2, interests="temples, food")
