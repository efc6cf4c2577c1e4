"""Tests for pure derived views: day lists, pool, filters, pagination, cost chart."""

import random
from collections.abc import Callable

from backend.app.derivation import views
from backend.app.models.common import ALL_CATEGORIES, Category, CostTier, ViewState
from backend.app.models.itinerary import Day, Itinerary, Place, TripMeta


def test_visible_pins_follow_pin_ids_order(make_place: Callable[..., Place]) -> None:
    """Regression: day order comes from pin_ids, not the place collection."""
    itinerary = Itinerary(
        trip_meta=TripMeta(title="t"),
        map_pins=(make_place("a", 1), make_place("b", 1), make_place("c", 1)),
        daily_flow=(Day(day_num=1, pin_ids=("c", "a", "b")),),
    )

    assert [p.id for p in views.visible_pins_for_day(itinerary, 1)] == ["c", "a", "b"]


def test_visible_pins_for_unknown_day_or_no_trip(sample_itinerary: Itinerary) -> None:
    assert views.visible_pins_for_day(sample_itinerary, 9) == []
    assert views.visible_pins_for_day(None, 1) == []


def test_recommendation_pool_in_collection_order(sample_itinerary: Itinerary) -> None:
    assert [p.id for p in views.recommendation_pool(sample_itinerary)] == ["r1", "r2", "r3"]


def test_filtered_pool(sample_itinerary: Itinerary) -> None:
    food = views.filtered_recommendation_pool(sample_itinerary, Category.food)
    assert [p.id for p in food] == ["r1", "r3"]

    everything = views.filtered_recommendation_pool(sample_itinerary, ALL_CATEGORIES)
    assert len(everything) == 3

    assert views.filtered_recommendation_pool(sample_itinerary, Category.shopping) == []


def test_filtered_pool_pagination(make_place: Callable[..., Place]) -> None:
    """Test a 12-place food pool pages as 8 then 12."""
    itinerary = Itinerary(
        trip_meta=TripMeta(title="t"),
        map_pins=tuple(make_place(f"f{i}", 0, category_icon=Category.food) for i in range(12)),
    )
    pool = views.filtered_recommendation_pool(itinerary, Category.food)

    window = views.displayed_recommendation_window(pool, 8)
    assert [p.id for p in window] == [f"f{i}" for i in range(8)]
    assert views.has_more_recommendations(pool, 8)

    window = views.displayed_recommendation_window(pool, 16)
    assert len(window) == 12
    assert not views.has_more_recommendations(pool, 16)


def test_available_categories_first_seen_order(sample_itinerary: Itinerary) -> None:
    assert views.available_categories(sample_itinerary) == [Category.food, Category.sights]
    assert views.available_categories(None) == []


def test_active_day_theme(sample_itinerary: Itinerary) -> None:
    assert views.active_day_theme(sample_itinerary, 1) == "Old Town"
    # Blank theme and missing day both fall back
    assert views.active_day_theme(sample_itinerary, 2) == views.DEFAULT_DAY_THEME
    assert views.active_day_theme(sample_itinerary, 5) == "Explore"
    assert views.active_day_theme(None, 1) == "Explore"


def test_cost_distribution_counts_every_place(sample_itinerary: Itinerary) -> None:
    slices = views.cost_tier_distribution(sample_itinerary)

    assert [(s.tier, s.value) for s in slices] == [
        (CostTier.budget, 3),
        (CostTier.standard, 2),
        (CostTier.luxury, 1),
    ]
    assert slices[0].name == "Budget ($)"
    assert slices[0].color == "#4ade80"


def test_cost_distribution_omits_empty_tiers(make_place: Callable[..., Place]) -> None:
    itinerary = Itinerary(
        trip_meta=TripMeta(title="t"),
        map_pins=(make_place("a", 0, cost_tier=CostTier.luxury),),
    )
    slices = views.cost_tier_distribution(itinerary)
    assert [s.name for s in slices] == ["Luxury ($$$)"]
    assert views.cost_tier_distribution(None) == []


def test_cost_distribution_completeness_property(make_place: Callable[..., Place]) -> None:
    """Property: slice counts sum to the number of places and none is zero."""
    random.seed(7)
    tiers = list(CostTier)
    for size in range(0, 30, 3):
        itinerary = Itinerary(
            trip_meta=TripMeta(title="t"),
            map_pins=tuple(make_place(f"x{i}", 0, cost_tier=random.choice(tiers)) for i in range(size)),
        )
        slices = views.cost_tier_distribution(itinerary)
        assert sum(s.value for s in slices) == size
        assert all(s.value > 0 for s in slices)


def test_first_day_and_first_place(sample_itinerary: Itinerary) -> None:
    assert views.first_day_num(sample_itinerary) == 1
    assert views.first_day_num(None, default=3) == 3
    assert views.first_scheduled_place_id(sample_itinerary) == "p1"


def test_first_place_is_none_when_first_day_empty(make_place: Callable[..., Place]) -> None:
    itinerary = Itinerary(
        trip_meta=TripMeta(title="t"),
        map_pins=(make_place("a", 2),),
        daily_flow=(Day(day_num=1), Day(day_num=2, pin_ids=("a",))),
    )
    assert views.first_scheduled_place_id(itinerary) is None


def test_build_trip_view_bundles_derivations(sample_itinerary: Itinerary) -> None:
    view = views.build_trip_view(
        sample_itinerary,
        view_state=ViewState.result,
        active_day=1,
        category_filter=Category.food,
        recommendation_limit=1,
        selected_place_id="p2",
    )

    assert [p.id for p in view.visible_pins] == ["p1", "p2"]
    assert view.active_day_theme == "Old Town"
    assert [p.id for p in view.all_recommended_pins] == ["r1", "r2", "r3"]
    assert [p.id for p in view.filtered_recommended_pins] == ["r1", "r3"]
    assert [p.id for p in view.recommended_pins] == ["r1"]
    assert view.has_more_recommendations
    assert view.selected_place_id == "p2"
    assert len(view.days) == 2


def test_build_trip_view_without_itinerary() -> None:
    view = views.build_trip_view(
        None,
        view_state=ViewState.landing,
        active_day=1,
        category_filter=ALL_CATEGORIES,
        recommendation_limit=8,
    )
    assert view.itinerary is None
    assert view.visible_pins == ()
    assert view.cost_distribution == ()
    assert not view.has_more_recommendations
